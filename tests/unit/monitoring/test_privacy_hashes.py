"""Tests for name hashing and field trial ids."""

import base64

from metricslog.monitoring.metrics.field_trials import (
    FieldTrialSnapshot,
    NameGroupId,
    StaticFieldTrialRegistry,
    hash_field_trial_name,
)
from metricslog.monitoring.metrics.hashing import hash_name


def test_hash_of_empty_name_matches_md5_prefix():
    # MD5("") = d41d8cd98f00b204...
    assert hash_name("") == "1B2M2Y8AsgQ="
    assert base64.b64decode(hash_name("")) == bytes.fromhex("d41d8cd98f00b204")


def test_hash_is_case_sensitive():
    assert hash_name("Shockwave Flash") != hash_name("Shockwave flash")


def test_field_trial_id_is_little_endian_sha1_prefix():
    # SHA-1("") = da39a3ee...
    assert hash_field_trial_name("") == 0xEEA339DA


def test_snapshot_preserves_registry_order():
    registry = StaticFieldTrialRegistry([("Alpha", "On")])
    registry.add("Beta", "Off")

    snapshot = FieldTrialSnapshot.capture(registry)

    assert len(snapshot) == 2
    assert list(snapshot) == [
        NameGroupId(hash_field_trial_name("Alpha"), hash_field_trial_name("On")),
        NameGroupId(hash_field_trial_name("Beta"), hash_field_trial_name("Off")),
    ]


def test_snapshot_is_not_affected_by_later_registration():
    registry = StaticFieldTrialRegistry([("Alpha", "On")])
    snapshot = FieldTrialSnapshot.capture(registry)

    registry.add("Beta", "Off")

    assert len(snapshot) == 1
