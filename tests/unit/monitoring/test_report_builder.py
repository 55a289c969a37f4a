"""Tests for the dual-encoding report builder."""

from __future__ import annotations

import pytest

from metricslog.core.exceptions import InvariantViolation, ReportLockedError
from metricslog.monitoring.metrics.proto import parse_record
from metricslog.monitoring.metrics.report import Report


def test_new_report_carries_identity_in_both_encodings(report: Report) -> None:
    root = report.legacy_root
    assert root.tag == "log"
    assert root.get("clientid") == "client-1"
    assert root.get("appversion") == "1.2.3"

    record = report.structured
    assert record.client_id == "client-1"
    assert record.session_id == 7
    assert record.system_profile.app_version == "1.2.3"
    assert report.num_events == 0
    assert not report.locked


def test_scopes_nest_in_call_order(report: Report) -> None:
    with report.open_scope("profile"):
        with report.open_scope("install"):
            report.write_int_attribute("buildid", 0)
        with report.open_scope("cpu"):
            report.write_attribute("arch", "x86_64")

    profile = report.legacy_root.find("profile")
    assert [child.tag for child in profile] == ["install", "cpu"]
    assert profile.find("install").get("buildid") == "0"
    assert profile.find("cpu").get("arch") == "x86_64"


def test_scope_closes_when_body_raises(report: Report) -> None:
    with pytest.raises(RuntimeError):
        with report.open_scope("profile"):
            raise RuntimeError("boom")

    # The element was closed, so the report can be locked.
    report.lock()
    assert report.locked


def test_common_event_attributes_use_wall_clock_seconds(report: Report) -> None:
    with report.open_scope("profile"):
        written = report.write_common_event_attributes()

    profile = report.legacy_root.find("profile")
    assert written == 1_600_000_000
    assert profile.get("session") == "7"
    assert profile.get("time") == "1600000000"


def test_record_fact_writes_both_encodings(report: Report) -> None:
    stability = report.section("system_profile", "stability")
    with report.open_scope("stability"):
        report.record_fact("launchcount", stability, "launch_count", 3)

    assert report.legacy_root.find("stability").get("launchcount") == "3"
    assert report.structured.system_profile.stability.launch_count == 3


def test_record_fact_spells_booleans_as_digits(report: Report) -> None:
    event = report.add_record(report.section(), "omnibox_event")
    suggestion = report.add_record(event, "suggestion")
    with report.open_scope("autocompleteitem"):
        report.record_fact("isstarred", suggestion, "is_starred", True)

    assert report.legacy_root.find("autocompleteitem").get("isstarred") == "1"
    assert suggestion.is_starred is True


def test_record_fact_uses_legacy_value_override(report: Report) -> None:
    profile = report.section("system_profile")
    with report.open_scope("install"):
        report.record_fact("installdate", profile, "install_date", 0, legacy_value="0")

    assert report.legacy_root.find("install").get("installdate") == "0"
    assert report.structured.system_profile.HasField("install_date")


def test_record_fact_rejects_unknown_field_without_writing(report: Report) -> None:
    stability = report.section("system_profile", "stability")
    with report.open_scope("stability"):
        with pytest.raises(InvariantViolation):
            report.record_fact("bogus", stability, "no_such_field", 1)

    assert report.legacy_root.find("stability").attrib == {}
    assert not report.structured.system_profile.HasField("stability")


def test_root_attributes_cannot_be_overwritten(report: Report) -> None:
    with pytest.raises(InvariantViolation):
        report.write_attribute("clientid", "someone-else")
    assert report.legacy_root.get("clientid") == "client-1"


def test_empty_attribute_name_is_rejected(report: Report) -> None:
    with report.open_scope("cpu"):
        with pytest.raises(InvariantViolation):
            report.write_attribute("", "x")


def test_increment_event_count(report: Report) -> None:
    report.increment_event_count()
    report.increment_event_count()
    assert report.num_events == 2


def test_locking_twice_is_an_invariant_violation(report: Report) -> None:
    report.lock()
    with pytest.raises(InvariantViolation):
        report.lock()


def test_locking_with_open_scope_is_an_invariant_violation(report: Report) -> None:
    with report.open_scope("profile"):
        with pytest.raises(InvariantViolation):
            report.lock()
    assert not report.locked


def test_encoded_output_requires_lock(report: Report) -> None:
    with pytest.raises(InvariantViolation):
        report.legacy_bytes()
    with pytest.raises(InvariantViolation):
        report.structured_bytes()


def test_locked_report_rejects_every_mutation(report: Report) -> None:
    stability = report.section("system_profile", "stability")
    report.lock()
    legacy_before = report.legacy_bytes()
    structured_before = report.structured_bytes()

    mutations = [
        lambda: report.write_attribute("name", "value"),
        lambda: report.write_int_attribute("count", 1),
        lambda: report.write_common_event_attributes(),
        lambda: report.record_fact("launchcount", stability, "launch_count", 1),
        lambda: report.set_field(stability, "crash_count", 1),
        lambda: report.add_record(report.structured, "omnibox_event"),
        lambda: report.section("system_profile"),
        lambda: report.increment_event_count(),
    ]
    for mutate in mutations:
        with pytest.raises(ReportLockedError):
            mutate()

    with pytest.raises(ReportLockedError):
        with report.open_scope("profile"):
            pass

    assert report.legacy_bytes() == legacy_before
    assert report.structured_bytes() == structured_before
    assert report.num_events == 0


def test_locked_report_serializes_both_encodings(report: Report) -> None:
    with report.open_scope("stability"):
        report.record_fact("crashcount", report.section("system_profile", "stability"), "crash_count", 2)
    report.lock()

    legacy = report.legacy_bytes()
    assert legacy.startswith(b"<?xml")
    assert b'crashcount="2"' in legacy

    decoded = parse_record(report.structured_bytes())
    assert decoded.client_id == "client-1"
    assert decoded.system_profile.stability.crash_count == 2
