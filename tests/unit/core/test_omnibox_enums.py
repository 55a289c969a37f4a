"""Exhaustiveness tests for the omnibox enumeration mappings."""

from __future__ import annotations

import pytest

from metricslog.core.enums import (
    STRUCTURED_UNKNOWN_PROVIDER,
    InputType,
    MatchType,
    ProviderKind,
    legacy_input_type,
    legacy_match_type,
    legacy_provider_name,
    structured_input_type,
    structured_provider_type,
    structured_result_type,
)
from metricslog.core.exceptions import InvariantViolation

MAPPINGS = [
    (InputType, legacy_input_type, structured_input_type),
    (ProviderKind, legacy_provider_name, structured_provider_type),
    (MatchType, legacy_match_type, structured_result_type),
]


@pytest.mark.parametrize("enum_type, to_legacy, to_structured", MAPPINGS)
def test_every_member_has_one_spelling_per_encoding(enum_type, to_legacy, to_structured) -> None:
    legacy = [to_legacy(member, strict=True) for member in enum_type]
    structured = [to_structured(member, strict=True) for member in enum_type]

    assert all(legacy)
    assert len(set(legacy)) == len(enum_type)
    assert len(set(structured)) == len(enum_type)


@pytest.mark.parametrize("enum_type, to_legacy, to_structured", MAPPINGS)
def test_unmapped_values_fall_back_to_sentinels(enum_type, to_legacy, to_structured) -> None:
    assert to_legacy("not-a-member") == ""
    assert to_structured("not-a-member") == 0


@pytest.mark.parametrize("enum_type, to_legacy, to_structured", MAPPINGS)
def test_unmapped_values_raise_when_strict(enum_type, to_legacy, to_structured) -> None:
    with pytest.raises(InvariantViolation):
        to_legacy("not-a-member", strict=True)
    with pytest.raises(InvariantViolation):
        to_structured("not-a-member", strict=True)


def test_known_legacy_spellings() -> None:
    assert legacy_input_type(InputType.REQUESTED_URL) == "requested-url"
    assert legacy_input_type(InputType.FORCED_QUERY) == "forced-query"
    assert legacy_provider_name(ProviderKind.HISTORY_QUICK) == "HistoryQuickProvider"
    assert legacy_match_type(MatchType.URL_WHAT_YOU_TYPED) == "url-what-you-typed"


def test_missing_provider_is_unknown() -> None:
    assert structured_provider_type(None) == STRUCTURED_UNKNOWN_PROVIDER
