"""Enumerations for omnibox interaction events.

Each enumeration below is the single canonical source for one omnibox concept.
The legacy encoding wants the string spelling and the structured encoding wants
the integer code; both are produced by explicit lookup tables so that every
member has exactly one spelling in each encoding.
"""

from __future__ import annotations

import logging
from enum import Enum, unique
from typing import Mapping

from metricslog.core.invariants import not_reached

logger = logging.getLogger(__name__)


@unique
class InputType(str, Enum):
    """Classification of what the user typed into the omnibox."""

    INVALID = "invalid"
    UNKNOWN = "unknown"
    REQUESTED_URL = "requested_url"
    URL = "url"
    QUERY = "query"
    FORCED_QUERY = "forced_query"


@unique
class ProviderKind(str, Enum):
    """Autocomplete provider that produced a suggestion."""

    HISTORY_URL = "history_url"
    HISTORY_CONTENTS = "history_contents"
    HISTORY_QUICK = "history_quick"
    SEARCH = "search"
    KEYWORD = "keyword"
    BUILTIN = "builtin"
    SHORTCUTS = "shortcuts"
    EXTENSION_APPS = "extension_apps"


@unique
class MatchType(str, Enum):
    """Kind of autocomplete match shown to the user."""

    URL_WHAT_YOU_TYPED = "url_what_you_typed"
    HISTORY_URL = "history_url"
    HISTORY_TITLE = "history_title"
    HISTORY_BODY = "history_body"
    HISTORY_KEYWORD = "history_keyword"
    NAVSUGGEST = "navsuggest"
    SEARCH_WHAT_YOU_TYPED = "search_what_you_typed"
    SEARCH_HISTORY = "search_history"
    SEARCH_SUGGEST = "search_suggest"
    SEARCH_OTHER_ENGINE = "search_other_engine"
    EXTENSION_APP = "extension_app"


# Legacy (string) spellings. These are part of the legacy wire format.

_LEGACY_INPUT_TYPES: Mapping[InputType, str] = {
    InputType.INVALID: "invalid",
    InputType.UNKNOWN: "unknown",
    InputType.REQUESTED_URL: "requested-url",
    InputType.URL: "url",
    InputType.QUERY: "query",
    InputType.FORCED_QUERY: "forced-query",
}

_LEGACY_PROVIDER_NAMES: Mapping[ProviderKind, str] = {
    ProviderKind.HISTORY_URL: "HistoryURL",
    ProviderKind.HISTORY_CONTENTS: "HistoryContents",
    ProviderKind.HISTORY_QUICK: "HistoryQuickProvider",
    ProviderKind.SEARCH: "Search",
    ProviderKind.KEYWORD: "Keyword",
    ProviderKind.BUILTIN: "Builtin",
    ProviderKind.SHORTCUTS: "ShortcutsProvider",
    ProviderKind.EXTENSION_APPS: "ExtensionApps",
}

_LEGACY_MATCH_TYPES: Mapping[MatchType, str] = {
    MatchType.URL_WHAT_YOU_TYPED: "url-what-you-typed",
    MatchType.HISTORY_URL: "history-url",
    MatchType.HISTORY_TITLE: "history-title",
    MatchType.HISTORY_BODY: "history-body",
    MatchType.HISTORY_KEYWORD: "history-keyword",
    MatchType.NAVSUGGEST: "navsuggest",
    MatchType.SEARCH_WHAT_YOU_TYPED: "search-what-you-typed",
    MatchType.SEARCH_HISTORY: "search-history",
    MatchType.SEARCH_SUGGEST: "search-suggest",
    MatchType.SEARCH_OTHER_ENGINE: "search-other-engine",
    MatchType.EXTENSION_APP: "extension-app",
}

# Structured (integer) codes.

STRUCTURED_INPUT_TYPE_INVALID = 0
STRUCTURED_UNKNOWN_PROVIDER = 0
STRUCTURED_UNKNOWN_RESULT_TYPE = 0

_STRUCTURED_INPUT_TYPES: Mapping[InputType, int] = {
    InputType.INVALID: STRUCTURED_INPUT_TYPE_INVALID,
    InputType.UNKNOWN: 1,
    InputType.REQUESTED_URL: 2,
    InputType.URL: 3,
    InputType.QUERY: 4,
    InputType.FORCED_QUERY: 5,
}

_STRUCTURED_PROVIDER_TYPES: Mapping[ProviderKind, int] = {
    ProviderKind.HISTORY_URL: 1,
    ProviderKind.HISTORY_CONTENTS: 2,
    ProviderKind.HISTORY_QUICK: 3,
    ProviderKind.SEARCH: 4,
    ProviderKind.KEYWORD: 5,
    ProviderKind.BUILTIN: 6,
    ProviderKind.SHORTCUTS: 7,
    ProviderKind.EXTENSION_APPS: 8,
}

_STRUCTURED_RESULT_TYPES: Mapping[MatchType, int] = {
    MatchType.URL_WHAT_YOU_TYPED: 1,
    MatchType.HISTORY_URL: 2,
    MatchType.HISTORY_TITLE: 3,
    MatchType.HISTORY_BODY: 4,
    MatchType.HISTORY_KEYWORD: 5,
    MatchType.NAVSUGGEST: 6,
    MatchType.SEARCH_WHAT_YOU_TYPED: 7,
    MatchType.SEARCH_HISTORY: 8,
    MatchType.SEARCH_SUGGEST: 9,
    MatchType.SEARCH_OTHER_ENGINE: 10,
    MatchType.EXTENSION_APP: 11,
}


def _lookup(table: Mapping, value: object, sentinel, kind: str, strict: bool):
    try:
        return table[value]
    except (KeyError, TypeError):
        not_reached(f"Unmapped {kind} value", strict=strict, value=repr(value))
        return sentinel


def legacy_input_type(value: InputType, *, strict: bool = False) -> str:
    """Return the legacy spelling of ``value`` (empty when unmapped)."""
    return _lookup(_LEGACY_INPUT_TYPES, value, "", "input type", strict)


def structured_input_type(value: InputType, *, strict: bool = False) -> int:
    """Return the structured code of ``value`` (``INVALID`` when unmapped)."""
    return _lookup(_STRUCTURED_INPUT_TYPES, value, STRUCTURED_INPUT_TYPE_INVALID, "input type", strict)


def legacy_provider_name(value: ProviderKind, *, strict: bool = False) -> str:
    """Return the provider name used by the legacy encoding."""
    return _lookup(_LEGACY_PROVIDER_NAMES, value, "", "provider", strict)


def structured_provider_type(value: ProviderKind | None, *, strict: bool = False) -> int:
    """Return the structured provider code; ``None`` maps to the unknown provider."""
    if value is None:
        return STRUCTURED_UNKNOWN_PROVIDER
    return _lookup(_STRUCTURED_PROVIDER_TYPES, value, STRUCTURED_UNKNOWN_PROVIDER, "provider", strict)


def legacy_match_type(value: MatchType, *, strict: bool = False) -> str:
    """Return the legacy spelling of a match type (empty when unmapped)."""
    return _lookup(_LEGACY_MATCH_TYPES, value, "", "match type", strict)


def structured_result_type(value: MatchType, *, strict: bool = False) -> int:
    """Return the structured result code of a match type."""
    return _lookup(_STRUCTURED_RESULT_TYPES, value, STRUCTURED_UNKNOWN_RESULT_TYPE, "match type", strict)


__all__ = [
    "InputType",
    "MatchType",
    "ProviderKind",
    "STRUCTURED_INPUT_TYPE_INVALID",
    "STRUCTURED_UNKNOWN_PROVIDER",
    "STRUCTURED_UNKNOWN_RESULT_TYPE",
    "legacy_input_type",
    "legacy_match_type",
    "legacy_provider_name",
    "structured_input_type",
    "structured_provider_type",
    "structured_result_type",
]
