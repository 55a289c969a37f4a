"""Tests for omnibox event recording."""

from __future__ import annotations

from datetime import timedelta

import pytest

from metricslog.core.enums import InputType, MatchType, ProviderKind
from metricslog.core.exceptions import ReportLockedError
from metricslog.monitoring.metrics.collectors.omnibox import (
    AutocompleteLog,
    AutocompleteMatch,
    OmniboxEventRecorder,
)


def _log(**overrides) -> AutocompleteLog:
    values = dict(
        text="weather in paris",
        input_type=InputType.QUERY,
        selected_index=1,
        tab_id=5,
        inline_autocompleted_length=3,
        elapsed_time_since_user_first_modified_omnibox=timedelta(milliseconds=1500),
        result=(
            AutocompleteMatch(MatchType.SEARCH_WHAT_YOU_TYPED, 1300, False, ProviderKind.SEARCH),
            AutocompleteMatch(MatchType.HISTORY_URL, 900, True, ProviderKind.HISTORY_URL),
        ),
    )
    values.update(overrides)
    return AutocompleteLog(**values)


def test_event_written_to_both_encodings(report) -> None:
    OmniboxEventRecorder().record_opened_url(report, _log())

    element = report.legacy_root.find("uielement")
    assert element.attrib == {
        "action": "autocomplete",
        "targetidhash": "",
        "window": "0",
        "tab": "5",
        "session": "7",
        "time": "1600000000",
    }
    autocomplete = element.find("autocomplete")
    assert autocomplete.attrib == {
        "typedlength": "16",
        "numterms": "3",
        "selectedindex": "1",
        "completedlength": "3",
        "typingduration": "1500",
        "inputtype": "query",
    }
    items = autocomplete.findall("autocompleteitem")
    assert [item.attrib for item in items] == [
        {"provider": "Search", "resulttype": "search-what-you-typed", "relevance": "1300", "isstarred": "0"},
        {"provider": "HistoryURL", "resulttype": "history-url", "relevance": "900", "isstarred": "1"},
    ]

    (event,) = report.structured.omnibox_event
    assert event.time == 1600000000
    assert event.tab_id == 5
    assert (event.typed_length, event.num_typed_terms) == (16, 3)
    assert (event.selected_index, event.completed_length) == (1, 3)
    assert event.typing_duration_ms == 1500
    assert event.input_type == 4
    assert [(s.provider, s.result_type, s.relevance, s.is_starred) for s in event.suggestion] == [
        (4, 7, 1300, False),
        (1, 2, 900, True),
    ]
    assert report.num_events == 1


def test_unknown_tab_and_typing_duration_are_omitted(report) -> None:
    log = _log(tab_id=-1, elapsed_time_since_user_first_modified_omnibox=None)

    OmniboxEventRecorder().record_opened_url(report, log)

    element = report.legacy_root.find("uielement")
    assert "tab" not in element.attrib
    assert "typingduration" not in element.find("autocomplete").attrib
    (event,) = report.structured.omnibox_event
    assert not event.HasField("tab_id")
    assert not event.HasField("typing_duration_ms")


def test_typed_length_counts_utf16_code_units(report) -> None:
    OmniboxEventRecorder().record_opened_url(report, _log(text="café \U0001F600", result=()))

    (event,) = report.structured.omnibox_event
    assert event.typed_length == 7
    assert event.num_typed_terms == 2


def test_match_without_provider_omits_legacy_provider(report) -> None:
    log = _log(result=(AutocompleteMatch(MatchType.NAVSUGGEST, 10),))

    OmniboxEventRecorder().record_opened_url(report, log)

    item = report.legacy_root.find("uielement/autocomplete/autocompleteitem")
    assert "provider" not in item.attrib
    (suggestion,) = report.structured.omnibox_event[0].suggestion
    assert suggestion.provider == 0


def test_events_accumulate(report) -> None:
    recorder = OmniboxEventRecorder()
    recorder.record_opened_url(report, _log())
    recorder.record_opened_url(report, _log(text="news"))

    assert report.num_events == 2
    assert len(report.legacy_root.findall("uielement")) == 2
    assert len(report.structured.omnibox_event) == 2


def test_locked_report_rejects_events(report) -> None:
    report.lock()

    with pytest.raises(ReportLockedError):
        OmniboxEventRecorder().record_opened_url(report, _log())
    assert report.num_events == 0
