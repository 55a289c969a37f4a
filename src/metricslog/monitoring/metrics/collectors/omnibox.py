"""Omnibox interaction events appended to a report."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import timedelta
from typing import Optional, Tuple

from metricslog.core.enums import (
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

from metricslog.monitoring.metrics.report import Report

logger = logging.getLogger(__name__)

NO_TAB_ID = -1


@dataclass(frozen=True)
class AutocompleteMatch:
    """One suggestion shown in the omnibox dropdown."""

    type: MatchType
    relevance: int = 0
    starred: bool = False
    provider: Optional[ProviderKind] = None


@dataclass(frozen=True)
class AutocompleteLog:
    """The user opened a URL from the omnibox."""

    text: str
    input_type: InputType = InputType.INVALID
    selected_index: int = 0
    tab_id: int = NO_TAB_ID
    inline_autocompleted_length: int = 0
    # None when the typing duration was not measured.
    elapsed_time_since_user_first_modified_omnibox: Optional[timedelta] = None
    result: Tuple[AutocompleteMatch, ...] = ()


def _utf16_length(text: str) -> int:
    return len(text.encode("utf-16-le")) // 2


class OmniboxEventRecorder:
    """Append omnibox events to a report in both encodings."""

    def __init__(self, strict: bool = False) -> None:
        self.strict = strict

    def record_opened_url(self, report: Report, log: AutocompleteLog) -> None:
        """Record that a URL was opened from the omnibox and bump the event count."""
        num_terms = len(log.text.split())
        typing_duration_ms = None
        if log.elapsed_time_since_user_first_modified_omnibox is not None:
            typing_duration_ms = int(
                log.elapsed_time_since_user_first_modified_omnibox / timedelta(milliseconds=1)
            )

        event = report.add_record(report.section(), "omnibox_event")
        with report.open_scope("uielement"):
            report.write_attribute("action", "autocomplete")
            report.write_attribute("targetidhash", "")
            report.write_int_attribute("window", 0)
            if log.tab_id != NO_TAB_ID:
                report.record_fact("tab", event, "tab_id", log.tab_id)
            report.set_field(event, "time", report.write_common_event_attributes())

            with report.open_scope("autocomplete"):
                report.record_fact("typedlength", event, "typed_length", _utf16_length(log.text))
                report.record_fact("numterms", event, "num_typed_terms", num_terms)
                report.record_fact("selectedindex", event, "selected_index", log.selected_index)
                report.record_fact(
                    "completedlength",
                    event,
                    "completed_length",
                    log.inline_autocompleted_length,
                )
                if typing_duration_ms is not None:
                    report.record_fact("typingduration", event, "typing_duration_ms", typing_duration_ms)
                self._write_enum(
                    report,
                    event,
                    "inputtype",
                    "input_type",
                    legacy_input_type(log.input_type, strict=self.strict),
                    structured_input_type(log.input_type, strict=self.strict),
                )

                for match in log.result:
                    with report.open_scope("autocompleteitem"):
                        self._write_match(report, event, match)

        report.increment_event_count()
        logger.debug("Recorded omnibox event with %s suggestions", len(log.result))

    def _write_match(self, report: Report, event, match: AutocompleteMatch) -> None:
        suggestion = report.add_record(event, "suggestion")
        provider_name = ""
        if match.provider is not None:
            provider_name = legacy_provider_name(match.provider, strict=self.strict)
        self._write_enum(
            report,
            suggestion,
            "provider",
            "provider",
            provider_name,
            structured_provider_type(match.provider, strict=self.strict),
        )
        self._write_enum(
            report,
            suggestion,
            "resulttype",
            "result_type",
            legacy_match_type(match.type, strict=self.strict),
            structured_result_type(match.type, strict=self.strict),
        )
        report.record_fact("relevance", suggestion, "relevance", match.relevance)
        report.record_fact("isstarred", suggestion, "is_starred", match.starred)

    @staticmethod
    def _write_enum(report: Report, message, attribute: str, field: str, legacy: str, structured: int) -> None:
        # An empty legacy spelling means "omit the attribute"; the structured
        # field still carries its sentinel code.
        if legacy:
            report.record_fact(attribute, message, field, structured, legacy_value=legacy)
        else:
            report.set_field(message, field, structured)


__all__ = ["AutocompleteLog", "AutocompleteMatch", "NO_TAB_ID", "OmniboxEventRecorder"]
