"""Stability counter collector."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Mapping, Optional, Sequence, Tuple

from metricslog.monitoring.metrics import pref_names
from metricslog.monitoring.metrics.plugins import WebPluginInfo
from metricslog.monitoring.metrics.report import Report
from metricslog.monitoring.metrics.stores import CounterStore
from metricslog.monitoring.metrics.uptime import UptimeTracker

from .base import BaseReportCollector
from .plugins import PluginStabilityCorrelator

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StabilityCounter:
    """Where one stability counter lives in the store and in each encoding.

    ``attribute`` is ``None`` for counters that only exist in the structured
    encoding.
    """

    pref: str
    field: str
    attribute: Optional[str]


# The server rejects stability elements without these, so they are written
# even when zero.
REQUIRED_COUNTERS: Tuple[StabilityCounter, ...] = (
    StabilityCounter(pref_names.STABILITY_LAUNCH_COUNT, "launch_count", "launchcount"),
    StabilityCounter(pref_names.STABILITY_CRASH_COUNT, "crash_count", "crashcount"),
)

SESSION_COUNTERS: Tuple[StabilityCounter, ...] = (
    StabilityCounter(
        pref_names.STABILITY_INCOMPLETE_SESSION_END_COUNT,
        "incomplete_shutdown_count",
        "incompleteshutdowncount",
    ),
    StabilityCounter(
        pref_names.STABILITY_BREAKPAD_REGISTRATION_SUCCESS,
        "breakpad_registration_success_count",
        "breakpadregistrationok",
    ),
    StabilityCounter(
        pref_names.STABILITY_BREAKPAD_REGISTRATION_FAIL,
        "breakpad_registration_failure_count",
        "breakpadregistrationfail",
    ),
    StabilityCounter(pref_names.STABILITY_DEBUGGER_PRESENT, "debugger_present_count", "debuggerpresent"),
    StabilityCounter(
        pref_names.STABILITY_DEBUGGER_NOT_PRESENT,
        "debugger_not_present_count",
        "debuggernotpresent",
    ),
)

# Summed server side, so zero values are left out.
OPTIONAL_COUNTERS: Tuple[StabilityCounter, ...] = (
    StabilityCounter(pref_names.STABILITY_PAGE_LOAD_COUNT, "page_load_count", "pageloadcount"),
    StabilityCounter(pref_names.STABILITY_RENDERER_CRASH_COUNT, "renderer_crash_count", "renderercrashcount"),
    StabilityCounter(
        pref_names.STABILITY_EXTENSION_RENDERER_CRASH_COUNT,
        "extension_renderer_crash_count",
        "extensionrenderercrashcount",
    ),
    StabilityCounter(pref_names.STABILITY_RENDERER_HANG_COUNT, "renderer_hang_count", "rendererhangcount"),
    StabilityCounter(
        pref_names.STABILITY_CHILD_PROCESS_CRASH_COUNT,
        "child_process_crash_count",
        "childprocesscrashcount",
    ),
)

PLATFORM_COUNTERS: Mapping[str, Tuple[StabilityCounter, ...]] = {
    "chromeos": (
        StabilityCounter(pref_names.STABILITY_OTHER_USER_CRASH_COUNT, "other_user_crash_count", None),
        StabilityCounter(pref_names.STABILITY_KERNEL_CRASH_COUNT, "kernel_crash_count", None),
        StabilityCounter(
            pref_names.STABILITY_SYSTEM_UNCLEAN_SHUTDOWN_COUNT,
            "unclean_system_shutdown_count",
            None,
        ),
    ),
}


class StabilityCollector(BaseReportCollector):
    """Drain stability counters into a ``stability`` element and block.

    Counters are reset as soon as they are read. If the report they were
    written into is never delivered, those counts are lost.
    """

    def __init__(
        self,
        store: Optional[CounterStore],
        uptime: Optional[UptimeTracker] = None,
        plugin_stability: Optional[PluginStabilityCorrelator] = None,
        os_family: str = "",
        include_session_counters: bool = False,
        name: str = "stability",
        strict: bool = False,
    ):
        """Initialize the collector.

        Args:
            store: Counter store holding the stability counters.
            uptime: Tracker sampled for the ``uptimesec`` attribute.
            plugin_stability: Correlator writing plugin stability entries
                inside the ``stability`` element.
            os_family: Enables the platform counters registered for it.
            include_session_counters: Also drain the counters that only the
                full environment report carries.
        """
        super().__init__(name, store, strict)
        self.uptime = uptime
        self.plugin_stability = plugin_stability
        self.os_family = os_family.lower()
        self.include_session_counters = include_session_counters

    def collect(self, report: Report, plugin_list: Sequence[WebPluginInfo] = ()) -> None:
        if self.store is None:
            logger.warning("No counter store available, skipping stability counters")
            return

        with report.open_scope("stability"):
            stability = report.section("system_profile", "stability")
            self.write_required(report, stability)
            self.write_realtime(report, stability)
            if self.include_session_counters:
                self.write_session(report, stability)
            if self.plugin_stability is not None:
                self.plugin_stability.collect(report, plugin_list)

    def write_required(self, report: Report, stability) -> None:
        """Drain and write the required counters, zero included."""
        for counter in REQUIRED_COUNTERS:
            self._write(report, stability, counter, self.drain_int(counter.pref))

    def write_session(self, report: Report, stability) -> None:
        """Drain and write the full-report session counters, zero included."""
        for counter in SESSION_COUNTERS:
            self._write(report, stability, counter, self.drain_int(counter.pref))

    def write_realtime(self, report: Report, stability) -> None:
        """Write the non-zero optional and platform counters, then uptime."""
        counters = OPTIONAL_COUNTERS + PLATFORM_COUNTERS.get(self.os_family, ())
        for counter in counters:
            count = self.store.get_int(counter.pref)
            if count:
                self._write(report, stability, counter, count)
                self.store.set_int(counter.pref, 0)

        if self.uptime is not None:
            recent_duration = self.uptime.sample()
            if recent_duration:
                report.record_fact("uptimesec", stability, "uptime_sec", recent_duration)

    def _write(self, report: Report, stability, counter: StabilityCounter, value: int) -> None:
        if counter.attribute is None:
            report.set_field(stability, counter.field, value)
        else:
            report.record_fact(counter.attribute, stability, counter.field, value)


__all__ = [
    "OPTIONAL_COUNTERS",
    "PLATFORM_COUNTERS",
    "REQUIRED_COUNTERS",
    "SESSION_COUNTERS",
    "StabilityCollector",
    "StabilityCounter",
]
