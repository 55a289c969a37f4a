"""
One reporting cycle.

:class:`MetricsLog` owns a single :class:`Report` and the collectors that fill
it. A cycle is either a full environment report (``record_environment``) or an
incremental stability report (``record_incremental_stability_elements``);
omnibox events may be appended to either until the log is closed.

Usage:
    log = MetricsLog("client", 1, store=store, host=StaticHostIntrospector())
    log.record_environment(plugins)
    log.close()
    payload = log.structured_bytes()
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional, Sequence

from metricslog.config.process_state import ProcessState, get_process_state
from metricslog.config.settings import ReportingSettings, apply_settings
from metricslog.core.exceptions import InvariantViolation

from . import pref_names
from .collectors.environment import EnvironmentCollector
from .collectors.omnibox import AutocompleteLog, OmniboxEventRecorder
from .collectors.plugins import PluginStabilityCorrelator
from .collectors.stability import StabilityCollector
from .field_trials import FieldTrialRegistry
from .host import HostIntrospector, SystemHostIntrospector
from .plugins import PluginPrefsProvider, WebPluginInfo, no_plugin_prefs
from .report import Report, WallClock
from .stores import CounterStore
from .uptime import UptimeTracker
from .version import VersionProvider

logger = logging.getLogger(__name__)


class MetricsLog:
    """Build, lock and encode one metrics report."""

    def __init__(
        self,
        client_id: str,
        session_id: int,
        *,
        settings: Optional[ReportingSettings] = None,
        store: Optional[CounterStore] = None,
        host: Optional[HostIntrospector] = None,
        field_trials: Optional[FieldTrialRegistry] = None,
        plugin_prefs_provider: PluginPrefsProvider = no_plugin_prefs,
        process_state: Optional[ProcessState] = None,
        wall_clock: Optional[WallClock] = None,
    ) -> None:
        """Create an unlocked log.

        Args:
            client_id: Stable identifier of the reporting client.
            session_id: Identifier of the current session.
            settings: Reporting settings; defaults apply when omitted.
            store: Counter store to drain. ``None`` degrades every counter
                section to a logged no-op.
            host: Hardware and OS introspection; the running system by default.
            field_trials: Active experiments, structured encoding only.
            plugin_prefs_provider: Returns plugin prefs for the loaded profile.
            process_state: Process-wide state; the shared instance by default.
            wall_clock: Event timestamp source, for tests.
        """
        self.settings = settings or ReportingSettings()
        self.store = store
        self.process_state = process_state or get_process_state()
        apply_settings(self.settings, self.process_state)

        strict = self.settings.strict_invariants
        version_string = VersionProvider(self.settings.build, self.process_state).version_string()
        if wall_clock is None:
            self.report = Report(client_id, session_id, version_string)
        else:
            self.report = Report(client_id, session_id, version_string, wall_clock=wall_clock)

        uptime = UptimeTracker(store, self.process_state) if store is not None else None
        plugin_stability = PluginStabilityCorrelator(store, plugin_prefs_provider, strict=strict)
        os_family = self.settings.os_family
        self._incremental_stability = StabilityCollector(
            store,
            uptime=uptime,
            plugin_stability=plugin_stability,
            os_family=os_family,
            strict=strict,
        )
        self._full_stability = StabilityCollector(
            store,
            uptime=uptime,
            plugin_stability=plugin_stability,
            os_family=os_family,
            include_session_counters=True,
            strict=strict,
        )
        self._environment = EnvironmentCollector(
            store,
            host or SystemHostIntrospector(),
            field_trials=field_trials,
            plugin_prefs_provider=plugin_prefs_provider,
            application_locale=self.settings.application_locale,
            strict=strict,
        )
        self._omnibox = OmniboxEventRecorder(strict=strict)
        self._environment_recorded = False
        self._stability_recorded = False

    @staticmethod
    def register_prefs(store: CounterStore) -> None:
        """Register the store entries this log reads before first use."""
        store.register_list(pref_names.STABILITY_PLUGIN_STATS)

    @property
    def num_events(self) -> int:
        return self.report.num_events

    @property
    def locked(self) -> bool:
        return self.report.locked

    def record_environment(
        self,
        plugin_list: Sequence[WebPluginInfo],
        profile_metrics: Optional[Mapping[str, Any]] = None,
    ) -> None:
        """Write the full environment report: install, plugins, stability and host facts."""
        if self._environment_recorded:
            raise InvariantViolation("Environment already recorded for this report")
        self._claim_stability_pass()
        self._environment_recorded = True

        report = self.report
        with report.open_scope("profile"):
            report.write_common_event_attributes()
            self._environment.write_install_element(report)
            self._environment.write_plugin_list(report, plugin_list)
            self._full_stability.run(report, plugin_list)
            self._environment.run(report, plugin_list)
            if profile_metrics:
                self._environment.write_profile_metrics(report, profile_metrics)

        logger.debug("Recorded environment with %s plugins", len(plugin_list))

    def record_incremental_stability_elements(self, plugin_list: Sequence[WebPluginInfo]) -> None:
        """Write the stability counters accumulated since the previous report."""
        self._claim_stability_pass()
        report = self.report
        with report.open_scope("profile"):
            report.write_common_event_attributes()
            self._environment.write_install_element(report)
            self._incremental_stability.run(report, plugin_list)

        logger.debug("Recorded incremental stability elements")

    def _claim_stability_pass(self) -> None:
        # Counters are drained into a report at most once.
        if self._stability_recorded:
            raise InvariantViolation("Stability already recorded for this report")
        self._stability_recorded = True

    def record_omnibox_opened_url(self, log: AutocompleteLog) -> None:
        """Append one omnibox event."""
        self._omnibox.record_opened_url(self.report, log)

    def close(self) -> None:
        """Lock the report; nothing can be recorded afterwards."""
        self.report.lock()

    def legacy_bytes(self) -> bytes:
        return self.report.legacy_bytes()

    def structured_bytes(self) -> bytes:
        return self.report.structured_bytes()


__all__ = ["MetricsLog"]
