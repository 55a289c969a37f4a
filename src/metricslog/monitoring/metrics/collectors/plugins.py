"""Plugin list and plugin stability reporting."""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional, Sequence

from metricslog.core.invariants import not_reached
from metricslog.monitoring.metrics import pref_names
from metricslog.monitoring.metrics.hashing import hash_name
from metricslog.monitoring.metrics.plugins import (
    PluginPrefs,
    PluginPrefsProvider,
    WebPluginInfo,
    find_plugin,
    no_plugin_prefs,
)
from metricslog.monitoring.metrics.proto import fits_int64
from metricslog.monitoring.metrics.report import Report
from metricslog.monitoring.metrics.stores import CounterStore

from .base import BaseReportCollector

logger = logging.getLogger(__name__)


def set_plugin_info(
    report: Report,
    message,
    plugin: WebPluginInfo,
    plugin_prefs: Optional[PluginPrefs],
) -> None:
    """Fill a structured ``Plugin`` message from a live plugin."""
    report.set_field(message, "name", plugin.name)
    report.set_field(message, "filename", plugin.filename)
    report.set_field(message, "version", plugin.version)
    if plugin_prefs is not None:
        report.set_field(message, "is_disabled", not plugin_prefs.is_plugin_enabled(plugin))


def write_legacy_plugin_list(
    report: Report,
    plugin_list: Sequence[WebPluginInfo],
    plugin_prefs: Optional[PluginPrefs],
) -> None:
    """Write ``<plugins>`` with hashed plugin names and file names."""
    with report.open_scope("plugins"):
        for plugin in plugin_list:
            with report.open_scope("plugin"):
                # Hashed so that unreleased plugins under test stay private.
                report.write_attribute("name", hash_name(plugin.name))
                report.write_attribute("filename", hash_name(plugin.filename))
                report.write_attribute("version", plugin.version)
                if plugin_prefs is not None:
                    report.write_int_attribute("disabled", int(not plugin_prefs.is_plugin_enabled(plugin)))


def write_structured_plugin_list(
    report: Report,
    plugin_list: Sequence[WebPluginInfo],
    plugin_prefs: Optional[PluginPrefs],
) -> None:
    """Append one structured ``Plugin`` per live plugin, names in clear."""
    profile = report.section("system_profile")
    for plugin in plugin_list:
        set_plugin_info(report, report.add_record(profile, "plugin"), plugin, plugin_prefs)


def _count(entry: Mapping[str, Any], key: str, strict: bool = False) -> int:
    value = entry.get(key, 0)
    if isinstance(value, bool) or not isinstance(value, int):
        return 0
    if not fits_int64(value):
        not_reached("Plugin stats count out of range", strict=strict, key=key, value=value)
        return 0
    return value


class PluginStabilityCorrelator(BaseReportCollector):
    """Join persisted per-plugin stats with the live plugin list.

    Each persisted entry is matched to a loaded plugin by exact name. Matched
    entries are written to both encodings with the name hashed in the legacy
    one; unmatched entries are dropped. The persisted list is cleared after
    every pass, so an entry is reported at most once.
    """

    def __init__(
        self,
        store: Optional[CounterStore],
        plugin_prefs_provider: PluginPrefsProvider = no_plugin_prefs,
        name: str = "plugin_stability",
        strict: bool = False,
    ):
        super().__init__(name, store, strict)
        self.plugin_prefs_provider = plugin_prefs_provider

    def collect(self, report: Report, plugin_list: Sequence[WebPluginInfo] = ()) -> None:
        if self.store is None:
            logger.warning("No counter store available, skipping plugin stability")
            return

        plugin_stats = self.store.get_list(pref_names.STABILITY_PLUGIN_STATS)
        if plugin_stats is None:
            return

        try:
            self._write_entries(report, plugin_stats, plugin_list)
        finally:
            self.store.clear(pref_names.STABILITY_PLUGIN_STATS)

    def _write_entries(
        self,
        report: Report,
        plugin_stats: Sequence[Any],
        plugin_list: Sequence[WebPluginInfo],
    ) -> None:
        stability = report.section("system_profile", "stability")
        plugin_prefs = self.plugin_prefs_provider()
        written = 0

        with report.open_scope("plugins"):
            for entry in plugin_stats:
                if not isinstance(entry, Mapping):
                    not_reached("Plugin stats entry is not a dictionary", strict=self.strict)
                    continue

                plugin_name = str(entry.get(pref_names.STABILITY_PLUGIN_NAME, ""))
                name_hash = hash_name(plugin_name)
                plugin = find_plugin(plugin_list, plugin_name)
                if plugin is None:
                    logger.warning("No loaded plugin matches stability entry %s, dropping it", name_hash)
                    continue

                with report.open_scope("pluginstability"):
                    plugin_stability = report.add_record(stability, "plugin_stability")
                    set_plugin_info(report, plugin_stability.plugin, plugin, plugin_prefs)
                    # "filename" rather than "name": the legacy servers expect it.
                    report.record_fact("filename", plugin_stability, "name_hash", name_hash)
                    report.record_fact(
                        "launchcount",
                        plugin_stability,
                        "launch_count",
                        _count(entry, pref_names.STABILITY_PLUGIN_LAUNCHES, self.strict),
                    )
                    report.record_fact(
                        "instancecount",
                        plugin_stability,
                        "instance_count",
                        _count(entry, pref_names.STABILITY_PLUGIN_INSTANCES, self.strict),
                    )
                    report.record_fact(
                        "crashcount",
                        plugin_stability,
                        "crash_count",
                        _count(entry, pref_names.STABILITY_PLUGIN_CRASHES, self.strict),
                    )
                written += 1

        logger.debug("Wrote %s of %s plugin stability entries", written, len(plugin_stats))


__all__ = [
    "PluginStabilityCorrelator",
    "set_plugin_info",
    "write_legacy_plugin_list",
    "write_structured_plugin_list",
]
