"""Environment collector: install, hardware, OS, display and profile facts."""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional, Sequence

from metricslog.core.invariants import not_reached
from metricslog.monitoring.metrics import pref_names
from metricslog.monitoring.metrics.field_trials import FieldTrialRegistry, FieldTrialSnapshot
from metricslog.monitoring.metrics.host import HostIntrospector
from metricslog.monitoring.metrics.plugins import PluginPrefsProvider, WebPluginInfo, no_plugin_prefs
from metricslog.monitoring.metrics.proto import fits_int64
from metricslog.monitoring.metrics.report import Report
from metricslog.monitoring.metrics.stores import CounterStore

from .base import BaseReportCollector
from .plugins import write_legacy_plugin_list, write_structured_plugin_list

logger = logging.getLogger(__name__)

INSTALL_DATE_UNKNOWN = "0"


class EnvironmentCollector(BaseReportCollector):
    """Write the facts describing the machine and profile a report came from."""

    def __init__(
        self,
        store: Optional[CounterStore],
        host: HostIntrospector,
        field_trials: Optional[FieldTrialRegistry] = None,
        plugin_prefs_provider: PluginPrefsProvider = no_plugin_prefs,
        application_locale: str = "en-US",
        name: str = "environment",
        strict: bool = False,
    ):
        """Initialize the environment collector.

        Args:
            store: Counter store holding install date, bookmark and keyword counts.
            host: Hardware and operating system introspection.
            field_trials: Experiment registry snapshotted into the structured
                encoding.
            plugin_prefs_provider: Returns the loaded profile's plugin prefs,
                or ``None`` when no profile is loaded.
            application_locale: Locale reported in the structured encoding.
        """
        super().__init__(name, store, strict)
        self.host = host
        self.field_trials = field_trials
        self.plugin_prefs_provider = plugin_prefs_provider
        self.application_locale = application_locale

    # ------------------------------------------------------------------
    # Install
    # ------------------------------------------------------------------

    def install_date(self) -> str:
        """Milliseconds-since-epoch install date as text, "0" when unknown."""
        if self.store is None:
            logger.warning("No counter store available, reporting install date as unknown")
            return INSTALL_DATE_UNKNOWN
        return self.store.get_string(pref_names.METRICS_CLIENT_ID_TIMESTAMP) or INSTALL_DATE_UNKNOWN

    def write_install_element(self, report: Report) -> None:
        """Write ``<install>`` and the structured install date."""
        install_date = self.install_date()
        try:
            numeric_install_date = int(install_date)
        except ValueError:
            not_reached("Install date is not numeric", strict=self.strict, install_date=install_date)
            numeric_install_date = 0
        if not fits_int64(numeric_install_date):
            not_reached("Install date is out of range", strict=self.strict, install_date=install_date)
            numeric_install_date = 0

        with report.open_scope("install"):
            report.record_fact(
                "installdate",
                report.section("system_profile"),
                "install_date",
                numeric_install_date,
                legacy_value=install_date,
            )
            report.write_int_attribute("buildid", 0)

    def write_plugin_list(self, report: Report, plugin_list: Sequence[WebPluginInfo]) -> None:
        """Write the hashed legacy plugin list."""
        write_legacy_plugin_list(report, plugin_list, self.plugin_prefs_provider())

    # ------------------------------------------------------------------
    # Environment
    # ------------------------------------------------------------------

    def collect(self, report: Report, plugin_list: Sequence[WebPluginInfo] = ()) -> None:
        profile = report.section("system_profile")
        hardware = report.section("system_profile", "hardware")

        with report.open_scope("cpu"):
            report.record_fact("arch", hardware, "cpu_architecture", self.host.cpu_architecture())

        with report.open_scope("memory"):
            report.record_fact("mb", hardware, "system_ram_mb", self.host.physical_memory_mb())

        with report.open_scope("os"):
            os_block = report.section("system_profile", "os")
            report.record_fact("name", os_block, "name", self.host.os_name())
            report.record_fact("version", os_block, "version", self.host.os_version())

        self._write_gpu(report)

        with report.open_scope("display"):
            width, height = self.host.screen_size()
            report.record_fact("xsize", hardware, "primary_screen_width", width)
            report.record_fact("ysize", hardware, "primary_screen_height", height)
            report.record_fact("screens", hardware, "screen_count", self.host.screen_count())

        self._write_bookmarks(report, profile)

        with report.open_scope("keywords"):
            report.record_fact("count", profile, "keyword_count", self._get_int(pref_names.NUM_KEYWORDS))

        report.set_field(profile, "application_locale", self.application_locale)
        write_structured_plugin_list(report, plugin_list, self.plugin_prefs_provider())
        self._write_field_trials(report, profile)

    def _write_gpu(self, report: Report) -> None:
        gpu_info = self.host.gpu_info()
        gpu = report.section("system_profile", "hardware", "gpu")
        with report.open_scope("gpu"):
            report.record_fact("vendorid", gpu, "vendor_id", gpu_info.vendor_id)
            report.record_fact("deviceid", gpu, "device_id", gpu_info.device_id)

        # Driver details are only carried by the structured encoding.
        if gpu_info.driver_version:
            report.set_field(gpu, "driver_version", gpu_info.driver_version)
        if gpu_info.driver_date:
            report.set_field(gpu, "driver_date", gpu_info.driver_date)
        stats = gpu_info.performance_stats
        if stats.graphics or stats.gaming or stats.overall:
            scores = report.section("system_profile", "hardware", "gpu", "performance_statistics")
            report.set_field(scores, "graphics_score", stats.graphics)
            report.set_field(scores, "gaming_score", stats.gaming)
            report.set_field(scores, "overall_score", stats.overall)

    def _write_bookmarks(self, report: Report, profile) -> None:
        bookmarks_on_bar = self._get_int(pref_names.NUM_BOOKMARKS_ON_BOOKMARK_BAR)
        folders_on_bar = self._get_int(pref_names.NUM_FOLDERS_ON_BOOKMARK_BAR)
        bookmarks_in_other = self._get_int(pref_names.NUM_BOOKMARKS_IN_OTHER_BOOKMARK_FOLDER)
        folders_in_other = self._get_int(pref_names.NUM_FOLDERS_IN_OTHER_BOOKMARK_FOLDER)

        locations = (
            ("full-tree", folders_on_bar + folders_in_other, bookmarks_on_bar + bookmarks_in_other),
            ("toolbar", folders_on_bar, bookmarks_on_bar),
        )
        with report.open_scope("bookmarks"):
            for name, folder_count, item_count in locations:
                with report.open_scope("bookmarklocation"):
                    location = report.add_record(profile, "bookmark_location")
                    report.record_fact("name", location, "name", name)
                    report.record_fact("foldercount", location, "folder_count", folder_count)
                    report.record_fact("itemcount", location, "item_count", item_count)

    def _write_field_trials(self, report: Report, profile) -> None:
        if self.field_trials is None:
            return
        snapshot = FieldTrialSnapshot.capture(self.field_trials)
        for name_group in snapshot:
            field_trial = report.add_record(profile, "field_trial")
            report.set_field(field_trial, "name_id", name_group.name)
            report.set_field(field_trial, "group_id", name_group.group)

    def _get_int(self, name: str) -> int:
        if self.store is None:
            return 0
        return self.store.get_int(name)

    # ------------------------------------------------------------------
    # Per-profile metrics
    # ------------------------------------------------------------------

    def write_profile_metrics(self, report: Report, all_profiles_metrics: Mapping[str, Any]) -> None:
        """Write one ``<userprofile>`` per ``profile-<hash>`` entry (legacy only)."""
        prefix = pref_names.PROFILE_PREFIX
        for key, profile_metrics in all_profiles_metrics.items():
            if not key.startswith(prefix) or not isinstance(profile_metrics, Mapping):
                continue
            with report.open_scope("userprofile"):
                report.write_attribute("profileidhash", key[len(prefix):])
                for param_name, value in profile_metrics.items():
                    self._write_profile_param(report, param_name, value)

    def _write_profile_param(self, report: Report, name: str, value: Any) -> None:
        if name == "id":
            not_reached("Profile metrics must not carry an id", strict=self.strict)
            return
        if isinstance(value, bool):
            with report.open_scope("profileparam"):
                report.write_attribute("name", name)
                report.write_int_attribute("value", 1 if value else 0)
        elif isinstance(value, int):
            with report.open_scope("profileparam"):
                report.write_attribute("name", name)
                report.write_int_attribute("value", value)
        elif isinstance(value, str):
            with report.open_scope("profileparam"):
                report.write_attribute("name", name)
                report.write_attribute("value", value)
        else:
            not_reached(
                "Unsupported profile metric type",
                strict=self.strict,
                name=name,
                type=type(value).__name__,
            )


__all__ = ["EnvironmentCollector", "INSTALL_DATE_UNKNOWN"]
