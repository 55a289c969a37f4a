"""Collectors that write facts into a :class:`~metricslog.monitoring.metrics.report.Report`."""

from .base import BaseReportCollector
from .environment import INSTALL_DATE_UNKNOWN, EnvironmentCollector
from .omnibox import AutocompleteLog, AutocompleteMatch, OmniboxEventRecorder
from .plugins import (
    PluginStabilityCorrelator,
    set_plugin_info,
    write_legacy_plugin_list,
    write_structured_plugin_list,
)
from .stability import (
    OPTIONAL_COUNTERS,
    PLATFORM_COUNTERS,
    REQUIRED_COUNTERS,
    SESSION_COUNTERS,
    StabilityCollector,
    StabilityCounter,
)

__all__ = [
    "AutocompleteLog",
    "AutocompleteMatch",
    "BaseReportCollector",
    "EnvironmentCollector",
    "INSTALL_DATE_UNKNOWN",
    "OPTIONAL_COUNTERS",
    "OmniboxEventRecorder",
    "PLATFORM_COUNTERS",
    "PluginStabilityCorrelator",
    "REQUIRED_COUNTERS",
    "SESSION_COUNTERS",
    "StabilityCollector",
    "StabilityCounter",
    "set_plugin_info",
    "write_legacy_plugin_list",
    "write_structured_plugin_list",
]
