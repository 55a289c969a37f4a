"""Metrics report building: counters, collectors and the dual-encoding report."""

from .collectors.omnibox import AutocompleteLog, AutocompleteMatch
from .field_trials import FieldTrialSnapshot, StaticFieldTrialRegistry
from .host import GpuInfo, GpuPerformanceStats, StaticHostIntrospector, SystemHostIntrospector
from .metrics_log import MetricsLog
from .plugins import StaticPluginPrefs, WebPluginInfo
from .report import Report
from .stores import CounterStore, InMemoryCounterStore
from .uptime import UptimeTracker
from .version import VersionProvider

__all__ = [
    "AutocompleteLog",
    "AutocompleteMatch",
    "CounterStore",
    "FieldTrialSnapshot",
    "GpuInfo",
    "GpuPerformanceStats",
    "InMemoryCounterStore",
    "MetricsLog",
    "Report",
    "StaticFieldTrialRegistry",
    "StaticHostIntrospector",
    "StaticPluginPrefs",
    "SystemHostIntrospector",
    "UptimeTracker",
    "VersionProvider",
]
