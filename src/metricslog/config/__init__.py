"""Configuration and process-wide state for metrics reporting."""

from .process_state import ProcessState, get_process_state, reset_process_state
from .settings import BuildSettings, ReportingSettings, apply_settings, load_settings

__all__ = [
    "BuildSettings",
    "ProcessState",
    "ReportingSettings",
    "apply_settings",
    "get_process_state",
    "load_settings",
    "reset_process_state",
]
