"""Report CLI commands for the metrics log builder.

Purpose:
    Build a report from a YAML snapshot of local state and inspect the
    structured encoding of an existing report.
External Dependencies:
    Uses ``rich`` for terminal rendering, ``pyyaml`` and ``pydantic`` for the
    state file and ``protobuf`` text format for raw dumps. No network calls are
    performed.
Fallback Semantics:
    Report and configuration errors are printed with their context and the
    command exits with a non-zero code; nothing is written on failure.
"""

import logging
from pathlib import Path
from typing import Annotated, Any, Dict, List, Optional, Union

import typer
import yaml
from google.protobuf import text_format
from google.protobuf.message import DecodeError
from pydantic import BaseModel, ConfigDict, Field, ValidationError
from rich.console import Console
from rich.table import Table

from metricslog.config.settings import ReportingSettings
from metricslog.core.exceptions import MetricsLogError, format_exception_context
from metricslog.monitoring.metrics import pref_names
from metricslog.monitoring.metrics.field_trials import StaticFieldTrialRegistry
from metricslog.monitoring.metrics.host import GpuInfo, HostIntrospector, StaticHostIntrospector, SystemHostIntrospector
from metricslog.monitoring.metrics.metrics_log import MetricsLog
from metricslog.monitoring.metrics.plugins import StaticPluginPrefs, WebPluginInfo, no_plugin_prefs
from metricslog.monitoring.metrics.proto import parse_record
from metricslog.monitoring.metrics.stores import InMemoryCounterStore

logger = logging.getLogger(__name__)
console = Console()

report_app = typer.Typer(name="report", help="Build and inspect metrics reports.")

LEGACY_FILENAME = "log.xml"
STRUCTURED_FILENAME = "log.pb"


class HostState(BaseModel):
    """Fixed host description used instead of live introspection."""

    cpu_architecture: str = "x86_64"
    memory_mb: int = 0
    os_name: str = ""
    os_version: str = ""
    gpu_vendor_id: int = 0
    gpu_device_id: int = 0
    gpu_driver_version: str = ""
    screen_width: int = 0
    screen_height: int = 0
    screen_count: int = 0

    model_config = ConfigDict(extra="forbid")

    def introspector(self) -> StaticHostIntrospector:
        return StaticHostIntrospector(
            cpu_arch=self.cpu_architecture,
            memory_mb=self.memory_mb,
            name=self.os_name,
            version=self.os_version,
            gpu=GpuInfo(
                vendor_id=self.gpu_vendor_id,
                device_id=self.gpu_device_id,
                driver_version=self.gpu_driver_version,
            ),
            display_size=(self.screen_width, self.screen_height),
            display_count=self.screen_count,
        )


class PluginState(BaseModel):
    name: str
    path: str
    version: str = ""

    model_config = ConfigDict(extra="forbid")


class ReportState(BaseModel):
    """Snapshot of the local state a report is built from."""

    counters: Dict[str, Union[int, str]] = Field(
        default_factory=dict,
        description="Counter store entries keyed by store name.",
    )
    plugin_stats: Optional[List[Any]] = Field(
        default=None,
        description="Persisted per-plugin stability entries.",
    )
    plugins: List[PluginState] = Field(default_factory=list)
    disabled_plugins: Optional[List[str]] = Field(
        default=None,
        description="Plugins disabled in the loaded profile; null when no profile is loaded.",
    )
    field_trials: Dict[str, str] = Field(default_factory=dict)
    profile_metrics: Dict[str, Dict[str, Any]] = Field(default_factory=dict)
    host: Optional[HostState] = None

    model_config = ConfigDict(extra="forbid")

    def store(self) -> InMemoryCounterStore:
        initial: Dict[str, Any] = dict(self.counters)
        if self.plugin_stats is not None:
            initial[pref_names.STABILITY_PLUGIN_STATS] = list(self.plugin_stats)
        store = InMemoryCounterStore(initial)
        MetricsLog.register_prefs(store)
        return store

    def plugin_list(self) -> List[WebPluginInfo]:
        return [WebPluginInfo(plugin.name, plugin.path, plugin.version) for plugin in self.plugins]

    def host_introspector(self) -> HostIntrospector:
        if self.host is None:
            return SystemHostIntrospector()
        return self.host.introspector()


def settings_from_context(ctx: typer.Context) -> ReportingSettings:
    """Settings loaded by the root callback, defaults when run standalone."""
    if isinstance(ctx.obj, ReportingSettings):
        return ctx.obj
    return ReportingSettings()


def load_report_state(path: Path) -> ReportState:
    """Read and validate a YAML state file."""
    try:
        with open(path, "r", encoding="utf-8") as handle:
            data = yaml.safe_load(handle) or {}
    except FileNotFoundError:
        raise typer.BadParameter(f"State file not found: {path}")
    except yaml.YAMLError as e:
        raise typer.BadParameter(f"Failed to parse state file: {e}")

    try:
        return ReportState.model_validate(data)
    except ValidationError as e:
        raise typer.BadParameter(f"Invalid state file: {e}")


def _render_summary(log: MetricsLog, output_dir: Path) -> Table:
    record = log.report.structured
    stability = record.system_profile.stability

    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("Field")
    table.add_column("Value", overflow="fold")
    table.add_row("client id", record.client_id)
    table.add_row("session id", str(record.session_id))
    table.add_row("version", record.system_profile.app_version or "-")
    table.add_row("launch count", str(stability.launch_count))
    table.add_row("crash count", str(stability.crash_count))
    table.add_row("plugin stability entries", str(len(stability.plugin_stability)))
    table.add_row("plugins", str(len(record.system_profile.plugin)))
    table.add_row("field trials", str(len(record.system_profile.field_trial)))
    table.add_row("output", str(output_dir))
    return table


@report_app.command("build")
def build_report(
    ctx: typer.Context,
    state_file: Annotated[Path, typer.Argument(help="YAML snapshot of counters, plugins and profile state.")],
    client_id: Annotated[str, typer.Option("--client-id", help="Client identifier.")] = "local-client",
    session_id: Annotated[int, typer.Option("--session-id", help="Session identifier.")] = 0,
    output_dir: Annotated[Path, typer.Option("--output-dir", "-o", help="Directory for log.xml and log.pb.")] = Path("."),
    incremental: Annotated[
        bool, typer.Option("--incremental", help="Write only stability counters since the last report.")
    ] = False,
) -> None:
    """
    Build, lock and write one report from a state snapshot.
    """
    settings = settings_from_context(ctx)
    report_state = load_report_state(state_file)

    field_trials = StaticFieldTrialRegistry(report_state.field_trials.items())
    plugin_prefs_provider = no_plugin_prefs
    if report_state.disabled_plugins is not None:
        plugin_prefs = StaticPluginPrefs(report_state.disabled_plugins)
        plugin_prefs_provider = lambda: plugin_prefs  # noqa: E731

    plugin_list = report_state.plugin_list()
    try:
        log = MetricsLog(
            client_id,
            session_id,
            settings=settings,
            store=report_state.store(),
            host=report_state.host_introspector(),
            field_trials=field_trials,
            plugin_prefs_provider=plugin_prefs_provider,
        )
        if incremental:
            log.record_incremental_stability_elements(plugin_list)
        else:
            log.record_environment(plugin_list, report_state.profile_metrics)
        log.close()
        legacy = log.legacy_bytes()
        structured = log.structured_bytes()
    except MetricsLogError as e:
        console.print(f"[bold red]Report failed:[/bold red] {format_exception_context(e)}")
        raise typer.Exit(code=1)

    output_dir.mkdir(parents=True, exist_ok=True)
    (output_dir / LEGACY_FILENAME).write_bytes(legacy)
    (output_dir / STRUCTURED_FILENAME).write_bytes(structured)
    logger.info("Wrote report for client %s to %s", client_id, output_dir)

    console.print(_render_summary(log, output_dir))


@report_app.command("inspect")
def inspect_report(
    payload_file: Annotated[Path, typer.Argument(help="Structured report written by 'report build'.")],
    raw: Annotated[bool, typer.Option("--raw", help="Print the full record in protobuf text format.")] = False,
) -> None:
    """
    Summarise a structured report.
    """
    try:
        record = parse_record(payload_file.read_bytes())
    except FileNotFoundError:
        raise typer.BadParameter(f"Report not found: {payload_file}")
    except DecodeError as e:
        console.print(f"[bold red]Not a structured report:[/bold red] {e}")
        raise typer.Exit(code=1)

    if raw:
        console.print(text_format.MessageToString(record), markup=False, highlight=False)
        return

    profile = record.system_profile
    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("Field")
    table.add_column("Value", overflow="fold")
    table.add_row("client id", record.client_id)
    table.add_row("session id", str(record.session_id))
    table.add_row("version", profile.app_version or "-")
    table.add_row("install date", str(profile.install_date))
    table.add_row("launch count", str(profile.stability.launch_count))
    table.add_row("crash count", str(profile.stability.crash_count))
    table.add_row("plugins", str(len(profile.plugin)))
    table.add_row("omnibox events", str(len(record.omnibox_event)))
    console.print(table)


__all__ = ["ReportState", "load_report_state", "report_app", "settings_from_context"]
