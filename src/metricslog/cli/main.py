#!/usr/bin/env python3
"""
Metrics Log Command Line Interface

Entry point for the ``metricslog`` command. It loads reporting settings,
configures logging and hosts the sub-command groups.

Usage:
    metricslog --help
    metricslog version
    metricslog report build state.yaml --client-id abc --session-id 3

Environment Variables:
    METRICSLOG_CONFIG_PATH: Path to configuration file
    METRICSLOG_OFFICIAL_BUILD: Mark the build as official (drops "-devel")
"""

import logging
from typing import Annotated, Optional

import typer
from rich.console import Console

from metricslog import __version__
from metricslog.cli.commands.report import report_app, settings_from_context
from metricslog.config.process_state import get_process_state
from metricslog.config.settings import apply_settings, load_settings
from metricslog.core.exceptions import ConfigurationError, format_exception_context
from metricslog.core.utils.logging import configure_logger
from metricslog.monitoring.metrics.version import VersionProvider

console = Console()
logger = logging.getLogger(__name__)

app = typer.Typer(
    name="metricslog",
    help="Build stability, environment and event metrics reports",
    add_completion=False,
    context_settings={"help_option_names": ["-h", "--help"]},
)


@app.callback()
def main_callback(
    ctx: typer.Context,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable verbose output.")] = False,
    config_path: Annotated[Optional[str], typer.Option("--config", "-c", help="Path to configuration file.")] = None,
) -> None:
    """
    Metrics log CLI.
    """
    try:
        settings = load_settings(config_path)
        apply_settings(settings, get_process_state())
    except ConfigurationError as e:
        console.print(f"[bold red]Configuration error:[/bold red] {format_exception_context(e)}")
        raise typer.Exit(code=1)

    # Sub-commands read the settings from the context object.
    ctx.obj = settings
    configure_logger("metricslog", logging.DEBUG if verbose else settings.log_level, rich_output=True)
    logger.debug("Verbose logging enabled")


@app.command()
def version(ctx: typer.Context) -> None:
    """
    Print the package and reporting version strings.
    """
    reporting_version = VersionProvider(settings_from_context(ctx).build).version_string()
    console.print(f"metricslog {__version__}")
    console.print(f"reporting version: {reporting_version or 'unknown'}")


app.add_typer(report_app)


if __name__ == "__main__":
    app()
