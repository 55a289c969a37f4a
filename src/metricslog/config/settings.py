"""
Reporting Configuration

Settings for the metrics log builder. Values are loaded from a YAML or JSON
file and validated with pydantic. The path is taken from the caller or from
the ``METRICSLOG_CONFIG_PATH`` environment variable; without either, defaults
apply.
"""

import json
import logging
import os
import platform
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from metricslog import __version__
from metricslog.config.process_state import ProcessState
from metricslog.core.exceptions import ConfigurationError, InvalidConfigurationError

logger = logging.getLogger(__name__)

CONFIG_PATH_ENV = "METRICSLOG_CONFIG_PATH"
OFFICIAL_BUILD_ENV = "METRICSLOG_OFFICIAL_BUILD"


def _official_from_env() -> bool:
    return os.environ.get(OFFICIAL_BUILD_ENV, "").strip().lower() in {"1", "true", "yes"}


def _detect_os_family() -> str:
    return platform.system().lower() or "unknown"


class BuildSettings(BaseModel):
    """Build configuration the version string is derived from."""

    version: str = Field(default=__version__, min_length=1, description="Base product version.")
    official: bool = Field(
        default_factory=_official_from_env,
        description="Whether this is an official build; unofficial builds report '-devel'.",
    )

    model_config = ConfigDict(extra="forbid")


class ReportingSettings(BaseModel):
    """Top level settings for a reporting process."""

    build: Optional[BuildSettings] = Field(
        default_factory=BuildSettings,
        description="Build info; null means build info is unavailable.",
    )
    version_extension: Optional[str] = Field(
        default=None,
        description="Suffix appended to the version string for this process.",
    )
    os_family: str = Field(
        default_factory=_detect_os_family,
        description="Operating system family used to gate platform-specific counters.",
    )
    application_locale: str = Field(default="en-US")
    strict_invariants: bool = Field(
        default=False,
        description="Raise on invariant violations instead of logging and using a sentinel.",
    )
    log_level: str = Field(default="INFO")

    model_config = ConfigDict(extra="forbid")


def _read_config_file(config_path: Path) -> Dict[str, Any]:
    suffix = config_path.suffix.lower()
    try:
        with open(config_path, "r", encoding="utf-8") as handle:
            if suffix in (".yaml", ".yml"):
                data = yaml.safe_load(handle)
            elif suffix == ".json":
                data = json.load(handle)
            else:
                raise ConfigurationError(f"Unsupported configuration format: {config_path.suffix}")
    except FileNotFoundError:
        logger.error("Configuration file not found: %s", config_path)
        raise ConfigurationError(f"Configuration file not found: {config_path}")
    except (yaml.YAMLError, json.JSONDecodeError) as e:
        logger.error("Error parsing configuration in %s: %s", config_path, e)
        raise ConfigurationError(f"Failed to parse configuration file: {str(e)}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"Invalid configuration format in {config_path}")
    return data


def load_settings(path: Optional[Union[str, Path]] = None) -> ReportingSettings:
    """
    Load reporting settings.

    Args:
        path: Optional configuration file. Falls back to ``METRICSLOG_CONFIG_PATH``.

    Returns:
        Validated settings.

    Raises:
        ConfigurationError: If the file cannot be read, parsed or validated.
    """
    config_path = path or os.environ.get(CONFIG_PATH_ENV)
    if not config_path:
        logger.debug("No configuration file specified, using defaults")
        return ReportingSettings()

    data = _read_config_file(Path(config_path))
    try:
        settings = ReportingSettings.model_validate(data)
    except ValidationError as e:
        first = e.errors()[0] if e.errors() else {}
        key = ".".join(str(part) for part in first.get("loc", ())) or "<root>"
        raise InvalidConfigurationError(key, first.get("input"), first.get("msg", str(e))) from e

    logger.debug("Loaded configuration from %s", config_path)
    return settings


def apply_settings(settings: ReportingSettings, state: ProcessState) -> None:
    """Install the process-wide values carried by ``settings`` into ``state``."""
    if settings.version_extension:
        state.set_version_extension(settings.version_extension)


__all__ = [
    "BuildSettings",
    "CONFIG_PATH_ENV",
    "OFFICIAL_BUILD_ENV",
    "ReportingSettings",
    "apply_settings",
    "load_settings",
]
