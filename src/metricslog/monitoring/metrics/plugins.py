"""Live plugin descriptors and per-profile plugin preferences."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import PurePath
from typing import Callable, Iterable, Optional, Protocol, runtime_checkable

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WebPluginInfo:
    """A plugin currently loaded by the browser."""

    name: str
    path: str
    version: str = ""

    @property
    def filename(self) -> str:
        """Base name of the plugin file."""
        return PurePath(self.path).name


@runtime_checkable
class PluginPrefs(Protocol):
    """Per-profile plugin enablement."""

    def is_plugin_enabled(self, plugin: WebPluginInfo) -> bool: ...


PluginPrefsProvider = Callable[[], Optional[PluginPrefs]]


class StaticPluginPrefs:
    """:class:`PluginPrefs` backed by a fixed set of disabled plugin names."""

    def __init__(self, disabled: Iterable[str] = ()) -> None:
        self.disabled = frozenset(disabled)

    def is_plugin_enabled(self, plugin: WebPluginInfo) -> bool:
        return plugin.name not in self.disabled


def no_plugin_prefs() -> Optional[PluginPrefs]:
    """Provider used when no profile is loaded."""
    return None


def find_plugin(plugin_list: Iterable[WebPluginInfo], name: str) -> Optional[WebPluginInfo]:
    """Return the first live plugin named exactly ``name``.

    Plugin counts are small, so a linear scan is used.
    """
    for plugin in plugin_list:
        if plugin.name == name:
            return plugin
    return None


__all__ = [
    "PluginPrefs",
    "PluginPrefsProvider",
    "StaticPluginPrefs",
    "WebPluginInfo",
    "find_plugin",
    "no_plugin_prefs",
]
