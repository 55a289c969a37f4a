"""Point-in-time hardware and operating system introspection."""

from __future__ import annotations

import logging
import platform
from dataclasses import dataclass, field
from typing import Protocol, Tuple, runtime_checkable

import psutil

logger = logging.getLogger(__name__)

_BYTES_PER_MB = 1024 * 1024


@dataclass(frozen=True)
class GpuPerformanceStats:
    """Performance scores reported by the GPU driver, when available."""

    graphics: float = 0.0
    gaming: float = 0.0
    overall: float = 0.0


@dataclass(frozen=True)
class GpuInfo:
    """Primary GPU identity."""

    vendor_id: int = 0
    device_id: int = 0
    driver_version: str = ""
    driver_date: str = ""
    performance_stats: GpuPerformanceStats = field(default_factory=GpuPerformanceStats)


@runtime_checkable
class HostIntrospector(Protocol):
    """Read-only queries about the machine the process runs on."""

    def cpu_architecture(self) -> str: ...

    def physical_memory_mb(self) -> int: ...

    def os_name(self) -> str: ...

    def os_version(self) -> str: ...

    def gpu_info(self) -> GpuInfo: ...

    def screen_size(self) -> Tuple[int, int]: ...

    def screen_count(self) -> int: ...


class SystemHostIntrospector:
    """Introspect the local host through :mod:`platform` and :mod:`psutil`.

    GPU and display queries have no portable source here; they report the
    values given at construction, zero by default.
    """

    def __init__(
        self,
        gpu: GpuInfo | None = None,
        screen_size: Tuple[int, int] = (0, 0),
        screen_count: int = 0,
    ) -> None:
        self._gpu = gpu or GpuInfo()
        self._screen_size = screen_size
        self._screen_count = screen_count

    def cpu_architecture(self) -> str:
        return platform.machine()

    def physical_memory_mb(self) -> int:
        try:
            return int(psutil.virtual_memory().total // _BYTES_PER_MB)
        except (OSError, RuntimeError) as exc:
            logger.warning("Failed to read physical memory size: %s", exc)
            return 0

    def os_name(self) -> str:
        return platform.system()

    def os_version(self) -> str:
        return platform.release()

    def gpu_info(self) -> GpuInfo:
        return self._gpu

    def screen_size(self) -> Tuple[int, int]:
        return self._screen_size

    def screen_count(self) -> int:
        return self._screen_count


@dataclass
class StaticHostIntrospector:
    """Host description with fixed values."""

    cpu_arch: str = "x86_64"
    memory_mb: int = 0
    name: str = ""
    version: str = ""
    gpu: GpuInfo = field(default_factory=GpuInfo)
    display_size: Tuple[int, int] = (0, 0)
    display_count: int = 0

    def cpu_architecture(self) -> str:
        return self.cpu_arch

    def physical_memory_mb(self) -> int:
        return self.memory_mb

    def os_name(self) -> str:
        return self.name

    def os_version(self) -> str:
        return self.version

    def gpu_info(self) -> GpuInfo:
        return self.gpu

    def screen_size(self) -> Tuple[int, int]:
        return self.display_size

    def screen_count(self) -> int:
        return self.display_count


__all__ = [
    "GpuInfo",
    "GpuPerformanceStats",
    "HostIntrospector",
    "StaticHostIntrospector",
    "SystemHostIntrospector",
]
