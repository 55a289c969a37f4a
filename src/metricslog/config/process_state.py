"""Process-wide reporting state.

The version extension and the uptime baseline live for the whole process. They
are kept on a single :class:`ProcessState` object owned by whatever drives the
reporting cycles, instead of as module globals. The shared instance is created
at most once, even when first requested from several threads.
"""

from __future__ import annotations

import logging
import threading
import time
from typing import Callable, Optional

import psutil

from metricslog.core.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

Clock = Callable[[], float]


def process_age() -> float:
    """Seconds since the current OS process was created, or 0.0 if unknown."""
    try:
        created = psutil.Process().create_time()
    except psutil.Error as exc:
        logger.warning("Could not read process start time: %s", exc)
        return 0.0
    return max(0.0, time.time() - created)


class ProcessState:
    """Holds the values that span the life of the reporting process."""

    def __init__(self, clock: Clock = time.monotonic, age: Optional[float] = None) -> None:
        """Create the state, backdating the start time to process creation.

        Args:
            clock: Monotonic clock in seconds.
            age: Seconds the process has already been running. Defaults to the
                age reported by the OS when ``clock`` is the real monotonic
                clock, and to 0 for any other clock.
        """
        if age is None:
            age = process_age() if clock is time.monotonic else 0.0
        self.clock = clock
        self.started_at = clock() - age
        self.uptime_baseline = self.started_at
        self._version_extension: Optional[str] = None
        self._extension_lock = threading.Lock()

        logger.debug("ProcessState initialized; process started at monotonic time %s", self.started_at)

    @property
    def version_extension(self) -> str:
        """Suffix appended to the product version, or an empty string."""
        return self._version_extension or ""

    def set_version_extension(self, extension: str) -> None:
        """Install the version extension.

        The extension is configuration and may be set only once; repeating the
        same value is accepted, a different value raises
        :class:`ConfigurationError`.
        """
        with self._extension_lock:
            if self._version_extension is not None:
                if self._version_extension == extension:
                    return
                raise ConfigurationError(
                    "Version extension is already set",
                    error_code="VERSION_EXTENSION_ALREADY_SET",
                    context={"current": self._version_extension, "requested": extension},
                )
            self._version_extension = extension
        logger.debug("Version extension set to '%s'", extension)


_state: Optional[ProcessState] = None
_state_lock = threading.Lock()


def get_process_state() -> ProcessState:
    """Return the shared :class:`ProcessState`, creating it on first use."""
    global _state
    if _state is None:
        with _state_lock:
            if _state is None:
                _state = ProcessState()
    return _state


def reset_process_state(state: Optional[ProcessState] = None) -> None:
    """Replace the shared state; intended for tests and process re-exec."""
    global _state
    with _state_lock:
        _state = state


__all__ = ["Clock", "ProcessState", "get_process_state", "process_age", "reset_process_state"]
