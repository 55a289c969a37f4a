"""Incremental uptime accounting."""

from __future__ import annotations

import logging
from typing import Optional

from metricslog.config.process_state import ProcessState, get_process_state

from . import pref_names
from .stores import CounterStore

logger = logging.getLogger(__name__)


class UptimeTracker:
    """Measure whole seconds of uptime since the previous sample."""

    def __init__(self, store: CounterStore, process_state: Optional[ProcessState] = None) -> None:
        self.store = store
        self.process_state = process_state or get_process_state()

    def sample(self) -> int:
        """Return seconds elapsed since the last sample and move the baseline.

        The first sample in a process measures from process start. Positive
        deltas are added to the cumulative uptime counter; zero or negative
        deltas (coincident reports, a clock stepping back) return 0 and leave
        the counter alone.
        """
        state = self.process_state
        now = state.clock()
        elapsed = int(now - state.uptime_baseline)
        state.uptime_baseline = now

        if elapsed <= 0:
            return 0

        total = self.store.get_int(pref_names.UNINSTALL_METRICS_UPTIME_SEC) + elapsed
        self.store.set_int(pref_names.UNINSTALL_METRICS_UPTIME_SEC, total)
        logger.debug("Uptime advanced by %ss (cumulative %ss)", elapsed, total)
        return elapsed


__all__ = ["UptimeTracker"]
