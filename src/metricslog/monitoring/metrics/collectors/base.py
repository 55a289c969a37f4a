"""Common primitives used by all report collectors."""

from __future__ import annotations

import abc
import logging
from typing import Optional, Sequence

from metricslog.core.exceptions import MetricsCollectionError, MetricsLogError
from metricslog.monitoring.metrics.plugins import WebPluginInfo
from metricslog.monitoring.metrics.report import Report
from metricslog.monitoring.metrics.stores import CounterStore

logger = logging.getLogger(__name__)


class BaseReportCollector(abc.ABC):
    """Abstract interface shared by all collectors writing into a :class:`Report`."""

    def __init__(
        self,
        name: str,
        store: Optional[CounterStore] = None,
        strict: bool = False,
    ):
        """Initialize a collector scaffold.

        Args:
            name: Unique name for this collector.
            store: Counter store read (and drained) by the collector; may be
                absent when no local state is available.
            strict: Raise on invariant violations instead of logging them.
        """
        self.name = name
        self.store = store
        self.strict = strict

        logger.debug("Initialized collector %s", name)

    @abc.abstractmethod
    def collect(self, report: Report, plugin_list: Sequence[WebPluginInfo] = ()) -> None:
        """Write this collector's facts into ``report``."""

    def run(self, report: Report, plugin_list: Sequence[WebPluginInfo] = ()) -> None:
        """Call :meth:`collect`, wrapping unexpected failures in ``MetricsCollectionError``."""
        try:
            self.collect(report, plugin_list)
        except MetricsLogError:
            raise
        except Exception as exc:  # noqa: BLE001 - escalate as MetricsCollectionError
            logger.error("Collector '%s' failed: %s", self.name, exc, exc_info=True)
            raise MetricsCollectionError(self.name, cause=exc) from exc

    def drain_int(self, name: str) -> int:
        """Read counter ``name`` and reset it to zero in the same step."""
        value = self.store.get_int(name)
        self.store.set_int(name, 0)
        return value
