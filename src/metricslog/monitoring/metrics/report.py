"""Dual-encoding report builder.

A :class:`Report` accumulates one reporting cycle in two parallel encodings:

* the legacy encoding, an ordered tree of attributed elements serialized as
  XML, rooted at ``<log clientid=".." appversion="..">``;
* the structured encoding, a protobuf ``MetricsLogRecord``.

Both are mutated during a single pass and frozen by :meth:`Report.lock`.
Every mutating call on a locked report raises
:class:`~metricslog.core.exceptions.ReportLockedError` before touching either
encoding.
"""

from __future__ import annotations

import logging
import time
from contextlib import contextmanager
from typing import Any, Callable, Iterator, List, Optional
from xml.etree import ElementTree

from metricslog.core.exceptions import InvariantViolation, ReportLockedError

from .proto import new_record

logger = logging.getLogger(__name__)

WallClock = Callable[[], float]


def _legacy_text(value: Any) -> str:
    if isinstance(value, bool):
        return "1" if value else "0"
    return str(value)


class Report:
    """One reporting cycle, built unlocked and frozen before transmission."""

    def __init__(
        self,
        client_id: str,
        session_id: int,
        version_string: str,
        wall_clock: WallClock = time.time,
    ) -> None:
        """Create an unlocked report.

        Args:
            client_id: Stable identifier of the reporting client.
            session_id: Identifier of the current browsing session.
            version_string: Reporting version, see ``VersionProvider``.
            wall_clock: Source of event timestamps in seconds since the epoch.
        """
        self.client_id = client_id
        self.session_id = session_id
        self.version_string = version_string
        self.num_events = 0
        self._wall_clock = wall_clock
        self._locked = False

        self._root = ElementTree.Element("log")
        self._root.set("clientid", client_id)
        self._root.set("appversion", version_string)
        self._open_elements: List[ElementTree.Element] = [self._root]

        self._record = new_record()
        self._record.client_id = client_id
        self._record.session_id = session_id
        self._record.system_profile.app_version = version_string

        logger.debug("Created report for client %s session %s", client_id, session_id)

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def locked(self) -> bool:
        return self._locked

    def lock(self) -> None:
        """Freeze the report. The transition is one way."""
        if self._locked:
            raise InvariantViolation("Report is already locked")
        if len(self._open_elements) > 1:
            raise InvariantViolation(
                "Cannot lock a report with open elements",
                context={"open": [element.tag for element in self._open_elements[1:]]},
            )
        self._locked = True
        logger.debug("Locked report with %s events", self.num_events)

    def _ensure_unlocked(self, operation: str) -> None:
        if self._locked:
            raise ReportLockedError(operation)

    def current_time(self) -> int:
        """Wall-clock seconds used for event timestamps."""
        return int(self._wall_clock())

    # ------------------------------------------------------------------
    # Legacy encoding
    # ------------------------------------------------------------------

    @contextmanager
    def open_scope(self, name: str) -> Iterator[ElementTree.Element]:
        """Open a child element of the current element for the ``with`` body.

        The element is closed exactly once when the body exits, however it
        exits.
        """
        self._ensure_unlocked("open_scope")
        element = ElementTree.SubElement(self._open_elements[-1], name)
        self._open_elements.append(element)
        try:
            yield element
        finally:
            closed = self._open_elements.pop()
            if closed is not element:
                raise InvariantViolation(
                    "Legacy elements closed out of order",
                    context={"expected": element.tag, "closed": closed.tag},
                )

    def write_attribute(self, name: str, value: str) -> None:
        """Append a string attribute to the currently open element."""
        self._ensure_unlocked("write_attribute")
        self._set_attribute(name, value)

    def write_int_attribute(self, name: str, value: int) -> None:
        """Append an integer attribute to the currently open element."""
        self._ensure_unlocked("write_int_attribute")
        self._set_attribute(name, str(int(value)))

    def write_common_event_attributes(self) -> int:
        """Write the ``session`` and ``time`` attributes every event carries.

        Returns the timestamp written, so the structured side can reuse it.
        """
        self._ensure_unlocked("write_common_event_attributes")
        now = self.current_time()
        self._set_attribute("session", str(self.session_id))
        self._set_attribute("time", str(now))
        return now

    def _check_attribute(self, name: str) -> None:
        if not name:
            raise InvariantViolation("Attribute name must not be empty")
        if len(self._open_elements) == 1 and self._root.get(name) is not None:
            raise InvariantViolation("Cannot overwrite a root attribute", context={"name": name})

    def _set_attribute(self, name: str, value: str) -> None:
        self._check_attribute(name)
        self._open_elements[-1].set(name, value)

    @property
    def legacy_root(self) -> ElementTree.Element:
        """Root of the legacy tree. Treat as read-only."""
        return self._root

    # ------------------------------------------------------------------
    # Structured encoding
    # ------------------------------------------------------------------

    @property
    def structured(self):
        """Root structured record. Treat as read-only; mutate through the report."""
        return self._record

    def section(self, *path: str):
        """Return the nested structured message at ``path`` for writing."""
        self._ensure_unlocked("section")
        message = self._record
        for name in path:
            message = getattr(message, name)
        return message

    def set_field(self, message, field: str, value: Any) -> None:
        """Set a structured-only field on ``message``."""
        self._ensure_unlocked("set_field")
        setattr(message, field, value)

    def add_record(self, message, field: str):
        """Append and return a new element of the repeated message ``field``."""
        self._ensure_unlocked("add_record")
        return getattr(message, field).add()

    def record_fact(
        self,
        attribute: str,
        message,
        field: str,
        value: Any,
        legacy_value: Optional[str] = None,
    ) -> None:
        """Write one fact to both encodings.

        The structured field is assigned first; the protobuf runtime validates
        name, type and range there, so a rejected value leaves the legacy tree
        untouched as well.

        Args:
            attribute: Legacy attribute name on the currently open element.
            message: Structured message that owns ``field``.
            field: Structured field name.
            value: Value for the structured field.
            legacy_value: Legacy spelling when it differs from ``str(value)``.
        """
        self._ensure_unlocked("record_fact")
        if field not in message.DESCRIPTOR.fields_by_name:
            raise InvariantViolation(
                "Unknown structured field",
                context={"message": message.DESCRIPTOR.name, "field": field},
            )
        self._check_attribute(attribute)
        setattr(message, field, value)
        self._set_attribute(attribute, legacy_value if legacy_value is not None else _legacy_text(value))

    def increment_event_count(self) -> None:
        self._ensure_unlocked("increment_event_count")
        self.num_events += 1

    # ------------------------------------------------------------------
    # Output
    # ------------------------------------------------------------------

    def legacy_bytes(self) -> bytes:
        """Serialized legacy encoding. Requires a locked report."""
        self._ensure_locked("legacy_bytes")
        return ElementTree.tostring(self._root, encoding="utf-8", xml_declaration=True)

    def structured_bytes(self) -> bytes:
        """Serialized structured encoding. Requires a locked report."""
        self._ensure_locked("structured_bytes")
        return self._record.SerializeToString()

    def _ensure_locked(self, operation: str) -> None:
        if not self._locked:
            raise InvariantViolation(
                "Report must be locked before it is encoded",
                context={"operation": operation},
            )


__all__ = ["Report", "WallClock"]
