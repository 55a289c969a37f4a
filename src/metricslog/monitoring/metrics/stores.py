"""Counter store interface and an in-memory implementation."""

from __future__ import annotations

import copy
import logging
from typing import Any, Dict, List, Mapping, Optional, Protocol, runtime_checkable

logger = logging.getLogger(__name__)


@runtime_checkable
class CounterStore(Protocol):
    """Named integer, string and list values persisted across sessions."""

    def get_int(self, name: str) -> int: ...

    def set_int(self, name: str, value: int) -> None: ...

    def get_string(self, name: str) -> Optional[str]: ...

    def get_list(self, name: str) -> Optional[List[Any]]: ...

    def set_list(self, name: str, values: List[Any]) -> None: ...

    def clear(self, name: str) -> None: ...

    def register_list(self, name: str) -> None: ...


class InMemoryCounterStore:
    """Dictionary backed :class:`CounterStore`.

    Missing integers read as zero. Lists are absent until registered or set;
    clearing a registered list resets it to empty, clearing anything else
    removes it.
    """

    def __init__(self, initial: Optional[Mapping[str, Any]] = None) -> None:
        self._values: Dict[str, Any] = dict(initial or {})
        self._registered_lists: set[str] = set()

    def get_int(self, name: str) -> int:
        value = self._values.get(name, 0)
        if isinstance(value, bool) or not isinstance(value, int):
            logger.warning("Counter '%s' holds non-integer value %r, reading as 0", name, value)
            return 0
        return value

    def set_int(self, name: str, value: int) -> None:
        self._values[name] = int(value)

    def get_string(self, name: str) -> Optional[str]:
        value = self._values.get(name)
        return None if value is None else str(value)

    def set_string(self, name: str, value: str) -> None:
        self._values[name] = value

    def get_list(self, name: str) -> Optional[List[Any]]:
        value = self._values.get(name)
        if value is None:
            return [] if name in self._registered_lists else None
        if not isinstance(value, list):
            logger.warning("Store entry '%s' is not a list", name)
            return None
        return copy.deepcopy(value)

    def set_list(self, name: str, values: List[Any]) -> None:
        self._values[name] = list(values)

    def register_list(self, name: str) -> None:
        self._registered_lists.add(name)

    def clear(self, name: str) -> None:
        self._values.pop(name, None)
        logger.debug("Cleared store entry '%s'", name)

    def snapshot(self) -> Dict[str, Any]:
        """Return a deep copy of every stored value."""
        return copy.deepcopy(self._values)


__all__ = ["CounterStore", "InMemoryCounterStore"]
