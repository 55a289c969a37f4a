"""Field-trial (experiment) registry and the snapshot embedded in reports."""

from __future__ import annotations

import hashlib
import logging
from dataclasses import dataclass
from typing import Iterable, NamedTuple, Protocol, Sequence, Tuple, runtime_checkable

logger = logging.getLogger(__name__)


class NameGroupId(NamedTuple):
    """Hashed identity of one experiment and the group this process joined."""

    name: int
    group: int


def hash_field_trial_name(name: str) -> int:
    """Return the 32-bit id of a trial or group name.

    The id is the first four bytes of the SHA-1 digest read little endian.
    """
    digest = hashlib.sha1(name.encode("utf-8")).digest()
    return int.from_bytes(digest[:4], "little")


@dataclass(frozen=True)
class FieldTrialSnapshot:
    """Ordered, immutable list of experiment assignments captured at report time."""

    ids: Tuple[NameGroupId, ...] = ()

    @classmethod
    def capture(cls, registry: "FieldTrialRegistry") -> "FieldTrialSnapshot":
        ids = tuple(NameGroupId(int(name), int(group)) for name, group in registry.snapshot())
        logger.debug("Captured %s field trial assignments", len(ids))
        return cls(ids)

    def __iter__(self):
        return iter(self.ids)

    def __len__(self) -> int:
        return len(self.ids)


@runtime_checkable
class FieldTrialRegistry(Protocol):
    """Source of the active experiment assignments."""

    def snapshot(self) -> Sequence[Tuple[int, int]]: ...


class StaticFieldTrialRegistry:
    """Registry holding a fixed list of ``(trial, group)`` name pairs."""

    def __init__(self, assignments: Iterable[Tuple[str, str]] = ()) -> None:
        self._assignments = list(assignments)

    def add(self, trial_name: str, group_name: str) -> None:
        self._assignments.append((trial_name, group_name))

    def snapshot(self) -> Sequence[Tuple[int, int]]:
        return [
            NameGroupId(hash_field_trial_name(trial), hash_field_trial_name(group))
            for trial, group in self._assignments
        ]


__all__ = [
    "FieldTrialRegistry",
    "FieldTrialSnapshot",
    "NameGroupId",
    "StaticFieldTrialRegistry",
    "hash_field_trial_name",
]
