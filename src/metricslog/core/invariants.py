"""Precondition helpers distinguishing strict (debug) and lenient (release) runs."""

from __future__ import annotations

import logging
from typing import Any

from .exceptions import InvariantViolation

logger = logging.getLogger(__name__)


def not_reached(message: str, *, strict: bool = False, **context: Any) -> None:
    """Report a code path that should never execute.

    The message is always logged at error level. When ``strict`` is set the
    call raises :class:`InvariantViolation`; otherwise it returns and the
    caller is expected to fall back to a sentinel value.
    """
    logger.error("Invariant violated: %s %s", message, context or "")
    if strict:
        raise InvariantViolation(message, context=context or None)


__all__ = ["not_reached"]
