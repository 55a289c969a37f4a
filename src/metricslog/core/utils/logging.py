"""Logging helpers for metrics log components.

Purpose:
    Provide a centralised helper for configuring the package logger with a
    consistent formatter and level. The CLI renders through ``rich``; library
    callers get a plain stream handler.
External Dependencies:
    Uses the standard library ``logging`` module and ``rich.logging`` for the
    terminal handler. No network calls are performed.
Fallback Semantics:
    Loggers that already carry handlers are returned untouched apart from the
    level override.
"""

from __future__ import annotations

import logging

from rich.logging import RichHandler

_PLAIN_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logger(
    name: str,
    level: int | str | None = None,
    rich_output: bool = False,
) -> logging.Logger:
    """Summary: Return a logger configured with a standard handler.
    Parameters:
        name: Name of the logger to retrieve.
        level: Optional logging level override, numeric or by name. Defaults to
            ``logging.INFO`` when no handlers are configured on the logger.
        rich_output: Attach a ``RichHandler`` instead of a ``StreamHandler``.
    Returns:
        logging.Logger: Configured logger instance.
    Side Effects:
        Adds a handler when the logger does not already have one attached.
    """

    logger = logging.getLogger(name)
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO
    effective_level = level if level is not None else logging.INFO

    if not logger.handlers:
        if rich_output:
            handler: logging.Handler = RichHandler(rich_tracebacks=True, show_path=False)
            handler.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))
        else:
            handler = logging.StreamHandler()
            handler.setFormatter(logging.Formatter(_PLAIN_FORMAT))
        logger.addHandler(handler)
    logger.setLevel(effective_level)

    return logger


__all__ = ["configure_logger"]
