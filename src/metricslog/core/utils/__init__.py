"""Utility helpers for the metrics log core."""

from .logging import configure_logger

__all__ = ["configure_logger"]
