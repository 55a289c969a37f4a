"""Metrics log builder: stability, environment and event reporting."""

__version__ = "0.1.0"

__all__ = ["__version__"]
