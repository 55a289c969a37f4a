"""Sub-command groups of the ``metricslog`` CLI."""
