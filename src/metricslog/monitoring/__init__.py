"""Monitoring subsystems for metrics log reporting."""
