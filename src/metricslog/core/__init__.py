"""Core primitives shared across the metrics log package."""
