"""Command line interface for the metrics log builder."""
