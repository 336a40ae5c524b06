"""Requirement resolution and drift-detection engine."""

__version__ = "1.0.0"
