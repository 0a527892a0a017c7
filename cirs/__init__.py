"""CIRS: critical incident report intake."""

__version__ = "1.0.0"
