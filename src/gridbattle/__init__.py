"""Deterministic grid combat simulation engine."""

__version__ = "0.1.0"
