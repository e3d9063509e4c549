"""Macro dashboard: FRED economic indicators aligned onto a daily calendar."""

__version__ = "0.1.0"
