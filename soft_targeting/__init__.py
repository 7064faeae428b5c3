"""Soft-lock target selection for action games."""

__version__ = "0.1.0"
