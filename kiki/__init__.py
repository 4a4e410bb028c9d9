"""Kiki: a personal assistant for tasks and notes kept in local JSON files."""

__version__ = "0.1.0"

__all__ = ["__version__"]