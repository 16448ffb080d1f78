"""Pylint plugin and fixer that rewrites item projections into mapping views."""

__version__ = "0.1.0"
