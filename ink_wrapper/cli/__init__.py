"""Command-line interface for the ink-wrapper generator."""

from .main import app, main, run

__all__ = ["app", "main", "run"]
