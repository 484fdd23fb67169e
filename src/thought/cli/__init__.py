"""Command-line interface for thought."""

from thought.cli.app import app

__all__ = ["app"]
