"""Command-line interface for genry."""

from genry.cli.app import app

__all__ = ["app"]
