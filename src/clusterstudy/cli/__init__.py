"""Command-line interface for clusterstudy."""

from clusterstudy.cli.main import app

__all__ = ["app"]
