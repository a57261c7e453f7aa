# docsync/cli/__init__.py
"""Command-line interface for docsync."""

from .cli import app

__all__ = ["app"]
