# docsync/logging/__init__.py
"""Logging setup shared by every docsync module."""

from .logger import DEFAULT_FORMAT, configure_logging, get_logger

__all__ = ["DEFAULT_FORMAT", "configure_logging", "get_logger"]
