# docsync/logging/logger.py
"""
Unified logging setup for docsync.

All modules use:
    from docsync.logging.logger import get_logger
    logger = get_logger(__name__)

Configuration happens exactly once, from the CLI entrypoint (or the host
application), through configure_logging().
"""

from __future__ import annotations

import logging
import sys
from typing import TextIO

DEFAULT_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def configure_logging(
    level: int = logging.INFO,
    fmt: str = DEFAULT_FORMAT,
    stream: TextIO | None = None,
) -> None:
    """
    Configure the root logging handler.

    Safe to call multiple times: a second handler is never attached, only the
    level is updated.
    """
    root = logging.getLogger()
    if not root.handlers:
        handler = logging.StreamHandler(stream or sys.stderr)
        handler.setFormatter(logging.Formatter(fmt))
        root.addHandler(handler)

    root.setLevel(level)


def get_logger(name: str) -> logging.Logger:
    """
    Modules call this to get a logger.

    Do NOT configure logging here; configuration happens in configure_logging().
    """
    return logging.getLogger(name)
