# docsync/core/__init__.py
"""Core building blocks: exceptions, workspace paths and configuration."""

from .exceptions import (
    DocsyncError,
    PersistenceError,
    SyncSetupError,
    TransformError,
    UnsupportedFileError,
    WatchBackendError,
)

__all__ = [
    "DocsyncError",
    "PersistenceError",
    "SyncSetupError",
    "TransformError",
    "UnsupportedFileError",
    "WatchBackendError",
]
