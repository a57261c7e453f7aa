# docsync/core/exceptions.py
"""
All exceptions raised by the synchronization engine.

Hierarchy:
    DocsyncError
    ├── SyncSetupError - a watch session could not be started
    ├── PersistenceError - fingerprint state could not be written
    ├── TransformError - the transform collaborator failed
    │   └── UnsupportedFileError - path is not eligible for transformation
    └── WatchBackendError - the filesystem watch backend reported an error

Configuration errors (ConfigError and subclasses, also DocsyncErrors) live in
docsync.core.config.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional


class DocsyncError(Exception):
    """
    Base exception for all engine errors.

    Lets the host application catch every engine failure with one handler:

        >>> try:
        ...     engine.process_file(path)
        ... except DocsyncError as e:
        ...     print(f"sync failed: {e}")
    """

    pass


class SyncSetupError(DocsyncError):
    """
    The watch session could not be started.

    Raised synchronously from start() and set_source_dir(), for example when
    the source root does not exist or is not a directory.
    """

    pass


class PersistenceError(DocsyncError):
    """The fingerprint store could not be written to its backing file."""

    def __init__(self, message: str, path: Optional[Path] = None):
        self.path = path
        if path is not None:
            message = f"{message} (file: {path})"
        super().__init__(message)


class TransformError(DocsyncError):
    """
    The transform collaborator failed for a single path.

    The message is whatever the collaborator reported; the engine does not
    interpret it.
    """

    def __init__(self, message: str, input_path: Optional[str] = None):
        self.input_path = input_path
        super().__init__(message)


class UnsupportedFileError(TransformError):
    """The path's extension is not registered with the transformer."""

    pass


class WatchBackendError(DocsyncError):
    """The underlying watch mechanism reported an error."""

    pass


__all__ = [
    "DocsyncError",
    "SyncSetupError",
    "PersistenceError",
    "TransformError",
    "UnsupportedFileError",
    "WatchBackendError",
]
