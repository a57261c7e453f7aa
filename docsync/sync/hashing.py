# docsync/sync/hashing.py
"""
Content fingerprints for change detection.

A fingerprint is the SHA-256 of the file's raw bytes ("sha256:<hex>"). When
the bytes cannot be read, the modification time stands in ("mtime:<ns>"):
precision drops to mtime precision, but callers still get a comparable
string.
"""

from __future__ import annotations

import hashlib
from pathlib import Path
from typing import Union

from docsync.logging.logger import get_logger
from docsync.logging.tags import DETECT

logger = get_logger(__name__)

CHUNK_SIZE = 65536
HASH_PREFIX = "sha256:"
MTIME_PREFIX = "mtime:"


def compute_content_hash(path: Union[str, Path]) -> str:
    """
    Compute the SHA-256 hash of a file's contents.

    Raises:
        FileNotFoundError: If file doesn't exist
        IsADirectoryError: If path is a directory
        PermissionError: If file can't be read
    """
    p = Path(path)

    if not p.exists():
        raise FileNotFoundError(f"File not found: {path}")

    if p.is_dir():
        raise IsADirectoryError(f"Path is a directory: {path}")

    hasher = hashlib.sha256()
    with p.open("rb") as f:
        while chunk := f.read(CHUNK_SIZE):
            hasher.update(chunk)

    return f"{HASH_PREFIX}{hasher.hexdigest()}"


def compute_mtime_fingerprint(path: Union[str, Path]) -> str:
    """Stand-in fingerprint derived from the modification time."""
    return f"{MTIME_PREFIX}{Path(path).stat().st_mtime_ns}"


def compute_fingerprint(path: Union[str, Path]) -> str:
    """
    Fingerprint a file, degrading to its mtime when hashing fails.

    Raises:
        OSError: If neither the bytes nor the mtime can be read.
    """
    try:
        return compute_content_hash(path)
    except OSError as e:
        logger.warning(f"{DETECT} Hashing failed for {path}, using mtime fingerprint: {e}")
        return compute_mtime_fingerprint(path)


def is_degraded(fingerprint: str) -> bool:
    """True if the fingerprint came from the mtime fallback."""
    return fingerprint.startswith(MTIME_PREFIX)


__all__ = [
    "compute_content_hash",
    "compute_mtime_fingerprint",
    "compute_fingerprint",
    "is_degraded",
]
