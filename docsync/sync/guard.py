# docsync/sync/guard.py
"""In-flight set: at most one processing attempt per path at a time."""

from __future__ import annotations

import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Union

from .mapping import canonical_path


class DedupGuard:
    """
    Thread-safe set of paths currently being processed.

    Purely in memory: nothing survives a restart, so a crash never leaves a
    path locked out. Keys are canonical paths.
    """

    def __init__(self) -> None:
        self._in_flight: set[str] = set()
        self._lock = threading.Lock()

    def acquire(self, path: Union[str, Path]) -> bool:
        """Claim the path. False if another worker already holds it."""
        key = canonical_path(path)
        with self._lock:
            if key in self._in_flight:
                return False
            self._in_flight.add(key)
            return True

    def release(self, path: Union[str, Path]) -> None:
        """Give the path back. Releasing an unclaimed path is a no-op."""
        with self._lock:
            self._in_flight.discard(canonical_path(path))

    @contextmanager
    def claim(self, path: Union[str, Path]) -> Iterator[bool]:
        """
        Context manager form of acquire/release.

        Yields whether the claim succeeded; a successful claim is released on
        every exit path, exceptions included.
        """
        acquired = self.acquire(path)
        try:
            yield acquired
        finally:
            if acquired:
                self.release(path)

    def __contains__(self, path: object) -> bool:
        if not isinstance(path, (str, Path)):
            return False
        with self._lock:
            return canonical_path(path) in self._in_flight

    def __len__(self) -> int:
        with self._lock:
            return len(self._in_flight)


__all__ = ["DedupGuard"]
