# docsync/sync/detector.py
"""
Change detection.

Decides whether a source file must be reprocessed, in this order:
1. force -> yes
2. output file missing -> yes
3. source mtime strictly newer than output mtime -> yes
4. content fingerprint differs from the stored one (or none stored) -> yes
5. otherwise -> no

Any I/O error while stating or hashing answers "yes": detection fails open
toward reprocessing and never silently skips a file.

This module ONLY decides; it does not transform or write state.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional, Protocol, Union

from docsync.logging.logger import get_logger
from docsync.logging.tags import DETECT

from .hashing import compute_fingerprint

logger = get_logger(__name__)


class FingerprintReader(Protocol):
    """The part of FingerprintStore the detector needs."""

    def get(self, path: Union[str, Path]) -> Optional[str]:
        ...


@dataclass
class ChangeReason:
    """Why a file needs (or doesn't need) processing."""

    forced: bool = False
    output_missing: bool = False
    source_newer: bool = False
    fingerprint_changed: bool = False
    error: Optional[str] = None

    @property
    def needs_processing(self) -> bool:
        return (
            self.forced
            or self.output_missing
            or self.source_newer
            or self.fingerprint_changed
            or self.error is not None
        )

    def __str__(self) -> str:
        reasons = []
        if self.forced:
            reasons.append("forced")
        if self.output_missing:
            reasons.append("output_missing")
        if self.source_newer:
            reasons.append("source_newer")
        if self.fingerprint_changed:
            reasons.append("fingerprint_changed")
        if self.error is not None:
            reasons.append(f"error({self.error})")
        return ", ".join(reasons) if reasons else "up_to_date"


class ChangeDetector:
    """
    Answers "does this file need reprocessing?".

    Usage:
        detector = ChangeDetector(store, output_path_for=reconciler.output_path_for)
        if detector.needs_processing("/src/a.txt"):
            ...
    """

    def __init__(
        self,
        store: FingerprintReader,
        output_path_for: Callable[[str], Path],
    ) -> None:
        self._store = store
        self._output_path_for = output_path_for

    def check(self, path: Union[str, Path], force: bool = False) -> ChangeReason:
        """Evaluate all rules and return the first one that fires."""
        if force:
            return ChangeReason(forced=True)

        try:
            source_stat = Path(path).stat()
            output = self._output_path_for(str(path))
            if not output.exists():
                return ChangeReason(output_missing=True)

            output_stat = output.stat()
            if source_stat.st_mtime_ns > output_stat.st_mtime_ns:
                return ChangeReason(source_newer=True)

            current = compute_fingerprint(path)
        except (OSError, ValueError) as e:
            logger.debug(f"{DETECT} Check failed for {path}, reprocessing: {e}")
            return ChangeReason(error=str(e))

        if current != self._store.get(path):
            return ChangeReason(fingerprint_changed=True)

        return ChangeReason()

    def needs_processing(self, path: Union[str, Path], force: bool = False) -> bool:
        """True if the file must be (re)processed."""
        reason = self.check(path, force=force)
        logger.debug(f"{DETECT} {path}: {reason}")
        return reason.needs_processing


__all__ = ["FingerprintReader", "ChangeReason", "ChangeDetector"]
