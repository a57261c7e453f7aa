# docsync/sync/scanner.py
"""
Full-tree enumeration for batch mode.

Walks the source tree with an explicit stack (no recursion, so depth does not
grow the call stack), collecting every regular file the eligibility predicate
accepts. By default symbolic links are neither followed nor returned; with
follow_symlinks, linked directories are entered once each (cycles are cut by
real path) and linked files are collected. The walk checks an optional
cancellation event between directories.
"""

from __future__ import annotations

import os
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, List, Optional, Tuple, Union

from docsync.logging.logger import get_logger
from docsync.logging.tags import SCAN

from .mapping import canonical_path

logger = get_logger(__name__)


@dataclass
class ScanResult:
    """
    Result of enumerating a tree.

    Contains the eligible files (sorted canonical paths) and any directories
    that could not be read.
    """

    root: str
    files: List[str] = field(default_factory=list)
    errors: List[Tuple[str, str]] = field(default_factory=list)
    skipped: int = 0
    cancelled: bool = False

    @property
    def total_scanned(self) -> int:
        return len(self.files)


class FileScanner:
    """
    Enumerates eligible files under a root.

    Usage:
        scanner = FileScanner(transformer.is_eligible)
        result = scanner.scan("/path/to/source")
    """

    def __init__(
        self,
        is_eligible: Callable[[str], bool],
        ignore_hidden: bool = False,
        follow_symlinks: bool = False,
    ) -> None:
        """
        Args:
            is_eligible: Predicate deciding which files are collected.
            ignore_hidden: Skip dot-prefixed files and directories.
            follow_symlinks: Enter symlinked directories and collect
                symlinked files.
        """
        self._is_eligible = is_eligible
        self._ignore_hidden = ignore_hidden
        self._follow_symlinks = follow_symlinks

    def scan(
        self,
        root: Union[str, Path],
        cancel: Optional[threading.Event] = None,
    ) -> ScanResult:
        """Walk root depth-unbounded. A missing root yields an empty result."""
        root_str = canonical_path(root)
        result = ScanResult(root=root_str)

        if not os.path.isdir(root_str):
            logger.info(f"{SCAN} Source root {root_str} does not exist, nothing to scan")
            return result

        follow = self._follow_symlinks
        visited = {os.path.realpath(root_str)}
        stack = [root_str]
        while stack:
            if cancel is not None and cancel.is_set():
                logger.info(f"{SCAN} Scan of {root_str} cancelled")
                result.cancelled = True
                break

            directory = stack.pop()
            try:
                with os.scandir(directory) as it:
                    entries = list(it)
            except OSError as e:
                result.errors.append((directory, str(e)))
                continue

            for entry in entries:
                if self._ignore_hidden and entry.name.startswith("."):
                    continue
                try:
                    if entry.is_dir(follow_symlinks=follow):
                        if follow:
                            real = os.path.realpath(entry.path)
                            if real in visited:
                                continue
                            visited.add(real)
                        stack.append(entry.path)
                    elif entry.is_file(follow_symlinks=follow):
                        if self._is_eligible(entry.path):
                            result.files.append(canonical_path(entry.path))
                        else:
                            result.skipped += 1
                except OSError as e:
                    result.errors.append((entry.path, str(e)))

        result.files.sort()
        logger.info(
            f"{SCAN} Scanned {root_str}: {len(result.files)} eligible, "
            f"{result.skipped} skipped, {len(result.errors)} errors"
        )
        return result


__all__ = ["ScanResult", "FileScanner"]
