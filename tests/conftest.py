# tests/conftest.py
"""
Shared fixtures.

Every test gets an isolated workspace (DocsyncPaths points into tmp_path) so
nothing is written to the real .docsync directory.
"""

from __future__ import annotations

import os
import threading
from pathlib import Path
from typing import List, Optional, Set

import pytest

from docsync.core.exceptions import TransformError
from docsync.core.paths import DocsyncPaths
from docsync.transform.base import TransformResult
from docsync.transform.markdown import MarkdownTransformer


@pytest.fixture(autouse=True)
def isolated_workspace(tmp_path: Path):
    """Point the docsync workspace at a temp directory for every test."""
    DocsyncPaths.set_workspace(tmp_path / ".docsync")
    yield tmp_path / ".docsync"
    DocsyncPaths.reset()


@pytest.fixture
def source_dir(tmp_path: Path) -> Path:
    path = tmp_path / "src"
    path.mkdir()
    return path


@pytest.fixture
def output_dir(tmp_path: Path) -> Path:
    return tmp_path / "out"


@pytest.fixture
def state_path(tmp_path: Path) -> Path:
    return tmp_path / "state" / "fingerprints.json"


class RecordingTransformer(MarkdownTransformer):
    """MarkdownTransformer that records calls and can be told to fail."""

    def __init__(self, fail_on: Optional[Set[str]] = None) -> None:
        super().__init__()
        self.calls: List[str] = []
        self.fail_on = fail_on or set()
        self._lock = threading.Lock()

    def transform(self, input_path: str, output_path: str) -> TransformResult:
        with self._lock:
            self.calls.append(input_path)
        if os.path.basename(input_path) in self.fail_on:
            raise TransformError(f"Simulated failure for {input_path}", input_path=input_path)
        return super().transform(input_path, output_path)


class BlockingTransformer(RecordingTransformer):
    """Blocks inside transform() until release is set (optionally only for one file name)."""

    def __init__(self, block_on: Optional[str] = None) -> None:
        super().__init__()
        self.block_on = block_on
        self.entered = threading.Event()
        self.release = threading.Event()

    def transform(self, input_path: str, output_path: str) -> TransformResult:
        if self.block_on is None or os.path.basename(input_path) == self.block_on:
            self.entered.set()
            self.release.wait(timeout=5)
        return super().transform(input_path, output_path)


@pytest.fixture
def transformer() -> RecordingTransformer:
    return RecordingTransformer()


def bump_mtime(path: Path, seconds: float = 10.0) -> None:
    """Move a file's mtime forward so it is strictly newer than its output."""
    stat = path.stat()
    os.utime(path, ns=(stat.st_atime_ns, stat.st_mtime_ns + int(seconds * 1e9)))


class FakeObserver:
    """Stands in for watchdog's Observer; no OS watch is created."""

    def __init__(self, fail_on_start: bool = False) -> None:
        self.scheduled = []
        self.started = False
        self.stopped = False
        self.alive = True
        self.fail_on_start = fail_on_start

    def schedule(self, handler, path, recursive=False):
        self.scheduled.append((handler, path, recursive))

    def start(self):
        if self.fail_on_start:
            raise OSError("inotify watch limit reached")
        self.started = True

    def stop(self):
        self.stopped = True

    def join(self, timeout=None):
        pass

    def is_alive(self):
        return self.alive
