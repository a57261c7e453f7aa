# tests/test_detector.py
"""
Tests for ChangeDetector.

Rules are checked in order: force, output missing, source newer than output,
fingerprint mismatch. Anything else means "up to date".
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Dict, Optional

from docsync.sync.detector import ChangeDetector
from docsync.sync.hashing import compute_fingerprint
from docsync.sync.mapping import canonical_path, output_path
from tests.conftest import bump_mtime


class DictStore:
    def __init__(self, entries: Optional[Dict[str, str]] = None) -> None:
        self.entries = entries or {}

    def get(self, path) -> Optional[str]:
        return self.entries.get(canonical_path(path))


def _setup(tmp_path: Path, store: DictStore):
    src_root = tmp_path / "src"
    out_root = tmp_path / "out"
    src_root.mkdir()
    detector = ChangeDetector(store, lambda p: output_path(p, src_root, out_root))
    return src_root, out_root, detector


def _write_output(src: Path, out: Path) -> None:
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_text("# converted\n", encoding="utf-8")
    # Output must not be older than its source.
    stat = src.stat()
    os.utime(out, ns=(stat.st_atime_ns, stat.st_mtime_ns))


class TestChangeDetector:
    """Tests for the decision rules."""

    def test_force_always_processes(self, tmp_path: Path):
        store = DictStore()
        src_root, out_root, detector = _setup(tmp_path, store)
        src = src_root / "a.txt"
        src.write_text("x", encoding="utf-8")
        _write_output(src, out_root / "a.md")
        store.entries[canonical_path(src)] = compute_fingerprint(src)

        assert detector.check(src, force=True).forced
        assert detector.needs_processing(src, force=True)

    def test_missing_output(self, tmp_path: Path):
        store = DictStore()
        src_root, _, detector = _setup(tmp_path, store)
        src = src_root / "a.txt"
        src.write_text("x", encoding="utf-8")
        store.entries[canonical_path(src)] = compute_fingerprint(src)

        reason = detector.check(src)

        assert reason.output_missing
        assert str(reason) == "output_missing"

    def test_source_newer_than_output(self, tmp_path: Path):
        store = DictStore()
        src_root, out_root, detector = _setup(tmp_path, store)
        src = src_root / "a.txt"
        src.write_text("x", encoding="utf-8")
        _write_output(src, out_root / "a.md")
        store.entries[canonical_path(src)] = compute_fingerprint(src)
        bump_mtime(src)

        assert detector.check(src).source_newer

    def test_unknown_fingerprint(self, tmp_path: Path):
        """No stored fingerprint -> reprocess even if the output looks fresh."""
        store = DictStore()
        src_root, out_root, detector = _setup(tmp_path, store)
        src = src_root / "a.txt"
        src.write_text("x", encoding="utf-8")
        _write_output(src, out_root / "a.md")

        assert detector.check(src).fingerprint_changed

    def test_changed_content_same_mtime(self, tmp_path: Path):
        store = DictStore()
        src_root, out_root, detector = _setup(tmp_path, store)
        src = src_root / "a.txt"
        src.write_text("x", encoding="utf-8")
        _write_output(src, out_root / "a.md")
        store.entries[canonical_path(src)] = "sha256:stale"

        assert detector.needs_processing(src)

    def test_up_to_date(self, tmp_path: Path):
        store = DictStore()
        src_root, out_root, detector = _setup(tmp_path, store)
        src = src_root / "a.txt"
        src.write_text("x", encoding="utf-8")
        _write_output(src, out_root / "a.md")
        store.entries[canonical_path(src)] = compute_fingerprint(src)

        reason = detector.check(src)

        assert not reason.needs_processing
        assert str(reason) == "up_to_date"

    def test_io_error_means_process(self, tmp_path: Path):
        """A source that cannot be stat'ed fails open toward reprocessing."""
        store = DictStore()
        src_root, _, detector = _setup(tmp_path, store)

        reason = detector.check(src_root / "vanished.txt")

        assert reason.error is not None
        assert reason.needs_processing
