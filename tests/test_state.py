# tests/test_state.py
"""
Tests for the fingerprint store.

Tests verify:
- Missing or malformed files yield an empty store
- Every mutation is persisted
- Saves are atomic and failures do not corrupt memory
"""

from __future__ import annotations

import json
import threading
from pathlib import Path

import pytest

from docsync.core.exceptions import PersistenceError
from docsync.sync.mapping import canonical_path
from docsync.sync.state import FingerprintStore


class TestLoad:
    """Tests for FingerprintStore.load."""

    def test_missing_file_is_empty(self, state_path: Path):
        store = FingerprintStore(state_path)

        assert store.load() == {}
        assert len(store) == 0

    def test_malformed_file_is_empty(self, state_path: Path):
        state_path.parent.mkdir(parents=True)
        state_path.write_text("{not json", encoding="utf-8")

        store = FingerprintStore(state_path)

        assert store.load() == {}

    def test_wrong_shape_is_empty(self, state_path: Path):
        """A JSON list (or non-string values) is treated as malformed."""
        state_path.parent.mkdir(parents=True)
        state_path.write_text(json.dumps({"a": 1}), encoding="utf-8")

        assert FingerprintStore(state_path).load() == {}

    def test_loads_existing_entries(self, state_path: Path, tmp_path: Path):
        key = canonical_path(tmp_path / "a.txt")
        state_path.parent.mkdir(parents=True)
        state_path.write_text(json.dumps({key: "sha256:abc"}), encoding="utf-8")

        store = FingerprintStore(state_path)
        store.load()

        assert store.get(tmp_path / "a.txt") == "sha256:abc"


class TestMutations:
    """Tests for set/remove/clear persistence."""

    def test_set_persists(self, state_path: Path, tmp_path: Path):
        store = FingerprintStore(state_path)
        store.set(tmp_path / "a.txt", "sha256:1")

        on_disk = json.loads(state_path.read_text(encoding="utf-8"))

        assert on_disk == {canonical_path(tmp_path / "a.txt"): "sha256:1"}

    def test_round_trip_through_new_instance(self, state_path: Path, tmp_path: Path):
        FingerprintStore(state_path).set(tmp_path / "a.txt", "sha256:1")

        reloaded = FingerprintStore(state_path)
        reloaded.load()

        assert reloaded.get(tmp_path / "a.txt") == "sha256:1"
        assert (tmp_path / "a.txt") in reloaded

    def test_remove_reports_existence(self, state_path: Path, tmp_path: Path):
        store = FingerprintStore(state_path)
        store.set(tmp_path / "a.txt", "sha256:1")

        assert store.remove(tmp_path / "a.txt") is True
        assert store.remove(tmp_path / "a.txt") is False
        assert json.loads(state_path.read_text(encoding="utf-8")) == {}

    def test_clear(self, state_path: Path, tmp_path: Path):
        store = FingerprintStore(state_path)
        store.set(tmp_path / "a.txt", "sha256:1")
        store.set(tmp_path / "b.txt", "sha256:2")

        store.clear()

        assert len(store) == 0
        assert json.loads(state_path.read_text(encoding="utf-8")) == {}

    def test_paths_under(self, state_path: Path, tmp_path: Path):
        store = FingerprintStore(state_path)
        store.set(tmp_path / "src" / "a.txt", "h1")
        store.set(tmp_path / "src2" / "b.txt", "h2")

        assert store.paths_under(tmp_path / "src") == {canonical_path(tmp_path / "src" / "a.txt")}

    def test_no_temp_file_left_behind(self, state_path: Path, tmp_path: Path):
        store = FingerprintStore(state_path)
        store.set(tmp_path / "a.txt", "h")

        assert list(state_path.parent.iterdir()) == [state_path]

    def test_concurrent_sets_all_persist(self, state_path: Path, tmp_path: Path):
        store = FingerprintStore(state_path)

        def worker(i: int) -> None:
            store.set(tmp_path / f"f{i}.txt", f"h{i}")

        threads = [threading.Thread(target=worker, args=(i,)) for i in range(20)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(json.loads(state_path.read_text(encoding="utf-8"))) == 20


class TestSaveFailure:
    """Tests for persistence failures."""

    def test_failed_save_keeps_memory(self, tmp_path: Path):
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory", encoding="utf-8")
        store = FingerprintStore(blocker / "fingerprints.json")

        store.set(tmp_path / "a.txt", "h")

        assert store.get(tmp_path / "a.txt") == "h"
        assert store.save() is False

    def test_strict_save_raises(self, tmp_path: Path):
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory", encoding="utf-8")
        store = FingerprintStore(blocker / "fingerprints.json")
        store.load()

        with pytest.raises(PersistenceError):
            store.save(strict=True)


class TestFlush:
    """Tests for deferred persistence on shutdown."""

    def test_clean_store_writes_nothing(self, state_path: Path):
        store = FingerprintStore(state_path)
        store.load()

        assert store.dirty is False
        assert store.flush() is False
        assert not state_path.exists()

    def test_failed_save_leaves_store_dirty(self, tmp_path: Path):
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory", encoding="utf-8")
        store = FingerprintStore(blocker / "fingerprints.json")

        store.set(tmp_path / "a.txt", "h")

        assert store.dirty is True

    def test_flush_retries_outstanding_save(self, tmp_path: Path):
        target_dir = tmp_path / "state"
        target_dir.write_text("in the way", encoding="utf-8")
        store = FingerprintStore(target_dir / "fingerprints.json")
        store.set(tmp_path / "a.txt", "h")

        target_dir.unlink()

        assert store.flush() is True
        assert store.dirty is False
        data = json.loads((target_dir / "fingerprints.json").read_text(encoding="utf-8"))
        assert data == {canonical_path(tmp_path / "a.txt"): "h"}
