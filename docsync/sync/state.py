# docsync/sync/state.py
"""
Persistent fingerprint store.

Manages reading and writing of the fingerprint state file: a flat JSON object
of canonical source path -> fingerprint string. The file is human-readable and
safe to delete (the next run then reprocesses everything).

Key responsibilities:
- Load once at engine start (missing or malformed file -> empty store)
- Upsert/remove entries, persisting after every mutation
- Serialize all writes through one lock
- Write atomically (temp file + rename) so the file is never half-written

Key non-responsibilities:
- NO change detection (that's ChangeDetector's job)
- NO transform calls
"""

from __future__ import annotations

import json
import os
import threading
from pathlib import Path
from typing import Dict, Optional, Union

from pydantic import RootModel, ValidationError

from docsync.core.exceptions import PersistenceError
from docsync.logging.logger import get_logger
from docsync.logging.tags import STATE

from .mapping import canonical_path

logger = get_logger(__name__)


class FingerprintMap(RootModel[Dict[str, str]]):
    """On-disk schema: a flat mapping of source path to fingerprint."""


class FingerprintStore:
    """
    Durable mapping path -> content fingerprint.

    Owned by exactly one engine instance. External edits to the backing file
    while the engine runs are not reconciled.

    Usage:
        store = FingerprintStore(Path(".docsync/fingerprints.json"))
        store.load()

        store.set("/abs/src/a.txt", "sha256:...")   # persists
        store.get("/abs/src/a.txt")
        store.remove("/abs/src/a.txt")              # persists
    """

    def __init__(self, state_path: Union[str, Path]) -> None:
        self._path = Path(state_path)
        self._entries: Dict[str, str] = {}
        self._loaded = False
        self._dirty = False
        self._lock = threading.RLock()

    @property
    def path(self) -> Path:
        """Get state file path."""
        return self._path

    @property
    def dirty(self) -> bool:
        """True if the in-memory mapping has changes not yet on disk."""
        return self._dirty

    # -------------------------------------------------------------------------
    # Load / save
    # -------------------------------------------------------------------------

    def load(self) -> Dict[str, str]:
        """
        Load the mapping from disk.

        Never fails the caller: a missing file gives an empty store, a
        malformed one logs a warning and gives an empty store.
        """
        with self._lock:
            entries: Dict[str, str] = {}
            if self._path.exists():
                try:
                    with self._path.open("r", encoding="utf-8") as f:
                        data = json.load(f)
                    entries = FingerprintMap.model_validate(data).root
                    logger.info(f"{STATE} Loaded {len(entries)} fingerprints from {self._path}")
                except (OSError, ValueError, ValidationError) as e:
                    logger.warning(f"{STATE} Failed to load fingerprints, starting empty: {e}")
                    entries = {}
            else:
                logger.info(f"{STATE} No fingerprint file at {self._path}, starting empty")

            self._entries = {canonical_path(k): v for k, v in entries.items()}
            self._loaded = True
            self._dirty = False
            return dict(self._entries)

    def save(self, strict: bool = False) -> bool:
        """
        Serialize the whole mapping and atomically replace the backing file.

        A failure is logged and leaves the in-memory mapping untouched; the
        next successful save re-persists the correct state.

        Args:
            strict: Raise PersistenceError instead of returning False.

        Returns:
            True if the file was written.
        """
        with self._lock:
            self._ensure_loaded()
            temp_path = self._path.with_name(f"{self._path.name}.tmp")
            try:
                self._path.parent.mkdir(parents=True, exist_ok=True)
                with temp_path.open("w", encoding="utf-8") as f:
                    json.dump(self._entries, f, indent=2, sort_keys=True, ensure_ascii=False)
                    f.flush()
                    os.fsync(f.fileno())
                temp_path.replace(self._path)
            except OSError as e:
                try:
                    temp_path.unlink(missing_ok=True)
                except OSError:
                    logger.debug(f"{STATE} Could not remove temp file {temp_path}")
                error = PersistenceError(f"Failed to save fingerprints: {e}", path=self._path)
                if strict:
                    raise error from e
                logger.error(f"{STATE} {error}")
                return False

            self._dirty = False
            logger.debug(f"{STATE} Saved {len(self._entries)} fingerprints to {self._path}")
            return True

    def flush(self) -> bool:
        """Save if the mapping has changes that are not on disk yet."""
        with self._lock:
            if not self._dirty:
                return True
            return self.save()

    def _ensure_loaded(self) -> None:
        if not self._loaded:
            self.load()

    # -------------------------------------------------------------------------
    # Mapping operations
    # -------------------------------------------------------------------------

    def get(self, path: Union[str, Path]) -> Optional[str]:
        """Get the stored fingerprint, or None."""
        with self._lock:
            self._ensure_loaded()
            return self._entries.get(canonical_path(path))

    def set(self, path: Union[str, Path], fingerprint: str) -> None:
        """Upsert a fingerprint and persist."""
        with self._lock:
            self._ensure_loaded()
            self._entries[canonical_path(path)] = fingerprint
            self._dirty = True
            self.save()

    def remove(self, path: Union[str, Path]) -> bool:
        """
        Delete an entry and persist.

        Returns:
            True if an entry existed.
        """
        with self._lock:
            self._ensure_loaded()
            existed = self._entries.pop(canonical_path(path), None) is not None
            if existed:
                self._dirty = True
            self.save()
            return existed

    def clear(self) -> None:
        """Drop every entry and persist."""
        with self._lock:
            self._entries = {}
            self._loaded = True
            self._dirty = True
            self.save()

    def snapshot(self) -> Dict[str, str]:
        """Copy of the current mapping."""
        with self._lock:
            self._ensure_loaded()
            return dict(self._entries)

    def paths_under(self, root: Union[str, Path]) -> set[str]:
        """Tracked paths located inside root."""
        prefix = canonical_path(root).rstrip(os.sep) + os.sep
        with self._lock:
            self._ensure_loaded()
            return {p for p in self._entries if p.startswith(prefix)}

    def __contains__(self, path: object) -> bool:
        if not isinstance(path, (str, Path)):
            return False
        return self.get(path) is not None

    def __len__(self) -> int:
        with self._lock:
            self._ensure_loaded()
            return len(self._entries)


__all__ = ["FingerprintMap", "FingerprintStore"]
