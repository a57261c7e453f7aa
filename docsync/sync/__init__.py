# docsync/sync/__init__.py
"""
Incremental synchronization engine.

Key components:
- FingerprintStore: durable path -> fingerprint mapping (atomic saves)
- ChangeDetector: decides whether a path needs processing
- DedupGuard: at most one in-flight attempt per path
- FileScanner / WatchSession: batch enumeration and live events
- Reconciler: continuous, batch and deletion handling
- SyncEngine: control surface for outer layers

Usage:
    from docsync.sync import SyncEngine
    from docsync.config import SyncConfig

    with SyncEngine(SyncConfig(source_dir="docs", output_dir="docs_md")) as engine:
        results = engine.process_all()
"""

from docsync.sync.bus import BusMessage, EventBus
from docsync.sync.detector import ChangeDetector, ChangeReason
from docsync.sync.engine import EngineStatus, FileInfo, FileListing, SyncEngine
from docsync.sync.guard import DedupGuard
from docsync.sync.hashing import compute_content_hash, compute_fingerprint
from docsync.sync.mapping import canonical_path, find_collisions, output_path
from docsync.sync.models import (
    EventKind,
    ProcessingAction,
    ProcessingResult,
    SyncSummary,
    WatchEvent,
)
from docsync.sync.reconciler import Reconciler
from docsync.sync.scanner import FileScanner, ScanResult
from docsync.sync.state import FingerprintStore
from docsync.sync.watcher import WatchSession, WatchState

__all__ = [
    # Bus
    "BusMessage",
    "EventBus",
    # Detection
    "ChangeDetector",
    "ChangeReason",
    "compute_content_hash",
    "compute_fingerprint",
    # Mapping
    "canonical_path",
    "output_path",
    "find_collisions",
    # Models
    "EventKind",
    "WatchEvent",
    "ProcessingAction",
    "ProcessingResult",
    "SyncSummary",
    # Components
    "DedupGuard",
    "FileScanner",
    "ScanResult",
    "FingerprintStore",
    "WatchSession",
    "WatchState",
    "Reconciler",
    # Engine
    "SyncEngine",
    "EngineStatus",
    "FileInfo",
    "FileListing",
]
