# docsync/__init__.py
"""
docsync - incremental one-way sync of a source tree into a derived output tree.

Only files whose content changed are reprocessed; a persisted fingerprint
store keeps that decision correct across restarts.
"""

from docsync.config.schema import CollisionPolicy, SyncConfig
from docsync.core.exceptions import (
    DocsyncError,
    PersistenceError,
    SyncSetupError,
    TransformError,
    UnsupportedFileError,
    WatchBackendError,
)
from docsync.sync import (
    EventKind,
    FingerprintStore,
    ProcessingAction,
    ProcessingResult,
    SyncEngine,
    WatchEvent,
)
from docsync.transform import MarkdownTransformer, Transformer, TransformResult

__version__ = "0.3.0"

__all__ = [
    "__version__",
    "SyncConfig",
    "CollisionPolicy",
    "SyncEngine",
    "FingerprintStore",
    "EventKind",
    "WatchEvent",
    "ProcessingAction",
    "ProcessingResult",
    "Transformer",
    "TransformResult",
    "MarkdownTransformer",
    "DocsyncError",
    "PersistenceError",
    "SyncSetupError",
    "TransformError",
    "UnsupportedFileError",
    "WatchBackendError",
]
