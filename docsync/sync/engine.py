# docsync/sync/engine.py
"""
SyncEngine: the control surface consumed by outer layers (CLI, HTTP, UI).

Operations:
- start() / stop() / is_watching: continuous mode lifecycle
- set_source_dir(): switch the watched root
- process_file(): one path, optionally forced, raising on failure
- process_all(): full-tree reconciliation, optionally forced
- subscribe() / on_error() / channel(): notification surface
- status(), supported_formats(), list_files(): inspection

Owns exactly one FingerprintStore, one DedupGuard, one Reconciler (with its
worker pool) and at most one WatchSession.
"""

from __future__ import annotations

import os
import threading
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Callable, List, Optional, Union

from docsync.config.schema import SyncConfig
from docsync.core.exceptions import SyncSetupError, UnsupportedFileError
from docsync.logging.logger import get_logger
from docsync.logging.tags import SYNC
from docsync.transform.markdown import MarkdownTransformer

from .bus import EventBus
from .guard import DedupGuard
from .mapping import canonical_path
from .models import ProcessingResult
from .reconciler import IN_PROGRESS, Reconciler
from .state import FingerprintStore
from .watcher import WatchSession, WatchState

logger = get_logger(__name__)


@dataclass(frozen=True)
class FileInfo:
    """One entry of a directory listing."""

    name: str
    path: str
    size: int
    mtime: datetime
    ext: str


@dataclass
class FileListing:
    """Top-level files of the source and output directories."""

    source_files: List[FileInfo] = field(default_factory=list)
    output_files: List[FileInfo] = field(default_factory=list)


@dataclass(frozen=True)
class EngineStatus:
    """Point-in-time view of the engine."""

    watching: bool
    watch_state: WatchState
    source_dir: str
    output_dir: str
    tracked_files: int
    supported_formats: List[str]


def _list_dir(directory: Union[str, Path]) -> List[FileInfo]:
    files: List[FileInfo] = []
    if not os.path.isdir(directory):
        return files
    with os.scandir(directory) as it:
        for entry in sorted(it, key=lambda e: e.name):
            if not entry.is_file():
                continue
            stat = entry.stat()
            files.append(
                FileInfo(
                    name=entry.name,
                    path=entry.path,
                    size=stat.st_size,
                    mtime=datetime.fromtimestamp(stat.st_mtime),
                    ext=Path(entry.name).suffix.lower(),
                )
            )
    return files


class SyncEngine:
    """
    Incremental one-way synchronization of a source tree to an output tree.

    Usage:
        engine = SyncEngine(SyncConfig(source_dir="docs", output_dir="docs_md"))
        engine.subscribe(lambda result: print(result.to_dict()))
        engine.process_all()
        engine.start()
        ...
        engine.close()
    """

    def __init__(
        self,
        config: SyncConfig,
        transformer=None,
        *,
        observer_factory: Optional[Callable[[], object]] = None,
    ) -> None:
        """
        Args:
            config: Engine settings.
            transformer: Transform collaborator. Defaults to MarkdownTransformer.
            observer_factory: Builds the watch backend observer (tests inject
                a fake here).
        """
        self._config = config
        self._transformer = transformer or MarkdownTransformer()
        self._observer_factory = observer_factory
        self._bus = EventBus()
        self._guard = DedupGuard()
        self._store = FingerprintStore(config.resolved_state_path())
        self._store.load()
        self._reconciler = Reconciler(
            source_dir=config.source_dir,
            output_dir=config.output_dir,
            transformer=self._transformer,
            store=self._store,
            bus=self._bus,
            guard=self._guard,
            target_ext=config.target_ext,
            extensions=config.extensions,
            max_workers=config.max_workers,
            collision_policy=config.collision_policy,
            follow_symlinks=config.follow_symlinks,
        )
        self._session: Optional[WatchSession] = None
        self._lock = threading.RLock()
        self._closed = False

    # -------------------------------------------------------------------------
    # Accessors
    # -------------------------------------------------------------------------

    @property
    def config(self) -> SyncConfig:
        return self._config

    @property
    def store(self) -> FingerprintStore:
        return self._store

    @property
    def reconciler(self) -> Reconciler:
        return self._reconciler

    @property
    def source_dir(self) -> str:
        return self._reconciler.source_dir

    @property
    def output_dir(self) -> Path:
        return self._reconciler.output_dir

    @property
    def is_watching(self) -> bool:
        session = self._session
        return session is not None and session.is_watching

    @property
    def watch_state(self) -> WatchState:
        session = self._session
        return session.state if session is not None else WatchState.STOPPED

    # -------------------------------------------------------------------------
    # Notification surface
    # -------------------------------------------------------------------------

    def subscribe(self, callback: Callable[[ProcessingResult], None]) -> Callable[[], None]:
        """Receive every ProcessingResult. Returns an unsubscribe function."""
        return self._bus.subscribe(callback)

    def on_error(self, callback: Callable[[Exception], None]) -> Callable[[], None]:
        """Receive engine-level errors. Returns an unsubscribe function."""
        return self._bus.on_error(callback)

    def channel(self, maxsize: int = 0):
        """Open a queue of BusMessage (results and errors)."""
        return self._bus.channel(maxsize)

    # -------------------------------------------------------------------------
    # Watch lifecycle
    # -------------------------------------------------------------------------

    def start(self) -> None:
        """
        Start continuous mode.

        Raises:
            SyncSetupError: If the source root cannot be watched.
        """
        with self._lock:
            if self._closed:
                raise SyncSetupError("Engine is closed")
            if self._session is not None and self._session.state != WatchState.STOPPED:
                return
            session = WatchSession(
                self._reconciler.source_dir,
                on_event=self._reconciler.handle_event,
                on_error=self._bus.publish_error,
                max_depth=self._config.watch_depth,
                ignore_hidden=self._config.ignore_hidden,
                observer_factory=self._observer_factory,
                follow_symlinks=self._config.follow_symlinks,
                tracked_under=self._store.paths_under,
            )
            session.start()
            self._session = session

    def stop(self) -> None:
        """
        Stop continuous mode.

        In-flight work completes (or fails) first; the fingerprint store is
        then persisted if a save is outstanding.
        """
        with self._lock:
            session = self._session
            if session is not None:
                session.stop()
            self._reconciler.drain()
            self._store.flush()
            logger.info(f"{SYNC} Engine stopped")

    def set_source_dir(self, directory: Union[str, Path]) -> str:
        """
        Switch the watched root.

        Validates the new root before touching the running session, stops
        the current session (persisting state), then starts a new one.

        Returns:
            The canonical new source root.

        Raises:
            SyncSetupError: If the directory is missing or not a directory.
        """
        new_root = canonical_path(Path(directory).expanduser())
        if not os.path.exists(new_root):
            raise SyncSetupError(f"Directory does not exist: {new_root}")
        if not os.path.isdir(new_root):
            raise SyncSetupError(f"Not a directory: {new_root}")

        with self._lock:
            self.stop()
            self._session = None
            self._reconciler.retarget(new_root)
            self._config = self._config.model_copy(update={"source_dir": Path(new_root)})
            logger.info(f"{SYNC} Source directory set to {new_root}")
            self.start()
        return new_root

    # -------------------------------------------------------------------------
    # Processing requests
    # -------------------------------------------------------------------------

    def process_file(self, path: Union[str, Path], force: bool = False) -> ProcessingResult:
        """
        Process one file now, on the calling thread.

        Raises:
            UnsupportedFileError: If the path is not eligible.
            TransformError: If the transform failed (after the failed result
                was published).
        """
        key = canonical_path(path)
        if not self._reconciler.is_eligible(key):
            raise UnsupportedFileError(
                f"Unsupported file format: {Path(key).suffix or '(none)'}", input_path=key
            )
        result = self._reconciler.process_path(key, force=force, raise_on_failure=True)
        if result is None:
            return ProcessingResult.skipped(key, IN_PROGRESS)
        return result

    def process_all(self, force: bool = False, prune: bool = False) -> List[ProcessingResult]:
        """Reconcile every eligible file. Never raises for a single path."""
        return self._reconciler.process_all(force=force, prune=prune)

    def handle_deletion(self, path: Union[str, Path]) -> Optional[ProcessingResult]:
        """Mirror a source deletion into the output tree and state."""
        return self._reconciler.handle_deletion(path)

    def forget(self) -> None:
        """Drop all fingerprints so the next run reprocesses everything."""
        self._store.clear()

    # -------------------------------------------------------------------------
    # Inspection
    # -------------------------------------------------------------------------

    def supported_formats(self) -> List[str]:
        formats = set(self._transformer.supported_extensions)
        if self._config.extensions is not None:
            formats &= set(self._config.extensions)
        return sorted(formats)

    def status(self) -> EngineStatus:
        session = self._session
        if session is not None:
            session.check_health()
        return EngineStatus(
            watching=self.is_watching,
            watch_state=self.watch_state,
            source_dir=self.source_dir,
            output_dir=str(self.output_dir),
            tracked_files=len(self._store),
            supported_formats=self.supported_formats(),
        )

    def list_files(self) -> FileListing:
        return FileListing(
            source_files=_list_dir(self.source_dir),
            output_files=_list_dir(self.output_dir),
        )

    # -------------------------------------------------------------------------
    # Shutdown
    # -------------------------------------------------------------------------

    def close(self) -> None:
        """Stop watching, persist state and release the worker pool."""
        with self._lock:
            if self._closed:
                return
            self.stop()
            self._reconciler.shutdown(wait=True)
            self._closed = True

    def __enter__(self) -> "SyncEngine":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


__all__ = ["SyncEngine", "EngineStatus", "FileInfo", "FileListing"]
