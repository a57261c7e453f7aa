# docsync/sync/watcher.py
"""
Live filesystem events for continuous mode.

Wraps a watchdog Observer scheduled recursively on the source root and turns
its callbacks into WatchEvent values. Filtering happens here, before any work
is handed off:
- directory create/modify events are dropped
- hidden entries (any path component starting with ".") are dropped
- entries deeper than max_depth directories below the root are dropped
- symbolic links are not reported (created/modified) unless follow_symlinks
- a move inside the tree becomes REMOVED(old) + ADDED(new)
- a directory deleted or moved out of the tree becomes REMOVED for every
  tracked file below it

Session lifecycle: STOPPED -> STARTING -> READY -> STOPPED. Only one root per
session; switching roots means stop() then a new session.
"""

from __future__ import annotations

import os
import threading
from enum import Enum
from pathlib import Path
from typing import Callable, Iterable, Optional, Union

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

from docsync.core.exceptions import SyncSetupError, WatchBackendError
from docsync.logging.logger import get_logger
from docsync.logging.tags import WATCH

from .mapping import canonical_path
from .models import EventKind, WatchEvent

logger = get_logger(__name__)

DEFAULT_MAX_DEPTH = 10

EventCallback = Callable[[WatchEvent], None]
ErrorCallback = Callable[[Exception], None]
TrackedLookup = Callable[[str], Iterable[str]]


class WatchState(str, Enum):
    """Watch session lifecycle state."""

    STOPPED = "stopped"
    STARTING = "starting"
    READY = "ready"


class TreeEventHandler(FileSystemEventHandler):
    """Translates watchdog events under one root into WatchEvents."""

    def __init__(
        self,
        root: str,
        on_event: EventCallback,
        on_error: ErrorCallback,
        max_depth: int = DEFAULT_MAX_DEPTH,
        ignore_hidden: bool = True,
        follow_symlinks: bool = False,
        tracked_under: Optional[TrackedLookup] = None,
    ) -> None:
        """
        Args:
            tracked_under: Returns the tracked file paths below a directory.
                Needed because a directory removed or moved out of the tree
                arrives as one directory event, with nothing for its files.
        """
        super().__init__()
        self._root = canonical_path(root)
        self._on_event = on_event
        self._on_error = on_error
        self._max_depth = max_depth
        self._ignore_hidden = ignore_hidden
        self._follow_symlinks = follow_symlinks
        self._tracked_under = tracked_under

    def _relative(self, path: str) -> Optional[Path]:
        try:
            rel = Path(canonical_path(path)).relative_to(self._root)
        except ValueError:
            return None
        return rel if rel.parts else None

    def _visible(self, rel: Path) -> bool:
        return not (self._ignore_hidden and any(part.startswith(".") for part in rel.parts))

    def accepts(self, path: str) -> bool:
        """True if an event for path should be delivered."""
        rel = self._relative(path)
        if rel is None or not self._visible(rel):
            return False
        return len(rel.parts) - 1 <= self._max_depth

    def _emit(self, path: str, kind: EventKind) -> None:
        if not self.accepts(path):
            return
        if kind != EventKind.REMOVED and not self._follow_symlinks and os.path.islink(path):
            return
        self._dispatch(path, kind)

    def _dispatch(self, path: str, kind: EventKind) -> None:
        try:
            self._on_event(WatchEvent(canonical_path(path), kind))
        except Exception as e:
            logger.error(f"{WATCH} Event dispatch failed for {path}: {e}")
            self._on_error(WatchBackendError(f"Event dispatch failed for {path}: {e}"))

    def _remove_tree(self, directory: str) -> None:
        """REMOVED for every tracked file below a vanished directory."""
        rel = self._relative(directory)
        if rel is None or not self._visible(rel) or self._tracked_under is None:
            return
        try:
            tracked = sorted(self._tracked_under(canonical_path(directory)))
        except Exception as e:
            logger.error(f"{WATCH} Could not list tracked files under {directory}: {e}")
            self._on_error(WatchBackendError(f"Could not list tracked files under {directory}: {e}"))
            return
        logger.info(f"{WATCH} Directory {directory} removed, {len(tracked)} tracked files")
        for path in tracked:
            # Depth is not checked: batch runs may have tracked deeper files.
            if self._relative(path) is not None:
                self._dispatch(path, EventKind.REMOVED)

    def on_created(self, event: FileSystemEvent) -> None:
        if not event.is_directory:
            self._emit(os.fsdecode(event.src_path), EventKind.ADDED)

    def on_modified(self, event: FileSystemEvent) -> None:
        if not event.is_directory:
            self._emit(os.fsdecode(event.src_path), EventKind.MODIFIED)

    def on_deleted(self, event: FileSystemEvent) -> None:
        src = os.fsdecode(event.src_path)
        if event.is_directory:
            self._remove_tree(src)
        else:
            self._emit(src, EventKind.REMOVED)

    def on_moved(self, event: FileSystemEvent) -> None:
        src = os.fsdecode(event.src_path)
        dest = os.fsdecode(event.dest_path)
        if event.is_directory:
            # Inside the tree watchdog follows up with per-file moves.
            if self._relative(dest) is None:
                self._remove_tree(src)
            return
        self._emit(src, EventKind.REMOVED)
        self._emit(dest, EventKind.ADDED)


class WatchSession:
    """
    One watch session over one source root.

    Usage:
        session = WatchSession(root, on_event=reconciler.handle_event,
                               on_error=bus.publish_error)
        session.start()      # raises SyncSetupError if root is unusable
        ...
        session.stop()
    """

    def __init__(
        self,
        root: Union[str, Path],
        on_event: EventCallback,
        on_error: ErrorCallback,
        max_depth: int = DEFAULT_MAX_DEPTH,
        ignore_hidden: bool = True,
        observer_factory: Optional[Callable[[], object]] = None,
        follow_symlinks: bool = False,
        tracked_under: Optional[TrackedLookup] = None,
    ) -> None:
        self._root = canonical_path(root)
        self._on_event = on_event
        self._on_error = on_error
        self._max_depth = max_depth
        self._ignore_hidden = ignore_hidden
        self._follow_symlinks = follow_symlinks
        self._tracked_under = tracked_under
        self._observer_factory = observer_factory or Observer
        self._observer = None
        self._state = WatchState.STOPPED
        self._lock = threading.Lock()

    @property
    def root(self) -> str:
        return self._root

    @property
    def state(self) -> WatchState:
        return self._state

    @property
    def is_watching(self) -> bool:
        return self._state == WatchState.READY

    def start(self) -> None:
        """
        Begin watching.

        Setup failures are raised synchronously as SyncSetupError and leave
        the session STOPPED. Starting a running session is a no-op.
        """
        with self._lock:
            if self._state != WatchState.STOPPED:
                return

            if not os.path.exists(self._root):
                raise SyncSetupError(f"Source directory does not exist: {self._root}")
            if not os.path.isdir(self._root):
                raise SyncSetupError(f"Source path is not a directory: {self._root}")

            logger.info(f"{WATCH} Starting watch on {self._root}")
            self._state = WatchState.STARTING
            handler = TreeEventHandler(
                self._root,
                on_event=self._on_event,
                on_error=self._on_error,
                max_depth=self._max_depth,
                ignore_hidden=self._ignore_hidden,
                follow_symlinks=self._follow_symlinks,
                tracked_under=self._tracked_under,
            )
            observer = self._observer_factory()
            try:
                observer.schedule(handler, self._root, recursive=True)
                observer.start()
            except Exception as e:
                self._state = WatchState.STOPPED
                raise SyncSetupError(f"Failed to start watching {self._root}: {e}") from e

            self._observer = observer
            self._state = WatchState.READY
            logger.info(f"{WATCH} Watch ready on {self._root}")

    def stop(self, timeout: float = 10.0) -> None:
        """Stop watching. Stopping a stopped session is a no-op."""
        with self._lock:
            observer = self._observer
            self._observer = None
            was_running = self._state != WatchState.STOPPED
            self._state = WatchState.STOPPED

        if observer is not None:
            try:
                observer.stop()
                observer.join(timeout=timeout)
            except Exception as e:
                logger.warning(f"{WATCH} Error while stopping observer: {e}")
        if was_running:
            logger.info(f"{WATCH} Watch stopped on {self._root}")

    def check_health(self) -> bool:
        """
        Report whether the backend thread is still alive.

        A READY session whose observer died is reported once through the
        error callback and moved to STOPPED.
        """
        with self._lock:
            observer = self._observer
            if self._state != WatchState.READY or observer is None:
                return False
            if observer.is_alive():
                return True
            self._observer = None
            self._state = WatchState.STOPPED

        error = WatchBackendError(f"Watch backend for {self._root} stopped unexpectedly")
        logger.error(f"{WATCH} {error}")
        self._on_error(error)
        return False


__all__ = [
    "DEFAULT_MAX_DEPTH",
    "WatchState",
    "TreeEventHandler",
    "WatchSession",
]
