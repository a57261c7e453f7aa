# docsync/sync/reconciler.py
"""
Reconciler: ties detection, dedup, transform and state together.

Operating modes:
- handle_event(): continuous mode. Called from the watch backend's thread;
  claims the path and hands the work to the worker pool, never blocking the
  callback on I/O.
- process_all(): batch mode. Enumerates the tree and runs the same
  single-path routine for every eligible file on the bounded pool, returning
  one result per file.
- process_path(): one explicit request, optionally raising on failure.
- handle_deletion(): mirrors a source removal into the output tree and the
  fingerprint store.

Key rules:
- At most one in-flight attempt per path; a second event for a claimed path
  is dropped, not queued.
- The claim is released on every exit path.
- A removal for a claimed path is deferred to the claim holder, never
  dropped.
- State is updated only after a successful transform.
- Per-path failures never abort a batch or stop watching.
"""

from __future__ import annotations

import os
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from concurrent.futures import wait as wait_futures
from datetime import datetime
from pathlib import Path
from typing import Iterable, List, Optional, Union

from docsync.config.schema import CollisionPolicy
from docsync.core.exceptions import TransformError
from docsync.logging.logger import get_logger
from docsync.logging.tags import SYNC

from .bus import EventBus
from .detector import ChangeDetector
from .guard import DedupGuard
from .hashing import compute_fingerprint
from .mapping import canonical_path, find_collisions, output_path
from .models import EventKind, ProcessingResult, SyncSummary, WatchEvent
from .scanner import FileScanner
from .state import FingerprintStore

logger = get_logger(__name__)

NO_CHANGES = "no changes detected"
IN_PROGRESS = "already in progress"


class Reconciler:
    """
    Orchestrates the incremental pipeline for one source/output pair.

    Usage:
        reconciler = Reconciler(
            source_dir="/data/src",
            output_dir="/data/out",
            transformer=MarkdownTransformer(),
            store=store,
            bus=bus,
        )
        results = reconciler.process_all()
    """

    def __init__(
        self,
        *,
        source_dir: Union[str, Path],
        output_dir: Union[str, Path],
        transformer,
        store: FingerprintStore,
        bus: Optional[EventBus] = None,
        guard: Optional[DedupGuard] = None,
        target_ext: str = ".md",
        extensions: Optional[Iterable[str]] = None,
        max_workers: int = 4,
        collision_policy: CollisionPolicy = CollisionPolicy.WARN,
        follow_symlinks: bool = False,
    ) -> None:
        """
        Args:
            source_dir: Root of the source tree.
            output_dir: Root of the output tree.
            transformer: Collaborator with is_eligible() and transform().
            store: Fingerprint store (loaded lazily if not yet loaded).
            bus: Where results and errors are published.
            guard: In-flight set; a private one is created if omitted.
            target_ext: Extension of every output file.
            extensions: Optional restriction of eligible extensions.
            max_workers: Bound on concurrently processed distinct paths.
            collision_policy: Batch handling of output-path collisions.
            follow_symlinks: Descend into symlinked directories during batch
                enumeration.
        """
        self._source_dir = canonical_path(source_dir)
        self._output_dir = Path(output_dir)
        self._transformer = transformer
        self._store = store
        self._bus = bus or EventBus()
        self._guard = guard or DedupGuard()
        self._target_ext = target_ext
        self._extensions = (
            frozenset(e.lower() for e in extensions) if extensions is not None else None
        )
        self._collision_policy = CollisionPolicy(collision_policy)
        self._detector = ChangeDetector(store, self.output_path_for)
        self._scanner = FileScanner(self.is_eligible, follow_symlinks=follow_symlinks)
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="docsync"
        )
        self._pending: set[Future] = set()
        self._pending_lock = threading.Lock()
        # Removals that arrived while their path was claimed; applied by the
        # claim holder before it releases.
        self._deferred_removals: set[str] = set()
        self._removal_lock = threading.Lock()

    # -------------------------------------------------------------------------
    # Properties
    # -------------------------------------------------------------------------

    @property
    def source_dir(self) -> str:
        return self._source_dir

    @property
    def output_dir(self) -> Path:
        return self._output_dir

    @property
    def guard(self) -> DedupGuard:
        return self._guard

    @property
    def detector(self) -> ChangeDetector:
        return self._detector

    def retarget(self, source_dir: Union[str, Path]) -> None:
        """Point at a new source root. Callers drain in-flight work first."""
        self._source_dir = canonical_path(source_dir)

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def is_eligible(self, path: Union[str, Path]) -> bool:
        path_str = os.fspath(path)
        if self._extensions is not None and Path(path_str).suffix.lower() not in self._extensions:
            return False
        return self._transformer.is_eligible(path_str)

    def output_path_for(self, path: Union[str, Path]) -> Path:
        return output_path(path, self._source_dir, self._output_dir, self._target_ext)

    def _publish(self, result: ProcessingResult) -> ProcessingResult:
        self._bus.publish_result(result)
        return result

    def _submit(self, fn, *args) -> Optional[Future]:
        try:
            future = self._executor.submit(fn, *args)
        except RuntimeError as e:
            logger.warning(f"{SYNC} Worker pool unavailable: {e}")
            return None
        with self._pending_lock:
            self._pending.add(future)
        future.add_done_callback(self._forget_future)
        return future

    def _forget_future(self, future: Future) -> None:
        with self._pending_lock:
            self._pending.discard(future)

    # -------------------------------------------------------------------------
    # Single path
    # -------------------------------------------------------------------------

    def process_path(
        self,
        path: Union[str, Path],
        force: bool = False,
        raise_on_failure: bool = False,
    ) -> Optional[ProcessingResult]:
        """
        Process one path on the calling thread.

        Returns None when the path is not eligible or is already in flight.

        Raises:
            TransformError: If raise_on_failure and processing failed (the
                failed result is still published first).
        """
        key = canonical_path(path)
        if not self.is_eligible(key):
            return None
        if not self._guard.acquire(key):
            logger.debug(f"{SYNC} {key} already in flight, dropping request")
            return None
        try:
            return self._process_claimed(key, force, raise_on_failure)
        finally:
            self._finish(key)

    def _run_claimed(self, key: str, force: bool) -> ProcessingResult:
        """Worker entrypoint: the claim was taken by the submitter."""
        try:
            return self._process_claimed(key, force, raise_on_failure=False)
        except Exception as e:
            logger.exception(f"{SYNC} Unexpected error processing {key}")
            self._bus.publish_error(e)
            return self._publish(ProcessingResult.failed(key, str(e)))
        finally:
            self._finish(key)

    def _finish(self, key: str) -> None:
        """
        Apply deferred removals for key, then release its claim.

        The check and the release happen under one lock, so a removal is
        either deferred to this holder or finds the path unclaimed.
        """
        while True:
            with self._removal_lock:
                if key not in self._deferred_removals:
                    self._guard.release(key)
                    return
                self._deferred_removals.discard(key)
            if os.path.exists(key):
                logger.debug(f"{SYNC} {key} reappeared, dropping deferred removal")
                continue
            logger.info(f"{SYNC} Applying deferred removal of {key}")
            try:
                self._delete_claimed(key)
            except Exception as e:
                logger.exception(f"{SYNC} Deferred removal of {key} failed")
                self._bus.publish_error(e)

    def _process_claimed(
        self, key: str, force: bool, raise_on_failure: bool
    ) -> ProcessingResult:
        try:
            out = str(self.output_path_for(key))
        except ValueError:
            message = f"{key} is outside source root {self._source_dir}"
            result = self._publish(ProcessingResult.failed(key, message))
            if raise_on_failure:
                raise TransformError(message, input_path=key)
            return result

        if not self._detector.needs_processing(key, force=force):
            logger.debug(f"{SYNC} Skipping {key}: {NO_CHANGES}")
            return self._publish(ProcessingResult.skipped(key, NO_CHANGES, output_path=out))

        try:
            fingerprint = compute_fingerprint(key)
            outcome = self._transformer.transform(key, out)
            if not outcome.success:
                raise TransformError(outcome.error or "transform reported failure", input_path=key)
        except Exception as e:
            logger.warning(f"{SYNC} Failed to process {key}: {e}")
            result = self._publish(ProcessingResult.failed(key, str(e), output_path=out))
            if raise_on_failure:
                if isinstance(e, TransformError):
                    raise
                raise TransformError(str(e), input_path=key) from e
            return result

        self._store.set(key, fingerprint)
        logger.info(f"{SYNC} Converted {key} -> {out}")
        return self._publish(ProcessingResult.converted(key, out, outcome.size))

    # -------------------------------------------------------------------------
    # Continuous mode
    # -------------------------------------------------------------------------

    def handle_event(self, event: WatchEvent) -> Optional[Future]:
        """
        Route one watch event onto the worker pool.

        Returns the scheduled future, or None if the event was filtered out
        (ineligible, or the path is already in flight). A removal for a path
        in flight is never dropped: the claim holder applies it.
        """
        if event.kind == EventKind.REMOVED:
            if not self.is_eligible(event.path):
                return None
            return self._submit(self.handle_deletion, event.path)

        key = canonical_path(event.path)
        if not self.is_eligible(key):
            return None
        if not self._guard.acquire(key):
            logger.debug(f"{SYNC} {key} already in flight, dropping {event.kind.value} event")
            return None

        future = self._submit(self._run_claimed, key, False)
        if future is None:
            self._guard.release(key)
        return future

    # -------------------------------------------------------------------------
    # Batch mode
    # -------------------------------------------------------------------------

    def process_all(
        self,
        force: bool = False,
        prune: bool = False,
        cancel: Optional[threading.Event] = None,
    ) -> List[ProcessingResult]:
        """
        Reconcile the whole tree.

        Args:
            force: Reprocess every eligible file regardless of state.
            prune: Also propagate deletions for tracked files that no longer
                exist on disk.
            cancel: Event that stops enumeration early.

        Returns:
            One result per eligible file (enumeration order), followed by
            any deletion results from pruning.
        """
        started_at = datetime.now()
        logger.info(f"{SYNC} Processing all files under {self._source_dir} (force={force})")
        scan = self._scanner.scan(self._source_dir, cancel=cancel)
        for path, error in scan.errors:
            logger.warning(f"{SYNC} Could not read {path}: {error}")

        colliding: dict[str, List[str]] = {}
        for out, sources in find_collisions(
            scan.files, self._source_dir, self._output_dir, self._target_ext
        ).items():
            logger.warning(f"{SYNC} Output collision at {out}: {', '.join(sources)}")
            if self._collision_policy == CollisionPolicy.ERROR:
                for src in sources:
                    colliding[src] = sources

        pending: List[Union[ProcessingResult, Future]] = []
        for key in scan.files:
            if key in colliding:
                others = [s for s in colliding[key] if s != key]
                pending.append(
                    self._publish(
                        ProcessingResult.failed(key, f"output collides with {', '.join(others)}")
                    )
                )
                continue
            if not self._guard.acquire(key):
                pending.append(self._publish(ProcessingResult.skipped(key, IN_PROGRESS)))
                continue
            future = self._submit(self._run_claimed, key, force)
            if future is None:
                self._guard.release(key)
                pending.append(self._publish(ProcessingResult.failed(key, "worker pool unavailable")))
            else:
                pending.append(future)

        results: List[ProcessingResult] = []
        for item in pending:
            results.append(item.result() if isinstance(item, Future) else item)

        if prune and not scan.cancelled:
            results.extend(self._prune(set(scan.files)))

        summary = SyncSummary.from_results(results, started_at=started_at)
        logger.info(f"{SYNC} Batch complete: {summary}")
        return results

    def _prune(self, seen: set[str]) -> List[ProcessingResult]:
        results: List[ProcessingResult] = []
        for stale in sorted(self._store.paths_under(self._source_dir) - seen):
            if os.path.exists(stale):
                continue
            result = self.handle_deletion(stale)
            if result is not None:
                results.append(result)
        return results

    # -------------------------------------------------------------------------
    # Deletion
    # -------------------------------------------------------------------------

    def handle_deletion(self, path: Union[str, Path]) -> Optional[ProcessingResult]:
        """
        Mirror a source removal.

        Deletes the mapped output if present (publishing a deleted result),
        then drops the fingerprint entry. Idempotent: an absent output is not
        an error.

        If the path is being processed, the removal is deferred to the worker
        holding it (which applies it after its transform) and None is
        returned.
        """
        key = canonical_path(path)
        if not self.is_eligible(key):
            return None

        with self._removal_lock:
            if not self._guard.acquire(key):
                logger.debug(f"{SYNC} {key} in flight, deferring removal")
                self._deferred_removals.add(key)
                return None
        try:
            return self._delete_claimed(key)
        finally:
            self._finish(key)

    def _delete_claimed(self, key: str) -> Optional[ProcessingResult]:
        result: Optional[ProcessingResult] = None
        try:
            out = self.output_path_for(key)
        except ValueError:
            logger.debug(f"{SYNC} {key} is outside {self._source_dir}, dropping fingerprint only")
            self._store.remove(key)
            return None

        try:
            out.unlink()
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.error(f"{SYNC} Failed to delete {out}: {e}")
            self._bus.publish_error(e)
            return self._publish(ProcessingResult.failed(key, str(e), output_path=str(out)))
        else:
            logger.info(f"{SYNC} Deleted {out}")
            result = self._publish(ProcessingResult.deleted(key, str(out)))

        self._store.remove(key)
        return result

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def drain(self, timeout: Optional[float] = None) -> bool:
        """
        Wait for scheduled work to finish.

        Returns:
            True if nothing is left pending.
        """
        with self._pending_lock:
            pending = list(self._pending)
        if not pending:
            return True
        _, not_done = wait_futures(pending, timeout=timeout)
        return not not_done

    def shutdown(self, wait: bool = True) -> None:
        """Stop the worker pool."""
        self._executor.shutdown(wait=wait)


__all__ = ["Reconciler", "NO_CHANGES", "IN_PROGRESS"]
