# docsync/sync/models.py
"""
Value types flowing through the engine.

- WatchEvent: one filesystem notification (ephemeral)
- ProcessingResult: the terminal outcome of handling one path
- SyncSummary: counts over a batch of results
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional


class EventKind(str, Enum):
    """Kind of filesystem change reported by the watch backend."""

    ADDED = "added"
    MODIFIED = "modified"
    REMOVED = "removed"


@dataclass(frozen=True)
class WatchEvent:
    """A path plus what happened to it."""

    path: str
    kind: EventKind


class ProcessingAction(str, Enum):
    """Terminal outcome of handling one path."""

    CONVERTED = "converted"
    DELETED = "deleted"
    FAILED = "failed"
    SKIPPED = "skipped"


@dataclass
class ProcessingResult:
    """
    One terminal outcome for one path.

    Emitted exactly once per handled path; never retried internally.
    """

    input_path: str
    action: ProcessingAction
    success: bool
    output_path: Optional[str] = None
    error: Optional[str] = None
    size: Optional[int] = None
    reason: Optional[str] = None

    @classmethod
    def converted(cls, input_path: str, output_path: str, size: Optional[int]) -> "ProcessingResult":
        return cls(input_path, ProcessingAction.CONVERTED, True, output_path=output_path, size=size)

    @classmethod
    def deleted(cls, input_path: str, output_path: str) -> "ProcessingResult":
        return cls(input_path, ProcessingAction.DELETED, True, output_path=output_path)

    @classmethod
    def failed(cls, input_path: str, error: str, output_path: Optional[str] = None) -> "ProcessingResult":
        return cls(input_path, ProcessingAction.FAILED, False, output_path=output_path, error=error)

    @classmethod
    def skipped(cls, input_path: str, reason: str, output_path: Optional[str] = None) -> "ProcessingResult":
        return cls(input_path, ProcessingAction.SKIPPED, True, output_path=output_path, reason=reason)

    def to_dict(self) -> Dict[str, Any]:
        """JSON-friendly mapping for notification sinks (None values dropped)."""
        data: Dict[str, Any] = {
            "inputPath": self.input_path,
            "outputPath": self.output_path,
            "action": self.action.value,
            "success": self.success,
            "error": self.error,
            "size": self.size,
            "reason": self.reason,
        }
        return {k: v for k, v in data.items() if v is not None}


@dataclass
class SyncSummary:
    """Summary of a batch run."""

    converted: int = 0
    skipped: int = 0
    deleted: int = 0
    failed: int = 0
    error_details: List[str] = field(default_factory=list)
    started_at: datetime = field(default_factory=datetime.now)
    finished_at: Optional[datetime] = None

    @classmethod
    def from_results(
        cls, results: List[ProcessingResult], started_at: Optional[datetime] = None
    ) -> "SyncSummary":
        summary = cls()
        if started_at is not None:
            summary.started_at = started_at
        for result in results:
            if result.action == ProcessingAction.CONVERTED:
                summary.converted += 1
            elif result.action == ProcessingAction.SKIPPED:
                summary.skipped += 1
            elif result.action == ProcessingAction.DELETED:
                summary.deleted += 1
            else:
                summary.failed += 1
                summary.error_details.append(f"{result.input_path}: {result.error}")
        summary.finished_at = datetime.now()
        return summary

    @property
    def total(self) -> int:
        return self.converted + self.skipped + self.deleted + self.failed

    @property
    def duration_seconds(self) -> float:
        if self.finished_at is None:
            return 0.0
        return (self.finished_at - self.started_at).total_seconds()

    def __str__(self) -> str:
        return (
            f"converted {self.converted}, skipped {self.skipped}, "
            f"deleted {self.deleted}, failed {self.failed}"
        )


__all__ = [
    "EventKind",
    "WatchEvent",
    "ProcessingAction",
    "ProcessingResult",
    "SyncSummary",
]
