# docsync/config/schema.py
"""
Configuration schema for the synchronization engine.

Example YAML:
    source_dir: ./documents
    output_dir: ./documents_markdown
    target_ext: .md
    max_workers: 4
    watch_depth: 10
    extensions: [.txt, .csv]
    collision_policy: warn
    follow_symlinks: false
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from docsync.core.paths import DocsyncPaths


def _normalize_ext(ext: str) -> str:
    norm = ext.strip().lower()
    if not norm.startswith("."):
        norm = f".{norm}"
    return norm


class CollisionPolicy(str, Enum):
    """What a batch run does when several sources map to one output file."""

    WARN = "warn"
    ERROR = "error"


class SyncConfig(BaseModel):
    """
    Settings for one SyncEngine instance.

    Attributes:
        source_dir: Root of the watched source tree.
        output_dir: Root of the derived output tree.
        state_path: Fingerprint file. Defaults to {workspace}/fingerprints.json.
        target_ext: Extension given to every output file.
        extensions: Restrict eligible extensions (None = everything the
            transformer supports).
        max_workers: Worker threads for distinct-path processing.
        watch_depth: Maximum directory depth observed in continuous mode.
        ignore_hidden: Drop watch events for dot-prefixed entries.
        follow_symlinks: Enter symlinked directories in batch runs and report
            symlinked files in continuous mode.
        collision_policy: Behaviour for output-path collisions in batch runs.
    """

    model_config = ConfigDict(extra="forbid")

    source_dir: Path = Field(..., description="Source tree root")
    output_dir: Path = Field(..., description="Output tree root")
    state_path: Optional[Path] = Field(default=None, description="Fingerprint state file")
    target_ext: str = Field(default=".md", description="Output file extension")
    extensions: Optional[List[str]] = Field(
        default=None, description="Eligible extensions override"
    )
    max_workers: int = Field(default=4, ge=1, description="Worker pool size")
    watch_depth: int = Field(default=10, ge=0, description="Maximum watch depth")
    ignore_hidden: bool = Field(default=True, description="Ignore dot-prefixed entries")
    follow_symlinks: bool = Field(default=False, description="Follow symbolic links")
    collision_policy: CollisionPolicy = Field(
        default=CollisionPolicy.WARN, description="Output collision handling"
    )

    @field_validator("target_ext")
    @classmethod
    def normalize_target_ext(cls, v: str) -> str:
        """Ensure the target extension starts with a dot."""
        if not v or not v.strip(". "):
            raise ValueError("target_ext must not be empty")
        return _normalize_ext(v)

    @field_validator("extensions", mode="before")
    @classmethod
    def normalize_extensions(cls, v):
        """Ensure all extension entries start with a dot and are lowercase."""
        if v is None:
            return v
        if isinstance(v, str):
            v = [v]
        return [_normalize_ext(str(ext)) for ext in v]

    @field_validator("source_dir", "output_dir", "state_path", mode="after")
    @classmethod
    def expand_paths(cls, v: Optional[Path]) -> Optional[Path]:
        if v is None:
            return v
        return Path(v).expanduser()

    def resolved_state_path(self) -> Path:
        """State file location, falling back to the workspace default."""
        return self.state_path or DocsyncPaths.fingerprints()


__all__ = ["CollisionPolicy", "SyncConfig"]
