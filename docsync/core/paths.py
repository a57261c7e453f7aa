# docsync/core/paths.py
"""
Central path management for docsync.

Every component that needs a workspace file goes through DocsyncPaths; no
hardcoded paths anywhere else in the codebase.

Usage:
    from docsync.core.paths import DocsyncPaths

    state_file = DocsyncPaths.fingerprints()

    # Override workspace for testing
    DocsyncPaths.set_workspace("/tmp/test_docsync")
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

WORKSPACE_ENV = "DOCSYNC_WORKSPACE"


class DocsyncPaths:
    """
    Central path management for docsync.

    All paths are relative to the workspace root, which defaults to
    {CWD}/.docsync/. The DOCSYNC_WORKSPACE environment variable and
    set_workspace() both override it; set_workspace() wins.
    """

    _workspace_override: Optional[Path] = None

    @classmethod
    def set_workspace(cls, path: Optional[str | Path]) -> None:
        """
        Override the workspace root.

        Pass None to reset to the default.
        """
        if path is None:
            cls._workspace_override = None
        else:
            cls._workspace_override = Path(path)

    @classmethod
    def reset(cls) -> None:
        """Reset to the default workspace. Useful in tests."""
        cls._workspace_override = None

    @classmethod
    def workspace(cls) -> Path:
        """The .docsync workspace directory."""
        if cls._workspace_override is not None:
            return cls._workspace_override
        env = os.environ.get(WORKSPACE_ENV)
        if env:
            return Path(env).expanduser()
        return Path.cwd() / ".docsync"

    @classmethod
    def ensure_workspace(cls) -> Path:
        """Get workspace path and create it if it doesn't exist."""
        path = cls.workspace()
        path.mkdir(parents=True, exist_ok=True)
        return path

    @classmethod
    def config(cls) -> Path:
        """
        Default config file path.

        Location: {workspace}/config.yaml
        """
        return cls.workspace() / "config.yaml"

    @classmethod
    def fingerprints(cls) -> Path:
        """
        Fingerprint state file.

        Location: {workspace}/fingerprints.json

        A flat JSON object of source path -> fingerprint. Safe to delete;
        the next run reprocesses everything.
        """
        return cls.workspace() / "fingerprints.json"


__all__ = ["DocsyncPaths", "WORKSPACE_ENV"]
