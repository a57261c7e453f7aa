# docsync/cli/commands/forget.py
"""
Delete the fingerprint file.

Usage:
    docsync forget          # asks first
    docsync forget --yes
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from docsync.cli.ui import ui
from docsync.core.paths import DocsyncPaths


def command(state: Optional[Path], yes: bool) -> None:
    path = state or DocsyncPaths.fingerprints()
    if not path.exists():
        ui.info(f"No fingerprint file at {path}")
        return

    if not yes and not typer.confirm(f"Delete {path}? Every file will be reprocessed next run."):
        ui.info("Aborted")
        raise typer.Exit(1)

    path.unlink()
    ui.success(f"Deleted {path}")
