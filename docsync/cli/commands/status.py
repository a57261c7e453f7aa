# docsync/cli/commands/status.py
"""
Show engine status.

Usage:
    docsync status ./docs ./docs_md
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from rich.table import Table

from docsync.cli.context import build_config
from docsync.cli.ui import console, ui
from docsync.sync.engine import SyncEngine


def command(
    source: Optional[Path],
    output: Optional[Path],
    config: Optional[Path],
    state: Optional[Path],
) -> None:
    cfg = build_config(source, output, config, state)
    state_file = cfg.resolved_state_path()
    state_exists = state_file.exists()

    with SyncEngine(cfg) as engine:
        status = engine.status()
        listing = engine.list_files()

    ui.header("docsync status")
    ui.status("Source directory", cfg.source_dir.is_dir(), status.source_dir)
    ui.status("Output directory", cfg.output_dir.is_dir(), status.output_dir)
    ui.status("Fingerprint file", state_exists, str(state_file))
    ui.info(f"Tracked files: {status.tracked_files}")
    ui.info(f"Supported formats: {', '.join(status.supported_formats)}")

    if listing.source_files:
        table = Table(title="Source (top level)", show_header=True, header_style="bold")
        table.add_column("Name")
        table.add_column("Size", justify="right")
        table.add_column("Modified")
        for info in listing.source_files:
            table.add_row(info.name, str(info.size), info.mtime.strftime("%Y-%m-%d %H:%M:%S"))
        console.print(table)
