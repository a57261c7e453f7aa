# docsync/cli/commands/sync.py
"""
One-shot reconciliation.

Usage:
    docsync sync ./docs ./docs_md            # process changed files
    docsync sync ./docs ./docs_md --force    # reprocess everything
    docsync sync -c docsync.yaml --prune     # also mirror deletions
"""

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Optional

import typer

from docsync.cli.context import build_config
from docsync.cli.ui import ui
from docsync.sync.engine import SyncEngine
from docsync.sync.models import ProcessingAction, SyncSummary


def command(
    source: Optional[Path],
    output: Optional[Path],
    config: Optional[Path],
    state: Optional[Path],
    workers: Optional[int],
    force: bool,
    prune: bool,
    show_all: bool,
) -> None:
    cfg = build_config(source, output, config, state, workers)
    ui.header("docsync sync", f"{cfg.source_dir} → {cfg.output_dir}")

    with SyncEngine(cfg) as engine:
        started_at = datetime.now()
        results = engine.process_all(force=force, prune=prune)

    shown = results if show_all else [r for r in results if r.action != ProcessingAction.SKIPPED]
    if shown:
        ui.results_table(shown)

    summary = SyncSummary.from_results(results, started_at=started_at)
    ui.summary(summary)
    if summary.failed:
        raise typer.Exit(1)
