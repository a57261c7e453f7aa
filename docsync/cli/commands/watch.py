# docsync/cli/commands/watch.py
"""
Continuous mode.

Usage:
    docsync watch ./docs ./docs_md
    docsync watch -c docsync.yaml --no-initial-sync
"""

from __future__ import annotations

import time
from pathlib import Path
from typing import Optional

import typer

from docsync.cli.context import build_config
from docsync.cli.ui import ui
from docsync.core.exceptions import SyncSetupError
from docsync.logging.logger import get_logger
from docsync.logging.tags import CLI
from docsync.sync.engine import SyncEngine
from docsync.sync.models import SyncSummary

logger = get_logger(__name__)


def command(
    source: Optional[Path],
    output: Optional[Path],
    config: Optional[Path],
    state: Optional[Path],
    workers: Optional[int],
    initial_sync: bool,
) -> None:
    cfg = build_config(source, output, config, state, workers)
    ui.header("docsync watch", f"{cfg.source_dir} → {cfg.output_dir}")

    with SyncEngine(cfg) as engine:
        if initial_sync:
            summary = SyncSummary.from_results(engine.process_all())
            ui.summary(summary)

        engine.subscribe(ui.result)
        engine.on_error(lambda e: ui.error(f"{type(e).__name__}: {e}"))

        try:
            engine.start()
        except SyncSetupError as e:
            ui.error(str(e))
            raise typer.Exit(1)

        ui.info("Watching for changes (Ctrl+C to stop)")
        try:
            while True:
                time.sleep(0.5)
                if not engine.status().watching:
                    ui.error("Watch backend stopped unexpectedly")
                    raise typer.Exit(1)
        except KeyboardInterrupt:
            logger.info(f"{CLI} Interrupted, stopping watch")
            ui.info("Stopping...")

    ui.success("Stopped")
