# docsync/cli/cli.py
"""
docsync CLI - main application.

Commands:
    docsync sync      Reconcile the whole source tree once
    docsync watch     Keep the output tree in sync as files change
    docsync status    Show tracked state and supported formats
    docsync forget    Delete the fingerprint file (forces full reprocessing)

Commands import their implementation lazily so startup stays fast.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import typer

from docsync.logging.logger import configure_logging

app = typer.Typer(
    name="docsync",
    help="Incrementally sync a source tree into a derived markdown tree.",
    no_args_is_help=True,
    add_completion=False,
)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging."),
) -> None:
    """docsync - incremental one-way document sync."""
    configure_logging(logging.DEBUG if verbose else logging.WARNING)


@app.command("sync")
def sync(
    source: Optional[Path] = typer.Argument(None, help="Source directory."),
    output: Optional[Path] = typer.Argument(None, help="Output directory."),
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="YAML config file."),
    state: Optional[Path] = typer.Option(None, "--state", help="Fingerprint file."),
    workers: Optional[int] = typer.Option(None, "--workers", "-w", help="Worker threads."),
    force: bool = typer.Option(False, "--force", "-f", help="Reprocess every file."),
    prune: bool = typer.Option(False, "--prune", help="Delete outputs of removed sources."),
    show_all: bool = typer.Option(False, "--all", "-a", help="List skipped files too."),
) -> None:
    """Reconcile the whole source tree once."""
    from docsync.cli.commands import sync as mod

    mod.command(source=source, output=output, config=config, state=state, workers=workers, force=force, prune=prune, show_all=show_all)


@app.command("watch")
def watch(
    source: Optional[Path] = typer.Argument(None, help="Source directory."),
    output: Optional[Path] = typer.Argument(None, help="Output directory."),
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="YAML config file."),
    state: Optional[Path] = typer.Option(None, "--state", help="Fingerprint file."),
    workers: Optional[int] = typer.Option(None, "--workers", "-w", help="Worker threads."),
    no_initial_sync: bool = typer.Option(False, "--no-initial-sync", help="Skip the startup batch pass."),
) -> None:
    """Keep the output tree in sync as files change."""
    from docsync.cli.commands import watch as mod

    mod.command(source=source, output=output, config=config, state=state, workers=workers, initial_sync=not no_initial_sync)


@app.command("status")
def status(
    source: Optional[Path] = typer.Argument(None, help="Source directory."),
    output: Optional[Path] = typer.Argument(None, help="Output directory."),
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="YAML config file."),
    state: Optional[Path] = typer.Option(None, "--state", help="Fingerprint file."),
) -> None:
    """Show tracked state and supported formats."""
    from docsync.cli.commands import status as mod

    mod.command(source=source, output=output, config=config, state=state)


@app.command("forget")
def forget(
    state: Optional[Path] = typer.Option(None, "--state", help="Fingerprint file."),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation."),
) -> None:
    """Delete the fingerprint file so the next run reprocesses everything."""
    from docsync.cli.commands import forget as mod

    mod.command(state=state, yes=yes)


if __name__ == "__main__":
    app()
