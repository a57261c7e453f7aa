# docsync/cli/ui.py
"""
Shared UI helpers for CLI commands.

Usage:
    from docsync.cli.ui import ui, console

    ui.header("docsync sync")
    ui.success("Done!")
"""

from __future__ import annotations

from typing import Iterable

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from docsync.sync.models import ProcessingAction, ProcessingResult, SyncSummary

console = Console()

_ACTION_STYLES = {
    ProcessingAction.CONVERTED: "green",
    ProcessingAction.DELETED: "yellow",
    ProcessingAction.FAILED: "red",
    ProcessingAction.SKIPPED: "dim",
}


class UI:
    """Consistent styling for every command."""

    def print(self, msg: str, style: str = "") -> None:
        if style:
            console.print(f"[{style}]{msg}[/{style}]")
        else:
            console.print(msg)

    def header(self, title: str, subtitle: str = "") -> None:
        content = f"[bold]{title}[/bold]"
        if subtitle:
            content += f"\n[dim]{subtitle}[/dim]"
        console.print(Panel.fit(content, border_style="blue"))

    def success(self, msg: str) -> None:
        console.print(f"[green]✓[/green] {msg}")

    def error(self, msg: str) -> None:
        console.print(f"[red]✗[/red] {msg}")

    def warning(self, msg: str, detail: str = "") -> None:
        detail_str = f" [dim]({detail})[/dim]" if detail else ""
        console.print(f"[yellow]⚠[/yellow] {msg}{detail_str}")

    def info(self, msg: str) -> None:
        console.print(f"[dim]{msg}[/dim]")

    def status(self, name: str, ok: bool, detail: str = "") -> None:
        icon, color = ("✓", "green") if ok else ("✗", "red")
        detail_str = f" [dim]({detail})[/dim]" if detail else ""
        console.print(f"  [{color}]{icon}[/{color}] {name}{detail_str}")

    def result(self, result: ProcessingResult) -> None:
        """One line per processing result."""
        style = _ACTION_STYLES[result.action]
        line = f"[{style}]{result.action.value:<9}[/{style}] {result.input_path}"
        if result.error:
            line += f" [red]{result.error}[/red]"
        console.print(line)

    def results_table(self, results: Iterable[ProcessingResult]) -> None:
        table = Table(show_header=True, header_style="bold")
        table.add_column("Action")
        table.add_column("Source")
        table.add_column("Output")
        table.add_column("Detail", overflow="fold")
        for result in results:
            style = _ACTION_STYLES[result.action]
            table.add_row(
                f"[{style}]{result.action.value}[/{style}]",
                result.input_path,
                result.output_path or "",
                result.error or result.reason or "",
            )
        console.print(table)

    def summary(self, summary: SyncSummary) -> None:
        if summary.failed:
            self.warning(f"Finished: {summary}", f"{summary.duration_seconds:.2f}s")
        else:
            self.success(f"Finished: {summary} ({summary.duration_seconds:.2f}s)")


ui = UI()

__all__ = ["UI", "ui", "console"]
