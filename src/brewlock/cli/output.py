"""Rich output formatting helpers for the brewlock CLI.

Provides consistent, colored terminal output for lock file generation,
drift reports, replay progress and post-command lock updates.
"""

from __future__ import annotations

from pathlib import Path

from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.text import Text

from brewlock.core.lockfile import KIND_ORDER, LockDocument
from brewlock.core.reconcile import ChangeAction, DriftReport, LockChange
from brewlock.core.replay import EntryOutcome, ReplayAction, ReplayResult

_ACTION_STYLES: dict[ReplayAction, str] = {
    ReplayAction.SKIPPED: "dim",
    ReplayAction.INSTALLED: "green",
    ReplayAction.MISMATCH: "yellow",
    ReplayAction.FAILED: "bold red",
}

console = Console()
err_console = Console(stderr=True)


def action_style(action: ReplayAction) -> str:
    """Return the Rich style string for a replay action."""
    return _ACTION_STYLES.get(action, "white")


def print_error(message: str) -> None:
    """Print a brewlock error line to stderr."""
    err_console.print(f"[bold red]brewlock:[/bold red] {escape(message)}")


def print_generate_summary(doc: LockDocument, path: Path) -> None:
    """Print per-kind entry counts for a freshly generated lock file."""
    table = Table(title="Lock File Contents", show_header=True, header_style="bold")
    table.add_column("Kind", style="bold")
    table.add_column("Entries", justify="right")
    for kind in KIND_ORDER:
        table.add_row(kind.label, str(doc.count(kind)))
    console.print(table)
    console.print(f"Lock file written to: {escape(str(path))}")


def print_drift_report(report: DriftReport, path: Path) -> None:
    """Print a drift report as a table, or a one-line all-clear."""
    if report.matches:
        console.print(
            f"[bold green]All installed packages match {escape(str(path))}[/bold green]"
        )
        return

    table = Table(title="Version Drift", show_header=True, header_style="bold")
    table.add_column("Package", style="bold")
    table.add_column("Kind", style="dim")
    table.add_column("Locked")
    table.add_column("Installed")
    for mismatch in report.mismatches:
        actual = (
            Text(mismatch.actual, style="yellow")
            if mismatch.actual is not None
            else Text("not installed", style="red")
        )
        table.add_row(mismatch.name, mismatch.kind.label, mismatch.expected, actual)
    console.print(table)
    console.print(
        f"[bold red]{len(report.mismatches)} package(s) differ from "
        f"{escape(str(path))}[/bold red]"
    )


def print_outcome(outcome: EntryOutcome) -> None:
    """Print one replay progress line."""
    label = Text(f"{outcome.action.value:>9}", style=action_style(outcome.action))
    line = Text.assemble(label, " ", (outcome.kind.label, "dim"), " ", outcome.name)
    if outcome.drifted:
        line.append(f" {outcome.actual} -> {outcome.expected}", style="yellow")
    elif outcome.expected is not None:
        line.append(f" {outcome.expected}")
    if outcome.message:
        line.append(f"  ({outcome.message})", style="dim")
    console.print(line)


def print_replay_summary(result: ReplayResult) -> None:
    """Print replay totals followed by every failure."""
    console.print(
        f"Replay: {result.count(ReplayAction.INSTALLED)} installed, "
        f"{result.count(ReplayAction.SKIPPED)} already present, "
        f"{len(result.failures)} failed"
    )
    for failure in result.failures:
        console.print(
            f"  [bold red]FAILED[/bold red] {failure.kind.label} "
            f"{escape(failure.name)}: {escape(failure.message)}"
        )
    if result.aborted:
        console.print("[bold red]Strict replay stopped at the first failure.[/bold red]")
    elif result.success:
        console.print("[bold green]Replay complete.[/bold green]")


def print_lock_changes(changes: tuple[LockChange, ...], path: Path) -> None:
    """Print what a post-command update did to the lock file."""
    for change in changes:
        if change.action is ChangeAction.REGENERATED:
            console.print(f"brewlock: regenerated {escape(str(path))}")
        elif change.action is ChangeAction.UPDATED:
            version = f" {change.version}" if change.version else ""
            console.print(f"brewlock: locked {escape(change.name)}{escape(version)}")
        else:
            console.print(f"brewlock: unlocked {escape(change.name)}")
