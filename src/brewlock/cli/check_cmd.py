"""``brewlock check`` --- Compare the lock file with installed versions.

Exit Codes:
    0 --- Every tracked package is installed at its locked version.
    1 --- At least one package differs or is missing.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path

import click

from brewlock.cli.context import AppContext, run_async
from brewlock.cli.output import print_drift_report
from brewlock.core.lockfile import read_lock_document
from brewlock.core.reconcile import DriftReport, check_drift


def _report_to_json(report: DriftReport, path: Path) -> dict:
    return {
        "lockfile": str(path),
        "matches": report.matches,
        "mismatches": [
            {
                "name": m.name,
                "kind": m.kind.value,
                "expected": m.expected,
                "actual": m.actual,
            }
            for m in report.mismatches
        ],
    }


@click.command("check")
@click.option(
    "--lockfile", "-f",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Lock file to check (default: $BREWLOCK or ~/brew.lock).",
)
@click.option(
    "--format", "output_format",
    type=click.Choice(["text", "json"], case_sensitive=False),
    default="text",
    help="Output format (default: text).",
)
@click.pass_obj
def check_command(app: AppContext, lockfile: Path | None, output_format: str) -> None:
    """Report packages whose installed version differs from the lock file."""
    path = lockfile or app.settings.lock_file
    doc = read_lock_document(path)
    report = run_async(check_drift(doc, app.query))

    if output_format.lower() == "json":
        click.echo(json.dumps(_report_to_json(report, path), indent=2))
    else:
        print_drift_report(report, path)

    sys.exit(0 if report.matches else 1)
