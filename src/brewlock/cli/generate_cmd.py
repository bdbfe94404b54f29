"""``brewlock generate`` --- Snapshot the live system into ``brew.lock``.

Queries every tap, formula, cask and App Store app and overwrites the lock
file with the result. Also available as ``brewlock lock``.

Exit Codes:
    0 --- Lock file written.
    1 --- Querying Homebrew or writing the lock file failed.
"""

from __future__ import annotations

import sys
from pathlib import Path

import click

from brewlock.cli.context import AppContext, run_async
from brewlock.cli.output import print_error, print_generate_summary
from brewlock.core.lockfile import write_lock_document
from brewlock.core.reconcile import generate
from brewlock.exceptions import BrewlockError


@click.command("generate")
@click.option(
    "--output", "-o",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Output path for the lock file (default: $BREWLOCK or ~/brew.lock).",
)
@click.pass_obj
def generate_command(app: AppContext, output: Path | None) -> None:
    """Write the currently installed packages to the lock file."""
    out_path = output or app.settings.lock_file
    try:
        doc = run_async(generate(app.query))
        write_lock_document(doc, out_path)
    except (BrewlockError, OSError) as exc:
        print_error(str(exc))
        sys.exit(1)

    print_generate_summary(doc, out_path)
    sys.exit(0)
