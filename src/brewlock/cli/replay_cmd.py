"""``brewlock replay`` --- Install everything recorded in the lock file.

Taps are registered first, then formulae, casks and App Store apps are
installed. Packages already at their locked version are skipped.

Exit Codes:
    0 --- Every entry is satisfied.
    1 --- At least one entry failed (or strict mode stopped early).
"""

from __future__ import annotations

import sys
from pathlib import Path

import click

from brewlock.cli.context import AppContext, run_async
from brewlock.cli.output import console, print_outcome, print_replay_summary
from brewlock.core.replay import ReplayResult, replay_lock_file


def run_replay(
    app: AppContext, path: Path, *, strict: bool = False, verbose: bool = False
) -> ReplayResult:
    """Replay ``path`` and print the summary. Shared with ``bundle install``."""
    if verbose:
        console.print(f"Replaying {path}{' (strict)' if strict else ''}")
    result = run_async(
        replay_lock_file(
            path,
            app.query,
            app.installer,
            strict=strict,
            on_outcome=print_outcome if verbose else None,
        )
    )
    print_replay_summary(result)
    return result


@click.command("replay")
@click.option(
    "--lockfile", "-f",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Lock file to replay (default: $BREWLOCK or ~/brew.lock).",
)
@click.option(
    "--strict",
    is_flag=True,
    default=False,
    help="Fail on version mismatches and stop at the first failure.",
)
@click.option(
    "--verbose", "-v",
    is_flag=True,
    default=False,
    help="Print a line for every entry processed.",
)
@click.pass_obj
def replay_command(
    app: AppContext, lockfile: Path | None, strict: bool, verbose: bool
) -> None:
    """Install the taps and packages recorded in the lock file."""
    path = lockfile or app.settings.lock_file
    result = run_replay(app, path, strict=strict, verbose=verbose)
    sys.exit(0 if result.success else 1)
