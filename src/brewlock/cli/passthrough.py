"""Transparent ``brew`` passthrough.

Any command brewlock does not define itself is handed to ``brew`` with its
arguments untouched and brew's output streamed live. After a successful
package-modifying command (``install``, ``uninstall``, ``tap`` ...) the lock
file is updated to match. ``brew bundle install`` is answered by replaying
the lock file instead.

The process exits with brew's own exit status.
"""

from __future__ import annotations

import logging
import sys

import click

from brewlock.cli.context import AppContext, run_async
from brewlock.cli.output import console, print_error, print_lock_changes
from brewlock.cli.parser import ParsedCommand, parse_command
from brewlock.cli.replay_cmd import run_replay
from brewlock.core.lockfile import read_lock_document, write_lock_document
from brewlock.core.reconcile import record_command
from brewlock.exceptions import BrewlockError

logger = logging.getLogger(__name__)

PASSTHROUGH_NAME = "brew"


def update_lock_file(app: AppContext, parsed: ParsedCommand) -> None:
    """Record a successful brew command in the lock file.

    A lock file that cannot be written is reported but does not change the
    exit status; brew itself succeeded.
    """
    path = app.settings.lock_file
    doc = read_lock_document(path)
    update = run_async(
        record_command(
            doc, parsed.command, parsed.packages, app.query, is_cask=parsed.is_cask
        )
    )
    if not update.changes:
        logger.debug("No lock changes for brew %s", parsed.command)
        return
    try:
        write_lock_document(update.document, path)
    except (BrewlockError, OSError) as exc:
        print_error(f"could not update {path}: {exc}")
        return
    print_lock_changes(update.changes, path)


@click.command(
    PASSTHROUGH_NAME,
    hidden=True,
    add_help_option=False,
    context_settings={
        "ignore_unknown_options": True,
        "allow_interspersed_args": False,
    },
)
@click.argument("args", nargs=-1, type=click.UNPROCESSED)
@click.pass_obj
def brew_command(app: AppContext, args: tuple[str, ...]) -> None:
    """Run brew with ARGS and keep the lock file in step."""
    parsed = parse_command(list(args))

    if parsed.is_bundle and parsed.subcommand == "install":
        console.print(f"brewlock: installing from {app.settings.lock_file}")
        result = run_replay(app, app.settings.lock_file, verbose=True)
        sys.exit(0 if result.success else 1)

    result = run_async(app.runner([app.settings.brew_bin, *args], stream=True))
    if result.success and parsed.modifies_packages:
        update_lock_file(app, parsed)
    sys.exit(result.exit_code)
