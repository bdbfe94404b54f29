"""brewlock CLI --- Homebrew with a version lock file.

Entry point for the ``brewlock`` command-line tool. Registers the lock
commands under a single Click group; everything else goes to ``brew``.

Commands:
    generate   --- Snapshot installed packages into the lock file (alias: lock).
    check      --- Report packages that differ from the lock file.
    replay     --- Install everything recorded in the lock file.
    <other>    --- Passed to brew unchanged; the lock file is updated after
                   successful install, uninstall, upgrade, tap and untap.

Usage::

    brewlock install git            # brew install git, then lock git
    brewlock install --cask firefox
    brewlock generate
    brewlock check
    brewlock replay --strict
    brewlock bundle install         # same as brewlock replay -v
"""

from __future__ import annotations

import click

from brewlock import __version__
from brewlock.cli.check_cmd import check_command
from brewlock.cli.context import AppContext, configure_logging
from brewlock.cli.generate_cmd import generate_command
from brewlock.cli.passthrough import PASSTHROUGH_NAME, brew_command
from brewlock.cli.replay_cmd import replay_command
from brewlock.config import BrewlockSettings


class BrewlockGroup(click.Group):
    """Click group that routes unknown commands to ``brew``.

    Leading flags (``brewlock --verbose install git``) are brew's too, so
    they also select the passthrough with the full argument vector.
    """

    def resolve_command(self, ctx: click.Context, args: list[str]):
        if args and args[0] != PASSTHROUGH_NAME:
            if args[0].startswith("-") or self.get_command(ctx, args[0]) is None:
                return PASSTHROUGH_NAME, self.get_command(ctx, PASSTHROUGH_NAME), args
        return super().resolve_command(ctx, args)


@click.group(
    cls=BrewlockGroup,
    context_settings={
        "ignore_unknown_options": True,
        "allow_interspersed_args": False,
    },
)
@click.version_option(version=__version__, prog_name="brewlock")
@click.pass_context
def cli(ctx: click.Context) -> None:
    """brewlock: Homebrew with a version lock file.

    Run any brew command through brewlock and the lock file ($BREWLOCK,
    default ~/brew.lock) records what it installed. Use replay on another
    machine to reproduce the same set of packages.
    """
    if ctx.obj is None:
        settings = BrewlockSettings()
        configure_logging(settings.log_level)
        ctx.obj = AppContext.from_settings(settings)


# Register all subcommands
cli.add_command(generate_command)
cli.add_command(generate_command, name="lock")
cli.add_command(check_command)
cli.add_command(replay_command)
cli.add_command(brew_command)
