"""Classification of raw brew argument vectors.

brewlock never interprets brew's options; it only needs to know which
command ran, which names it targeted, and whether it targeted casks, so
the lock file can be updated afterwards.
"""

from __future__ import annotations

from dataclasses import dataclass, field

# Commands that change installed packages.
MODIFYING_COMMANDS: frozenset[str] = frozenset({
    "install",
    "uninstall",
    "remove",
    "rm",
    "upgrade",
    "tap",
    "untap",
    "reinstall",
})

MODIFYING_BUNDLE_SUBCOMMANDS: frozenset[str] = frozenset({"install", "cleanup"})


@dataclass(frozen=True)
class ParsedCommand:
    """A classified brew invocation.

    Attributes:
        command: Main brew command (``install``, ``tap`` ...), or ``""``.
        subcommand: For ``bundle``, its subcommand.
        is_cask: Whether ``--cask`` was in effect.
        packages: Positional names after the command.
        args: The original argument vector, for passthrough.
        modifies_packages: Whether the lock file may need updating.
        is_bundle: Whether this is a ``brew bundle`` invocation.
    """

    command: str
    subcommand: str | None = None
    is_cask: bool = False
    packages: tuple[str, ...] = ()
    args: tuple[str, ...] = field(default_factory=tuple)
    modifies_packages: bool = False
    is_bundle: bool = False


def is_modifying_command(command: str) -> bool:
    """True for brew commands that change installed packages."""
    return command in MODIFYING_COMMANDS


def parse_command(args: list[str]) -> ParsedCommand:
    """Classify a brew argument vector.

    Leading flags (``--verbose install git``) are skipped to find the
    command. ``--cask`` and ``--formula`` toggle the package kind; any other
    flag is neither a package nor a kind switch.
    """
    if not args:
        return ParsedCommand(command="")

    index = 0
    while index < len(args) and args[index].startswith("-"):
        index += 1
    command = args[index] if index < len(args) else ""

    is_cask = False
    packages: list[str] = []
    for arg in args[index + 1:]:
        if arg == "--cask":
            is_cask = True
        elif arg == "--formula":
            is_cask = False
        elif not arg.startswith("-"):
            packages.append(arg)

    if command == "bundle":
        subcommand = packages[0] if packages else "install"
        return ParsedCommand(
            command=command,
            subcommand=subcommand,
            packages=tuple(packages[1:]),
            args=tuple(args),
            modifies_packages=subcommand in MODIFYING_BUNDLE_SUBCOMMANDS,
            is_bundle=True,
        )

    if command == "tap":
        # Bare "brew tap" only lists taps.
        return ParsedCommand(
            command=command,
            packages=tuple(packages),
            args=tuple(args),
            modifies_packages=bool(packages),
        )

    return ParsedCommand(
        command=command,
        is_cask=is_cask,
        packages=tuple(packages),
        args=tuple(args),
        modifies_packages=is_modifying_command(command),
    )
