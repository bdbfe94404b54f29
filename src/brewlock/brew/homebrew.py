"""Homebrew and mas implementations of the collaborator interfaces.

``HomebrewQuery`` shells out to ``brew info --json=v2``, ``brew tap-info
--json`` and ``mas list``; ``HomebrewInstaller`` to ``brew install``,
``brew tap`` and ``mas install``. Both take an injectable command runner
so tests can substitute canned ``ExecutionResult`` values.

Every query failure (non-zero exit, invalid JSON, unexpected shape) is
logged and reported as "not installed", never raised.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from brewlock.brew.base import (
    ExecutionResult,
    InstalledPackage,
    PackageInstaller,
    PackageQuery,
    TapInfo,
)
from brewlock.brew.executor import CommandRunner, run_command
from brewlock.brew.parsing import (
    cask_entries,
    formula_entries,
    parse_cask,
    parse_formula,
    parse_mas_list,
    parse_tap,
    parse_tap_list,
)
from brewlock.core.lockfile.models import PackageKind
from brewlock.exceptions import QueryError

logger = logging.getLogger(__name__)


def _load_json(result: ExecutionResult, what: str) -> Any | None:
    if not result.success:
        logger.debug("%s exited with %d: %s", what, result.exit_code, result.stderr.strip())
        return None
    try:
        return json.loads(result.stdout)
    except ValueError:
        logger.warning("%s returned invalid JSON", what)
        return None


class HomebrewQuery(PackageQuery):
    """Live package state read from Homebrew and mas.

    Args:
        brew_bin: Path or name of the ``brew`` executable.
        mas_bin: Path or name of the ``mas`` executable.
        runner: Command runner; defaults to ``run_command``.
    """

    def __init__(
        self,
        brew_bin: str = "brew",
        mas_bin: str = "mas",
        runner: CommandRunner | None = None,
    ) -> None:
        self._brew = brew_bin
        self._mas = mas_bin
        self._run = runner or run_command

    async def _brew_json(self, *args: str) -> Any | None:
        result = await self._run([self._brew, *args])
        return _load_json(result, f"brew {' '.join(args)}")

    # -- Single package -----------------------------------------------------

    async def query_version(self, kind: PackageKind, name: str) -> str | None:
        """Return the installed version of ``name``, or None.

        The name is queried exactly as given; fully qualified and
        versioned names (``python@3.11``) are passed through untouched.
        """
        if kind is PackageKind.FORMULA:
            packages = await self._info(["info", "--json=v2", name], kind)
        elif kind is PackageKind.CASK:
            packages = await self._info(["info", "--cask", "--json=v2", name], kind)
        elif kind is PackageKind.STORE_APP:
            # mas has no per-app query; match the listing by name.
            packages = [
                app for app in await self._mas_apps()
                if app.name.lower() == name.lower()
            ]
        else:
            return None
        return packages[0].version if packages else None

    # -- Bulk ---------------------------------------------------------------

    async def query_all_installed(self, kind: PackageKind) -> list[InstalledPackage]:
        """Enumerate installed packages of one kind."""
        if kind is PackageKind.FORMULA:
            return await self._info(["info", "--json=v2", "--installed"], kind)
        if kind is PackageKind.CASK:
            return await self._info(
                ["info", "--cask", "--json=v2", "--installed"], kind
            )
        if kind is PackageKind.STORE_APP:
            return await self._mas_apps()
        return []

    async def query_all_sources(self) -> list[TapInfo]:
        """Enumerate registered taps with metadata.

        Falls back to bare names from ``brew tap`` when ``tap-info`` fails,
        so a tap is never dropped for lack of metadata.
        """
        payload = await self._brew_json("tap-info", "--json", "--installed")
        if not isinstance(payload, list):
            if payload is not None:
                logger.warning("brew tap-info returned %s, expected a list",
                               type(payload).__name__)
            return [TapInfo(name=name) for name in await self.query_registered_sources()]

        taps: list[TapInfo] = []
        for entry in payload:
            try:
                taps.append(parse_tap(entry))
            except QueryError as exc:
                logger.warning("Skipping unreadable tap entry: %s", exc)
        return taps

    async def query_registered_sources(self) -> list[str]:
        """Names of registered taps from plain ``brew tap``."""
        result = await self._run([self._brew, "tap"])
        if not result.success:
            return []
        return parse_tap_list(result.stdout)

    # -- Helpers ------------------------------------------------------------

    async def _info(self, args: list[str], kind: PackageKind) -> list[InstalledPackage]:
        payload = await self._brew_json(*args)
        if payload is None:
            return []
        if kind is PackageKind.FORMULA:
            extract, parse = formula_entries, parse_formula
        else:
            extract, parse = cask_entries, parse_cask
        try:
            entries = extract(payload)
        except QueryError as exc:
            logger.warning("Unexpected brew info output: %s", exc)
            return []

        packages: list[InstalledPackage] = []
        for entry in entries:
            try:
                package = parse(entry)
            except QueryError as exc:
                logger.warning("Skipping unreadable %s entry: %s", kind.label, exc)
                continue
            if package is not None:
                packages.append(package)
        return packages

    async def _mas_apps(self) -> list[InstalledPackage]:
        result = await self._run([self._mas, "list"])
        if not result.success:
            logger.debug("mas list unavailable (exit %d)", result.exit_code)
            return []
        return parse_mas_list(result.stdout)


class HomebrewInstaller(PackageInstaller):
    """Install primitives backed by ``brew`` and ``mas``.

    Output is streamed to the terminal by default so long installs show
    progress.
    """

    def __init__(
        self,
        brew_bin: str = "brew",
        mas_bin: str = "mas",
        runner: CommandRunner | None = None,
        stream: bool = True,
    ) -> None:
        self._brew = brew_bin
        self._mas = mas_bin
        self._run = runner or run_command
        self._stream = stream

    async def install(self, kind: PackageKind, identifier: str | int) -> int:
        """Install a formula, cask or App Store app."""
        if kind is PackageKind.FORMULA:
            argv = [self._brew, "install", str(identifier)]
        elif kind is PackageKind.CASK:
            argv = [self._brew, "install", "--cask", str(identifier)]
        elif kind is PackageKind.STORE_APP:
            argv = [self._mas, "install", str(identifier)]
        else:
            return await self.register_source(str(identifier))
        result = await self._run(argv, stream=self._stream)
        return result.exit_code

    async def register_source(self, name: str, url: str | None = None) -> int:
        """Run ``brew tap NAME [URL]``."""
        argv = [self._brew, "tap", name]
        if url:
            argv.append(url)
        result = await self._run(argv, stream=self._stream)
        return result.exit_code
