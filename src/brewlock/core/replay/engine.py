"""Replay engine --- installing everything a lock document records.

Processing runs in four strictly ordered phases::

    taps  ->  formulae  ->  casks  ->  App Store apps

Taps come first because formulae and casks may live in them. Within a
phase entries are handled one at a time in name order.

Per versioned entry:

1. Query the live version. A query error counts as "not installed".
2. Live equals locked: ``SKIPPED``, nothing is installed.
3. Live differs: warn. Strict mode records a ``MISMATCH`` failure;
   otherwise installation is attempted anyway.
4. Install by name (formula), by name with ``--cask`` (cask) or by
   numeric id (App Store app). The exit status decides ``INSTALLED`` or
   ``FAILED``.

Taps are presence-only: registered taps are skipped, others are tapped
with their recorded URL.

Non-strict replay is best effort and continues past failures. Strict
replay stops at the first failure and skips everything after it.
Re-running a replay is idempotent.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Awaitable, Callable

from brewlock.brew.base import PackageInstaller, PackageQuery
from brewlock.core.lockfile.codec import read_lock_document
from brewlock.core.lockfile.models import (
    LockDocument,
    PackageKind,
    PackageRecord,
    StoreAppRecord,
    TapRecord,
)
from brewlock.core.replay.models import EntryOutcome, ReplayAction, ReplayResult

logger = logging.getLogger(__name__)

OutcomeCallback = Callable[[EntryOutcome], None]

_VERSIONED_PHASES: tuple[PackageKind, ...] = (
    PackageKind.FORMULA,
    PackageKind.CASK,
    PackageKind.STORE_APP,
)


class _Abort(Exception):
    """Internal signal: strict mode hit a failure."""


class ReplayEngine:
    """Installs the contents of a lock document onto the live system.

    Args:
        query: Live state collaborator.
        installer: Install and tap primitives.
        strict: Treat version mismatches as failures and stop at the
            first failure.
        on_outcome: Called with each ``EntryOutcome`` as soon as it is
            known, for progress reporting.
    """

    def __init__(
        self,
        query: PackageQuery,
        installer: PackageInstaller,
        *,
        strict: bool = False,
        on_outcome: OutcomeCallback | None = None,
    ) -> None:
        self._query = query
        self._installer = installer
        self._strict = strict
        self._on_outcome = on_outcome

    async def replay(self, doc: LockDocument) -> ReplayResult:
        """Replay every entry of ``doc``.

        Returns:
            The aggregate ``ReplayResult``. Installer and query failures
            are captured in outcomes, never raised.
        """
        outcomes: list[EntryOutcome] = []

        def record(outcome: EntryOutcome) -> None:
            outcomes.append(outcome)
            if self._on_outcome is not None:
                self._on_outcome(outcome)
            if self._strict and not outcome.success:
                raise _Abort

        try:
            if doc.taps:
                registered = set(await self._registered_taps())
                for name in sorted(doc.taps):
                    record(await self._replay_tap(name, doc.taps[name], registered))

            for kind in _VERSIONED_PHASES:
                section = doc.section(kind)
                for name in sorted(section):
                    record(await self._replay_package(kind, name, section[name]))
        except _Abort:
            logger.error("Strict replay stopped after %d entries", len(outcomes))
            return ReplayResult(outcomes=tuple(outcomes), aborted=True)

        return ReplayResult(outcomes=tuple(outcomes))

    # -- Taps ---------------------------------------------------------------

    async def _registered_taps(self) -> list[str]:
        try:
            return await self._query.query_registered_sources()
        except Exception:
            logger.warning("Could not list registered taps", exc_info=True)
            return []

    async def _replay_tap(
        self, name: str, record: TapRecord, registered: set[str]
    ) -> EntryOutcome:
        if name in registered:
            return EntryOutcome(
                kind=PackageKind.TAP, name=name,
                action=ReplayAction.SKIPPED, success=True,
            )
        exit_code = await self._run_install(
            PackageKind.TAP, name, lambda: self._installer.register_source(name, record.url)
        )
        if exit_code == 0:
            return EntryOutcome(
                kind=PackageKind.TAP, name=name,
                action=ReplayAction.INSTALLED, success=True,
            )
        return EntryOutcome(
            kind=PackageKind.TAP, name=name,
            action=ReplayAction.FAILED, success=False,
            message=f"brew tap exited with {exit_code}",
        )

    # -- Versioned packages -------------------------------------------------

    async def _live_version(self, kind: PackageKind, name: str) -> str | None:
        try:
            return await self._query.query_version(kind, name)
        except Exception:
            logger.warning("Version query failed for %s %r", kind.label, name, exc_info=True)
            return None

    async def _replay_package(
        self, kind: PackageKind, name: str, record: PackageRecord
    ) -> EntryOutcome:
        expected: str = record.version  # type: ignore[union-attr]

        if kind is PackageKind.STORE_APP and record.id is None:  # type: ignore[union-attr]
            return EntryOutcome(
                kind=kind, name=name, action=ReplayAction.FAILED, success=False,
                expected=expected,
                message=f"App Store app {name!r} has no App Store id; cannot install",
            )

        actual = await self._live_version(kind, name)
        if actual == expected:
            return EntryOutcome(
                kind=kind, name=name, action=ReplayAction.SKIPPED, success=True,
                expected=expected, actual=actual,
            )

        message = ""
        if actual is not None:
            message = f"{name} is at version {actual}, but lock file specifies {expected}"
            logger.warning("%s", message)
            if self._strict:
                return EntryOutcome(
                    kind=kind, name=name, action=ReplayAction.MISMATCH, success=False,
                    expected=expected, actual=actual, message=message,
                )

        identifier: str | int = (
            record.id if isinstance(record, StoreAppRecord) else name  # type: ignore[assignment]
        )
        exit_code = await self._run_install(
            kind, name, lambda: self._installer.install(kind, identifier)
        )
        if exit_code == 0:
            return EntryOutcome(
                kind=kind, name=name, action=ReplayAction.INSTALLED, success=True,
                expected=expected, actual=actual, message=message,
            )
        failure = f"install exited with {exit_code}"
        return EntryOutcome(
            kind=kind, name=name, action=ReplayAction.FAILED, success=False,
            expected=expected, actual=actual,
            message=f"{message}; {failure}" if message else failure,
        )

    async def _run_install(
        self, kind: PackageKind, name: str, action: Callable[[], Awaitable[int]]
    ) -> int:
        try:
            return await action()
        except Exception:
            logger.warning("Installing %s %r raised", kind.label, name, exc_info=True)
            return 1


async def replay_lock_file(
    path: Path,
    query: PackageQuery,
    installer: PackageInstaller,
    *,
    strict: bool = False,
    on_outcome: OutcomeCallback | None = None,
) -> ReplayResult:
    """Read the lock file at ``path`` and replay it.

    A missing or unreadable lock file replays as the empty document, which
    succeeds without touching the system.
    """
    doc = read_lock_document(path)
    if doc.is_empty:
        logger.info("No packages in lock file %s", path)
    engine = ReplayEngine(query, installer, strict=strict, on_outcome=on_outcome)
    return await engine.replay(doc)
