"""Reconciliation engine --- keeping ``brew.lock`` in step with the system.

Three operations sit on top of the pure ``upsert``/``remove`` document
transformations:

- ``generate``: a full snapshot of the live system. Prior document content
  is discarded.
- ``check_drift``: compares every versioned entry of a document with the
  live system and reports mismatches.
- ``record_command``: the incremental update applied after a successful
  brew command (``install``, ``uninstall``, ``tap`` ...).

All three are coroutines because they call the ``PackageQuery``
collaborator; none of them touches the lock file on disk.
"""

from __future__ import annotations

import logging
from typing import Sequence

from brewlock.brew.base import PackageQuery
from brewlock.core.lockfile.models import (
    KIND_ORDER,
    CaskRecord,
    FormulaRecord,
    LockDocument,
    PackageKind,
    TapRecord,
)
from brewlock.core.lockfile.operations import remove, upsert
from brewlock.core.reconcile.models import (
    ChangeAction,
    DriftReport,
    LockChange,
    LockUpdate,
    Mismatch,
)
from brewlock.exceptions import QueryError

logger = logging.getLogger(__name__)

INSTALL_COMMANDS: frozenset[str] = frozenset({"install", "reinstall", "upgrade"})
UNINSTALL_COMMANDS: frozenset[str] = frozenset({"uninstall", "remove", "rm"})


# ---------------------------------------------------------------------------
# generate
# ---------------------------------------------------------------------------


async def generate(query: PackageQuery) -> LockDocument:
    """Snapshot every tap, formula, cask and App Store app.

    Taps are recorded with whatever metadata the query could determine,
    even none. App Store apps without a numeric id are skipped since they
    could never be replayed.
    """
    doc = LockDocument()

    for tap in await query.query_all_sources():
        doc = upsert(
            doc,
            PackageKind.TAP,
            tap.name,
            TapRecord(url=tap.url, commit=tap.commit, official=tap.official),
        )

    for kind in (PackageKind.FORMULA, PackageKind.CASK, PackageKind.STORE_APP):
        for package in await query.query_all_installed(kind):
            if kind is PackageKind.STORE_APP and package.record.id is None:  # type: ignore[union-attr]
                logger.warning("Skipping App Store app %r without an id", package.name)
                continue
            doc = upsert(doc, kind, package.name, package.record)

    logger.info(
        "Generated lock document: %s",
        ", ".join(f"{doc.count(kind)} {kind.value}" for kind in KIND_ORDER),
    )
    return doc


# ---------------------------------------------------------------------------
# check_drift
# ---------------------------------------------------------------------------


async def _single_version(
    query: PackageQuery, kind: PackageKind, name: str
) -> str | None:
    try:
        return await query.query_version(kind, name)
    except QueryError as exc:
        logger.warning("Version query failed for %s %r: %s", kind.label, name, exc)
        return None


async def check_drift(doc: LockDocument, query: PackageQuery) -> DriftReport:
    """Compare recorded versions with live versions.

    Uses one bulk ``query_all_installed`` call per kind that has entries.
    Names the bulk listing does not contain (fully qualified names such as
    ``acme/tools/foo``, aliases) are looked up with ``query_version``, the
    same lookup ``record_command`` and replay use. App Store apps are
    matched by name case-insensitively, as ``mas`` reports display names.
    Taps are not checked.

    Returns:
        A ``DriftReport``; ``actual`` is None for packages that are not
        installed at all.
    """
    mismatches: list[Mismatch] = []

    for kind in KIND_ORDER:
        if not kind.is_versioned:
            continue
        section = doc.section(kind)
        if not section:
            continue

        live: dict[str, str] = {}
        for package in await query.query_all_installed(kind):
            key = package.name.lower() if kind is PackageKind.STORE_APP else package.name
            live[key] = package.version

        for name in sorted(section):
            expected = section[name].version  # type: ignore[union-attr]
            key = name.lower() if kind is PackageKind.STORE_APP else name
            actual = (
                live[key] if key in live else await _single_version(query, kind, name)
            )
            if actual != expected:
                mismatches.append(
                    Mismatch(name=name, kind=kind, expected=expected, actual=actual)
                )

    return DriftReport(mismatches=tuple(mismatches))


# ---------------------------------------------------------------------------
# record_command
# ---------------------------------------------------------------------------


async def record_command(
    doc: LockDocument,
    command: str,
    packages: Sequence[str],
    query: PackageQuery,
    *,
    is_cask: bool = False,
) -> LockUpdate:
    """Apply the lock update that follows a successful brew command.

    Args:
        doc: Current document. Not modified.
        command: The brew command, e.g. ``"install"``.
        packages: Package (or tap) names given on the command line.
        query: Live state used to look up installed versions.
        is_cask: Whether the command targeted casks.

    Returns:
        The new document and the list of changes made. Commands that do
        not affect tracked state return ``doc`` unchanged.
    """
    kind = PackageKind.CASK if is_cask else PackageKind.FORMULA
    changes: list[LockChange] = []

    if command == "upgrade" and not packages:
        logger.info("Regenerating lock document after full upgrade")
        fresh = await generate(query)
        return LockUpdate(
            document=fresh,
            changes=(LockChange(action=ChangeAction.REGENERATED),),
        )

    if command in INSTALL_COMMANDS:
        for name in packages:
            version = await query.query_version(kind, name)
            if not version:
                logger.warning("No installed version found for %s %r", kind.label, name)
                continue
            record = (
                CaskRecord(version=version)
                if kind is PackageKind.CASK
                else FormulaRecord(version=version)
            )
            doc = upsert(doc, kind, name, record)
            changes.append(
                LockChange(ChangeAction.UPDATED, kind=kind, name=name, version=version)
            )

    elif command in UNINSTALL_COMMANDS:
        for name in packages:
            doc = remove(doc, kind, name)
            changes.append(LockChange(ChangeAction.REMOVED, kind=kind, name=name))

    elif command == "tap" and packages:
        # brew tap USER/REPO [URL]: one tap per invocation.
        name = packages[0]
        url = packages[1] if len(packages) > 1 else None
        doc = upsert(doc, PackageKind.TAP, name, TapRecord(url=url))
        changes.append(LockChange(ChangeAction.UPDATED, kind=PackageKind.TAP, name=name))

    elif command == "untap":
        for name in packages:
            doc = remove(doc, PackageKind.TAP, name)
            changes.append(
                LockChange(ChangeAction.REMOVED, kind=PackageKind.TAP, name=name)
            )

    return LockUpdate(document=doc, changes=tuple(changes))

