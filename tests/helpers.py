"""In-memory collaborators shared by the engine and CLI tests."""

from __future__ import annotations

from typing import Sequence

from brewlock.brew.base import (
    ExecutionResult,
    InstalledPackage,
    PackageInstaller,
    PackageQuery,
    TapInfo,
)
from brewlock.core.lockfile import (
    CaskRecord,
    FormulaRecord,
    LockDocument,
    PackageKind,
    PackageRecord,
    StoreAppRecord,
    TapRecord,
)
from brewlock.exceptions import QueryError


class FakeQuery(PackageQuery):
    """Live state held in dictionaries.

    Args:
        installed: ``{kind: {name: record}}`` of installed packages.
        taps: Registered taps.
        failing: Names whose ``query_version`` raises ``QueryError``.
    """

    def __init__(
        self,
        installed: dict[PackageKind, dict[str, PackageRecord]] | None = None,
        taps: Sequence[TapInfo] = (),
        failing: Sequence[str] = (),
    ) -> None:
        self.installed = {kind: dict(v) for kind, v in (installed or {}).items()}
        self.taps = list(taps)
        self.failing = set(failing)
        self.version_calls: list[tuple[PackageKind, str]] = []
        self.bulk_calls: list[PackageKind] = []

    async def query_version(self, kind: PackageKind, name: str) -> str | None:
        self.version_calls.append((kind, name))
        if name in self.failing:
            raise QueryError(f"cannot query {name}")
        record = self.installed.get(kind, {}).get(name)
        return record.version if record is not None else None  # type: ignore[union-attr]

    async def query_all_installed(self, kind: PackageKind) -> list[InstalledPackage]:
        self.bulk_calls.append(kind)
        return [
            InstalledPackage(name=name, kind=kind, record=record)
            for name, record in sorted(self.installed.get(kind, {}).items())
        ]

    async def query_all_sources(self) -> list[TapInfo]:
        return list(self.taps)


class FakeInstaller(PackageInstaller):
    """Records install calls and, when given a query, applies them to it.

    Args:
        query: Optional ``FakeQuery`` updated on successful installs.
        provides: Record installed for each identifier; defaults to a
            formula at version ``"0"``.
        exit_codes: Exit code per identifier; 0 when absent.
        raising: Identifiers whose install raises ``RuntimeError``.
    """

    def __init__(
        self,
        query: FakeQuery | None = None,
        provides: dict[str | int, tuple[str, PackageRecord]] | None = None,
        exit_codes: dict[str | int, int] | None = None,
        raising: Sequence[str | int] = (),
    ) -> None:
        self.query = query
        self.provides = provides or {}
        self.exit_codes = exit_codes or {}
        self.raising = set(raising)
        self.calls: list[tuple[PackageKind, str | int]] = []
        self.tap_urls: dict[str, str | None] = {}

    async def install(self, kind: PackageKind, identifier: str | int) -> int:
        self.calls.append((kind, identifier))
        if identifier in self.raising:
            raise RuntimeError(f"install of {identifier} blew up")
        code = self.exit_codes.get(identifier, 0)
        if code == 0 and self.query is not None and identifier in self.provides:
            name, record = self.provides[identifier]
            self.query.installed.setdefault(kind, {})[name] = record
        return code

    async def register_source(self, name: str, url: str | None = None) -> int:
        self.calls.append((PackageKind.TAP, name))
        self.tap_urls[name] = url
        code = self.exit_codes.get(name, 0)
        if code == 0 and self.query is not None:
            self.query.taps.append(TapInfo(name=name, url=url))
        return code


class FakeRunner:
    """Command runner returning canned results keyed by argv."""

    def __init__(
        self,
        responses: dict[tuple[str, ...], ExecutionResult] | None = None,
        default: ExecutionResult | None = None,
    ) -> None:
        self.responses = responses or {}
        self.default = default or ExecutionResult(exit_code=0)
        self.calls: list[tuple[tuple[str, ...], bool]] = []

    async def __call__(self, argv: Sequence[str], *, stream: bool = False) -> ExecutionResult:
        key = tuple(argv)
        self.calls.append((key, stream))
        return self.responses.get(key, self.default)

    @property
    def argvs(self) -> list[tuple[str, ...]]:
        return [argv for argv, _ in self.calls]


def make_document(
    taps: dict[str, TapRecord] | None = None,
    formulae: dict[str, str] | None = None,
    casks: dict[str, str] | None = None,
    store_apps: dict[str, tuple[int | None, str]] | None = None,
) -> LockDocument:
    """Build a document from bare ``name -> version`` maps."""
    return LockDocument(
        taps=dict(taps or {}),
        formulae={n: FormulaRecord(version=v) for n, v in (formulae or {}).items()},
        casks={n: CaskRecord(version=v) for n, v in (casks or {}).items()},
        store_apps={
            n: StoreAppRecord(id=i, version=v) for n, (i, v) in (store_apps or {}).items()
        },
    )
