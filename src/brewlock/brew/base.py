"""Base classes and data models for package manager access.

Defines the two collaborator interfaces the reconciliation and replay
engines depend on:

- ``PackageQuery``: read-only introspection (installed versions, installed
  package metadata, registered taps).
- ``PackageInstaller``: the install and tap primitives.

plus the ``ExecutionResult``, ``InstalledPackage`` and ``TapInfo`` data
models they exchange. ``brewlock.brew.homebrew`` provides the concrete
Homebrew/mas implementations; tests provide in-memory fakes.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass

from brewlock.core.lockfile.models import PackageKind, PackageRecord

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Data models
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ExecutionResult:
    """Outcome of one external command.

    Attributes:
        exit_code: Process exit status. 127 when the binary could not be
            started.
        stdout: Captured standard output.
        stderr: Captured standard error.
    """

    exit_code: int
    stdout: str = ""
    stderr: str = ""

    @property
    def success(self) -> bool:
        """True when the command exited with status 0."""
        return self.exit_code == 0


@dataclass(frozen=True)
class InstalledPackage:
    """One installed package as reported by the package manager.

    Attributes:
        name: Formula name, cask token or App Store app name.
        kind: Package kind (never ``PackageKind.TAP``).
        record: Lock record carrying the live version and metadata.
    """

    name: str
    kind: PackageKind
    record: PackageRecord

    @property
    def version(self) -> str:
        """The live installed version."""
        return self.record.version  # type: ignore[union-attr]


@dataclass(frozen=True)
class TapInfo:
    """A registered tap with whatever metadata could be determined."""

    name: str
    url: str | None = None
    commit: str | None = None
    official: bool | None = None


# ---------------------------------------------------------------------------
# Abstract collaborators
# ---------------------------------------------------------------------------


class PackageQuery(ABC):
    """Read-only view of the live package manager state.

    Implementations never raise for "cannot determine": a failed query is
    reported as ``None`` or an empty list.
    """

    @abstractmethod
    async def query_version(self, kind: PackageKind, name: str) -> str | None:
        """Return the installed version of one package, or None.

        Taps have no version; implementations return None for them.
        """

    @abstractmethod
    async def query_all_installed(self, kind: PackageKind) -> list[InstalledPackage]:
        """Enumerate every installed package of one kind with metadata."""

    @abstractmethod
    async def query_all_sources(self) -> list[TapInfo]:
        """Enumerate every registered tap with metadata."""

    async def query_registered_sources(self) -> list[str]:
        """Return the names of registered taps.

        The default derives names from ``query_all_sources``; concrete
        implementations may use a cheaper listing.
        """
        return [tap.name for tap in await self.query_all_sources()]


class PackageInstaller(ABC):
    """Side-effecting primitives that change the live system."""

    @abstractmethod
    async def install(self, kind: PackageKind, identifier: str | int) -> int:
        """Install one package and return the exit code.

        Args:
            kind: ``FORMULA``, ``CASK`` or ``STORE_APP``.
            identifier: Package name, or the numeric App Store id for
                ``STORE_APP``.
        """

    @abstractmethod
    async def register_source(self, name: str, url: str | None = None) -> int:
        """Register (tap) a package source and return the exit code."""
