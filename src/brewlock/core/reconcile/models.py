"""Result models for the reconciliation engine."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from brewlock.core.lockfile.models import LockDocument, PackageKind


@dataclass(frozen=True)
class Mismatch:
    """One tracked package whose live version differs from the lock file.

    Attributes:
        name: Package name.
        kind: Package kind.
        expected: Version recorded in the lock file.
        actual: Live version, or None when the package is not installed.
    """

    name: str
    kind: PackageKind
    expected: str
    actual: str | None


@dataclass(frozen=True)
class DriftReport:
    """Outcome of comparing a lock document with the live system."""

    mismatches: tuple[Mismatch, ...] = ()

    @property
    def matches(self) -> bool:
        """True iff no tracked package has drifted."""
        return not self.mismatches


class ChangeAction(Enum):
    """What a post-command lock update did to one entry."""

    UPDATED = "updated"
    REMOVED = "removed"
    REGENERATED = "regenerated"


@dataclass(frozen=True)
class LockChange:
    """A single entry-level change made by ``record_command``."""

    action: ChangeAction
    kind: PackageKind | None = None
    name: str = ""
    version: str | None = None


@dataclass(frozen=True)
class LockUpdate:
    """The new document produced by ``record_command`` and what changed."""

    document: LockDocument
    changes: tuple[LockChange, ...] = ()
