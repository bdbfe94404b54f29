"""Lock document data models.

Defines the structures behind the ``brew.lock`` file: the closed
``PackageKind`` enumeration, one record type per kind, and the
``LockDocument`` root. These are pure data holders (frozen dataclasses)
with no I/O, making them safe to import from every other layer.

Documents are values. Nothing in brewlock mutates a ``LockDocument`` in
place; ``upsert`` and ``remove`` in ``operations`` return new documents.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Mapping, Union

LOCK_FORMAT_VERSION: int = 1


# ---------------------------------------------------------------------------
# PackageKind
# ---------------------------------------------------------------------------


class PackageKind(str, Enum):
    """The four package kinds tracked in a lock file.

    The value is the section key used in the persisted document. A formula
    and a cask may share a name; they live in different sections and are
    never conflated.
    """

    TAP = "tap"
    FORMULA = "brew"
    CASK = "cask"
    STORE_APP = "mas"

    @property
    def label(self) -> str:
        """Human-readable name for terminal output."""
        return _KIND_LABELS[self]

    @property
    def is_versioned(self) -> bool:
        """Taps carry no single version; every other kind does."""
        return self is not PackageKind.TAP


_KIND_LABELS: dict[PackageKind, str] = {
    PackageKind.TAP: "tap",
    PackageKind.FORMULA: "formula",
    PackageKind.CASK: "cask",
    PackageKind.STORE_APP: "App Store app",
}

# Fixed processing and serialization order.
KIND_ORDER: tuple[PackageKind, ...] = (
    PackageKind.TAP,
    PackageKind.FORMULA,
    PackageKind.CASK,
    PackageKind.STORE_APP,
)


# ---------------------------------------------------------------------------
# Records
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class TapRecord:
    """A registered package source.

    Attributes:
        url: Remote URL, recorded only for custom (non-official) taps.
        commit: HEAD commit of the tap checkout, for pinning.
        official: True for taps maintained by Homebrew itself.
    """

    url: str | None = None
    commit: str | None = None
    official: bool | None = None


@dataclass(frozen=True)
class FormulaRecord:
    """A locked command-line formula.

    Attributes:
        version: Installed version, opaque (may carry a ``_1`` revision
            suffix).
        installed: Every version present in the Cellar.
        revision: Formula revision number.
        tap: Name of the tap providing the formula.
        pinned: Whether ``brew pin`` is in effect.
        dependencies: Direct dependency names.
        sha256: Source checksum.
        installed_as_dependency: Pulled in by another formula.
        installed_on_request: Installed explicitly by the user.
    """

    version: str
    installed: tuple[str, ...] | None = None
    revision: int | None = None
    tap: str | None = None
    pinned: bool | None = None
    dependencies: tuple[str, ...] | None = None
    sha256: str | None = None
    installed_as_dependency: bool | None = None
    installed_on_request: bool | None = None


@dataclass(frozen=True)
class CaskRecord:
    """A locked GUI application cask."""

    version: str
    tap: str | None = None
    sha256: str | None = None
    auto_updates: bool | None = None


@dataclass(frozen=True)
class StoreAppRecord:
    """A locked Mac App Store application.

    ``id`` is the numeric App Store identifier that ``mas install`` needs.
    It is ``None`` only for hand-edited entries that omit it; replaying such
    an entry fails.
    """

    id: int | None
    version: str


PackageRecord = Union[TapRecord, FormulaRecord, CaskRecord, StoreAppRecord]

RECORD_TYPES: dict[PackageKind, type] = {
    PackageKind.TAP: TapRecord,
    PackageKind.FORMULA: FormulaRecord,
    PackageKind.CASK: CaskRecord,
    PackageKind.STORE_APP: StoreAppRecord,
}


# ---------------------------------------------------------------------------
# LockDocument
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class LockDocument:
    """The in-memory form of ``brew.lock``.

    Four independent name-keyed sections plus a format version. Equality
    is deep: two documents are equal when their versions and every section
    compare equal, regardless of insertion order.
    """

    format_version: int = LOCK_FORMAT_VERSION
    taps: dict[str, TapRecord] = field(default_factory=dict)
    formulae: dict[str, FormulaRecord] = field(default_factory=dict)
    casks: dict[str, CaskRecord] = field(default_factory=dict)
    store_apps: dict[str, StoreAppRecord] = field(default_factory=dict)

    def section(self, kind: PackageKind) -> Mapping[str, PackageRecord]:
        """Return the name-to-record mapping for one kind."""
        return getattr(self, SECTION_ATTRS[kind])

    def get(self, kind: PackageKind, name: str) -> PackageRecord | None:
        """Look up a single entry, or None when it is not tracked."""
        return self.section(kind).get(name)

    def count(self, kind: PackageKind) -> int:
        """Number of entries of the given kind."""
        return len(self.section(kind))

    @property
    def is_empty(self) -> bool:
        """True when no section holds any entry."""
        return all(self.count(kind) == 0 for kind in KIND_ORDER)


SECTION_ATTRS: dict[PackageKind, str] = {
    PackageKind.TAP: "taps",
    PackageKind.FORMULA: "formulae",
    PackageKind.CASK: "casks",
    PackageKind.STORE_APP: "store_apps",
}
