"""Tests for the lock document model and its pure operations.

Covers ``PackageKind`` metadata, ``LockDocument`` accessors, and the
``upsert``/``remove`` laws: idempotent upsert, per-kind isolation, no-op
removal and input immutability.
"""

from __future__ import annotations

import pytest

from brewlock.core.lockfile import (
    KIND_ORDER,
    CaskRecord,
    FormulaRecord,
    LockDocument,
    PackageKind,
    StoreAppRecord,
    TapRecord,
    remove,
    upsert,
)


# ===========================================================================
# PackageKind
# ===========================================================================


class TestPackageKind:
    """Validate kind values and ordering."""

    def test_section_keys(self) -> None:
        """Kind values are the persisted section keys."""
        assert [k.value for k in KIND_ORDER] == ["tap", "brew", "cask", "mas"]

    def test_taps_are_not_versioned(self) -> None:
        assert not PackageKind.TAP.is_versioned
        assert PackageKind.FORMULA.is_versioned
        assert PackageKind.CASK.is_versioned
        assert PackageKind.STORE_APP.is_versioned

    def test_labels(self) -> None:
        assert PackageKind.FORMULA.label == "formula"
        assert PackageKind.STORE_APP.label == "App Store app"


# ===========================================================================
# LockDocument
# ===========================================================================


class TestLockDocument:
    """Validate document accessors."""

    def test_default_is_empty(self) -> None:
        doc = LockDocument()
        assert doc.is_empty
        assert doc.format_version == 1
        for kind in KIND_ORDER:
            assert doc.count(kind) == 0

    def test_get_by_kind(self) -> None:
        doc = LockDocument(formulae={"git": FormulaRecord(version="2.43.0")})
        assert doc.get(PackageKind.FORMULA, "git") == FormulaRecord(version="2.43.0")
        assert doc.get(PackageKind.CASK, "git") is None

    def test_equality_ignores_insertion_order(self) -> None:
        a = LockDocument(formulae={
            "git": FormulaRecord(version="1"), "jq": FormulaRecord(version="2"),
        })
        b = LockDocument(formulae={
            "jq": FormulaRecord(version="2"), "git": FormulaRecord(version="1"),
        })
        assert a == b


# ===========================================================================
# upsert
# ===========================================================================


class TestUpsert:
    """Validate insert-or-overwrite semantics."""

    def test_insert_new_entry(self) -> None:
        doc = upsert(LockDocument(), PackageKind.FORMULA, "git", FormulaRecord(version="2.43.0"))
        assert doc.count(PackageKind.FORMULA) == 1
        assert doc.formulae["git"].version == "2.43.0"

    def test_overwrite_replaces_record_entirely(self) -> None:
        """A later upsert drops fields the new record does not carry."""
        first = FormulaRecord(version="2.42.0", pinned=True, tap="homebrew/core")
        doc = upsert(LockDocument(), PackageKind.FORMULA, "git", first)
        doc = upsert(doc, PackageKind.FORMULA, "git", FormulaRecord(version="2.43.0"))
        assert doc.formulae["git"] == FormulaRecord(version="2.43.0")

    def test_upsert_is_idempotent(self) -> None:
        record = CaskRecord(version="4.26.1")
        once = upsert(LockDocument(), PackageKind.CASK, "docker", record)
        twice = upsert(once, PackageKind.CASK, "docker", record)
        assert once == twice

    def test_input_document_untouched(self) -> None:
        original = LockDocument()
        upsert(original, PackageKind.FORMULA, "git", FormulaRecord(version="1"))
        assert original.is_empty

    def test_same_name_in_different_kinds(self) -> None:
        """A formula and a cask with the same name are distinct entries."""
        doc = upsert(LockDocument(), PackageKind.FORMULA, "docker", FormulaRecord(version="27.0"))
        doc = upsert(doc, PackageKind.CASK, "docker", CaskRecord(version="4.26.1"))
        assert doc.formulae["docker"].version == "27.0"
        assert doc.casks["docker"].version == "4.26.1"

    def test_other_sections_unchanged(self) -> None:
        doc = LockDocument(
            taps={"acme/tools": TapRecord(url="https://example.com/tools")},
            store_apps={"Xcode": StoreAppRecord(id=497799835, version="15.2")},
        )
        updated = upsert(doc, PackageKind.FORMULA, "git", FormulaRecord(version="1"))
        assert updated.taps == doc.taps
        assert updated.store_apps == doc.store_apps

    def test_wrong_record_type_rejected(self) -> None:
        with pytest.raises(TypeError, match="CaskRecord"):
            upsert(LockDocument(), PackageKind.CASK, "docker", FormulaRecord(version="1"))


# ===========================================================================
# remove
# ===========================================================================


class TestRemove:
    """Validate entry deletion."""

    def test_remove_existing(self) -> None:
        doc = LockDocument(formulae={"git": FormulaRecord(version="1")})
        updated = remove(doc, PackageKind.FORMULA, "git")
        assert updated.is_empty
        assert "git" in doc.formulae

    def test_remove_missing_is_noop(self) -> None:
        doc = LockDocument(formulae={"git": FormulaRecord(version="1")})
        assert remove(doc, PackageKind.FORMULA, "jq") == doc

    def test_remove_only_affects_given_kind(self) -> None:
        doc = LockDocument(
            formulae={"docker": FormulaRecord(version="27.0")},
            casks={"docker": CaskRecord(version="4.26.1")},
        )
        updated = remove(doc, PackageKind.CASK, "docker")
        assert "docker" in updated.formulae
        assert "docker" not in updated.casks

    def test_remove_tap(self) -> None:
        doc = LockDocument(taps={"acme/tools": TapRecord()})
        assert remove(doc, PackageKind.TAP, "acme/tools").taps == {}
