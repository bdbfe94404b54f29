"""Lock document --- the typed model of ``brew.lock``.

The package is split into focused submodules:

- ``models``: ``PackageKind``, the four record dataclasses and
  ``LockDocument``.
- ``operations``: the pure ``upsert`` and ``remove`` transformations.
- ``codec``: JSONC decoding, deterministic encoding, validation and disk
  I/O.

All public names are re-exported here so callers can write
``from brewlock.core.lockfile import LockDocument, upsert``.
"""

from brewlock.core.lockfile.codec import (
    document_from_dict,
    document_to_dict,
    parse_lock_document,
    read_lock_document,
    serialize_lock_document,
    strip_jsonc,
    validate_document,
    write_lock_document,
)
from brewlock.core.lockfile.models import (
    KIND_ORDER,
    LOCK_FORMAT_VERSION,
    CaskRecord,
    FormulaRecord,
    LockDocument,
    PackageKind,
    PackageRecord,
    StoreAppRecord,
    TapRecord,
)
from brewlock.core.lockfile.operations import remove, upsert

__all__ = [
    "KIND_ORDER",
    "LOCK_FORMAT_VERSION",
    "CaskRecord",
    "FormulaRecord",
    "LockDocument",
    "PackageKind",
    "PackageRecord",
    "StoreAppRecord",
    "TapRecord",
    "document_from_dict",
    "document_to_dict",
    "parse_lock_document",
    "read_lock_document",
    "remove",
    "serialize_lock_document",
    "strip_jsonc",
    "upsert",
    "validate_document",
    "write_lock_document",
]
