"""Pure document operations: upsert and remove.

Both functions return a new ``LockDocument`` and leave their input
untouched. Only the affected section is copied; the other three sections
are shared between the old and new document, which is safe because no
code path mutates a section dict after construction.
"""

from __future__ import annotations

from dataclasses import replace

from brewlock.core.lockfile.models import (
    RECORD_TYPES,
    SECTION_ATTRS,
    LockDocument,
    PackageKind,
    PackageRecord,
)


def upsert(
    doc: LockDocument,
    kind: PackageKind,
    name: str,
    record: PackageRecord,
) -> LockDocument:
    """Insert or overwrite one entry.

    Args:
        doc: The document to start from. Not modified.
        kind: Section to write into.
        name: Package name, unique within the section.
        record: Record matching ``kind``.

    Returns:
        A new document with ``name`` mapped to ``record``.

    Raises:
        TypeError: If ``record`` is not the record type for ``kind``.
    """
    expected = RECORD_TYPES[kind]
    if not isinstance(record, expected):
        raise TypeError(
            f"{kind.label} entry {name!r} needs a {expected.__name__}, "
            f"got {type(record).__name__}"
        )
    attr = SECTION_ATTRS[kind]
    section = dict(getattr(doc, attr))
    section[name] = record
    return replace(doc, **{attr: section})


def remove(doc: LockDocument, kind: PackageKind, name: str) -> LockDocument:
    """Delete one entry if present.

    Removing a name that is not tracked returns a document equal to
    ``doc``.
    """
    attr = SECTION_ATTRS[kind]
    section = getattr(doc, attr)
    if name not in section:
        return doc
    return replace(
        doc,
        **{attr: {key: value for key, value in section.items() if key != name}},
    )
