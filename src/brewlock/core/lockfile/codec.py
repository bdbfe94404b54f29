"""Lock document codec: ``brew.lock`` text to ``LockDocument`` and back.

The persisted form is JSON with comments (JSONC)::

    {
      // pinned for the build machines
      "version": 1,
      "tap": {"acme/tools": {"url": "https://github.com/acme/homebrew-tools"}},
      "brew": {"git": {"version": "2.43.0"}},
      "cask": {"docker": {"version": "4.26.1"}},
      "mas": {"Xcode": {"id": 497799835, "version": "15.2"}}
    }

Decoding never raises. A lock file that cannot be read, does not parse or
fails shape validation decodes to the empty document, so a broken lock
file can never stop brew itself from working. Missing sections decode to
empty mappings, which keeps hand-trimmed and older files usable.

Encoding is deterministic: sections in the fixed order tap, brew, cask,
mas; names sorted within each section; record fields in declaration order;
unset optional fields omitted. Two equal documents always produce
byte-identical text.
"""

from __future__ import annotations

import json
import logging
import re
from pathlib import Path
from typing import Any, Callable

from brewlock.core.lockfile.models import (
    KIND_ORDER,
    LOCK_FORMAT_VERSION,
    RECORD_TYPES,
    SECTION_ATTRS,
    CaskRecord,
    FormulaRecord,
    LockDocument,
    PackageKind,
    PackageRecord,
    StoreAppRecord,
    TapRecord,
)
from brewlock.exceptions import LockfileError

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# JSONC preprocessing
# ---------------------------------------------------------------------------

# Strings are matched first so that "//" inside a URL is left alone.
_COMMENT_RE = re.compile(
    r'(?P<string>"(?:\\.|[^"\\])*")|(?P<line>//[^\n]*)|(?P<block>/\*.*?\*/)',
    re.DOTALL,
)
_TRAILING_COMMA_RE = re.compile(
    r'(?P<string>"(?:\\.|[^"\\])*")|,(?=\s*[}\]])',
    re.DOTALL,
)


def _keep_strings(match: re.Match[str]) -> str:
    if match.group("string") is not None:
        return match.group("string")
    return " " if match.lastgroup == "block" else ""


def strip_jsonc(text: str) -> str:
    """Remove comments and trailing commas so ``json`` can parse the text."""
    without_comments = _COMMENT_RE.sub(_keep_strings, text)
    return _TRAILING_COMMA_RE.sub(
        lambda m: m.group("string") or "", without_comments
    )


# ---------------------------------------------------------------------------
# Shape validation helpers
# ---------------------------------------------------------------------------


def _optional(entry: dict[str, Any], key: str, kind: type, where: str) -> Any:
    value = entry.get(key)
    if value is None:
        return None
    # bool is a subclass of int; a JSON true is never a revision or an id.
    if not isinstance(value, kind) or (kind is int and isinstance(value, bool)):
        raise LockfileError(
            f"{where}: field {key!r} must be {kind.__name__}, "
            f"got {type(value).__name__}"
        )
    return value


def _optional_names(entry: dict[str, Any], key: str, where: str) -> tuple[str, ...] | None:
    value = _optional(entry, key, list, where)
    if value is None:
        return None
    if not all(isinstance(item, str) for item in value):
        raise LockfileError(f"{where}: field {key!r} must be a list of strings")
    return tuple(value)


def _required_version(entry: dict[str, Any], where: str) -> str:
    version = entry.get("version")
    if not isinstance(version, str) or not version:
        raise LockfileError(f"{where}: 'version' must be a non-empty string")
    return version


def _decode_tap(entry: dict[str, Any], where: str) -> TapRecord:
    return TapRecord(
        url=_optional(entry, "url", str, where),
        commit=_optional(entry, "commit", str, where),
        official=_optional(entry, "official", bool, where),
    )


def _decode_formula(entry: dict[str, Any], where: str) -> FormulaRecord:
    return FormulaRecord(
        version=_required_version(entry, where),
        installed=_optional_names(entry, "installed", where),
        revision=_optional(entry, "revision", int, where),
        tap=_optional(entry, "tap", str, where),
        pinned=_optional(entry, "pinned", bool, where),
        dependencies=_optional_names(entry, "dependencies", where),
        sha256=_optional(entry, "sha256", str, where),
        installed_as_dependency=_optional(
            entry, "installed_as_dependency", bool, where
        ),
        installed_on_request=_optional(entry, "installed_on_request", bool, where),
    )


def _decode_cask(entry: dict[str, Any], where: str) -> CaskRecord:
    return CaskRecord(
        version=_required_version(entry, where),
        tap=_optional(entry, "tap", str, where),
        sha256=_optional(entry, "sha256", str, where),
        auto_updates=_optional(entry, "auto_updates", bool, where),
    )


def _decode_store_app(entry: dict[str, Any], where: str) -> StoreAppRecord:
    return StoreAppRecord(
        id=_optional(entry, "id", int, where),
        version=_required_version(entry, where),
    )


_DECODERS: dict[PackageKind, Callable[[dict[str, Any], str], PackageRecord]] = {
    PackageKind.TAP: _decode_tap,
    PackageKind.FORMULA: _decode_formula,
    PackageKind.CASK: _decode_cask,
    PackageKind.STORE_APP: _decode_store_app,
}


# ---------------------------------------------------------------------------
# Dict conversion
# ---------------------------------------------------------------------------


def document_from_dict(data: Any) -> LockDocument:
    """Build a document from parsed JSON, validating its shape.

    Missing or null sections become empty mappings; a missing ``version``
    becomes the current format version. Unknown keys are ignored.

    Raises:
        LockfileError: If any present field has the wrong type.
    """
    if not isinstance(data, dict):
        raise LockfileError(
            f"lock file root must be an object, got {type(data).__name__}"
        )

    version = data.get("version")
    if version is None:
        version = LOCK_FORMAT_VERSION
    elif not isinstance(version, int) or isinstance(version, bool) or version < 1:
        raise LockfileError("'version' must be a positive integer")

    sections: dict[str, dict[str, PackageRecord]] = {}
    for kind in KIND_ORDER:
        raw = data.get(kind.value)
        if raw is None:
            raw = {}
        if not isinstance(raw, dict):
            raise LockfileError(f"section {kind.value!r} must be an object")
        decoded: dict[str, PackageRecord] = {}
        for name, entry in raw.items():
            where = f"{kind.value}[{name!r}]"
            if not isinstance(entry, dict):
                raise LockfileError(f"{where}: entry must be an object")
            decoded[name] = _DECODERS[kind](entry, where)
        sections[SECTION_ATTRS[kind]] = decoded

    return LockDocument(format_version=version, **sections)


def _record_to_dict(record: PackageRecord) -> dict[str, Any]:
    entry: dict[str, Any] = {}
    for key, value in vars(record).items():
        if value is None:
            continue
        entry[key] = list(value) if isinstance(value, tuple) else value
    return entry


def document_to_dict(doc: LockDocument) -> dict[str, Any]:
    """Convert a document to plain JSON-ready data in canonical order."""
    out: dict[str, Any] = {"version": doc.format_version}
    for kind in KIND_ORDER:
        section = doc.section(kind)
        out[kind.value] = {
            name: _record_to_dict(section[name]) for name in sorted(section)
        }
    return out


# ---------------------------------------------------------------------------
# Text codec
# ---------------------------------------------------------------------------


def parse_lock_document(text: str) -> LockDocument:
    """Decode lock file text. Never raises.

    Returns:
        The decoded document, or the empty document when ``text`` is
        blank, is not valid JSONC, or fails shape validation.
    """
    if not text.strip():
        return LockDocument()
    try:
        data = json.loads(strip_jsonc(text))
        return document_from_dict(data)
    except (ValueError, RecursionError, LockfileError) as exc:
        # json.JSONDecodeError is a ValueError; deep nesting overflows the decoder
        logger.warning("Ignoring unreadable lock file content: %s", exc)
        return LockDocument()


def serialize_lock_document(doc: LockDocument) -> str:
    """Encode a document as deterministic, diff-friendly JSON text."""
    return json.dumps(document_to_dict(doc), indent=2) + "\n"


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


def validate_document(doc: LockDocument) -> list[str]:
    """Check a document for internal consistency.

    Performs the following checks:

    1. **Format version:** must be a positive integer.
    2. **Record types:** every entry matches its section's record type.
    3. **Version non-empty:** formula, cask and App Store entries carry a
       non-empty version string.
    4. **Names non-empty:** no section has an empty key.

    Returns:
        List of validation error messages. Empty means the document is
        valid.
    """
    errors: list[str] = []

    if doc.format_version < 1:
        errors.append(f"Invalid format version {doc.format_version}")

    for kind in KIND_ORDER:
        expected = RECORD_TYPES[kind]
        for name, record in doc.section(kind).items():
            if not name:
                errors.append(f"Empty {kind.label} name")
            if not isinstance(record, expected):
                errors.append(
                    f"{kind.label} {name!r} holds a {type(record).__name__}"
                )
                continue
            if kind.is_versioned and not record.version:
                errors.append(f"{kind.label} {name!r} has empty version string")

    return errors


# ---------------------------------------------------------------------------
# Disk I/O
# ---------------------------------------------------------------------------


def read_lock_document(path: Path) -> LockDocument:
    """Read a lock file from disk.

    A missing or unreadable file yields the empty document.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return LockDocument()
    except (OSError, UnicodeDecodeError) as exc:
        logger.warning("Cannot read lock file %s: %s", path, exc)
        return LockDocument()
    return parse_lock_document(text)


def write_lock_document(doc: LockDocument, path: Path) -> None:
    """Validate a document and write it to disk.

    Creates parent directories if they do not exist.

    Raises:
        LockfileError: If the document fails ``validate_document``.
    """
    errors = validate_document(doc)
    if errors:
        raise LockfileError("; ".join(errors))
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(serialize_lock_document(doc), encoding="utf-8")
    logger.info("Wrote lock file %s", path)
