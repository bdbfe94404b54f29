"""Schema checks for Homebrew and mas introspection output.

``brew info --json=v2`` and ``brew tap-info --json`` return loosely typed
JSON. Everything entering brewlock passes through these functions, which
either return fully typed models or raise ``QueryError``; no partially
typed dicts leak into the engines.

Reference shapes (trimmed)::

    {"formulae": [{"name": "git", "tap": "homebrew/core", "revision": 0,
                   "pinned": false, "dependencies": ["gettext", "pcre2"],
                   "linked_keg": "2.43.0",
                   "urls": {"stable": {"checksum": "<sha256>"}},
                   "installed": [{"version": "2.43.0",
                                  "installed_as_dependency": false,
                                  "installed_on_request": true}]}]}

    {"casks": [{"token": "docker", "tap": "homebrew/cask",
                "installed": "4.26.1", "sha256": "<sha256>",
                "auto_updates": true}]}

    [{"name": "acme/tools", "official": false, "custom_remote": true,
      "remote": "https://github.com/acme/homebrew-tools", "HEAD": "abc123"}]
"""

from __future__ import annotations

import re
from typing import Any

from brewlock.brew.base import InstalledPackage, TapInfo
from brewlock.core.lockfile.models import (
    CaskRecord,
    FormulaRecord,
    PackageKind,
    StoreAppRecord,
)
from brewlock.exceptions import QueryError

# "497799835  Xcode  (15.2)"
_MAS_LINE_RE = re.compile(r"^\s*(\d+)\s+(.+?)\s+\(([^)]+)\)\s*$")


def _field(entry: dict[str, Any], key: str, kind: type, *, required: bool = False) -> Any:
    value = entry.get(key)
    if value is None:
        if required:
            raise QueryError(f"missing required field {key!r}")
        return None
    if not isinstance(value, kind) or (kind is int and isinstance(value, bool)):
        raise QueryError(
            f"field {key!r} must be {kind.__name__}, got {type(value).__name__}"
        )
    return value


def _entries(payload: Any, key: str) -> list[Any]:
    if not isinstance(payload, dict):
        raise QueryError("info output must be a JSON object")
    entries = payload.get(key)
    if entries is None:
        return []
    if not isinstance(entries, list):
        raise QueryError(f"{key!r} must be a list")
    return entries


def formula_entries(payload: Any) -> list[Any]:
    """Return the raw ``formulae`` list of a ``brew info --json=v2`` payload."""
    return _entries(payload, "formulae")


def cask_entries(payload: Any) -> list[Any]:
    """Return the raw ``casks`` list of a ``brew info --json=v2`` payload."""
    return _entries(payload, "casks")


def parse_formula(entry: Any) -> InstalledPackage | None:
    """Convert one formula entry to an ``InstalledPackage``.

    The live version is the linked keg when one is linked, otherwise the
    first installed keg.

    Returns:
        None when the formula is known but not installed.

    Raises:
        QueryError: If the entry does not match the expected shape.
    """
    if not isinstance(entry, dict):
        raise QueryError("formula entry must be an object")
    name = _field(entry, "name", str, required=True)

    kegs = _field(entry, "installed", list) or []
    versions: list[str] = []
    keg_by_version: dict[str, dict[str, Any]] = {}
    for keg in kegs:
        if not isinstance(keg, dict):
            raise QueryError(f"{name}: installed keg must be an object")
        keg_version = _field(keg, "version", str, required=True)
        versions.append(keg_version)
        keg_by_version[keg_version] = keg
    if not versions:
        return None

    linked = _field(entry, "linked_keg", str)
    version = linked if linked in keg_by_version else versions[0]
    keg = keg_by_version[version]

    dependencies = _field(entry, "dependencies", list)
    if dependencies is not None and not all(isinstance(d, str) for d in dependencies):
        raise QueryError(f"{name}: dependencies must be strings")

    checksum = None
    urls = _field(entry, "urls", dict)
    if urls is not None:
        stable = _field(urls, "stable", dict)
        if stable is not None:
            checksum = _field(stable, "checksum", str)

    record = FormulaRecord(
        version=version,
        installed=tuple(versions),
        revision=_field(entry, "revision", int),
        tap=_field(entry, "tap", str),
        pinned=_field(entry, "pinned", bool),
        dependencies=tuple(sorted(dependencies)) if dependencies is not None else None,
        sha256=checksum,
        installed_as_dependency=_field(keg, "installed_as_dependency", bool),
        installed_on_request=_field(keg, "installed_on_request", bool),
    )
    return InstalledPackage(name=name, kind=PackageKind.FORMULA, record=record)


def parse_cask(entry: Any) -> InstalledPackage | None:
    """Convert one cask entry to an ``InstalledPackage``.

    Returns:
        None when the cask is known but not installed.

    Raises:
        QueryError: If the entry does not match the expected shape.
    """
    if not isinstance(entry, dict):
        raise QueryError("cask entry must be an object")
    token = _field(entry, "token", str, required=True)
    installed = _field(entry, "installed", str)
    if not installed:
        return None
    record = CaskRecord(
        version=installed,
        tap=_field(entry, "tap", str),
        sha256=_field(entry, "sha256", str),
        auto_updates=_field(entry, "auto_updates", bool),
    )
    return InstalledPackage(name=token, kind=PackageKind.CASK, record=record)


def parse_tap(entry: Any) -> TapInfo:
    """Convert one ``brew tap-info --json`` entry to ``TapInfo``.

    The remote URL is kept only for taps that are not official or use a
    custom remote; official taps are reproducible from their name alone.
    ``official`` is recorded only when true.

    Raises:
        QueryError: If the entry has no name.
    """
    if not isinstance(entry, dict):
        raise QueryError("tap entry must be an object")
    name = _field(entry, "name", str, required=True)

    def optional(key: str, kind: type) -> Any:
        # Tap metadata is best-effort: a bad field is dropped, not fatal.
        try:
            return _field(entry, key, kind)
        except QueryError:
            return None

    official = optional("official", bool)
    custom_remote = optional("custom_remote", bool)
    url = optional("remote", str) if (custom_remote or not official) else None
    return TapInfo(
        name=name,
        url=url,
        commit=optional("HEAD", str),
        official=True if official else None,
    )


def parse_mas_list(stdout: str) -> list[InstalledPackage]:
    """Parse ``mas list`` output into installed App Store apps.

    Lines that do not match ``<id> <name> (<version>)`` are ignored.
    """
    apps: list[InstalledPackage] = []
    for line in stdout.splitlines():
        match = _MAS_LINE_RE.match(line)
        if not match:
            continue
        app_id = int(match.group(1))
        name = match.group(2).strip()
        version = match.group(3).strip()
        if app_id and name and version:
            apps.append(
                InstalledPackage(
                    name=name,
                    kind=PackageKind.STORE_APP,
                    record=StoreAppRecord(id=app_id, version=version),
                )
            )
    return apps


def parse_tap_list(stdout: str) -> list[str]:
    """Parse plain ``brew tap`` output into tap names."""
    return [line.strip() for line in stdout.splitlines() if line.strip()]
