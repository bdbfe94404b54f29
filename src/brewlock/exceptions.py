"""brewlock exception hierarchy.

All public exceptions inherit from BrewlockError, giving callers a single
base class to catch when they want to handle any brewlock-specific failure
without swallowing unrelated errors.

Most of these never cross a public boundary: the codec downgrades a
``LockfileError`` to an empty document, and the Homebrew query layer turns
a ``QueryError`` into "not installed".
"""


class BrewlockError(Exception):
    """Base exception for all brewlock errors."""


class LockfileError(BrewlockError):
    """Raised when a lock document has an invalid shape.

    Covers wrong section types, empty versions, non-integer App Store
    identifiers and any other schema violation found while decoding or
    before writing a lock file.
    """


class QueryError(BrewlockError):
    """Raised when package manager introspection output is malformed.

    Covers ``brew info --json=v2`` and ``brew tap-info --json`` payloads
    that do not match the expected structure.
    """
