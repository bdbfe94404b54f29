"""brewlock: Version-locking wrapper for Homebrew."""

from __future__ import annotations

__version__ = "0.1.0"
__license__ = "MIT"
