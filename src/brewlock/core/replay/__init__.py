"""Replay of a lock document onto a fresh or drifted system."""

from brewlock.core.replay.engine import (
    OutcomeCallback,
    ReplayEngine,
    replay_lock_file,
)
from brewlock.core.replay.models import EntryOutcome, ReplayAction, ReplayResult

__all__ = [
    "EntryOutcome",
    "OutcomeCallback",
    "ReplayAction",
    "ReplayEngine",
    "ReplayResult",
    "replay_lock_file",
]
