"""Result models for lock file replay."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from brewlock.core.lockfile.models import PackageKind


class ReplayAction(Enum):
    """What replay did with one lock entry."""

    SKIPPED = "skipped"  # already at the locked version / already tapped
    INSTALLED = "installed"
    MISMATCH = "mismatch"  # strict mode refused a differing live version
    FAILED = "failed"


@dataclass(frozen=True)
class EntryOutcome:
    """Per-entry replay result.

    Attributes:
        kind: Package kind.
        name: Package or tap name.
        action: What was done.
        success: Whether the entry counts as satisfied.
        expected: Locked version (None for taps).
        actual: Live version seen before acting (None if not installed).
        message: Warning or failure detail, empty when there is none.
    """

    kind: PackageKind
    name: str
    action: ReplayAction
    success: bool
    expected: str | None = None
    actual: str | None = None
    message: str = ""

    @property
    def drifted(self) -> bool:
        """True when a different version was already installed."""
        return (
            self.expected is not None
            and self.actual is not None
            and self.actual != self.expected
        )


@dataclass(frozen=True)
class ReplayResult:
    """Aggregate replay outcome.

    Attributes:
        outcomes: Per-entry outcomes in processing order.
        aborted: True when strict mode stopped at the first failure.
    """

    outcomes: tuple[EntryOutcome, ...] = ()
    aborted: bool = False

    @property
    def success(self) -> bool:
        """True iff every processed entry succeeded and nothing was cut short."""
        return not self.aborted and all(o.success for o in self.outcomes)

    @property
    def failures(self) -> list[EntryOutcome]:
        """Outcomes that did not succeed."""
        return [o for o in self.outcomes if not o.success]

    def count(self, action: ReplayAction) -> int:
        """Number of outcomes with the given action."""
        return sum(1 for o in self.outcomes if o.action is action)
