"""
Per-entry outcomes and the run report of a sync run.

Soft failures (a field that could not be found, a save that was never
confirmed) are outcomes, not exceptions: they are recorded per entry and the
run moves on.
"""

from collections import Counter
from dataclasses import dataclass, field
from enum import Enum

from cvrelay.contexts.syncing.progress import ProgressWindow


class OutcomeKind(str, Enum):
    APPLIED = "applied"
    PARTIALLY_APPLIED = "partially_applied"
    SAVE_TIMED_OUT = "save_timed_out"
    NAVIGATION_FAILED = "navigation_failed"


@dataclass(frozen=True)
class SyncOutcome:
    """
    Result of replaying one entry.

    Attributes:
        kind: Outcome category
        index: 0-based entry index in the replayed category
        label: Short entry description for logs ("Engineer at Acme")
        unresolved: Logical fields no strategy found ("save" when the save
            control was missing)
        detail: Error text for navigation failures and surface errors
    """

    kind: OutcomeKind
    index: int
    label: str = ""
    unresolved: tuple[str, ...] = ()
    detail: str = ""

    @property
    def is_applied(self) -> bool:
        return self.kind == OutcomeKind.APPLIED

    def to_dict(self) -> dict:
        return {
            "kind": self.kind.value,
            "index": self.index,
            "label": self.label,
            "unresolved": list(self.unresolved),
            "detail": self.detail,
        }


@dataclass(frozen=True)
class SyncReport:
    """
    Ordered outcomes of a run plus the resume tuple.

    Attributes:
        outcomes: One outcome per processed entry, in processing order
        progress: Window actually covered and where to continue
        interrupted: True when an operator stop ended the run early
    """

    outcomes: tuple[SyncOutcome, ...] = ()
    progress: ProgressWindow = field(
        default_factory=lambda: ProgressWindow(range(0), 0, 0)
    )
    interrupted: bool = False

    def counts_by_kind(self) -> dict[OutcomeKind, int]:
        counts = Counter(outcome.kind for outcome in self.outcomes)
        return {kind: counts[kind] for kind in OutcomeKind if counts[kind]}

    @property
    def all_applied(self) -> bool:
        return all(outcome.is_applied for outcome in self.outcomes)
