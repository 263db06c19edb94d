"""
Domain models for Leitner scheduling.

These are pure data structures with no I/O or external dependencies.
"""

import logging
from dataclasses import dataclass, field, replace
from datetime import date

from ..constants import MAX_BOX, MIN_BOX
from ..ratios import percent

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SrsEntry:
    """
    Scheduling state for one vocabulary item.

    Attributes:
        box: Leitner box, 1 (new) to 6 (mastered).
        next_review_day: Day the item becomes due again.
        last_review_day: Day of the most recent review (None before the first).
        review_count: Total reviews recorded.
        correct_count: Reviews answered correctly (never above review_count).
        streak: Consecutive correct answers; reset by any wrong answer.
    """

    box: int
    next_review_day: date
    last_review_day: date | None = None
    review_count: int = 0
    correct_count: int = 0
    streak: int = 0

    @classmethod
    def new(cls, today: date) -> "SrsEntry":
        """A fresh box-1 entry, due today."""
        return cls(box=MIN_BOX, next_review_day=today)

    @property
    def accuracy(self) -> int:
        return percent(self.correct_count, self.review_count)


@dataclass
class SrsStats:
    """Aggregate view over a set of items."""

    total: int
    due_today: int
    boxes: dict[int, int] = field(default_factory=dict)
    mastered_count: int = 0
    average_accuracy: int = 0
    longest_streak: int = 0


@dataclass(frozen=True)
class ItemSrsInfo:
    """Display summary for a single item."""

    item_ref: str
    box: int
    box_label: str
    streak: int
    review_count: int
    accuracy: int
    days_until_due: int  # <= 0 means due now


def heal_entry(entry: SrsEntry) -> SrsEntry:
    """
    Clamp an entry read from storage back into its invariants.

    Out-of-range boxes, negative counters and correct_count > review_count
    are signs of upstream corruption. They are repaired, not raised, so the
    learner's schedule stays usable.
    """
    review_count = max(0, entry.review_count)
    healed = replace(
        entry,
        box=min(MAX_BOX, max(MIN_BOX, entry.box)),
        review_count=review_count,
        correct_count=min(max(0, entry.correct_count), review_count),
        streak=max(0, entry.streak),
    )
    if healed != entry:
        logger.warning(f"Repaired corrupted SRS entry: {entry} -> {healed}")
    return healed
