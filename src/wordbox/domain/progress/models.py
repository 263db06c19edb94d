"""
Domain models for learner progress.

ProgressLedger is the persisted per-learner record. SessionAccumulator is
transient and lives for one practice session only.
"""

import logging
from collections.abc import Set as AbstractSet
from dataclasses import dataclass, field, fields, replace
from datetime import date

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProgressLedger:
    """
    Cumulative learner metrics.

    All counters and ``xp`` only grow under normal operation. Badges are
    never revoked.
    """

    xp: int = 0
    streak_days: int = 0
    last_activity_day: date | None = None
    practice_session_count: int = 0
    perfect_session_count: int = 0
    articles_read_count: int = 0
    words_learned_count: int = 0
    earned_badge_ids: frozenset[str] = frozenset()
    completed_level_tags: frozenset[str] = frozenset()
    read_article_ids: frozenset[str] = frozenset()


@dataclass(frozen=True)
class MetricsSnapshot:
    """Read-only view of a ledger, as consumed by badge requirements."""

    streak_days: int = 0
    words_learned: int = 0
    articles_read: int = 0
    practice_sessions: int = 0
    perfect_sessions: int = 0
    total_xp: int = 0
    completed_level_tags: frozenset[str] = frozenset()


_COUNTER_FIELDS = (
    "xp",
    "streak_days",
    "practice_session_count",
    "perfect_session_count",
    "articles_read_count",
    "words_learned_count",
)


def heal_ledger(
    ledger: ProgressLedger,
    known_badge_ids: AbstractSet[str] | None = None,
) -> ProgressLedger:
    """
    Clamp negative counters read from storage to zero.

    With ``known_badge_ids``, earned ids missing from that set (badges
    removed from the catalog) are dropped. XP they granted is kept.
    """
    changes: dict[str, object] = {
        name: 0 for name in _COUNTER_FIELDS if getattr(ledger, name) < 0
    }
    if changes:
        logger.warning(f"Repaired negative ledger counters: {sorted(changes)}")

    if known_badge_ids is not None:
        stale = {i for i in ledger.earned_badge_ids if i not in known_badge_ids}
        if stale:
            logger.warning(f"Dropped badge ids not in the catalog: {sorted(stale)}")
            changes["earned_badge_ids"] = ledger.earned_badge_ids - stale

    if not changes:
        return ledger
    return replace(ledger, **changes)


@dataclass
class SessionAccumulator:
    """
    Counters for one practice session.

    ``current_combo`` counts consecutive correct answers and drops to zero on
    a wrong one; ``max_combo`` is the highest value it reached.
    """

    correct_count: int = 0
    wrong_count: int = 0
    max_combo: int = 0
    current_combo: int = 0
    hint_uses: int = 0
    elapsed_samples: list[float] = field(default_factory=list)

    def record_answer(self, correct: bool, elapsed: float | None = None) -> None:
        if correct:
            self.correct_count += 1
            self.current_combo += 1
            self.max_combo = max(self.max_combo, self.current_combo)
        else:
            self.wrong_count += 1
            self.current_combo = 0

        if elapsed is not None:
            self.elapsed_samples.append(elapsed)

    def record_hint(self) -> None:
        self.hint_uses += 1

    @property
    def answered(self) -> int:
        return self.correct_count + self.wrong_count

    @property
    def is_perfect(self) -> bool:
        return self.wrong_count == 0 and self.correct_count > 0

    def counters(self) -> dict[str, int]:
        return {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if f.name != "elapsed_samples"
        }
