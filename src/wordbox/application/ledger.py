"""
Progress ledger transformations.

Every function takes a ledger and returns a new one; nothing here touches
storage. Callers apply all changes for one event to a single ledger value
and write it once.
"""

import logging
from collections.abc import Iterable
from dataclasses import replace
from datetime import date

from wordbox.domain.clock import days_between
from wordbox.domain.badges.models import BadgeDefinition
from wordbox.domain.errors import ValidationError
from wordbox.domain.progress.models import MetricsSnapshot, ProgressLedger

logger = logging.getLogger(__name__)


def _require_non_negative(name: str, value: int) -> None:
    if value < 0:
        raise ValidationError(f"{name} must be >= 0, got {value}")


def apply_practice_session(
    ledger: ProgressLedger,
    session_xp: int,
    *,
    correct_count: int,
    wrong_count: int,
) -> ProgressLedger:
    """
    Credit a finished practice session.

    The session counts as perfect when it had no wrong answers and at least
    one correct answer.
    """
    _require_non_negative("session_xp", session_xp)
    _require_non_negative("correct_count", correct_count)
    _require_non_negative("wrong_count", wrong_count)

    perfect = wrong_count == 0 and correct_count > 0
    return replace(
        ledger,
        xp=ledger.xp + session_xp,
        practice_session_count=ledger.practice_session_count + 1,
        perfect_session_count=ledger.perfect_session_count + (1 if perfect else 0),
    )


def apply_daily_activity(ledger: ProgressLedger, today: date) -> tuple[ProgressLedger, int]:
    """
    Update the day streak for activity on ``today``.

    Same day: unchanged. Next day: +1. Any longer gap: back to 1.
    A ``today`` earlier than the last activity day is treated like the same
    day. Callers invoke this at most once per learner per day.
    """
    if ledger.last_activity_day is None:
        streak = 1
    else:
        gap = days_between(ledger.last_activity_day, today)
        if gap <= 0:
            streak = ledger.streak_days
        elif gap == 1:
            streak = ledger.streak_days + 1
        else:
            logger.debug(f"Streak broken after {gap} days")
            streak = 1

    return replace(ledger, streak_days=streak, last_activity_day=today), streak


def apply_word_learned(ledger: ProgressLedger, xp_delta: int = 0) -> ProgressLedger:
    _require_non_negative("xp_delta", xp_delta)
    return replace(
        ledger,
        xp=ledger.xp + xp_delta,
        words_learned_count=ledger.words_learned_count + 1,
    )


def apply_article_read(
    ledger: ProgressLedger,
    xp_delta: int = 0,
    article_id: str | None = None,
) -> ProgressLedger:
    """
    Count an article read and credit its XP.

    With an ``article_id``, an article already read is a no-op.
    """
    _require_non_negative("xp_delta", xp_delta)
    if article_id is not None and article_id in ledger.read_article_ids:
        return ledger

    read_ids = ledger.read_article_ids
    if article_id is not None:
        read_ids = read_ids | {article_id}

    return replace(
        ledger,
        xp=ledger.xp + xp_delta,
        articles_read_count=ledger.articles_read_count + 1,
        read_article_ids=read_ids,
    )


def apply_level_completed(ledger: ProgressLedger, tag: str) -> ProgressLedger:
    if not tag:
        raise ValidationError("Level tag must be a non-empty string")
    return replace(ledger, completed_level_tags=ledger.completed_level_tags | {tag})


def apply_badges(ledger: ProgressLedger, badges: Iterable[BadgeDefinition]) -> ProgressLedger:
    """
    Record newly earned badges and add their XP rewards in one step.

    Badges the ledger already holds are skipped, so re-applying is harmless.
    """
    earned = set(ledger.earned_badge_ids)
    bonus = 0
    for badge in badges:
        if badge.id in earned:
            continue
        earned.add(badge.id)
        bonus += badge.xp_reward

    if len(earned) == len(ledger.earned_badge_ids):
        return ledger
    return replace(ledger, xp=ledger.xp + bonus, earned_badge_ids=frozenset(earned))


def to_metrics(ledger: ProgressLedger) -> MetricsSnapshot:
    return MetricsSnapshot(
        streak_days=ledger.streak_days,
        words_learned=ledger.words_learned_count,
        articles_read=ledger.articles_read_count,
        practice_sessions=ledger.practice_session_count,
        perfect_sessions=ledger.perfect_session_count,
        total_xp=ledger.xp,
        completed_level_tags=ledger.completed_level_tags,
    )
