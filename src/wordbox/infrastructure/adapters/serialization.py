"""
Canonical record schema for persisted engine state.

Field names follow the camelCase schema shared with other clients of the
same store; days are ``YYYY-MM-DD`` keys and sets are sorted lists.
"""

from typing import Any

from wordbox.domain.clock import date_key, parse_date_key
from wordbox.domain.progress.models import ProgressLedger
from wordbox.domain.srs.models import SrsEntry


def _optional_day(value: Any):
    return parse_date_key(value) if value else None


def entry_to_record(entry: SrsEntry) -> dict[str, Any]:
    return {
        "box": entry.box,
        "lastReviewDay": date_key(entry.last_review_day) if entry.last_review_day else None,
        "nextReviewDay": date_key(entry.next_review_day),
        "reviewCount": entry.review_count,
        "correctCount": entry.correct_count,
        "streak": entry.streak,
    }


def entry_from_record(record: dict[str, Any]) -> SrsEntry:
    """
    Build an SrsEntry from a stored record.

    Range problems (box, counters) are left for ``heal_entry``; only
    structurally unreadable records raise.
    """
    return SrsEntry(
        box=int(record.get("box", 1)),
        next_review_day=parse_date_key(record["nextReviewDay"]),
        last_review_day=_optional_day(record.get("lastReviewDay")),
        review_count=int(record.get("reviewCount", 0)),
        correct_count=int(record.get("correctCount", 0)),
        streak=int(record.get("streak", 0)),
    )


def ledger_to_record(ledger: ProgressLedger) -> dict[str, Any]:
    return {
        "xp": ledger.xp,
        "streakDays": ledger.streak_days,
        "lastActivityDay": (
            date_key(ledger.last_activity_day) if ledger.last_activity_day else None
        ),
        "practiceSessionCount": ledger.practice_session_count,
        "perfectSessionCount": ledger.perfect_session_count,
        "articlesReadCount": ledger.articles_read_count,
        "wordsLearnedCount": ledger.words_learned_count,
        "earnedBadgeIds": sorted(ledger.earned_badge_ids),
        "completedLevelTags": sorted(ledger.completed_level_tags),
        "readArticleIds": sorted(ledger.read_article_ids),
    }


def ledger_from_record(record: dict[str, Any]) -> ProgressLedger:
    return ProgressLedger(
        xp=int(record.get("xp", 0)),
        streak_days=int(record.get("streakDays", 0)),
        last_activity_day=_optional_day(record.get("lastActivityDay")),
        practice_session_count=int(record.get("practiceSessionCount", 0)),
        perfect_session_count=int(record.get("perfectSessionCount", 0)),
        articles_read_count=int(record.get("articlesReadCount", 0)),
        words_learned_count=int(record.get("wordsLearnedCount", 0)),
        earned_badge_ids=frozenset(str(i) for i in record.get("earnedBadgeIds", [])),
        completed_level_tags=frozenset(record.get("completedLevelTags", [])),
        read_article_ids=frozenset(record.get("readArticleIds", [])),
    )
