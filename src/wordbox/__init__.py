"""
wordbox: learning-progress engine.

Leitner spaced-repetition scheduling plus XP, levels, streaks and badges,
as a storage-agnostic library.
"""

from wordbox.application.badges import BadgeCatalog, default_catalog, load_catalog
from wordbox.application.badges import evaluate_badges
from wordbox.application.ledger import (
    apply_article_read,
    apply_badges,
    apply_daily_activity,
    apply_level_completed,
    apply_practice_session,
    apply_word_learned,
    to_metrics,
)
from wordbox.application.leveling import (
    LevelingTable,
    level_for_xp,
    level_progress_fraction,
    xp_to_next_level,
)
from wordbox.application.progress_service import ProgressService, SessionOutcome
from wordbox.application.scheduler import (
    build_study_queue,
    compute_stats,
    get_due_items,
    record_review,
)
from wordbox.application.session_xp import SessionXpBreakdown, XpRewards, compose_session_xp
from wordbox.domain import FixedClock, StorageError, SystemClock, ValidationError, WordboxError
from wordbox.domain.badges import BadgeDefinition, Rarity, Requirement, RequirementKind
from wordbox.domain.progress import MetricsSnapshot, ProgressLedger, SessionAccumulator
from wordbox.domain.srs import SrsEntry, SrsStats

__version__ = "0.4.0"

__all__ = [
    "record_review",
    "get_due_items",
    "build_study_queue",
    "compute_stats",
    "level_for_xp",
    "xp_to_next_level",
    "level_progress_fraction",
    "apply_practice_session",
    "apply_daily_activity",
    "apply_word_learned",
    "apply_article_read",
    "apply_level_completed",
    "apply_badges",
    "to_metrics",
    "evaluate_badges",
    "compose_session_xp",
    "BadgeCatalog",
    "default_catalog",
    "load_catalog",
    "LevelingTable",
    "ProgressService",
    "SessionOutcome",
    "SessionXpBreakdown",
    "XpRewards",
    "FixedClock",
    "SystemClock",
    "WordboxError",
    "ValidationError",
    "StorageError",
    "BadgeDefinition",
    "Rarity",
    "Requirement",
    "RequirementKind",
    "MetricsSnapshot",
    "ProgressLedger",
    "SessionAccumulator",
    "SrsEntry",
    "SrsStats",
]
