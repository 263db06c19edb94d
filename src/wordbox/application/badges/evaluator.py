"""
Badge evaluator.

Side-effect free: it reports which badges a metrics snapshot newly
qualifies for. Recording them (ids and XP) is the caller's job.
"""

from collections.abc import Iterable
from typing import assert_never

from wordbox.domain.badges.models import BadgeDefinition, Requirement, RequirementKind
from wordbox.domain.progress.models import MetricsSnapshot

from .catalog import BadgeCatalog, default_catalog


def requirement_met(requirement: Requirement, snapshot: MetricsSnapshot) -> bool:
    threshold = requirement.threshold
    match requirement.kind:
        case RequirementKind.STREAK_DAYS:
            return snapshot.streak_days >= threshold
        case RequirementKind.WORDS_LEARNED:
            return snapshot.words_learned >= threshold
        case RequirementKind.ARTICLES_READ:
            return snapshot.articles_read >= threshold
        case RequirementKind.PRACTICE_SESSIONS:
            return snapshot.practice_sessions >= threshold
        case RequirementKind.PERFECT_SESSIONS:
            return snapshot.perfect_sessions >= threshold
        case RequirementKind.TOTAL_XP:
            return snapshot.total_xp >= threshold
        case RequirementKind.LEVEL_COMPLETED:
            return threshold in snapshot.completed_level_tags
        case RequirementKind.UNKNOWN:
            return False
        case _:
            assert_never(requirement.kind)


def evaluate_badges(
    snapshot: MetricsSnapshot,
    earned_ids: Iterable[str],
    catalog: BadgeCatalog | None = None,
) -> list[BadgeDefinition]:
    """
    Badges not yet in ``earned_ids`` whose requirement ``snapshot`` satisfies.

    Results follow catalog order so simultaneous unlocks are reproducible.
    """
    catalog = catalog if catalog is not None else default_catalog()
    earned = set(earned_ids)
    return [
        badge
        for badge in catalog
        if badge.id not in earned and requirement_met(badge.requirement, snapshot)
    ]
