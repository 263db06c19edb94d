"""
Badge definitions.

Requirement kinds are a closed enum. Any kind string that is not a member
loads as UNKNOWN, which never qualifies.
"""

from dataclasses import dataclass
from enum import Enum, IntEnum


class RequirementKind(str, Enum):
    STREAK_DAYS = "streak_days"
    WORDS_LEARNED = "words_learned"
    ARTICLES_READ = "articles_read"
    PRACTICE_SESSIONS = "practice_sessions"
    PERFECT_SESSIONS = "perfect_sessions"
    TOTAL_XP = "total_xp"
    LEVEL_COMPLETED = "level_completed"
    UNKNOWN = "unknown"

    @classmethod
    def _missing_(cls, value):
        return cls.UNKNOWN


class Rarity(IntEnum):
    """Informational ordering only; rarity never affects evaluation."""

    COMMON = 1
    UNCOMMON = 2
    RARE = 3
    EPIC = 4
    LEGENDARY = 5


@dataclass(frozen=True)
class Requirement:
    kind: RequirementKind
    threshold: int | str  # str only for LEVEL_COMPLETED


@dataclass(frozen=True)
class BadgeDefinition:
    id: str
    requirement: Requirement
    xp_reward: int = 0
    rarity: Rarity = Rarity.COMMON
    name: str = ""
    description: str = ""
    category: str = ""


@dataclass(frozen=True)
class CatalogProgress:
    earned: int
    total: int
    percentage: int
    remaining: int
