"""
Leveling table: XP thresholds to levels.

Stateless and side-effect free. There is no leveling past the last
threshold; the table's last level is a hard cap.
"""

from bisect import bisect_right
from collections.abc import Sequence

from wordbox.domain.constants import DEFAULT_LEVEL_THRESHOLDS, LEVEL_TITLES
from wordbox.domain.errors import ValidationError


class LevelingTable:
    """
    Strictly increasing XP thresholds; index 0 is level 1's floor (0 XP).
    """

    def __init__(self, thresholds: Sequence[int] = DEFAULT_LEVEL_THRESHOLDS):
        validate_thresholds(thresholds)
        self.thresholds: tuple[int, ...] = tuple(thresholds)

    @property
    def max_level(self) -> int:
        return len(self.thresholds)

    def level_for_xp(self, xp: int) -> int:
        """The highest level whose threshold is <= xp."""
        return max(1, bisect_right(self.thresholds, xp))

    def xp_to_next_level(self, xp: int) -> int:
        level = self.level_for_xp(xp)
        if level >= self.max_level:
            return 0
        return self.thresholds[level] - xp

    def level_progress_fraction(self, xp: int) -> float:
        """
        Percentage (0-100) of the way from the current level's floor to the next.

        Returns 100 at the max level.
        """
        level = self.level_for_xp(xp)
        if level >= self.max_level:
            return 100.0

        floor = self.thresholds[level - 1]
        ceiling = self.thresholds[level]
        progress = (xp - floor) / (ceiling - floor) * 100
        return min(max(progress, 0.0), 100.0)


def validate_thresholds(thresholds: Sequence[int]) -> None:
    if not thresholds:
        raise ValidationError("Leveling table must have at least one threshold")
    if thresholds[0] != 0:
        raise ValidationError(f"Level 1 must start at 0 XP, got {thresholds[0]}")
    for lower, upper in zip(thresholds, thresholds[1:]):
        if upper <= lower:
            raise ValidationError(
                f"Level thresholds must be strictly increasing ({lower} -> {upper})"
            )


DEFAULT_TABLE = LevelingTable()


def level_for_xp(xp: int, table: LevelingTable = DEFAULT_TABLE) -> int:
    return table.level_for_xp(xp)


def xp_to_next_level(xp: int, table: LevelingTable = DEFAULT_TABLE) -> int:
    return table.xp_to_next_level(xp)


def level_progress_fraction(xp: int, table: LevelingTable = DEFAULT_TABLE) -> float:
    return table.level_progress_fraction(xp)


def level_title(level: int) -> str:
    for min_level, title in LEVEL_TITLES:
        if level >= min_level:
            return title
    return LEVEL_TITLES[-1][1]


def daily_goal_progress(done: int, goal: int) -> float:
    """Percentage of a daily goal reached, capped at 100."""
    if goal <= 0:
        return 0.0
    return min(max(done, 0) / goal * 100, 100.0)
