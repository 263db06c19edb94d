"""
Session XP composer.

Combines per-answer rewards, the perfect-session bonus, combo tiers,
speed bonuses and hint penalties into one non-negative total.
"""

from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict, Field

from wordbox.domain import constants as c
from wordbox.domain.errors import ValidationError
from wordbox.domain.progress.models import SessionAccumulator


class XpRewards(BaseModel):
    """Reward constants. Every value is a non-negative XP amount unless noted."""

    model_config = ConfigDict(frozen=True)

    correct_reward: int = Field(default=c.CORRECT_REWARD, ge=0)
    participation_reward: int = Field(default=c.PARTICIPATION_REWARD, ge=0)
    perfect_bonus: int = Field(default=c.PERFECT_BONUS, ge=0)
    combo_tier_size: int = Field(default=c.COMBO_TIER_SIZE, gt=0)
    combo_tier_reward: int = Field(default=c.COMBO_TIER_REWARD, ge=0)
    speed_threshold: float = Field(default=c.SPEED_THRESHOLD_SECONDS, ge=0)  # seconds
    speed_reward: int = Field(default=c.SPEED_REWARD, ge=0)
    hint_cost: int = Field(default=c.HINT_COST, ge=0)
    read_article: int = Field(default=c.READ_ARTICLE_REWARD, ge=0)
    add_word: int = Field(default=c.ADD_WORD_REWARD, ge=0)


DEFAULT_REWARDS = XpRewards()


@dataclass(frozen=True)
class SessionXpBreakdown:
    base: int
    perfect_bonus: int
    combo_bonus: int
    speed_bonus: int
    hint_penalty: int
    total: int


def compose_session_xp(
    session: SessionAccumulator,
    rewards: XpRewards = DEFAULT_REWARDS,
) -> SessionXpBreakdown:
    """
    Compose the XP earned by a finished session.

    Wrong answers still earn the participation reward. The total is floored
    at zero, so heavy hint use can cancel a session's XP but never take XP
    away.
    """
    counts = (session.correct_count, session.wrong_count, session.max_combo, session.hint_uses)
    if min(counts) < 0:
        raise ValidationError(f"Session counters must be non-negative: {session}")
    if any(t < 0 for t in session.elapsed_samples):
        raise ValidationError("Elapsed-time samples must be non-negative")

    base = (
        session.correct_count * rewards.correct_reward
        + session.wrong_count * rewards.participation_reward
    )
    perfect = rewards.perfect_bonus if session.is_perfect else 0
    combo = (session.max_combo // rewards.combo_tier_size) * rewards.combo_tier_reward
    fast_answers = sum(1 for t in session.elapsed_samples if t < rewards.speed_threshold)
    speed = fast_answers * rewards.speed_reward
    penalty = session.hint_uses * rewards.hint_cost

    return SessionXpBreakdown(
        base=base,
        perfect_bonus=perfect,
        combo_bonus=combo,
        speed_bonus=speed,
        hint_penalty=penalty,
        total=max(0, base + perfect + combo + speed - penalty),
    )
