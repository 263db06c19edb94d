import pytest
from pydantic import ValidationError as PydanticValidationError

from wordbox.application.session_xp import XpRewards, compose_session_xp
from wordbox.domain.errors import ValidationError
from wordbox.domain.progress.models import SessionAccumulator


def play(answers, elapsed=None, hints=0):
    acc = SessionAccumulator()
    for i, correct in enumerate(answers):
        acc.record_answer(correct, elapsed[i] if elapsed else None)
    for _ in range(hints):
        acc.record_hint()
    return acc


def test_perfect_session_of_ten():
    breakdown = compose_session_xp(play([True] * 10))

    assert breakdown.base == 100
    assert breakdown.perfect_bonus == 25
    assert breakdown.combo_bonus == 20
    assert breakdown.speed_bonus == 0
    assert breakdown.hint_penalty == 0
    assert breakdown.total == 145


def test_wrong_answers_earn_participation_and_break_combo():
    # 4 correct, miss, 4 correct: max combo 4, no tier reached
    breakdown = compose_session_xp(play([True] * 4 + [False] + [True] * 4))

    assert breakdown.base == 8 * 10 + 2
    assert breakdown.perfect_bonus == 0
    assert breakdown.combo_bonus == 0
    assert breakdown.total == 82


def test_speed_bonus_counts_answers_under_threshold():
    breakdown = compose_session_xp(play([True, True, False], elapsed=[1.0, 3.0, 2.9]))
    # 3.0 is not strictly under the threshold
    assert breakdown.speed_bonus == 10


def test_many_hints_on_a_wrong_only_session_floor_at_zero():
    breakdown = compose_session_xp(play([False] * 5, hints=100))

    assert breakdown.base == 10
    assert breakdown.hint_penalty == 200
    assert breakdown.total == 0


def test_hints_cannot_push_total_below_zero():
    breakdown = compose_session_xp(play([False], hints=10))

    assert breakdown.base == 2
    assert breakdown.hint_penalty == 20
    assert breakdown.total == 0


def test_empty_session_is_worth_nothing():
    breakdown = compose_session_xp(SessionAccumulator())
    assert breakdown.total == 0
    assert breakdown.perfect_bonus == 0


def test_custom_rewards():
    rewards = XpRewards(correct_reward=1, perfect_bonus=0, combo_tier_size=2, combo_tier_reward=3)
    breakdown = compose_session_xp(play([True] * 5), rewards)
    assert breakdown.total == 5 + 2 * 3


def test_negative_counters_rejected():
    with pytest.raises(ValidationError):
        compose_session_xp(SessionAccumulator(correct_count=-1))


def test_negative_elapsed_rejected():
    with pytest.raises(ValidationError):
        compose_session_xp(play([True], elapsed=[-0.5]))


def test_rewards_validation():
    with pytest.raises(PydanticValidationError):
        XpRewards(combo_tier_size=0)
    with pytest.raises(PydanticValidationError):
        XpRewards(hint_cost=-1)
