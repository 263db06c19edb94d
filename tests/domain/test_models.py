from datetime import date

from wordbox.domain.badges.models import RequirementKind
from wordbox.domain.progress.models import ProgressLedger, SessionAccumulator, heal_ledger
from wordbox.domain.ratios import percent
from wordbox.domain.srs.models import SrsEntry, heal_entry

DAY = date(2024, 3, 10)


class TestHealEntry:
    def test_valid_entry_is_untouched(self):
        entry = SrsEntry(box=3, next_review_day=DAY, review_count=4, correct_count=3, streak=2)
        assert heal_entry(entry) == entry

    def test_box_clamped_into_range(self):
        assert heal_entry(SrsEntry(box=9, next_review_day=DAY)).box == 6
        assert heal_entry(SrsEntry(box=0, next_review_day=DAY)).box == 1
        assert heal_entry(SrsEntry(box=-4, next_review_day=DAY)).box == 1

    def test_correct_count_capped_by_review_count(self):
        healed = heal_entry(SrsEntry(box=2, next_review_day=DAY, review_count=3, correct_count=7))
        assert healed.correct_count == 3
        assert healed.review_count == 3

    def test_negative_counters_zeroed(self):
        healed = heal_entry(
            SrsEntry(box=2, next_review_day=DAY, review_count=-1, correct_count=-2, streak=-3)
        )
        assert (healed.review_count, healed.correct_count, healed.streak) == (0, 0, 0)

    def test_repair_is_logged(self, caplog):
        heal_entry(SrsEntry(box=12, next_review_day=DAY))
        assert "Repaired corrupted SRS entry" in caplog.text


def test_entry_accuracy():
    assert SrsEntry(box=1, next_review_day=DAY).accuracy == 0
    assert SrsEntry(box=1, next_review_day=DAY, review_count=3, correct_count=2).accuracy == 67


def test_heal_ledger():
    ledger = ProgressLedger(xp=-5, streak_days=2, words_learned_count=-1)
    healed = heal_ledger(ledger)
    assert healed.xp == 0
    assert healed.words_learned_count == 0
    assert healed.streak_days == 2

    fine = ProgressLedger(xp=10)
    assert heal_ledger(fine) is fine


class TestSessionAccumulator:
    def test_combo_tracks_running_maximum(self):
        acc = SessionAccumulator()
        for correct in [True, True, True, False, True, True]:
            acc.record_answer(correct)

        assert acc.correct_count == 5
        assert acc.wrong_count == 1
        assert acc.current_combo == 2
        assert acc.max_combo == 3

    def test_wrong_answer_resets_combo(self):
        acc = SessionAccumulator()
        acc.record_answer(True)
        acc.record_answer(False)
        assert acc.current_combo == 0
        assert acc.max_combo == 1

    def test_elapsed_samples_kept_in_order(self):
        acc = SessionAccumulator()
        acc.record_answer(True, 1.5)
        acc.record_answer(False)
        acc.record_answer(True, 4.0)
        assert acc.elapsed_samples == [1.5, 4.0]

    def test_hints_and_perfect(self):
        acc = SessionAccumulator()
        assert not acc.is_perfect
        acc.record_answer(True)
        acc.record_hint()
        assert acc.is_perfect
        assert acc.hint_uses == 1
        assert acc.counters() == {
            "correct_count": 1,
            "wrong_count": 0,
            "max_combo": 1,
            "current_combo": 1,
            "hint_uses": 1,
        }


def test_unknown_requirement_kind_maps_to_unknown():
    assert RequirementKind("streak_days") is RequirementKind.STREAK_DAYS
    assert RequirementKind("moon_phase") is RequirementKind.UNKNOWN


def test_percent_rounds_halves_up():
    assert percent(1, 8) == 13
    assert percent(5, 8) == 63
    assert percent(1, 3) == 33
    assert percent(3, 3) == 100
    assert percent(0, 0) == 0


def test_entry_accuracy_rounds_halves_up():
    entry = SrsEntry(box=1, next_review_day=DAY, review_count=8, correct_count=1)
    assert entry.accuracy == 13


def test_heal_ledger_drops_unknown_badge_ids(caplog):
    ledger = ProgressLedger(xp=50, earned_badge_ids=frozenset({"1", "99"}))

    healed = heal_ledger(ledger, known_badge_ids=frozenset({"1", "2"}))

    assert healed.earned_badge_ids == frozenset({"1"})
    assert healed.xp == 50
    assert "Dropped badge ids" in caplog.text
    assert heal_ledger(healed, known_badge_ids=frozenset({"1"})) is healed
