import json
import threading
from datetime import date, timedelta

import pytest

from wordbox.application import scheduler
from wordbox.domain.errors import StorageError
from wordbox.domain.progress.models import ProgressLedger
from wordbox.domain.srs.models import SrsEntry
from wordbox.infrastructure.adapters.json_store import JsonLedgerStore, JsonSrsStore


@pytest.fixture
def srs_path(tmp_path):
    return tmp_path / "data" / "srs.json"


@pytest.fixture
def ledger_path(tmp_path):
    return tmp_path / "data" / "ledgers.json"


def test_srs_round_trip(srs_path):
    store = JsonSrsStore(srs_path)
    entry = SrsEntry(
        box=3,
        next_review_day=date(2024, 3, 14),
        last_review_day=date(2024, 3, 11),
        review_count=2,
        correct_count=2,
        streak=2,
    )
    store.put("apple", entry)

    assert JsonSrsStore(srs_path).get("apple") == entry
    assert store.list_all() == {"apple": entry}


def test_srs_record_format(srs_path):
    JsonSrsStore(srs_path).put("apple", SrsEntry(box=2, next_review_day=date(2024, 3, 11)))

    raw = json.loads(srs_path.read_text())
    assert raw["apple"] == {
        "box": 2,
        "lastReviewDay": None,
        "nextReviewDay": "2024-03-11",
        "reviewCount": 0,
        "correctCount": 0,
        "streak": 0,
    }


def test_missing_file_is_empty(srs_path, ledger_path):
    assert JsonSrsStore(srs_path).get("apple") is None
    assert JsonSrsStore(srs_path).list_all() == {}
    assert JsonLedgerStore(ledger_path).get("ana") == ProgressLedger()


def test_delete_and_clear(srs_path):
    store = JsonSrsStore(srs_path)
    entry = SrsEntry(box=1, next_review_day=date(2024, 3, 10))
    store.put("a", entry)
    store.put("b", entry)

    store.delete("a")
    store.delete("missing")
    assert set(store.list_all()) == {"b"}

    store.clear()
    assert store.list_all() == {}


def test_no_temp_files_left_behind(srs_path):
    store = JsonSrsStore(srs_path)
    store.put("a", SrsEntry(box=1, next_review_day=date(2024, 3, 10)))
    assert sorted(p.name for p in srs_path.parent.iterdir()) == ["srs.json", "srs.json.lock"]


def test_ledger_round_trip(ledger_path):
    ledger = ProgressLedger(
        xp=155,
        streak_days=2,
        last_activity_day=date(2024, 3, 10),
        practice_session_count=1,
        perfect_session_count=1,
        articles_read_count=1,
        words_learned_count=3,
        earned_badge_ids=frozenset({"1", "50"}),
        completed_level_tags=frozenset({"A1"}),
        read_article_ids=frozenset({"a-1"}),
    )
    JsonLedgerStore(ledger_path).put("ana", ledger)

    assert JsonLedgerStore(ledger_path).get("ana") == ledger
    raw = json.loads(ledger_path.read_text())["ana"]
    assert raw["earnedBadgeIds"] == ["1", "50"]
    assert raw["lastActivityDay"] == "2024-03-10"


def test_ledger_numeric_badge_ids_become_strings(ledger_path):
    ledger_path.parent.mkdir(parents=True)
    ledger_path.write_text(json.dumps({"ana": {"xp": 10, "earnedBadgeIds": [1, 50]}}))

    ledger = JsonLedgerStore(ledger_path).get("ana")

    assert ledger.earned_badge_ids == frozenset({"1", "50"})
    assert ledger.streak_days == 0


def test_corrupt_json_raises_storage_error(srs_path):
    srs_path.parent.mkdir(parents=True)
    srs_path.write_text("{not json")
    with pytest.raises(StorageError):
        JsonSrsStore(srs_path).get("a")


def test_non_object_document_raises_storage_error(ledger_path):
    ledger_path.parent.mkdir(parents=True)
    ledger_path.write_text("[1, 2]")
    with pytest.raises(StorageError):
        JsonLedgerStore(ledger_path).get("ana")


@pytest.mark.parametrize(
    "record",
    [
        {"box": 2},
        {"box": 2, "nextReviewDay": "tomorrow"},
        {"box": "two", "nextReviewDay": "2024-03-10"},
    ],
)
def test_unreadable_srs_record_raises_storage_error(srs_path, record):
    srs_path.parent.mkdir(parents=True)
    srs_path.write_text(json.dumps({"a": record}))
    with pytest.raises(StorageError):
        JsonSrsStore(srs_path).get("a")


def test_out_of_range_values_are_left_for_healing(srs_path):
    srs_path.parent.mkdir(parents=True)
    srs_path.write_text(json.dumps({"a": {"box": 9, "nextReviewDay": "2024-03-10"}}))
    assert JsonSrsStore(srs_path).get("a").box == 9


def test_srs_update_sees_current_entry(srs_path):
    store = JsonSrsStore(srs_path)
    seen = []

    def bump(entry):
        seen.append(entry)
        return SrsEntry(box=(entry.box + 1) if entry else 1, next_review_day=date(2024, 3, 10))

    store.update("a", bump)
    store.update("a", bump)

    assert seen[0] is None
    assert seen[1].box == 1
    assert store.get("a").box == 2


def test_ledger_update_skips_write_when_unchanged(ledger_path):
    store = JsonLedgerStore(ledger_path)

    result = store.update("ana", lambda ledger: ledger)

    assert result == ProgressLedger()
    assert not ledger_path.exists()


def test_ledger_update_persists(ledger_path):
    store = JsonLedgerStore(ledger_path)
    store.update("ana", lambda ledger: ProgressLedger(xp=ledger.xp + 5))
    store.update("ana", lambda ledger: ProgressLedger(xp=ledger.xp + 5))
    assert JsonLedgerStore(ledger_path).get("ana").xp == 10


def test_ledger_update_error_leaves_file_alone(ledger_path):
    store = JsonLedgerStore(ledger_path)
    store.put("ana", ProgressLedger(xp=5))

    def explode(ledger):
        raise ValueError("bad event")

    with pytest.raises(ValueError):
        store.update("ana", explode)
    assert store.get("ana").xp == 5
    # The lock was released
    store.update("ana", lambda ledger: ProgressLedger(xp=6))
    assert store.get("ana").xp == 6


def test_two_stores_on_one_file_keep_both_reviews(srs_path):
    """A review through one store never erases a concurrent review through another."""
    store_a = JsonSrsStore(srs_path)
    store_b = JsonSrsStore(srs_path)
    today = date(2024, 3, 10)
    a_loaded = threading.Event()
    b_started = threading.Event()

    def slow_first_review(entry):
        a_loaded.set()
        # Hold the read-modify-write open while the other store tries to write
        b_started.wait(timeout=5)
        return SrsEntry(
            box=2,
            next_review_day=today + timedelta(days=1),
            last_review_day=today,
            review_count=1,
            correct_count=1,
            streak=1,
        )

    def review_pear():
        a_loaded.wait(timeout=5)
        b_started.set()
        scheduler.record_review(store_b, "pear", True, today)

    writer_b = threading.Thread(target=review_pear)
    writer_b.start()
    store_a.update("apple", slow_first_review)
    writer_b.join(timeout=10)

    assert not writer_b.is_alive()
    assert set(json.loads(srs_path.read_text())) == {"apple", "pear"}
    assert JsonSrsStore(srs_path).get("pear").box == 2


def test_stores_interleaved_sequentially_keep_every_key(ledger_path):
    first = JsonLedgerStore(ledger_path)
    second = JsonLedgerStore(ledger_path)

    first.update("ana", lambda ledger: ProgressLedger(xp=1))
    second.update("bo", lambda ledger: ProgressLedger(xp=2))
    first.update("ana", lambda ledger: ProgressLedger(xp=ledger.xp + 1))

    assert JsonLedgerStore(ledger_path).get("ana").xp == 2
    assert JsonLedgerStore(ledger_path).get("bo").xp == 2
