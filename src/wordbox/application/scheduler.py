"""
Leitner scheduler.

Box model with fixed intervals:
1. Box 1 is due the same day, box 6 ("mastered") every 30 days
2. A correct answer promotes one box, capped at box 6
3. A wrong answer drops to box 2 from above box 3, otherwise to box 1

Items without an entry are new: they count as box 1 and are always due.
"""

import logging
from collections.abc import Iterable
from dataclasses import replace
from datetime import date, timedelta

from wordbox.domain.clock import EPOCH, days_between
from wordbox.domain.constants import (
    BOX_INTERVALS,
    BOX_LABELS,
    DEFAULT_QUEUE_LIMIT,
    DEMOTION_THRESHOLD,
    MASTERED_BOX,
    MAX_BOX,
    MIN_BOX,
    SOFT_DEMOTION_BOX,
)
from wordbox.domain.errors import ValidationError
from wordbox.domain.ratios import percent
from wordbox.domain.srs.models import ItemSrsInfo, SrsEntry, SrsStats, heal_entry
from wordbox.domain.srs.ports import SrsStore

logger = logging.getLogger(__name__)


def next_review_day(box: int, today: date) -> date:
    return today + timedelta(days=BOX_INTERVALS[box])


def apply_review(entry: SrsEntry | None, was_correct: bool, today: date) -> SrsEntry:
    """
    Pure transition: the entry after one answer given on ``today``.

    A missing entry starts as a fresh box-1 entry.
    """
    current = heal_entry(entry) if entry is not None else SrsEntry.new(today)

    if was_correct:
        box = min(MAX_BOX, current.box + 1)
        correct_count = current.correct_count + 1
        streak = current.streak + 1
    else:
        box = SOFT_DEMOTION_BOX if current.box > DEMOTION_THRESHOLD else MIN_BOX
        correct_count = current.correct_count
        streak = 0

    return replace(
        current,
        box=box,
        last_review_day=today,
        next_review_day=next_review_day(box, today),
        review_count=current.review_count + 1,
        correct_count=correct_count,
        streak=streak,
    )


def is_due(entry: SrsEntry | None, today: date) -> bool:
    if entry is None:
        return True
    return entry.next_review_day <= today


def _load(store: SrsStore, item_ref: str) -> SrsEntry | None:
    entry = store.get(item_ref)
    return heal_entry(entry) if entry is not None else None


def _load_all(store: SrsStore) -> dict[str, SrsEntry]:
    return {ref: heal_entry(entry) for ref, entry in store.list_all().items()}


def record_review(store: SrsStore, item_ref: str, was_correct: bool, today: date) -> SrsEntry:
    """
    Record one answer for ``item_ref`` and persist the updated entry.

    Args:
        store: SRS store port.
        item_ref: Item identifier.
        was_correct: Whether the learner answered correctly.
        today: Day of the review, taken from the clock once by the caller.

    Returns:
        The updated SrsEntry, as written to the store.
    """

    def change(previous: SrsEntry | None) -> SrsEntry:
        updated = apply_review(previous, was_correct, today)
        logger.debug(
            f"Review {item_ref!r} correct={was_correct}: "
            f"box {previous.box if previous else MIN_BOX} -> {updated.box}, "
            f"next {updated.next_review_day}"
        )
        return updated

    return store.update(item_ref, change)


def get_due_items(store: SrsStore, item_refs: Iterable[str], today: date) -> list[str]:
    """Items that are new or whose next review day has arrived, in input order."""
    entries = _load_all(store)
    return [ref for ref in item_refs if is_due(entries.get(ref), today)]


def build_study_queue(
    store: SrsStore,
    due_items: Iterable[str],
    limit: int = DEFAULT_QUEUE_LIMIT,
) -> list[str]:
    """
    Order due items for study and truncate to ``limit``.

    Lower boxes come first; within a box the oldest last review comes first,
    with never-reviewed items treated as reviewed at the epoch. The sort is
    stable, so ties keep input order. No randomness is involved.
    """
    if limit < 0:
        raise ValidationError(f"Queue limit must be >= 0, got {limit}")

    entries = _load_all(store)

    def priority(ref: str) -> tuple[int, date]:
        entry = entries.get(ref)
        if entry is None:
            return (MIN_BOX, EPOCH)
        return (entry.box, entry.last_review_day or EPOCH)

    return sorted(due_items, key=priority)[:limit]


def get_items_in_box(store: SrsStore, item_refs: Iterable[str], box: int) -> list[str]:
    if not MIN_BOX <= box <= MAX_BOX:
        raise ValidationError(f"Box must be between {MIN_BOX} and {MAX_BOX}, got {box}")

    entries = _load_all(store)
    result = []
    for ref in item_refs:
        entry = entries.get(ref)
        current = entry.box if entry else MIN_BOX
        if current == box:
            result.append(ref)
    return result


def compute_stats(store: SrsStore, item_refs: Iterable[str], today: date) -> SrsStats:
    """
    Aggregate box counts, due count, mastery and accuracy over ``item_refs``.

    Items without an entry count toward box 1 and as due. Accuracy is
    computed over reviewed items only and is 0 when nothing was reviewed.
    """
    entries = _load_all(store)
    refs = list(item_refs)

    stats = SrsStats(total=len(refs), due_today=0, boxes={b: 0 for b in BOX_INTERVALS})
    total_reviews = 0
    total_correct = 0

    for ref in refs:
        entry = entries.get(ref)
        if entry is None:
            stats.boxes[MIN_BOX] += 1
            stats.due_today += 1
            continue

        stats.boxes[entry.box] += 1
        if entry.box == MASTERED_BOX:
            stats.mastered_count += 1
        if is_due(entry, today):
            stats.due_today += 1

        total_reviews += entry.review_count
        total_correct += entry.correct_count
        stats.longest_streak = max(stats.longest_streak, entry.streak)

    stats.average_accuracy = percent(total_correct, total_reviews)

    return stats


def get_item_info(store: SrsStore, item_ref: str, today: date) -> ItemSrsInfo:
    entry = _load(store, item_ref)
    if entry is None:
        return ItemSrsInfo(
            item_ref=item_ref,
            box=MIN_BOX,
            box_label=BOX_LABELS[MIN_BOX],
            streak=0,
            review_count=0,
            accuracy=0,
            days_until_due=0,
        )

    return ItemSrsInfo(
        item_ref=item_ref,
        box=entry.box,
        box_label=BOX_LABELS[entry.box],
        streak=entry.streak,
        review_count=entry.review_count,
        accuracy=entry.accuracy,
        days_until_due=days_between(today, entry.next_review_day),
    )


def reset_item(store: SrsStore, item_ref: str) -> None:
    """Forget an item's schedule. Debug/testing only."""
    store.delete(item_ref)
    logger.info(f"Reset SRS entry for {item_ref!r}")


def reset_all(store: SrsStore) -> None:
    store.clear()
    logger.info("Reset all SRS entries")
