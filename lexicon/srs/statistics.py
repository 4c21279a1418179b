"""Aggregate statistics over mastery records. Stateless."""

from __future__ import annotations

from collections.abc import Iterable

from .models import MAX_MASTERY_LEVEL, MIN_MASTERY_LEVEL, MasteryRecord, validate_record

MIN_NEW_ITEMS_PER_DAY = 1
MAX_NEW_ITEMS_PER_DAY = 10


def retention_rate(records: Iterable[MasteryRecord]) -> float:
    """Share of correct answers across all records; 0 when nothing was reviewed."""
    total_correct = 0
    total_incorrect = 0
    for record in records:
        total_correct += record.correct_count
        total_incorrect += record.incorrect_count

    total = total_correct + total_incorrect
    if total == 0:
        return 0.0
    return total_correct / total


def mastery_distribution(records: Iterable[MasteryRecord]) -> dict[int, int]:
    """Count records per mastery level. Always returns all six levels."""
    distribution = {level: 0 for level in range(MIN_MASTERY_LEVEL, MAX_MASTERY_LEVEL + 1)}
    for record in records:
        validate_record(record)
        distribution[record.mastery_level] += 1
    return distribution


def recommended_new_items_per_day(
    total_to_learn: int,
    current_daily_load: int,
    target_minutes: int = 20,
) -> int:
    """
    Estimate how many new items to introduce per day.

    Assumes 30 seconds per review, so ``target_minutes * 2`` reviews fit in the
    budget. Slots left after the current review load are divided by 4 because
    new items are reviewed several times early on. Clamped to 1-10.
    """
    max_reviews_per_day = target_minutes * 2
    available_slots = max(0, max_reviews_per_day - current_daily_load)
    per_day = available_slots // 4
    return max(MIN_NEW_ITEMS_PER_DAY, min(per_day, MAX_NEW_ITEMS_PER_DAY))


def estimated_review_time(item_count: int, seconds_per_item: int = 30) -> int:
    """Estimated seconds to review ``item_count`` items."""
    return item_count * seconds_per_item
