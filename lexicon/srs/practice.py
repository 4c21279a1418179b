"""
Level-stepping trackers for reading and pronunciation practice.

These skills are not scheduled with SM-2: a reading attempt moves the level
one step up or down, and pronunciation levels rise only after enough
practice at the current level. Neither touches the ease factor or interval.
"""

from __future__ import annotations

from datetime import datetime

from .models import MAX_MASTERY_LEVEL, MasteryRecord, validate_record

BASE_PRACTICES_PER_LEVEL = 3


def record_reading_attempt(record: MasteryRecord, correct: bool, now: datetime) -> MasteryRecord:
    """Return the record after one reading attempt."""
    validate_record(record)

    if correct:
        return record.with_updates({
            "correct_count": record.correct_count + 1,
            "mastery_level": min(MAX_MASTERY_LEVEL, record.mastery_level + 1),
            "last_reviewed_at": now,
        })
    return record.with_updates({
        "incorrect_count": record.incorrect_count + 1,
        "mastery_level": max(0, record.mastery_level - 1),
        "last_reviewed_at": now,
    })


def practices_needed(level: int) -> int:
    """Total practice count required before leaving ``level``."""
    return BASE_PRACTICES_PER_LEVEL + level


def record_pronunciation_practice(
    record: MasteryRecord,
    successful: bool,
    now: datetime,
) -> MasteryRecord:
    """
    Return the record after one pronunciation practice.

    The practice count is the total number of attempts (correct plus
    incorrect). A successful practice raises the level once the count
    reaches ``3 + level``; higher levels need more practice.
    """
    validate_record(record)

    correct_count = record.correct_count + (1 if successful else 0)
    incorrect_count = record.incorrect_count + (0 if successful else 1)
    practice_count = correct_count + incorrect_count

    level = record.mastery_level
    if successful and level < MAX_MASTERY_LEVEL and practice_count >= practices_needed(level):
        level += 1

    return record.with_updates({
        "correct_count": correct_count,
        "incorrect_count": incorrect_count,
        "mastery_level": level,
        "last_reviewed_at": now,
    })
