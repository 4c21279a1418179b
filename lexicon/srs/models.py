"""
Mastery records and review grades.

A MasteryRecord is an immutable snapshot of one learnable item for one skill
(a word's definition, pronunciation, reading or writing). The scheduler never
mutates a record: every review produces a new snapshot which the caller's
store writes back.

SM-2 Grade Scale:
0 - Complete blackout
1 - Incorrect
2 - Incorrect, but remembered after seeing the answer
3 - Correct with serious difficulty
4 - Correct after hesitation
5 - Perfect response
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum, IntEnum
from types import MappingProxyType
from typing import Any

from .errors import MalformedRecord

MIN_MASTERY_LEVEL = 0
MAX_MASTERY_LEVEL = 5
DEFAULT_EASE_FACTOR = 2.5
MINIMUM_EASE_FACTOR = 1.3

INTEGER_FIELDS = (
    "mastery_level",
    "correct_count",
    "incorrect_count",
    "interval_days",
    "points_earned",
)


class Skill(str, Enum):
    """The facet of an item being learned."""

    DEFINITION = "definition"
    PRONUNCIATION = "pronunciation"
    READING = "reading"
    WRITING = "writing"


class ReviewQuality(IntEnum):
    """Quality grades for the SM-2 algorithm (0-5)."""

    COMPLETE_BLACKOUT = 0
    INCORRECT = 1
    INCORRECT_BUT_REMEMBERED = 2
    CORRECT_WITH_DIFFICULTY = 3
    CORRECT_WITH_HESITATION = 4
    PERFECT_RESPONSE = 5

    @property
    def description(self) -> str:
        return _QUALITY_DESCRIPTIONS[self]

    @property
    def is_correct(self) -> bool:
        return self >= ReviewQuality.CORRECT_WITH_DIFFICULTY


_QUALITY_DESCRIPTIONS = {
    ReviewQuality.COMPLETE_BLACKOUT: "Complete blackout",
    ReviewQuality.INCORRECT: "Incorrect",
    ReviewQuality.INCORRECT_BUT_REMEMBERED: "Incorrect, but remembered after seeing",
    ReviewQuality.CORRECT_WITH_DIFFICULTY: "Correct with serious difficulty",
    ReviewQuality.CORRECT_WITH_HESITATION: "Correct after hesitation",
    ReviewQuality.PERFECT_RESPONSE: "Perfect response",
}

LEVEL_DESCRIPTIONS: dict[Skill, tuple[str, ...]] = {
    Skill.DEFINITION: (
        "Not Started", "Learning", "Familiar", "Practiced", "Proficient", "Mastered",
    ),
    Skill.PRONUNCIATION: (
        "Not Practiced", "Beginning", "Developing", "Improving", "Confident", "Mastered",
    ),
    Skill.READING: (
        "Not Started", "Decoding", "Comfortable", "Fluent", "Instant", "Mastered",
    ),
    Skill.WRITING: (
        "Not Started", "Copying", "Recalling", "Spelling", "Fluent", "Mastered",
    ),
}


@dataclass(frozen=True)
class MasteryRecord:
    """Spaced repetition state for a single (item, skill) pair."""

    item_id: str
    created_at: datetime
    skill: Skill = Skill.DEFINITION
    mastery_level: int = 0
    correct_count: int = 0
    incorrect_count: int = 0
    ease_factor: float = DEFAULT_EASE_FACTOR
    interval_days: int = 0
    last_reviewed_at: datetime | None = None
    next_review_at: datetime | None = None
    points_earned: int = 0
    # Display data owned by the caller (spelling, letter counts, definition length)
    payload: Mapping[str, Any] = field(default_factory=dict, hash=False)

    def __post_init__(self):
        # Read-only copy so snapshots never share mutable state
        object.__setattr__(self, "payload", MappingProxyType(dict(self.payload)))

    @classmethod
    def new(
        cls,
        item_id: str,
        created_at: datetime,
        skill: Skill = Skill.DEFINITION,
        payload: Mapping[str, Any] | None = None,
        ease_factor: float = DEFAULT_EASE_FACTOR,
    ) -> MasteryRecord:
        """Create the record for an item presented for the first time."""
        return cls(
            item_id=item_id,
            created_at=created_at,
            skill=Skill(skill),
            ease_factor=ease_factor,
            payload=dict(payload or {}),
        )

    @property
    def never_studied(self) -> bool:
        return self.next_review_at is None and self.mastery_level == 0

    @property
    def is_mastered(self) -> bool:
        return self.mastery_level >= MAX_MASTERY_LEVEL

    @property
    def total_reviews(self) -> int:
        return self.correct_count + self.incorrect_count

    @property
    def accuracy_rate(self) -> float:
        """Share of correct answers (0.0 to 1.0, 0 when never reviewed)."""
        if self.total_reviews == 0:
            return 0.0
        return self.correct_count / self.total_reviews

    @property
    def level_description(self) -> str:
        labels = LEVEL_DESCRIPTIONS[Skill(self.skill)]
        level = self.mastery_level
        if _is_integer(level) and MIN_MASTERY_LEVEL <= level <= MAX_MASTERY_LEVEL:
            return labels[level]
        return "Unknown"

    def with_updates(self, updates: Mapping[str, Any]) -> MasteryRecord:
        """Return a copy with the given fields replaced."""
        return replace(self, **updates)


def _is_integer(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def record_problems(
    record: MasteryRecord,
    minimum_ease: float = MINIMUM_EASE_FACTOR,
) -> list[str]:
    """
    List every invariant the record violates (empty when consistent).

    Args:
        record: Record to check
        minimum_ease: Ease floor in force (the engine's configured minimum)
    """
    problems = []
    for name in INTEGER_FIELDS:
        value = getattr(record, name)
        if not _is_integer(value):
            problems.append(f"{name} {value!r} is not an integer")
        elif value < 0:
            problems.append(f"{name} {value} is negative")

    level = record.mastery_level
    if _is_integer(level) and level > MAX_MASTERY_LEVEL:
        problems.append(f"mastery_level {level} outside 0-5")

    ease = record.ease_factor
    if isinstance(ease, bool) or not isinstance(ease, (int, float)):
        problems.append(f"ease_factor {ease!r} is not a number")
    elif not math.isfinite(ease):
        problems.append(f"ease_factor {ease} is not finite")
    elif ease < minimum_ease:
        problems.append(f"ease_factor {ease} below {minimum_ease}")
    return problems


def validate_record(
    record: MasteryRecord,
    minimum_ease: float = MINIMUM_EASE_FACTOR,
) -> MasteryRecord:
    """
    Refuse records with inconsistent state.

    Raises:
        MalformedRecord: if any invariant is violated
    """
    problems = record_problems(record, minimum_ease)
    if problems:
        raise MalformedRecord(record.item_id, problems)
    return record
