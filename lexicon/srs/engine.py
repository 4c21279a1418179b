"""
SM-2 Spaced Repetition Engine.

Implements:
- SM-2 review processing (ease factor, interval, mastery level)
- Partial-credit points on every mastery level climbed
- Due selection with overdue-first prioritization

Every operation is a pure transformation: records go in, new records and
plans come out. Persistence and concurrency control belong to the caller's
store; "now" comes from an injected clock.
"""

from __future__ import annotations

import math
import sys
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import TYPE_CHECKING, Any

from loguru import logger

from .clock import Clock, SystemClock
from .errors import InvalidQualityGrade, MalformedRecord
from .models import MAX_MASTERY_LEVEL, MasteryRecord, ReviewQuality, Skill, validate_record
from .session import DEFAULT_MAX_NEW, DEFAULT_MAX_REVIEW, LearningSession, create_session

if TYPE_CHECKING:
    from lexicon.points import PointValueProvider

# Sort key for records that have never been studied
NEVER_STUDIED_OVERDUE = sys.maxsize

SECONDS_PER_DAY = 86400


# =============================================================================
# Configuration & Results
# =============================================================================


@dataclass
class SM2Config:
    """Configuration for the SM-2 algorithm."""

    initial_easiness: float = 2.5
    minimum_easiness: float = 1.3
    first_interval: int = 1  # Days after the first success
    second_interval: int = 6  # Days after the second success
    minimum_correct_grade: int = 3
    level_up_grade: int = 4
    level_reward_divisor: int = 5
    due_limit: int = 20
    seconds_per_item: int = 30


@dataclass(frozen=True)
class ReviewResult:
    """Outcome of processing one review."""

    updates: dict[str, Any] = field(default_factory=dict)
    was_correct: bool = False
    points_awarded: int = 0

    @property
    def new_ease_factor(self) -> float:
        return self.updates["ease_factor"]

    @property
    def new_interval_days(self) -> int:
        return self.updates["interval_days"]

    @property
    def new_mastery_level(self) -> int:
        return self.updates["mastery_level"]

    @property
    def next_review_at(self) -> datetime:
        return self.updates["next_review_at"]

    def apply_to(self, record: MasteryRecord) -> MasteryRecord:
        """Return the record snapshot with these updates applied."""
        return record.with_updates(self.updates)


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero (intervals are positive)."""
    return int(math.floor(value + 0.5))


# =============================================================================
# Engine
# =============================================================================


class SpacedRepetitionEngine:
    """
    Implements the SM-2 spaced repetition algorithm over mastery records.

    Each record has:
    - Ease Factor (EF): how easy the item is (2.5 default, min 1.3)
    - Interval: days until next review
    - Mastery level: discrete 0-5 progress tier
    """

    def __init__(
        self,
        config: SM2Config | None = None,
        clock: Clock | None = None,
        point_values: PointValueProvider | None = None,
    ):
        """
        Initialize the engine.

        Args:
            config: Custom configuration (uses defaults if None)
            clock: Source of "now" (system UTC clock if None)
            point_values: Full-mastery point values for the reward step
        """
        self.config = config or SM2Config()
        self.clock = clock or SystemClock()
        if point_values is None:
            from lexicon.points import SkillPointValues

            point_values = SkillPointValues()
        self.point_values = point_values

    def _now(self, now: datetime | None) -> datetime:
        return now if now is not None else self.clock.now()

    def new_record(
        self,
        item_id: str,
        skill: Skill = Skill.DEFINITION,
        payload: dict[str, Any] | None = None,
        now: datetime | None = None,
    ) -> MasteryRecord:
        """Create a never-studied record starting at the configured ease."""
        return MasteryRecord.new(
            item_id,
            created_at=self._now(now),
            skill=skill,
            payload=payload,
            ease_factor=self.config.initial_easiness,
        )

    # =========================================================================
    # Review Processing
    # =========================================================================

    def check_quality(self, quality: int | ReviewQuality) -> int:
        """
        Validate a review grade.

        Raises:
            InvalidQualityGrade: if quality is not an integer in 0-5
        """
        if isinstance(quality, bool) or not isinstance(quality, int):
            raise InvalidQualityGrade(quality)
        if not ReviewQuality.COMPLETE_BLACKOUT <= quality <= ReviewQuality.PERFECT_RESPONSE:
            raise InvalidQualityGrade(quality)
        return int(quality)

    def next_ease_factor(self, ease_factor: float, quality: int) -> float:
        # EF' = EF + (0.1 - (5 - q) * (0.08 + (5 - q) * 0.02))
        miss = 5 - quality
        ef_delta = 0.1 - miss * (0.08 + miss * 0.02)
        return max(self.config.minimum_easiness, ease_factor + ef_delta)

    def next_interval(self, interval_days: int, new_ease: float, is_correct: bool) -> int:
        if not is_correct:
            # Failed - next review is tomorrow regardless of prior interval
            return self.config.first_interval
        if interval_days == 0:
            return self.config.first_interval
        if interval_days == 1:
            return self.config.second_interval
        return max(1, round_half_up(interval_days * new_ease))

    def process_review(
        self,
        record: MasteryRecord,
        quality: int | ReviewQuality,
        now: datetime | None = None,
    ) -> ReviewResult:
        """
        Calculate the record state after a review.

        Args:
            record: Current mastery record (not modified)
            quality: Review grade (0-5)
            now: Review time (clock time if None)

        Returns:
            ReviewResult with the new field values

        Raises:
            InvalidQualityGrade: quality outside 0-5
            MalformedRecord: record violates its invariants
        """
        q = self.check_quality(quality)
        try:
            validate_record(record, self.config.minimum_easiness)
        except MalformedRecord as exc:
            logger.warning(f"Refusing to review {exc.item_id}: {exc.problems}")
            raise

        now = self._now(now)
        new_ease = self.next_ease_factor(record.ease_factor, q)
        is_correct = q >= self.config.minimum_correct_grade
        new_interval = self.next_interval(record.interval_days, new_ease, is_correct)

        if is_correct:
            gain = 1 if q >= self.config.level_up_grade else 0
            new_level = min(MAX_MASTERY_LEVEL, record.mastery_level + gain)
        else:
            new_level = max(0, record.mastery_level - 1)

        # Partial credit per level climbed, compared against the pre-review level
        points_awarded = 0
        if new_level > record.mastery_level:
            points_awarded = (
                self.point_values.base_points(record) // self.config.level_reward_divisor
            )

        updates = {
            "ease_factor": new_ease,
            "interval_days": new_interval,
            "mastery_level": new_level,
            "next_review_at": now + timedelta(days=new_interval),
            "last_reviewed_at": now,
            "correct_count": record.correct_count + (1 if is_correct else 0),
            "incorrect_count": record.incorrect_count + (0 if is_correct else 1),
            "points_earned": record.points_earned + points_awarded,
        }

        logger.debug(
            f"Processed review for {record.item_id}: grade={q}, "
            f"ease={new_ease:.2f}, interval={new_interval}d, level={new_level}, "
            f"points=+{points_awarded}"
        )

        return ReviewResult(updates=updates, was_correct=is_correct, points_awarded=points_awarded)

    def apply_review(
        self,
        record: MasteryRecord,
        quality: int | ReviewQuality,
        now: datetime | None = None,
    ) -> MasteryRecord:
        """Process a review and return the updated record snapshot."""
        return self.process_review(record, quality, now=now).apply_to(record)

    def grade_from_response(
        self,
        is_correct: bool,
        response_ms: int,
        expected_ms: int = 10000,
    ) -> ReviewQuality:
        """
        Convert a timed response to an SM-2 grade.

        Args:
            is_correct: Whether the answer was correct
            response_ms: Time taken to respond
            expected_ms: Expected response time

        Returns:
            Grade 0-5
        """
        if not is_correct:
            if response_ms < expected_ms * 0.5:
                return ReviewQuality.INCORRECT_BUT_REMEMBERED  # Quick wrong = almost knew it
            elif response_ms < expected_ms:
                return ReviewQuality.INCORRECT
            else:
                return ReviewQuality.COMPLETE_BLACKOUT

        if response_ms < expected_ms * 0.5:
            return ReviewQuality.PERFECT_RESPONSE
        elif response_ms < expected_ms:
            return ReviewQuality.CORRECT_WITH_HESITATION
        else:
            return ReviewQuality.CORRECT_WITH_DIFFICULTY

    # =========================================================================
    # Scheduling
    # =========================================================================

    def is_due(self, record: MasteryRecord, now: datetime | None = None) -> bool:
        """Check if a record is due for review (or was never studied)."""
        if record.next_review_at is None:
            return record.mastery_level == 0
        return record.next_review_at <= self._now(now)

    def overdue_days(self, record: MasteryRecord, now: datetime | None = None) -> int:
        """Whole days past the scheduled review; never-studied records are maximally overdue."""
        if record.next_review_at is None:
            return NEVER_STUDIED_OVERDUE if record.mastery_level == 0 else 0
        elapsed = (self._now(now) - record.next_review_at).total_seconds()
        return max(0, math.floor(elapsed / SECONDS_PER_DAY))

    def select_due(
        self,
        records: Iterable[MasteryRecord],
        now: datetime | None = None,
        limit: int | None = None,
    ) -> list[MasteryRecord]:
        """
        Return records due for review, highest priority first.

        Priority: most overdue first, then lowest ease factor (harder items
        first). Remaining ties keep their input order.

        Args:
            records: Candidate records
            now: Comparison time (clock time if None)
            limit: Maximum records to return (config default if None)

        Returns:
            Ordered list of at most ``limit`` due records
        """
        limit = self.config.due_limit if limit is None else limit
        if limit < 0:
            raise ValueError(f"limit must be non-negative, got {limit}")

        now = self._now(now)
        due = [record for record in records if self.is_due(record, now)]
        due.sort(key=lambda r: (-self.overdue_days(r, now), r.ease_factor))

        logger.debug(f"Found {len(due)} due records, returning {min(limit, len(due))}")

        return due[:limit]

    def create_session(
        self,
        new_items: Iterable[MasteryRecord],
        due_items: Iterable[MasteryRecord],
        max_new: int = DEFAULT_MAX_NEW,
        max_review: int = DEFAULT_MAX_REVIEW,
    ) -> LearningSession:
        """Build a session timed with the configured seconds per item."""
        return create_session(
            list(new_items),
            list(due_items),
            max_new=max_new,
            max_review=max_review,
            seconds_per_item=self.config.seconds_per_item,
        )
