"""
Study session assembly.

A session is a bounded batch of never-studied items plus due reviews for a
single sitting. Due items are expected to arrive already prioritized by
``SpacedRepetitionEngine.select_due``.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field

from loguru import logger

from .models import MasteryRecord
from .statistics import estimated_review_time

DEFAULT_MAX_NEW = 5
DEFAULT_MAX_REVIEW = 15


@dataclass(frozen=True)
class LearningSession:
    """A prepared study session."""

    new_items: list[MasteryRecord] = field(default_factory=list)
    review_items: list[MasteryRecord] = field(default_factory=list)
    estimated_duration_seconds: int = 0

    @property
    def total_items(self) -> int:
        return len(self.new_items) + len(self.review_items)

    @property
    def is_empty(self) -> bool:
        return self.total_items == 0

    @property
    def estimated_minutes(self) -> int:
        return -(-self.estimated_duration_seconds // 60)


def create_session(
    new_items: Sequence[MasteryRecord],
    due_items: Sequence[MasteryRecord],
    max_new: int = DEFAULT_MAX_NEW,
    max_review: int = DEFAULT_MAX_REVIEW,
    seconds_per_item: int = 30,
) -> LearningSession:
    """
    Build a balanced learning session.

    Args:
        new_items: Never-studied items, in presentation order
        due_items: Due items, already prioritized
        max_new: Cap on new items
        max_review: Cap on review items
        seconds_per_item: Average time per item for the duration estimate

    Returns:
        LearningSession (possibly empty)
    """
    if max_new < 0 or max_review < 0:
        raise ValueError("Session limits must be non-negative")

    selected_new = list(new_items[:max_new])
    selected_review = list(due_items[:max_review])

    session = LearningSession(
        new_items=selected_new,
        review_items=selected_review,
        estimated_duration_seconds=estimated_review_time(
            len(selected_new) + len(selected_review), seconds_per_item
        ),
    )

    logger.info(
        f"Session built: {len(selected_review)} review + {len(selected_new)} new = "
        f"{session.total_items} items (~{session.estimated_minutes} min)"
    )

    return session
