"""
Learner progress: points totals, milestone counters and daily streaks.

Profiles are immutable snapshots, updated the same way mastery records are:
each function returns a new profile for the caller to persist.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime
from enum import Enum


class Milestone(str, Enum):
    WORD_LEARNED = "words_known"
    DEFINITION_MASTERED = "definitions_mastered"
    PRONUNCIATION_MASTERED = "pronunciations_mastered"
    SENTENCE_CREATED = "sentences_created"


@dataclass(frozen=True)
class LearnerProfile:
    """Gamification totals for one learner."""

    total_points: int = 0
    words_known: int = 0
    definitions_mastered: int = 0
    pronunciations_mastered: int = 0
    sentences_created: int = 0
    current_streak: int = 0
    longest_streak: int = 0
    last_active_at: datetime | None = None


def record_activity(profile: LearnerProfile, now: datetime) -> LearnerProfile:
    """
    Update the daily streak for activity at ``now``.

    Streaks count calendar days: activity on the next day extends the streak,
    a gap of two or more days restarts it at 1, and further activity on the
    same day leaves it unchanged.
    """
    if profile.last_active_at is None:
        streak = 1
    else:
        days_diff = (now.date() - profile.last_active_at.date()).days
        if days_diff == 1:
            streak = profile.current_streak + 1
        elif days_diff > 1:
            streak = 1
        else:
            streak = profile.current_streak

    return replace(
        profile,
        current_streak=streak,
        longest_streak=max(profile.longest_streak, streak),
        last_active_at=now,
    )


def add_points(profile: LearnerProfile, points: int) -> LearnerProfile:
    if points < 0:
        raise ValueError(f"Cannot add negative points: {points}")
    return replace(profile, total_points=profile.total_points + points)


def record_milestone(profile: LearnerProfile, milestone: Milestone | str) -> LearnerProfile:
    """Increment the counter for a learning milestone."""
    counter = Milestone(milestone).value
    return replace(profile, **{counter: getattr(profile, counter) + 1})
