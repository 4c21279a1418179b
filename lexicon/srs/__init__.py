"""
Spaced-repetition core for Lexicon Lengthen.

Components:
- MasteryRecord / ReviewQuality: immutable per-item state and grades
- SpacedRepetitionEngine: SM-2 review processing and due selection
- create_session: balanced study sessions
- statistics: retention, mastery distribution, daily new-item pacing
- practice: reading and pronunciation level trackers
"""

from .clock import Clock, FixedClock, SystemClock
from .errors import InvalidQualityGrade, MalformedRecord, SchedulingError
from .models import MasteryRecord, ReviewQuality, Skill, validate_record
from .engine import ReviewResult, SM2Config, SpacedRepetitionEngine
from .session import LearningSession, create_session
from .statistics import (
    estimated_review_time,
    mastery_distribution,
    recommended_new_items_per_day,
    retention_rate,
)
from .practice import record_pronunciation_practice, record_reading_attempt

__all__ = [
    # Records
    "MasteryRecord",
    "ReviewQuality",
    "Skill",
    "validate_record",
    # Clock
    "Clock",
    "SystemClock",
    "FixedClock",
    # Errors
    "SchedulingError",
    "InvalidQualityGrade",
    "MalformedRecord",
    # Scheduling
    "SM2Config",
    "SpacedRepetitionEngine",
    "ReviewResult",
    "LearningSession",
    "create_session",
    # Statistics
    "retention_rate",
    "mastery_distribution",
    "recommended_new_items_per_day",
    "estimated_review_time",
    # Practice
    "record_reading_attempt",
    "record_pronunciation_practice",
]
