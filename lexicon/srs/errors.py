"""
Scheduling errors.

Invalid input fails fast with a typed error. Nothing here is fatal to the
caller: it decides whether to skip the record or abort the session.
"""

from __future__ import annotations


class SchedulingError(Exception):
    """Base class for errors raised by the scheduling core."""


class InvalidQualityGrade(SchedulingError, ValueError):
    """Raised when a review grade falls outside the 0-5 scale."""

    def __init__(self, quality: object):
        self.quality = quality
        super().__init__(f"Review quality must be an integer 0-5, got {quality!r}")


class MalformedRecord(SchedulingError, ValueError):
    """Raised when a mastery record carries inconsistent state."""

    def __init__(self, item_id: str, problems: list[str]):
        self.item_id = item_id
        self.problems = problems
        super().__init__(f"Malformed mastery record {item_id!r}: {'; '.join(problems)}")
