"""
Points Calculator.

Deterministic integer formulas for every rewarded activity:
- Word Known: 10 + (letterCount × 2)
- Definition Mastered: 15 + (definitionLength ÷ 10)
- Pronunciation Mastered: 20 + (5 per additional accent)
- Sentence Created: 25 + (wordCount × 3) + totalLetterCount
- Submission Approved: 100 (+50 with audio)
- Daily Streak: min(streak × 5, 50)

The scheduler only sees the PointValueProvider protocol, so it never needs
to know what a word or a definition looks like.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Protocol

from lexicon.srs.models import MasteryRecord, Skill

MAX_STREAK_BONUS = 50


class PointValueProvider(Protocol):
    """Full-mastery point value of the item behind a record."""

    def base_points(self, record: MasteryRecord) -> int:
        ...


class PointsCalculator:
    """Point formulas for words, definitions, pronunciations, sentences and streaks."""

    # =========================================================================
    # Words
    # =========================================================================

    @staticmethod
    def word_known(letter_count: int) -> int:
        return 10 + letter_count * 2

    # =========================================================================
    # Definitions
    # =========================================================================

    @staticmethod
    def definition_mastered(definition_length: int) -> int:
        return 15 + definition_length // 10

    # =========================================================================
    # Pronunciations
    # =========================================================================

    @staticmethod
    def pronunciation_mastered(accent_index: int = 0) -> int:
        """Base points for the first accent, +5 for each additional one."""
        return 20 + accent_index * 5

    @classmethod
    def total_pronunciation_points(cls, accent_count: int) -> int:
        return sum(cls.pronunciation_mastered(i) for i in range(accent_count))

    # =========================================================================
    # Sentences
    # =========================================================================

    @staticmethod
    def sentence_created(word_count: int, total_letter_count: int) -> int:
        return 25 + word_count * 3 + total_letter_count

    @classmethod
    def template_completed(
        cls,
        template_points: int,
        word_count: int,
        total_letter_count: int,
    ) -> int:
        """Template base points plus the sentence creation points."""
        return template_points + cls.sentence_created(word_count, total_letter_count)

    # =========================================================================
    # Submissions & Streaks
    # =========================================================================

    @staticmethod
    def submission_approved(has_audio: bool) -> int:
        return 150 if has_audio else 100

    @staticmethod
    def daily_streak(streak_days: int) -> int:
        return min(streak_days * 5, MAX_STREAK_BONUS)

    # =========================================================================
    # Aggregates
    # =========================================================================

    @classmethod
    def total_potential_points(
        cls,
        letter_count: int,
        definition_lengths: Iterable[int],
        accent_count: int,
    ) -> int:
        """
        Points for learning a word completely.

        Knowing the word, mastering every definition and every pronunciation.
        """
        total = cls.word_known(letter_count)
        total += sum(cls.definition_mastered(length) for length in definition_lengths)
        total += cls.total_pronunciation_points(accent_count)
        return total

    @classmethod
    def points_remaining(
        cls,
        definitions: Mapping[str, int],
        pronunciation_ids: list[str],
        mastered_definition_ids: set[str],
        mastered_pronunciation_ids: set[str],
    ) -> int:
        """
        Points still available for a word given what is already mastered.

        Args:
            definitions: definition id -> definition length
            pronunciation_ids: pronunciation ids in accent order
            mastered_definition_ids: definitions already mastered
            mastered_pronunciation_ids: pronunciations already mastered

        Returns:
            Sum of definition and pronunciation points not yet earned
        """
        remaining = sum(
            cls.definition_mastered(length)
            for definition_id, length in definitions.items()
            if definition_id not in mastered_definition_ids
        )
        remaining += sum(
            cls.pronunciation_mastered(index)
            for index, pronunciation_id in enumerate(pronunciation_ids)
            if pronunciation_id not in mastered_pronunciation_ids
        )
        return remaining


@dataclass(frozen=True)
class PointsBreakdown:
    """Points split by activity, for display."""

    word_points: int = 0
    definition_points: int = 0
    pronunciation_points: int = 0
    sentence_points: int = 0
    submission_points: int = 0
    streak_points: int = 0

    @property
    def total(self) -> int:
        return (
            self.word_points
            + self.definition_points
            + self.pronunciation_points
            + self.sentence_points
            + self.submission_points
            + self.streak_points
        )

    @classmethod
    def empty(cls) -> PointsBreakdown:
        return cls()


class SkillPointValues:
    """
    Default point-value provider keyed on a record's skill.

    Reads the numbers it needs from the record payload:
    - definition: ``definition_length``
    - pronunciation: ``accent_index``
    - reading / writing: ``letter_count``
    Missing payload keys count as zero.
    """

    def base_points(self, record: MasteryRecord) -> int:
        payload = record.payload
        skill = Skill(record.skill)

        if skill is Skill.DEFINITION:
            return PointsCalculator.definition_mastered(int(payload.get("definition_length", 0)))
        if skill is Skill.PRONUNCIATION:
            return PointsCalculator.pronunciation_mastered(int(payload.get("accent_index", 0)))
        return PointsCalculator.word_known(int(payload.get("letter_count", 0)))


class FixedPointValue:
    """Provider returning the same value for every item."""

    def __init__(self, points: int):
        self.points = points

    def base_points(self, record: MasteryRecord) -> int:
        return self.points
