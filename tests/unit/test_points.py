"""
Unit tests for the points formulas and point-value providers.
"""

from dataclasses import replace

import pytest

from lexicon.points import FixedPointValue, PointsBreakdown, PointsCalculator, SkillPointValues
from lexicon.srs import Skill


class TestFormulas:
    def test_word_known(self):
        assert PointsCalculator.word_known(letter_count=5) == 20
        assert PointsCalculator.word_known(0) == 10

    def test_definition_mastered_floors_length(self):
        assert PointsCalculator.definition_mastered(definition_length=59) == 20
        assert PointsCalculator.definition_mastered(9) == 15

    def test_pronunciation_mastered(self):
        assert PointsCalculator.pronunciation_mastered() == 20
        assert PointsCalculator.pronunciation_mastered(accent_index=2) == 30

    def test_total_pronunciation_points(self):
        assert PointsCalculator.total_pronunciation_points(3) == 20 + 25 + 30
        assert PointsCalculator.total_pronunciation_points(0) == 0

    def test_sentence_created(self):
        assert PointsCalculator.sentence_created(word_count=4, total_letter_count=18) == 55

    def test_template_completed_adds_template_points(self):
        assert PointsCalculator.template_completed(40, word_count=4, total_letter_count=18) == 95

    @pytest.mark.parametrize("has_audio,expected", [(True, 150), (False, 100)])
    def test_submission_approved(self, has_audio, expected):
        assert PointsCalculator.submission_approved(has_audio) == expected

    @pytest.mark.parametrize("streak,expected", [(0, 0), (3, 15), (10, 50), (40, 50)])
    def test_daily_streak_is_capped(self, streak, expected):
        assert PointsCalculator.daily_streak(streak) == expected


class TestAggregates:
    def test_total_potential_points(self):
        # word: 10 + 7*2 = 24; definitions: 15+3 and 15+12; pronunciations: 20 + 25
        total = PointsCalculator.total_potential_points(
            letter_count=7, definition_lengths=[34, 120], accent_count=2
        )
        assert total == 24 + 18 + 27 + 45

    def test_points_remaining_skips_mastered(self):
        remaining = PointsCalculator.points_remaining(
            definitions={"d1": 34, "d2": 120},
            pronunciation_ids=["us", "uk", "au"],
            mastered_definition_ids={"d2"},
            mastered_pronunciation_ids={"us"},
        )
        # d1 = 18; uk (index 1) = 25; au (index 2) = 30
        assert remaining == 18 + 25 + 30

    def test_nothing_remaining_when_all_mastered(self):
        assert PointsCalculator.points_remaining({"d1": 10}, ["us"], {"d1"}, {"us"}) == 0


class TestBreakdown:
    def test_total(self):
        breakdown = PointsBreakdown(
            word_points=24,
            definition_points=18,
            pronunciation_points=20,
            sentence_points=55,
            submission_points=100,
            streak_points=15,
        )
        assert breakdown.total == 232

    def test_empty(self):
        assert PointsBreakdown.empty().total == 0


class TestProviders:
    def test_definition_uses_definition_length(self, fresh_record):
        assert SkillPointValues().base_points(fresh_record) == 20

    def test_pronunciation_uses_accent_index(self, fresh_record):
        record = replace(fresh_record, skill=Skill.PRONUNCIATION, payload={"accent_index": 1})
        assert SkillPointValues().base_points(record) == 25

    @pytest.mark.parametrize("skill", [Skill.READING, Skill.WRITING])
    def test_word_skills_use_letter_count(self, fresh_record, skill):
        record = replace(fresh_record, skill=skill)
        assert SkillPointValues().base_points(record) == 10 + 11 * 2

    def test_missing_payload_counts_as_zero(self, fresh_record):
        record = replace(fresh_record, payload={})
        assert SkillPointValues().base_points(record) == 15

    def test_fixed_value(self, fresh_record):
        assert FixedPointValue(42).base_points(fresh_record) == 42
