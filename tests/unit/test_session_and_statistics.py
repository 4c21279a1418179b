"""
Unit tests for session assembly and aggregate statistics.
"""

from dataclasses import replace

import pytest

from lexicon.srs import (
    MalformedRecord,
    MasteryRecord,
    create_session,
    estimated_review_time,
    mastery_distribution,
    recommended_new_items_per_day,
    retention_rate,
)


@pytest.fixture
def records(now):
    return [MasteryRecord.new(f"item-{i}", created_at=now) for i in range(25)]


class TestCreateSession:
    def test_takes_leading_items_from_each_list(self, records):
        new_items, due_items = records[:8], records[8:]

        session = create_session(new_items, due_items)

        assert session.new_items == records[:5]
        assert session.review_items == records[8:23]
        assert session.total_items == 20
        assert session.estimated_duration_seconds == 600
        assert session.estimated_minutes == 10
        assert session.is_empty is False

    def test_custom_limits_and_pace(self, records):
        session = create_session(records[:3], records[3:], max_new=1, max_review=2, seconds_per_item=45)

        assert len(session.new_items) == 1
        assert len(session.review_items) == 2
        assert session.estimated_duration_seconds == 135
        assert session.estimated_minutes == 3

    def test_short_lists_are_taken_whole(self, records):
        session = create_session(records[:2], records[2:4])
        assert session.total_items == 4

    def test_empty_session_is_valid(self):
        session = create_session([], [])
        assert session.is_empty is True
        assert session.total_items == 0
        assert session.estimated_duration_seconds == 0

    def test_negative_limits_rejected(self, records):
        with pytest.raises(ValueError):
            create_session(records, records, max_new=-1)


class TestRetentionRate:
    def test_empty_is_zero(self):
        assert retention_rate([]) == 0

    def test_unreviewed_records_are_zero(self, records):
        assert retention_rate(records) == 0.0

    def test_ratio_across_records(self, fresh_record):
        reviewed = [
            replace(fresh_record, correct_count=3, incorrect_count=1),
            replace(fresh_record, correct_count=5, incorrect_count=1),
        ]
        assert retention_rate(reviewed) == pytest.approx(0.8)

    def test_accepts_generators(self, fresh_record):
        gen = (replace(fresh_record, correct_count=1) for _ in range(3))
        assert retention_rate(gen) == 1.0


class TestMasteryDistribution:
    def test_empty_has_six_zero_keys(self):
        assert mastery_distribution([]) == {0: 0, 1: 0, 2: 0, 3: 0, 4: 0, 5: 0}

    def test_counts_levels(self, fresh_record):
        levels = [0, 0, 1, 3, 5, 5, 5]
        distribution = mastery_distribution(
            replace(fresh_record, mastery_level=level) for level in levels
        )
        assert distribution == {0: 2, 1: 1, 2: 0, 3: 1, 4: 0, 5: 3}

    def test_out_of_range_level_rejected(self, fresh_record):
        with pytest.raises(MalformedRecord):
            mastery_distribution([replace(fresh_record, mastery_level=7)])

    def test_fractional_level_rejected(self, fresh_record):
        with pytest.raises(MalformedRecord):
            mastery_distribution([replace(fresh_record, mastery_level=2.5)])


class TestRecommendedNewItems:
    @pytest.mark.parametrize(
        "load,minutes,expected",
        [
            (0, 20, 10),   # 40 slots / 4 = 10
            (30, 20, 2),   # 10 slots / 4 = 2
            (38, 20, 1),   # 2 slots / 4 = 0, clamped to 1
            (80, 20, 1),   # over budget
            (0, 60, 10),   # 120 / 4 = 30, clamped to 10
            (0, 10, 5),    # 20 / 4 = 5
        ],
    )
    def test_formula(self, load, minutes, expected):
        assert recommended_new_items_per_day(200, load, target_minutes=minutes) == expected

    def test_default_budget_is_twenty_minutes(self):
        assert recommended_new_items_per_day(50, 24) == 4


def test_estimated_review_time():
    assert estimated_review_time(7) == 210
    assert estimated_review_time(4, seconds_per_item=15) == 60
    assert estimated_review_time(0) == 0
