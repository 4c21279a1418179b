"""
Pytest Configuration and Fixtures.

This file configures pytest and provides shared fixtures for all tests.
"""
import sys
from datetime import datetime, timezone
from pathlib import Path

import pytest

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from lexicon.srs import FixedClock, MasteryRecord, Skill, SpacedRepetitionEngine  # noqa: E402


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "integration: Integration tests (SQLite store)")
    config.addinivalue_line("markers", "smoke: Smoke tests for CLI commands")


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location."""
    for item in items:
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        elif "integration" in str(item.fspath):
            item.add_marker(pytest.mark.integration)
        elif "smoke" in str(item.fspath):
            item.add_marker(pytest.mark.smoke)


@pytest.fixture(scope="session")
def project_root():
    """Return the project root directory."""
    return PROJECT_ROOT


@pytest.fixture
def now():
    """A fixed review time."""
    return datetime(2026, 1, 17, 9, 0, tzinfo=timezone.utc)


@pytest.fixture
def clock(now):
    return FixedClock(now)


@pytest.fixture
def engine(clock):
    """Engine on a frozen clock with the default point values."""
    return SpacedRepetitionEngine(clock=clock)


@pytest.fixture
def fresh_record(now):
    """A definition that has never been studied."""
    return MasteryRecord.new(
        "def-serendipity-1",
        created_at=now,
        skill=Skill.DEFINITION,
        payload={"spelling": "serendipity", "letter_count": 11, "definition_length": 52},
    )
