"""
Smoke Tests for CLI Commands.

These tests verify that CLI commands run without errors and produce output.
They don't validate scheduling deeply - the unit tests cover that.

Usage:
    pytest tests/smoke/test_cli_commands.py -v
    pytest tests/smoke/test_cli_commands.py -v -m smoke
"""

import subprocess
import sys
from dataclasses import replace
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest
from typer.testing import CliRunner

from lexicon.cli import app
from lexicon.config import get_settings
from lexicon.srs import MasteryRecord
from lexicon.store import MasteryStore

# Mark all tests in this module as smoke tests
pytestmark = pytest.mark.smoke

# Project root
PROJECT_ROOT = Path(__file__).parent.parent.parent

runner = CliRunner()


@pytest.fixture(autouse=True)
def isolated_store(tmp_path, monkeypatch):
    """Point the CLI at a throwaway database."""
    db_path = tmp_path / "mastery.db"
    monkeypatch.setenv("STATE_DB_PATH", str(db_path))
    get_settings.cache_clear()
    yield db_path
    get_settings.cache_clear()


def invoke(*args: str):
    return runner.invoke(app, list(args))


class TestCLIHelp:
    """Test that help commands work."""

    def test_main_help_as_module(self):
        """Main help should display without errors when run as a module."""
        result = subprocess.run(
            [sys.executable, "-m", "lexicon.cli", "--help"],
            cwd=PROJECT_ROOT,
            capture_output=True,
            text=True,
            timeout=30,
        )

        assert result.returncode == 0, f"Help failed: {result.stderr}"
        assert "review" in result.stdout
        assert "Commands" in result.stdout

    @pytest.mark.parametrize("command", ["add", "due", "review", "session", "stats", "plan"])
    def test_command_help(self, command):
        result = invoke(command, "--help")
        assert result.exit_code == 0, result.output


class TestStudyFlow:
    def test_add_then_due_lists_item(self):
        result = invoke("add", "serendipity", "--payload", "definition_length=52")
        assert result.exit_code == 0, result.output
        assert "Added serendipity" in result.output

        result = invoke("due")
        assert result.exit_code == 0, result.output
        assert "serendipity" in result.output

    def test_adding_twice_is_harmless(self):
        invoke("add", "ephemeral")
        result = invoke("add", "ephemeral")
        assert result.exit_code == 0
        assert "already" in result.output

    def test_review_reschedules_and_persists(self, isolated_store):
        invoke("add", "serendipity", "--payload", "definition_length=52")

        result = invoke("review", "serendipity", "5")
        assert result.exit_code == 0, result.output
        assert "Perfect response" in result.output
        assert "+4 points" in result.output

        store = MasteryStore(isolated_store)
        record = store.get_record("serendipity")
        history = store.get_review_history("serendipity")
        store.close()

        assert record.mastery_level == 1
        assert record.interval_days == 1
        assert [entry.grade for entry in history] == [5]

        result = invoke("due")
        assert "Nothing due" in result.output

    def test_invalid_grade_exits_with_error(self):
        invoke("add", "serendipity")
        result = invoke("review", "serendipity", "7")
        assert result.exit_code == 1
        assert "0-5" in result.output

    def test_unknown_item_exits_with_error(self):
        result = invoke("review", "missing", "4")
        assert result.exit_code == 1
        assert "Unknown item" in result.output

    def test_bad_payload_rejected(self):
        result = invoke("add", "word", "--payload", "no-equals-sign")
        assert result.exit_code != 0


class TestReports:
    def test_empty_session(self):
        result = invoke("session")
        assert result.exit_code == 0, result.output
        assert "Nothing to study" in result.output

    def test_session_with_new_items(self):
        for word in ("alpha", "beta", "gamma"):
            invoke("add", word)

        result = invoke("session", "--max-new", "2")

        assert result.exit_code == 0, result.output
        assert "0 review + 2 new" in result.output

    def test_stats(self):
        invoke("add", "alpha")
        invoke("review", "alpha", "4")

        result = invoke("stats")

        assert result.exit_code == 0, result.output
        assert "Retention:" in result.output
        assert "100%" in result.output
        assert "Mastery Distribution" in result.output

    def test_plan(self):
        result = invoke("plan", "100", "--load", "30")
        assert result.exit_code == 0, result.output
        assert "2" in result.output
        assert "50 day(s)" in result.output

    def test_session_review_cap_follows_option(self, isolated_store):
        reviewed_at = datetime.now(timezone.utc) - timedelta(days=3)
        store = MasteryStore(isolated_store)
        for i in range(25):
            store.save_record(
                replace(
                    MasteryRecord.new(f"word-{i}", created_at=reviewed_at),
                    mastery_level=1,
                    correct_count=1,
                    interval_days=1,
                    last_reviewed_at=reviewed_at,
                    next_review_at=reviewed_at + timedelta(days=1),
                )
            )
        store.close()

        result = invoke("session", "--max-review", "22")

        assert result.exit_code == 0, result.output
        assert "22 review + 0 new" in result.output

    def test_session_rejects_negative_cap(self):
        result = invoke("session", "--max-review", "-1")
        assert result.exit_code == 1
        assert "non-negative" in result.output
