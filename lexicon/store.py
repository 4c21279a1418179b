"""
SQLite Mastery Store.

Reference record store for the CLI. Provides portable persistence for:
- Mastery records per (item, skill)
- Review history log

The scheduling core never calls this module; callers load records, hand
them to the engine, and save the snapshots it returns.

Database location: ~/.lexicon/mastery.db
"""

from __future__ import annotations

import json
import sqlite3
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

from loguru import logger

from lexicon.srs.models import MasteryRecord, Skill

# =============================================================================
# Data Classes
# =============================================================================


@dataclass
class ReviewLogEntry:
    """A single review event."""

    id: int
    item_id: str
    skill: Skill
    reviewed_at: datetime
    grade: int  # 0-5 SM-2 scale
    points_awarded: int


def _to_text(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


def _from_text(value: str | None) -> datetime | None:
    return datetime.fromisoformat(value) if value is not None else None


# =============================================================================
# Mastery Store
# =============================================================================


class MasteryStore:
    """
    SQLite-backed persistence for mastery records.

    Handles:
    - Record snapshots (one row per item and skill)
    - Review log with grades and points
    """

    DEFAULT_DB_PATH = Path.home() / ".lexicon" / "mastery.db"

    def __init__(self, db_path: Path | None = None):
        """
        Initialize the store.

        Args:
            db_path: Custom database path (defaults to ~/.lexicon/mastery.db)
        """
        self.db_path = Path(db_path) if db_path else self.DEFAULT_DB_PATH
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

        self._conn: sqlite3.Connection | None = None
        self._init_schema()

        logger.info(f"MasteryStore initialized at {self.db_path}")

    @property
    def conn(self) -> sqlite3.Connection:
        """Get or create database connection."""
        if self._conn is None:
            self._conn = sqlite3.connect(str(self.db_path))
            self._conn.row_factory = sqlite3.Row
        return self._conn

    def close(self) -> None:
        if self._conn is not None:
            self._conn.close()
            self._conn = None

    def _init_schema(self) -> None:
        """Initialize database schema."""
        cursor = self.conn.cursor()

        cursor.execute("""
            CREATE TABLE IF NOT EXISTS mastery_record (
                item_id TEXT NOT NULL,
                skill TEXT NOT NULL,
                mastery_level INTEGER DEFAULT 0,
                correct_count INTEGER DEFAULT 0,
                incorrect_count INTEGER DEFAULT 0,
                ease_factor REAL DEFAULT 2.5,
                interval_days INTEGER DEFAULT 0,
                last_reviewed_at TEXT,
                next_review_at TEXT,
                points_earned INTEGER DEFAULT 0,
                created_at TEXT NOT NULL,
                payload TEXT DEFAULT '{}',
                PRIMARY KEY (item_id, skill)
            )
        """)

        cursor.execute("""
            CREATE TABLE IF NOT EXISTS review_log (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                item_id TEXT NOT NULL,
                skill TEXT NOT NULL,
                reviewed_at TEXT NOT NULL,
                grade INTEGER NOT NULL,
                points_awarded INTEGER DEFAULT 0
            )
        """)

        cursor.execute("""
            CREATE INDEX IF NOT EXISTS idx_review_log_item
            ON review_log(item_id, skill)
        """)

        self.conn.commit()

    # =========================================================================
    # Record Operations
    # =========================================================================

    @staticmethod
    def _row_to_record(row: sqlite3.Row) -> MasteryRecord:
        return MasteryRecord(
            item_id=row["item_id"],
            skill=Skill(row["skill"]),
            mastery_level=row["mastery_level"],
            correct_count=row["correct_count"],
            incorrect_count=row["incorrect_count"],
            ease_factor=row["ease_factor"],
            interval_days=row["interval_days"],
            last_reviewed_at=_from_text(row["last_reviewed_at"]),
            next_review_at=_from_text(row["next_review_at"]),
            points_earned=row["points_earned"],
            created_at=_from_text(row["created_at"]),
            payload=json.loads(row["payload"] or "{}"),
        )

    def get_record(self, item_id: str, skill: Skill = Skill.DEFINITION) -> MasteryRecord | None:
        """
        Get the record for an item and skill.

        Returns:
            MasteryRecord, or None if the item was never added
        """
        cursor = self.conn.cursor()
        cursor.execute(
            "SELECT * FROM mastery_record WHERE item_id = ? AND skill = ?",
            (item_id, Skill(skill).value),
        )
        row = cursor.fetchone()
        return self._row_to_record(row) if row is not None else None

    def save_record(self, record: MasteryRecord) -> None:
        """Insert or replace a record snapshot."""
        cursor = self.conn.cursor()
        cursor.execute(
            """
            INSERT INTO mastery_record (
                item_id, skill, mastery_level, correct_count, incorrect_count,
                ease_factor, interval_days, last_reviewed_at, next_review_at,
                points_earned, created_at, payload
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            ON CONFLICT(item_id, skill) DO UPDATE SET
                mastery_level = excluded.mastery_level,
                correct_count = excluded.correct_count,
                incorrect_count = excluded.incorrect_count,
                ease_factor = excluded.ease_factor,
                interval_days = excluded.interval_days,
                last_reviewed_at = excluded.last_reviewed_at,
                next_review_at = excluded.next_review_at,
                points_earned = excluded.points_earned,
                payload = excluded.payload
        """,
            (
                record.item_id,
                Skill(record.skill).value,
                record.mastery_level,
                record.correct_count,
                record.incorrect_count,
                record.ease_factor,
                record.interval_days,
                _to_text(record.last_reviewed_at),
                _to_text(record.next_review_at),
                record.points_earned,
                _to_text(record.created_at),
                json.dumps(dict(record.payload)),
            ),
        )
        self.conn.commit()

    def list_records(self, skill: Skill | None = None) -> list[MasteryRecord]:
        """All records, optionally restricted to one skill, in insertion order."""
        cursor = self.conn.cursor()
        if skill is None:
            cursor.execute("SELECT * FROM mastery_record ORDER BY rowid")
        else:
            cursor.execute(
                "SELECT * FROM mastery_record WHERE skill = ? ORDER BY rowid",
                (Skill(skill).value,),
            )
        return [self._row_to_record(row) for row in cursor.fetchall()]

    def delete_record(self, item_id: str, skill: Skill = Skill.DEFINITION) -> bool:
        """Remove a record and its review history. Returns True if it existed."""
        cursor = self.conn.cursor()
        skill_value = Skill(skill).value
        cursor.execute(
            "DELETE FROM review_log WHERE item_id = ? AND skill = ?", (item_id, skill_value)
        )
        cursor.execute(
            "DELETE FROM mastery_record WHERE item_id = ? AND skill = ?", (item_id, skill_value)
        )
        self.conn.commit()
        return cursor.rowcount > 0

    # =========================================================================
    # Review Log Operations
    # =========================================================================

    def log_review(
        self,
        item_id: str,
        skill: Skill,
        grade: int,
        reviewed_at: datetime,
        points_awarded: int = 0,
    ) -> int:
        """
        Log a review event.

        Returns:
            Review log entry ID
        """
        cursor = self.conn.cursor()
        cursor.execute(
            """
            INSERT INTO review_log (item_id, skill, reviewed_at, grade, points_awarded)
            VALUES (?, ?, ?, ?, ?)
        """,
            (item_id, Skill(skill).value, _to_text(reviewed_at), int(grade), points_awarded),
        )
        self.conn.commit()
        return cursor.lastrowid

    def get_review_history(
        self,
        item_id: str,
        skill: Skill = Skill.DEFINITION,
        limit: int = 10,
    ) -> list[ReviewLogEntry]:
        """
        Get review history for an item.

        Returns:
            List of ReviewLogEntry, most recent first
        """
        cursor = self.conn.cursor()
        cursor.execute(
            """
            SELECT * FROM review_log
            WHERE item_id = ? AND skill = ?
            ORDER BY reviewed_at DESC, id DESC
            LIMIT ?
        """,
            (item_id, Skill(skill).value, limit),
        )
        return [
            ReviewLogEntry(
                id=row["id"],
                item_id=row["item_id"],
                skill=Skill(row["skill"]),
                reviewed_at=_from_text(row["reviewed_at"]),
                grade=row["grade"],
                points_awarded=row["points_awarded"],
            )
            for row in cursor.fetchall()
        ]
