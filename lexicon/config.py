"""
Configuration settings for the Lexicon Lengthen scheduling core.

Uses Pydantic Settings for environment variable management with .env file support.
"""
from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ========================================
    # SM-2 Tuning
    # ========================================
    initial_ease_factor: float = Field(
        default=2.5,
        description="Ease factor assigned to newly created mastery records",
    )
    minimum_ease_factor: float = Field(
        default=1.3,
        description="Hard floor for the ease factor",
    )
    first_interval_days: int = Field(
        default=1,
        description="Interval after the first successful review",
    )
    second_interval_days: int = Field(
        default=6,
        description="Interval after the second successful review",
    )
    minimum_correct_grade: int = Field(
        default=3,
        description="Lowest grade (0-5) counted as a correct answer",
    )
    level_up_grade: int = Field(
        default=4,
        description="Lowest grade (0-5) that raises the mastery level",
    )
    level_reward_divisor: int = Field(
        default=5,
        description="Share of an item's full points awarded per mastery level climbed",
    )

    # ========================================
    # Selection & Sessions
    # ========================================
    due_limit: int = Field(
        default=20,
        description="Maximum records returned by due selection",
    )
    session_max_new: int = Field(
        default=5,
        description="Maximum never-studied items per session",
    )
    session_max_review: int = Field(
        default=15,
        description="Maximum due reviews per session",
    )
    seconds_per_item: int = Field(
        default=30,
        description="Average time spent on one review (for duration estimates)",
    )
    target_daily_minutes: int = Field(
        default=20,
        description="Daily study budget used by the new-items recommendation",
    )

    # ========================================
    # Storage
    # ========================================
    state_db_path: Path = Field(
        default=Path.home() / ".lexicon" / "mastery.db",
        description="SQLite file backing the CLI record store",
    )

    # ========================================
    # Logging
    # ========================================
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="WARNING",
        description="Logging verbosity level",
    )
    log_file: str | None = Field(
        default=None,
        description="Log file path (None for stderr only)",
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


def get_srs_config(settings: Settings | None = None):
    """
    Build the engine configuration from settings.

    Args:
        settings: Settings to read (cached settings if None)

    Returns:
        SM2Config populated from the settings
    """
    from lexicon.srs.engine import SM2Config

    settings = settings or get_settings()
    return SM2Config(
        initial_easiness=settings.initial_ease_factor,
        minimum_easiness=settings.minimum_ease_factor,
        first_interval=settings.first_interval_days,
        second_interval=settings.second_interval_days,
        minimum_correct_grade=settings.minimum_correct_grade,
        level_up_grade=settings.level_up_grade,
        level_reward_divisor=settings.level_reward_divisor,
        due_limit=settings.due_limit,
        seconds_per_item=settings.seconds_per_item,
    )
