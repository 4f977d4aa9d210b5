"""Application configuration using environment variables."""

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Resolve the project root once so that `.env` is discovered regardless of CWD
PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent


class Settings(BaseSettings):
    """Load configuration from environment variables and `.env`."""

    model_config = SettingsConfigDict(
        env_file=str(PROJECT_ROOT / ".env"),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    database_path: Path = Field(
        default_factory=lambda: Path("data/studyplanner.db"),
        validation_alias=AliasChoices("SCHEDULE_DATABASE_PATH", "database_path"),
    )
    # IANA zone name defining "today" and "now"; the host zone when unset
    timezone: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("PLANNER_TIMEZONE", "timezone"),
    )

    bulk_step_minutes: int = Field(
        default=30,
        ge=1,
        le=240,
        validation_alias=AliasChoices("BULK_STEP_MINUTES", "bulk_step_minutes"),
    )
    reschedule_step_minutes: int = Field(
        default=5,
        ge=1,
        le=240,
        validation_alias=AliasChoices(
            "RESCHEDULE_STEP_MINUTES", "reschedule_step_minutes"
        ),
    )
    session_minutes: int = Field(
        default=60,
        ge=5,
        le=24 * 60,
        validation_alias=AliasChoices("SESSION_MINUTES", "session_minutes"),
    )
    deadline_margin_days: int = Field(
        default=2,
        ge=0,
        validation_alias=AliasChoices("DEADLINE_MARGIN_DAYS", "deadline_margin_days"),
    )
    today_buffer_minutes: int = Field(
        default=60,
        ge=0,
        validation_alias=AliasChoices("TODAY_BUFFER_MINUTES", "today_buffer_minutes"),
    )
    default_move_duration_minutes: int = Field(
        default=60,
        ge=1,
        validation_alias=AliasChoices(
            "DEFAULT_MOVE_DURATION_MINUTES",
            "default_move_duration_minutes",
        ),
    )
    skip_weekends: bool = Field(
        default=False,
        validation_alias=AliasChoices("SKIP_WEEKENDS", "skip_weekends"),
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return a cached `Settings` instance."""

    return Settings()  # pyright: ignore[reportCallIssue]


__all__ = ["Settings", "get_settings"]
