from __future__ import annotations

from datetime import date, datetime, time
from typing import Literal

from loguru import logger
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def parse_sync_at(value: str) -> time:
    """Parse a daily trigger time in hh:mm[:ss] format.

    Raises:
        ValueError: If the value matches neither hh:mm nor hh:mm:ss
    """
    for fmt in ("%H:%M", "%H:%M:%S"):
        try:
            return datetime.strptime(value.strip(), fmt).time()
        except ValueError:
            continue
    raise ValueError(f"invalid time '{value}', it must match pattern hh:mm[:ss]")


def parse_years(values: list[str] | str, today: date | None = None) -> list[int]:
    """Resolve a list of year specs into sorted unique years.

    Each value is a year number, "current" or "next". The single value "none"
    disables the list entirely.

    Args:
        values: Year specs, or a comma-separated string of them
        today: Reference date for "current" and "next" (defaults to today)

    Returns:
        Sorted list of unique years
    """
    if isinstance(values, str):
        values = [v.strip() for v in values.split(",") if v.strip()]

    if len(values) == 1 and values[0] == "none":
        return []

    current = (today or date.today()).year
    years: set[int] = set()
    for value in values:
        if value == "current":
            years.add(current)
        elif value == "next":
            years.add(current + 1)
        else:
            try:
                year = int(value)
            except ValueError as e:
                raise ValueError(f"invalid year '{value}': {e}") from e
            if year < 0:
                raise ValueError(f"invalid year {year}")
            years.add(year)

    return sorted(years)


class Settings(BaseSettings):
    debug: bool = Field(default=False, description="Write debug messages to the log")
    log_level: str = Field(default="INFO")
    log_file: str | None = Field(default=None, description="Optional rotating log file")
    log_rotation: str = Field(default="10 MB", description="Size or age at which the log file is rotated")
    log_retention: str = Field(default="7 days", description="How long rotated log files are kept")

    sync_at: str | None = Field(
        default=None,
        description="Daily sync time hh:mm[:ss] in local time. Automatic sync is disabled when empty.",
    )
    sync_on_start: str = Field(
        default="current,next",
        description="Comma-separated years to sync on startup: numbers, 'current', 'next' or 'none'",
    )
    shutdown_timeout: float = Field(default=30.0, description="Graceful shutdown deadline in seconds")

    store_engine: Literal["memory", "sql"] = Field(default="sql")
    store_url: str = Field(default="sqlite:///cal.db", description="SQLAlchemy URL of the calendar database")

    source_parser: Literal["none", "mirror"] = Field(
        default="none",
        description="External calendar source to consult after the generic baseline",
    )
    source_mirror_url: str = Field(default="", description="Base URL of another business calendar server")
    source_mirror_timeout: float = Field(default=30.0)
    source_user_agent: str = Field(default="business-calendar")
    source_override: str | None = Field(default=None, description="Path to the YAML file with local overrides")
    weekend: list[int] = Field(default_factory=lambda: [5, 6], description="Weekend weekday numbers, Monday is 0")

    web_host: str = Field(default="0.0.0.0")
    web_port: int = Field(default=8080)
    web_access_log: bool = Field(default=False)
    web_admin_passwd: str = Field(default="", description="Password of the admin user for /api/admin/*")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="CAL_",
        extra="ignore",
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        """Validate that log level is one of the standard logging levels."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper_value = value.upper()
        if upper_value not in valid_levels:
            logger.warning(f"Invalid LOG_LEVEL '{value}'. Valid levels are: {', '.join(valid_levels)}. Defaulting to INFO.")
            return "INFO"
        return upper_value

    @field_validator("sync_at")
    @classmethod
    def validate_sync_at(cls, value: str | None) -> str | None:
        if not value:
            return None
        parse_sync_at(value)
        return value

    @field_validator("weekend")
    @classmethod
    def validate_weekend(cls, value: list[int]) -> list[int]:
        for day in value:
            if not 0 <= day <= 6:
                raise ValueError(f"invalid weekday number {day}, expected 0 (Monday) to 6 (Sunday)")
        return value

    @property
    def effective_log_level(self) -> str:
        return "DEBUG" if self.debug else self.log_level

    @property
    def update_at(self) -> time | None:
        """Parsed daily trigger time, None when automatic sync is disabled."""
        return parse_sync_at(self.sync_at) if self.sync_at else None

    def startup_years(self, today: date | None = None) -> list[int]:
        return parse_years(self.sync_on_start, today)


settings = Settings()
