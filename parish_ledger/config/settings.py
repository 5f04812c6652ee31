"""
Configuration Management for Parish Ledger

Uses pydantic-settings for type-safe configuration from environment variables.

All tunables live here: the income display priority table, the placeholder
labels used for missing members, the snapshot history size and logging.
"""

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from parish_ledger.config.defaults import (
    DEFAULT_INCOME_PRIORITY,
    UNASSIGNED_MEMBER_LABEL,
    UNNAMED_DONOR_LABEL,
)


class LedgerSettings(BaseSettings):
    """
    Main application settings.

    Loads configuration from PARISH_LEDGER_* environment variables and .env file.
    List values are read from the environment as JSON arrays.
    """

    model_config = SettingsConfigDict(
        env_prefix="PARISH_LEDGER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    church_name: str = Field(
        default="우리교회",
        min_length=1,
        description="Church name used in suggested export file names",
    )

    income_priority: list[str] = Field(
        default_factory=lambda: list(DEFAULT_INCOME_PRIORITY),
        description="Income category substrings in display priority order",
    )

    snapshot_history_limit: int = Field(
        default=50,
        ge=1,
        le=1000,
        description="How many saved snapshots to keep (newest first)",
    )

    unnamed_donor_label: str = Field(
        default=UNNAMED_DONOR_LABEL,
        description="Display name for income rows without a member",
    )
    unassigned_member_label: str = Field(
        default=UNASSIGNED_MEMBER_LABEL,
        description="Display name for rows whose member was deleted",
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Minimum log level",
    )
    log_json: bool = Field(
        default=True,
        description="Render log events as JSON (console renderer otherwise)",
    )

    @field_validator("income_priority")
    @classmethod
    def validate_income_priority(cls, v: list[str]) -> list[str]:
        """Entries must be non-empty; an empty entry would match every label."""
        if any(not entry for entry in v):
            raise ValueError("income_priority entries must be non-empty strings")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v}")
        return level


@lru_cache()
def get_settings() -> LedgerSettings:
    """
    Get application settings (cached).

    Call get_settings.cache_clear() to reload if needed.
    """
    return LedgerSettings()
