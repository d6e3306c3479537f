"""
Configuration for the finance planner.

Uses pydantic-settings so every option can be set from the environment
(prefix ``FINANCE_``) or a ``.env`` file, e.g. ``FINANCE_DATA_DIR=/srv/data``.
"""

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from finance_planner.calculators.taxes import SUPPORTED_STATES


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_prefix="FINANCE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Storage
    storage_backend: Literal["json", "memory"] = Field(
        default="json",
        description="Where user records live: one JSON file per user, or memory only",
    )
    data_dir: Path = Field(
        default=Path("data"),
        description="Root directory of the JSON store",
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Standard library level name",
    )
    log_json: bool = Field(
        default=False,
        description="Render log lines as JSON instead of console key=value",
    )

    # Form defaults
    default_state: str = Field(
        default="California",
        description="State preselected in the income form",
    )
    default_current_age: int = Field(default=30, ge=0, le=120)
    default_retire_age: int = Field(default=65, ge=0, le=120)

    @field_validator("log_level")
    @classmethod
    def normalise_log_level(cls, v: str) -> str:
        level = v.strip().upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Unknown log level: {v}")
        return level

    @field_validator("default_state")
    @classmethod
    def validate_default_state(cls, v: str) -> str:
        if v not in SUPPORTED_STATES:
            raise ValueError(f"Unknown state: {v}")
        return v


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Call get_settings.cache_clear() to reload after changing the environment.
    """
    return Settings()
