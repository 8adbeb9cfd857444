"""Runtime configuration for the Fahrplan schedule viewer.

Every setting can be given as FAHRPLAN_* environment variable or in a
`.env` file in the working directory. CLI flags override them.
"""

import logging
from pathlib import Path
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Viewer settings loaded from environment."""

    # Grid: number of concurrent events shown and their cell width
    grid_columns: int = Field(
        default=4,
        ge=1,
        validation_alias="FAHRPLAN_GRID_COLUMNS"
    )
    column_width: int = Field(
        default=24,
        ge=8,
        validation_alias="FAHRPLAN_COLUMN_WIDTH"
    )

    # How long the viewer waits for a key before drawing the next frame
    frame_timeout_ms: int = Field(
        default=16,
        ge=1,
        validation_alias="FAHRPLAN_FRAME_TIMEOUT_MS"
    )

    # Diagnostics; the interactive viewer only ever logs to log_file
    log_level: str = Field(
        default="WARNING",
        validation_alias="FAHRPLAN_LOG_LEVEL"
    )
    log_file: Path | None = Field(
        default=None,
        validation_alias="FAHRPLAN_LOG_FILE"
    )

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore"
    }

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.strip().upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {v}")
        return level


_settings: Settings | None = None


def get_settings() -> Settings:
    """Settings of this process, loaded on first use."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reload_settings() -> Settings:
    """Read the environment again, e.g. after changing FAHRPLAN_* variables."""
    global _settings
    _settings = Settings()
    return _settings
