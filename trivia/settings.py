"""
Central application configuration using pydantic-settings.

Environment variables (prefix: TRIVIA_):
    TRIVIA_LOG_LEVEL        - root log level for the CLI and server (default: INFO)
    TRIVIA_WATCHDOG_MS      - acknowledgement watchdog timeout (default: 500)
    TRIVIA_ANIMATION_SPEED  - multiplier applied to every engine delay (default: 1.0)
    TRIVIA_HOST / TRIVIA_PORT - bind address of the FastAPI server
"""

from __future__ import annotations

import logging
from dataclasses import replace
from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from trivia.config import Timings

LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


class TriviaSettings(BaseSettings):
    """Runtime settings shared by the CLI and the server."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        env_prefix="TRIVIA_",
    )

    log_level: str = Field(default="INFO", description="Root logger level.")
    watchdog_ms: int = Field(
        default=500,
        gt=0,
        description="How long a tile-effect acknowledgement may stay outstanding.",
    )
    animation_speed: float = Field(
        default=1.0,
        ge=0,
        description="Scale factor for dice, movement and message delays (0 = instant).",
    )
    host: str = Field(default="127.0.0.1")
    port: int = Field(default=8000, ge=1, le=65535)

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, value: str) -> str:
        value = (value or "INFO").upper()
        if value not in LOG_LEVELS:
            return "INFO"
        return value

    def build_timings(self) -> Timings:
        """Engine timings derived from these settings."""
        timings = Timings().scaled(self.animation_speed)
        return replace(timings, watchdog=self.watchdog_ms / 1000.0)

    def configure_logging(self) -> None:
        logging.basicConfig(
            level=self.log_level,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )


@lru_cache
def get_settings() -> TriviaSettings:
    """Return cached settings instance."""
    return TriviaSettings()
