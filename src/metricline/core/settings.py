"""Centralized configuration using Pydantic Settings (v2).

This module exposes a single, cached `settings` instance that reads from:
- Real environment variables (highest precedence)
- `.env` files at the working directory: .env, then .env.local
"""

from __future__ import annotations

import logging
from datetime import timedelta
from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

LogLevelName = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class Settings(BaseSettings):
    """Typed configuration loaded from env and `.env` files.

    Attributes
    ----------
    log_level : LogLevelName
        Global log level string; maps from `LOG_LEVEL`.
    granularity_ms : int
        Default resampling tick, in milliseconds, used by the CLI `extract`
        command when no `--granularity` is given. Maps from
        `METRICLINE_GRANULARITY_MS`.
    """

    log_level: LogLevelName = Field(default="INFO", alias="LOG_LEVEL")
    granularity_ms: int = Field(default=1000, gt=0, alias="METRICLINE_GRANULARITY_MS")

    model_config = SettingsConfigDict(
        env_file=(".env", ".env.local"),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @property
    def granularity(self) -> timedelta:
        """Return `granularity_ms` as a :class:`timedelta`."""
        return timedelta(milliseconds=self.granularity_ms)

    def log_level_numeric(self) -> int:
        """Return the numeric logging level corresponding to `self.log_level`."""
        return getattr(logging, self.log_level, logging.INFO)


@lru_cache(maxsize=1)
def load_settings() -> Settings:
    """Create and cache a `Settings` instance.

    Tests force a rebuild via `load_settings.cache_clear()` after mutating
    `os.environ`.
    """
    return Settings()


# Ready-to-use instance (import-time read of env / .env files).
settings: Settings = load_settings()


def get_logger(name: str = "metricline") -> logging.Logger:
    """Return a logger configured to the current `LOG_LEVEL`."""
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(
            logging.Formatter("%(asctime)s | %(levelname)s | %(name)s | %(message)s")
        )
        logger.addHandler(handler)
    logger.setLevel(load_settings().log_level_numeric())
    logger.propagate = False
    return logger
