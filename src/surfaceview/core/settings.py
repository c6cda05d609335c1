"""Centralized application configuration using Pydantic Settings (v2).

This module exposes a single, cached `settings` instance that reads from:
- Real environment variables (highest precedence)
- `.env` files at the repository root: .env, .env.local, .env.dev/.env.test/.env.prod
"""

from __future__ import annotations

import logging
import os
from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

EnvName = Literal["dev", "test", "prod"]
LogLevelName = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
RenderPolicy = Literal["latest", "arrival"]

DEFAULT_ENDPOINT = "http://localhost:80/draw"


class Settings(BaseSettings):
    """Typed application configuration loaded from env and `.env` files.

    Attributes
    ----------
    environment : EnvName
        Runtime environment flag; maps from `SURFACEVIEW_ENV`.
    log_level : LogLevelName
        Global log level string; maps from `LOG_LEVEL`.
    endpoint : str
        URL of the image service's draw endpoint; maps from `SURFACEVIEW_ENDPOINT`.
    debounce_ms : int
        Quiet period after the last edit before a request fires.
    timeout_seconds : float
        Network timeout for one draw request.
    render_policy : RenderPolicy
        ``"arrival"`` (default) renders every outcome in arrival order;
        ``"latest"`` renders only the most recently dispatched request's outcome.
    artifact_dir : Path | None
        Where rendered images are written. When unset, images are exposed as
        ``data:`` URIs instead of files.
    """

    environment: EnvName = Field(default="dev", alias="SURFACEVIEW_ENV")
    log_level: LogLevelName = Field(default="INFO", alias="LOG_LEVEL")
    endpoint: str = Field(default=DEFAULT_ENDPOINT, alias="SURFACEVIEW_ENDPOINT")
    debounce_ms: int = Field(default=1000, ge=0, alias="SURFACEVIEW_DEBOUNCE_MS")
    timeout_seconds: float = Field(default=30.0, gt=0, alias="SURFACEVIEW_TIMEOUT")
    render_policy: RenderPolicy = Field(default="arrival", alias="SURFACEVIEW_RENDER_POLICY")
    artifact_dir: Path | None = Field(default=None, alias="SURFACEVIEW_ARTIFACT_DIR")

    model_config = SettingsConfigDict(
        env_file=(".env", ".env.local", ".env.dev", ".env.test", ".env.prod"),
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    @property
    def is_dev(self) -> bool:
        """Return True if running in the development environment."""
        return self.environment == "dev"

    @property
    def is_test(self) -> bool:
        """Return True if running in the test environment."""
        return self.environment == "test"

    @property
    def is_prod(self) -> bool:
        """Return True if running in the production environment."""
        return self.environment == "prod"

    @property
    def debounce_seconds(self) -> float:
        """Debounce delay converted to seconds, as event-loop timers expect."""
        return self.debounce_ms / 1000.0

    def log_level_numeric(self) -> int:
        """Return the numeric logging level corresponding to `self.log_level`."""
        return getattr(logging, self.log_level, logging.INFO)


@lru_cache(maxsize=1)
def load_settings() -> Settings:
    """Create and cache a `Settings` instance.

    We keep this behind an LRU cache so tests can force a rebuild via
    `load_settings.cache_clear()` after mutating `os.environ`.
    """
    os.environ.setdefault("SURFACEVIEW_ENV", "dev")
    return Settings()


# Export a ready-to-use singleton (import-time read of env / .env files).
settings: Settings = load_settings()


def get_logger(name: str = "surfaceview") -> logging.Logger:
    """Return a process-global logger configured to the current log level."""
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
