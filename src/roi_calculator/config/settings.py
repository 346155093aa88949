"""Runtime settings for the API server and logging setup."""

from __future__ import annotations

import logging
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

ENV_PREFIX = "ROI_CALCULATOR_"

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class AppSettings(BaseSettings):
    """Server settings, read from ``ROI_CALCULATOR_*`` environment variables.

    Unset variables keep their defaults.  ``ROI_CALCULATOR_PORT=abc`` raises
    ``ValidationError``.
    """

    host: str = Field(default="0.0.0.0", description="Interface uvicorn binds to")
    port: int = Field(default=8000, ge=1, le=65535, description="TCP port")
    reload: bool = Field(default=False, description="Auto-reload on code changes")
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Root log level.",
    )

    model_config = SettingsConfigDict(
        env_prefix=ENV_PREFIX,
        case_sensitive=False,
        extra="ignore",
        env_ignore_empty=True,
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_log_level(cls, v):
        return v.upper() if isinstance(v, str) else v

    @classmethod
    def from_env(cls) -> AppSettings:
        """Settings for the current process environment."""
        return cls()


def configure_logging(level: str = "INFO") -> None:
    """Install the root handler once; later calls only adjust the level."""
    logging.basicConfig(level=level, format=LOG_FORMAT)
    logging.getLogger().setLevel(level)
