"""
Configuration for the ink-wrapper generator.

- Reads environment variables (optionally from `.env`) via pydantic-settings.
- Exposes a cached `get_settings()` accessor; CLI flags override it.

Environment variables:
    INK_WRAPPER_LOG_LEVEL        (str, default "WARNING"): DEBUG, INFO, WARNING, ERROR
    INK_WRAPPER_LOG_FORMAT       (str, default "console"): "console" or "json"
    INK_WRAPPER_HEADER_COMMENT   (bool, default True)    : emit the auto-generated banner
"""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

__all__ = ["Settings", "get_settings"]

_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
_FORMATS = ("console", "json")


class Settings(BaseSettings):
    log_level: str = Field("WARNING", description="Logging level (DEBUG, INFO, WARNING, ERROR)")
    log_format: str = Field("console", description='Log renderer: "console" or "json"')
    header_comment: bool = Field(
        True, description="Start generated modules with an auto-generated banner"
    )

    model_config = SettingsConfigDict(
        env_prefix="INK_WRAPPER_", env_file=".env", case_sensitive=False, extra="ignore"
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def _check_level(cls, v):
        s = str(v).strip().upper()
        if s not in _LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(_LEVELS)}")
        return s

    @field_validator("log_format", mode="before")
    @classmethod
    def _check_format(cls, v):
        s = str(v).strip().lower()
        if s not in _FORMATS:
            raise ValueError(f"log_format must be one of {', '.join(_FORMATS)}")
        return s


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
