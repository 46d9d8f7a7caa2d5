"""
Engine configuration.

Settings are pydantic models, optionally loaded from a YAML file:

    settings = CubeSettings.load("cube.yml")
    set_settings(settings)

The log level can be overridden with the SPARSECUBE_LOG_LEVEL environment
variable. Engine modules read defaults through get_settings() so a single
call to set_settings() changes separators and date formats everywhere.
"""

from __future__ import annotations
from typing import Optional
import os

import yaml
from pydantic import BaseModel, Field, field_validator

from .constants import (
    DEFAULT_SEPARATOR,
    DEFAULT_MELT_SEPARATOR,
    DEFAULT_HASH_BASE,
    DEFAULT_DATE_FORMAT,
    DEFAULT_DATETIME_FORMAT,
)

LOG_LEVEL_ENV = "SPARSECUBE_LOG_LEVEL"


class LogSettings(BaseModel):
    level: str = "WARNING"
    sink: Optional[str] = None          # file path; stderr only when None
    rotation: str = "1 day"
    retention: str = "30 days"

    @field_validator("level")
    @classmethod
    def _upper(cls, v: str) -> str:
        return v.upper()


class CubeSettings(BaseModel):
    separator: str = DEFAULT_SEPARATOR
    melt_separator: str = DEFAULT_MELT_SEPARATOR
    hash_base: int = DEFAULT_HASH_BASE
    date_format: str = DEFAULT_DATE_FORMAT
    datetime_format: str = DEFAULT_DATETIME_FORMAT
    log: LogSettings = Field(default_factory=LogSettings)

    @field_validator("hash_base")
    @classmethod
    def _positive_base(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("hash_base must be > 0")
        return v

    @classmethod
    def load(cls, path: str | None = None) -> "CubeSettings":
        """
        Load settings from YAML (when `path` is given) and the environment.

        Raises:
            FileNotFoundError: `path` does not exist
        """
        raw: dict = {}
        if path is not None:
            if not os.path.exists(path):
                raise FileNotFoundError(f"Config file not found: {path}")
            with open(path, "r", encoding="utf-8") as f:
                raw = yaml.safe_load(f) or {}

        level = os.getenv(LOG_LEVEL_ENV)
        if level:
            raw.setdefault("log", {})["level"] = level

        return cls(**raw)


_SETTINGS: Optional[CubeSettings] = None


def get_settings() -> CubeSettings:
    """Process-wide settings, created from defaults and the environment on first use."""
    global _SETTINGS
    if _SETTINGS is None:
        _SETTINGS = CubeSettings.load()
    return _SETTINGS


def set_settings(settings: CubeSettings) -> None:
    global _SETTINGS
    _SETTINGS = settings
