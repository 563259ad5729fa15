from __future__ import annotations

import logging
import tomllib
from pathlib import Path
from typing import Any, Mapping, Optional

from pydantic import ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from . import canon, exceptions, utils

ENV_PREFIX = "ENERGIATILI_"


class Settings(BaseSettings):
    """
    Runtime settings.

    Precedence, lowest first: defaults, ENERGIATILI_* environment variables,
    values passed to the constructor (TOML table, CLI flags).
    """

    model_config = SettingsConfigDict(env_prefix=ENV_PREFIX, frozen=True, extra="forbid")

    # Civil timezone of the report's wall-clock timestamps
    tz: str = canon.DEFAULT_TZ
    # Marker preceding the model literal in the report page
    marker: str = canon.MODEL_MARKER
    # None = one worker per (resolution, bucket), capped
    max_workers: Optional[int] = None
    measurement_name: str = canon.DEFAULT_MEASUREMENT
    log_level: str = "WARNING"

    @field_validator("tz")
    @classmethod
    def tz_must_be_known(cls, v: str) -> str:
        try:
            utils.zone(v)
        except exceptions.ConfigError as err:
            raise ValueError(str(err)) from err
        return v

    @field_validator("max_workers")
    @classmethod
    def max_workers_must_be_positive(cls, v: Optional[int]) -> Optional[int]:
        if v is not None and v < 1:
            raise ValueError(f"max_workers must be >= 1, got {v}")
        return v

    @field_validator("log_level")
    @classmethod
    def log_level_must_be_known(cls, v: str) -> str:
        if not isinstance(logging.getLevelName(v.upper()), int):
            raise ValueError(f"Unknown log level: {v!r}")
        return v

    @field_validator("marker")
    @classmethod
    def marker_must_not_be_empty(cls, v: str) -> str:
        if not v:
            raise ValueError("marker must not be empty")
        return v

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any]) -> "Settings":
        try:
            return cls(**dict(values))
        except ValidationError as err:
            problems = [
                f"{'.'.join(str(p) for p in e['loc'])}: {e['msg']}" for e in err.errors()
            ]
            raise exceptions.ConfigError(
                f"Invalid settings: {'; '.join(problems)}", problems
            ) from err

    @classmethod
    def from_env(cls) -> "Settings":
        """Defaults overlaid with ENERGIATILI_TZ, ENERGIATILI_MAX_WORKERS, ..."""
        return cls.from_mapping({})

    @classmethod
    def from_toml(cls, path: str | Path) -> "Settings":
        """Read the [energiatili] table of a TOML file."""
        try:
            with open(path, "rb") as fh:
                data = tomllib.load(fh)
        except (OSError, tomllib.TOMLDecodeError) as err:
            raise exceptions.ConfigError(f"Couldn't read {path}: {err}", str(path)) from err
        return cls.from_mapping(data.get("energiatili", {}))

    def merged(self, **overrides: Any) -> "Settings":
        """Copy with the non-None overrides applied."""
        values = self.model_dump()
        values.update({k: v for k, v in overrides.items() if v is not None})
        return type(self).from_mapping(values)


def default_settings() -> Settings:
    return Settings.from_env()
