"""
Runtime configuration.

Values come from the environment (CHESS_* variables) and can be overridden by the command line.
"""

import os
from typing import Mapping, Optional, Self

from pydantic import BaseModel, Field, field_validator

ENV_PREFIX = "CHESS_"

# The original device only exposed a handful of minors. Keep the pool small.
MAX_INSTANCES = 16


class Settings(BaseModel):
    instances: int = Field(default=1, ge=1, le=MAX_INSTANCES)
    database_url: Optional[str] = None
    log_level: str = "WARNING"

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        level = value.strip().upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Unknown log level: {value!r}")
        return level

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> Self:
        """Collect CHESS_INSTANCES, CHESS_DATABASE_URL and CHESS_LOG_LEVEL (unset variables keep their defaults)."""
        environ = os.environ if environ is None else environ
        values = {
            name: environ[f"{ENV_PREFIX}{name.upper()}"]
            for name in cls.model_fields
            if f"{ENV_PREFIX}{name.upper()}" in environ
        }
        return cls.model_validate(values)
