"""Settings for the crossenv tool itself, read from the process environment."""

from __future__ import annotations

import logging
import os
from typing import Mapping, Optional

from pydantic import BaseModel, field_validator

LOG_LEVEL_VAR = "CROSS_ENV_LOG_LEVEL"


class Settings(BaseModel):
    """Tool configuration.

    Only variables prefixed with ``CROSS_ENV_`` are consulted. They are
    inherited by the child like any other variable.
    """

    log_level: Optional[str] = None

    @field_validator("log_level")
    @classmethod
    def known_level(cls, v: Optional[str]) -> Optional[str]:
        """Normalize the level name and reject unknown ones."""

        if v is None or not v.strip():
            return None
        name = v.strip().upper()
        if not isinstance(logging.getLevelName(name), int):
            raise ValueError(f"Unknown log level: {v}")
        return name

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        if environ is None:
            environ = os.environ
        return cls.model_validate({"log_level": environ.get(LOG_LEVEL_VAR)})

    def configure_logging(self) -> None:
        """Send log records to stderr when a level is configured."""

        if self.log_level is None:
            return
        logging.basicConfig(
            level=self.log_level,
            format="cross-env: %(levelname)s %(name)s: %(message)s",
        )


__all__ = ["LOG_LEVEL_VAR", "Settings"]
