"""Process-wide configuration for Academia."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Mapping

VALID_ENVIRONMENTS = ("development", "test", "production")
DEFAULT_PAGE_LIMIT = 10


class ConfigError(Exception):
    """Raised when configuration is invalid."""


@dataclass(frozen=True)
class Settings:
    """Application settings.

    Built once at process start and handed to the components that need it.
    """

    env: str = "development"
    db_path: str = "academia.db"
    default_limit: int = DEFAULT_PAGE_LIMIT
    log_level: str = "INFO"
    log_dir: str = "logs"

    def __post_init__(self) -> None:
        if self.env not in VALID_ENVIRONMENTS:
            raise ConfigError(
                f"Invalid environment '{self.env}', expected one of {', '.join(VALID_ENVIRONMENTS)}"
            )
        if self.default_limit < 1:
            raise ConfigError(f"default_limit must be positive, got {self.default_limit}")
        if self.log_level not in logging.getLevelNamesMapping():
            raise ConfigError(f"Invalid log level '{self.log_level}'")

    @property
    def is_production(self) -> bool:
        """Whether the app runs in production mode."""
        return self.env == "production"

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> Settings:
        """Load settings from ACADEMIA_* environment variables.

        Args:
            environ: Mapping to read from. Defaults to os.environ.

        Returns:
            Parsed settings.

        Raises:
            ConfigError: If a value is invalid.
        """
        if environ is None:
            environ = os.environ

        raw_limit = environ.get("ACADEMIA_DEFAULT_LIMIT", str(DEFAULT_PAGE_LIMIT))
        try:
            default_limit = int(raw_limit)
        except ValueError as e:
            raise ConfigError(
                f"ACADEMIA_DEFAULT_LIMIT must be an integer, got '{raw_limit}'"
            ) from e

        return cls(
            env=environ.get("ACADEMIA_ENV", "development").lower(),
            db_path=environ.get("ACADEMIA_DB_PATH", "academia.db"),
            default_limit=default_limit,
            log_level=environ.get("ACADEMIA_LOG_LEVEL", "INFO").upper(),
            log_dir=environ.get("ACADEMIA_LOG_DIR", "logs"),
        )
