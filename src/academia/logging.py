"""Logging setup for Academia.

Every component logs under the ``academia`` logger via get_logger(). The
process entry point configures handlers once from Settings; nothing else
touches handlers.
"""

from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from academia.config import Settings

ROOT_LOGGER = "academia"
# uvicorn runs with log_config=None, so its records go through our handlers
SERVER_LOGGER = "uvicorn"

LOG_FILE = "academia.log"
MAX_BYTES = 10 * 1024 * 1024  # 10MB
BACKUP_COUNT = 5

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _build_handlers(
    log_path: Path, max_bytes: int, backup_count: int, console: bool
) -> list[logging.Handler]:
    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)
    handlers: list[logging.Handler] = [
        RotatingFileHandler(
            log_path, maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8"
        )
    ]
    if console:
        handlers.append(logging.StreamHandler())
    for handler in handlers:
        handler.setFormatter(formatter)
    return handlers


def _install(name: str, handlers: list[logging.Handler], level: int) -> logging.Logger:
    logger = logging.getLogger(name)
    logger.setLevel(level)
    # Replace rather than add so repeated setup does not duplicate output
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    for handler in handlers:
        logger.addHandler(handler)
    return logger


def setup_logging(
    settings: Settings,
    log_file: str = LOG_FILE,
    max_bytes: int = MAX_BYTES,
    backup_count: int = BACKUP_COUNT,
    console: bool = True,
) -> logging.Logger:
    """Configure the academia and server loggers from settings.

    Args:
        settings: Supplies ``log_dir`` (created if missing) and ``log_level``.
        log_file: File name inside ``log_dir``.
        max_bytes: Size at which the file is rotated.
        backup_count: Rotated files to keep.
        console: Also write to stderr.

    Returns:
        The ``academia`` logger.
    """
    log_dir = Path(settings.log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    level = logging.getLevelNamesMapping()[settings.log_level]

    handlers = _build_handlers(log_dir / log_file, max_bytes, backup_count, console)
    logger = _install(ROOT_LOGGER, handlers, level)
    _install(SERVER_LOGGER, handlers, level)

    logger.info(
        "Logging to %s at %s (env=%s)", log_dir / log_file, settings.log_level, settings.env
    )
    return logger


def get_logger(name: str) -> logging.Logger:
    """Logger for a component, e.g. ``get_logger("services")`` -> ``academia.services``."""
    if not name.startswith(f"{ROOT_LOGGER}."):
        name = f"{ROOT_LOGGER}.{name}"
    return logging.getLogger(name)
