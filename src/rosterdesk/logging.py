"""Logging setup for RosterDesk.

All modules log through ``logging.getLogger(__name__)``, which places them
below the ``rosterdesk`` logger configured here. Output goes to a size-rotated
file and, for the server, to the console as well.
"""

from __future__ import annotations

import logging
import os
import re
from logging.handlers import RotatingFileHandler
from pathlib import Path

ROOT_LOGGER = "rosterdesk"
LOG_DIR_ENV = "ROSTERDESK_LOG_DIR"
LOG_LEVEL_ENV = "ROSTERDESK_LOG_LEVEL"

DEFAULT_LOG_DIR = "logs"
DEFAULT_LOG_FILE = "rosterdesk.log"
DEFAULT_MAX_BYTES = 10 * 1024 * 1024  # 10MB
DEFAULT_BACKUP_COUNT = 5
DEFAULT_LOG_LEVEL = "INFO"

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_SECRETS = [
    (re.compile(r'("password"\s*:\s*)"[^"]*"'), r'\1"[REDACTED]"'),
    (re.compile(r"password=[^&\s]+"), "password=[REDACTED]"),
    (re.compile(r"rosterdesk_session=[A-Za-z0-9._-]+"), "rosterdesk_session=[REDACTED]"),
    (re.compile(r"Bearer [A-Za-z0-9._-]+"), "Bearer [REDACTED]"),
]


def setup_logging(
    log_dir: str | Path | None = None,
    log_file: str = DEFAULT_LOG_FILE,
    max_bytes: int = DEFAULT_MAX_BYTES,
    backup_count: int = DEFAULT_BACKUP_COUNT,
    level: str | None = None,
    console: bool = True,
) -> logging.Logger:
    """Configure the ``rosterdesk`` logger. Safe to call more than once.

    Args:
        log_dir: Where log files go. Falls back to $ROSTERDESK_LOG_DIR, then ./logs.
        log_file: File name inside ``log_dir``.
        max_bytes: Size at which the file is rotated.
        backup_count: Rotated files to keep.
        level: Level name. Falls back to $ROSTERDESK_LOG_LEVEL, then INFO.
        console: Also write to stderr.

    Returns:
        The configured ``rosterdesk`` logger.
    """
    directory = Path(log_dir or os.environ.get(LOG_DIR_ENV, DEFAULT_LOG_DIR))
    directory.mkdir(parents=True, exist_ok=True)
    level_name = (level or os.environ.get(LOG_LEVEL_ENV, DEFAULT_LOG_LEVEL)).upper()
    log_level = getattr(logging, level_name, logging.INFO)

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)
    handlers: list[logging.Handler] = [
        RotatingFileHandler(
            directory / log_file,
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding="utf-8",
        )
    ]
    if console:
        handlers.append(logging.StreamHandler())

    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(log_level)
    for old in list(logger.handlers):
        old.close()
    logger.handlers.clear()
    for handler in handlers:
        handler.setLevel(log_level)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    logger.info("Logging to %s at %s", directory / log_file, level_name)
    return logger


def get_logger(name: str) -> logging.Logger:
    """Logger for a component, e.g. ``get_logger("cli")`` -> ``rosterdesk.cli``."""
    if not name.startswith(f"{ROOT_LOGGER}."):
        name = f"{ROOT_LOGGER}.{name}"
    return logging.getLogger(name)


def sanitize_for_log(text: str) -> str:
    """Mask passwords and session tokens before ``text`` is logged."""
    for pattern, replacement in _SECRETS:
        text = pattern.sub(replacement, text)
    return text
