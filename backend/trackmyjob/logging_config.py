"""
Logging setup shared by the API and its tests.

Call ``setup_logging()`` once at startup; modules then use
``get_logger(__name__)``.
"""

import logging
import sys
from typing import Optional

from trackmyjob.config import settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
DATE_FORMAT = "%H:%M:%S"

# Noisy libraries, pinned regardless of the app level
_LIBRARY_LEVELS = {
    "sqlalchemy.pool": logging.WARNING,
    "uvicorn": logging.INFO,
    "uvicorn.access": logging.WARNING,
    "httpx": logging.WARNING,
    "httpcore": logging.WARNING,
    "multipart": logging.WARNING,
    "asyncio": logging.WARNING,
}

_LEVEL_STYLES = {
    logging.DEBUG: "\033[2m",
    logging.INFO: "\033[34m",
    logging.WARNING: "\033[33;1m",
    logging.ERROR: "\033[31;1m",
    logging.CRITICAL: "\033[41;97m",
}


class ConsoleFormatter(logging.Formatter):
    """Colours the level name when writing to a terminal."""

    def __init__(self, use_colour: bool = True):
        super().__init__(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)
        self.use_colour = use_colour

    def formatMessage(self, record: logging.LogRecord) -> str:
        style = _LEVEL_STYLES.get(record.levelno)
        if not (self.use_colour and style):
            return super().formatMessage(record)
        values = dict(record.__dict__, levelname=f"{style}{record.levelname:<7}\033[0m")
        return self._style._fmt % values


def resolve_level(log_level: Optional[str] = None) -> int:
    """Explicit name wins, then the debug flag, then INFO."""
    if log_level:
        level = logging.getLevelName(log_level.upper())
        return level if isinstance(level, int) else logging.INFO
    return logging.DEBUG if settings.debug else logging.INFO


def setup_logging(log_level: Optional[str] = None) -> None:
    level = resolve_level(log_level)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(ConsoleFormatter(use_colour=sys.stdout.isatty()))

    root = logging.getLogger()
    for existing in list(root.handlers):
        root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(level)

    logging.getLogger("sqlalchemy.engine").setLevel(
        logging.INFO if settings.sql_echo else logging.WARNING
    )
    for name, library_level in _LIBRARY_LEVELS.items():
        logging.getLogger(name).setLevel(library_level)

    logging.getLogger(__name__).debug("Log level %s", logging.getLevelName(level))


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
