# chatrooms/core/logging.py

import logging
import sys


DEFAULT_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"

# Third-party loggers and the level they are capped at
QUIET_LOGGERS = {
    "redis": logging.WARNING,
    "uvicorn.access": logging.WARNING,
}


def resolve_level(level_name: str) -> int | None:
    """Map a level name such as "debug" or "WARNING" to its value, None if unknown."""
    level = logging.getLevelName(level_name.strip().upper())
    return level if isinstance(level, int) else None


def setup_logging(level_name: str = "INFO") -> None:
    """
    Configure application-wide logging.

    Called by create_app() with Settings.LOG_LEVEL. Records go to stdout
    so container runtimes pick them up. When the root logger already has a
    handler (Uvicorn, pytest) no second one is added.
    """
    level = resolve_level(level_name)
    unknown = level is None
    if unknown:
        level = logging.INFO

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    if not root_logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(DEFAULT_FORMAT))
        root_logger.addHandler(handler)

    for name, cap in QUIET_LOGGERS.items():
        logging.getLogger(name).setLevel(max(cap, level))

    if unknown:
        root_logger.warning(f"Unknown LOG_LEVEL {level_name!r}, using INFO")


def get_logger(name: str | None = None) -> logging.Logger:
    """
    Helper to get a logger with our app's configuration applied.

    Usage:
        from chatrooms.core.logging import get_logger

        logger = get_logger(__name__)
        logger.info("Hello from my module")
    """
    return logging.getLogger(name)
