"""
Application logging.

All modules log under the ``audiowhisper`` logger. Handlers are attached
once, on first use: a rotating file in the per-user log directory and,
when enabled in config, stderr.
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import List, Optional

from platformdirs import user_log_path

ROOT_LOGGER_NAME = "audiowhisper"
LOG_FILE_NAME = "app.log"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - [%(threadName)s] %(message)s"
MAX_LOG_BYTES = 10 * 1024 * 1024  # 10MB
LOG_BACKUP_COUNT = 5


def get_log_dir() -> Path:
    return user_log_path(ROOT_LOGGER_NAME, appauthor=False, ensure_exists=True)


def _build_handlers(level: int, to_console: bool) -> List[logging.Handler]:
    formatter = logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")

    handlers: List[logging.Handler] = [
        RotatingFileHandler(
            get_log_dir() / LOG_FILE_NAME,
            maxBytes=MAX_LOG_BYTES,
            backupCount=LOG_BACKUP_COUNT,
            encoding="utf-8",
        )
    ]
    if to_console:
        handlers.append(logging.StreamHandler(sys.stderr))

    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
    return handlers


_logger_instance: Optional[logging.Logger] = None


def get_logger(name: str = ROOT_LOGGER_NAME) -> logging.Logger:
    """
    Return a logger below the application root, configuring the root once.

    Args:
        name: Usually ``__name__`` of the calling module

    Returns:
        The named logger; its records propagate to the application root.
    """
    global _logger_instance

    if _logger_instance is None:
        # Deferred: config lives in core, which itself logs through here
        from ..core.settings.config import LOG_TO_CONSOLE, get_log_level

        root_logger = logging.getLogger(ROOT_LOGGER_NAME)
        if not root_logger.handlers:
            level = get_log_level()
            root_logger.setLevel(level)
            for handler in _build_handlers(level, LOG_TO_CONSOLE):
                root_logger.addHandler(handler)
            root_logger.propagate = False

        _logger_instance = root_logger

    if name == ROOT_LOGGER_NAME:
        return _logger_instance
    return logging.getLogger(name)


def shutdown_logging() -> None:
    """Close all file handlers to release file locks."""
    global _logger_instance
    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    for handler in root_logger.handlers[:]:
        handler.close()
        root_logger.removeHandler(handler)
    _logger_instance = None
