from .logger import get_log_dir, get_logger, shutdown_logging
from .platform import is_apple_silicon

__all__ = [
    "get_logger",
    "get_log_dir",
    "shutdown_logging",
    "is_apple_silicon",
]
