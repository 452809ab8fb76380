"""
Logging configuration for the application.
"""
import copy
import logging
import sys

from config import Config


class ColoredFormatter(logging.Formatter):
    """Formatter that colours the level name when writing to a terminal."""

    COLORS = {
        'DEBUG': '\033[36m',
        'INFO': '\033[32m',
        'WARNING': '\033[33m',
        'ERROR': '\033[31m',
        'CRITICAL': '\033[35m',
    }
    RESET = '\033[0m'

    def __init__(self, fmt: str, datefmt: str, use_color: bool = True):
        super().__init__(fmt, datefmt=datefmt)
        self.use_color = use_color

    def format(self, record: logging.LogRecord) -> str:
        if not self.use_color:
            return super().format(record)
        # Other handlers share the record
        record = copy.copy(record)
        color = self.COLORS.get(record.levelname, self.RESET)
        record.levelname = f"{color}{record.levelname}{self.RESET}"
        return super().format(record)


def resolve_level(name: str) -> int:
    """Map a level name such as 'debug' to its logging constant."""
    level = logging.getLevelName(name.strip().upper()) if name else logging.INFO
    return level if isinstance(level, int) else logging.INFO


def mask_user(user_id: str) -> str:
    """Shorten a user id for log lines."""
    return f"{user_id[:8]}..." if len(user_id) > 8 else user_id


def setup_logger(name: str, level: int = logging.INFO) -> logging.Logger:
    """
    Set up the application logger on stdout.

    Args:
        name: Logger name
        level: Logging level

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)
    logger.setLevel(level)

    if logger.handlers:
        return logger

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(ColoredFormatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S',
        use_color=Config.LOG_COLOR and sys.stdout.isatty(),
    ))

    logger.addHandler(handler)
    return logger


app_logger = setup_logger("sohbet_bridge", resolve_level(Config.LOG_LEVEL))
