"""Logging for the faceverify pipeline stages.

Every module logs through a child of the ``faceverify`` logger hierarchy.
Stages report what they measured (brightness, blur variance, candidate
counts, similarity scores) on one line each, so a verification run can be
followed from decode to match decision in the console or a log file.
"""

from __future__ import annotations

import logging
import sys
from typing import Optional

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class ColoredFormatter(logging.Formatter):
    """Highlights the level and logger name when writing to a terminal."""

    COLORS = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[35m",
    }
    RESET = "\033[0m"
    BOLD = "\033[1m"

    def __init__(self, fmt: str, datefmt: Optional[str] = None, use_color: bool = False):
        super().__init__(fmt, datefmt=datefmt)
        self.use_color = use_color

    def format(self, record: logging.LogRecord) -> str:
        if not self.use_color or record.levelname not in self.COLORS:
            return super().format(record)

        # Other handlers share the record, so color a copy
        record = logging.makeLogRecord(record.__dict__)
        color = self.COLORS[record.levelname]
        record.levelname = f"{color}{self.BOLD}{record.levelname}{self.RESET}"
        record.name = f"{self.BOLD}{record.name}{self.RESET}"
        return super().format(record)


def setup_logging(
    name: str = "faceverify",
    level: Optional[str] = None,
    log_file: Optional[str] = None,
) -> logging.Logger:
    """Attach console (and optionally file) handlers to a pipeline logger.

    Calling it again for a logger that already has handlers returns the
    logger untouched.

    Args:
        name: Logger name, ``faceverify`` or a dotted module path below it.
        level: Level name such as ``DEBUG``. Defaults to ``LOG_LEVEL`` from
            the process config, or INFO when that config is invalid.
        log_file: Path of a file that receives uncolored copies of each line.

    Returns:
        The configured logger.

    Example:
        >>> logger = setup_logging("faceverify.services", level="DEBUG")
        >>> logger.debug(f"Blur variance {variance:.1f} (min {min_blur})")
        >>> logger.info(f"User {user_id}: similarity 0.7312, match=True")
    """
    logger = logging.getLogger(name)

    if logger.handlers:
        return logger

    if level is None:
        try:
            from faceverify.config import get_config

            level = get_config().log_level
        except ValueError:
            level = "INFO"

    logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(logger.level)
    use_color = hasattr(sys.stdout, "isatty") and sys.stdout.isatty()
    console_handler.setFormatter(
        ColoredFormatter(LOG_FORMAT, datefmt=DATE_FORMAT, use_color=use_color)
    )
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(logger.level)
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
        logger.addHandler(file_handler)

    logger.propagate = False

    return logger


def get_logger(name: str) -> logging.Logger:
    """Module-level logger, e.g. ``logger = get_logger(__name__)``."""
    return setup_logging(name)
