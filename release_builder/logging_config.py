"""Logging configuration for the release builder."""

import logging
import sys
from datetime import datetime
from pathlib import Path

LOGGER_NAME = "release_builder"

# The terminal is shared with trunk/cargo output, keep our lines short there
CONSOLE_FORMAT = "[release] %(levelname)s %(message)s"
FILE_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s:%(funcName)s:%(lineno)d | %(message)s"


def setup_logging(
    level: str = "INFO",
    log_to_file: bool = False,
    log_dir: Path | None = None,
) -> logging.Logger:
    """
    Configure the release_builder logger for one release run.

    Args:
        level: Console logging level (DEBUG, INFO, WARNING, ERROR)
        log_to_file: Also keep a full DEBUG log of this run
        log_dir: Directory for run logs (default: logs/)

    Returns:
        Configured package logger
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.handlers.clear()
    # Don't double up through the root logger when embedded elsewhere
    logger.propagate = False

    console_level = getattr(logging, level.upper(), logging.INFO)
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(console_level)
    console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    logger.addHandler(console_handler)
    logger.setLevel(console_level)

    if log_to_file:
        log_dir = log_dir or Path("logs")
        log_dir.mkdir(parents=True, exist_ok=True)

        # One file per run, so a failed release can be inspected on its own
        log_file = log_dir / f"release_{datetime.now().strftime('%Y%m%d_%H%M%S')}.log"
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(
            logging.Formatter(FILE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")
        )
        logger.addHandler(file_handler)
        logger.setLevel(logging.DEBUG)

        logger.info(f"Logging run to {log_file}")

    return logger


def get_logger(name: str = LOGGER_NAME) -> logging.Logger:
    """Get a logger instance."""
    return logging.getLogger(name)
