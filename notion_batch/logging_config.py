"""
Logging setup built on loguru.

The Notion SDK logs through the standard ``logging`` module, so its records are
forwarded into loguru and share the same sinks.
"""
from __future__ import annotations

import logging
import sys

from loguru import logger

from notion_batch.config import get_settings

NOTION_LOGGER_NAME = "notion_batch.notion"

CONSOLE_FORMAT = "<dim>{time:HH:mm:ss}</dim> | <level>{level: <8}</level> | {message}"
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {name}:{function}:{line} | {message}"


class InterceptHandler(logging.Handler):
    """Forward standard logging records to loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level: str | int = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        frame, depth = logging.currentframe(), 2
        while frame is not None and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())


def get_notion_logger() -> logging.Logger:
    """Return the stdlib logger handed to the Notion SDK."""
    notion_logger = logging.getLogger(NOTION_LOGGER_NAME)
    if not any(isinstance(h, InterceptHandler) for h in notion_logger.handlers):
        notion_logger.addHandler(InterceptHandler())
        notion_logger.propagate = False
    return notion_logger


def configure_logging(level: str | None = None, log_file: str | None = None) -> None:
    """
    Replace loguru's default sink with notion-batch sinks.

    Args:
        level: Minimum level; defaults to LOG_LEVEL from settings
        log_file: Optional file sink; defaults to LOG_FILE from settings
    """
    settings = get_settings()
    level = (level or settings.log_level).upper()
    log_file = log_file or settings.log_file

    logger.remove()
    logger.add(sys.stderr, level=level, format=CONSOLE_FORMAT)
    if log_file:
        logger.add(log_file, level=level, format=FILE_FORMAT, rotation="10 MB", retention=5)

    get_notion_logger().setLevel(level)
