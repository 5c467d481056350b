"""Structured logging configuration for Complex Calc."""

import logging
import sys
from datetime import datetime
from typing import Optional


class StructuredFormatter(logging.Formatter):
    """Formatter that outputs ``<timestamp> [LEVEL] logger: message`` lines."""

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.fromtimestamp(record.created).isoformat()
        line = f"{timestamp} [{record.levelname}] {record.name}: {record.getMessage()}"
        if record.exc_info:
            line = f"{line}\n{self.formatException(record.exc_info)}"
        return line


def setup_logging(
    level: str = "WARNING", log_file: Optional[str] = None
) -> logging.Logger:
    """Set up structured logging for the application.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional file path to write logs to in addition to stderr

    Returns:
        The configured ``complexcalc`` root logger
    """
    logger = logging.getLogger("complexcalc")
    logger.setLevel(getattr(logging, level.upper(), logging.WARNING))
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(StructuredFormatter())
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(StructuredFormatter())
        logger.addHandler(file_handler)

    return logger


def get_logger(name: str = "complexcalc") -> logging.Logger:
    """Return the logger for module *name* under the ``complexcalc`` namespace."""
    if name == "complexcalc" or name.startswith("complexcalc."):
        return logging.getLogger(name)
    return logging.getLogger(f"complexcalc.{name}")
