from __future__ import annotations

import logging
import sys

"""Labeled console logging for the comparison tool.

Every line reads ``<LABEL> <message>``: INFO, WARN, ERROR and SUMMARY, plus
DEBUG once ``--debug`` is given. The application logger is ``wbcompare``;
module loggers such as ``wbcompare.services.orchestrator`` are its children
and propagate into its single stdout handler.
"""

__all__ = [
    "LOGGER_NAME",
    "SUMMARY_LEVEL",
    "LabeledFormatter",
    "enable_debug",
    "get_logger",
    "log_summary",
    "reset_logging",
    "setup_logging",
]

LOGGER_NAME = "wbcompare"

# sits between INFO (20) and WARNING (30)
SUMMARY_LEVEL = 25

_logger: logging.Logger | None = None


class LabeledFormatter(logging.Formatter):
    """``LABEL message`` with WARNING shortened to WARN."""

    LEVEL_LABELS = {
        logging.DEBUG: "DEBUG",
        logging.INFO: "INFO",
        SUMMARY_LEVEL: "SUMMARY",
        logging.WARNING: "WARN",
        logging.ERROR: "ERROR",
        logging.CRITICAL: "CRITICAL",
    }

    def format(self, record: logging.LogRecord) -> str:
        label = self.LEVEL_LABELS.get(record.levelno) or record.levelname
        return f"{label} {record.getMessage()}"


def _stdout_handler(level: int) -> logging.Handler:
    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(LabeledFormatter())
    return handler


def setup_logging() -> logging.Logger:
    """Configure the ``wbcompare`` logger once and return it.

    INFO and above go to stdout through one handler; records stop at this
    logger instead of reaching the root logger. Later calls return the same
    logger untouched.
    """
    global _logger

    if _logger is not None:
        return _logger

    logging.addLevelName(SUMMARY_LEVEL, "SUMMARY")

    app_logger = logging.getLogger(LOGGER_NAME)
    # handlers survive reset_logging(); drop them so lines are not doubled
    for old in list(app_logger.handlers):
        app_logger.removeHandler(old)
    app_logger.addHandler(_stdout_handler(logging.INFO))
    app_logger.setLevel(logging.INFO)
    app_logger.propagate = False

    _logger = app_logger
    return app_logger


def get_logger() -> logging.Logger:
    return _logger if _logger is not None else setup_logging()


def enable_debug() -> None:
    """Switch the application logger and its handlers to DEBUG."""
    app_logger = get_logger()
    app_logger.setLevel(logging.DEBUG)
    for handler in app_logger.handlers:
        handler.setLevel(logging.DEBUG)


def log_summary(message: str) -> None:
    """Emit ``message`` at SUMMARY level; the formatter prints the prefix."""
    get_logger().log(SUMMARY_LEVEL, message)


def reset_logging() -> None:
    """Forget the configured logger so the next setup_logging() starts over (tests)."""
    global _logger
    _logger = None
