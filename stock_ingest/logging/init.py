from __future__ import annotations

import logging
import sys
from typing import TextIO

"""Console logging for the stock_ingest CLI.

Every line starts with a short label: "INFO", "WARN", "ERROR", "DEBUG" or
"SUMMARY". Library modules only call logging.getLogger(__name__); records
bubble up to the "stock_ingest" logger, whose single console handler is
installed here by the CLI.
"""

__all__ = [
    "APP_LOGGER_NAME",
    "SUMMARY_LEVEL",
    "LabeledFormatter",
    "setup_logging",
    "enable_debug",
    "log_summary",
    "reset_logging",
]

APP_LOGGER_NAME = "stock_ingest"

# Sits between INFO and WARNING so SUMMARY lines survive a WARNING-level console
SUMMARY_LEVEL = 25
logging.addLevelName(SUMMARY_LEVEL, "SUMMARY")

_LABELS = {
    logging.DEBUG: "DEBUG",
    logging.INFO: "INFO",
    logging.WARNING: "WARN",
    logging.ERROR: "ERROR",
    logging.CRITICAL: "CRITICAL",
    SUMMARY_LEVEL: "SUMMARY",
}


class LabeledFormatter(logging.Formatter):
    """"<LABEL> <message>", followed by the traceback when one is attached."""

    def format(self, record: logging.LogRecord) -> str:
        text = f"{_LABELS.get(record.levelno, record.levelname)} {record.getMessage()}"
        if record.exc_info:
            text += "\n" + self.formatException(record.exc_info)
        return text


class _ConsoleHandler(logging.StreamHandler):
    """Marker subclass so setup_logging can recognise its own handler."""


def _console_handler(logger: logging.Logger) -> _ConsoleHandler | None:
    return next((h for h in logger.handlers if isinstance(h, _ConsoleHandler)), None)


def setup_logging(level: int = logging.INFO, stream: TextIO | None = None) -> logging.Logger:
    """Attach the labeled console handler to the app logger and return it.

    Calling it again keeps the existing handler. Output goes to stdout unless
    ``stream`` is given; records do not propagate to the root logger.
    """
    logger = logging.getLogger(APP_LOGGER_NAME)
    if _console_handler(logger) is None:
        handler = _ConsoleHandler(stream or sys.stdout)
        handler.setFormatter(LabeledFormatter())
        logger.addHandler(handler)
        handler.setLevel(level)
        logger.setLevel(level)
    logger.propagate = False
    return logger


def enable_debug(logger: logging.Logger) -> None:
    """Lower the app logger and its console handler to DEBUG (--debug)."""
    logger.setLevel(logging.DEBUG)
    handler = _console_handler(logger)
    if handler is not None:
        handler.setLevel(logging.DEBUG)


def log_summary(message: str) -> None:
    """Emit one SUMMARY line; the label is added by the formatter."""
    logging.getLogger(APP_LOGGER_NAME).log(SUMMARY_LEVEL, message)


def reset_logging() -> None:
    """Remove the console handler (tests re-create it against captured stdout)."""
    logger = logging.getLogger(APP_LOGGER_NAME)
    handler = _console_handler(logger)
    if handler is not None:
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
