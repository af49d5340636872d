"""Verbosity-levelled logging for printplan.

Scheduling runs explain themselves at three levels of detail, picked with
``printplan -v N``:

- 1 (changes): each placement and each job sent back to the queue
- 2 (checks): every printer offer and every rejected gap
- 3 (debug): the full gap walk

Warnings and errors are always shown.
"""

from __future__ import annotations

import logging
import sys
from typing import Any, TextIO

CHANGES_LEVEL = 25  # Between INFO (20) and WARNING (30)
CHECKS_LEVEL = 15  # Between DEBUG (10) and INFO (20)

logging.addLevelName(CHANGES_LEVEL, "CHANGES")
logging.addLevelName(CHECKS_LEVEL, "CHECKS")

LOGGER_NAME = "printplan"

VERBOSITY_LEVELS = {
    0: logging.WARNING,
    1: CHANGES_LEVEL,
    2: CHECKS_LEVEL,
    3: logging.DEBUG,
}


class PlanLogger(logging.Logger):
    """Logger with one method per verbosity level."""

    def changes(self, msg: str, *args: Any, **kwargs: Any) -> None:
        if self.isEnabledFor(CHANGES_LEVEL):
            self._log(CHANGES_LEVEL, msg, args, **kwargs)

    def checks(self, msg: str, *args: Any, **kwargs: Any) -> None:
        if self.isEnabledFor(CHECKS_LEVEL):
            self._log(CHECKS_LEVEL, msg, args, **kwargs)


class _PlanFormatter(logging.Formatter):
    """Bare messages for progress output, a prefix for warnings and errors."""

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        if record.levelno >= logging.WARNING:
            return f"{record.levelname.lower()}: {message}"
        return message


def get_logger() -> PlanLogger:
    """Return the shared printplan logger."""
    logging.setLoggerClass(PlanLogger)
    logger = logging.getLogger(LOGGER_NAME)
    assert isinstance(logger, PlanLogger)
    return logger


def level_for_verbosity(verbosity: int) -> int:
    """Map a -v count to a logging level; anything above 3 is debug."""
    if verbosity <= 0:
        return logging.WARNING
    return VERBOSITY_LEVELS.get(verbosity, logging.DEBUG)


def setup_logger(verbosity: int, stream: TextIO | None = None) -> None:
    """Send printplan log output to stream (stderr by default).

    Safe to call again; the previous handler is replaced.
    """
    logger = get_logger()
    logger.handlers.clear()
    logger.setLevel(level_for_verbosity(verbosity))

    handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    handler.setFormatter(_PlanFormatter("%(message)s"))
    logger.addHandler(handler)
    logger.propagate = False


def reset_logger() -> None:
    """Drop handlers and hand records back to the root logger."""
    logger = get_logger()
    logger.handlers.clear()
    logger.setLevel(logging.WARNING)
    logger.propagate = True


def changes_enabled() -> bool:
    return get_logger().isEnabledFor(CHANGES_LEVEL)


def checks_enabled() -> bool:
    return get_logger().isEnabledFor(CHECKS_LEVEL)


def debug_enabled() -> bool:
    return get_logger().isEnabledFor(logging.DEBUG)
