"""Log level → ANS severity/category translation."""

from __future__ import annotations

import logging
from enum import IntEnum

from ans_notify.ans.types import Category, Severity


class LogLevel(IntEnum):
    """Log levels, most severe first."""

    PANIC = 0
    FATAL = 1
    ERROR = 2
    WARN = 3
    INFO = 4
    DEBUG = 5
    TRACE = 6

    @classmethod
    def from_stdlib(cls, levelno: int) -> LogLevel:
        """Map a :mod:`logging` numeric level onto a LogLevel."""
        if levelno >= logging.CRITICAL:
            return cls.FATAL
        if levelno >= logging.ERROR:
            return cls.ERROR
        if levelno >= logging.WARNING:
            return cls.WARN
        if levelno >= logging.INFO:
            return cls.INFO
        if levelno >= logging.DEBUG:
            return cls.DEBUG
        return cls.TRACE


_DEFAULT_CLASSIFICATION: tuple[Severity, Category] = (Severity.INFO, Category.NOTIFICATION)

_LEVEL_CLASSIFICATION: dict[LogLevel, tuple[Severity, Category]] = {
    LogLevel.PANIC: (Severity.FATAL, Category.EXCEPTION),
    LogLevel.FATAL: (Severity.FATAL, Category.EXCEPTION),
    LogLevel.ERROR: (Severity.ERROR, Category.EXCEPTION),
    LogLevel.WARN: (Severity.WARNING, Category.ALERT),
    LogLevel.INFO: (Severity.INFO, Category.NOTIFICATION),
    LogLevel.DEBUG: (Severity.INFO, Category.NOTIFICATION),
}


def translate_log_level(level: LogLevel | int) -> tuple[Severity, Category]:
    """Return the ANS (severity, category) pair for a log level.

    Levels without an entry (TRACE, unknown values) fall back to
    INFO/NOTIFICATION.
    """
    return _LEVEL_CLASSIFICATION.get(level, _DEFAULT_CLASSIFICATION)  # type: ignore[call-overload]
