"""Core module — config, logging."""

from ans_notify.core.config import (
    ANSConfig,
    LoggingConfig,
    Settings,
    get_settings,
    load_settings,
    reset_settings,
)
from ans_notify.core.logging import setup_logging

__all__ = [
    "ANSConfig",
    "LoggingConfig",
    "Settings",
    "get_settings",
    "load_settings",
    "reset_settings",
    "setup_logging",
]
