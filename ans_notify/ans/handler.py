"""Logging handler that forwards log records to ANS as events."""

from __future__ import annotations

import logging
import threading

from ans_notify.ans.client import Client
from ans_notify.ans.severity import LogLevel, translate_log_level
from ans_notify.ans.types import Event

DEFAULT_EVENT_TYPE = "LogEvent"

# Loggers written to while an event is being delivered; never forwarded.
_SKIPPED_LOGGERS = ("ans_notify", "httpx", "httpcore")


def _is_skipped(name: str) -> bool:
    return any(name == prefix or name.startswith(prefix + ".") for prefix in _SKIPPED_LOGGERS)


class ANSLogHandler(logging.Handler):
    """Sends every record at or above *level* to ANS.

    Each record becomes a copy of *template* with timestamp, severity,
    category, subject and body filled in from the record. Template values
    for ``event_type`` and ``subject`` win over the defaults.

    Records logged by the same thread while a send is in progress are
    dropped, so delivery can never trigger another delivery.
    """

    def __init__(
        self,
        client: Client,
        template: Event | None = None,
        level: int = logging.WARNING,
    ) -> None:
        super().__init__(level=level)
        self._client = client
        self._template = template or Event()
        self._local = threading.local()

    @property
    def template(self) -> Event:
        return self._template

    @property
    def emitting(self) -> bool:
        return getattr(self._local, "emitting", False)

    def filter(self, record: logging.LogRecord) -> bool:
        if self.emitting or _is_skipped(record.name):
            return False
        return bool(super().filter(record))

    def build_event(self, record: logging.LogRecord) -> Event:
        event = self._template.model_copy(deep=True)
        level = LogLevel.from_stdlib(record.levelno)
        severity, category = translate_log_level(level)

        event.event_timestamp = int(record.created)
        event.severity = severity.value
        event.category = category.value
        event.body = self.format(record)
        if not event.event_type:
            event.event_type = DEFAULT_EVENT_TYPE
        if not event.subject:
            event.subject = f"{record.name}: {record.levelname}"

        tags = dict(event.tags or {})
        tags.update({"logLevel": level.name.lower(), "logger": record.name})
        event.tags = tags
        return event

    def emit(self, record: logging.LogRecord) -> None:
        if self.emitting:
            return
        self._local.emitting = True
        try:
            self._client.send(self.build_event(record))
        except Exception:
            self.handleError(record)
        finally:
            self._local.emitting = False
