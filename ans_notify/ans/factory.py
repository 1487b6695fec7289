"""Convenience factory for wiring the ANS client from configuration."""

from __future__ import annotations

import logging
from pathlib import Path

import httpx
import structlog

from ans_notify.ans.auth import XsuaaAuth
from ans_notify.ans.client import ANSClient, Client
from ans_notify.ans.exceptions import ANSParseError
from ans_notify.ans.handler import ANSLogHandler
from ans_notify.ans.types import Event, parse_service_key
from ans_notify.core.config import ANSConfig

logger = structlog.get_logger(__name__)


def load_event_template(config: ANSConfig) -> Event:
    """Build the base event from the template file, then the inline template.

    Inline template keys override the ones from the file.
    """
    event = Event()

    if config.event_template_file_path:
        path = Path(config.event_template_file_path)
        try:
            content = path.read_bytes()
        except OSError as exc:
            raise ANSParseError(f"cannot read ANS event template file '{path}': {exc}") from exc
        event.merge_with_json(content)

    if config.event_template:
        event.merge_with_json(config.event_template)

    return event


def create_ans_client(config: ANSConfig, http: httpx.Client | None = None) -> ANSClient:
    """Parse the service key and build an authenticated ANS client.

    Raises:
        ANSParseError: If the configured service key is not valid JSON.
    """
    key = parse_service_key(config.service_key.get_secret_value())
    auth = XsuaaAuth.from_service_key(key, http=http, timeout_secs=config.timeout_secs)
    logger.info("ans_client_created", url=key.url)
    return ANSClient(key.url, auth, http=http, timeout_secs=config.timeout_secs)


def create_log_handler(config: ANSConfig, client: Client | None = None) -> ANSLogHandler:
    """Build a log handler forwarding records at ``config.hook_level`` and above."""
    level = logging.getLevelName(config.hook_level.upper())
    if not isinstance(level, int):
        level = logging.WARNING
    return ANSLogHandler(
        client=client or create_ans_client(config),
        template=load_event_template(config),
        level=level,
    )
