"""Alert Notification Service — events, authentication, delivery."""

from ans_notify.ans.auth import AuthHeaderProvider, XsuaaAuth
from ans_notify.ans.client import EVENT_PATH, ANSClient, Client
from ans_notify.ans.exceptions import (
    ANSAuthError,
    ANSBodyReadError,
    ANSError,
    ANSParseError,
    ANSSerializationError,
    ANSTransportError,
    ANSUnexpectedStatusError,
)
from ans_notify.ans.factory import create_ans_client, create_log_handler, load_event_template
from ans_notify.ans.handler import ANSLogHandler
from ans_notify.ans.severity import LogLevel, translate_log_level
from ans_notify.ans.types import Category, Event, Resource, ServiceKey, Severity, parse_service_key

__all__ = [
    "ANSAuthError",
    "ANSBodyReadError",
    "ANSClient",
    "ANSError",
    "ANSLogHandler",
    "ANSParseError",
    "ANSSerializationError",
    "ANSTransportError",
    "ANSUnexpectedStatusError",
    "AuthHeaderProvider",
    "Category",
    "Client",
    "EVENT_PATH",
    "Event",
    "LogLevel",
    "Resource",
    "ServiceKey",
    "Severity",
    "XsuaaAuth",
    "create_ans_client",
    "create_log_handler",
    "load_event_template",
    "parse_service_key",
    "translate_log_level",
]
