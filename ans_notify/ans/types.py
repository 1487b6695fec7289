"""Domain types for the SAP Alert Notification Service (ANS).

Events and resources serialize with the camelCase keys the ANS producer API
expects and never emit a field holding its zero value.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    SecretStr,
    SerializerFunctionWrapHandler,
    ValidationError,
    field_serializer,
    model_serializer,
)
from pydantic_core import PydanticSerializationError

from ans_notify.ans.exceptions import ANSParseError, ANSSerializationError


class Severity(StrEnum):
    """ANS event severity, ordered from least to most urgent."""

    INFO = "INFO"
    NOTICE = "NOTICE"
    WARNING = "WARNING"
    ERROR = "ERROR"
    FATAL = "FATAL"


class Category(StrEnum):
    """ANS event category."""

    EXCEPTION = "EXCEPTION"
    ALERT = "ALERT"
    NOTIFICATION = "NOTIFICATION"


def _is_empty(key: str, value: Any) -> bool:
    # A present resource is always emitted, even when all its fields are empty.
    if key == "resource":
        return value is None
    if value is None or value == "":
        return True
    if isinstance(value, dict):
        return not value
    return isinstance(value, int) and not isinstance(value, bool) and value == 0


def _omit_empty(data: dict[str, Any]) -> dict[str, Any]:
    return {k: v for k, v in data.items() if not _is_empty(k, v)}


# ── Service key ─────────────────────────────────────────────────


class ServiceKey(BaseModel):
    """Credentials of an ANS service instance, as found in its service key."""

    model_config = ConfigDict(frozen=True)

    url: str = ""
    client_id: str = ""
    client_secret: SecretStr = SecretStr("")
    oauth_url: str = ""

    @field_serializer("client_secret", when_used="json")
    def _reveal_secret(self, value: SecretStr) -> str:
        return value.get_secret_value()

    def to_json(self) -> str:
        """Serialize back into service key JSON (the secret is revealed)."""
        return self.model_dump_json()


def parse_service_key(service_key_json: str | bytes) -> ServiceKey:
    """Parse a service key JSON blob.

    Raises:
        ANSParseError: If the text is not a JSON object of the service key shape.
    """
    try:
        return ServiceKey.model_validate_json(service_key_json)
    except ValidationError as exc:
        raise ANSParseError(f"error unmarshalling ANS serviceKey: {exc}") from exc


# ── Event ───────────────────────────────────────────────────────


class Resource(BaseModel):
    """The resource an ANS event refers to."""

    model_config = ConfigDict(populate_by_name=True)

    resource_name: str = Field(default="", alias="resourceName")
    resource_type: str = Field(default="", alias="resourceType")
    resource_instance: str = Field(default="", alias="resourceInstance")
    tags: dict[str, Any] | None = None

    @model_serializer(mode="wrap")
    def _serialize(self, handler: SerializerFunctionWrapHandler) -> dict[str, Any]:
        return _omit_empty(handler(self))


class Event(BaseModel):
    """A single ANS resource event.

    Usage::

        event = Event(event_type="Deploy", subject="done")
        event.merge_with_json('{"severity": "ERROR"}')
        payload = event.to_json()
    """

    model_config = ConfigDict(populate_by_name=True)

    event_type: str = Field(default="", alias="eventType")
    event_timestamp: int = Field(default=0, alias="eventTimestamp")
    severity: str = ""
    category: str = ""
    subject: str = ""
    body: str = ""
    priority: int = 0
    tags: dict[str, Any] | None = None
    resource: Resource | None = None

    @model_serializer(mode="wrap")
    def _serialize(self, handler: SerializerFunctionWrapHandler) -> dict[str, Any]:
        return _omit_empty(handler(self))

    def to_dict(self) -> dict[str, Any]:
        """JSON-compatible dict with ANS keys and zero values omitted."""
        return self.model_dump(mode="json", by_alias=True)

    def to_json(self) -> str:
        """Encode the event for the ANS producer API.

        Raises:
            ANSSerializationError: If a tag value cannot be encoded.
        """
        try:
            return self.model_dump_json(by_alias=True)
        except (PydanticSerializationError, TypeError, ValueError) as exc:
            raise ANSSerializationError(f"error marshalling ANS event: {exc}") from exc

    def merge_with_json(self, event_json: str | bytes) -> None:
        """Merge an ANS event JSON document into this event in place.

        Only keys present in *event_json* are applied; everything else keeps
        its current value. Tags are merged key by key and a nested resource
        is merged field by field. The event is left untouched on error.

        Raises:
            ANSParseError: If *event_json* is not a JSON object of the event shape.
        """
        try:
            patch = EventPatch.model_validate_json(event_json)
        except ValidationError as exc:
            raise ANSParseError(
                f"error unmarshalling ANS event from JSON string {event_json!r}: {exc}"
            ) from exc
        patch.apply_to(self)


# ── Merge patches ───────────────────────────────────────────────


def _merge_tags(
    current: dict[str, Any] | None,
    incoming: dict[str, Any] | None,
) -> dict[str, Any] | None:
    if incoming is None:
        return None
    if current is None:
        return dict(incoming)
    current.update(incoming)
    return current


class ResourcePatch(BaseModel):
    """Partial resource decoded from JSON; ``None`` marks JSON ``null``."""

    model_config = ConfigDict(strict=True)

    resource_name: str | None = Field(default=None, alias="resourceName")
    resource_type: str | None = Field(default=None, alias="resourceType")
    resource_instance: str | None = Field(default=None, alias="resourceInstance")
    tags: dict[str, Any] | None = None

    def apply_to(self, resource: Resource) -> None:
        for name in self.model_fields_set:
            value = getattr(self, name)
            if name == "tags":
                resource.tags = _merge_tags(resource.tags, value)
            elif value is not None:
                setattr(resource, name, value)


class EventPatch(BaseModel):
    """Partial event decoded from JSON.

    ``model_fields_set`` tells which keys were present in the document, so an
    explicit ``""`` or ``0`` still overwrites while an absent key does not.
    """

    model_config = ConfigDict(strict=True)

    event_type: str | None = Field(default=None, alias="eventType")
    event_timestamp: int | None = Field(default=None, alias="eventTimestamp")
    severity: str | None = None
    category: str | None = None
    subject: str | None = None
    body: str | None = None
    priority: int | None = None
    tags: dict[str, Any] | None = None
    resource: ResourcePatch | None = None

    def apply_to(self, event: Event) -> None:
        for name in self.model_fields_set:
            value = getattr(self, name)
            if name == "tags":
                event.tags = _merge_tags(event.tags, value)
            elif name == "resource":
                if value is None:
                    event.resource = None
                    continue
                if event.resource is None:
                    event.resource = Resource()
                value.apply_to(event.resource)
            elif value is not None:
                setattr(event, name, value)
