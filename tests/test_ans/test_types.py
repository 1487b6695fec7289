"""Tests for ANS domain types — service key parsing, event serialization, merging."""

from __future__ import annotations

import json

import pytest
from pydantic import ValidationError

from ans_notify.ans.exceptions import ANSParseError, ANSSerializationError
from ans_notify.ans.types import (
    Category,
    Event,
    Resource,
    ServiceKey,
    Severity,
    parse_service_key,
)

# ── Helpers ─────────────────────────────────────────────────────

_SERVICE_KEY_JSON = json.dumps({
    "url": "https://ans.example.com",
    "client_id": "my-client",
    "client_secret": "s3cr3t",
    "oauth_url": "https://auth.example.com/oauth/token",
})


def _event(**kw: object) -> Event:
    defaults: dict[str, object] = {
        "event_type": "Deploy",
        "event_timestamp": 1_700_000_000,
        "severity": Severity.WARNING.value,
        "category": Category.ALERT.value,
        "subject": "subject",
        "body": "body",
        "priority": 1,
        "tags": {"env": "prod"},
        "resource": Resource(resource_name="app", resource_type="application"),
    }
    defaults.update(kw)
    return Event(**defaults)  # type: ignore[arg-type]


# ── ServiceKey ──────────────────────────────────────────────────


class TestParseServiceKey:
    def test_parses_all_fields(self) -> None:
        key = parse_service_key(_SERVICE_KEY_JSON)
        assert key.url == "https://ans.example.com"
        assert key.client_id == "my-client"
        assert key.client_secret.get_secret_value() == "s3cr3t"
        assert key.oauth_url == "https://auth.example.com/oauth/token"

    def test_round_trip(self) -> None:
        key = parse_service_key(_SERVICE_KEY_JSON)
        assert parse_service_key(key.to_json()) == key

    def test_missing_fields_default_to_empty(self) -> None:
        key = parse_service_key('{"url": "https://ans.example.com"}')
        assert key.client_id == ""
        assert key.oauth_url == ""

    def test_unknown_fields_ignored(self) -> None:
        key = parse_service_key('{"url": "u", "vendor": "SAP"}')
        assert key.url == "u"

    @pytest.mark.parametrize("text", ["", "not json", "{", "[]", '{"url": 5}'])
    def test_malformed_raises_parse_error(self, text: str) -> None:
        with pytest.raises(ANSParseError, match="serviceKey"):
            parse_service_key(text)

    def test_secret_not_in_repr(self) -> None:
        key = parse_service_key(_SERVICE_KEY_JSON)
        assert "s3cr3t" not in repr(key)

    def test_is_immutable(self) -> None:
        key = ServiceKey(url="u")
        with pytest.raises(ValidationError):
            key.url = "other"  # type: ignore[misc]


# ── Serialization ───────────────────────────────────────────────


class TestEventSerialization:
    def test_uses_ans_keys(self) -> None:
        data = _event().to_dict()
        assert set(data) == {
            "eventType",
            "eventTimestamp",
            "severity",
            "category",
            "subject",
            "body",
            "priority",
            "tags",
            "resource",
        }
        assert data["resource"] == {"resourceName": "app", "resourceType": "application"}

    def test_empty_event_serializes_to_empty_object(self) -> None:
        assert Event().to_json() == "{}"

    def test_zero_values_omitted(self) -> None:
        event = Event(subject="only", priority=0, event_timestamp=0, body="", tags={})
        assert json.loads(event.to_json()) == {"subject": "only"}

    def test_present_empty_resource_is_kept(self) -> None:
        event = Event(resource=Resource())
        assert json.loads(event.to_json()) == {"resource": {}}

    def test_resource_zero_values_omitted(self) -> None:
        event = Event(resource=Resource(resource_name="app", tags={}))
        assert json.loads(event.to_json()) == {"resource": {"resourceName": "app"}}

    def test_json_round_trip(self) -> None:
        event = _event()
        restored = Event.model_validate_json(event.to_json())
        assert restored == event

    def test_accepts_camel_case_keys(self) -> None:
        event = Event.model_validate({"eventType": "X", "eventTimestamp": 5})
        assert event.event_type == "X"
        assert event.event_timestamp == 5

    def test_unserializable_tag_raises(self) -> None:
        event = Event(tags={"bad": object()})
        with pytest.raises(ANSSerializationError):
            event.to_json()


# ── Merge ───────────────────────────────────────────────────────


class TestEventMerge:
    def test_present_field_overwrites_absent_field_kept(self) -> None:
        event = Event(priority=1, subject="keep me")
        event.merge_with_json('{"priority": 99}')
        assert event.priority == 99
        assert event.subject == "keep me"

    def test_merge_into_empty_event(self) -> None:
        event = Event()
        event.merge_with_json('{"eventType": "Build", "severity": "ERROR"}')
        assert event.event_type == "Build"
        assert event.severity == "ERROR"

    def test_explicit_zero_overwrites(self) -> None:
        event = Event(priority=5, subject="old")
        event.merge_with_json('{"priority": 0, "subject": ""}')
        assert event.priority == 0
        assert event.subject == ""

    def test_null_scalar_is_noop(self) -> None:
        event = Event(subject="old")
        event.merge_with_json('{"subject": null}')
        assert event.subject == "old"

    def test_tags_merged_key_by_key(self) -> None:
        event = Event(tags={"a": 1, "b": 2})
        event.merge_with_json('{"tags": {"b": 20, "c": 30}}')
        assert event.tags == {"a": 1, "b": 20, "c": 30}

    def test_null_tags_clears(self) -> None:
        event = Event(tags={"a": 1})
        event.merge_with_json('{"tags": null}')
        assert event.tags is None

    def test_resource_merged_field_by_field(self) -> None:
        event = Event(resource=Resource(resource_name="app", resource_type="application"))
        event.merge_with_json('{"resource": {"resourceInstance": "i-1", "tags": {"x": "y"}}}')
        assert event.resource is not None
        assert event.resource.resource_name == "app"
        assert event.resource.resource_type == "application"
        assert event.resource.resource_instance == "i-1"
        assert event.resource.tags == {"x": "y"}

    def test_resource_created_when_missing(self) -> None:
        event = Event()
        event.merge_with_json('{"resource": {"resourceName": "svc"}}')
        assert event.resource == Resource(resource_name="svc")

    def test_null_resource_clears(self) -> None:
        event = Event(resource=Resource(resource_name="app"))
        event.merge_with_json('{"resource": null}')
        assert event.resource is None

    def test_unknown_keys_ignored(self) -> None:
        event = Event(subject="s")
        event.merge_with_json('{"somethingElse": true}')
        assert event == Event(subject="s")

    def test_accepts_bytes(self) -> None:
        event = Event()
        event.merge_with_json(b'{"body": "from bytes"}')
        assert event.body == "from bytes"

    @pytest.mark.parametrize(
        "text",
        [
            "not json",
            "[1, 2]",
            '{"priority": "high"}',
            '{"priority": "5"}',
            '{"priority": true}',
            '{"eventTimestamp": "17"}',
            '{"subject": 5}',
            '{"resource": {"resourceName": 1}}',
        ],
    )
    def test_malformed_raises_and_leaves_event_untouched(self, text: str) -> None:
        event = Event(subject="s", priority=3)
        with pytest.raises(ANSParseError, match="error unmarshalling ANS event"):
            event.merge_with_json(text)
        assert event == Event(subject="s", priority=3)


class TestEnums:
    def test_severity_values(self) -> None:
        assert [s.value for s in Severity] == ["INFO", "NOTICE", "WARNING", "ERROR", "FATAL"]

    def test_category_values(self) -> None:
        assert {c.value for c in Category} == {"EXCEPTION", "ALERT", "NOTIFICATION"}
