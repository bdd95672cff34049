"""Synthesize mock payloads from OpenAPI response schemas.

Handles:
- $ref resolution (unresolvable refs become a minimal id/created_at object)
- allOf merging, oneOf/anyOf first-member selection
- Type inference for schemas without an explicit type
- Enum, format and example values for strings
- Property-name heuristics for strings and numbers
- minItems for arrays (never more than 3 items)
- Required properties that the schema forgot to describe
"""

from __future__ import annotations

import logging
import random
import uuid
from datetime import datetime, timezone
from typing import Any

from .loader import resolve_ref

logger = logging.getLogger(__name__)

MAX_ARRAY_ITEMS = 3

_STATUS_CODES = [200, 201, 400, 401, 403, 404, 429, 500, 503]

# Name heuristics for strings, checked in order against the lowercased
# property name: (required fragments, any-of fragments, candidate values).
_NAME_CHOICES: list[tuple[tuple[str, ...], tuple[str, ...], list[str]]] = [
    (("type",), ("error", "problem"), [
        "https://example.com/problems/invalid-request",
        "https://example.com/problems/resource-not-found",
        "https://example.com/problems/unauthorized",
        "about:blank",
    ]),
    (("title",), ("error", "problem"), [
        "Invalid Request",
        "Resource Not Found",
        "Unauthorized",
        "Bad Request",
    ]),
    ((), ("detail",), [
        "The request is invalid",
        "The specified resource was not found",
        "Authentication credentials were missing or incorrect",
        "Rate limit exceeded",
    ]),
]

_LATER_CHOICES: list[tuple[tuple[str, ...], list[str]]] = [
    (("url", "uri"), [
        "https://example.com/resource",
        "https://example.com/images/profile.jpg",
        "https://example.com/icons/apple-touch-icon.png",
    ]),
    (("username",), ["example_user", "test_user", "demo_user", "sample_user"]),
    (("name",), [
        "Example User",
        "Example Account",
        "Test User",
        "Demo Account",
        "Sample List",
        "My Example List",
    ]),
    (("text",), [
        "Just setting up my account! This is a sample post.",
        "Testing the API with a realistic post example.",
        "Hello from the example generator! 🎮",
        "This is an example post generated from the OpenAPI spec.",
    ]),
    (("description",), [
        "A sample description",
        "Example profile description",
        "Mock description for testing",
        "Generated test description",
    ]),
    (("location",), ["San Francisco, CA", "New York, NY", "London, UK", "Tokyo, Japan"]),
    (("lang",), ["en", "es", "fr", "ja", "de", "pt"]),
    (("source",), ["Web App", "iPhone App", "Android App", "examplegen"]),
    (("state",), ["active", "inactive", "pending", "processing", "succeeded", "failed"]),
]

_TIMESTAMP_FRAGMENTS = ("created_at", "updated_at", "started_at", "ended_at", "scheduled_start")


def _now() -> str:
    return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def _today() -> str:
    return datetime.now(timezone.utc).strftime("%Y-%m-%d")


def generate_id() -> str:
    """Snowflake-like id: milliseconds since the epoch."""
    return str(int(datetime.now(timezone.utc).timestamp() * 1000))


def _placeholder_object() -> dict[str, Any]:
    return {"id": generate_id(), "created_at": _now()}


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _schema_type(schema: dict[str, Any]) -> str:
    """Explicit type, or one inferred from the schema's shape."""
    schema_type = schema.get("type")
    if isinstance(schema_type, list):
        schema_type = next((t for t in schema_type if t != "null"), None)
    if isinstance(schema_type, str):
        return schema_type
    if schema.get("properties"):
        return "object"
    if "items" in schema:
        return "array"
    if schema:
        return "object"
    return ""


class MockGenerator:
    """Generate values for schemas of one spec using a single random source."""

    def __init__(self, spec: dict[str, Any] | None, rng: random.Random | None = None) -> None:
        self.spec = spec
        self.rng = rng or random.Random()
        self._expanding: list[str] = []

    def value(self, schema: dict[str, Any], name: str = "") -> Any:
        if "$ref" in schema:
            return self._ref_value(schema["$ref"], name)

        all_of = schema.get("allOf")
        if all_of:
            return self._merge(all_of, name)

        for key in ("oneOf", "anyOf"):
            members = schema.get(key)
            if members and isinstance(members[0], dict):
                return self.value(members[0], name)

        schema_type = _schema_type(schema)
        if schema_type == "object":
            return self.object(schema)
        if schema_type == "array":
            return self.array(schema)
        if schema_type == "string":
            return self.string(schema, name)
        if schema_type in ("integer", "number"):
            return self.number(schema, name)
        if schema_type == "boolean":
            return self.rng.random() < 0.5
        if schema_type == "null":
            return None
        if schema.get("properties"):
            return self.object(schema)
        return {}

    def _ref_value(self, ref: str, name: str) -> Any:
        resolved = resolve_ref(self.spec, ref) if self.spec is not None else None
        if resolved is None:
            logger.debug("Failed to resolve $ref: %s", ref)
            return _placeholder_object()

        # Self-referencing schemas stop at the first repeat
        if ref in self._expanding:
            logger.debug("Recursive $ref %s, using placeholder", ref)
            return _placeholder_object()

        self._expanding.append(ref)
        try:
            if resolved.get("allOf"):
                return self._merge(resolved["allOf"], "")
            if resolved.get("properties"):
                return self.object(resolved)
            if isinstance(resolved.get("type"), (str, list)):
                return self.value(resolved, name)
            return self.object(resolved)
        finally:
            self._expanding.pop()

    def _merge(self, members: list[Any], name: str) -> dict[str, Any]:
        merged: dict[str, Any] = {}
        for member in members:
            if not isinstance(member, dict):
                continue
            generated = self.value(member, name)
            if isinstance(generated, dict):
                merged.update(generated)
        return merged

    def object(self, schema: dict[str, Any]) -> dict[str, Any]:
        result: dict[str, Any] = {}
        properties = schema.get("properties") or {}

        for key, prop in properties.items():
            if not isinstance(prop, dict):
                logger.debug("Property '%s' is not a schema, skipping", key)
                continue
            generated = self.value(prop, key)
            result[key] = generated if generated is not None else self.default_for_property(key)

        if not result:
            result = _placeholder_object()

        for required in schema.get("required") or []:
            if isinstance(required, str) and required not in result:
                result[required] = self.default_value()

        return result

    def array(self, schema: dict[str, Any]) -> list[Any]:
        items = schema.get("items")
        if not isinstance(items, dict):
            return []

        min_items = schema.get("minItems")
        count = int(min_items) if _is_number(min_items) else 0
        if count == 0:
            count = 1
        max_count = min(count + 2, MAX_ARRAY_ITEMS)
        if count < max_count:
            count = self.rng.randint(count, max_count)

        return [self.value(items) for _ in range(count)]

    def string(self, schema: dict[str, Any], name: str = "") -> str:
        enum = schema.get("enum")
        if enum:
            choice = self.rng.choice(enum)
            if isinstance(choice, str):
                return choice

        fmt = schema.get("format")
        if fmt == "date-time":
            return _now()
        if fmt == "date":
            return _today()
        if fmt == "uri":
            return "https://example.com/resource"
        if fmt == "email":
            return "user@example.com"
        if fmt == "uuid":
            return str(uuid.UUID(int=self.rng.getrandbits(128), version=4))

        example = schema.get("example")
        if isinstance(example, str):
            return example
        if name:
            return self.string_from_name(name)
        if isinstance(schema.get("name"), str):
            return self.string_from_name(schema["name"])
        return "mock_string_value"

    def number(self, schema: dict[str, Any], name: str = "") -> int | float:
        is_integer = _schema_type(schema) == "integer"
        lowered = name.lower()

        if lowered:
            if "count" in lowered or "total" in lowered:
                return self.rng.randint(1, 1000) if is_integer else self.rng.random() * 1000 + 1
            if "status" in lowered or "code" in lowered:
                return self.rng.choice(_STATUS_CODES)
            if "percent" in lowered or "progress" in lowered:
                return self.rng.random() * 100

        minimum = schema.get("minimum")
        if _is_number(minimum):
            maximum = schema.get("maximum")
            if not _is_number(maximum) or maximum == 0:
                maximum = minimum + 100
            value = minimum + self.rng.random() * (maximum - minimum)
            return int(value) if is_integer else value

        if is_integer:
            return self.rng.randrange(1000)
        return self.rng.random() * 1000

    def default_value(self) -> Any:
        kind = self.rng.choice(("string", "integer", "boolean"))
        if kind == "string":
            return "default_value"
        if kind == "integer":
            return self.rng.randrange(100)
        return False

    def default_for_property(self, name: str) -> Any:
        lowered = name.lower()
        if "id" in lowered:
            return generate_id()
        if "name" in lowered:
            return "Mock " + " ".join(word[:1].upper() + word[1:] for word in name.split(" "))
        if "created_at" in lowered or "updated_at" in lowered:
            return _now()
        if "description" in lowered:
            return "Mock description"
        if "count" in lowered or "total" in lowered:
            return self.rng.randrange(100)
        if "url" in lowered:
            return "https://example.com/resource"
        return "mock_value"

    def string_from_name(self, name: str) -> str:
        lowered = name.lower()

        for required, any_of, choices in _NAME_CHOICES:
            if all(f in lowered for f in required) and any(f in lowered for f in any_of):
                return self.rng.choice(choices)

        if "id" in lowered:
            return generate_id()

        for fragments, choices in _LATER_CHOICES:
            if any(f in lowered for f in fragments):
                return self.rng.choice(choices)

        if "type" in lowered:
            if "media" in lowered:
                return self.rng.choice(["photo", "video", "animated_gif"])
            return self.rng.choice(["user", "post", "list", "media"])
        if "category" in lowered:
            return self.rng.choice(["post", "post_image", "post_video", "amplify_video"])
        if "format" in lowered:
            return self.rng.choice(["json", "xml", "csv"])
        if "key" in lowered:
            return generate_id()
        if "token" in lowered:
            return "mock_token_" + generate_id()
        if "secret" in lowered:
            return "mock_secret_" + generate_id()
        if "email" in lowered:
            return "user@example.com"
        if "phone" in lowered:
            return "+1234567890"
        if any(f in lowered for f in _TIMESTAMP_FRAGMENTS):
            return _now()
        if "title" in lowered:
            return self.rng.choice(["Example Title", "Sample Title", "Generated Title", "Test Title"])
        if "message" in lowered:
            return self.rng.choice([
                "Operation completed successfully",
                "Request processed",
                "Action performed",
            ])
        return f"mock_{lowered}_value"


def generate_mock_response(
    schema: dict[str, Any] | None,
    spec: dict[str, Any] | None,
    rng: random.Random | None = None,
) -> Any:
    """Generate a mock value for a response schema."""
    if schema is None:
        return {}
    return MockGenerator(spec, rng).value(schema)
