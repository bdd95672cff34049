"""Walk operations and pull response schemas out of them.

Handles:
- Operation iteration in a stable order
- Status code lookup with 'default' fallback
- Content type preference (JSON, then event streams)
- Inline response examples
- Query parameters with $ref resolution and path-level inheritance
"""

from __future__ import annotations

from typing import Any, Iterator

from .loader import get_paths, resolve_parameter_ref

METHODS: tuple[str, ...] = ("get", "post", "put", "patch", "delete")

# Status codes tried in order when picking the schema for an example
RESPONSE_STATUS_ORDER: tuple[str, ...] = ("200", "201", "default")

JSON_CONTENT_TYPE = "application/json"
STREAM_CONTENT_TYPE = "text/event-stream"


def iter_operations(spec: dict[str, Any]) -> Iterator[tuple[str, str, dict[str, Any]]]:
    """Yield (path, METHOD, operation) for every operation in the spec."""
    for path, path_item in sorted(get_paths(spec).items()):
        if not isinstance(path_item, dict):
            continue
        for method in METHODS:
            operation = path_item.get(method)
            if isinstance(operation, dict):
                yield path, method.upper(), operation


def _get_response(operation: dict[str, Any], status: str) -> dict[str, Any] | None:
    responses = operation.get("responses") or {}
    response = responses.get(status)
    if response is None:
        response = responses.get("default")
    return response if isinstance(response, dict) else None


def _json_content(response: dict[str, Any]) -> dict[str, Any] | None:
    content = (response.get("content") or {}).get(JSON_CONTENT_TYPE)
    return content if isinstance(content, dict) else None


def get_response_schema(operation: dict[str, Any], status: str) -> dict[str, Any] | None:
    """Return the JSON response schema for a status code, or None."""
    response = _get_response(operation, status)
    if response is None:
        return None
    content = _json_content(response)
    if content is None:
        return None
    schema = content.get("schema")
    return schema if isinstance(schema, dict) else None


def select_response_schema(operation: dict[str, Any]) -> dict[str, Any] | None:
    """Pick the schema used for an example: 200, then 201, then default."""
    for status in RESPONSE_STATUS_ORDER:
        schema = get_response_schema(operation, status)
        if schema is not None:
            return schema
    return None


def get_response_content_type(operation: dict[str, Any], status: str) -> str:
    response = _get_response(operation, status)
    if response is None:
        return JSON_CONTENT_TYPE
    content = response.get("content") or {}
    if content.get(JSON_CONTENT_TYPE) is not None:
        return JSON_CONTENT_TYPE
    if content.get(STREAM_CONTENT_TYPE) is not None:
        return STREAM_CONTENT_TYPE
    for content_type in content:
        return content_type
    return JSON_CONTENT_TYPE


def is_streaming_endpoint(operation: dict[str, Any]) -> bool:
    """True if any declared response is an event stream."""
    return any(
        get_response_content_type(operation, status) == STREAM_CONTENT_TYPE
        for status in operation.get("responses") or {}
    )


def get_response_example(operation: dict[str, Any], status: str) -> Any:
    """Return an inline example for a status code, or None.

    Prefers ``example``; otherwise the value of the first ``examples`` entry.
    """
    response = _get_response(operation, status)
    if response is None:
        return None
    content = _json_content(response)
    if content is None:
        return None
    if "example" in content:
        return content["example"]
    for entry in (content.get("examples") or {}).values():
        if isinstance(entry, dict) and "value" in entry:
            return entry["value"]
    return None


def _resolve_parameter(spec: dict[str, Any], param: dict[str, Any]) -> dict[str, Any]:
    if "$ref" in param:
        resolved = resolve_parameter_ref(spec, param["$ref"])
        if resolved is not None:
            return resolved
    return param


def get_query_parameters(
    spec: dict[str, Any],
    operation: dict[str, Any],
    path_item: dict[str, Any] | None = None,
) -> list[dict[str, Any]]:
    """Collect query parameters, operation-level overriding path-level by name."""
    params: list[dict[str, Any]] = []

    for param in (path_item or {}).get("parameters", []):
        resolved = _resolve_parameter(spec, param)
        if resolved.get("in") == "query":
            params.append(resolved)

    for param in operation.get("parameters", []):
        resolved = _resolve_parameter(spec, param)
        if resolved.get("in") != "query":
            continue
        for i, existing in enumerate(params):
            if existing.get("name") == resolved.get("name"):
                params[i] = resolved
                break
        else:
            params.append(resolved)

    return params
