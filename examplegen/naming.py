"""Convert endpoint paths to example file names and field hints.

Pattern: strip the API version prefix, keep {param} names bare,
join segments with underscores.

Examples:
  /2/users/me                    -> users_me.json
  /2/users/{id}/followers        -> users_id_followers.json
  /2/tweets/search/recent        -> tweets_search_recent.json
  /2/lists/{list_id}/members     -> lists_list_id_members.json
  /2/dm_conversations/with/{participant_id}/dm_events
                                 -> dm_conversations_with_participant_id_dm_events.json
"""

from __future__ import annotations

import re
from typing import Any

# Version prefixes stripped before building a file name
_PATH_PREFIXES: tuple[str, ...] = ("/2/", "/api/v0/", "/api/v1/", "/api/")

_FALLBACK_NAME = "endpoint"

# Field hints by path fragment: (fragments, field type, fields)
_PATH_FIELDS: list[tuple[tuple[str, ...], str, list[str]]] = [
    (("/users/",), "user.fields", ["id", "name", "username", "description", "created_at", "public_metrics"]),
    (("/tweets",), "tweet.fields", ["id", "text", "created_at", "author_id", "public_metrics"]),
    (("/lists",), "list.fields", ["id", "name", "description", "created_at", "follower_count", "member_count"]),
    (("/spaces/",), "space.fields", ["id", "title", "state", "created_at"]),
    (("/media/",), "media.fields", ["media_key", "type", "url"]),
]

# Field hints by operationId fragment, only used when the path gave none
_OPERATION_FIELDS: list[tuple[str, str, list[str]]] = [
    ("user", "user.fields", ["id", "name", "username", "description", "created_at"]),
    ("tweet", "tweet.fields", ["id", "text", "created_at", "author_id"]),
    ("list", "list.fields", ["id", "name", "description", "created_at"]),
]


def normalize_endpoint_path(path: str) -> str:
    """Return the grouping key for an endpoint.

    OpenAPI paths already use {param} placeholders, so the declared path
    is used as-is.
    """
    return path


def _strip_prefix(path: str) -> str:
    for prefix in _PATH_PREFIXES:
        if path.startswith(prefix):
            return path[len(prefix):]
    return path.lstrip("/")


def generate_filename(endpoint: str) -> str:
    """Build a .json file name from an endpoint path."""
    name = _strip_prefix(endpoint)

    if name == "users/me":
        return "users_me.json"

    name = re.sub(r"\{([^}]*)\}", r"\1", name)
    name = re.sub(r"[/\-]", "_", name)
    name = re.sub(r"_+", "_", name)
    name = name.strip("_")

    if len(name) < 2:
        name = _FALLBACK_NAME

    return f"{name}.json"


def infer_fields_from_endpoint(path: str, operation: dict[str, Any] | None = None) -> dict[str, list[str]]:
    """Guess which ``<type>.fields`` an endpoint returns."""
    fields: dict[str, list[str]] = {}

    for fragments, field_type, names in _PATH_FIELDS:
        if any(fragment in path for fragment in fragments):
            fields[field_type] = list(names)

    operation_id = (operation or {}).get("operationId") or ""
    if operation_id:
        op_id = operation_id.lower()
        for fragment, field_type, names in _OPERATION_FIELDS:
            if fragment in op_id and field_type not in fields:
                fields[field_type] = list(names)

    return fields
