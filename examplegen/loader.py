"""Load the OpenAPI spec from a local file, the on-disk cache, or the API.

The fetched spec is cached in the user's home directory for 24 hours.
A cache without a components section is treated as stale and removed.
"""

from __future__ import annotations

import json
import logging
import os
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import httpx

logger = logging.getLogger(__name__)

SPEC_URL = os.environ.get("EXAMPLEGEN_SPEC_URL", "https://api.x.com/2/openapi.json")
CACHE_PATH = Path(
    os.environ.get(
        "EXAMPLEGEN_CACHE_PATH",
        Path.home() / ".examplegen-openapi-cache.json",
    )
)
CACHE_MAX_AGE = 24 * 60 * 60
FETCH_TIMEOUT = 10.0

_SCHEMA_REF_PREFIX = "#/components/schemas/"
_PARAMETER_REF_PREFIX = "#/components/parameters/"


class SpecLoadError(Exception):
    """The OpenAPI spec could not be read, fetched or parsed."""


@dataclass
class CacheInfo:
    path: Path
    exists: bool
    modified: float | None = None

    @property
    def age(self) -> float | None:
        if self.modified is None:
            return None
        return time.time() - self.modified


def get_cache_info(cache_path: Path | None = None) -> CacheInfo:
    """Describe the cache file without reading it."""
    path = cache_path or CACHE_PATH
    try:
        stat = path.stat()
    except OSError:
        return CacheInfo(path=path, exists=False)
    return CacheInfo(path=path, exists=True, modified=stat.st_mtime)


def clear_cache(cache_path: Path | None = None) -> None:
    """Remove the cached spec. A missing cache is not an error."""
    path = cache_path or CACHE_PATH
    try:
        path.unlink()
    except FileNotFoundError:
        return
    except OSError as err:
        raise SpecLoadError(f"failed to clear cache: {err}") from err


def _discard_cache(cache_path: Path) -> None:
    try:
        clear_cache(cache_path)
    except SpecLoadError as err:
        logger.warning("%s", err)


def format_duration(seconds: float) -> str:
    """Format an age in seconds for log output."""
    if seconds < 60:
        return f"{seconds:.0f} seconds"
    if seconds < 3600:
        return f"{seconds / 60:.1f} minutes"
    if seconds < 86400:
        return f"{seconds / 3600:.1f} hours"
    return f"{seconds / 86400:.1f} days"


def _parse_spec(text: str, source: str) -> dict[str, Any]:
    try:
        spec = json.loads(text)
    except json.JSONDecodeError as err:
        raise SpecLoadError(f"failed to parse OpenAPI spec from {source}: {err}") from err
    if not isinstance(spec, dict):
        raise SpecLoadError(f"OpenAPI spec from {source} is not a JSON object")
    return spec


def _load_from_cache(cache_path: Path) -> dict[str, Any] | None:
    info = get_cache_info(cache_path)
    if not info.exists or info.age is None or info.age > CACHE_MAX_AGE:
        return None

    try:
        spec = json.loads(cache_path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError):
        return None
    if not isinstance(spec, dict):
        return None

    if not spec.get("components"):
        logger.debug("Cache has no components, invalidating %s", cache_path)
        _discard_cache(cache_path)
        return None

    logger.info(
        "Using cached OpenAPI spec (age: %s, location: %s)",
        format_duration(info.age),
        cache_path,
    )
    return spec


def _save_to_cache(spec: dict[str, Any], cache_path: Path) -> None:
    try:
        cache_path.write_text(json.dumps(spec, indent=2), encoding="utf-8")
    except OSError as err:
        logger.warning("Failed to cache OpenAPI spec: %s", err)
        return
    logger.info("Cached OpenAPI spec to %s", cache_path)


def fetch_spec(url: str | None = None, client: httpx.Client | None = None) -> dict[str, Any]:
    """Download the spec from the API."""
    spec_url = url or SPEC_URL
    logger.info("Fetching OpenAPI spec from %s (timeout: %.0fs)", spec_url, FETCH_TIMEOUT)
    try:
        if client is None:
            resp = httpx.get(spec_url, timeout=FETCH_TIMEOUT, follow_redirects=True)
        else:
            resp = client.get(spec_url, timeout=FETCH_TIMEOUT)
    except httpx.HTTPError as err:
        raise SpecLoadError(f"failed to fetch OpenAPI spec from {spec_url}: {err}") from err

    if resp.status_code != 200:
        raise SpecLoadError(f"unexpected status code: {resp.status_code}")

    return _parse_spec(resp.text, spec_url)


def load_spec(
    path: Path | None = None,
    *,
    refresh: bool = False,
    url: str | None = None,
    cache_path: Path | None = None,
    client: httpx.Client | None = None,
) -> dict[str, Any]:
    """Load the OpenAPI spec.

    A local ``path`` is read directly. Otherwise the cache is used when
    fresh, falling back to fetching ``url``. ``refresh`` clears the cache
    before fetching.
    """
    if path is not None:
        try:
            text = Path(path).read_text(encoding="utf-8")
        except OSError as err:
            raise SpecLoadError(f"failed to read OpenAPI spec {path}: {err}") from err
        return _parse_spec(text, str(path))

    cache_file = cache_path or CACHE_PATH
    if refresh:
        logger.info("Clearing cache and forcing refresh of OpenAPI spec")
        _discard_cache(cache_file)
    else:
        cached = _load_from_cache(cache_file)
        if cached is not None:
            return cached
        logger.info("No valid cache found, fetching from URL")

    spec = fetch_spec(url, client)
    _save_to_cache(spec, cache_file)
    return spec


def get_paths(spec: dict[str, Any]) -> dict[str, Any]:
    """Extract paths from the spec."""
    return spec.get("paths") or {}


def get_schemas(spec: dict[str, Any]) -> dict[str, Any]:
    """Extract component schemas from the spec."""
    return (spec.get("components") or {}).get("schemas") or {}


def get_spec_version(spec: dict[str, Any]) -> str:
    return str((spec.get("info") or {}).get("version", "unknown"))


def _resolve_component(spec: dict[str, Any], ref: str, prefix: str, section: str) -> dict[str, Any] | None:
    if not ref.startswith(prefix):
        logger.debug("Ref doesn't match pattern %s: %s", prefix, ref)
        return None
    name = ref[len(prefix):]
    entries = (spec.get("components") or {}).get(section) or {}
    target = entries.get(name)
    if not isinstance(target, dict):
        logger.debug("%s '%s' not found in components", section, name)
        return None
    return dict(target)


def resolve_ref(spec: dict[str, Any], ref: str) -> dict[str, Any] | None:
    """Resolve a #/components/schemas/ $ref to a copy of its schema."""
    return _resolve_component(spec, ref, _SCHEMA_REF_PREFIX, "schemas")


def resolve_parameter_ref(spec: dict[str, Any], ref: str) -> dict[str, Any] | None:
    """Resolve a #/components/parameters/ $ref to a copy of its definition."""
    return _resolve_component(spec, ref, _PARAMETER_REF_PREFIX, "parameters")
