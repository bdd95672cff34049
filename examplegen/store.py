"""Read generated example files back for lookup by method and endpoint."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)


class ExampleLoadError(Exception):
    """An example file could not be read or parsed."""


def _make_key(method: str, endpoint: str) -> str:
    return f"{method.upper()} {endpoint}"


def matches_endpoint_pattern(pattern: str, path: str) -> bool:
    """Check whether a path like /2/users/123 matches /2/users/{id}."""
    pattern_parts = pattern.lstrip("/").split("/")
    path_parts = path.split("?")[0].lstrip("/").split("/")
    if len(pattern_parts) != len(path_parts):
        return False
    for expected, actual in zip(pattern_parts, path_parts):
        if expected.startswith("{") and expected.endswith("}"):
            continue
        if expected != actual:
            return False
    return True


class ExampleStore:
    """Example records keyed by "METHOD /endpoint"."""

    def __init__(self) -> None:
        self._examples: dict[str, dict[str, Any]] = {}

    def __len__(self) -> int:
        return len(self._examples)

    def add(self, example: dict[str, Any]) -> None:
        """Add an example, replacing any existing one for the same key."""
        self._examples[_make_key(example["method"], example["endpoint"])] = example

    def get(self, method: str, endpoint: str) -> dict[str, Any] | None:
        return self._examples.get(_make_key(method, endpoint))

    def load_file(self, path: Path | str) -> None:
        """Load every example record from one generated file."""
        try:
            records = json.loads(Path(path).read_text(encoding="utf-8"))
        except OSError as err:
            raise ExampleLoadError(f"failed to read examples file {path}: {err}") from err
        except json.JSONDecodeError as err:
            raise ExampleLoadError(f"failed to parse examples file {path}: {err}") from err

        if not isinstance(records, list):
            raise ExampleLoadError(f"examples file {path} is not a JSON array")
        for record in records:
            if not isinstance(record, dict) or "method" not in record or "endpoint" not in record:
                raise ExampleLoadError(f"examples file {path} has a malformed record")
        for record in records:
            self.add(record)

    def load_dir(self, path: Path | str) -> None:
        """Load all .json files in a directory, skipping files that fail."""
        directory = Path(path)
        if not directory.is_dir():
            raise ExampleLoadError(f"failed to read examples directory {directory}")

        for entry in sorted(directory.iterdir()):
            if entry.is_dir() or entry.suffix != ".json":
                continue
            try:
                self.load_file(entry)
            except ExampleLoadError as err:
                logger.warning("Failed to load example from %s: %s", entry, err)

    def find_best_match(self, method: str, endpoint: str) -> dict[str, Any] | None:
        """Exact match first, then the first {param} pattern that fits."""
        example = self.get(method, endpoint)
        if example is not None:
            return example

        prefix = f"{method.upper()} "
        for key, candidate in self._examples.items():
            if key.startswith(prefix) and matches_endpoint_pattern(key[len(prefix):], endpoint):
                return candidate
        return None
