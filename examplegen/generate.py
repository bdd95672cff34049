"""Generate example response files for every operation in the spec.

Writes one JSON file per endpoint (an array of example records) plus a
README.md review index rendered from templates/index.md.j2.
"""

from __future__ import annotations

import json
import logging
import random
from pathlib import Path
from typing import Any

import jinja2

from .loader import get_spec_version
from .mock_data import generate_mock_response
from .naming import generate_filename, infer_fields_from_endpoint, normalize_endpoint_path
from .responses import iter_operations, select_response_schema

logger = logging.getLogger(__name__)

TEMPLATE_DIR = Path(__file__).parent / "templates"
OUTPUT_DIR = Path("examples")
INDEX_NAME = "README.md"


class ExampleGenerationError(Exception):
    """Examples could not be generated."""


def wrap_response(payload: Any, schema: dict[str, Any]) -> dict[str, Any]:
    """Wrap a payload in {"data": ...} unless it is already shaped that way."""
    if not isinstance(payload, dict):
        return {"data": payload}
    if "data" in payload:
        return payload
    properties = schema.get("properties")
    if isinstance(properties, dict) and "data" in properties:
        return payload
    return {"data": payload}


def build_examples(
    spec: dict[str, Any],
    rng: random.Random | None = None,
) -> tuple[dict[str, list[dict[str, Any]]], list[str]]:
    """Build example records grouped by endpoint.

    Returns the groups and the operations skipped for lack of a JSON
    response schema (as "METHOD /path").
    """
    rng = rng or random.Random()
    groups: dict[str, list[dict[str, Any]]] = {}
    skipped: list[str] = []

    for path, method, operation in iter_operations(spec):
        schema = select_response_schema(operation)
        if schema is None:
            logger.info("No response schema found for %s %s", method, path)
            skipped.append(f"{method} {path}")
            continue

        payload = generate_mock_response(schema, spec, rng)
        example = {
            "endpoint": path,
            "method": method,
            "response": wrap_response(payload, schema),
            "fields": infer_fields_from_endpoint(path, operation),
        }
        groups.setdefault(normalize_endpoint_path(path), []).append(example)

    return groups, skipped


def _group_by_filename(groups: dict[str, list[dict[str, Any]]]) -> dict[str, list[dict[str, Any]]]:
    files: dict[str, list[dict[str, Any]]] = {}
    for endpoint_key, examples in groups.items():
        files.setdefault(generate_filename(endpoint_key), []).extend(examples)
    return files


def render_index(context: dict[str, Any]) -> str:
    """Render the review index for a generation run."""
    env = jinja2.Environment(
        loader=jinja2.FileSystemLoader(str(TEMPLATE_DIR)),
        keep_trailing_newline=True,
        trim_blocks=True,
        lstrip_blocks=True,
    )
    template = env.get_template("index.md.j2")
    return template.render(**context)


def generate_all_examples(
    spec: dict[str, Any] | None,
    output_dir: Path | str = OUTPUT_DIR,
    rng: random.Random | None = None,
) -> dict[str, Any]:
    """Generate example files for all endpoints and write them to output_dir."""
    if spec is None:
        raise ExampleGenerationError("OpenAPI spec is nil")

    out = Path(output_dir)
    try:
        out.mkdir(parents=True, exist_ok=True)
    except OSError as err:
        raise ExampleGenerationError(f"failed to create output directory: {err}") from err

    groups, skipped = build_examples(spec, rng)

    written: list[dict[str, Any]] = []
    example_count = 0
    for filename, examples in sorted(_group_by_filename(groups).items()):
        file_path = out / filename
        try:
            file_path.write_text(json.dumps(examples, indent=2, ensure_ascii=False), encoding="utf-8")
        except (OSError, TypeError, ValueError) as err:
            logger.error("Failed to write %s: %s", file_path, err)
            continue

        endpoints = sorted({e["endpoint"] for e in examples})
        logger.info(
            "Generated %s with %d example(s) for endpoint: %s",
            filename,
            len(examples),
            ", ".join(endpoints),
        )
        written.append({
            "filename": filename,
            "endpoints": endpoints,
            "methods": [e["method"] for e in examples],
            "count": len(examples),
        })
        example_count += len(examples)

    logger.info("Summary: Generated %d files with %d total examples", len(written), example_count)

    index = render_index({
        "spec_version": get_spec_version(spec),
        "files": written,
        "example_count": example_count,
        "skipped": skipped,
    })
    try:
        (out / INDEX_NAME).write_text(index, encoding="utf-8")
    except OSError as err:
        logger.error("Failed to write %s: %s", out / INDEX_NAME, err)

    return {
        "files": [f["filename"] for f in written],
        "example_count": example_count,
        "skipped": skipped,
    }
