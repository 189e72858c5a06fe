"""Document content: defaults, partial-update merge, and text encoding.

Content is a mapping of the form::

    {
        "sections": {"context": "...", "objective": "...", ...},
        "metadata": {"version": "1.0", "lastModified": "...",
                     "completeness": 0, "qualityScore": 0},
    }

Section and metadata keys outside the predefined set are legal and must be
carried through merges and storage untouched.
"""

import json
from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Any

from promptdoc.errors import MalformedContent

SECTION_KEYS = (
    "context",
    "objective",
    "technical_requirements",
    "examples",
    "constraints",
    "output_format",
)

# Top-level keys merged one level deep; everything else is replaced whole
NESTED_KEYS = ("sections", "metadata")

CONTENT_SCHEMA_VERSION = "1.0"


def default_content() -> dict[str, Any]:
    return {
        "sections": {},
        "metadata": {
            "version": CONTENT_SCHEMA_VERSION,
            "lastModified": datetime.now(timezone.utc).isoformat(),
            "completeness": 0,
            "qualityScore": 0,
        },
    }


def _require_mapping(value: Any, what: str) -> Mapping:
    if not isinstance(value, Mapping):
        raise MalformedContent(
            f"{what} must be an object, got {type(value).__name__}"
        )
    return value


def _merge_level(base: Mapping, update: Mapping) -> dict[str, Any]:
    merged = dict(base)
    for key, value in update.items():
        # None means "not supplied"; an empty string is a real value
        if value is None:
            continue
        merged[key] = value
    return merged


def merge_content(
    current: Mapping[str, Any],
    partial: Mapping[str, Any] | None,
) -> Mapping[str, Any]:
    """Combine a partial content update with the current full content.

    Returns ``current`` itself when ``partial`` is None. Otherwise a new dict
    is built: ``sections`` and ``metadata`` are merged key by key, other
    top-level keys are overwritten. Keys absent from ``partial`` or set to
    None keep their current value. Neither input is mutated.

    Raises MalformedContent when either side (or its ``sections`` /
    ``metadata``) is not a mapping.
    """
    if partial is None:
        return current

    _require_mapping(current, "content")
    _require_mapping(partial, "content update")

    merged: dict[str, Any] = {
        key: dict(value) if key in NESTED_KEYS and isinstance(value, Mapping) else value
        for key, value in current.items()
    }
    for key, value in partial.items():
        if value is None:
            continue
        if key in NESTED_KEYS:
            base = current.get(key)
            if base is None:
                base = {}
            merged[key] = _merge_level(
                _require_mapping(base, f"current {key}"),
                _require_mapping(value, f"{key} update"),
            )
        else:
            merged[key] = value
    return merged


def serialize_content(content: Mapping[str, Any]) -> str:
    _require_mapping(content, "content")
    return json.dumps(content, ensure_ascii=False, separators=(",", ":"))


def deserialize_content(raw: str) -> dict[str, Any]:
    try:
        content = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise MalformedContent(f"content is not valid JSON: {exc}") from exc
    return dict(_require_mapping(content, "content"))
