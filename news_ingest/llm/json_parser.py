"""
JSON parsing and validation for model responses.

Models are asked for a bare JSON object but often wrap it in Markdown
fences or add prose around it. Parsing is lenient about the wrapping
and strict about the fields: every field is validated on its own so a
single bad value never discards the rest of the response.
"""

from __future__ import annotations

import json
from typing import Any


def sanitize_response(content: str) -> str:
    """Strip Markdown code fences and surrounding whitespace.

    Examples:
        >>> sanitize_response('```json\\n{"a": 1}\\n```')
        '{"a": 1}'
    """
    return content.replace("```json", "").replace("```JSON", "").replace("```", "").strip()


def parse_json_response(content: str) -> dict[str, Any]:
    """Parse the first JSON object found in a model response.

    Raises:
        json.JSONDecodeError: If no JSON object can be decoded
    """
    text = sanitize_response(content or "")
    if not text:
        raise json.JSONDecodeError("Empty content", text, 0)
    try:
        obj = json.loads(text)
    except json.JSONDecodeError:
        start = text.find("{")
        end = text.rfind("}")
        if start == -1 or end == -1 or end <= start:
            raise
        obj = json.loads(text[start : end + 1])
    if not isinstance(obj, dict):
        raise json.JSONDecodeError("Expected a JSON object", text, 0)
    return obj


def clean_string(value: Any) -> str | None:
    """Return a stripped non-empty string, or None for anything else."""
    if not isinstance(value, str):
        return None
    value = value.strip()
    return value or None


def validate_classification(
    obj: dict[str, Any],
    regions: list[str],
) -> dict[str, str | None]:
    """Extract classification fields, nulling out missing or invalid ones.

    Args:
        obj: Parsed model response
        regions: Closed set of accepted region labels

    Returns:
        Dict with summary, region, tag, tag_variant and translated_title;
        each value is a clean string or None
    """
    region = clean_string(obj.get("region"))
    if region is not None and region not in regions:
        region = None
    return {
        "summary": clean_string(obj.get("summary")),
        "region": region,
        "tag": clean_string(obj.get("tag")),
        "tag_variant": clean_string(obj.get("tag_variant")),
        "translated_title": clean_string(obj.get("translatedTitle")),
    }
