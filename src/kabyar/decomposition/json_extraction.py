"""Locate a JSON payload inside free-form LLM output."""

import json
import re
from typing import Any

_FENCED_RE = re.compile(r"```(?:json)?\s*([\s\S]*?)```")
_OBJECT_RE = re.compile(r"\{[\s\S]*\}")


def extract_json(text: str) -> str:
    """
    Extract the most likely JSON text from an LLM response.

    Prefers the body of the first fenced block, then the outermost
    ``{...}`` span, then the raw text.

    Args:
        text: Raw LLM response

    Returns:
        Candidate JSON string (not guaranteed to parse)
    """
    fenced = _FENCED_RE.search(text)
    if fenced:
        return fenced.group(1).strip()

    obj = _OBJECT_RE.search(text)
    if obj:
        return obj.group(0)

    return text


def parse_json_object(text: str) -> Any:
    """
    Extract and parse JSON from an LLM response.

    Args:
        text: Raw LLM response

    Returns:
        Parsed JSON value

    Raises:
        ValueError: If no valid JSON could be parsed
    """
    candidate = extract_json(text)
    try:
        return json.loads(candidate)
    except json.JSONDecodeError:
        pass

    # A fenced block that wasn't JSON (e.g. prose around code) may still hide an object
    obj = _OBJECT_RE.search(text)
    if obj and obj.group(0) != candidate:
        try:
            return json.loads(obj.group(0))
        except json.JSONDecodeError:
            pass

    raise ValueError(
        f"Could not extract valid JSON from LLM response. "
        f"Response preview: {text[:200]}..."
    )
