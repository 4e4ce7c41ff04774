"""
Extract the JSON object a model was asked to return.

Models wrap the object in prose or code fences often enough that we match
the first greedy ``{...}`` span and parse that. There is no schema check
here; callers read keys with ``.get``.
"""

import json
import re
from typing import Any, Dict

from core.exceptions import ResponseParseError

_JSON_OBJECT_RE = re.compile(r"\{[\s\S]*\}")


def extract_json_object(text: str) -> Dict[str, Any]:
    if not text:
        raise ResponseParseError("Empty model response")

    match = _JSON_OBJECT_RE.search(text)
    if not match:
        raise ResponseParseError("No JSON object found in model response")

    try:
        parsed = json.loads(match.group(0))
    except json.JSONDecodeError as e:
        raise ResponseParseError(f"Invalid JSON in model response: {e}") from e

    if not isinstance(parsed, dict):
        raise ResponseParseError("Model response JSON is not an object")
    return parsed
