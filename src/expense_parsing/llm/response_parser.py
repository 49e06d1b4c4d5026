"""Extract JSON objects from LLM responses."""
from __future__ import annotations
import json
import re


def _as_object(value) -> dict:
    if not isinstance(value, dict):
        raise ValueError(f"Expected a JSON object, got {type(value).__name__}")
    return value


def extract_json_from_response(text: str) -> dict:
    """Extract a JSON object from LLM response text.

    Strategies in order:
    1. Direct JSON parse of entire text
    2. Find ```json ... ``` block
    3. Find first { to last }

    Raises ``ValueError`` when no strategy yields an object, or when the whole
    text is valid JSON of another type (an array, a number).
    """
    text = (text or "").strip()

    try:
        value = json.loads(text)
    except ValueError:
        pass
    else:
        # valid JSON that is not an object is never searched for a nested one
        return _as_object(value)

    json_block = re.search(r'```(?:json)?\s*\n(.*?)\n\s*```', text, re.DOTALL)
    if json_block:
        try:
            return _as_object(json.loads(json_block.group(1)))
        except ValueError:
            pass

    first_brace = text.find('{')
    last_brace = text.rfind('}')
    if first_brace != -1 and last_brace != -1 and last_brace > first_brace:
        try:
            return _as_object(json.loads(text[first_brace:last_brace + 1]))
        except ValueError:
            pass

    raise ValueError(f"Could not extract JSON from response: {text[:200]}...")
