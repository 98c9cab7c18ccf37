"""
Vision model response parser.

Turns the free-form text returned by the vision model into a DetectionGuess.

The model is asked for a bare JSON object but frequently wraps it in a
markdown code fence or in commentary. The parser tolerates both, is strict
about `name`, and lenient about every optional field: a wrong type on an
optional field yields "absent" rather than an error.

Expected shape:
    {"name": "Card Name", "set_code": "abc", "set_name": "Set Name",
     "collector_number": "123", "confidence": 0.95, "features": ["foil"]}
"""

import json
import math
import re
from typing import Any

from cardlens.models.detection import DetectionGuess, clamp_confidence
from cardlens.models.failure import DetectionParseError

# A line holding nothing but an opening fence, optionally tagged (```json)
_OPENING_FENCE = re.compile(r"^```[\w+-]*$")
_CLOSING_FENCE = "```"

# camelCase spellings some prompts elicit instead of snake_case
_FIELD_ALIASES: dict[str, str] = {
    "set_code": "setCode",
    "set_name": "setName",
    "collector_number": "collectorNumber",
}


def strip_code_fence(text: str) -> str:
    """
    Remove a leading opening fence line and a trailing closing fence line.

    Only whole lines are removed; fences embedded in prose are left for
    the brace extraction step to discard.
    """
    lines = text.strip().splitlines()
    if lines and _OPENING_FENCE.match(lines[0].strip()):
        lines = lines[1:]
    if lines and lines[-1].strip() == _CLOSING_FENCE:
        lines = lines[:-1]
    return "\n".join(lines).strip()


def extract_json_span(text: str) -> str:
    """Keep the span from the first '{' to the last '}' inclusive, if any."""
    start = text.find("{")
    end = text.rfind("}")
    if start == -1 or end < start:
        return text.strip()
    return text[start : end + 1].strip()


def decode_object(text: str) -> dict[str, Any]:
    """
    Decode text as a single JSON object.

    Raises:
        DetectionParseError: If text is blank, not JSON, or not an object
    """
    if not text.strip():
        raise DetectionParseError.invalid_structure("Empty response")

    try:
        value = json.loads(text)
    except json.JSONDecodeError as e:
        raise DetectionParseError.invalid_structure(f"Invalid JSON: {e.msg}") from e
    except (ValueError, RecursionError) as e:
        # integer digit limit, or nesting deeper than the decoder can follow
        raise DetectionParseError.invalid_structure(f"Invalid JSON: {e}") from e

    if not isinstance(value, dict):
        raise DetectionParseError.invalid_structure(
            f"Expected a JSON object, got {type(value).__name__}"
        )
    return value


def extract_name(data: dict[str, Any]) -> str:
    """
    Required card name.

    Raises:
        DetectionParseError: If name is absent, not a string, or blank
    """
    name = data.get("name")
    if not isinstance(name, str) or not name.strip():
        raise DetectionParseError.missing_field("name")
    return name


def extract_optional_string(data: dict[str, Any], key: str) -> str | None:
    """String field or None. Wrong types are treated as absent."""
    for candidate in (key, _FIELD_ALIASES.get(key)):
        if candidate is None:
            continue
        value = data.get(candidate)
        if isinstance(value, str):
            return value
    return None


def extract_confidence(data: dict[str, Any]) -> float:
    """Numeric confidence clamped to [0.0, 1.0]; 0.0 when absent or not a number."""
    value = data.get("confidence")
    # bool is an int subclass; true/false are not scores
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0.0
    try:
        score = float(value)
    except OverflowError:
        # integer beyond float range
        return 1.0 if value > 0 else 0.0
    if math.isnan(score):
        return 0.0
    return clamp_confidence(score)


def extract_features(data: dict[str, Any]) -> tuple[str, ...]:
    """List of feature strings; empty unless every element is a string."""
    value = data.get("features")
    if not isinstance(value, list):
        return ()
    if not all(isinstance(item, str) for item in value):
        return ()
    return tuple(value)


def parse_detection_response(raw_text: str) -> DetectionGuess:
    """
    Parse raw vision model output into a DetectionGuess.

    Args:
        raw_text: Text exactly as returned by the vision model

    Returns:
        DetectionGuess with every field the response provided

    Raises:
        DetectionParseError: invalid_structure when no JSON object can be
            decoded, missing_field when `name` is absent or empty
    """
    cleaned = extract_json_span(strip_code_fence(raw_text))
    data = decode_object(cleaned)

    return DetectionGuess(
        name=extract_name(data),
        set_code=extract_optional_string(data, "set_code"),
        set_name=extract_optional_string(data, "set_name"),
        collector_number=extract_optional_string(data, "collector_number"),
        confidence=extract_confidence(data),
        features=extract_features(data),
    )
