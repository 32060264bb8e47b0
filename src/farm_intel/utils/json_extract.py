"""
Helpers for pulling a JSON object out of free-form model output.

Generative services are asked for "JSON only" but routinely wrap it in
prose or markdown fences, or return something that is not JSON at all.
"""

import json
from typing import Any, Dict, Optional

_decoder = json.JSONDecoder()


def extract_json_object(text: Optional[str]) -> Optional[Dict[str, Any]]:
    """
    Return the first decodable JSON object found in text, or None.

    Decoding is attempted at every opening brace, so objects inside
    markdown fences or surrounded by prose are found as well. Each attempt
    stops at the first invalid token.

    Args:
        text: Raw model output

    Returns:
        Decoded dict, or None when nothing in the text decodes to an object
    """
    if not text:
        return None

    start = text.find("{")
    while start != -1:
        try:
            parsed, _ = _decoder.raw_decode(text, start)
        except ValueError:
            parsed = None
        if isinstance(parsed, dict):
            return parsed
        start = text.find("{", start + 1)

    return None


def to_number(value: Any, default: float) -> float:
    """Coerce a JSON value to float, falling back on missing/invalid/NaN."""
    if isinstance(value, bool) or value is None:
        return default
    if isinstance(value, str):
        value = value.replace(",", "").strip()
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    if number != number or number in (float("inf"), float("-inf")):
        return default
    return number
