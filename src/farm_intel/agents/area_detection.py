"""
Area Detection Parser
=====================

Turns a vision-model reply about a satellite/aerial image into an
AreaDetectionResult.

Tiers:
1. Structured: first JSON object in the reply (raw or fenced)
2. Text scan: regex families for sqm / "area:" / hectares, plus a crop-name scan
3. Hint: 80% of the farmer's own area estimate, at low confidence

validate_area_detection() then caps implausible areas. Notes about every
adjustment are appended to the description.
"""

import re
from dataclasses import replace
from typing import Any, Dict, Optional

from ..config import MAX_REASONABLE_AREA_SQM
from ..models import AreaDetectionResult, BoundingBox, Point
from ..utils.json_extract import extract_json_object, to_number
from ..utils.logger import logger

SQM_PER_HECTARE = 10000
HINT_SCALE = 0.8
MIN_REASONABLE_AREA_SQM = 10

_NUMBER = r"(\d[\d,]*(?:\.\d+)?)"

# Ordered: the first family with a positive match decides the area
AREA_PATTERNS = [
    (re.compile(_NUMBER + r"\s*(?:(?:square|sq\.?)\s*met(?:er|re)s?|sq\.?\s*m\b|sqm|m²)", re.IGNORECASE), 1),
    (re.compile(r"area[:\s]*" + _NUMBER, re.IGNORECASE), 1),
    (re.compile(_NUMBER + r"\s*hectares?", re.IGNORECASE), SQM_PER_HECTARE),
]

CROP_VOCABULARY = (
    "rice", "wheat", "corn", "maize", "tomato", "potato", "onion", "beans",
    "peas", "spinach", "lettuce", "carrots", "cucumber", "pepper", "eggplant",
)

DEFAULT_DESCRIPTION = "Area detected from satellite image"


def _parse_point(raw: Any) -> Optional[Point]:
    if not isinstance(raw, dict):
        return None
    x = to_number(raw.get("x"), float("nan"))
    y = to_number(raw.get("y"), float("nan"))
    if x != x or y != y:
        return None
    return Point(x=x, y=y)


def _parse_bounding_box(raw: Any) -> Optional[BoundingBox]:
    if not isinstance(raw, dict):
        return None
    corners = [
        _parse_point(raw.get(key))
        for key in ("topLeft", "topRight", "bottomLeft", "bottomRight")
    ]
    if any(corner is None for corner in corners):
        return None
    return BoundingBox(*corners)


def _from_structured(parsed: Dict[str, Any], area_hint: Optional[float]) -> AreaDetectionResult:
    area = max(0.0, to_number(parsed.get("detectedAreaSqm"), 0.0))
    confidence = min(1.0, max(0.0, to_number(parsed.get("confidence"), 0.5)))

    crop_type = parsed.get("cropType")
    if not isinstance(crop_type, str) or not crop_type.strip() or crop_type.strip().lower() == "null":
        crop_type = None

    description = parsed.get("description")
    if not isinstance(description, str) or not description.strip():
        description = DEFAULT_DESCRIPTION

    if area == 0 and area_hint:
        area = area_hint * HINT_SCALE
        confidence = 0.3
        description += " (Fallback estimate based on user input)"
        logger.info(f"Structured reply had no area, using hint {area_hint} sqm")

    return AreaDetectionResult(
        detected_area_sqm=area,
        confidence=confidence,
        description=description,
        crop_type=crop_type,
        bounding_box=_parse_bounding_box(parsed.get("boundingBox")),
    )


def _scan_area(text: str) -> float:
    for pattern, multiplier in AREA_PATTERNS:
        found = []
        for match in pattern.finditer(text):
            try:
                value = float(match.group(1).replace(",", "")) * multiplier
            except ValueError:
                continue
            if value > 0:
                found.append(value)
        if found:
            return max(found)
    return 0.0


def _scan_crop_type(text: str) -> Optional[str]:
    lowered = text.lower()
    for crop in CROP_VOCABULARY:
        if crop in lowered:
            return crop.capitalize()
    return None


def _from_text(text: str, area_hint: Optional[float]) -> AreaDetectionResult:
    area = _scan_area(text)
    confidence = 0.4 if area > 0 else 0.3

    if area == 0 and area_hint:
        area = area_hint * HINT_SCALE
        confidence = 0.2

    snippet = text[:200]
    return AreaDetectionResult(
        detected_area_sqm=float(round(area)),
        confidence=round(confidence, 2),
        description=f"Estimated crop area from satellite analysis. {snippet}...",
        crop_type=_scan_crop_type(text),
    )


def parse_area_response(ai_response: Optional[str], area_hint: Optional[float] = None) -> AreaDetectionResult:
    """
    Parse a vision-model reply into an AreaDetectionResult.

    Args:
        ai_response: Raw text returned by the vision service (may be empty)
        area_hint: Farmer-declared area in sqm, used when nothing is detected

    Returns:
        AreaDetectionResult with area >= 0 and confidence in [0, 1]
    """
    text = ai_response or ""
    if area_hint is not None and area_hint <= 0:
        area_hint = None

    parsed = extract_json_object(text)
    if parsed is not None:
        logger.info("Area reply parsed as structured JSON")
        return _from_structured(parsed, area_hint)

    logger.info("No JSON object in area reply, scanning text")
    return _from_text(text, area_hint)


def validate_area_detection(
    result: AreaDetectionResult,
    max_reasonable_area: float = MAX_REASONABLE_AREA_SQM,
) -> AreaDetectionResult:
    """Cap oversized areas and flag tiny ones; returns a new result."""
    area = max(0.0, result.detected_area_sqm)
    confidence = min(1.0, max(0.0, result.confidence))
    description = result.description

    if area > max_reasonable_area:
        logger.warning(f"Detected area {area} sqm capped at {max_reasonable_area} sqm")
        area = max_reasonable_area
        confidence = min(confidence, 0.5)
        description += " (Area capped at maximum reasonable size)"

    if area < MIN_REASONABLE_AREA_SQM:
        confidence = min(confidence, 0.3)
        description += " (Very small area detected, low confidence)"

    return replace(result, detected_area_sqm=area, confidence=confidence, description=description)
