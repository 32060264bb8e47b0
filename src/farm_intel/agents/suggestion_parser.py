"""
Crop Suggestion Parser
======================

Turns a text-model reply into a CropSuggestionsResponse. Never raises on
malformed replies; degrades through three tiers:

1. Structured: JSON object with suggestions[], generalAdvice, riskFactors[]
2. Keyword: crop names mentioned anywhere in the reply
3. Heuristic: temperature/rainfall rules over the WeatherSummary
"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from ..models import CropSuggestion, CropSuggestionsResponse, DemandTier, WeatherSummary
from ..utils.json_extract import extract_json_object
from ..utils.logger import logger

MAX_STRUCTURED_SUGGESTIONS = 5
MAX_FALLBACK_SUGGESTIONS = 3

DEFAULT_ADVICE = "Consider weather conditions carefully when planning your crops."
KEYWORD_ADVICE = "Based on current weather patterns, focus on crops that match your local climate conditions."
KEYWORD_RISKS = ["Monitor weather changes", "Ensure proper drainage if heavy rains expected"]

COMMON_CROPS = (
    "rice", "wheat", "maize", "corn", "tomato", "potato", "onion", "beans",
    "peas", "spinach", "lettuce", "carrots", "cucumbers", "peppers", "eggplant",
)

# Month -> crops commonly sown then (north/central India calendar)
SEASONAL_CROPS = {
    1: ["Wheat", "Barley", "Peas", "Spinach", "Lettuce"],
    2: ["Wheat", "Barley", "Peas", "Spinach", "Carrots"],
    3: ["Tomatoes", "Peppers", "Cucumbers", "Beans"],
    4: ["Tomatoes", "Peppers", "Cucumbers", "Corn"],
    5: ["Corn", "Beans", "Tomatoes", "Peppers"],
    6: ["Rice", "Cotton", "Sugarcane", "Corn"],
    7: ["Rice", "Cotton", "Sugarcane", "Vegetables"],
    8: ["Rice", "Vegetables", "Fodder crops"],
    9: ["Wheat preparation", "Vegetables", "Fodder"],
    10: ["Wheat", "Barley", "Mustard", "Peas"],
    11: ["Wheat", "Barley", "Mustard", "Peas"],
    12: ["Wheat", "Barley", "Peas", "Spinach"],
}


def _text(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        value = str(value)
    if not isinstance(value, str):
        return None
    value = value.strip()
    return value or None


def _suggestion_from_dict(raw: Dict[str, Any]) -> Optional[CropSuggestion]:
    name = _text(raw.get("cropName"))
    if not name:
        return None
    return CropSuggestion(
        crop_name=name,
        variety=_text(raw.get("variety")),
        planting_timeframe=_text(raw.get("plantingTimeframe")) or "",
        reason=_text(raw.get("reasonForSuggestion")) or "",
        expected_harvest_time=_text(raw.get("expectedHarvestTime")) or "",
        watering_requirements=_text(raw.get("wateringRequirements")) or "",
        soil_preparation=_text(raw.get("soilPreparation")),
        potential_yield=_text(raw.get("potentialYield")),
        market_demand=DemandTier.parse(raw.get("marketDemand")),
    )


def _from_structured(parsed: Dict[str, Any], summary: Optional[WeatherSummary], analysis_date: datetime) -> CropSuggestionsResponse:
    raw_suggestions = parsed.get("suggestions")
    suggestions: List[CropSuggestion] = []
    if isinstance(raw_suggestions, list):
        for raw in raw_suggestions:
            if not isinstance(raw, dict):
                continue
            suggestion = _suggestion_from_dict(raw)
            if suggestion:
                suggestions.append(suggestion)
            if len(suggestions) >= MAX_STRUCTURED_SUGGESTIONS:
                break

    raw_risks = parsed.get("riskFactors")
    risks = []
    if isinstance(raw_risks, list):
        risks = [risk for risk in (_text(r) for r in raw_risks) if risk]

    return CropSuggestionsResponse(
        location=summary.location if summary else "",
        analysis_date=analysis_date,
        suggestions=suggestions,
        general_advice=_text(parsed.get("generalAdvice")) or DEFAULT_ADVICE,
        risk_factors=risks,
    )


def keyword_suggestions(text: str) -> List[CropSuggestion]:
    """Synthesize generic suggestions for crop names mentioned in text."""
    lowered = (text or "").lower()
    suggestions = []
    for crop in COMMON_CROPS:
        if crop in lowered:
            suggestions.append(CropSuggestion(
                crop_name=crop.capitalize(),
                planting_timeframe="Next 2-4 weeks",
                reason="Suitable for current weather conditions",
                expected_harvest_time="2-4 months",
                watering_requirements="Moderate watering required",
                market_demand=DemandTier.MEDIUM,
            ))
            if len(suggestions) >= MAX_FALLBACK_SUGGESTIONS:
                break
    return suggestions


def fallback_suggestions(summary: Optional[WeatherSummary]) -> List[CropSuggestion]:
    """
    Rule-based suggestions from the weather digest alone.

    Rice when 20-30°C with more than 50mm expected rain over the forecast,
    otherwise Wheat when 20-30°C; Tomatoes whenever 15-25°C.
    """
    if summary is None:
        return []

    temp = summary.average_temperature
    rainfall = summary.total_rainfall
    suggestions = []

    if 20 <= temp <= 30:
        if rainfall > 50:
            suggestions.append(CropSuggestion(
                crop_name="Rice",
                planting_timeframe="Next 2-3 weeks",
                reason="Good temperature and adequate rainfall",
                expected_harvest_time="3-4 months",
                watering_requirements="Regular flooding required",
                market_demand=DemandTier.HIGH,
            ))
        else:
            suggestions.append(CropSuggestion(
                crop_name="Wheat",
                planting_timeframe="Next 2-4 weeks",
                reason="Suitable temperature, can tolerate lower rainfall",
                expected_harvest_time="4-5 months",
                watering_requirements="Moderate irrigation",
                market_demand=DemandTier.HIGH,
            ))

    if 15 <= temp <= 25:
        suggestions.append(CropSuggestion(
            crop_name="Tomatoes",
            planting_timeframe="Next 1-2 weeks",
            reason="Optimal temperature range",
            expected_harvest_time="2-3 months",
            watering_requirements="Regular watering, avoid overwatering",
            market_demand=DemandTier.HIGH,
        ))

    return suggestions[:MAX_FALLBACK_SUGGESTIONS]


def parse_suggestions(
    ai_response: Optional[str],
    summary: Optional[WeatherSummary],
    analysis_date: Optional[datetime] = None,
) -> CropSuggestionsResponse:
    """
    Parse a text-model reply into crop suggestions.

    Args:
        ai_response: Raw model text (may be empty or not JSON at all)
        summary: Weather digest the prompt was built from
        analysis_date: Timestamp to stamp on the response (defaults to now, UTC)

    Returns:
        A well-formed CropSuggestionsResponse
    """
    analysis_date = analysis_date or datetime.now(timezone.utc)
    text = ai_response or ""

    parsed = extract_json_object(text)
    if parsed is not None:
        response = _from_structured(parsed, summary, analysis_date)
        logger.info(f"Suggestions parsed from JSON: {len(response.suggestions)} crops")
        return response

    suggestions = keyword_suggestions(text)
    if suggestions:
        logger.info(f"Suggestions from crop keywords: {[s.crop_name for s in suggestions]}")
    else:
        suggestions = fallback_suggestions(summary)
        logger.info(f"No crops mentioned in reply, heuristic suggestions: {[s.crop_name for s in suggestions]}")

    return CropSuggestionsResponse(
        location=summary.location if summary else "",
        analysis_date=analysis_date,
        suggestions=suggestions,
        general_advice=KEYWORD_ADVICE,
        risk_factors=list(KEYWORD_RISKS),
    )


def seasonal_crops(month: int) -> List[str]:
    """Crops commonly sown in the given month (1-12)."""
    return list(SEASONAL_CROPS.get(month, ["Consult local experts for seasonal recommendations"]))
