"""
Yield Prediction Model
======================

Deterministic, bounded estimate of harvest (kg), revenue (INR) and
confidence for a crop record.

    base_yield = area_sqm * yield_per_sqm
    total      = clamp(area * crop_type * weather * investment * location, 0.3, 2.0)
    yield      = base_yield * total
    revenue    = yield * price_per_kg

This is a heuristic, not a calibrated agronomic model: every input is
defaulted or clamped so a number is always produced.
"""

import math
from datetime import datetime, timezone
from typing import Dict, List, Optional, Sequence, Tuple

from ..config import DEFAULT_AREA_SQM, FAVORABLE_REGIONS, MAX_REASONABLE_AREA_SQM, LocationRegion
from ..models import (
    CropEntity,
    PredictionMetadata,
    WeatherSummary,
    YieldFactors,
    YieldPrediction,
)
from ..utils.logger import logger

MODEL_NAME = "Farm Intel Yield Model"
MODEL_VERSION = "1.0"

MIN_TOTAL_FACTOR = 0.3
MAX_TOTAL_FACTOR = 2.0

# Typical yields (kg/sqm), farm-gate prices (INR/kg) and season length (days)
CROP_YIELD_DATA: Dict[str, Dict[str, float]] = {
    "rice": {"yield_per_sqm": 0.6, "price_per_kg": 25, "season_days": 150},      # 6 t/ha
    "wheat": {"yield_per_sqm": 0.4, "price_per_kg": 22, "season_days": 120},     # 4 t/ha
    "corn": {"yield_per_sqm": 0.8, "price_per_kg": 18, "season_days": 100},      # 8 t/ha
    "maize": {"yield_per_sqm": 0.8, "price_per_kg": 18, "season_days": 100},
    "tomatoes": {"yield_per_sqm": 4.0, "price_per_kg": 30, "season_days": 90},   # 40 t/ha
    "tomato": {"yield_per_sqm": 4.0, "price_per_kg": 30, "season_days": 90},
    "potatoes": {"yield_per_sqm": 2.5, "price_per_kg": 20, "season_days": 100},
    "potato": {"yield_per_sqm": 2.5, "price_per_kg": 20, "season_days": 100},
    "onions": {"yield_per_sqm": 2.0, "price_per_kg": 25, "season_days": 120},
    "onion": {"yield_per_sqm": 2.0, "price_per_kg": 25, "season_days": 120},
    "beans": {"yield_per_sqm": 1.2, "price_per_kg": 60, "season_days": 75},
    "peas": {"yield_per_sqm": 1.0, "price_per_kg": 50, "season_days": 80},
    "spinach": {"yield_per_sqm": 2.5, "price_per_kg": 40, "season_days": 45},
    "lettuce": {"yield_per_sqm": 2.0, "price_per_kg": 35, "season_days": 60},
    "carrots": {"yield_per_sqm": 3.0, "price_per_kg": 30, "season_days": 90},
    "cucumbers": {"yield_per_sqm": 3.5, "price_per_kg": 25, "season_days": 70},
    "peppers": {"yield_per_sqm": 2.5, "price_per_kg": 45, "season_days": 85},
    "eggplant": {"yield_per_sqm": 2.0, "price_per_kg": 35, "season_days": 100},
    # Field crops, from per-hectare yields and per-quintal mandi prices
    "cotton": {"yield_per_sqm": 0.2, "price_per_kg": 65, "season_days": 180},
    "sugarcane": {"yield_per_sqm": 7.0, "price_per_kg": 3.5, "season_days": 365},
    "soybean": {"yield_per_sqm": 0.22, "price_per_kg": 45, "season_days": 100},
    "groundnut": {"yield_per_sqm": 0.2, "price_per_kg": 54, "season_days": 120},
    "chickpea": {"yield_per_sqm": 0.18, "price_per_kg": 50, "season_days": 110},
    "mustard": {"yield_per_sqm": 0.15, "price_per_kg": 54, "season_days": 120},
}
DEFAULT_CROP_KEY = "rice"

EASY_TIER = ("spinach", "lettuce", "beans", "peas", "chickpea")
MEDIUM_TIER = ("tomatoes", "tomato", "onions", "onion", "carrots", "cucumbers", "soybean", "groundnut")
HARD_TIER = ("rice", "wheat", "corn", "maize", "potatoes", "potato", "sugarcane", "cotton")


def _positive(value: Optional[float]) -> Optional[float]:
    if value is None:
        return None
    try:
        value = float(value)
    except (TypeError, ValueError):
        return None
    return value if math.isfinite(value) and value > 0 else None


def resolve_area(crop: CropEntity) -> Tuple[float, str]:
    """Pick the area to model: AI-detected, then user-declared, then default."""
    detected = _positive(crop.detected_area_sqm)
    if detected:
        return detected, "detected"
    declared = _positive(crop.farm_area_sqm)
    if declared:
        return declared, "declared"
    return DEFAULT_AREA_SQM, "default"


def calculate_area_factor(area_sqm: float) -> float:
    """Larger plots tend to be farmed more efficiently."""
    if area_sqm < 500:
        return 0.8
    if area_sqm < 2000:
        return 0.9
    if area_sqm < 5000:
        return 1.0
    if area_sqm < 20000:
        return 1.1
    return 1.15


def calculate_crop_type_factor(crop_key: str) -> float:
    if crop_key in EASY_TIER:
        return 1.1
    if crop_key in MEDIUM_TIER:
        return 1.0
    if crop_key in HARD_TIER:
        return 0.9
    return 1.0


def calculate_weather_factor(weather: Optional[WeatherSummary]) -> float:
    """
    Temperature, humidity and forecast rainfall adjustments, clamped to [0.5, 1.5].

    Missing weather (or a summary without a current observation) is neutral.
    """
    if weather is None or weather.current is None:
        return 1.0

    temp = weather.current.temperature
    humidity = weather.current.humidity
    factor = 1.0

    if 20 <= temp <= 30:
        factor *= 1.1
    elif temp < 10 or temp > 40:
        factor *= 0.7
    else:
        factor *= 0.9

    if 50 <= humidity <= 70:
        factor *= 1.05
    elif humidity < 30 or humidity > 90:
        factor *= 0.85

    if weather.daily:
        avg_rain = sum(day.precipitation for day in weather.daily) / len(weather.daily)
        if 2 <= avg_rain <= 10:
            factor *= 1.1
        elif avg_rain < 0.5 or avg_rain > 20:
            factor *= 0.8

    return max(0.5, min(1.5, factor))


def calculate_investment_factor(investment: float, area_sqm: float) -> float:
    """Input spend per sqm; better inputs, better yield."""
    per_sqm = max(0.0, investment) / area_sqm if area_sqm > 0 else 0.0
    if per_sqm < 5:
        return 0.7
    if per_sqm < 15:
        return 0.85
    if per_sqm < 30:
        return 1.0
    if per_sqm < 50:
        return 1.15
    return 1.25


def calculate_location_factor(
    lat: Optional[float],
    lon: Optional[float],
    regions: Sequence[LocationRegion] = FAVORABLE_REGIONS,
) -> float:
    if lat is None or lon is None:
        return 1.0
    for region in regions:
        if region.contains(lat, lon):
            return region.bonus
    return 1.0


def calculate_confidence(crop: CropEntity, weather: Optional[WeatherSummary]) -> float:
    """Data-quality score in [0.2, 1.0]."""
    confidence = 0.5

    if _positive(crop.detected_area_sqm):
        confidence += 0.2
    elif _positive(crop.farm_area_sqm):
        confidence += 0.1

    if crop.crop_details and crop.variety:
        confidence += 0.1
    if crop.latitude is not None and crop.longitude is not None:
        confidence += 0.1
    if _positive(crop.investment_amount):
        confidence += 0.1
    if weather is not None:
        confidence += 0.1

    return max(0.2, min(1.0, confidence))


def predict_yield(
    crop: CropEntity,
    weather: Optional[WeatherSummary] = None,
    regions: Sequence[LocationRegion] = FAVORABLE_REGIONS,
    now: Optional[datetime] = None,
) -> YieldPrediction:
    """
    Predict yield, revenue and confidence for one crop.

    Args:
        crop: Crop record (read-only)
        weather: Already-resolved weather digest, or None
        regions: Favorable-region boxes for the location factor
        now: Computation timestamp (defaults to now, UTC)

    Returns:
        YieldPrediction with whole-unit yield/revenue and 2-decimal confidence
    """
    crop_key = (crop.crop_type or "").strip().lower()
    known = crop_key in CROP_YIELD_DATA
    profile = CROP_YIELD_DATA[crop_key] if known else CROP_YIELD_DATA[DEFAULT_CROP_KEY]

    area_sqm, area_source = resolve_area(crop)
    area_capped = area_sqm > MAX_REASONABLE_AREA_SQM
    if area_capped:
        logger.warning(f"Crop {crop.id} area {area_sqm} sqm capped at {MAX_REASONABLE_AREA_SQM} sqm")
        area_sqm = MAX_REASONABLE_AREA_SQM
    base_yield = area_sqm * profile["yield_per_sqm"]
    investment = max(0.0, _positive(crop.investment_amount) or 0.0)

    factors = YieldFactors(
        area=calculate_area_factor(area_sqm),
        crop_type=calculate_crop_type_factor(crop_key),
        weather=calculate_weather_factor(weather),
        investment=calculate_investment_factor(investment, area_sqm),
        location=calculate_location_factor(crop.latitude, crop.longitude, regions),
    )
    total_factor = max(MIN_TOTAL_FACTOR, min(MAX_TOTAL_FACTOR, factors.product()))

    predicted_yield = base_yield * total_factor
    predicted_revenue = predicted_yield * profile["price_per_kg"]
    confidence = calculate_confidence(crop, weather)

    assumptions = [
        f"Base yield: {profile['yield_per_sqm']} kg/sqm for {crop.crop_type or 'unknown crop'}",
        f"Market price: ₹{profile['price_per_kg']}/kg",
        f"Growing season: {int(profile['season_days'])} days",
        f"Area: {round(area_sqm)} sqm ({area_source})",
        "Factors: area efficiency, crop type, weather, investment, location",
    ]
    if area_capped:
        assumptions.append(f"Area capped at {round(MAX_REASONABLE_AREA_SQM)} sqm")
    if not known:
        assumptions.append(f"Unknown crop type '{crop.crop_type}', using {DEFAULT_CROP_KEY} baseline")
    if weather is None:
        assumptions.append("No weather data, weather factor neutral")

    prediction = YieldPrediction(
        crop_id=crop.id,
        predicted_yield_kg=int(round(predicted_yield)),
        predicted_revenue=int(round(predicted_revenue)),
        confidence=round(confidence, 2),
        factors=factors,
        total_factor=total_factor,
        metadata=PredictionMetadata(
            model=MODEL_NAME,
            version=MODEL_VERSION,
            calculated_at=now or datetime.now(timezone.utc),
            assumptions=assumptions,
        ),
    )
    logger.info(
        f"Yield prediction for crop {crop.id} ({crop_key or 'unknown'}): "
        f"{prediction.predicted_yield_kg}kg, ₹{prediction.predicted_revenue}, "
        f"factor={total_factor:.3f}, confidence={prediction.confidence}"
    )
    return prediction


def predict_many(
    crops: Sequence[CropEntity],
    weather: Optional[WeatherSummary] = None,
    regions: Sequence[LocationRegion] = FAVORABLE_REGIONS,
) -> List[YieldPrediction]:
    """
    Predict every crop independently, keeping only the successes.

    A failing crop is logged and left out; input order is kept for the rest.
    """
    predictions = []
    for crop in crops:
        try:
            predictions.append(predict_yield(crop, weather, regions))
        except Exception as e:
            logger.warning(f"Yield prediction failed for crop {getattr(crop, 'id', '?')}: {e}")
    return predictions
