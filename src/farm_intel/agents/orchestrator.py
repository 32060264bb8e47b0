"""
Orchestrator
============

Wires the pure pipeline components to their upstream collaborators
(weather provider, Bedrock text/vision) and produces a FarmReport.

Every upstream failure is absorbed here:
- weather unavailable   -> no summary, seasonal crop list instead
- text model unavailable -> heuristic suggestions
- vision unavailable     -> area from the farmer's hint
"""

from datetime import datetime, timezone
from typing import Callable, List, Optional, Sequence, Tuple

from ..config import MAX_REASONABLE_AREA_SQM
from ..exceptions import UpstreamUnavailable
from ..llm.bedrock_client import analyze_image, call_llm
from ..llm.prompts import build_area_detection_prompt, build_crop_suggestion_prompt
from ..models import (
    AreaDetectionResult,
    CropEntity,
    CropSuggestionsResponse,
    FarmReport,
    ForecastSample,
    WeatherSummary,
)
from ..weather.client import fetch_forecast
from ..utils.logger import logger
from .alert_engine import derive_alerts, top_alerts
from .area_detection import parse_area_response, validate_area_detection
from .crop_summary import summarize_crops
from .suggestion_parser import fallback_suggestions, parse_suggestions, seasonal_crops
from .weather_aggregator import aggregate
from .yield_model import predict_many

WeatherFetcher = Callable[[str], Tuple[str, List[ForecastSample]]]

AI_UNAVAILABLE_ADVICE = (
    "AI analysis temporarily unavailable. Please consult local agricultural experts for detailed advice."
)
AI_UNAVAILABLE_RISKS = ["Unable to analyze current weather risks. Monitor weather conditions closely."]


def fetch_weather_summary(location: str, fetcher: WeatherFetcher = fetch_forecast) -> Optional[WeatherSummary]:
    """Fetch and aggregate the forecast; None when the provider fails."""
    try:
        label, samples = fetcher(location)
    except UpstreamUnavailable as e:
        logger.warning(f"Weather unavailable for {location}: {e}")
        return None
    return aggregate(samples, location=label)


def get_crop_suggestions(
    summary: WeatherSummary,
    llm: Callable[[str], str] = call_llm,
    user_location: Optional[str] = None,
    current_crops: Optional[Sequence[str]] = None,
) -> CropSuggestionsResponse:
    """Ask the text model for crop suggestions; heuristic response if it fails."""
    prompt = build_crop_suggestion_prompt(summary, user_location, current_crops)
    try:
        reply = llm(prompt)
    except UpstreamUnavailable as e:
        logger.warning(f"Crop suggestion model unavailable: {e}")
        return CropSuggestionsResponse(
            location=summary.location,
            analysis_date=datetime.now(timezone.utc),
            suggestions=fallback_suggestions(summary),
            general_advice=AI_UNAVAILABLE_ADVICE,
            risk_factors=list(AI_UNAVAILABLE_RISKS),
        )
    return parse_suggestions(reply, summary)


def detect_crop_area(
    image_base64: str,
    expected_crop_type: Optional[str] = None,
    area_hint: Optional[float] = None,
    latitude: Optional[float] = None,
    longitude: Optional[float] = None,
    vision: Callable[[str, str], str] = analyze_image,
    max_area: float = MAX_REASONABLE_AREA_SQM,
) -> AreaDetectionResult:
    """
    Measure the cultivated area in a satellite image.

    Args:
        image_base64: Image payload (bare base64 or data URL)
        expected_crop_type: Crop the farmer says is planted
        area_hint: Farmer-declared area in sqm
        latitude, longitude: Image centre, passed to the model as context
        vision: Vision-model callable (image, prompt) -> text
        max_area: Ceiling applied by validation

    Returns:
        Validated AreaDetectionResult
    """
    prompt = build_area_detection_prompt(expected_crop_type, area_hint, latitude, longitude)
    try:
        reply = vision(image_base64, prompt)
    except UpstreamUnavailable as e:
        logger.warning(f"Vision model unavailable, falling back to area hint: {e}")
        reply = ""
    return validate_area_detection(parse_area_response(reply, area_hint), max_area)


def build_farm_report(
    location: str,
    crops: Sequence[CropEntity] = (),
    fetcher: WeatherFetcher = fetch_forecast,
    llm: Optional[Callable[[str], str]] = call_llm,
    current_crops: Optional[Sequence[str]] = None,
    top_n: int = 2,
) -> FarmReport:
    """
    Run the whole pipeline for one location.

    Args:
        location: "lat,lon" or place name for the weather provider
        crops: Crop records to predict yields for
        fetcher: Weather provider callable
        llm: Text-model callable; None skips AI suggestions
        current_crops: Crop names already in the ground, for the prompt
        top_n: Number of urgent/warning alerts to surface

    Returns:
        FarmReport
    """
    logger.info(f"Building farm report for {location} with {len(crops)} crops")

    summary = fetch_weather_summary(location, fetcher)

    suggestions = None
    if summary is not None and llm is not None:
        suggestions = get_crop_suggestions(summary, llm, user_location=location, current_crops=current_crops)

    predictions = predict_many(crops, summary)
    alerts = derive_alerts(summary, suggestions)

    seasonal = []
    if summary is None:
        seasonal = seasonal_crops(datetime.now(timezone.utc).month)

    return FarmReport(
        location=summary.location if summary else location,
        weather=summary,
        suggestions=suggestions,
        predictions=predictions,
        alerts=alerts,
        top_alerts=top_alerts(alerts, top_n),
        seasonal_crops=seasonal,
        crops_summary=summarize_crops(crops, predictions),
    )
