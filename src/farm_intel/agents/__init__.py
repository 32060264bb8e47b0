"""
Farm Intelligence Agents
========================

This package implements the farm intelligence pipeline:
- Weather Aggregator: Folds forecast slices into daily forecasts and a digest
- Area Detection Parser: Reads crop area out of vision-model replies
- Suggestion Parser: Reads crop suggestions out of text-model replies
- Yield Model: Heuristic yield, revenue and confidence per crop
- Alert Engine: Ranked farmer-facing alerts from weather and suggestions
- Crop Summary: Portfolio totals (counts, investment, revenue, area)
- Orchestrator: Wires the above to the weather provider and Bedrock

The parsers, the yield model and the alert engine are pure: no I/O, and
malformed upstream data degrades to fallback output instead of raising.
"""

from .alert_engine import derive_alerts, rank_alerts, top_alerts
from .area_detection import parse_area_response, validate_area_detection
from .crop_summary import summarize_crops
from .suggestion_parser import parse_suggestions, seasonal_crops
from .weather_aggregator import aggregate
from .yield_model import predict_many, predict_yield

__all__ = [
    "aggregate",
    "parse_area_response",
    "validate_area_detection",
    "parse_suggestions",
    "seasonal_crops",
    "predict_yield",
    "predict_many",
    "derive_alerts",
    "rank_alerts",
    "top_alerts",
    "summarize_crops",
]
