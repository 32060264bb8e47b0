"""Farm intelligence pipeline: weather digest, AI reply parsing, yield and alerts."""

from .agents import (
    aggregate,
    derive_alerts,
    parse_area_response,
    parse_suggestions,
    predict_many,
    predict_yield,
    rank_alerts,
    seasonal_crops,
    summarize_crops,
    top_alerts,
    validate_area_detection,
)

__version__ = "1.0.0"
