"""
Crop Portfolio Summary
======================

Totals over a farmer's crop records for the metrics view: crop counts by
status, money invested, predicted revenue and cultivated area.
"""

import math
from typing import Optional, Sequence

from ..models import CropEntity, CropsSummary, CropStatus, YieldPrediction


def _amount(value: Optional[float]) -> float:
    if value is None or not math.isfinite(value) or value < 0:
        return 0.0
    return value


def crop_area(crop: CropEntity) -> float:
    """Detected area when known, otherwise the declared area, otherwise 0."""
    return _amount(crop.detected_area_sqm) or _amount(crop.farm_area_sqm)


def summarize_crops(
    crops: Sequence[CropEntity],
    predictions: Sequence[YieldPrediction] = (),
) -> CropsSummary:
    """
    Aggregate portfolio totals.

    Args:
        crops: Crop records
        predictions: Yield predictions; revenue is summed for the crops listed

    Returns:
        CropsSummary (all zeros for an empty portfolio)
    """
    crop_ids = {crop.id for crop in crops}
    revenue = sum(p.predicted_revenue for p in predictions if p.crop_id in crop_ids)

    return CropsSummary(
        total_crops=len(crops),
        active_crops=sum(1 for crop in crops if crop.status is CropStatus.ACTIVE),
        harvested_crops=sum(1 for crop in crops if crop.status is CropStatus.HARVESTED),
        total_investment=sum(_amount(crop.investment_amount) for crop in crops),
        total_predicted_revenue=revenue,
        total_area_sqm=sum(crop_area(crop) for crop in crops),
    )
