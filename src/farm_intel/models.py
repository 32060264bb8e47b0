"""
Pipeline Records
================

Typed records passed between the pipeline components:

- ForecastSample / DailyForecast / WeatherSummary: weather digest
- CropEntity: a farmer's crop as stored by the persistence layer
- AreaDetectionResult: vision-service area measurement
- CropSuggestion / CropSuggestionsResponse: parsed AI crop advice
- YieldPrediction: output of the yield model
- Alert: ranked, UI-ready notification
- CropsSummary: portfolio totals over a farmer's crops
- FarmReport: everything above for one location

Records produced by the pipeline are built fresh per call and not mutated
afterwards.
"""

import math
from dataclasses import asdict, dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional


class CropStatus(Enum):
    """Lifecycle of a crop record."""
    ACTIVE = "active"
    HARVESTED = "harvested"
    FAILED = "failed"


class DemandTier(Enum):
    """Market demand tier reported for a suggestion."""
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"

    @classmethod
    def parse(cls, value: Any) -> Optional["DemandTier"]:
        if not isinstance(value, str):
            return None
        for tier in cls:
            if tier.value.lower() == value.strip().lower():
                return tier
        return None


class Severity(Enum):
    """Alert severity; rank orders urgent < warning < normal."""
    URGENT = "urgent"
    WARNING = "warning"
    NORMAL = "normal"

    @property
    def rank(self) -> int:
        return _SEVERITY_RANK[self]


_SEVERITY_RANK = {Severity.URGENT: 0, Severity.WARNING: 1, Severity.NORMAL: 2}


class AlertCategory(Enum):
    WEATHER = "weather"
    CROP = "crop"
    MARKET = "market"
    GENERAL = "general"


# ---------------------------------------------------------------------------
# Weather
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ForecastSample:
    """One raw forecast slice from the weather provider (tz-aware timestamp)."""
    timestamp: datetime
    temperature: float
    humidity: float
    precipitation: float
    wind_speed: float
    conditions: str
    temp_max: Optional[float] = None
    temp_min: Optional[float] = None


@dataclass(frozen=True)
class DailyForecast:
    date: date
    max_temp: float
    min_temp: float
    humidity: float
    precipitation: float
    conditions: str
    wind_speed: float

    @property
    def mean_temp(self) -> float:
        return (self.max_temp + self.min_temp) / 2


@dataclass(frozen=True)
class CurrentConditions:
    temperature: float
    humidity: float
    wind_speed: float
    conditions: str


@dataclass(frozen=True)
class WeatherSummary:
    """Multi-day digest of a forecast plus the current observation."""
    location: str
    current_conditions: str
    average_rainfall: float
    total_rainfall: float
    average_temperature: float
    average_humidity: float
    rainy_days: int
    dry_days: int
    best_planting_periods: List[str] = field(default_factory=list)
    current: Optional[CurrentConditions] = None
    daily: List[DailyForecast] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Crops
# ---------------------------------------------------------------------------

def _optional_float(value: Any) -> Optional[float]:
    if value is None or value == "":
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


@dataclass
class CropEntity:
    """A crop record owned by the persistence layer; read-only here."""
    id: str
    crop_type: str
    location_name: str = ""
    variety: Optional[str] = None
    crop_details: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    farm_area_sqm: Optional[float] = None
    detected_area_sqm: Optional[float] = None
    investment_amount: Optional[float] = None
    status: CropStatus = CropStatus.ACTIVE

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "CropEntity":
        """Build a crop from a database row / API payload."""
        try:
            status = CropStatus(record.get("status") or "active")
        except ValueError:
            status = CropStatus.ACTIVE
        return cls(
            id=str(record.get("id", "")),
            crop_type=str(record.get("crop_type") or ""),
            location_name=record.get("location_name") or "",
            variety=record.get("variety") or None,
            crop_details=record.get("crop_details") or None,
            latitude=_optional_float(record.get("latitude")),
            longitude=_optional_float(record.get("longitude")),
            farm_area_sqm=_optional_float(record.get("farm_area_sqm")),
            detected_area_sqm=_optional_float(record.get("detected_area_sqm")),
            investment_amount=_optional_float(record.get("investment_amount")),
            status=status,
        )


@dataclass(frozen=True)
class Point:
    x: float
    y: float


@dataclass(frozen=True)
class BoundingBox:
    """Quadrilateral in image-pixel space."""
    top_left: Point
    top_right: Point
    bottom_left: Point
    bottom_right: Point


@dataclass(frozen=True)
class AreaDetectionResult:
    detected_area_sqm: float
    confidence: float
    description: str
    crop_type: Optional[str] = None
    bounding_box: Optional[BoundingBox] = None


@dataclass(frozen=True)
class CropSuggestion:
    crop_name: str
    planting_timeframe: str
    reason: str
    expected_harvest_time: str
    watering_requirements: str
    variety: Optional[str] = None
    soil_preparation: Optional[str] = None
    potential_yield: Optional[str] = None
    market_demand: Optional[DemandTier] = None


@dataclass(frozen=True)
class CropSuggestionsResponse:
    location: str
    analysis_date: datetime
    suggestions: List[CropSuggestion]
    general_advice: str
    risk_factors: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class YieldFactors:
    area: float
    crop_type: float
    weather: float
    investment: float
    location: float

    def product(self) -> float:
        return self.area * self.crop_type * self.weather * self.investment * self.location


@dataclass(frozen=True)
class PredictionMetadata:
    model: str
    version: str
    calculated_at: datetime
    assumptions: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class YieldPrediction:
    crop_id: str
    predicted_yield_kg: int
    predicted_revenue: int
    confidence: float
    factors: YieldFactors
    total_factor: float
    metadata: PredictionMetadata


@dataclass(frozen=True)
class Alert:
    id: str
    title: str
    subtitle: str
    description: str
    severity: Severity
    icon: str
    time: str
    category: AlertCategory
    created_at: datetime


@dataclass(frozen=True)
class CropsSummary:
    """Portfolio totals across a farmer's crops."""
    total_crops: int
    active_crops: int
    harvested_crops: int
    total_investment: float
    total_predicted_revenue: int
    total_area_sqm: float


@dataclass(frozen=True)
class FarmReport:
    """Everything the presentation layer needs for one location."""
    location: str
    weather: Optional[WeatherSummary]
    suggestions: Optional[CropSuggestionsResponse]
    predictions: List[YieldPrediction]
    alerts: List[Alert]
    top_alerts: List[Alert]
    seasonal_crops: List[str] = field(default_factory=list)
    crops_summary: Optional[CropsSummary] = None


# ---------------------------------------------------------------------------
# Serialization
# ---------------------------------------------------------------------------

def _jsonable(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, dict):
        return {k: _jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_jsonable(v) for v in value]
    return value


def to_json_dict(record: Any) -> Dict[str, Any]:
    """Render a pipeline record (dataclass) as a JSON-safe dict."""
    return _jsonable(asdict(record))
