import os
from dataclasses import dataclass
from typing import List

AWS_REGION = os.environ.get("AWS_REGION", "ap-south-1")

LLM_MODEL = os.environ.get("LLM_MODEL", "anthropic.claude-3-haiku-20240307-v1:0")
VISION_MODEL = os.environ.get("VISION_MODEL", LLM_MODEL)
LLM_MAX_TOKENS = int(os.environ.get("LLM_MAX_TOKENS", "1024"))

WEATHER_API_KEY = os.environ.get("WEATHER_API_KEY")
WEATHER_BASE_URL = os.environ.get("WEATHER_BASE_URL", "https://api.openweathermap.org/data/2.5")
WEATHER_TIMEOUT_SECONDS = int(os.environ.get("WEATHER_TIMEOUT_SECONDS", "10"))

# 10 hectares
MAX_REASONABLE_AREA_SQM = float(os.environ.get("MAX_REASONABLE_AREA_SQM", "100000"))
DEFAULT_AREA_SQM = float(os.environ.get("DEFAULT_AREA_SQM", "1000"))


@dataclass(frozen=True)
class PlantingWindowRule:
    """Thresholds for spotting a good run of planting days."""

    window_days: int = 3
    min_avg_temp: float = 15.0
    max_avg_temp: float = 35.0
    min_total_rain_mm: float = 1.0  # exclusive
    max_total_rain_mm: float = 10.0
    max_windows: int = 3


@dataclass(frozen=True)
class AggregationPrecision:
    """Decimal places used when folding samples into daily forecasts."""

    temperature: int = 1
    humidity: int = 1
    precipitation: int = 1
    wind_speed: int = 1
    summary: int = 1
    rainy_day_threshold_mm: float = 0.5


@dataclass(frozen=True)
class LocationRegion:
    """Lat/lon bounding box with a yield bonus."""

    name: str
    lat_min: float
    lat_max: float
    lon_min: float
    lon_max: float
    bonus: float

    def contains(self, lat: float, lon: float) -> bool:
        return self.lat_min <= lat <= self.lat_max and self.lon_min <= lon <= self.lon_max


DEFAULT_PLANTING_RULE = PlantingWindowRule()
DEFAULT_PRECISION = AggregationPrecision()

# Checked in order, first match wins
FAVORABLE_REGIONS: List[LocationRegion] = [
    LocationRegion("north_indian_plains", 28, 32, 75, 78, 1.2),   # Punjab, Haryana
    LocationRegion("south_indian_belt", 10, 15, 75, 80, 1.1),
    LocationRegion("central_india", 20, 25, 80, 85, 1.05),
]
