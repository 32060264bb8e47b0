"""
Weather provider client (OpenWeatherMap 5-day / 3-hour forecast).

Returns raw ForecastSample slices; aggregation happens in
agents.weather_aggregator. Failures surface as UpstreamUnavailable
subclasses so callers can fall back to "no weather data".
"""

import json
import urllib.error
import urllib.parse
import urllib.request
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional, Tuple

from ..config import WEATHER_API_KEY, WEATHER_BASE_URL, WEATHER_TIMEOUT_SECONDS
from ..exceptions import UpstreamUnavailable, WeatherLocationNotFound, WeatherUnauthorized
from ..models import ForecastSample
from ..utils.logger import logger


def _build_url(location: str, api_key: str, base_url: str) -> str:
    params = {"appid": api_key, "units": "metric"}
    parts = [p.strip() for p in location.split(",")]
    if len(parts) == 2 and all(_is_number(p) for p in parts):
        params["lat"], params["lon"] = parts
    else:
        params["q"] = location
    return f"{base_url}/forecast?{urllib.parse.urlencode(params)}"


def _is_number(value: str) -> bool:
    try:
        float(value)
    except ValueError:
        return False
    return True


def parse_forecast_payload(data: Dict[str, Any]) -> Tuple[str, List[ForecastSample]]:
    """
    Convert an OpenWeatherMap forecast payload into samples.

    Timestamps carry the city's UTC offset so each slice falls on the
    local calendar day.
    """
    city = data.get("city") or {}
    tz = timezone(timedelta(seconds=int(city.get("timezone") or 0)))
    label = ", ".join(p for p in (city.get("name"), city.get("country")) if p)

    samples = []
    for item in data.get("list") or []:
        main = item.get("main") or {}
        weather = (item.get("weather") or [{}])[0]
        samples.append(ForecastSample(
            timestamp=datetime.fromtimestamp(int(item["dt"]), tz=tz),
            temperature=float(main.get("temp", 0.0)),
            temp_max=float(main.get("temp_max", main.get("temp", 0.0))),
            temp_min=float(main.get("temp_min", main.get("temp", 0.0))),
            humidity=float(main.get("humidity", 0.0)),
            precipitation=float((item.get("rain") or {}).get("3h", 0.0)),
            wind_speed=float((item.get("wind") or {}).get("speed", 0.0)),
            conditions=weather.get("description", ""),
        ))
    return label, samples


def fetch_forecast(
    location: str,
    api_key: Optional[str] = None,
    base_url: str = WEATHER_BASE_URL,
    timeout: int = WEATHER_TIMEOUT_SECONDS,
) -> Tuple[str, List[ForecastSample]]:
    """
    Fetch raw forecast samples for a "lat,lon" pair or a city name.

    Args:
        location: "18.52,73.85" or "Pune"
        api_key: OpenWeatherMap key (defaults to WEATHER_API_KEY)
        base_url: API base URL
        timeout: Socket timeout in seconds

    Returns:
        (location label, samples)

    Raises:
        WeatherUnauthorized: Missing or rejected API key
        WeatherLocationNotFound: Unknown location
        UpstreamUnavailable: Any other network or decoding failure
    """
    api_key = api_key or WEATHER_API_KEY
    if not api_key:
        raise WeatherUnauthorized("Weather API key is not configured")

    url = _build_url(location, api_key, base_url)
    logger.info(f"Fetching weather forecast for: {location}")

    try:
        req = urllib.request.Request(url, headers={'User-Agent': 'FarmIntel/1.0'})
        with urllib.request.urlopen(req, timeout=timeout) as response:
            data = json.loads(response.read().decode())
    except urllib.error.HTTPError as e:
        if e.code == 401:
            raise WeatherUnauthorized("Invalid weather API key") from e
        if e.code == 404:
            raise WeatherLocationNotFound(location) from e
        logger.warning(f"Weather API HTTP error {e.code} for {location}")
        raise UpstreamUnavailable(f"Weather API returned HTTP {e.code}") from e
    except urllib.error.URLError as e:
        logger.warning(f"Weather API network error: {e}")
        raise UpstreamUnavailable(f"Weather API unreachable: {e.reason}") from e
    except (ValueError, OSError) as e:
        logger.warning(f"Weather API error: {e}")
        raise UpstreamUnavailable(f"Weather API failed: {e}") from e

    try:
        label, samples = parse_forecast_payload(data)
    except (KeyError, TypeError, ValueError) as e:
        raise UpstreamUnavailable(f"Unexpected weather payload: {e}") from e

    logger.info(f"Weather forecast fetched for {label or location}: {len(samples)} samples")
    return label or location, samples
