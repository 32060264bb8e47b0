"""
Alert Engine
============

Derives farmer-facing alerts from the weather digest and parsed crop
suggestions, then ranks them urgent -> warning -> normal (most recent
first within a severity).

Weather rules (independent, can all fire together):
- temperature > 35°C         -> warning  "High Temperature Alert"
- temperature < 5°C          -> urgent   "Frost Warning"
- humidity > 90%             -> warning  "High Humidity Warning"
- wind speed > 15            -> warning  "Strong Wind Warning"
- next-3-day rain > 50mm     -> warning  "Heavy Rainfall Expected"
  else next-3-day rain < 2mm -> normal   "Dry Period Ahead"

Suggestion rules: one warning per risk factor, one "Optimal Planting
Window" when a crop should go in now / within 1-2 weeks, one advice alert.

With no inputs at all a fixed pair of fallback alerts is returned so the
UI always has something to show.
"""

from datetime import datetime, timezone
from typing import Iterable, List, Optional

from ..models import (
    Alert,
    AlertCategory,
    CropSuggestionsResponse,
    Severity,
    WeatherSummary,
)
from ..utils.logger import logger

HIGH_TEMP_C = 35
FROST_TEMP_C = 5
HIGH_HUMIDITY_PCT = 90
STRONG_WIND = 15
HEAVY_RAIN_MM = 50
DRY_RAIN_MM = 2
RAIN_LOOKAHEAD_DAYS = 3

URGENT_TIMEFRAME_KEYWORDS = ("immediate", "now", "1-2 week")


def format_relative_time(created_at: datetime, now: Optional[datetime] = None) -> str:
    """Format a timestamp as "Just now", "5 minutes ago", "1 hour ago", ..."""
    now = now or datetime.now(timezone.utc)
    seconds = int((now - created_at).total_seconds())

    if seconds < 60:
        return "Just now"
    if seconds < 3600:
        minutes = seconds // 60
        return f"{minutes} minute{'s' if minutes > 1 else ''} ago"
    if seconds < 86400:
        hours = seconds // 3600
        return f"{hours} hour{'s' if hours > 1 else ''} ago"
    days = seconds // 86400
    return f"{days} day{'s' if days > 1 else ''} ago"


def _alert(key: str, title: str, subtitle: str, description: str, severity: Severity,
           icon: str, category: AlertCategory, now: datetime) -> Alert:
    return Alert(
        id=f"{key}-{int(now.timestamp() * 1000)}",
        title=title,
        subtitle=subtitle,
        description=description,
        severity=severity,
        icon=icon,
        time=format_relative_time(now, now),
        category=category,
        created_at=now,
    )


def weather_alerts(weather: WeatherSummary, now: datetime) -> List[Alert]:
    """Threshold alerts from the current observation and the next days' rain."""
    alerts = []
    current = weather.current

    if current is not None:
        if current.temperature > HIGH_TEMP_C:
            alerts.append(_alert(
                "temp-high", "High Temperature Alert", "Extreme Heat Warning",
                f"Current temperature is {round(current.temperature)}°C. Protect crops from heat stress. "
                "Increase watering frequency and consider shade nets for sensitive crops.",
                Severity.WARNING, "thermometer", AlertCategory.WEATHER, now,
            ))

        if current.temperature < FROST_TEMP_C:
            alerts.append(_alert(
                "temp-low", "Frost Warning", "Low Temperature Alert",
                f"Temperature has dropped to {round(current.temperature)}°C. Risk of frost damage. "
                "Cover sensitive plants and ensure adequate protection.",
                Severity.URGENT, "snowflake", AlertCategory.WEATHER, now,
            ))

        if current.humidity > HIGH_HUMIDITY_PCT:
            alerts.append(_alert(
                "humidity-high", "High Humidity Warning", "Disease Risk Alert",
                f"Humidity is at {current.humidity}%. High risk of fungal diseases. "
                "Ensure proper ventilation and consider fungicide application if needed.",
                Severity.WARNING, "droplet", AlertCategory.WEATHER, now,
            ))

        if current.wind_speed > STRONG_WIND:
            alerts.append(_alert(
                "wind-high", "Strong Wind Warning", "Crop Protection Alert",
                f"Wind speed is {current.wind_speed} m/s. Secure loose equipment and provide support "
                "to tall crops. Risk of mechanical damage to plants.",
                Severity.WARNING, "wind", AlertCategory.WEATHER, now,
            ))

    if weather.daily:
        upcoming_rain = sum(day.precipitation for day in weather.daily[:RAIN_LOOKAHEAD_DAYS])
        if upcoming_rain > HEAVY_RAIN_MM:
            alerts.append(_alert(
                "rain-heavy", "Heavy Rainfall Expected", "Flooding Risk",
                f"{round(upcoming_rain)}mm of rain expected in the next {RAIN_LOOKAHEAD_DAYS} days. "
                "Risk of waterlogging. Ensure proper drainage and protect harvested crops.",
                Severity.WARNING, "rain", AlertCategory.WEATHER, now,
            ))
        elif upcoming_rain < DRY_RAIN_MM:
            alerts.append(_alert(
                "rain-low", "Dry Period Ahead", "Irrigation Alert",
                f"Very little rainfall expected ({round(upcoming_rain)}mm). Plan irrigation schedule "
                "carefully and monitor soil moisture levels.",
                Severity.NORMAL, "sun", AlertCategory.WEATHER, now,
            ))

    return alerts


def suggestion_alerts(suggestions: CropSuggestionsResponse, now: datetime) -> List[Alert]:
    """Risk, planting-window and advice alerts from parsed crop suggestions."""
    alerts = []

    for index, risk in enumerate(suggestions.risk_factors):
        alerts.append(_alert(
            f"risk-{index}", "Weather Risk Detected", "Monitor Conditions", risk,
            Severity.WARNING, "warning", AlertCategory.WEATHER, now,
        ))

    urgent_crops = [
        s for s in suggestions.suggestions
        if any(keyword in s.planting_timeframe.lower() for keyword in URGENT_TIMEFRAME_KEYWORDS)
    ]
    if urgent_crops:
        names = ", ".join(s.crop_name for s in urgent_crops)
        description = f"Current conditions are ideal for planting {names}."
        if urgent_crops[0].reason:
            description += f" {urgent_crops[0].reason}"
        alerts.append(_alert(
            "planting-urgent", "Optimal Planting Window", "Time-Sensitive Opportunity",
            description, Severity.NORMAL, "seedling", AlertCategory.CROP, now,
        ))

    if suggestions.general_advice:
        alerts.append(_alert(
            "advice", "Farming Recommendation", "Weather-Based Advice",
            suggestions.general_advice, Severity.NORMAL, "lightbulb", AlertCategory.GENERAL, now,
        ))

    return alerts


def fallback_alerts(now: Optional[datetime] = None) -> List[Alert]:
    """Fixed alerts shown when neither weather nor suggestions are available."""
    now = now or datetime.now(timezone.utc)
    return [
        _alert(
            "fallback-weather", "Weather Data Unavailable", "Check Connection",
            "Unable to fetch current weather data. Please check your internet connection or API configuration.",
            Severity.NORMAL, "satellite", AlertCategory.GENERAL, now,
        ),
        _alert(
            "fallback-general", "Monitor Weather Conditions", "General Advice",
            "Keep an eye on local weather patterns and adjust farming activities accordingly. "
            "Consult local meteorological sources for updates.",
            Severity.NORMAL, "sun-cloud", AlertCategory.GENERAL, now,
        ),
    ]


def rank_alerts(alerts: Iterable[Alert]) -> List[Alert]:
    """Stable sort: severity rank first, then newest first."""
    return sorted(alerts, key=lambda a: (a.severity.rank, -a.created_at.timestamp()))


def derive_alerts(
    weather: Optional[WeatherSummary],
    suggestions: Optional[CropSuggestionsResponse],
    now: Optional[datetime] = None,
) -> List[Alert]:
    """
    Build the ranked alert list for one cycle.

    Args:
        weather: Weather digest with current observation, or None
        suggestions: Parsed crop suggestions, or None
        now: Generation instant shared by every alert in this cycle

    Returns:
        Ranked alerts; the two fallback alerts when both inputs are None
    """
    now = now or datetime.now(timezone.utc)

    if weather is None and suggestions is None:
        logger.info("No weather or suggestions available, returning fallback alerts")
        return fallback_alerts(now)

    alerts: List[Alert] = []
    if weather is not None:
        alerts.extend(weather_alerts(weather, now))
    if suggestions is not None:
        alerts.extend(suggestion_alerts(suggestions, now))

    ranked = rank_alerts(alerts)
    logger.info(
        f"Derived {len(ranked)} alerts "
        f"({sum(1 for a in ranked if a.severity is Severity.URGENT)} urgent, "
        f"{sum(1 for a in ranked if a.severity is Severity.WARNING)} warning)"
    )
    return ranked


def top_alerts(alerts: Iterable[Alert], count: int = 2) -> List[Alert]:
    """First count urgent/warning alerts, in their existing order."""
    if count <= 0:
        return []
    return [a for a in alerts if a.severity in (Severity.URGENT, Severity.WARNING)][:count]
