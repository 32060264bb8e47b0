"""
Weather Aggregator
==================

Folds raw forecast slices (e.g. 3-hourly provider samples) into one
DailyForecast per calendar day and builds the WeatherSummary digest used by
the suggestion prompt, the yield model and the alert engine.

- Days are keyed on the sample timestamp's own calendar date, so grouping
  follows the provider's reporting timezone.
- Planting windows are contiguous day runs whose mean temperature and total
  rainfall fall inside PlantingWindowRule; reported in chronological order.
- Zero samples give a zeroed summary, never an error.
"""

from collections import Counter
from datetime import date
from typing import Dict, List, Optional, Sequence

from ..config import (
    AggregationPrecision,
    PlantingWindowRule,
    DEFAULT_PLANTING_RULE,
    DEFAULT_PRECISION,
)
from ..models import CurrentConditions, DailyForecast, ForecastSample, WeatherSummary
from ..utils.logger import logger


def build_daily_forecasts(
    samples: Sequence[ForecastSample],
    precision: AggregationPrecision = DEFAULT_PRECISION,
) -> List[DailyForecast]:
    """
    Group samples by calendar date and fold each group into a DailyForecast.

    Args:
        samples: Raw forecast samples in any order
        precision: Rounding applied to the folded values

    Returns:
        One DailyForecast per distinct date, sorted by date ascending
    """
    groups: Dict[date, Dict] = {}

    for sample in samples:
        day = sample.timestamp.date()
        high = sample.temp_max if sample.temp_max is not None else sample.temperature
        low = sample.temp_min if sample.temp_min is not None else sample.temperature
        precip = max(0.0, sample.precipitation or 0.0)

        group = groups.get(day)
        if group is None:
            groups[day] = {
                "max_temp": high,
                "min_temp": low,
                "precipitation": precip,
                "humidity": [sample.humidity],
                "wind": [sample.wind_speed],
                "conditions": Counter([sample.conditions]),
            }
            continue

        group["max_temp"] = max(group["max_temp"], high)
        group["min_temp"] = min(group["min_temp"], low)
        group["precipitation"] += precip
        group["humidity"].append(sample.humidity)
        group["wind"].append(sample.wind_speed)
        group["conditions"][sample.conditions] += 1

    daily = []
    for day in sorted(groups):
        group = groups[day]
        daily.append(DailyForecast(
            date=day,
            max_temp=round(group["max_temp"], precision.temperature),
            min_temp=round(group["min_temp"], precision.temperature),
            humidity=round(sum(group["humidity"]) / len(group["humidity"]), precision.humidity),
            precipitation=round(group["precipitation"], precision.precipitation),
            # most_common keeps first-seen order on ties
            conditions=group["conditions"].most_common(1)[0][0],
            wind_speed=round(sum(group["wind"]) / len(group["wind"]), precision.wind_speed),
        ))
    return daily


def _format_day(day: date) -> str:
    return f"{day.strftime('%b')} {day.day}"


def find_planting_periods(
    daily: Sequence[DailyForecast],
    rule: PlantingWindowRule = DEFAULT_PLANTING_RULE,
) -> List[str]:
    """
    Scan every contiguous window of rule.window_days days.

    A window qualifies when its mean of daily midpoint temperatures is within
    [min_avg_temp, max_avg_temp] and its total rainfall is within
    (min_total_rain_mm, max_total_rain_mm]. The first rule.max_windows
    qualifying windows are returned as "Mon D - Mon D" labels.
    """
    periods: List[str] = []
    size = rule.window_days
    if size <= 0:
        return periods

    for i in range(len(daily) - size + 1):
        window = daily[i:i + size]
        avg_temp = sum(day.mean_temp for day in window) / size
        total_rain = sum(day.precipitation for day in window)

        if (rule.min_avg_temp <= avg_temp <= rule.max_avg_temp
                and rule.min_total_rain_mm < total_rain <= rule.max_total_rain_mm):
            periods.append(f"{_format_day(window[0].date)} - {_format_day(window[-1].date)}")
            if len(periods) >= rule.max_windows:
                break

    return periods


def summarize(
    daily: Sequence[DailyForecast],
    location: str = "",
    current: Optional[CurrentConditions] = None,
    rule: PlantingWindowRule = DEFAULT_PLANTING_RULE,
    precision: AggregationPrecision = DEFAULT_PRECISION,
) -> WeatherSummary:
    """Build the statistical digest from an ordered run of daily forecasts."""
    days = len(daily)
    current_text = current.conditions if current else ""

    if days == 0:
        return WeatherSummary(
            location=location,
            current_conditions=current_text,
            average_rainfall=0.0,
            total_rainfall=0.0,
            average_temperature=0.0,
            average_humidity=0.0,
            rainy_days=0,
            dry_days=0,
            best_planting_periods=[],
            current=current,
            daily=[],
        )

    total_rain = sum(day.precipitation for day in daily)
    avg_temp = sum(day.mean_temp for day in daily) / days
    avg_humidity = sum(day.humidity for day in daily) / days
    rainy_days = sum(1 for day in daily if day.precipitation > precision.rainy_day_threshold_mm)

    return WeatherSummary(
        location=location,
        current_conditions=current_text,
        average_rainfall=round(total_rain / days, precision.summary),
        total_rainfall=round(total_rain, precision.summary),
        average_temperature=round(avg_temp, precision.summary),
        average_humidity=round(avg_humidity, precision.summary),
        rainy_days=rainy_days,
        dry_days=days - rainy_days,
        best_planting_periods=find_planting_periods(daily, rule),
        current=current,
        daily=list(daily),
    )


def aggregate(
    samples: Sequence[ForecastSample],
    location: str = "",
    rule: PlantingWindowRule = DEFAULT_PLANTING_RULE,
    precision: AggregationPrecision = DEFAULT_PRECISION,
) -> WeatherSummary:
    """
    Convert raw forecast samples into a WeatherSummary.

    The earliest sample doubles as the current observation.

    Args:
        samples: Raw forecast samples from the weather provider
        location: Human-readable location label
        rule: Planting-window thresholds
        precision: Rounding configuration

    Returns:
        WeatherSummary (zeroed statistics when samples is empty)
    """
    ordered = sorted(samples, key=lambda s: s.timestamp)
    current = None
    if ordered:
        first = ordered[0]
        current = CurrentConditions(
            temperature=first.temperature,
            humidity=first.humidity,
            wind_speed=first.wind_speed,
            conditions=first.conditions,
        )

    daily = build_daily_forecasts(ordered, precision)
    summary = summarize(daily, location=location, current=current, rule=rule, precision=precision)

    logger.info(
        f"Weather aggregated for '{location}': {len(ordered)} samples -> {len(daily)} days, "
        f"avg_temp={summary.average_temperature}, total_rain={summary.total_rainfall}mm, "
        f"windows={len(summary.best_planting_periods)}"
    )
    return summary
