"""
Unit tests for Weather Aggregator
"""

from datetime import date, datetime, timedelta, timezone
from unittest.mock import patch

from farm_intel.agents.weather_aggregator import (
    aggregate,
    build_daily_forecasts,
    find_planting_periods,
)
from farm_intel.config import PlantingWindowRule
from farm_intel.models import ForecastSample

IST = timezone(timedelta(hours=5, minutes=30))


def _sample(day, hour=12, temp=22.0, rain=0.0, humidity=60.0, wind=3.0, conditions="clear sky", tz=timezone.utc):
    return ForecastSample(
        timestamp=datetime(2026, 3, day, hour, tzinfo=tz),
        temperature=temp,
        humidity=humidity,
        precipitation=rain,
        wind_speed=wind,
        conditions=conditions,
    )


class TestDailyForecasts:
    """Test cases for folding samples into days."""

    def test_one_forecast_per_calendar_date(self):
        """Test that each distinct date produces exactly one day, sorted ascending."""
        samples = [
            _sample(3, 9), _sample(1, 6), _sample(1, 18), _sample(2, 0), _sample(3, 21),
        ]
        daily = build_daily_forecasts(samples)

        assert [d.date for d in daily] == [date(2026, 3, 1), date(2026, 3, 2), date(2026, 3, 3)]

    def test_fold_max_min_sum_and_average(self):
        """Test the per-day fold of temperature, rain, humidity and wind."""
        samples = [
            _sample(1, 6, temp=18.0, rain=1.25, humidity=80, wind=2.0),
            _sample(1, 12, temp=29.0, rain=0.5, humidity=50, wind=4.0, conditions="light rain"),
            _sample(1, 18, temp=24.0, rain=0.0, humidity=65, wind=6.0, conditions="light rain"),
        ]
        day = build_daily_forecasts(samples)[0]

        assert day.max_temp == 29.0
        assert day.min_temp == 18.0
        assert day.precipitation == 1.8
        assert day.humidity == 65.0
        assert day.wind_speed == 4.0
        assert day.conditions == "light rain"

    def test_max_never_below_min(self):
        """Test that every day has max >= min, including provider temp_max/temp_min."""
        samples = [
            ForecastSample(
                timestamp=datetime(2026, 3, 1, h, tzinfo=timezone.utc),
                temperature=20.0 + h, humidity=50, precipitation=0, wind_speed=1,
                conditions="clouds", temp_max=21.0 + h, temp_min=19.0 + h,
            )
            for h in (0, 3, 6, 9)
        ]
        for day in build_daily_forecasts(samples):
            assert day.max_temp >= day.min_temp

    def test_grouping_uses_sample_timezone(self):
        """Test that days follow the reporting timezone, not UTC."""
        # 23:00 and 01:00 local fall on different local dates
        samples = [
            ForecastSample(datetime(2026, 3, 1, 23, tzinfo=IST), 20, 50, 0, 1, "clear"),
            ForecastSample(datetime(2026, 3, 2, 1, tzinfo=IST), 18, 55, 0, 1, "clear"),
        ]
        daily = build_daily_forecasts(samples)

        assert [d.date for d in daily] == [date(2026, 3, 1), date(2026, 3, 2)]


class TestPlantingPeriods:
    """Test cases for the planting-window scan."""

    @patch('farm_intel.agents.weather_aggregator.logger')
    def test_single_qualifying_window(self, mock_logger):
        """Test 5 days where only days 2-4 (22°C, 6mm total) qualify."""
        samples = [
            _sample(1, temp=22.0, rain=20.0),
            _sample(2, temp=22.0, rain=2.0),
            _sample(3, temp=22.0, rain=2.0),
            _sample(4, temp=22.0, rain=2.0),
            _sample(5, temp=22.0, rain=20.0),
        ]
        summary = aggregate(samples, location="Pune, IN")

        assert summary.best_planting_periods == ["Mar 2 - Mar 4"]

    def test_windows_capped_and_chronological(self):
        """Test that only the first max_windows windows are reported, in date order."""
        daily = build_daily_forecasts([_sample(d, temp=25.0, rain=1.0) for d in range(1, 9)])
        periods = find_planting_periods(daily)

        assert periods == ["Mar 1 - Mar 3", "Mar 2 - Mar 4", "Mar 3 - Mar 5"]

    def test_rule_is_overridable(self):
        """Test a custom rule changes window length and thresholds."""
        daily = build_daily_forecasts([_sample(d, temp=12.0, rain=3.0) for d in range(1, 4)])

        assert find_planting_periods(daily) == []
        rule = PlantingWindowRule(window_days=2, min_avg_temp=10.0, max_windows=1)
        assert find_planting_periods(daily, rule) == ["Mar 1 - Mar 2"]

    def test_rain_lower_bound_is_exclusive(self):
        """Test a window with exactly 1mm total rain does not qualify."""
        daily = build_daily_forecasts([
            _sample(1, rain=0.5), _sample(2, rain=0.5), _sample(3, rain=0.0),
        ])

        assert find_planting_periods(daily) == []


class TestAggregate:
    """Test cases for the full summary."""

    @patch('farm_intel.agents.weather_aggregator.logger')
    def test_summary_statistics(self, mock_logger):
        """Test averages, totals and rainy/dry day counts."""
        samples = [
            _sample(1, temp=20.0, rain=0.0, humidity=40),
            _sample(2, temp=24.0, rain=3.0, humidity=60),
            _sample(3, temp=28.0, rain=0.4, humidity=80),
        ]
        summary = aggregate(samples, location="Nashik, IN")

        assert summary.location == "Nashik, IN"
        assert summary.average_temperature == 24.0
        assert summary.average_humidity == 60.0
        assert summary.total_rainfall == 3.4
        assert summary.average_rainfall == 1.1
        assert summary.rainy_days == 1
        assert summary.dry_days == 2
        assert len(summary.daily) == 3

    @patch('farm_intel.agents.weather_aggregator.logger')
    def test_earliest_sample_is_current(self, mock_logger):
        """Test the earliest sample becomes the current observation."""
        samples = [
            _sample(2, temp=30.0, conditions="haze"),
            _sample(1, temp=18.0, humidity=91, wind=16, conditions="mist"),
        ]
        summary = aggregate(samples)

        assert summary.current.temperature == 18.0
        assert summary.current.humidity == 91
        assert summary.current_conditions == "mist"

    @patch('farm_intel.agents.weather_aggregator.logger')
    def test_fewer_than_three_days(self, mock_logger):
        """Test two days give statistics but no planting windows."""
        summary = aggregate([_sample(1, rain=2.0), _sample(2, rain=2.0)])

        assert summary.best_planting_periods == []
        assert summary.total_rainfall == 4.0
        assert summary.rainy_days == 2

    @patch('farm_intel.agents.weather_aggregator.logger')
    def test_zero_samples(self, mock_logger):
        """Test an empty forecast gives a zeroed summary instead of an error."""
        summary = aggregate([], location="Nowhere")

        assert summary.location == "Nowhere"
        assert summary.average_temperature == 0.0
        assert summary.total_rainfall == 0.0
        assert summary.rainy_days == 0
        assert summary.dry_days == 0
        assert summary.best_planting_periods == []
        assert summary.current is None
        assert summary.daily == []
