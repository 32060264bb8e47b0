"""
Unit tests for the weather provider client
"""

import json
import urllib.error
from datetime import date

import pytest
from unittest.mock import patch, MagicMock

from farm_intel.exceptions import (
    UpstreamUnavailable,
    WeatherLocationNotFound,
    WeatherUnauthorized,
)
from farm_intel.weather.client import fetch_forecast, parse_forecast_payload

PAYLOAD = {
    "city": {"name": "Pune", "country": "IN", "timezone": 19800},
    "list": [
        {
            # 2026-03-01 18:30 UTC == 2026-03-02 00:00 IST
            "dt": 1772389800,
            "main": {"temp": 21.5, "temp_max": 22.0, "temp_min": 21.0, "humidity": 70},
            "weather": [{"description": "light rain"}],
            "wind": {"speed": 3.4},
            "rain": {"3h": 1.2},
        },
        {
            "dt": 1772400600,
            "main": {"temp": 26.0, "humidity": 55},
            "weather": [{"description": "clear sky"}],
            "wind": {"speed": 2.0},
        },
    ],
}


def _mock_response(payload):
    response = MagicMock()
    response.read.return_value = json.dumps(payload).encode()
    response.__enter__.return_value = response
    return response


class TestParseForecastPayload:
    """Test cases for payload conversion."""

    def test_samples_and_label(self):
        """Test fields are mapped and timestamps use the city offset."""
        label, samples = parse_forecast_payload(PAYLOAD)

        assert label == "Pune, IN"
        assert len(samples) == 2
        assert samples[0].timestamp.date() == date(2026, 3, 2)
        assert samples[0].temperature == 21.5
        assert samples[0].temp_max == 22.0
        assert samples[0].precipitation == 1.2
        assert samples[0].conditions == "light rain"
        assert samples[1].precipitation == 0.0
        assert samples[1].temp_max == 26.0

    def test_empty_payload(self):
        """Test a payload without a list gives no samples."""
        assert parse_forecast_payload({}) == ("", [])


class TestFetchForecast:
    """Test cases for the HTTP call."""

    @patch('farm_intel.weather.client.logger')
    @patch('farm_intel.weather.client.urllib.request.urlopen')
    def test_coordinates_query(self, mock_urlopen, mock_logger):
        """Test a lat,lon location is sent as lat/lon parameters."""
        mock_urlopen.return_value = _mock_response(PAYLOAD)

        label, samples = fetch_forecast("18.52, 73.85", api_key="k")

        request = mock_urlopen.call_args[0][0]
        assert "lat=18.52" in request.full_url
        assert "lon=73.85" in request.full_url
        assert "units=metric" in request.full_url
        assert label == "Pune, IN"
        assert len(samples) == 2

    @patch('farm_intel.weather.client.logger')
    @patch('farm_intel.weather.client.urllib.request.urlopen')
    def test_city_query(self, mock_urlopen, mock_logger):
        """Test a place name is sent as q."""
        mock_urlopen.return_value = _mock_response({"list": []})

        label, samples = fetch_forecast("Nashik", api_key="k")

        assert "q=Nashik" in mock_urlopen.call_args[0][0].full_url
        assert label == "Nashik"
        assert samples == []

    @patch('farm_intel.weather.client.WEATHER_API_KEY', None)
    def test_missing_key(self):
        """Test a missing API key raises unauthorized without a request."""
        with pytest.raises(WeatherUnauthorized):
            fetch_forecast("Pune")

    @pytest.mark.parametrize("code, error", [
        (401, WeatherUnauthorized),
        (404, WeatherLocationNotFound),
        (500, UpstreamUnavailable),
    ])
    @patch('farm_intel.weather.client.logger')
    @patch('farm_intel.weather.client.urllib.request.urlopen')
    def test_http_errors(self, mock_urlopen, mock_logger, code, error):
        """Test HTTP status codes map to the exception taxonomy."""
        mock_urlopen.side_effect = urllib.error.HTTPError("url", code, "error", None, None)

        with pytest.raises(error):
            fetch_forecast("Atlantis", api_key="k")

    @patch('farm_intel.weather.client.logger')
    @patch('farm_intel.weather.client.urllib.request.urlopen')
    def test_not_found_message(self, mock_urlopen, mock_logger):
        """Test the not-found error names the location."""
        mock_urlopen.side_effect = urllib.error.HTTPError("url", 404, "Not Found", None, None)

        with pytest.raises(WeatherLocationNotFound, match="Atlantis"):
            fetch_forecast("Atlantis", api_key="k")

    @patch('farm_intel.weather.client.logger')
    @patch('farm_intel.weather.client.urllib.request.urlopen')
    def test_network_error(self, mock_urlopen, mock_logger):
        """Test network failures surface as UpstreamUnavailable."""
        mock_urlopen.side_effect = urllib.error.URLError("timed out")

        with pytest.raises(UpstreamUnavailable):
            fetch_forecast("Pune", api_key="k")

    @patch('farm_intel.weather.client.logger')
    @patch('farm_intel.weather.client.urllib.request.urlopen')
    def test_invalid_json(self, mock_urlopen, mock_logger):
        """Test a non-JSON body surfaces as UpstreamUnavailable."""
        response = MagicMock()
        response.read.return_value = b"<html>gateway timeout</html>"
        response.__enter__.return_value = response
        mock_urlopen.return_value = response

        with pytest.raises(UpstreamUnavailable):
            fetch_forecast("Pune", api_key="k")
