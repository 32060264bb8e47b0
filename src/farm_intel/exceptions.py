"""
Errors raised by the external collaborators (weather provider, Bedrock).

The pipeline components themselves never raise for bad upstream data;
callers catch UpstreamUnavailable and fall back to degraded output.
"""


class UpstreamUnavailable(Exception):
    """Raised when a weather or AI call fails or times out."""


class WeatherLocationNotFound(UpstreamUnavailable):
    """Raised when the weather provider does not know the location."""
    def __init__(self, location: str):
        self.location = location
        super().__init__(f"Location not found: {location}. Check the location name or coordinates.")


class WeatherUnauthorized(UpstreamUnavailable):
    """Raised when the weather API key is missing or rejected."""


class LLMUnavailable(UpstreamUnavailable):
    """Raised when the Bedrock text or vision call fails."""
