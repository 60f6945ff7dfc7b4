"""Exceptions raised by the weather resolution pipeline."""


class WeatherError(Exception):
    """Base class for weather pipeline errors."""
    pass


class InvalidInput(WeatherError):
    """Raised when a city name is empty after sanitization."""
    pass


class UpstreamUnavailable(WeatherError):
    """Raised on transport-level upstream failures (DNS, connection reset, timeout)."""
    pass


class UpstreamHttpError(UpstreamUnavailable):
    """Raised when an upstream provider answers with a non-2xx status."""

    def __init__(self, status: int, url: str = ""):
        self.status = status
        self.url = url
        message = f"Upstream HTTP {status}"
        if url:
            message = f"{message} for {url}"
        super().__init__(message)
