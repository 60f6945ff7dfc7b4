"""City name sanitization."""

import re

from city_weather.weather.errors import InvalidInput

# Longest alternative first so "in the" wins over "in"
_PREFIX = re.compile(r"^\s*(?:in\s+the|in|at|near)\b\s*", re.IGNORECASE)


def sanitize_city(raw: str) -> str:
    """Strip one natural-language prefix ("in", "at", "near", "in the") and trim.

    Args:
        raw: City name as typed by the user, e.g. "in Tokyo"

    Returns:
        Cleaned city name

    Raises:
        InvalidInput: If nothing is left after cleaning
    """
    city = _PREFIX.sub("", raw or "", count=1).strip()
    if not city:
        raise InvalidInput("City parameter is required")
    return city
