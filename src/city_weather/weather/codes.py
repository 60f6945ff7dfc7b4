"""WMO weather code labels."""

import re
from typing import Optional, Union

WEATHER_CODE_MAP = {
    0: "Clear sky",
    1: "Mainly clear",
    2: "Partly cloudy",
    3: "Overcast",
    45: "Fog",
    48: "Depositing rime fog",
    51: "Light drizzle",
    53: "Moderate drizzle",
    55: "Heavy drizzle",
    56: "Light freezing drizzle",
    57: "Heavy freezing drizzle",
    61: "Slight rain",
    63: "Moderate rain",
    65: "Heavy rain",
    66: "Light freezing rain",
    67: "Heavy freezing rain",
    71: "Slight snow fall",
    73: "Moderate snow fall",
    75: "Heavy snow fall",
    77: "Snow grains",
    80: "Slight rain showers",
    81: "Moderate rain showers",
    82: "Violent rain showers",
    85: "Slight snow showers",
    86: "Heavy snow showers",
    95: "Thunderstorm",
    96: "Thunderstorm with slight hail",
    99: "Thunderstorm with heavy hail",
}

NOT_AVAILABLE = "N/A"

_EMBEDDED_CODE = re.compile(r"(\d{1,3})")


def condition_label(code: Optional[Union[int, str]]) -> str:
    """Translate a weather code into a human label.

    Args:
        code: Numeric WMO code, a string embedding one (e.g. "code:51"), or None

    Returns:
        Label in the form "Overcast (3)", "N/A" when no code is given
    """
    if code is None:
        return NOT_AVAILABLE

    if isinstance(code, bool):
        return NOT_AVAILABLE

    if isinstance(code, (int, float)):
        number = int(code)
        return f"{WEATHER_CODE_MAP.get(number, 'Unknown')} ({number})"

    match = _EMBEDDED_CODE.search(str(code))
    if match:
        number = int(match.group(1))
        return f"{WEATHER_CODE_MAP.get(number, 'Unknown')} ({number})"

    return str(code)
