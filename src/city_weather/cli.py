"""Interactive command-line weather client."""

import asyncio
import logging
from typing import Callable, Optional

from city_weather.config import DEFAULT_CITY, LOG_FILE, LOG_LEVEL, get_settings
from city_weather.logging_config import configure_logging, read_log_tail
from city_weather.weather.errors import InvalidInput
from city_weather.weather.formatter import format_current, format_forecast
from city_weather.weather.sanitizer import sanitize_city
from city_weather.weather.service import WeatherResolver

logger = logging.getLogger(__name__)

HELP_TEXT = """
Weather Client Commands:
-------------------------
  weather <city>     - Get current weather
  forecast <city>    - Get 5-day forecast
  logs               - View service logs
  help               - Show this help message
  quit               - Exit the program
""".strip("\n")

QUIT_COMMANDS = {"quit", "exit"}


async def handle_command(line: str, resolver: WeatherResolver) -> Optional[str]:
    """Execute one REPL command.

    Args:
        line: Raw input line, e.g. "forecast in Paris"
        resolver: Resolver used for weather commands

    Returns:
        Text to print, or None when the user asked to quit
    """
    command, _, argument = line.strip().partition(" ")
    command = command.lower()
    city = argument.strip() or DEFAULT_CITY

    if command in QUIT_COMMANDS:
        return None
    if not command:
        return ""
    if command in ("help", "?"):
        return f"{HELP_TEXT}\nDefault city: {DEFAULT_CITY} (if omitted)"
    if command == "logs":
        return read_log_tail(LOG_FILE, 50) or "No logs available yet"

    try:
        if command in ("weather", "current"):
            return format_current(await resolver.resolve_current(city))
        if command == "forecast":
            result = await resolver.resolve_forecast(city)
            return format_forecast(result, sanitize_city(city))
    except InvalidInput as e:
        return f"Error: {e}"

    return "Unknown command. Try: weather <city> | forecast <city> | logs | help | quit"


async def run(read_line: Callable[[str], str] = input) -> None:
    """Read commands until the user quits or input ends."""
    print(HELP_TEXT)
    async with WeatherResolver(get_settings()) as resolver:
        while True:
            try:
                line = await asyncio.to_thread(read_line, "weather> ")
            except EOFError:
                break

            output = await handle_command(line, resolver)
            if output is None:
                break
            if output:
                print(f"\n{output}\n")

    print("Goodbye!")


def main() -> None:
    """Entry point for the interactive client."""
    configure_logging(LOG_LEVEL, LOG_FILE)
    asyncio.run(run())


if __name__ == "__main__":
    main()
