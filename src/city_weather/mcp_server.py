"""MCP tool server exposing the weather resolver over stdio."""

import logging

from mcp.server.fastmcp import FastMCP
from mcp.server.fastmcp.exceptions import ToolError

from city_weather.config import LOG_FILE, LOG_LEVEL, get_settings
from city_weather.logging_config import configure_logging, read_log_tail
from city_weather.weather.errors import InvalidInput
from city_weather.weather.formatter import format_current, format_forecast
from city_weather.weather.sanitizer import sanitize_city
from city_weather.weather.service import WeatherResolver

logger = logging.getLogger(__name__)

mcp = FastMCP("weather-service")


def create_resolver() -> WeatherResolver:
    """Build a resolver for a single tool call."""
    return WeatherResolver(get_settings())


def _checked_city(city: str) -> str:
    try:
        return sanitize_city(city)
    except InvalidInput as e:
        raise ToolError(str(e)) from e


@mcp.tool()
async def current(city: str) -> str:
    """Get current weather for a city (e.g. "Tokyo" or "in Tokyo")."""
    _checked_city(city)
    async with create_resolver() as resolver:
        result = await resolver.resolve_current(city)
    return format_current(result)


@mcp.tool()
async def forecast(city: str) -> str:
    """Get the 5-day forecast for a city."""
    name = _checked_city(city)
    async with create_resolver() as resolver:
        result = await resolver.resolve_forecast(city)
    return format_forecast(result, name)


@mcp.tool()
def logs(max_lines: int = 50) -> str:
    """Show the most recent weather service log lines."""
    if max_lines < 1:
        raise ToolError("max_lines must be at least 1")
    return read_log_tail(LOG_FILE, max_lines) or "No logs available yet"


def main() -> None:
    """Run the MCP server on stdio."""
    configure_logging(LOG_LEVEL, LOG_FILE)
    logger.info("Starting weather MCP server on stdio")
    mcp.run()


if __name__ == "__main__":
    main()
