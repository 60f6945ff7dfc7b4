"""Main FastAPI application for the city weather service."""

import logging
import traceback
from contextlib import asynccontextmanager
from typing import AsyncGenerator

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from city_weather.api.endpoints import router as weather_router
from city_weather.config import DEBUG, HOST, LOG_FILE, LOG_LEVEL, PORT, get_settings
from city_weather.logging_config import configure_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager."""
    try:
        settings = get_settings()
        logger.info(
            f"Starting City Weather Service (geocoding={settings.geo_api_base}, "
            f"weather={settings.weather_api_base}, timeout={settings.timeout_seconds}s)"
        )
        yield
    except Exception as e:
        logger.error(f"Startup error: {e}")
        logger.error(traceback.format_exc())
        raise
    finally:
        logger.info("Shutting down City Weather Service")


def create_app() -> FastAPI:
    """Create and configure FastAPI application.

    Returns:
        Configured FastAPI application instance
    """
    app = FastAPI(
        title="City Weather Service",
        description="Current weather and 5-day forecasts for any city via Open-Meteo, with mock fallback",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(weather_router)

    return app


# Create app instance for uvicorn
app = create_app()


def main() -> None:
    """Main entry point for the application."""
    configure_logging(LOG_LEVEL, LOG_FILE)
    logger.info(f"Weather Service running at http://{HOST}:{PORT}")
    uvicorn.run(
        app,
        host=HOST,
        port=PORT,
        log_config=None,
        log_level="info" if not DEBUG else "debug"
    )


if __name__ == "__main__":
    main()
