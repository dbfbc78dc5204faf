"""Main FastAPI application for weather forecast service."""

import logging
import traceback
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from owm_forecast.api.endpoints import router as weather_router
from owm_forecast.config import HOST, PORT, DEBUG, REFRESH_ON_STARTUP
from owm_forecast.logging_config import configure_logging
from owm_forecast.weather.store import WeatherStore

# Configure logging
configure_logging(logging.DEBUG if DEBUG else logging.INFO)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager."""
    store: WeatherStore = app.state.weather_store
    try:
        logger.info("Starting OpenWeatherMap Forecast Service")
        if REFRESH_ON_STARTUP:
            error = await store.refresh()
            if error is not None:
                logger.warning(f"Initial refresh failed, serving placeholder data: {error}")
        yield
    except Exception as e:
        logger.error(f"Startup error: {e}")
        logger.error(traceback.format_exc())
        raise
    finally:
        logger.info("Shutting down OpenWeatherMap Forecast Service")
        await store.aclose()


def create_app(store: Optional[WeatherStore] = None) -> FastAPI:
    """Create and configure FastAPI application.

    Args:
        store: Weather store to serve (creates default if None)

    Returns:
        Configured FastAPI application instance
    """
    app = FastAPI(
        title="OpenWeatherMap Forecast Service",
        description="REST API service that serves current weather and a five day forecast from OpenWeatherMap",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan
    )
    app.state.weather_store = store or WeatherStore()

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Include API routers
    app.include_router(weather_router)

    @app.get("/api", tags=["root"])
    async def api_info() -> dict:
        """API information endpoint.

        Returns:
            Basic service information
        """
        return {
            "message": "OpenWeatherMap Forecast Service",
            "docs": "/docs",
            "redoc": "/redoc",
            "weather": "/weather",
            "refresh": "/weather/refresh",
            "health": "/weather/health"
        }

    return app


# Create app instance for uvicorn
app = create_app()


def main() -> None:
    """Main entry point for the application."""
    logger.info(f"Starting server on {HOST}:{PORT}")
    uvicorn.run(
        app,
        host=HOST,
        port=PORT,
        log_level="info" if not DEBUG else "debug"
    )


if __name__ == "__main__":
    main()
