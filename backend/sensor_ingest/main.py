"""
Sensor Ingest - Backend API
===========================
FastAPI application that receives telemetry from an embedded device and stores
one row per reading in a relational database.

ARCHITECTURE:
    [Arduino / ESP32] --HTTPS POST + X-API-Key--> [This Backend] ---> [MySQL]

    TLS is terminated in front of this service (reverse proxy / tunnel).
    The readings table must already exist.

HOW TO RUN:
    # Install
    pip install -e .

    # Copy environment config and edit it
    cp .env.example .env

    # Run the server
    uvicorn sensor_ingest.main:app --host 0.0.0.0 --port 8000

API DOCUMENTATION:
    After starting the server, visit:
    - Swagger UI: http://localhost:8000/docs
    - ReDoc: http://localhost:8000/redoc

Author: Sensor Ingest Team
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from dotenv import load_dotenv
from fastapi import FastAPI
from sqlalchemy.engine import Engine

from sensor_ingest import __version__
from sensor_ingest.config import Config
from sensor_ingest.models import HealthResponse
from sensor_ingest.routers import create_ingest_router
from sensor_ingest.services import ReadingStore, create_store_engine

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


# =============================================================================
# APPLICATION LIFESPAN
# =============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    STARTUP:
        Log the configuration (no secrets) and warn about a default API key.

    SHUTDOWN:
        Dispose of the database connection pool.
    """
    config: Config = app.state.config

    logger.info("=" * 60)
    logger.info(f"SENSOR INGEST v{__version__} - Starting Backend")
    logger.info(f"   {config!r}")
    logger.info(f"   Ingest endpoint: POST {config.ingest_path}")
    if config.uses_default_api_key:
        logger.warning("   INGEST_API_KEY is the default key - set a real secret!")
    if config.expose_error_details:
        logger.warning("   EXPOSE_ERROR_DETAILS is on - database errors reach the client")
    logger.info("=" * 60)

    yield  # Application runs here

    logger.info("Shutting down...")
    app.state.store.close()


# =============================================================================
# CREATE FASTAPI APPLICATION
# =============================================================================

def create_app(config: Optional[Config] = None, engine: Optional[Engine] = None) -> FastAPI:
    """
    Build the application.

    Args:
        config: Settings to use (read from the environment when omitted)
        engine: SQLAlchemy engine (built from `config` when omitted)

    Returns:
        A FastAPI app with the ingest, health and info endpoints
    """
    if config is None:
        config = Config.from_env()
    if engine is None:
        engine = create_store_engine(config)

    app = FastAPI(
        title="Sensor Ingest API",
        description="""
## Overview

Receives one sensor reading per request from an embedded device and stores it.

## Authentication

Send the shared secret in the `X-API-Key` header.

## Body

```json
{"device": "uno_r4_wifi", "temp_c": 24.13, "pressure_hpa": 1008.32,
 "humidity": 55.2, "lux": 123.45, "altitude_m": 42.8}
```
""",
        version=__version__,
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )
    app.state.config = config
    app.state.store = ReadingStore(engine, config.db_table)

    app.include_router(create_ingest_router(config.ingest_path))

    # =========================================================================
    # ROOT ENDPOINTS
    # =========================================================================

    @app.get("/", summary="API Information")
    async def root():
        """Root endpoint with API overview."""
        return {
            "name": "Sensor Ingest API",
            "version": __version__,
            "documentation": {
                "swagger": "/docs",
                "redoc": "/redoc",
                "openapi": "/openapi.json",
            },
            "endpoints": {
                "ingest": f"POST {config.ingest_path}",
                "health": "GET /health",
            },
        }

    @app.get("/health", summary="Health Check", response_model=HealthResponse)
    async def health():
        """Health check endpoint. Does not touch the database."""
        return HealthResponse(
            status="healthy",
            ingest_path=config.ingest_path,
            table=config.db_table,
        )

    return app


# Load environment variables from .env file
load_dotenv()

_config = Config.from_env()
configure_logging(_config.log_level)

app = create_app(_config)
