"""
Ingest API Router
=================

The one door the device knocks on. The Arduino wakes up, reads its sensors,
POSTs one JSON reading here and goes back to sleep.

Endpoint:
  POST <INGEST_PATH>  - Store one reading (default path: /ingest)

Auth: Header `X-API-Key: <INGEST_API_KEY>`.

HOW A REQUEST FLOWS:
-------------------
1. Request gate     - POST only (405), valid X-API-Key (401)
2. Payload parser   - non-empty body (400), JSON object (400)
3. Field validator  - device + five numbers, first bad field wins (400)
4. Store writer     - one INSERT, answer with the new id (500 if the DB fails)

The first step that fails answers the request; later steps never run.

Author: Sensor Ingest Team
"""

import logging
import secrets
from typing import Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool

from sensor_ingest.config import Config
from sensor_ingest.models import (
    ErrorResponse,
    IngestError,
    IngestFailure,
    IngestResponse,
)
from sensor_ingest.services import ReadingStore, StoreConnectionError, StoreWriteError
from sensor_ingest.utils.validation import parse_payload, validate_reading

logger = logging.getLogger(__name__)

API_KEY_HEADER = "X-API-Key"


class UTF8JSONResponse(JSONResponse):
    """JSON response that spells out the charset."""

    media_type = "application/json; charset=utf-8"


# -----------------------------------------------------------------------------
# Dependencies
# -----------------------------------------------------------------------------


def get_config(request: Request) -> Config:
    return request.app.state.config


def get_store(request: Request) -> ReadingStore:
    return request.app.state.store


# -----------------------------------------------------------------------------
# Request gate
# -----------------------------------------------------------------------------


def check_method(method: str) -> Optional[IngestFailure]:
    if method.upper() != "POST":
        return IngestFailure(IngestError.METHOD_NOT_ALLOWED)
    return None


def check_api_key(provided: Optional[str], expected: str) -> Optional[IngestFailure]:
    """
    Compare the X-API-Key header with the configured secret.

    A blank header counts as missing. The comparison takes the same time no
    matter where the strings differ.

    Args:
        provided: Raw header value, None if absent
        expected: Configured API key

    Returns:
        None if the key matches, otherwise an UNAUTHORIZED failure
    """
    key = provided.strip() if provided is not None else ""
    if not key or not secrets.compare_digest(key.encode("utf-8"), expected.encode("utf-8")):
        return IngestFailure(IngestError.UNAUTHORIZED)
    return None


def failure_response(failure: IngestFailure, config: Config) -> UTF8JSONResponse:
    """Render a failure as the JSON body the device expects."""
    headers = {"Allow": "POST"} if failure.error is IngestError.METHOD_NOT_ALLOWED else None
    return UTF8JSONResponse(
        status_code=failure.status_code,
        content=failure.to_body(expose_details=config.expose_error_details),
        headers=headers,
    )


# -----------------------------------------------------------------------------
# Endpoint
# -----------------------------------------------------------------------------


async def ingest_reading(
    request: Request,
    config: Config = Depends(get_config),
    store: ReadingStore = Depends(get_store),
):
    """
    Device posts one reading; we store it and return the row id.

    **Headers**
    - `X-API-Key`: The shared secret configured in INGEST_API_KEY.

    **Body (JSON)**
    - device (required): Device name, string or number.
    - temp_c, pressure_hpa, humidity, lux, altitude_m (required): Numbers or
      numeric strings.
    """
    client = request.client.host if request.client else "unknown"

    failure = check_method(request.method) or check_api_key(
        request.headers.get(API_KEY_HEADER), config.api_key
    )
    if failure:
        logger.warning(f"[{client}] {request.method} rejected: {failure.message}")
        return failure_response(failure, config)

    data = parse_payload(await request.body())
    if isinstance(data, IngestFailure):
        logger.warning(f"[{client}] Bad payload: {data.message}")
        return failure_response(data, config)

    reading = validate_reading(data)
    if isinstance(reading, IngestFailure):
        logger.warning(f"[{client}] Invalid reading: {reading.message}")
        return failure_response(reading, config)

    try:
        new_id = await run_in_threadpool(store.insert, reading)
    except StoreConnectionError as e:
        return failure_response(IngestFailure(IngestError.STORE_CONNECTION, details=str(e)), config)
    except StoreWriteError as e:
        return failure_response(IngestFailure(IngestError.STORE_WRITE, details=str(e)), config)

    logger.info(
        f"[{reading.device}] stored reading id={new_id} "
        f"T:{reading.temp_c:.2f}C P:{reading.pressure_hpa:.2f}hPa H:{reading.humidity:.1f}%"
    )
    return UTF8JSONResponse(status_code=200, content={"ok": True, "id": new_id})


async def reject_method(request: Request) -> UTF8JSONResponse:
    """Answer any method other than POST on the ingest path."""
    failure = check_method(request.method) or IngestFailure(IngestError.METHOD_NOT_ALLOWED)
    client = request.client.host if request.client else "unknown"
    logger.warning(f"[{client}] {request.method} rejected: {failure.message}")
    return failure_response(failure, request.app.state.config)


def create_ingest_router(path: str) -> APIRouter:
    """
    Build the router with the ingest endpoint mounted at `path`.

    Args:
        path: Endpoint path from INGEST_PATH (e.g., "/ingest")
    """
    router = APIRouter(tags=["ingest"])
    router.add_api_route(
        path,
        ingest_reading,
        methods=["POST"],
        summary="Ingest Sensor Reading",
        response_class=UTF8JSONResponse,
        responses={
            200: {"model": IngestResponse, "description": "Reading stored"},
            400: {"model": ErrorResponse, "description": "Empty body, bad JSON or bad field"},
            401: {"model": ErrorResponse, "description": "Missing or wrong X-API-Key"},
            405: {"model": ErrorResponse, "description": "Method other than POST"},
            500: {"model": ErrorResponse, "description": "Database unavailable or insert failed"},
        },
    )
    # No method list: every other verb (TRACE, WebDAV, ...) lands in the gate.
    router.add_route(path, reject_method, include_in_schema=False)
    return router
