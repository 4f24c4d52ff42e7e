"""
Reading Models
==============
Pydantic models for the telemetry the device sends and what we answer.

A Reading is built from the request JSON after the field coercion in
`sensor_ingest.utils.validation` has run, written to the database, and then
thrown away. The store assigns `id` and `created_at`, so they are not here.

Example Request:
    POST /ingest
    X-API-Key: <shared secret>
    {
        "device": "uno_r4_wifi",
        "temp_c": 24.13,
        "pressure_hpa": 1008.32,
        "humidity": 55.2,
        "lux": 123.45,
        "altitude_m": 42.8
    }

Author: Sensor Ingest Team
"""

from typing import Optional

from pydantic import BaseModel, Field


# Required JSON keys, in the order they are checked.
DEVICE_FIELD = "device"
MEASUREMENT_FIELDS = ("temp_c", "pressure_hpa", "humidity", "lux", "altitude_m")
READING_FIELDS = (DEVICE_FIELD,) + MEASUREMENT_FIELDS


class Reading(BaseModel):
    """One validated telemetry record, ready to be inserted."""

    model_config = {"frozen": True}

    device: str = Field(..., min_length=1, description="Device identifier (trimmed)")
    temp_c: float = Field(..., description="Temperature in degrees Celsius")
    pressure_hpa: float = Field(..., description="Barometric pressure in hPa")
    humidity: float = Field(..., description="Relative humidity in %")
    lux: float = Field(..., description="Illuminance in lux")
    altitude_m: float = Field(..., description="Estimated altitude in metres")


# =============================================================================
# RESPONSE MODELS - documented in OpenAPI
# =============================================================================

class IngestResponse(BaseModel):
    """Body of a successful ingest."""

    ok: bool = Field(True, examples=[True])
    id: int = Field(..., description="Primary key of the new row", examples=[1])


class ErrorResponse(BaseModel):
    """Body of every rejected request."""

    ok: bool = Field(False, examples=[False])
    error: str = Field(..., examples=["API key inválida ou ausente."])
    details: Optional[str] = Field(
        None,
        description="Database error text, only when EXPOSE_ERROR_DETAILS is on",
    )


class HealthResponse(BaseModel):
    status: str
    ingest_path: str
    table: str
