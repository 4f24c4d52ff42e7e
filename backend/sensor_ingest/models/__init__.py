"""
Models Package
==============

Data structures for the ingest service.
Import from here instead of the individual files.

Example:
    from sensor_ingest.models import Reading, IngestError
"""

from .reading import (
    # What the device sends us
    Reading,
    READING_FIELDS,
    DEVICE_FIELD,
    MEASUREMENT_FIELDS,

    # What we send back
    IngestResponse,
    ErrorResponse,
    HealthResponse,
)
from .errors import IngestError, IngestFailure

__all__ = [
    "Reading",
    "READING_FIELDS",
    "DEVICE_FIELD",
    "MEASUREMENT_FIELDS",
    "IngestResponse",
    "ErrorResponse",
    "HealthResponse",
    "IngestError",
    "IngestFailure",
]
