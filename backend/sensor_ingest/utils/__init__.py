"""
Utility modules for the sensor ingest backend.
"""

from sensor_ingest.utils.validation import (
    parse_payload,
    is_numeric_string,
    coerce_device,
    coerce_float,
    validate_reading,
)

__all__ = [
    "parse_payload",
    "is_numeric_string",
    "coerce_device",
    "coerce_float",
    "validate_reading",
]
