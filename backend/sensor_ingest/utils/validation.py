"""
Payload Validation Utilities
============================

Turns the raw request body into a `Reading`, one small step at a time:

    raw bytes --parse_payload()--> dict --validate_reading()--> Reading

Each function hands back either its result or an `IngestFailure`, never both.
Fields are checked in a fixed order and the first bad one wins.

Author: Sensor Ingest Team
"""

import json
import math
import re
from typing import Any, Union

from sensor_ingest.models import (
    DEVICE_FIELD,
    MEASUREMENT_FIELDS,
    IngestError,
    IngestFailure,
    Reading,
)


# "  -12.5e3 " style numbers: no hex, no underscores, no inf/nan words.
_NUMERIC_STRING = re.compile(
    r"^[ \t\n\r\v\f]*[+-]?([0-9]+(\.[0-9]*)?|\.[0-9]+)([eE][+-]?[0-9]+)?[ \t\n\r\v\f]*$"
)

_MISSING = object()


def _reject_constant(name: str):
    raise ValueError(f"{name} is not valid JSON")


def parse_payload(raw: bytes) -> Union[dict, IngestFailure]:
    """
    Decode the request body into a JSON object.

    Args:
        raw: The whole request body

    Returns:
        The decoded object, or a failure for an empty body / anything that is
        not a UTF-8 JSON object
    """
    if not raw or not raw.strip():
        return IngestFailure(IngestError.EMPTY_BODY)

    try:
        data = json.loads(raw.decode("utf-8"), parse_constant=_reject_constant)
    except (UnicodeDecodeError, ValueError, RecursionError):
        return IngestFailure(IngestError.INVALID_JSON)

    if not isinstance(data, dict):
        return IngestFailure(IngestError.INVALID_JSON)
    return data


def is_numeric_string(value: str) -> bool:
    """
    Check if a string is a plain decimal number.

    Args:
        value: The string to check (e.g., "24.13", " -3e2 ")

    Returns:
        True if the whole string is a number, False otherwise
    """
    return bool(_NUMERIC_STRING.match(value))


def _is_number(value: Any) -> bool:
    # bool is a subclass of int; true/false are not numbers here
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _finite_float(value: Union[int, float, str]) -> Union[float, None]:
    try:
        result = float(value)
    except OverflowError:
        return None
    return result if math.isfinite(result) else None


def _number_to_string(value: Union[int, float]) -> str:
    # Floats get 14 significant digits, exponent form as "1.0E+20"
    if isinstance(value, int):
        return str(value)
    text = "%.14G" % value
    if "E" in text:
        mantissa, exponent = text.split("E")
        if "." not in mantissa:
            mantissa += ".0"
        text = f"{mantissa}E{int(exponent):+d}"
    return text


def coerce_device(value: Any) -> Union[str, IngestFailure]:
    """
    Coerce the `device` field to a non-empty string.

    Accepts a non-blank string (returned trimmed) or a number (returned as its
    decimal text, so 42 becomes "42"). Blank strings, booleans, null, objects
    and arrays are rejected.
    """
    if isinstance(value, str) and value.strip():
        return value.strip()
    if _is_number(value) and _finite_float(value) is not None:
        return _number_to_string(value)
    return IngestFailure(IngestError.INVALID_DEVICE_FIELD, field=DEVICE_FIELD)


def coerce_float(value: Any, field: str) -> Union[float, IngestFailure]:
    """
    Coerce a measurement field to a float.

    Args:
        value: JSON value from the payload
        field: Field name, used in the error message

    Returns:
        The number as a float, or a failure if it is not a finite number or a
        numeric string
    """
    if _is_number(value) or (isinstance(value, str) and is_numeric_string(value)):
        result = _finite_float(value)
        if result is not None:
            return result
    return IngestFailure(IngestError.INVALID_NUMERIC_FIELD, field=field)


def validate_reading(data: dict) -> Union[Reading, IngestFailure]:
    """
    Pull the six required fields out of the payload, in order.

    Presence is checked right before each field is coerced, so a bad `device`
    is reported even if `temp_c` is missing too.

    Args:
        data: Decoded JSON object from `parse_payload()`

    Returns:
        A Reading, or the failure for the first field that is missing or bad
    """
    device = data.get(DEVICE_FIELD, _MISSING)
    if device is _MISSING:
        return IngestFailure(IngestError.MISSING_FIELD, field=DEVICE_FIELD)
    device = coerce_device(device)
    if isinstance(device, IngestFailure):
        return device

    measurements = {}
    for field in MEASUREMENT_FIELDS:
        value = data.get(field, _MISSING)
        if value is _MISSING:
            return IngestFailure(IngestError.MISSING_FIELD, field=field)
        coerced = coerce_float(value, field)
        if isinstance(coerced, IngestFailure):
            return coerced
        measurements[field] = coerced

    return Reading(device=device, **measurements)
