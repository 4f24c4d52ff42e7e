from typing import Any

import pytest

from sensor_ingest.models import READING_FIELDS, IngestError, IngestFailure, Reading
from sensor_ingest.utils.validation import (
    coerce_device,
    coerce_float,
    is_numeric_string,
    parse_payload,
    validate_reading,
)


# ---------------------------------------------------------------------------
# parse_payload
# ---------------------------------------------------------------------------


@pytest.mark.parametrize("raw", [b"", b"   ", b"\n\t \r\n"])
def test_empty_body(raw: bytes) -> None:
    res = parse_payload(raw)
    assert isinstance(res, IngestFailure)
    assert res.error is IngestError.EMPTY_BODY
    assert res.message == "Body vazio."


@pytest.mark.parametrize(
    "raw",
    [
        b"{not json",
        b"[1, 2, 3]",
        b'"just a string"',
        b"42",
        b"null",
        b'{"temp_c": NaN}',
        b'{"temp_c": Infinity}',
        b'{"device": "\xff\xfe"}',
    ],
)
def test_invalid_json(raw: bytes) -> None:
    res = parse_payload(raw)
    assert isinstance(res, IngestFailure)
    assert res.error is IngestError.INVALID_JSON
    assert res.status_code == 400
    assert res.message == "JSON inválido."


@pytest.mark.parametrize("raw", [b"[" * 100000, b"{\"a\":" * 100000])
def test_deeply_nested_json(raw: bytes) -> None:
    res = parse_payload(raw)
    assert isinstance(res, IngestFailure)
    assert res.error is IngestError.INVALID_JSON


def test_parse_object_keeps_extra_values() -> None:
    res = parse_payload('{"device": "ç", "extra": {"nested": [1, null, true]}}'.encode("utf-8"))
    assert res == {"device": "ç", "extra": {"nested": [1, None, True]}}


# ---------------------------------------------------------------------------
# coercion
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    "value,expected",
    [
        ("uno_r4", "uno_r4"),
        ("  uno_r4  ", "uno_r4"),
        (42, "42"),
        (-7, "-7"),
        (42.0, "42"),
        (24.13, "24.13"),
        (0.1 + 0.2, "0.3"),
        (1e20, "1.0E+20"),
        (1.5e-7, "1.5E-7"),
        (-2.5e16, "-2.5E+16"),
        (1e15, "1.0E+15"),
    ],
)
def test_device_accepted(value: Any, expected: str) -> None:
    assert coerce_device(value) == expected


@pytest.mark.parametrize("value", ["", "   ", None, True, False, {}, [], {"id": 1}, ["a"], 10**400])
def test_device_rejected(value: Any) -> None:
    res = coerce_device(value)
    assert isinstance(res, IngestFailure)
    assert res.error is IngestError.INVALID_DEVICE_FIELD
    assert res.message == "Campo device inválido."


@pytest.mark.parametrize(
    "value,expected",
    [
        (24.13, 24.13),
        (7, 7.0),
        (0, 0.0),
        ("24.13", 24.13),
        ("-3", -3.0),
        ("+1.5", 1.5),
        (" 12 ", 12.0),
        (".5", 0.5),
        ("5.", 5.0),
        ("1e3", 1000.0),
        ("-2.5E-2", -0.025),
    ],
)
def test_float_accepted(value: Any, expected: float) -> None:
    res = coerce_float(value, "temp_c")
    assert isinstance(res, float)
    assert res == pytest.approx(expected)


@pytest.mark.parametrize(
    "value",
    ["abc", "", " ", "12abc", "0x1A", "1_000", "inf", "nan", "1e400", True, False, None, [], {}, [1.0], 10**400],
)
def test_float_rejected(value: Any) -> None:
    res = coerce_float(value, "temp_c")
    assert isinstance(res, IngestFailure)
    assert res.error is IngestError.INVALID_NUMERIC_FIELD
    assert res.message == "Campo temp_c inválido (esperado número)."


def test_numeric_string_rule() -> None:
    assert is_numeric_string("  -12.5e3\n")
    assert not is_numeric_string("١٢")  # non-ASCII digits
    assert not is_numeric_string("1.2.3")
    assert not is_numeric_string("e5")


# ---------------------------------------------------------------------------
# validate_reading
# ---------------------------------------------------------------------------


def test_valid_reading(valid_body: dict[str, Any]) -> None:
    res = validate_reading(valid_body)
    assert isinstance(res, Reading)
    assert res.device == "uno_r4_wifi"
    assert res.temp_c == pytest.approx(24.13)
    assert res.altitude_m == pytest.approx(42.8)


def test_string_numbers_coerced(valid_body: dict[str, Any]) -> None:
    valid_body.update(device=42, temp_c="24.13", lux="  100 ")
    res = validate_reading(valid_body)
    assert isinstance(res, Reading)
    assert res.device == "42"
    assert res.temp_c == pytest.approx(24.13)
    assert res.lux == 100.0


@pytest.mark.parametrize("field", READING_FIELDS)
def test_missing_field_named(valid_body: dict[str, Any], field: str) -> None:
    del valid_body[field]
    res = validate_reading(valid_body)
    assert isinstance(res, IngestFailure)
    assert res.error is IngestError.MISSING_FIELD
    assert res.message == f"Campo obrigatório ausente: {field}"


def test_null_is_present_but_invalid(valid_body: dict[str, Any]) -> None:
    valid_body["humidity"] = None
    res = validate_reading(valid_body)
    assert isinstance(res, IngestFailure)
    assert res.error is IngestError.INVALID_NUMERIC_FIELD
    assert res.field == "humidity"


def test_first_bad_field_wins(valid_body: dict[str, Any]) -> None:
    # device is checked (and fails) before temp_c is looked up
    valid_body["device"] = ""
    del valid_body["temp_c"]
    valid_body["lux"] = "abc"
    res = validate_reading(valid_body)
    assert isinstance(res, IngestFailure)
    assert res.error is IngestError.INVALID_DEVICE_FIELD


def test_order_follows_declaration(valid_body: dict[str, Any]) -> None:
    valid_body["altitude_m"] = "x"
    valid_body["pressure_hpa"] = "y"
    res = validate_reading(valid_body)
    assert isinstance(res, IngestFailure)
    assert res.field == "pressure_hpa"


def test_failure_body_hides_details_by_default() -> None:
    failure = IngestFailure(IngestError.STORE_WRITE, details="Duplicate entry")
    assert failure.to_body() == {"ok": False, "error": "Falha ao inserir no banco."}
    assert failure.to_body(expose_details=True)["details"] == "Duplicate entry"
