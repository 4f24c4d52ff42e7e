from datetime import datetime, timezone

import pytest
from sqlalchemy import create_engine

from sensor_ingest.models import Reading
from sensor_ingest.services import (
    ReadingStore,
    StoreConnectionError,
    StoreWriteError,
)

READING = Reading(
    device="uno_r4_wifi",
    temp_c=24.13,
    pressure_hpa=1008.32,
    humidity=55.2,
    lux=123.45,
    altitude_m=42.8,
)


def test_insert_round_trip(engine, fetch_rows) -> None:
    start = datetime.now(timezone.utc).replace(tzinfo=None, microsecond=0)
    store = ReadingStore(engine, "leituras")

    new_id = store.insert(READING)

    assert new_id == 1
    (row,) = fetch_rows()
    assert row["temp_c"] == pytest.approx(24.13)
    assert row["device"] == "uno_r4_wifi"
    assert isinstance(row["created_at"], datetime)
    assert row["created_at"] >= start


def test_unicode_device(engine, fetch_rows) -> None:
    store = ReadingStore(engine, "leituras")
    store.insert(READING.model_copy(update={"device": "estação-☀"}))
    assert fetch_rows()[0]["device"] == "estação-☀"


def test_connection_error() -> None:
    store = ReadingStore(create_engine("sqlite:////nonexistent-dir/readings.db"), "leituras")
    with pytest.raises(StoreConnectionError):
        store.insert(READING)


def test_write_error_leaves_no_row(engine, fetch_rows) -> None:
    store = ReadingStore(engine, "missing_table")
    with pytest.raises(StoreWriteError) as exc_info:
        store.insert(READING)
    assert "no such table" in str(exc_info.value)
    assert fetch_rows() == []
