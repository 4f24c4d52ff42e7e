from collections.abc import Callable, Iterator
from typing import Any

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, select
from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool

from sensor_ingest.config import Config
from sensor_ingest.main import create_app
from sensor_ingest.services import readings_table

API_KEY = "secret123"
TABLE = "leituras"


@pytest.fixture
def config() -> Config:
    return Config(api_key=API_KEY, db_table=TABLE, db_driver="sqlite", database_url="sqlite://")


@pytest.fixture
def engine() -> Iterator[Engine]:
    # One shared in-memory database for every connection the pool hands out
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    readings_table(TABLE).create(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def client(config: Config, engine: Engine) -> TestClient:
    return TestClient(create_app(config, engine))


@pytest.fixture
def auth_headers() -> dict[str, str]:
    return {"X-API-Key": API_KEY}


@pytest.fixture
def valid_body() -> dict[str, Any]:
    return {
        "device": "uno_r4_wifi",
        "temp_c": 24.13,
        "pressure_hpa": 1008.32,
        "humidity": 55.2,
        "lux": 123.45,
        "altitude_m": 42.8,
    }


@pytest.fixture
def fetch_rows(engine: Engine) -> Callable[[], list[dict[str, Any]]]:
    table = readings_table(TABLE)

    def _fetch() -> list[dict[str, Any]]:
        with engine.connect() as conn:
            return [dict(row) for row in conn.execute(select(table).order_by(table.c.id)).mappings()]

    return _fetch
