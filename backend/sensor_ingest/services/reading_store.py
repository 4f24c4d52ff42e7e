"""
Reading Store
=============

Writes validated readings into the relational database.

THE TABLE:
---------
The table already exists (we never create or migrate it in production). It
looks like this, with the name coming from DB_TABLE:

    id            auto-increment primary key
    device        text
    temp_c        float
    pressure_hpa  float
    humidity      float
    lux           float
    altitude_m    float
    created_at    timestamp, set by the database at insert time

One reading = one INSERT with bound parameters. Either the whole row lands or
nothing does.

Author: Sensor Ingest Team
"""

import logging
from typing import Optional

from sqlalchemy import (
    Column,
    DateTime,
    Float,
    Integer,
    MetaData,
    String,
    Table,
    create_engine,
    func,
    insert,
)
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from sensor_ingest.config import Config
from sensor_ingest.models import Reading

logger = logging.getLogger(__name__)


class StoreError(Exception):
    """Base class for database failures."""


class StoreConnectionError(StoreError):
    """Could not get a connection to the database."""


class StoreWriteError(StoreError):
    """Connected, but the INSERT failed."""


def readings_table(name: str, metadata: Optional[MetaData] = None) -> Table:
    """
    Describe the readings table.

    Args:
        name: Table name (from DB_TABLE)
        metadata: MetaData to attach to (a fresh one by default)
    """
    return Table(
        name,
        metadata if metadata is not None else MetaData(),
        Column("id", Integer, primary_key=True, autoincrement=True),
        Column("device", String(64), nullable=False),
        Column("temp_c", Float, nullable=False),
        Column("pressure_hpa", Float, nullable=False),
        Column("humidity", Float, nullable=False),
        Column("lux", Float, nullable=False),
        Column("altitude_m", Float, nullable=False),
        Column("created_at", DateTime, nullable=False),
    )


def create_store_engine(config: Config) -> Engine:
    """
    Create a pooled engine for the configured database.

    Nothing connects until the first request needs a connection.
    """
    return create_engine(
        config.sqlalchemy_url(),
        pool_pre_ping=True,
        pool_recycle=config.db_pool_recycle,
    )


class ReadingStore:
    """
    Inserts readings through a SQLAlchemy engine.

    HOW TO USE:
    ----------
    store = ReadingStore(engine, table_name="leituras")
    try:
        new_id = store.insert(reading)
    except StoreConnectionError:
        ...  # database down / wrong credentials
    except StoreWriteError:
        ...  # statement failed
    """

    def __init__(self, engine: Engine, table_name: str):
        self.engine = engine
        self.table = readings_table(table_name)

    def insert(self, reading: Reading) -> int:
        """
        Insert one reading and return its new id.

        `created_at` comes from the database clock, not from us.

        Raises:
            StoreConnectionError: If no connection could be opened
            StoreWriteError: If the INSERT (or its commit) failed
        """
        statement = insert(self.table).values(
            device=reading.device,
            temp_c=reading.temp_c,
            pressure_hpa=reading.pressure_hpa,
            humidity=reading.humidity,
            lux=reading.lux,
            altitude_m=reading.altitude_m,
            created_at=func.now(),
        )

        try:
            connection = self.engine.connect()
        except SQLAlchemyError as e:
            logger.error(f"Database connection failed: {e}")
            raise StoreConnectionError(str(e)) from e

        with connection:
            try:
                with connection.begin():
                    result = connection.execute(statement)
                    new_id = int(result.inserted_primary_key[0])
            except SQLAlchemyError as e:
                logger.error(f"Insert into {self.table.name} failed: {e}")
                raise StoreWriteError(str(e)) from e

        logger.debug(f"Inserted row {new_id} into {self.table.name}")
        return new_id

    def close(self) -> None:
        """Drop every pooled connection."""
        self.engine.dispose()
        logger.info("Database connection pool disposed")
