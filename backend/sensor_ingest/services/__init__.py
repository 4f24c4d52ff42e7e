"""
Services Package
================

The workers behind the endpoints.

- ReadingStore: Writes readings into the database
"""

from .reading_store import (
    ReadingStore,
    StoreError,
    StoreConnectionError,
    StoreWriteError,
    create_store_engine,
    readings_table,
)

__all__ = [
    "ReadingStore",
    "StoreError",
    "StoreConnectionError",
    "StoreWriteError",
    "create_store_engine",
    "readings_table",
]
