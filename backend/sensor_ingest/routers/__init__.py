"""
Routers Package
===============

Routers direct incoming requests to the right place.
"""

from .ingest import create_ingest_router, get_config, get_store

__all__ = [
    "create_ingest_router",
    "get_config",
    "get_store",
]
