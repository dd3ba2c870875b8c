"""Singleton accessor for the MongoDB client and the pipeline database."""

from __future__ import annotations

from pymongo import MongoClient
from pymongo.database import Database

from ..config import MONGODB_DATABASE, MONGODB_URI

_client: MongoClient | None = None


def get_mongo_client() -> MongoClient:
    """Return a singleton :class:`pymongo.MongoClient`.

    The client connects lazily, so building it never blocks a run that
    only touches sample data.
    """
    global _client
    if _client is None:
        _client = MongoClient(MONGODB_URI, tz_aware=True)
    return _client


def get_database(name: str | None = None) -> Database:
    """Return the pipeline database (``MONGODB_DATABASE`` unless *name* given)."""
    return get_mongo_client()[name or MONGODB_DATABASE]

__all__ = ["get_mongo_client", "get_database"]
