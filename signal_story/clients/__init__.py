"""Convenience re-exports for singleton SDK accessors."""

from .openai_client import get_openai  # noqa: F401
from .mongodb_client import get_database, get_mongo_client  # noqa: F401
from .opendata_client import get_session as get_opendata_session  # noqa: F401

__all__ = [
    "get_openai",
    "get_database",
    "get_mongo_client",
    "get_opendata_session",
]
