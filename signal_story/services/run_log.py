"""Append-only run log: one document per job execution."""

from __future__ import annotations

import logging

from pymongo.collection import Collection
from pymongo.errors import PyMongoError

from ..models import RunSummary

logger = logging.getLogger(__name__)


class RunLog:
    def __init__(self, collection: Collection):
        self._collection = collection

    def write(self, summary: RunSummary) -> bool:
        """Store *summary*; a storage failure is logged, never raised."""
        try:
            result = self._collection.insert_one(summary.to_document())
        except PyMongoError as exc:
            logger.error("Failed to write run log for %s: %s", summary.job_name, exc)
            return False
        logger.info("Stored run summary for %s with _id=%s", summary.job_name, result.inserted_id)
        return True


__all__ = ["RunLog"]
