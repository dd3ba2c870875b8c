"""Idempotent publication of story candidates.

The application-level lookup by identity key is a fast path that saves
narrative calls; the unique index on ``identity_key`` is what actually
guarantees one publication per key when two runs overlap.
"""

from __future__ import annotations

import hashlib
import logging
from datetime import date, datetime
from typing import Any, Callable, Dict, Optional

from pymongo import ASCENDING
from pymongo.collection import Collection
from pymongo.errors import DuplicateKeyError, PyMongoError

from ..models import (
    InsertStatus,
    PublicationRecord,
    PublishOutcome,
    PublishResult,
    StoryCandidate,
)
from ..utils.datetime_utils import date_key, get_current_timestamp
from ..utils.text_cleaning import slugify

logger = logging.getLogger(__name__)

IDENTITY_KEY_MAX_CHARS = 200
IDENTITY_KEY_DIGEST_CHARS = 12


def make_identity_key(domain: str, target_id: str, day: datetime | date, *attrs: str) -> str:
    """Deterministic key from domain, logical target, date and attributes.

    The same inputs always give the same key, so re-running a job for the
    same day collapses onto existing publications.
    """
    parts = [slugify(domain), slugify(target_id), date_key(day)]
    parts.extend(slugify(str(attr)) for attr in attrs if str(attr).strip())
    key = ":".join(parts)
    if len(key) <= IDENTITY_KEY_MAX_CHARS:
        return key
    # keep the key unique when long slugs share a prefix
    digest = hashlib.sha1(key.encode("utf-8")).hexdigest()[:IDENTITY_KEY_DIGEST_CHARS]
    return f"{key[: IDENTITY_KEY_MAX_CHARS - IDENTITY_KEY_DIGEST_CHARS - 1]}:{digest}"


class PublicationStore:
    """MongoDB-backed store: ``find_by_identity_key`` / ``insert``."""

    def __init__(self, collection: Collection):
        self._collection = collection

    def ensure_indexes(self) -> None:
        self._collection.create_index(
            [("identity_key", ASCENDING)], unique=True, name="identity_key_unique"
        )

    def find_by_identity_key(self, identity_key: str) -> Optional[Dict[str, Any]]:
        return self._collection.find_one({"identity_key": identity_key}, {"_id": 1})

    def insert(self, record: PublicationRecord) -> InsertStatus:
        """Insert *record*; a duplicate key is a conflict, other errors raise."""
        try:
            self._collection.insert_one(record.to_document())
        except DuplicateKeyError:
            return InsertStatus.CONFLICT
        return InsertStatus.OK


class IdempotentPublisher:
    def __init__(
        self,
        store: PublicationStore,
        clock: Callable[[], datetime] = get_current_timestamp,
    ):
        self._store = store
        self._clock = clock

    def prepare(self) -> None:
        self._store.ensure_indexes()

    def already_published(self, identity_key: str) -> bool:
        return self._store.find_by_identity_key(identity_key) is not None

    def publish(
        self,
        candidate: StoryCandidate,
        target_id: str,
        extra: Optional[Dict[str, Any]] = None,
    ) -> PublishResult:
        """Publish *candidate* under the resolved *target_id*."""
        key = candidate.identity_key
        try:
            if self.already_published(key):
                logger.info("Already published: %s", key)
                return PublishResult(PublishOutcome.ALREADY_EXISTS, key)

            record = PublicationRecord(
                target_id=target_id,
                identity_key=key,
                headline=candidate.headline,
                body=candidate.body,
                preview_text=candidate.preview_text,
                category_label=candidate.category_label,
                published_at=self._clock(),
                priority=candidate.priority,
                domain=candidate.domain,
                prompt_label=candidate.prompt_label,
                extra=dict(extra or {}),
            )
            status = self._store.insert(record)
        except PyMongoError as exc:
            logger.error("Failed to publish %s: %s", key, exc)
            return PublishResult(PublishOutcome.ERROR, key, str(exc))

        if status is InsertStatus.CONFLICT:
            logger.info("Insert conflict for %s; another run published it first", key)
            return PublishResult(PublishOutcome.ALREADY_EXISTS, key)

        logger.info("Published %s -> %s", key, target_id)
        return PublishResult(PublishOutcome.CREATED, key)


__all__ = [
    "IDENTITY_KEY_MAX_CHARS",
    "make_identity_key",
    "PublicationStore",
    "IdempotentPublisher",
]
