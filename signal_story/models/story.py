"""Story-side models: bundles, narrative drafts, candidates and publications."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional, Tuple


class Priority(str, Enum):
    STANDARD = "Standard"
    HERO = "Hero"


class BundleKind(str, Enum):
    STANDALONE = "standalone"
    ROUNDUP = "roundup"
    EVENT = "event"


@dataclass(frozen=True, slots=True)
class StoryBundle:
    """Everything the narrative generator needs for one story.

    A bundle is produced by a detection strategy after gating and
    consolidation. ``targets`` lists the logical targets the resulting
    story is published against; ``identity_attrs`` are the distinguishing
    attributes that, with domain/target/date, form each identity key.
    """

    domain: str
    kind: BundleKind
    label: str
    targets: Tuple[str, ...]
    identity_attrs: Tuple[str, ...]
    context: Dict[str, Any]
    fallback_headline: str
    fallback_preview: str
    category_label: str
    priority: Priority = Priority.STANDARD
    alias_prefixes: Tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class NarrativeDraft:
    headline: str
    preview_text: str
    body: str


@dataclass(frozen=True, slots=True)
class StoryCandidate:
    """A written story for one logical target, ready to publish."""

    domain: str
    target_id: str
    identity_key: str
    headline: str
    body: str
    preview_text: str
    category_label: str
    priority: Priority = Priority.STANDARD
    prompt_label: str = ""


@dataclass(slots=True)
class PublicationRecord:
    """The durable output row; one per distinct identity key."""

    target_id: str
    identity_key: str
    headline: str
    body: str
    preview_text: str
    category_label: str
    published_at: datetime
    priority: Priority = Priority.STANDARD
    domain: str = ""
    prompt_label: str = ""
    extra: Dict[str, Any] = field(default_factory=dict)

    def to_document(self) -> Dict[str, Any]:
        document: Dict[str, Any] = {
            "identity_key": self.identity_key,
            "neighborhood_id": self.target_id,
            "headline": self.headline,
            "body_text": self.body,
            "preview_text": self.preview_text,
            "category_label": self.category_label,
            "status": "published",
            "published_at": self.published_at,
            "author_type": "ai",
            "domain": self.domain,
            "ai_prompt": self.prompt_label,
            "priority": self.priority.value,
        }
        if self.priority is Priority.HERO:
            document["is_pinned"] = True
        document.update(self.extra)
        return document


class InsertStatus(str, Enum):
    OK = "ok"
    CONFLICT = "conflict"


class PublishOutcome(str, Enum):
    CREATED = "created"
    ALREADY_EXISTS = "already_exists"
    ERROR = "error"


@dataclass(frozen=True, slots=True)
class PublishResult:
    outcome: PublishOutcome
    identity_key: str
    message: Optional[str] = None


__all__ = [
    "Priority",
    "BundleKind",
    "StoryBundle",
    "NarrativeDraft",
    "StoryCandidate",
    "PublicationRecord",
    "InsertStatus",
    "PublishOutcome",
    "PublishResult",
]
