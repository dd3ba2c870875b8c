"""Run summary written once per batch execution."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from .event import EventState


@dataclass(frozen=True, slots=True)
class RunOptions:
    """Per-execution overrides accepted by the trigger surfaces.

    ``days=None`` means the job's default window. ``target`` restricts the
    run to a single logical target. ``sample`` swaps live ingestion for
    synthetic records; ``sample_state`` picks the lifecycle state a calendar
    job is moved into for that dry run.
    """

    days: Optional[int] = None
    target: Optional[str] = None
    sample: bool = False
    sample_state: Optional[EventState] = None
    now: Optional[datetime] = None


@dataclass(slots=True)
class RunSummary:
    job_name: str
    started_at: datetime
    completed_at: Optional[datetime] = None
    success: bool = False
    records_scanned: int = 0
    detected: int = 0
    stories_generated: int = 0
    published: int = 0
    skipped: int = 0
    hero_published: int = 0
    budget_exhausted: bool = False
    ingestion_failed: bool = False
    errors: List[str] = field(default_factory=list)
    counters: Dict[str, Counter] = field(default_factory=dict)

    def add_error(self, label: str, error: object) -> None:
        self.errors.append(f"{label}: {error}")

    def bump(self, counter: str, key: str, amount: int = 1) -> None:
        """Increment ``counters[counter][key]``; used for per-domain breakdowns."""
        self.counters.setdefault(counter, Counter())[key] += amount

    def finalize(self, success: bool, completed_at: datetime) -> "RunSummary":
        self.success = success
        self.completed_at = completed_at
        return self

    def to_document(self) -> Dict[str, Any]:
        return {
            "job_name": self.job_name,
            "started_at": self.started_at,
            "completed_at": self.completed_at,
            "success": self.success,
            "errors": list(self.errors) or None,
            "response_data": {
                "records_scanned": self.records_scanned,
                "detected": self.detected,
                "stories_generated": self.stories_generated,
                "published": self.published,
                "skipped": self.skipped,
                "hero_published": self.hero_published,
                "budget_exhausted": self.budget_exhausted,
                "ingestion_failed": self.ingestion_failed,
                **{name: dict(counts) for name, counts in self.counters.items()},
            },
        }

    def to_response(self) -> Dict[str, Any]:
        """JSON-safe rendering for the HTTP and CLI surfaces."""
        document = self.to_document()
        return {
            "job_name": self.job_name,
            "success": self.success,
            "started_at": self.started_at.isoformat(),
            "completed_at": self.completed_at.isoformat() if self.completed_at else None,
            **document["response_data"],
            "errors": list(self.errors),
        }


__all__ = ["RunOptions", "RunSummary"]
