"""Signal-side models: raw records, ingestion results and clusters."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple


class Severity(str, Enum):
    """Coarse size classification of a cluster relative to its threshold."""

    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"

    @property
    def rank(self) -> int:
        return _SEVERITY_RANK[self]


_SEVERITY_RANK = {Severity.LOW: 0, Severity.MEDIUM: 1, Severity.HIGH: 2}


class Trend(str, Enum):
    """Size of a cluster relative to its historical baseline."""

    NORMAL = "normal"
    ELEVATED = "elevated"
    SPIKE = "spike"


@dataclass(frozen=True, slots=True)
class SignalRecord:
    """One observed event fetched from an ingestion source.

    ``target_id`` is the logical (pre-resolution) target assigned from the
    coverage table at ingestion time.
    """

    id: str
    domain: str
    category: str
    occurred_at: datetime
    target_id: Optional[str] = None
    address: str = ""
    street: str = ""
    cross_streets: str = ""
    entity_name: str = ""
    descriptor: str = ""
    payload: Dict[str, Any] = field(default_factory=dict)


@dataclass(slots=True)
class IngestionResult:
    """Records returned by a fetch plus the failure reason, if any.

    ``error is None`` means the source answered; an empty ``records`` list is
    then a genuine signal-free window rather than an outage.
    """

    records: List[SignalRecord] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def failed(self) -> bool:
        return self.error is not None

    @property
    def outage(self) -> bool:
        """True when the source failed and nothing usable came back."""
        return self.failed and not self.records

    def __len__(self) -> int:
        return len(self.records)


@dataclass(frozen=True, slots=True)
class Cluster:
    """Records sharing a normalised (location, category) key in one window."""

    key: str
    display_location: str
    category: str
    members: Tuple[SignalRecord, ...]
    severity: Severity
    trend: Trend
    target_id: Optional[str] = None
    baseline: Optional[float] = None
    entity_name: str = ""
    exact_location: bool = False

    @property
    def count(self) -> int:
        return len(self.members)

    @property
    def percent_change(self) -> Optional[int]:
        if not self.baseline:
            return None
        return round((self.count - self.baseline) / self.baseline * 100)

    def descriptors(self, limit: int = 5) -> List[str]:
        """Distinct descriptors of the first *limit* members, in order."""
        seen: List[str] = []
        for record in self.members[:limit]:
            text = record.descriptor or record.category
            if text and text not in seen:
                seen.append(text)
        return seen


__all__ = ["Severity", "Trend", "SignalRecord", "IngestionResult", "Cluster"]
