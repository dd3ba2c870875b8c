"""Domain models used across the project."""

from .signal import Cluster, IngestionResult, Severity, SignalRecord, Trend  # noqa: F401
from .story import (  # noqa: F401
    BundleKind,
    InsertStatus,
    NarrativeDraft,
    Priority,
    PublicationRecord,
    PublishOutcome,
    PublishResult,
    StoryBundle,
    StoryCandidate,
)
from .event import (  # noqa: F401
    DailyFocus,
    EventDefinition,
    EventResolution,
    EventState,
    EventWindow,
)
from .run import RunOptions, RunSummary  # noqa: F401

__all__ = [
    "Cluster",
    "IngestionResult",
    "Severity",
    "SignalRecord",
    "Trend",
    "BundleKind",
    "InsertStatus",
    "NarrativeDraft",
    "Priority",
    "PublicationRecord",
    "PublishOutcome",
    "PublishResult",
    "StoryBundle",
    "StoryCandidate",
    "DailyFocus",
    "EventDefinition",
    "EventResolution",
    "EventState",
    "EventWindow",
    "RunOptions",
    "RunSummary",
]
