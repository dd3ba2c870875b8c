"""Service layer modules grouping pipeline stages by concern.

Convenience re-exports so callers can write
`from signal_story.services import cluster_records` without knowing which
module provides the symbol.
"""

from .ingestion import SignalIngestor, SourceSpec  # noqa: F401
from .clustering import ClusterPolicy, build_baseline, cluster_records  # noqa: F401
from .calendar import active_events, event_window, resolve_state, sample_moment  # noqa: F401
from .gate import TargetGroup, consolidate, passes_threshold  # noqa: F401
from .narrative import NarrativeGenerator  # noqa: F401
from .targets import TargetRegistry, TargetResolver  # noqa: F401
from .publisher import IdempotentPublisher, PublicationStore, make_identity_key  # noqa: F401
from .run_log import RunLog  # noqa: F401

__all__ = [
    "SignalIngestor",
    "SourceSpec",
    "ClusterPolicy",
    "build_baseline",
    "cluster_records",
    "active_events",
    "event_window",
    "resolve_state",
    "sample_moment",
    "TargetGroup",
    "consolidate",
    "passes_threshold",
    "NarrativeGenerator",
    "TargetRegistry",
    "TargetResolver",
    "IdempotentPublisher",
    "PublicationStore",
    "make_identity_key",
    "RunLog",
]
