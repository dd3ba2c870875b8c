"""Pipeline orchestration: strategies, the generic pipeline and job wiring."""

from .coordinator import BatchRunCoordinator  # noqa: F401
from .strategies import CalendarStrategy, ClusterStrategy, Detection, DetectionStrategy  # noqa: F401
from .pipeline import SignalStoryPipeline  # noqa: F401
from .jobs import JOB_NAMES, JOBS, JobContext, build_job  # noqa: F401

__all__ = [
    "BatchRunCoordinator",
    "CalendarStrategy",
    "ClusterStrategy",
    "Detection",
    "DetectionStrategy",
    "SignalStoryPipeline",
    "JOB_NAMES",
    "JOBS",
    "JobContext",
    "build_job",
]
