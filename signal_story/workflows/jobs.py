"""Job registry: wires catalog data and clients into pipelines.

This is the only place that reads module-level configuration; everything
below it receives coverage, thresholds, calendars and budgets explicitly.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Optional, Tuple

import requests
from openai import OpenAI
from pymongo.database import Database

from .. import config
from ..catalog.calendars import ART_FAIR_PREFIXES, ART_FAIRS, CITY_PREFIXES, DESIGN_WEEKS
from ..catalog.coverage import NYC_COVERAGE, CoverageTable
from ..catalog.editorial import (
    ART_FAIR_EDITORIAL,
    DESIGN_WEEK_EDITORIAL,
    LIQUOR_EDITORIAL,
    NUISANCE_EDITORIAL,
    PERMIT_EDITORIAL,
)
from ..catalog.sources import (
    COMPLAINT_SIGNALS,
    COMPLAINTS,
    EXACT_LOCATION_COMPLAINTS,
    LICENSE_CATEGORIES,
    LICENSES,
    PERMITS,
    SOURCES,
    sample_records,
)
from ..clients.mongodb_client import get_database
from ..services.clustering import ClusterPolicy
from ..services.ingestion import SignalIngestor
from ..services.narrative import NarrativeGenerator
from ..services.publisher import IdempotentPublisher, PublicationStore
from ..services.run_log import RunLog
from ..services.targets import TargetRegistry, TargetResolver
from .coordinator import BatchRunCoordinator
from .pipeline import SignalStoryPipeline
from .strategies import CalendarStrategy, ClusterStrategy, DetectionStrategy

NYC_PREFIXES: Tuple[str, ...] = ("nyc-",)


@dataclass
class JobContext:
    """External collaborators shared by every job of one process."""

    database: Database
    coverage: CoverageTable = NYC_COVERAGE
    openai_client: Optional[OpenAI] = None
    session: Optional[requests.Session] = None


@dataclass(frozen=True)
class JobSpec:
    name: str
    description: str
    build_strategy: Callable[[JobContext], DetectionStrategy]
    role: str
    guidance: str
    default_days: int = config.DEFAULT_WINDOW_DAYS
    batch_delay: float = config.BATCH_DELAY_SECONDS
    resolver_prefixes: Tuple[str, ...] = ()


def _cluster_job(domain: str, policy: ClusterPolicy, editorial, baseline_windows: int, signals=None):
    def build(ctx: JobContext) -> DetectionStrategy:
        return ClusterStrategy(
            domain=domain,
            ingestor=SignalIngestor(SOURCES, ctx.coverage, session=ctx.session),
            coverage=ctx.coverage,
            policy=policy,
            editorial=editorial,
            sample_source=sample_records,
            ingest_limit=config.INGEST_LIMIT,
            baseline_windows=baseline_windows,
            alias_prefixes=NYC_PREFIXES,
            signals=signals,
        )

    return build


JOBS: Dict[str, JobSpec] = {
    spec.name: spec
    for spec in (
        JobSpec(
            name="nuisance-watch",
            description="311 complaint hotspots and spikes",
            build_strategy=_cluster_job(
                COMPLAINTS,
                ClusterPolicy(threshold=5, exact_location_categories=EXACT_LOCATION_COMPLAINTS),
                NUISANCE_EDITORIAL,
                config.BASELINE_WINDOWS,
                COMPLAINT_SIGNALS,
            ),
            role=NUISANCE_EDITORIAL.role,
            guidance=NUISANCE_EDITORIAL.guidance,
            resolver_prefixes=NYC_PREFIXES,
        ),
        JobSpec(
            name="permit-watch",
            description="Clusters of notable building filings",
            build_strategy=_cluster_job(
                PERMITS,
                ClusterPolicy(threshold=3),
                PERMIT_EDITORIAL,
                config.BASELINE_WINDOWS,
            ),
            role=PERMIT_EDITORIAL.role,
            guidance=PERMIT_EDITORIAL.guidance,
            resolver_prefixes=NYC_PREFIXES,
        ),
        JobSpec(
            name="liquor-watch",
            description="Pending liquor license applications",
            build_strategy=_cluster_job(
                LICENSES,
                ClusterPolicy(
                    threshold=1,
                    exact_location_categories=frozenset(LICENSE_CATEGORIES),
                    group_by_entity=True,
                ),
                LIQUOR_EDITORIAL,
                0,
            ),
            role=LIQUOR_EDITORIAL.role,
            guidance=LIQUOR_EDITORIAL.guidance,
            default_days=30,
            batch_delay=0.3,
            resolver_prefixes=NYC_PREFIXES,
        ),
        JobSpec(
            name="design-week",
            description="Design week previews, daily live coverage and wraps",
            build_strategy=lambda ctx: CalendarStrategy(
                "design-weeks", DESIGN_WEEKS, DESIGN_WEEK_EDITORIAL, CITY_PREFIXES
            ),
            role=DESIGN_WEEK_EDITORIAL.role,
            guidance=DESIGN_WEEK_EDITORIAL.guidance,
        ),
        JobSpec(
            name="art-fairs",
            description="Art fair previews, live coverage and highlights",
            build_strategy=lambda ctx: CalendarStrategy("art-fairs", ART_FAIRS, ART_FAIR_EDITORIAL),
            role=ART_FAIR_EDITORIAL.role,
            guidance=ART_FAIR_EDITORIAL.guidance,
            resolver_prefixes=ART_FAIR_PREFIXES,
        ),
    )
}

JOB_NAMES: Tuple[str, ...] = tuple(JOBS)


def build_job(name: str, context: Optional[JobContext] = None) -> SignalStoryPipeline:
    """Assemble the pipeline for job *name*; raises ``KeyError`` if unknown."""
    spec = JOBS[name]
    ctx = context or JobContext(database=get_database())
    db = ctx.database

    return SignalStoryPipeline(
        job_name=spec.name,
        strategy=spec.build_strategy(ctx),
        narrative=NarrativeGenerator(spec.role, spec.guidance, client=ctx.openai_client),
        resolver=TargetResolver(TargetRegistry(db[config.TARGETS_COLLECTION]), spec.resolver_prefixes),
        publisher=IdempotentPublisher(PublicationStore(db[config.PUBLICATIONS_COLLECTION])),
        run_log=RunLog(db[config.RUN_LOG_COLLECTION]),
        coordinator=BatchRunCoordinator(
            time_budget=config.RUN_TIME_BUDGET_SECONDS,
            concurrency=config.BATCH_CONCURRENCY,
            batch_delay=spec.batch_delay,
        ),
        default_days=spec.default_days,
    )


__all__ = ["JOBS", "JOB_NAMES", "JobContext", "JobSpec", "build_job"]
