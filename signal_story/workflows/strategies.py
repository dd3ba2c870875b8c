"""Detection strategies: turn a run's inputs into story bundles.

Both strategies share the same contract so the pipeline skeleton is written
once; a new domain plugs in by configuring one of them.
"""

from __future__ import annotations

import logging
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence

from ..catalog.coverage import CoverageTable
from ..catalog.editorial import CalendarEditorial, ClusterEditorial
from ..models import (
    BundleKind,
    Cluster,
    EventResolution,
    EventState,
    EventDefinition,
    RunOptions,
    RunSummary,
    SignalRecord,
    StoryBundle,
)
from ..services.calendar import active_events, resolve_state, sample_moment
from ..services.clustering import ClusterPolicy, build_baseline, cluster_records
from ..services.gate import TargetGroup, consolidate
from ..services.ingestion import SignalIngestor
from ..utils.text_cleaning import title_case

logger = logging.getLogger(__name__)

SampleSource = Callable[[str, datetime, CoverageTable], List[SignalRecord]]


@dataclass
class Detection:
    """Bundles to write, plus whether the signal source was down entirely."""

    bundles: List[StoryBundle] = field(default_factory=list)
    outage: bool = False


class DetectionStrategy(ABC):
    domain: str

    @abstractmethod
    def detect(self, options: RunOptions, now: datetime, summary: RunSummary) -> Detection:
        """Detect noteworthy patterns and fill the scan/detect counters."""


def display_target(target_id: str, prefixes: Sequence[str] = ()) -> str:
    """``"nyc-west-village"`` -> ``"West Village"``."""
    name = target_id
    for prefix in prefixes:
        if name.startswith(prefix):
            name = name[len(prefix) :]
            break
    return title_case(name.replace("-", " "))


# ---------------------------------------------------------------------------
# Cluster strategy
# ---------------------------------------------------------------------------


class ClusterStrategy(DetectionStrategy):
    """Ingest records, cluster them and consolidate survivors per target."""

    def __init__(
        self,
        domain: str,
        ingestor: SignalIngestor,
        coverage: CoverageTable,
        policy: ClusterPolicy,
        editorial: ClusterEditorial,
        sample_source: SampleSource,
        ingest_limit: int,
        baseline_windows: int,
        max_candidates: int = 10,
        alias_prefixes: Sequence[str] = (),
        signals: Optional[Mapping[str, str]] = None,
    ):
        self.domain = domain
        self.ingestor = ingestor
        self.coverage = coverage
        self.policy = policy
        self.editorial = editorial
        self.sample_source = sample_source
        self.ingest_limit = ingest_limit
        self.baseline_windows = baseline_windows
        self.max_candidates = max_candidates
        self.alias_prefixes = tuple(alias_prefixes)
        self.signals = dict(signals or {})

    def _records(self, since: datetime, now: datetime, options: RunOptions, summary: RunSummary) -> Optional[List[SignalRecord]]:
        if options.sample:
            logger.info("Using sample %s records", self.domain)
            return self.sample_source(self.domain, now, self.coverage)

        result = self.ingestor.fetch(self.domain, since, self.ingest_limit)
        if result.failed:
            summary.ingestion_failed = True
            summary.add_error("ingestion", result.error)
        if result.outage:
            return None
        return result.records

    def detect(self, options: RunOptions, now: datetime, summary: RunSummary) -> Detection:
        days = options.days or 1
        window_start = now - timedelta(days=days)
        since = window_start - timedelta(days=days * self.baseline_windows)

        records = self._records(since, now, options, summary)
        if records is None:
            logger.error("Ingestion outage for %s; nothing to cluster", self.domain)
            return Detection(outage=True)

        summary.records_scanned = sum(1 for r in records if r.occurred_at >= window_start)
        baseline = build_baseline(records, self.policy, self.baseline_windows, window_start)
        clusters = cluster_records(records, self.policy, window_start, now, baseline)
        if options.target:
            clusters = [c for c in clusters if c.target_id == options.target]

        summary.detected = len(clusters)
        for cluster in clusters:
            summary.bump("by_category", cluster.category)
            summary.bump("by_severity", cluster.severity.value)
            summary.bump("by_trend", cluster.trend.value)

        groups = consolidate(clusters, self.policy.threshold)
        if len(groups) > self.max_candidates:
            logger.info("Capping %d candidate stories at %d", len(groups), self.max_candidates)
            groups = groups[: self.max_candidates]

        bundles = [self._bundle(group, days) for group in groups]
        logger.info(
            "%s: %d records -> %d clusters -> %d stories", self.domain, len(records), len(clusters), len(bundles)
        )
        return Detection(bundles=bundles)

    def _cluster_context(self, cluster: Cluster) -> Dict[str, Any]:
        context: Dict[str, Any] = {
            "category": cluster.category,
            "location": cluster.display_location,
            "exact_location": cluster.exact_location,
            "count": cluster.count,
            "severity": cluster.severity.value,
            "trend": cluster.trend.value,
            "baseline": cluster.baseline,
            "percent_change": cluster.percent_change,
            "details": cluster.descriptors(),
        }
        if cluster.category in self.signals:
            context["signal"] = self.signals[cluster.category]
        if cluster.entity_name:
            context["business_name"] = cluster.entity_name
        return context

    def _bundle(self, group: TargetGroup, days: int) -> StoryBundle:
        target_name = display_target(group.target_id, self.alias_prefixes)
        if group.is_roundup:
            return StoryBundle(
                domain=self.domain,
                kind=BundleKind.ROUNDUP,
                label=f"{target_name} {self.domain} roundup",
                targets=(group.target_id,),
                identity_attrs=("roundup",),
                context={
                    "neighborhood": target_name,
                    "window_days": days,
                    "total_count": group.total_count,
                    "clusters": [self._cluster_context(c) for c in group.clusters],
                },
                fallback_headline=self.editorial.roundup_headline(len(group.clusters), target_name),
                fallback_preview=(
                    f"{len(group.clusters)} {self.domain} hotspots in {target_name} over the last {days} days."
                ),
                category_label=self.editorial.roundup_label,
                alias_prefixes=self.alias_prefixes,
            )

        cluster = group.clusters[0]
        if cluster.entity_name:
            identity_attrs = (cluster.entity_name,)
        else:
            identity_attrs = (cluster.category, cluster.display_location)
        return StoryBundle(
            domain=self.domain,
            kind=BundleKind.STANDALONE,
            label=f"{cluster.display_location} ({cluster.entity_name or cluster.category})",
            targets=(group.target_id,),
            identity_attrs=identity_attrs,
            context={"neighborhood": target_name, "window_days": days, **self._cluster_context(cluster)},
            fallback_headline=self.editorial.fallback_headline(
                cluster.count, cluster.display_location, cluster.entity_name
            ),
            fallback_preview=(
                f"{cluster.count} {cluster.category.lower()} {self.editorial.noun} near "
                f"{cluster.display_location} in the last {days} days."
            ),
            category_label=self.editorial.label_for(cluster.severity, cluster.trend),
            alias_prefixes=self.alias_prefixes,
        )


# ---------------------------------------------------------------------------
# Calendar strategy
# ---------------------------------------------------------------------------


class CalendarStrategy(DetectionStrategy):
    """Resolve every event definition for today and fan active ones out."""

    def __init__(
        self,
        domain: str,
        events: Sequence[EventDefinition],
        editorial: CalendarEditorial,
        city_prefixes: Optional[Mapping[str, str]] = None,
    ):
        self.domain = domain
        self.events = tuple(events)
        self.editorial = editorial
        self.city_prefixes = dict(city_prefixes or {})

    def _resolutions(self, options: RunOptions, now: datetime) -> List[EventResolution]:
        if options.sample:
            if not self.events:
                return []
            event = self.events[0]
            state = options.sample_state or EventState.LIVE
            moment = sample_moment(event, state, now)
            logger.info("Sample mode: evaluating %s on %s (%s)", event.id, moment, state.value)
            return [resolve_state(event, moment)]
        return active_events(self.events, now)

    def detect(self, options: RunOptions, now: datetime, summary: RunSummary) -> Detection:
        resolutions = self._resolutions(options, now)
        summary.records_scanned = len(self.events)

        bundles: List[StoryBundle] = []
        for resolution in resolutions:
            targets = resolution.event.targets
            if options.target:
                if options.target not in targets:
                    continue
                targets = (options.target,)
            summary.bump("by_state", resolution.state.value)
            bundles.append(self._bundle(resolution, targets))

        summary.detected = len(bundles)
        logger.info("%s: %d/%d events active", self.domain, len(bundles), len(self.events))
        return Detection(bundles=bundles)

    def _bundle(self, resolution: EventResolution, targets: Sequence[str]) -> StoryBundle:
        event = resolution.event
        window = resolution.window
        state = resolution.state
        focus = resolution.focus

        identity_attrs = [event.id, state.value]
        if resolution.day_of_event:
            identity_attrs.append(f"day{resolution.day_of_event}")

        context: Dict[str, Any] = {
            "event": event.name,
            "city": event.city,
            "venue": event.venue,
            "website": event.website,
            "vibe": event.vibe,
            "state": state.value,
            "start_date": window.start.isoformat(),
            "end_date": window.end.isoformat(),
            "duration_days": event.duration_days,
        }
        if resolution.day_of_event:
            context["day_of_event"] = resolution.day_of_event
        if focus is not None:
            context["focus"] = {"name": focus.name, "district": focus.target_id, "description": focus.description}

        if state is EventState.PREVIEW:
            headline = f"{event.name} opens {window.start:%B} {window.start.day}"
        elif state is EventState.LIVE:
            headline = f"{event.short_name} Day {resolution.day_of_event}: {focus.name if focus else event.venue}"
        else:
            headline = f"{event.name}: the takeaways"

        prefix = self.city_prefixes.get(event.city)
        return StoryBundle(
            domain=self.domain,
            kind=BundleKind.EVENT,
            label=f"{event.name} ({state.value})",
            targets=tuple(targets),
            identity_attrs=tuple(identity_attrs),
            context=context,
            fallback_headline=headline,
            fallback_preview=re.split(r"(?<=\.)\s", event.vibe, maxsplit=1)[0],
            category_label=self.editorial.label_for(state, focus.name if focus else ""),
            priority=resolution.priority,
            alias_prefixes=(prefix,) if prefix else (),
        )


__all__ = ["Detection", "DetectionStrategy", "ClusterStrategy", "CalendarStrategy", "display_target"]
