"""Cluster & anomaly engine.

Records are grouped by a normalised ``(location, category)`` key inside the
run window, gated by a per-domain threshold, and labelled with a severity
(size vs. threshold) and a trend (size vs. historical baseline).
"""

from __future__ import annotations

import logging
import re
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, FrozenSet, Iterable, List, Mapping, Optional, Tuple

from ..models import Cluster, Severity, SignalRecord, Trend
from ..utils.datetime_utils import ensure_utc
from ..utils.text_cleaning import collapse_whitespace, slugify, title_case

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ClusterPolicy:
    """Per-domain clustering constants.

    ``threshold`` is the gate; severity and trend boundaries are expressed as
    multiples of the threshold and of the baseline respectively.
    """

    threshold: int = 5
    high_factor: float = 3.0
    medium_factor: float = 1.5
    spike_factor: float = 2.0
    elevated_factor: float = 1.2
    exact_location_categories: FrozenSet[str] = field(default_factory=frozenset)
    group_by_entity: bool = False


# ---------------------------------------------------------------------------
# Pure classification helpers
# ---------------------------------------------------------------------------

def severity_for(count: int, policy: ClusterPolicy) -> Severity:
    if count >= policy.high_factor * policy.threshold:
        return Severity.HIGH
    if count >= policy.medium_factor * policy.threshold:
        return Severity.MEDIUM
    return Severity.LOW


def trend_for(count: int, baseline: Optional[float], policy: ClusterPolicy) -> Trend:
    """Classify *count* against *baseline*; no history means ``elevated``."""
    if not baseline:
        return Trend.ELEVATED
    if count >= policy.spike_factor * baseline:
        return Trend.SPIKE
    if count >= policy.elevated_factor * baseline:
        return Trend.ELEVATED
    return Trend.NORMAL


# ---------------------------------------------------------------------------
# Location normalisation
# ---------------------------------------------------------------------------

_HOUSE_NUMBER = re.compile(r"^(\d+)")


def block_location(address: str, street: str = "", cross_streets: str = "") -> str:
    """Round an address to ``"N00 Block of <Street>"`` for privacy.

    Falls back to the bare street, then the cross streets. Returns ``""``
    when nothing usable is present.
    """
    address = collapse_whitespace(address)
    resolved_street = title_case(collapse_whitespace(street) or re.sub(r"^\d+[-\s]*", "", address))

    match = _HOUSE_NUMBER.match(address)
    if match and resolved_street:
        block = int(match.group(1)) // 100 * 100
        if block == 0:
            return resolved_street
        return f"{block} Block of {resolved_street}"

    if resolved_street:
        return resolved_street
    if cross_streets.strip():
        return title_case(collapse_whitespace(cross_streets))
    return ""


def normalize_location(record: SignalRecord, policy: ClusterPolicy) -> Tuple[str, str]:
    """Return ``(grouping_key, display_location)`` for *record*.

    Both are empty when the record carries no usable location.
    """
    if record.category in policy.exact_location_categories and record.address.strip():
        display = title_case(collapse_whitespace(record.address))
    else:
        display = block_location(record.address, record.street, record.cross_streets)
    return display.lower(), display


def cluster_key(location_key: str, category: str, entity: str = "") -> str:
    parts = [slugify(category), slugify(location_key)]
    if entity:
        parts.append(slugify(entity))
    return ":".join(parts)


# ---------------------------------------------------------------------------
# Baseline
# ---------------------------------------------------------------------------

def build_baseline(
    history: Iterable[SignalRecord],
    policy: ClusterPolicy,
    windows: int,
    before: datetime,
) -> Dict[str, float]:
    """Mean count per cluster key over *windows* preceding windows.

    *history* must already be limited to those windows by the caller; only
    records strictly before *before* (the current window start) are used.
    """
    if windows <= 0:
        return {}
    cutoff = ensure_utc(before)
    counts: Dict[str, int] = defaultdict(int)
    for record in history:
        if ensure_utc(record.occurred_at) >= cutoff:
            continue
        location_key, _ = normalize_location(record, policy)
        if not location_key:
            continue
        entity = record.entity_name if policy.group_by_entity else ""
        counts[cluster_key(location_key, record.category, entity)] += 1
    return {key: total / windows for key, total in counts.items()}


# ---------------------------------------------------------------------------
# Clustering
# ---------------------------------------------------------------------------

def cluster_records(
    records: Iterable[SignalRecord],
    policy: ClusterPolicy,
    window_start: datetime,
    window_end: datetime,
    baseline: Optional[Mapping[str, float]] = None,
) -> List[Cluster]:
    """Group *records* into gated clusters, most severe first."""
    start = ensure_utc(window_start)
    end = ensure_utc(window_end)
    baseline = baseline or {}

    groups: Dict[str, List[SignalRecord]] = defaultdict(list)
    displays: Dict[str, str] = {}
    seen_ids = set()
    skipped_window = skipped_location = 0

    for record in records:
        occurred = ensure_utc(record.occurred_at)
        if occurred < start or occurred > end:
            skipped_window += 1
            continue
        location_key, display = normalize_location(record, policy)
        if not location_key:
            skipped_location += 1
            continue
        # duplicate delivery from the source must not inflate counts
        if (record.domain, record.id) in seen_ids:
            continue
        seen_ids.add((record.domain, record.id))

        entity = record.entity_name if policy.group_by_entity else ""
        key = cluster_key(location_key, record.category, entity)
        groups[key].append(record)
        displays.setdefault(key, display)

    if skipped_window or skipped_location:
        logger.debug(
            "Dropped %d records outside the window and %d without a location",
            skipped_window,
            skipped_location,
        )

    clusters: List[Cluster] = []
    for key, members in groups.items():
        if len(members) < policy.threshold:
            continue
        first = members[0]
        history = baseline.get(key)
        clusters.append(
            Cluster(
                key=key,
                display_location=displays[key],
                category=first.category,
                members=tuple(members),
                severity=severity_for(len(members), policy),
                trend=trend_for(len(members), history, policy),
                target_id=first.target_id,
                baseline=history,
                entity_name=first.entity_name if policy.group_by_entity else "",
                exact_location=first.category in policy.exact_location_categories,
            )
        )

    clusters.sort(key=lambda c: (-c.severity.rank, -c.count))
    logger.info("Clustered %d groups -> %d above threshold %d", len(groups), len(clusters), policy.threshold)
    return clusters


__all__ = [
    "ClusterPolicy",
    "severity_for",
    "trend_for",
    "block_location",
    "normalize_location",
    "cluster_key",
    "build_baseline",
    "cluster_records",
]
