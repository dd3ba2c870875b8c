"""Threshold gate and per-target consolidation."""

from __future__ import annotations

from collections import OrderedDict
from dataclasses import dataclass
from typing import Iterable, List, Tuple

from ..models import Cluster, EventResolution

ROUNDUP_MIN_CLUSTERS = 2


def passes_threshold(cluster: Cluster, threshold: int) -> bool:
    return cluster.count >= threshold


def is_active(resolution: EventResolution) -> bool:
    return resolution.active


@dataclass(frozen=True)
class TargetGroup:
    """Qualifying clusters for one logical target, in enumeration order."""

    target_id: str
    clusters: Tuple[Cluster, ...]

    @property
    def is_roundup(self) -> bool:
        return len(self.clusters) >= ROUNDUP_MIN_CLUSTERS

    @property
    def total_count(self) -> int:
        return sum(cluster.count for cluster in self.clusters)


def consolidate(clusters: Iterable[Cluster], threshold: int) -> List[TargetGroup]:
    """Gate *clusters* and merge survivors per target.

    Clusters without a target are dropped. Groups keep the order in which
    their first cluster appeared.
    """
    grouped: "OrderedDict[str, List[Cluster]]" = OrderedDict()
    for cluster in clusters:
        if not cluster.target_id or not passes_threshold(cluster, threshold):
            continue
        grouped.setdefault(cluster.target_id, []).append(cluster)
    return [TargetGroup(target_id, tuple(members)) for target_id, members in grouped.items()]


__all__ = ["ROUNDUP_MIN_CLUSTERS", "passes_threshold", "is_active", "TargetGroup", "consolidate"]
