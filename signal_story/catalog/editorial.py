"""Editorial voice and labelling per domain.

Prompt wording is deliberately short: the narrative generator is an opaque
collaborator and these strings only frame the structured context it gets.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict

from ..models import EventState, Severity, Trend

_BASE_ROLE = (
    "You are the local desk editor of a neighborhood newsletter. You write short, "
    "factual, slightly wry dispatches for residents. Never invent names, numbers or "
    "quotes that are not in the supplied context."
)


@dataclass(frozen=True)
class ClusterEditorial:
    """Labels and framing for a cluster-driven domain."""

    domain: str
    noun: str
    alert_label: str
    watch_label: str
    routine_label: str
    roundup_label: str
    guidance: str
    role: str = _BASE_ROLE

    def label_for(self, severity: Severity, trend: Trend) -> str:
        if trend is Trend.SPIKE and severity is Severity.HIGH:
            return self.alert_label
        if trend is Trend.SPIKE:
            return self.watch_label
        return self.routine_label

    def fallback_headline(self, count: int, location: str, entity: str = "") -> str:
        if entity:
            return f"{self.watch_label}: {entity} at {location}"
        noun = self.noun if count != 1 else self.noun.rstrip("s")
        return f"{self.watch_label}: {count} {noun} near {location}"

    def roundup_headline(self, clusters: int, target_name: str) -> str:
        return f"{self.roundup_label}: {clusters} hotspots in {target_name}"


@dataclass(frozen=True)
class CalendarEditorial:
    """Labels and framing for a calendar-driven domain."""

    domain: str
    label: str
    guidance: str
    state_labels: Dict[EventState, str] = field(default_factory=dict)
    focus_in_live_label: bool = False
    role: str = _BASE_ROLE

    def label_for(self, state: EventState, focus_name: str = "") -> str:
        if state is EventState.LIVE and self.focus_in_live_label and focus_name:
            return f"{self.label}: {focus_name}"
        suffix = self.state_labels.get(state, state.value)
        return f"{self.label}: {suffix}"


NUISANCE_EDITORIAL = ClusterEditorial(
    domain="complaints",
    noun="complaints",
    alert_label="Community Alert",
    watch_label="Nuisance Watch",
    routine_label="Block Watch",
    roundup_label="Nuisance Roundup",
    guidance=(
        "Report a quality-of-life hotspot built from 311 complaints. Name the block, "
        "the kind of complaint and whether it is unusual for the block. Commercial "
        "venues may be named by address; residential locations stay at block level."
    ),
)

PERMIT_EDITORIAL = ClusterEditorial(
    domain="permits",
    noun="filings",
    alert_label="Permit Alert",
    watch_label="Permit Watch",
    routine_label="Permit Block Watch",
    roundup_label="Permit Roundup",
    guidance=(
        "Report a burst of building filings on one block. Say what is being built or "
        "fitted out and what it could mean for the street; filings are plans, not "
        "openings."
    ),
)

LIQUOR_EDITORIAL = ClusterEditorial(
    domain="licenses",
    noun="applications",
    alert_label="Last Call: Application",
    watch_label="Last Call: Application",
    routine_label="Last Call: Application",
    roundup_label="Last Call: Roundup",
    guidance=(
        "Report a pending liquor license application. Name the business and the "
        "address, describe the license type in plain words and note that the "
        "application is pending, not granted."
    ),
)

DESIGN_WEEK_EDITORIAL = CalendarEditorial(
    domain="design-weeks",
    label="Design Week",
    guidance=(
        "Cover an international design week for readers who live in or travel to the "
        "host city. Preview: what to book and where to go. Live: the day's focus "
        "district. Wrap: the talking points."
    ),
    focus_in_live_label=True,
)

ART_FAIR_EDITORIAL = CalendarEditorial(
    domain="art-fairs",
    label="Art Fair",
    guidance=(
        "Cover a major art fair for collectors and curious locals. Preview: VIP days "
        "and satellite shows. Live: the fair floor. Wrap: sales and highlights."
    ),
    state_labels={
        EventState.PREVIEW: "VIP Preview",
        EventState.LIVE: "Live Coverage",
        EventState.WRAP: "Highlights",
    },
)

__all__ = [
    "ClusterEditorial",
    "CalendarEditorial",
    "NUISANCE_EDITORIAL",
    "PERMIT_EDITORIAL",
    "LIQUOR_EDITORIAL",
    "DESIGN_WEEK_EDITORIAL",
    "ART_FAIR_EDITORIAL",
]
