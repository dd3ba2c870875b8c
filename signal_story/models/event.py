"""Calendar-side models: recurring event definitions and their resolved state."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Optional, Tuple

from .story import Priority


class EventState(str, Enum):
    PREVIEW = "Preview"
    LIVE = "Live"
    WRAP = "Wrap"
    DORMANT = "Dormant"


@dataclass(frozen=True, slots=True)
class DailyFocus:
    """The hub highlighted on one day of a live event."""

    day: int
    name: str
    target_id: str
    description: str = ""


@dataclass(frozen=True, slots=True)
class EventDefinition:
    """A named occurrence that recurs every year in the same month/week."""

    id: str
    name: str
    short_name: str
    city: str
    month: int
    approx_week: int
    duration_days: int
    targets: Tuple[str, ...] = ()
    vibe: str = ""
    venue: str = ""
    website: str = ""
    daily_focuses: Tuple[DailyFocus, ...] = field(default_factory=tuple)


@dataclass(frozen=True, slots=True)
class EventWindow:
    """Concrete dates of an event definition for one year."""

    year: int
    preview_start: date
    start: date
    end: date
    wrap_end: date


@dataclass(frozen=True, slots=True)
class EventResolution:
    """State of an event for a given day, with the window that produced it."""

    event: EventDefinition
    state: EventState
    window: EventWindow
    day_of_event: Optional[int] = None
    focus: Optional[DailyFocus] = None

    @property
    def priority(self) -> Priority:
        return Priority.HERO if self.state is EventState.LIVE else Priority.STANDARD

    @property
    def active(self) -> bool:
        return self.state is not EventState.DORMANT


__all__ = [
    "EventState",
    "DailyFocus",
    "EventDefinition",
    "EventWindow",
    "EventResolution",
]
