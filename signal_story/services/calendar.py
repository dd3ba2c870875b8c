"""Calendar state machine for recurring dated events.

Everything here is a pure function of ``(definition, today)``; no state is
persisted between runs.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Iterable, List, Optional

from ..models import EventDefinition, EventResolution, EventState, EventWindow
from ..utils.datetime_utils import ensure_utc
from .gate import is_active

PREVIEW_DAYS = 7
WRAP_DAYS = 3


def _as_date(now: datetime | date) -> date:
    if isinstance(now, datetime):
        return ensure_utc(now).date()
    return now


def event_window(definition: EventDefinition, year: int) -> EventWindow:
    """Concrete dates of *definition* in *year*.

    The event starts on the first Monday on or after the 1st of its month,
    shifted by ``approx_week - 1`` weeks.
    """
    first = date(year, definition.month, 1)
    first_monday = first + timedelta(days=(7 - first.weekday()) % 7)
    start = first_monday + timedelta(weeks=definition.approx_week - 1)
    end = start + timedelta(days=definition.duration_days - 1)
    return EventWindow(
        year=year,
        preview_start=start - timedelta(days=PREVIEW_DAYS),
        start=start,
        end=end,
        wrap_end=end + timedelta(days=WRAP_DAYS),
    )


def classify(window: EventWindow, today: date) -> EventState:
    if window.start <= today <= window.end:
        return EventState.LIVE
    if window.preview_start <= today < window.start:
        return EventState.PREVIEW
    if window.end < today <= window.wrap_end:
        return EventState.WRAP
    return EventState.DORMANT


def resolve_state(definition: EventDefinition, now: datetime | date) -> EventResolution:
    """Resolve the lifecycle state of *definition* on the day of *now*.

    Windows for the previous, current and next year are tried in that order
    so events near a year boundary are classified correctly. Always returns
    exactly one state; ``Dormant`` carries the current year's window.
    """
    today = _as_date(now)
    for year in (today.year - 1, today.year, today.year + 1):
        window = event_window(definition, year)
        state = classify(window, today)
        if state is EventState.DORMANT:
            continue
        if state is EventState.LIVE:
            day = (today - window.start).days + 1
            focus = None
            if definition.daily_focuses:
                focus = definition.daily_focuses[(day - 1) % len(definition.daily_focuses)]
            return EventResolution(definition, state, window, day_of_event=day, focus=focus)
        return EventResolution(definition, state, window)
    return EventResolution(definition, EventState.DORMANT, event_window(definition, today.year))


def active_events(definitions: Iterable[EventDefinition], now: datetime | date) -> List[EventResolution]:
    """Non-dormant resolutions, in definition order."""
    resolutions = (resolve_state(definition, now) for definition in definitions)
    return [resolution for resolution in resolutions if is_active(resolution)]


def sample_moment(definition: EventDefinition, state: EventState, now: datetime | date) -> date:
    """A day on which *definition* is in *state*, for dry runs.

    Uses the window of the current year; ``Dormant`` returns a day well
    outside every window.
    """
    window = event_window(definition, _as_date(now).year)
    if state is EventState.PREVIEW:
        return window.preview_start + timedelta(days=2)
    if state is EventState.LIVE:
        return window.start + timedelta(days=min(1, definition.duration_days - 1))
    if state is EventState.WRAP:
        return window.end + timedelta(days=1)
    return window.wrap_end + timedelta(days=60)


def parse_state(raw: Optional[str]) -> Optional[EventState]:
    """Case-insensitive lookup used by the trigger surfaces."""
    if not raw:
        return None
    for state in EventState:
        if state.value.lower() == raw.strip().lower():
            return state
    raise ValueError(f"unknown event state '{raw}'")


__all__ = [
    "PREVIEW_DAYS",
    "WRAP_DAYS",
    "event_window",
    "classify",
    "resolve_state",
    "active_events",
    "sample_moment",
    "parse_state",
]
