"""Current user selections and the transitions that replace them.

A ``FilterState`` is never mutated. Each transition returns a new state with
exactly one field changed; the host keeps the latest one (in Streamlit,
``st.session_state``).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import date, datetime
from typing import Sequence, Tuple, Union

from .taxonomy import ALL, INCIDENT_CATEGORIES, VENUE_CATEGORIES, check_selection
from .time_window import TimeWindow, map_slider_to_date_range

logger = logging.getLogger(__name__)

DEFAULT_BOUNDS = TimeWindow(datetime(2023, 1, 1), datetime(2023, 12, 31))


@dataclass(frozen=True)
class FilterState:
    incident_category: str = ALL
    venue_category: str = ALL
    time_window: TimeWindow = DEFAULT_BOUNDS


@dataclass(frozen=True)
class SetIncidentCategory:
    category: str


@dataclass(frozen=True)
class SetVenueCategory:
    category: str


@dataclass(frozen=True)
class SetTimeWindow:
    low_pct: float
    high_pct: float


FilterEvent = Union[SetIncidentCategory, SetVenueCategory, SetTimeWindow]


def default_filter_state(bounds: TimeWindow | Tuple[date | datetime, date | datetime] = DEFAULT_BOUNDS) -> FilterState:
    if not isinstance(bounds, TimeWindow):
        bounds = TimeWindow(*bounds)
    return FilterState(incident_category=ALL, venue_category=ALL, time_window=bounds)


def set_incident_category(
    state: FilterState,
    category: str,
    categories: Sequence[str] = INCIDENT_CATEGORIES,
) -> FilterState:
    check_selection(category, categories, kind='incident category')
    return replace(state, incident_category=category)


def set_venue_category(
    state: FilterState,
    category: str,
    categories: Sequence[str] = VENUE_CATEGORIES,
) -> FilterState:
    check_selection(category, categories, kind='venue category')
    return replace(state, venue_category=category)


def set_time_window(
    state: FilterState,
    low_pct: float,
    high_pct: float,
    bounds: TimeWindow | Tuple[date | datetime, date | datetime] = DEFAULT_BOUNDS,
) -> FilterState:
    start, end = map_slider_to_date_range(low_pct, high_pct, bounds)
    return replace(state, time_window=TimeWindow(start, end))


def apply_event(
    state: FilterState,
    event: FilterEvent,
    bounds: TimeWindow | Tuple[date | datetime, date | datetime] = DEFAULT_BOUNDS,
) -> FilterState:
    """Dispatch a widget event to its transition."""
    if isinstance(event, SetIncidentCategory):
        new_state = set_incident_category(state, event.category)
    elif isinstance(event, SetVenueCategory):
        new_state = set_venue_category(state, event.category)
    elif isinstance(event, SetTimeWindow):
        new_state = set_time_window(state, event.low_pct, event.high_pct, bounds)
    else:
        raise TypeError(f'Unsupported filter event: {event!r}')
    logger.debug(f'{event} -> {new_state}')
    return new_state


__all__ = [
    'FilterState',
    'FilterEvent',
    'SetIncidentCategory',
    'SetVenueCategory',
    'SetTimeWindow',
    'DEFAULT_BOUNDS',
    'default_filter_state',
    'set_incident_category',
    'set_venue_category',
    'set_time_window',
    'apply_event',
]
