"""Filter Engine - pure derivations from records + filter state

Produces the visible incident and venue sets and the per-category counts
that feed the statistics chart. Nothing here mutates its inputs; every call
returns fresh tuples in input order.
"""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass
from typing import Iterable, Sequence, Tuple

from .filter_state import FilterState
from .records import IncidentRecord, RecordStore, VenueRecord
from .taxonomy import ALL, INCIDENT_CATEGORIES
from .time_window import map_slider_to_date_range
from .utils.exceptions import ConfigError

logger = logging.getLogger(__name__)

# Counts cover every incident regardless of the active filter ('full'),
# or only the incidents currently on the map ('filtered').
STATS_SCOPES = ('full', 'filtered')
DEFAULT_STATS_SCOPE = 'full'


@dataclass(frozen=True)
class CategoryCount:
    category: str
    count: int


@dataclass(frozen=True)
class DerivedView:
    visible_incidents: Tuple[IncidentRecord, ...]
    visible_venues: Tuple[VenueRecord, ...]
    category_counts: Tuple[CategoryCount, ...]

    @property
    def counted_total(self) -> int:
        return sum(c.count for c in self.category_counts)


def _matches(selection: str, category: str) -> bool:
    return selection == ALL or category == selection


def derive_visible_incidents(incidents: Iterable[IncidentRecord], filter_state: FilterState) -> Tuple[IncidentRecord, ...]:
    """
    Incidents matching the selected category and the time window.

    Records without ``occurred_at`` are never dropped by the time window.
    """
    window = filter_state.time_window
    return tuple(
        r for r in incidents
        if _matches(filter_state.incident_category, r.category) and window.contains(r.occurred_at)
    )


def derive_visible_venues(venues: Iterable[VenueRecord], filter_state: FilterState) -> Tuple[VenueRecord, ...]:
    # venues are places, not events: no time filtering
    return tuple(v for v in venues if _matches(filter_state.venue_category, v.category))


def derive_category_counts(
    incidents: Iterable[IncidentRecord],
    known_categories: Sequence[str] = INCIDENT_CATEGORIES,
) -> Tuple[CategoryCount, ...]:
    """
    Count incidents per declared category

    Args:
    incidents (Iterable[IncidentRecord]): Records to count
    known_categories (Sequence[str]): Declared categories, in legend order. ALL is skipped

    Returns:
    tuple: One CategoryCount per declared category, in declaration order. Undeclared categories are not counted
    """
    tally = Counter(r.category for r in incidents)
    return tuple(CategoryCount(category=c, count=tally.get(c, 0)) for c in known_categories if c != ALL)


def derive_view(
    store: RecordStore,
    filter_state: FilterState,
    stats_scope: str = DEFAULT_STATS_SCOPE,
    known_categories: Sequence[str] = INCIDENT_CATEGORIES,
) -> DerivedView:
    if stats_scope not in STATS_SCOPES:
        raise ConfigError(f'Unknown statistics scope {stats_scope!r}; expected one of {STATS_SCOPES}')

    visible_incidents = derive_visible_incidents(store.incidents, filter_state)
    visible_venues = derive_visible_venues(store.venues, filter_state)
    counted = store.incidents if stats_scope == 'full' else visible_incidents
    counts = derive_category_counts(counted, known_categories)

    logger.debug(
        f'Derived view: {len(visible_incidents)}/{len(store.incidents)} incidents, '
        f'{len(visible_venues)}/{len(store.venues)} venues, {sum(c.count for c in counts)} counted ({stats_scope})'
    )
    return DerivedView(visible_incidents, visible_venues, counts)


__all__ = [
    'CategoryCount',
    'DerivedView',
    'STATS_SCOPES',
    'DEFAULT_STATS_SCOPE',
    'derive_visible_incidents',
    'derive_visible_venues',
    'derive_category_counts',
    'derive_view',
    'map_slider_to_date_range',
]
