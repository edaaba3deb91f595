"""Filter-and-derive core for the NYC crime and public places map."""

from .color_scale import ColorScale
from .config import DashboardConfig, load_config
from .filter_engine import (
    CategoryCount,
    DerivedView,
    derive_category_counts,
    derive_view,
    derive_visible_incidents,
    derive_visible_venues,
    map_slider_to_date_range,
)
from .filter_state import (
    FilterState,
    SetIncidentCategory,
    SetTimeWindow,
    SetVenueCategory,
    apply_event,
    default_filter_state,
    set_incident_category,
    set_time_window,
    set_venue_category,
)
from .records import IncidentRecord, RecordStore, VenueRecord, seed_store
from .taxonomy import ALL, INCIDENT_CATEGORIES, VENUE_CATEGORIES
from .time_window import TimeWindow

__all__ = [
    'ALL',
    'INCIDENT_CATEGORIES',
    'VENUE_CATEGORIES',
    'IncidentRecord',
    'VenueRecord',
    'RecordStore',
    'seed_store',
    'ColorScale',
    'TimeWindow',
    'FilterState',
    'SetIncidentCategory',
    'SetVenueCategory',
    'SetTimeWindow',
    'default_filter_state',
    'set_incident_category',
    'set_venue_category',
    'set_time_window',
    'apply_event',
    'CategoryCount',
    'DerivedView',
    'derive_visible_incidents',
    'derive_visible_venues',
    'derive_category_counts',
    'derive_view',
    'map_slider_to_date_range',
    'DashboardConfig',
    'load_config',
]
