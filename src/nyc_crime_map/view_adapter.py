"""Turns derived views into map markers, chart slices and Plotly figures.

The map surface receives point features and calls a per-point style function;
the chart surface receives ordered {category, count} rows. This module never
decides what is visible, it only draws what the filter engine hands over.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, asdict
from typing import Callable, Dict, Iterable, Mapping, Optional, Sequence, Tuple

import pandas as pd
import plotly.express as px
import plotly.graph_objects as go

from .color_scale import ColorScale
from .config import DashboardConfig
from .filter_engine import CategoryCount, DerivedView, derive_view
from .filter_state import FilterState
from .records import IncidentRecord, RecordStore, VenueRecord
from .time_window import TimeWindow
from .utils.exceptions import EmptyDomainError

logger = logging.getLogger(__name__)

MAPBOX_STYLE = 'carto-positron'
VENUE_COLOR = '#2b6cb0'

# Circle marker look for incidents.
INCIDENT_MARKER = {
    'radius': 8,
    'color': '#000',
    'weight': 1,
    'opacity': 1,
    'fillOpacity': 0.8,
}

StyleFunction = Callable[[Dict], Dict]


@dataclass(frozen=True)
class MapMarker:
    lat: float
    lng: float
    color: Optional[str]
    label: Dict


@dataclass(frozen=True)
class ChartSlice:
    category: str
    count: int
    color: str


@dataclass(frozen=True)
class DashboardView:
    """Everything one render of the page needs."""

    derived: DerivedView
    scale: Optional[ColorScale]
    incident_markers: Tuple[MapMarker, ...]
    venue_markers: Tuple[MapMarker, ...]
    chart: Tuple[ChartSlice, ...]


def to_feature(record: IncidentRecord | VenueRecord) -> Dict:
    """GeoJSON point feature carrying the record as its properties."""
    return {
        'type': 'Feature',
        'properties': asdict(record),
        'geometry': {'type': 'Point', 'coordinates': [record.lng, record.lat]},
    }


def severity_style(scale: ColorScale) -> StyleFunction:
    """Per-point style function: circle marker filled by the severity colour."""
    def style(feature: Dict) -> Dict:
        return {**INCIDENT_MARKER, 'fillColor': scale.map(feature['properties']['severity'])}
    return style


def incident_markers(incidents: Iterable[IncidentRecord], style: StyleFunction) -> Tuple[MapMarker, ...]:
    markers = []
    for record in incidents:
        feature = to_feature(record)
        lng, lat = feature['geometry']['coordinates']
        markers.append(MapMarker(
            lat=lat,
            lng=lng,
            color=style(feature)['fillColor'],
            label={'category': record.category, 'severity': record.severity},
        ))
    return tuple(markers)


def venue_markers(venues: Iterable[VenueRecord]) -> Tuple[MapMarker, ...]:
    return tuple(
        MapMarker(lat=v.lat, lng=v.lng, color=None, label={'name': v.name, 'category': v.category})
        for v in venues
    )


def chart_rows(counts: Sequence[CategoryCount], scale: ColorScale) -> Tuple[ChartSlice, ...]:
    """
    Pair each category count with its slice colour.

    Slice ``i`` of ``n`` is coloured ``scale.map(i / n)``, sampling the
    severity scale at evenly spaced positions. With a severity domain above 1
    every sample clamps to the low colour.
    """
    n = len(counts)
    return tuple(
        ChartSlice(category=c.category, count=c.count, color=scale.map(i / n))
        for i, c in enumerate(counts)
    )


def format_window(window: TimeWindow) -> Tuple[str, str]:
    """Start/end labels shown under the date slider."""
    return window.start.strftime('%m/%d/%Y'), window.end.strftime('%m/%d/%Y')


def build_dashboard(store: RecordStore, state: FilterState, config: DashboardConfig) -> DashboardView:
    """
    Derive everything a render needs from the store and the current filter state

    The colour scale is built over the full incident set. When no incidents
    are loaded the scale is None and the incident markers and chart are empty;
    the caller decides what placeholder to show.
    """
    derived = derive_view(store, state, stats_scope=config.stats_scope)
    try:
        scale = ColorScale.build(store.incidents, config.low_color, config.high_color)
    except EmptyDomainError as e:
        logger.info(f'No colour scale for this render: {str(e)}')
        return DashboardView(derived, None, (), venue_markers(derived.visible_venues), ())

    return DashboardView(
        derived=derived,
        scale=scale,
        incident_markers=incident_markers(derived.visible_incidents, severity_style(scale)),
        venue_markers=venue_markers(derived.visible_venues),
        chart=chart_rows(derived.category_counts, scale),
    )


def markers_frame(markers: Iterable[MapMarker]) -> pd.DataFrame:
    rows = [{'lat': m.lat, 'lng': m.lng, 'color': m.color, **m.label} for m in markers]
    return pd.DataFrame(rows)


def build_map_figure(
    incidents: Sequence[MapMarker],
    venues: Sequence[MapMarker],
    center: Optional[Mapping[str, float]] = None,
    zoom: float = 11.0,
) -> go.Figure:
    fig = go.Figure()
    if incidents:
        frame = markers_frame(incidents)
        fig.add_trace(go.Scattermapbox(
            lat=frame['lat'],
            lon=frame['lng'],
            mode='markers',
            name='Incidents',
            marker=dict(
                size=INCIDENT_MARKER['radius'] * 2,
                color=frame['color'].tolist(),
                opacity=INCIDENT_MARKER['fillOpacity'],
            ),
            customdata=frame[['category', 'severity']].to_numpy(),
            hovertemplate='<b>%{customdata[0]}</b><br>Severity: %{customdata[1]}<extra></extra>',
        ))
    if venues:
        frame = markers_frame(venues)
        fig.add_trace(go.Scattermapbox(
            lat=frame['lat'],
            lon=frame['lng'],
            mode='markers',
            name='Public places',
            marker=dict(size=12, color=VENUE_COLOR, symbol='circle'),
            customdata=frame[['name', 'category']].to_numpy(),
            hovertemplate='<b>%{customdata[0]}</b><br>Type: %{customdata[1]}<extra></extra>',
        ))
    center = center or {'lat': 40.7128, 'lon': -74.0060}
    fig.update_layout(
        mapbox=dict(style=MAPBOX_STYLE, center=dict(lat=center['lat'], lon=center['lon']), zoom=zoom),
        margin={'r': 0, 't': 0, 'l': 0, 'b': 0},
        legend=dict(orientation='h', y=1.02, x=0),
    )
    return fig


def build_category_chart(rows: Sequence[ChartSlice]) -> go.Figure:
    frame = pd.DataFrame([asdict(r) for r in rows], columns=['category', 'count', 'color'])
    color_map = dict(zip(frame['category'], frame['color']))
    fig = px.pie(
        frame,
        names='category',
        values='count',
        color='category',
        color_discrete_map=color_map,
        category_orders={'category': frame['category'].tolist()},
    )
    fig.update_traces(textinfo='value', sort=False, marker_line_color='#ffffff', marker_line_width=1)
    fig.update_layout(template='plotly_white', legend_title='Crime type', margin={'r': 0, 't': 10, 'l': 0, 'b': 0})
    return fig


__all__ = [
    'MapMarker',
    'ChartSlice',
    'DashboardView',
    'INCIDENT_MARKER',
    'to_feature',
    'severity_style',
    'incident_markers',
    'venue_markers',
    'chart_rows',
    'format_window',
    'build_dashboard',
    'markers_frame',
    'build_map_figure',
    'build_category_chart',
]
