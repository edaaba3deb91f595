import warnings

import streamlit as st
from pathlib import Path
import sys

ROOT = Path(__file__).resolve().parent
SRC_DIR = ROOT / 'src'
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from nyc_crime_map import (
    ALL,
    INCIDENT_CATEGORIES,
    VENUE_CATEGORIES,
    SetIncidentCategory,
    SetTimeWindow,
    SetVenueCategory,
    apply_event,
    default_filter_state,
    load_config,
    seed_store,
)
from nyc_crime_map.records import incidents_frame, venues_frame
from nyc_crime_map.taxonomy import category_options
from nyc_crime_map.utils import ConfigError, CrimeMapException, setup_logger
from nyc_crime_map.view_adapter import (
    build_category_chart,
    build_dashboard,
    build_map_figure,
    format_window,
)

warnings.filterwarnings('ignore', message='.*scattermapbox.*', category=DeprecationWarning)

PLOTLY_CONFIG = {
    'scrollZoom': True,
    'displaylogo': False,
    'modeBarButtonsToRemove': ['lasso2d', 'select2d']
}


@st.cache_resource(show_spinner=False)
def load_store():
    # Data acquisition is external; the dashboard ships with the seed records.
    return seed_store()


def _select_index(options, current):
    return list(options).index(current) if current in options else 0


def sidebar_filters(state, config, logger):
    """Render the filter widgets and fold their values into a new FilterState."""
    st.sidebar.header('Filters')

    incident_options = category_options(INCIDENT_CATEGORIES)
    crime_type = st.sidebar.selectbox(
        'Crime Type',
        incident_options,
        index=_select_index(incident_options, state.incident_category),
        key='crime_type',
    )
    place_options = category_options(VENUE_CATEGORIES)
    place_type = st.sidebar.selectbox(
        'Place Type',
        place_options,
        index=_select_index(place_options, state.venue_category),
        key='place_type',
    )
    low_pct, high_pct = st.sidebar.slider('Date Range', min_value=0, max_value=100, value=(0, 100), step=1, key='date_range')

    events = []
    if crime_type != state.incident_category:
        events.append(SetIncidentCategory(crime_type))
    if place_type != state.venue_category:
        events.append(SetVenueCategory(place_type))
    events.append(SetTimeWindow(low_pct, high_pct))

    for event in events:
        state = apply_event(state, event, config.bounds)
    logger.debug(f'Filter state now {state}')

    start_label, end_label = format_window(state.time_window)
    left, right = st.sidebar.columns(2)
    left.caption(start_label)
    right.caption(end_label)
    return state


def main():
    st.set_page_config(page_title='NYC Crime and Public Places Map', layout='wide')
    st.markdown('## NYC Crime and Public Places Map')

    try:
        config = load_config()
    except ConfigError as err:
        st.error(str(err))
        st.stop()

    logger = setup_logger('nyc_crime_map', log_dir=config.log_dir)

    store = load_store()
    if 'filter_state' not in st.session_state:
        st.session_state['filter_state'] = default_filter_state(config.bounds)

    try:
        state = sidebar_filters(st.session_state['filter_state'], config, logger)
    except CrimeMapException as err:
        logger.error(f'Rejected filter input: {str(err)}')
        st.error(str(err))
        st.stop()
    st.session_state['filter_state'] = state

    view = build_dashboard(store, state, config)
    derived = view.derived

    stats_col, map_col = st.columns([1, 3], gap='large')

    with stats_col:
        st.markdown('### Crime Statistics')
        if view.scale is None:
            st.info('Crime statistics appear once incident records are loaded.')
        else:
            scope_note = 'all incidents' if config.stats_scope == 'full' else 'incidents matching the filters'
            st.caption(f'Counts cover {scope_note}.')
            st.plotly_chart(build_category_chart(view.chart), use_container_width=True, config=PLOTLY_CONFIG)
        st.metric('Incidents shown', f'{len(derived.visible_incidents):,}')
        st.metric('Public places shown', f'{len(derived.visible_venues):,}')

    with map_col:
        if view.scale is None and store.loaded:
            st.info('No incident records to plot; showing public places only.')
        elif not store.loaded:
            st.info('Records are still loading.')
        map_fig = build_map_figure(
            view.incident_markers,
            view.venue_markers,
            center=config.map_center,
            zoom=config.map_zoom,
        )
        st.plotly_chart(map_fig, use_container_width=True, config=PLOTLY_CONFIG)
        if state.incident_category != ALL and not derived.visible_incidents:
            st.caption(f'No {state.incident_category} incidents in the selected window.')

    st.markdown('### Visible records')
    incidents_tab, places_tab = st.tabs(['Incidents', 'Public places'])
    with incidents_tab:
        st.dataframe(incidents_frame(derived.visible_incidents), hide_index=True, use_container_width=True)
    with places_tab:
        st.dataframe(venues_frame(derived.visible_venues), hide_index=True, use_container_width=True)


if __name__ == '__main__':
    main()
