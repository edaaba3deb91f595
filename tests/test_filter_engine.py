from datetime import date, datetime, timedelta, timezone

import pandas as pd
import pytest

from nyc_crime_map.filter_engine import (
    CategoryCount,
    derive_category_counts,
    derive_view,
    derive_visible_incidents,
    derive_visible_venues,
    map_slider_to_date_range,
)
from nyc_crime_map.filter_state import FilterState, default_filter_state
from nyc_crime_map.records import IncidentRecord, RecordStore
from nyc_crime_map.taxonomy import ALL, INCIDENT_CATEGORIES
from nyc_crime_map.time_window import TimeWindow
from nyc_crime_map.utils.exceptions import ConfigError, InvalidRangeError

BOUNDS = TimeWindow(date(2023, 1, 1), date(2023, 12, 31))


class TestVisibleIncidents:
    def test_category_filter(self, incidents):
        state = FilterState(incident_category='Theft')
        visible = derive_visible_incidents(incidents, state)
        assert [r.id for r in visible] == [1]

    def test_all_returns_input_unchanged(self, mixed_incidents):
        visible = derive_visible_incidents(mixed_incidents, FilterState())
        assert visible == tuple(mixed_incidents)

    @pytest.mark.parametrize('category', [ALL, *INCIDENT_CATEGORIES])
    def test_subset_without_duplicates(self, mixed_incidents, category):
        visible = derive_visible_incidents(mixed_incidents, FilterState(incident_category=category))
        assert set(visible) <= set(mixed_incidents)
        assert len(set(visible)) == len(visible)
        # order preserved
        positions = [mixed_incidents.index(r) for r in visible]
        assert positions == sorted(positions)

    def test_unknown_record_category_only_under_all(self, mixed_incidents):
        assert any(r.category == 'Arson' for r in derive_visible_incidents(mixed_incidents, FilterState()))
        for category in INCIDENT_CATEGORIES:
            visible = derive_visible_incidents(mixed_incidents, FilterState(incident_category=category))
            assert all(r.category == category for r in visible)

    def test_time_window_excludes_timestamped_records(self):
        records = (
            IncidentRecord(id=1, category='Theft', lat=40.7, lng=-74.0, severity=1, occurred_at=date(2023, 3, 1)),
            IncidentRecord(id=2, category='Theft', lat=40.7, lng=-74.0, severity=1, occurred_at=date(2023, 8, 1)),
            IncidentRecord(id=3, category='Theft', lat=40.7, lng=-74.0, severity=1),
        )
        state = FilterState(time_window=TimeWindow(date(2023, 1, 1), date(2023, 6, 30)))
        assert [r.id for r in derive_visible_incidents(records, state)] == [1, 3]

    def test_window_edges_are_inclusive(self):
        records = (
            IncidentRecord(id=1, category='Theft', lat=40.7, lng=-74.0, severity=1, occurred_at=date(2023, 1, 1)),
            IncidentRecord(id=2, category='Theft', lat=40.7, lng=-74.0, severity=1, occurred_at=date(2023, 12, 31)),
            IncidentRecord(id=3, category='Theft', lat=40.7, lng=-74.0, severity=1, occurred_at=datetime(2023, 7, 2, 12, 30)),
        )
        assert len(derive_visible_incidents(records, default_filter_state(BOUNDS))) == 3

    def test_missing_timestamps_pass_any_window(self, incidents):
        narrow = FilterState(time_window=TimeWindow(date(2023, 5, 1), date(2023, 5, 1)))
        assert derive_visible_incidents(incidents, narrow) == tuple(incidents)

    def test_aware_timestamp_compared_as_utc(self):
        eastern = timezone(timedelta(hours=-5))
        records = (
            IncidentRecord(id=1, category='Theft', lat=40.7, lng=-74.0, severity=1, occurred_at=datetime(2023, 3, 1, tzinfo=timezone.utc)),
            # 05:30 UTC on Dec 31, past the midnight end of the window
            IncidentRecord(id=2, category='Theft', lat=40.7, lng=-74.0, severity=1, occurred_at=datetime(2023, 12, 31, 0, 30, tzinfo=eastern)),
        )
        assert [r.id for r in derive_visible_incidents(records, default_filter_state(BOUNDS))] == [1]

    def test_nat_timestamp_passes_window(self):
        records = (
            IncidentRecord(id=1, category='Theft', lat=40.7, lng=-74.0, severity=1, occurred_at=pd.NaT),
            IncidentRecord(id=2, category='Theft', lat=40.7, lng=-74.0, severity=1, occurred_at=None),
        )
        narrow = FilterState(time_window=TimeWindow(date(2023, 5, 1), date(2023, 5, 1)))
        assert [r.id for r in derive_visible_incidents(records, narrow)] == [1, 2]


class TestVisibleVenues:
    def test_category_filter(self, venues):
        visible = derive_visible_venues(venues, FilterState(venue_category='Plaza'))
        assert [v.name for v in visible] == ['Times Square']

    def test_all(self, venues):
        assert derive_visible_venues(venues, FilterState()) == tuple(venues)

    def test_no_match(self, venues):
        assert derive_visible_venues(venues, FilterState(venue_category='Library')) == ()

    def test_ignores_time_window(self, venues):
        narrow = FilterState(time_window=TimeWindow(date(2030, 1, 1), date(2030, 1, 2)))
        assert derive_visible_venues(venues, narrow) == tuple(venues)


class TestCategoryCounts:
    def test_declaration_order_and_zeros(self, mixed_incidents):
        counts = derive_category_counts(mixed_incidents)
        assert counts == (
            CategoryCount('Theft', 2),
            CategoryCount('Assault', 0),
            CategoryCount('Burglary', 1),
            CategoryCount('Robbery', 1),
        )

    def test_count_conservation(self, mixed_incidents):
        counts = derive_category_counts(mixed_incidents)
        known = [r for r in mixed_incidents if r.category in INCIDENT_CATEGORIES]
        assert sum(c.count for c in counts) == len(known)

    def test_all_is_skipped(self, incidents):
        counts = derive_category_counts(incidents, (ALL, 'Assault', 'Theft'))
        assert [c.category for c in counts] == ['Assault', 'Theft']

    def test_empty_input(self):
        assert all(c.count == 0 for c in derive_category_counts([]))


class TestDeriveView:
    def test_full_scope_ignores_category_filter(self, store):
        unfiltered = derive_view(store, FilterState())
        theft_only = derive_view(store, FilterState(incident_category='Theft'))
        assert theft_only.category_counts == unfiltered.category_counts
        assert theft_only.counted_total == 2
        assert [r.id for r in theft_only.visible_incidents] == [1]

    def test_filtered_scope_counts_visible_only(self, store):
        view = derive_view(store, FilterState(incident_category='Theft'), stats_scope='filtered')
        assert dict((c.category, c.count) for c in view.category_counts)['Assault'] == 0
        assert view.counted_total == 1

    def test_unknown_scope(self, store):
        with pytest.raises(ConfigError):
            derive_view(store, FilterState(), stats_scope='weekly')

    def test_store_not_mutated(self, store):
        before = (store.incidents, store.venues)
        derive_view(store, FilterState(incident_category='Assault', venue_category='Park'))
        assert (store.incidents, store.venues) == before

    def test_pending_store(self):
        view = derive_view(RecordStore.pending(), FilterState())
        assert view.visible_incidents == ()
        assert view.counted_total == 0


class TestSliderMapping:
    def test_full_range_maps_to_bounds(self):
        start, end = map_slider_to_date_range(0, 100, BOUNDS)
        assert start == datetime(2023, 1, 1)
        assert end == datetime(2023, 12, 31)

    def test_midpoint(self):
        start, end = map_slider_to_date_range(50, 50, BOUNDS)
        assert start == end == datetime(2023, 7, 2)

    def test_accepts_tuple_bounds(self):
        assert map_slider_to_date_range(0, 100, (date(2023, 1, 1), date(2023, 1, 11)))[1] == datetime(2023, 1, 11)

    def test_monotonic(self):
        starts = [map_slider_to_date_range(low, 100, BOUNDS)[0] for low in range(0, 101)]
        assert starts == sorted(starts)

    def test_start_never_after_end(self):
        for low, high in [(0, 0), (10, 90), (33.3, 33.4), (100, 100)]:
            start, end = map_slider_to_date_range(low, high, BOUNDS)
            assert start <= end

    @pytest.mark.parametrize('low, high', [(60, 40), (-1, 50), (0, 101), (float('nan'), 50), ('low', 10)])
    def test_invalid_ranges(self, low, high):
        with pytest.raises(InvalidRangeError):
            map_slider_to_date_range(low, high, BOUNDS)

    def test_inverted_bounds(self):
        with pytest.raises(InvalidRangeError):
            map_slider_to_date_range(0, 100, (date(2023, 12, 31), date(2023, 1, 1)))
