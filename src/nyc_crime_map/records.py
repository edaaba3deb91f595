"""In-memory record store for incidents and public places.

Records arrive already parsed; the store only holds them. ``seed_store`` ships
the sample NYC records the dashboard starts with.
"""

from __future__ import annotations

from dataclasses import dataclass, asdict
from datetime import date, datetime
from typing import Iterable, Optional, Tuple

import pandas as pd


@dataclass(frozen=True)
class IncidentRecord:
    id: int
    category: str
    lat: float
    lng: float
    severity: float
    # Seed data carries no timestamp; the time window lets such records through.
    occurred_at: Optional[date | datetime] = None


@dataclass(frozen=True)
class VenueRecord:
    id: int
    name: str
    category: str
    lat: float
    lng: float


INCIDENT_COLUMNS = ['id', 'category', 'lat', 'lng', 'severity', 'occurred_at']
VENUE_COLUMNS = ['id', 'name', 'category', 'lat', 'lng']


@dataclass(frozen=True)
class RecordStore:
    """Immutable collections of incidents and venues.

    ``loaded`` is False until the data-acquisition side has handed records
    over, so "nothing loaded yet" is distinguishable from "loaded, but empty".
    """

    incidents: Tuple[IncidentRecord, ...] = ()
    venues: Tuple[VenueRecord, ...] = ()
    loaded: bool = True

    @classmethod
    def from_records(cls, incidents: Iterable[IncidentRecord], venues: Iterable[VenueRecord]) -> "RecordStore":
        return cls(incidents=tuple(incidents), venues=tuple(venues), loaded=True)

    @classmethod
    def pending(cls) -> "RecordStore":
        return cls(loaded=False)

    @property
    def has_incidents(self) -> bool:
        return self.loaded and len(self.incidents) > 0


SEED_INCIDENTS: Tuple[IncidentRecord, ...] = (
    IncidentRecord(id=1, category='Theft', lat=40.7128, lng=-74.006, severity=3),
    IncidentRecord(id=2, category='Assault', lat=40.7300, lng=-73.9950, severity=5),
)

SEED_VENUES: Tuple[VenueRecord, ...] = (
    VenueRecord(id=1, name='Central Park', category='Park', lat=40.7829, lng=-73.9654),
    VenueRecord(id=2, name='Times Square', category='Plaza', lat=40.7580, lng=-73.9855),
)


def seed_store() -> RecordStore:
    return RecordStore.from_records(SEED_INCIDENTS, SEED_VENUES)


def incidents_frame(incidents: Iterable[IncidentRecord]) -> pd.DataFrame:
    """Incidents as a DataFrame (one row per record, input order kept)."""
    rows = [asdict(r) for r in incidents]
    if not rows:
        return pd.DataFrame(columns=INCIDENT_COLUMNS)
    return pd.DataFrame(rows, columns=INCIDENT_COLUMNS)


def venues_frame(venues: Iterable[VenueRecord]) -> pd.DataFrame:
    rows = [asdict(r) for r in venues]
    if not rows:
        return pd.DataFrame(columns=VENUE_COLUMNS)
    return pd.DataFrame(rows, columns=VENUE_COLUMNS)


__all__ = [
    'IncidentRecord',
    'VenueRecord',
    'RecordStore',
    'SEED_INCIDENTS',
    'SEED_VENUES',
    'seed_store',
    'incidents_frame',
    'venues_frame',
]
