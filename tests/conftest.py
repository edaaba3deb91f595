import sys
from pathlib import Path

import pytest

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / 'src'))

from nyc_crime_map.records import IncidentRecord, RecordStore, VenueRecord, seed_store


@pytest.fixture
def incidents():
    return (
        IncidentRecord(id=1, category='Theft', lat=40.7128, lng=-74.006, severity=3),
        IncidentRecord(id=2, category='Assault', lat=40.7300, lng=-73.9950, severity=5),
    )


@pytest.fixture
def mixed_incidents():
    # includes an undeclared category and duplicated categories
    return (
        IncidentRecord(id=1, category='Theft', lat=40.71, lng=-74.00, severity=2),
        IncidentRecord(id=2, category='Robbery', lat=40.72, lng=-73.99, severity=4),
        IncidentRecord(id=3, category='Theft', lat=40.73, lng=-73.98, severity=1),
        IncidentRecord(id=4, category='Arson', lat=40.74, lng=-73.97, severity=6),
        IncidentRecord(id=5, category='Burglary', lat=40.75, lng=-73.96, severity=3),
    )


@pytest.fixture
def venues():
    return (
        VenueRecord(id=1, name='Central Park', category='Park', lat=40.7829, lng=-73.9654),
        VenueRecord(id=2, name='Times Square', category='Plaza', lat=40.7580, lng=-73.9855),
        VenueRecord(id=3, name='The Met', category='Museum', lat=40.7794, lng=-73.9632),
    )


@pytest.fixture
def store(incidents, venues):
    return RecordStore.from_records(incidents, venues)


@pytest.fixture
def seed():
    return seed_store()
