"""Pytest configuration and fixtures."""

import sys
from pathlib import Path
from typing import Optional

import pytest

# Ensure the package is importable when running tests without installing it
root = Path(__file__).resolve().parent.parent
if str(root) not in sys.path:
    sys.path.insert(0, str(root))

from flighttrack.history import HistoryStore  # noqa: E402
from flighttrack.ingestion.aviationstack_client import AirportTimes, FlightSnapshot  # noqa: E402


def make_snapshot(
    flight_code: Optional[str] = "AA100",
    dep_iata: Optional[str] = "LAX",
    arr_iata: Optional[str] = "JFK",
    dep_scheduled: Optional[str] = "2024-01-01T10:00:00",
    arr_scheduled: Optional[str] = "2024-01-01T12:30:00",
    dep_actual: Optional[str] = None,
    arr_actual: Optional[str] = None,
    airline_name: Optional[str] = "American Airlines",
) -> FlightSnapshot:
    return FlightSnapshot(
        flight_code=flight_code,
        status="active",
        departure=AirportTimes(
            airport="Los Angeles International",
            iata=dep_iata,
            scheduled=dep_scheduled,
            actual=dep_actual,
        ),
        arrival=AirportTimes(
            airport="John F Kennedy International",
            iata=arr_iata,
            scheduled=arr_scheduled,
            actual=arr_actual,
        ),
        airline_name=airline_name,
    )


@pytest.fixture
def db_url(tmp_path) -> str:
    return f"sqlite:///{tmp_path / 'history.db'}"


@pytest.fixture
def store(db_url):
    s = HistoryStore(db_url).open()
    yield s
    s.close()
