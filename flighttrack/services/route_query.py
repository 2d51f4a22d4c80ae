"""
Route query service - on-demand duration lookup for any route.

Fetches a handful of current flights for a departure/arrival pair,
computes each flight's duration and the average over those that could be
computed. Nothing is persisted; the history store is only fed by the
ingestion pipeline.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, List

from flighttrack.analytics import mean_duration
from flighttrack.ingestion.normalizer import compute_duration_minutes
from flighttrack.ingestion.source import FlightSource, FlightSourceError
from flighttrack.models import UNKNOWN_CODE

logger = logging.getLogger(__name__)


class RouteQueryError(Exception):
    """The flight source could not be queried for the route."""


class QueryStatus(str, Enum):
    """
    Outcome of a route query.

    - OK: at least one flight with a computable duration
    - NO_DATA: the source returned no flights at all
    - NO_VALID_DATA: flights were returned but none had usable times
    """
    OK = 'ok'
    NO_DATA = 'no_data'
    NO_VALID_DATA = 'no_valid_data'


STATUS_MESSAGES = {
    QueryStatus.OK: None,
    QueryStatus.NO_DATA: 'No flight data found.',
    QueryStatus.NO_VALID_DATA: 'No valid flight data available.',
}


@dataclass
class RouteFlight:
    """Display-ready flight with its computed duration."""
    flight_code: str
    airline_name: str
    departure_airport: str
    arrival_airport: str
    duration_minutes: int

    def to_dict(self) -> dict:
        return {
            'flight_code': self.flight_code,
            'airline_name': self.airline_name,
            'departure_airport': self.departure_airport,
            'arrival_airport': self.arrival_airport,
            'duration_minutes': self.duration_minutes,
        }


@dataclass
class RouteQueryResult:
    """Flights that survived normalization plus their mean duration."""
    departure_iata: str
    arrival_iata: str
    status: QueryStatus
    flights: List[RouteFlight] = field(default_factory=list)
    average_duration: Optional[float] = None
    fetched: int = 0
    skipped: int = 0

    @property
    def message(self) -> Optional[str]:
        return STATUS_MESSAGES[self.status]

    @property
    def has_data(self) -> bool:
        return self.status == QueryStatus.OK

    def to_dict(self) -> dict:
        return {
            'departure_iata': self.departure_iata,
            'arrival_iata': self.arrival_iata,
            'status': self.status.value,
            'message': self.message,
            'flights': [f.to_dict() for f in self.flights],
            'average_duration': (
                round(self.average_duration, 2) if self.average_duration is not None else None
            ),
            'fetched': self.fetched,
            'skipped': self.skipped,
        }


def _require_code(value: Optional[str]) -> str:
    code = (value or '').strip().upper()
    if not code:
        raise ValueError('Please provide both departure and arrival IATA codes.')
    return code


class RouteQueryService:
    """Stateless route lookups; safe to call concurrently."""

    def __init__(self, source: FlightSource, limit: int = 5):
        self.source = source
        self.limit = limit

    def query(self, departure_iata: str, arrival_iata: str, limit: Optional[int] = None) -> RouteQueryResult:
        """
        Fetch and normalize up to ``limit`` flights for the route.

        Raises:
            ValueError if either code is blank
            RouteQueryError if the flight source fails
        """
        dep = _require_code(departure_iata)
        arr = _require_code(arrival_iata)
        limit = limit if limit is not None else self.limit
        if limit < 1:
            raise ValueError('Limit must be at least 1.')

        try:
            snapshots = self.source.fetch_by_route(dep, arr, limit)
        except FlightSourceError as e:
            logger.error(f'Route query {dep} -> {arr} failed: {e}')
            raise RouteQueryError(f'Error: {e}') from e

        batch = snapshots[:limit]
        if not batch:
            return RouteQueryResult(dep, arr, QueryStatus.NO_DATA)

        flights = []
        skipped = 0
        for snapshot in batch:
            duration = compute_duration_minutes(snapshot.departure, snapshot.arrival)
            if duration is None:
                skipped += 1
                continue
            flights.append(RouteFlight(
                flight_code=snapshot.flight_code or UNKNOWN_CODE,
                airline_name=snapshot.airline_name or UNKNOWN_CODE,
                departure_airport=(snapshot.departure.airport if snapshot.departure else None) or UNKNOWN_CODE,
                arrival_airport=(snapshot.arrival.airport if snapshot.arrival else None) or UNKNOWN_CODE,
                duration_minutes=duration,
            ))

        logger.info(f'Route query {dep} -> {arr}: {len(flights)} of {len(batch)} flights usable')

        return RouteQueryResult(
            departure_iata=dep,
            arrival_iata=arr,
            status=QueryStatus.OK if flights else QueryStatus.NO_VALID_DATA,
            flights=flights,
            average_duration=mean_duration(f.duration_minutes for f in flights),
            fetched=len(batch),
            skipped=skipped,
        )
