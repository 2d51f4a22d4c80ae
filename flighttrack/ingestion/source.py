"""Abstract interface for remote flight data sources."""

from typing import TYPE_CHECKING, List, Protocol, runtime_checkable

if TYPE_CHECKING:
    from flighttrack.ingestion.aviationstack_client import FlightSnapshot


class FlightSourceError(Exception):
    """The remote source could not be reached or returned malformed data."""


@runtime_checkable
class FlightSource(Protocol):
    """Protocol for pluggable flight data sources."""

    def fetch_by_code(self, code: str) -> List['FlightSnapshot']:
        """Fetch snapshots for one flight code. Empty list when unknown."""
        ...

    def fetch_by_route(self, departure_iata: str, arrival_iata: str, limit: int) -> List['FlightSnapshot']:
        """Fetch at most ``limit`` snapshots flying departure -> arrival."""
        ...
