"""
AviationStack API client.

Handles communication with the AviationStack ``/flights`` endpoint:
- Lookup of a single flight by IATA code (real-time tracking)
- Lookup of flights by departure/arrival airport (route history)
- Error handling: transport errors, HTTP errors and API error payloads
  are all raised as FlightSourceError

Response format (abridged):
    {
      "data": [
        {
          "flight_status": "active",
          "flight": {"iata": "AA100", "icao": "AAL100", "number": "100"},
          "departure": {"airport": "...", "iata": "LAX", "scheduled": "2024-01-01T10:00:00+00:00", "actual": null, ...},
          "arrival": {...},
          "airline": {"name": "American Airlines", ...},
          "aircraft": {"registration": "N123AA", ...},
          "live": {"latitude": 35.1, "longitude": -100.2, "altitude": 10000, ...}
        }
      ]
    }
"""

import logging
from dataclasses import dataclass, asdict
from typing import Optional, List, Any, Dict

import requests

from flighttrack.config import AviationStackConfig
from flighttrack.ingestion.source import FlightSourceError

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = 'http://api.aviationstack.com/v1'


def _section(data: Dict[str, Any], key: str) -> Dict[str, Any]:
    """Nested object or an empty dict when absent/null."""
    value = data.get(key)
    return value if isinstance(value, dict) else {}


def _text(data: Dict[str, Any], key: str) -> Optional[str]:
    """String field, or None when absent or of another JSON type."""
    value = data.get(key)
    return value if isinstance(value, str) else None


@dataclass
class AirportTimes:
    """Departure or arrival side of a flight."""
    airport: Optional[str] = None
    iata: Optional[str] = None
    icao: Optional[str] = None
    terminal: Optional[str] = None
    gate: Optional[str] = None
    delay: Optional[int] = None
    scheduled: Optional[str] = None
    actual: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'AirportTimes':
        return cls(
            airport=_text(data, 'airport'),
            iata=_text(data, 'iata'),
            icao=_text(data, 'icao'),
            terminal=data.get('terminal'),
            gate=data.get('gate'),
            delay=data.get('delay'),
            scheduled=_text(data, 'scheduled'),
            actual=_text(data, 'actual'),
        )


@dataclass
class LivePosition:
    """Live telemetry, only reported while the aircraft is airborne."""
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    altitude: Optional[float] = None
    heading: Optional[float] = None
    speed_horizontal: Optional[float] = None
    is_ground: Optional[bool] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'LivePosition':
        return cls(
            latitude=data.get('latitude'),
            longitude=data.get('longitude'),
            altitude=data.get('altitude'),
            heading=data.get('direction'),
            speed_horizontal=data.get('speed_horizontal'),
            is_ground=data.get('is_ground'),
        )


@dataclass
class FlightSnapshot:
    """
    One point-in-time flight record from AviationStack.

    Kept raw: times are the unparsed strings from the API.
    """
    flight_code: Optional[str]
    status: Optional[str]
    departure: Optional[AirportTimes]
    arrival: Optional[AirportTimes]
    flight_icao: Optional[str] = None
    flight_number: Optional[str] = None
    airline_name: Optional[str] = None
    aircraft_registration: Optional[str] = None
    live: Optional[LivePosition] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Optional['FlightSnapshot']:
        """
        Parse one element of the response ``data`` array.

        Returns None if the element is not an object.
        """
        if not isinstance(data, dict):
            return None

        flight = _section(data, 'flight')
        departure = data.get('departure')
        arrival = data.get('arrival')
        live = data.get('live')

        return cls(
            flight_code=_text(flight, 'iata'),
            flight_icao=_text(flight, 'icao'),
            flight_number=flight.get('number'),
            status=data.get('flight_status'),
            departure=AirportTimes.from_dict(departure) if isinstance(departure, dict) else None,
            arrival=AirportTimes.from_dict(arrival) if isinstance(arrival, dict) else None,
            airline_name=_text(_section(data, 'airline'), 'name'),
            aircraft_registration=_text(_section(data, 'aircraft'), 'registration'),
            live=LivePosition.from_dict(live) if isinstance(live, dict) else None,
        )

    def to_dict(self) -> dict:
        """Convert to JSON-serializable dict for API responses."""
        return asdict(self)


class AviationStackClient:
    """
    Client for the AviationStack flights endpoint.

    Every request carries the access key and the configured timeout;
    no request blocks longer than ``timeout`` seconds.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 10.0,
        session: Optional[requests.Session] = None,
    ):
        self.api_key = api_key
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.session = session or requests.Session()

        if not self.api_key:
            logger.warning('AviationStack API key not configured - requests will be rejected')

    @classmethod
    def from_config(cls, config: AviationStackConfig) -> 'AviationStackClient':
        """Create client from application configuration."""
        return cls(
            api_key=config.api_key,
            base_url=config.base_url,
            timeout=config.timeout_seconds,
        )

    def fetch_by_code(self, code: str) -> List[FlightSnapshot]:
        """Fetch snapshots for a flight IATA code (e.g. AA100)."""
        return self._get_flights({'flight_iata': code.strip()})

    def fetch_by_route(self, departure_iata: str, arrival_iata: str, limit: int) -> List[FlightSnapshot]:
        """Fetch up to ``limit`` snapshots for a departure/arrival pair."""
        snapshots = self._get_flights({
            'dep_iata': departure_iata.strip(),
            'arr_iata': arrival_iata.strip(),
            'limit': limit,
        })
        return snapshots[:limit]

    def _get_flights(self, params: Dict[str, Any]) -> List[FlightSnapshot]:
        """
        Issue one GET against ``/flights``.

        Raises:
            FlightSourceError on network, HTTP or API-level errors and on
            responses that are not the expected JSON shape.
        """
        url = f'{self.base_url}/flights'
        query = dict(params, access_key=self.api_key or '')

        logger.debug(f'Fetching flights: {url} params={params}')

        try:
            response = self.session.get(url, params=query, timeout=self.timeout)
            response.raise_for_status()
            data = response.json()

        except requests.exceptions.Timeout as e:
            logger.error('AviationStack API timeout')
            raise FlightSourceError(f'Request timed out after {self.timeout}s') from e
        except requests.exceptions.HTTPError as e:
            status = e.response.status_code if e.response is not None else 'unknown'
            logger.error(f'AviationStack API error: {status}')
            raise FlightSourceError(f'HTTP {status} from flight data service') from e
        except requests.exceptions.RequestException as e:
            logger.error(f'AviationStack request failed: {e}')
            raise FlightSourceError(str(e)) from e
        except ValueError as e:
            logger.error(f'AviationStack returned invalid JSON: {e}')
            raise FlightSourceError('Malformed response from flight data service') from e

        if not isinstance(data, dict):
            raise FlightSourceError('Malformed response from flight data service')

        if data.get('error'):
            error = data['error']
            message = error.get('message') if isinstance(error, dict) else str(error)
            logger.warning(f'AviationStack API error: {message}')
            raise FlightSourceError(message or 'Flight data service returned an error')

        items = data.get('data')
        if not isinstance(items, list):
            raise FlightSourceError('Malformed response from flight data service')

        logger.info(f'Received {len(items)} flights from AviationStack')

        snapshots = []
        for item in items:
            snapshot = FlightSnapshot.from_dict(item)
            if snapshot is not None:
                snapshots.append(snapshot)

        return snapshots
