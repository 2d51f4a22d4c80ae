"""Unit tests for AviationStack API data retrieval."""

from unittest.mock import MagicMock

import pytest
import requests

from flighttrack.ingestion.aviationstack_client import AviationStackClient, FlightSnapshot
from flighttrack.ingestion.source import FlightSource, FlightSourceError

FLIGHT_ITEM = {
    "flight_date": "2024-01-01",
    "flight_status": "active",
    "departure": {
        "airport": "Los Angeles International",
        "timezone": "America/Los_Angeles",
        "iata": "LAX",
        "icao": "KLAX",
        "terminal": "4",
        "gate": "41A",
        "delay": 12,
        "scheduled": "2024-01-01T10:00:00+00:00",
        "actual": "2024-01-01T10:12:00+00:00",
    },
    "arrival": {
        "airport": "John F Kennedy International",
        "iata": "JFK",
        "icao": "KJFK",
        "scheduled": "2024-01-01T18:30:00+00:00",
        "actual": None,
    },
    "airline": {"name": "American Airlines", "iata": "AA", "icao": "AAL"},
    "flight": {"number": "100", "iata": "AA100", "icao": "AAL100"},
    "aircraft": {"registration": "N123AA", "iata": "B77W", "icao": "B77W"},
    "live": {
        "latitude": 39.5,
        "longitude": -98.3,
        "altitude": 10668.0,
        "direction": 75.0,
        "speed_horizontal": 890.0,
        "is_ground": False,
    },
}


def _client(payload=None, status: int = 200, exc=None) -> AviationStackClient:
    session = MagicMock()
    if exc is not None:
        session.get.side_effect = exc
    else:
        response = MagicMock()
        response.status_code = status
        response.json.return_value = payload
        if status >= 400:
            response.raise_for_status.side_effect = requests.exceptions.HTTPError(response=response)
        session.get.return_value = response
    return AviationStackClient(api_key="test-key", base_url="http://api.test/v1", timeout=7, session=session)


class TestSnapshotParsing:
    """Tests for FlightSnapshot.from_dict."""

    def test_full_item(self) -> None:
        s = FlightSnapshot.from_dict(FLIGHT_ITEM)
        assert s.flight_code == "AA100"
        assert s.status == "active"
        assert s.airline_name == "American Airlines"
        assert s.aircraft_registration == "N123AA"
        assert s.departure.iata == "LAX"
        assert s.departure.actual == "2024-01-01T10:12:00+00:00"
        assert s.arrival.actual is None
        assert s.live.heading == 75.0
        assert s.live.is_ground is False

    def test_null_sections(self) -> None:
        s = FlightSnapshot.from_dict({"flight": None, "live": None, "departure": None, "arrival": None})
        assert s.flight_code is None
        assert s.live is None
        assert s.departure is None
        assert s.airline_name is None

    def test_non_string_fields_dropped(self) -> None:
        s = FlightSnapshot.from_dict({
            "flight": {"iata": 100},
            "airline": {"name": ["American"]},
            "departure": {"iata": 7, "scheduled": 1704103200, "actual": "2024-01-01T10:12:00+00:00"},
        })
        assert s.flight_code is None
        assert s.airline_name is None
        assert s.departure.iata is None
        assert s.departure.scheduled is None
        assert s.departure.actual == "2024-01-01T10:12:00+00:00"

    def test_non_object_rejected(self) -> None:
        assert FlightSnapshot.from_dict(["AA100"]) is None


class TestFetch:
    """Tests for fetch_by_code/fetch_by_route with a mocked session."""

    def test_client_satisfies_protocol(self) -> None:
        assert isinstance(_client({"data": []}), FlightSource)

    def test_fetch_by_code_params(self) -> None:
        client = _client({"data": [FLIGHT_ITEM]})

        snapshots = client.fetch_by_code(" AA100 ")

        assert len(snapshots) == 1
        args, kwargs = client.session.get.call_args
        assert args[0] == "http://api.test/v1/flights"
        assert kwargs["params"] == {"flight_iata": "AA100", "access_key": "test-key"}
        assert kwargs["timeout"] == 7

    def test_fetch_by_route_params_and_limit(self) -> None:
        client = _client({"data": [FLIGHT_ITEM] * 6})

        snapshots = client.fetch_by_route("LAX", "JFK", 3)

        assert len(snapshots) == 3
        params = client.session.get.call_args.kwargs["params"]
        assert params["dep_iata"] == "LAX"
        assert params["arr_iata"] == "JFK"
        assert params["limit"] == 3

    def test_empty_data_is_valid(self) -> None:
        assert _client({"data": []}).fetch_by_code("AA100") == []

    def test_non_object_items_skipped(self) -> None:
        assert len(_client({"data": [FLIGHT_ITEM, "junk"]}).fetch_by_code("AA100")) == 1

    def test_api_error_payload(self) -> None:
        client = _client({"error": {"code": "invalid_access_key", "message": "You have not supplied a valid API Access Key."}})
        with pytest.raises(FlightSourceError, match="valid API Access Key"):
            client.fetch_by_code("AA100")

    def test_http_error(self) -> None:
        with pytest.raises(FlightSourceError, match="HTTP 500"):
            _client({}, status=500).fetch_by_code("AA100")

    def test_timeout(self) -> None:
        client = _client(exc=requests.exceptions.Timeout())
        with pytest.raises(FlightSourceError, match="timed out"):
            client.fetch_by_code("AA100")

    def test_connection_error(self) -> None:
        client = _client(exc=requests.exceptions.ConnectionError("refused"))
        with pytest.raises(FlightSourceError, match="refused"):
            client.fetch_by_route("LAX", "JFK", 3)

    def test_invalid_json(self) -> None:
        client = _client()
        client.session.get.return_value.json.side_effect = ValueError("no json")
        with pytest.raises(FlightSourceError, match="Malformed"):
            client.fetch_by_code("AA100")

    @pytest.mark.parametrize("payload", [[], {"data": None}, {"data": {"x": 1}}, {}])
    def test_unexpected_shape(self, payload) -> None:
        with pytest.raises(FlightSourceError, match="Malformed"):
            _client(payload).fetch_by_code("AA100")
