"""Unit tests for the duration history store."""

import threading

import pytest

from flighttrack.history import HistoryStore
from flighttrack.models import DurationRecord, make_record


def _record(duration: int, recorded_at: int, dep: str = "LAX", arr: str = "JFK", code: str = "AA100"):
    return DurationRecord(
        flight_iata=code,
        departure_iata=dep,
        arrival_iata=arr,
        duration_minutes=duration,
        recorded_at=recorded_at,
    )


class TestInsert:
    """Tests for HistoryStore.insert."""

    def test_assigns_increasing_ids(self, store: HistoryStore) -> None:
        first = store.insert(_record(100, 1000))
        second = store.insert(_record(120, 1000))
        assert first.id is not None
        assert second.id > first.id

    def test_fills_recorded_at_when_missing(self, store: HistoryStore) -> None:
        record = DurationRecord(
            flight_iata="AA100", departure_iata="LAX", arrival_iata="JFK", duration_minutes=300
        )
        stored = store.insert(record)
        assert stored.recorded_at > 0

    def test_concurrent_inserts_are_not_lost(self, store: HistoryStore) -> None:
        def worker(offset: int) -> None:
            for i in range(10):
                store.insert(_record(100 + i, offset * 100 + i))

        threads = [threading.Thread(target=worker, args=(n,)) for n in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert store.count("LAX", "JFK") == 40

    def test_records_survive_reopen(self, db_url: str) -> None:
        first = HistoryStore(db_url).open()
        first.insert(_record(150, 1000))
        first.close()

        reopened = HistoryStore(db_url).open()
        try:
            history = reopened.history_by_route("LAX", "JFK")
            assert [r.duration_minutes for r in history] == [150]
        finally:
            reopened.close()


class TestAverageSince:
    """Tests for HistoryStore.average_since."""

    def test_end_to_end_average(self, store: HistoryStore) -> None:
        for i, duration in enumerate([100, 120, 140]):
            store.insert(_record(duration, 1000 + i))
        assert store.average_since("LAX", "JFK", 1000) == 120.0

    def test_window_is_inclusive(self, store: HistoryStore) -> None:
        store.insert(_record(100, 1000))
        store.insert(_record(200, 2000))
        assert store.average_since("LAX", "JFK", 2000) == 200.0

    def test_empty_window_is_none(self, store: HistoryStore) -> None:
        store.insert(_record(100, 1000))
        assert store.average_since("LAX", "JFK", 5000) is None
        assert store.average_since("SFO", "JFK", 0) is None

    def test_route_match_is_case_sensitive(self, store: HistoryStore) -> None:
        store.insert(_record(100, 1000))
        assert store.average_since("lax", "jfk", 0) is None


class TestHistoryByRoute:
    """Tests for HistoryStore.history_by_route."""

    def test_empty_route(self, store: HistoryStore) -> None:
        assert store.history_by_route("LAX", "JFK") == []

    def test_most_recent_first(self, store: HistoryStore) -> None:
        for i, duration in enumerate([100, 120, 140]):
            store.insert(_record(duration, 1000 + i))
        history = store.history_by_route("LAX", "JFK")
        assert [r.duration_minutes for r in history] == [140, 120, 100]
        stamps = [r.recorded_at for r in history]
        assert stamps == sorted(stamps, reverse=True)

    def test_ties_broken_by_later_insert_first(self, store: HistoryStore) -> None:
        store.insert(_record(100, 1000, code="AA1"))
        store.insert(_record(110, 1000, code="AA2"))
        store.insert(_record(90, 500, code="AA0"))
        history = store.history_by_route("LAX", "JFK")
        assert [r.flight_iata for r in history] == ["AA2", "AA1", "AA0"]

    def test_only_requested_route(self, store: HistoryStore) -> None:
        store.insert(_record(100, 1000))
        store.insert(_record(300, 1000, dep="JFK", arr="LAX"))
        history = store.history_by_route("LAX", "JFK")
        assert len(history) == 1
        assert history[0].route == "LAX-JFK"


class TestMakeRecord:
    """Tests for record defaults."""

    def test_uppercases_codes(self) -> None:
        r = make_record("AA100", "lax", "jfk", 300, recorded_at=1)
        assert (r.departure_iata, r.arrival_iata) == ("LAX", "JFK")

    def test_missing_values_default_to_sentinel(self) -> None:
        r = make_record(None, None, None, 300, recorded_at=1)
        assert r.flight_iata == "N/A"
        assert r.departure_iata == "N/A"
        assert r.arrival_iata == "N/A"


class TestStoreFailure:
    """Storage errors surface as HistoryStoreError."""

    def test_insert_before_open_raises(self, db_url: str) -> None:
        from flighttrack.history import HistoryStoreError

        unopened = HistoryStore(db_url)
        with pytest.raises(HistoryStoreError):
            unopened.insert(_record(100, 1000))
        unopened.close()
