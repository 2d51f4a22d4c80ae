"""
Ingestion pipeline - orchestrates data flow from AviationStack to history.

One run of the pipeline is the unit of work an external scheduler (cron,
systemd timer, the in-process runner below) invokes on a fixed cadence:

1. Fetch: up to ``batch_limit`` flights for the configured route
2. Normalize: compute each flight's duration independently
3. Append: insert every computable record into the history store

A flight whose times cannot be parsed is skipped and counted; it never
aborts the rest of the batch. Only a failed fetch (or a storage failure)
marks the run as failed. There is no retry and no deduplication: running
twice against the same upstream data stores every record twice.
"""

import logging
import threading
import time
from dataclasses import dataclass
from typing import Optional, List, Callable

from flighttrack.history import HistoryStore, HistoryStoreError
from flighttrack.ingestion.aviationstack_client import FlightSnapshot
from flighttrack.ingestion.normalizer import compute_duration_minutes
from flighttrack.ingestion.source import FlightSource, FlightSourceError
from flighttrack.models import DurationRecord, make_record, now_millis

logger = logging.getLogger(__name__)


@dataclass
class IngestionResult:
    """Outcome of one ingestion run, reported to the scheduler."""
    success: bool
    fetched: int = 0
    inserted: int = 0
    skipped: int = 0
    error: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            'success': self.success,
            'fetched': self.fetched,
            'inserted': self.inserted,
            'skipped': self.skipped,
            'error': self.error,
        }


class IngestionPipeline:
    """
    Periodic route ingestion.

    Coordinates fetching from the flight source, duration normalization
    and history inserts. Can also run on a background thread at a fixed
    interval for deployments without an external scheduler.
    """

    def __init__(
        self,
        source: FlightSource,
        store: HistoryStore,
        departure_iata: str = 'LAX',
        arrival_iata: str = 'JFK',
        batch_limit: int = 3,
        clock: Callable[[], int] = now_millis,
    ):
        """
        Initialize the ingestion pipeline.

        Args:
            source: Remote flight source
            store: History store receiving the records
            departure_iata: Route departure airport
            arrival_iata: Route arrival airport
            batch_limit: Max flights normalized per run
            clock: Returns the ``recorded_at`` value (epoch milliseconds)
        """
        self.source = source
        self.store = store
        self.departure_iata = departure_iata
        self.arrival_iata = arrival_iata
        self.batch_limit = batch_limit
        self.clock = clock

        # State tracking
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._last_run_time: float = 0
        self._run_count: int = 0
        self._failure_count: int = 0
        self._last_result: Optional[IngestionResult] = None
        self._stats_lock = threading.Lock()

    def _build_record(self, snapshot: FlightSnapshot) -> Optional[DurationRecord]:
        """Record for a snapshot, or None if its duration is not computable."""
        duration = compute_duration_minutes(snapshot.departure, snapshot.arrival)
        if duration is None:
            return None

        return make_record(
            flight_iata=snapshot.flight_code,
            departure_iata=snapshot.departure.iata if snapshot.departure else None,
            arrival_iata=snapshot.arrival.iata if snapshot.arrival else None,
            duration_minutes=duration,
            recorded_at=self.clock(),
        )

    def _store_batch(self, snapshots: List[FlightSnapshot], result: IngestionResult) -> None:
        for snapshot in snapshots:
            record = self._build_record(snapshot)
            if record is None:
                result.skipped += 1
                logger.warning(f'Time parsing error for flight {snapshot.flight_code}, skipping')
                continue

            self.store.insert(record)
            result.inserted += 1
            logger.debug(f'Inserted record for flight {record.flight_iata}')

    def run(self) -> IngestionResult:
        """
        Execute one ingestion run.

        Never raises for fetch or storage failures; they are reported in
        the returned result.
        """
        route = f'{self.departure_iata} -> {self.arrival_iata}'
        logger.info(f'Ingestion run started for {route}')

        try:
            snapshots = self.source.fetch_by_route(
                self.departure_iata,
                self.arrival_iata,
                self.batch_limit,
            )
        except FlightSourceError as e:
            logger.error(f'Ingestion fetch failed for {route}: {e}')
            return self._finish(IngestionResult(success=False, error=str(e)))

        batch = snapshots[:self.batch_limit]
        result = IngestionResult(success=True, fetched=len(batch))

        if not batch:
            logger.info(f'No flight data found for the route {route}')
            return self._finish(result)

        try:
            self._store_batch(batch, result)
        except HistoryStoreError as e:
            logger.error(f'Ingestion storage failed for {route}: {e}')
            result.success = False
            result.error = str(e)
            return self._finish(result)

        logger.info(
            f'Ingestion run for {route}: {result.inserted} inserted, '
            f'{result.skipped} skipped of {result.fetched} fetched'
        )
        return self._finish(result)

    def _finish(self, result: IngestionResult) -> IngestionResult:
        with self._stats_lock:
            self._run_count += 1
            if not result.success:
                self._failure_count += 1
            self._last_run_time = time.time()
            self._last_result = result
        return result

    def run_continuous(self, interval: float) -> None:
        """
        Run ingestion at a fixed interval until stopped.

        This method blocks - use start_background() for non-blocking.
        """
        logger.info(f'Starting periodic ingestion (interval={interval}s)')

        while not self._stop_event.is_set():
            self.run()
            if self._stop_event.wait(interval):
                break

        logger.info('Periodic ingestion stopped')

    def start_background(self, interval: float) -> bool:
        """Start periodic ingestion in a background thread."""
        if self._thread and self._thread.is_alive():
            logger.warning('Ingestion already running')
            return False

        self._stop_event.clear()
        self._thread = threading.Thread(
            target=self.run_continuous,
            args=(interval,),
            name='ingestion-pipeline',
            daemon=True,
        )
        self._thread.start()
        logger.info('Background ingestion started')
        return True

    def stop(self, timeout: Optional[float] = 5.0) -> None:
        """Stop background ingestion. A run in progress completes first."""
        self._stop_event.set()
        if self._thread:
            self._thread.join(timeout=timeout)

    @property
    def is_running(self) -> bool:
        return bool(self._thread and self._thread.is_alive() and not self._stop_event.is_set())

    @property
    def stats(self) -> dict:
        """Get ingestion statistics."""
        with self._stats_lock:
            return {
                'route': f'{self.departure_iata}-{self.arrival_iata}',
                'run_count': self._run_count,
                'failure_count': self._failure_count,
                'last_run_time': self._last_run_time,
                'last_result': self._last_result.to_dict() if self._last_result else None,
                'running': self.is_running,
            }
