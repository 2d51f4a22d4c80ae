"""
Real-time tracking of a single flight.

A tracker polls the flight source for one flight code at a fixed interval
on a background thread and exposes the latest result as an immutable
TrackerState. Each poll replaces the whole state object, so readers never
see a snapshot from one poll next to an error from another.

States:
    Idle      no session (initial, and again after stop)
    Tracking  running flag set, one flight code bound

Stopping is cooperative: the stop event is checked before every fetch and
before every wait. A fetch already in flight is allowed to finish.
"""

import logging
import threading
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from typing import Optional

from flighttrack.ingestion.aviationstack_client import FlightSnapshot
from flighttrack.ingestion.source import FlightSource

logger = logging.getLogger(__name__)

NO_DATA_MESSAGE = 'No flight data found.'


@dataclass(frozen=True)
class TrackerState:
    """Consistent view of a tracking session."""
    flight_code: Optional[str] = None
    running: bool = False
    snapshot: Optional[FlightSnapshot] = None
    error: Optional[str] = None
    updated_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            'flight_code': self.flight_code,
            'running': self.running,
            'flight': self.snapshot.to_dict() if self.snapshot else None,
            'error': self.error,
            'updated_at': self.updated_at.isoformat() if self.updated_at else None,
        }


class _Session:
    """One start..stop period; owns its stop event."""

    def __init__(self, flight_code: str):
        self.flight_code = flight_code
        self.stopped = threading.Event()


class RealTimeTracker:
    """
    Cancelable polling loop for one flight at a time.

    Never normalizes or persists anything; it only exposes raw snapshots.
    """

    def __init__(self, source: FlightSource, poll_interval: float = 60.0):
        self.source = source
        self.poll_interval = poll_interval

        self._lock = threading.Lock()
        self._state = TrackerState()
        self._session: Optional[_Session] = None
        self._thread: Optional[threading.Thread] = None

    @property
    def state(self) -> TrackerState:
        """Latest state; safe to read from any thread."""
        return self._state

    @property
    def is_tracking(self) -> bool:
        return self._state.running

    def start(self, flight_code: str) -> bool:
        """
        Begin tracking ``flight_code``.

        Returns False without touching the running session if already
        tracking, whatever code is passed.
        """
        code = (flight_code or '').strip()
        if not code:
            raise ValueError('Please enter a valid flight number')

        with self._lock:
            if self._state.running:
                logger.info(f'Already tracking {self._state.flight_code}, ignoring start({code})')
                return False

            session = _Session(code)
            self._session = session
            self._state = TrackerState(flight_code=code, running=True)
            self._thread = threading.Thread(
                target=self._run,
                args=(session,),
                name=f'tracker-{code}',
                daemon=True,
            )
            self._thread.start()

        logger.info(f'Started tracking {code} (interval={self.poll_interval}s)')
        return True

    def stop(self, timeout: Optional[float] = None) -> bool:
        """
        Stop the current session. Calling it while idle is a no-op.

        With ``timeout`` set, waits up to that long for the loop to exit.
        Returns True if a session was stopped.
        """
        with self._lock:
            session = self._session
            if session is None or not self._state.running:
                return False
            session.stopped.set()
            self._state = replace(self._state, running=False)
            thread = self._thread

        logger.info(f'Stopped tracking {session.flight_code}')

        if timeout is not None and thread is not None:
            thread.join(timeout=timeout)
        return True

    def poll_once(self) -> TrackerState:
        """Run one fetch cycle for the current session and return the new state."""
        session = self._session
        if session is None or session.stopped.is_set():
            return self._state
        self._poll(session)
        return self._state

    def _run(self, session: _Session) -> None:
        while not session.stopped.is_set():
            self._poll(session)
            if session.stopped.is_set():
                break
            if session.stopped.wait(self.poll_interval):
                break
        logger.debug(f'Tracking loop for {session.flight_code} exited')

    def _poll(self, session: _Session) -> None:
        snapshot = None
        error = None
        try:
            snapshots = self.source.fetch_by_code(session.flight_code)
            if snapshots:
                snapshot = snapshots[0]
            else:
                error = NO_DATA_MESSAGE
        except Exception as e:
            logger.error(f'Tracking fetch for {session.flight_code} failed: {e}')
            error = f'Error: {e}'

        self._publish(session, snapshot, error)

    def _publish(self, session: _Session, snapshot: Optional[FlightSnapshot], error: Optional[str]) -> None:
        with self._lock:
            if self._session is not session:
                # A newer session owns the state now
                return
            self._state = replace(
                self._state,
                snapshot=snapshot,
                error=error,
                updated_at=datetime.now(timezone.utc),
            )
