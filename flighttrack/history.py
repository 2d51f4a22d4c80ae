"""
Durable history of observed flight durations.

The store is the single writer of ``flight_records``. All access from the
ingestion pipeline, the API layer and the CLI goes through its methods:

- insert: append one record (serialized across threads)
- average_since: mean duration for a route inside a time window
- history_by_route: all records for a route, most recent first

Route codes are matched exactly as stored (uppercase); callers normalize
their inputs before querying.
"""

import logging
import threading
from contextlib import contextmanager
from typing import Generator, List, Optional

from sqlalchemy import func, select, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from flighttrack.config import DatabaseConfig
from flighttrack.models import (
    DurationRecord,
    create_session_factory,
    create_store_engine,
    init_db,
    now_millis,
)

logger = logging.getLogger(__name__)


class HistoryStoreError(Exception):
    """The store could not durably persist or read records."""


class HistoryStore:
    """
    SQLAlchemy-backed duration record storage.

    Inserts hold a process-wide lock so concurrent writers never interleave
    inside a transaction; reads run without it and see whatever has been
    committed when their statement executes.
    """

    def __init__(self, url: str, echo: bool = False):
        self.url = url
        self.engine = create_store_engine(url, echo=echo)
        self._session_factory = create_session_factory(self.engine)
        self._write_lock = threading.Lock()

    @classmethod
    def from_config(cls, config: DatabaseConfig, echo: bool = False) -> 'HistoryStore':
        """Create store from application configuration."""
        return cls(config.url, echo=echo)

    def open(self) -> 'HistoryStore':
        """Create the schema if it does not exist yet."""
        try:
            init_db(self.engine)
        except SQLAlchemyError as e:
            logger.error(f'Failed to initialize history store: {e}')
            raise HistoryStoreError(f'Could not open history store: {e}') from e
        logger.info(f'History store ready at {self.engine.url.render_as_string(hide_password=True)}')
        return self

    def close(self) -> None:
        """Release pooled connections."""
        self.engine.dispose()

    @contextmanager
    def _session(self) -> Generator[Session, None, None]:
        """
        Session scope with commit/rollback.

        SQLAlchemy errors are re-raised as HistoryStoreError.
        """
        session = self._session_factory()
        try:
            yield session
            session.commit()
        except SQLAlchemyError as e:
            session.rollback()
            logger.error(f'History store error: {e}')
            raise HistoryStoreError(str(e)) from e
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def insert(self, record: DurationRecord) -> DurationRecord:
        """
        Append one record and return it with its assigned id.

        ``recorded_at`` is set to the current time when missing.
        """
        if record.recorded_at is None:
            record.recorded_at = now_millis()

        with self._write_lock:
            with self._session() as session:
                session.add(record)
                session.flush()
                logger.debug(f'Inserted {record!r}')

        return record

    def average_since(self, departure_iata: str, arrival_iata: str, since: int) -> Optional[float]:
        """
        Mean duration for a route over records with ``recorded_at >= since``.

        Returns None when no record falls inside the window.
        """
        stmt = select(func.avg(DurationRecord.duration_minutes)).where(
            DurationRecord.departure_iata == departure_iata,
            DurationRecord.arrival_iata == arrival_iata,
            DurationRecord.recorded_at >= since,
        )
        with self._session() as session:
            average = session.execute(stmt).scalar()

        return float(average) if average is not None else None

    def history_by_route(self, departure_iata: str, arrival_iata: str) -> List[DurationRecord]:
        """All records for a route, most recent first; later inserts win ties."""
        stmt = select(DurationRecord).where(
            DurationRecord.departure_iata == departure_iata,
            DurationRecord.arrival_iata == arrival_iata,
        ).order_by(
            DurationRecord.recorded_at.desc(),
            DurationRecord.id.desc(),
        )
        with self._session() as session:
            return list(session.scalars(stmt).all())

    def count(self, departure_iata: Optional[str] = None, arrival_iata: Optional[str] = None) -> int:
        """Number of stored records, optionally restricted to one route."""
        stmt = select(func.count(DurationRecord.id))
        if departure_iata is not None:
            stmt = stmt.where(DurationRecord.departure_iata == departure_iata)
        if arrival_iata is not None:
            stmt = stmt.where(DurationRecord.arrival_iata == arrival_iata)
        with self._session() as session:
            return session.execute(stmt).scalar_one()

    def ping(self) -> bool:
        """Check database connectivity."""
        try:
            with self._session() as session:
                session.execute(text('SELECT 1'))
        except HistoryStoreError:
            return False
        return True
