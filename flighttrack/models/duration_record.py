"""
DurationRecord model - observed flight durations per route.

Every successful ingestion of a flight with computable departure and
arrival times produces one row here. The table is append-only: rows are
never updated and there is no deletion path.

Schema optimized for:
- Single-row inserts from the periodic ingestion run
- Route lookups ordered by recording time
- Windowed averages per route
"""

import time
from typing import Optional

from sqlalchemy import String, Integer, BigInteger, Index
from sqlalchemy.orm import Mapped, mapped_column

from flighttrack.models.base import Base

UNKNOWN_CODE = 'N/A'


def now_millis() -> int:
    """Current wall-clock time as Unix epoch milliseconds."""
    return int(time.time() * 1000)


class DurationRecord(Base):
    """
    One observed flight duration for a route.

    ``recorded_at`` is the wall-clock time of ingestion, not of the
    flight itself. ``duration_minutes`` is stored exactly as computed,
    so inconsistent upstream timestamps may yield negative values.
    """

    __tablename__ = 'flight_records'

    # Using Integer for SQLite compatibility (autoincrement only works with INTEGER)
    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
        comment='Surrogate key, assigned on insert'
    )

    flight_iata: Mapped[str] = mapped_column(
        String(16),
        nullable=False,
        default=UNKNOWN_CODE,
        comment='Flight IATA code (e.g. AA100)'
    )

    departure_iata: Mapped[str] = mapped_column(
        String(8),
        nullable=False,
        comment='Departure airport IATA code, uppercase'
    )

    arrival_iata: Mapped[str] = mapped_column(
        String(8),
        nullable=False,
        comment='Arrival airport IATA code, uppercase'
    )

    duration_minutes: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        comment='Arrival minus departure in whole minutes'
    )

    recorded_at: Mapped[int] = mapped_column(
        BigInteger,
        nullable=False,
        default=now_millis,
        comment='Unix epoch milliseconds of ingestion'
    )

    __table_args__ = (
        # Route history and windowed average queries
        Index(
            'ix_flight_records_route_time',
            'departure_iata', 'arrival_iata', 'recorded_at',
        ),
    )

    def __repr__(self) -> str:
        return (
            f'<DurationRecord {self.flight_iata} '
            f'{self.departure_iata}->{self.arrival_iata} '
            f'{self.duration_minutes}min @ {self.recorded_at}>'
        )

    @property
    def route(self) -> str:
        """Route as DEP-ARR."""
        return f'{self.departure_iata}-{self.arrival_iata}'

    def to_dict(self) -> dict:
        """Convert to JSON-serializable dict for API responses."""
        return {
            'id': self.id,
            'flight_iata': self.flight_iata,
            'departure_iata': self.departure_iata,
            'arrival_iata': self.arrival_iata,
            'duration_minutes': self.duration_minutes,
            'recorded_at': self.recorded_at,
        }


def _airport_code(code: Optional[str]) -> str:
    return code.upper() if isinstance(code, str) and code else UNKNOWN_CODE


def make_record(
    flight_iata: Optional[str],
    departure_iata: Optional[str],
    arrival_iata: Optional[str],
    duration_minutes: int,
    recorded_at: Optional[int] = None,
) -> DurationRecord:
    """
    Build a record with the ingestion defaults applied.

    Missing codes become ``N/A``; IATA codes are uppercased.
    """
    return DurationRecord(
        flight_iata=flight_iata if isinstance(flight_iata, str) and flight_iata else UNKNOWN_CODE,
        departure_iata=_airport_code(departure_iata),
        arrival_iata=_airport_code(arrival_iata),
        duration_minutes=duration_minutes,
        recorded_at=recorded_at if recorded_at is not None else now_millis(),
    )
