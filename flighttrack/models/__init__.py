"""
Database models for FlightTrack.

Schema designed for append-only route history with these priorities:
1. Durable single-row inserts
2. Route lookups ordered by recording time
3. Windowed averages per route
"""

from flighttrack.models.base import Base, create_store_engine, create_session_factory, init_db
from flighttrack.models.duration_record import DurationRecord, UNKNOWN_CODE, make_record, now_millis

__all__ = [
    'Base',
    'create_store_engine',
    'create_session_factory',
    'init_db',
    'DurationRecord',
    'UNKNOWN_CODE',
    'make_record',
    'now_millis',
]
