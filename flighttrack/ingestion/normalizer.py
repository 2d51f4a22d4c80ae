"""
Duration normalization - departure/arrival times to whole minutes.

Pure functions, safe to call from any thread. A snapshot whose times are
missing or unparseable is "not computable" and yields None; callers skip
it rather than failing.
"""

import math
from datetime import datetime, timedelta
from typing import Optional

from flighttrack.ingestion.aviationstack_client import AirportTimes

TIMESTAMP_FORMAT = '%Y-%m-%dT%H:%M:%S'
# Length of a value rendered with TIMESTAMP_FORMAT
_TIMESTAMP_LENGTH = 19


def select_timestamp(times: Optional[AirportTimes]) -> Optional[str]:
    """
    Actual time if reported, otherwise the scheduled time.

    Only a missing actual time falls back; an empty one is kept and fails
    to parse.
    """
    if times is None:
        return None
    return times.actual if times.actual is not None else times.scheduled


def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    """
    Parse ``YYYY-MM-DDTHH:MM:SS`` into a naive datetime.

    Only the leading date-time is read: the UTC offset or fractional
    seconds AviationStack appends are ignored, so both sides are compared
    on the clock values as reported.
    """
    if not isinstance(value, str) or len(value) < _TIMESTAMP_LENGTH:
        return None
    try:
        return datetime.strptime(value[:_TIMESTAMP_LENGTH], TIMESTAMP_FORMAT)
    except ValueError:
        return None


def duration_between(departure: datetime, arrival: datetime) -> int:
    """Whole minutes from departure to arrival, truncated toward zero."""
    return math.trunc((arrival - departure) / timedelta(minutes=1))


def compute_duration_minutes(
    departure: Optional[AirportTimes],
    arrival: Optional[AirportTimes],
) -> Optional[int]:
    """
    Flight duration in minutes, or None if not computable.

    No plausibility checks: zero and negative durations are returned as-is.
    """
    dep_time = parse_timestamp(select_timestamp(departure))
    arr_time = parse_timestamp(select_timestamp(arrival))
    if dep_time is None or arr_time is None:
        return None
    return duration_between(dep_time, arr_time)
