"""
Data ingestion module for FlightTrack.

Handles calling AviationStack, normalizing departure/arrival times into
durations, and appending the results to the history store.
"""

from flighttrack.ingestion.source import FlightSource, FlightSourceError
from flighttrack.ingestion.aviationstack_client import (
    AirportTimes,
    AviationStackClient,
    FlightSnapshot,
    LivePosition,
)
from flighttrack.ingestion.normalizer import compute_duration_minutes
from flighttrack.ingestion.pipeline import IngestionPipeline, IngestionResult

__all__ = [
    'AirportTimes',
    'AviationStackClient',
    'FlightSnapshot',
    'FlightSource',
    'FlightSourceError',
    'IngestionPipeline',
    'IngestionResult',
    'LivePosition',
    'compute_duration_minutes',
]
