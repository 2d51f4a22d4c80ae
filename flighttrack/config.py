"""
Configuration management for FlightTrack.

Loads settings from environment variables with sensible defaults.
All configuration is centralized here to avoid magic strings scattered
throughout the codebase. A ``.env`` file in the working directory is
honoured via python-dotenv.
"""

import os
from dataclasses import dataclass, field
from typing import Optional

from dotenv import load_dotenv

load_dotenv()


def _env(name: str, default: str) -> str:
    return os.getenv(name, default)


@dataclass(frozen=True)
class AviationStackConfig:
    """AviationStack API configuration."""
    api_key: Optional[str] = field(default_factory=lambda: os.getenv('AVIATIONSTACK_API_KEY') or None)
    base_url: str = field(default_factory=lambda: _env('AVIATIONSTACK_BASE_URL', 'http://api.aviationstack.com/v1'))
    timeout_seconds: float = field(default_factory=lambda: float(_env('AVIATIONSTACK_TIMEOUT', '10')))

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)


@dataclass(frozen=True)
class DatabaseConfig:
    """Database configuration."""
    url: str = field(default_factory=lambda: _env('DATABASE_URL', 'sqlite:///flighttrack.db'))

    @property
    def is_sqlite(self) -> bool:
        return self.url.startswith('sqlite')


@dataclass(frozen=True)
class TrackerConfig:
    """Real-time tracking settings."""
    poll_interval_seconds: float = field(default_factory=lambda: float(_env('TRACKER_POLL_SECONDS', '60')))


@dataclass(frozen=True)
class IngestionConfig:
    """Periodic route ingestion settings."""
    departure_iata: str = field(default_factory=lambda: _env('INGEST_DEPARTURE_IATA', 'LAX').upper())
    arrival_iata: str = field(default_factory=lambda: _env('INGEST_ARRIVAL_IATA', 'JFK').upper())
    batch_limit: int = field(default_factory=lambda: int(_env('INGEST_BATCH_LIMIT', '3')))
    interval_hours: float = field(default_factory=lambda: float(_env('INGEST_INTERVAL_HOURS', '24')))

    @property
    def interval_seconds(self) -> float:
        return self.interval_hours * 3600


@dataclass(frozen=True)
class RouteQueryConfig:
    """On-demand route lookup settings."""
    limit: int = field(default_factory=lambda: int(_env('ROUTE_QUERY_LIMIT', '5')))
    average_days: int = field(default_factory=lambda: int(_env('ROUTE_AVERAGE_DAYS', '7')))


@dataclass(frozen=True)
class AppConfig:
    """Main application configuration."""
    aviationstack: AviationStackConfig
    database: DatabaseConfig
    tracker: TrackerConfig
    ingestion: IngestionConfig
    route_query: RouteQueryConfig

    # Flask settings
    debug: bool


def load_config() -> AppConfig:
    """Load and validate all configuration."""
    return AppConfig(
        aviationstack=AviationStackConfig(),
        database=DatabaseConfig(),
        tracker=TrackerConfig(),
        ingestion=IngestionConfig(),
        route_query=RouteQueryConfig(),
        debug=os.getenv('FLASK_DEBUG', '0') == '1',
    )
