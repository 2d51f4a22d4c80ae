"""
Application context.

Built once at process start and handed to every component that needs the
store or the flight source. There are no module-level singletons: tests and
alternative entry points construct their own context.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from flighttrack.config import AppConfig, load_config
from flighttrack.history import HistoryStore
from flighttrack.ingestion import AviationStackClient, FlightSource, IngestionPipeline
from flighttrack.services import RouteQueryService
from flighttrack.tracking import RealTimeTracker

logger = logging.getLogger(__name__)


@dataclass
class AppContext:
    """Shared resources: configuration, history store and flight source."""
    config: AppConfig
    store: HistoryStore
    source: FlightSource

    @classmethod
    def create(
        cls,
        config: Optional[AppConfig] = None,
        source: Optional[FlightSource] = None,
        store: Optional[HistoryStore] = None,
    ) -> 'AppContext':
        """Build the context and open the store."""
        config = config or load_config()
        if source is None:
            source = AviationStackClient.from_config(config.aviationstack)
        if store is None:
            store = HistoryStore.from_config(config.database, echo=config.debug)
        store.open()
        logger.info(f'Context ready: source={type(source).__name__}')
        return cls(config=config, store=store, source=source)

    def build_tracker(self) -> RealTimeTracker:
        return RealTimeTracker(
            self.source,
            poll_interval=self.config.tracker.poll_interval_seconds,
        )

    def build_pipeline(self) -> IngestionPipeline:
        ingestion = self.config.ingestion
        return IngestionPipeline(
            self.source,
            self.store,
            departure_iata=ingestion.departure_iata,
            arrival_iata=ingestion.arrival_iata,
            batch_limit=ingestion.batch_limit,
        )

    def build_route_query_service(self) -> RouteQueryService:
        return RouteQueryService(self.source, limit=self.config.route_query.limit)

    def close(self) -> None:
        self.store.close()
