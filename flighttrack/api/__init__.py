"""
API module for FlightTrack.

Provides REST endpoints for:
- Real-time flight tracking
- Route queries, history and averages
- Ingestion runs and system status
"""

from flighttrack.api.tracking import tracking_bp
from flighttrack.api.routes import routes_bp
from flighttrack.api.ingestion import ingestion_bp

__all__ = ['tracking_bp', 'routes_bp', 'ingestion_bp']
