"""
FlightTrack Flask Application.

Main entry point for the web application. Initializes:
- Application context (configuration, history store, flight source)
- Real-time tracker and route query service
- Periodic ingestion pipeline
- API routes

Usage:
    python -m flighttrack.app

Or with gunicorn:
    gunicorn "flighttrack.app:create_app()"
"""

import logging
import os
from typing import Optional

from flask import Flask
from flask_cors import CORS

from flighttrack.api import tracking_bp, routes_bp, ingestion_bp
from flighttrack.config import load_config
from flighttrack.context import AppContext
from flighttrack.history import HistoryStoreError

logger = logging.getLogger(__name__)


def configure_logging(debug: bool = False) -> None:
    """Configure root logging for an entry point."""
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format='%(asctime)s [%(levelname)s] %(name)s: %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S',
    )


def create_app(context: Optional[AppContext] = None, start_ingestion: bool = True) -> Flask:
    """
    Application factory for Flask.

    Args:
        context: Application context; built from the environment if None.
        start_ingestion: Whether to start the periodic ingestion thread.
                        Set to False for testing.

    Returns:
        Configured Flask application instance.
    """
    if context is None:
        context = AppContext.create()

    app = Flask(__name__)

    # Enable CORS for API endpoints
    CORS(app, resources={r'/api/*': {'origins': '*'}})

    tracker = context.build_tracker()
    pipeline = context.build_pipeline()

    app.config['APP_CONTEXT'] = context
    app.config['TRACKER'] = tracker
    app.config['INGESTION_PIPELINE'] = pipeline
    app.config['ROUTE_QUERY_SERVICE'] = context.build_route_query_service()

    app.register_blueprint(tracking_bp)
    app.register_blueprint(routes_bp)
    app.register_blueprint(ingestion_bp)

    if start_ingestion:
        pipeline.start_background(context.config.ingestion.interval_seconds)
        logger.info(
            f'Ingestion scheduled for {pipeline.departure_iata} -> {pipeline.arrival_iata} '
            f'every {context.config.ingestion.interval_hours}h'
        )

    @app.route('/health')
    def health():
        """Simple health check endpoint."""
        return {'status': 'ok'}

    # -------------------------------------------------------------------------
    # Error handlers
    # -------------------------------------------------------------------------

    @app.errorhandler(404)
    def not_found(e):
        return {'error': 'Not found'}, 404

    @app.errorhandler(HistoryStoreError)
    def store_error(e):
        logger.error(f'History store error: {e}')
        return {'error': 'History store unavailable'}, 500

    @app.errorhandler(500)
    def server_error(e):
        logger.error(f'Server error: {e}')
        return {'error': 'Internal server error'}, 500

    return app


def run_development_server(port: Optional[int] = None):
    """Run the development server."""
    config = load_config()
    configure_logging(config.debug)
    context = AppContext.create(config)
    app = create_app(context)

    # Get port from environment or default
    port = port or int(os.environ.get('PORT', 5000))

    logger.info(f'Starting FlightTrack on http://localhost:{port}')

    app.run(
        host='0.0.0.0',
        port=port,
        debug=context.config.debug,
        use_reloader=False,  # Disable reloader to prevent duplicate ingestion threads
    )


if __name__ == '__main__':
    run_development_server()
