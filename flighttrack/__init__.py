"""
FlightTrack Package.

Flight data synchronization and route history engine built with Flask,
SQLAlchemy, requests and NumPy.

Modules:
    ingestion/   AviationStack client, duration normalizer, periodic route ingestion
    models/      SQLAlchemy ORM models (DurationRecord)
    history.py   Durable duration history store
    tracking.py  Real-time single flight polling loop
    services/    On-demand route queries
    analytics/   NumPy duration statistics
    api/         REST endpoints for tracking, routes and ingestion
    context.py   Explicit application context wiring the components
    config.py    Centralized configuration from environment variables
"""

__version__ = '1.0.0'
