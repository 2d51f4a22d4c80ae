"""
Ingestion API endpoints.

Provides endpoints for:
- POST /api/ingestion/run - Trigger one ingestion run
- GET /api/ingestion/status - Pipeline statistics and database health
"""

import logging
from datetime import datetime, timezone

from flask import Blueprint, jsonify, current_app

logger = logging.getLogger(__name__)

ingestion_bp = Blueprint('ingestion', __name__, url_prefix='/api/ingestion')


@ingestion_bp.route('/run', methods=['POST'])
def run_ingestion():
    """
    Run the ingestion pipeline once, synchronously.

    Returns 200 with the run result, or 502 if the run failed.
    """
    pipeline = current_app.config['INGESTION_PIPELINE']
    logger.info('Manual ingestion run requested')
    result = pipeline.run()
    return jsonify(result.to_dict()), 200 if result.success else 502


@ingestion_bp.route('/status', methods=['GET'])
def ingestion_status():
    """
    Get system health and ingestion status.

    Returns:
    - Ingestion pipeline statistics
    - Database connectivity
    """
    context = current_app.config['APP_CONTEXT']
    pipeline = current_app.config['INGESTION_PIPELINE']
    db_ok = context.store.ping()

    return jsonify({
        'status': 'healthy' if db_ok else 'degraded',
        'database': {
            'connected': db_ok,
            'type': 'sqlite' if context.config.database.is_sqlite else 'other',
            'records': context.store.count() if db_ok else None,
        },
        'ingestion': pipeline.stats,
        'config': {
            'interval_hours': context.config.ingestion.interval_hours,
            'batch_limit': context.config.ingestion.batch_limit,
            'aviationstack_configured': context.config.aviationstack.is_configured,
        },
        'timestamp': datetime.now(timezone.utc).isoformat(),
    })
