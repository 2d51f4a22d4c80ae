"""
Route API endpoints.

Provides endpoints for:
- GET /api/routes/<dep>/<arr>/flights - Live flights with computed durations
- GET /api/routes/<dep>/<arr>/history - Stored duration records
- GET /api/routes/<dep>/<arr>/average - Average stored duration over N days
"""

import logging
import time
from datetime import datetime, timezone

from flask import Blueprint, jsonify, request, current_app

from flighttrack.analytics import summarize_durations
from flighttrack.models import now_millis
from flighttrack.services import RouteQueryError

logger = logging.getLogger(__name__)

routes_bp = Blueprint('routes', __name__, url_prefix='/api/routes')

MAX_QUERY_LIMIT = 100
MAX_AVERAGE_DAYS = 365


@routes_bp.route('/<dep>/<arr>/flights', methods=['GET'])
def route_flights(dep: str, arr: str):
    """
    Fetch current flights for a route and their average duration.

    Query parameters:
    - limit: max flights to fetch (default from config, max 100)

    Nothing is stored. An empty or unusable batch is a 200 with a status
    of no_data/no_valid_data; a source failure is a 502.
    """
    start_time = time.perf_counter()
    service = current_app.config['ROUTE_QUERY_SERVICE']

    try:
        limit = request.args.get('limit', type=int)
        if limit is not None:
            limit = max(1, min(limit, MAX_QUERY_LIMIT))
        result = service.query(dep, arr, limit=limit)
    except ValueError as e:
        return jsonify({'error': str(e)}), 400
    except RouteQueryError as e:
        logger.warning(f'Route query {dep}->{arr} failed: {e}')
        return jsonify({'error': str(e)}), 502

    response = result.to_dict()
    response['query_time_ms'] = round((time.perf_counter() - start_time) * 1000, 2)
    return jsonify(response)


@routes_bp.route('/<dep>/<arr>/history', methods=['GET'])
def route_history(dep: str, arr: str):
    """
    Get stored duration records for a route, most recent first.

    Includes summary statistics over the returned records.
    """
    start_time = time.perf_counter()
    store = current_app.config['APP_CONTEXT'].store
    dep, arr = dep.strip().upper(), arr.strip().upper()

    records = store.history_by_route(dep, arr)
    summary = summarize_durations(r.duration_minutes for r in records)

    return jsonify({
        'departure_iata': dep,
        'arrival_iata': arr,
        'records': [r.to_dict() for r in records],
        'count': len(records),
        'summary': summary.to_dict() if summary else None,
        'query_time_ms': round((time.perf_counter() - start_time) * 1000, 2),
    })


@routes_bp.route('/<dep>/<arr>/average', methods=['GET'])
def route_average(dep: str, arr: str):
    """
    Average stored duration for a route.

    Query parameters:
    - days: window size in days (default from config, max 365)

    ``average_duration`` is null when no record falls in the window.
    """
    context = current_app.config['APP_CONTEXT']
    dep, arr = dep.strip().upper(), arr.strip().upper()

    days = request.args.get('days', context.config.route_query.average_days, type=int)
    days = max(1, min(days, MAX_AVERAGE_DAYS))
    since = now_millis() - days * 24 * 3600 * 1000

    average = context.store.average_since(dep, arr, since)

    return jsonify({
        'departure_iata': dep,
        'arrival_iata': arr,
        'days': days,
        'since': since,
        'average_duration': round(average, 2) if average is not None else None,
        'timestamp': datetime.now(timezone.utc).isoformat(),
    })
