"""
Real-time tracking API endpoints.

Provides endpoints for:
- GET /api/tracking - Current tracker state
- POST /api/tracking/start - Start tracking a flight
- POST /api/tracking/stop - Stop tracking
"""

import logging

from flask import Blueprint, jsonify, request, current_app

logger = logging.getLogger(__name__)

tracking_bp = Blueprint('tracking', __name__, url_prefix='/api/tracking')


def _tracker():
    return current_app.config['TRACKER']


@tracking_bp.route('', methods=['GET'])
def get_state():
    """
    Get the tracker state.

    The snapshot and error reflect the latest completed poll and stay
    visible after tracking is stopped.
    """
    return jsonify(_tracker().state.to_dict())


@tracking_bp.route('/start', methods=['POST'])
def start_tracking():
    """
    Start tracking a flight.

    Body: {"flight_code": "AA100"}

    Returns 409 if a session is already running.
    """
    body = request.get_json(silent=True) or {}
    tracker = _tracker()

    try:
        started = tracker.start(str(body.get('flight_code') or ''))
    except ValueError as e:
        return jsonify({'error': str(e)}), 400

    if not started:
        return jsonify({
            'error': f'Already tracking {tracker.state.flight_code}',
            'state': tracker.state.to_dict(),
        }), 409

    logger.info(f'Tracking started for {tracker.state.flight_code}')
    return jsonify(tracker.state.to_dict()), 202


@tracking_bp.route('/stop', methods=['POST'])
def stop_tracking():
    """Stop tracking. Idempotent."""
    tracker = _tracker()
    stopped = tracker.stop()
    result = tracker.state.to_dict()
    result['stopped'] = stopped
    return jsonify(result)
