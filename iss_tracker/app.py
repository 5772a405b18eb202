"""
ISS Tracker Service - Flask JSON API

Exposes the tracker operations to the UI layer:

    GET /health
    GET /iss/location
    GET /iss/tle
    GET /iss/orbit-path?span_minutes=90&step_minutes=2
    GET /iss/time-to-contact

Every operation either succeeds or returns {"error": "<message>"}; there are
no partial results.
"""

import traceback
from datetime import datetime, timezone

from flask import Flask, jsonify, request
from flask_cors import CORS
from werkzeug.exceptions import HTTPException

from config import DEFAULT_ORBIT_SPAN_MIN, DEFAULT_ORBIT_STEP_MIN, MAX_ORBIT_SPAN_MIN, config
from iss_tracker import __version__
from iss_tracker.contact import ContactEstimator
from iss_tracker.errors import (
    AllProvidersFailure,
    FormatFailure,
    IssTrackerError,
    NetworkFailure,
)
from iss_tracker.location_feed import fetch_iss_location
from iss_tracker.orbit_path import build_orbit_path
from iss_tracker.tle_source import fetch_iss_tle
from logging_config import get_logger

logger = get_logger(__name__)

# Initialize Flask app
app = Flask(__name__)
CORS(app)

estimator = ContactEstimator()

# Failures of an upstream collaborator rather than of this service
UPSTREAM_ERRORS = (NetworkFailure, FormatFailure, AllProvidersFailure)


def _error_response(error: IssTrackerError):
    status = 502 if isinstance(error, UPSTREAM_ERRORS) else 500
    return jsonify({"error": str(error)}), status


def _int_arg(name: str, default: int) -> int:
    value = request.args.get(name)
    if value is None or value == '':
        return default
    return int(value)


@app.route('/health', methods=['GET'])
def health_check():
    """Service health and configuration"""
    return jsonify({
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "version": __version__,
        "configuration": {
            "location_url": config.LOCATION_URL,
            "tle_url": config.TLE_URL,
            "http_timeout_s": config.HTTP_TIMEOUT,
        },
    }), 200


@app.route('/iss/location', methods=['GET'])
def iss_location():
    """Current ISS state"""
    try:
        state = fetch_iss_location()
    except IssTrackerError as e:
        logger.error("iss_location_failed", error=str(e))
        return _error_response(e)
    return jsonify(state.model_dump())


@app.route('/iss/tle', methods=['GET'])
def iss_tle():
    """Current ISS orbital element set"""
    try:
        tle = fetch_iss_tle()
    except IssTrackerError as e:
        logger.error("iss_tle_failed", error=str(e))
        return _error_response(e)
    return jsonify(tle.model_dump())


@app.route('/iss/orbit-path', methods=['GET'])
def iss_orbit_path():
    """Ground track around now, from a freshly fetched TLE"""
    try:
        span = _int_arg('span_minutes', DEFAULT_ORBIT_SPAN_MIN)
        step = _int_arg('step_minutes', DEFAULT_ORBIT_STEP_MIN)
    except ValueError as e:
        return jsonify({"error": f"Invalid query parameter: {e}"}), 400

    if span > MAX_ORBIT_SPAN_MIN:
        return jsonify({"error": f"span_minutes must be at most {MAX_ORBIT_SPAN_MIN}"}), 400

    try:
        tle = fetch_iss_tle()
        points = build_orbit_path(tle, span, step)
    except IssTrackerError as e:
        logger.error("iss_orbit_path_failed", error=str(e))
        return _error_response(e)
    return jsonify([point.model_dump() for point in points])


@app.route('/iss/time-to-contact', methods=['GET'])
def time_to_contact():
    """Estimated minutes until the ISS is in contact range"""
    try:
        minutes = estimator.estimate_minutes_sync()
    except IssTrackerError as e:
        logger.error("time_to_contact_failed", error=str(e))
        return _error_response(e)
    return jsonify({"minutes": minutes})


@app.errorhandler(Exception)
def handle_error(error):
    """Global error handler"""
    if isinstance(error, HTTPException):
        return error
    logger.error("unhandled_error", error=str(error), traceback=traceback.format_exc())
    return jsonify({
        "error": "Internal server error",
        "timestamp": datetime.now(timezone.utc).isoformat()
    }), 500


if __name__ == '__main__':
    logger.info("Starting ISS tracker service", host=config.HOST, port=config.PORT)
    app.run(host=config.HOST, port=config.PORT)
