"""
ISS Tracker Configuration and Constants

This module contains the physical constants, operational thresholds and
service settings used throughout the project.

Constants:
    Mean spherical Earth radius for ground-distance and visibility geometry,
    WGS-84 ellipsoid parameters for ECI to geodetic conversion.

Operational thresholds:
    The contact estimator treats a satellite as reachable once it rises above
    MIN_CONTACT_ELEVATION_DEG. When it is out of range, two state samples
    SAMPLE_INTERVAL_SEC apart decide whether it is approaching or receding.

Fallback TLE Data:
    Hardcoded ISS TLE data for demonstrations and testing when live data is unavailable.

    IMPORTANT: Update this TLE data periodically for accuracy.
    Low Earth Orbit (LEO) satellites should be refreshed at least weekly.

Service settings:
    Endpoints and timeouts are read from the environment once, at import.
"""

import os
from typing import Dict, Any

# Spherical Earth (km), used by the haversine and horizon geometry
EARTH_MEAN_RADIUS_KM: float = 6371.0

# WGS-84 ellipsoid (km), used when converting ECI positions to geodetic
WGS84_EQUATORIAL_RADIUS_KM: float = 6378.137
WGS84_POLAR_RADIUS_KM: float = 6356.7523142
GEODETIC_ITERATIONS: int = 20

# Contact estimation
ISS_ORBITAL_PERIOD_MIN: float = 92.6
MIN_CONTACT_ELEVATION_DEG: float = 10.0
SAMPLE_INTERVAL_SEC: float = 10.0
MIN_GROUND_SPEED_KMS: float = 0.001
NO_SIGNAL_SPEED_KMS: float = 0.0001
HORIZON_BISECTION_ITERATIONS: int = 60

# Ground track sampling (minutes)
DEFAULT_ORBIT_SPAN_MIN: int = 90
DEFAULT_ORBIT_STEP_MIN: int = 2
MAX_ORBIT_SPAN_MIN: int = 1440

ISS_NORAD_ID: int = 25544

# Fallback ISS TLE for demonstrations and testing
FALLBACK_ISS_TLE: Dict[str, Any] = {
    'name': 'ISS (ZARYA)',
    'norad_id': ISS_NORAD_ID,
    'line1': '1 25544U 98067A   23259.57580000  .00012022  00000-0  21844-3 0  9995',
    'line2': '2 25544  51.6416 220.9944 0004263 122.0101 312.2755 15.49541986415598',
    'epoch': '2023-09-16T13:49:09Z',
}


class ServiceConfig:
    """Environment-driven service settings."""

    LOCATION_URL = os.getenv(
        'ISS_LOCATION_URL', f'https://api.wheretheiss.at/v1/satellites/{ISS_NORAD_ID}'
    )
    TLE_URL = os.getenv(
        'ISS_TLE_URL', f'https://api.wheretheiss.at/v1/satellites/{ISS_NORAD_ID}/tles'
    )
    HTTP_TIMEOUT = float(os.getenv('ISS_HTTP_TIMEOUT', '10'))
    LOG_LEVEL = os.getenv('ISS_LOG_LEVEL', 'INFO').upper()
    HOST = os.getenv('ISS_SERVICE_HOST', '127.0.0.1')
    PORT = int(os.getenv('ISS_SERVICE_PORT', '5000'))


config = ServiceConfig()
