"""
Orbit Ground Track Module

Builds the ground track of a satellite over a time window centered on now.
Each sample is propagated independently with SGP4 (through the sgp4 library)
to a TEME/ECI position, rotated by Greenwich mean sidereal time and converted
to geodetic latitude and longitude.

A sample that fails to propagate or convert is skipped. Only a window in
which every sample fails is an error.
"""

import math
from datetime import datetime, timedelta, timezone
from typing import Callable, List, Optional, Tuple

import numpy as np
from sgp4.api import Satrec, jday

from config import (
    DEFAULT_ORBIT_SPAN_MIN,
    DEFAULT_ORBIT_STEP_MIN,
    GEODETIC_ITERATIONS,
    WGS84_EQUATORIAL_RADIUS_KM,
    WGS84_POLAR_RADIUS_KM,
)
from iss_tracker.errors import GeometryFailure, PropagationError
from iss_tracker.models import GeoPoint, TleData
from logging_config import get_logger

logger = get_logger(__name__)


# SGP4 error code meanings
SGP4_ERROR_CODES = {
    0: "No error",
    1: "Mean eccentricity < 0.0 or > 1.0",
    2: "Mean motion < 0.0",
    3: "Perturbed eccentricity < 0.0 or > 1.0",
    4: "Semi-latus rectum < 0.0",
    5: "Satellite has decayed",
    6: "Satellite has decayed (low altitude)",
}

# (orbital elements, timestamp) -> inertial position in km
PositionFunction = Callable[[TleData, datetime], np.ndarray]


def datetime_to_jd_fr(dt: datetime) -> Tuple[float, float]:
    """
    Convert datetime to Julian date and fraction.

    Naive datetimes are taken to be UTC.
    """
    if dt.tzinfo is not None:
        dt = dt.astimezone(timezone.utc)

    second = dt.second + dt.microsecond / 1e6
    return jday(dt.year, dt.month, dt.day, dt.hour, dt.minute, second)


def gmst_rad(jd: float, fr: float) -> float:
    """
    Greenwich mean sidereal time (IAU-82) in radians, normalized to [0, 2π).

    Args:
        jd: Julian day (UT1)
        fr: Fraction of day
    """
    T = (jd - 2451545.0 + fr) / 36525.0

    gmst_sec = (
        67310.54841 +
        (876600.0 * 3600.0 + 8640184.812866) * T +
        0.093104 * T * T -
        6.2e-6 * T * T * T
    )

    return (gmst_sec % 86400.0) * (2.0 * math.pi / 86400.0)


def eci_to_geodetic(position: np.ndarray, gmst: float) -> Tuple[float, float, float]:
    """
    Convert an ECI position to geodetic coordinates.

    Args:
        position: Position vector [x, y, z] in km
        gmst: Greenwich mean sidereal time (radians)

    Returns:
        Tuple of (latitude_rad, longitude_rad, height_km), longitude wrapped
        into [-π, π]
    """
    a = WGS84_EQUATORIAL_RADIUS_KM
    b = WGS84_POLAR_RADIUS_KM
    f = (a - b) / a
    e2 = 2.0 * f - f * f

    x, y, z = position
    p = math.sqrt(x * x + y * y)

    lon = math.atan2(y, x) - gmst
    while lon < -math.pi:
        lon += 2.0 * math.pi
    while lon > math.pi:
        lon -= 2.0 * math.pi

    lat = math.atan2(z, p)
    C = 1.0
    for _ in range(GEODETIC_ITERATIONS):
        sin_lat = math.sin(lat)
        C = 1.0 / math.sqrt(1.0 - e2 * sin_lat * sin_lat)
        lat = math.atan2(z + a * C * e2 * sin_lat, p)

    height = p / math.cos(lat) - a * C
    return lat, lon, height


def degrees_lat(radians: float) -> float:
    """Latitude in degrees; raises ValueError outside [-π/2, π/2]."""
    if not -math.pi / 2.0 <= radians <= math.pi / 2.0:
        raise ValueError(f"Latitude radians must be in range [-pi/2, pi/2], got {radians}")
    return math.degrees(radians)


def degrees_long(radians: float) -> float:
    """Longitude in degrees; raises ValueError outside [-π, π]."""
    if not -math.pi <= radians <= math.pi:
        raise ValueError(f"Longitude radians must be in range [-pi, pi], got {radians}")
    return math.degrees(radians)


def sgp4_position(tle: TleData, when: datetime) -> np.ndarray:
    """
    Propagate a TLE to a timestamp with SGP4.

    Returns:
        TEME position vector in km

    Raises:
        PropagationError: If the elements cannot be loaded, SGP4 reports an
            error code, or the position is not finite
    """
    try:
        satellite = Satrec.twoline2rv(tle.line1, tle.line2)
    except (ValueError, IndexError) as e:
        raise PropagationError(f"Failed to load satellite: {e}") from e

    jd, fr = datetime_to_jd_fr(when)
    error, position, _velocity = satellite.sgp4(jd, fr)

    if error != 0:
        raise PropagationError(
            f"SGP4 error {error}: {SGP4_ERROR_CODES.get(error, f'Unknown error code {error}')}"
        )

    position = np.array(position, dtype=float)
    if not np.all(np.isfinite(position)):
        raise PropagationError("SGP4 returned a non-finite position")

    return position


def _sample_point(tle: TleData, when: datetime,
                  propagate: PositionFunction) -> Optional[GeoPoint]:
    try:
        position = propagate(tle, when)
    except PropagationError as e:
        logger.debug("orbit_sample_skipped", timestamp=when.isoformat(), reason=str(e))
        return None

    gmst = gmst_rad(*datetime_to_jd_fr(when))
    lat_rad, lon_rad, _height = eci_to_geodetic(position, gmst)

    try:
        lat = degrees_lat(lat_rad)
        lon = degrees_long(lon_rad)
    except ValueError as e:
        logger.debug("orbit_sample_skipped", timestamp=when.isoformat(), reason=str(e))
        return None

    if not (math.isfinite(lat) and math.isfinite(lon)):
        return None

    return GeoPoint(latitude=lat, longitude=lon)


def build_orbit_path(tle: TleData,
                     span_minutes: int = DEFAULT_ORBIT_SPAN_MIN,
                     step_minutes: int = DEFAULT_ORBIT_STEP_MIN,
                     now: Optional[datetime] = None,
                     propagate: PositionFunction = sgp4_position) -> List[GeoPoint]:
    """
    Sample the ground track from now - span to now + span.

    Offsets start at -span and advance by step while they stay <= span, so
    the last sample may fall short of the window edge when step does not
    divide 2 * span. Samples are produced in ascending time order.

    Args:
        tle: Orbital element set
        span_minutes: Half-width of the window, clamped to >= 1
        step_minutes: Sampling step, clamped to >= 1
        now: Window center (default: current UTC time)
        propagate: Position function, SGP4 by default

    Returns:
        Chronologically ordered list of GeoPoint

    Raises:
        GeometryFailure: If no sample produced a usable point
    """
    if now is None:
        now = datetime.now(timezone.utc)

    span = max(int(span_minutes), 1)
    step = max(int(step_minutes), 1)

    points = []
    offset = -span
    while offset <= span:
        point = _sample_point(tle, now + timedelta(minutes=offset), propagate)
        if point is not None:
            points.append(point)
        offset += step

    if not points:
        logger.error("orbit_path_empty", span_minutes=span, step_minutes=step)
        raise GeometryFailure("No orbit points computed.")

    logger.debug("orbit_path_built", points=len(points), span_minutes=span, step_minutes=step)
    return points
