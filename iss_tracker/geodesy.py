"""
Ground Geometry Module

Spherical-Earth geometry between a ground observer and a satellite subpoint:

- Great-circle (haversine) distance between two geographic points
- Elevation angle of a satellite seen from a ground point at a given
  central angle from its subpoint
- Maximum ground distance at which a satellite still clears a minimum
  elevation angle (the contact radius)

All distances are in kilometers over a sphere of mean Earth radius.
"""

import math

from config import EARTH_MEAN_RADIUS_KM, HORIZON_BISECTION_ITERATIONS


def ground_distance_km(lat1_deg: float, lon1_deg: float,
                       lat2_deg: float, lon2_deg: float) -> float:
    """
    Great-circle distance between two points using the haversine formula.

    Args:
        lat1_deg: Latitude of the first point (degrees)
        lon1_deg: Longitude of the first point (degrees)
        lat2_deg: Latitude of the second point (degrees)
        lon2_deg: Longitude of the second point (degrees)

    Returns:
        Distance in km. Symmetric, zero for identical points, never NaN.
    """
    lat1 = math.radians(lat1_deg)
    lon1 = math.radians(lon1_deg)
    lat2 = math.radians(lat2_deg)
    lon2 = math.radians(lon2_deg)

    dlat = lat2 - lat1
    dlon = lon2 - lon1

    sin_dlat2 = math.sin(dlat / 2.0)
    sin_dlon2 = math.sin(dlon / 2.0)

    a = sin_dlat2 * sin_dlat2 + math.cos(lat1) * math.cos(lat2) * sin_dlon2 * sin_dlon2
    # Rounding can push a slightly outside [0, 1] near antipodal points
    a = min(max(a, 0.0), 1.0)
    c = 2.0 * math.atan2(math.sqrt(a), math.sqrt(1.0 - a))

    return EARTH_MEAN_RADIUS_KM * c


def elevation_angle_rad(central_angle_rad: float, alt_km: float) -> float:
    """Elevation of a satellite at alt_km seen from central_angle_rad away from its subpoint."""
    r = EARTH_MEAN_RADIUS_KM + alt_km
    return math.atan2(
        math.cos(central_angle_rad) - EARTH_MEAN_RADIUS_KM / r,
        math.sin(central_angle_rad),
    )


def horizon_distance_km(alt_km: float) -> float:
    """Ground distance at which a satellite at alt_km sits exactly on the horizon."""
    r = EARTH_MEAN_RADIUS_KM + alt_km
    return EARTH_MEAN_RADIUS_KM * math.acos(EARTH_MEAN_RADIUS_KM / r)


def max_contact_distance_km(alt_km: float, min_elev_deg: float) -> float:
    """
    Maximum ground distance at which the satellite is at or above min_elev_deg.

    The elevation angle decreases monotonically as the central angle grows
    from 0 to the horizon angle, so a fixed-count bisection over that bracket
    converges on the largest angle still meeting the threshold.

    Args:
        alt_km: Satellite altitude above the mean sphere (km, >= 0)
        min_elev_deg: Minimum usable elevation angle (degrees)

    Returns:
        Ground distance in km. Decreases as min_elev_deg grows and increases
        with altitude.
    """
    r = EARTH_MEAN_RADIUS_KM + alt_km
    psi_horizon = math.acos(EARTH_MEAN_RADIUS_KM / r)

    if min_elev_deg <= 0.0:
        return EARTH_MEAN_RADIUS_KM * psi_horizon

    e_min = math.radians(min_elev_deg)
    lo = 0.0
    hi = psi_horizon
    for _ in range(HORIZON_BISECTION_ITERATIONS):
        mid = (lo + hi) * 0.5
        if elevation_angle_rad(mid, alt_km) >= e_min:
            lo = mid
        else:
            hi = mid

    return EARTH_MEAN_RADIUS_KM * lo
