"""
ISS Location Feed

Fetches the current ISS state (subpoint, altitude, velocity) from the
configured location endpoint.
"""

from typing import Optional, Tuple

import requests
from pydantic import ValidationError

from config import config
from iss_tracker.errors import FormatFailure, NetworkFailure
from iss_tracker.models import SatelliteState
from logging_config import get_logger

logger = get_logger(__name__)


def fetch_iss_location(url: Optional[str] = None,
                       timeout: Optional[float] = None) -> SatelliteState:
    """
    Get the ISS's current state.

    Raises:
        NetworkFailure: On transport errors or a non-success HTTP status
        FormatFailure: If the body is not JSON of the expected shape
    """
    url = url or config.LOCATION_URL
    timeout = timeout if timeout is not None else config.HTTP_TIMEOUT

    try:
        response = requests.get(url, timeout=timeout)
        response.raise_for_status()
    except requests.RequestException as e:
        logger.error("location_fetch_failed", url=url, error=str(e))
        raise NetworkFailure(str(e)) from e

    try:
        return SatelliteState.model_validate(response.json())
    except (ValueError, ValidationError) as e:
        raise FormatFailure(f"Unexpected location response: {e}") from e


def fetch_iss_coords(url: Optional[str] = None,
                     timeout: Optional[float] = None) -> Tuple[float, float, float]:
    """Latitude, longitude and altitude only."""
    state = fetch_iss_location(url, timeout)
    return state.latitude, state.longitude, state.altitude
