"""
Observer Geolocation

Resolves the observer's coordinates from a chain of IP geolocation
providers. Providers are tried strictly in order and the first one that
answers with usable coordinates wins.

Each provider pairs an endpoint with the pydantic model of its response
shape, so the fallback order and the per-provider parsing stay separate.
"""

from dataclasses import dataclass
from typing import Callable, Optional, Sequence, Tuple

import requests
from pydantic import BaseModel, ValidationError

from config import config
from iss_tracker.errors import AllProvidersFailure
from logging_config import get_logger

logger = get_logger(__name__)

Coordinates = Tuple[float, float]


class IpApiCoResponse(BaseModel):
    latitude: float
    longitude: float


class IpInfoResponse(BaseModel):
    loc: str  # "lat,lon"


class IpApiComResponse(BaseModel):
    lat: float
    lon: float


def _coords_from_ipapi_co(payload: dict) -> Coordinates:
    data = IpApiCoResponse.model_validate(payload)
    return data.latitude, data.longitude


def _coords_from_ipinfo(payload: dict) -> Coordinates:
    data = IpInfoResponse.model_validate(payload)
    lat, sep, lon = data.loc.partition(',')
    if not sep:
        raise ValueError(f"Malformed loc field: {data.loc!r}")
    return float(lat.strip()), float(lon.strip())


def _coords_from_ip_api_com(payload: dict) -> Coordinates:
    data = IpApiComResponse.model_validate(payload)
    return data.lat, data.lon


@dataclass(frozen=True)
class GeolocationProvider:
    """An IP geolocation endpoint and the parser for its response shape."""
    name: str
    url: str
    parse: Callable[[dict], Coordinates]

    def locate(self, timeout: float) -> Coordinates:
        response = requests.get(self.url, timeout=timeout)
        response.raise_for_status()
        return self.parse(response.json())


DEFAULT_PROVIDERS = (
    GeolocationProvider('ipapi.co', 'https://ipapi.co/json/', _coords_from_ipapi_co),
    GeolocationProvider('ipinfo.io', 'https://ipinfo.io/json', _coords_from_ipinfo),
    GeolocationProvider('ip-api.com', 'http://ip-api.com/json', _coords_from_ip_api_com),
)


def locate_observer(providers: Sequence[GeolocationProvider] = DEFAULT_PROVIDERS,
                    timeout: Optional[float] = None) -> Coordinates:
    """
    Get the observer's (latitude, longitude) in degrees.

    Raises:
        AllProvidersFailure: If every provider failed
    """
    timeout = timeout if timeout is not None else config.HTTP_TIMEOUT

    for provider in providers:
        try:
            coords = provider.locate(timeout)
        except (requests.RequestException, ValidationError, ValueError) as e:
            logger.warning("geolocation_provider_failed", provider=provider.name, reason=str(e))
            continue

        logger.info("observer_located", provider=provider.name)
        return coords

    raise AllProvidersFailure("All IP geolocation providers failed")
