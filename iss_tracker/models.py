"""
Data models shared by the tracker modules and the HTTP layer.

All models are frozen: a fetch always produces a new value and nothing
mutates one after the fact.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator


class GeoPoint(BaseModel):
    """Geographic point in degrees."""
    model_config = ConfigDict(frozen=True)

    latitude: float
    longitude: float


class SatelliteState(BaseModel):
    """Satellite state as reported by the location feed"""
    model_config = ConfigDict(frozen=True, extra='ignore')

    latitude: float
    longitude: float
    altitude: float  # km
    timestamp: float
    velocity: float  # km/h


class TleData(BaseModel):
    """Orbital element set with an optional display name"""
    model_config = ConfigDict(frozen=True)

    name: Optional[str] = None
    line1: str
    line2: str

    @field_validator('line1')
    @classmethod
    def _check_line1(cls, value: str) -> str:
        if not value.startswith('1 '):
            raise ValueError("TLE line 1 must start with '1 '")
        return value

    @field_validator('line2')
    @classmethod
    def _check_line2(cls, value: str) -> str:
        if not value.startswith('2 '):
            raise ValueError("TLE line 2 must start with '2 '")
        return value
