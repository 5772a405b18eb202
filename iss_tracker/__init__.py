"""
ISS Contact Tracker Package

This package estimates the geometric relationship between a ground observer
and the International Space Station.

Modules:
    geodesy: Great-circle distance and elevation-limited contact radius
    orbit_path: SGP4 ground track around the current instant
    tle_source: Orbital element fetching and parsing
    location_feed: Current ISS state
    geolocation: Observer position from IP geolocation providers
    contact: Minutes-until-contact estimate
    app: Flask JSON service exposing the above
"""

__version__ = "1.0.0"
