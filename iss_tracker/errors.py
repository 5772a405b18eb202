"""Exceptions raised by the ISS tracker."""


class IssTrackerError(RuntimeError):
    """Base class for every failure surfaced to callers."""


class NetworkFailure(IssTrackerError):
    """Transport-level fetch failure."""


class FormatFailure(IssTrackerError):
    """A response did not parse as JSON or as a TLE in any accepted shape."""


class GeometryFailure(IssTrackerError):
    """An orbit propagation produced no usable sample points."""


class AllProvidersFailure(IssTrackerError):
    """Every geolocation provider in the fallback chain failed."""


class PropagationError(IssTrackerError):
    """A single propagation sample could not be computed."""
