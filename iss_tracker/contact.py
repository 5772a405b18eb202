"""
Contact Time Estimation

Estimates how many minutes remain until the ISS is next within contact range
of the observer, where contact range is the ground distance at which the
station clears MIN_CONTACT_ELEVATION_DEG.

The estimate is a rough advisory heuristic:

1. Fetch the observer position and the ISS state concurrently. Either
   failure aborts the estimate.
2. If the current ground distance is inside the contact radius, the answer
   is 0.
3. Otherwise wait SAMPLE_INTERVAL_SEC, re-sample the ISS subpoint and decide
   whether the station is approaching or receding.
4. Divide the remaining gap by the reported orbital ground speed. For a
   receding station the quotient is read as time since the last pass, and
   the next pass is one orbital period after that.

The orbital speed stands in for the rate at which the gap closes, so
near-tangential passes and stale state can be misestimated.
"""

import asyncio
import math
from concurrent.futures import ThreadPoolExecutor
from typing import Awaitable, Callable, Tuple

from config import (
    ISS_ORBITAL_PERIOD_MIN,
    MIN_CONTACT_ELEVATION_DEG,
    MIN_GROUND_SPEED_KMS,
    NO_SIGNAL_SPEED_KMS,
    SAMPLE_INTERVAL_SEC,
)
from iss_tracker.geodesy import ground_distance_km, max_contact_distance_km
from iss_tracker.geolocation import locate_observer
from iss_tracker.location_feed import fetch_iss_coords, fetch_iss_location
from iss_tracker.models import SatelliteState
from logging_config import get_logger

logger = get_logger(__name__)

# Worker pool for blocking fetches; asyncio.run does not join it on shutdown
executor = ThreadPoolExecutor(max_workers=8)


def _round_tenth(minutes: float) -> float:
    # Half-up rounding; minutes is never negative here
    return math.floor(minutes * 10.0 + 0.5) / 10.0


class ContactEstimator:
    """
    Minutes-until-contact estimator.

    Holds no per-call state, so one instance can serve concurrent callers.
    The fetchers are blocking callables run in worker threads; sleep is an
    awaitable factory so tests can skip the sampling interval.
    """

    def __init__(self,
                 locate: Callable[[], Tuple[float, float]] = locate_observer,
                 fetch_state: Callable[[], SatelliteState] = fetch_iss_location,
                 fetch_coords: Callable[[], Tuple[float, float, float]] = fetch_iss_coords,
                 sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
                 min_elevation_deg: float = MIN_CONTACT_ELEVATION_DEG,
                 sample_interval_sec: float = SAMPLE_INTERVAL_SEC):
        self.locate = locate
        self.fetch_state = fetch_state
        self.fetch_coords = fetch_coords
        self.sleep = sleep
        self.min_elevation_deg = min_elevation_deg
        self.sample_interval_sec = sample_interval_sec

    async def estimate_minutes(self) -> float:
        """
        Estimate minutes until the ISS is next in contact range.

        Returns:
            Non-negative minutes rounded to one decimal place; 0.0 when the
            station is already in range

        Raises:
            IssTrackerError: Whatever the observer or ISS fetch raised
        """
        loop = asyncio.get_running_loop()
        fetches = (
            loop.run_in_executor(executor, self.locate),
            loop.run_in_executor(executor, self.fetch_state),
        )
        try:
            (user_lat, user_lon), iss0 = await asyncio.gather(*fetches)
        except BaseException:
            for fetch in fetches:
                fetch.cancel()
            raise

        d0 = ground_distance_km(user_lat, user_lon, iss0.latitude, iss0.longitude)
        d_max = max_contact_distance_km(iss0.altitude, self.min_elevation_deg)

        if d0 <= d_max:
            logger.info("contact_estimate", in_range=True, d0_km=d0, d_max_km=d_max)
            return 0.0

        await self.sleep(self.sample_interval_sec)

        iss_lat1, iss_lon1, _iss_alt1 = await loop.run_in_executor(executor, self.fetch_coords)
        d1 = ground_distance_km(user_lat, user_lon, iss_lat1, iss_lon1)

        minutes = self._minutes_from_samples(d0, d1, d_max, iss0.velocity)
        logger.info(
            "contact_estimate",
            in_range=False,
            d0_km=d0,
            d1_km=d1,
            d_max_km=d_max,
            approaching=d1 < d0,
            minutes=minutes,
        )
        return minutes

    def estimate_minutes_sync(self) -> float:
        """Blocking wrapper for callers outside an event loop."""
        return asyncio.run(self.estimate_minutes())

    @staticmethod
    def _minutes_from_samples(d0: float, d1: float, d_max: float,
                              velocity_kmh: float) -> float:
        raw_speed = velocity_kmh / 3600.0
        if raw_speed <= NO_SIGNAL_SPEED_KMS:
            return ISS_ORBITAL_PERIOD_MIN
        speed = max(raw_speed, MIN_GROUND_SPEED_KMS)

        seconds = (d0 - d_max) / speed
        if not d1 < d0:
            seconds = max(0.0, ISS_ORBITAL_PERIOD_MIN * 60.0 - seconds)

        return _round_tenth(max(0.0, seconds / 60.0))

