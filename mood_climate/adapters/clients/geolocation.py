"""
Coordinate acquisition.

Providers:
- IPGeolocationProvider: approximate position from the public IP (ip-api.com)
- StaticCoordinateProvider: fixed position from configuration

GeolocationService adds the acquisition timeout and reuses a recent fix.
"""

import logging
import time
from typing import Callable, Optional, Tuple

import requests

from mood_climate.core.models import Coordinates

logger = logging.getLogger(__name__)


# ============================================================================
# CONSTANTS
# ============================================================================

IP_API_URL = "http://ip-api.com/json/"
ACQUISITION_TIMEOUT = 10          # seconds
MAXIMUM_FIX_AGE = 5 * 60          # seconds


class LocationUnavailableError(Exception):
    """Raised when no coordinate fix can be obtained."""
    pass


# ============================================================================
# PROVIDERS
# ============================================================================

class IPGeolocationProvider:
    """Resolves an approximate position from the caller's public IP."""

    def __init__(self, api_url: str = IP_API_URL):
        self.api_url = api_url

    def locate(self, timeout: float) -> Coordinates:
        try:
            response = requests.get(
                self.api_url,
                params={"fields": "status,message,lat,lon"},
                timeout=timeout
            )
            response.raise_for_status()
            data = response.json()
        except (requests.RequestException, ValueError) as e:
            raise LocationUnavailableError(f"IP geolocation request failed: {e}") from e

        if data.get("status") != "success":
            raise LocationUnavailableError(f"IP geolocation refused: {data.get('message', 'unknown error')}")

        try:
            return Coordinates(lat=float(data["lat"]), lng=float(data["lon"]))
        except (KeyError, TypeError, ValueError) as e:
            raise LocationUnavailableError(f"Malformed IP geolocation response: {e}") from e


class StaticCoordinateProvider:
    """Always reports the configured coordinates."""

    def __init__(self, lat: float, lng: float):
        self.coordinates = Coordinates(lat=lat, lng=lng)

    def locate(self, timeout: float) -> Coordinates:
        return self.coordinates


# ============================================================================
# SERVICE
# ============================================================================

class GeolocationService:
    """
    Acquires coordinates with a timeout, reusing a fix younger than max_age.

    The last fix is held in memory, so reuse applies within one process.
    """

    def __init__(self,
                 provider,
                 timeout: float = ACQUISITION_TIMEOUT,
                 max_age: float = MAXIMUM_FIX_AGE,
                 clock: Callable[[], float] = time.monotonic):
        """
        Args:
            provider: Object exposing locate(timeout) -> Coordinates.
            timeout: Seconds allowed for a fresh acquisition.
            max_age: Seconds a previous fix may be reused for.
            clock: Monotonic time source.
        """
        self.provider = provider
        self.timeout = timeout
        self.max_age = max_age
        self._clock = clock
        self._last_fix: Optional[Tuple[Coordinates, float]] = None

    def acquire(self) -> Coordinates:
        """
        Returns a coordinate fix.

        Raises:
            LocationUnavailableError: If the provider fails or times out.
        """
        now = self._clock()
        if self._last_fix is not None:
            coordinates, acquired_at = self._last_fix
            if now - acquired_at < self.max_age:
                logger.info(f"Reusing recent fix {coordinates.lat:.4f}, {coordinates.lng:.4f}")
                return coordinates

        try:
            coordinates = self.provider.locate(self.timeout)
        except LocationUnavailableError:
            raise
        except Exception as e:
            raise LocationUnavailableError(str(e)) from e

        self._last_fix = (coordinates, self._clock())
        logger.info(f"[OK] Location fix acquired: {coordinates.lat:.4f}, {coordinates.lng:.4f}")
        return coordinates
