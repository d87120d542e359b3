"""
Reverse geocoding through OpenStreetMap Nominatim (via geopy).

Returns the raw address-field bag; normalization is LocationResolver's job.
"""

import logging
from typing import Any, Dict, Optional

from geopy.exc import GeopyError
from geopy.geocoders import Nominatim

logger = logging.getLogger(__name__)


DEFAULT_USER_AGENT = "EmotionalWeatherApp/1.0"
GEOCODING_TIMEOUT = 10
REVERSE_ZOOM = 18


class GeocodingError(Exception):
    """Raised when reverse geocoding fails (network or parse error)."""
    pass


class NominatimGeocoder:
    """Thin wrapper around geopy's Nominatim reverse lookup."""

    def __init__(self,
                 user_agent: str = DEFAULT_USER_AGENT,
                 timeout: int = GEOCODING_TIMEOUT,
                 geolocator: Optional[Nominatim] = None):
        self.geolocator = geolocator or Nominatim(user_agent=user_agent, timeout=timeout)

    def reverse(self, lat: float, lng: float) -> Dict[str, Any]:
        """
        Looks up the address for a coordinate pair.

        Returns:
            Flat mapping of address components. Empty when the provider has
            no result for the point.

        Raises:
            GeocodingError: If the lookup fails.
        """
        try:
            location = self.geolocator.reverse(
                (lat, lng),
                exactly_one=True,
                addressdetails=True,
                zoom=REVERSE_ZOOM,
            )
        except GeopyError as e:
            logger.error(f"Reverse geocoding failed for ({lat}, {lng}): {e}")
            raise GeocodingError(str(e)) from e
        except Exception as e:
            logger.error(f"Unexpected geocoding error for ({lat}, {lng}): {e}")
            raise GeocodingError(str(e)) from e

        if location is None:
            logger.warning(f"No address found for ({lat}, {lng})")
            return {}

        raw = getattr(location, "raw", None)
        if not isinstance(raw, dict):
            raise GeocodingError("Unexpected geocoding response format")

        address = raw.get("address") or {}
        if not isinstance(address, dict):
            raise GeocodingError("Unexpected address format")
        return address
