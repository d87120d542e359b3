"""
Location resolution: turns a reverse-geocoding address bag into a
normalized LocationData and a display string.

Singapore addresses get special handling because the provider rarely fills
`city` there; the most specific neighbourhood/district field wins instead.
"""

import logging
import re
from collections import abc
from typing import Any, List, Mapping, Optional

from mood_climate.core.models import Coordinates, LocationData

logger = logging.getLogger(__name__)


# ============================================================================
# CONFIGURATION - ADDRESS FIELD PRIORITIES
# ============================================================================

class AddressFields:
    """Ordered address keys consulted for each LocationData field."""

    CITY: List[str] = ['city', 'town', 'village', 'municipality', 'county', 'state_district']
    REGION: List[str] = ['state', 'province', 'region', 'county']

    # Singapore
    NEIGHBORHOOD: List[str] = ['neighbourhood', 'suburb', 'residential', 'quarter', 'hamlet']
    NEIGHBORHOOD_ALT: List[str] = ['amenity', 'building', 'house_name']
    DISTRICT: List[str] = ['city_district', 'district', 'subdistrict', 'town', 'village', 'municipality']
    DISTRICT_ALT: List[str] = ['road', 'pedestrian', 'footway']


DEFAULT_CITY = "Unknown City"
DEFAULT_REGION = ""
DEFAULT_COUNTRY = "Unknown Country"

FALLBACK_REGION = "Coordinates"
FALLBACK_COUNTRY = "Unknown"

SINGAPORE = "Singapore"

GENERIC_SUFFIX_PATTERN = re.compile(
    r'\s+(Estate|Park|Gardens?|Court|Place|Avenue|Road|Street|Drive|Lane|Walk|'
    r'Close|Crescent|Rise|Hill|View|Heights?)$',
    re.IGNORECASE
)


def is_singapore(country: Optional[str]) -> bool:
    return bool(country) and 'singapore' in country.lower()


def first_present(address: Mapping[str, Any], keys: List[str]) -> Optional[str]:
    """Returns the first non-empty string value among `keys`, or None."""
    for key in keys:
        value = address.get(key)
        if isinstance(value, str) and value:
            return value
    return None


def strip_generic_suffix(name: Optional[str]) -> Optional[str]:
    """Drops one trailing generic word such as 'Estate' or 'Gardens'."""
    if not name:
        return name
    return GENERIC_SUFFIX_PATTERN.sub('', name)


# ============================================================================
# RESOLVER
# ============================================================================

class LocationResolver:
    """Normalizes reverse-geocoding output into LocationData."""

    @staticmethod
    def resolve(address: Optional[Mapping[str, Any]], coordinates: Coordinates) -> LocationData:
        """
        Builds a LocationData from a provider address bag.

        Args:
            address: Flat mapping of address components, or None when the
                geocoding call failed.
            coordinates: The coordinates that were geocoded.

        Returns:
            A structurally valid LocationData. Never raises.
        """
        if address is None or not isinstance(address, abc.Mapping):
            return LocationResolver.resolve_failure(coordinates)

        try:
            return LocationResolver._resolve_address(address, coordinates)
        except Exception as e:
            logger.error(f"Failed to normalize address {address!r}: {e}")
            return LocationResolver.resolve_failure(coordinates)

    @staticmethod
    def resolve_failure(coordinates: Coordinates) -> LocationData:
        """Coordinate-derived location used when geocoding is unavailable."""
        return LocationData(
            city=f"Location {coordinates.lat:.2f}, {coordinates.lng:.2f}",
            region=FALLBACK_REGION,
            country=FALLBACK_COUNTRY,
            district=None,
            neighborhood=None,
            coordinates=coordinates,
        )

    @staticmethod
    def _resolve_address(address: Mapping[str, Any], coordinates: Coordinates) -> LocationData:
        neighborhood = None
        district = None

        raw_country = first_present(address, ['country'])
        if is_singapore(raw_country):
            neighborhood = (first_present(address, AddressFields.NEIGHBORHOOD)
                            or first_present(address, AddressFields.NEIGHBORHOOD_ALT))
            district = (first_present(address, AddressFields.DISTRICT)
                        or first_present(address, AddressFields.DISTRICT_ALT))

            neighborhood = strip_generic_suffix(neighborhood)
            district = strip_generic_suffix(district)

        return LocationData(
            city=first_present(address, AddressFields.CITY) or DEFAULT_CITY,
            region=first_present(address, AddressFields.REGION) or DEFAULT_REGION,
            country=raw_country or DEFAULT_COUNTRY,
            district=district or None,
            neighborhood=neighborhood or None,
            coordinates=coordinates,
        )

    @staticmethod
    def format_display(location: LocationData) -> str:
        """
        Human-readable label for a location.

        Singapore labels use the most specific area available; everything
        else is "{city}, {country}".
        """
        if is_singapore(location.country):
            if location.neighborhood:
                return f"{location.neighborhood}, {SINGAPORE}"
            if location.district:
                return f"{location.district}, {SINGAPORE}"
            if location.region and location.region != SINGAPORE:
                return f"{location.region}, {SINGAPORE}"
            if location.city and location.city != SINGAPORE:
                return f"{location.city}, {SINGAPORE}"
            return SINGAPORE

        return f"{location.city}, {location.country}"
