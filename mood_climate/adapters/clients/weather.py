"""
Environment snapshot for the current location.

Two sources are supported:
- EnvironmentSimulator: coordinate-driven synthetic readings (default)
- OpenMeteoWeatherProvider: live current conditions from the Open-Meteo API

Whatever the source, a failure is replaced by FALLBACK_SNAPSHOT so callers
always get a reading.
"""

import logging
import random
from dataclasses import replace
from typing import Any, Dict, List, Optional, Tuple

import requests

from mood_climate.core.climate import round_half_up
from mood_climate.core.models import WeatherSnapshot

logger = logging.getLogger(__name__)


# ============================================================================
# CONSTANTS & CONFIGURATION
# ============================================================================

# Open-Meteo API
API_URL = "https://api.open-meteo.com/v1/forecast"
REQUEST_TIMEOUT = 10
CURRENT_FIELDS = (
    "temperature_2m,relative_humidity_2m,apparent_temperature,weather_code,"
    "surface_pressure,wind_speed_10m,uv_index,visibility"
)

SIMULATED_CONDITIONS: List[str] = ['Clear', 'Partly Cloudy', 'Cloudy', 'Light Rain']

# (low, high) sampling ranges
TEMPERATURE_RANGE: Tuple[int, int] = (20, 35)
HUMIDITY_RANGE: Tuple[int, int] = (40, 80)
UV_INDEX_RANGE: Tuple[int, int] = (1, 11)
WIND_SPEED_RANGE: Tuple[int, int] = (5, 20)
PRESSURE_RANGE: Tuple[int, int] = (1000, 1050)
VISIBILITY_RANGE: Tuple[int, int] = (8, 15)
FEELS_LIKE_RANGE: Tuple[int, int] = (22, 34)

NORTHERN_LATITUDE = 40
TROPICAL_LATITUDE = 10

FALLBACK_SNAPSHOT = WeatherSnapshot(
    temperature=25,
    humidity=60,
    uv_index=5,
    condition='Partly Cloudy',
    wind_speed=10,
    pressure=1013,
    visibility=10,
    feels_like=27,
)


class WeatherProviderError(Exception):
    """Raised when a live weather provider cannot deliver a snapshot."""
    pass


def fallback_snapshot() -> WeatherSnapshot:
    return replace(FALLBACK_SNAPSHOT)


# ============================================================================
# WMO CODE INTERPRETER
# ============================================================================

class WMOInterpreter:
    """Collapses WMO weather codes onto the simulator's condition labels."""

    CLEAR_CODES = (0, 1)
    PARTLY_CLOUDY_CODES = (2,)
    CLOUDY_CODES = (3, 45, 48)
    PRECIPITATION_CODES = (51, 53, 55, 56, 57, 61, 63, 65, 66, 67, 71, 73, 75, 77,
                           80, 81, 82, 85, 86, 95, 96, 99)

    CODE_MAPPINGS = {
        **{code: "Clear" for code in CLEAR_CODES},
        **{code: "Partly Cloudy" for code in PARTLY_CLOUDY_CODES},
        **{code: "Cloudy" for code in CLOUDY_CODES},
        **{code: "Light Rain" for code in PRECIPITATION_CODES},
    }

    @classmethod
    def interpret(cls, wmo_code: int) -> str:
        if wmo_code not in cls.CODE_MAPPINGS:
            logger.warning(f"Unknown WMO code: {wmo_code}, defaulting to 'Cloudy'")
            return "Cloudy"
        return cls.CODE_MAPPINGS[wmo_code]


# ============================================================================
# SIMULATOR
# ============================================================================

class EnvironmentSimulator:
    """Generates plausible readings from coordinates."""

    def __init__(self, rng: Optional[random.Random] = None):
        """
        Args:
            rng: Random source. Pass a seeded instance for reproducible output.
        """
        self.rng = rng or random.Random()

    def _sample(self, bounds: Tuple[int, int]) -> int:
        low, high = bounds
        return int(low + self.rng.random() * (high - low) + 0.5)

    def simulate(self, lat: float, lng: float) -> WeatherSnapshot:
        """
        Samples a snapshot and applies latitude adjustments.

        Returns:
            WeatherSnapshot. Never raises; failures yield the fallback snapshot.
        """
        try:
            snapshot = WeatherSnapshot(
                temperature=self._sample(TEMPERATURE_RANGE),
                humidity=self._sample(HUMIDITY_RANGE),
                uv_index=self._sample(UV_INDEX_RANGE),
                condition=self.rng.choice(SIMULATED_CONDITIONS),
                wind_speed=self._sample(WIND_SPEED_RANGE),
                pressure=self._sample(PRESSURE_RANGE),
                visibility=self._sample(VISIBILITY_RANGE),
                feels_like=self._sample(FEELS_LIKE_RANGE),
            )

            # Northern locations
            if lat > NORTHERN_LATITUDE:
                snapshot.temperature -= 5
                snapshot.humidity += 10
            # Tropical locations (like Singapore)
            if lat < TROPICAL_LATITUDE:
                snapshot.temperature += 5
                snapshot.humidity += 15
                snapshot.uv_index += 2

            return snapshot

        except Exception as e:
            logger.error(f"Weather simulation failed for ({lat}, {lng}): {e}")
            return fallback_snapshot()


# ============================================================================
# API INTERACTION
# ============================================================================

class OpenMeteoWeatherProvider:
    """Handles Open-Meteo API interactions."""

    def __init__(self, api_url: str = API_URL, timeout: int = REQUEST_TIMEOUT):
        self.api_url = api_url
        self.timeout = timeout

    def fetch(self, lat: float, lng: float) -> WeatherSnapshot:
        """
        Fetches current conditions for a coordinate pair.

        Raises:
            WeatherProviderError: On network or parse failure.
        """
        params = {
            "latitude": lat,
            "longitude": lng,
            "current": CURRENT_FIELDS,
            "timezone": "auto",
        }

        try:
            response = requests.get(self.api_url, params=params, timeout=self.timeout)
            response.raise_for_status()
            data = response.json()
        except (requests.RequestException, ValueError) as e:
            raise WeatherProviderError(f"Open-Meteo request failed: {e}") from e

        return self._parse_current(data)

    def _parse_current(self, api_data: Dict[str, Any]) -> WeatherSnapshot:
        """Parses an Open-Meteo `current` block."""
        current = api_data.get("current") if isinstance(api_data, dict) else None
        if not current:
            raise WeatherProviderError("No current conditions in API response")

        try:
            return WeatherSnapshot(
                temperature=round_half_up(float(current["temperature_2m"])),
                humidity=round_half_up(float(current["relative_humidity_2m"])),
                uv_index=round_half_up(float(current.get("uv_index") or 0)),
                condition=WMOInterpreter.interpret(int(current.get("weather_code") or 0)),
                wind_speed=round_half_up(float(current["wind_speed_10m"])),
                pressure=round_half_up(float(current["surface_pressure"])),
                # metres -> km
                visibility=round_half_up(float(current.get("visibility") or 0) / 1000),
                feels_like=round_half_up(float(current["apparent_temperature"])),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise WeatherProviderError(f"Failed to parse current conditions: {e}") from e


# ============================================================================
# PUBLIC API
# ============================================================================

class WeatherService:
    """Chooses the snapshot source and applies the failure fallback."""

    def __init__(self,
                 simulator: Optional[EnvironmentSimulator] = None,
                 provider: Optional[OpenMeteoWeatherProvider] = None):
        self.simulator = simulator or EnvironmentSimulator()
        self.provider = provider

    def get_snapshot(self, lat: float, lng: float) -> WeatherSnapshot:
        """Returns a snapshot for the coordinates. Never raises."""
        if self.provider is None:
            return self.simulator.simulate(lat, lng)

        try:
            snapshot = self.provider.fetch(lat, lng)
            logger.info(f"Weather: {snapshot}")
            return snapshot
        except Exception as e:
            logger.error(f"Weather provider failed: {e}. Using fallback snapshot.")
            return fallback_snapshot()
