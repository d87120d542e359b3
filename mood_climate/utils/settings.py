"""
Runtime configuration read from the environment (and a .env file).
"""

import logging
import os
from dataclasses import dataclass
from typing import Mapping, Optional

from dotenv import load_dotenv

logger = logging.getLogger(__name__)


# ============================================================================
# DEFAULTS
# ============================================================================

DEFAULT_DATA_DIR = "data"
DEFAULT_DATABASE_NAME = "mood_climate"
DEFAULT_USER_AGENT = "EmotionalWeatherApp/1.0"
DEFAULT_LOG_DIR = "logs"

GEOLOCATION_PROVIDERS = ("ip", "static", "none")
WEATHER_PROVIDERS = ("simulated", "open-meteo")


def _parse_float(value: Optional[str], name: str) -> Optional[float]:
    if value is None or value == "":
        return None
    try:
        return float(value)
    except ValueError:
        logger.warning(f"Ignoring invalid {name}={value!r}")
        return None


def _parse_int(value: Optional[str], name: str) -> Optional[int]:
    if value is None or value == "":
        return None
    try:
        return int(value)
    except ValueError:
        logger.warning(f"Ignoring invalid {name}={value!r}")
        return None


@dataclass
class Settings:
    """Application settings."""
    data_dir: str = DEFAULT_DATA_DIR
    mongodb_uri: Optional[str] = None
    database_name: str = DEFAULT_DATABASE_NAME
    geolocation_provider: str = "ip"
    default_latitude: Optional[float] = None
    default_longitude: Optional[float] = None
    weather_provider: str = "simulated"
    nominatim_user_agent: str = DEFAULT_USER_AGENT
    log_level: str = "INFO"
    log_dir: str = DEFAULT_LOG_DIR
    seed: Optional[int] = None

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """
        Builds settings from environment variables.

        Unknown provider names fall back to the defaults with a warning.
        """
        env = os.environ if environ is None else environ

        geolocation = env.get("GEOLOCATION_PROVIDER", "ip").strip().lower()
        if geolocation not in GEOLOCATION_PROVIDERS:
            logger.warning(f"Unknown GEOLOCATION_PROVIDER '{geolocation}', using 'ip'")
            geolocation = "ip"

        weather = env.get("WEATHER_PROVIDER", "simulated").strip().lower()
        if weather not in WEATHER_PROVIDERS:
            logger.warning(f"Unknown WEATHER_PROVIDER '{weather}', using 'simulated'")
            weather = "simulated"

        return cls(
            data_dir=env.get("MOOD_CLIMATE_DATA_DIR") or DEFAULT_DATA_DIR,
            mongodb_uri=env.get("MONGODB_URI") or None,
            database_name=env.get("MOOD_CLIMATE_DATABASE") or DEFAULT_DATABASE_NAME,
            geolocation_provider=geolocation,
            default_latitude=_parse_float(env.get("DEFAULT_LATITUDE"), "DEFAULT_LATITUDE"),
            default_longitude=_parse_float(env.get("DEFAULT_LONGITUDE"), "DEFAULT_LONGITUDE"),
            weather_provider=weather,
            nominatim_user_agent=env.get("NOMINATIM_USER_AGENT") or DEFAULT_USER_AGENT,
            log_level=(env.get("LOG_LEVEL") or "INFO").upper(),
            log_dir=env.get("MOOD_CLIMATE_LOG_DIR") or DEFAULT_LOG_DIR,
            seed=_parse_int(env.get("MOOD_CLIMATE_SEED"), "MOOD_CLIMATE_SEED"),
        )


def load_settings(dotenv_path: Optional[str] = None) -> Settings:
    """Loads a .env file (if any) then reads settings from the environment."""
    load_dotenv(dotenv_path=dotenv_path)
    return Settings.from_env()
