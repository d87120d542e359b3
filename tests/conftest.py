import pytest
import os
import sys
from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock

# Add project root to Python Path so modules can be imported
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from mood_climate.adapters.repositories.state_store import JsonStateStore
from mood_climate.core.models import Coordinates, MoodEntry

# ============================================================================
# 1. GLOBAL MOCKS (ENV VARS)
# ============================================================================

@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path):
    """Keeps tests away from a developer's real .env and data directory."""
    for name in ("MONGODB_URI", "GEOLOCATION_PROVIDER", "WEATHER_PROVIDER",
                 "DEFAULT_LATITUDE", "DEFAULT_LONGITUDE", "MOOD_CLIMATE_SEED"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("MOOD_CLIMATE_DATA_DIR", str(tmp_path / "data"))
    monkeypatch.setenv("MOOD_CLIMATE_LOG_DIR", str(tmp_path / "logs"))
    yield

# ============================================================================
# 2. STORAGE FIXTURES
# ============================================================================

@pytest.fixture
def json_store(tmp_path):
    """JSON state store in a temporary directory."""
    return JsonStateStore(str(tmp_path / "state"))

@pytest.fixture
def memory_store():
    """In-memory stand-in for a state store."""
    store = MagicMock()
    store.load_entries.return_value = []
    store.load_location.return_value = None
    return store

# ============================================================================
# 3. DOMAIN DATA FIXTURES
# ============================================================================

@pytest.fixture
def make_entry():
    """Factory for MoodEntry objects with sequential timestamps."""
    base = datetime(2025, 1, 1, 12, 0, tzinfo=timezone.utc)
    counter = {"n": 0}

    def _make(mood="joyful", intensity=50, location="Tampines, Singapore", coordinates=None):
        counter["n"] += 1
        return MoodEntry(
            id=f"entry-{counter['n']}",
            mood=mood,
            intensity=intensity,
            timestamp=base + timedelta(minutes=counter["n"]),
            location=location,
            coordinates=coordinates,
        )

    return _make

@pytest.fixture
def singapore_coordinates():
    return Coordinates(lat=1.3521, lng=103.8198)

@pytest.fixture
def paris_coordinates():
    return Coordinates(lat=48.8566, lng=2.3522)

@pytest.fixture
def singapore_address():
    """Nominatim-style address bag for a Singapore housing estate."""
    return {
        "road": "Tampines Street 81",
        "neighbourhood": "Tampines Estate",
        "suburb": "Tampines",
        "city_district": "Tampines West",
        "country": "Singapore",
        "country_code": "sg",
        "postcode": "520801",
    }

@pytest.fixture
def paris_address():
    return {
        "road": "Rue de Rivoli",
        "suburb": "Paris 1er Arrondissement",
        "city": "Paris",
        "state": "Île-de-France",
        "country": "France",
        "country_code": "fr",
    }
