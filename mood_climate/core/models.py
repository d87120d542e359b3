"""
Domain models shared by the resolver, journal, aggregator and weather layers.

All records serialize to plain dicts so they can be written to the JSON
store or to MongoDB unchanged.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional, Dict, Any


# ============================================================================
# ENUMS
# ============================================================================

class Trend(Enum):
    """Direction of the two most recent reports in a climate window."""
    IMPROVING = "improving"
    DECLINING = "declining"
    STABLE = "stable"


class PermissionState(Enum):
    """Location permission lifecycle."""
    PENDING = "pending"
    GRANTED = "granted"
    DENIED = "denied"
    UNSUPPORTED = "unsupported"


# ============================================================================
# DATA CLASSES
# ============================================================================

@dataclass(frozen=True)
class Coordinates:
    """A captured latitude/longitude pair."""
    lat: float
    lng: float

    def to_dict(self) -> Dict[str, float]:
        return {"lat": self.lat, "lng": self.lng}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Coordinates":
        return cls(lat=float(data["lat"]), lng=float(data["lng"]))


@dataclass
class LocationData:
    """Normalized, display-ready location."""
    city: str
    region: str
    country: str
    coordinates: Coordinates
    district: Optional[str] = None
    neighborhood: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "city": self.city,
            "region": self.region,
            "country": self.country,
            "district": self.district,
            "neighborhood": self.neighborhood,
            "coordinates": self.coordinates.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LocationData":
        return cls(
            city=data.get("city", ""),
            region=data.get("region", ""),
            country=data.get("country", ""),
            district=data.get("district"),
            neighborhood=data.get("neighborhood"),
            coordinates=Coordinates.from_dict(data["coordinates"]),
        )


@dataclass(frozen=True)
class MoodEntry:
    """A single mood report. Never edited, only evicted."""
    id: str
    mood: str
    intensity: int
    timestamp: datetime
    location: str
    coordinates: Optional[Coordinates] = None

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "id": self.id,
            "mood": self.mood,
            "intensity": self.intensity,
            "timestamp": self.timestamp.isoformat(),
            "location": self.location,
        }
        if self.coordinates is not None:
            data["coordinates"] = self.coordinates.to_dict()
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MoodEntry":
        """
        Rebuilds an entry from its stored form.

        Raises:
            KeyError, ValueError, TypeError: If the record is malformed.
        """
        mood = data["mood"]
        intensity = data["intensity"]
        location = data["location"]
        if not isinstance(mood, str) or not mood.strip():
            raise ValueError(f"Invalid mood {mood!r}")
        if isinstance(intensity, bool) or not isinstance(intensity, int):
            raise TypeError(f"Intensity must be an integer, got {intensity!r}")
        if not isinstance(location, str) or not location:
            raise ValueError(f"Invalid location {location!r}")

        coords = data.get("coordinates")
        return cls(
            id=str(data["id"]),
            mood=mood,
            intensity=intensity,
            timestamp=datetime.fromisoformat(data["timestamp"].replace("Z", "+00:00")),
            location=location,
            coordinates=Coordinates.from_dict(coords) if coords else None,
        )


@dataclass
class WeatherSnapshot:
    """Environmental readings for a location."""
    temperature: float
    humidity: float
    uv_index: float
    condition: str
    wind_speed: float
    pressure: float
    visibility: float
    feels_like: float

    def __str__(self) -> str:
        return (f"{self.condition}, {self.temperature}C (feels like {self.feels_like}C), "
                f"humidity {self.humidity}%, UV {self.uv_index}, wind {self.wind_speed} km/h, "
                f"{self.pressure} hPa, visibility {self.visibility} km")


@dataclass
class ClimateSummary:
    """Rolling summary of the recent reports for a location."""
    average_intensity: int
    dominant_mood: str
    total_reports: int
    trend: Trend


@dataclass
class EmotionalInsights:
    """Journal-wide counters shown next to the local climate."""
    total_reports: int
    recent_average: int
    recent_reports: int
    locations: int
