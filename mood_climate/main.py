"""
Emotional Weather: mood journal and local emotional climate.

This module owns the application state and wires the pipeline:
1. Acquires coordinates (IP lookup or configured position)
2. Reverse geocodes them into a display location (Nominatim)
3. Builds an environment snapshot for the location
4. Appends mood reports to the journal and summarizes the local climate

Commands:
- locate: Resolve and save the current location
- log: Submit a mood report
- climate: Local climate summary
- weather / forecast / history / insights
"""

import argparse
import logging
import random
import sys
from dataclasses import dataclass
from typing import List, Optional

from mood_climate.adapters.clients.geocoding import GeocodingError, NominatimGeocoder
from mood_climate.adapters.clients.geolocation import (
    GeolocationService,
    IPGeolocationProvider,
    LocationUnavailableError,
    StaticCoordinateProvider,
)
from mood_climate.adapters.clients.weather import (
    EnvironmentSimulator,
    OpenMeteoWeatherProvider,
    WeatherService,
)
from mood_climate.adapters.repositories.mongo import MongoStateStore
from mood_climate.adapters.repositories.state_store import JsonStateStore, StorageError
from mood_climate.core.climate import ClimateAggregator, HISTORY_DISPLAY_LIMIT
from mood_climate.core.forecast import (
    DEFAULT_CONDITION,
    EMOTIONAL_CONDITIONS,
    EmotionalCondition,
    generate_forecast,
)
from mood_climate.core.journal import (
    DEFAULT_INTENSITY,
    MAX_INTENSITY,
    MIN_INTENSITY,
    MOOD_OPTIONS,
    MoodJournal,
)
from mood_climate.core.location import LocationResolver
from mood_climate.core.models import (
    ClimateSummary,
    Coordinates,
    EmotionalInsights,
    LocationData,
    MoodEntry,
    PermissionState,
    WeatherSnapshot,
)
from mood_climate.utils.logger import setup_logger
from mood_climate.utils.settings import Settings, load_settings

logger = logging.getLogger(__name__)


# ============================================================================
# CONSTANTS
# ============================================================================

DEFAULT_LOCATION_LABEL = "Your Area"
UNSUPPORTED_LOCATION_LABEL = "Location Not Available"
DENIED_LOCATION_LABEL = "Location Access Denied"


# ============================================================================
# APPLICATION STATE
# ============================================================================

@dataclass
class AppState:
    """Everything the presentation layer reads."""
    location_display: str = DEFAULT_LOCATION_LABEL
    location_data: Optional[LocationData] = None
    permission: PermissionState = PermissionState.PENDING
    weather: Optional[WeatherSnapshot] = None
    forecast: EmotionalCondition = EMOTIONAL_CONDITIONS[DEFAULT_CONDITION]
    is_loading_location: bool = False
    is_loading_weather: bool = False


class ClimateController:
    """Owns AppState and handles the inbound events."""

    def __init__(self,
                 store,
                 geolocation: Optional[GeolocationService],
                 geocoder: NominatimGeocoder,
                 weather: WeatherService,
                 journal: Optional[MoodJournal] = None,
                 rng: Optional[random.Random] = None):
        """
        Args:
            store: State store (JsonStateStore or MongoStateStore).
            geolocation: Coordinate source, or None when location is unsupported.
            geocoder: Reverse geocoder.
            weather: Snapshot source.
            journal: Mood journal; defaults to one backed by `store`.
            rng: Random source for the emotional forecast.
        """
        self.store = store
        self.geolocation = geolocation
        self.geocoder = geocoder
        self.weather = weather
        self.journal = journal or MoodJournal(store)
        self.rng = rng or random.Random()
        self.state = AppState()

    # ------------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------------

    def start(self) -> AppState:
        """Loads persisted state and prepares the initial view."""
        self.journal.load()

        saved = self._load_saved_location()
        if saved is not None:
            self.state.location_data = saved
            self.state.location_display = LocationResolver.format_display(saved)
            self.state.permission = PermissionState.GRANTED
            self.refresh_weather()

        self.refresh_forecast()

        if self.geolocation is None:
            logger.warning("No geolocation provider configured. Location is unsupported.")
            self.state.permission = PermissionState.UNSUPPORTED
            self.state.location_display = UNSUPPORTED_LOCATION_LABEL

        return self.state

    def _load_saved_location(self) -> Optional[LocationData]:
        try:
            raw = self.store.load_location()
        except StorageError as e:
            logger.error(f"Failed to load saved location: {e}")
            return None

        if not raw:
            return None

        try:
            return LocationData.from_dict(raw)
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            logger.warning(f"Ignoring malformed saved location {raw!r}: {e}")
            return None

    # ------------------------------------------------------------------------
    # Location
    # ------------------------------------------------------------------------

    def request_location(self) -> bool:
        """
        Runs the location pipeline: fix, reverse geocode, persist, weather.

        Returns:
            True when permission ends up GRANTED. False when the request was
            rejected (unsupported, already in flight) or failed.
        """
        if self.state.permission is PermissionState.UNSUPPORTED:
            logger.warning("Location request ignored: geolocation unsupported")
            return False

        if self.state.is_loading_location:
            logger.warning("Location request already in progress, rejecting duplicate")
            return False

        self.state.is_loading_location = True
        try:
            coordinates = self.geolocation.acquire()
            location = self._reverse_geocode(coordinates)

            self.state.location_data = location
            self.state.location_display = LocationResolver.format_display(location)
            self.state.permission = PermissionState.GRANTED

            self.store.save_location(location.to_dict())
            logger.info(f"[OK] Location resolved: {self.state.location_display}")

            self.refresh_weather()
            return True

        except (LocationUnavailableError, StorageError) as e:
            logger.error(f"Error getting location: {e}")
            self.state.permission = PermissionState.DENIED
            self.state.location_display = DENIED_LOCATION_LABEL
            return False
        finally:
            self.state.is_loading_location = False

    def _reverse_geocode(self, coordinates: Coordinates) -> LocationData:
        try:
            address = self.geocoder.reverse(coordinates.lat, coordinates.lng)
        except GeocodingError as e:
            logger.warning(f"Reverse geocoding failed, using coordinates: {e}")
            address = None
        return LocationResolver.resolve(address, coordinates)

    # ------------------------------------------------------------------------
    # Environment
    # ------------------------------------------------------------------------

    def refresh_weather(self) -> bool:
        """Recomputes the weather snapshot for the current location."""
        location = self.state.location_data
        if location is None:
            logger.info("No location yet, skipping weather")
            return False

        if self.state.is_loading_weather:
            logger.warning("Weather refresh already in progress, rejecting duplicate")
            return False

        self.state.is_loading_weather = True
        try:
            self.state.weather = self.weather.get_snapshot(location.coordinates.lat, location.coordinates.lng)
            return True
        finally:
            self.state.is_loading_weather = False

    def refresh_forecast(self) -> EmotionalCondition:
        self.state.forecast = generate_forecast(self.rng)
        return self.state.forecast

    # ------------------------------------------------------------------------
    # Mood reports
    # ------------------------------------------------------------------------

    def submit_mood(self, mood: str, intensity: int) -> MoodEntry:
        """
        Appends a mood report for the current location.

        Raises:
            ValueError: If mood is empty or intensity is outside [1, 100].
        """
        if not isinstance(mood, str) or not mood.strip():
            raise ValueError("Mood must be a non-empty string")
        if isinstance(intensity, bool) or not isinstance(intensity, int):
            raise ValueError(f"Intensity must be an integer, got {intensity!r}")
        if not MIN_INTENSITY <= intensity <= MAX_INTENSITY:
            raise ValueError(f"Intensity must be between {MIN_INTENSITY} and {MAX_INTENSITY}, got {intensity}")

        location = self.state.location_data
        try:
            self.journal.append(
                mood,
                intensity,
                self.state.location_display,
                location.coordinates if location else None
            )
        except StorageError as e:
            # In-memory journal keeps the entry; it is written again on the next save.
            logger.error(f"Mood saved in memory only: {e}")

        return self.journal.entries[0]

    # ------------------------------------------------------------------------
    # Views
    # ------------------------------------------------------------------------

    def local_climate(self, filter_by_location: Optional[bool] = None) -> Optional[ClimateSummary]:
        """Climate summary; filters by location whenever one is known unless told otherwise."""
        if filter_by_location is None:
            filter_by_location = self.state.location_data is not None
        return ClimateAggregator.summarize(
            self.journal.entries,
            self.state.location_display,
            filter_by_location
        )

    def insights(self) -> EmotionalInsights:
        return ClimateAggregator.insights(
            self.journal.entries,
            self.state.location_display,
            self.state.location_data is not None
        )

    def recent_reports(self, limit: int = HISTORY_DISPLAY_LIMIT) -> List[MoodEntry]:
        return ClimateAggregator.recent_reports(self.journal.entries, limit)


# ============================================================================
# WIRING
# ============================================================================

def build_store(settings: Settings):
    """MongoDB when MONGODB_URI is set and reachable, JSON files otherwise."""
    if settings.mongodb_uri:
        try:
            return MongoStateStore.from_uri(settings.mongodb_uri, settings.database_name)
        except (StorageError, ValueError) as e:
            logger.error(f"MongoDB unavailable ({e}). Falling back to local JSON store.")
    return JsonStateStore(settings.data_dir)


def build_geolocation(settings: Settings) -> Optional[GeolocationService]:
    if settings.geolocation_provider == "ip":
        return GeolocationService(IPGeolocationProvider())

    if settings.geolocation_provider == "static":
        if settings.default_latitude is None or settings.default_longitude is None:
            logger.warning("Static geolocation needs DEFAULT_LATITUDE and DEFAULT_LONGITUDE")
            return None
        return GeolocationService(StaticCoordinateProvider(settings.default_latitude, settings.default_longitude))

    return None


def build_controller(settings: Settings) -> ClimateController:
    rng = random.Random(settings.seed)
    provider = OpenMeteoWeatherProvider() if settings.weather_provider == "open-meteo" else None

    return ClimateController(
        store=build_store(settings),
        geolocation=build_geolocation(settings),
        geocoder=NominatimGeocoder(user_agent=settings.nominatim_user_agent),
        weather=WeatherService(EnvironmentSimulator(rng), provider),
        rng=rng,
    )


# ============================================================================
# ARGUMENT PARSING
# ============================================================================

def intensity_value(raw: str) -> int:
    try:
        value = int(raw)
    except ValueError:
        raise argparse.ArgumentTypeError(f"intensity must be an integer, got '{raw}'") from None
    if not MIN_INTENSITY <= value <= MAX_INTENSITY:
        raise argparse.ArgumentTypeError(f"intensity must be between {MIN_INTENSITY} and {MAX_INTENSITY}")
    return value


def positive_int(raw: str) -> int:
    try:
        value = int(raw)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected a positive integer, got '{raw}'") from None
    if value < 1:
        raise argparse.ArgumentTypeError(f"expected a positive integer, got {value}")
    return value


def parse_arguments(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """
    Parses command-line arguments.

    Returns:
        Parsed arguments namespace.
    """
    parser = argparse.ArgumentParser(
        description="Emotional Weather: log your mood and read your local emotional climate",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python run.py locate               # Share your location
  python run.py log joyful 80        # Submit a mood report
  python run.py climate              # Local emotional climate
  python run.py climate --all        # Climate across every location
        """
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("locate", help="Resolve and save the current location")

    log_parser = subparsers.add_parser("log", help="Submit a mood report")
    log_parser.add_argument("mood", choices=MOOD_OPTIONS)
    log_parser.add_argument("intensity", type=intensity_value, nargs="?", default=DEFAULT_INTENSITY,
                            help=f"{MIN_INTENSITY}-{MAX_INTENSITY} (default {DEFAULT_INTENSITY})")

    climate_parser = subparsers.add_parser("climate", help="Local emotional climate summary")
    climate_parser.add_argument("--all", action="store_true", help="Ignore the current location filter")

    subparsers.add_parser("weather", help="Environment snapshot for the saved location")
    subparsers.add_parser("forecast", help="Today's emotional forecast")

    history_parser = subparsers.add_parser("history", help="Recent mood reports")
    history_parser.add_argument("--limit", type=positive_int, default=HISTORY_DISPLAY_LIMIT)

    subparsers.add_parser("insights", help="Journal-wide counters")

    return parser.parse_args(argv)


# ============================================================================
# OUTPUT
# ============================================================================

def print_climate(summary: Optional[ClimateSummary], location: str) -> None:
    if summary is None:
        print(f"No local data available yet for {location}.")
        print("Submit your first mood report to start building the emotional climate data.")
        return
    print(f"Local emotional climate - {location}")
    print(f"  Average intensity: {summary.average_intensity}%")
    print(f"  Dominant mood:     {summary.dominant_mood}")
    print(f"  Reports:           {summary.total_reports}")
    print(f"  Trend:             {summary.trend.value}")


def print_entry(entry: MoodEntry) -> None:
    when = entry.timestamp.astimezone().strftime("%Y-%m-%d %H:%M")
    print(f"  {when}  {entry.mood:<8} {entry.intensity:>3}%  {entry.location}")


def run_command(controller: ClimateController, args: argparse.Namespace) -> int:
    state = controller.state

    if args.command == "locate":
        if controller.request_location():
            print(f"Location: {state.location_display}")
            if state.weather:
                print(f"Weather:  {state.weather}")
            return 0
        print(f"Location unavailable ({state.permission.value}): {state.location_display}")
        return 1

    if args.command == "log":
        entry = controller.submit_mood(args.mood, args.intensity)
        print(f"Logged {entry.mood} ({entry.intensity}%) at {entry.location}")
        print_climate(controller.local_climate(), state.location_display)
        return 0

    if args.command == "climate":
        summary = controller.local_climate(False if args.all else None)
        print_climate(summary, "all locations" if args.all else state.location_display)
        return 0

    if args.command == "weather":
        if state.weather is None:
            print("No weather yet. Share your location first: python run.py locate")
            return 1
        print(f"Weather in {state.location_display}: {state.weather}")
        return 0

    if args.command == "forecast":
        print(str(state.forecast))
        return 0

    if args.command == "history":
        reports = controller.recent_reports(args.limit)
        if not reports:
            print("No mood reports yet.")
            return 0
        print("Recent emotional weather reports:")
        for entry in reports:
            print_entry(entry)
        return 0

    if args.command == "insights":
        insights = controller.insights()
        print(f"Total reports:  {insights.total_reports}")
        print(f"Recent average: {insights.recent_average}%")
        print(f"Recent reports: {insights.recent_reports}")
        print(f"Locations:      {insights.locations}")
        return 0

    logger.error(f"Unknown command: {args.command}")
    return 2


# ============================================================================
# MAIN EXECUTION
# ============================================================================

def main(argv: Optional[List[str]] = None) -> int:
    """Entry point for the command-line interface."""
    args = parse_arguments(argv)
    settings = load_settings()
    setup_logger("mood_climate", getattr(logging, settings.log_level, logging.INFO), settings.log_dir)

    try:
        controller = build_controller(settings)
        controller.start()
        return run_command(controller, args)
    except Exception as e:
        logger.error(f"Command '{args.command}' failed: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
