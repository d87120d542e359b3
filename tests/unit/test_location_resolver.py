import pytest

from mood_climate.core.location import LocationResolver, strip_generic_suffix
from mood_climate.core.models import Coordinates, LocationData


class TestLocationResolver:
    """Test suite for address normalization and display formatting."""

    # ========================================================================
    # 1. FAILURE FALLBACK
    # ========================================================================

    def test_failure_builds_coordinate_location(self, singapore_coordinates):
        """Test that a failed lookup yields the coordinate-derived location."""
        result = LocationResolver.resolve(None, singapore_coordinates)

        assert result.city == "Location 1.35, 103.82"
        assert result.region == "Coordinates"
        assert result.country == "Unknown"
        assert result.district is None
        assert result.neighborhood is None
        assert result.coordinates == singapore_coordinates

    def test_failure_formats_negative_coordinates(self):
        result = LocationResolver.resolve_failure(Coordinates(lat=-33.8688, lng=151.2093))
        assert result.city == "Location -33.87, 151.21"

    @pytest.mark.parametrize("garbage", [
        "not a mapping",
        42,
        ["city", "Paris"],
        {"city": 12, "country": None},
        {"country": {"name": "Singapore"}},
    ])
    def test_malformed_input_never_raises(self, garbage, paris_coordinates):
        """Test resolve returns a structurally valid location for bad input."""
        result = LocationResolver.resolve(garbage, paris_coordinates)

        assert isinstance(result, LocationData)
        assert isinstance(result.city, str) and result.city
        assert isinstance(result.region, str)
        assert isinstance(result.country, str) and result.country
        assert result.coordinates == paris_coordinates

    def test_empty_address_uses_defaults(self, paris_coordinates):
        result = LocationResolver.resolve({}, paris_coordinates)

        assert result.city == "Unknown City"
        assert result.region == ""
        assert result.country == "Unknown Country"
        assert result.district is None
        assert result.neighborhood is None

    # ========================================================================
    # 2. GENERIC COUNTRIES
    # ========================================================================

    def test_generic_address(self, paris_address, paris_coordinates):
        result = LocationResolver.resolve(paris_address, paris_coordinates)

        assert result.city == "Paris"
        assert result.region == "Île-de-France"
        assert result.country == "France"
        # Neighbourhood details are only kept for Singapore
        assert result.district is None
        assert result.neighborhood is None

    def test_city_field_priority(self, paris_coordinates):
        address = {"village": "Giverny", "county": "Eure", "state_district": "X", "country": "France"}
        result = LocationResolver.resolve(address, paris_coordinates)

        assert result.city == "Giverny"
        assert result.region == "Eure"

    def test_empty_strings_are_skipped(self, paris_coordinates):
        address = {"city": "", "town": "Bordeaux", "state": "", "province": "Gironde", "country": "France"}
        result = LocationResolver.resolve(address, paris_coordinates)

        assert result.city == "Bordeaux"
        assert result.region == "Gironde"

    def test_unrelated_fields_are_ignored(self, paris_coordinates):
        address = {"city": "Lyon", "country": "France", "neighbourhood": "Croix-Rousse", "road": "Rue X"}
        result = LocationResolver.resolve(address, paris_coordinates)

        assert result.neighborhood is None
        assert result.district is None

    # ========================================================================
    # 3. SINGAPORE HEURISTICS
    # ========================================================================

    def test_singapore_neighborhood_and_district(self, singapore_address, singapore_coordinates):
        """Test neighbourhood wins and generic suffixes are stripped."""
        result = LocationResolver.resolve(singapore_address, singapore_coordinates)

        assert result.neighborhood == "Tampines"
        assert result.district == "Tampines West"
        assert result.country == "Singapore"
        assert result.city == "Unknown City"

    def test_singapore_is_case_insensitive(self, singapore_coordinates):
        address = {"suburb": "Bedok", "country": "Republic of SINGAPORE"}
        result = LocationResolver.resolve(address, singapore_coordinates)

        assert result.neighborhood == "Bedok"

    def test_singapore_alternative_fields(self, singapore_coordinates):
        """Test amenity/building and road fields are used when the main ones are empty."""
        address = {
            "amenity": "Marina Bay Sands",
            "road": "Bayfront Avenue",
            "country": "Singapore",
        }
        result = LocationResolver.resolve(address, singapore_coordinates)

        assert result.neighborhood == "Marina Bay Sands"
        assert result.district == "Bayfront"

    def test_singapore_alternatives_apply_per_field(self, singapore_coordinates):
        address = {
            "suburb": "Toa Payoh",
            "footway": "Lorong 1 Walk",
            "country": "Singapore",
        }
        result = LocationResolver.resolve(address, singapore_coordinates)

        assert result.neighborhood == "Toa Payoh"
        assert result.district == "Lorong 1"

    def test_singapore_without_any_area(self, singapore_coordinates):
        result = LocationResolver.resolve({"country": "Singapore", "state": "Singapore"}, singapore_coordinates)

        assert result.neighborhood is None
        assert result.district is None

    @pytest.mark.parametrize("raw, expected", [
        ("Sentosa Gardens", "Sentosa"),
        ("Sentosa Garden", "Sentosa"),
        ("Bukit Timah Heights", "Bukit Timah"),
        ("Holland park", "Holland"),
        ("Orchard Road", "Orchard"),
        ("Parkway", "Parkway"),
        ("Park", "Park"),
        ("Clementi Park Estate", "Clementi Park"),
    ])
    def test_strip_generic_suffix(self, raw, expected):
        assert strip_generic_suffix(raw) == expected

    # ========================================================================
    # 4. DISPLAY FORMATTING
    # ========================================================================

    def _singapore(self, **fields):
        base = dict(city="Singapore", region="Singapore", country="Singapore",
                    coordinates=Coordinates(1.35, 103.82))
        base.update(fields)
        return LocationData(**base)

    def test_display_prefers_neighborhood(self):
        location = self._singapore(neighborhood="Tiong Bahru", district="Bukit Merah")
        assert LocationResolver.format_display(location) == "Tiong Bahru, Singapore"

    def test_display_falls_back_to_district(self):
        location = self._singapore(district="Bukit Merah")
        assert LocationResolver.format_display(location) == "Bukit Merah, Singapore"

    def test_display_uses_region_unless_singapore(self):
        assert LocationResolver.format_display(self._singapore(region="Central Region")) == \
            "Central Region, Singapore"

    def test_display_uses_city_unless_singapore(self):
        location = self._singapore(city="Jurong")
        assert LocationResolver.format_display(location) == "Jurong, Singapore"

    def test_display_plain_singapore(self):
        assert LocationResolver.format_display(self._singapore()) == "Singapore"
        assert LocationResolver.format_display(self._singapore(city="", region="")) == "Singapore"

    def test_display_other_countries(self, paris_address, paris_coordinates):
        location = LocationResolver.resolve(paris_address, paris_coordinates)
        assert LocationResolver.format_display(location) == "Paris, France"

    def test_display_fallback_location(self, paris_coordinates):
        location = LocationResolver.resolve(None, paris_coordinates)
        assert LocationResolver.format_display(location) == "Location 48.86, 2.35, Unknown"

    def test_display_end_to_end_singapore(self, singapore_address, singapore_coordinates):
        location = LocationResolver.resolve(singapore_address, singapore_coordinates)
        assert LocationResolver.format_display(location) == "Tampines, Singapore"
