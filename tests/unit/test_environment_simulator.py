import random
import pytest
from unittest.mock import MagicMock

from mood_climate.adapters.clients.weather import (
    FALLBACK_SNAPSHOT,
    SIMULATED_CONDITIONS,
    EnvironmentSimulator,
    WeatherProviderError,
    WeatherService,
)

SAMPLES = 300


class TestEnvironmentSimulator:
    """Test suite for the synthetic weather generator."""

    # ========================================================================
    # 1. BASE RANGES
    # ========================================================================

    def test_temperate_ranges(self):
        simulator = EnvironmentSimulator(random.Random(1))

        for _ in range(SAMPLES):
            snap = simulator.simulate(25.0, 0.0)
            assert 20 <= snap.temperature <= 35
            assert 40 <= snap.humidity <= 80
            assert 1 <= snap.uv_index <= 11
            assert 5 <= snap.wind_speed <= 20
            assert 1000 <= snap.pressure <= 1050
            assert 8 <= snap.visibility <= 15
            assert 22 <= snap.feels_like <= 34
            assert snap.condition in SIMULATED_CONDITIONS

    def test_values_are_whole_numbers(self):
        snap = EnvironmentSimulator(random.Random(3)).simulate(25.0, 0.0)
        assert all(isinstance(v, int) for v in (
            snap.temperature, snap.humidity, snap.uv_index, snap.wind_speed,
            snap.pressure, snap.visibility, snap.feels_like
        ))

    # ========================================================================
    # 2. LATITUDE ADJUSTMENTS
    # ========================================================================

    def test_northern_adjustment(self):
        simulator = EnvironmentSimulator(random.Random(7))

        for _ in range(SAMPLES):
            snap = simulator.simulate(45.0, 0.0)
            assert snap.temperature <= 30
            assert snap.humidity >= 50

    def test_tropical_adjustment(self):
        simulator = EnvironmentSimulator(random.Random(11))

        for _ in range(SAMPLES):
            snap = simulator.simulate(5.0, 0.0)
            assert snap.uv_index >= 3
            assert snap.temperature >= 25
            assert snap.humidity >= 55

    def test_adjustments_are_exact(self):
        """Same seed, different latitude: only the adjusted fields move."""
        base = EnvironmentSimulator(random.Random(42)).simulate(25.0, 0.0)
        north = EnvironmentSimulator(random.Random(42)).simulate(45.0, 0.0)
        tropic = EnvironmentSimulator(random.Random(42)).simulate(1.3, 103.8)

        assert north.temperature == base.temperature - 5
        assert north.humidity == base.humidity + 10
        assert north.uv_index == base.uv_index

        assert tropic.temperature == base.temperature + 5
        assert tropic.humidity == base.humidity + 15
        assert tropic.uv_index == base.uv_index + 2
        assert tropic.pressure == base.pressure

    @pytest.mark.parametrize("lat", [10.0, 40.0])
    def test_boundaries_are_not_adjusted(self, lat):
        base = EnvironmentSimulator(random.Random(5)).simulate(25.0, 0.0)
        edge = EnvironmentSimulator(random.Random(5)).simulate(lat, 0.0)
        assert edge == base

    def test_seeded_runs_are_reproducible(self):
        first = EnvironmentSimulator(random.Random(99)).simulate(1.35, 103.82)
        second = EnvironmentSimulator(random.Random(99)).simulate(1.35, 103.82)
        assert first == second

    # ========================================================================
    # 3. FAILURE FALLBACK
    # ========================================================================

    def test_broken_random_source_yields_fallback(self):
        rng = MagicMock()
        rng.random.side_effect = RuntimeError("entropy exhausted")

        snap = EnvironmentSimulator(rng).simulate(1.35, 103.82)

        assert snap == FALLBACK_SNAPSHOT
        assert snap.temperature == 25
        assert snap.humidity == 60
        assert snap.uv_index == 5
        assert snap.condition == "Partly Cloudy"
        assert snap.wind_speed == 10
        assert snap.pressure == 1013
        assert snap.visibility == 10
        assert snap.feels_like == 27

    def test_fallback_is_a_copy(self):
        rng = MagicMock()
        rng.random.side_effect = RuntimeError("boom")

        snap = EnvironmentSimulator(rng).simulate(0.0, 0.0)
        snap.temperature = 99

        assert FALLBACK_SNAPSHOT.temperature == 25

    # ========================================================================
    # 4. WEATHER SERVICE
    # ========================================================================

    def test_service_uses_simulator_without_provider(self):
        service = WeatherService(EnvironmentSimulator(random.Random(8)))
        expected = EnvironmentSimulator(random.Random(8)).simulate(48.85, 2.35)

        assert service.get_snapshot(48.85, 2.35) == expected

    def test_service_provider_failure_yields_fallback(self):
        provider = MagicMock()
        provider.fetch.side_effect = WeatherProviderError("HTTP 503")

        snap = WeatherService(provider=provider).get_snapshot(48.85, 2.35)

        assert snap == FALLBACK_SNAPSHOT
        provider.fetch.assert_called_once_with(48.85, 2.35)
