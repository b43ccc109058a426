"""Tests for surface temperature process functions."""

import math

import pytest
from soiltemp.errors import NumericDomainError
from soiltemp.processes.surface import (
    bare_soil_temperature,
    cover_weight,
    epic_bare_temperature,
    insulated_temperature,
    insulation_weight,
    radiative_surface_temperature,
)

SWAT_COVER = (7.563, 0.0001297)
SWAT_SNOW = (6.055, 0.3002)


class TestBareSoilTemperature:
    """Tests for bare_soil_temperature."""

    def test_known_value(self) -> None:
        """25/10 C with 15 MJ and albedo 0.2 gives 16.75 C."""
        assert bare_soil_temperature(25.0, 10.0, 15.0, 0.2) == pytest.approx(16.75, rel=1e-12)

    def test_neutral_radiation_gives_average(self) -> None:
        """Net radiation of 14 MJ cancels the radiation term."""
        assert bare_soil_temperature(30.0, 10.0, 14.0, 0.0) == pytest.approx(20.0, rel=1e-12)

    def test_increases_with_radiation(self) -> None:
        low = bare_soil_temperature(25.0, 10.0, 5.0, 0.2)
        high = bare_soil_temperature(25.0, 10.0, 30.0, 0.2)

        assert high > low


class TestInsulationWeight:
    """Tests for insulation_weight and cover_weight."""

    def test_zero_without_cover(self) -> None:
        assert insulation_weight(0.0, *SWAT_COVER) == 0.0

    def test_approaches_one_for_deep_snow(self) -> None:
        assert insulation_weight(200.0, *SWAT_SNOW) == pytest.approx(1.0, abs=1e-6)

    def test_increases_with_amount(self) -> None:
        weights = [insulation_weight(snow, *SWAT_SNOW) for snow in (1.0, 10.0, 50.0)]

        assert weights == sorted(weights)

    def test_known_value(self) -> None:
        """10 mm of snow: 10 / (10 + exp(6.055 - 3.002))."""
        expected = 10.0 / (10.0 + math.exp(6.055 - 3.002))

        assert insulation_weight(10.0, *SWAT_SNOW) == pytest.approx(expected, rel=1e-12)

    def test_overflow_raises(self) -> None:
        """A strongly negative amount overflows the exponential."""
        with pytest.raises(NumericDomainError, match="overflow"):
            insulation_weight(-1.0e4, *SWAT_SNOW)

    def test_cover_weight_takes_maximum(self) -> None:
        """The more insulating of cover and snow wins."""
        snow_only = insulation_weight(30.0, *SWAT_SNOW)

        assert cover_weight(0.0, 30.0, SWAT_COVER, SWAT_SNOW) == snow_only
        assert cover_weight(1000.0, 30.0, SWAT_COVER, SWAT_SNOW) == max(
            snow_only, insulation_weight(1000.0, *SWAT_COVER)
        )

    def test_insulated_temperature_blends(self) -> None:
        assert insulated_temperature(0.25, 4.0, 20.0) == pytest.approx(16.0)


class TestRadiativeSurfaceTemperature:
    """Tests for radiative_surface_temperature."""

    def test_no_radiation(self) -> None:
        """Without radiation the estimate mixes the average and previous value by albedo."""
        result = radiative_surface_temperature(25.0, 17.5, 0.0, 0.2, 10.0)

        assert result == pytest.approx(0.8 * 17.5 + 0.2 * 10.0, rel=1e-12)

    def test_known_value(self) -> None:
        expected = 0.8 * (17.5 + 7.5 * math.sqrt(0.45)) + 0.2 * 17.5

        assert radiative_surface_temperature(25.0, 17.5, 15.0, 0.2, 17.5) == pytest.approx(expected, rel=1e-12)

    def test_negative_radiation_raises(self) -> None:
        with pytest.raises(NumericDomainError, match="negative radiation"):
            radiative_surface_temperature(25.0, 17.5, -1.0, 0.2, 17.5)


class TestEpicBareTemperature:
    """Tests for epic_bare_temperature."""

    def test_wet_day_pulls_towards_minimum(self) -> None:
        result = epic_bare_temperature(25.0, 10.0, 17.5, 0.5, wet=True)

        assert result == pytest.approx(0.5 * 7.5 + 10.0)

    def test_dry_day_pulls_towards_maximum(self) -> None:
        result = epic_bare_temperature(25.0, 10.0, 17.5, 0.5, wet=False)

        assert result == pytest.approx(0.5 * 7.5 + 17.5 + 2.0)

    def test_dry_day_warmer_than_wet_day(self) -> None:
        wet = epic_bare_temperature(25.0, 10.0, 17.5, 0.1, wet=True)
        dry = epic_bare_temperature(25.0, 10.0, 17.5, 0.1, wet=False)

        assert dry > wet
