"""Tests for input data structures: SoilProfile, SiteParameters, DailyForcing and WeatherSeries.

Tests cover validation, immutability, derived geometry and type coercion
for the inputs shared by all soil temperature models.
"""

import logging

import numpy as np
import pandas as pd
import pytest
from pydantic import ValidationError
from soiltemp import DailyForcing, SiteParameters, SoilLayer, SoilProfile, WeatherSeries
from soiltemp.errors import InvalidInputError


def _make_dates(n: int, start: str = "2020-01-01") -> np.ndarray:
    """Create a datetime64 array with n days starting from the given date."""
    return np.arange(start, np.datetime64(start) + np.timedelta64(n, "D"), dtype="datetime64[D]")


def _make_profile(**overrides: object) -> SoilProfile:
    kwargs: dict[str, object] = {
        "thickness": np.array([150.0, 150.0, 300.0]),
        "bulk_density": np.array([1.3, 1.35, 1.4]),
        "field_capacity": np.array([0.3, 0.3, 0.28]),
        "lower_limit": np.array([0.1, 0.1, 0.12]),
        "water_content": np.array([0.25, 0.24, 0.22]),
    }
    kwargs.update(overrides)
    return SoilProfile(**kwargs)  # type: ignore[arg-type]


class TestSoilProfile:
    """Tests for the SoilProfile frozen dataclass."""

    def test_derives_bottom_depth(self) -> None:
        """bottom_depth is the running sum of thickness."""
        profile = _make_profile()

        np.testing.assert_array_equal(profile.bottom_depth, [150.0, 300.0, 600.0])
        assert profile.depth == 600.0
        assert profile.n_layers == 3

    def test_midpoints_and_top_depth(self) -> None:
        profile = _make_profile()

        np.testing.assert_array_equal(profile.midpoints, [75.0, 225.0, 450.0])
        np.testing.assert_array_equal(profile.top_depth, [0.0, 150.0, 300.0])

    def test_accepts_consistent_bottom_depth(self) -> None:
        profile = _make_profile(bottom_depth=np.array([150.0, 300.0, 600.0]))

        assert profile.depth == 600.0

    def test_rejects_inconsistent_bottom_depth(self) -> None:
        with pytest.raises(InvalidInputError, match="bottom_depth"):
            _make_profile(bottom_depth=np.array([150.0, 300.0, 650.0]))

    def test_rejects_zero_thickness(self) -> None:
        with pytest.raises(InvalidInputError, match="thickness"):
            _make_profile(thickness=np.array([150.0, 0.0, 300.0]))

    def test_rejects_length_mismatch(self) -> None:
        with pytest.raises(InvalidInputError, match="bulk_density length"):
            _make_profile(bulk_density=np.array([1.3, 1.35]))

    def test_rejects_2d_array(self) -> None:
        with pytest.raises(InvalidInputError, match="must be 1D"):
            _make_profile(water_content=np.array([[0.25, 0.24, 0.22]]))

    def test_rejects_empty_profile(self) -> None:
        with pytest.raises(InvalidInputError, match="at least one layer"):
            SoilProfile(
                thickness=np.array([]),
                bulk_density=np.array([]),
                field_capacity=np.array([]),
                lower_limit=np.array([]),
                water_content=np.array([]),
            )

    def test_arrays_are_read_only_copies(self) -> None:
        """Caller arrays are copied and the stored arrays cannot be written."""
        water = np.array([0.25, 0.24, 0.22])
        profile = _make_profile(water_content=water)

        water[0] = 0.9
        assert profile.water_content[0] == 0.25
        with pytest.raises(ValueError):
            profile.water_content[0] = 0.5

    def test_is_frozen(self) -> None:
        profile = _make_profile()

        with pytest.raises(AttributeError):
            profile.organic_carbon = 1.0  # type: ignore[misc]

    def test_warns_on_implausible_bulk_density(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.WARNING, logger="soiltemp.types"):
            _make_profile(bulk_density=np.array([1.3, 2.9, 1.4]))

        assert "Bulk density above" in caplog.text

    def test_from_layers(self) -> None:
        layers = [
            SoilLayer(
                thickness=100.0,
                bulk_density=1.2,
                field_capacity=0.3,
                lower_limit=0.1,
                water_content=0.2,
                organic_carbon=1.1,
            ),
            SoilLayer(thickness=200.0, bulk_density=1.4, field_capacity=0.28, lower_limit=0.12, water_content=0.22),
        ]

        profile = SoilProfile.from_layers(layers)

        np.testing.assert_array_equal(profile.thickness, [100.0, 200.0])
        np.testing.assert_array_equal(profile.bulk_density, [1.2, 1.4])
        assert profile.organic_carbon == 1.1

    def test_with_water_content(self) -> None:
        profile = _make_profile()

        wetter = profile.with_water_content(np.array([0.3, 0.3, 0.3]))

        np.testing.assert_array_equal(wetter.water_content, [0.3, 0.3, 0.3])
        np.testing.assert_array_equal(profile.water_content, [0.25, 0.24, 0.22])

    def test_resample_preserves_weighted_totals(self) -> None:
        """Resampling keeps thickness-weighted totals of every property."""
        profile = _make_profile()

        grid = profile.resample(np.array([100.0, 100.0, 100.0, 300.0]))

        assert grid.n_layers == 4
        assert grid.depth == profile.depth
        assert np.sum(grid.bulk_density * grid.thickness) == pytest.approx(
            np.sum(profile.bulk_density * profile.thickness), rel=1e-12
        )
        np.testing.assert_allclose(grid.water_content[1], (0.25 * 50.0 + 0.24 * 50.0) / 100.0, rtol=1e-12)


class TestSiteParameters:
    """Tests for SiteParameters."""

    def test_creates_with_typical_values(self) -> None:
        site = SiteParameters(
            latitude=45.0, albedo=0.2, mean_annual_temperature=12.0, annual_temperature_amplitude=20.0
        )

        assert site.latitude == 45.0

    def test_is_frozen(self) -> None:
        site = SiteParameters(
            latitude=45.0, albedo=0.2, mean_annual_temperature=12.0, annual_temperature_amplitude=20.0
        )

        with pytest.raises(AttributeError):
            site.albedo = 0.3  # type: ignore[misc]

    def test_warns_outside_typical_range(self, caplog: pytest.LogCaptureFixture) -> None:
        """Unusual but valid values are logged, not rejected."""
        with caplog.at_level(logging.WARNING, logger="soiltemp.types"):
            SiteParameters(latitude=45.0, albedo=0.9, mean_annual_temperature=12.0, annual_temperature_amplitude=20.0)

        assert "albedo" in caplog.text


class TestDailyForcing:
    """Tests for DailyForcing."""

    def test_coerces_date(self) -> None:
        forcing = DailyForcing(date="2020-02-01", tmax=25.0, tmin=10.0, srad=15.0)

        assert isinstance(forcing.date, pd.Timestamp)
        assert forcing.day_of_year == 32

    def test_tavg(self) -> None:
        forcing = DailyForcing(date="2020-01-01", tmax=25.0, tmin=10.0, srad=15.0)

        assert forcing.tavg == 17.5

    def test_optional_fields_default_to_zero(self) -> None:
        forcing = DailyForcing(date="2020-01-01", tmax=25.0, tmin=10.0, srad=15.0)

        assert forcing.rain == 0.0
        assert forcing.snow == 0.0
        assert forcing.biomass == 0.0
        assert forcing.water_content is None

    def test_water_content_is_read_only(self) -> None:
        forcing = DailyForcing(date="2020-01-01", tmax=25.0, tmin=10.0, srad=15.0, water_content=[0.2, 0.3])

        with pytest.raises(ValueError):
            forcing.water_content[0] = 0.5


class TestWeatherSeries:
    """Tests for the WeatherSeries validated Pydantic model."""

    def test_creates_with_valid_arrays(self) -> None:
        series = WeatherSeries(
            time=_make_dates(3),
            tmax=np.array([25.0, 26.0, 24.0]),
            tmin=np.array([10.0, 11.0, 9.0]),
            srad=np.array([15.0, 16.0, 14.0]),
            rain=np.array([0.0, 5.0, 0.0]),
        )

        assert len(series) == 3
        assert series.snow is None
        assert series.time.dtype == np.dtype("datetime64[ns]")

    def test_rejects_nan(self) -> None:
        with pytest.raises(ValidationError, match="NaN"):
            WeatherSeries(
                time=_make_dates(2),
                tmax=np.array([25.0, np.nan]),
                tmin=np.array([10.0, 11.0]),
                srad=np.array([15.0, 16.0]),
                rain=np.array([0.0, 0.0]),
            )

    def test_rejects_2d_array(self) -> None:
        with pytest.raises(ValidationError, match="srad array must be 1D"):
            WeatherSeries(
                time=_make_dates(2),
                tmax=np.array([25.0, 26.0]),
                tmin=np.array([10.0, 11.0]),
                srad=np.array([[15.0, 16.0]]),
                rain=np.array([0.0, 0.0]),
            )

    def test_rejects_length_mismatch(self) -> None:
        with pytest.raises(ValidationError, match="does not match time length"):
            WeatherSeries(
                time=_make_dates(3),
                tmax=np.array([25.0, 26.0]),
                tmin=np.array([10.0, 11.0]),
                srad=np.array([15.0, 16.0]),
                rain=np.array([0.0, 0.0]),
            )

    def test_records(self) -> None:
        """records() yields one DailyForcing per day with optional columns filled."""
        series = WeatherSeries(
            time=_make_dates(2),
            tmax=np.array([25.0, 26.0]),
            tmin=np.array([10.0, 11.0]),
            srad=np.array([15.0, 16.0]),
            rain=np.array([0.0, 5.0]),
            snow=np.array([3.0, 0.0]),
        )

        records = series.records()

        assert len(records) == 2
        assert records[1].date == pd.Timestamp("2020-01-02")
        assert records[1].rain == 5.0
        assert records[0].snow == 3.0
        assert records[0].biomass == 0.0

    def test_from_dataframe(self) -> None:
        df = pd.DataFrame(
            {
                "date": pd.date_range("2020-01-01", periods=2, freq="D"),
                "tmax": [25.0, 26.0],
                "tmin": [10.0, 11.0],
                "srad": [15.0, 16.0],
                "rain": [0.0, 1.0],
                "biomass": [500.0, 600.0],
            }
        )

        series = WeatherSeries.from_dataframe(df)

        assert len(series) == 2
        np.testing.assert_array_equal(series.biomass, [500.0, 600.0])
        assert series.mulch is None

    def test_from_dataframe_uses_index_without_date_column(self) -> None:
        df = pd.DataFrame(
            {"tmax": [25.0], "tmin": [10.0], "srad": [15.0], "rain": [0.0]},
            index=pd.DatetimeIndex(["2020-06-01"]),
        )

        series = WeatherSeries.from_dataframe(df)

        assert series.records()[0].day_of_year == 153
