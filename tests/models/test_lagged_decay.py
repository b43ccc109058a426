"""Tests for the lagged exponential decay soil temperature model."""

import numpy as np
import pytest
from soiltemp import DailyForcing, SiteParameters, SoilProfile
from soiltemp.errors import NumericDomainError, ParameterRangeError
from soiltemp.models.lagged_decay import LaggedDecayModel, State
from soiltemp.processes.soil import extractable_water, mean_bulk_density, profile_damping_depth
from soiltemp.utils.layers import remap_concentration


@pytest.fixture
def profile() -> SoilProfile:
    return SoilProfile(
        thickness=np.array([150.0, 150.0, 300.0, 300.0, 600.0]),
        bulk_density=np.full(5, 1.3),
        field_capacity=np.full(5, 0.3),
        lower_limit=np.full(5, 0.1),
        water_content=np.full(5, 0.25),
    )


@pytest.fixture
def site() -> SiteParameters:
    return SiteParameters(latitude=45.0, albedo=0.2, mean_annual_temperature=15.0, annual_temperature_amplitude=10.0)


@pytest.fixture
def forcing() -> DailyForcing:
    return DailyForcing(date="2020-07-01", tmax=25.0, tmin=10.0, srad=15.0)


class TestInitialize:
    """Tests for LaggedDecayModel.initialize."""

    def test_initial_state(self, profile: SoilProfile, site: SiteParameters, forcing: DailyForcing) -> None:
        state = LaggedDecayModel().initialize(profile, site, forcing)

        np.testing.assert_array_equal(state.layer_temperature, np.full(5, 15.0))
        np.testing.assert_allclose(state.surface_history, np.full(5, 16.75), rtol=1e-12)
        assert state.surface_temperature == pytest.approx(16.75, rel=1e-12)

    def test_grid_sets_state_layering(
        self, profile: SoilProfile, site: SiteParameters, forcing: DailyForcing
    ) -> None:
        model = LaggedDecayModel(grid_thickness=(100.0,) * 15)

        state = model.initialize(profile, site, forcing)

        assert state.n_layers == 15

    def test_rejects_tiny_damping_depth(
        self, profile: SoilProfile, site: SiteParameters, forcing: DailyForcing
    ) -> None:
        with pytest.raises(ParameterRangeError, match="damping_depth"):
            LaggedDecayModel(damping_depth=0.5).initialize(profile, site, forcing)

    def test_rejects_negative_lag(self, profile: SoilProfile, site: SiteParameters, forcing: DailyForcing) -> None:
        with pytest.raises(ParameterRangeError, match="lag_coefficient"):
            LaggedDecayModel(lag_coefficient=-0.1).initialize(profile, site, forcing)


class TestStep:
    """Tests for LaggedDecayModel.step."""

    def test_lag_zero_gives_exponential_profile(
        self, profile: SoilProfile, site: SiteParameters, forcing: DailyForcing
    ) -> None:
        """Without lag the anomaly of the lagged surface decays as exp(-z / D)."""
        model = LaggedDecayModel(lag_coefficient=0.0, damping_depth=1000.0)
        state = model.initialize(profile, site, forcing)

        _, outputs = model.step(state, profile, site, forcing)

        expected = 15.0 + 1.75 * np.exp(-profile.midpoints / 1000.0)
        np.testing.assert_allclose(outputs["layer_temperature"], expected, rtol=1e-12)

    def test_lag_one_gives_persistence(
        self, profile: SoilProfile, site: SiteParameters, forcing: DailyForcing
    ) -> None:
        model = LaggedDecayModel(lag_coefficient=1.0)
        state = model.initialize(profile, site, forcing)

        new_state, _ = model.step(state, profile, site, forcing)

        np.testing.assert_array_equal(new_state.layer_temperature, state.layer_temperature)

    def test_history_shifts(self, profile: SoilProfile, site: SiteParameters, forcing: DailyForcing) -> None:
        model = LaggedDecayModel()
        state = State(
            layer_temperature=np.full(5, 15.0),
            surface_temperature=10.0,
            surface_history=np.array([10.0, 9.0, 8.0, 7.0, 6.0]),
        )

        new_state, _ = model.step(state, profile, site, forcing)

        np.testing.assert_allclose(new_state.surface_history, [16.75, 10.0, 9.0, 8.0, 7.0], rtol=1e-12)

    def test_soil_damping_depth_used_when_unset(
        self, profile: SoilProfile, site: SiteParameters, forcing: DailyForcing
    ) -> None:
        """With damping_depth=None the DSSAT profile damping depth is used."""
        abd = mean_bulk_density(profile.bulk_density, profile.thickness)
        pesw = extractable_water(profile.water_content, profile.lower_limit, profile.thickness)
        dd = profile_damping_depth(abd, pesw, profile.depth)
        computed = LaggedDecayModel(lag_coefficient=0.0)
        fixed = LaggedDecayModel(lag_coefficient=0.0, damping_depth=dd)

        _, computed_out = computed.step(computed.initialize(profile, site, forcing), profile, site, forcing)
        _, fixed_out = fixed.step(fixed.initialize(profile, site, forcing), profile, site, forcing)

        np.testing.assert_allclose(computed_out["layer_temperature"], fixed_out["layer_temperature"], rtol=1e-12)

    def test_grid_output_on_profile_layering(
        self, profile: SoilProfile, site: SiteParameters, forcing: DailyForcing
    ) -> None:
        """Temperatures computed on the grid are reported on the profile layers."""
        grid = (100.0,) * 15
        model = LaggedDecayModel(grid_thickness=grid)
        state = model.initialize(profile, site, forcing)

        new_state, outputs = model.step(state, profile, site, forcing)

        assert new_state.n_layers == 15
        assert len(outputs["layer_temperature"]) == 5
        expected = remap_concentration(new_state.layer_temperature, np.array(grid), profile.thickness)
        np.testing.assert_allclose(outputs["layer_temperature"], expected, rtol=1e-12)

    def test_grid_matching_profile_is_transparent(
        self, profile: SoilProfile, site: SiteParameters, forcing: DailyForcing
    ) -> None:
        plain = LaggedDecayModel()
        gridded = LaggedDecayModel(grid_thickness=tuple(profile.thickness))

        _, plain_out = plain.step(plain.initialize(profile, site, forcing), profile, site, forcing)
        _, grid_out = gridded.step(gridded.initialize(profile, site, forcing), profile, site, forcing)

        np.testing.assert_allclose(grid_out["layer_temperature"], plain_out["layer_temperature"], rtol=1e-12)

    def test_deterministic(self, profile: SoilProfile, site: SiteParameters, forcing: DailyForcing) -> None:
        model = LaggedDecayModel()
        state = model.initialize(profile, site, forcing)

        first, _ = model.step(state, profile, site, forcing)
        second, _ = model.step(state, profile, site, forcing)

        np.testing.assert_array_equal(np.asarray(first), np.asarray(second))

    def test_does_not_modify_input_state(
        self, profile: SoilProfile, site: SiteParameters, forcing: DailyForcing
    ) -> None:
        model = LaggedDecayModel()
        state = model.initialize(profile, site, forcing)
        before = np.asarray(state).copy()

        model.step(state, profile, site, forcing)

        np.testing.assert_array_equal(np.asarray(state), before)

    def test_overflowing_snow_weight_raises(
        self, profile: SoilProfile, site: SiteParameters, forcing: DailyForcing
    ) -> None:
        model = LaggedDecayModel()
        state = model.initialize(profile, site, forcing)
        bad = DailyForcing(date="2020-07-02", tmax=25.0, tmin=10.0, srad=15.0, snow=-1.0e4)

        with pytest.raises(NumericDomainError):
            model.step(state, profile, site, bad)
