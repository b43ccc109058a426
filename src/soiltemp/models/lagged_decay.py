"""Lagged exponential decay soil temperature model.

The surface temperature is computed as in SWAT and averaged over a short
window of recent days. Below the surface, the departure of that lagged
average from the annual mean air temperature decays exponentially with depth,
and each layer relaxes towards the result with a fixed lag coefficient.

The model may run on its own computation grid: the soil profile is then
resampled onto ``grid_thickness`` and layer temperatures are mapped back to
the profile layering for output.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar

import numpy as np

from soiltemp.engine import StepEngine
from soiltemp.processes.soil import extractable_water, lag_blend, mean_bulk_density, profile_damping_depth
from soiltemp.processes.surface import bare_soil_temperature, cover_weight, insulated_temperature
from soiltemp.types import DailyForcing, SiteParameters, SoilProfile, readonly_array
from soiltemp.utils.layers import remap_concentration

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

PARAM_NAMES: tuple[str, ...] = ("lag_coefficient", "damping_depth", "window")
DEFAULT_BOUNDS: dict[str, tuple[float, float]] = {
    "lag_coefficient": (0.0, 1.0),
    "damping_depth": (1.0, 20000.0),  # [mm]
    "window": (1, 365),  # [days]
}
COVER_COEFFICIENTS: tuple[float, float] = (7.563, 0.0001297)
SNOW_COEFFICIENTS: tuple[float, float] = (6.055, 0.3002)

# ---------------------------------------------------------------------------
# Types
# ---------------------------------------------------------------------------


@dataclass(frozen=True, eq=False)
class State:
    """Lagged decay model state.

    Attributes:
        layer_temperature: Temperature of each computation layer [C].
        surface_temperature: Soil surface temperature [C].
        surface_history: Recent surface temperatures, most recent first [C].
    """

    layer_temperature: np.ndarray
    surface_temperature: float
    surface_history: np.ndarray

    def __post_init__(self) -> None:
        object.__setattr__(self, "layer_temperature", readonly_array(self.layer_temperature))
        object.__setattr__(self, "surface_history", readonly_array(self.surface_history))
        object.__setattr__(self, "surface_temperature", float(self.surface_temperature))

    @property
    def n_layers(self) -> int:
        return len(self.layer_temperature)

    def __array__(self, dtype: np.dtype | None = None, copy: bool | None = None) -> np.ndarray:
        """Convert state to a 1D array.

        Layout: [surface_temperature, surface_history..., layer_temperature...]
        """
        arr = np.concatenate(([self.surface_temperature], self.surface_history, self.layer_temperature))
        if dtype is not None:
            arr = arr.astype(dtype)
        return arr

    @classmethod
    def from_array(cls, arr: np.ndarray, n_layers: int) -> State:
        """Reconstruct State from array. The history length is inferred."""
        window = len(arr) - 1 - n_layers
        return cls(
            layer_temperature=arr[1 + window : 1 + window + n_layers],
            surface_temperature=float(arr[0]),
            surface_history=arr[1 : 1 + window],
        )


# ---------------------------------------------------------------------------
# Engine
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class LaggedDecayModel(StepEngine):
    """Lagged surface average with exponential decay of its anomaly with depth.

    Attributes:
        lag_coefficient: Weight of yesterday's layer temperature [-].
        damping_depth: Fixed e-folding depth of the anomaly [mm]. When None,
            the DSSAT damping depth of the soil is recomputed each day.
        window: Days in the lagged surface average.
        cover_coefficients: (a, b) of the biomass insulation weight.
        snow_coefficients: (a, b) of the snow insulation weight.
        grid_thickness: Optional computation layering [mm].
    """

    name: ClassVar[str] = "lagged_decay"
    PARAM_NAMES: ClassVar[tuple[str, ...]] = PARAM_NAMES
    DEFAULT_BOUNDS: ClassVar[dict[str, tuple[float, float]]] = DEFAULT_BOUNDS
    State: ClassVar[type] = State

    lag_coefficient: float = 0.8
    damping_depth: float | None = None
    window: int = 5
    cover_coefficients: tuple[float, float] = COVER_COEFFICIENTS
    snow_coefficients: tuple[float, float] = SNOW_COEFFICIENTS
    grid_thickness: tuple[float, ...] | None = None

    def computation_profile(self, profile: SoilProfile, forcing: DailyForcing) -> SoilProfile:
        """Profile on which temperatures are computed for the given day."""
        if forcing.water_content is not None:
            profile = profile.with_water_content(self.soil_water(profile, forcing))
        if self.grid_thickness is None:
            return profile
        return profile.resample(np.asarray(self.grid_thickness, dtype=np.float64))

    def surface_temperature(self, site: SiteParameters, forcing: DailyForcing, top_temperature: float) -> float:
        bare = bare_soil_temperature(forcing.tmax, forcing.tmin, forcing.srad, site.albedo)
        weight = cover_weight(forcing.biomass, forcing.snow, self.cover_coefficients, self.snow_coefficients)
        return insulated_temperature(weight, top_temperature, bare)

    def _decay_depth(self, grid: SoilProfile) -> float:
        if self.damping_depth is not None:
            return self.damping_depth
        abd = mean_bulk_density(grid.bulk_density, grid.thickness)
        pesw = extractable_water(grid.water_content, grid.lower_limit, grid.thickness)
        return profile_damping_depth(abd, pesw, grid.depth)

    def initialize(self, profile: SoilProfile, site: SiteParameters, forcing: DailyForcing) -> State:
        """Layers at the annual mean temperature; history seeded with the first-day surface."""
        self.check_parameters(profile, site)
        grid = self.computation_profile(profile, forcing)
        tav = site.mean_annual_temperature
        surface = self.surface_temperature(site, forcing, tav)
        return State(
            layer_temperature=np.full(grid.n_layers, tav, dtype=np.float64),
            surface_temperature=surface,
            surface_history=np.full(self.window, surface, dtype=np.float64),
        )

    def step(
        self,
        state: State,
        profile: SoilProfile,
        site: SiteParameters,
        forcing: DailyForcing,
    ) -> tuple[State, dict[str, float | np.ndarray]]:
        """Execute one day of the lagged decay model.

        Returns:
            Tuple of (new_state, outputs). Output layer temperatures are on the
            profile layering even when a computation grid is used.
        """
        grid = self.computation_profile(profile, forcing)
        tav = site.mean_annual_temperature

        surface = self.surface_temperature(site, forcing, float(state.layer_temperature[0]))
        history = np.empty_like(state.surface_history)
        history[1:] = state.surface_history[:-1]
        history[0] = surface
        lagged = float(np.mean(history))

        equilibrium = tav + (lagged - tav) * np.exp(-grid.midpoints / self._decay_depth(grid))
        new_state = State(
            layer_temperature=lag_blend(state.layer_temperature, equilibrium, self.lag_coefficient),
            surface_temperature=surface,
            surface_history=history,
        )

        layers = new_state.layer_temperature
        if self.grid_thickness is not None:
            layers = remap_concentration(layers, grid.thickness, profile.thickness)
        outputs: dict[str, float | np.ndarray] = {
            "surface_temperature": surface,
            "layer_temperature": layers,
        }
        return new_state, outputs


__all__ = [
    "COVER_COEFFICIENTS",
    "DEFAULT_BOUNDS",
    "LaggedDecayModel",
    "PARAM_NAMES",
    "SNOW_COEFFICIENTS",
    "State",
]

# Auto-register
from soiltemp.registry import register  # noqa: E402

register(LaggedDecayModel)
