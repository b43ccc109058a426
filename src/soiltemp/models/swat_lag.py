"""SWAT soil temperature model.

Surface temperature is a blend of a radiation-corrected bare soil temperature
and yesterday's top layer temperature, weighted by canopy or snow cover. Each
layer then moves towards a depth-weighted mix of the surface temperature and
the annual mean air temperature, with a lag coefficient controlling how much
of yesterday's temperature persists.

Reference: Neitsch, S.L., Arnold, J.G., Kiniry, J.R., Williams, J.R., King,
K.W. Soil and Water Assessment Tool. Theoretical documentation. Version 2000.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar

import numpy as np

from soiltemp.engine import StepEngine
from soiltemp.processes.constants import SWAT_DF_A, SWAT_DF_B
from soiltemp.processes.soil import (
    damping_depth,
    depth_factor,
    lag_blend,
    maximum_damping_depth,
    stored_water,
    water_scaling_factor,
)
from soiltemp.processes.surface import bare_soil_temperature, cover_weight, insulated_temperature
from soiltemp.types import DailyForcing, SiteParameters, SoilProfile, readonly_array

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

PARAM_NAMES: tuple[str, ...] = ("lag_coefficient", "initial_temperature")
DEFAULT_BOUNDS: dict[str, tuple[float, float]] = {
    "lag_coefficient": (0.0, 1.0),
    "initial_temperature": (-60.0, 60.0),
}
COVER_COEFFICIENTS: tuple[float, float] = (7.563, 0.0001297)  # Biomass [kg/ha]
SNOW_COEFFICIENTS: tuple[float, float] = (6.055, 0.3002)  # Snow water equivalent [mm]

# ---------------------------------------------------------------------------
# Types
# ---------------------------------------------------------------------------


@dataclass(frozen=True, eq=False)
class State:
    """SWAT model state.

    Attributes:
        layer_temperature: Temperature of each soil layer [C].
        surface_temperature: Soil surface temperature [C].
    """

    layer_temperature: np.ndarray
    surface_temperature: float

    def __post_init__(self) -> None:
        object.__setattr__(self, "layer_temperature", readonly_array(self.layer_temperature))
        object.__setattr__(self, "surface_temperature", float(self.surface_temperature))

    @property
    def n_layers(self) -> int:
        return len(self.layer_temperature)

    def __array__(self, dtype: np.dtype | None = None, copy: bool | None = None) -> np.ndarray:
        """Convert state to a 1D array.

        Layout: [surface_temperature, layer_temperature...]
        """
        arr = np.concatenate(([self.surface_temperature], self.layer_temperature))
        if dtype is not None:
            arr = arr.astype(dtype)
        return arr

    @classmethod
    def from_array(cls, arr: np.ndarray, n_layers: int) -> State:
        """Reconstruct State from array."""
        return cls(
            layer_temperature=arr[1 : 1 + n_layers],
            surface_temperature=float(arr[0]),
        )


# ---------------------------------------------------------------------------
# Engine
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class SwatLagModel(StepEngine):
    """SWAT lag-coefficient soil temperature model.

    Attributes:
        lag_coefficient: Weight of yesterday's layer temperature [-].
        cover_coefficients: (a, b) of the biomass insulation weight.
        snow_coefficients: (a, b) of the snow insulation weight.
        initial_temperature: Starting layer temperature [C]. Defaults to the
            annual mean air temperature of the site.
    """

    name: ClassVar[str] = "swat_lag"
    PARAM_NAMES: ClassVar[tuple[str, ...]] = PARAM_NAMES
    DEFAULT_BOUNDS: ClassVar[dict[str, tuple[float, float]]] = DEFAULT_BOUNDS
    State: ClassVar[type] = State

    lag_coefficient: float = 0.8
    cover_coefficients: tuple[float, float] = COVER_COEFFICIENTS
    snow_coefficients: tuple[float, float] = SNOW_COEFFICIENTS
    initial_temperature: float | None = None

    def surface_temperature(self, site: SiteParameters, forcing: DailyForcing, top_temperature: float) -> float:
        """Surface temperature from bare soil and cover-insulated components."""
        bare = bare_soil_temperature(forcing.tmax, forcing.tmin, forcing.srad, site.albedo)
        weight = cover_weight(forcing.biomass, forcing.snow, self.cover_coefficients, self.snow_coefficients)
        return insulated_temperature(weight, top_temperature, bare)

    def initialize(self, profile: SoilProfile, site: SiteParameters, forcing: DailyForcing) -> State:
        """Uniform layer temperatures and the first-day surface estimate."""
        self.check_parameters(profile, site)
        start = site.mean_annual_temperature if self.initial_temperature is None else self.initial_temperature
        return State(
            layer_temperature=np.full(profile.n_layers, start, dtype=np.float64),
            surface_temperature=self.surface_temperature(site, forcing, start),
        )

    def step(
        self,
        state: State,
        profile: SoilProfile,
        site: SiteParameters,
        forcing: DailyForcing,
    ) -> tuple[State, dict[str, float | np.ndarray]]:
        """Execute one day of the SWAT soil temperature model.

        1. Surface temperature from yesterday's top layer and today's weather
        2. Per-layer damping depth from bulk density and profile water
        3. Depth factor at each layer centre
        4. Lag blend towards the depth-weighted equilibrium temperature

        Args:
            state: Yesterday's state.
            profile: Soil profile.
            site: Site constants.
            forcing: Today's forcing.

        Returns:
            Tuple of (new_state, outputs).
        """
        surface = self.surface_temperature(site, forcing, float(state.layer_temperature[0]))

        water = stored_water(self.soil_water(profile, forcing), profile.thickness)
        scaling = water_scaling_factor(water, profile.bulk_density, profile.depth)
        dd = damping_depth(maximum_damping_depth(profile.bulk_density), scaling)
        weight = depth_factor(profile.midpoints, dd, SWAT_DF_A, SWAT_DF_B)

        equilibrium = weight * (site.mean_annual_temperature - surface) + surface
        new_state = State(
            layer_temperature=lag_blend(state.layer_temperature, equilibrium, self.lag_coefficient),
            surface_temperature=surface,
        )
        outputs: dict[str, float | np.ndarray] = {
            "surface_temperature": surface,
            "layer_temperature": new_state.layer_temperature,
        }
        return new_state, outputs


__all__ = [
    "COVER_COEFFICIENTS",
    "DEFAULT_BOUNDS",
    "PARAM_NAMES",
    "SNOW_COEFFICIENTS",
    "State",
    "SwatLagModel",
]

# Auto-register
from soiltemp.registry import register  # noqa: E402

register(SwatLagModel)
