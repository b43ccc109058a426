"""DSSAT EPIC soil temperature model.

The bare soil surface temperature depends on the fraction of recent wet days:
wet days pull it towards the daily minimum, dry days towards the maximum. A
5-day average of it is then insulated by crop biomass, surface mulch or snow
(whichever insulates most) against yesterday's top layer temperature. Layers
relax towards a depth-weighted mix of that insulated surface temperature and
the annual mean air temperature.

Reference: DSSAT-CSM STEMP_EPIC module, after Williams et al. (EPIC).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar

import numpy as np

from soiltemp.engine import StepEngine
from soiltemp.processes.constants import EPIC_DF_A, EPIC_DF_B, INITIAL_WET_FRACTION, WET_DAY_THRESHOLD
from soiltemp.processes.soil import (
    depth_factor,
    extractable_water,
    lag_blend,
    mean_bulk_density,
    profile_damping_depth,
)
from soiltemp.processes.surface import cover_weight, epic_bare_temperature, insulated_temperature
from soiltemp.types import DailyForcing, SiteParameters, SoilProfile, readonly_array

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

PARAM_NAMES: tuple[str, ...] = ("lag_coefficient", "window", "wet_day_window", "spinup_days")
DEFAULT_BOUNDS: dict[str, tuple[float, float]] = {
    "lag_coefficient": (0.0, 1.0),
    "window": (1, 365),  # [days]
    "wet_day_window": (1, 365),  # [days]
    "spinup_days": (0, 365),
}
COVER_COEFFICIENTS: tuple[float, float] = (5.3396, 2.3951)  # Biomass + mulch [t/ha]
SNOW_COEFFICIENTS: tuple[float, float] = (2.303, 0.2197)  # Snow water equivalent [mm]
KG_PER_TONNE: float = 1000.0


def wet_fraction(wet_days: np.ndarray) -> float:
    """Fraction of wet days in the window, 0.1 before any day is recorded."""
    if len(wet_days) == 0:
        return INITIAL_WET_FRACTION
    return float(np.sum(wet_days)) / len(wet_days)


# ---------------------------------------------------------------------------
# Types
# ---------------------------------------------------------------------------


@dataclass(frozen=True, eq=False)
class State:
    """EPIC model state.

    Attributes:
        layer_temperature: Temperature of each soil layer [C].
        surface_temperature: Soil surface temperature [C].
        lagged_temperature: Recent bare soil surface temperatures, most recent
            first (TMA) [C].
        wet_days: Wet (1.0) / dry (0.0) flags of recent days, oldest first.
        previous_cover_temperature: Top layer temperature of the previous day,
            the temperature under full cover (X2_PREV) [C].
        cumulative_depth: Profile depth [mm].
        layer_midpoints: Depth of each layer centre [mm].
    """

    layer_temperature: np.ndarray
    surface_temperature: float
    lagged_temperature: np.ndarray
    wet_days: np.ndarray
    previous_cover_temperature: float
    cumulative_depth: float
    layer_midpoints: np.ndarray

    def __post_init__(self) -> None:
        for name in ("layer_temperature", "lagged_temperature", "wet_days", "layer_midpoints"):
            object.__setattr__(self, name, readonly_array(getattr(self, name)))
        for name in ("surface_temperature", "previous_cover_temperature", "cumulative_depth"):
            object.__setattr__(self, name, float(getattr(self, name)))

    @property
    def n_layers(self) -> int:
        return len(self.layer_temperature)

    def __array__(self, dtype: np.dtype | None = None, copy: bool | None = None) -> np.ndarray:
        """Convert state to a 1D array.

        Layout: [surface_temperature, previous_cover_temperature, cumulative_depth,
        n_lagged, n_wet, lagged_temperature..., wet_days..., layer_midpoints...,
        layer_temperature...]
        """
        arr = np.concatenate(
            (
                [
                    self.surface_temperature,
                    self.previous_cover_temperature,
                    self.cumulative_depth,
                    float(len(self.lagged_temperature)),
                    float(len(self.wet_days)),
                ],
                self.lagged_temperature,
                self.wet_days,
                self.layer_midpoints,
                self.layer_temperature,
            )
        )
        if dtype is not None:
            arr = arr.astype(dtype)
        return arr

    @classmethod
    def from_array(cls, arr: np.ndarray, n_layers: int) -> State:
        """Reconstruct State from array."""
        n_lagged = int(arr[3])
        n_wet = int(arr[4])
        start = 5
        lagged = arr[start : start + n_lagged]
        start += n_lagged
        wet_days = arr[start : start + n_wet]
        start += n_wet
        midpoints = arr[start : start + n_layers]
        start += n_layers
        return cls(
            layer_temperature=arr[start : start + n_layers],
            surface_temperature=float(arr[0]),
            lagged_temperature=lagged,
            wet_days=wet_days,
            previous_cover_temperature=float(arr[1]),
            cumulative_depth=float(arr[2]),
            layer_midpoints=midpoints,
        )


# ---------------------------------------------------------------------------
# Engine
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class SnowInsulatedModel(StepEngine):
    """DSSAT EPIC soil temperature model with cover and snow insulation.

    Attributes:
        lag_coefficient: Weight of yesterday's layer temperature [-].
        use_soil_water: When False the profile is assumed at field capacity.
        window: Days in the lagged surface temperature average.
        wet_day_window: Days over which the wet-day fraction is computed.
        spinup_days: Number of first-day iterations at initialization.
        cover_coefficients: (a, b) of the biomass + mulch insulation weight.
        snow_coefficients: (a, b) of the snow insulation weight.
    """

    name: ClassVar[str] = "snow_insulated"
    PARAM_NAMES: ClassVar[tuple[str, ...]] = PARAM_NAMES
    DEFAULT_BOUNDS: ClassVar[dict[str, tuple[float, float]]] = DEFAULT_BOUNDS
    State: ClassVar[type] = State

    lag_coefficient: float = 0.5
    use_soil_water: bool = True
    window: int = 5
    wet_day_window: int = 30
    spinup_days: int = 8
    cover_coefficients: tuple[float, float] = COVER_COEFFICIENTS
    snow_coefficients: tuple[float, float] = SNOW_COEFFICIENTS

    def insulation(self, forcing: DailyForcing) -> float:
        """Effective insulation weight of biomass, mulch and snow (BCV)."""
        cover = (forcing.biomass + forcing.mulch) / KG_PER_TONNE
        return cover_weight(cover, forcing.snow, self.cover_coefficients, self.snow_coefficients)

    def _advance(
        self,
        state: State,
        profile: SoilProfile,
        site: SiteParameters,
        forcing: DailyForcing,
        wet_days: np.ndarray,
        wet: bool,
    ) -> State:
        water = self.soil_water(profile, forcing) if self.use_soil_water else profile.field_capacity
        pesw = extractable_water(water, profile.lower_limit, profile.thickness)
        abd = mean_bulk_density(profile.bulk_density, profile.thickness)
        dd = profile_damping_depth(abd, pesw, state.cumulative_depth)

        bare = epic_bare_temperature(forcing.tmax, forcing.tmin, forcing.tavg, wet_fraction(wet_days), wet)

        lagged = np.empty_like(state.lagged_temperature)
        lagged[1:] = state.lagged_temperature[:-1]
        lagged[0] = bare
        bare_average = float(np.mean(lagged))

        covered = insulated_temperature(self.insulation(forcing), state.previous_cover_temperature, bare_average)
        weight = depth_factor(state.layer_midpoints, dd, EPIC_DF_A, EPIC_DF_B)
        equilibrium = weight * (site.mean_annual_temperature - covered) + covered
        layers = lag_blend(state.layer_temperature, equilibrium, self.lag_coefficient)

        return State(
            layer_temperature=layers,
            surface_temperature=min(bare_average, covered),
            lagged_temperature=lagged,
            wet_days=wet_days,
            previous_cover_temperature=layers[0],
            cumulative_depth=state.cumulative_depth,
            layer_midpoints=state.layer_midpoints,
        )

    def initialize(self, profile: SoilProfile, site: SiteParameters, forcing: DailyForcing) -> State:
        """Seed all temperatures with the first-day average and spin up on dry days."""
        self.check_parameters(profile, site)
        tavg = forcing.tavg
        state = State(
            layer_temperature=np.full(profile.n_layers, tavg, dtype=np.float64),
            surface_temperature=tavg,
            lagged_temperature=np.full(self.window, tavg, dtype=np.float64),
            wet_days=np.empty(0, dtype=np.float64),
            previous_cover_temperature=tavg,
            cumulative_depth=profile.depth,
            layer_midpoints=profile.midpoints,
        )
        for _ in range(self.spinup_days):
            state = self._advance(state, profile, site, forcing, state.wet_days, wet=False)
        return state

    def step(
        self,
        state: State,
        profile: SoilProfile,
        site: SiteParameters,
        forcing: DailyForcing,
    ) -> tuple[State, dict[str, float | np.ndarray]]:
        """Execute one day of the EPIC model.

        1. Record today's wet/dry flag and update the wet-day fraction
        2. Bare soil temperature and its lagged average
        3. Cover/snow insulated surface temperature
        4. Lag blend of each layer towards its depth-weighted equilibrium

        Returns:
            Tuple of (new_state, outputs).
        """
        wet = forcing.rain + forcing.irrigation > WET_DAY_THRESHOLD
        wet_days = np.append(state.wet_days, 1.0 if wet else 0.0)[-self.wet_day_window :]

        new_state = self._advance(state, profile, site, forcing, wet_days, wet)
        outputs: dict[str, float | np.ndarray] = {
            "surface_temperature": new_state.surface_temperature,
            "layer_temperature": new_state.layer_temperature,
        }
        return new_state, outputs


__all__ = [
    "COVER_COEFFICIENTS",
    "DEFAULT_BOUNDS",
    "PARAM_NAMES",
    "SNOW_COEFFICIENTS",
    "SnowInsulatedModel",
    "State",
    "wet_fraction",
]

# Auto-register
from soiltemp.registry import register  # noqa: E402

register(SnowInsulatedModel)
