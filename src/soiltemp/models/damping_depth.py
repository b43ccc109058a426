"""DSSAT STEMP soil temperature model.

Soil temperature follows the annual air temperature wave, damped and delayed
with depth. The damping depth grows with profile bulk density and shrinks as
the soil dries. Departures from the seasonal normal are carried by a 5-day
moving average of a radiation-adjusted surface temperature.

Reference: DSSAT-CSM STEMP module (Ritchie, J.T.; EPIC soil temperature
routine adapted by DSSAT).
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import ClassVar

import numpy as np

from soiltemp.engine import StepEngine
from soiltemp.processes.constants import HOT_DAY_NORTH, HOT_DAY_SOUTH, RADIANS_PER_DAY
from soiltemp.processes.soil import extractable_water, mean_bulk_density, profile_damping_depth
from soiltemp.processes.surface import radiative_surface_temperature
from soiltemp.types import DailyForcing, SiteParameters, SoilProfile, readonly_array

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

PARAM_NAMES: tuple[str, ...] = ("window", "spinup_days")
DEFAULT_BOUNDS: dict[str, tuple[float, float]] = {
    "window": (1, 365),
    "spinup_days": (0, 365),
}
WINDOW: int = 5  # Days in the lagged surface temperature average
SPINUP_DAYS: int = 8  # Iterations of the first day at initialization

# ---------------------------------------------------------------------------
# Types
# ---------------------------------------------------------------------------


@dataclass(frozen=True, eq=False)
class State:
    """STEMP model state.

    Attributes:
        layer_temperature: Temperature of each soil layer [C].
        surface_temperature: Soil surface temperature [C].
        lagged_temperature: Recent daily surface temperature estimates, most
            recent first (TMA) [C].
        damping_depth: Damping depth of the last computed day [mm].
    """

    layer_temperature: np.ndarray
    surface_temperature: float
    lagged_temperature: np.ndarray
    damping_depth: float

    def __post_init__(self) -> None:
        object.__setattr__(self, "layer_temperature", readonly_array(self.layer_temperature))
        object.__setattr__(self, "lagged_temperature", readonly_array(self.lagged_temperature))
        object.__setattr__(self, "surface_temperature", float(self.surface_temperature))
        object.__setattr__(self, "damping_depth", float(self.damping_depth))

    @property
    def n_layers(self) -> int:
        return len(self.layer_temperature)

    def __array__(self, dtype: np.dtype | None = None, copy: bool | None = None) -> np.ndarray:
        """Convert state to a 1D array.

        Layout: [surface_temperature, damping_depth, lagged_temperature..., layer_temperature...]
        """
        arr = np.concatenate(
            (
                [self.surface_temperature, self.damping_depth],
                self.lagged_temperature,
                self.layer_temperature,
            )
        )
        if dtype is not None:
            arr = arr.astype(dtype)
        return arr

    @classmethod
    def from_array(cls, arr: np.ndarray, n_layers: int) -> State:
        """Reconstruct State from array. The window length is inferred."""
        window = len(arr) - 2 - n_layers
        return cls(
            layer_temperature=arr[2 + window : 2 + window + n_layers],
            surface_temperature=float(arr[0]),
            lagged_temperature=arr[2 : 2 + window],
            damping_depth=float(arr[1]),
        )


# ---------------------------------------------------------------------------
# Engine
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class DampingDepthModel(StepEngine):
    """DSSAT STEMP damping-depth soil temperature model.

    Attributes:
        use_soil_water: When False the profile is assumed at field capacity.
        window: Length of the lagged surface temperature average [days].
        spinup_days: Number of first-day iterations at initialization.
    """

    name: ClassVar[str] = "damping_depth"
    PARAM_NAMES: ClassVar[tuple[str, ...]] = PARAM_NAMES
    DEFAULT_BOUNDS: ClassVar[dict[str, tuple[float, float]]] = DEFAULT_BOUNDS
    State: ClassVar[type] = State

    use_soil_water: bool = True
    window: int = WINDOW
    spinup_days: int = SPINUP_DAYS

    def _extractable_water(self, profile: SoilProfile, forcing: DailyForcing) -> float:
        water = self.soil_water(profile, forcing) if self.use_soil_water else profile.field_capacity
        return extractable_water(water, profile.lower_limit, profile.thickness)

    def _advance(self, state: State, profile: SoilProfile, site: SiteParameters, forcing: DailyForcing) -> State:
        tav = site.mean_annual_temperature
        tamp = site.annual_temperature_amplitude

        abd = mean_bulk_density(profile.bulk_density, profile.thickness)
        dd = profile_damping_depth(abd, self._extractable_water(profile, forcing), profile.depth)

        hot_day = HOT_DAY_SOUTH if site.latitude < 0.0 else HOT_DAY_NORTH
        alx = (forcing.day_of_year - hot_day) * RADIANS_PER_DAY

        previous = state.lagged_temperature
        lagged = np.empty_like(previous)
        lagged[1:] = previous[:-1]
        lagged[0] = radiative_surface_temperature(forcing.tmax, forcing.tavg, forcing.srad, site.albedo, previous[0])

        # Departure of the recent surface average from the seasonal normal
        normal = tav + tamp * math.cos(alx) / 2.0
        departure = float(np.mean(lagged)) - normal

        zd = -profile.midpoints / dd
        layers = tav + (tamp / 2.0 * np.cos(alx + zd) + departure) * np.exp(zd)
        surface = tav + tamp / 2.0 * math.cos(alx) + departure

        return State(
            layer_temperature=layers,
            surface_temperature=surface,
            lagged_temperature=lagged,
            damping_depth=dd,
        )

    def initialize(self, profile: SoilProfile, site: SiteParameters, forcing: DailyForcing) -> State:
        """Seed the lagged average with the first-day temperature and spin up."""
        self.check_parameters(profile, site)
        tavg = forcing.tavg
        state = State(
            layer_temperature=np.full(profile.n_layers, tavg, dtype=np.float64),
            surface_temperature=tavg,
            lagged_temperature=np.full(self.window, tavg, dtype=np.float64),
            damping_depth=0.0,
        )
        for _ in range(self.spinup_days):
            state = self._advance(state, profile, site, forcing)
        return state

    def step(
        self,
        state: State,
        profile: SoilProfile,
        site: SiteParameters,
        forcing: DailyForcing,
    ) -> tuple[State, dict[str, float | np.ndarray]]:
        """Execute one day of the STEMP model.

        1. Profile damping depth from mean bulk density and extractable water
        2. Shift the lagged surface average and add today's estimate
        3. Annual wave at each layer centre, damped by exp(-z / DD)

        Returns:
            Tuple of (new_state, outputs).
        """
        new_state = self._advance(state, profile, site, forcing)
        outputs: dict[str, float | np.ndarray] = {
            "surface_temperature": new_state.surface_temperature,
            "layer_temperature": new_state.layer_temperature,
        }
        return new_state, outputs


__all__ = [
    "DEFAULT_BOUNDS",
    "DampingDepthModel",
    "PARAM_NAMES",
    "SPINUP_DAYS",
    "State",
    "WINDOW",
]

# Auto-register
from soiltemp.registry import register  # noqa: E402

register(DampingDepthModel)
