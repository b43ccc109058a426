"""Common contract for the soil temperature model variants.

Every variant is a frozen dataclass whose fields are its model-specific
constants, and implements two operations:

- ``initialize(profile, site, forcing) -> State``: Build the starting state
  from the static inputs and the first day of forcing.
- ``step(state, profile, site, forcing) -> (State, outputs)``: Advance the
  state by one day. The incoming state is never modified.

``outputs`` is a dictionary with ``surface_temperature`` (float) and
``layer_temperature`` (one value per soil layer).
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, ClassVar

import numpy as np

from soiltemp.errors import InvalidInputError, ParameterRangeError

if TYPE_CHECKING:
    from soiltemp.outputs import SimulationOutput
    from soiltemp.types import DailyForcing, SiteParameters, SoilProfile, WeatherSeries

# Physical ranges of the shared site constants
SITE_LIMITS: dict[str, tuple[float, float]] = {
    "latitude": (-90.0, 90.0),
    "albedo": (0.0, 1.0),
    "annual_temperature_amplitude": (0.0, 100.0),
}


def _check_range(owner: str, name: str, value: float, lower: float, upper: float) -> None:
    if not lower <= value <= upper:
        msg = f"{owner} {name}={value} is outside its physical range [{lower}, {upper}]"
        raise ParameterRangeError(msg)


class StepEngine(ABC):
    """Abstract base for the daily recurrence of one model variant.

    Subclasses declare:
        name: Registry name of the variant.
        PARAM_NAMES: Names of the variant's scalar constants (dataclass fields).
        DEFAULT_BOUNDS: Physical (min, max) range per scalar constant.
        State: State dataclass with ``from_array`` and ``__array__``.
    """

    name: ClassVar[str]
    PARAM_NAMES: ClassVar[tuple[str, ...]]
    DEFAULT_BOUNDS: ClassVar[dict[str, tuple[float, float]]]
    State: ClassVar[type]

    @abstractmethod
    def initialize(self, profile: SoilProfile, site: SiteParameters, forcing: DailyForcing) -> Any:
        """Create the initial state for a run."""

    @abstractmethod
    def step(
        self,
        state: Any,
        profile: SoilProfile,
        site: SiteParameters,
        forcing: DailyForcing,
    ) -> tuple[Any, dict[str, Any]]:
        """Advance the state by one day."""

    def check_parameters(self, profile: SoilProfile, site: SiteParameters) -> None:
        """Validate site, soil and model constants against their physical ranges.

        Raises:
            ParameterRangeError: If any constant is outside its range.
        """
        for name, (lower, upper) in SITE_LIMITS.items():
            _check_range("Site parameter", name, getattr(site, name), lower, upper)

        for name in self.PARAM_NAMES:
            value = getattr(self, name)
            if value is None:
                continue
            lower, upper = self.DEFAULT_BOUNDS[name]
            _check_range(f"{self.name} parameter", name, value, lower, upper)

        if not np.all(profile.bulk_density > 0.0):
            msg = f"Bulk density must be > 0, got {profile.bulk_density}"
            raise ParameterRangeError(msg)
        for name in ("water_content", "field_capacity", "lower_limit"):
            values = getattr(profile, name)
            if not np.all((values >= 0.0) & (values <= 1.0)):
                msg = f"Soil {name} must lie within [0, 1], got {values}"
                raise ParameterRangeError(msg)

    @staticmethod
    def soil_water(profile: SoilProfile, forcing: DailyForcing) -> np.ndarray:
        """Water content for the day: the forcing override, else the profile's.

        Raises:
            InvalidInputError: If the override does not have one value per layer.
        """
        if forcing.water_content is None:
            return profile.water_content
        if len(forcing.water_content) != profile.n_layers:
            msg = (
                f"water_content override length {len(forcing.water_content)} "
                f"does not match number of layers {profile.n_layers}"
            )
            raise InvalidInputError(msg)
        return forcing.water_content

    def run(
        self,
        profile: SoilProfile,
        site: SiteParameters,
        forcing: WeatherSeries | list[DailyForcing],
    ) -> SimulationOutput:
        """Run this variant over a forcing series. See :func:`soiltemp.simulation.run`."""
        from soiltemp.simulation import run

        return run(profile, site, forcing, self)
