"""Input data structures for soiltemp.

This module defines the static and daily inputs consumed by every model:
- SoilLayer / SoilProfile: Layered soil description, fixed for a run
- SiteParameters: Scalar site constants shared by all model variants
- DailyForcing: One day of weather (and optional cover) forcing
- WeatherSeries: Validated columnar weather, convertible to DailyForcing records
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any, ClassVar

import numpy as np
import pandas as pd
from pydantic import BaseModel, ConfigDict, ValidationInfo, field_validator, model_validator

from soiltemp.errors import InvalidInputError
from soiltemp.utils.layers import remap_concentration

logger = logging.getLogger(__name__)

# Typical ranges, used for warnings only
_SITE_BOUNDS: dict[str, tuple[float, float]] = {
    "latitude": (-90.0, 90.0),
    "albedo": (0.05, 0.6),
    "mean_annual_temperature": (-40.0, 50.0),
    "annual_temperature_amplitude": (0.0, 60.0),
}

MAX_BULK_DENSITY: float = 2.65  # Particle density of mineral soil [g/cm3]


def readonly_array(arr: np.ndarray) -> np.ndarray:
    """Return a float64 copy of arr that cannot be written to."""
    out = np.array(arr, dtype=np.float64)
    out.flags.writeable = False
    return out


@dataclass(frozen=True)
class SoilLayer:
    """A single soil layer, as read from a soil description.

    Attributes:
        thickness: Layer thickness [mm].
        bulk_density: Bulk density [g/cm3].
        field_capacity: Drained upper limit [cm3/cm3].
        lower_limit: Lower limit of plant extractable water [cm3/cm3].
        water_content: Volumetric water content [cm3/cm3].
        organic_carbon: Organic carbon [%]. Only meaningful for the surface layer.
    """

    thickness: float
    bulk_density: float
    field_capacity: float
    lower_limit: float
    water_content: float
    organic_carbon: float | None = None


@dataclass(frozen=True, eq=False)
class SoilProfile:
    """Layered soil profile, top to bottom, immutable for the lifetime of a run.

    All arrays are stored as read-only float64 copies. ``bottom_depth`` is
    derived from ``thickness`` when not supplied; when supplied it must match
    the running sum of thickness.

    Attributes:
        thickness: Layer thickness [mm].
        bulk_density: Bulk density [g/cm3].
        field_capacity: Drained upper limit [cm3/cm3].
        lower_limit: Lower limit [cm3/cm3].
        water_content: Volumetric water content [cm3/cm3].
        bottom_depth: Depth of each layer bottom [mm].
        organic_carbon: Surface layer organic carbon [%], optional.

    Raises:
        InvalidInputError: If arrays are empty, not 1D, differ in length, a
            thickness is not strictly positive, or bottom_depth is inconsistent.
    """

    thickness: np.ndarray
    bulk_density: np.ndarray
    field_capacity: np.ndarray
    lower_limit: np.ndarray
    water_content: np.ndarray
    bottom_depth: np.ndarray | None = None
    organic_carbon: float | None = None

    def __post_init__(self) -> None:
        names = ("thickness", "bulk_density", "field_capacity", "lower_limit", "water_content")
        for name in names:
            arr = np.asarray(getattr(self, name), dtype=np.float64)
            if arr.ndim != 1:
                msg = f"{name} array must be 1D, got {arr.ndim}D"
                raise InvalidInputError(msg)
            object.__setattr__(self, name, readonly_array(arr))

        n = len(self.thickness)
        if n == 0:
            raise InvalidInputError("Soil profile must contain at least one layer")
        for name in names[1:]:
            if len(getattr(self, name)) != n:
                msg = f"{name} length {len(getattr(self, name))} does not match thickness length {n}"
                raise InvalidInputError(msg)
        if not np.all(np.isfinite(self.thickness)) or np.any(self.thickness <= 0.0):
            raise InvalidInputError("Layer thickness must be finite and > 0")

        cumulative = np.cumsum(self.thickness)
        if self.bottom_depth is None:
            object.__setattr__(self, "bottom_depth", readonly_array(cumulative))
        else:
            bottom = np.asarray(self.bottom_depth, dtype=np.float64)
            if bottom.shape != cumulative.shape or not np.allclose(bottom, cumulative, rtol=1e-9, atol=0.0):
                raise InvalidInputError("bottom_depth must equal the cumulative sum of thickness")
            object.__setattr__(self, "bottom_depth", readonly_array(bottom))

        if np.any(self.water_content > 1.0):
            logger.warning("Soil water content above 1.0 cm3/cm3 in profile: %s", self.water_content)
        if np.any(self.bulk_density > MAX_BULK_DENSITY):
            logger.warning(
                "Bulk density above %.2f g/cm3 in profile: %s",
                MAX_BULK_DENSITY,
                self.bulk_density,
            )

    @classmethod
    def from_layers(cls, layers: Sequence[SoilLayer]) -> SoilProfile:
        """Build a profile from layer records ordered top to bottom."""
        if len(layers) == 0:
            raise InvalidInputError("Soil profile must contain at least one layer")
        return cls(
            thickness=np.array([layer.thickness for layer in layers]),
            bulk_density=np.array([layer.bulk_density for layer in layers]),
            field_capacity=np.array([layer.field_capacity for layer in layers]),
            lower_limit=np.array([layer.lower_limit for layer in layers]),
            water_content=np.array([layer.water_content for layer in layers]),
            organic_carbon=layers[0].organic_carbon,
        )

    @property
    def n_layers(self) -> int:
        """Number of soil layers."""
        return len(self.thickness)

    @property
    def depth(self) -> float:
        """Total profile depth [mm]."""
        return float(self.bottom_depth[-1])

    @property
    def top_depth(self) -> np.ndarray:
        """Depth of each layer top [mm]."""
        return self.bottom_depth - self.thickness

    @property
    def midpoints(self) -> np.ndarray:
        """Depth of each layer centre [mm]."""
        return self.bottom_depth - self.thickness / 2.0

    def with_water_content(self, water_content: np.ndarray) -> SoilProfile:
        """Return a copy of the profile with a new water content array."""
        return SoilProfile(
            thickness=self.thickness,
            bulk_density=self.bulk_density,
            field_capacity=self.field_capacity,
            lower_limit=self.lower_limit,
            water_content=water_content,
            organic_carbon=self.organic_carbon,
        )

    def resample(self, to_thickness: np.ndarray) -> SoilProfile:
        """Re-discretize the profile onto a new layering.

        All layer properties are concentrations and are mapped with
        thickness weighting, so profile totals are preserved.
        """
        to_thick = np.asarray(to_thickness, dtype=np.float64)
        return SoilProfile(
            thickness=to_thick,
            bulk_density=remap_concentration(self.bulk_density, self.thickness, to_thick),
            field_capacity=remap_concentration(self.field_capacity, self.thickness, to_thick),
            lower_limit=remap_concentration(self.lower_limit, self.thickness, to_thick),
            water_content=remap_concentration(self.water_content, self.thickness, to_thick),
            organic_carbon=self.organic_carbon,
        )


def _warn_if_outside_bounds(site: SiteParameters) -> None:
    """Log warnings for site constants outside typical ranges.

    This does not raise errors - range enforcement happens when a model is
    initialized.
    """
    for name, (lower, upper) in _SITE_BOUNDS.items():
        value = getattr(site, name)
        if value < lower or value > upper:
            logger.warning(
                "Site parameter %s=%.4f is outside typical range [%.2f, %.2f]",
                name,
                value,
                lower,
                upper,
            )


@dataclass(frozen=True)
class SiteParameters:
    """Scalar site constants for a run.

    Attributes:
        latitude: Site latitude [deg]. Negative in the southern hemisphere.
        albedo: Soil surface albedo [-].
        mean_annual_temperature: Annual average air temperature, TAV [C].
        annual_temperature_amplitude: Annual amplitude of mean monthly air
            temperature, TAMP [C].
    """

    latitude: float
    albedo: float
    mean_annual_temperature: float
    annual_temperature_amplitude: float

    BOUNDS: ClassVar[dict[str, tuple[float, float]]] = _SITE_BOUNDS

    def __post_init__(self) -> None:
        _warn_if_outside_bounds(self)


@dataclass(frozen=True)
class DailyForcing:
    """Weather and cover forcing for one simulated day.

    Attributes:
        date: Calendar date of the record.
        tmax: Maximum air temperature [C].
        tmin: Minimum air temperature [C].
        srad: Global solar radiation [MJ/m2/day].
        rain: Rainfall [mm/day].
        snow: Snow water equivalent [mm].
        biomass: Aboveground biomass [kg/ha].
        mulch: Surface mulch mass [kg/ha].
        irrigation: Irrigation depth [mm/day].
        water_content: Optional per-layer volumetric water content for the day.
            Overrides the profile's water content when given.
    """

    date: pd.Timestamp
    tmax: float
    tmin: float
    srad: float
    rain: float = 0.0
    snow: float = 0.0
    biomass: float = 0.0
    mulch: float = 0.0
    irrigation: float = 0.0
    water_content: np.ndarray | None = field(default=None, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "date", pd.Timestamp(self.date))
        if self.water_content is not None:
            object.__setattr__(self, "water_content", readonly_array(self.water_content))

    @property
    def tavg(self) -> float:
        """Daily average air temperature [C]."""
        return (self.tmax + self.tmin) / 2.0

    @property
    def day_of_year(self) -> int:
        """Day of year, 1-based."""
        return int(self.date.dayofyear)


def _as_series(name: str, v: Any) -> np.ndarray:
    arr = np.asarray(v, dtype=np.float64)
    if arr.ndim != 1:
        msg = f"{name} array must be 1D, got {arr.ndim}D"
        raise ValueError(msg)
    if np.any(np.isnan(arr)):
        msg = f"{name} array contains NaN values"
        raise ValueError(msg)
    return arr


_OPTIONAL_COLUMNS: tuple[str, ...] = ("snow", "biomass", "mulch", "irrigation")


class WeatherSeries(BaseModel):
    """Validated daily weather series.

    All arrays must be 1D with the same length. NaN values are rejected.
    Numeric arrays are coerced to float64. Date ordering is checked by the
    simulation driver, not here.

    Attributes:
        time: Date of each record (datetime64).
        tmax: Maximum air temperature [C].
        tmin: Minimum air temperature [C].
        srad: Global solar radiation [MJ/m2/day].
        rain: Rainfall [mm/day].
        snow: Snow water equivalent [mm], optional.
        biomass: Aboveground biomass [kg/ha], optional.
        mulch: Surface mulch mass [kg/ha], optional.
        irrigation: Irrigation depth [mm/day], optional.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    time: np.ndarray  # datetime64
    tmax: np.ndarray  # [C]
    tmin: np.ndarray  # [C]
    srad: np.ndarray  # [MJ/m2/day]
    rain: np.ndarray  # [mm/day]
    snow: np.ndarray | None = None  # [mm]
    biomass: np.ndarray | None = None  # [kg/ha]
    mulch: np.ndarray | None = None  # [kg/ha]
    irrigation: np.ndarray | None = None  # [mm/day]

    @field_validator("time", mode="before")
    @classmethod
    def validate_time(cls, v: np.ndarray) -> np.ndarray:
        """Validate time array: must be 1D and coerced to datetime64."""
        arr = np.asarray(v)
        if arr.ndim != 1:
            msg = f"time array must be 1D, got {arr.ndim}D"
            raise ValueError(msg)
        return arr.astype("datetime64[ns]")

    @field_validator("tmax", "tmin", "srad", "rain", mode="before")
    @classmethod
    def validate_required(cls, v: np.ndarray, info: ValidationInfo) -> np.ndarray:
        """Validate required weather arrays: 1D float64 without NaN."""
        return _as_series(info.field_name, v)

    @field_validator(*_OPTIONAL_COLUMNS, mode="before")
    @classmethod
    def validate_optional(cls, v: np.ndarray | None, info: ValidationInfo) -> np.ndarray | None:
        """Validate optional arrays when provided."""
        if v is None:
            return None
        return _as_series(info.field_name, v)

    @model_validator(mode="after")
    def validate_array_lengths(self) -> WeatherSeries:
        """Ensure all arrays have the same length."""
        n = len(self.time)
        for name in ("tmax", "tmin", "srad", "rain", *_OPTIONAL_COLUMNS):
            arr = getattr(self, name)
            if arr is not None and len(arr) != n:
                msg = f"{name} length {len(arr)} does not match time length {n}"
                raise ValueError(msg)
        return self

    def __len__(self) -> int:
        """Return the number of days."""
        return len(self.time)

    def records(self) -> list[DailyForcing]:
        """Split the series into per-day forcing records."""
        optional = {name: getattr(self, name) for name in _OPTIONAL_COLUMNS if getattr(self, name) is not None}
        return [
            DailyForcing(
                date=pd.Timestamp(self.time[i]),
                tmax=float(self.tmax[i]),
                tmin=float(self.tmin[i]),
                srad=float(self.srad[i]),
                rain=float(self.rain[i]),
                **{name: float(arr[i]) for name, arr in optional.items()},
            )
            for i in range(len(self))
        ]

    @classmethod
    def from_dataframe(cls, df: pd.DataFrame, time_column: str = "date") -> WeatherSeries:
        """Build a series from a DataFrame with one row per day.

        Args:
            df: Frame with columns tmax, tmin, srad, rain and optionally snow,
                biomass, mulch, irrigation. Dates are read from ``time_column``,
                or from the index when the column is absent.
            time_column: Name of the date column.

        Returns:
            Validated WeatherSeries.
        """
        time = df[time_column].to_numpy() if time_column in df.columns else df.index.to_numpy()
        optional = {name: df[name].to_numpy() for name in _OPTIONAL_COLUMNS if name in df.columns}
        return cls(
            time=time,
            tmax=df["tmax"].to_numpy(),
            tmin=df["tmin"].to_numpy(),
            srad=df["srad"].to_numpy(),
            rain=df["rain"].to_numpy(),
            **optional,
        )
