"""Process functions shared by the soil temperature models."""

from .soil import (
    average_temperature,
    damping_depth,
    depth_factor,
    extractable_water,
    lag_blend,
    maximum_damping_depth,
    mean_bulk_density,
    profile_damping_depth,
    stored_water,
    water_holding_term,
    water_scaling_factor,
)
from .surface import (
    bare_soil_temperature,
    cover_weight,
    epic_bare_temperature,
    insulated_temperature,
    insulation_weight,
    radiative_surface_temperature,
)

__all__ = [
    "average_temperature",
    "bare_soil_temperature",
    "cover_weight",
    "damping_depth",
    "depth_factor",
    "epic_bare_temperature",
    "extractable_water",
    "insulated_temperature",
    "insulation_weight",
    "lag_blend",
    "maximum_damping_depth",
    "mean_bulk_density",
    "profile_damping_depth",
    "radiative_surface_temperature",
    "stored_water",
    "water_holding_term",
    "water_scaling_factor",
]
