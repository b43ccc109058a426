"""soiltemp: daily soil temperature modeling.

A family of one-dimensional soil temperature models driven by daily weather:
DSSAT STEMP (damping_depth), a lagged exponential decay model (lagged_decay),
SWAT (swat_lag) and DSSAT EPIC with cover and snow insulation (snow_insulated).
"""

import soiltemp.models  # noqa: F401 - triggers auto-registration
from soiltemp.engine import StepEngine
from soiltemp.errors import (
    EmptyForcingError,
    ForcingError,
    InvalidInputError,
    NonMonotonicDateError,
    NumericDomainError,
    ParameterRangeError,
    SoilTempError,
)
from soiltemp.models import DampingDepthModel, LaggedDecayModel, SnowInsulatedModel, SwatLagModel
from soiltemp.outputs import SimulationOutput
from soiltemp.registry import create_model, get_model, get_model_info, list_models
from soiltemp.simulation import DayResult, run, simulate
from soiltemp.types import DailyForcing, SiteParameters, SoilLayer, SoilProfile, WeatherSeries
from soiltemp.utils.layers import remap_amount, remap_concentration

__all__ = [
    "DailyForcing",
    "DampingDepthModel",
    "DayResult",
    "EmptyForcingError",
    "ForcingError",
    "InvalidInputError",
    "LaggedDecayModel",
    "NonMonotonicDateError",
    "NumericDomainError",
    "ParameterRangeError",
    "SimulationOutput",
    "SiteParameters",
    "SnowInsulatedModel",
    "SoilLayer",
    "SoilProfile",
    "SoilTempError",
    "StepEngine",
    "SwatLagModel",
    "WeatherSeries",
    "create_model",
    "get_model",
    "get_model_info",
    "list_models",
    "remap_amount",
    "remap_concentration",
    "run",
    "simulate",
]
