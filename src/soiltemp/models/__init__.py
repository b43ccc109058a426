"""Soil temperature model variants.

Importing a variant module registers it with :mod:`soiltemp.registry`.
"""

from soiltemp.models.damping_depth import DampingDepthModel
from soiltemp.models.lagged_decay import LaggedDecayModel
from soiltemp.models.snow_insulated import SnowInsulatedModel
from soiltemp.models.swat_lag import SwatLagModel

__all__ = [
    "DampingDepthModel",
    "LaggedDecayModel",
    "SnowInsulatedModel",
    "SwatLagModel",
]
