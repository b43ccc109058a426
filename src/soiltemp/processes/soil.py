"""Soil-side process functions shared by the model variants.

Pure functions for the damping depth, its water content scaling, the depth
attenuation curve and the lag blending of layer temperatures. Functions accept
floats or numpy arrays (one value per layer) and never modify their inputs.

Undefined arithmetic (division by a zero scaling term, logarithm of a
non-positive ratio) raises NumericDomainError. Physically implausible but
computable inputs are passed through unchanged.
"""

from __future__ import annotations

import numpy as np

from soiltemp.errors import NumericDomainError

from .constants import (
    DD_BASE,
    DD_BD_COEF,
    DD_BD_EXP,
    DD_RANGE,
    DD_REFERENCE,
    MIN_PESW,
    WW_INTERCEPT,
    WW_SLOPE,
)


def average_temperature(tmax: float, tmin: float) -> float:
    """Daily average air temperature [C]."""
    return (tmax + tmin) / 2.0


def maximum_damping_depth(bulk_density: np.ndarray | float) -> np.ndarray | float:
    """Maximum damping depth from bulk density.

    Args:
        bulk_density: Bulk density [g/cm3].

    Returns:
        Maximum damping depth [mm], between 1000 and 3500 for positive densities.
    """
    return DD_BASE + DD_RANGE * bulk_density / (bulk_density + DD_BD_COEF * np.exp(DD_BD_EXP * bulk_density))


def water_holding_term(bulk_density: np.ndarray | float) -> np.ndarray | float:
    """Bulk-density dependent water term, 0.356 - 0.144 * BD [-]."""
    return WW_INTERCEPT - WW_SLOPE * bulk_density


def water_scaling_factor(
    water: float,
    bulk_density: np.ndarray | float,
    profile_depth: float,
) -> np.ndarray | float:
    """Scaling factor of the damping depth for soil water content.

    Args:
        water: Soil water stored in the profile [mm].
        bulk_density: Bulk density [g/cm3].
        profile_depth: Profile depth [mm].

    Returns:
        Dimensionless scaling factor.

    Raises:
        NumericDomainError: If the water holding term or profile depth is zero.
    """
    denominator = water_holding_term(bulk_density) * profile_depth
    if np.any(denominator == 0.0):
        msg = "Water scaling factor undefined: water holding term times profile depth is zero"
        raise NumericDomainError(msg)
    return water / denominator


def damping_depth(max_damping_depth: np.ndarray | float, scaling_factor: np.ndarray | float) -> np.ndarray | float:
    """Damping depth for the current soil water status.

    DD = DDmax * exp(ln(500 / DDmax) * ((1 - SF) / (1 + SF))^2)

    Raises:
        NumericDomainError: If 500 / DDmax is not positive or SF equals -1.
    """
    if np.any(np.asarray(max_damping_depth) <= 0.0):
        msg = "Damping depth undefined: logarithm of a non-positive depth ratio"
        raise NumericDomainError(msg)
    if np.any(np.asarray(scaling_factor) == -1.0):
        msg = "Damping depth undefined: water scaling factor equals -1"
        raise NumericDomainError(msg)
    shape = ((1.0 - scaling_factor) / (1.0 + scaling_factor)) ** 2
    return max_damping_depth * np.exp(np.log(DD_REFERENCE / max_damping_depth) * shape)


def depth_factor(depth: np.ndarray, dd: np.ndarray | float, a: float, b: float) -> np.ndarray:
    """Attenuation weight of the surface signal at a given depth.

    ratio / (ratio + exp(a - b * ratio)) with ratio = depth / dd; rises from 0
    at the surface towards 1 well below the damping depth.

    Raises:
        NumericDomainError: If the damping depth is zero.
    """
    if np.any(np.asarray(dd) == 0.0):
        raise NumericDomainError("Depth factor undefined: damping depth is zero")
    ratio = depth / dd
    return ratio / (ratio + np.exp(a - b * ratio))


def lag_blend(previous: np.ndarray, equilibrium: np.ndarray, lag: float) -> np.ndarray:
    """Blend yesterday's temperature with today's equilibrium: lag*old + (1-lag)*eq."""
    return lag * previous + (1.0 - lag) * equilibrium


def stored_water(water_content: np.ndarray, thickness: np.ndarray) -> float:
    """Total soil water in the profile [mm]."""
    return float(np.sum(water_content * thickness))


def mean_bulk_density(bulk_density: np.ndarray, thickness: np.ndarray) -> float:
    """Thickness-weighted profile bulk density [g/cm3]."""
    return float(np.sum(bulk_density * thickness) / np.sum(thickness))


def extractable_water(water_content: np.ndarray, lower_limit: np.ndarray, thickness: np.ndarray) -> float:
    """Potential extractable soil water of the profile [cm], never negative."""
    return max(0.0, float(np.sum((water_content - lower_limit) * thickness))) / 10.0


def profile_damping_depth(abd: float, pesw: float, profile_depth: float) -> float:
    """Whole-profile damping depth as used by the DSSAT formulations.

    Args:
        abd: Mean profile bulk density [g/cm3].
        pesw: Potential extractable soil water [cm].
        profile_depth: Profile depth [mm].

    Returns:
        Damping depth [mm].

    Raises:
        NumericDomainError: If the water holding term or profile depth is zero,
            or the maximum damping depth is not positive.
    """
    denominator = water_holding_term(abd) * profile_depth
    if denominator == 0.0:
        msg = "Water content function undefined: water holding term times profile depth is zero"
        raise NumericDomainError(msg)
    wc = max(MIN_PESW, pesw) / denominator * 10.0
    return float(damping_depth(maximum_damping_depth(abd), wc))
