"""Surface temperature process functions.

Pure functions for the bare soil surface temperature and for the insulation
that canopy, residue and snow provide against it.
"""

from __future__ import annotations

import math

from soiltemp.errors import NumericDomainError

from .constants import DRY_DAY_OFFSET, RADIATION_OFFSET, RADIATION_SCALE, RADIATION_WEIGHT


def bare_soil_temperature(tmax: float, tmin: float, srad: float, albedo: float) -> float:
    """Bare soil surface temperature (SWAT).

    Args:
        tmax: Maximum air temperature [C].
        tmin: Minimum air temperature [C].
        srad: Global solar radiation [MJ/m2/day].
        albedo: Surface albedo [-].

    Returns:
        Bare soil surface temperature [C].
    """
    tavg = (tmax + tmin) / 2.0
    radiation_term = (srad * (1.0 - albedo) - RADIATION_OFFSET) / RADIATION_SCALE
    return tavg + radiation_term * (tmax - tmin) / 2.0


def insulation_weight(amount: float, a: float, b: float) -> float:
    """Logistic-like insulation weight, amount / (amount + exp(a - b * amount)).

    Zero for no cover and saturating towards 1 as the amount increases.

    Raises:
        NumericDomainError: If the denominator vanishes or overflows (negative
            amounts only).
    """
    try:
        denominator = amount + math.exp(a - b * amount)
    except OverflowError as e:
        msg = f"Insulation weight undefined: exponential overflow for amount={amount}"
        raise NumericDomainError(msg) from e
    if denominator == 0.0:
        raise NumericDomainError("Insulation weight undefined: zero denominator")
    return amount / denominator


def cover_weight(
    cover: float,
    snow: float,
    cover_coefficients: tuple[float, float],
    snow_coefficients: tuple[float, float],
) -> float:
    """Effective insulation weight: the larger of the cover and snow weights."""
    return max(
        insulation_weight(cover, *cover_coefficients),
        insulation_weight(snow, *snow_coefficients),
    )


def insulated_temperature(weight: float, covered: float, bare: float) -> float:
    """Weighted surface temperature: weight * covered + (1 - weight) * bare."""
    return weight * covered + (1.0 - weight) * bare


def radiative_surface_temperature(tmax: float, tavg: float, srad: float, albedo: float, previous: float) -> float:
    """Daily surface temperature estimate used in the DSSAT lagged average.

    (1 - albedo) * (tavg + (tmax - tavg) * sqrt(0.03 * srad)) + albedo * previous

    Raises:
        NumericDomainError: If the radiation is negative.
    """
    radiation = srad * RADIATION_WEIGHT
    if radiation < 0.0:
        msg = f"Square root of negative radiation term (srad={srad})"
        raise NumericDomainError(msg)
    return (1.0 - albedo) * (tavg + (tmax - tavg) * math.sqrt(radiation)) + albedo * previous


def epic_bare_temperature(tmax: float, tmin: float, tavg: float, wet_fraction: float, wet: bool) -> float:
    """EPIC bare soil surface temperature.

    Wet days are pulled towards the minimum temperature, dry days towards the
    maximum, in proportion to the recent wet-day fraction.
    """
    if wet:
        return wet_fraction * (tavg - tmin) + tmin
    return wet_fraction * (tmax - tavg) + tavg + DRY_DAY_OFFSET
