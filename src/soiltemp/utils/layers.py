"""Conservative re-mapping of profile quantities between soil layerings.

A soil profile is described by two arrays: the thickness of each layer and the
value of some property in each layer. Models that need their own layering map
values onto it and back. Values come in two flavours:

- amounts (e.g. water in mm, nitrogen in kg/m2), which add up across layers;
- concentrations (e.g. volumetric water, bulk density), which must be weighted
  by thickness before mapping so that mass balance is kept.

Mapping works on the cumulative value curve: the amount stored between the
surface and any depth is obtained by linear interpolation, and each new layer
receives the difference between the cumulative values at its bottom and top.
Below the deepest source point the last source layer's per-depth rate is
extended, so a deeper target profile repeats the last concentration.
"""

from __future__ import annotations

import numpy as np
from numba import njit

from soiltemp.errors import InvalidInputError


@njit(cache=True)
def _interpolate_cumulative(depth: float, cum_depth: np.ndarray, cum_values: np.ndarray) -> float:
    """Cumulative value at ``depth`` from a monotonic cumulative curve.

    The curve implicitly starts at (0, 0). Beyond the last point the final
    segment is extrapolated.
    """
    n = len(cum_depth)
    pos = np.searchsorted(cum_depth, depth)
    if pos >= n:
        pos = n - 1
    elif cum_depth[pos] == depth:
        return cum_values[pos]

    if pos == 0:
        return depth * cum_values[0] / cum_depth[0]

    x0 = cum_depth[pos - 1]
    y0 = cum_values[pos - 1]
    return y0 + (depth - x0) * (cum_values[pos] - y0) / (cum_depth[pos] - x0)


@njit(cache=True)
def _remap_cumulative(cum_depth: np.ndarray, cum_values: np.ndarray, to_bottom: np.ndarray) -> np.ndarray:
    """Difference the interpolated cumulative curve over the target layer bounds."""
    n_new = len(to_bottom)
    out = np.empty(n_new, dtype=np.float64)
    value_top = 0.0
    for i in range(n_new):
        value_bottom = _interpolate_cumulative(to_bottom[i], cum_depth, cum_values)
        out[i] = value_bottom - value_top
        value_top = value_bottom
    return out


def _as_thickness(name: str, thickness: np.ndarray) -> np.ndarray:
    arr = np.asarray(thickness, dtype=np.float64)
    if arr.ndim != 1 or arr.size == 0:
        msg = f"{name} must be a non-empty 1D array, got shape {arr.shape}"
        raise InvalidInputError(msg)
    if not np.all(np.isfinite(arr)) or np.any(arr <= 0.0):
        msg = f"{name} must contain finite values > 0"
        raise InvalidInputError(msg)
    return arr


def remap_amount(from_values: np.ndarray, from_thickness: np.ndarray, to_thickness: np.ndarray) -> np.ndarray:
    """Map an extensive quantity (amount per layer) onto a new layering.

    The total is conserved whenever the target profile is not deeper than the
    source profile.

    Args:
        from_values: Amount in each source layer.
        from_thickness: Thickness of each source layer [mm].
        to_thickness: Thickness of each target layer [mm].

    Returns:
        Amount in each target layer.

    Raises:
        InvalidInputError: If a thickness is not strictly positive or the value
            and thickness arrays differ in length.

    Example:
        >>> remap_amount([25, 60, 90, 175], [50, 150, 300, 500], [50] * 4 + [100] * 8)
        array([25., 20., 20., 20., 30., 30., 30., 35., 35., 35., 35., 35.])
    """
    from_thick = _as_thickness("from_thickness", from_thickness)
    to_thick = _as_thickness("to_thickness", to_thickness)
    values = np.asarray(from_values, dtype=np.float64)
    if values.ndim != 1 or len(values) != len(from_thick):
        msg = f"from_values length {values.size} does not match from_thickness length {len(from_thick)}"
        raise InvalidInputError(msg)

    return _remap_cumulative(np.cumsum(from_thick), np.cumsum(values), np.cumsum(to_thick))


def remap_concentration(from_values: np.ndarray, from_thickness: np.ndarray, to_thickness: np.ndarray) -> np.ndarray:
    """Map an intensive quantity (per-unit concentration) onto a new layering.

    Values are converted to amounts with the source thickness, mapped with
    :func:`remap_amount` and converted back with the target thickness.
    """
    from_thick = _as_thickness("from_thickness", from_thickness)
    to_thick = _as_thickness("to_thickness", to_thickness)
    values = np.asarray(from_values, dtype=np.float64)
    if values.ndim != 1 or len(values) != len(from_thick):
        msg = f"from_values length {values.size} does not match from_thickness length {len(from_thick)}"
        raise InvalidInputError(msg)

    return remap_amount(values * from_thick, from_thick, to_thick) / to_thick
