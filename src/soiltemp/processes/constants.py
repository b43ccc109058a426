"""Empirical constants used by the soil temperature process functions.

Collected from the SWAT, DSSAT STEMP and DSSAT EPIC formulations.
"""

# Damping depth (SWAT / DSSAT)
DD_BASE: float = 1000.0  # Minimum of the maximum damping depth [mm]
DD_RANGE: float = 2500.0  # Bulk-density driven range of the maximum damping depth [mm]
DD_BD_COEF: float = 686.0
DD_BD_EXP: float = -5.63
DD_REFERENCE: float = 500.0  # Damping depth reached at zero water scaling [mm]
WW_INTERCEPT: float = 0.356  # Water holding term, 0.356 - 0.144 * BD
WW_SLOPE: float = 0.144

# Depth factor, SWAT and EPIC variants of the same curve
SWAT_DF_A: float = -0.867
SWAT_DF_B: float = 2.078
EPIC_DF_A: float = -0.8669
EPIC_DF_B: float = 2.0775

# Bare soil surface temperature (SWAT)
RADIATION_OFFSET: float = 14.0
RADIATION_SCALE: float = 20.0

# Annual temperature wave (DSSAT STEMP)
HOT_DAY_NORTH: float = 200.0  # Day of year of the hottest day, northern hemisphere
HOT_DAY_SOUTH: float = 20.0
RADIANS_PER_DAY: float = 0.0174
RADIATION_WEIGHT: float = 0.03
MIN_PESW: float = 0.01  # Lower bound on potential extractable soil water [cm]

# EPIC wet-day detection
WET_DAY_THRESHOLD: float = 1e-6  # [mm]
INITIAL_WET_FRACTION: float = 0.1
DRY_DAY_OFFSET: float = 2.0  # [C]
