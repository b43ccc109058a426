"""Structured simulation output.

SimulationOutput holds the surface and per-layer temperature series of a run
and converts them to the long (date, depth, temperature) table handed to
formatting and plotting code.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import numpy as np
import pandas as pd


@dataclass(frozen=True, eq=False)
class SimulationOutput:
    """Complete output of a simulation run.

    Attributes:
        time: Date of each simulated day (datetime64[ns]).
        depth: Output depths [mm]: 0.0 for the surface followed by layer midpoints.
        surface_temperature: Surface temperature per day [C], shape (n_days,).
        layer_temperature: Layer temperature per day [C], shape (n_days, n_layers).
        final_state: Model state after the last day.
        model: Registry name of the model variant.
    """

    time: np.ndarray
    depth: np.ndarray
    surface_temperature: np.ndarray
    layer_temperature: np.ndarray
    final_state: Any = None
    model: str = ""

    def __len__(self) -> int:
        """Return the number of simulated days."""
        return len(self.time)

    @property
    def temperature(self) -> np.ndarray:
        """Temperature at every output depth, surface first, shape (n_days, n_layers + 1)."""
        return np.column_stack((self.surface_temperature, self.layer_temperature))

    def to_dataframe(self, decimals: int | None = None) -> pd.DataFrame:
        """Convert to a long table keyed by (date, depth).

        Args:
            decimals: Round temperatures to this many decimals. Full precision
                is kept when None.

        Returns:
            DataFrame with columns date, depth and temperature; depth 0 is the
            surface record.
        """
        n_days, n_depths = len(self.time), len(self.depth)
        temperature = self.temperature.reshape(-1)
        if decimals is not None:
            temperature = np.round(temperature, decimals)

        return pd.DataFrame(
            {
                "date": np.repeat(self.time, n_depths),
                "depth": np.tile(self.depth, n_days),
                "temperature": temperature,
            }
        )
