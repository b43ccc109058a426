"""Simulation driver.

This module provides the entry points for running a model over a forcing series:
- simulate(): Generator yielding one DayResult per forcing day
- run(): Execute the whole series and collect a SimulationOutput
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Sequence
from dataclasses import dataclass
from typing import Any

import numpy as np
import pandas as pd

from soiltemp.engine import StepEngine
from soiltemp.errors import EmptyForcingError, NonMonotonicDateError, NumericDomainError
from soiltemp.outputs import SimulationOutput
from soiltemp.registry import get_model
from soiltemp.types import DailyForcing, SiteParameters, SoilProfile, WeatherSeries

logger = logging.getLogger(__name__)


@dataclass(frozen=True, eq=False)
class DayResult:
    """Result of one simulated day.

    Attributes:
        index: Position of the day in the forcing series (0-based).
        date: Date of the day.
        state: Model state at the end of the day.
        surface_temperature: Soil surface temperature [C].
        layer_temperature: Temperature of each soil layer [C].
    """

    index: int
    date: pd.Timestamp
    state: Any
    surface_temperature: float
    layer_temperature: np.ndarray


def _resolve_engine(variant: str | StepEngine) -> StepEngine:
    if isinstance(variant, StepEngine):
        return variant
    return get_model(variant)()


def _as_records(forcing: WeatherSeries | Sequence[DailyForcing]) -> list[DailyForcing]:
    """Materialize and check the forcing series before anything is computed.

    Raises:
        EmptyForcingError: If there are no records.
        NonMonotonicDateError: If dates are not strictly increasing.
    """
    records = forcing.records() if isinstance(forcing, WeatherSeries) else list(forcing)
    if not records:
        raise EmptyForcingError("Forcing series contains no records")

    for i in range(1, len(records)):
        if records[i].date <= records[i - 1].date:
            msg = (
                f"Forcing dates must be strictly increasing: record {i} ({records[i].date.date()}) "
                f"does not follow record {i - 1} ({records[i - 1].date.date()})"
            )
            raise NonMonotonicDateError(msg)
    return records


def simulate(
    profile: SoilProfile,
    site: SiteParameters,
    forcing: WeatherSeries | Sequence[DailyForcing],
    variant: str | StepEngine,
) -> Iterator[DayResult]:
    """Simulate soil temperature day by day.

    The forcing series is validated in full when simulate is called, before
    the first day is computed. The model is initialized from the first record and then stepped once for
    every record, the first included. Callers may stop iterating after any
    day; each DayResult carries the complete state needed to continue.

    Args:
        profile: Soil profile.
        site: Site constants.
        forcing: Daily forcing records or a WeatherSeries, in date order.
        variant: Registered model name or a model instance.

    Returns:
        Iterator yielding one DayResult per forcing record.

    Raises:
        EmptyForcingError: If the forcing series is empty.
        NonMonotonicDateError: If forcing dates are not strictly increasing.
        KeyError: If ``variant`` names no registered model.
        ParameterRangeError: If a constant is outside its physical range.
        NumericDomainError: If a day's arithmetic is undefined. The error
            carries the day index and date.
    """
    engine = _resolve_engine(variant)
    records = _as_records(forcing)
    return _iterate(engine, profile, site, records)


def _iterate(
    engine: StepEngine,
    profile: SoilProfile,
    site: SiteParameters,
    records: list[DailyForcing],
) -> Iterator[DayResult]:
    logger.debug("Starting %s simulation over %d days from %s", engine.name, len(records), records[0].date.date())

    try:
        state = engine.initialize(profile, site, records[0])
    except NumericDomainError as exc:
        raise NumericDomainError(exc.message, day_index=0, date=records[0].date) from exc

    for i, record in enumerate(records):
        try:
            state, outputs = engine.step(state, profile, site, record)
        except NumericDomainError as exc:
            raise NumericDomainError(exc.message, day_index=i, date=record.date) from exc
        yield DayResult(
            index=i,
            date=record.date,
            state=state,
            surface_temperature=float(outputs["surface_temperature"]),
            layer_temperature=np.asarray(outputs["layer_temperature"], dtype=np.float64),
        )

    logger.debug("Finished %s simulation at %s", engine.name, records[-1].date.date())


def run(
    profile: SoilProfile,
    site: SiteParameters,
    forcing: WeatherSeries | Sequence[DailyForcing],
    variant: str | StepEngine = "swat_lag",
) -> SimulationOutput:
    """Run a soil temperature model over a forcing series.

    Args:
        profile: Soil profile.
        site: Site constants.
        forcing: Daily forcing records or a WeatherSeries, in date order.
        variant: Registered model name or a model instance.

    Returns:
        SimulationOutput with one row per forcing day.

    Raises:
        See :func:`simulate`. Nothing is returned when any day fails.
    """
    engine = _resolve_engine(variant)
    days = list(simulate(profile, site, forcing, engine))

    return SimulationOutput(
        time=pd.DatetimeIndex([day.date for day in days]).to_numpy(dtype="datetime64[ns]"),
        depth=np.concatenate(([0.0], profile.midpoints)),
        surface_temperature=np.array([day.surface_temperature for day in days]),
        layer_temperature=np.vstack([day.layer_temperature for day in days]),
        final_state=days[-1].state,
        model=engine.name,
    )
