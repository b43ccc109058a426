"""Exception hierarchy for soiltemp.

All errors reflect invalid input or an unrepresentable physical state; none of
them is transient, so nothing in the package retries or substitutes values.
"""

from __future__ import annotations

from typing import Any


class SoilTempError(Exception):
    """Base class for all soiltemp errors."""


class InvalidInputError(SoilTempError, ValueError):
    """Structurally invalid arrays: mismatched lengths, non-positive thickness."""


class ParameterRangeError(SoilTempError, ValueError):
    """A site, soil or model constant lies outside its physical range."""


class NumericDomainError(SoilTempError, ArithmeticError):
    """Undefined arithmetic during the daily recurrence.

    Attributes:
        day_index: Zero-based index of the forcing record being processed, when known.
        date: Date of that forcing record, when known.
    """

    def __init__(self, message: str, day_index: int | None = None, date: Any = None) -> None:
        super().__init__(message)
        self.message = message
        self.day_index = day_index
        self.date = date

    def __str__(self) -> str:
        if self.day_index is None:
            return self.message
        return f"{self.message} [day {self.day_index}: {self.date}]"


class ForcingError(SoilTempError, ValueError):
    """Base class for invalid forcing series."""


class EmptyForcingError(ForcingError):
    """The forcing series contains no records."""


class NonMonotonicDateError(ForcingError):
    """Forcing dates are not strictly increasing."""


__all__ = [
    "EmptyForcingError",
    "ForcingError",
    "InvalidInputError",
    "NonMonotonicDateError",
    "NumericDomainError",
    "ParameterRangeError",
    "SoilTempError",
]
