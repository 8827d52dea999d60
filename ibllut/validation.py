"""Parameter validation shared by the sampling, BRDF and mapping kernels.

Every public kernel checks its inputs up front and raises one of the errors
below; nothing is silently clamped.
"""

from __future__ import annotations

import math
from numbers import Integral, Real


class LookupTableError(Exception):
    pass


class RangeValidationError(LookupTableError, ValueError):
    """A parameter lies outside its documented domain."""

    def __init__(self, param: str, value, low=None, high=None, message: str | None = None):
        self.param = param
        self.value = value
        self.low = low
        self.high = high
        super().__init__(message or _range_message(param, value, low, high))


class TableSizeError(LookupTableError, ValueError):
    """A table dimension breaks a size rule (e.g. not a power of two)."""

    def __init__(self, param: str, value, message: str | None = None):
        self.param = param
        self.value = value
        super().__init__(message or f"The value of `{param}` ({value}) is not a power of 2.")


def _range_message(param, value, low, high) -> str:
    if low is not None and value < low:
        return f"The value of `{param}` ({value}) is less than {low}."
    if high is not None and value > high:
        return f"The value of `{param}` ({value}) is greater than {high}."
    return f"The value of `{param}` ({value}) is out of range [{low}, {high}]."


def is_power_of_two(value: int) -> bool:
    return value > 0 and (value & (value - 1)) == 0


def validate_range(value: float, low: float, high: float, name: str) -> float:
    if isinstance(value, bool) or not isinstance(value, Real):
        raise RangeValidationError(
            name, value, low, high,
            message=f"The value of `{name}` must be a real number, got {type(value).__name__}.",
        )
    value = float(value)
    if not math.isfinite(value):
        raise RangeValidationError(
            name, value, low, high,
            message=f"The value of `{name}` ({value}) is not finite.",
        )
    if value < low or value > high:
        raise RangeValidationError(name, value, low, high)
    return value


def validate_unit(value: float, name: str) -> float:
    """Validate a real in [0, 1]."""
    return validate_range(value, 0.0, 1.0, name)


def validate_signed_unit(value: float, name: str) -> float:
    """Validate a real in [-1, 1]."""
    return validate_range(value, -1.0, 1.0, name)


def validate_count(value: int, name: str, minimum: int = 1) -> int:
    if isinstance(value, bool) or not isinstance(value, Integral):
        raise RangeValidationError(
            name, value, minimum, None,
            message=f"The value of `{name}` must be an integer, got {type(value).__name__}.",
        )
    value = int(value)
    if value < minimum:
        raise RangeValidationError(name, value, minimum, None)
    return value


def validate_index(index: int, count: int, name: str = "index") -> int:
    """Validate an integer index in [0, count)."""
    if isinstance(index, bool) or not isinstance(index, Integral):
        raise RangeValidationError(
            name, index, 0, count - 1,
            message=f"The value of `{name}` must be an integer, got {type(index).__name__}.",
        )
    index = int(index)
    if index < 0 or index > count - 1:
        raise RangeValidationError(name, index, 0, count - 1)
    return index


def validate_power_of_two(value: int, name: str) -> int:
    value = validate_count(value, name, 1)
    if not is_power_of_two(value):
        raise TableSizeError(name, value)
    return value
