"""Blank-aware descriptive statistics."""

import math
from dataclasses import dataclass
from typing import Any

import numpy as np

from ..data.arrays import as_numeric_array
from ..errors import InvalidArgumentError
from .quantile import quantile_index
from .utils import mad_of_sorted, mean_std_of, median_of_sorted
from .views import no_blank_sorted


def _present(data: Any, blank: int | float | None) -> np.ndarray:
    """Return the non-blank elements of ``data``."""
    return as_numeric_array(data, blank=blank).present()


def number(data: Any, *, blank: int | float | None = None) -> int:
    """Count the non-blank elements."""
    array = as_numeric_array(data, blank=blank)
    return int(array.size - np.count_nonzero(array.mask))


def minimum(data: Any, *, blank: int | float | None = None) -> float:
    """Return the smallest non-blank element, NaN when there is none."""
    values = _present(data, blank)
    return float(values.min()) if values.size else math.nan


def maximum(data: Any, *, blank: int | float | None = None) -> float:
    """Return the largest non-blank element, NaN when there is none."""
    values = _present(data, blank)
    return float(values.max()) if values.size else math.nan


def total(data: Any, *, blank: int | float | None = None) -> float:
    """Return the float64 sum of the non-blank elements."""
    values = _present(data, blank)
    return float(values.sum()) if values.size else math.nan


def mean(data: Any, *, blank: int | float | None = None) -> float:
    """Return the arithmetic mean of the non-blank elements."""
    return mean_std(data, blank=blank)[0]


def std(data: Any, *, blank: int | float | None = None) -> float:
    """Return the population standard deviation of the non-blank elements."""
    return mean_std(data, blank=blank)[1]


def mean_std(data: Any, *, blank: int | float | None = None) -> tuple[float, float]:
    """Return the mean and population standard deviation in one pass."""
    return mean_std_of(_present(data, blank))


def median(
    data: Any,
    *,
    in_place: bool = False,
    blank: int | float | None = None,
) -> float:
    """Return the median of the non-blank elements."""
    view = no_blank_sorted(data, in_place=in_place, blank=blank)
    return median_of_sorted(view.values)


def mad(
    data: Any,
    *,
    in_place: bool = False,
    blank: int | float | None = None,
) -> float:
    """Return the median absolute deviation from the median."""
    return median_mad(data, in_place=in_place, blank=blank)[1]


def median_mad(
    data: Any,
    *,
    in_place: bool = False,
    blank: int | float | None = None,
) -> tuple[float, float]:
    """Return the median and the median absolute deviation around it."""
    view = no_blank_sorted(data, in_place=in_place, blank=blank)
    center = median_of_sorted(view.values)
    return center, mad_of_sorted(view.values, center)


def unique(data: Any, *, blank: int | float | None = None) -> np.ndarray:
    """Return the distinct non-blank values in order of first occurrence."""
    values = _present(data, blank)
    if values.size == 0:
        return values
    _, first = np.unique(values, return_index=True)
    return values[np.sort(first)]


def has_negative(data: Any, *, blank: int | float | None = None) -> bool:
    """Return True when a non-blank element is below zero."""
    array = as_numeric_array(data, blank=blank)
    if array.dtype.kind == "u" or array.size == 0:
        return False
    return bool(np.any(array.present() < 0))


def concentration(
    data: Any,
    q_width: float,
    *,
    in_place: bool = False,
    blank: int | float | None = None,
) -> float:
    """Return how tightly the data cluster around the median.

    The sorted data are rescaled so the second smallest element maps to 0
    and the second largest to 1; the result is ``q_width`` divided by the
    rescaled distance between the quantiles ``0.5 -/+ q_width/2``.
    """
    if not 0.0 < q_width <= 1.0:
        raise InvalidArgumentError(f"q_width must lie in (0, 1], got {q_width!r}.")
    view = no_blank_sorted(data, in_place=in_place, blank=blank)
    if view.size <= 1:
        return math.nan
    values = view.ascending()
    low, high = values[1], values[-2]
    if high == low:
        return math.nan
    ilow = quantile_index(view.size, 0.5 - q_width / 2)
    ihigh = quantile_index(view.size, 0.5 + q_width / 2)
    vlow = (values[ilow] - low) / (high - low)
    vhigh = (values[ihigh] - low) / (high - low)
    if vhigh == vlow:
        return math.inf
    return float(q_width / (vhigh - vlow))


@dataclass(frozen=True)
class StatSummary:
    """Bundle of descriptive statistics for one sample."""

    number: int
    minimum: float
    maximum: float
    total: float
    mean: float
    std: float
    median: float
    mad: float


def compute_statistics(data: Any, *, blank: int | float | None = None) -> StatSummary:
    """Compute a consistent set of blank-aware statistics for a sample."""
    view = no_blank_sorted(as_numeric_array(data, blank=blank))
    values = view.ascending()
    avg, spread = mean_std_of(values)
    center = median_of_sorted(values)
    deviation = mad_of_sorted(values, center)
    return StatSummary(
        number=int(values.size),
        minimum=float(values[0]) if values.size else math.nan,
        maximum=float(values[-1]) if values.size else math.nan,
        total=float(values.astype(np.float64).sum()) if values.size else math.nan,
        mean=avg,
        std=spread,
        median=center,
        mad=deviation,
    )


__all__ = [
    "StatSummary",
    "compute_statistics",
    "concentration",
    "has_negative",
    "mad",
    "maximum",
    "mean",
    "mean_std",
    "median",
    "median_mad",
    "minimum",
    "number",
    "std",
    "total",
    "unique",
]
