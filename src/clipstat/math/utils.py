"""Common helper functions for statistical routines."""

import math

import numpy as np


def std_from_sums(total: float, total_sq: float, count: int) -> float:
    """Population standard deviation from a sum and a sum of squares.

    Rounding can leave the squared mean a hair above the mean of squares
    when every value is identical; that case reports zero.
    """
    if count == 0:
        return math.nan
    sq_of_sum = total * total / count
    if sq_of_sum > total_sq:
        return 0.0
    return math.sqrt((total_sq - sq_of_sum) / count)


def median_of_sorted(values: np.ndarray) -> float:
    """Return the median of a monotonic array, in either direction."""
    size = values.size
    if size == 0:
        return math.nan
    half = size // 2
    if size % 2:
        return float(values[half])
    return (float(values[half - 1]) + float(values[half])) / 2


def mad_of_sorted(values: np.ndarray, median: float | None = None) -> float:
    """Return the median absolute deviation of a monotonic array."""
    if values.size == 0:
        return math.nan
    center = median_of_sorted(values) if median is None else median
    deviations = np.abs(values.astype(np.float64) - center)
    return float(np.median(deviations))


def mean_std_of(values: np.ndarray) -> tuple[float, float]:
    """Return the mean and population standard deviation in float64."""
    count = int(values.size)
    if count == 0:
        return math.nan, math.nan
    as_float = values.astype(np.float64)
    total = float(as_float.sum())
    total_sq = float(np.dot(as_float, as_float))
    return total / count, std_from_sums(total, total_sq, count)


__all__ = [
    "mad_of_sorted",
    "mean_std_of",
    "median_of_sorted",
    "std_from_sums",
]
