"""Detectors for the first outlying element of a sorted sample."""

from __future__ import annotations

import math
from collections import deque
from typing import Any

import numpy as np

from .. import constants
from ..data.models import ClipStat, Outlier
from ..errors import InvalidArgumentError
from .clip import clip_mad, validate_clip_arguments
from .views import no_blank_sorted


def _first_wide_gap(
    values: np.ndarray,
    window_size: int,
    sigma: float,
    clip_multiplier: float,
    clip_param: float,
) -> int | None:
    """Return the index before the first gap that stands out from the ones below it."""
    for i in range(window_size, values.size):
        gaps = np.diff(values[i - window_size : i])
        baseline = clip_mad(gaps, clip_multiplier, clip_param, extra=ClipStat.STD)
        gap = values[i] - values[i - 1]
        if gap - baseline.median > sigma * baseline.std:
            return i - 1
    return None


def outlier_bydistance(
    data: Any,
    window_size: int,
    sigma: float,
    clip_multiplier: float,
    clip_param: float,
    *,
    positive: bool = True,
    in_place: bool = False,
    blank: int | float | None = None,
) -> Outlier | None:
    """Find the first element followed by an unusually large gap.

    Each gap between neighbors is compared with the MAD-clipped median and
    standard deviation of the ``window_size - 1`` gaps below it. With
    ``positive=False`` the scan runs from the largest element downward and
    reports the first element preceded by such a gap.
    """
    if window_size <= 2:
        raise InvalidArgumentError(f"window_size must be larger than 2, got {window_size!r}.")
    if not sigma > 0:
        raise InvalidArgumentError(f"sigma must be positive, got {sigma!r}.")
    validate_clip_arguments(clip_multiplier, clip_param)

    view = no_blank_sorted(data, in_place=in_place, blank=blank)
    if view.size == 0:
        return None
    values = view.ascending()
    scanned = values if positive else -values[::-1]

    index = _first_wide_gap(scanned, window_size, sigma, clip_multiplier, clip_param)
    if index is None:
        return None
    if not positive:
        index = values.size - 1 - index
    return Outlier(index=index, value=float(values[index]))


def outlier_flat_cfp(
    data: Any,
    numprev: int,
    clip_multiplier: float,
    clip_param: float,
    thresh: float,
    numcontig: int,
    *,
    in_place: bool = False,
    blank: int | float | None = None,
) -> Outlier | None:
    """Find where the cumulative frequency plot of the data flattens.

    Differences ``a[p+2] - a[p-2]`` are compared with the MAD-clipped
    baseline of the previous ``numprev`` differences. The start of the first
    run of ``numcontig`` consecutive differences more than ``thresh``
    baseline standard deviations above the median is reported.
    """
    if not thresh > 0:
        raise InvalidArgumentError(f"thresh must be positive, got {thresh!r}.")
    if numprev <= 0:
        raise InvalidArgumentError(f"numprev must be positive, got {numprev!r}.")
    if numcontig <= 0:
        raise InvalidArgumentError(f"numcontig must be positive, got {numcontig!r}.")
    validate_clip_arguments(clip_multiplier, clip_param)

    view = no_blank_sorted(data, in_place=in_place, blank=blank)
    values = view.ascending()
    stride = constants.FLAT_CFP_STRIDE

    previous: deque[float] = deque(maxlen=numprev)
    run_start = 0
    run_length = 0
    for p in range(stride, values.size - stride):
        diff = float(values[p + stride] - values[p - stride])
        if len(previous) < numprev:
            previous.append(diff)
            continue

        window = np.fromiter(previous, dtype=np.float64, count=numprev)
        baseline = clip_mad(window, clip_multiplier, clip_param, extra=ClipStat.STD)
        check = (diff - baseline.median) / baseline.std if baseline.std else math.nan
        if baseline.std > constants.FLAT_CFP_MIN_STD and check > thresh:
            if run_length == 0:
                run_start = p
            run_length += 1
            if run_length == numcontig:
                return Outlier(index=run_start, value=float(values[run_start]))
        else:
            run_length = 0
        previous.append(diff)
    return None


__all__ = ["outlier_bydistance", "outlier_flat_cfp"]
