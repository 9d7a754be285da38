"""Regular bins, histograms and cumulative frequency plots."""

from __future__ import annotations

import math
from typing import Any

import numpy as np

from ..data.arrays import as_numeric_array
from ..data.models import Bins, CumulativeFrequency, Histogram, Histogram2D, HistogramScale
from ..errors import InvalidArgumentError


def regular_bins(
    data: Any,
    numbins: int,
    *,
    range_min: float | None = None,
    range_max: float | None = None,
    onebinstart: float | None = None,
    blank: int | float | None = None,
) -> Bins | None:
    """Divide a value range into ``numbins`` equal bins.

    Range ends that are not given (or NaN) are taken from the data, in which
    case a sample without usable elements yields ``None``. With
    ``onebinstart`` every center is shifted so the lower edge of the bin
    straddling that value lands exactly on it.
    """
    if numbins <= 0:
        raise InvalidArgumentError("numbins must be a positive integer.")

    low = math.nan if range_min is None else float(range_min)
    high = math.nan if range_max is None else float(range_max)
    if math.isnan(low) or math.isnan(high):
        values = as_numeric_array(data, blank=blank).present()
        if values.size == 0:
            return None
        if math.isnan(low):
            low = float(values.min())
        if math.isnan(high):
            high = float(values.max())
    if high < low:
        raise InvalidArgumentError(f"Bin range is inverted: [{low}, {high}].")

    binwidth = (high - low) / numbins
    half = binwidth / 2
    centers = low + np.arange(numbins, dtype=np.float64) * binwidth + half

    if onebinstart is not None and not math.isnan(onebinstart):
        lower = centers - half
        straddle = np.flatnonzero((lower[:-1] < onebinstart) & (lower[1:] > onebinstart))
        if straddle.size:
            centers = centers + (onebinstart - lower[straddle[0]])
    return Bins(centers=centers, binwidth=binwidth)


def _bin_indices(values: np.ndarray, bins: Bins) -> tuple[np.ndarray, np.ndarray]:
    """Return the in-range mask and the bin index of each in-range value."""
    inside = (values >= bins.lower) & (values <= bins.upper)
    kept = values[inside]
    if bins.binwidth == 0:
        return inside, np.zeros(kept.size, dtype=np.intp)
    index = np.floor((kept - bins.lower) / bins.binwidth).astype(np.intp)
    # The right edge itself belongs to the last bin.
    return inside, np.minimum(index, bins.numbins - 1)


def _check_regular(bins: Bins) -> None:
    if not bins.is_regular():
        raise InvalidArgumentError("Only regular bins are supported.")


def histogram(
    data: Any,
    bins: Bins,
    *,
    normalize: bool = False,
    maxone: bool = False,
    blank: int | float | None = None,
) -> Histogram:
    """Count the non-blank elements falling in each bin.

    ``normalize`` divides by the in-range count and ``maxone`` by the
    largest bin; only one of them may be requested.
    """
    if normalize and maxone:
        raise InvalidArgumentError("Only one of 'normalize' and 'maxone' may be given.")
    _check_regular(bins)
    values = as_numeric_array(data, blank=blank).present()
    if values.size == 0:
        raise InvalidArgumentError("Cannot build a histogram of an empty sample.")

    _, index = _bin_indices(values.astype(np.float64), bins)
    counts = np.bincount(index, minlength=bins.numbins).astype(np.float64)
    in_range = float(counts.sum())

    scale = HistogramScale.COUNT
    if normalize:
        scale = HistogramScale.NORMALIZED
        if in_range > 0:
            counts /= in_range
    elif maxone:
        scale = HistogramScale.MAXONE
        peak = float(counts.max())
        if peak > 0:
            counts /= peak
    return Histogram(bins=bins, counts=counts, scale=scale, total=in_range)


def cfp(
    data: Any,
    bins: Bins,
    *,
    normalize: bool = False,
    hist: Histogram | None = None,
    blank: int | float | None = None,
) -> CumulativeFrequency:
    """Build the cumulative frequency plot of the data over ``bins``.

    A supplied count or normalized histogram is reused; a max-one histogram
    cannot be summed meaningfully, so the counts are rebuilt from ``data``.
    A normalized histogram always gives a normalized plot. Normalizing
    divides by the histogram total.
    """
    _check_regular(bins)
    if hist is not None and hist.counts.size != bins.numbins:
        raise InvalidArgumentError("The supplied histogram does not match the bins.")
    if hist is None or hist.scale is HistogramScale.MAXONE:
        hist = histogram(data, bins, blank=blank)

    running = np.cumsum(hist.counts)
    normalized = hist.scale is HistogramScale.NORMALIZED
    if normalize and not normalized:
        reference = float(hist.counts.sum())
        if reference > 0:
            running = running / reference
        normalized = True
    return CumulativeFrequency(bins=bins, values=running, normalized=normalized)


def histogram2d(
    x: Any,
    y: Any,
    bins_x: Bins,
    bins_y: Bins,
    *,
    blank: int | float | None = None,
) -> Histogram2D:
    """Count element pairs in each box of a two-dimensional regular grid.

    Pairs with a blank in either column are skipped. The output is flattened
    with the second axis varying fastest.
    """
    first = as_numeric_array(x, blank=blank)
    second = as_numeric_array(y, blank=blank)
    if first.size != second.size:
        raise InvalidArgumentError("The two columns must have the same size.")
    _check_regular(bins_x)
    _check_regular(bins_y)

    keep = ~(first.mask | second.mask)
    xs = first.values[keep].astype(np.float64)
    ys = second.values[keep].astype(np.float64)
    inside_x = (xs >= bins_x.lower) & (xs <= bins_x.upper)
    inside_y = (ys >= bins_y.lower) & (ys <= bins_y.upper)
    both = inside_x & inside_y
    _, ix = _bin_indices(xs[both], bins_x)
    _, iy = _bin_indices(ys[both], bins_y)

    size = bins_x.numbins * bins_y.numbins
    counts = np.bincount(ix * bins_y.numbins + iy, minlength=size).astype(np.float64)
    return Histogram2D(
        bins_x=bins_x,
        bins_y=bins_y,
        bin_dim1=np.repeat(bins_x.centers, bins_y.numbins),
        bin_dim2=np.tile(bins_y.centers, bins_x.numbins),
        counts=counts,
    )


__all__ = ["cfp", "histogram", "histogram2d", "regular_bins"]
