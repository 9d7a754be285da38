"""Mode estimation by comparing a distribution with its mirror image.

A candidate mode index ``m`` is scored by reflecting the elements below it
about ``a[m]`` and measuring how far, in index units, the reflected values
land from the real elements above it. Near the true mode of a locally
symmetric distribution the two agree within Poisson noise. A golden-section
search over the candidate indices finds the best mirror, and the result is
only reported when the distribution is adequately symmetric around it.
"""

from __future__ import annotations

import math
from typing import Any

import numpy as np
from attrs import define

from .. import constants
from ..data.arrays import Ownership, SortedView, Sortedness
from ..data.models import Bins, CumulativeFrequency, Histogram, ModeResult
from ..errors import InvalidArgumentError
from .histogram import cfp, histogram, regular_bins
from .quantile import quantile_function_index, quantile_index
from .views import no_blank_sorted


@define(slots=True, frozen=True)
class MirrorScore:
    """Largest index offset between a mirror and the data, or "above".

    ``distance is None`` means the mirrored values ran beyond the real
    ones by more than the noise budget, so the mirror sits in the low tail
    rather than near a peak.
    """

    distance: int | None

    @classmethod
    def above(cls) -> MirrorScore:
        return cls(distance=None)

    @property
    def is_above(self) -> bool:
        return self.distance is None

    def better_than(self, other: MirrorScore) -> bool:
        """Return True when this score is strictly smaller than ``other``."""
        if self.distance is None:
            return False
        if other.distance is None:
            return True
        return self.distance < other.distance


@define(slots=True)
class _SearchState:
    """Bracket of the golden-section search over mirror indices."""

    low: int
    mid: int
    high: int
    mid_score: MirrorScore


def _matching_offsets(values: np.ndarray, m: int, offsets: np.ndarray) -> np.ndarray:
    """Return, for each mirror offset ``i``, the offset ``j`` above ``m``
    whose element is closest to ``2*a[m] - a[m-i]``.

    Ties go to the lower offset. When every element is below the mirrored
    value the offset is ``size - m``.
    """
    size = values.size
    mirrored = 2 * values[m] - values[m - offsets]
    first_above = np.searchsorted(values, mirrored, side="right")
    matched = first_above - m
    inside = first_above < size
    if np.any(inside):
        k = first_above[inside]
        previous_closer = ~(values[k] - mirrored[inside] < mirrored[inside] - values[k - 1])
        matched[inside] = matched[inside] - previous_closer.astype(matched.dtype)
    matched[~inside] = size - m
    return matched


def _noise_budget(mirrordist: float, m: int) -> int:
    return int(mirrordist * math.sqrt(m))


def mirror_score(
    values: np.ndarray,
    m: int,
    mirrordist: float,
    *,
    numcheck: int,
    interval: int,
) -> MirrorScore:
    """Score the mirror at index ``m`` of the ascending array ``values``."""
    limit = min(numcheck, m + 1, values.size - m)
    offsets = np.arange(1, limit, interval, dtype=np.intp)
    if offsets.size == 0:
        return MirrorScore(distance=0)
    matched = _matching_offsets(values, m, offsets)
    if np.any(offsets > matched + _noise_budget(mirrordist, m)):
        return MirrorScore.above()
    return MirrorScore(distance=int(np.max(np.abs(offsets - matched))))


def _golden_section(
    values: np.ndarray,
    state: _SearchState,
    mirrordist: float,
    *,
    numcheck: int,
    interval: int,
) -> int:
    """Narrow the bracket until it is small enough and return its middle."""
    while True:
        upper_larger = state.high - state.mid > state.mid - state.low
        if upper_larger:
            probe = int(state.mid + constants.MODE_TWO_TAKE_GR * (state.high - state.mid))
        else:
            probe = int(state.mid - constants.MODE_TWO_TAKE_GR * (state.mid - state.low))

        width = state.high - state.low
        if width < constants.MODE_TOLERANCE * (state.mid + probe) or width <= 3:
            return (state.high + state.low) // 2

        score = mirror_score(values, probe, mirrordist, numcheck=numcheck, interval=interval)
        # An "above" mirror always pulls the search down.
        if score.is_above:
            if state.mid < probe:
                state.high = probe
            else:
                state.high, state.mid, state.mid_score = state.mid, probe, score
            continue

        if score.better_than(state.mid_score):
            if upper_larger:
                state.low, state.mid, state.mid_score = state.mid, probe, score
            else:
                state.high, state.mid, state.mid_score = state.mid, probe, score
        elif upper_larger:
            state.high = probe
        else:
            state.low = probe


def symmetricity(values: np.ndarray, m: int, mirrordist: float) -> tuple[float, float]:
    """Grade how symmetric the ascending ``values`` are about index ``m``.

    Returns the ratio of the distance from the mode to the point where the
    mirror first departs from the data, over the distance from a low
    reference quantile to the mode, together with the value at that
    departure point. A zero ratio marks an unusable mode.
    """
    size = values.size
    top = min(2 * m, size - 1)
    center = values[m]
    low_ref = values[quantile_index(2 * m + 1, constants.MODE_SYM_LOW_Q)]
    if center <= low_ref:
        return 0.0, math.nan

    offsets = np.arange(1, top - m, dtype=np.intp)
    bound = top
    if offsets.size:
        matched = _matching_offsets(values, m, offsets)
        departed = np.flatnonzero(np.abs(offsets - matched) > _noise_budget(mirrordist, m))
        if departed.size:
            bound = m + int(offsets[departed[0]])
    bound_value = float(values[bound])
    if bound_value == low_ref:
        return 0.0, bound_value
    return float((bound_value - center) / (center - low_ref)), bound_value


def mode(
    data: Any,
    mirrordist: float,
    *,
    in_place: bool = False,
    blank: int | float | None = None,
) -> ModeResult:
    """Estimate the mode of the data with the mirror method.

    ``mirrordist`` scales the ``sqrt(m)`` noise budget allowed between the
    mirror and the data. The estimate is all NaN when the sample is empty or
    its symmetricity does not exceed the acceptance threshold.
    """
    if not mirrordist > 0:
        raise InvalidArgumentError(f"mirrordist must be positive, got {mirrordist!r}.")
    view = no_blank_sorted(data, in_place=in_place, blank=blank)
    if view.size == 0:
        return ModeResult.empty()

    values = view.ascending()
    size = values.size
    numcheck = size // 2
    interval = 1
    if numcheck > constants.MODE_MAX_CHECKED:
        interval = numcheck // constants.MODE_MAX_CHECKED

    low = quantile_index(size, constants.MODE_MIN_Q)
    high = quantile_index(size, constants.MODE_MAX_Q)
    mid = int((high + constants.MODE_GOLDEN_RATIO * low) / (1 + constants.MODE_GOLDEN_RATIO))
    state = _SearchState(
        low=low,
        mid=mid,
        high=high,
        mid_score=mirror_score(values, mid, mirrordist, numcheck=numcheck, interval=interval),
    )
    index = _golden_section(values, state, mirrordist, numcheck=numcheck, interval=interval)

    ratio, bound_value = symmetricity(values, index, mirrordist)
    if not ratio > constants.MODE_GOOD_SYMMETRY:
        return ModeResult.empty()
    return ModeResult(
        mode=float(values[index]),
        quantile=index / (size - 1),
        symmetricity=ratio,
        symmetry_value=bound_value,
    )


def make_mirror(
    data: Any, index: int, *, blank: int | float | None = None
) -> tuple[np.ndarray, float]:
    """Reflect the lowest ``index + 1`` sorted elements about element ``index``.

    Returns the ``2*index + 1`` element mirrored distribution in increasing
    order and the mirror value.
    """
    view = no_blank_sorted(data, blank=blank)
    if not 0 <= index < view.size:
        raise InvalidArgumentError(
            f"Mirror index {index} is outside a sample of {view.size} elements."
        )
    values = view.ascending()
    center = float(values[index])
    reflected = 2 * center - values[:index][::-1]
    return np.concatenate([values[: index + 1], reflected]), center


@define(slots=True, frozen=True, eq=False)
class MirrorPlots:
    """Histogram and CFP of a distribution mirrored about ``mirror_value``."""

    mirror_value: float
    mirror: np.ndarray
    bins: Bins
    histogram: Histogram
    cfp: CumulativeFrequency


def mode_mirror_plots(
    data: Any,
    value: float,
    numbins: int,
    *,
    in_place: bool = False,
    blank: int | float | None = None,
) -> MirrorPlots | None:
    """Build the mirrored distribution about the element closest to ``value``.

    The bins are aligned so one bin starts exactly on the mirror value; the
    histogram peaks at one and the CFP is normalized. ``None`` is returned
    when the sample is empty or ``value`` is outside the data or at its
    first element.
    """
    view = no_blank_sorted(data, in_place=in_place, blank=blank)
    if view.size == 0:
        return None
    ascending = SortedView(
        values=view.ascending(), order=Sortedness.INCREASING, ownership=Ownership.OWNED
    )
    index = quantile_function_index(ascending, value)
    if index is None or index == 0:
        return None

    mirror, center = make_mirror(ascending, index)
    bins = regular_bins(mirror, numbins, onebinstart=center)
    if bins is None:
        return None
    return MirrorPlots(
        mirror_value=center,
        mirror=mirror,
        bins=bins,
        histogram=histogram(mirror, bins, maxone=True),
        cfp=cfp(mirror, bins, normalize=True),
    )


__all__ = [
    "MirrorPlots",
    "MirrorScore",
    "make_mirror",
    "mirror_score",
    "mode",
    "mode_mirror_plots",
    "symmetricity",
]
