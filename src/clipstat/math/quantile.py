"""Quantile lookups and their inverse over sorted views."""

from __future__ import annotations

import math
from typing import Any

import numpy as np

from ..errors import InvalidArgumentError
from .views import no_blank_sorted


def _check_probability(quantile: float) -> float:
    """Validate that ``quantile`` lies in the closed unit interval."""
    value = float(quantile)
    if not 0.0 <= value <= 1.0:
        raise InvalidArgumentError(f"Quantile must lie in [0, 1], got {quantile!r}.")
    return value


def quantile_index(size: int, quantile: float) -> int:
    """Return the index of ``quantile`` in a sorted array of ``size`` elements.

    The fractional position rounds to the nearest index, with an exact half
    rounding down.
    """
    if size <= 0:
        raise InvalidArgumentError("Cannot take a quantile index of an empty array.")
    q = _check_probability(quantile)
    floatindex = (size - 1) * q
    base = math.floor(floatindex)
    return int(base + 1 if floatindex - base > 0.5 else base)


def quantile(
    data: Any,
    quantile: float,
    *,
    in_place: bool = False,
    blank: int | float | None = None,
) -> float:
    """Return the element at ``quantile`` of the blank-free sorted data.

    ``quantile=0`` is always the smallest element, whatever the direction
    of the view. An empty sample gives NaN.
    """
    q = _check_probability(quantile)
    view = no_blank_sorted(data, in_place=in_place, blank=blank)
    if view.size == 0:
        return math.nan
    effective = q if view.increasing else 1.0 - q
    return float(view.values[quantile_index(view.size, effective)])


def quantile_function_index(
    data: Any,
    value: float,
    *,
    in_place: bool = False,
    blank: int | float | None = None,
) -> int | None:
    """Return the index in the sorted view whose element is closest to ``value``.

    Among equal elements the last one wins. ``None`` is returned when the
    probe lies outside the data range or the sample is empty.
    """
    view = no_blank_sorted(data, in_place=in_place, blank=blank)
    if view.size == 0:
        return None
    keys = view.values.astype(np.float64)
    probe = float(value)
    if not view.increasing:
        keys = -keys
        probe = -probe
    if not keys[0] <= probe <= keys[-1]:
        return None

    above = int(np.searchsorted(keys, probe, side="right"))
    if above == view.size:
        return view.size - 1
    if probe - keys[above - 1] < keys[above] - probe:
        return above - 1
    return above


def quantile_function(
    data: Any,
    value: float,
    *,
    in_place: bool = False,
    blank: int | float | None = None,
) -> float:
    """Return the quantile of ``value`` within the data.

    Probes below the minimum give ``-inf`` and probes above the maximum
    ``+inf``. A sample with fewer than two elements has no defined quantile.
    """
    view = no_blank_sorted(data, in_place=in_place, blank=blank)
    if view.size == 0 or math.isnan(value):
        return math.nan
    index = quantile_function_index(view, value)
    if index is None:
        low = float(view.values[0] if view.increasing else view.values[-1])
        return -math.inf if float(value) < low else math.inf
    if view.size == 1:
        return math.nan
    fraction = index / (view.size - 1)
    return fraction if view.increasing else 1.0 - fraction


__all__ = [
    "quantile",
    "quantile_function",
    "quantile_function_index",
    "quantile_index",
]
