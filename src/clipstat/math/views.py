"""Blank-free sorted views over caller buffers."""

from __future__ import annotations

from typing import Any

import numpy as np

from ..data.arrays import (
    NumericArray,
    Ownership,
    SortedView,
    Sortedness,
    as_numeric_array,
    is_sorted,
)


def sort_increasing(values: np.ndarray) -> np.ndarray:
    """Sort ``values`` in place into increasing order and return it."""
    values.sort()
    return values


def sort_decreasing(values: np.ndarray) -> np.ndarray:
    """Sort ``values`` in place into decreasing order and return it."""
    values.sort()
    values[:] = values[::-1].copy()
    return values


def no_blank_sorted(
    data: Any,
    *,
    in_place: bool = False,
    blank: int | float | None = None,
) -> SortedView:
    """Return a blank-free, monotonic view of ``data``.

    A buffer without blanks that is already sorted in either direction is
    returned as a borrowed view without any copy. Otherwise the blanks are
    dropped and the remainder sorted in increasing order. With
    ``in_place=True`` the kept elements are compacted to the front of the
    caller's buffer, which is then permuted; the view is that leading slice
    and the tail holds leftovers.
    """
    if isinstance(data, SortedView):
        return data
    array: NumericArray = as_numeric_array(data, blank=blank)
    values = array.values
    has_blank = array.has_blank

    if not has_blank:
        order = is_sorted(values)
        if order is not Sortedness.NOT:
            return SortedView(values=values, order=order, ownership=Ownership.BORROWED)

    if in_place:
        if has_blank:
            kept = values[~array.mask]
            values[: kept.size] = kept
            target = values[: kept.size]
        else:
            target = values
        ownership = Ownership.BORROWED
    else:
        target = values[~array.mask] if has_blank else values.copy()
        ownership = Ownership.OWNED

    order = is_sorted(target)
    if order is Sortedness.NOT:
        sort_increasing(target)
        order = Sortedness.INCREASING
    return SortedView(values=target, order=order, ownership=ownership)


__all__ = ["no_blank_sorted", "sort_decreasing", "sort_increasing"]
