"""Blank-aware numeric buffers and the sorted views derived from them."""

from __future__ import annotations

import enum
from collections.abc import Iterable
from typing import Any, TypeAlias

import numpy as np
import numpy.typing as npt
from attrs import define, field

from ..errors import InvalidArgumentError

NumericInput: TypeAlias = npt.ArrayLike | Iterable[float | int | None]

SUPPORTED_DTYPES: tuple[np.dtype, ...] = tuple(
    np.dtype(code)
    for code in (
        np.uint8,
        np.int8,
        np.uint16,
        np.int16,
        np.uint32,
        np.int32,
        np.uint64,
        np.int64,
        np.float32,
        np.float64,
    )
)


class Sortedness(enum.Enum):
    """Monotonic order of a one-dimensional buffer."""

    NOT = "not"
    INCREASING = "increasing"
    DECREASING = "decreasing"


class Ownership(enum.Enum):
    """Whether a sorted view aliases the caller's buffer or holds a copy."""

    BORROWED = "borrowed"
    OWNED = "owned"


def blank_value(dtype: npt.DTypeLike) -> int | float:
    """Return the conventional blank sentinel for ``dtype``.

    Floating types use NaN, unsigned integers their maximum and signed
    integers their minimum representable value.
    """
    dt = np.dtype(dtype)
    if dt.kind == "f":
        return float("nan")
    info = np.iinfo(dt)
    return int(info.max) if dt.kind == "u" else int(info.min)


def _blank_mask(values: np.ndarray, blank: int | float | None) -> np.ndarray:
    """Return a boolean mask that is True where ``values`` holds a blank."""
    if blank is None:
        blank = blank_value(values.dtype)
    if values.dtype.kind == "f":
        mask = np.isnan(values)
        if not np.isnan(blank):
            mask |= values == blank
        return mask
    if isinstance(blank, float) and np.isnan(blank):
        return np.zeros(values.shape, dtype=bool)
    return values == blank


def _object_to_float(values: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
    """Convert an object array holding numbers and ``None`` into float64."""
    missing = np.fromiter((item is None for item in values), dtype=bool, count=values.size)
    converted = np.array(
        [np.nan if item is None else item for item in values], dtype=np.float64
    )
    return converted, missing


@define(slots=True, frozen=True)
class ArrayMetadata:
    """Blank and order properties of a buffer, measured on request."""

    has_blank: bool
    sortedness: Sortedness


@define(slots=True, frozen=True)
class NumericArray:
    """One-dimensional numeric buffer with an explicit blank mask.

    ``values`` is the caller's buffer whenever it could be used without a
    conversion, so operations run with ``in_place=True`` mutate it.
    ``mask`` is True for every blank element and is computed once, when the
    buffer enters the library.
    """

    values: np.ndarray
    mask: np.ndarray = field(repr=False)

    @property
    def size(self) -> int:
        """Number of elements, blank ones included."""
        return int(self.values.size)

    @property
    def dtype(self) -> np.dtype:
        """Element type of the buffer."""
        return self.values.dtype

    @property
    def has_blank(self) -> bool:
        """Return True when at least one element is blank."""
        return bool(self.mask.any())

    def present(self) -> np.ndarray:
        """Return a copy of the non-blank elements in their original order."""
        if self.has_blank:
            return self.values[~self.mask]
        return self.values.copy()

    def metadata(self) -> ArrayMetadata:
        """Measure the blank and order flags of the buffer."""
        has_blank = self.has_blank
        present = self.values[~self.mask] if has_blank else self.values
        return ArrayMetadata(has_blank=has_blank, sortedness=is_sorted(present))


def as_numeric_array(data: Any, *, blank: int | float | None = None) -> NumericArray:
    """Coerce caller data into a :class:`NumericArray`.

    Accepts NumPy arrays (aliased when their type is supported), masked
    arrays, and Python sequences that may contain ``None`` for missing
    values. ``blank`` overrides the per-type sentinel.
    """
    if isinstance(data, NumericArray):
        return data
    if isinstance(data, SortedView):
        return NumericArray(values=data.values, mask=np.zeros(data.size, dtype=bool))

    extra_mask: np.ndarray | None = None
    if isinstance(data, np.ma.MaskedArray):
        extra_mask = np.ma.getmaskarray(data).reshape(-1)
        arr = np.asarray(data.data)
    else:
        arr = np.asarray(data)

    if arr.dtype == object:
        arr, missing = _object_to_float(arr.reshape(-1))
        extra_mask = missing if extra_mask is None else extra_mask | missing
    if arr.ndim != 1:
        arr = arr.reshape(-1)
    if arr.dtype not in SUPPORTED_DTYPES:
        names = ", ".join(dt.name for dt in SUPPORTED_DTYPES)
        raise InvalidArgumentError(
            f"Unsupported element type {arr.dtype.name!r}. Choose one of: {names}."
        )

    mask = _blank_mask(arr, blank)
    if extra_mask is not None:
        mask = mask | extra_mask
    return NumericArray(values=arr, mask=mask)


def is_sorted(values: np.ndarray) -> Sortedness:
    """Return the monotonic order of ``values``.

    The direction is taken from the first pair of elements; zero- and
    one-element buffers count as increasing.
    """
    if values.size < 2:
        return Sortedness.INCREASING
    if values[1] >= values[0]:
        if np.all(values[1:] >= values[:-1]):
            return Sortedness.INCREASING
        return Sortedness.NOT
    if np.all(values[1:] <= values[:-1]):
        return Sortedness.DECREASING
    return Sortedness.NOT


@define(slots=True, frozen=True)
class SortedView:
    """Blank-free, monotonic view over a numeric buffer.

    A ``BORROWED`` view aliases the caller's memory; an ``OWNED`` view holds
    a private copy.
    """

    values: np.ndarray
    order: Sortedness
    ownership: Ownership

    def __attrs_post_init__(self) -> None:
        """Reject unsorted orders, which would break every consumer."""
        if self.order is Sortedness.NOT:
            raise InvalidArgumentError("A sorted view must be increasing or decreasing.")

    def __len__(self) -> int:
        return int(self.values.size)

    @property
    def size(self) -> int:
        """Number of elements in the view."""
        return int(self.values.size)

    @property
    def increasing(self) -> bool:
        """Return True when the view is in increasing order."""
        return self.order is Sortedness.INCREASING

    def ascending(self) -> np.ndarray:
        """Return the elements as increasing float64 values."""
        as_float = self.values.astype(np.float64)
        return as_float if self.increasing else as_float[::-1]


__all__ = [
    "ArrayMetadata",
    "NumericArray",
    "NumericInput",
    "Ownership",
    "SUPPORTED_DTYPES",
    "SortedView",
    "Sortedness",
    "as_numeric_array",
    "blank_value",
    "is_sorted",
]
