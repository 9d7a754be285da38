"""Result records produced by the statistics routines and their schemas."""

from __future__ import annotations

import enum
import math
from collections.abc import Iterable
from typing import Any

import marshmallow as ma
import numpy as np
from attrs import define, field

from ..errors import InvalidArgumentError


def _float_array(values: Iterable[float] | np.ndarray) -> np.ndarray:
    """Convert bin centers or counts into a one-dimensional float array."""
    return np.asarray(values, dtype=np.float64).reshape(-1)


def _nan_for_none(data: dict[str, Any], keys: Iterable[str]) -> dict[str, Any]:
    """Restore NaN for float fields that were serialized as null."""
    for key in keys:
        if key in data and data[key] is None:
            data[key] = math.nan
    return data


class HistogramScale(enum.Enum):
    """How histogram counts were scaled after accumulation."""

    COUNT = "count"
    NORMALIZED = "normalized"
    MAXONE = "maxone"


class ClipMethod(enum.Enum):
    """Spread measure used by a clipping run."""

    SIGMA = "sigma"
    MAD = "mad"


class ClipStat(enum.IntFlag):
    """Optional statistics measured on the final clipped range."""

    NONE = 0
    MEAN = enum.auto()
    STD = enum.auto()
    MAD = enum.auto()


class NullableFloat(ma.fields.Float):
    """Float field that dumps NaN as ``null`` so results stay valid JSON."""

    def _serialize(self, value: Any, attr: str | None, obj: Any, **kwargs: Any) -> float | None:
        if value is None or (isinstance(value, float) and math.isnan(value)):
            return None
        return super()._serialize(value, attr, obj, **kwargs)


@define(slots=True, frozen=True, eq=False)
class Bins:
    """Regularly spaced bin centers sharing one ``binwidth``."""

    centers: np.ndarray = field(converter=_float_array)
    binwidth: float = field(converter=float)

    def __attrs_post_init__(self) -> None:
        if self.centers.size == 0:
            raise InvalidArgumentError("Bins need at least one center.")
        if self.binwidth < 0:
            raise InvalidArgumentError("Bin width cannot be negative.")

    @classmethod
    def from_centers(cls, centers: Iterable[float] | np.ndarray) -> Bins:
        """Build bins from at least two strictly increasing, evenly spaced centers."""
        arr = _float_array(centers)
        if arr.size < 2:
            raise InvalidArgumentError("At least two centers are needed to infer the bin width.")
        steps = np.diff(arr)
        if np.any(steps <= 0):
            raise InvalidArgumentError("Bin centers must be strictly increasing.")
        bins = cls(centers=arr, binwidth=float(steps[0]))
        if not bins.is_regular():
            raise InvalidArgumentError("Bin centers are not evenly spaced.")
        return bins

    @property
    def numbins(self) -> int:
        """Number of bins."""
        return int(self.centers.size)

    @property
    def lower(self) -> float:
        """Lower edge of the first bin."""
        return float(self.centers[0] - self.binwidth / 2)

    @property
    def upper(self) -> float:
        """Upper edge of the last bin."""
        return float(self.centers[-1] + self.binwidth / 2)

    def edges(self) -> np.ndarray:
        """Return the ``numbins + 1`` bin boundaries."""
        return self.lower + np.arange(self.numbins + 1, dtype=np.float64) * self.binwidth

    def is_regular(self) -> bool:
        """Return True when consecutive centers are one ``binwidth`` apart."""
        if self.numbins == 1:
            return True
        steps = np.diff(self.centers)
        scale = max(abs(self.binwidth), float(np.max(np.abs(self.centers))), 1.0)
        return bool(np.all(np.abs(steps - self.binwidth) <= 1e-9 * scale))


@define(slots=True, frozen=True, eq=False)
class Histogram:
    """Per-bin counts, or fractions of them, aligned with :class:`Bins`."""

    bins: Bins
    counts: np.ndarray = field(converter=_float_array)
    scale: HistogramScale = HistogramScale.COUNT
    total: float = field(default=0.0, converter=float)

    def __attrs_post_init__(self) -> None:
        if self.counts.size != self.bins.numbins:
            raise InvalidArgumentError("Histogram counts must align with the bins.")


@define(slots=True, frozen=True, eq=False)
class CumulativeFrequency:
    """Running sum of a histogram over the same bins."""

    bins: Bins
    values: np.ndarray = field(converter=_float_array)
    normalized: bool = False

    @property
    def final(self) -> float:
        """Last value of the running sum."""
        return float(self.values[-1])


@define(slots=True, frozen=True, eq=False)
class Histogram2D:
    """Flattened two-dimensional histogram, one row per bin pair."""

    bins_x: Bins
    bins_y: Bins
    bin_dim1: np.ndarray = field(converter=_float_array)
    bin_dim2: np.ndarray = field(converter=_float_array)
    counts: np.ndarray = field(converter=_float_array)

    def as_grid(self) -> np.ndarray:
        """Return counts shaped ``(numbins_x, numbins_y)``."""
        return self.counts.reshape(self.bins_x.numbins, self.bins_y.numbins)


@define(slots=True, frozen=True)
class ClipRound:
    """Center and spread measured at the start of one clipping round."""

    round: int
    number: int
    center: float
    spread: float


@define(slots=True, frozen=True, kw_only=True)
class ClipResult:
    """Outcome of a sigma- or MAD-clipping run.

    ``median`` is the center; ``std`` or ``mad`` (depending on ``method``)
    is the spread. The other spread measure and ``mean`` are NaN unless they
    were requested as extras.
    """

    method: ClipMethod
    number_used: int
    rounds: int
    converged: bool
    median: float = math.nan
    mean: float = math.nan
    std: float = math.nan
    mad: float = math.nan
    history: tuple[ClipRound, ...] = field(factory=tuple, converter=tuple)

    @property
    def center(self) -> float:
        """Median of the retained elements."""
        return self.median

    @property
    def spread(self) -> float:
        """Spread measure that drove the clipping."""
        return self.std if self.method is ClipMethod.SIGMA else self.mad

    @classmethod
    def empty(
        cls, method: ClipMethod, *, rounds: int = 0, history: Iterable[ClipRound] = ()
    ) -> ClipResult:
        """Return the all-NaN result used when no informative answer exists."""
        return cls(
            method=method, number_used=0, rounds=rounds, converged=False, history=tuple(history)
        )


class ClipRoundSchema(ma.Schema):
    """Marshmallow schema for :class:`ClipRound`."""

    round = ma.fields.Int(required=True)
    number = ma.fields.Int(required=True)
    center = NullableFloat(required=True, allow_none=True)
    spread = NullableFloat(required=True, allow_none=True)

    @ma.post_load
    def make_round(self, data: dict[str, Any], **kwargs: object) -> ClipRound:
        """Instantiate :class:`ClipRound` from validated payloads."""
        return ClipRound(**_nan_for_none(data, ("center", "spread")))


class ClipResultSchema(ma.Schema):
    """Marshmallow schema for :class:`ClipResult`."""

    method = ma.fields.Enum(ClipMethod, by_value=True, required=True)
    number_used = ma.fields.Int(required=True)
    rounds = ma.fields.Int(required=True)
    converged = ma.fields.Bool(required=True)
    median = NullableFloat(allow_none=True, load_default=None)
    mean = NullableFloat(allow_none=True, load_default=None)
    std = NullableFloat(allow_none=True, load_default=None)
    mad = NullableFloat(allow_none=True, load_default=None)
    history = ma.fields.List(ma.fields.Nested(ClipRoundSchema), load_default=list)

    @ma.post_load
    def make_result(self, data: dict[str, Any], **kwargs: object) -> ClipResult:
        """Instantiate :class:`ClipResult` from validated payloads."""
        return ClipResult(**_nan_for_none(data, ("median", "mean", "std", "mad")))


@define(slots=True, frozen=True)
class ModeResult:
    """Mirror-based mode estimate and its symmetry grade."""

    mode: float = math.nan
    quantile: float = math.nan
    symmetricity: float = math.nan
    symmetry_value: float = math.nan

    @property
    def accepted(self) -> bool:
        """Return True when the estimate passed the symmetry check."""
        return not math.isnan(self.mode)

    @classmethod
    def empty(cls) -> ModeResult:
        """Return the all-NaN, rejected estimate."""
        return cls()


class ModeResultSchema(ma.Schema):
    """Marshmallow schema for :class:`ModeResult`."""

    mode = NullableFloat(allow_none=True, load_default=None)
    quantile = NullableFloat(allow_none=True, load_default=None)
    symmetricity = NullableFloat(allow_none=True, load_default=None)
    symmetry_value = NullableFloat(allow_none=True, load_default=None)

    @ma.post_load
    def make_mode(self, data: dict[str, Any], **kwargs: object) -> ModeResult:
        """Instantiate :class:`ModeResult` from validated payloads."""
        keys = ("mode", "quantile", "symmetricity", "symmetry_value")
        return ModeResult(**_nan_for_none(data, keys))


@define(slots=True, frozen=True)
class Outlier:
    """First outlying element of a sorted sample.

    ``index`` counts from the start of the ascending, blank-free sample.
    """

    index: int
    value: float


class OutlierSchema(ma.Schema):
    """Marshmallow schema for :class:`Outlier`."""

    index = ma.fields.Int(required=True)
    value = ma.fields.Float(required=True)

    @ma.post_load
    def make_outlier(self, data: dict[str, Any], **kwargs: object) -> Outlier:
        """Instantiate :class:`Outlier` from validated payloads."""
        return Outlier(**data)


class SummarySchema(ma.Schema):
    """Marshmallow schema for the descriptive summary of a sample."""

    number = ma.fields.Int(required=True)
    minimum = NullableFloat(allow_none=True)
    maximum = NullableFloat(allow_none=True)
    total = NullableFloat(allow_none=True)
    mean = NullableFloat(allow_none=True)
    std = NullableFloat(allow_none=True)
    median = NullableFloat(allow_none=True)
    mad = NullableFloat(allow_none=True)


__all__ = [
    "Bins",
    "ClipMethod",
    "ClipResult",
    "ClipResultSchema",
    "ClipRound",
    "ClipRoundSchema",
    "ClipStat",
    "CumulativeFrequency",
    "Histogram",
    "Histogram2D",
    "HistogramScale",
    "ModeResult",
    "ModeResultSchema",
    "NullableFloat",
    "Outlier",
    "OutlierSchema",
    "SummarySchema",
]
