"""Numeric buffers and result records."""

from .arrays import (
    ArrayMetadata,
    NumericArray,
    Ownership,
    SortedView,
    Sortedness,
    as_numeric_array,
    blank_value,
    is_sorted,
)
from .models import (
    Bins,
    ClipMethod,
    ClipResult,
    ClipResultSchema,
    ClipRound,
    ClipStat,
    CumulativeFrequency,
    Histogram,
    Histogram2D,
    HistogramScale,
    ModeResult,
    ModeResultSchema,
    Outlier,
    OutlierSchema,
    SummarySchema,
)

__all__ = [
    "ArrayMetadata",
    "Bins",
    "ClipMethod",
    "ClipResult",
    "ClipResultSchema",
    "ClipRound",
    "ClipStat",
    "CumulativeFrequency",
    "Histogram",
    "Histogram2D",
    "HistogramScale",
    "ModeResult",
    "ModeResultSchema",
    "NumericArray",
    "Outlier",
    "OutlierSchema",
    "Ownership",
    "SortedView",
    "Sortedness",
    "SummarySchema",
    "as_numeric_array",
    "blank_value",
    "is_sorted",
]
