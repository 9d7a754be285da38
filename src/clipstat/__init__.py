"""Blank-aware order statistics, clipping, mode estimation and outlier detection."""

from .data.models import ClipMethod, ClipResult, ClipStat, ModeResult, Outlier
from .errors import InvalidArgumentError
from .math.clip import clip_mad, clip_sigma
from .math.histogram import cfp, histogram, histogram2d, regular_bins
from .math.mode import mode
from .math.outliers import outlier_bydistance, outlier_flat_cfp
from .math.quantile import quantile, quantile_function, quantile_function_index, quantile_index
from .math.stats import mad, mean, mean_std, median, median_mad, std
from .math.views import no_blank_sorted

__version__ = "0.1.0"

__all__ = [
    "ClipMethod",
    "ClipResult",
    "ClipStat",
    "InvalidArgumentError",
    "ModeResult",
    "Outlier",
    "cfp",
    "clip_mad",
    "clip_sigma",
    "histogram",
    "histogram2d",
    "mad",
    "mean",
    "mean_std",
    "median",
    "median_mad",
    "mode",
    "no_blank_sorted",
    "outlier_bydistance",
    "outlier_flat_cfp",
    "quantile",
    "quantile_function",
    "quantile_function_index",
    "quantile_index",
    "regular_bins",
    "std",
]
