"""Statistical routines over blank-aware samples."""

from .clip import clip_mad, clip_sigma  # noqa: F401
from .histogram import cfp, histogram, histogram2d, regular_bins  # noqa: F401
from .mode import MirrorPlots, make_mirror, mode, mode_mirror_plots  # noqa: F401
from .outliers import outlier_bydistance, outlier_flat_cfp  # noqa: F401
from .quantile import (  # noqa: F401
    quantile,
    quantile_function,
    quantile_function_index,
    quantile_index,
)
from .stats import (  # noqa: F401
    StatSummary,
    compute_statistics,
    concentration,
    has_negative,
    mad,
    maximum,
    mean,
    mean_std,
    median,
    median_mad,
    minimum,
    number,
    std,
    total,
    unique,
)
from .views import no_blank_sorted, sort_decreasing, sort_increasing  # noqa: F401

__all__ = [
    "MirrorPlots",
    "StatSummary",
    "cfp",
    "clip_mad",
    "clip_sigma",
    "compute_statistics",
    "concentration",
    "has_negative",
    "histogram",
    "histogram2d",
    "mad",
    "make_mirror",
    "maximum",
    "mean",
    "mean_std",
    "median",
    "median_mad",
    "minimum",
    "mode",
    "mode_mirror_plots",
    "no_blank_sorted",
    "number",
    "outlier_bydistance",
    "outlier_flat_cfp",
    "quantile",
    "quantile_function",
    "quantile_function_index",
    "quantile_index",
    "regular_bins",
    "sort_decreasing",
    "sort_increasing",
    "std",
    "total",
    "unique",
]
