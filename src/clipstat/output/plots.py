"""Plotting tools for sample distributions and their mirrors."""

from dataclasses import dataclass
from pathlib import Path
from typing import Any

import matplotlib.pyplot as plt
import numpy as np

from ..data.arrays import as_numeric_array
from ..data.models import ModeResult
from ..errors import InvalidArgumentError
from ..math import (
    StatSummary,
    cfp,
    compute_statistics,
    histogram,
    mode,
    mode_mirror_plots,
    quantile,
    regular_bins,
)
from .utils import ensure_directory, format_statistic


def _axis_limits(
    values: np.ndarray, *, clip: float = 0.995, padding: float = 0.05
) -> tuple[float, float]:
    """Return axis limits that clip extreme tails while preserving most observations."""
    if values.size == 0:
        return (-1.0, 1.0)
    clip = min(max(clip, 0.5), 0.9999)
    tail = (1.0 - clip) / 2.0
    lower = quantile(values, tail)
    upper = quantile(values, 1.0 - tail)
    span = upper - lower
    if span <= 0:
        span = max(abs(lower), abs(upper), 1.0)
        return float(lower - span * 0.5), float(upper + span * 0.5)
    margin = span * padding
    return float(lower - margin), float(upper + margin)


@dataclass(frozen=True)
class HistogramPlotConfig:
    """Configuration values for histogram and CFP plots."""

    title: str = "Distribution"
    xlabel: str = "Value"
    ylabel: str = "Count"
    numbins: int = 50
    mirrordist: float = 1.5
    color: str = "#126782"
    cfp_color: str = "#d08300"
    alpha: float = 0.6


@dataclass(frozen=True)
class MirrorPlotConfig:
    """Configuration values for comparing a distribution with its mirror."""

    title: str = "Mirror distribution"
    xlabel: str = "Value"
    numbins: int = 100
    data_color: str = "#126782"
    mirror_color: str = "#d08300"
    line_width: float = 1.5


@dataclass(frozen=True)
class PlotReport:
    """Metadata describing a saved plot and its computed statistics."""

    path: Path
    statistics: StatSummary
    mode: ModeResult | None = None


def _save(fig: Any, output_dir: str | Path, filename: str) -> Path:
    output_path = ensure_directory(output_dir) / filename
    fig.tight_layout()
    fig.savefig(output_path, dpi=150)
    plt.close(fig)
    return output_path


def generate_histogram_plot(
    data: Any,
    *,
    output_dir: str | Path = "out",
    filename: str = "histogram.png",
    config: HistogramPlotConfig | None = None,
    blank: int | float | None = None,
) -> PlotReport:
    """Render a histogram with its normalized CFP and median/mode markers."""
    config = config or HistogramPlotConfig()
    values = as_numeric_array(data, blank=blank).present().astype(np.float64)
    bins = regular_bins(values, config.numbins)
    if bins is None:
        raise InvalidArgumentError("Cannot plot a sample without non-blank elements.")
    stats = compute_statistics(values)
    estimate = mode(values, config.mirrordist)
    hist = histogram(values, bins)
    cumulative = cfp(values, bins, normalize=True, hist=hist)

    fig, ax = plt.subplots(figsize=(11, 6))
    ax.bar(
        bins.centers,
        hist.counts,
        width=bins.binwidth or 1.0,
        color=config.color,
        alpha=config.alpha,
        edgecolor="white",
    )
    ax.set_title(config.title)
    ax.set_xlabel(config.xlabel)
    ax.set_ylabel(config.ylabel)
    ax.set_xlim(*_axis_limits(values))

    cfp_ax = ax.twinx()
    cfp_ax.plot(bins.centers, cumulative.values, color=config.cfp_color, linewidth=1.5)
    cfp_ax.set_ylabel("Cumulative fraction")
    cfp_ax.set_ylim(0.0, 1.05)

    ax.axvline(
        stats.median,
        color="#333333",
        linestyle="--",
        linewidth=1.5,
        label=f"Median ≈ {format_statistic(stats.median)}",
    )
    if estimate.accepted:
        ax.axvline(
            estimate.mode,
            color=config.cfp_color,
            linestyle=":",
            linewidth=1.5,
            label=f"Mode ≈ {format_statistic(estimate.mode)}",
        )

    ax.legend(loc="upper left")
    ax.grid(True, linestyle="--", linewidth=0.5, alpha=0.6)
    output_path = _save(fig, output_dir, filename)
    return PlotReport(path=output_path, statistics=stats, mode=estimate)


def generate_mirror_plot(
    data: Any,
    mirror_value: float,
    *,
    output_dir: str | Path = "out",
    filename: str = "mirror.png",
    config: MirrorPlotConfig | None = None,
    blank: int | float | None = None,
) -> PlotReport:
    """Overlay the max-one histograms and CFPs of the data and its mirror."""
    config = config or MirrorPlotConfig()
    values = as_numeric_array(data, blank=blank).present().astype(np.float64)
    mirrored = mode_mirror_plots(values, mirror_value, config.numbins)
    if mirrored is None:
        raise InvalidArgumentError(
            f"Mirror value {mirror_value!r} must lie inside the data, above its minimum."
        )
    stats = compute_statistics(values)
    bins = mirrored.bins
    data_hist = histogram(values, bins, maxone=True)
    data_cfp = cfp(values, bins, normalize=True)

    fig, (hist_ax, cfp_ax) = plt.subplots(2, 1, figsize=(11, 8), sharex=True)
    hist_ax.step(
        bins.centers,
        data_hist.counts,
        where="mid",
        color=config.data_color,
        linewidth=config.line_width,
        label="Data",
    )
    hist_ax.step(
        bins.centers,
        mirrored.histogram.counts,
        where="mid",
        color=config.mirror_color,
        linewidth=config.line_width,
        label="Mirror",
    )
    hist_ax.set_ylabel("Histogram (max one)")
    hist_ax.set_title(config.title)
    hist_ax.legend(loc="upper right")

    cfp_ax.plot(bins.centers, data_cfp.values, color=config.data_color, linewidth=config.line_width)
    cfp_ax.plot(
        bins.centers,
        mirrored.cfp.values,
        color=config.mirror_color,
        linewidth=config.line_width,
    )
    cfp_ax.set_ylabel("Cumulative fraction")
    cfp_ax.set_xlabel(config.xlabel)
    for axis in (hist_ax, cfp_ax):
        axis.axvline(mirrored.mirror_value, color="#333333", linestyle="--", linewidth=1.0)
        axis.grid(True, linestyle="--", linewidth=0.5, alpha=0.6)

    output_path = _save(fig, output_dir, filename)
    return PlotReport(path=output_path, statistics=stats)


__all__ = [
    "HistogramPlotConfig",
    "MirrorPlotConfig",
    "PlotReport",
    "generate_histogram_plot",
    "generate_mirror_plot",
]
