"""Visualization utilities for sample distributions."""

from .plots import (
    HistogramPlotConfig,
    MirrorPlotConfig,
    PlotReport,
    generate_histogram_plot,
    generate_mirror_plot,
)

__all__ = [
    "HistogramPlotConfig",
    "MirrorPlotConfig",
    "PlotReport",
    "generate_histogram_plot",
    "generate_mirror_plot",
]
