"""Command line entry point for the clipstat application."""

from __future__ import annotations

import json
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import IO, Any

import click
import numpy as np
import structlog

from clipstat.data.models import (
    ClipResultSchema,
    ClipStat,
    ModeResultSchema,
    OutlierSchema,
    SummarySchema,
)
from clipstat.errors import InvalidArgumentError
from clipstat.logging import LOG_FORMATS, configure_logging
from clipstat.math import (
    cfp,
    clip_mad,
    clip_sigma,
    compute_statistics,
    histogram,
    mode,
    outlier_bydistance,
    outlier_flat_cfp,
    regular_bins,
)
from clipstat.output import (
    HistogramPlotConfig,
    generate_histogram_plot,
    generate_mirror_plot,
)

BLANK_HELP = "Value marking missing data, in addition to NaN. May also be set via CLIPSTAT_BLANK."

LOG_LEVEL_CHOICES = ("critical", "error", "warning", "info", "debug")
EXTRA_CHOICES: dict[str, ClipStat] = {
    "mean": ClipStat.MEAN,
    "std": ClipStat.STD,
    "mad": ClipStat.MAD,
}

logger = structlog.get_logger(__name__)


@contextmanager
def _invalid_arguments_as_bad_parameter() -> Iterator[None]:
    """Report contract violations from the library as click usage errors."""
    try:
        yield
    except InvalidArgumentError as exc:
        raise click.BadParameter(str(exc)) from exc


def _load_column(source: IO[str], column: int) -> np.ndarray:
    """Read one numeric column from ``source``; 'nan' entries become blanks."""
    try:
        values = np.loadtxt(source, usecols=column, ndmin=1, dtype=np.float64)
    except (ValueError, IndexError) as exc:
        message = f"Could not read column {column}: {exc}"
        raise click.BadParameter(message, param_hint="SOURCE") from exc
    logger.debug(
        "cli.loaded",
        source=getattr(source, "name", "-"),
        column=column,
        size=int(values.size),
    )
    return values


def _emit(payload: dict[str, Any], output: Path | None) -> None:
    """Print the JSON payload or write it to ``output``."""
    document = json.dumps(payload, indent=2)
    if output:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(document)
        click.echo(f"Wrote result to {output}")
    else:
        click.echo(document)


def _blank(ctx: click.Context) -> float | None:
    ctx.ensure_object(dict)
    return ctx.obj.get("blank")


source_argument = click.argument("source", type=click.File("r"), default="-")
column_option = click.option(
    "--column",
    type=click.IntRange(min=0),
    default=0,
    show_default=True,
    help="Zero-based column to read from SOURCE.",
)
output_option = click.option(
    "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Optional path to write the JSON result.",
)


@click.group()
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVEL_CHOICES, case_sensitive=False),
    envvar="CLIPSTAT_LOG_LEVEL",
    default="warning",
    show_default=True,
    help="Verbosity for structured logs.",
)
@click.option(
    "--log-format",
    type=click.Choice(LOG_FORMATS, case_sensitive=False),
    envvar="CLIPSTAT_LOG_FORMAT",
    default="console",
    show_default=True,
    help="Render logs as console-friendly text or JSON.",
)
@click.option("--blank", type=float, envvar="CLIPSTAT_BLANK", default=None, help=BLANK_HELP)
@click.pass_context
def cli(
    ctx: click.Context,
    log_level: str,
    log_format: str,
    blank: float | None,
) -> None:
    """Robust order statistics, clipping, mode and outlier detection for numeric columns."""
    configure_logging(level=log_level, json_output=log_format.lower() == "json")
    ctx.ensure_object(dict)
    ctx.obj.update({"blank": blank})
    logger.bind(command_group="clipstat").debug(
        "cli.initialized",
        blank=blank,
        log_level=log_level.lower(),
        log_format=log_format.lower(),
    )


@cli.command("summary")
@source_argument
@column_option
@output_option
@click.pass_context
def summary(ctx: click.Context, source: IO[str], column: int, output: Path | None) -> None:
    """Print count, extremes, mean, std, median and MAD of the column."""
    values = _load_column(source, column)
    stats = compute_statistics(values, blank=_blank(ctx))
    _emit(SummarySchema().dump(stats), output)


@cli.command("clip")
@source_argument
@column_option
@click.option(
    "--method",
    type=click.Choice(["sigma", "mad"], case_sensitive=False),
    default="sigma",
    show_default=True,
    help="Spread measure used to reject elements.",
)
@click.option(
    "--multiplier",
    type=float,
    default=3.0,
    show_default=True,
    help="Clip at median +/- multiplier * spread.",
)
@click.option(
    "--param",
    type=float,
    default=0.2,
    show_default=True,
    help="Below 1: convergence tolerance. 1 or more: exact number of clips.",
)
@click.option(
    "--extra",
    "extras",
    type=click.Choice(sorted(EXTRA_CHOICES), case_sensitive=False),
    multiple=True,
    help="Extra statistics to measure on the final range.",
)
@output_option
@click.pass_context
def clip(
    ctx: click.Context,
    *,
    source: IO[str],
    column: int,
    method: str,
    multiplier: float,
    param: float,
    extras: tuple[str, ...],
    output: Path | None,
) -> None:
    """Sigma- or MAD-clip the column and report the surviving statistics."""
    values = _load_column(source, column)
    extra = ClipStat.NONE
    for name in extras:
        extra |= EXTRA_CHOICES[name.lower()]
    clipper = clip_sigma if method.lower() == "sigma" else clip_mad
    with _invalid_arguments_as_bad_parameter():
        result = clipper(values, multiplier, param, extra=extra, blank=_blank(ctx))
    logger.info(
        "cli.clip",
        method=method.lower(),
        rounds=result.rounds,
        number_used=result.number_used,
    )
    _emit(ClipResultSchema().dump(result), output)


@cli.command("mode")
@source_argument
@column_option
@click.option(
    "--mirrordist",
    type=float,
    default=1.5,
    show_default=True,
    help="Noise budget between a mirror and the data, in multiples of sqrt(index).",
)
@click.option(
    "--mirror-plot",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Optional image path comparing the data with its mirror about the mode.",
)
@output_option
@click.pass_context
def mode_command(
    ctx: click.Context,
    *,
    source: IO[str],
    column: int,
    mirrordist: float,
    mirror_plot: Path | None,
    output: Path | None,
) -> None:
    """Estimate the mode of the column with the mirror method."""
    values = _load_column(source, column)
    with _invalid_arguments_as_bad_parameter():
        result = mode(values, mirrordist, blank=_blank(ctx))
    logger.info("cli.mode", accepted=result.accepted, quantile=result.quantile)
    if mirror_plot:
        if result.accepted:
            report = generate_mirror_plot(
                values,
                result.mode,
                output_dir=mirror_plot.parent,
                filename=mirror_plot.name,
                blank=_blank(ctx),
            )
            logger.info("cli.mirror_plot", path=str(report.path))
        else:
            logger.warning("cli.mirror_plot_skipped", reason="mode rejected")
    _emit(ModeResultSchema().dump(result), output)


@cli.command("histogram")
@source_argument
@column_option
@click.option("--numbins", type=click.IntRange(min=1), default=10, show_default=True)
@click.option("--min", "range_min", type=float, default=None, help="Lower edge of the first bin.")
@click.option("--max", "range_max", type=float, default=None, help="Upper edge of the last bin.")
@click.option("--normalize", is_flag=True, default=False, help="Divide counts by their total.")
@click.option("--maxone", is_flag=True, default=False, help="Divide counts by the largest bin.")
@click.option("--cfp", "with_cfp", is_flag=True, default=False, help="Also report the CFP.")
@click.option(
    "--plot",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Optional image path for a histogram and CFP plot.",
)
@output_option
@click.pass_context
def histogram_command(
    ctx: click.Context,
    *,
    source: IO[str],
    column: int,
    numbins: int,
    range_min: float | None,
    range_max: float | None,
    normalize: bool,
    maxone: bool,
    with_cfp: bool,
    plot: Path | None,
    output: Path | None,
) -> None:
    """Bin the column into a regular histogram."""
    values = _load_column(source, column)
    blank = _blank(ctx)
    with _invalid_arguments_as_bad_parameter():
        bins = regular_bins(values, numbins, range_min=range_min, range_max=range_max, blank=blank)
        if bins is None:
            raise click.ClickException("The column has no usable values.")
        hist = histogram(values, bins, normalize=normalize, maxone=maxone, blank=blank)
        payload: dict[str, Any] = {
            "binwidth": bins.binwidth,
            "bin_center": bins.centers.tolist(),
            "scale": hist.scale.value,
            "count": hist.counts.tolist(),
        }
        if with_cfp:
            cumulative = cfp(values, bins, normalize=normalize, hist=hist, blank=blank)
            payload["cfp"] = cumulative.values.tolist()
        if plot:
            report = generate_histogram_plot(
                values,
                output_dir=plot.parent,
                filename=plot.name,
                config=HistogramPlotConfig(numbins=numbins),
                blank=blank,
            )
            logger.info("cli.histogram_plot", path=str(report.path))
    _emit(payload, output)


@cli.command("outlier")
@source_argument
@column_option
@click.option(
    "--method",
    type=click.Choice(["bydistance", "flat-cfp"], case_sensitive=False),
    default="bydistance",
    show_default=True,
    help="Detector to run.",
)
@click.option(
    "--window-size",
    type=int,
    default=5,
    show_default=True,
    help="Gaps per baseline window (bydistance).",
)
@click.option(
    "--sigma",
    type=float,
    default=5.0,
    show_default=True,
    help="Gap threshold in baseline standard deviations (bydistance).",
)
@click.option(
    "--negative",
    is_flag=True,
    default=False,
    help="Scan from the largest value downward (bydistance).",
)
@click.option(
    "--numprev",
    type=int,
    default=50,
    show_default=True,
    help="Differences in the rolling baseline (flat-cfp).",
)
@click.option("--thresh", type=float, default=10.0, show_default=True, help="Deviation threshold.")
@click.option(
    "--numcontig", type=int, default=3, show_default=True, help="Consecutive flags needed."
)
@click.option("--clip-multiplier", type=float, default=3.0, show_default=True)
@click.option("--clip-param", type=float, default=0.2, show_default=True)
@output_option
@click.pass_context
def outlier(
    ctx: click.Context,
    *,
    source: IO[str],
    column: int,
    method: str,
    window_size: int,
    sigma: float,
    negative: bool,
    numprev: int,
    thresh: float,
    numcontig: int,
    clip_multiplier: float,
    clip_param: float,
    output: Path | None,
) -> None:
    """Find the first outlier of the sorted column."""
    values = _load_column(source, column)
    blank = _blank(ctx)
    with _invalid_arguments_as_bad_parameter():
        if method.lower() == "bydistance":
            found = outlier_bydistance(
                values,
                window_size,
                sigma,
                clip_multiplier,
                clip_param,
                positive=not negative,
                blank=blank,
            )
        else:
            found = outlier_flat_cfp(
                values,
                numprev,
                clip_multiplier,
                clip_param,
                thresh,
                numcontig,
                blank=blank,
            )
    logger.info("cli.outlier", method=method.lower(), found=found is not None)
    payload = {"method": method.lower(), "outlier": OutlierSchema().dump(found) if found else None}
    _emit(payload, output)


if __name__ == "__main__":
    cli()
