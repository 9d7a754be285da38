"""Iterative sigma- and MAD-clipping over sorted samples."""

from __future__ import annotations

import math
from typing import Any

import numpy as np
from attrs import evolve

from .. import constants
from ..data.models import ClipMethod, ClipResult, ClipRound, ClipStat
from ..errors import InvalidArgumentError
from .utils import mad_of_sorted, mean_std_of, median_of_sorted
from .views import no_blank_sorted


def validate_clip_arguments(multiplier: float, param: float) -> None:
    """Reject clipping parameters that cannot describe a valid run."""
    if not multiplier > 0:
        raise InvalidArgumentError(f"multiplier must be greater than zero, got {multiplier!r}.")
    if not param > 0:
        raise InvalidArgumentError(f"param must be greater than zero, got {param!r}.")
    if param >= 1.0 and math.ceil(param) != param:
        raise InvalidArgumentError(
            f"A param of 1 or more is a number of clips and must be an integer, got {param!r}."
        )


def _spread(window: np.ndarray, center: float, method: ClipMethod) -> float:
    if method is ClipMethod.SIGMA:
        return mean_std_of(window)[1]
    return mad_of_sorted(window, center)


def _with_extras(result: ClipResult, window: np.ndarray, extra: ClipStat) -> ClipResult:
    """Fill requested statistics that the run did not already produce."""
    updates: dict[str, float] = {}
    want_mean = ClipStat.MEAN in extra and math.isnan(result.mean)
    want_std = ClipStat.STD in extra and math.isnan(result.std)
    if want_mean or want_std:
        avg, spread = mean_std_of(window)
        if want_mean:
            updates["mean"] = avg
        if want_std:
            updates["std"] = spread
    if ClipStat.MAD in extra and math.isnan(result.mad):
        updates["mad"] = mad_of_sorted(window)
    return evolve(result, **updates) if updates else result


def _spread_fields(method: ClipMethod, spread: float) -> dict[str, float]:
    return {"std": spread} if method is ClipMethod.SIGMA else {"mad": spread}


def _clip(
    data: Any,
    multiplier: float,
    param: float,
    *,
    method: ClipMethod,
    extra: ClipStat,
    in_place: bool,
    blank: int | float | None,
) -> ClipResult:
    """Shared clipping loop for both spread measures.

    ``param`` below one is a convergence tolerance on the relative change
    of the spread; one or more is the exact number of clips to run.
    """
    validate_clip_arguments(multiplier, param)
    view = no_blank_sorted(data, in_place=in_place, blank=blank)
    by_tolerance = param < 1.0
    max_rounds = constants.CLIP_MAX_CONVERGE if by_tolerance else int(param)

    if view.size == 0:
        return ClipResult.empty(method)

    window = view.ascending()
    if view.size == 1:
        center = float(window[0])
        result = ClipResult(
            method=method,
            number_used=1,
            rounds=1,
            converged=True,
            median=center,
            history=(ClipRound(round=1, number=1, center=center, spread=0.0),),
            **_spread_fields(method, 0.0),
        )
        return _with_extras(result, window, extra)

    history: list[ClipRound] = []
    measured = window
    number = window.size
    rounds = 0
    center = spread = old_spread = math.nan
    stopped = False
    while rounds < max_rounds and number:
        measured = window
        center = median_of_sorted(window)
        spread = _spread(window, center, method)
        history.append(ClipRound(round=rounds + 1, number=number, center=center, spread=spread))

        # A grown spread means the previous round over-clipped, which also stops the loop.
        if spread == 0 or (by_tolerance and rounds > 0):
            if spread == 0 or (old_spread - spread) / spread < param:
                stopped = True
                break

        low = center - multiplier * spread
        high = center + multiplier * spread
        window = window[(window > low) & (window < high)]
        number = window.size
        old_spread = spread
        rounds += 1

    if number == 0 or (by_tolerance and rounds == max_rounds):
        return ClipResult.empty(method, rounds=rounds, history=history)

    result = ClipResult(
        method=method,
        number_used=number,
        rounds=rounds,
        converged=stopped or not by_tolerance,
        median=center,
        history=history,
        **_spread_fields(method, spread),
    )
    return _with_extras(result, measured, extra)


def clip_sigma(
    data: Any,
    multiplier: float,
    param: float,
    *,
    extra: ClipStat = ClipStat.NONE,
    in_place: bool = False,
    blank: int | float | None = None,
) -> ClipResult:
    """Sigma-clip the data around its median using the standard deviation."""
    return _clip(
        data,
        multiplier,
        param,
        method=ClipMethod.SIGMA,
        extra=extra,
        in_place=in_place,
        blank=blank,
    )


def clip_mad(
    data: Any,
    multiplier: float,
    param: float,
    *,
    extra: ClipStat = ClipStat.NONE,
    in_place: bool = False,
    blank: int | float | None = None,
) -> ClipResult:
    """Clip the data around its median using the median absolute deviation."""
    return _clip(
        data,
        multiplier,
        param,
        method=ClipMethod.MAD,
        extra=extra,
        in_place=in_place,
        blank=blank,
    )


__all__ = ["clip_mad", "clip_sigma", "validate_clip_arguments"]
