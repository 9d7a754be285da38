"""Unit tests for the mirror-based mode estimate."""

import importlib
import math

import numpy as np
import pytest

from clipstat.errors import InvalidArgumentError
from clipstat.math import make_mirror, mode, mode_mirror_plots
from clipstat.math.mode import MirrorScore, mirror_score, symmetricity


def test_mode_of_triangular_sample(triangular_sample):
    result = mode(triangular_sample, 1.5)

    assert result.accepted
    assert result.mode == pytest.approx(0.0, abs=0.1)
    assert 0.4 < result.quantile < 0.6
    assert result.symmetricity > 0.2
    assert result.symmetry_value > result.mode


def test_mode_of_normal_sample(rng):
    data = rng.normal(10.0, 2.0, 10_000)
    result = mode(data, 1.5)

    assert result.accepted
    assert result.mode == pytest.approx(10.0, abs=1.0)


def test_mode_ignores_order_and_blanks(triangular_sample):
    shuffled = triangular_sample[::-1].copy()
    shuffled[::7] = np.nan
    result = mode(shuffled, 1.5)
    assert result.mode == pytest.approx(0.0, abs=0.1)


def test_mode_rejects_asymmetric_sample(skewed_sample):
    result = mode(skewed_sample, 1.5)

    assert not result.accepted
    assert math.isnan(result.mode)
    assert math.isnan(result.quantile)


def test_mode_of_empty_sample():
    result = mode(np.array([np.nan]), 1.5)

    assert not result.accepted
    assert math.isnan(result.mode)
    assert math.isnan(result.quantile)
    assert math.isnan(result.symmetricity)
    assert math.isnan(result.symmetry_value)


@pytest.mark.parametrize("mirrordist", [0.0, -1.0])
def test_mode_rejects_bad_mirrordist(mirrordist):
    with pytest.raises(InvalidArgumentError):
        mode(np.arange(10.0), mirrordist)


def test_mirror_score_of_symmetric_mirror():
    values = np.arange(-5.0, 6.0)
    score = mirror_score(values, 5, 1.5, numcheck=5, interval=1)
    assert score == MirrorScore(distance=0)


def test_mirror_score_above_a_sparse_tail():
    """Mirrored values that outrun the real ones mark the mirror as too high."""
    values = np.concatenate([np.arange(0.0, 51.0), 50.0 + 10.0 * np.arange(1, 50)])
    score = mirror_score(values, 50, 1.5, numcheck=50, interval=1)
    assert score.is_above


def test_mirror_score_ordering():
    near = MirrorScore(distance=2)
    far = MirrorScore(distance=7)
    above = MirrorScore.above()

    assert near.better_than(far)
    assert not far.better_than(near)
    assert near.better_than(above)
    assert not above.better_than(near)
    assert not near.better_than(near)


def test_symmetricity_of_symmetric_sample(triangular_sample):
    center = triangular_sample.size // 2
    ratio, bound_value = symmetricity(triangular_sample, center, 1.5)
    assert ratio > 0.2
    assert bound_value > triangular_sample[center]


def test_symmetricity_without_low_tail():
    values = np.concatenate([np.zeros(10), np.arange(1.0, 11.0)])
    assert symmetricity(values, 5, 1.5)[0] == 0.0


def test_make_mirror():
    mirror, center = make_mirror(np.array([4.0, 1.0, 2.0, 3.0]), 1)
    assert center == 2.0
    assert mirror.tolist() == [1.0, 2.0, 3.0]

    with pytest.raises(InvalidArgumentError):
        make_mirror(np.array([1.0, 2.0]), 5)


def test_mode_mirror_plots(triangular_sample):
    plots = mode_mirror_plots(triangular_sample, 0.0, 50)

    assert plots is not None
    assert plots.mirror_value == pytest.approx(0.0, abs=1e-3)
    assert plots.mirror.size % 2 == 1
    assert plots.histogram.counts.max() == pytest.approx(1.0)
    assert plots.cfp.final == pytest.approx(1.0)
    assert np.any(np.isclose(plots.bins.edges(), plots.mirror_value))


@pytest.mark.parametrize("value", [-1.0, 5.0, np.nan])
def test_mode_mirror_plots_without_mirror(value):
    assert mode_mirror_plots(np.linspace(-1.0, 1.0, 11), value, 10) is None


def test_golden_section_redirects_on_above_mirror(monkeypatch, triangular_sample):
    """Candidates above the peak are scored as "above" and pull the search down."""
    module = importlib.import_module("clipstat.math.mode")
    original = module.mirror_score
    scores = []

    def recording(*args, **kwargs):
        score = original(*args, **kwargs)
        scores.append(score)
        return score

    monkeypatch.setattr(module, "mirror_score", recording)
    result = module.mode(triangular_sample, 1.5)

    assert any(score.is_above for score in scores)
    assert result.mode == pytest.approx(0.0, abs=0.1)


def test_mode_of_integer_sample(triangular_sample):
    scaled = np.round(triangular_sample * 1_000_000).astype(np.int32)
    result = mode(scaled, 1.5)

    assert result.accepted
    assert result.mode == pytest.approx(0.0, abs=100_000)
    assert float(result.mode).is_integer()
