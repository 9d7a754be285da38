"""Unit tests for quantiles and the quantile function."""

import math

import numpy as np
import pytest

from clipstat.errors import InvalidArgumentError
from clipstat.math import (
    quantile,
    quantile_function,
    quantile_function_index,
    quantile_index,
)


@pytest.mark.parametrize(
    "size, q, expected",
    [
        (5, 0.5, 2),
        (4, 0.5, 1),  # an exact half rounds down
        (11, 0.26, 3),
        (11, 0.24, 2),
        (10, 0.0, 0),
        (10, 1.0, 9),
        (1, 0.7, 0),
    ],
)
def test_quantile_index(size, q, expected):
    assert quantile_index(size, q) == expected


@pytest.mark.parametrize("size, q", [(0, 0.5), (5, -0.1), (5, 1.5)])
def test_quantile_index_rejects_bad_arguments(size, q):
    with pytest.raises(InvalidArgumentError):
        quantile_index(size, q)


def test_quantile():
    """Quantiles are taken on the blank-free sorted data."""
    data = np.array([5.0, 1.0, np.nan, 3.0, 2.0, 4.0])
    assert quantile(data, 0.5) == 3.0
    assert quantile(data, 0.0) == 1.0
    assert quantile(data, 1.0) == 5.0


def test_quantile_on_decreasing_data():
    """Quantile zero is the smallest element whatever the direction."""
    data = np.array([5, 4, 3, 2, 1], dtype=np.int16)
    assert quantile(data, 0.0) == 1.0
    assert quantile(data, 1.0) == 5.0
    assert quantile(data, 0.25) == 2.0


def test_quantile_of_empty_sample_is_nan():
    assert math.isnan(quantile(np.array([np.nan]), 0.5))


@pytest.mark.parametrize(
    "value, expected",
    [
        (2.4, 1),
        (2.6, 2),
        (2.5, 2),
        (1.0, 0),
        (5.0, 4),
        (0.5, None),
        (5.5, None),
    ],
)
def test_quantile_function_index(value, expected):
    assert quantile_function_index(np.array([1.0, 2.0, 3.0, 4.0, 5.0]), value) == expected


def test_quantile_function_index_prefers_last_equal_element():
    assert quantile_function_index(np.array([1, 2, 2, 2, 3]), 2) == 3


def test_quantile_function_index_on_decreasing_data():
    data = np.array([5.0, 4.0, 3.0, 2.0, 1.0])
    index = quantile_function_index(data, 2.4)
    assert data[index] == 2.0


def test_quantile_function():
    data = np.array([1.0, 2.0, 3.0, 4.0, 5.0])
    assert quantile_function(data, 3.0) == pytest.approx(0.5)
    assert quantile_function(data, 2.1) == pytest.approx(0.25)
    assert quantile_function(data, 0.0) == -math.inf
    assert quantile_function(data, 9.0) == math.inf


def test_quantile_function_matches_in_both_directions():
    increasing = np.array([1.0, 2.0, 3.0, 4.0, 5.0])
    decreasing = increasing[::-1].copy()
    for value in (1.0, 2.0, 3.7, 5.0):
        assert quantile_function(decreasing, value) == pytest.approx(
            quantile_function(increasing, value)
        )


def test_quantile_function_degenerate_samples():
    assert math.isnan(quantile_function(np.array([np.nan]), 1.0))
    assert math.isnan(quantile_function(np.array([3.0]), 3.0))
    assert quantile_function(np.array([3.0]), 4.0) == math.inf


def test_quantile_index_never_decreases():
    indices = [quantile_index(101, q) for q in np.linspace(0.0, 1.0, 1001)]

    assert indices[0] == 0
    assert indices[-1] == 100
    assert all(later >= earlier for earlier, later in zip(indices, indices[1:]))


def test_quantile_function_inverts_quantile():
    """Without duplicates the quantile of a quantile returns the request."""
    data = np.arange(101.0) ** 1.5
    rng = np.random.default_rng(7)
    shuffled = rng.permutation(data)
    for q in np.linspace(0.0, 1.0, 21):
        value = quantile(shuffled, q)
        assert quantile_function(shuffled, value) == pytest.approx(q, abs=0.5 / 100)
