"""Unit tests for the descriptive statistics."""

import math

import numpy as np
import pytest

from clipstat.errors import InvalidArgumentError
from clipstat.math import (
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


@pytest.fixture
def sample_data():
    """Return a sample dataset with one blank for testing."""
    return np.array([3.0, 1.0, np.nan, 5.0, 2.0, 4.0])


def test_basic_statistics(sample_data):
    """Blanks are ignored by every statistic."""
    assert number(sample_data) == 5
    assert minimum(sample_data) == 1.0
    assert maximum(sample_data) == 5.0
    assert total(sample_data) == pytest.approx(15.0)
    assert mean(sample_data) == pytest.approx(3.0)
    assert std(sample_data) == pytest.approx(np.sqrt(2.0))
    assert mean_std(sample_data) == pytest.approx((3.0, np.sqrt(2.0)))
    assert median(sample_data) == pytest.approx(3.0)
    assert mad(sample_data) == pytest.approx(1.0)


def test_median_of_even_sample():
    assert median([4, 1, 3, 2]) == pytest.approx(2.5)
    assert median_mad([4, 1, 3, 2]) == pytest.approx((2.5, 1.0))


def test_statistics_of_empty_sample():
    empty = np.array([np.nan, np.nan])
    assert number(empty) == 0
    assert math.isnan(minimum(empty))
    assert math.isnan(maximum(empty))
    assert math.isnan(total(empty))
    assert math.isnan(mean(empty))
    assert math.isnan(median(empty))


def test_integer_blanks_and_totals():
    """Integer sums are accumulated in float64 without overflow."""
    data = np.array([200, 255, 100], dtype=np.uint8)
    assert number(data) == 2
    assert total(data) == pytest.approx(300.0)
    assert number(data, blank=200) == 2


def test_unique_keeps_first_occurrence_order():
    result = unique(np.array([3.0, 1.0, np.nan, 3.0, 2.0, 1.0]))
    assert result.tolist() == [3.0, 1.0, 2.0]


def test_has_negative():
    assert has_negative([1, -1, 2]) is True
    assert has_negative([1, None, 2]) is False
    assert has_negative(np.array([1, 2], dtype=np.uint16)) is False
    assert has_negative(np.array([-5.0, 1.0]), blank=-5.0) is False


def test_concentration():
    """Uniform data spread evenly between their second extremes."""
    data = np.linspace(0.0, 1.0, 101)
    assert concentration(data, 0.5) == pytest.approx(0.98)


def test_concentration_degenerate_cases():
    assert math.isnan(concentration([3.0], 0.5))
    assert math.isnan(concentration([1.0, 1.0, 1.0, 1.0], 0.5))
    assert concentration([0.0, 1.0, 1.0, 1.0, 2.0, 3.0], 0.2) == math.inf


@pytest.mark.parametrize("q_width", [0.0, -0.1, 1.5])
def test_concentration_rejects_bad_width(q_width):
    with pytest.raises(InvalidArgumentError):
        concentration([1.0, 2.0, 3.0], q_width)


def test_compute_statistics(sample_data):
    """Test the compute_statistics function."""
    stats = compute_statistics(sample_data)

    assert stats.number == 5
    assert stats.minimum == 1.0
    assert stats.maximum == 5.0
    assert stats.total == pytest.approx(15.0)
    assert stats.mean == pytest.approx(3.0)
    assert stats.std == pytest.approx(np.sqrt(2.0))
    assert stats.median == pytest.approx(3.0)
    assert stats.mad == pytest.approx(1.0)


def test_compute_statistics_with_sentinel():
    stats = compute_statistics([1.0, -99.0, 3.0, None], blank=-99.0)
    assert stats.number == 2
    assert stats.median == pytest.approx(2.0)


def test_compute_statistics_with_explicit_integer_blank():
    """Only the requested blank is dropped; the type minimum stays a value."""
    floor = np.iinfo(np.int32).min
    data = np.array([floor, 1, 2, -1], dtype=np.int32)
    summary = compute_statistics(data, blank=-1)

    assert summary.number == 3
    assert summary.minimum == float(floor)
    assert summary.maximum == 2.0
    assert summary.median == 1.0
    assert summary.mad == 1.0
