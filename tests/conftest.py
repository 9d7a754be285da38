"""Global test configuration and fixtures."""

import types

import numpy as np
import pytest


@pytest.fixture
def rng():
    """Seeded generator so sampled fixtures stay reproducible."""
    return np.random.default_rng(42)


@pytest.fixture
def triangular_sample():
    """Evenly spaced quantiles of a triangular density on [-1, 1] peaking at zero."""
    u = (np.arange(10_000) + 0.5) / 10_000
    return np.where(u <= 0.5, np.sqrt(2 * u) - 1, 1 - np.sqrt(2 * (1 - u)))


@pytest.fixture
def skewed_sample():
    """Pile of zeros followed by a long flat tail, which has no usable mirror."""
    return np.concatenate([np.zeros(6000), np.linspace(1, 100, 4000)])


@pytest.fixture
def column_text():
    """Single-column text input for the CLI."""
    return "\n".join(str(v) for v in [4.0, 1.0, 3.0, 5.0, 2.0, 100.0]) + "\n"


@pytest.fixture(autouse=True)
def fast_plots(monkeypatch):
    # Avoid matplotlib and return a simple object with .path/.statistics
    class R:
        def __init__(self, p):
            self.path = p
            self.statistics = types.SimpleNamespace(number=0, median=float("nan"))

    def _fake_hist(values, output_dir, filename, config=None, blank=None):
        p = output_dir / filename
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_bytes(b"")
        return R(p)

    def _fake_mirror(values, mirror_value, output_dir, filename, config=None, blank=None):
        p = output_dir / filename
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_bytes(b"")
        return R(p)

    import cli.main as m

    monkeypatch.setattr(m, "generate_histogram_plot", _fake_hist)
    monkeypatch.setattr(m, "generate_mirror_plot", _fake_mirror)
