import math

import numpy as np
import pytest

from dp_noise.noise import SeededRandomSource
from dp_noise.noise.geometric import MAX_INT64, geometric, two_sided_geometric

NUMBER_OF_SAMPLES = 125_000


class _FixedSource:
    """Returns a fixed uniform value."""

    def __init__(self, value: float) -> None:
        self.value = value

    def uniform(self) -> float:
        return self.value


@pytest.mark.parametrize("lam,mean,std_dev", [
    (0.1, 10.50833, 9.99583),
    (0.0001, 10000.50001, 9999.99999),
    (0.0000001, 10000000.5, 9999999.99999),
])
def test_geometric_statistics(lam, mean, std_dev):
    """Sample mean matches 1 / (1 - e^-lam) within a 4.4-sigma band."""
    source = SeededRandomSource(seed=20200101)
    samples = np.fromiter(
        (geometric(lam, source) for _ in range(NUMBER_OF_SAMPLES)),
        dtype=np.float64,
        count=NUMBER_OF_SAMPLES,
    )
    tolerance = 4.41717 * std_dev / math.sqrt(NUMBER_OF_SAMPLES)
    assert abs(samples.mean() - mean) <= tolerance


def test_geometric_support_starts_at_one():
    """A uniform draw of exactly 1 maps to a single trial."""
    assert geometric(0.5, _FixedSource(1.0)) == 1
    assert geometric(1e-7, _FixedSource(1.0)) == 1


def test_geometric_inversion():
    """P(X > k) = e^{-k lam}: u = e^{-2.5 lam} lands on k = 3."""
    lam = 0.3
    assert geometric(lam, _FixedSource(math.exp(-2.5 * lam))) == 3


def test_geometric_truncates_extreme_rate():
    """Vanishing rates saturate instead of overflowing."""
    assert geometric(1e-300, _FixedSource(2.0**-53)) == MAX_INT64


def test_geometric_returns_int():
    """Samples are Python ints."""
    sample = geometric(1e-7, SeededRandomSource(seed=1))
    assert isinstance(sample, int)
    assert sample >= 1


def test_two_sided_geometric_is_symmetric():
    """Discrete Laplace samples center on zero with variance 2e^-lam / (1 - e^-lam)^2."""
    lam = 0.5
    source = SeededRandomSource(seed=7)
    n = 50_000
    samples = np.array([two_sided_geometric(lam, source) for _ in range(n)], dtype=np.float64)
    q = math.exp(-lam)
    variance = 2 * q / (1 - q) ** 2
    assert abs(samples.mean()) <= 4.41717 * math.sqrt(variance / n)
    assert (samples < 0).any()
    assert (samples > 0).any()
    assert (samples == 0).any()
