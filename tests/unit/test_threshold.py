"""Unit tests for partition-selection thresholds and their inverse."""

import math

import pytest

from dp_noise.noise import InvalidParameterError, Laplace

LN3 = math.log(3)


@pytest.fixture
def laplace() -> Laplace:
    """Provides a Laplace mechanism with the default source."""
    return Laplace()


# Pairs with l0 = 1 reflect delta around 0.5 and the threshold around linf,
# exercising both tails of the distribution. With l0 != 1 no such symmetry holds.
@pytest.mark.parametrize("l0,linf,epsilon,delta,expected", [
    (1, 1.0, LN3, 1e-10, 21.33),
    (1, 1.0, LN3, 1 - 1e-10, -19.33),
    (1, 1.0, 2 * LN3, 1e-10, 11.16),
    (1, 1.0, 2 * LN3, 1 - 1e-10, -9.16),
    (1, 10.0, LN3, 1e-10, 213.28),
    (1, 10.0, LN3, 1 - 1e-10, -193.28),
    (10, 10.0, 10 * LN3, 1e-9, 213.28),
    (10, 10.0, 10 * LN3, 1 - 1e-9, -2.55),
    (1, 1.0, LN3, 1e-200, 419.55),
])
def test_threshold(laplace, l0, linf, epsilon, delta, expected):
    """Thresholds match precomputed values to two decimals."""
    got = laplace.threshold(l0, linf, epsilon, 0.0, delta)
    assert abs(got - expected) <= 0.01


@pytest.mark.parametrize("l0,linf,epsilon,k,expected", [
    (1, 1.0, LN3, 20.0, 4.3e-10),
    (1, 1.0, LN3, -18.0, 1 - 4.3e-10),
    (1, 10.0, LN3, 200.0, 4.3e-10),
    (1, 10.0, LN3, -180.0, 1 - 4.3e-10),
    (1, 1.0, 2 * LN3, 10.0, 1.29e-9),
    (1, 1.0, 2 * LN3, -8.0, 1 - 1.29e-9),
    (10, 1.0, 10 * LN3, 20.0, 4.3e-9),
    (10, 1.0, 10 * LN3, -18.0, 1.0),
    (1, 1.0, LN3, 419.55, 1e-200),
])
def test_delta_for_threshold(laplace, l0, linf, epsilon, k, expected):
    """Deltas match precomputed values to within 1%."""
    got = laplace.delta_for_threshold(l0, linf, epsilon, 0.0, k)
    assert got == pytest.approx(expected, rel=1e-2)


@pytest.mark.parametrize("l0,linf,epsilon", [
    (1, 1.0, 1.0),
    (3, 2.5, 0.5),
    (10, 1.0, 10 * LN3),
])
@pytest.mark.parametrize("delta", [1e-12, 1e-5, 0.3, 0.5, 0.9])
def test_delta_for_threshold_inverts_threshold(laplace, l0, linf, epsilon, delta):
    """delta_for_threshold(threshold(d)) recovers d."""
    k = laplace.threshold(l0, linf, epsilon, 0.0, delta)
    assert laplace.delta_for_threshold(l0, linf, epsilon, 0.0, k) == pytest.approx(delta, rel=1e-2)


def test_threshold_at_linf_is_median(laplace):
    """k = linf leaves each partition exactly half its mass above the threshold."""
    assert laplace.delta_for_threshold(1, 4.0, 1.0, 0.0, 4.0) == pytest.approx(0.5)


def test_delta_for_threshold_infinite_k(laplace):
    """Infinite thresholds map to the extreme deltas."""
    assert laplace.delta_for_threshold(2, 1.0, 1.0, 0.0, math.inf) == 0.0
    assert laplace.delta_for_threshold(2, 1.0, 1.0, 0.0, -math.inf) == 1.0


def test_threshold_decreases_with_delta(laplace):
    """A larger allowed delta permits a lower threshold."""
    strict = laplace.threshold(2, 1.0, 1.0, 0.0, 1e-9)
    loose = laplace.threshold(2, 1.0, 1.0, 0.0, 1e-3)
    assert strict > loose


@pytest.mark.parametrize("partition_delta", [0.0, 1.0, -0.1, math.nan])
def test_threshold_rejects_invalid_partition_delta(laplace, partition_delta):
    """The partition-selection delta must lie strictly between 0 and 1."""
    with pytest.raises(InvalidParameterError) as excinfo:
        laplace.threshold(1, 1.0, 1.0, 0.0, partition_delta)
    assert excinfo.value.field == "partition_selection_delta"


def test_threshold_rejects_invalid_noise_parameters(laplace):
    """Noise parameters are validated before the threshold is derived."""
    with pytest.raises(InvalidParameterError):
        laplace.threshold(0, 1.0, 1.0, 0.0, 1e-5)
    with pytest.raises(InvalidParameterError):
        laplace.delta_for_threshold(1, 1.0, -1.0, 0.0, 10.0)


def test_delta_for_threshold_rejects_nan(laplace):
    """NaN thresholds are rejected."""
    with pytest.raises(InvalidParameterError) as excinfo:
        laplace.delta_for_threshold(1, 1.0, 1.0, 0.0, math.nan)
    assert excinfo.value.field == "k"
