"""Monte-Carlo validation of confidence-interval coverage."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np

from dp_noise.noise import ConfidenceIntervalFloat64, ConfidenceIntervalInt64

if TYPE_CHECKING:
    from numpy.typing import NDArray

    from dp_noise.config import Config
    from dp_noise.noise import NoiseMechanism, NoiseParameters

logger = logging.getLogger(__name__)

# 99.9995% quantile of the standard normal: a correct mechanism fails with probability 1e-5.
TWO_SIDED_Z = 4.4171734


@dataclass(frozen=True)
class CoverageResult:
    """Nominal confidence level paired with the observed coverage."""

    nominal: float
    empirical: float


def sample_noised_values(
    mechanism: NoiseMechanism,
    true_value: float,
    params: NoiseParameters,
    num_samples: int,
) -> NDArray[np.float64]:
    """
    Draw independent noised releases of the same true value.

    Args:
        mechanism: Noise mechanism to sample from.
        true_value: Value the noise is added to.
        params: Sensitivity and privacy parameters.
        num_samples: Number of releases.

    Returns
    -------
        Array of ``num_samples`` noised values.
    """
    return np.fromiter(
        (
            mechanism.add_noise_float64(
                true_value,
                params.l0_sensitivity,
                params.linf_sensitivity,
                params.epsilon,
                params.delta,
            )
            for _ in range(num_samples)
        ),
        dtype=np.float64,
        count=num_samples,
    )


def empirical_coverage(
    mechanism: NoiseMechanism,
    noised_values: NDArray[np.float64],
    true_value: float,
    params: NoiseParameters,
    confidence_level: float,
) -> float:
    """Fraction of confidence intervals around ``noised_values`` containing ``true_value``."""
    if len(noised_values) == 0:
        msg = "noised_values must not be empty"
        raise ValueError(msg)

    hits = 0
    for noised in noised_values:
        interval = mechanism.return_confidence_interval_float64(
            float(noised),
            params.l0_sensitivity,
            params.linf_sensitivity,
            params.epsilon,
            params.delta,
            confidence_level,
        )
        hits += interval.contains(true_value)
    return hits / len(noised_values)


def two_sided_tolerance(alpha: float, num_samples: int) -> float:
    """Acceptance band for the observed miss rate of a two-sided interval.

    The miss rate over ``num_samples`` trials is approximately normal with
    variance ``alpha (1 - alpha) / num_samples``.
    """
    return TWO_SIDED_Z * math.sqrt(alpha * (1.0 - alpha) / num_samples)


def mean_confidence_interval(
    sum_interval: ConfidenceIntervalFloat64,
    count_interval: ConfidenceIntervalInt64,
) -> ConfidenceIntervalFloat64:
    """
    Confidence interval for sum / count from independent intervals on each.

    Count bounds are clamped to at least 1. Each sum bound is divided by
    whichever count bound pushes the ratio further out: a non-negative
    lower bound by the largest count, a negative one by the smallest, and
    symmetrically for the upper bound.

    Args:
        sum_interval: Interval for the noised sum.
        count_interval: Interval for the noised count.

    Returns
    -------
        Interval for the mean.
    """
    count_lower = max(1, count_interval.lower_bound)
    count_upper = max(1, count_interval.upper_bound)

    if sum_interval.lower_bound >= 0:
        lower = sum_interval.lower_bound / count_upper
    else:
        lower = sum_interval.lower_bound / count_lower

    if sum_interval.upper_bound >= 0:
        upper = sum_interval.upper_bound / count_lower
    else:
        upper = sum_interval.upper_bound / count_upper

    return ConfidenceIntervalFloat64(lower_bound=lower, upper_bound=upper)


def coverage_sweep(mechanism: NoiseMechanism, cfg: Config) -> list[CoverageResult]:
    """
    Empirical coverage of mean intervals over a sweep of confidence levels.

    For each nominal level ``c`` a noised sum and a noised count are drawn
    ``num_samples`` times, each gets an interval at level ``sqrt(c)``, and
    the two are combined with :func:`mean_confidence_interval`. Since the
    two releases are independent the combined interval covers the true mean
    with probability at least ``c``.

    Args:
        mechanism: Noise mechanism under test.
        cfg: Configuration holding the privacy and experiment parameters.

    Returns
    -------
        One result per nominal level, in increasing order.
    """
    p = cfg.privacy
    exp = cfg.experiment
    true_mean = exp.true_mean

    results: list[CoverageResult] = []
    for confidence_level in exp.confidence_levels():
        split_level = math.sqrt(confidence_level)
        inside = 0
        for _ in range(exp.num_samples):
            noised_sum = mechanism.add_noise_float64(
                exp.true_sum, p.l0_sensitivity, p.linf_sensitivity, p.epsilon, p.delta,
            )
            noised_count = mechanism.add_noise_int64(
                exp.true_count, p.l0_sensitivity, p.linf_sensitivity, p.epsilon, p.delta,
            )
            sum_interval = mechanism.return_confidence_interval_float64(
                noised_sum, p.l0_sensitivity, p.linf_sensitivity, p.epsilon, p.delta, split_level,
            )
            count_interval = mechanism.return_confidence_interval_int64(
                noised_count, p.l0_sensitivity, p.linf_sensitivity, p.epsilon, p.delta, split_level,
            )
            inside += mean_confidence_interval(sum_interval, count_interval).contains(true_mean)

        result = CoverageResult(confidence_level, inside / exp.num_samples)
        logger.debug("nominal=%.2f empirical=%.4f", result.nominal, result.empirical)
        results.append(result)
    return results
