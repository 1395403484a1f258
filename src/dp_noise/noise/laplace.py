"""Laplace mechanism: noise, confidence intervals and partition-selection thresholds.

Noise is never formed as ``-b * ln(u)`` for a uniform ``u``: floating-point
rounding of that expression makes some outputs reachable from one input and
not from a neighbouring one. Instead the true value is snapped to a
power-of-two grid and a two-sided geometric multiple of the grid step is
added, so every output lies on the grid.
"""

from __future__ import annotations

import logging
import math
import numbers
from dataclasses import dataclass, field

from dp_noise.noise.geometric import two_sided_geometric
from dp_noise.noise.mechanism import ConfidenceIntervalFloat64, ConfidenceIntervalInt64
from dp_noise.noise.parameters import (
    InvalidParameterError,
    NoiseParameters,
    check_confidence_level,
    check_delta_strict,
    check_not_nan,
)
from dp_noise.noise.randomness import DEFAULT_RANDOM_SOURCE, RandomSource
from dp_noise.noise.secure_math import (
    round_to_multiple,
    round_to_multiple_of_power_of_two,
)

logger = logging.getLogger(__name__)


def inverse_cdf_laplace(mean: float, scale: float, p: float) -> float:
    r"""Quantile function of the Laplace distribution.

    Returns ``x`` with :math:`CDF(x; \mu, b) = p`:

        p < 0.5:  \mu + b \ln(2p)
        p >= 0.5: \mu - b \ln(2(1 - p))

    ``p = 0`` gives ``-inf``, ``p = 1`` gives ``+inf`` and ``p = 0.5`` gives
    ``mean`` exactly, whatever the scale.

    Raises
    ------
        InvalidParameterError: If scale is not positive and finite or p is
            outside [0, 1].
    """
    if not (0.0 <= p <= 1.0):
        raise InvalidParameterError("p", p, "must be in [0,1]")
    if not (scale > 0.0 and math.isfinite(scale)):
        raise InvalidParameterError("scale", scale, "must be a finite number > 0")

    if p == 0.0:
        return -math.inf
    if p == 1.0:
        return math.inf
    if p < 0.5:
        return mean + scale * math.log(2.0 * p)
    return mean - scale * math.log(2.0 * (1.0 - p))


def _upper_tail_quantile(mean: float, scale: float, tail: float) -> float:
    """Laplace quantile at ``1 - tail`` without rounding ``1 - tail`` for tiny tails."""
    if tail == 0.0:
        return math.inf
    if tail <= 0.5:
        return mean - scale * math.log(2.0 * tail)
    return inverse_cdf_laplace(mean, scale, 1.0 - tail)


def confidence_interval_laplace(
    noised_value: float,
    scale: float,
    confidence_level: float,
) -> ConfidenceIntervalFloat64:
    """Equal-tailed confidence interval for the true value behind a noised value.

    Each side excludes ``(1 - confidence_level) / 2`` of the probability mass.
    """
    alpha = 1.0 - confidence_level
    return ConfidenceIntervalFloat64(
        lower_bound=inverse_cdf_laplace(noised_value, scale, alpha / 2.0),
        upper_bound=inverse_cdf_laplace(noised_value, scale, 1.0 - alpha / 2.0),
    )


def _geometric_rate(params: NoiseParameters, granularity: float) -> float:
    # Widened by one grid step to cover the sensitivity increase caused by snapping.
    return granularity * params.epsilon / (params.l1_sensitivity + granularity)


@dataclass(frozen=True)
class Laplace:
    """Laplace mechanism for pure epsilon-DP over real and integer values.

    ``delta`` is accepted and validated for interface compatibility with
    other mechanisms but does not affect the noise.

    Attributes
    ----------
        source: RandomSource
            Provider of uniform draws; defaults to the process-wide secure source.
    """

    source: RandomSource = field(default=DEFAULT_RANDOM_SOURCE, repr=False, compare=False)

    def _sample(self, params: NoiseParameters) -> tuple[int, float]:
        """Draw a two-sided geometric sample and return it with the grid step."""
        granularity = params.granularity
        logger.debug("Laplace scale=%g granularity=%g", params.scale, granularity)
        return two_sided_geometric(_geometric_rate(params, granularity), self.source), granularity

    def add_noise_float64(
        self,
        value: float,
        l0_sensitivity: int,
        linf_sensitivity: float,
        epsilon: float,
        delta: float,
    ) -> float:
        """Add Laplace noise with scale ``l0 * linf / epsilon`` to a real value.

        Args
        ------
            value (float): True value to protect.
            l0_sensitivity (int): Maximum number of partitions contributed to.
            linf_sensitivity (float): Maximum contribution to one partition.
            epsilon (float): Privacy budget.
            delta (float): Validated, unused by this mechanism.

        Returns
        -------
            float: The noised value, a multiple of the grid step.

        Raises
        ------
            InvalidParameterError: If any parameter is invalid.
        """
        params = NoiseParameters(l0_sensitivity, linf_sensitivity, epsilon, delta)
        sample, granularity = self._sample(params)
        return round_to_multiple_of_power_of_two(value, granularity) + sample * granularity

    def add_noise_int64(
        self,
        value: int,
        l0_sensitivity: int,
        linf_sensitivity: float,
        epsilon: float,
        delta: float,
    ) -> int:
        """Add Laplace noise to an integer value and round to the nearest integer.

        Equivalent to rounding the real mechanism's output, ties away from
        zero, but evaluated in integer arithmetic so large values keep full
        precision.

        Raises
        ------
            InvalidParameterError: If ``value`` is not an integer or any other
                parameter is invalid.
        """
        if not isinstance(value, numbers.Integral) or isinstance(value, bool):
            raise InvalidParameterError("value", value, "must be an integer")
        params = NoiseParameters(l0_sensitivity, linf_sensitivity, epsilon, delta)
        sample, granularity = self._sample(params)
        value = int(value)

        if granularity > 1.0:
            step = int(granularity)
            return round_to_multiple(value, step) + sample * step

        # Integers already lie on any grid finer than 1; only the noise needs rounding.
        noise = sample * granularity
        whole = math.floor(noise)
        fraction = noise - whole
        rounded = value + whole
        if fraction > 0.5 or (fraction == 0.5 and rounded >= 0):
            rounded += 1
        return rounded

    def threshold(
        self,
        l0_sensitivity: int,
        linf_sensitivity: float,
        epsilon: float,
        delta: float,
        partition_selection_delta: float,
    ) -> float:
        """Minimum noised count at which a partition may be released.

        A partition whose true count is at most ``linf_sensitivity`` is
        wrongly released with probability below ``partition_selection_delta``
        across all ``l0_sensitivity`` partitions one contribution can touch.

        Raises
        ------
            InvalidParameterError: If any parameter is invalid or
                partition_selection_delta is outside (0, 1).
        """
        params = NoiseParameters(l0_sensitivity, linf_sensitivity, epsilon, delta)
        check_delta_strict(partition_selection_delta, "partition_selection_delta")

        # Split the overall delta evenly over l0 independent partitions.
        partition_delta = -math.expm1(math.log1p(-partition_selection_delta) / l0_sensitivity)
        k = _upper_tail_quantile(linf_sensitivity, params.scale, partition_delta)
        logger.debug(
            "threshold partition_delta=%g scale=%g k=%g",
            partition_delta,
            params.scale,
            k,
        )
        return k

    def delta_for_threshold(
        self,
        l0_sensitivity: int,
        linf_sensitivity: float,
        epsilon: float,
        delta: float,
        k: float,
    ) -> float:
        """Probability of wrongly releasing a partition at threshold ``k``.

        Exact inverse of :meth:`threshold`.

        Raises
        ------
            InvalidParameterError: If any parameter is invalid or k is NaN.
        """
        params = NoiseParameters(l0_sensitivity, linf_sensitivity, epsilon, delta)
        check_not_nan(k, "k")

        if k > linf_sensitivity:
            partition_delta = math.exp(-(k - linf_sensitivity) / params.scale) / 2.0
        else:
            partition_delta = 1.0 - math.exp((k - linf_sensitivity) / params.scale) / 2.0
        if partition_delta >= 1.0:
            return 1.0
        return -math.expm1(l0_sensitivity * math.log1p(-partition_delta))

    def return_confidence_interval_float64(
        self,
        noised_value: float,
        l0_sensitivity: int,
        linf_sensitivity: float,
        epsilon: float,
        delta: float,
        confidence_level: float,
    ) -> ConfidenceIntervalFloat64:
        """Confidence interval for the true value behind a real noised value.

        Raises
        ------
            InvalidParameterError: If any parameter or the confidence level is
                invalid, or noised_value is NaN.
        """
        params = NoiseParameters(l0_sensitivity, linf_sensitivity, epsilon, delta)
        check_confidence_level(confidence_level)
        check_not_nan(noised_value, "noised_value")
        return confidence_interval_laplace(noised_value, params.scale, confidence_level)

    def return_confidence_interval_int64(
        self,
        noised_value: int,
        l0_sensitivity: int,
        linf_sensitivity: float,
        epsilon: float,
        delta: float,
        confidence_level: float,
    ) -> ConfidenceIntervalInt64:
        """Confidence interval with integer bounds, rounded outward.

        Raises
        ------
            InvalidParameterError: If any parameter or the confidence level is
                invalid, or noised_value is not an integer.
        """
        params = NoiseParameters(l0_sensitivity, linf_sensitivity, epsilon, delta)
        check_confidence_level(confidence_level)
        if not isinstance(noised_value, numbers.Integral) or isinstance(noised_value, bool):
            raise InvalidParameterError("noised_value", noised_value, "must be an integer")

        # Round the interval around zero, then shift exactly by the integer value.
        offsets = confidence_interval_laplace(0.0, params.scale, confidence_level)
        return ConfidenceIntervalInt64.from_float_interval(offsets, offset=int(noised_value))
