"""Validation of sensitivity and privacy parameters for noise mechanisms."""

from __future__ import annotations

import math
import numbers
from dataclasses import dataclass
from typing import Any

from dp_noise.noise.secure_math import ceil_power_of_two

# Noise is drawn on a grid whose step is the smallest power of two >= scale / 2**40.
GRANULARITY_PARAM = float(2**40)

# Snapping widens the effective scale to (l1 + step) / epsilon; keep that within 2**-10 of the scale.
MAX_GRANULARITY_RATIO = 2.0**-10


class InvalidParameterError(ValueError):
    """Raised when a sensitivity, privacy or confidence parameter is invalid.

    Attributes
    ----------
        field: str
            Name of the offending parameter.
        value: Any
            The rejected value.
    """

    def __init__(self, field: str, value: Any, requirement: str) -> None:
        self.field = field
        self.value = value
        super().__init__(f"{field} {requirement}, got {value!r}")


def _is_real(x: Any) -> bool:
    return isinstance(x, numbers.Real) and not isinstance(x, bool) and not math.isnan(x)


def check_l0_sensitivity(l0_sensitivity: Any) -> None:
    """Check that the L0 sensitivity is a strictly positive integer."""
    if not isinstance(l0_sensitivity, numbers.Integral) or isinstance(l0_sensitivity, bool):
        raise InvalidParameterError("l0_sensitivity", l0_sensitivity, "must be an integer")
    if l0_sensitivity <= 0:
        raise InvalidParameterError("l0_sensitivity", l0_sensitivity, "must be > 0")


def check_linf_sensitivity(linf_sensitivity: Any) -> None:
    """Check that the L-infinity sensitivity is strictly positive and finite."""
    if not _is_real(linf_sensitivity) or not math.isfinite(linf_sensitivity):
        raise InvalidParameterError("linf_sensitivity", linf_sensitivity, "must be a finite number")
    if linf_sensitivity <= 0:
        raise InvalidParameterError("linf_sensitivity", linf_sensitivity, "must be > 0")


def check_epsilon(epsilon: Any) -> None:
    """Check that epsilon is strictly positive and finite."""
    if not _is_real(epsilon) or not math.isfinite(epsilon):
        raise InvalidParameterError("epsilon", epsilon, "must be a finite number")
    if epsilon <= 0:
        raise InvalidParameterError("epsilon", epsilon, "must be > 0")


def check_delta(delta: Any, field: str = "delta") -> None:
    """Check that delta lies in [0, 1)."""
    if not _is_real(delta) or not (0.0 <= delta < 1.0):
        raise InvalidParameterError(field, delta, "must be in [0,1)")


def check_delta_strict(delta: Any, field: str = "delta") -> None:
    """Check that delta lies in the open interval (0, 1)."""
    if not _is_real(delta) or not (0.0 < delta < 1.0):
        raise InvalidParameterError(field, delta, "must be in (0,1)")


def check_confidence_level(confidence_level: Any) -> None:
    """Check that a two-sided confidence level lies in [0, 1]."""
    if not _is_real(confidence_level) or not (0.0 <= confidence_level <= 1.0):
        raise InvalidParameterError("confidence_level", confidence_level, "must be in [0,1]")


def check_not_nan(value: Any, field: str) -> None:
    """Check that a real-valued argument is a number other than NaN."""
    if not _is_real(value):
        raise InvalidParameterError(field, value, "must be a number")


@dataclass(frozen=True)
class NoiseParameters:
    """Sensitivity and privacy parameters of an additive noise mechanism.

    Attributes
    ----------
        l0_sensitivity: int
            Maximum number of partitions a single contribution can affect.
        linf_sensitivity: float
            Maximum change to a single partition from one contribution.
        epsilon: float
            Privacy budget; smaller means more noise.
        delta: float
            Probability of the privacy guarantee failing.

    Raises
    ------
        InvalidParameterError: If any field is out of range, checked in
            declaration order, if the derived scale overflows, or if epsilon
            is so small that the noise grid would visibly widen the noise.
    """

    l0_sensitivity: int = 1
    linf_sensitivity: float = 1.0
    epsilon: float = 1.0
    delta: float = 0.0

    def __post_init__(self) -> None:
        """Validate values after initialization."""
        check_l0_sensitivity(self.l0_sensitivity)
        check_linf_sensitivity(self.linf_sensitivity)
        check_epsilon(self.epsilon)
        check_delta(self.delta)
        if not math.isfinite(self.scale):
            raise InvalidParameterError("epsilon", self.epsilon, "is too small for the given sensitivities")
        if self.granularity > self.l1_sensitivity * MAX_GRANULARITY_RATIO:
            raise InvalidParameterError("epsilon", self.epsilon, "is too small to sample noise at the requested scale")

    @property
    def l1_sensitivity(self) -> float:
        """Maximum total L1 change from a single contribution."""
        return self.l0_sensitivity * self.linf_sensitivity

    @property
    def scale(self) -> float:
        """Laplace scale b = l0 * linf / epsilon."""
        return self.l1_sensitivity / self.epsilon

    @property
    def granularity(self) -> float:
        """Step of the power-of-two grid noise is drawn on."""
        # Very small scales would underflow to 0; the smallest subnormal is a valid power of two.
        return ceil_power_of_two(max(self.scale / GRANULARITY_PARAM, math.ulp(0.0)))
