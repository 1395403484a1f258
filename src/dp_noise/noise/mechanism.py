"""Capability set shared by additive noise mechanisms, and interval value types."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Callable

MIN_INT64 = -(2**63)
MAX_INT64 = 2**63 - 1


@dataclass(frozen=True)
class ConfidenceIntervalFloat64:
    """Two-sided confidence interval around a real noised value.

    Raises
    ------
        ValueError: If lower_bound > upper_bound.
    """

    lower_bound: float
    upper_bound: float

    def __post_init__(self) -> None:
        """Validate values after initialization."""
        if self.lower_bound > self.upper_bound:
            msg = f"lower_bound must be <= upper_bound, got ({self.lower_bound}, {self.upper_bound})"
            raise ValueError(msg)

    def contains(self, value: float) -> bool:
        """Return True if ``value`` lies in the closed interval."""
        return self.lower_bound <= value <= self.upper_bound


@dataclass(frozen=True)
class ConfidenceIntervalInt64:
    """Two-sided confidence interval with integer bounds.

    Raises
    ------
        ValueError: If lower_bound > upper_bound.
    """

    lower_bound: int
    upper_bound: int

    def __post_init__(self) -> None:
        """Validate values after initialization."""
        if self.lower_bound > self.upper_bound:
            msg = f"lower_bound must be <= upper_bound, got ({self.lower_bound}, {self.upper_bound})"
            raise ValueError(msg)

    @classmethod
    def from_float_interval(
        cls,
        interval: ConfidenceIntervalFloat64,
        offset: int = 0,
    ) -> ConfidenceIntervalInt64:
        """Round a real interval outward and shift it by an integer offset.

        The lower bound is rounded down and the upper bound up, so every
        integer inside the real interval stays inside the result. Bounds are
        clamped to the signed 64-bit range, which also absorbs infinities.

        Args
        ------
            interval (ConfidenceIntervalFloat64): Interval to round.
            offset (int): Exact integer added after rounding.
        """
        return cls(
            lower_bound=_clamp_int64(interval.lower_bound, math.floor, offset),
            upper_bound=_clamp_int64(interval.upper_bound, math.ceil, offset),
        )

    def contains(self, value: int) -> bool:
        """Return True if ``value`` lies in the closed interval."""
        return self.lower_bound <= value <= self.upper_bound


def _clamp_int64(x: float, rounding: Callable[[float], int], offset: int) -> int:
    if math.isinf(x):
        return MIN_INT64 if x < 0 else MAX_INT64
    return min(max(offset + rounding(x), MIN_INT64), MAX_INT64)


@runtime_checkable
class NoiseMechanism(Protocol):
    """Additive noise mechanism: noise, thresholds and confidence intervals.

    Implementations are plain immutable values; any object providing these
    methods can stand in for another (e.g. a Gaussian mechanism) without
    sharing a base class.
    """

    def add_noise_float64(
        self,
        value: float,
        l0_sensitivity: int,
        linf_sensitivity: float,
        epsilon: float,
        delta: float,
    ) -> float: ...

    def add_noise_int64(
        self,
        value: int,
        l0_sensitivity: int,
        linf_sensitivity: float,
        epsilon: float,
        delta: float,
    ) -> int: ...

    def threshold(
        self,
        l0_sensitivity: int,
        linf_sensitivity: float,
        epsilon: float,
        delta: float,
        partition_selection_delta: float,
    ) -> float: ...

    def delta_for_threshold(
        self,
        l0_sensitivity: int,
        linf_sensitivity: float,
        epsilon: float,
        delta: float,
        k: float,
    ) -> float: ...

    def return_confidence_interval_float64(
        self,
        noised_value: float,
        l0_sensitivity: int,
        linf_sensitivity: float,
        epsilon: float,
        delta: float,
        confidence_level: float,
    ) -> ConfidenceIntervalFloat64: ...

    def return_confidence_interval_int64(
        self,
        noised_value: int,
        l0_sensitivity: int,
        linf_sensitivity: float,
        epsilon: float,
        delta: float,
        confidence_level: float,
    ) -> ConfidenceIntervalInt64: ...
