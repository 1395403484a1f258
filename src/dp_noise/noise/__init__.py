"""Differentially private noise mechanisms.

This module aggregates parameter validation, secure sampling of Laplace
noise from geometric draws, and the closed-form statistics (inverse CDF,
confidence intervals, partition-selection thresholds) built on top of it.
"""

from .laplace import (
    Laplace,
    confidence_interval_laplace,
    inverse_cdf_laplace,
)
from .mechanism import (
    ConfidenceIntervalFloat64,
    ConfidenceIntervalInt64,
    NoiseMechanism,
)
from .parameters import (
    InvalidParameterError,
    NoiseParameters,
)
from .randomness import (
    DEFAULT_RANDOM_SOURCE,
    RandomSource,
    SecureRandomSource,
    SeededRandomSource,
)

__all__ = [
    # Mechanisms
    "Laplace",
    "NoiseMechanism",

    # Closed-form statistics
    "inverse_cdf_laplace",
    "confidence_interval_laplace",
    "ConfidenceIntervalFloat64",
    "ConfidenceIntervalInt64",

    # Parameters
    "NoiseParameters",
    "InvalidParameterError",

    # Randomness
    "RandomSource",
    "SecureRandomSource",
    "SeededRandomSource",
    "DEFAULT_RANDOM_SOURCE",
]
