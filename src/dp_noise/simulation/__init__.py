"""Monte-Carlo experiments that validate the noise mechanisms empirically.

This module provides support for:
- Sampling repeated noised releases of a fixed true value.
- Measuring how often confidence intervals contain the true value.
- Combining sum and count intervals into an interval for their mean.
- Sweeping nominal confidence levels and reporting observed coverage.
"""

from .coverage import (
    CoverageResult,
    coverage_sweep,
    empirical_coverage,
    mean_confidence_interval,
    sample_noised_values,
    two_sided_tolerance,
)

__all__ = [
    "CoverageResult",
    "coverage_sweep",
    "empirical_coverage",
    "mean_confidence_interval",
    "sample_noised_values",
    "two_sided_tolerance",
]
