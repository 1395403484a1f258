"""Exact floating-point helpers for snapping noise to a power-of-two grid."""

from __future__ import annotations

import math

# Values whose quotient by the granularity reaches 2**54 have no fractional bits left.
_EXACT_QUOTIENT_LIMIT = float(2**54)


def round_half_away_from_zero(x: float) -> int:
    """Round to the nearest integer, ties away from zero."""
    magnitude = math.floor(abs(x))
    if abs(x) - magnitude >= 0.5:
        magnitude += 1
    return -magnitude if x < 0 else magnitude


def ceil_power_of_two(x: float) -> float:
    """Return the smallest power of two greater than or equal to ``x``.

    Args
    ------
        x (float): A finite positive number not greater than 2**1023.

    Returns
    -------
        float: An exact power of two.

    Raises
    ------
        ValueError: If ``x`` is not positive and finite, or exceeds 2**1023.
    """
    if not (x > 0.0 and math.isfinite(x)):
        msg = f"Input must be positive and finite, got {x}"
        raise ValueError(msg)

    mantissa, exponent = math.frexp(x)
    # frexp returns mantissa in [0.5, 1): a power of two has mantissa exactly 0.5.
    if mantissa == 0.5:
        return x
    if exponent > 1023:
        msg = f"Input must not be greater than 2**1023, got {x}"
        raise ValueError(msg)
    return math.ldexp(1.0, exponent)


def _is_power_of_two(x: float) -> bool:
    return x > 0.0 and math.isfinite(x) and math.frexp(x)[0] == 0.5


def round_to_multiple_of_power_of_two(x: float, granularity: float) -> float:
    """Round ``x`` to the closest multiple of ``granularity``, ties away from zero.

    ``granularity`` must be a power of two, which makes the result exact.
    """
    if not _is_power_of_two(granularity):
        msg = f"Granularity must be a power of 2, got {granularity}"
        raise ValueError(msg)

    quotient = x / granularity
    if abs(quotient) < _EXACT_QUOTIENT_LIMIT:
        return round_half_away_from_zero(quotient) * granularity
    return x


def round_to_multiple(x: int, granularity: int) -> int:
    """Round integer ``x`` to the closest multiple of ``granularity``, ties away from zero."""
    if granularity <= 0:
        msg = f"Granularity must be > 0, got {granularity}"
        raise ValueError(msg)

    remainder = abs(x) % granularity
    magnitude = abs(x) - remainder
    if 2 * remainder >= granularity:
        magnitude += granularity
    return magnitude if x >= 0 else -magnitude
