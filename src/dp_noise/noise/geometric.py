"""Geometric and two-sided geometric sampling, the building blocks of Laplace noise."""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from dp_noise.noise.randomness import RandomSource

MAX_INT64 = 2**63 - 1


def geometric(lam: float, source: RandomSource) -> int:
    r"""Sample the number of Bernoulli trials until the first success.

    The success probability is :math:`p = 1 - e^{-\lambda}`, so the support
    is ``1, 2, ...`` with mean :math:`1 / (1 - e^{-\lambda})`. The sample is
    obtained by inverting a uniform draw :math:`u \in (0, 1]`:

        X = \lceil -\ln(u) / \lambda \rceil

    since :math:`P(X > k) = P(-\ln u > k\lambda) = e^{-k\lambda}`.

    Args
    ------
        lam (float): Rate parameter :math:`\lambda > 0`. Stays accurate for
            values down to ``1e-7`` and far below.
        source (RandomSource): Provider of the uniform draw.

    Returns
    -------
        int: Sample in ``[1, 2**63 - 1]``; larger samples are truncated.
    """
    # -ln(u) is at most ~36.7 for u >= 2**-53, so only a tiny lam can overflow here.
    quotient = -math.log(source.uniform()) / lam
    if quotient >= MAX_INT64:
        return MAX_INT64
    return max(1, math.ceil(quotient))


def two_sided_geometric(lam: float, source: RandomSource) -> int:
    r"""Sample a discrete Laplace variable with :math:`P(z) \propto e^{-\lambda |z|}`.

    The difference of two independent geometric draws with the same
    parameter, one per sign, is exactly two-sided geometric.
    """
    return geometric(lam, source) - geometric(lam, source)
