"""Sources of uniform randomness for noise sampling.

A mechanism never reaches for a global generator: it holds a
``RandomSource`` and draws every uniform sample from it. The process-wide
default is an OS-entropy source; tests inject a seeded one.
"""

from __future__ import annotations

import secrets
import threading
from typing import Protocol, runtime_checkable

from numpy.random import default_rng


@runtime_checkable
class RandomSource(Protocol):
    """Thread-safe provider of uniform draws in the half-open interval (0, 1]."""

    def uniform(self) -> float:
        """Return a uniform sample in (0, 1] with 53 bits of resolution."""
        ...


class SecureRandomSource:
    """Uniform draws backed by the operating system's CSPRNG.

    ``secrets.SystemRandom`` reads fresh entropy for each call and keeps no
    generator state, so concurrent callers never observe shared sequences.
    """

    def __init__(self) -> None:
        self._random = secrets.SystemRandom()

    def uniform(self) -> float:
        """Return a uniform sample in (0, 1]."""
        # random() is a multiple of 2**-53 in [0, 1); 1 - it is exact.
        return 1.0 - self._random.random()

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class SeededRandomSource:
    """Reproducible uniform draws from a seeded NumPy generator.

    Not suitable for releasing private data. The generator is guarded by a
    lock since ``numpy.random.Generator`` is not safe for concurrent use.

    Args
    ------
        seed (int | None): Seed passed to ``numpy.random.default_rng``.
    """

    def __init__(self, seed: int | None = None) -> None:
        self.seed = seed
        self._rng = default_rng(seed)
        self._lock = threading.Lock()

    def uniform(self) -> float:
        """Return a uniform sample in (0, 1]."""
        with self._lock:
            return 1.0 - float(self._rng.random())

    def __repr__(self) -> str:
        return f"{type(self).__name__}(seed={self.seed!r})"


# Created once at import and shared by every mechanism that is not given its own source.
DEFAULT_RANDOM_SOURCE: RandomSource = SecureRandomSource()
