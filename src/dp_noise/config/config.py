"""Configuration module for dp-noise coverage experiments."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any

import yaml

from dp_noise.noise import NoiseParameters

DEFAULT_CONFIDENCE_STEP = 0.01


@dataclass(frozen=True)
class ExperimentConfig:
    """Monte-Carlo coverage experiment parameters.

    Attributes
    ----------
        num_samples: int
            Number of noised releases drawn per confidence level.
        true_sum: float
            True value of the summed statistic.
        true_count: int
            True value of the counted statistic.
        confidence_step: float
            Spacing of the swept nominal confidence levels.
        seed: int | None
            Seed for a reproducible random source; None uses OS entropy.

    Raises
    ------
        ValueError: If num_samples or true_count is not positive, or
            confidence_step is not in (0, 1).
    """

    num_samples: int = 1_000
    true_sum: float = 100.0
    true_count: int = 1
    confidence_step: float = DEFAULT_CONFIDENCE_STEP
    seed: int | None = None

    def __post_init__(self) -> None:
        """Validate values after initialization."""
        if self.num_samples <= 0:
            msg = f"num_samples must be > 0, got {self.num_samples}"
            raise ValueError(msg)
        if self.true_count <= 0:
            msg = f"true_count must be > 0, got {self.true_count}"
            raise ValueError(msg)
        if not (0.0 < self.confidence_step < 1.0):
            msg = f"confidence_step must be in (0,1), got {self.confidence_step}"
            raise ValueError(msg)

    @property
    def true_mean(self) -> float:
        """Ratio of the true sum to the true count."""
        return self.true_sum / self.true_count

    def confidence_levels(self) -> list[float]:
        """Nominal levels step, 2*step, ... strictly below 1."""
        count = int(round(1.0 / self.confidence_step))
        levels = [i * self.confidence_step for i in range(1, count + 1)]
        return [c for c in levels if c < 1.0]


@dataclass(frozen=True)
class Config:
    """
    Top-level configuration for dp-noise.

    Groups
    ----------
        privacy: NoiseParameters
            Sensitivity and privacy parameters of the mechanism.
        experiment: ExperimentConfig
            Parameters of the coverage experiment.
        verbose: bool
            Flag to enable debug logging.

    Raises
    ------
        InvalidParameterError: If the privacy parameters are invalid.
        ValueError: If the experiment parameters are invalid.
    """

    privacy: NoiseParameters = field(default_factory=NoiseParameters)
    experiment: ExperimentConfig = field(default_factory=ExperimentConfig)
    verbose: bool = False

    def to_dict(self) -> dict[str, Any]:
        """Recursively convert to plain dict (for logging, serialization)."""
        return asdict(self)

    def to_yaml(self) -> str:
        """Dump entire config as a YAML string."""
        return yaml.safe_dump(self.to_dict(), sort_keys=False)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Config:
        """Build Config by unpacking each sub-dict into its sub-config."""
        return cls(
            privacy=NoiseParameters(**data.get("privacy", {})),
            experiment=ExperimentConfig(**data.get("experiment", {})),
            verbose=data.get("verbose", False),
        )

    @classmethod
    def from_yaml(cls, path: str | Path) -> Config:
        """Load a YAML file and return a Config."""
        path = Path(path)
        with path.open() as f:
            data = yaml.safe_load(f)
        return cls.from_dict(data or {})
