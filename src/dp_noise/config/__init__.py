from .config import (
    DEFAULT_CONFIDENCE_STEP,
    Config,
    ExperimentConfig,
)

__all__ = [
    "DEFAULT_CONFIDENCE_STEP",
    "Config",
    "ExperimentConfig",
]
