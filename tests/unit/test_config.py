"""Unit tests for configuration loading and validation."""

import pytest
import yaml

from dp_noise.config import DEFAULT_CONFIDENCE_STEP, Config, ExperimentConfig
from dp_noise.noise import InvalidParameterError, NoiseParameters


def test_default_config_is_valid() -> None:
    """Defaults describe a unit-scale mechanism and a small experiment."""
    cfg = Config()
    assert cfg.privacy == NoiseParameters()
    assert cfg.experiment.num_samples > 0
    assert cfg.verbose is False
    assert cfg.experiment.confidence_step == DEFAULT_CONFIDENCE_STEP


def test_yaml_round_trip(tmp_path) -> None:
    """A dumped config loads back into an equal config."""
    cfg = Config(
        privacy=NoiseParameters(l0_sensitivity=2, linf_sensitivity=0.5, epsilon=0.3, delta=1e-6),
        experiment=ExperimentConfig(num_samples=50, true_sum=12.0, true_count=4, seed=9),
        verbose=True,
    )
    path = tmp_path / "config.yaml"
    path.write_text(cfg.to_yaml())
    assert Config.from_yaml(path) == cfg


def test_from_dict_partial_sections() -> None:
    """Missing sections and keys fall back to defaults."""
    cfg = Config.from_dict({"privacy": {"epsilon": 2.0}})
    assert cfg.privacy.epsilon == 2.0
    assert cfg.privacy.l0_sensitivity == 1
    assert cfg.experiment == ExperimentConfig()


def test_from_yaml_empty_file(tmp_path) -> None:
    """An empty file yields the default config."""
    path = tmp_path / "empty.yaml"
    path.write_text("")
    assert Config.from_yaml(path) == Config()


def test_to_dict_is_plain() -> None:
    """to_dict output is safe for YAML serialization."""
    data = Config().to_dict()
    assert data["privacy"]["l0_sensitivity"] == 1
    assert yaml.safe_load(yaml.safe_dump(data)) == data


def test_invalid_privacy_section_raises() -> None:
    """Privacy parameters are validated on load."""
    with pytest.raises(InvalidParameterError):
        Config.from_dict({"privacy": {"linf_sensitivity": -1.0}})


@pytest.mark.parametrize("kwargs", [
    {"num_samples": 0},
    {"true_count": 0},
    {"confidence_step": 0.0},
    {"confidence_step": 1.0},
])
def test_experiment_config_rejects_invalid(kwargs) -> None:
    """Experiment parameters are validated on construction."""
    with pytest.raises(ValueError):
        ExperimentConfig(**kwargs)


def test_confidence_levels() -> None:
    """Levels are evenly spaced and strictly below 1."""
    levels = ExperimentConfig(confidence_step=0.25).confidence_levels()
    assert levels == [0.25, 0.5, 0.75]
    assert len(ExperimentConfig().confidence_levels()) == 99


def test_true_mean() -> None:
    """True mean is sum over count."""
    assert ExperimentConfig(true_sum=10.0, true_count=4).true_mean == 2.5
