"""Confidence Interval Coverage Simulation
This script repeatedly noises a sum and a count with the Laplace mechanism,
builds a confidence interval for their mean at each nominal confidence level,
and reports how often the interval contains the true mean.
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path

from dp_noise.config import Config
from dp_noise.noise import DEFAULT_RANDOM_SOURCE, Laplace, SeededRandomSource
from dp_noise.simulation import coverage_sweep

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path("config.yaml")


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("config", nargs="?", default=None, help="YAML configuration file (default: config.yaml if present)")
    args = parser.parse_args(argv)

    if args.config is not None:
        sim_config = Config.from_yaml(args.config)
    elif DEFAULT_CONFIG_PATH.exists():
        sim_config = Config.from_yaml(DEFAULT_CONFIG_PATH)
    else:
        sim_config = Config()

    logging.basicConfig(
        level=logging.DEBUG if sim_config.verbose else logging.INFO,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )
    logger.info("Loaded configuration:\n%s", sim_config.to_yaml())

    seed = sim_config.experiment.seed
    source = DEFAULT_RANDOM_SOURCE if seed is None else SeededRandomSource(seed)
    mechanism = Laplace(source=source)

    logger.info("Running coverage sweep with %d samples per level...", sim_config.experiment.num_samples)
    results = coverage_sweep(mechanism, sim_config)

    # --- Results ---
    print("nominal, empirical")
    for result in results:
        print(f"{result.nominal:f}, {result.empirical:f}")

    undercovered = [r for r in results if r.empirical < r.nominal]
    if undercovered:
        logger.info("%d of %d levels fell below nominal coverage", len(undercovered), len(results))


if __name__ == "__main__":
    main()
