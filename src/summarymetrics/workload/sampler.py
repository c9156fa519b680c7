"""Statistical distribution sampler for simulated workloads."""

import logging
from typing import Any, Dict, Optional, Union

import numpy as np

logger = logging.getLogger(__name__)


class DistributionSampler:
    """Draws values from distributions described by small config dicts."""

    def __init__(self, seed: Optional[int] = None):
        """Initialize the sampler with its own random generator.

        Args:
            seed: Random seed for reproducibility
        """
        self.rng = np.random.default_rng(seed)

    def sample(self, distribution_config: Dict[str, Any]) -> Union[float, int]:
        """Sample a value from the specified distribution.

        Args:
            distribution_config: Configuration dict with 'type' and distribution parameters.
                Examples:
                - {'type': 'Exponential', 'rate': 5.0}
                - {'type': 'LogNormal', 'mean': -3.0, 'sigma': 0.5}
                - {'type': 'Uniform', 'low': 100, 'high': 4096, 'is_int': True}

        Returns:
            Sampled value (float or int based on 'is_int' parameter)
        """
        dist_type = distribution_config.get("type", "Constant")
        is_int = distribution_config.get("is_int", False)

        if dist_type in ("Constant", "Fixed"):
            value = distribution_config.get("value", 1.0)

        elif dist_type == "Exponential":
            rate = distribution_config.get("rate", 1.0)
            value = self.rng.exponential(1.0 / rate)

        elif dist_type == "Uniform":
            low = distribution_config.get("low", 0.0)
            high = distribution_config.get("high", 1.0)
            value = self.rng.uniform(low, high)

        elif dist_type == "Normal":
            mean = distribution_config.get("mean", 0.0)
            std = distribution_config.get("std", distribution_config.get("sigma", 1.0))
            # Durations and sizes can't be negative
            value = max(0.0, self.rng.normal(mean, std))

        elif dist_type == "LogNormal":
            # mean and sigma of the underlying normal distribution
            mean = distribution_config.get("mean", 0.0)
            sigma = distribution_config.get("sigma", 1.0)
            value = self.rng.lognormal(mean, sigma)

        elif dist_type == "Pareto":
            shape = distribution_config.get("shape", 1.0)
            scale = distribution_config.get("scale", 1.0)
            value = (self.rng.pareto(shape) + 1) * scale

        elif dist_type == "Weibull":
            shape = distribution_config.get("shape", 1.0)
            scale = distribution_config.get("scale", 1.0)
            value = scale * self.rng.weibull(shape)

        elif dist_type == "Gamma":
            shape = distribution_config.get("shape", 2.0)
            scale = distribution_config.get("scale", 1.0)
            value = self.rng.gamma(shape, scale)

        elif dist_type == "Mixture":
            components = distribution_config.get("components", [])
            if not components:
                logger.warning("Mixture distribution has no components, returning 1.0")
                return 1.0

            weights = np.asarray(
                distribution_config.get("weights") or [1.0] * len(components), dtype=float
            )
            component_idx = self.rng.choice(len(components), p=weights / weights.sum())
            value = self.sample(components[component_idx])

        else:
            logger.warning(f"Unknown distribution type: {dist_type}, using constant value 1.0")
            value = 1.0

        if is_int:
            return max(1, int(round(value)))

        return float(value)
