"""
Sequence-specific amplification bias.

Per-oligo efficiencies are drawn from a normal distribution truncated to
[low, high]. The random source is always passed in so that runs are
reproducible from a seed.
"""

import logging
from typing import Optional

import numpy as np
from scipy import stats

from .config import BiasParams
from .errors import ConfigError

logger = logging.getLogger(__name__)


class BiasSampler:
    """Truncated-normal efficiency sampler"""

    def sample(
        self,
        n: int,
        low: float,
        high: float,
        mean: float,
        sd: float,
        rng: np.random.Generator,
    ) -> np.ndarray:
        """
        Draw n independent efficiencies from N(mean, sd) truncated to [low, high].

        Args:
            n: Number of oligos
            low: Lower bound (inclusive)
            high: Upper bound (inclusive)
            mean: Mean of the untruncated normal
            sd: Standard deviation of the untruncated normal
            rng: numpy Generator used for every draw

        Returns:
            float64 array of length n

        Raises:
            ConfigError: If low >= high, sd < 0 or n < 0
        """
        if low >= high:
            raise ConfigError(f"low ({low}) must be < high ({high})")
        if sd < 0:
            raise ConfigError(f"sd must be >= 0, got {sd}")
        if n < 0:
            raise ConfigError(f"n must be >= 0, got {n}")
        if rng is None:
            raise ConfigError("an explicit random generator is required")

        if sd == 0:
            if not low <= mean <= high:
                raise ConfigError(f"mean ({mean}) outside [{low}, {high}] with sd=0")
            return np.full(n, float(mean))
        if n == 0:
            return np.empty(0, dtype=np.float64)

        a = (low - mean) / sd
        b = (high - mean) / sd
        values = stats.truncnorm.rvs(a, b, loc=mean, scale=sd, size=n, random_state=rng)
        # guard against round-off at the edges
        values = np.clip(np.asarray(values, dtype=np.float64), low, high)

        logger.debug(f"Sampled {n} efficiencies from N({mean}, {sd}) on [{low}, {high}]")
        return values


def sample_efficiencies(
    n: int,
    params: BiasParams,
    rng: np.random.Generator,
    sampler: Optional[BiasSampler] = None,
) -> np.ndarray:
    """Draw per-oligo efficiencies described by a BiasParams."""
    sampler = sampler if sampler is not None else BiasSampler()
    return sampler.sample(n, params.low, params.high, params.mean, params.sd, rng)
