"""
Random access and nested PCR simulation.

A stage splits its input by position at floor(n * target_percent). In the
first stage the storage pool is split into target and non-target segments.
In every later stage both the prior desired pool and the prior spurious pool
are split again:

    target of desired       -- pcr_eff      --> desired pool
    non-target of desired   -- spurious_eff --> spurious (1)
    target of spurious      -- pcr_eff      --> spurious (2)
    non-target of spurious  -- spurious_eff --> spurious (3)

Prior off-target molecules that carry the later stage's primer site amplify
with the target efficiency. The number of oligos is conserved across a stage.
"""

import logging
import math
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

import numpy as np

from .bias import BiasSampler
from .config import BiasParams, Efficiency, StageConfig
from .engine import AmplificationEngine
from .errors import InvalidPartitionError, InvalidStageError, InvalidParameterError
from .stats import PoolSummary, summarize, summarize_random_access

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StageResult:
    """Pools produced by one stage, handed to the next"""
    stage: int
    desired_pool: np.ndarray
    spurious_pool: np.ndarray


@dataclass(frozen=True)
class StageOutcome:
    """Reported result of a (target_percent, stage) simulation"""
    stage: int
    target_percent: float
    desired_pool: np.ndarray
    spurious_pool: np.ndarray
    mean: float
    threshold: float
    false_negative_count: int
    false_negative_percent: float
    false_positive_count: int
    false_positive_percent: float


def initial_pool(n: int, redundancy: float, dtype=np.int64) -> np.ndarray:
    """Storage pool of n oligos at constant redundancy."""
    if n <= 0:
        raise InvalidParameterError(f"pool size must be > 0, got {n}")
    if redundancy < 0:
        raise InvalidParameterError(f"redundancy must be >= 0, got {redundancy}")
    if np.issubdtype(dtype, np.integer) and not float(redundancy).is_integer():
        raise InvalidParameterError(f"integer pools need a whole redundancy, got {redundancy}")
    return np.full(n, redundancy, dtype=dtype)


_ROUND_TOL = 1e-9


def _floor_count(size: int, fraction: float) -> int:
    """floor(size * fraction), treating products within _ROUND_TOL of an integer as that integer."""
    product = size * fraction
    nearest = round(product)
    if abs(product - nearest) < _ROUND_TOL:
        return int(nearest)
    return math.floor(product)


def partition(pool, target_percent: float) -> Tuple[np.ndarray, np.ndarray]:
    """
    Split a pool into a target prefix of floor(n * target_percent) oligos and
    a non-target suffix.

    Raises:
        InvalidPartitionError: target_percent outside (0,1) or an empty segment
    """
    if not 0 < target_percent < 1:
        raise InvalidPartitionError(f"target_percent must be in (0,1), got {target_percent}")
    arr = np.asarray(pool)
    cut = _floor_count(arr.size, target_percent)
    if cut == 0 or cut == arr.size:
        raise InvalidPartitionError(
            f"target_percent {target_percent} on {arr.size} oligos leaves an empty segment"
        )
    return arr[:cut], arr[cut:]


class RandomAccessSimulator:
    """Drives the amplification engine through random access stages"""

    def __init__(
        self,
        engine: AmplificationEngine,
        threshold_ratio: float = 0.1,
        rng: Optional[np.random.Generator] = None,
        sampler: Optional[BiasSampler] = None,
    ):
        self.engine = engine
        self.threshold_ratio = threshold_ratio
        self.rng = rng if rng is not None else engine.rng
        self.sampler = sampler if sampler is not None else BiasSampler()

    def _efficiency(self, eff: Efficiency, size: int):
        if isinstance(eff, BiasParams):
            if self.rng is None:
                raise InvalidParameterError("biased efficiencies require an explicit rng")
            return self.sampler.sample(size, eff.low, eff.high, eff.mean, eff.sd, self.rng)
        return eff

    def _amplify(self, segment: np.ndarray, eff: Efficiency, cycles: int) -> np.ndarray:
        return self.engine.amplify(segment, self._efficiency(eff, segment.size), cycles)

    def run_stage(
        self,
        pool,
        config: StageConfig,
        prior: Optional[StageResult] = None,
    ) -> StageResult:
        """
        Run one stage.

        Args:
            pool: Storage pool (used only when prior is None)
            config: Target fraction, cycles and efficiencies of this stage
            prior: Result of the previous stage, None for the first stage

        Returns:
            StageResult of this stage
        """
        if prior is None:
            target, nontarget = partition(pool, config.target_percent)
            desired = self._amplify(target, config.pcr_eff, config.cycles)
            spurious = self._amplify(nontarget, config.spurious_eff, config.cycles)
            stage = 1
        else:
            _check_prior(prior)
            d_target, d_nontarget = partition(prior.desired_pool, config.target_percent)
            s_target, s_nontarget = partition(prior.spurious_pool, config.target_percent)
            desired = self._amplify(d_target, config.pcr_eff, config.cycles)
            spurious = np.concatenate([
                self._amplify(d_nontarget, config.spurious_eff, config.cycles),
                self._amplify(s_target, config.pcr_eff, config.cycles),
                self._amplify(s_nontarget, config.spurious_eff, config.cycles),
            ])
            stage = prior.stage + 1

        logger.info(
            f"Stage {stage}: target_percent={config.target_percent}, cycles={config.cycles}, "
            f"desired={len(desired)}, spurious={len(spurious)}"
        )
        return StageResult(stage=stage, desired_pool=desired, spurious_pool=spurious)

    def _outcome(self, result: StageResult, target_percent: float) -> StageOutcome:
        summary = summarize_random_access(
            result.desired_pool, result.spurious_pool, self.threshold_ratio
        )
        return StageOutcome(
            stage=result.stage,
            target_percent=target_percent,
            desired_pool=result.desired_pool,
            spurious_pool=result.spurious_pool,
            mean=summary.mean,
            threshold=summary.threshold,
            false_negative_count=summary.false_negative_count,
            false_negative_percent=summary.false_negative_percent,
            false_positive_count=summary.false_positive_count,
            false_positive_percent=summary.false_positive_percent,
        )

    def simulate_all(self, pool, stages: Sequence[StageConfig]) -> List[StageOutcome]:
        """Run every stage in order and report an outcome after each one."""
        if not stages:
            raise InvalidStageError("at least one stage is required")
        outcomes = []
        result = None
        for config in stages:
            result = self.run_stage(pool, config, prior=result)
            outcomes.append(self._outcome(result, config.target_percent))
        return outcomes

    def simulate(self, pool, stages: Sequence[StageConfig]) -> StageOutcome:
        """Run the requested nesting depth and report the final stage."""
        return self.simulate_all(pool, stages)[-1]


def _check_prior(prior: StageResult):
    desired = np.asarray(prior.desired_pool)
    spurious = np.asarray(prior.spurious_pool)
    if desired.size == 0:
        raise InvalidStageError(f"stage {prior.stage} produced an empty desired pool")
    if spurious.size == 0:
        raise InvalidStageError(f"stage {prior.stage} has no spurious pool to nest against")
    if desired.min() < 0 or spurious.min() < 0:
        raise InvalidStageError(f"stage {prior.stage} pools contain negative copy numbers")


def simulate_retrieval(
    pool,
    efficiency,
    cycles: int,
    threshold_ratio: float,
    engine: AmplificationEngine,
) -> PoolSummary:
    """Amplify the whole pool and summarise detection (no random access)."""
    return summarize(engine.amplify(pool, efficiency, cycles), threshold_ratio)


def simulate_config(config, rng: Optional[np.random.Generator] = None) -> List[StageOutcome]:
    """
    Run one SimConfig end to end.

    Args:
        config: SimConfig
        rng: Random generator; built from config.seed when omitted

    Returns:
        One StageOutcome per configured stage
    """
    rng = rng if rng is not None else np.random.default_rng(config.seed)
    engine = AmplificationEngine(config.mode, rng=rng, max_copies=config.max_copies)
    pool = initial_pool(config.pool.n, config.pool.redundancy, dtype=engine.dtype)
    simulator = RandomAccessSimulator(engine, config.threshold_ratio, rng=rng)
    return simulator.simulate_all(pool, config.stage_configs())
