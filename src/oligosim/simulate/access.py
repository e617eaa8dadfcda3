"""
Simulate random access retrieval from a DNA storage pool.

Pipeline:
1. Build the storage pool - n oligos at constant redundancy
2. Stage 1 - split into target / non-target and amplify each
3. Nested stages - split desired and spurious pools again and re-amplify
4. Statistics - detection threshold, false negatives, false positives
"""

import logging
from pathlib import Path
from typing import List, Optional

logger = logging.getLogger(__name__)


def run_random_access_simulation(
    output_dir: str,
    # Pool
    n: Optional[int] = None,
    redundancy: Optional[int] = None,
    # Single-stage shortcut (ignored when the config file defines stages)
    target_percent: Optional[float] = None,
    cycles: Optional[int] = None,
    pcr_eff: Optional[float] = None,
    spurious_eff: Optional[float] = None,
    nested: int = 0,
    # Detection / engine
    threshold_ratio: Optional[float] = None,
    mode: Optional[str] = None,
    # Options
    seed: Optional[int] = None,
    config_file: Optional[str] = None,
    save_pools: bool = False,
    sample: str = "",
) -> List:
    """
    Run one (possibly nested) random access simulation.

    Args:
        output_dir: Output directory
        n: Number of distinct oligos
        redundancy: Initial copies per oligo
        target_percent: Fraction of each pool targeted per stage
        cycles: PCR cycles per stage
        pcr_eff: Target amplification efficiency in [1,2]
        spurious_eff: Off-target amplification efficiency in [1,2]
        nested: Extra nested stages repeating the last stage
        threshold_ratio: Detection threshold as a fraction of the desired mean
        mode: "stochastic" or "deterministic"
        seed: Random seed
        config_file: YAML/JSON config file (CLI values override it)
        save_pools: Also write the amplified pools as .npz
        sample: Prefix for output files

    Outputs:
        - outcomes.tsv: One row per stage with error statistics
        - pools.npz: Desired/spurious pools per stage (with save_pools)
        - config_used.yaml: Configuration used for simulation

    Returns:
        List of StageOutcome, one per stage
    """
    from .pcr.config import SimConfig, StageParams, get_default_config
    from .pcr.errors import ConfigError
    from .pcr.random_access import simulate_config
    from .pcr.io_utils import write_outcomes, save_pools as write_pools

    if nested < 0:
        raise ConfigError(f"nested must be >= 0, got {nested}")

    if config_file:
        config = SimConfig.from_file(config_file)
    else:
        config = get_default_config()

    if seed is not None:
        config.seed = seed
    if n is not None:
        config.pool.n = n
    if redundancy is not None:
        config.pool.redundancy = redundancy
    if threshold_ratio is not None:
        config.threshold_ratio = threshold_ratio
    if mode:
        config.mode = mode

    last = config.stages[-1] if config.stages else StageParams()
    stage = StageParams(
        target_percent=target_percent if target_percent is not None else last.target_percent,
        cycles=cycles if cycles is not None else last.cycles,
        pcr_eff=pcr_eff if pcr_eff is not None else last.pcr_eff,
        spurious_eff=spurious_eff if spurious_eff is not None else last.spurious_eff,
    )
    if not config.stages:
        config.stages = [stage]
    elif any(v is not None for v in (target_percent, cycles, pcr_eff, spurious_eff)):
        config.stages[-1] = stage
    config.stages.extend(
        StageParams(**stage.to_dict()) for _ in range(nested)
    )

    problems = config.validate()
    if problems:
        raise ConfigError("; ".join(problems))

    logger.info("PCR random access simulation")
    logger.info(f"Pool: n={config.pool.n}, redundancy={config.pool.redundancy}")
    logger.info(
        f"Mode: {config.mode}, stages: {config.depth}, "
        f"threshold_ratio={config.threshold_ratio}, seed={config.seed}"
    )

    outcomes = simulate_config(config)

    final = outcomes[-1]
    logger.info(
        f"Stage {final.stage}: FN={final.false_negative_count} "
        f"({final.false_negative_percent:.2f}%), FP={final.false_positive_count} "
        f"({final.false_positive_percent:.2f}%)"
    )

    output_path = Path(output_dir)
    output_path.mkdir(parents=True, exist_ok=True)
    prefix = sample or ""
    if prefix and not prefix.endswith(("_", "-", ".")):
        prefix = f"{prefix}_"

    write_outcomes(outcomes, output_path / f"{prefix}outcomes.tsv")
    if save_pools:
        write_pools(outcomes, output_path / f"{prefix}pools.npz")
    config.to_yaml(output_path / f"{prefix}config_used.yaml")

    return outcomes


def run_amplification(
    n: int = 10,
    redundancy: int = 10,
    efficiency: float = 2.0,
    cycles: int = 10,
    threshold_ratio: float = 0.1,
    mode: str = "deterministic",
    seed: Optional[int] = None,
):
    """
    Amplify a whole storage pool without random access and summarise detection.

    Returns:
        PoolSummary
    """
    import numpy as np

    from .pcr.engine import AmplificationEngine
    from .pcr.random_access import initial_pool, simulate_retrieval

    rng = np.random.default_rng(seed)
    engine = AmplificationEngine(mode, rng=rng)
    pool = initial_pool(n, redundancy, dtype=engine.dtype)
    summary = simulate_retrieval(pool, efficiency, cycles, threshold_ratio, engine)
    logger.info(
        f"Amplified {n} oligos x{redundancy} for {cycles} cycles: mean={summary.mean:.4g}, "
        f"threshold={summary.threshold:.4g}, FN={summary.false_negative_count}"
    )
    return summary
