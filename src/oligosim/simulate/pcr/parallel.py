"""
Parallel evaluation of independent simulation jobs.

Jobs share no state. Each job gets its own child SeedSequence spawned from
the base seed, so results do not depend on worker count or scheduling order.
"""

import multiprocessing as mp
import logging
from typing import List, Optional, Sequence

import numpy as np

from .config import SimConfig
from .random_access import StageOutcome, simulate_config

logger = logging.getLogger(__name__)


def resolve_workers(requested: int, n_jobs: int) -> int:
    """Clamp a requested process count to the available CPUs and the job count; 0 means all CPUs."""
    cpus = mp.cpu_count()
    if requested <= 0:
        requested = cpus
    return max(1, min(requested, cpus, n_jobs))


def spawn_seeds(seed: Optional[int], n_jobs: int) -> List[np.random.SeedSequence]:
    """One independent stream per job."""
    return np.random.SeedSequence(seed).spawn(n_jobs)


def _worker_simulate(config: SimConfig, seed_seq: np.random.SeedSequence, job_id: int):
    rng = np.random.default_rng(seed_seq)
    return job_id, simulate_config(config, rng)


def parallel_simulate(
    configs: Sequence[SimConfig],
    num_workers: int = 1,
    seed: Optional[int] = None,
) -> List[List[StageOutcome]]:
    """
    Run several configurations, one outcome list per configuration, in input order.

    Args:
        configs: Independent simulation configurations
        num_workers: Worker processes, clamped to CPUs and jobs (0 uses all CPUs, 1 runs in-process)
        seed: Base seed for the spawned per-job streams

    Returns:
        List of per-stage outcome lists
    """
    if not configs:
        return []

    seeds = spawn_seeds(seed, len(configs))
    tasks = [(config, seed_seq, idx) for idx, (config, seed_seq) in enumerate(zip(configs, seeds))]

    worker_count = resolve_workers(num_workers, len(tasks))
    if worker_count == 1:
        results = [_worker_simulate(*task) for task in tasks]
    else:
        logger.info(f"Using {worker_count} workers for {len(tasks)} simulation jobs")
        with mp.Pool(worker_count) as pool:
            results = pool.starmap(_worker_simulate, tasks)

    ordered = dict(results)
    return [ordered[idx] for idx in range(len(tasks))]
