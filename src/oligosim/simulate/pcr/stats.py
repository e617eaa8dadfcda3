"""
Retrieval error statistics.

The detection threshold is threshold_ratio times the mean copy number of the
desired (on-target) pool. A desired oligo strictly below it is a false
negative; a spurious oligo strictly above it is a false positive. Both rates
are expressed per desired oligo, so the false positive percentage can exceed
100 when the spurious pool is larger than the desired pool.
"""

from dataclasses import dataclass

import numpy as np

from .errors import InvalidParameterError


@dataclass(frozen=True)
class PoolSummary:
    """Detection summary of a single amplified pool"""
    mean: float
    threshold: float
    false_negative_count: int
    false_negative_percent: float


@dataclass(frozen=True)
class AccessSummary:
    """Detection summary of a random access reaction"""
    mean: float
    threshold: float
    false_negative_count: int
    false_negative_percent: float
    false_positive_count: int
    false_positive_percent: float


def _check_ratio(threshold_ratio: float):
    if not 0 < threshold_ratio < 1:
        raise InvalidParameterError(f"threshold_ratio must be in (0,1), got {threshold_ratio}")


def summarize(pool, threshold_ratio: float) -> PoolSummary:
    """
    Threshold and false negatives of one amplified pool.

    Args:
        pool: Amplified copy numbers
        threshold_ratio: Fraction of the mean used as detection threshold

    Returns:
        PoolSummary
    """
    _check_ratio(threshold_ratio)
    arr = np.asarray(pool, dtype=np.float64)
    if arr.size == 0:
        raise InvalidParameterError("cannot summarize an empty pool")

    mean = float(arr.mean())
    threshold = mean * threshold_ratio
    fn = int(np.count_nonzero(arr < threshold))
    return PoolSummary(
        mean=mean,
        threshold=threshold,
        false_negative_count=fn,
        false_negative_percent=fn / arr.size * 100,
    )


def summarize_random_access(desired_pool, spurious_pool, threshold_ratio: float) -> AccessSummary:
    """
    Threshold from the desired pool; false negatives from the desired pool and
    false positives from the spurious pool, both per desired oligo.
    """
    base = summarize(desired_pool, threshold_ratio)
    spurious = np.asarray(spurious_pool, dtype=np.float64)
    fp = int(np.count_nonzero(spurious > base.threshold))
    n_desired = np.asarray(desired_pool).size
    return AccessSummary(
        mean=base.mean,
        threshold=base.threshold,
        false_negative_count=base.false_negative_count,
        false_negative_percent=base.false_negative_percent,
        false_positive_count=fp,
        false_positive_percent=fp / n_desired * 100,
    )
