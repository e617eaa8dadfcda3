"""
PCR amplification engine.

Two growth models share one signature, amplify(pool, efficiency, cycles):

- deterministic: result = pool * efficiency ** cycles
- stochastic:    every round, pool += Binomial(pool, efficiency - 1)
                 (discrete-time Galton-Watson branching process)

Input pools are never modified; each call returns a new array.
"""

import logging
import numbers
from typing import Optional, Union, Literal

import numpy as np

from .config import DEFAULT_MAX_COPIES
from .errors import InvalidParameterError, NumericOverflowError

logger = logging.getLogger(__name__)

# one more doubling of any entry must still fit in int64
_INT64_HEADROOM = np.iinfo(np.int64).max // 2

EfficiencyLike = Union[float, np.ndarray]


def _check_cycles(cycles) -> int:
    if isinstance(cycles, bool) or not isinstance(cycles, numbers.Integral):
        raise InvalidParameterError(f"cycles must be an integer, got {cycles!r}")
    if cycles < 0:
        raise InvalidParameterError(f"cycles must be >= 0, got {cycles}")
    return int(cycles)


def _check_pool(pool) -> np.ndarray:
    arr = np.asarray(pool)
    if arr.ndim != 1:
        raise InvalidParameterError(f"pool must be one-dimensional, got shape {arr.shape}")
    if arr.size and not np.issubdtype(arr.dtype, np.number):
        raise InvalidParameterError(f"pool must be numeric, got dtype {arr.dtype}")
    if arr.size and not np.all(np.isfinite(arr)):
        raise InvalidParameterError("pool contains non-finite copy numbers")
    if arr.size and arr.min() < 0:
        raise InvalidParameterError("pool contains negative copy numbers")
    return arr


def _check_efficiency(efficiency, size: int) -> np.ndarray:
    eff = np.asarray(efficiency, dtype=np.float64)
    if eff.ndim > 1:
        raise InvalidParameterError(f"efficiency must be scalar or 1-D, got shape {eff.shape}")
    if eff.ndim == 1 and eff.size != size:
        raise InvalidParameterError(
            f"efficiency length {eff.size} does not match pool length {size}"
        )
    if eff.size and (np.any(~np.isfinite(eff)) or eff.min() < 1.0 or eff.max() > 2.0):
        raise InvalidParameterError("efficiency must lie within [1, 2]")
    return eff


def amplify_deterministic(
    pool,
    efficiency: EfficiencyLike,
    cycles: int,
    max_copies: float = DEFAULT_MAX_COPIES,
) -> np.ndarray:
    """
    Exact exponential growth: result[i] = pool[i] * efficiency[i] ** cycles.

    Raises:
        InvalidParameterError: Bad pool, efficiency or cycle count
        NumericOverflowError: Result not finite or above max_copies
    """
    cycles = _check_cycles(cycles)
    arr = _check_pool(pool)
    eff = _check_efficiency(efficiency, arr.size)

    with np.errstate(over="ignore", invalid="ignore"):
        result = arr.astype(np.float64) * np.power(eff, cycles)

    if result.size and (not np.all(np.isfinite(result)) or result.max() > max_copies):
        raise NumericOverflowError(
            f"deterministic amplification over {cycles} cycles exceeds {max_copies:.3g} copies"
        )
    return result


def amplify_stochastic(
    pool,
    efficiency: EfficiencyLike,
    cycles: int,
    rng: np.random.Generator,
    max_copies: int = DEFAULT_MAX_COPIES,
) -> np.ndarray:
    """
    Galton-Watson amplification.

    Each round every present molecule independently yields one duplicate with
    probability efficiency - 1. Rounds use the current counts, so a zero
    entry stays zero forever.

    Raises:
        InvalidParameterError: Bad pool, efficiency, cycle count or missing rng
        NumericOverflowError: A count would pass max_copies (or int64 headroom)
    """
    if rng is None:
        raise InvalidParameterError("stochastic amplification requires an explicit rng")
    cycles = _check_cycles(cycles)
    arr = _check_pool(pool)
    eff = _check_efficiency(efficiency, arr.size)

    if arr.size and not np.issubdtype(arr.dtype, np.integer):
        if not np.all(np.floor(arr) == arr):
            raise InvalidParameterError("stochastic amplification needs integer copy numbers")
    counts = arr.astype(np.int64, copy=True)
    p = eff - 1.0
    limit = min(int(max_copies), _INT64_HEADROOM)

    for cycle in range(cycles):
        if counts.size and counts.max() > limit:
            raise NumericOverflowError(
                f"copy number {int(counts.max())} exceeds limit {limit} before cycle {cycle + 1}"
            )
        counts += rng.binomial(counts, p)

    if counts.size and counts.max() > limit:
        raise NumericOverflowError(
            f"copy number {int(counts.max())} exceeds limit {limit} after {cycles} cycles"
        )
    return counts


class AmplificationEngine:
    """PCR amplification in deterministic or stochastic mode"""

    def __init__(
        self,
        mode: Literal["stochastic", "deterministic"] = "stochastic",
        rng: Optional[np.random.Generator] = None,
        max_copies: int = DEFAULT_MAX_COPIES,
    ):
        if mode not in ("stochastic", "deterministic"):
            raise InvalidParameterError(f"unknown amplification mode: {mode}")
        if mode == "stochastic" and rng is None:
            raise InvalidParameterError("stochastic mode requires an explicit rng")
        self.mode = mode
        self.rng = rng
        self.max_copies = max_copies

    @property
    def dtype(self):
        return np.int64 if self.mode == "stochastic" else np.float64

    def amplify(self, pool, efficiency: EfficiencyLike, cycles: int) -> np.ndarray:
        """Advance pool through `cycles` rounds; returns a new pool."""
        if self.mode == "deterministic":
            result = amplify_deterministic(pool, efficiency, cycles, self.max_copies)
        else:
            result = amplify_stochastic(pool, efficiency, cycles, self.rng, self.max_copies)
        logger.debug(
            f"{self.mode} amplification: {len(result)} oligos, {cycles} cycles, "
            f"total {float(np.sum(result)):.4g} copies"
        )
        return result
