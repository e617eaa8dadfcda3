"""
PCR random access simulator.

Amplifies oligo pools (deterministic or Galton-Watson), applies sequence
specific efficiency bias and nested random access stages, and reports false
negative / false positive rates.
"""

from .config import SimConfig, StageConfig, StageParams, PoolParams, BiasParams, get_default_config
from .errors import (
    OligoSimError,
    ConfigError,
    InvalidParameterError,
    InvalidPartitionError,
    InvalidStageError,
    NumericOverflowError,
)
from .bias import BiasSampler, sample_efficiencies
from .engine import AmplificationEngine, amplify_deterministic, amplify_stochastic
from .stats import summarize, summarize_random_access
from .random_access import (
    RandomAccessSimulator,
    StageOutcome,
    StageResult,
    initial_pool,
    partition,
    simulate_config,
    simulate_retrieval,
)

__all__ = [
    'SimConfig',
    'StageConfig',
    'StageParams',
    'PoolParams',
    'BiasParams',
    'get_default_config',
    'OligoSimError',
    'ConfigError',
    'InvalidParameterError',
    'InvalidPartitionError',
    'InvalidStageError',
    'NumericOverflowError',
    'BiasSampler',
    'sample_efficiencies',
    'AmplificationEngine',
    'amplify_deterministic',
    'amplify_stochastic',
    'summarize',
    'summarize_random_access',
    'RandomAccessSimulator',
    'StageOutcome',
    'StageResult',
    'initial_pool',
    'partition',
    'simulate_config',
    'simulate_retrieval',
]
