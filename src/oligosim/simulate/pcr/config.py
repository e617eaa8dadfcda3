"""
Configuration for PCR random access simulation.

Parameter groups:
A. Storage pool (2): n, redundancy
B. Stages (per stage 4): target_percent, cycles, pcr_eff, spurious_eff
C. Detection (1): threshold_ratio
D. Engine (2): mode, max_copies

An efficiency is either a fixed scalar in [1, 2] or a BiasParams mapping
describing a truncated normal from which per-oligo efficiencies are drawn.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Union, Literal
import json
import yaml

from .errors import ConfigError


# int64 headroom: one more doubling must still fit
DEFAULT_MAX_COPIES = 2 ** 62


@dataclass(frozen=True)
class BiasParams:
    """Truncated normal efficiency distribution."""
    mean: float = 1.85
    sd: float = 0.05
    low: float = 1.0
    high: float = 2.0

    def to_dict(self) -> dict:
        return {"mean": self.mean, "sd": self.sd, "low": self.low, "high": self.high}


Efficiency = Union[float, BiasParams]


def _serialize_eff(value: Efficiency) -> Union[float, dict]:
    if isinstance(value, BiasParams):
        return value.to_dict()
    return float(value)


def _deserialize_eff(value) -> Efficiency:
    if isinstance(value, BiasParams):
        return value
    if isinstance(value, dict):
        return BiasParams(**value)
    try:
        return float(value)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"Efficiency must be a number or a bias mapping, got {value!r}") from e


@dataclass
class PoolParams:
    """A. Storage pool"""
    n: int = 1000              # number of distinct oligos
    redundancy: int = 10       # initial copies per oligo


@dataclass
class StageParams:
    """B. One amplification stage"""
    target_percent: float = 0.5
    cycles: int = 10
    pcr_eff: Efficiency = 1.9        # target reaction efficiency
    spurious_eff: Efficiency = 1.1   # off-target/background efficiency

    def __post_init__(self):
        self.pcr_eff = _deserialize_eff(self.pcr_eff)
        self.spurious_eff = _deserialize_eff(self.spurious_eff)

    def to_dict(self) -> dict:
        return {
            "target_percent": self.target_percent,
            "cycles": self.cycles,
            "pcr_eff": _serialize_eff(self.pcr_eff),
            "spurious_eff": _serialize_eff(self.spurious_eff),
        }


@dataclass(frozen=True)
class StageConfig:
    """Immutable per-stage settings handed to the simulator."""
    target_percent: float
    cycles: int
    pcr_eff: Efficiency
    spurious_eff: Efficiency


@dataclass
class SimConfig:
    """Complete simulation configuration"""

    pool: PoolParams = field(default_factory=PoolParams)
    stages: List[StageParams] = field(default_factory=lambda: [StageParams()])
    threshold_ratio: float = 0.1
    mode: Literal["stochastic", "deterministic"] = "stochastic"
    max_copies: int = DEFAULT_MAX_COPIES
    seed: Optional[int] = None

    @property
    def depth(self) -> int:
        return len(self.stages)

    def stage_configs(self) -> List[StageConfig]:
        return [
            StageConfig(
                target_percent=s.target_percent,
                cycles=s.cycles,
                pcr_eff=s.pcr_eff,
                spurious_eff=s.spurious_eff,
            )
            for s in self.stages
        ]

    # =========================================================================
    # Serialization
    # =========================================================================

    def to_dict(self) -> dict:
        return {
            "pool": {
                "n": self.pool.n,
                "redundancy": self.pool.redundancy,
            },
            "stages": [s.to_dict() for s in self.stages],
            "threshold_ratio": self.threshold_ratio,
            "mode": self.mode,
            "max_copies": self.max_copies,
            "seed": self.seed,
        }

    @classmethod
    def from_dict(cls, d: dict) -> 'SimConfig':
        config = cls()
        try:
            if "pool" in d:
                config.pool = PoolParams(**d["pool"])
            if "stages" in d:
                config.stages = [StageParams(**s) for s in d["stages"]]
        except TypeError as e:
            raise ConfigError(f"Unknown configuration key: {e}") from e
        for key in ("threshold_ratio", "mode", "max_copies", "seed"):
            if key in d:
                setattr(config, key, d[key])
        return config

    @classmethod
    def from_yaml(cls, path: str) -> 'SimConfig':
        with open(path, 'r') as f:
            d = yaml.safe_load(f) or {}
        return cls.from_dict(d)

    def to_yaml(self, path: str):
        with open(path, 'w') as f:
            yaml.dump(self.to_dict(), f, default_flow_style=False, sort_keys=False)

    @classmethod
    def from_json(cls, path: str) -> 'SimConfig':
        with open(path, 'r') as f:
            d = json.load(f)
        return cls.from_dict(d)

    def to_json(self, path: str):
        with open(path, 'w') as f:
            json.dump(self.to_dict(), f, indent=2)

    @classmethod
    def from_file(cls, path: str) -> 'SimConfig':
        """Load YAML or JSON by extension."""
        if str(path).endswith(".json"):
            return cls.from_json(path)
        return cls.from_yaml(path)

    # =========================================================================
    # Validation
    # =========================================================================

    def validate(self) -> list:
        """Return a list of problems; empty when the configuration is usable."""
        problems = []

        if self.pool.n <= 0:
            problems.append("pool.n must be > 0")
        if self.pool.redundancy < 0:
            problems.append("pool.redundancy must be >= 0")
        elif self.mode == "stochastic" and not float(self.pool.redundancy).is_integer():
            problems.append("pool.redundancy must be a whole number in stochastic mode")

        if not self.stages:
            problems.append("at least one stage is required")
        for idx, stage in enumerate(self.stages, start=1):
            if not 0 < stage.target_percent < 1:
                problems.append(f"stage {idx}: target_percent must be in (0,1)")
            if not isinstance(stage.cycles, int) or stage.cycles < 0:
                problems.append(f"stage {idx}: cycles must be a non-negative integer")
            for name in ("pcr_eff", "spurious_eff"):
                problems.extend(_check_eff(getattr(stage, name), f"stage {idx}: {name}"))

        if not 0 < self.threshold_ratio < 1:
            problems.append("threshold_ratio must be in (0,1)")
        if self.mode not in ("stochastic", "deterministic"):
            problems.append(f"unknown mode: {self.mode}")
        if self.max_copies <= 0:
            problems.append("max_copies must be > 0")

        return problems


def _check_eff(eff: Efficiency, label: str) -> list:
    if isinstance(eff, BiasParams):
        problems = []
        if eff.low >= eff.high:
            problems.append(f"{label}: low must be < high")
        if eff.sd < 0:
            problems.append(f"{label}: sd must be >= 0")
        if eff.low < 1 or eff.high > 2:
            problems.append(f"{label}: bounds must lie within [1,2]")
        return problems
    if not 1 <= eff <= 2:
        return [f"{label}: must be in [1,2]"]
    return []


# =============================================================================
# Presets
# =============================================================================

def get_default_config() -> SimConfig:
    """Single-stage random access."""
    return SimConfig()


def get_nested_config() -> SimConfig:
    """Two-stage nested PCR with biased target efficiency."""
    config = SimConfig()
    config.stages = [
        StageParams(target_percent=0.5, cycles=10,
                    pcr_eff=BiasParams(mean=1.85, sd=0.05), spurious_eff=1.1),
        StageParams(target_percent=0.5, cycles=10,
                    pcr_eff=BiasParams(mean=1.85, sd=0.05), spurious_eff=1.1),
    ]
    return config
