"""Simulation module for PCR random access on oligo pools."""

from oligosim.simulate.access import run_amplification, run_random_access_simulation

__all__ = [
    "run_random_access_simulation",
    "run_amplification",
]
