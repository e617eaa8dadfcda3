"""
oligosim: copy-number simulation of DNA storage pools under PCR.

This package provides tools for:
- Deterministic and stochastic (Galton-Watson) PCR amplification
- Sequence-specific efficiency bias sampling
- Random access and nested PCR stage simulation
- False negative / false positive retrieval statistics
"""

__version__ = "0.3.0"
__author__ = "oligosim Team"
