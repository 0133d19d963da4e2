"""Optimization utilities: parallel grid-config sweeps."""

from .sweep import ParameterSweep
from .results import SweepResults

__all__ = [
    "ParameterSweep",
    "SweepResults",
]
