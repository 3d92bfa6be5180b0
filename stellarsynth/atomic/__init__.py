"""
Atomic and molecular data.

This module provides:
- Species and line transition structures
- The packaged table of masses, solar abundances, ionization energies and
  ground-term statistical weights
"""

from stellarsynth.atomic.structures import Species, Transition, get_atoms, ATOMIC_SYMBOLS
from stellarsynth.atomic.data import AtomicData, default_atomic_data, load_atomic_data

__all__ = [
    "Species",
    "Transition",
    "get_atoms",
    "ATOMIC_SYMBOLS",
    "AtomicData",
    "default_atomic_data",
    "load_atomic_data",
]
