"""
Plasma state solvers.

This module provides:
- Partition functions
- Abundance resolution
- Saha ionization and molecular equilibrium
"""

from stellarsynth.plasma.partition import (
    ConstantPartitionFunction,
    PolynomialPartitionFunction,
    polynomial_partition_function,
)
from stellarsynth.plasma.saha import SahaEquilibriumSolver, SahaContext
from stellarsynth.plasma.abundances import get_absolute_abundances

__all__ = [
    "ConstantPartitionFunction",
    "PolynomialPartitionFunction",
    "polynomial_partition_function",
    "SahaEquilibriumSolver",
    "SahaContext",
    "get_absolute_abundances",
]
