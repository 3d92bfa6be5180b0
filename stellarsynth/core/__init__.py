"""
Core numerical kernels and utilities.

This module provides:
- Physical constants
- Units and air/vacuum wavelength conversion
- Wavelength grids and sorted-array windowing
- Configuration and logging
- Protocols for the physics collaborators
"""

from stellarsynth.core import constants
from stellarsynth.core import units
from stellarsynth.core import config
from stellarsynth.core import logging_config
from stellarsynth.core.grid import WavelengthGrid, move_bounds
from stellarsynth.core.abc import (
    EquilibriumSolver,
    ContinuumOpacityModel,
    HydrogenLineModel,
    LineAbsorptionModel,
    TransferSolver,
)

__all__ = [
    # Modules
    "constants",
    "units",
    "config",
    "logging_config",
    # Grids
    "WavelengthGrid",
    "move_bounds",
    # Protocols
    "EquilibriumSolver",
    "ContinuumOpacityModel",
    "HydrogenLineModel",
    "LineAbsorptionModel",
    "TransferSolver",
]
