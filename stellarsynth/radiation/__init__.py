"""
Radiation and spectral calculations.

This module provides:
- Line profiles
- Continuum, hydrogen line and general line opacity
- The Planck function
- Radiative transfer solvers (plane-parallel, spherical)
"""

from stellarsynth.radiation.profiles import gaussian_profile, lorentzian_profile, voigt_profile
from stellarsynth.radiation.blackbody import blackbody
from stellarsynth.radiation.continuum import HydrogenicContinuum
from stellarsynth.radiation.hydrogen_lines import HydrogenLineOpacity
from stellarsynth.radiation.line_absorption import LineAbsorption
from stellarsynth.radiation.transfer import RadiativeTransfer

__all__ = [
    "gaussian_profile",
    "lorentzian_profile",
    "voigt_profile",
    "blackbody",
    "HydrogenicContinuum",
    "HydrogenLineOpacity",
    "LineAbsorption",
    "RadiativeTransfer",
]
