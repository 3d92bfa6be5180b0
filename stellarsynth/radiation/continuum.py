"""
Continuum absorption from hydrogen and free electrons.
"""

from typing import Callable, Mapping

import numpy as np

from stellarsynth.atomic.structures import Species
from stellarsynth.core.constants import (
    HPLANCK_EV,
    KBOLTZ_EV,
    RYDBERG_H_EV,
    SIGMA_THOMSON_CGS,
)
from stellarsynth.core.logging_config import get_logger

logger = get_logger("radiation.continuum")

H_I = Species("H", 0)
H_II = Species("H", 1)

# Kramers cross-section constant: sigma_n = KRAMERS_BF / (n^5 nu^3) cm^2
KRAMERS_BF = 2.815e29
# Hydrogenic free-free constant (Gray, eq. 8.10) in cgs
KRAMERS_FF = 3.692e8


def hydrogen_bf_cross_section(frequencies: np.ndarray, n: int) -> np.ndarray:
    """
    Kramers photoionization cross-section of hydrogen level ``n`` in cm^2.

    Zero below the ionization threshold of the level.
    """
    nu = np.asarray(frequencies, dtype=float)
    threshold = RYDBERG_H_EV / (n**2 * HPLANCK_EV)
    return np.where(nu >= threshold, KRAMERS_BF / (n**5 * nu**3), 0.0)


class HydrogenicContinuum:
    """
    Continuum opacity of a hydrogen-dominated gas.

    Contributions:
    - H I bound-free from levels 1..n_max (Kramers, Gaunt factor 1),
      with Boltzmann level populations
    - H II free-free
    - Thomson scattering by free electrons

    Absorption terms are corrected for stimulated emission.

    Parameters
    ----------
    n_max : int
        Highest bound level included
    """

    def __init__(self, n_max: int = 8):
        if n_max < 1:
            raise ValueError("n_max must be at least 1")
        self.n_max = n_max

    def evaluate(
        self,
        frequencies: np.ndarray,
        T: float,
        n_e: float,
        number_densities: Mapping[Species, float],
        partition_funcs: Mapping[Species, Callable[[float], float]],
    ) -> np.ndarray:
        """
        Absorption coefficient at each frequency.

        Parameters
        ----------
        frequencies : array
            Ascending frequencies in Hz
        T : float
            Temperature in K
        n_e : float
            Electron number density in cm^-3
        number_densities : Mapping[Species, float]
            Species number densities in cm^-3
        partition_funcs : Mapping[Species, callable]
            Partition functions (H I is used)

        Returns
        -------
        array
            Absorption coefficient in cm^-1
        """
        nu = np.asarray(frequencies, dtype=float)
        kT = KBOLTZ_EV * T
        n_HI = number_densities.get(H_I, 0.0)
        n_HII = number_densities.get(H_II, 0.0)

        alpha = np.zeros_like(nu)
        if n_HI > 0:
            U_HI = partition_funcs[H_I](T)
            for n in range(1, self.n_max + 1):
                excitation = RYDBERG_H_EV * (1 - 1 / n**2)
                population = n_HI * 2 * n**2 / U_HI * np.exp(-excitation / kT)
                alpha += population * hydrogen_bf_cross_section(nu, n)

        alpha += KRAMERS_FF / (np.sqrt(T) * nu**3) * n_e * n_HII
        alpha *= -np.expm1(-HPLANCK_EV * nu / kT)
        alpha += SIGMA_THOMSON_CGS * n_e
        return alpha
