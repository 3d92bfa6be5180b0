"""
Absorption by atomic and molecular lines in LTE.
"""

from typing import Callable, Mapping, Optional, Sequence

import numpy as np

from stellarsynth.atomic.data import AtomicData, default_atomic_data
from stellarsynth.atomic.structures import Species, Transition
from stellarsynth.core.constants import (
    BROADENING_REFERENCE_T,
    C_CGS,
    ELECTRON_CHARGE_CGS,
    ELECTRON_MASS_CGS,
    HPLANCK_EV,
    KBOLTZ_EV,
)
from stellarsynth.core.grid import move_bounds
from stellarsynth.core.logging_config import get_logger
from stellarsynth.radiation.profiles import (
    doppler_sigma,
    inverse_gaussian_density,
    inverse_lorentz_density,
    lorentz_hwhm,
    voigt_profile,
)

logger = get_logger("radiation.line_absorption")

H_I = Species("H", 0)


def sigma_line(wavelength_cm: float) -> float:
    """
    Cross-section (cm^2 per unit oscillator strength, per cm of wavelength).

    (pi e^2 / m_e c) * (lambda^2 / c)
    """
    return (
        np.pi * ELECTRON_CHARGE_CGS**2 / (ELECTRON_MASS_CGS * C_CGS)
        * wavelength_cm**2 / C_CGS
    )


def damping_rate(
    line: Transition, T: float, n_e: float, n_HI: float
) -> float:
    """
    Total Lorentzian damping rate (s^-1) of a line in one layer.

    Stark and van der Waals terms scale with temperature from their values
    at 10^4 K and are not applied to molecular lines.
    """
    gamma = line.gamma_rad
    if not line.species.is_molecule:
        t = T / BROADENING_REFERENCE_T
        gamma += n_e * line.gamma_stark * t ** (1.0 / 6.0)
        gamma += n_HI * line.vdW * t**0.3
    return gamma


class LineAbsorption:
    """
    Voigt-profile line absorption, truncated where it becomes negligible.

    Each line is evaluated only over the wavelengths where its profile
    exceeds ``cutoff_threshold`` times the continuum absorption at the line
    center. The window is the quadrature sum of the distances at which the
    Gaussian and Lorentzian components fall to that level.

    Parameters
    ----------
    atomic_data : AtomicData, optional
        Source of species masses; defaults to the packaged tables
    """

    def __init__(self, atomic_data: Optional[AtomicData] = None):
        self.atomic_data = atomic_data if atomic_data is not None else default_atomic_data()

    def accumulate(
        self,
        alpha: np.ndarray,
        linelist: Sequence[Transition],
        wavelengths: np.ndarray,
        temps: np.ndarray,
        electron_densities: np.ndarray,
        number_densities: Mapping[Species, np.ndarray],
        partition_funcs: Mapping[Species, Callable[[float], float]],
        vmic: float,
        continuum: Sequence[Callable[[float], float]],
        cutoff_threshold: float,
    ) -> None:
        """
        Add line absorption to ``alpha`` in place.

        Parameters
        ----------
        alpha : array
            Absorption matrix (layers x wavelengths) in cm^-1
        linelist : sequence of Transition
            Lines, ascending in wavelength
        wavelengths : array
            Ascending wavelengths in cm
        temps, electron_densities : array
            Per-layer temperature (K) and electron density (cm^-3)
        number_densities : Mapping[Species, array]
            Per-layer number densities (cm^-3)
        partition_funcs : Mapping[Species, callable]
            Partition functions
        vmic : float
            Microturbulent velocity in cm/s
        continuum : sequence of callables
            Per-layer continuum absorption as a function of wavelength (cm)
        cutoff_threshold : float
            Fraction of the continuum below which line wings are dropped
        """
        n_layers = alpha.shape[0]
        n_HI = number_densities.get(H_I, np.zeros(n_layers))
        missing = set()

        for line in linelist:
            species = line.species
            if species not in number_densities or species not in partition_funcs:
                if species not in missing:
                    logger.warning(f"Skipping lines of {species}: no number densities available")
                    missing.add(species)
                continue

            mass = self.atomic_data.species_mass(species)
            n_species = number_densities[species]
            base = 10**line.log_gf * sigma_line(line.wl)

            lower, upper = 0, 0
            for i in range(n_layers):
                T = temps[i]
                kT = KBOLTZ_EV * T
                levels = n_species[i] * np.exp(-line.E_lower / kT) / partition_funcs[species](T)
                amplitude = base * levels * -np.expm1(-HPLANCK_EV * C_CGS / (line.wl * kT))
                if not amplitude > 0:
                    continue

                sigma = doppler_sigma(line.wl, T, mass, vmic)
                gamma = lorentz_hwhm(
                    line.wl, damping_rate(line, T, electron_densities[i], n_HI[i])
                )

                rho_crit = cutoff_threshold * float(continuum[i](line.wl)) / amplitude
                window = np.hypot(
                    inverse_gaussian_density(rho_crit, sigma),
                    inverse_lorentz_density(rho_crit, gamma),
                )
                lower, upper = move_bounds(wavelengths, lower, upper, line.wl, window)
                if lower == upper:
                    continue

                alpha[i, lower:upper] += voigt_profile(
                    wavelengths[lower:upper], line.wl, sigma, gamma, amplitude
                )
