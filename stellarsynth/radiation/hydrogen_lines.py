"""
Hydrogen line absorption.

Lines of the Lyman, Balmer, Paschen and Brackett series are modelled with
Kramers oscillator strengths and Voigt profiles. The Lorentzian component
combines classical radiative damping with a linear Stark width estimated
from the Holtsmark normal field strength.
"""

from typing import Callable, Iterator, Mapping, Optional, Tuple

import numpy as np

from stellarsynth.core.constants import (
    BOHR_RADIUS_CGS,
    C_CGS,
    ELECTRON_CHARGE_CGS,
    ELECTRON_MASS_CGS,
    HPLANCK_CGS,
    HPLANCK_EV,
    KBOLTZ_EV,
    RYDBERG_H_CM,
    RYDBERG_H_EV,
)
from stellarsynth.core.logging_config import get_logger
from stellarsynth.radiation.profiles import doppler_sigma, lorentz_hwhm, voigt_profile

logger = get_logger("radiation.hydrogen_lines")

HYDROGEN_MASS_AMU = 1.008

SERIES_NAMES = {1: "Lyman", 2: "Balmer", 3: "Paschen", 4: "Brackett"}

# Tabulated profiles: (lower, upper) -> f(offsets_cm, T, n_e) with unit area
ProfileTable = Mapping[Tuple[int, int], Callable[[np.ndarray, float, float], np.ndarray]]


def hydrogen_wavelength(lower: int, upper: int) -> float:
    """Vacuum wavelength (cm) of the transition lower -> upper."""
    return 1.0 / (RYDBERG_H_CM * (1.0 / lower**2 - 1.0 / upper**2))


def kramers_oscillator_strength(lower: int, upper: int) -> float:
    """
    Absorption oscillator strength in the Kramers (semi-classical) approximation.

    f = 32 / (3 sqrt(3) pi) * 1 / (l^5 u^3) * (1/l^2 - 1/u^2)^-3
    """
    return (
        32.0 / (3.0 * np.sqrt(3.0) * np.pi)
        / (lower**5 * upper**3)
        / (1.0 / lower**2 - 1.0 / upper**2) ** 3
    )


def holtsmark_field(n_e: float) -> float:
    """Holtsmark normal field strength (cgs) for perturber density n_e."""
    return 2.61 * ELECTRON_CHARGE_CGS * n_e ** (2.0 / 3.0)


def stark_hwhm(lower: int, upper: int, wavelength_cm: float, n_e: float) -> float:
    """
    Linear Stark half-width (cm) of a hydrogen line.

    Uses the splitting of the outermost components of the upper level in the
    Holtsmark field, dnu = 3/2 e a0 F0 (u^2 - l^2) / h.
    """
    dnu = (
        1.5 * ELECTRON_CHARGE_CGS * BOHR_RADIUS_CGS * holtsmark_field(n_e)
        * (upper**2 - lower**2) / HPLANCK_CGS
    )
    return wavelength_cm**2 * dnu / C_CGS


class HydrogenLineOpacity:
    """
    Hydrogen line opacity model.

    Parameters
    ----------
    lower_levels : tuple of int
        Lower levels of the series included (1 = Lyman, 2 = Balmer, ...)
    max_upper : int
        Highest upper level included in each series
    window_cm : float
        Lines whose centers are farther than this from the grid are skipped
    """

    def __init__(
        self,
        lower_levels: Tuple[int, ...] = (1, 2, 3, 4),
        max_upper: int = 30,
        window_cm: float = 1e-6,
    ):
        if any(level < 1 for level in lower_levels):
            raise ValueError("Hydrogen levels start at 1")
        if max_upper <= max(lower_levels):
            raise ValueError("max_upper must exceed every lower level")
        self.lower_levels = tuple(lower_levels)
        self.max_upper = max_upper
        self.window_cm = window_cm

    def transitions(self) -> Iterator[Tuple[int, int, float]]:
        """Yield ``(lower, upper, wavelength_cm)`` for every included line."""
        for lower in self.lower_levels:
            for upper in range(lower + 1, self.max_upper + 1):
                yield lower, upper, hydrogen_wavelength(lower, upper)

    def evaluate(
        self,
        wavelengths: np.ndarray,
        T: float,
        n_e: float,
        n_HI: float,
        U_HI: float,
        profile_table: Optional[ProfileTable],
        doppler_velocity: float,
    ) -> np.ndarray:
        """
        Hydrogen line absorption coefficient.

        Parameters
        ----------
        wavelengths : array
            Ascending wavelengths in cm
        T : float
            Temperature in K
        n_e : float
            Electron number density in cm^-3
        n_HI : float
            Neutral hydrogen number density in cm^-3
        U_HI : float
            Partition function of neutral hydrogen
        profile_table : mapping, optional
            Tabulated unit-area profiles by ``(lower, upper)``; used instead
            of the Voigt profile for the lines it contains
        doppler_velocity : float
            Microturbulent velocity in cm/s

        Returns
        -------
        array
            Absorption coefficient in cm^-1
        """
        wavelengths = np.asarray(wavelengths, dtype=float)
        alpha = np.zeros_like(wavelengths)
        if n_HI <= 0 or len(wavelengths) == 0:
            return alpha

        lo = wavelengths[0] - self.window_cm
        hi = wavelengths[-1] + self.window_cm
        kT = KBOLTZ_EV * T
        table = profile_table or {}

        for lower, upper, center in self.transitions():
            if not lo <= center <= hi:
                continue

            excitation = RYDBERG_H_EV * (1.0 - 1.0 / lower**2)
            population = n_HI * 2 * lower**2 / U_HI * np.exp(-excitation / kT)
            stimulated = -np.expm1(-HPLANCK_EV * C_CGS / (center * kT))
            cross_section = (
                np.pi * ELECTRON_CHARGE_CGS**2 / (ELECTRON_MASS_CGS * C_CGS)
                * center**2 / C_CGS
                * kramers_oscillator_strength(lower, upper)
            )
            amplitude = population * stimulated * cross_section

            if (lower, upper) in table:
                profile = table[(lower, upper)](wavelengths - center, T, n_e)
            else:
                sigma = doppler_sigma(center, T, HYDROGEN_MASS_AMU, doppler_velocity)
                gamma_rad = 0.2223 / center**2
                gamma = lorentz_hwhm(center, gamma_rad) + stark_hwhm(lower, upper, center, n_e)
                profile = voigt_profile(wavelengths, center, sigma, gamma)

            alpha += amplitude * profile

        return alpha
