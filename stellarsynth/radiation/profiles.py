"""
Line profile functions for spectral broadening.
Includes Gaussian, Lorentzian, and Voigt profiles, plus the window
half-widths beyond which a profile falls under a given density.
"""

from typing import Union

import numpy as np
from scipy.special import wofz

from stellarsynth.core.constants import KBOLTZ_CGS, C_CGS, AMU_CGS
from stellarsynth.core.logging_config import get_logger

logger = get_logger("radiation.profiles")

_SQRT_2PI = np.sqrt(2 * np.pi)


def gaussian_profile(
    wavelength: Union[float, np.ndarray], center: float, sigma: float, amplitude: float = 1.0
) -> Union[float, np.ndarray]:
    """
    Calculate Gaussian line profile.

    Parameters
    ----------
    wavelength : float or array
        Wavelength(s), any length unit
    center : float
        Line center wavelength
    sigma : float
        Standard deviation
    amplitude : float
        Integrated area (not peak height).
        Note: Peak height = amplitude / (sigma * sqrt(2*pi))

    Returns
    -------
    float or array
        Profile value(s)
    """
    x = (wavelength - center) / sigma
    return amplitude * np.exp(-0.5 * x**2) / (sigma * _SQRT_2PI)


def lorentzian_profile(
    wavelength: Union[float, np.ndarray], center: float, gamma: float, amplitude: float = 1.0
) -> Union[float, np.ndarray]:
    """
    Calculate Lorentzian line profile.

    Parameters
    ----------
    wavelength : float or array
        Wavelength(s)
    center : float
        Line center wavelength
    gamma : float
        HWHM (Half-Width at Half-Maximum).
    amplitude : float
        Integrated area.
        Peak height = amplitude / (gamma * pi)

    Returns
    -------
    float or array
        Profile value(s)
    """
    return (amplitude / np.pi) * (gamma / ((wavelength - center) ** 2 + gamma**2))


def voigt_profile(
    wavelength: Union[float, np.ndarray],
    center: float,
    sigma: float,
    gamma: float,
    amplitude: float = 1.0,
) -> Union[float, np.ndarray]:
    """
    Calculate Voigt profile.

    Parameters
    ----------
    wavelength : array
        Wavelength grid
    center : float
        Center
    sigma : float
        Gaussian std dev
    gamma : float
        Lorentzian HWHM
    amplitude : float
        Area
    """
    # Avoid division by zero
    if sigma <= 0:
        return lorentzian_profile(wavelength, center, gamma, amplitude)
    if gamma <= 0:
        return gaussian_profile(wavelength, center, sigma, amplitude)

    z = (wavelength - center + 1j * gamma) / (sigma * np.sqrt(2))
    return amplitude * wofz(z).real / (sigma * _SQRT_2PI)


def doppler_sigma(wavelength_cm: float, T_K: float, mass_amu: float, xi_cm_s: float = 0.0) -> float:
    """
    Gaussian standard deviation of a thermally and turbulently broadened line.

    sigma = lambda / c * sqrt(kT / m + xi^2 / 2)

    Parameters
    ----------
    wavelength_cm : float
        Line center in cm
    T_K : float
        Temperature in K
    mass_amu : float
        Mass of the absorber in amu
    xi_cm_s : float
        Microturbulent velocity in cm/s

    Returns
    -------
    float
        Doppler sigma in cm
    """
    mass_g = mass_amu * AMU_CGS
    return wavelength_cm * np.sqrt(KBOLTZ_CGS * T_K / mass_g + 0.5 * xi_cm_s**2) / C_CGS


def lorentz_hwhm(wavelength_cm: float, gamma_s: float) -> float:
    """
    Convert a damping rate (s^-1, FWHM in angular frequency) to a HWHM in cm.
    """
    return gamma_s * wavelength_cm**2 / (4 * np.pi * C_CGS)


def inverse_gaussian_density(rho: float, sigma: float) -> float:
    """
    Distance from the center at which a unit-area Gaussian falls to ``rho``.

    Returns 0 when ``rho`` exceeds the peak density.
    """
    if rho <= 0:
        return np.inf
    if rho > 1 / (_SQRT_2PI * sigma):
        return 0.0
    return sigma * np.sqrt(-2 * np.log(_SQRT_2PI * sigma * rho))


def inverse_lorentz_density(rho: float, gamma: float) -> float:
    """
    Distance from the center at which a unit-area Lorentzian falls to ``rho``.

    Returns 0 when ``rho`` exceeds the peak density.
    """
    if gamma <= 0:
        return 0.0
    if rho <= 0:
        return np.inf
    if rho > 1 / (np.pi * gamma):
        return 0.0
    return np.sqrt(gamma / (np.pi * rho) - gamma**2)
