"""
Instrumental degradation and continuum normalization of spectra.
"""

import numpy as np

from stellarsynth.core.grid import move_bounds
from stellarsynth.core.logging_config import get_logger

logger = get_logger("instrument.convolution")

# The Gaussian kernel is truncated at this many standard deviations
LSF_N_SIGMA = 4.0


def constant_R_LSF(flux: np.ndarray, wavelength: np.ndarray, R: float) -> np.ndarray:
    """
    Apply a Gaussian line spread function of constant resolving power.

    The kernel around each wavelength has sigma = lambda / (2 R), is truncated
    at 4 sigma and normalized over the grid points it covers, so that each
    input point distributes exactly its own flux. The grid need not be evenly
    spaced, but must be ascending.

    Parameters
    ----------
    flux : array
        Flux at each wavelength
    wavelength : array
        Ascending wavelengths (any unit)
    R : float
        Resolving power lambda / delta lambda

    Returns
    -------
    array
        Degraded flux on the same grid
    """
    flux = np.asarray(flux, dtype=float)
    wavelength = np.asarray(wavelength, dtype=float)
    if flux.shape != wavelength.shape:
        raise ValueError("flux and wavelength must have the same length")
    if not R > 0:
        raise ValueError("Resolving power must be positive")
    if np.any(np.diff(wavelength) <= 0):
        raise ValueError("Wavelengths must be in increasing order")

    convolved = np.zeros_like(flux)
    lower, upper = 0, 0
    for wl, value in zip(wavelength, flux):
        sigma = wl / (2 * R)
        lower, upper = move_bounds(wavelength, lower, upper, wl, LSF_N_SIGMA * sigma)
        kernel = np.exp(-0.5 * ((wavelength[lower:upper] - wl) / sigma) ** 2)
        convolved[lower:upper] += value * kernel / kernel.sum()

    return convolved


def rectify(
    flux: np.ndarray, wavelength: np.ndarray, bandwidth: float = 50.0, q: float = 0.95
) -> np.ndarray:
    """
    Normalize a spectrum by a running upper quantile.

    Each point is divided by the ``q`` quantile of the flux within
    ``bandwidth`` of it. This is a crude continuum normalization that works
    best on synthetic spectra.

    Parameters
    ----------
    flux : array
        Flux at each wavelength
    wavelength : array
        Ascending wavelengths
    bandwidth : float
        Half-width of the window, in the unit of ``wavelength``
    q : float
        Quantile in [0, 1]

    Returns
    -------
    array
        Rectified flux
    """
    flux = np.asarray(flux, dtype=float)
    wavelength = np.asarray(wavelength, dtype=float)
    if flux.shape != wavelength.shape:
        raise ValueError("flux and wavelength must have the same length")
    if not 0 <= q <= 1:
        raise ValueError("q must be within [0, 1]")
    if bandwidth < 0:
        raise ValueError("bandwidth must be non-negative")

    continuum = np.empty_like(flux)
    lower, upper = 0, 0
    for i, wl in enumerate(wavelength):
        lower, upper = move_bounds(wavelength, lower, upper, wl, bandwidth)
        continuum[i] = np.quantile(flux[lower:upper], q)

    if np.any(continuum == 0):
        logger.warning("Rectification window with zero flux quantile; result contains inf/nan")
    return flux / continuum
