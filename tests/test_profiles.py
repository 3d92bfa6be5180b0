"""
Tests for line profiles.
"""

import numpy as np
import pytest
from scipy.integrate import trapezoid

from stellarsynth.core.constants import AMU_CGS, C_CGS, KBOLTZ_CGS
from stellarsynth.radiation.profiles import (
    doppler_sigma,
    gaussian_profile,
    inverse_gaussian_density,
    inverse_lorentz_density,
    lorentz_hwhm,
    lorentzian_profile,
    voigt_profile,
)


def test_gaussian_normalized():
    """Gaussian integrates to its amplitude."""
    x = np.linspace(-10, 10, 4001)
    assert trapezoid(gaussian_profile(x, 0.0, 1.0, 2.5), x) == pytest.approx(2.5, rel=1e-6)


def test_lorentzian_peak():
    """Lorentzian peak is amplitude / (pi gamma)."""
    assert lorentzian_profile(0.0, 0.0, 0.5) == pytest.approx(1 / (0.5 * np.pi))


def test_voigt_normalized():
    """Voigt integrates to its amplitude."""
    x = np.linspace(-200, 200, 40001)
    area = trapezoid(voigt_profile(x, 0.0, 1.0, 0.3), x)
    assert area == pytest.approx(1.0, rel=5e-3)


def test_voigt_limits():
    """Voigt reduces to its components."""
    x = np.linspace(-3, 3, 13)
    assert np.allclose(voigt_profile(x, 0.0, 1.0, 0.0), gaussian_profile(x, 0.0, 1.0))
    assert np.allclose(voigt_profile(x, 0.0, 0.0, 0.7), lorentzian_profile(x, 0.0, 0.7))
    assert np.allclose(voigt_profile(x, 0.0, 1.0, 1e-9), gaussian_profile(x, 0.0, 1.0), rtol=1e-6)


def test_doppler_sigma():
    """Thermal width of iron at 5000 K."""
    wl = 5e-5
    expected = wl / C_CGS * np.sqrt(KBOLTZ_CGS * 5000.0 / (55.845 * AMU_CGS))
    assert doppler_sigma(wl, 5000.0, 55.845) == pytest.approx(expected)
    assert doppler_sigma(wl, 5000.0, 55.845, 1e5) > expected


def test_lorentz_hwhm():
    """Damping rate to HWHM in wavelength."""
    assert lorentz_hwhm(5e-5, 4 * np.pi * C_CGS) == pytest.approx(2.5e-9)


def test_inverse_gaussian_density():
    """The Gaussian at the returned offset equals rho."""
    sigma, rho = 2.0, 0.01
    x = inverse_gaussian_density(rho, sigma)
    assert gaussian_profile(x, 0.0, sigma) == pytest.approx(rho)


def test_inverse_lorentz_density():
    """The Lorentzian at the returned offset equals rho."""
    gamma, rho = 0.5, 0.01
    x = inverse_lorentz_density(rho, gamma)
    assert lorentzian_profile(x, 0.0, gamma) == pytest.approx(rho)


def test_inverse_density_edges():
    """Densities above the peak give zero width, non-positive densities no cutoff."""
    assert inverse_gaussian_density(10.0, 1.0) == 0.0
    assert inverse_lorentz_density(10.0, 1.0) == 0.0
    assert inverse_gaussian_density(0.0, 1.0) == np.inf
    assert inverse_lorentz_density(0.0, 1.0) == np.inf
    assert inverse_lorentz_density(0.1, 0.0) == 0.0
