"""
Tests for the radiative transfer solver.
"""

import numpy as np
import pytest

from stellarsynth.radiation.transfer import RadiativeTransfer, planar_flux, ray_intensity


def test_planar_flux_uniform_source():
    """A uniform source function gives pi S at any depth."""
    tau = np.linspace(0, 3, 31)[:, None] * np.array([0.1, 1.0, 10.0])
    S = np.full_like(tau, 2.5)
    assert np.allclose(planar_flux(tau, S), np.pi * 2.5)


def test_planar_flux_linear_source():
    """S = a + b tau gives the Eddington-Barbier flux pi (a + 2b/3)."""
    tau = np.linspace(0, 60, 601)[:, None]
    S = 1.0 + 3.0 * tau
    assert planar_flux(tau, S)[0] == pytest.approx(np.pi * (1.0 + 2.0), rel=1e-6)


def test_ray_intensity_thick_and_thin():
    """Optically thick rays see S, empty rays see the boundary."""
    tau = np.linspace(0, 50, 11)[:, None]
    S = np.full_like(tau, 4.0)
    assert ray_intensity(tau, S, 0.0)[0] == pytest.approx(4.0)

    tau = np.zeros((3, 1))
    assert ray_intensity(tau, np.ones((3, 1)), 7.0)[0] == pytest.approx(7.0)


def test_single_planar_layer(single_layer_atmosphere):
    """One layer radiates pi S."""
    S = np.array([[3.0, 4.0]])
    flux = RadiativeTransfer().solve(
        single_layer_atmosphere, np.ones((1, 2)), S, np.ones(1), np.linspace(0, 1, 5)
    )
    assert np.allclose(flux, np.pi * S[0])


def test_planar_thick_atmosphere(planar_atmosphere):
    """A thick isothermal planar atmosphere radiates pi S."""
    n = len(planar_atmosphere)
    alpha = np.full((n, 3), 1.0)
    S = np.full((n, 3), 5.0)
    flux = RadiativeTransfer().solve(planar_atmosphere, alpha, S, np.ones(n), None)
    assert np.allclose(flux, 5.0 * np.pi)


def test_planar_absorption_lowers_flux(planar_atmosphere):
    """With S rising inwards, stronger absorption gives less flux."""
    n = len(planar_atmosphere)
    S = np.linspace(1.0, 10.0, n)[:, None] * np.ones((1, 2))
    alpha = np.ones((n, 2)) * 1e-7
    alpha[:, 1] *= 100
    flux = RadiativeTransfer().solve(planar_atmosphere, alpha, S, np.full(n, 1e-7), None)
    assert flux[1] < flux[0]


def test_spherical_thick_atmosphere(shell_atmosphere):
    """A thick isothermal spherical atmosphere radiates pi S."""
    n = len(shell_atmosphere)
    alpha = np.ones((n, 2))
    S = np.full((n, 2), 3.0)
    flux = RadiativeTransfer().solve(
        shell_atmosphere, alpha, S, np.ones(n), np.linspace(0, 1, 21)
    )
    assert np.allclose(flux, 3.0 * np.pi, rtol=1e-6)


def test_spherical_needs_mu_grid(shell_atmosphere):
    """Spherical transfer needs an angular grid."""
    n = len(shell_atmosphere)
    with pytest.raises(ValueError, match="mu"):
        RadiativeTransfer().solve(
            shell_atmosphere, np.ones((n, 1)), np.ones((n, 1)), np.ones(n), np.array([1.0])
        )


def test_unsupported_atmosphere():
    """Only the two atmosphere types are supported."""
    with pytest.raises(ValueError, match="Unsupported"):
        RadiativeTransfer().solve(object(), np.ones((1, 1)), np.ones((1, 1)), np.ones(1), None)
