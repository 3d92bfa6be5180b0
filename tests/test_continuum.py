"""
Tests for the hydrogenic continuum.
"""

import numpy as np
import pytest

from stellarsynth.atomic.structures import Species
from stellarsynth.core.constants import C_CGS, HPLANCK_EV, RYDBERG_H_EV, SIGMA_THOMSON_CGS
from stellarsynth.plasma.partition import ConstantPartitionFunction
from stellarsynth.radiation.continuum import HydrogenicContinuum, hydrogen_bf_cross_section

PARTITION_FUNCS = {Species("H", 0): ConstantPartitionFunction(2)}


def test_bf_cross_section_threshold():
    """Cross-section vanishes below the ionization edge of the level."""
    edge = RYDBERG_H_EV / (4 * HPLANCK_EV)
    sigma = hydrogen_bf_cross_section(np.array([0.99 * edge, 1.01 * edge]), 2)
    assert sigma[0] == 0.0
    assert sigma[1] > 0.0


def test_bf_cross_section_ground_state():
    """Kramers cross-section at the Lyman edge is close to 7.9e-18 cm^2."""
    edge = RYDBERG_H_EV / HPLANCK_EV
    assert hydrogen_bf_cross_section(edge, 1) == pytest.approx(7.9e-18, rel=0.05)


def test_thomson_only():
    """Without hydrogen, only electron scattering remains."""
    nu = C_CGS / np.array([6e-5, 5e-5, 4e-5])
    alpha = HydrogenicContinuum().evaluate(nu, 5000.0, 1e14, {}, PARTITION_FUNCS)
    assert np.allclose(alpha, SIGMA_THOMSON_CGS * 1e14)


def test_positive_and_finite():
    """Opacity is positive and finite over the optical."""
    nu = np.sort(C_CGS / np.linspace(3000e-8, 9000e-8, 200))
    densities = {Species("H", 0): 1e17, Species("H", 1): 1e13}
    alpha = HydrogenicContinuum().evaluate(nu, 6000.0, 1e13, densities, PARTITION_FUNCS)
    assert np.all(np.isfinite(alpha))
    assert np.all(alpha > SIGMA_THOMSON_CGS * 1e13)


def test_balmer_jump():
    """Opacity jumps across the Balmer edge."""
    edge = C_CGS * HPLANCK_EV / (RYDBERG_H_EV / 4)
    nu = C_CGS / np.array([edge * 1.001, edge * 0.999])
    densities = {Species("H", 0): 1e17, Species("H", 1): 1e13}
    alpha = HydrogenicContinuum().evaluate(nu, 8000.0, 1e13, densities, PARTITION_FUNCS)
    assert alpha[1] > 2 * alpha[0]


def test_free_free_scales_with_ions():
    """Free-free absorption scales with n_e n_HII."""
    nu = np.array([C_CGS / 1e-4])
    model = HydrogenicContinuum(n_max=1)
    low = model.evaluate(nu, 6000.0, 1e13, {Species("H", 1): 1e13}, PARTITION_FUNCS)
    high = model.evaluate(nu, 6000.0, 1e13, {Species("H", 1): 2e13}, PARTITION_FUNCS)
    thomson = SIGMA_THOMSON_CGS * 1e13
    assert (high[0] - thomson) == pytest.approx(2 * (low[0] - thomson))


def test_invalid_n_max():
    """At least one bound level is required."""
    with pytest.raises(ValueError):
        HydrogenicContinuum(n_max=0)
