"""
Tests for physical constants.
"""

import pytest

from stellarsynth.core import constants


def test_constants_are_consistent():
    """eV and CGS forms of the same constant agree."""
    assert constants.KBOLTZ_CGS == pytest.approx(constants.KBOLTZ_EV * constants.EV_TO_ERG, rel=1e-8)
    assert constants.HPLANCK_CGS == pytest.approx(
        constants.HPLANCK_EV * constants.EV_TO_ERG, rel=1e-8
    )
    assert constants.ERG_TO_EV * constants.EV_TO_ERG == pytest.approx(1.0)


def test_length_and_velocity_factors():
    """Å <-> cm and km/s -> cm/s factors."""
    assert constants.ANGSTROM_TO_CM == 1e-8
    assert constants.ANGSTROM_TO_CM * constants.CM_TO_ANGSTROM == pytest.approx(1.0)
    assert constants.KM_S_TO_CM_S == 1e5


def test_reference_wavelength():
    """The opacity anchor is 5000 Å."""
    assert constants.REFERENCE_WAVELENGTH_CM * constants.CM_TO_ANGSTROM == pytest.approx(5000.0)


def test_fundamental_values():
    """Spot-check a few values."""
    assert constants.C_CGS == pytest.approx(2.99792458e10)
    assert constants.ELECTRON_MASS_CGS == pytest.approx(9.109e-28, rel=1e-3)
    assert constants.ELECTRON_CHARGE_CGS == pytest.approx(4.803e-10, rel=1e-3)
    assert constants.SIGMA_THOMSON_CGS == pytest.approx(6.652e-25, rel=1e-3)
