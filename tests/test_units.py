"""
Tests for unit conversion and air/vacuum wavelength utilities.
"""

import pytest
import numpy as np

from stellarsynth.core import units


def test_wavelength_conversion():
    """Test wavelength conversions."""
    assert units.convert_wavelength(5000.0, "A", "cm") == pytest.approx(5e-5)
    assert units.convert_wavelength(500.0, "nm", "A") == pytest.approx(5000.0)
    assert units.convert_wavelength(0.5, "um", "nm") == pytest.approx(500.0)

    # Round trip
    wl = units.convert_wavelength(units.convert_wavelength(6563.0, "A", "cm"), "cm", "A")
    assert wl == pytest.approx(6563.0)


def test_wavelength_conversion_unknown_unit():
    """Unknown units are rejected."""
    with pytest.raises(ValueError, match="Unknown source unit"):
        units.convert_wavelength(1.0, "furlong", "cm")
    with pytest.raises(ValueError, match="Unknown target unit"):
        units.convert_wavelength(1.0, "cm", "parsec")


def test_angstrom_and_velocity_helpers():
    """Test Å/cm and km/s helpers on scalars and arrays."""
    assert units.angstrom_to_cm(5000.0) == pytest.approx(5e-5)
    assert units.km_s_to_cm_s(2.0) == pytest.approx(2e5)
    np.testing.assert_allclose(units.angstrom_to_cm(np.array([1.0, 2.0])), [1e-8, 2e-8])


def test_air_to_vacuum_known_value():
    """Air Hα (6562.80 Å) is ~6564.6 Å in vacuum."""
    assert units.air_to_vacuum(6562.80) == pytest.approx(6564.61, abs=0.02)


def test_vacuum_longer_than_air():
    """The refractive index of air exceeds 1 in the optical."""
    wl = np.linspace(3000.0, 10000.0, 50)
    assert np.all(units.air_to_vacuum(wl) > wl)
    assert np.all(units.vacuum_to_air(wl) < wl)


def test_air_vacuum_round_trip():
    """Round trips agree to 1e-6 relative over 3000-10000 Å."""
    wl = np.linspace(3000.0, 10000.0, 200)
    np.testing.assert_allclose(units.vacuum_to_air(units.air_to_vacuum(wl)), wl, rtol=1e-6)
    np.testing.assert_allclose(units.air_to_vacuum(units.vacuum_to_air(wl)), wl, rtol=1e-6)


def test_air_vacuum_scalar_and_list_input():
    """Scalars come back as floats, lists as arrays."""
    assert isinstance(units.air_to_vacuum(5000.0), float)
    assert isinstance(units.vacuum_to_air(5000.0), float)
    result = units.air_to_vacuum([5000.0, 6000.0])
    assert isinstance(result, np.ndarray)
    assert result.shape == (2,)
