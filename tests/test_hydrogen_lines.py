"""
Tests for hydrogen line opacity.
"""

import numpy as np
import pytest

from stellarsynth.radiation.hydrogen_lines import (
    HydrogenLineOpacity,
    hydrogen_wavelength,
    kramers_oscillator_strength,
    stark_hwhm,
)


def _halpha_grid():
    return np.linspace(6555e-8, 6575e-8, 2001)


def test_halpha_wavelength():
    """H-alpha falls at 6564.6 Å in vacuum."""
    assert hydrogen_wavelength(2, 3) == pytest.approx(6564.6e-8, rel=1e-4)
    assert hydrogen_wavelength(1, 2) == pytest.approx(1215.7e-8, rel=1e-4)


def test_oscillator_strengths():
    """Oscillator strengths are positive and fall off along a series."""
    f = [kramers_oscillator_strength(2, u) for u in range(3, 10)]
    assert all(value > 0 for value in f)
    assert all(np.diff(f) < 0)


def test_stark_width_grows_with_density():
    """Stark widths grow as n_e^(2/3)."""
    wl = hydrogen_wavelength(2, 3)
    ratio = stark_hwhm(2, 3, wl, 8e14) / stark_hwhm(2, 3, wl, 1e14)
    assert ratio == pytest.approx(4.0)


def test_transitions():
    """Every series runs up to max_upper."""
    model = HydrogenLineOpacity(lower_levels=(2,), max_upper=6)
    transitions = list(model.transitions())
    assert [(l, u) for l, u, _ in transitions] == [(2, 3), (2, 4), (2, 5), (2, 6)]


def test_no_neutral_hydrogen():
    """No neutral hydrogen gives no absorption."""
    alpha = HydrogenLineOpacity().evaluate(_halpha_grid(), 8000.0, 1e14, 0.0, 2.0, None, 1e5)
    assert np.all(alpha == 0)


def test_halpha_peak():
    """Absorption peaks at H-alpha."""
    wl = _halpha_grid()
    alpha = HydrogenLineOpacity().evaluate(wl, 8000.0, 1e14, 1e16, 2.0, None, 1e5)
    assert np.all(alpha >= 0)
    assert wl[np.argmax(alpha)] == pytest.approx(hydrogen_wavelength(2, 3), abs=2e-10)


def test_far_from_lines():
    """Lines outside the window are skipped."""
    wl = np.linspace(5300e-8, 5310e-8, 11)
    model = HydrogenLineOpacity(lower_levels=(2,), max_upper=5, window_cm=1e-6)
    alpha = model.evaluate(wl, 8000.0, 1e14, 1e16, 2.0, None, 1e5)
    assert np.all(alpha == 0)


def test_profile_table_used():
    """Tabulated profiles replace the Voigt profile."""
    calls = []

    def flat_profile(offsets, T, n_e):
        calls.append((offsets.copy(), T, n_e))
        return np.ones_like(offsets)

    wl = _halpha_grid()
    alpha = HydrogenLineOpacity().evaluate(
        wl, 8000.0, 1e14, 1e16, 2.0, {(2, 3): flat_profile}, 1e5
    )
    assert len(calls) == 1
    offsets, T, n_e = calls[0]
    assert offsets == pytest.approx(wl - hydrogen_wavelength(2, 3))
    assert (T, n_e) == (8000.0, 1e14)
    assert np.allclose(alpha, alpha[0])


def test_invalid_levels():
    """Level ranges are checked."""
    with pytest.raises(ValueError):
        HydrogenLineOpacity(lower_levels=(0,))
    with pytest.raises(ValueError):
        HydrogenLineOpacity(lower_levels=(2,), max_upper=2)
