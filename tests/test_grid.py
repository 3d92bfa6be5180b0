"""
Tests for wavelength grids and move_bounds.
"""

import pytest
import numpy as np

from stellarsynth.core.grid import WavelengthGrid, move_bounds
from stellarsynth.core.units import air_to_vacuum


def test_from_range_point_count():
    """floor((stop - start) / step) + 1 points."""
    assert len(WavelengthGrid.from_range(5000.0, 5001.0, 0.5)) == 3
    assert len(WavelengthGrid.from_range(5000.0, 5001.0, 0.1)) == 11
    assert len(WavelengthGrid.from_range(5000.0, 5001.0, 0.3)) == 4
    assert len(WavelengthGrid.from_range(5000.0, 5000.0, 0.01)) == 1


def test_from_range_values():
    """Values are start + i * step."""
    grid = WavelengthGrid.from_range(5000.0, 5001.0, 0.5)
    np.testing.assert_allclose(grid.values, [5000.0, 5000.5, 5001.0])
    assert grid.stop == pytest.approx(5001.0)


def test_non_positive_step_rejected():
    """A grid must be ascending."""
    with pytest.raises(ValueError, match="increasing order"):
        WavelengthGrid.from_range(5000.0, 5001.0, -0.1)
    with pytest.raises(ValueError, match="increasing order"):
        WavelengthGrid(5000.0, 0.0, 10)


def test_empty_range_rejected():
    """stop < start gives no points."""
    with pytest.raises(ValueError):
        WavelengthGrid.from_range(5001.0, 5000.0, 0.1)


def test_scaled():
    """Scaling converts units without changing the point count."""
    grid = WavelengthGrid.from_range(5000.0, 5001.0, 0.5).scaled(1e-8)
    assert len(grid) == 3
    np.testing.assert_allclose(grid.values, [5000e-8, 5000.5e-8, 5001e-8])


def test_from_array():
    """Evenly spaced arrays are accepted; others are not."""
    grid = WavelengthGrid.from_array(np.linspace(4000.0, 4010.0, 101))
    assert grid.step == pytest.approx(0.1)
    assert len(grid) == 101

    with pytest.raises(ValueError, match="evenly spaced"):
        WavelengthGrid.from_array([1.0, 2.0, 4.0])
    with pytest.raises(ValueError, match="increasing order"):
        WavelengthGrid.from_array([3.0, 2.0, 1.0])


def test_from_air_small_range():
    """A short air range converts within the default threshold."""
    grid = WavelengthGrid.from_air(5000.0, 5010.0, 0.01)
    air = np.arange(1001) * 0.01 + 5000.0
    assert len(grid) == 1001
    assert grid.start == pytest.approx(air_to_vacuum(5000.0))
    assert np.max(np.abs(grid.values - air_to_vacuum(air))) < 1e-4


def test_from_air_threshold_exceeded():
    """A long air range is not linear in vacuum."""
    with pytest.raises(ValueError, match="wavelength_conversion_warn_threshold"):
        WavelengthGrid.from_air(3000.0, 10000.0, 1.0, threshold=1e-4)

    grid = WavelengthGrid.from_air(3000.0, 10000.0, 1.0, threshold=1.0)
    assert len(grid) == 7001


def test_from_air_single_point():
    """A one-point air grid still gets a positive step."""
    grid = WavelengthGrid.from_air(5000.0, 5000.0, 0.01)
    assert len(grid) == 1
    assert grid.step > 0


# move_bounds


@pytest.fixture
def sorted_values():
    return np.arange(1.5, 10.0, 1.0)  # 1.5, 2.5, ..., 9.5


def test_move_bounds_examples(sorted_values):
    """Known windows over 1.5..9.5."""
    assert move_bounds(sorted_values, 0, 0, 5.0, 2.0) == (2, 6)
    assert move_bounds(sorted_values, 0, 0, 0.0, 3.0) == (0, 2)
    assert move_bounds(sorted_values, 0, 0, 6.0, 4.0) == (1, 9)


@pytest.mark.parametrize("start", [(0, 0), (9, 9), (0, 9), (5, 2), (4, 4), (-3, 20)])
def test_move_bounds_independent_of_start(sorted_values, start):
    """The result does not depend on the starting bounds."""
    assert move_bounds(sorted_values, start[0], start[1], 6.0, 4.0) == (1, 9)
    assert move_bounds(sorted_values, start[0], start[1], 5.0, 2.0) == (2, 6)


def test_move_bounds_out_of_range(sorted_values):
    """Windows outside the array are empty with valid indices."""
    lower, upper = move_bounds(sorted_values, 3, 5, 100.0, 1.0)
    assert lower == upper
    assert 0 <= lower <= len(sorted_values)

    lower, upper = move_bounds(sorted_values, 3, 5, -100.0, 1.0)
    assert (lower, upper) == (0, 0)


def test_move_bounds_inclusive_edges(sorted_values):
    """Values exactly on the window edges are included."""
    assert move_bounds(sorted_values, 0, 0, 3.5, 1.0) == (1, 4)


def test_move_bounds_sweep_matches_brute_force():
    """Sweeping increasing centers reproduces the direct selection."""
    rng = np.random.default_rng(1)
    values = np.sort(rng.uniform(0.0, 100.0, 300))
    lower, upper = 0, 0
    for center in np.linspace(-5.0, 105.0, 400):
        half_width = rng.uniform(0.0, 5.0)
        lower, upper = move_bounds(values, lower, upper, center, half_width)
        inside = np.flatnonzero((values >= center - half_width) & (values <= center + half_width))
        if len(inside):
            assert (lower, upper) == (inside[0], inside[-1] + 1)
        else:
            assert lower == upper
        assert 0 <= lower <= upper <= len(values)


@pytest.mark.parametrize("half_width", [0.0, 0.3, 2.5, 50.0])
def test_move_bounds_fixed_width_sweep_is_monotonic(half_width):
    """With a fixed half-width and increasing centers neither bound moves back."""
    rng = np.random.default_rng(7)
    values = np.sort(rng.uniform(0.0, 100.0, 250))
    lower, upper = 0, 0
    for center in np.sort(rng.uniform(-10.0, 110.0, 500)):
        new_lower, new_upper = move_bounds(values, lower, upper, center, half_width)
        assert new_lower >= lower
        assert new_upper >= upper
        lower, upper = new_lower, new_upper
