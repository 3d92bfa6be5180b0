"""
Evenly spaced wavelength grids and windowing over sorted arrays.
"""

from dataclasses import dataclass
from typing import Sequence, Tuple

import numpy as np

from stellarsynth.core.units import air_to_vacuum
from stellarsynth.core.logging_config import get_logger

logger = get_logger("core.grid")

# Relative slack when counting grid points, so that e.g. (5001 - 5000) / 0.1
# evaluating to 9.999999999 still yields 11 points.
_COUNT_RTOL = 1e-9


def _count_points(start: float, stop: float, step: float) -> int:
    if step == 0:
        raise ValueError("Wavelength step must be nonzero")
    ratio = (stop - start) / step
    n = int(np.floor(ratio + _COUNT_RTOL * max(1.0, abs(ratio)))) + 1
    if n < 1:
        raise ValueError(
            f"Wavelength range [{start}, {stop}] with step {step} contains no points"
        )
    return n


@dataclass(frozen=True)
class WavelengthGrid:
    """
    An evenly spaced, ascending wavelength grid.

    Attributes
    ----------
    start : float
        First wavelength
    step : float
        Spacing between consecutive points (strictly positive)
    n_points : int
        Number of points
    """

    start: float
    step: float
    n_points: int

    def __post_init__(self):
        if self.n_points < 1:
            raise ValueError("A wavelength grid needs at least one point")
        if not self.step > 0:
            raise ValueError(
                f"Wavelengths must be in increasing order (got step {self.step})"
            )

    @classmethod
    def from_range(cls, start: float, stop: float, step: float) -> "WavelengthGrid":
        """
        Build the grid ``start, start + step, ...`` up to and including ``stop``.

        Parameters
        ----------
        start : float
            First wavelength
        stop : float
            Last wavelength (included if it falls on the grid)
        step : float
            Spacing

        Returns
        -------
        WavelengthGrid
            Grid with ``floor((stop - start) / step) + 1`` points

        Raises
        ------
        ValueError
            If the step is not positive or the range is empty
        """
        if not step > 0:
            raise ValueError(f"Wavelengths must be in increasing order (got step {step})")
        return cls(float(start), float(step), _count_points(start, stop, step))

    @classmethod
    def from_air(
        cls, start: float, stop: float, step: float, threshold: float = 1e-4
    ) -> "WavelengthGrid":
        """
        Build a linear vacuum grid approximating a linear air grid.

        A linear grid in air wavelengths is not linear in vacuum wavelengths.
        The returned grid has the same number of points and runs between the
        vacuum equivalents of the first and last air points.

        Parameters
        ----------
        start, stop, step : float
            Air wavelength range in Å
        threshold : float
            Largest acceptable difference (Å) between the linear vacuum grid
            and the exact conversion of every air point

        Returns
        -------
        WavelengthGrid
            Vacuum wavelength grid

        Raises
        ------
        ValueError
            If the approximation error exceeds ``threshold``
        """
        air = cls.from_range(start, stop, step)
        air_values = air.values
        exact = air_to_vacuum(air_values)

        vac_start = exact[0]
        if air.n_points > 1:
            vac_step = (exact[-1] - vac_start) / (air.n_points - 1)
        else:
            vac_step = air_to_vacuum(start + step) - vac_start
        grid = cls(float(vac_start), float(vac_step), air.n_points)

        max_diff = float(np.max(np.abs(grid.values - exact)))
        if max_diff > threshold:
            raise ValueError(
                "A linear air wavelength range can't be approximated exactly with a linear "
                f"vacuum wavelength range. This solution differs by up to {max_diff:.3g} Å. "
                "Adjust wavelength_conversion_warn_threshold if you want to suppress this error."
            )
        logger.debug(f"Air grid converted to vacuum with max deviation {max_diff:.3g} Å")
        return grid

    @classmethod
    def from_array(cls, values: Sequence[float], rtol: float = 1e-6) -> "WavelengthGrid":
        """
        Wrap an existing evenly spaced array.

        Raises
        ------
        ValueError
            If the array is empty, unevenly spaced, or not ascending
        """
        values = np.asarray(values, dtype=float)
        if values.ndim != 1 or len(values) == 0:
            raise ValueError("Wavelengths must be a non-empty 1-D sequence")
        if len(values) == 1:
            raise ValueError("Cannot infer a step from a single wavelength")
        diffs = np.diff(values)
        if not np.allclose(diffs, diffs[0], rtol=rtol, atol=0.0):
            raise ValueError("Wavelength grid must be evenly spaced")
        step = (values[-1] - values[0]) / (len(values) - 1)
        return cls(float(values[0]), float(step), len(values))

    @property
    def values(self) -> np.ndarray:
        """Grid points as an array."""
        return self.start + self.step * np.arange(self.n_points)

    @property
    def stop(self) -> float:
        """Last grid point."""
        return self.start + self.step * (self.n_points - 1)

    def scaled(self, factor: float) -> "WavelengthGrid":
        """Return the same grid expressed in another length unit."""
        return WavelengthGrid(self.start * factor, self.step * factor, self.n_points)

    def __len__(self) -> int:
        return self.n_points


def move_bounds(
    values: np.ndarray, lower: int, upper: int, center: float, half_width: float
) -> Tuple[int, int]:
    """
    Walk window bounds over a sorted array.

    After the call, ``values[lower:upper]`` holds exactly the elements with
    ``center - half_width <= value <= center + half_width``. The previous
    bounds are used as the starting point, so sweeping ``center`` upward over
    the whole array costs amortized linear time.

    Parameters
    ----------
    values : array
        Ascending array
    lower, upper : int
        Previous bounds (any values in ``[0, len(values)]``)
    center : float
        Window center
    half_width : float
        Window half-width

    Returns
    -------
    Tuple[int, int]
        New ``(lower, upper)`` half-open bounds; an empty window has
        ``lower == upper``
    """
    n = len(values)
    lo_edge = center - half_width
    hi_edge = center + half_width

    lower = min(max(lower, 0), n)
    upper = min(max(upper, 0), n)

    while lower < n and values[lower] < lo_edge:
        lower += 1
    while lower > 0 and values[lower - 1] >= lo_edge:
        lower -= 1
    while upper < n and values[upper] <= hi_edge:
        upper += 1
    while upper > 0 and values[upper - 1] > hi_edge:
        upper -= 1

    return lower, max(lower, upper)
