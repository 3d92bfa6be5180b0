"""
Formal solution of the radiative transfer equation.

Plane-parallel atmospheres use the flux integral over exponential integrals;
spherical atmospheres are ray traced over impact parameters. In both cases
the source function is taken to be piecewise linear in optical depth between
layers, which makes each segment integral exact.
"""

import numpy as np
from scipy.integrate import cumulative_trapezoid, trapezoid
from scipy.special import expn

from stellarsynth.atmosphere.model import PlanarAtmosphere, ShellAtmosphere
from stellarsynth.core.logging_config import get_logger

logger = get_logger("radiation.transfer")


def _cumulative(y, x):
    """Cumulative trapezoid integral along the first axis, starting at zero."""
    if len(x) < 2:
        return np.zeros_like(y)
    return cumulative_trapezoid(y, x, axis=0, initial=0)


def _piecewise_linear_integral(tau, S, kernel, kernel_moment):
    """
    Integral of S(tau) K(tau) over the depth grid with S linear per segment.

    ``kernel(t)`` is an antiderivative of -K and ``kernel_moment(t)`` an
    antiderivative of t K, both evaluated elementwise.
    """
    ta, tb = tau[:-1], tau[1:]
    Sa, Sb = S[:-1], S[1:]
    dtau = tb - ta
    thick = dtau > 0
    slope = np.divide(Sb - Sa, dtau, out=np.zeros_like(dtau), where=thick)

    zeroth = kernel(ta) - kernel(tb)
    first = kernel_moment(tb) - kernel_moment(ta)
    segments = (Sa - slope * ta) * zeroth + slope * first
    return np.sum(np.where(thick, segments, 0.0), axis=0)


def planar_flux(tau: np.ndarray, S: np.ndarray) -> np.ndarray:
    """
    Emergent flux of a plane-parallel atmosphere.

    F = 2 pi integral S(tau) E2(tau) dtau, with the source function held at
    its deepest value below the last layer.

    Parameters
    ----------
    tau : array
        Optical depth (layers x wavelengths), zero at the top
    S : array
        Source function, same shape

    Returns
    -------
    array
        Flux at each wavelength
    """
    inner = _piecewise_linear_integral(
        tau,
        S,
        lambda t: expn(3, t),
        lambda t: -t * expn(3, t) - expn(4, t),
    )
    return 2 * np.pi * (inner + S[-1] * expn(3, tau[-1]))


def ray_intensity(tau: np.ndarray, S: np.ndarray, I_boundary) -> np.ndarray:
    """
    Intensity emerging from a ray.

    Parameters
    ----------
    tau : array
        Optical depth along the ray from the observer (points x wavelengths)
    S : array
        Source function at the same points
    I_boundary : array or float
        Intensity entering at the far end of the ray
    """
    inner = _piecewise_linear_integral(
        tau,
        S,
        lambda t: np.exp(-t),
        lambda t: -(t + 1) * np.exp(-t),
    )
    return inner + I_boundary * np.exp(-tau[-1])


class RadiativeTransfer:
    """
    LTE transfer solver for plane-parallel and spherical atmospheres.

    For plane-parallel atmospheres the optical depth scale is anchored on the
    5000 Å absorption: tau_5000 is integrated over column mass, then
    tau_lambda = integral (alpha / alpha_5000) d tau_5000. ``mu_grid`` is not
    needed there because the angular integral is analytic.

    For spherical atmospheres a ray is traced for each mu in ``mu_grid`` at
    impact parameter b = R sqrt(1 - mu^2). Rays that reach the innermost shell
    start from the local source function; rays that miss it cross the
    atmosphere twice with no incoming intensity. The flux is
    2 pi integral I mu dmu.
    """

    def solve(self, atmosphere, alpha, source_function, alpha5, mu_grid):
        """
        Emergent flux at each wavelength.

        Parameters
        ----------
        atmosphere : PlanarAtmosphere or ShellAtmosphere
            Model atmosphere
        alpha : array
            Absorption coefficient (layers x wavelengths) in cm^-1
        source_function : array
            Source function, same shape
        alpha5 : array
            Absorption coefficient at 5000 Å per layer
        mu_grid : array
            Ascending cosines of the ray angles, used for spherical models

        Returns
        -------
        array
            Flux in the units of the source function times pi
        """
        alpha = np.asarray(alpha, dtype=float)
        S = np.asarray(source_function, dtype=float)

        if isinstance(atmosphere, PlanarAtmosphere):
            return self.solve_planar(atmosphere, alpha, S, np.asarray(alpha5, dtype=float))
        if isinstance(atmosphere, ShellAtmosphere):
            return self.solve_spherical(atmosphere, alpha, S, np.asarray(mu_grid, dtype=float))
        raise ValueError(f"Unsupported atmosphere type: {type(atmosphere).__name__}")

    def solve_planar(self, atmosphere, alpha, S, alpha5):
        tau5 = _cumulative(alpha5 / atmosphere.densities, atmosphere.colmasses)
        tau = _cumulative(alpha / alpha5[:, None], tau5)
        logger.debug(f"Planar transfer: tau_5000 at base = {tau5[-1]:.3g}")
        return planar_flux(tau, S)

    def solve_spherical(self, atmosphere, alpha, S, mu_grid):
        if len(mu_grid) < 2:
            raise ValueError("Spherical transfer needs at least two mu values")

        radii = atmosphere.radii
        R = radii[0]
        intensities = []
        for mu in mu_grid:
            b = R * np.sqrt(max(1.0 - mu**2, 0.0))
            crossed = radii >= b
            s = np.sqrt(np.maximum(radii[crossed] ** 2 - b**2, 0.0))
            a = alpha[crossed]
            src = S[crossed]

            if crossed.all() and b < radii[-1]:
                path, a_path, S_path = s, a, src
                boundary = src[-1]
            else:
                path = np.concatenate([s, -s[::-1]])
                a_path = np.concatenate([a, a[::-1]])
                S_path = np.concatenate([src, src[::-1]])
                boundary = 0.0

            tau = _cumulative(a_path, -path)
            intensities.append(ray_intensity(tau, S_path, boundary))

        intensities = np.array(intensities)
        return 2 * np.pi * trapezoid(intensities * mu_grid[:, None], mu_grid, axis=0)
