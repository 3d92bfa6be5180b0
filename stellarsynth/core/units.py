"""
Unit conversion utilities for stellarsynth.

The public interface of the package takes wavelengths in Å and velocities in
km/s; everything internal works in CGS. This module also holds the air/vacuum
wavelength conversions.
"""

import numpy as np
from typing import Union

from stellarsynth.core.constants import ANGSTROM_TO_CM, KM_S_TO_CM_S

ArrayLike = Union[float, np.ndarray]

# ============================================================================
# Wavelength Conversions
# ============================================================================


def convert_wavelength(value: ArrayLike, from_unit: str, to_unit: str) -> ArrayLike:
    """
    Convert wavelength between units.

    Parameters
    ----------
    value : float or array
        Wavelength value(s) to convert
    from_unit : str
        Source unit: 'cm', 'nm', 'um', 'A' (Angstrom)
    to_unit : str
        Target unit: 'cm', 'nm', 'um', 'A' (Angstrom)

    Returns
    -------
    float or array
        Converted wavelength value(s)

    Examples
    --------
    >>> convert_wavelength(5000.0, 'A', 'cm')
    5e-05
    >>> convert_wavelength(500.0, 'nm', 'A')
    5000.0
    """
    factors = {
        "cm": 1.0,
        "nm": 1e-7,
        "um": 1e-4,
        "μm": 1e-4,
        "a": ANGSTROM_TO_CM,
        "angstrom": ANGSTROM_TO_CM,
        "ang": ANGSTROM_TO_CM,
    }

    try:
        to_cm = factors[from_unit.lower()]
    except KeyError:
        raise ValueError(f"Unknown source unit: {from_unit}")
    try:
        from_cm = factors[to_unit.lower()]
    except KeyError:
        raise ValueError(f"Unknown target unit: {to_unit}")

    return value * to_cm / from_cm


def angstrom_to_cm(value: ArrayLike) -> ArrayLike:
    """Convert Å to cm."""
    return value * ANGSTROM_TO_CM


# ============================================================================
# Velocity Conversions
# ============================================================================


def km_s_to_cm_s(value: ArrayLike) -> ArrayLike:
    """Convert a velocity from km/s to cm/s."""
    return value * KM_S_TO_CM_S


# ============================================================================
# Air / Vacuum Conversions
# ============================================================================


def air_to_vacuum(wavelength: ArrayLike) -> ArrayLike:
    """
    Convert air wavelength(s) to vacuum wavelength(s).

    Uses the refractive index of standard air from Ciddor (1996) in the
    form quoted by VALD (N. Piskunov).

    Parameters
    ----------
    wavelength : float or array
        Air wavelength(s) in Å

    Returns
    -------
    float or array
        Vacuum wavelength(s) in Å
    """
    wavelength = np.asarray(wavelength, dtype=float)
    s = 1e4 / wavelength
    n = (
        1.0
        + 0.00008336624212083
        + 0.02408926869968 / (130.1065924522 - s**2)
        + 0.0001599740894897 / (38.92568793293 - s**2)
    )
    result = wavelength * n
    return float(result) if np.ndim(result) == 0 else result


def vacuum_to_air(wavelength: ArrayLike) -> ArrayLike:
    """
    Convert vacuum wavelength(s) to air wavelength(s).

    Uses the Edlén-type dispersion formula of Birch & Downs (1994), as in
    the VALD documentation.

    Parameters
    ----------
    wavelength : float or array
        Vacuum wavelength(s) in Å

    Returns
    -------
    float or array
        Air wavelength(s) in Å
    """
    wavelength = np.asarray(wavelength, dtype=float)
    s = 1e4 / wavelength
    n = 1.0 + 0.0000834254 + 0.02406147 / (130.0 - s**2) + 0.00015998 / (38.9 - s**2)
    result = wavelength / n
    return float(result) if np.ndim(result) == 0 else result
