"""
Planck function.
"""

from typing import Union

import numpy as np

from stellarsynth.core.constants import HPLANCK_CGS, C_CGS, KBOLTZ_CGS


def blackbody(
    T_K: Union[float, np.ndarray], wavelength_cm: Union[float, np.ndarray]
) -> Union[float, np.ndarray]:
    """
    Planck specific intensity per unit wavelength.

    B = 2hc^2 / lambda^5 / (exp(hc / lambda kT) - 1)

    Parameters
    ----------
    T_K : float or array
        Temperature in K
    wavelength_cm : float or array
        Wavelength in cm (broadcast against ``T_K``)

    Returns
    -------
    float or array
        B_lambda in erg s^-1 cm^-2 sr^-1 cm^-1
    """
    x = HPLANCK_CGS * C_CGS / (wavelength_cm * KBOLTZ_CGS * T_K)
    return 2 * HPLANCK_CGS * C_CGS**2 / wavelength_cm**5 / np.expm1(x)
