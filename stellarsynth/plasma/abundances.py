"""
Conversion of solar-scaled abundances to number fractions.
"""

from typing import Dict, Mapping, Optional

from stellarsynth.atomic.data import AtomicData, default_atomic_data
from stellarsynth.core.logging_config import get_logger

logger = get_logger("plasma.abundances")


def get_absolute_abundances(
    metallicity: float = 0.0,
    overrides: Optional[Mapping[str, float]] = None,
    atomic_data: Optional[AtomicData] = None,
) -> Dict[str, float]:
    """
    Calculate n_X / n_total for every tracked element.

    Hydrogen is fixed at 1 before normalization. Elements given in
    ``overrides`` take ``10**(A(X) - 12)``. Helium without an override keeps
    its solar value (it does not scale with metallicity). All other elements
    take ``10**(A_sun(X) + metallicity - 12)``. The result is normalized to
    sum to 1.

    Parameters
    ----------
    metallicity : float
        [metals/H], added to the solar A(X) of every element but H and He
    overrides : Mapping[str, float], optional
        Element symbol -> A(X) = log10(n_X/n_H) + 12
    atomic_data : AtomicData, optional
        Data tables; defaults to the packaged tables

    Returns
    -------
    Dict[str, float]
        Element symbol -> number fraction, for every tracked element

    Raises
    ------
    ValueError
        If hydrogen is overridden, or an override names an unknown element
    """
    atomic_data = atomic_data if atomic_data is not None else default_atomic_data()
    overrides = dict(overrides or {})

    if "H" in overrides:
        raise ValueError("Can't set solar abundance of H.")
    unknown = sorted(set(overrides) - set(atomic_data.atomic_symbols))
    if unknown:
        raise ValueError(f"Abundances given for unknown elements: {unknown}")

    abundances = {}
    for symbol in atomic_data.atomic_symbols:
        if symbol == "H":
            abundances[symbol] = 1.0
        elif symbol in overrides:
            abundances[symbol] = 10 ** (overrides[symbol] - 12)
        elif symbol == "He":
            abundances[symbol] = 10 ** (atomic_data.solar_abundances[symbol] - 12)
        else:
            abundances[symbol] = 10 ** (atomic_data.solar_abundances[symbol] + metallicity - 12)

    total = sum(abundances.values())
    logger.debug(f"Abundances normalized with total n/n_H = {total:.6f}")
    return {symbol: value / total for symbol, value in abundances.items()}
