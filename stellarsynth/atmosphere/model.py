"""
Model atmosphere representations.

Layers are ordered from the outermost (top) layer inwards.
"""

from dataclasses import dataclass
from typing import Sequence, Tuple, Union

import numpy as np

from stellarsynth.core.logging_config import get_logger

logger = get_logger("atmosphere.model")


def _check_state(temp: float, number_density: float, electron_number_density: float):
    if not temp > 0:
        raise ValueError(f"Layer temperature must be positive (got {temp})")
    if not number_density > 0:
        raise ValueError(f"Layer number density must be positive (got {number_density})")
    if not electron_number_density >= 0:
        raise ValueError(
            f"Layer electron number density must be non-negative (got {electron_number_density})"
        )


@dataclass(frozen=True)
class PlanarLayer:
    """
    One layer of a plane-parallel atmosphere.

    Attributes
    ----------
    temp : float
        Temperature in K
    number_density : float
        Total number density in cm^-3
    electron_number_density : float
        Electron number density in cm^-3
    colmass : float
        Column mass above the layer in g cm^-2
    density : float
        Mass density in g cm^-3
    """

    temp: float
    number_density: float
    electron_number_density: float
    colmass: float
    density: float

    def __post_init__(self):
        _check_state(self.temp, self.number_density, self.electron_number_density)
        if self.colmass < 0:
            raise ValueError(f"Column mass must be non-negative (got {self.colmass})")
        if not self.density > 0:
            raise ValueError(f"Mass density must be positive (got {self.density})")


@dataclass(frozen=True)
class ShellLayer:
    """
    One shell of a spherical atmosphere.

    Attributes
    ----------
    temp : float
        Temperature in K
    number_density : float
        Total number density in cm^-3
    electron_number_density : float
        Electron number density in cm^-3
    radius : float
        Shell radius in cm
    """

    temp: float
    number_density: float
    electron_number_density: float
    radius: float

    def __post_init__(self):
        _check_state(self.temp, self.number_density, self.electron_number_density)
        if not self.radius > 0:
            raise ValueError(f"Shell radius must be positive (got {self.radius})")


class _Atmosphere:
    """Behaviour shared by both geometries."""

    layer_type = None
    geometry = None

    def __init__(self, layers: Sequence):
        self.layers: Tuple = tuple(layers)
        self.validate()
        logger.debug(f"Created {type(self).__name__} with {len(self.layers)} layers")

    def __len__(self) -> int:
        return len(self.layers)

    def __iter__(self):
        return iter(self.layers)

    def __getitem__(self, index):
        return self.layers[index]

    @property
    def temps(self) -> np.ndarray:
        """Layer temperatures in K."""
        return np.array([layer.temp for layer in self.layers])

    @property
    def number_densities(self) -> np.ndarray:
        """Total number densities in cm^-3."""
        return np.array([layer.number_density for layer in self.layers])

    @property
    def electron_number_densities(self) -> np.ndarray:
        """Electron number densities in cm^-3."""
        return np.array([layer.electron_number_density for layer in self.layers])

    def validate(self) -> bool:
        """
        Validate the atmosphere.

        Returns
        -------
        bool
            True if valid

        Raises
        ------
        ValueError
            If the atmosphere is empty or has layers of the wrong kind
        """
        if not self.layers:
            raise ValueError("An atmosphere needs at least one layer")
        for layer in self.layers:
            if not isinstance(layer, self.layer_type):
                raise ValueError(
                    f"{type(self).__name__} layers must be {self.layer_type.__name__} "
                    f"(got {type(layer).__name__})"
                )
        return True

    def __repr__(self) -> str:
        return f"{type(self).__name__}(n_layers={len(self.layers)})"


class PlanarAtmosphere(_Atmosphere):
    """Plane-parallel atmosphere; column mass increases inwards."""

    layer_type = PlanarLayer
    geometry = "planar"

    @property
    def colmasses(self) -> np.ndarray:
        """Column masses in g cm^-2."""
        return np.array([layer.colmass for layer in self.layers])

    @property
    def densities(self) -> np.ndarray:
        """Mass densities in g cm^-3."""
        return np.array([layer.density for layer in self.layers])

    def validate(self) -> bool:
        super().validate()
        if np.any(np.diff(self.colmasses) < 0):
            raise ValueError("Column mass must not decrease inwards")
        return True


class ShellAtmosphere(_Atmosphere):
    """Spherical atmosphere; radius decreases inwards."""

    layer_type = ShellLayer
    geometry = "spherical"

    @property
    def radii(self) -> np.ndarray:
        """Shell radii in cm."""
        return np.array([layer.radius for layer in self.layers])

    def validate(self) -> bool:
        super().validate()
        if np.any(np.diff(self.radii) >= 0):
            raise ValueError("Shell radii must strictly decrease inwards")
        return True


ModelAtmosphere = Union[PlanarAtmosphere, ShellAtmosphere]
