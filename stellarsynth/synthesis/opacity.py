"""
Per-layer assembly of continuum and hydrogen line opacity.
"""

import threading
from dataclasses import dataclass
from typing import Callable, Dict, Mapping, Optional

import numpy as np
from scipy.interpolate import interp1d

from stellarsynth.atomic.structures import Species
from stellarsynth.core.abc import ContinuumOpacityModel, HydrogenLineModel
from stellarsynth.core.constants import C_CGS, REFERENCE_WAVELENGTH_CM
from stellarsynth.core.logging_config import get_logger

logger = get_logger("synthesis.opacity")

H_I = Species("H", 0)


class SpeciesDensities:
    """
    Columnar store of number densities, one column per species.

    Rows are filled by layer index, in any order. The first recorded layer
    fixes the set of species.

    Parameters
    ----------
    n_layers : int
        Number of layers
    """

    def __init__(self, n_layers: int):
        if n_layers < 1:
            raise ValueError("n_layers must be at least 1")
        self.n_layers = n_layers
        self._columns: Optional[Dict[Species, np.ndarray]] = None
        self._filled = np.zeros(n_layers, dtype=bool)
        self._lock = threading.Lock()

    @property
    def species(self):
        """Species recorded so far (empty before the first layer)."""
        return [] if self._columns is None else list(self._columns)

    def record(self, index: int, densities: Mapping[Species, float]) -> None:
        """
        Store the number densities of one layer.

        Raises
        ------
        RuntimeError
            If the species differ from those of previously recorded layers
        """
        with self._lock:
            if self._columns is None:
                self._columns = {
                    species: np.full(self.n_layers, np.nan) for species in densities
                }
            elif set(densities) != set(self._columns):
                extra = sorted(map(str, set(densities) - set(self._columns)))
                absent = sorted(map(str, set(self._columns) - set(densities)))
                raise RuntimeError(
                    f"Equilibrium solver returned different species for layer {index} "
                    f"(unexpected: {extra}, missing: {absent})"
                )
            for species, value in densities.items():
                self._columns[species][index] = value
            self._filled[index] = True

    def as_dict(self) -> Dict[Species, np.ndarray]:
        """
        Number densities as ``species -> array[n_layers]``.

        Raises
        ------
        RuntimeError
            If some layer has not been recorded
        """
        if self._columns is None or not self._filled.all():
            missing = np.flatnonzero(~self._filled)
            raise RuntimeError(f"Number densities missing for layers {missing.tolist()}")
        return {species: column.copy() for species, column in self._columns.items()}


class ContinuumInterpolant:
    """
    Continuum absorption of one layer as a function of wavelength.

    Parameters
    ----------
    wavelengths : array
        Ascending wavelengths of the coarse grid (cm)
    alpha : array
        Continuum absorption at those wavelengths (cm^-1)
    kind : str
        Interpolation kind accepted by ``scipy.interpolate.interp1d``
    """

    def __init__(self, wavelengths: np.ndarray, alpha: np.ndarray, kind: str = "linear"):
        self.wavelengths = np.asarray(wavelengths, dtype=float)
        self.alpha = np.asarray(alpha, dtype=float)
        self.kind = kind
        self._interp = interp1d(
            self.wavelengths, self.alpha, kind=kind, assume_sorted=True, bounds_error=True
        )

    def __call__(self, wavelength):
        value = self._interp(wavelength)
        return float(value) if np.ndim(value) == 0 else value

    def __repr__(self):
        return (
            f"ContinuumInterpolant({self.wavelengths[0]:.6e}..{self.wavelengths[-1]:.6e} cm, "
            f"kind={self.kind!r})"
        )


@dataclass
class LayerOpacity:
    """
    Opacity of one layer before line absorption.

    Attributes
    ----------
    row : array
        Continuum plus hydrogen line absorption on the fine grid (cm^-1)
    alpha5 : float
        Continuum absorption at 5000 Å (cm^-1)
    continuum : ContinuumInterpolant
        Continuum absorption as a function of wavelength
    """

    row: np.ndarray
    alpha5: float
    continuum: ContinuumInterpolant


class OpacityAssembler:
    """
    Builds the continuum and hydrogen line part of each layer's opacity.

    Parameters
    ----------
    wavelengths : array
        Fine synthesis grid in cm
    continuum_wavelengths : array
        Coarse continuum grid in cm, covering the fine grid and the line buffer
    continuum_model : ContinuumOpacityModel
        Continuum opacity collaborator
    hydrogen_model : HydrogenLineModel, optional
        Hydrogen line collaborator; required when ``hydrogen_lines`` is True
    partition_funcs : Mapping[Species, callable]
        Partition functions
    vmic : float
        Microturbulent velocity in cm/s
    hydrogen_lines : bool
        Include hydrogen line opacity
    profile_table : optional
        Passed through to the hydrogen line model
    interpolation : str
        Interpolation kind of the continuum
    """

    def __init__(
        self,
        wavelengths: np.ndarray,
        continuum_wavelengths: np.ndarray,
        continuum_model: ContinuumOpacityModel,
        hydrogen_model: Optional[HydrogenLineModel],
        partition_funcs: Mapping[Species, Callable[[float], float]],
        vmic: float,
        hydrogen_lines: bool = True,
        profile_table=None,
        interpolation: str = "linear",
    ):
        if hydrogen_lines and hydrogen_model is None:
            raise ValueError("A hydrogen line model is required when hydrogen_lines is enabled")
        self.wavelengths = np.asarray(wavelengths, dtype=float)
        self.continuum_wavelengths = np.asarray(continuum_wavelengths, dtype=float)
        if (
            self.continuum_wavelengths[0] > self.wavelengths[0]
            or self.continuum_wavelengths[-1] < self.wavelengths[-1]
        ):
            raise ValueError("The continuum grid must cover the synthesis grid")

        self.continuum_model = continuum_model
        self.hydrogen_model = hydrogen_model
        self.partition_funcs = partition_funcs
        self.vmic = vmic
        self.hydrogen_lines = hydrogen_lines
        self.profile_table = profile_table
        self.interpolation = interpolation

        # Ascending frequencies of the coarse grid (i.e. wavelengths reversed)
        self._frequencies = C_CGS / self.continuum_wavelengths[::-1]
        self._frequency5 = np.array([C_CGS / REFERENCE_WAVELENGTH_CM])

    def assemble(
        self,
        index: int,
        layer,
        number_densities: Mapping[Species, float],
        species_densities: SpeciesDensities,
    ) -> LayerOpacity:
        """
        Assemble the opacity of one layer.

        Parameters
        ----------
        index : int
            Layer index
        layer : PlanarLayer or ShellLayer
            The layer
        number_densities : Mapping[Species, float]
            Equilibrium number densities of the layer (cm^-3)
        species_densities : SpeciesDensities
            Store receiving the layer's number densities

        Returns
        -------
        LayerOpacity
            Opacity row, 5000 Å continuum and the continuum interpolant
        """
        T = layer.temp
        n_e = layer.electron_number_density

        alpha_coarse = self.continuum_model.evaluate(
            self._frequencies, T, n_e, number_densities, self.partition_funcs
        )
        continuum = ContinuumInterpolant(
            self.continuum_wavelengths,
            np.asarray(alpha_coarse, dtype=float)[::-1],
            kind=self.interpolation,
        )
        row = np.array(continuum(self.wavelengths), dtype=float)

        alpha5 = float(
            np.asarray(
                self.continuum_model.evaluate(
                    self._frequency5, T, n_e, number_densities, self.partition_funcs
                )
            )[0]
        )

        if self.hydrogen_lines:
            if H_I not in number_densities:
                raise RuntimeError("Equilibrium solver did not return neutral hydrogen")
            row += self.hydrogen_model.evaluate(
                self.wavelengths,
                T,
                n_e,
                number_densities[H_I],
                self.partition_funcs[H_I](T),
                self.profile_table,
                self.vmic,
            )

        species_densities.record(index, number_densities)
        logger.debug(f"Layer {index}: T={T:.1f} K, alpha5={alpha5:.3e} cm^-1")
        return LayerOpacity(row=row, alpha5=alpha5, continuum=continuum)
