"""
Options controlling a synthesis run.
"""

import dataclasses
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Mapping, Optional, Tuple

import numpy as np

from stellarsynth.core.logging_config import get_logger

logger = get_logger("synthesis.options")


def _as_mu_grid(values) -> Tuple[float, ...]:
    mu = np.asarray(values, dtype=float)
    if mu.ndim != 1:
        raise ValueError("mu_grid must be a 1-D sequence")
    return tuple(mu.tolist())


def _default_mu_grid() -> Tuple[float, ...]:
    return _as_mu_grid(np.linspace(0.0, 1.0, 21))


@dataclass(frozen=True)
class SynthesisOptions:
    """
    Options for ``synthesize``.

    Lengths are in Å and velocities in km/s.

    Attributes
    ----------
    metallicity : float
        [metals/H] applied to every element except H and He
    abundances : Mapping[str, float]
        Element -> A(X) overrides
    vmic : float
        Microturbulent velocity in km/s
    air_wavelengths : bool
        Interpret the wavelength range as air wavelengths
    wavelength_conversion_warn_threshold : float
        Largest acceptable error (Å) of the linear vacuum grid built from an
        air grid
    line_buffer : float
        Lines up to this far outside the grid are included (Å)
    cntm_step : float
        Spacing of the coarse continuum grid (Å)
    hydrogen_lines : bool
        Include hydrogen line opacity
    mu_grid : tuple of float
        Cosines of the ray angles used by spherical transfer
    line_cutoff_threshold : float
        Line wings are truncated where the profile drops below this fraction
        of the continuum
    ionization_energies, partition_funcs, equilibrium_constants : Mapping, optional
        Entries that override the packaged data tables
    n_workers : int
        Threads used for the per-layer equilibrium and opacity step
    """

    metallicity: float = 0.0
    abundances: Mapping[str, float] = field(default_factory=dict)
    vmic: float = 1.0
    air_wavelengths: bool = False
    wavelength_conversion_warn_threshold: float = 1e-4
    line_buffer: float = 10.0
    cntm_step: float = 1.0
    hydrogen_lines: bool = True
    mu_grid: Tuple[float, ...] = field(default_factory=_default_mu_grid)
    line_cutoff_threshold: float = 1e-3
    ionization_energies: Optional[Mapping[str, Tuple[float, float, float]]] = None
    partition_funcs: Optional[Mapping[Any, Callable[[float], float]]] = None
    equilibrium_constants: Optional[Mapping[Any, Callable[[float], float]]] = None
    n_workers: int = 1

    def __post_init__(self):
        object.__setattr__(self, "abundances", dict(self.abundances))
        object.__setattr__(self, "mu_grid", _as_mu_grid(self.mu_grid))

    @classmethod
    def field_names(cls):
        return [f.name for f in dataclasses.fields(cls)]

    @classmethod
    def from_dict(cls, config: Mapping[str, Any]) -> "SynthesisOptions":
        """
        Build options from a mapping (e.g. the ``synthesis`` config section).

        Raises
        ------
        ValueError
            If the mapping contains unknown option names
        """
        unknown = sorted(set(config) - set(cls.field_names()))
        if unknown:
            raise ValueError(f"Unknown synthesis options: {unknown}")
        options = cls(**dict(config))
        options.validate()
        return options

    def replace(self, **changes) -> "SynthesisOptions":
        """Return a copy with some options changed."""
        unknown = sorted(set(changes) - set(self.field_names()))
        if unknown:
            raise ValueError(f"Unknown synthesis options: {unknown}")
        return dataclasses.replace(self, **changes)

    def validate(self) -> bool:
        """
        Validate option values.

        Returns
        -------
        bool
            True if valid

        Raises
        ------
        ValueError
            If an option is out of range
        """
        if self.vmic < 0:
            raise ValueError("vmic must be non-negative")
        if self.line_buffer < 0:
            raise ValueError("line_buffer must be non-negative")
        if not self.cntm_step > 0:
            raise ValueError("cntm_step must be positive")
        if not self.wavelength_conversion_warn_threshold > 0:
            raise ValueError("wavelength_conversion_warn_threshold must be positive")
        if self.line_cutoff_threshold < 0:
            raise ValueError("line_cutoff_threshold must be non-negative")
        if self.n_workers < 1:
            raise ValueError("n_workers must be at least 1")

        mu = np.asarray(self.mu_grid)
        if len(mu) < 2:
            raise ValueError("mu_grid must be a 1-D array with at least two values")
        if np.any(mu < 0) or np.any(mu > 1) or np.any(np.diff(mu) <= 0):
            raise ValueError("mu_grid must be strictly increasing within [0, 1]")
        return True

    def to_dict(self) -> Dict[str, Any]:
        """Plain-value dictionary of the scalar options (for logging and configs)."""
        return {
            "metallicity": self.metallicity,
            "abundances": dict(self.abundances),
            "vmic": self.vmic,
            "air_wavelengths": self.air_wavelengths,
            "wavelength_conversion_warn_threshold": self.wavelength_conversion_warn_threshold,
            "line_buffer": self.line_buffer,
            "cntm_step": self.cntm_step,
            "hydrogen_lines": self.hydrogen_lines,
            "mu_grid": list(self.mu_grid),
            "line_cutoff_threshold": self.line_cutoff_threshold,
            "n_workers": self.n_workers,
        }
