"""
Spectral synthesis: from a model atmosphere and a linelist to emergent flux.
"""

from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, List, Mapping, Optional, Sequence, Union

import numpy as np

from stellarsynth.atomic.data import AtomicData, default_atomic_data
from stellarsynth.atomic.structures import Species, Transition
from stellarsynth.core.abc import (
    ContinuumOpacityModel,
    EquilibriumSolver,
    HydrogenLineModel,
    LineAbsorptionModel,
    TransferSolver,
)
from stellarsynth.core.constants import ANGSTROM_TO_CM
from stellarsynth.core.grid import WavelengthGrid
from stellarsynth.core.logging_config import get_logger, log_stage
from stellarsynth.core.units import angstrom_to_cm, km_s_to_cm_s
from stellarsynth.plasma.abundances import get_absolute_abundances
from stellarsynth.plasma.saha import SahaEquilibriumSolver
from stellarsynth.radiation.blackbody import blackbody
from stellarsynth.radiation.continuum import HydrogenicContinuum
from stellarsynth.radiation.hydrogen_lines import HydrogenLineOpacity
from stellarsynth.radiation.line_absorption import LineAbsorption
from stellarsynth.radiation.transfer import RadiativeTransfer
from stellarsynth.synthesis.opacity import OpacityAssembler, SpeciesDensities
from stellarsynth.synthesis.options import SynthesisOptions

logger = get_logger("synthesis.synthesize")


@dataclass
class PhysicsModels:
    """
    The physics collaborators used by ``synthesize``.

    Attributes
    ----------
    equilibrium_solver : EquilibriumSolver
        Chemical and ionization equilibrium
    continuum : ContinuumOpacityModel
        Continuum absorption
    hydrogen_lines : HydrogenLineModel
        Hydrogen line absorption
    line_absorption : LineAbsorptionModel
        Absorption by the linelist
    transfer : TransferSolver
        Formal solution of the transfer equation
    profile_table : optional
        Tabulated hydrogen profiles passed to the hydrogen line model
    """

    equilibrium_solver: EquilibriumSolver
    continuum: ContinuumOpacityModel
    hydrogen_lines: HydrogenLineModel
    line_absorption: LineAbsorptionModel
    transfer: TransferSolver
    profile_table: Any = None

    @classmethod
    def default(cls, atomic_data: Optional[AtomicData] = None) -> "PhysicsModels":
        """The models shipped with the package."""
        return cls(
            equilibrium_solver=SahaEquilibriumSolver(),
            continuum=HydrogenicContinuum(),
            hydrogen_lines=HydrogenLineOpacity(),
            line_absorption=LineAbsorption(atomic_data),
            transfer=RadiativeTransfer(),
        )


def _read_only(array: np.ndarray) -> np.ndarray:
    array = np.array(array, dtype=float)
    array.setflags(write=False)
    return array


@dataclass(frozen=True)
class SynthesisResult:
    """
    Output of ``synthesize``.

    Attributes
    ----------
    flux : array
        Emergent flux at each wavelength (erg s^-1 cm^-2 cm^-1)
    alpha : array
        Total absorption coefficient (layers x wavelengths) in cm^-1
    number_densities : Mapping[Species, array]
        Per-layer number density of every species (cm^-3)
    wavelengths : array
        Vacuum wavelengths in Å
    """

    flux: np.ndarray
    alpha: np.ndarray
    number_densities: Mapping[Species, np.ndarray]
    wavelengths: np.ndarray = field(repr=False)

    def __post_init__(self):
        object.__setattr__(self, "flux", _read_only(self.flux))
        object.__setattr__(self, "alpha", _read_only(self.alpha))
        object.__setattr__(self, "wavelengths", _read_only(self.wavelengths))
        object.__setattr__(
            self,
            "number_densities",
            MappingProxyType({s: _read_only(n) for s, n in self.number_densities.items()}),
        )


def filter_linelist(
    linelist: Sequence[Transition], lambda_min: float, lambda_max: float, buffer: float
) -> List[Transition]:
    """
    Sort a linelist and keep the lines near a wavelength range.

    Parameters
    ----------
    linelist : sequence of Transition
        Lines in any order (not modified)
    lambda_min, lambda_max : float
        Wavelength range in cm
    buffer : float
        Lines up to this far outside the range are kept (cm)

    Returns
    -------
    List[Transition]
        Lines with ``lambda_min - buffer <= wl <= lambda_max + buffer``,
        ascending in wavelength
    """
    lines = list(linelist)
    if any(a.wl > b.wl for a, b in zip(lines, lines[1:])):
        logger.info("Linelist is not sorted; sorting it by wavelength")
        lines = sorted(lines, key=lambda line: line.wl)
    lo, hi = lambda_min - buffer, lambda_max + buffer
    return [line for line in lines if lo <= line.wl <= hi]


def build_wavelength_grid(
    lambda_start: Union[float, WavelengthGrid, Sequence[float]],
    lambda_stop: Optional[float],
    lambda_step: float,
    options: SynthesisOptions,
) -> WavelengthGrid:
    """
    The vacuum synthesis grid in Å.

    ``lambda_start`` may be a number (with ``lambda_stop``), an existing
    ``WavelengthGrid`` or an evenly spaced array. With ``air_wavelengths``
    the range is converted to an approximately equivalent vacuum grid.

    Raises
    ------
    ValueError
        If the grid is not ascending, or the air to vacuum approximation is
        worse than ``wavelength_conversion_warn_threshold``
    """
    if isinstance(lambda_start, WavelengthGrid):
        grid = lambda_start
    elif np.ndim(lambda_start) == 1:
        grid = WavelengthGrid.from_array(lambda_start)
    else:
        if lambda_stop is None:
            raise ValueError("lambda_stop is required when lambda_start is a number")
        if lambda_stop < lambda_start or not lambda_step > 0:
            raise ValueError("Wavelengths must be in increasing order")
        grid = WavelengthGrid.from_range(lambda_start, lambda_stop, lambda_step)

    if options.air_wavelengths:
        grid = WavelengthGrid.from_air(
            grid.start,
            grid.stop,
            grid.step,
            threshold=options.wavelength_conversion_warn_threshold,
        )
    return grid


def synthesize(
    atmosphere,
    linelist: Sequence[Transition],
    lambda_start,
    lambda_stop: Optional[float] = None,
    lambda_step: float = 0.01,
    *,
    options: Optional[SynthesisOptions] = None,
    models: Optional[PhysicsModels] = None,
    **overrides,
) -> SynthesisResult:
    """
    Compute the emergent flux of a model atmosphere.

    Parameters
    ----------
    atmosphere : PlanarAtmosphere or ShellAtmosphere
        Model atmosphere, outermost layer first
    linelist : sequence of Transition
        Lines to include (need not be sorted)
    lambda_start : float, WavelengthGrid or array
        First wavelength in Å, or the whole grid
    lambda_stop : float, optional
        Last wavelength in Å (required when ``lambda_start`` is a number)
    lambda_step : float
        Grid spacing in Å
    options : SynthesisOptions, optional
        Synthesis options; defaults to ``SynthesisOptions()``
    models : PhysicsModels, optional
        Physics collaborators; defaults to ``PhysicsModels.default``
    **overrides
        Individual option values, applied on top of ``options``

    Returns
    -------
    SynthesisResult
        Flux, absorption matrix, number densities and wavelengths

    Raises
    ------
    ValueError
        For invalid input (hydrogen abundance override, non-ascending grid,
        inaccurate air to vacuum conversion, out-of-range options)
    RuntimeError
        If the collaborators break their contracts (inconsistent species,
        non-finite absorption)
    """
    options = options if options is not None else SynthesisOptions()
    if overrides:
        options = options.replace(**overrides)
    options.validate()
    atmosphere.validate()

    grid = build_wavelength_grid(lambda_start, lambda_stop, lambda_step, options)
    wavelengths = grid.scaled(ANGSTROM_TO_CM).values
    vmic = km_s_to_cm_s(options.vmic)
    line_buffer = angstrom_to_cm(options.line_buffer)
    cntm_grid = WavelengthGrid.from_range(
        grid.start - options.line_buffer - options.cntm_step,
        grid.stop + options.line_buffer + options.cntm_step,
        options.cntm_step,
    ).scaled(ANGSTROM_TO_CM)

    lines = filter_linelist(linelist, wavelengths[0], wavelengths[-1], line_buffer)
    logger.info(
        f"Synthesizing {len(grid)} wavelengths ({grid.start:.3f}-{grid.stop:.3f} Å) "
        f"with {len(lines)} lines over {len(atmosphere.layers)} layers"
    )

    atomic_data = default_atomic_data().with_overrides(
        ionization_energies=options.ionization_energies,
        partition_funcs=options.partition_funcs,
        equilibrium_constants=options.equilibrium_constants,
    )
    models = models if models is not None else PhysicsModels.default(atomic_data)

    abundances = get_absolute_abundances(options.metallicity, options.abundances, atomic_data)
    context = models.equilibrium_solver.build_context(
        abundances,
        atomic_data.ionization_energies,
        atomic_data.partition_funcs,
        atomic_data.equilibrium_constants,
    )

    assembler = OpacityAssembler(
        wavelengths,
        cntm_grid.values,
        models.continuum,
        models.hydrogen_lines,
        atomic_data.partition_funcs,
        vmic,
        hydrogen_lines=options.hydrogen_lines,
        profile_table=models.profile_table,
    )

    n_layers = len(atmosphere.layers)
    alpha = np.zeros((n_layers, len(wavelengths)))
    alpha5 = np.zeros(n_layers)
    continuum = [None] * n_layers
    species_densities = SpeciesDensities(n_layers)

    def process_layer(i):
        layer = atmosphere.layers[i]
        densities = models.equilibrium_solver.solve(
            context, layer.temp, layer.number_density, layer.electron_number_density
        )
        opacity = assembler.assemble(i, layer, densities, species_densities)
        alpha[i, :] = opacity.row
        alpha5[i] = opacity.alpha5
        continuum[i] = opacity.continuum

    with log_stage(logger, f"equilibrium and continuum for {n_layers} layers"):
        if options.n_workers == 1:
            for i in range(n_layers):
                process_layer(i)
        else:
            with ThreadPoolExecutor(max_workers=options.n_workers) as executor:
                futures = [executor.submit(process_layer, i) for i in range(n_layers)]
                for future in as_completed(futures):
                    future.result()

    number_densities = species_densities.as_dict()

    with log_stage(logger, f"line absorption for {len(lines)} lines"):
        models.line_absorption.accumulate(
            alpha,
            lines,
            wavelengths,
            atmosphere.temps,
            atmosphere.electron_number_densities,
            number_densities,
            atomic_data.partition_funcs,
            vmic,
            continuum,
            options.line_cutoff_threshold,
        )

    if not np.all(np.isfinite(alpha)):
        bad_layers = np.flatnonzero(~np.isfinite(alpha).all(axis=1))
        raise RuntimeError(f"Non-finite absorption coefficient in layers {bad_layers.tolist()}")

    source_function = blackbody(atmosphere.temps[:, None], wavelengths[None, :])
    with log_stage(logger, f"{atmosphere.geometry} radiative transfer"):
        flux = models.transfer.solve(
            atmosphere, alpha, source_function, alpha5, options.mu_grid
        )

    return SynthesisResult(
        flux=flux,
        alpha=alpha,
        number_densities=number_densities,
        wavelengths=grid.values,
    )
