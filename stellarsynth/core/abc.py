"""
Protocols for the physics collaborators of the synthesis pipeline.

The synthesis core only depends on these narrow contracts. Any object with
matching methods can be plugged in (structural typing), which is how the
tests substitute stub opacity and transfer models.
"""

from typing import (
    Any,
    Callable,
    Dict,
    Mapping,
    Optional,
    Protocol,
    Sequence,
    Tuple,
    TYPE_CHECKING,
    runtime_checkable,
)
import numpy as np

from stellarsynth.atomic.structures import Species, Transition

if TYPE_CHECKING:
    from stellarsynth.atmosphere.model import ModelAtmosphere

PartitionFuncs = Mapping[Species, Callable[[float], float]]
NumberDensities = Mapping[Species, float]


@runtime_checkable
class EquilibriumSolver(Protocol):
    """
    Protocol for ionization/molecular equilibrium solvers.

    ``build_context`` is called once per synthesis; ``solve`` once per layer
    with the layer's temperature, total and electron number densities.
    """

    def build_context(
        self,
        abundances: Mapping[str, float],
        ionization_energies: Mapping[str, Tuple[float, float, float]],
        partition_funcs: PartitionFuncs,
        equilibrium_constants: Mapping[Species, Callable[[float], float]],
    ) -> Any:
        """Precompute everything that does not depend on the layer."""
        ...

    def solve(
        self, context: Any, T: float, n_total: float, n_e: float
    ) -> Dict[Species, float]:
        """Number density (cm^-3) of every species in one layer."""
        ...


@runtime_checkable
class ContinuumOpacityModel(Protocol):
    """Protocol for continuum absorption (bound-free, free-free, scattering)."""

    def evaluate(
        self,
        frequencies: np.ndarray,
        T: float,
        n_e: float,
        number_densities: NumberDensities,
        partition_funcs: PartitionFuncs,
    ) -> np.ndarray:
        """Absorption coefficient (cm^-1) at each ascending frequency (Hz)."""
        ...


@runtime_checkable
class HydrogenLineModel(Protocol):
    """Protocol for hydrogen line absorption."""

    def evaluate(
        self,
        wavelengths: np.ndarray,
        T: float,
        n_e: float,
        n_HI: float,
        U_HI: float,
        profile_table: Optional[Any],
        doppler_velocity: float,
    ) -> np.ndarray:
        """Absorption coefficient (cm^-1) at each wavelength (cm)."""
        ...


@runtime_checkable
class LineAbsorptionModel(Protocol):
    """Protocol for the in-place line absorption accumulator."""

    def accumulate(
        self,
        alpha: np.ndarray,
        linelist: Sequence[Transition],
        wavelengths: np.ndarray,
        temps: np.ndarray,
        electron_densities: np.ndarray,
        number_densities: Mapping[Species, np.ndarray],
        partition_funcs: PartitionFuncs,
        vmic: float,
        continuum: Sequence[Callable[[float], float]],
        cutoff_threshold: float,
    ) -> None:
        """Add line absorption to ``alpha`` (layers x wavelengths) in place."""
        ...


@runtime_checkable
class TransferSolver(Protocol):
    """Protocol for the formal solution of the transfer equation."""

    def solve(
        self,
        atmosphere: "ModelAtmosphere",
        alpha: np.ndarray,
        source_function: np.ndarray,
        alpha5: np.ndarray,
        mu_grid: np.ndarray,
    ) -> np.ndarray:
        """Emergent flux at each wavelength."""
        ...
