"""
Saha ionization and molecular equilibrium for stellar atmosphere layers.
"""

from collections import defaultdict
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Mapping, Tuple

import numpy as np
from scipy.optimize import fsolve

from stellarsynth.atomic.structures import Species
from stellarsynth.core.constants import (
    KBOLTZ_CGS,
    KBOLTZ_EV,
    HPLANCK_CGS,
    ELECTRON_MASS_CGS,
)
from stellarsynth.core.logging_config import get_logger

logger = get_logger("plasma.saha")


def translational_u(T_K: float) -> float:
    """(2 pi m_e k T / h^2)^(3/2), the electron translational partition function per cm^3."""
    return (2 * np.pi * ELECTRON_MASS_CGS * KBOLTZ_CGS * T_K / HPLANCK_CGS**2) ** 1.5


@dataclass
class SahaContext:
    """
    Layer-independent part of the equilibrium problem.

    Attributes
    ----------
    abundances : Dict[str, float]
        Element -> n_X / n_total
    ionization_energies : Mapping[str, tuple]
        Element -> (chi_I, chi_II, chi_III) in eV
    partition_funcs : Mapping[Species, callable]
        Species -> U(T)
    molecules : Dict[Species, callable]
        Neutral diatomic molecule -> log10 K_p(T)
    stages : Dict[str, int]
        Number of ionization stages tracked for each element
    """

    abundances: Dict[str, float]
    ionization_energies: Mapping[str, Tuple[float, float, float]]
    partition_funcs: Mapping[Species, Callable[[float], float]]
    molecules: Dict[Species, Callable[[float], float]] = field(default_factory=dict)
    stages: Dict[str, int] = field(default_factory=dict)

    @property
    def molecular_elements(self) -> List[str]:
        """Elements that take part in at least one molecule."""
        elements = []
        for molecule in self.molecules:
            for atom in molecule.atoms:
                if atom not in elements:
                    elements.append(atom)
        return elements


class SahaEquilibriumSolver:
    """
    LTE number densities of atoms, ions and diatomic molecules.

    Atoms are tracked in up to three ionization stages. For each element the
    Saha equation gives the ionized-to-neutral ratios

        n_II / n_I = 2 U_II / U_I * transU / n_e * exp(-chi_I / kT)

    and the neutral density follows from conservation of nuclei,
    ``abundance * (n_total - n_e)``. An ionization energy of -1 disables the
    corresponding stage. When equilibrium constants are given, molecules

        n_AB = n_A n_B kT / K_p

    enter the conservation equations, which are then solved numerically in
    log space.
    """

    def build_context(
        self,
        abundances: Mapping[str, float],
        ionization_energies: Mapping[str, Tuple[float, float, float]],
        partition_funcs: Mapping[Species, Callable[[float], float]],
        equilibrium_constants: Mapping[Species, Callable[[float], float]],
    ) -> SahaContext:
        """
        Check the tables once per synthesis.

        Raises
        ------
        ValueError
            If an element has no ionization energies or a tracked species has
            no partition function, or a molecule is not a neutral diatomic
            made of tracked elements
        """
        stages = {}
        for element in abundances:
            if element not in ionization_energies:
                raise ValueError(f"No ionization energies for {element}")
            chi_I, chi_II, _ = ionization_energies[element]
            n_stages = 1 if chi_I < 0 else (2 if chi_II < 0 else 3)
            for charge in range(n_stages):
                if Species(element, charge) not in partition_funcs:
                    raise ValueError(f"No partition function for {Species(element, charge)}")
            stages[element] = n_stages

        molecules = {}
        for molecule, log_K in equilibrium_constants.items():
            if len(molecule.atoms) != 2 or molecule.charge != 0:
                raise ValueError(f"Only neutral diatomic molecules are supported (got {molecule})")
            missing = [atom for atom in molecule.atoms if atom not in abundances]
            if missing:
                raise ValueError(f"Molecule {molecule} contains untracked elements {missing}")
            molecules[molecule] = log_K

        logger.debug(
            f"Equilibrium context: {len(stages)} elements, {len(molecules)} molecules"
        )
        return SahaContext(
            abundances=dict(abundances),
            ionization_energies=ionization_energies,
            partition_funcs=partition_funcs,
            molecules=molecules,
            stages=stages,
        )

    def ionization_weights(
        self, context: SahaContext, element: str, T: float, n_e: float
    ) -> np.ndarray:
        """
        Densities of each ionization stage relative to the neutral stage.

        Returns
        -------
        array
            ``[1, n_II/n_I, n_III/n_I]`` truncated to the tracked stages
        """
        n_stages = context.stages[element]
        chis = context.ionization_energies[element]
        U = [context.partition_funcs[Species(element, c)](T) for c in range(n_stages)]
        transU = translational_u(T)
        kT = KBOLTZ_EV * T

        weights = [1.0]
        for charge in range(1, n_stages):
            ratio = (
                2.0 * U[charge] / U[charge - 1] * transU / n_e
                * np.exp(-chis[charge - 1] / kT)
            )
            weights.append(weights[-1] * ratio)
        return np.array(weights)

    def solve(
        self, context: SahaContext, T: float, n_total: float, n_e: float
    ) -> Dict[Species, float]:
        """
        Number densities in one layer.

        Parameters
        ----------
        context : SahaContext
            Result of ``build_context``
        T : float
            Temperature in K
        n_total : float
            Total number density in cm^-3 (including electrons)
        n_e : float
            Electron number density in cm^-3

        Returns
        -------
        Dict[Species, float]
            Species -> number density in cm^-3; the key set depends only on
            the context
        """
        if n_e <= 0:
            raise ValueError(f"Electron density must be positive (got {n_e})")
        n_nuclei = n_total - n_e
        if n_nuclei <= 0:
            raise ValueError(
                f"Electron density {n_e:.3e} exceeds total number density {n_total:.3e}"
            )

        weights = {
            element: self.ionization_weights(context, element, T, n_e)
            for element in context.abundances
        }
        neutral = {
            element: context.abundances[element] * n_nuclei / weights[element].sum()
            for element in context.abundances
        }

        molecule_densities = {}
        if context.molecules:
            neutral, molecule_densities = self._solve_molecules(
                context, T, n_nuclei, weights, neutral
            )

        densities = {}
        for element, w in weights.items():
            for charge, weight in enumerate(w):
                densities[Species(element, charge)] = neutral[element] * weight
        densities.update(molecule_densities)
        return densities

    def _molecule_densities(
        self, context: SahaContext, T: float, neutral: Mapping[str, float]
    ) -> Dict[Species, float]:
        kT = KBOLTZ_CGS * T
        densities = {}
        for molecule, log_K in context.molecules.items():
            a, b = molecule.atoms
            densities[molecule] = neutral[a] * neutral[b] * kT / 10 ** log_K(T)
        return densities

    def _solve_molecules(self, context, T, n_nuclei, weights, neutral):
        elements = context.molecular_elements
        targets = np.array([context.abundances[e] * n_nuclei for e in elements])

        def residuals(log_n):
            trial = dict(neutral)
            trial.update(zip(elements, np.exp(log_n)))
            molecules = self._molecule_densities(context, T, trial)
            totals = defaultdict(float)
            for element in elements:
                totals[element] += trial[element] * weights[element].sum()
            for molecule, n in molecules.items():
                for atom in molecule.atoms:
                    totals[atom] += n
            return np.array([totals[e] for e in elements]) / targets - 1.0

        guess = np.log([neutral[e] for e in elements])
        solution, info, status, message = fsolve(residuals, guess, full_output=True)
        if status != 1:
            raise RuntimeError(f"Molecular equilibrium did not converge at T={T:.1f} K: {message}")

        neutral = dict(neutral)
        neutral.update(zip(elements, np.exp(solution)))
        return neutral, self._molecule_densities(context, T, neutral)
