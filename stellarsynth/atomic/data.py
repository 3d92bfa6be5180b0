"""
Default atomic data tables.

The tables are read once from the fixed-width file shipped in
``stellarsynth/atomic/resources`` and bundled into an immutable ``AtomicData``
value that is passed explicitly through the synthesis pipeline.
"""

from dataclasses import dataclass, field, replace
from functools import lru_cache
from pathlib import Path
from types import MappingProxyType
from typing import Callable, Mapping, Tuple

from stellarsynth.atomic.structures import Species, get_atoms
from stellarsynth.io.fixed_width import parse_fwf
from stellarsynth.core.logging_config import get_logger

logger = get_logger("atomic.data")

DATA_DIR = Path(__file__).parent / "resources"
ATOMIC_DATA_FILE = DATA_DIR / "atomic_data.dat"

ATOMIC_DATA_ROWSPEC = [
    ((0, 3), int, "Z"),
    ((4, 6), str, "symbol", str.strip),
    ((7, 17), float, "mass"),
    ((18, 24), float, "solar_abundance"),
    ((25, 33), float, "chi_I"),
    ((34, 42), float, "chi_II"),
    ((43, 51), float, "chi_III"),
    ((52, 55), int, "g_I"),
    ((56, 59), int, "g_II"),
    ((60, 63), int, "g_III"),
]
ATOMIC_DATA_FIRST_ROW = 7

IonizationEnergies = Mapping[str, Tuple[float, float, float]]
PartitionFuncs = Mapping[Species, Callable[[float], float]]


def _frozen(mapping) -> Mapping:
    return MappingProxyType(dict(mapping))


def _merged(base: Mapping, items) -> Mapping:
    table = dict(base)
    table.update(items)
    return MappingProxyType(table)


@dataclass(frozen=True)
class AtomicData:
    """
    Immutable bundle of the data tables used by a synthesis.

    Attributes
    ----------
    atomic_symbols : tuple of str
        Tracked elements, in order of atomic number
    atomic_masses : Mapping[str, float]
        Mass of each element in amu
    solar_abundances : Mapping[str, float]
        Solar A(X) = log10(n_X/n_H) + 12
    ionization_energies : Mapping[str, tuple]
        First three ionization energies in eV (-1 when unavailable)
    partition_funcs : Mapping[Species, callable]
        U(T) for each species
    equilibrium_constants : Mapping[Species, callable]
        log10 K_p(T) (partial pressure form, dyn/cm^2) for diatomic molecules
    """

    atomic_symbols: Tuple[str, ...]
    atomic_masses: Mapping[str, float]
    solar_abundances: Mapping[str, float]
    ionization_energies: IonizationEnergies
    partition_funcs: PartitionFuncs
    equilibrium_constants: Mapping[Species, Callable[[float], float]] = field(
        default_factory=lambda: MappingProxyType({})
    )

    def with_overrides(
        self,
        ionization_energies: IonizationEnergies = None,
        partition_funcs: PartitionFuncs = None,
        equilibrium_constants: Mapping = None,
    ) -> "AtomicData":
        """
        Return a copy with some table entries replaced.

        Keys of ``partition_funcs`` and ``equilibrium_constants`` may be
        species strings ('Fe_I') or ``Species``. Entries are merged over
        the existing tables.
        """
        updates = {}
        if ionization_energies is not None:
            updates["ionization_energies"] = _merged(
                self.ionization_energies,
                (
                    (symbol, tuple(float(x) for x in energies))
                    for symbol, energies in ionization_energies.items()
                ),
            )
        if partition_funcs is not None:
            updates["partition_funcs"] = _merged(
                self.partition_funcs,
                ((Species.parse(key), func) for key, func in partition_funcs.items()),
            )
        if equilibrium_constants is not None:
            updates["equilibrium_constants"] = _merged(
                self.equilibrium_constants,
                ((Species.parse(key), func) for key, func in equilibrium_constants.items()),
            )
        return replace(self, **updates)

    def species_mass(self, species: Species) -> float:
        """Mass of a species in amu (sum over its atoms)."""
        return sum(self.atomic_masses[atom] for atom in get_atoms(species.formula))


def load_atomic_data(path: Path = ATOMIC_DATA_FILE) -> AtomicData:
    """
    Load atomic data from a fixed-width table.

    Parameters
    ----------
    path : Path
        Table in the layout of ``atomic_data.dat``

    Returns
    -------
    AtomicData
        Tables with ground-term partition functions for stages I-III
    """
    from stellarsynth.plasma.partition import ConstantPartitionFunction

    table = parse_fwf(path, ATOMIC_DATA_ROWSPEC, datarow=ATOMIC_DATA_FIRST_ROW)

    symbols = tuple(table["symbol"])
    masses = dict(zip(symbols, table["mass"]))
    solar = dict(zip(symbols, table["solar_abundance"]))

    ionization_energies = {}
    partition_funcs = {}
    for row in table.itertuples(index=False):
        ionization_energies[row.symbol] = (row.chi_I, row.chi_II, row.chi_III)
        # a bare nucleus is the last stage
        for charge, g in enumerate((row.g_I, row.g_II, row.g_III)[: row.Z + 1]):
            partition_funcs[Species(row.symbol, charge)] = ConstantPartitionFunction(g)

    logger.debug(f"Loaded atomic data for {len(symbols)} elements from {path}")

    return AtomicData(
        atomic_symbols=symbols,
        atomic_masses=_frozen(masses),
        solar_abundances=_frozen(solar),
        ionization_energies=_frozen(ionization_energies),
        partition_funcs=_frozen(partition_funcs),
    )


@lru_cache(maxsize=1)
def default_atomic_data() -> AtomicData:
    """The packaged atomic data tables (loaded once)."""
    return load_atomic_data()
