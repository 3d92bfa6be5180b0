"""
Data structures for atomic and molecular species and line transitions.
"""

import re
from dataclasses import dataclass
from typing import Tuple

from stellarsynth.core.units import angstrom_to_cm

# Element symbols by atomic number (index 0 is Z=1)
ATOMIC_SYMBOLS = (
    "H", "He", "Li", "Be", "B", "C", "N", "O", "F", "Ne",
    "Na", "Mg", "Al", "Si", "P", "S", "Cl", "Ar", "K", "Ca",
    "Sc", "Ti", "V", "Cr", "Mn", "Fe", "Co", "Ni", "Cu", "Zn",
    "Ga", "Ge", "As", "Se", "Br", "Kr", "Rb", "Sr", "Y", "Zr",
    "Nb", "Mo", "Tc", "Ru", "Rh", "Pd", "Ag", "Cd", "In", "Sn",
    "Sb", "Te", "I", "Xe", "Cs", "Ba", "La", "Ce", "Pr", "Nd",
    "Pm", "Sm", "Eu", "Gd", "Tb", "Dy", "Ho", "Er", "Tm", "Yb",
    "Lu", "Hf", "Ta", "W", "Re", "Os", "Ir", "Pt", "Au", "Hg",
    "Tl", "Pb", "Bi", "Po", "At", "Rn", "Fr", "Ra", "Ac", "Th",
    "Pa", "U",
)

_ROMAN = ("I", "II", "III", "IV", "V", "VI")
_FORMULA_TOKEN = re.compile(r"([A-Z][a-z]?)(\d*)")


def get_atoms(formula: str) -> Tuple[str, ...]:
    """
    Break a chemical formula into its atoms.

    Examples
    --------
    >>> get_atoms("CO")
    ('C', 'O')
    >>> get_atoms("C2")
    ('C', 'C')
    """
    if not formula or "".join(t[0] + t[1] for t in _FORMULA_TOKEN.findall(formula)) != formula:
        raise ValueError(f"{formula!r} is not a valid chemical formula")

    atoms = []
    for symbol, count in _FORMULA_TOKEN.findall(formula):
        if symbol not in ATOMIC_SYMBOLS:
            raise ValueError(f"{symbol!r} in {formula!r} is not an element symbol")
        atoms.extend([symbol] * (int(count) if count else 1))
    return tuple(atoms)


@dataclass(frozen=True)
class Species:
    """
    An atom or molecule in a given ionization state.

    Attributes
    ----------
    formula : str
        Chemical formula (e.g. 'Fe', 'CO')
    charge : int
        Ionization stage minus one (0 = neutral)
    """

    formula: str
    charge: int = 0

    def __post_init__(self):
        atoms = get_atoms(self.formula)
        if self.charge < 0:
            raise ValueError(f"Negative charge for {self.formula} is not supported")
        n_electrons = sum(ATOMIC_SYMBOLS.index(atom) + 1 for atom in atoms)
        if self.charge > n_electrons:
            raise ValueError(
                f"{self.formula} can't have charge {self.charge}; it has only {n_electrons} electrons"
            )

    @classmethod
    def parse(cls, code: "str | Species") -> "Species":
        """
        Parse a species from a string.

        Accepted forms are ``'Fe_I'``, ``'Fe I'``, ``'Fe 2'``, ``'CO'`` and the
        numeric codes ``'26.01'`` (Fe II) or ``'0608'`` (CO).

        Raises
        ------
        ValueError
            If the string can't be interpreted
        """
        if isinstance(code, Species):
            return code

        text = code.strip()
        if text and text[0].isdigit():
            return cls._parse_numeric(text)

        parts = text.replace("_", " ").split()
        if len(parts) == 1:
            return cls(parts[0], 0)
        if len(parts) != 2:
            raise ValueError(f"Can't parse species {code!r}")

        formula, stage = parts
        if stage in _ROMAN:
            charge = _ROMAN.index(stage)
        elif stage.isdigit() and int(stage) >= 1:
            charge = int(stage) - 1
        else:
            raise ValueError(f"Can't parse ionization stage in {code!r}")
        return cls(formula, charge)

    @classmethod
    def _parse_numeric(cls, code: str) -> "Species":
        pieces = code.split(".")
        if len(pieces) > 2:
            raise ValueError(f"Can't parse species code {code!r}")
        nuclei = pieces[0]
        # "26.1", "26.1000" (MOOG) and "26.01" (Kurucz) all mean Fe II
        fraction = pieces[1] if len(pieces) == 2 else ""
        if fraction and not fraction.isdigit():
            raise ValueError(f"Can't parse species code {code!r}")
        if not fraction:
            charge = 0
        elif fraction[0] == "0":
            charge = int(fraction[:2])
        else:
            charge = int(fraction[0])

        if len(nuclei) <= 2:
            numbers = [int(nuclei)]
        elif len(nuclei) % 2 == 0:
            numbers = [int(nuclei[i : i + 2]) for i in range(0, len(nuclei), 2)]
        else:
            raise ValueError(f"Can't parse species code {code!r}")

        if any(z < 1 or z > len(ATOMIC_SYMBOLS) for z in numbers):
            raise ValueError(f"Species code {code!r} names an unknown element")

        symbols = [ATOMIC_SYMBOLS[z - 1] for z in numbers]
        formula = "".join(symbols)
        if len(symbols) == 2 and symbols[0] == symbols[1]:
            formula = f"{symbols[0]}2"
        return cls(formula, charge)

    @property
    def atoms(self) -> Tuple[str, ...]:
        """Constituent atoms."""
        return get_atoms(self.formula)

    @property
    def is_molecule(self) -> bool:
        """True for species made of more than one atom."""
        return len(self.atoms) > 1

    def __str__(self) -> str:
        stage = _ROMAN[self.charge] if self.charge < len(_ROMAN) else str(self.charge + 1)
        return f"{self.formula}_{stage}"


@dataclass(frozen=True)
class Transition:
    """
    Represents a line transition.

    Attributes
    ----------
    wl : float
        Vacuum wavelength in cm
    log_gf : float
        log10 of the oscillator strength times the lower level statistical weight
    species : Species
        Absorbing species
    E_lower : float
        Lower level excitation energy in eV
    gamma_rad : float
        Radiative damping rate in s^-1
    gamma_stark : float
        Stark damping rate per electron (cm^3 s^-1) at 10^4 K
    vdW : float
        van der Waals damping rate per neutral hydrogen atom (cm^3 s^-1) at 10^4 K
    """

    wl: float
    log_gf: float
    species: Species
    E_lower: float
    gamma_rad: float = 0.0
    gamma_stark: float = 0.0
    vdW: float = 0.0

    def __post_init__(self):
        if not self.wl > 0:
            raise ValueError(f"Line wavelength must be positive (got {self.wl})")
        if self.E_lower < 0:
            raise ValueError(f"Lower level energy must be non-negative (got {self.E_lower})")

    @classmethod
    def from_angstrom(
        cls,
        wl: float,
        log_gf: float,
        species: "str | Species",
        E_lower: float,
        gamma_rad: float = 0.0,
        gamma_stark: float = 0.0,
        vdW: float = 0.0,
    ) -> "Transition":
        """Create a transition from a wavelength in Å and a species string."""
        return cls(
            wl=angstrom_to_cm(wl),
            log_gf=log_gf,
            species=Species.parse(species),
            E_lower=E_lower,
            gamma_rad=gamma_rad,
            gamma_stark=gamma_stark,
            vdW=vdW,
        )
