"""
Tabular (CSV) input of model atmospheres and linelists.

These are plain tables of already-parsed values, not readers for published
line list or model atmosphere formats.
"""

from pathlib import Path
from typing import Any, Iterable, List, Mapping, Union

import pandas as pd

from stellarsynth.atmosphere.model import (
    PlanarAtmosphere,
    PlanarLayer,
    ShellAtmosphere,
    ShellLayer,
)
from stellarsynth.atomic.structures import Transition
from stellarsynth.core.logging_config import get_logger

logger = get_logger("io.tables")

STATE_COLUMNS = ["temp", "number_density", "electron_number_density"]
PLANAR_COLUMNS = STATE_COLUMNS + ["colmass", "density"]
SHELL_COLUMNS = STATE_COLUMNS + ["radius"]
LINE_COLUMNS = ["wavelength", "log_gf", "species", "E_lower"]
OPTIONAL_LINE_COLUMNS = ["gamma_rad", "gamma_stark", "vdW"]


def _read_csv(path: Union[str, Path], **kwargs) -> pd.DataFrame:
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Table not found: {path}")
    return pd.read_csv(path, comment="#", skipinitialspace=True, **kwargs)


def _require(columns: Iterable[str], required: List[str], what: str) -> None:
    missing = [col for col in required if col not in columns]
    if missing:
        raise ValueError(f"{what} table is missing columns: {missing}")


def atmosphere_from_records(
    records: Iterable[Mapping[str, Any]], geometry: str = "planar"
) -> Union[PlanarAtmosphere, ShellAtmosphere]:
    """
    Build an atmosphere from layer mappings (outermost first).

    Parameters
    ----------
    records : iterable of mappings
        One mapping per layer with the layer fields
    geometry : str
        'planar' or 'spherical'

    Returns
    -------
    PlanarAtmosphere or ShellAtmosphere
    """
    records = list(records)
    if geometry == "planar":
        columns, layer_type, atmosphere_type = PLANAR_COLUMNS, PlanarLayer, PlanarAtmosphere
    elif geometry == "spherical":
        columns, layer_type, atmosphere_type = SHELL_COLUMNS, ShellLayer, ShellAtmosphere
    else:
        raise ValueError(f"Unknown atmosphere geometry: {geometry}")

    layers = []
    for record in records:
        _require(record, columns, f"{geometry.capitalize()} atmosphere")
        layers.append(layer_type(**{col: float(record[col]) for col in columns}))
    return atmosphere_type(layers)


def load_atmosphere_table(
    path: Union[str, Path], geometry: str = "planar"
) -> Union[PlanarAtmosphere, ShellAtmosphere]:
    """
    Load a model atmosphere from a CSV table, one row per layer.

    Planar tables need the columns temp, number_density,
    electron_number_density, colmass and density; spherical tables need
    radius instead of the last two. All values are cgs.
    """
    df = _read_csv(path)
    atmosphere = atmosphere_from_records(df.to_dict("records"), geometry)
    logger.info(f"Loaded {geometry} atmosphere with {len(atmosphere)} layers from {path}")
    return atmosphere


def linelist_from_records(records: Iterable[Mapping[str, Any]]) -> List[Transition]:
    """
    Build transitions from mappings with wavelength (Å), log_gf, species,
    E_lower (eV) and optionally gamma_rad, gamma_stark and vdW.
    """
    lines = []
    for record in records:
        _require(record, LINE_COLUMNS, "Linelist")
        extras = {
            col: float(record[col])
            for col in OPTIONAL_LINE_COLUMNS
            if col in record and not pd.isna(record[col])
        }
        lines.append(
            Transition.from_angstrom(
                float(record["wavelength"]),
                float(record["log_gf"]),
                str(record["species"]),
                float(record["E_lower"]),
                **extras,
            )
        )
    return lines


def load_linelist_table(path: Union[str, Path]) -> List[Transition]:
    """
    Load a linelist from a CSV table, one row per line.

    Returns
    -------
    List[Transition]
        Lines in file order
    """
    # species codes such as "0608" must not be read as numbers
    df = _read_csv(path, dtype={"species": str})
    _require(df.columns, LINE_COLUMNS, "Linelist")
    lines = linelist_from_records(df.to_dict("records"))
    logger.info(f"Loaded {len(lines)} lines from {path}")
    return lines
