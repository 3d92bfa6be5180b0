"""
I/O utilities for spectra.
"""

from pathlib import Path
from typing import Tuple, Union

import numpy as np
import pandas as pd

from stellarsynth.core.logging_config import get_logger
from stellarsynth.core.units import convert_wavelength

logger = get_logger("io.spectrum")

WAVELENGTH_COLUMNS = ["wavelength", "wavelength_A", "wl", "lambda"]
FLUX_COLUMNS = ["flux", "intensity", "normalized_flux", "F"]


def _find_column(df: pd.DataFrame, candidates, kind: str) -> str:
    for col in candidates:
        if col in df.columns:
            return col
    raise ValueError(f"Could not find {kind} column in CSV (tried {candidates})")


def load_spectrum(
    file_path: Union[str, Path], wavelength_unit: str = "A"
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Load spectrum from file.

    CSV files need a wavelength column and a flux column (common names are
    recognized); other files are read as whitespace-separated columns.

    Parameters
    ----------
    file_path : str or Path
        Path to spectrum file
    wavelength_unit : str
        Unit of the wavelength column ('A', 'nm', 'um' or 'cm')

    Returns
    -------
    wavelength : array
        Wavelength array in Å
    flux : array
        Flux array
    """
    file_path = Path(file_path)
    if not file_path.exists():
        raise FileNotFoundError(f"Spectrum file not found: {file_path}")

    if file_path.suffix.lower() == ".csv":
        df = pd.read_csv(file_path, comment="#")
        wavelength = df[_find_column(df, WAVELENGTH_COLUMNS, "wavelength")].to_numpy(float)
        flux = df[_find_column(df, FLUX_COLUMNS, "flux")].to_numpy(float)
    else:
        data = np.loadtxt(file_path)
        if data.ndim == 1:
            raise ValueError("Spectrum file must have at least 2 columns")
        wavelength = data[:, 0]
        flux = data[:, 1]

    wavelength = convert_wavelength(wavelength, wavelength_unit, "A")

    logger.info(f"Loaded spectrum from {file_path}: {len(wavelength)} points")
    return wavelength, flux


def save_spectrum(
    file_path: Union[str, Path],
    wavelength: np.ndarray,
    flux: np.ndarray,
    flux_column: str = "flux",
) -> None:
    """
    Save spectrum to file.

    Parameters
    ----------
    file_path : str or Path
        Output file path; ``.csv`` is written with pandas, anything else as
        whitespace-separated text
    wavelength : array
        Wavelength array in Å
    flux : array
        Flux array
    flux_column : str
        Name of the flux column
    """
    file_path = Path(file_path)
    if len(wavelength) != len(flux):
        raise ValueError("wavelength and flux must have the same length")

    if file_path.suffix.lower() == ".csv":
        pd.DataFrame({"wavelength": wavelength, flux_column: flux}).to_csv(
            file_path, index=False, float_format="%.10g"
        )
    else:
        np.savetxt(
            file_path,
            np.column_stack([wavelength, flux]),
            header=f"wavelength {flux_column}",
        )

    logger.info(f"Saved spectrum to {file_path}")
