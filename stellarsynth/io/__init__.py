"""
Input/output utilities.

This module provides:
- Spectrum files (CSV, whitespace-separated text)
- Fixed-width table parsing
- CSV tables of model atmospheres and linelists
"""

from stellarsynth.io.spectrum import load_spectrum, save_spectrum
from stellarsynth.io.fixed_width import parse_fwf
from stellarsynth.io.tables import (
    load_atmosphere_table,
    load_linelist_table,
    atmosphere_from_records,
    linelist_from_records,
)

__all__ = [
    # Spectrum I/O
    "load_spectrum",
    "save_spectrum",
    # Tables
    "parse_fwf",
    "load_atmosphere_table",
    "load_linelist_table",
    "atmosphere_from_records",
    "linelist_from_records",
]
