"""
Instrument response.

This module provides:
- Constant resolving power line spread function
- Running-quantile continuum normalization
"""

from stellarsynth.instrument.convolution import constant_R_LSF, rectify

__all__ = [
    "constant_R_LSF",
    "rectify",
]
