"""
Spectral synthesis.

This module provides:
- Synthesis options
- Per-layer opacity assembly
- The synthesis driver
"""

from stellarsynth.synthesis.options import SynthesisOptions
from stellarsynth.synthesis.opacity import (
    OpacityAssembler,
    SpeciesDensities,
    ContinuumInterpolant,
    LayerOpacity,
)
from stellarsynth.synthesis.synthesize import (
    synthesize,
    SynthesisResult,
    PhysicsModels,
    filter_linelist,
)

__all__ = [
    "SynthesisOptions",
    "OpacityAssembler",
    "SpeciesDensities",
    "ContinuumInterpolant",
    "LayerOpacity",
    "synthesize",
    "SynthesisResult",
    "PhysicsModels",
    "filter_linelist",
]
