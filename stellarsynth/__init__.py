"""
stellarsynth: spectral synthesis for 1-D stellar model atmospheres

Computes emergent flux spectra in local thermodynamic equilibrium from a model
atmosphere and a list of line transitions, with utilities to degrade and
normalize the result for comparison with observations.
"""

__version__ = "0.1.0"

# Core imports for convenience
from stellarsynth.core import constants
from stellarsynth.core import units
from stellarsynth.synthesis.options import SynthesisOptions
from stellarsynth.synthesis.synthesize import synthesize, SynthesisResult

__all__ = [
    "constants",
    "units",
    "SynthesisOptions",
    "synthesize",
    "SynthesisResult",
]
