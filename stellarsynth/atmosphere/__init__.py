"""
Model atmospheres.
"""

from stellarsynth.atmosphere.model import (
    PlanarLayer,
    ShellLayer,
    PlanarAtmosphere,
    ShellAtmosphere,
    ModelAtmosphere,
)

__all__ = [
    "PlanarLayer",
    "ShellLayer",
    "PlanarAtmosphere",
    "ShellAtmosphere",
    "ModelAtmosphere",
]
