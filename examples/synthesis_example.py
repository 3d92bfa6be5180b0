"""
Example: Synthesizing, degrading and normalizing a spectrum.

This example builds a small plane-parallel atmosphere, synthesizes the
spectrum around a few Fe lines, convolves it to the resolving power of a
typical spectrograph and normalizes it by its running upper quantile.
"""

import numpy as np
from pathlib import Path

from stellarsynth import SynthesisOptions, synthesize
from stellarsynth.atmosphere import PlanarAtmosphere, PlanarLayer
from stellarsynth.atomic import Transition
from stellarsynth.instrument import constant_R_LSF, rectify
from stellarsynth.io import save_spectrum
from stellarsynth.core.logging_config import setup_logging


def build_atmosphere(n_layers=20):
    """A crude solar-like atmosphere, outermost layer first."""
    temps = np.linspace(4300.0, 9000.0, n_layers)
    colmass = np.logspace(-2, 1.1, n_layers)
    number_density = np.logspace(15, 17.2, n_layers)
    electron_density = np.logspace(10.5, 15.3, n_layers)
    density = number_density * 1.3 * 1.66e-24
    return PlanarAtmosphere(
        [
            PlanarLayer(temp=T, number_density=n, electron_number_density=ne, colmass=m, density=rho)
            for T, n, ne, m, rho in zip(temps, number_density, electron_density, colmass, density)
        ]
    )


def main():
    setup_logging(level="INFO")

    atmosphere = build_atmosphere()
    linelist = [
        Transition.from_angstrom(4999.11, -1.64, "Fe_I", 4.19),
        Transition.from_angstrom(5001.86, -0.01, "Fe_I", 3.88, 1e8, 1e-5, 1e-7),
        Transition.from_angstrom(5001.48, -1.00, "Fe_II", 2.70),
    ]

    # Metal-poor star with enhanced carbon
    options = SynthesisOptions(metallicity=-0.5, abundances={"C": 8.2}, vmic=1.2)
    result = synthesize(atmosphere, linelist, 4995.0, 5005.0, 0.01, options=options)

    degraded = constant_R_LSF(result.flux, result.wavelengths, 20000.0)
    normalized = rectify(degraded, result.wavelengths, bandwidth=5.0)

    output_file = Path(__file__).parent / "synthetic_spectrum.csv"
    save_spectrum(output_file, result.wavelengths, normalized, flux_column="normalized_flux")

    print(f"Synthesized {len(result.wavelengths)} points")
    print(f"Deepest line: {result.wavelengths[np.argmin(normalized)]:.2f} Å")
    print(f"Saved to: {output_file}")


if __name__ == "__main__":
    main()
