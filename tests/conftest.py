"""
Pytest configuration and shared fixtures for stellarsynth tests.

This module provides:
- Small model atmospheres (single layer, multi-layer, spherical)
- Stub physics collaborators with trivially checkable output
- A sample linelist and temporary configuration files
"""

import os
import tempfile
from pathlib import Path

import numpy as np
import pytest

from stellarsynth.atmosphere.model import (
    PlanarAtmosphere,
    PlanarLayer,
    ShellAtmosphere,
    ShellLayer,
)
from stellarsynth.atomic.structures import Species, Transition
from stellarsynth.radiation.transfer import RadiativeTransfer
from stellarsynth.synthesis.synthesize import PhysicsModels


@pytest.fixture
def single_layer_atmosphere():
    """One planar layer: T=5000 K, n=1e17, n_e=1e13."""
    return PlanarAtmosphere(
        [
            PlanarLayer(
                temp=5000.0,
                number_density=1e17,
                electron_number_density=1e13,
                colmass=1.0,
                density=1.7e-7,
            )
        ]
    )


@pytest.fixture
def planar_atmosphere():
    """A crude solar-like plane-parallel atmosphere (outermost layer first)."""
    n_layers = 12
    temps = np.linspace(4200.0, 9000.0, n_layers)
    colmass = np.logspace(-2, 1.5, n_layers)
    number_density = np.logspace(15, 17.3, n_layers)
    electron_density = np.logspace(10.5, 14.5, n_layers)
    density = number_density * 1.3 * 1.66e-24
    return PlanarAtmosphere(
        [
            PlanarLayer(
                temp=T,
                number_density=n,
                electron_number_density=ne,
                colmass=m,
                density=rho,
            )
            for T, n, ne, m, rho in zip(temps, number_density, electron_density, colmass, density)
        ]
    )


@pytest.fixture
def shell_atmosphere():
    """A spherical atmosphere, radius decreasing inwards."""
    n_layers = 8
    radii = np.linspace(7.0e12, 6.9e12, n_layers)
    temps = np.linspace(3500.0, 6000.0, n_layers)
    return ShellAtmosphere(
        [
            ShellLayer(
                temp=T,
                number_density=1e15 * (i + 1),
                electron_number_density=1e11 * (i + 1),
                radius=r,
            )
            for i, (T, r) in enumerate(zip(temps, radii))
        ]
    )


class StubEquilibriumSolver:
    """Returns fixed densities of H I, H II and Fe I for every layer."""

    def __init__(self, species=None):
        self.species = species or {
            Species("H", 0): 0.9,
            Species("H", 1): 0.01,
            Species("Fe", 0): 3e-5,
        }
        self.context_calls = 0
        self.solve_calls = 0

    def build_context(self, abundances, ionization_energies, partition_funcs, equilibrium_constants):
        self.context_calls += 1
        return {"abundances": abundances}

    def solve(self, context, T, n_total, n_e):
        self.solve_calls += 1
        return {species: fraction * n_total for species, fraction in self.species.items()}


class StubContinuum:
    """Constant continuum absorption, independent of frequency."""

    def __init__(self, alpha=1e-7):
        self.alpha = alpha
        self.calls = []

    def evaluate(self, frequencies, T, n_e, number_densities, partition_funcs):
        self.calls.append(np.array(frequencies))
        return np.full(len(frequencies), self.alpha)


class StubHydrogenLines:
    """Records calls and adds nothing."""

    def __init__(self):
        self.calls = []

    def evaluate(self, wavelengths, T, n_e, n_HI, U_HI, profile_table, doppler_velocity):
        self.calls.append({"T": T, "n_HI": n_HI, "doppler_velocity": doppler_velocity})
        return np.zeros(len(wavelengths))


class StubLineAbsorption:
    """Records the lines it was given and leaves alpha untouched."""

    def __init__(self):
        self.linelist = None
        self.vmic = None

    def accumulate(
        self,
        alpha,
        linelist,
        wavelengths,
        temps,
        electron_densities,
        number_densities,
        partition_funcs,
        vmic,
        continuum,
        cutoff_threshold,
    ):
        self.linelist = list(linelist)
        self.vmic = vmic


@pytest.fixture
def stub_models():
    """Physics models made of stubs, with the real transfer solver."""
    return PhysicsModels(
        equilibrium_solver=StubEquilibriumSolver(),
        continuum=StubContinuum(),
        hydrogen_lines=StubHydrogenLines(),
        line_absorption=StubLineAbsorption(),
        transfer=RadiativeTransfer(),
    )


@pytest.fixture
def sample_linelist():
    """A few Fe I lines around 5000 Å, deliberately unsorted."""
    return [
        Transition.from_angstrom(5001.86, -0.01, "Fe_I", 3.88, 1e8, 1e-5, 1e-7),
        Transition.from_angstrom(4999.11, -1.64, "Fe I", 4.19),
        Transition.from_angstrom(4920.50, 0.07, "26.00", 2.83),
        Transition.from_angstrom(5080.00, -2.00, "Fe_I", 1.00),
        Transition.from_angstrom(5000.50, -0.50, "Fe_I", 2.50, 1e8, 1e-5, 1e-7),
    ]


@pytest.fixture
def sample_config_dict():
    """Create a sample synthesis configuration dictionary."""
    return {
        "atmosphere": {
            "geometry": "planar",
            "layers": [
                {
                    "temp": 5000.0,
                    "number_density": 1.0e17,
                    "electron_number_density": 1.0e13,
                    "colmass": 1.0,
                    "density": 1.7e-7,
                }
            ],
        },
        "wavelengths": {"start": 5000.0, "stop": 5001.0, "step": 0.5},
        "linelist": [],
        "synthesis": {"hydrogen_lines": False, "vmic": 1.0},
    }


@pytest.fixture
def temp_config_file(sample_config_dict):
    """Create a temporary YAML config file."""
    import yaml

    config_fd, config_path = tempfile.mkstemp(suffix=".yaml")
    os.close(config_fd)  # Close file descriptor to prevent leaks

    with open(config_path, "w") as f:
        yaml.dump(sample_config_dict, f)

    yield config_path

    Path(config_path).unlink()
