"""
Configuration management for stellarsynth.

Provides utilities for loading and validating YAML/JSON configuration files
describing a synthesis run: the model atmosphere, the wavelength range, the
linelist and the synthesis options.
"""

import json
from pathlib import Path
from typing import Dict, Any, Union
import logging

import yaml

logger = logging.getLogger(__name__)

VALID_GEOMETRIES = ["planar", "spherical"]


def load_config(config_path: Union[str, Path]) -> Dict[str, Any]:
    """
    Load configuration from YAML or JSON file.

    Parameters
    ----------
    config_path : str or Path
        Path to configuration file (.yaml, .yml, or .json)

    Returns
    -------
    dict
        Configuration dictionary

    Raises
    ------
    FileNotFoundError
        If config file does not exist
    ValueError
        If file format is not supported
    """
    config_path = Path(config_path)

    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    suffix = config_path.suffix.lower()

    with open(config_path, "r") as f:
        if suffix in [".yaml", ".yml"]:
            config = yaml.safe_load(f)
        elif suffix == ".json":
            config = json.load(f)
        else:
            raise ValueError(
                f"Unsupported config file format: {suffix}. " "Use .yaml, .yml, or .json"
            )

    if not isinstance(config, dict):
        raise ValueError(f"Configuration in {config_path} must be a mapping")

    logger.info(f"Loaded configuration from {config_path}")
    return config


def validate_synthesis_config(config: Dict[str, Any]) -> bool:
    """
    Validate synthesis configuration structure.

    Parameters
    ----------
    config : dict
        Configuration dictionary

    Returns
    -------
    bool
        True if valid

    Raises
    ------
    ValueError
        If configuration is invalid
    """
    for section in ["atmosphere", "wavelengths"]:
        if section not in config:
            raise ValueError(f"Configuration must contain '{section}' section")

    atmosphere = config["atmosphere"]
    if not isinstance(atmosphere, dict):
        raise ValueError("'atmosphere' section must be a mapping")
    if "layers" not in atmosphere and "file" not in atmosphere:
        raise ValueError("Atmosphere config must specify 'layers' or 'file'")
    geometry = atmosphere.get("geometry", "planar")
    if geometry not in VALID_GEOMETRIES:
        raise ValueError(
            f"Invalid atmosphere geometry: {geometry}. " f"Must be one of: {VALID_GEOMETRIES}"
        )

    wavelengths = config["wavelengths"]
    for field in ["start", "stop"]:
        if field not in wavelengths:
            raise ValueError(f"Wavelength config missing required field: {field}")
    if wavelengths["stop"] < wavelengths["start"]:
        raise ValueError("Wavelength 'stop' must not be smaller than 'start'")
    if wavelengths.get("step", 0.01) <= 0:
        raise ValueError("Wavelength step must be positive")

    if "synthesis" in config and not isinstance(config["synthesis"], dict):
        raise ValueError("'synthesis' section must be a mapping")

    if "linelist" in config and not isinstance(config["linelist"], (str, list)):
        raise ValueError("'linelist' must be a file path or a list of lines")

    return True


def save_config(config: Dict[str, Any], config_path: Union[str, Path]) -> None:
    """
    Save configuration to YAML or JSON file.

    Parameters
    ----------
    config : dict
        Configuration dictionary
    config_path : str or Path
        Path to output file. Unknown suffixes are written as YAML.
    """
    config_path = Path(config_path)
    suffix = config_path.suffix.lower()

    if suffix not in [".yaml", ".yml", ".json"]:
        config_path = config_path.with_suffix(".yaml")
        suffix = ".yaml"

    with open(config_path, "w") as f:
        if suffix == ".json":
            json.dump(config, f, indent=2)
        else:
            yaml.dump(config, f, default_flow_style=False, sort_keys=False)

    logger.info(f"Saved configuration to {config_path}")
