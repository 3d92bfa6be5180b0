"""
Main CLI entry point for stellarsynth.
"""

import argparse
import sys
from pathlib import Path

from stellarsynth import __version__
from stellarsynth.core.logging_config import setup_logging, get_logger

logger = get_logger("cli.main")


def _resolve(path, base: Path) -> Path:
    """Interpret a relative path in a config file relative to that file."""
    path = Path(path)
    return path if path.is_absolute() else base / path


def _write_or_print(output, wavelength, flux, flux_column: str = "flux"):
    from stellarsynth.io.spectrum import save_spectrum

    if output:
        save_spectrum(output, wavelength, flux, flux_column=flux_column)
        print(f"Spectrum saved to {output}")
    else:
        print(f"# wavelength_A,{flux_column}")
        for wl, value in zip(wavelength, flux):
            print(f"{wl:.4f},{value:.6e}")


def synth_cmd(args):
    """Synthesis command."""
    from stellarsynth.core.config import load_config, validate_synthesis_config
    from stellarsynth.io.tables import (
        atmosphere_from_records,
        linelist_from_records,
        load_atmosphere_table,
        load_linelist_table,
    )
    from stellarsynth.synthesis.options import SynthesisOptions
    from stellarsynth.synthesis.synthesize import synthesize

    logger.info(f"Loading configuration from {args.config}")
    config = load_config(args.config)
    validate_synthesis_config(config)
    base = Path(args.config).parent

    atmosphere_config = config["atmosphere"]
    geometry = atmosphere_config.get("geometry", "planar")
    if "file" in atmosphere_config:
        atmosphere = load_atmosphere_table(_resolve(atmosphere_config["file"], base), geometry)
    else:
        atmosphere = atmosphere_from_records(atmosphere_config["layers"], geometry)

    linelist_config = config.get("linelist", [])
    if isinstance(linelist_config, str):
        linelist = load_linelist_table(_resolve(linelist_config, base))
    else:
        linelist = linelist_from_records(linelist_config)

    options = SynthesisOptions.from_dict(config.get("synthesis", {}))
    wavelengths = config["wavelengths"]

    logger.info("Computing spectrum...")
    result = synthesize(
        atmosphere,
        linelist,
        wavelengths["start"],
        wavelengths["stop"],
        wavelengths.get("step", 0.01),
        options=options,
    )

    _write_or_print(args.output, result.wavelengths, result.flux)
    logger.info("Synthesis complete")


def degrade_cmd(args):
    """Instrumental degradation command."""
    from stellarsynth.instrument.convolution import constant_R_LSF
    from stellarsynth.io.spectrum import load_spectrum

    wavelength, flux = load_spectrum(args.spectrum, wavelength_unit=args.wavelength_unit)
    logger.info(f"Applying LSF with R={args.resolution:g}")
    degraded = constant_R_LSF(flux, wavelength, args.resolution)
    _write_or_print(args.output, wavelength, degraded)


def rectify_cmd(args):
    """Rectification command."""
    from stellarsynth.instrument.convolution import rectify
    from stellarsynth.io.spectrum import load_spectrum

    wavelength, flux = load_spectrum(args.spectrum, wavelength_unit=args.wavelength_unit)
    logger.info(f"Rectifying with bandwidth={args.bandwidth:g} and q={args.quantile:g}")
    rectified = rectify(flux, wavelength, bandwidth=args.bandwidth, q=args.quantile)
    _write_or_print(args.output, wavelength, rectified, flux_column="normalized_flux")


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        description="stellarsynth: LTE spectral synthesis from 1-D model atmospheres",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="INFO",
        help="Set logging level (default: INFO)",
    )
    parser.add_argument(
        "--log-file", type=str, default=None, help="Also write log messages to this file"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Synthesis command
    synth_parser = subparsers.add_parser(
        "synth", help="Synthesize a spectrum from a configuration file"
    )
    synth_parser.add_argument(
        "config", type=str, help="Path to configuration file (YAML or JSON)"
    )
    synth_parser.add_argument(
        "--output", type=str, default=None, help="Output file path (default: print to stdout)"
    )
    synth_parser.set_defaults(func=synth_cmd)

    # Degrade command
    degrade_parser = subparsers.add_parser(
        "degrade", help="Convolve a spectrum with a constant-resolution Gaussian LSF"
    )
    degrade_parser.add_argument("spectrum", type=str, help="Path to spectrum file")
    degrade_parser.add_argument(
        "--wavelength-unit", default="A", help="Unit of the input wavelengths (default: A)"
    )
    degrade_parser.add_argument(
        "--resolution", "-R", type=float, required=True, help="Resolving power lambda/dlambda"
    )
    degrade_parser.add_argument(
        "--output", type=str, default=None, help="Output file path (default: print to stdout)"
    )
    degrade_parser.set_defaults(func=degrade_cmd)

    # Rectify command
    rectify_parser = subparsers.add_parser(
        "rectify", help="Normalize a spectrum by its running upper quantile"
    )
    rectify_parser.add_argument("spectrum", type=str, help="Path to spectrum file")
    rectify_parser.add_argument(
        "--wavelength-unit", default="A", help="Unit of the input wavelengths (default: A)"
    )
    rectify_parser.add_argument(
        "--bandwidth", type=float, default=50.0, help="Window half-width in Å (default: 50)"
    )
    rectify_parser.add_argument(
        "--quantile", type=float, default=0.95, help="Quantile of the window (default: 0.95)"
    )
    rectify_parser.add_argument(
        "--output", type=str, default=None, help="Output file path (default: print to stdout)"
    )
    rectify_parser.set_defaults(func=rectify_cmd)

    return parser


def main(argv=None):
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    # Setup logging
    setup_logging(level=args.log_level, log_file=args.log_file)

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    try:
        args.func(args)
    except Exception as e:
        logger.error(f"Error executing command: {e}", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
