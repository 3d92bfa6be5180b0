"""
Logging configuration for stellarsynth.

All package loggers live under the ``stellarsynth`` namespace, so a single
``setup_logging`` call controls the whole library.
"""

import logging
import sys
import time
from contextlib import contextmanager
from pathlib import Path
from typing import Optional, Union

PACKAGE_LOGGER = "stellarsynth"
DEFAULT_FORMAT = "[%(asctime)s] %(name)s - %(levelname)s - %(message)s"


def setup_logging(
    level: str = "INFO",
    format_string: Optional[str] = None,
    stream: Optional[object] = None,
    log_file: Optional[Union[str, Path]] = None,
) -> None:
    """
    Configure logging for stellarsynth.

    Parameters
    ----------
    level : str
        Logging level: 'DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'
    format_string : str, optional
        Custom format string. If None, uses default format.
    stream : file-like object, optional
        Stream to write logs to. If None, uses sys.stderr.
    log_file : str or Path, optional
        Also append log records to this file
    """
    if format_string is None:
        format_string = DEFAULT_FORMAT

    if stream is None:
        stream = sys.stderr

    handlers = [logging.StreamHandler(stream)]
    if log_file is not None:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format=format_string,
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=handlers,
        force=True,
    )


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance for a module.

    Parameters
    ----------
    name : str
        Logger name relative to the package (e.g. 'synthesis.opacity')

    Returns
    -------
    logging.Logger
        Logger instance
    """
    return logging.getLogger(f"{PACKAGE_LOGGER}.{name}")


@contextmanager
def log_stage(logger: logging.Logger, description: str, level: int = logging.DEBUG):
    """
    Log the start and wall-clock duration of a block.

    Example
    -------
    >>> with log_stage(logger, "equilibrium"):
    ...     solve_layers()
    """
    logger.log(level, f"Starting {description}")
    start = time.perf_counter()
    try:
        yield
    finally:
        logger.log(level, f"Finished {description} in {time.perf_counter() - start:.3f} s")
