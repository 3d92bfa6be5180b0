"""
Fixed-width text table parsing.
"""

import io
from pathlib import Path
from typing import Any, Callable, Sequence, Tuple, Union

import pandas as pd

from stellarsynth.core.logging_config import get_logger

logger = get_logger("io.fixed_width")

# ((start, stop), type, name) or ((start, stop), type, name, func); columns are
# 0-based and half-open, like Python slices.
ColumnSpec = Union[
    Tuple[Tuple[int, int], type, str],
    Tuple[Tuple[int, int], type, str, Callable[[Any], Any]],
]


def parse_fwf(
    source: Union[str, Path, Sequence[str]],
    rowspec: Sequence[ColumnSpec],
    datarow: int = 1,
    lastrow: int = 0,
) -> pd.DataFrame:
    """
    Parse a fixed-width table.

    Parameters
    ----------
    source : str, Path or sequence of str
        File name, or the lines of the table
    rowspec : sequence of tuples
        One entry per column: the ``(start, stop)`` character span, the type,
        the column name and optionally a function applied to the parsed value.
        ``str`` columns are returned as read (including padding); other types
        are parsed from the stripped text, and blank cells (or cells past the
        end of a short line) become the zero of that type.
    datarow : int
        1-based row number of the first data row
    lastrow : int
        1-based row number of the last data row (0 means end of input)

    Returns
    -------
    pandas.DataFrame
        One row per parsed line, one column per rowspec entry
    """
    if isinstance(source, (str, Path)):
        handle = source
        logger.debug(f"Parsing fixed-width file {source}")
    else:
        handle = io.StringIO("\n".join(source))

    colspecs = [spec[0] for spec in rowspec]
    names = [spec[2] for spec in rowspec]
    nrows = None if lastrow == 0 else max(lastrow - datarow + 1, 0)

    raw = pd.read_fwf(
        handle,
        colspecs=colspecs,
        names=names,
        header=None,
        skiprows=datarow - 1,
        nrows=nrows,
        dtype=str,
        keep_default_na=False,
        na_filter=False,
        delimiter="\n",
        skip_blank_lines=True,
    ).fillna("")

    columns = {}
    for spec in rowspec:
        _, kind, name = spec[:3]
        func = spec[3] if len(spec) == 4 else None
        columns[name] = [_parse_item(text, kind, func) for text in raw[name]]

    return pd.DataFrame(columns, columns=names)


def _parse_item(text: str, kind: type, func: Callable[[Any], Any] = None) -> Any:
    if kind is str:
        value = text
    elif text.strip() == "":
        value = kind()
    else:
        value = kind(text.strip())
    return func(value) if func is not None else value