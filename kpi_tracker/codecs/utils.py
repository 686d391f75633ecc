"""
Shared CSV helpers: reading text into a DataFrame of raw strings, cell
access, explicit numeric parsing, and writing frames back to CSV text.
"""

import csv
import io
import logging
import warnings
from typing import Any, Iterable, Mapping

import numpy as np
import pandas as pd
from pandas.errors import ParserWarning

logger = logging.getLogger(__name__)


def read_csv_text(text: str) -> pd.DataFrame:
    """Parse CSV text into a DataFrame of raw, unconverted cell text.

    - Quoted segments are honoured and doubled quotes unescaped; unquoted
      cells are taken literally.
    - Empty and whitespace-only lines are dropped. A line of empty cells
      (``,,,``) is a row like any other.
    - Row length is not checked against the header. Extra trailing cells
      are ignored; missing ones come back as None or NaN (read them
      through ``cell``).

    Structural failures (e.g. empty input) raise pandas errors, which are
    ValueError subclasses, for the caller to handle.
    """
    header = pd.read_csv(io.StringIO(text), nrows=0, engine="python").columns
    width = len(header)

    with warnings.catch_warnings():
        # Over-long rows are truncated to the header width
        warnings.simplefilter("ignore", ParserWarning)
        frame = pd.read_csv(
            io.StringIO(text),
            dtype=object,
            keep_default_na=False,
            skip_blank_lines=True,
            index_col=False,
            engine="python",
            on_bad_lines=lambda fields: fields[:width],
        )
    if frame.empty:
        return frame

    # A whitespace-only line parses as a single blank cell and nothing else
    blank_rows = frame.iloc[:, 0].map(is_blank) & frame.iloc[:, 1:].isna().all(axis=1)
    if blank_rows.any():
        logger.debug("Skipping %d blank CSV lines", int(blank_rows.sum()))
    return frame[~blank_rows].reset_index(drop=True)


def write_csv_text(frame: pd.DataFrame) -> str:
    """Render ``frame`` as CSV text.

    The header is quoted only where needed; data cells holding text are
    always quoted (internal quotes doubled) while numbers are written bare.
    Missing values become empty cells.
    """
    header = pd.DataFrame(columns=frame.columns).to_csv(index=False, lineterminator="\n")
    body = frame.to_csv(
        index=False,
        header=False,
        quoting=csv.QUOTE_NONNUMERIC,
        lineterminator="\n",
        na_rep="",
    )
    return header + body


def is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, float) and np.isnan(value):
        return True
    return isinstance(value, str) and not value.strip()


def cell(row: Mapping[str, Any], column: str) -> str:
    """Return the raw text of ``column`` in ``row``; '' when missing."""
    value = row.get(column)
    if value is None or (isinstance(value, float) and np.isnan(value)):
        return ""
    return str(value)


def parse_float(text: str) -> float:
    """Explicit float parse. Empty or malformed text gives NaN."""
    text = text.strip()
    if not text:
        return np.nan
    try:
        return float(text)
    except ValueError:
        logger.debug("Could not parse %r as a number", text)
        return np.nan


def parse_int(text: str) -> int | float:
    """Explicit integer parse, truncating decimals ("3.7" -> 3).

    Empty or malformed text gives NaN, so the result is a float then.
    """
    value = parse_float(text)
    if np.isnan(value) or np.isinf(value):
        return np.nan
    return int(value)


def optional_text(text: str) -> str | None:
    """Map an empty cell to None."""
    return text if text else None


def split_list(text: str, delimiter: str) -> list[str]:
    """Split a delimited multi-value cell, dropping empty parts."""
    return [part for part in text.split(delimiter) if part]


def warn_if_unexpected(value: str, allowed: Iterable[str], field: str, row: str) -> str:
    """Log values outside ``allowed``; the value is returned unchanged."""
    allowed = tuple(allowed)
    if value not in allowed:
        logger.warning(
            "Unexpected %s '%s' for '%s' (expected one of %s); keeping it",
            field, value, row, ", ".join(allowed),
        )
    return value


def warn_if_out_of_range(value: float, bounds: tuple[int, int], field: str, row: str) -> float:
    """Log numbers outside the inclusive ``bounds``; NaN is left to the caller."""
    low, high = bounds
    if not np.isnan(value) and not low <= value <= high:
        logger.warning("%s %s for '%s' is outside %d-%d; keeping it", field, value, row, low, high)
    return value
