"""
Readers and writers for training/testing data files.

Two formats are supported:

Binary:
    A flat array of 12-byte little-endian records {row: int32, col: int32,
    value: float32}. The file size must be an exact multiple of the record
    size.

Text:
    Whitespace-separated `row col value` triplets, conventionally one per
    line. Reading stops at the first malformed token (or an incomplete
    trailing triplet); everything before it is kept.
"""

import math
import os
import sys
import numpy as np
from pathlib import Path
from typing import Union

from .entries import ENTRY_DTYPE, make_entries


PathLike = Union[str, os.PathLike]
FLOAT32_MAX = float(np.finfo(np.float32).max)


def read_binary(path: PathLike) -> np.ndarray:
    """
    Read a binary entry file.

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the file size is not a multiple of the record size
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Data file not found: {path}")
    size = path.stat().st_size
    if size % ENTRY_DTYPE.itemsize != 0:
        raise ValueError(
            f"{path}: size {size} is not a multiple of the "
            f"{ENTRY_DTYPE.itemsize}-byte record size"
        )
    return np.fromfile(path, dtype=ENTRY_DTYPE)


def write_binary(path: PathLike, entries) -> None:
    """Write entries as packed 12-byte records."""
    entries = make_entries(entries)
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    entries.tofile(path)


def read_text(path: PathLike) -> np.ndarray:
    """
    Read whitespace-separated (row, col, value) triplets.

    Parsing stops silently at the first token that does not parse (an
    integer id or a finite float32 value) and at an incomplete trailing
    triplet. Digit separators (`1_0`) and nan/inf spellings count as
    malformed.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Data file not found: {path}")
    with open(path, 'r') as f:
        tokens = f.read().split()

    rows, cols, values = [], [], []
    for k in range(0, len(tokens) - 2, 3):
        try:
            row = int(tokens[k])
            col = int(tokens[k + 1])
            value = float(tokens[k + 2])
        except ValueError:
            break
        if any('_' in tok for tok in tokens[k:k + 3]):
            break
        if not math.isfinite(value) or abs(value) > FLOAT32_MAX:
            break
        rows.append(row)
        cols.append(col)
        values.append(value)
    return make_entries(
        np.array(rows, dtype=np.int64),
        np.array(cols, dtype=np.int64),
        np.array(values, dtype=np.float64)
    )


def write_text(path: PathLike, entries) -> None:
    """Write entries as one `row col value` line each."""
    entries = make_entries(entries)
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, 'w') as f:
        # repr of the widened float32 reads back to the same float32
        for row, col, value in entries.tolist():
            f.write(f"{row} {col} {value!r}\n")


def read_entries(path: PathLike, binary: bool = False, verbose: bool = False) -> np.ndarray:
    """
    Read a data file in either format.

    Parameters:
        path: Data file path
        binary: True for the packed record format, False for text
        verbose: Report what was read on stderr

    Returns:
        entries: Structured array with dtype ENTRY_DTYPE
    """
    if verbose:
        kind = "binary" if binary else "text"
        print(f"Reading {kind} data from {path} ... ", end="", file=sys.stderr)
    entries = read_binary(path) if binary else read_text(path)
    if verbose:
        print(f"{len(entries)} items. OK.", file=sys.stderr)
    return entries
