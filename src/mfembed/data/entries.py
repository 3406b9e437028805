"""
Entry: the unit of training and evaluation data.

A single observation is an (row, col, value) triplet. Batches are numpy
structured arrays whose record layout matches the binary data file:

    row   : int32
    col   : int32
    value : float32

Row and column ids are dense zero-based indices into the row-entity and
column-entity spaces. In symmetric mode both share the row space.
"""

import numpy as np
from typing import NamedTuple, Optional, Tuple


ENTRY_DTYPE = np.dtype([('row', '<i4'), ('col', '<i4'), ('value', '<f4')])


class Entry(NamedTuple):
    """A single observed (row, col, value) triplet."""
    row: int
    col: int
    value: float


def make_entries(data=None, cols=None, values=None) -> np.ndarray:
    """
    Build a structured entry array.

    Accepts either:
    - a structured array with row/col/value fields (copied to ENTRY_DTYPE),
    - a sequence of (row, col, value) triplets or Entry tuples,
    - three parallel arrays: make_entries(rows, cols, values).

    Returns:
        entries: Structured array with dtype ENTRY_DTYPE

    Example:
        >>> entries = make_entries([(0, 0, 5.0), (0, 1, 3.0)])
        >>> entries['value']
        array([5., 3.], dtype=float32)
    """
    if cols is not None or values is not None:
        if data is None or cols is None or values is None:
            raise ValueError("rows, cols and values must all be given")
        rows = np.asarray(data)
        cols = np.asarray(cols)
        values = np.asarray(values)
        if not (rows.shape == cols.shape == values.shape) or rows.ndim != 1:
            raise ValueError(
                f"rows, cols and values must be 1D arrays of equal length, "
                f"got shapes {rows.shape}, {cols.shape}, {values.shape}"
            )
        entries = np.empty(len(rows), dtype=ENTRY_DTYPE)
        entries['row'] = rows
        entries['col'] = cols
        entries['value'] = values
        return entries

    if data is None:
        return np.empty(0, dtype=ENTRY_DTYPE)

    if isinstance(data, np.ndarray) and data.dtype.names is not None:
        missing = {'row', 'col', 'value'} - set(data.dtype.names)
        if missing:
            raise ValueError(f"Structured array is missing fields: {sorted(missing)}")
        return make_entries(data['row'], data['col'], data['value'])

    triplets = list(data)
    entries = np.empty(len(triplets), dtype=ENTRY_DTYPE)
    for k, triplet in enumerate(triplets):
        if len(triplet) != 3:
            raise ValueError(f"Entry {k} is not a (row, col, value) triplet: {triplet!r}")
        entries[k] = (int(triplet[0]), int(triplet[1]), float(triplet[2]))
    return entries


def entity_counts(entries: np.ndarray, symmetric: bool = False) -> Tuple[int, int]:
    """
    Derive (size1, size2) from the largest row and column ids.

    In symmetric mode the column space is folded into the row space:
    size1 = max(n_rows, n_cols) and size2 = 0.
    """
    entries = make_entries(entries)
    if len(entries) == 0:
        raise ValueError("Cannot derive entity counts from zero entries")
    n_rows = int(entries['row'].max()) + 1
    n_cols = int(entries['col'].max()) + 1
    if symmetric:
        return max(n_rows, n_cols), 0
    return n_rows, n_cols


def validate_entries(
    entries: np.ndarray,
    size1: int,
    size2: int,
    name: Optional[str] = None
) -> None:
    """
    Check that every id lies inside the entity spaces of a store.

    Raises:
        IndexError: If any row id is outside [0, size1) or any column id is
                    outside [0, size2 or size1)
    """
    label = name or "entries"
    if len(entries) == 0:
        return
    n_cols = size2 if size2 > 0 else size1
    rows = entries['row']
    cols = entries['col']
    if rows.min() < 0 or rows.max() >= size1:
        raise IndexError(
            f"{label}: row ids must be in [0, {size1}), "
            f"got range [{rows.min()}, {rows.max()}]"
        )
    if cols.min() < 0 or cols.max() >= n_cols:
        raise IndexError(
            f"{label}: column ids must be in [0, {n_cols}), "
            f"got range [{cols.min()}, {cols.max()}]"
        )
