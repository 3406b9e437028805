"""
Synthetic Data Generation for mfembed
=====================================

Utilities for generating sparse observations of a known low-rank matrix,
for testing, convergence checks and demos.

Key Features:
- Controlled rank, density and noise
- Optional per-entity biases and a global offset
- Symmetric (undirected) relational data
"""

import numpy as np
from typing import Optional, Tuple

from .entries import make_entries


def generate_low_rank_entries(
    n_rows: int = 50,
    n_cols: int = 40,
    rank: int = 3,
    density: float = 0.3,
    noise: float = 0.05,
    offset: float = 1.0,
    with_bias: bool = True,
    random_state: Optional[int] = None
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Sample entries from a noisy low-rank matrix.

    The dense ground truth is
        M = U V^T + b_row[:, None] + b_col[None, :] + offset
    with U, V ~ N(0, 1/sqrt(rank)). A fraction `density` of the cells is
    observed, and every row and every column is guaranteed at least one
    observation.

    Parameters:
        n_rows: Number of row entities
        n_cols: Number of column entities
        rank: Rank of the factor part
        density: Fraction of cells observed, in (0, 1]
        noise: Std of Gaussian noise added to observed values
        offset: Constant added to every cell
        with_bias: Whether to add per-entity biases
        random_state: Random seed for reproducibility

    Returns:
        entries: Structured entry array (ENTRY_DTYPE)
        M: Dense noise-free ground truth (n_rows × n_cols)

    Example:
        >>> entries, M = generate_low_rank_entries(20, 10, rank=2, random_state=0)
        >>> entries['row'].max() < 20
        True
    """
    if not 0 < density <= 1:
        raise ValueError(f"density must be in (0, 1], got {density}")
    if rank < 1:
        raise ValueError(f"rank must be positive, got {rank}")
    if n_rows < 1 or n_cols < 1:
        raise ValueError(f"n_rows and n_cols must be positive, got ({n_rows}, {n_cols})")

    rng = np.random.default_rng(random_state)

    U = rng.normal(0, 1 / np.sqrt(rank), size=(n_rows, rank))
    V = rng.normal(0, 1 / np.sqrt(rank), size=(n_cols, rank))
    M = U @ V.T + offset
    if with_bias:
        M += rng.normal(0, 0.3, size=n_rows)[:, None]
        M += rng.normal(0, 0.3, size=n_cols)[None, :]

    mask = rng.random((n_rows, n_cols)) < density
    # Every entity needs at least one observation
    mask[np.arange(n_rows), rng.integers(0, n_cols, size=n_rows)] = True
    mask[rng.integers(0, n_rows, size=n_cols), np.arange(n_cols)] = True

    rows, cols = np.nonzero(mask)
    values = M[rows, cols] + rng.normal(0, noise, size=len(rows))

    order = rng.permutation(len(rows))
    entries = make_entries(rows[order], cols[order], values[order])
    return entries, M


def generate_symmetric_entries(
    n_entities: int = 40,
    rank: int = 3,
    density: float = 0.3,
    noise: float = 0.05,
    offset: float = 1.0,
    random_state: Optional[int] = None
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Sample both (i, j) and (j, i) observations of a symmetric low-rank matrix.

    Useful for undirected relational data where rows and columns share one
    entity space.

    Returns:
        entries: Structured entry array (ENTRY_DTYPE), each pair in both orders
        M: Dense symmetric ground truth (n_entities × n_entities)
    """
    if not 0 < density <= 1:
        raise ValueError(f"density must be in (0, 1], got {density}")
    if n_entities < 2:
        raise ValueError(f"n_entities must be at least 2, got {n_entities}")

    rng = np.random.default_rng(random_state)

    U = rng.normal(0, 1 / np.sqrt(rank), size=(n_entities, rank))
    bias = rng.normal(0, 0.3, size=n_entities)
    M = U @ U.T + bias[:, None] + bias[None, :] + offset

    upper = np.triu(rng.random((n_entities, n_entities)) < density, k=1)
    upper[np.arange(n_entities - 1), np.arange(1, n_entities)] = True
    rows, cols = np.nonzero(upper)
    values = M[rows, cols] + rng.normal(0, noise, size=len(rows))

    all_rows = np.concatenate([rows, cols])
    all_cols = np.concatenate([cols, rows])
    all_values = np.concatenate([values, values])
    order = rng.permutation(len(all_rows))
    entries = make_entries(all_rows[order], all_cols[order], all_values[order])
    return entries, M
