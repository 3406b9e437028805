"""
Held-out evaluation of factor stores.

Prediction is a pure read of the store, so evaluation over a batch of
entries can be split into chunks and run concurrently; the per-chunk sums of
squared errors are added up at the end. Never evaluate while an epoch is
training the same store.
"""

import numpy as np
from concurrent.futures import ThreadPoolExecutor
from typing import Optional

from ..config import EVALUATION_CONFIG
from ..data.entries import make_entries
from ..models.factor_store import FactorStore


def squared_error_sum(store: FactorStore, entries: np.ndarray) -> float:
    """Sum of (prediction - value)² over entries, accumulated in float64."""
    if len(entries) == 0:
        return 0.0
    predictions = store.predict_batch(entries['row'], entries['col'])
    residuals = predictions.astype(np.float64) - entries['value'].astype(np.float64)
    return float(np.sum(residuals ** 2))


def rmse(
    store: FactorStore,
    entries,
    n_jobs: int = EVALUATION_CONFIG["n_jobs"],
    chunk_size: Optional[int] = None
) -> float:
    """
    Root-mean-square error of the store's predictions on `entries`.

    Parameters:
        store: Trained FactorStore
        entries: Evaluation entries (non-empty)
        n_jobs: Number of worker threads; 1 evaluates in the calling thread
        chunk_size: Entries per work unit (default from EVALUATION_CONFIG)

    Returns:
        rmse: sqrt(mean((p(r, c) - v)²))

    Raises:
        ValueError: If entries are empty or n_jobs < 1
        IndexError: If an entry id lies outside the store

    Example:
        >>> test_rmse = rmse(store, test_entries, n_jobs=4)
        >>> print(f"RMSE: {test_rmse:.4f}")
    """
    entries = make_entries(entries)
    n = len(entries)
    if n == 0:
        raise ValueError("Cannot evaluate on zero entries")
    if n_jobs < 1:
        raise ValueError(f"n_jobs must be positive, got {n_jobs}")
    store.check_entries(entries, name="evaluation entries")

    if n_jobs == 1:
        total = squared_error_sum(store, entries)
    else:
        chunk_size = chunk_size or EVALUATION_CONFIG["chunk_size"]
        chunks = [entries[start:start + chunk_size] for start in range(0, n, chunk_size)]
        with ThreadPoolExecutor(max_workers=n_jobs) as executor:
            total = sum(executor.map(lambda chunk: squared_error_sum(store, chunk), chunks))

    return float(np.sqrt(total / n))
