"""
Initialization of a fresh FactorStore from training data.

The global minimum offset is either detected (smallest observed value) or
taken from Options.min. Factors are then drawn from

    N(0, sqrt((mean(values) - global_min) / dim) * init)

so that, at the start, dot products are on the scale of the mean-centered
targets. Biases and momentum accumulators start at zero.
"""

import sys
import numpy as np
from typing import Optional

from ..data.entries import make_entries, validate_entries
from ..models.options import Options
from ..models.factor_store import FactorStore


def init_scale(values: np.ndarray, global_min: float, dim: int) -> float:
    """
    Data-derived factor scale: sqrt((mean(values) - global_min) / dim).

    Raises:
        ValueError: If the mean value lies below the global minimum, which
                    would make the scale non-real
    """
    centered = float(np.mean(values, dtype=np.float64)) - global_min
    if not np.isfinite(centered) or centered < 0:
        raise ValueError(
            f"Cannot initialize factors: mean value minus global minimum is "
            f"{centered}, which must be a non-negative finite number "
            f"(global_min={global_min})"
        )
    return float(np.sqrt(centered / dim))


def init_store(
    options: Options,
    size1: int,
    size2: int,
    entries,
    rng: Optional[np.random.Generator] = None,
    random_seed: Optional[int] = None,
    verbose: bool = False
) -> FactorStore:
    """
    Build a FactorStore with randomly initialized factors.

    Parameters:
        options: Model options (dim, init, min, ...)
        size1: Number of row entities (≥ max row id + 1)
        size2: Number of column entities; 0 requests symmetric mode, in which
               case column ids must already live in the row space
        entries: Training entries (non-empty)
        rng: Generator used for the factor draws. Row factors are drawn
             first, then column factors, from this single stream.
        random_seed: Seed for a new generator when `rng` is not given
        verbose: Report the detected minimum on stderr

    Returns:
        store: Initialized FactorStore

    Raises:
        ValueError: If entries are empty, sizes are invalid, or the init
                    scale is not real
        IndexError: If an entry id lies outside the requested sizes

    Example:
        >>> entries = make_entries([(0, 0, 5.0), (0, 1, 3.0), (1, 0, 4.0), (1, 1, 2.0)])
        >>> store = init_store(Options(dim=2), 2, 2, entries, random_seed=0)
        >>> store.global_min
        2.0
    """
    entries = make_entries(entries)
    if len(entries) == 0:
        raise ValueError("Cannot initialize a model from zero training entries")
    if size1 < 1:
        raise ValueError(f"size1 must be positive, got {size1}")
    if size2 < 0:
        raise ValueError(f"size2 must be non-negative, got {size2}")
    validate_entries(entries, size1, size2, name="training entries")

    values = entries['value']
    if options.min is None:
        global_min = float(values.min())
        if verbose:
            print(f"FOUND MINIMAL VALUE: {global_min}", file=sys.stderr)
    else:
        global_min = options.min

    scale = init_scale(values, global_min, options.dim)

    if rng is None:
        rng = np.random.default_rng(random_seed)

    store = FactorStore(options, size1, size2, global_min=global_min)
    std = scale * options.init
    store.rows.factors[...] = rng.normal(0.0, std, size=store.rows.factors.shape)
    if not store.symmetric:
        store.cols.factors[...] = rng.normal(0.0, std, size=store.cols.factors.shape)
    return store
