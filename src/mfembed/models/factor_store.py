"""
FactorStore: dense factor matrices, biases and momentum accumulators.

The model reconstructs an observation (r, c) as

    p(r, c) = rows.factors[r] · cols.factors[c] + rows.bias[r] + cols.bias[c] + global_min

Each entity side is a FactorBlock holding:
- factors    (n × dim): learned embeddings
- bias       (n,):      per-entity bias
- delta      (n × dim): momentum accumulator for factors
- bias_delta (n,):      momentum accumulator for biases

In symmetric mode (size2 == 0) rows and columns share one entity space and
`store.cols` is the very same FactorBlock as `store.rows`. The selection is
made once, at construction.

All arrays are float32.
"""

import numpy as np
from typing import Optional

from .options import Options
from ..data.entries import validate_entries


FLOAT_DTYPE = np.float32


class FactorBlock:
    """
    Per-side storage for one entity space.

    Attributes:
        factors: Factor matrix (n × dim)
        bias: Bias vector (n,)
        delta: Factor momentum (n × dim)
        bias_delta: Bias momentum (n,)
    """

    __slots__ = ('factors', 'bias', 'delta', 'bias_delta')

    def __init__(self, n_entities: int, dim: int):
        self.factors = np.zeros((n_entities, dim), dtype=FLOAT_DTYPE)
        self.bias = np.zeros(n_entities, dtype=FLOAT_DTYPE)
        self.delta = np.zeros((n_entities, dim), dtype=FLOAT_DTYPE)
        self.bias_delta = np.zeros(n_entities, dtype=FLOAT_DTYPE)

    @property
    def n_entities(self) -> int:
        return self.factors.shape[0]

    def arrays(self):
        """Arrays in persisted order: factors, bias, delta, bias_delta."""
        return (self.factors, self.bias, self.delta, self.bias_delta)

    def __repr__(self) -> str:
        return f"FactorBlock(n_entities={self.n_entities}, dim={self.factors.shape[1]})"


class FactorStore:
    """
    Owner of all learned state of a factor model.

    Created by `init_store` (fresh, random factors) or `loads`/`load_store`
    (persisted state). Mutated only by the initializer and `run_epoch`;
    read by `predict`/`predict_batch`.

    Attributes:
        options: Options the store was built with
        size1: Number of row entities
        size2: Number of column entities (0 = symmetric mode)
        global_min: Additive offset learned from (or fixed for) the data
        rows: FactorBlock for row entities
        cols: FactorBlock for column entities (`rows` itself when symmetric)

    Example:
        >>> store = FactorStore(Options(dim=4), size1=3, size2=0)
        >>> store.cols is store.rows
        True
    """

    def __init__(self, options: Options, size1: int, size2: int = 0, global_min: float = 0.0):
        if size1 < 1:
            raise ValueError(f"size1 must be positive, got {size1}")
        if size2 < 0:
            raise ValueError(f"size2 must be non-negative, got {size2}")

        self.options = options
        self.size1 = int(size1)
        self.size2 = int(size2)
        self.global_min = float(FLOAT_DTYPE(global_min))

        self.rows = FactorBlock(self.size1, options.dim)
        self.cols = FactorBlock(self.size2, options.dim) if self.size2 else self.rows

    @property
    def symmetric(self) -> bool:
        return self.size2 == 0

    @property
    def dim(self) -> int:
        return self.options.dim

    @property
    def n_cols(self) -> int:
        """Size of the column entity space (size1 when symmetric)."""
        return self.size2 if self.size2 else self.size1

    def predict(self, row: int, col: int) -> float:
        """
        Reconstruct the value for a single (row, col) pair.

        Raises:
            IndexError: If either id is outside its entity space
        """
        if not 0 <= row < self.size1:
            raise IndexError(f"row {row} out of range [0, {self.size1})")
        if not 0 <= col < self.n_cols:
            raise IndexError(f"col {col} out of range [0, {self.n_cols})")
        rows, cols = self.rows, self.cols
        p = (
            np.dot(rows.factors[row], cols.factors[col])
            + rows.bias[row] + cols.bias[col] + FLOAT_DTYPE(self.global_min)
        )
        return float(p)

    def predict_batch(self, rows: np.ndarray, cols: np.ndarray) -> np.ndarray:
        """
        Vectorized predictions for parallel arrays of ids.

        Parameters:
            rows: Row ids (n,)
            cols: Column ids (n,)

        Returns:
            predictions: float32 array (n,)
        """
        rows = np.asarray(rows, dtype=np.int64)
        cols = np.asarray(cols, dtype=np.int64)
        if rows.shape != cols.shape:
            raise ValueError(f"rows shape {rows.shape} must match cols shape {cols.shape}")
        if rows.size and (rows.min() < 0 or rows.max() >= self.size1):
            raise IndexError(f"row ids must be in [0, {self.size1})")
        if cols.size and (cols.min() < 0 or cols.max() >= self.n_cols):
            raise IndexError(f"column ids must be in [0, {self.n_cols})")

        R = self.rows.factors[rows]
        C = self.cols.factors[cols]
        return (
            np.einsum('ij,ij->i', R, C)
            + self.rows.bias[rows] + self.cols.bias[cols]
            + FLOAT_DTYPE(self.global_min)
        )

    def reconstruct(self) -> np.ndarray:
        """
        Dense reconstruction of the full (size1 × n_cols) matrix.

        Only sensible for small stores; used for inspection and tests.
        """
        R_hat = self.rows.factors @ self.cols.factors.T
        R_hat += self.rows.bias[:, None]
        R_hat += self.cols.bias[None, :]
        R_hat += FLOAT_DTYPE(self.global_min)
        return R_hat

    def check_entries(self, entries: np.ndarray, name: Optional[str] = None) -> None:
        """Raise IndexError if any entry falls outside this store."""
        validate_entries(entries, self.size1, self.size2, name=name)

    def with_options(self, options: Options) -> 'FactorStore':
        """
        Swap in new options, e.g. to override a loaded model's settings.

        The factor dimension cannot change without re-initialization.
        """
        if options.dim != self.options.dim:
            raise ValueError(
                f"Cannot change dim of an initialized store "
                f"({self.options.dim} -> {options.dim}); re-initialize instead"
            )
        self.options = options
        return self

    def __repr__(self) -> str:
        return (
            f"FactorStore("
            f"size1={self.size1}, "
            f"size2={self.size2}, "
            f"dim={self.dim}, "
            f"global_min={self.global_min:.4g})"
        )
