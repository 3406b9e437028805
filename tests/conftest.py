"""
Shared pytest fixtures.
"""

import numpy as np
import pytest

from mfembed.data import make_entries, generate_low_rank_entries


@pytest.fixture
def tiny_entries():
    """2 × 2 fully observed matrix with minimum value 2.0."""
    return make_entries([(0, 0, 5.0), (0, 1, 3.0), (1, 0, 4.0), (1, 1, 2.0)])


@pytest.fixture(scope="session")
def low_rank_entries():
    """Noisy rank-2 observations of a 30 × 20 matrix."""
    entries, _ = generate_low_rank_entries(
        n_rows=30, n_cols=20, rank=2, density=0.5, noise=0.01, random_state=0
    )
    return entries


@pytest.fixture
def split_entries(low_rank_entries):
    """Train/test split of the low-rank observations."""
    rng = np.random.default_rng(1)
    order = rng.permutation(len(low_rank_entries))
    n_train = int(0.8 * len(order))
    return low_rank_entries[order[:n_train]], low_rank_entries[order[n_train:]]
