"""
Stochastic gradient descent with momentum for factor stores.

Objective per observation (r, c, v):

    0.5 * (v - p(r, c))² + 0.5 * r1 * ||R_r||² + 0.5 * r2 * ||C_c||²

where p(r, c) = R_r · C_c + b1_r + b2_c + global_min.

For each entry, in order:
    1. D_r, D_c, bd1, bd2 are decayed by `mom` (reset to 0 when mom == 0)
    2. delta = v - p(r, c)
    3. D_r += -delta * C_c + r1 * R_r,   D_c += -delta * R_r + r2 * C_c
       bd1 += -delta,                    bd2 += -delta
    4. R_r -= eps * D_r,  C_c -= eps * D_c,  b1_r -= eps * bd1,  b2_c -= eps * bd2

Updates are applied in place, entry by entry; each step sees the state left
by the previous one. In symmetric mode an entry with r == c touches the same
row twice.
"""

import numpy as np

from ..data.entries import make_entries
from ..models.factor_store import FactorStore, FLOAT_DTYPE


def run_epoch(store: FactorStore, entries, check: bool = True) -> float:
    """
    Run one sequential SGD pass over `entries`, mutating `store`.

    The caller decides the order (shuffle before calling to decorrelate
    updates).

    Parameters:
        store: FactorStore to train in place
        entries: Training entries, processed in the given order
        check: Validate entry ids against the store before training

    Returns:
        rmse: sqrt(mean squared residual) over the pass, computed from the
              predictions made just before each entry's update

    Raises:
        ValueError: If entries are empty
        IndexError: If an entry id lies outside the store (when check=True)

    Example:
        >>> store = init_store(Options(dim=2, mom=0.0, eps=0.1), 2, 2, entries, random_seed=0)
        >>> rmse = run_epoch(store, entries)
    """
    entries = make_entries(entries)
    n = len(entries)
    if n == 0:
        raise ValueError("Cannot run an epoch over zero entries")
    if check:
        store.check_entries(entries, name="training entries")

    opts = store.options
    use_momentum = opts.mom != 0
    mom = FLOAT_DTYPE(opts.mom)
    eps = FLOAT_DTYPE(opts.eps)
    r1 = FLOAT_DTYPE(opts.r1)
    r2 = FLOAT_DTYPE(opts.r2)
    global_min = FLOAT_DTYPE(store.global_min)

    # cols is rows in symmetric mode; index views then alias the same memory
    data1, bias1, delta1, bias_delta1 = store.rows.arrays()
    data2, bias2, delta2, bias_delta2 = store.cols.arrays()

    err = 0.0
    row_ids = entries['row'].tolist()
    col_ids = entries['col'].tolist()
    values = entries['value']

    for k in range(n):
        r = row_ids[k]
        c = col_ids[k]
        R = data1[r]
        C = data2[c]
        Dr = delta1[r]
        Dc = delta2[c]

        if use_momentum:
            Dr *= mom
            Dc *= mom
            bias_delta1[r] *= mom
            bias_delta2[c] *= mom
        else:
            Dr[:] = 0
            Dc[:] = 0
            bias_delta1[r] = 0
            bias_delta2[c] = 0

        p = np.dot(R, C) + bias1[r] + bias2[c] + global_min
        delta = values[k] - p
        err += float(delta) * float(delta)

        grad_r = -delta * C + r1 * R
        grad_c = -delta * R + r2 * C
        Dr += grad_r
        Dc += grad_c
        bias_delta1[r] -= delta
        bias_delta2[c] -= delta

        R -= eps * Dr
        C -= eps * Dc
        bias1[r] -= eps * bias_delta1[r]
        bias2[c] -= eps * bias_delta2[c]

    return float(np.sqrt(err / n))
