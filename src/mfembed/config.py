"""
Default configuration for mfembed.

Hyper-parameter defaults shared by Options and the command-line front end.
"""

# ============================================================================
# MODEL HYPERPARAMETERS
# ============================================================================

EMBED_CONFIG = {
    "dim": 10,        # Factor vector length
    "r1": 0.1,        # L2 regularization on row factors
    "r2": 0.1,        # L2 regularization on column factors
    "mom": 0.9,       # Momentum coefficient (0 = plain SGD)
    "eps": 0.01,      # Learning rate
    "init": 0.1,      # Multiplier on the data-derived init scale
    "min": None,      # Fixed global minimum; None = detect from data
}

# ============================================================================
# TRAINING CONFIGURATION
# ============================================================================

TRAINING_CONFIG = {
    "th": 0.0,          # Stop once the epoch RMSE drops below this
    "maxit": 0,         # Epoch cap (0 = unbounded)
    "shuffle": "once",  # 'once', 'epoch' or 'none'
    "symmetric": False, # Fold the column space into the row space
    "override": False,  # Replace a loaded model's options with the given ones
    "random_seed": None,
}

# ============================================================================
# EVALUATION CONFIGURATION
# ============================================================================

EVALUATION_CONFIG = {
    "n_jobs": 1,          # Threads used for held-out RMSE
    "chunk_size": 65536,  # Entries per evaluation chunk
}
