"""
mfembed: Low-rank factor embeddings trained with SGD and momentum

Learns a dense vector and a bias per row entity and per column entity (or
per entity of one shared space, in symmetric mode) plus a global offset, so
that for every observed (row, col, value):

    value ≈ R_row · C_col + b_row + b_col + global_min

Typical uses are recommender-style rating data and symmetric relational
graphs. The package provides:
- Options and the FactorStore (dense factors, biases, momentum state)
- Data-scaled random initialization
- A sequential SGD-with-momentum epoch update
- A fixed-layout binary model format to resume training
- Text/binary data-file readers and an epoch driver with a CLI
"""

__version__ = "0.1.0"

# Data
from .data import (
    ENTRY_DTYPE,
    Entry,
    make_entries,
    entity_counts,
    read_entries,
    generate_low_rank_entries
)

# Models
from .models import Options, FactorStore, dumps, loads, save_store, load_store

# Optimization
from .optimization import init_store, run_epoch, EmbedTrainer

# Evaluation
from .evaluation import rmse

__all__ = [
    # Data
    "ENTRY_DTYPE",
    "Entry",
    "make_entries",
    "entity_counts",
    "read_entries",
    "generate_low_rank_entries",

    # Models
    "Options",
    "FactorStore",
    "dumps",
    "loads",
    "save_store",
    "load_store",

    # Optimization
    "init_store",
    "run_epoch",
    "EmbedTrainer",

    # Evaluation
    "rmse",
]
