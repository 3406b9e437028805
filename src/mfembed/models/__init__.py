"""
mfembed Models

Options, the factor store and its binary persistence.
"""

from .options import Options
from .factor_store import FactorBlock, FactorStore
from .persistence import dumps, loads, save_store, load_store

__all__ = [
    "Options",
    "FactorBlock",
    "FactorStore",
    "dumps",
    "loads",
    "save_store",
    "load_store",
]
