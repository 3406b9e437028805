"""
mfembed Data Structures

Entry batches, data-file readers/writers and synthetic datasets.
"""

from .entries import (
    ENTRY_DTYPE,
    Entry,
    make_entries,
    entity_counts,
    validate_entries
)
from .io import (
    read_binary,
    write_binary,
    read_text,
    write_text,
    read_entries
)
from .synthetic import (
    generate_low_rank_entries,
    generate_symmetric_entries
)

__all__ = [
    # Entries
    "ENTRY_DTYPE",
    "Entry",
    "make_entries",
    "entity_counts",
    "validate_entries",
    # Data files
    "read_binary",
    "write_binary",
    "read_text",
    "write_text",
    "read_entries",
    # Synthetic data generation
    "generate_low_rank_entries",
    "generate_symmetric_entries"
]
