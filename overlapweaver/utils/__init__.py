"""
Utilities module for OverlapWeaver.

This module provides shared sequence primitives. The pipeline orchestrator
lives in ``overlapweaver.utils.pipeline`` and is imported from there, since
it depends on the assembly core which itself uses these primitives.
"""

from .sequence_utils import (
    DNA_ALPHABET,
    is_valid_dna,
    iter_kmers,
    extract_kmers,
    find_all_occurrences,
)

__all__ = [
    "DNA_ALPHABET",
    "is_valid_dna",
    "iter_kmers",
    "extract_kmers",
    "find_all_occurrences",
]
