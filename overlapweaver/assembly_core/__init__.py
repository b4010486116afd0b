"""
Assembly Core module for OverlapWeaver.

This module provides the overlap graph engine:
- K-mer indexing with prefix/suffix boundary buckets
- Exact suffix-prefix overlap detection pruned by the index
- Deduplicated, deterministic overlap graph
- Offset table of terminal and internal overlap-string occurrences
"""

from .data_structures import (
    Occurrence,
    OverlapEdge,
    ParameterError,
    ReadId,
    ShortReadWarning,
    validate_parameters,
)
from .kmer_index_module import KmerIndex, build_kmer_index
from .overlap_detector_module import OverlapDetector, detect_overlaps
from .overlap_graph_module import OverlapGraph, assemble_graph
from .offset_locator_module import OffsetLocator, OffsetTable, locate_offsets

__all__ = [
    # Data structures
    "Occurrence",
    "OverlapEdge",
    "ReadId",
    "ShortReadWarning",
    # Errors and checks
    "ParameterError",
    "validate_parameters",
    # Core classes
    "KmerIndex",
    "OverlapDetector",
    "OverlapGraph",
    "OffsetLocator",
    "OffsetTable",
    # Functions
    "build_kmer_index",
    "detect_overlaps",
    "assemble_graph",
    "locate_offsets",
]
