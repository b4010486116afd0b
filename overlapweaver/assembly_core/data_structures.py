#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
OverlapWeaver v0.1.0

Shared data structures for the overlap graph engine: overlap edges,
occurrences of overlap strings, short-read warnings and parameter checks.

Author: OverlapWeaver Development Team
License: Dual License (Academic/Commercial) - See LICENSE_ACADEMIC.md and LICENSE_COMMERCIAL.md
"""

import logging
from dataclasses import dataclass
from typing import List, Optional, Tuple

from ..io_utils.io_core import Read, ReadSet

logger = logging.getLogger(__name__)

# ReadId is the 0-based position of a read in its ReadSet
ReadId = int


class ParameterError(ValueError):
    """Raised when the overlap length or k-mer size cannot produce any result."""
    pass


# ============================================================================
#                           WARNINGS
# ============================================================================

@dataclass(frozen=True)
class ShortReadWarning:
    """
    A read too short for one role of the run.

    The read is excluded from that role only (``"index"`` when shorter than
    k, ``"detector"`` when shorter than the overlap length).
    """
    read: ReadId
    length: int
    required: int
    role: str

    def __str__(self) -> str:
        return (f"read {self.read} ({self.length}bp) shorter than {self.required}bp, "
                f"excluded from {self.role}")


# ============================================================================
#                           OVERLAP EDGES
# ============================================================================

@dataclass(frozen=True, order=True)
class OverlapEdge:
    """
    Directed exact overlap between two reads.

    Overlap notation: the source's suffix equals the target's prefix
    source: AAA|TTT
    target:     TTT|GGG
                <-L->

    Field order makes the natural ordering (overlap, source, target).
    """
    overlap: str
    source: ReadId
    target: ReadId
    source_prefix_remainder: str
    target_suffix_remainder: str

    @classmethod
    def from_reads(cls, source: Read, target: Read, overlap_length: int) -> 'OverlapEdge':
        """Build the edge for a confirmed suffix/prefix match of length L."""
        return cls(
            overlap=source.suffix(overlap_length),
            source=source.id,
            target=target.id,
            source_prefix_remainder=source.sequence[:source.length - overlap_length],
            target_suffix_remainder=target.sequence[overlap_length:],
        )

    @property
    def key(self) -> Tuple[ReadId, ReadId, str]:
        """Uniqueness key of the edge."""
        return (self.source, self.target, self.overlap)

    @property
    def sort_key(self) -> Tuple[str, ReadId, ReadId]:
        return (self.overlap, self.source, self.target)

    @property
    def overlap_length(self) -> int:
        return len(self.overlap)

    def __str__(self) -> str:
        return f"{self.source} -> {self.target} ({self.overlap_length}bp, {self.overlap})"


# ============================================================================
#                           OCCURRENCES
# ============================================================================

@dataclass(frozen=True, order=True)
class Occurrence:
    """
    One occurrence of an overlap string (or k-mer) inside a read.

    The range is half-open, [start, end). ``terminal`` is True when the
    occurrence is the read's prefix (start == 0) or suffix (end == read
    length); internal occurrences mark candidate split points.
    """
    pattern: str
    read: ReadId
    start: int
    end: int
    terminal: bool

    @property
    def is_prefix(self) -> bool:
        return self.start == 0

    @property
    def length(self) -> int:
        return self.end - self.start


# ============================================================================
#                           PARAMETER CHECKS
# ============================================================================

def validate_parameters(
    reads: ReadSet,
    overlap_length: int,
    kmer_size: Optional[int] = None,
    strict_lengths: bool = False
) -> List[str]:
    """
    Check overlap length L and k-mer size k before any computation.

    Args:
        reads: Reads of the run
        overlap_length: Overlap length L
        kmer_size: K-mer size k (defaults to L)
        strict_lengths: Treat L or k longer than every read as fatal

    Returns:
        Non-fatal notes (e.g. L exceeds every read); empty when all is fine

    Raises:
        ParameterError: If L or k is < 1, or (strict only) exceeds the longest read
    """
    k = overlap_length if kmer_size is None else kmer_size
    notes = []

    for name, value in (("overlap length", overlap_length), ("k-mer size", k)):
        if isinstance(value, bool) or not isinstance(value, int):
            raise ParameterError(f"{name} must be an integer, got {value!r}")
        if value < 1:
            raise ParameterError(f"{name} must be a positive integer, got {value}")

        longest = reads.max_length()
        if value > longest:
            message = f"{name} {value} exceeds the longest read ({longest}bp)"
            if strict_lengths:
                raise ParameterError(message + "; no overlap can be found")
            notes.append(message)
            logger.warning(message)

    return notes
