"""
OverlapWeaver v0.1.0

K-mer index over a read set.

Collects the distinct k-mers of every read and buckets reads by their
boundary k-mers:
- prefix_index: k-mer -> reads whose first k characters equal it
- suffix_index: k-mer -> reads whose last k characters equal it

The index is built once per run and never mutated afterwards, so later
stages can share it between threads without locking.

Author: OverlapWeaver Development Team
Date: 2026-10-19
"""

import logging
from collections import defaultdict
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Dict, FrozenSet, List, Sequence, Set

from ..io_utils.io_core import Read, ReadSet
from ..utils.sequence_utils import extract_kmers
from .data_structures import ParameterError, ReadId, ShortReadWarning

logger = logging.getLogger(__name__)


@dataclass
class _PartialIndex:
    """Index contribution of one chunk of reads, merged by a fold."""
    kmers: Set[str] = field(default_factory=set)
    prefix_index: Dict[str, Set[ReadId]] = field(default_factory=lambda: defaultdict(set))
    suffix_index: Dict[str, Set[ReadId]] = field(default_factory=lambda: defaultdict(set))
    warnings: List[ShortReadWarning] = field(default_factory=list)
    windows: int = 0

    def merge(self, other: '_PartialIndex'):
        """Fold another partial into this one (order-preserving for warnings)."""
        self.kmers |= other.kmers
        for kmer, read_ids in other.prefix_index.items():
            self.prefix_index[kmer] |= read_ids
        for kmer, read_ids in other.suffix_index.items():
            self.suffix_index[kmer] |= read_ids
        self.warnings.extend(other.warnings)
        self.windows += other.windows


def _index_chunk(reads: Sequence[Read], k: int) -> _PartialIndex:
    """Index a chunk of reads (thread-safe: touches only its own partial)."""
    partial = _PartialIndex()

    for read in reads:
        if read.length < k:
            partial.warnings.append(
                ShortReadWarning(read=read.id, length=read.length, required=k, role="index")
            )
            continue

        kmers = extract_kmers(read.sequence, k)
        partial.kmers.update(kmers)
        partial.windows += len(kmers)

        partial.prefix_index[read.prefix(k)].add(read.id)
        partial.suffix_index[read.suffix(k)].add(read.id)

    return partial


class KmerIndex:
    """
    Distinct k-mers plus prefix/suffix buckets for a ReadSet.

    Use ``KmerIndex.build(reads, k)`` rather than the constructor.
    Buckets hold frozensets; callers needing a stable order should use the
    sorted accessors.
    """

    def __init__(
        self,
        k: int,
        kmers: FrozenSet[str],
        prefix_index: Dict[str, FrozenSet[ReadId]],
        suffix_index: Dict[str, FrozenSet[ReadId]],
        warnings: List[ShortReadWarning],
        windows: int = 0
    ):
        self.k = k
        self.kmers = kmers
        self.prefix_index = prefix_index
        self.suffix_index = suffix_index
        self.warnings = warnings

        # Statistics
        self.stats = {
            'kmer_size': k,
            'windows_scanned': windows,
            'distinct_kmers': len(kmers),
            'prefix_buckets': len(prefix_index),
            'suffix_buckets': len(suffix_index),
            'reads_skipped': len(warnings),
        }

    @classmethod
    def build(cls, reads: ReadSet, k: int, num_threads: int = 1) -> 'KmerIndex':
        """
        Build the k-mer index from all reads.

        Args:
            reads: Reads to index
            k: K-mer size (>= 1)
            num_threads: Worker threads; chunks are indexed independently and
                folded in chunk order, so the result does not depend on it

        Returns:
            Immutable KmerIndex

        Raises:
            ParameterError: If k < 1
        """
        if k < 1:
            raise ParameterError(f"k-mer size must be a positive integer, got {k}")

        read_list = list(reads)
        num_threads = max(1, num_threads)

        if num_threads == 1 or len(read_list) < 2:
            merged = _index_chunk(read_list, k)
        else:
            chunk_size = max(1, len(read_list) // (num_threads * 4))
            chunks = [read_list[i:i + chunk_size] for i in range(0, len(read_list), chunk_size)]
            logger.debug(f"Indexing {len(chunks)} chunks on {num_threads} threads")

            merged = _PartialIndex()
            with ThreadPoolExecutor(max_workers=num_threads) as executor:
                # map() yields in submission order, keeping the fold deterministic
                for partial in executor.map(lambda chunk: _index_chunk(chunk, k), chunks):
                    merged.merge(partial)

        for warning in merged.warnings:
            logger.warning(f"Short read skipped by k-mer index: {warning}")

        index = cls(
            k=k,
            kmers=frozenset(merged.kmers),
            prefix_index={kmer: frozenset(ids) for kmer, ids in merged.prefix_index.items()},
            suffix_index={kmer: frozenset(ids) for kmer, ids in merged.suffix_index.items()},
            warnings=merged.warnings,
            windows=merged.windows,
        )
        logger.info(
            f"Indexed {index.stats['distinct_kmers']} distinct {k}-mers "
            f"from {len(read_list) - len(merged.warnings)} reads"
        )
        return index

    def sorted_kmers(self) -> List[str]:
        """Distinct k-mers in lexicographic order."""
        return sorted(self.kmers)

    def prefix_reads(self, kmer: str) -> List[ReadId]:
        """Reads starting with kmer, ascending."""
        return sorted(self.prefix_index.get(kmer, ()))

    def suffix_reads(self, kmer: str) -> List[ReadId]:
        """Reads ending with kmer, ascending."""
        return sorted(self.suffix_index.get(kmer, ()))

    def skipped_reads(self) -> List[ReadId]:
        return [w.read for w in self.warnings]

    def __contains__(self, kmer: str) -> bool:
        return kmer in self.kmers

    def __len__(self) -> int:
        return len(self.kmers)

    def __repr__(self) -> str:
        return f"KmerIndex(k={self.k}, kmers={len(self.kmers)}, skipped={len(self.warnings)})"


def build_kmer_index(reads: ReadSet, k: int, num_threads: int = 1) -> KmerIndex:
    """
    Convenience wrapper around KmerIndex.build.

    Args:
        reads: Reads to index
        k: K-mer size
        num_threads: Worker threads

    Returns:
        KmerIndex
    """
    return KmerIndex.build(reads, k, num_threads=num_threads)
