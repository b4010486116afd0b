"""
OverlapWeaver v0.1.0

Exact suffix-prefix overlap detection.

Overlap notation: Read A overlaps Read B
A: --------------->
B:       ---------------->
         <--L-->

For every read the detector looks up candidate partners whose leading
L characters could equal its trailing L characters, then confirms each
candidate with an exact string comparison. Candidates come from content
(boundary buckets), never from input order, so every overlapping ordered
pair is found regardless of where the reads sit in the file.

Author: OverlapWeaver Development Team
Date: 2026-10-19
"""

import logging
from collections import defaultdict
from concurrent.futures import ThreadPoolExecutor
from typing import Dict, Iterable, List, Mapping, Sequence, Tuple

from ..io_utils.io_core import Read, ReadSet
from .data_structures import OverlapEdge, ParameterError, ReadId, ShortReadWarning
from .kmer_index_module import KmerIndex

logger = logging.getLogger(__name__)


class OverlapDetector:
    """
    Find all exact length-L suffix/prefix overlaps between reads.

    Process:
    1. Exclude reads shorter than L (recorded as ShortReadWarning)
    2. Choose boundary buckets: the index's prefix buckets when L == k,
       otherwise raw L-length prefixes computed from the reads
    3. For each source read, look up candidates sharing its L-suffix
    4. Confirm each candidate (u != v) by exact comparison and emit an edge
    """

    def __init__(self, num_threads: int = 1):
        """
        Initialize overlap detector.

        Args:
            num_threads: Threads for candidate confirmation (default: 1)
        """
        self.num_threads = max(1, num_threads)
        self.warnings: List[ShortReadWarning] = []

        # Statistics
        self.stats = {
            'reads_considered': 0,
            'reads_skipped': 0,
            'candidates': 0,
            'confirmed': 0,
            'rejected': 0,
        }

    def detect(self, reads: ReadSet, index: KmerIndex, overlap_length: int) -> List[OverlapEdge]:
        """
        Detect overlaps between all ordered read pairs.

        Args:
            reads: Reads of the run
            index: K-mer index built over the same reads
            overlap_length: Exact overlap length L (>= 1)

        Returns:
            List of OverlapEdge in source-read order (per source, ascending target)

        Raises:
            ParameterError: If overlap_length < 1
        """
        if overlap_length < 1:
            raise ParameterError(f"overlap length must be a positive integer, got {overlap_length}")

        self.warnings = []
        eligible: List[Read] = []
        for read in reads:
            if read.length < overlap_length:
                warning = ShortReadWarning(
                    read=read.id, length=read.length, required=overlap_length, role="detector"
                )
                self.warnings.append(warning)
                logger.warning(f"Short read skipped by overlap detector: {warning}")
            else:
                eligible.append(read)

        # Statistics describe the latest call only
        self.stats.update({
            'reads_considered': len(eligible),
            'reads_skipped': len(self.warnings),
            'candidates': 0,
            'confirmed': 0,
            'rejected': 0,
        })

        if len(eligible) < 2:
            logger.info(f"Fewer than two reads of at least {overlap_length}bp; no overlaps possible")
            return []

        buckets = self._candidate_buckets(eligible, index, overlap_length)

        if self.num_threads == 1:
            results = [self._confirm_chunk(eligible, reads, buckets, overlap_length)]
        else:
            results = self._confirm_parallel(eligible, reads, buckets, overlap_length)

        edges: List[OverlapEdge] = []
        total_candidates = 0
        for chunk_edges, candidates in results:
            edges.extend(chunk_edges)
            total_candidates += candidates

        self.stats['candidates'] = total_candidates
        self.stats['confirmed'] = len(edges)
        self.stats['rejected'] = total_candidates - len(edges)

        logger.info(
            f"Confirmed {len(edges)} overlaps of {overlap_length}bp "
            f"from {self.stats['candidates']} candidate pairs"
        )
        return edges

    def _candidate_buckets(
        self,
        eligible: Sequence[Read],
        index: KmerIndex,
        overlap_length: int
    ) -> Mapping[str, Iterable[ReadId]]:
        """
        Map an L-length string to the reads that start with it.

        The index buckets hold boundary strings of exactly k characters, so
        they are only usable when L == k; otherwise the L-length prefixes
        are computed directly from the reads.
        """
        if index.k == overlap_length:
            logger.debug("Using k-mer prefix index for candidate lookup")
            return index.prefix_index

        logger.debug(
            f"k ({index.k}) != L ({overlap_length}); bucketing raw {overlap_length}bp prefixes"
        )
        buckets: Dict[str, set] = defaultdict(set)
        for read in eligible:
            buckets[read.prefix(overlap_length)].add(read.id)
        return {prefix: frozenset(ids) for prefix, ids in buckets.items()}

    def _confirm_chunk(
        self,
        sources: Sequence[Read],
        reads: ReadSet,
        buckets: Mapping[str, Iterable[ReadId]],
        overlap_length: int
    ) -> Tuple[List[OverlapEdge], int]:
        """Confirm candidates for a chunk of source reads (thread-safe)."""
        edges = []
        candidates = 0

        for source in sources:
            suffix = source.suffix(overlap_length)

            for target_id in sorted(buckets.get(suffix, ())):
                if target_id == source.id:
                    continue  # Skip self-overlaps

                target = reads[target_id]
                if target.length < overlap_length:
                    continue

                candidates += 1
                if suffix == target.sequence[:overlap_length]:
                    edges.append(OverlapEdge.from_reads(source, target, overlap_length))

        return edges, candidates

    def _confirm_parallel(
        self,
        eligible: Sequence[Read],
        reads: ReadSet,
        buckets: Mapping[str, Iterable[ReadId]],
        overlap_length: int
    ) -> List[Tuple[List[OverlapEdge], int]]:
        """Confirm candidates on a thread pool, collecting chunk results in order."""
        chunk_size = max(1, len(eligible) // (self.num_threads * 4))
        chunks = [eligible[i:i + chunk_size] for i in range(0, len(eligible), chunk_size)]

        logger.debug(f"Using {self.num_threads} threads, processing {len(chunks)} chunks")

        with ThreadPoolExecutor(max_workers=self.num_threads) as executor:
            return list(executor.map(
                lambda chunk: self._confirm_chunk(chunk, reads, buckets, overlap_length),
                chunks
            ))


def detect_overlaps(
    reads: ReadSet,
    index: KmerIndex,
    overlap_length: int,
    num_threads: int = 1
) -> List[OverlapEdge]:
    """
    Detect all exact overlaps of length L.

    Args:
        reads: Reads of the run
        index: K-mer index over the same reads
        overlap_length: Overlap length L
        num_threads: Threads for candidate confirmation

    Returns:
        List of OverlapEdge
    """
    return OverlapDetector(num_threads=num_threads).detect(reads, index, overlap_length)


__all__ = ['OverlapDetector', 'detect_overlaps']
