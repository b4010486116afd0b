"""
OverlapWeaver v0.1.0

Offset table for overlap strings.

For each overlap string of the graph, every occurrence in every read is
located. Occurrences at the very start or very end of a read are terminal:
they are the true prefix/suffix matches behind the graph edges. Any other
occurrence is internal and marks a point where the read should be split
into two nodes (one ending at the occurrence start, one beginning at its
end) before suffix-array construction.

The locator also lists the k-mers of the index that encode no connectivity,
i.e. are neither an overlap string nor contained in one. Those can be
dropped from suffix-array seeding.

Author: OverlapWeaver Development Team
Date: 2026-10-19
"""

import logging
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

from ..io_utils.io_core import Read, ReadSet
from ..utils.sequence_utils import find_all_occurrences
from .data_structures import Occurrence, ReadId
from .kmer_index_module import KmerIndex

logger = logging.getLogger(__name__)


@dataclass
class OffsetTable:
    """
    Result of an offset scan.

    Attributes:
        occurrences: overlap string -> occurrences, keys in sorted order,
            occurrences in (read, start) order
        discardable_kmers: sorted index k-mers with no connectivity
    """
    occurrences: Dict[str, List[Occurrence]] = field(default_factory=dict)
    discardable_kmers: List[str] = field(default_factory=list)

    def internal(self) -> List[Occurrence]:
        """All non-terminal occurrences, by pattern then read then start."""
        return [
            occ
            for pattern in self.occurrences
            for occ in self.occurrences[pattern]
            if not occ.terminal
        ]

    def terminal(self) -> List[Occurrence]:
        return [
            occ
            for pattern in self.occurrences
            for occ in self.occurrences[pattern]
            if occ.terminal
        ]

    def break_points(self) -> Dict[ReadId, List[int]]:
        """
        Split offsets per read.

        Each internal occurrence contributes its start and end; offsets at
        the read boundaries are never split points.

        Returns:
            read id -> ascending distinct offsets (only reads with breaks)
        """
        points: Dict[ReadId, set] = defaultdict(set)
        for occ in self.internal():
            points[occ.read].add(occ.start)
            points[occ.read].add(occ.end)

        # internal occurrences satisfy 0 < start < end < len(read)
        return {read_id: sorted(points[read_id]) for read_id in sorted(points)}

    def split_read(
        self,
        read: Read,
        break_points: Optional[Dict[ReadId, List[int]]] = None
    ) -> List[str]:
        """
        Cut a read at its break points.

        Args:
            read: Read to cut
            break_points: Result of break_points(); pass it when splitting
                many reads so the table is scanned once

        Returns:
            Sub-sequences in read order (the whole read if it has no breaks)
        """
        if break_points is None:
            break_points = self.break_points()
        offsets = [p for p in break_points.get(read.id, []) if 0 < p < read.length]
        bounds = [0] + offsets + [read.length]
        return [read.sequence[a:b] for a, b in zip(bounds, bounds[1:])]

    @property
    def num_occurrences(self) -> int:
        return sum(len(occs) for occs in self.occurrences.values())


class OffsetLocator:
    """
    Locate every occurrence of the overlap strings across all reads.

    Overlapping occurrences within one read (e.g. homopolymer runs) are all
    reported; the only deduplication is on exact (read, start) identity.
    """

    def __init__(self):
        # Statistics
        self.stats = {
            'patterns': 0,
            'occurrences': 0,
            'terminal': 0,
            'internal': 0,
            'reads_with_breaks': 0,
            'discardable_kmers': 0,
        }

    def locate(
        self,
        reads: ReadSet,
        overlap_strings: Iterable[str],
        index: Optional[KmerIndex] = None
    ) -> OffsetTable:
        """
        Build the offset table.

        Args:
            reads: Reads to scan
            overlap_strings: Distinct overlap strings of the graph
            index: K-mer index; when given, discardable k-mers are computed

        Returns:
            OffsetTable
        """
        patterns = sorted(set(overlap_strings))
        table = OffsetTable()

        for pattern in patterns:
            table.occurrences[pattern] = self._scan(reads, pattern)

        if index is not None:
            table.discardable_kmers = self.discardable_kmers(index, patterns)

        internal = table.internal()
        self.stats.update({
            'patterns': len(patterns),
            'occurrences': table.num_occurrences,
            'terminal': table.num_occurrences - len(internal),
            'internal': len(internal),
            'reads_with_breaks': len(table.break_points()),
            'discardable_kmers': len(table.discardable_kmers),
        })

        logger.info(
            f"Located {self.stats['occurrences']} occurrences of {len(patterns)} overlap strings "
            f"({self.stats['internal']} internal across {self.stats['reads_with_breaks']} reads)"
        )
        return table

    @staticmethod
    def _scan(reads: ReadSet, pattern: str) -> List[Occurrence]:
        """Find all occurrences of one pattern in every read."""
        found = []
        seen = set()
        for read in reads:
            for start in find_all_occurrences(read.sequence, pattern):
                if (read.id, start) in seen:
                    continue
                seen.add((read.id, start))
                end = start + len(pattern)
                found.append(Occurrence(
                    pattern=pattern,
                    read=read.id,
                    start=start,
                    end=end,
                    terminal=(start == 0 or end == read.length),
                ))
        return found

    @staticmethod
    def discardable_kmers(index: KmerIndex, overlap_strings: Iterable[str]) -> List[str]:
        """
        K-mers of the index that encode no connectivity.

        A k-mer is kept when it equals an overlap string or occurs inside
        one (possible when k < L); every other k-mer is discardable.

        Returns:
            Sorted list of discardable k-mers
        """
        overlaps = set(overlap_strings)
        connected = set()
        for overlap in overlaps:
            if len(overlap) == index.k:
                connected.add(overlap)
            elif len(overlap) > index.k:
                for i in range(len(overlap) - index.k + 1):
                    connected.add(overlap[i:i + index.k])

        return sorted(index.kmers - connected)


def locate_offsets(
    reads: ReadSet,
    overlap_strings: Iterable[str],
    index: Optional[KmerIndex] = None
) -> OffsetTable:
    """Convenience wrapper around OffsetLocator.locate."""
    return OffsetLocator().locate(reads, overlap_strings, index=index)
