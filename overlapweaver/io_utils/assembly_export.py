#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
OverlapWeaver v0.1.0

Assembly Export: overlap edge table, offset table TSV, split-read FASTA
and GFA graph export.

Author: OverlapWeaver Development Team
License: Dual License (Academic/Commercial) - See LICENSE_ACADEMIC.md and LICENSE_COMMERCIAL.md
"""

from __future__ import annotations
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Protocol

from .io_core import ReadSet, write_fasta

logger = logging.getLogger(__name__)


# ============================================================================
#                           GRAPH PROTOCOL
# ============================================================================

class GraphLike(Protocol):
    """
    Protocol defining the minimum interface for graphs that can be exported.

    OverlapGraph satisfies this protocol.
    """

    def all_nodes(self) -> set[int]:
        """Return the ids of reads with at least one edge."""
        ...

    def all_edges(self) -> list[Any]:
        """Return edges in stable output order."""
        ...


class OffsetTableLike(Protocol):
    """Minimum interface of an offset table for export."""

    occurrences: dict[str, list[Any]]

    def break_points(self) -> dict[int, list[int]]:
        ...

    def split_read(self, read: Any, break_points: dict[int, list[int]] | None = None) -> list[str]:
        ...


# ============================================================================
#                       EDGE TABLE
# ============================================================================

def format_edge_record(edge: Any, reads: ReadSet) -> str:
    """
    Format one edge as a tab-delimited record (without newline).

    Fields: overlap, source sequence, target sequence, source prefix
    remainder, target suffix remainder.
    """
    return "\t".join((
        edge.overlap,
        reads[edge.source].sequence,
        reads[edge.target].sequence,
        edge.source_prefix_remainder,
        edge.target_suffix_remainder,
    ))


def write_overlap_table(
    graph: GraphLike,
    reads: ReadSet,
    output_path: str | Path
) -> int:
    """
    Write the overlap edge table.

    One record per edge in ``graph.all_edges()`` order, each terminated by a
    newline (including the last). An existing file is overwritten; a graph
    without edges produces an empty file.

    Args:
        graph: Overlap graph
        reads: ReadSet the graph was built from
        output_path: Output file path

    Returns:
        Number of records written
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    edges = graph.all_edges()
    with open(output_path, 'w') as f:
        for edge in edges:
            f.write(format_edge_record(edge, reads) + "\n")

    logger.info(f"Wrote {len(edges)} overlap records to {output_path}")
    return len(edges)


# ============================================================================
#                       OFFSET TABLE
# ============================================================================

def write_offset_table(
    table: OffsetTableLike,
    output_path: str | Path
) -> int:
    """
    Export the overlap-string offset table to TSV.

    Format:
    pattern\tread_id\tstart\tend\tterminal

    Returns:
        Number of occurrence rows written
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    rows = 0
    with open(output_path, 'w') as f:
        f.write("pattern\tread_id\tstart\tend\tterminal\n")
        for pattern, occurrences in table.occurrences.items():
            for occ in occurrences:
                terminal = "terminal" if occ.terminal else "internal"
                f.write(f"{pattern}\t{occ.read}\t{occ.start}\t{occ.end}\t{terminal}\n")
                rows += 1

    logger.info(f"Wrote {rows} occurrences to {output_path}")
    return rows


def write_split_reads_fasta(
    table: OffsetTableLike,
    reads: ReadSet,
    output_path: str | Path
) -> int:
    """
    Write every read cut at its internal break points as FASTA.

    Reads without break points are written whole. Pieces of a split read
    are named ``<header>/<piece>`` starting at 1.

    Returns:
        Number of FASTA records written
    """
    points = table.break_points()
    records = []
    for read in reads:
        pieces = table.split_read(read, points)
        if len(pieces) == 1:
            records.append((read.header, pieces[0]))
        else:
            records.extend((f"{read.header}/{i}", piece) for i, piece in enumerate(pieces, start=1))

    count = write_fasta(records, output_path)
    logger.info(f"Wrote {count} split-read records to {output_path}")
    return count


# ============================================================================
#                       GFA EXPORT FUNCTIONS
# ============================================================================

@dataclass
class GFASegment:
    """Represents a GFA S-line (segment)."""
    name: str
    sequence: str

    def to_gfa_line(self) -> str:
        """
        Convert to GFA S-line format.

        Format: S <name> <sequence> LN:i:<length>
        """
        return f"S\t{self.name}\t{self.sequence}\tLN:i:{len(self.sequence)}"


@dataclass
class GFALink:
    """Represents a GFA L-line (link/edge)."""
    from_name: str
    to_name: str
    overlap_length: int

    def to_gfa_line(self) -> str:
        """
        Convert to GFA L-line format.

        Format: L <from> + <to> + <overlap>M
        """
        return f"L\t{self.from_name}\t+\t{self.to_name}\t+\t{self.overlap_length}M"


def generate_read_name(read_id: int) -> str:
    """
    Generate a segment name from a read id.

    Example:
        >>> generate_read_name(3)
        'read-3'
    """
    return f"read-{read_id}"


def export_graph_to_gfa(
    graph: GraphLike,
    reads: ReadSet,
    output_path: str | Path
) -> None:
    """
    Export the overlap graph to GFA v1.

    Generates:
    - H line with the GFA version
    - S lines for every read that has at least one edge
    - L lines for every edge, CIGAR '<L>M'

    Args:
        graph: Overlap graph
        reads: ReadSet the graph was built from
        output_path: Path to output GFA file
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    nodes = sorted(graph.all_nodes())
    edges = graph.all_edges()
    logger.info(f"Exporting overlap graph to GFA: {output_path}")

    with open(output_path, 'w') as f:
        f.write("H\tVN:Z:1.0\n")

        for read_id in nodes:
            segment = GFASegment(name=generate_read_name(read_id), sequence=reads[read_id].sequence)
            f.write(segment.to_gfa_line() + "\n")

        for edge in edges:
            link = GFALink(
                from_name=generate_read_name(edge.source),
                to_name=generate_read_name(edge.target),
                overlap_length=len(edge.overlap),
            )
            f.write(link.to_gfa_line() + "\n")

    logger.info(f"GFA export complete: {len(nodes)} segments, {len(edges)} links")
