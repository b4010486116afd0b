"""
OverlapWeaver v0.1.0

Overlap graph for organizing read overlaps.

Nodes = reads that take part in at least one overlap
Edges = exact suffix/prefix overlaps between reads

Edge uniqueness is keyed by (source, target, overlap). Many edges may share
the same overlap string; repeats in genomic data make that common.

Author: OverlapWeaver Development Team
Date: 2026-10-19
"""

import logging
from typing import Dict, Iterable, List, Set, Tuple

from .data_structures import OverlapEdge, ReadId

logger = logging.getLogger(__name__)


class OverlapGraph:
    """
    Directed overlap graph.

    An edge u -> v means u's suffix feeds v's prefix. The graph may contain
    cycles (biological repeats); they are kept as-is.
    """

    def __init__(self):
        """Initialize empty overlap graph."""
        self._edges: List[OverlapEdge] = []
        self._edge_keys: Set[Tuple[ReadId, ReadId, str]] = set()

        # Adjacency lists: read_id -> list of OverlapEdge objects; only
        # edge endpoints ever get a key
        self._outgoing: Dict[ReadId, List[OverlapEdge]] = {}
        self._incoming: Dict[ReadId, List[OverlapEdge]] = {}

        # Statistics
        self.num_duplicates = 0

    @classmethod
    def assemble(cls, edges: Iterable[OverlapEdge]) -> 'OverlapGraph':
        """
        Assemble a graph from detected edges, dropping duplicates.

        Args:
            edges: Edges in any order, possibly repeated

        Returns:
            OverlapGraph holding each distinct (source, target, overlap) once
        """
        graph = cls()
        for edge in edges:
            graph.add_edge(edge)

        logger.info(
            f"Assembled overlap graph: {graph.num_nodes} nodes, {graph.num_edges} edges"
            + (f" ({graph.num_duplicates} duplicates dropped)" if graph.num_duplicates else "")
        )
        return graph

    def add_edge(self, edge: OverlapEdge) -> bool:
        """
        Add an overlap edge to the graph.

        Returns:
            True if the edge was new, False if an identical edge was present
        """
        if edge.key in self._edge_keys:
            self.num_duplicates += 1
            return False

        self._edge_keys.add(edge.key)
        self._edges.append(edge)
        self._outgoing.setdefault(edge.source, []).append(edge)
        self._incoming.setdefault(edge.target, []).append(edge)
        return True

    def edges_from(self, read_id: ReadId) -> List[OverlapEdge]:
        """Get all outgoing overlaps from a read (empty if none)."""
        return list(self._outgoing.get(read_id, []))

    def edges_to(self, read_id: ReadId) -> List[OverlapEdge]:
        """Get all incoming overlaps to a read (empty if none)."""
        return list(self._incoming.get(read_id, []))

    def edges_with_overlap(self, overlap: str) -> List[OverlapEdge]:
        """All edges carrying the given overlap string, in output order."""
        return [edge for edge in self.all_edges() if edge.overlap == overlap]

    def all_nodes(self) -> Set[ReadId]:
        """Reads that are the source or target of at least one edge."""
        nodes = set(self._outgoing)
        nodes.update(self._incoming)
        return nodes

    def all_edges(self) -> List[OverlapEdge]:
        """
        All edges sorted by (overlap, source, target).

        The order is independent of detection order, so output is
        reproducible across runs.
        """
        return sorted(self._edges, key=lambda edge: edge.sort_key)

    def overlap_strings(self) -> Set[str]:
        """Distinct overlap strings carried by the edges."""
        return {edge.overlap for edge in self._edges}

    @property
    def num_nodes(self) -> int:
        return len(self.all_nodes())

    @property
    def num_edges(self) -> int:
        return len(self._edges)

    def __contains__(self, edge: OverlapEdge) -> bool:
        return edge.key in self._edge_keys

    def __len__(self) -> int:
        return len(self._edges)

    def __repr__(self) -> str:
        return f"OverlapGraph(nodes={self.num_nodes}, edges={self.num_edges})"


def assemble_graph(edges: Iterable[OverlapEdge]) -> OverlapGraph:
    """Assemble an OverlapGraph from a sequence of edges."""
    return OverlapGraph.assemble(edges)
