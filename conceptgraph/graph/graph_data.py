#!/usr/bin/env python3
"""
Graph Data container for the Concept Graph Engine

Stores nodes and edges in an index-addressed networkx multigraph. Node ids
map to stable integer indices; each arc carries its Edge record and is keyed
by an insertion sequence number, so the flat edge list is a projection of
the arena rather than a second source of truth.
"""

import logging
from typing import Dict, List, Optional, Iterator, Tuple

import networkx as nx

from .types import Node, Edge
from ..errors import InvalidDataError

logger = logging.getLogger(__name__)

NODE_ATTR = "node"
EDGE_ATTR = "edge"


class GraphData:
    """
    Owning container for a concept graph.

    Mutated only through add_node/add_edge while building; algorithms,
    validation and stats treat it as a read-only snapshot.
    """

    def __init__(self):
        """Initialize an empty graph."""
        self.graph = nx.MultiDiGraph()
        self.node_indices: Dict[str, int] = {}
        self._next_index = 0
        self._next_edge_key = 0
        self._edge_cache: Optional[List[Edge]] = None

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def add_node(self, node: Node) -> int:
        """Insert a node, or replace the node stored under the same id."""
        index = self.node_indices.get(node.id)
        if index is not None:
            logger.debug(f"Replacing existing node: {node.id}")
            self.graph.nodes[index][NODE_ATTR] = node
            return index

        index = self._next_index
        self._next_index += 1
        self.graph.add_node(index, **{NODE_ATTR: node})
        self.node_indices[node.id] = index
        return index

    def add_edge(self, edge: Edge) -> None:
        """Add an edge between two existing nodes."""
        from_index = self.node_indices.get(edge.from_id)
        to_index = self.node_indices.get(edge.to_id)
        if from_index is None:
            raise InvalidDataError(f"Edge source node not found: {edge.from_id}")
        if to_index is None:
            raise InvalidDataError(f"Edge target node not found: {edge.to_id}")

        key = self._next_edge_key
        self._next_edge_key += 1
        self.graph.add_edge(from_index, to_index, key=key, **{EDGE_ATTR: edge})
        self._edge_cache = None

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def get_node(self, node_id: str) -> Optional[Node]:
        index = self.node_indices.get(node_id)
        if index is None:
            return None
        return self.graph.nodes[index][NODE_ATTR]

    def node_at(self, index: int) -> Node:
        """Node stored at an internal index."""
        return self.graph.nodes[index][NODE_ATTR]

    def get_index(self, node_id: str) -> Optional[int]:
        return self.node_indices.get(node_id)

    def contains_node(self, node_id: str) -> bool:
        return node_id in self.node_indices

    def node_count(self) -> int:
        return len(self.node_indices)

    def edge_count(self) -> int:
        return self.graph.number_of_edges()

    def node_ids(self) -> List[str]:
        return list(self.node_indices)

    def iter_nodes(self) -> Iterator[Node]:
        """Nodes in insertion order."""
        for index in self.node_indices.values():
            yield self.graph.nodes[index][NODE_ATTR]

    @property
    def edges(self) -> List[Edge]:
        """Flat edge list in insertion order, rebuilt after every add_edge."""
        if self._edge_cache is None:
            arcs = sorted(self.graph.edges(keys=True, data=EDGE_ATTR), key=lambda arc: arc[2])
            self._edge_cache = [edge for _, _, _, edge in arcs]
        return self._edge_cache

    def iter_edges(self) -> Iterator[Edge]:
        """Edges in insertion order."""
        return iter(self.edges)

    # ------------------------------------------------------------------
    # Adjacency
    # ------------------------------------------------------------------

    def outgoing(self, node_id: str) -> List[Edge]:
        """Edges leaving node_id, in insertion order."""
        index = self.node_indices.get(node_id)
        if index is None:
            return []
        arcs = sorted(self.graph.out_edges(index, keys=True, data=EDGE_ATTR), key=lambda arc: arc[2])
        return [edge for _, _, _, edge in arcs]

    def incoming(self, node_id: str) -> List[Edge]:
        """Edges entering node_id, in insertion order."""
        index = self.node_indices.get(node_id)
        if index is None:
            return []
        arcs = sorted(self.graph.in_edges(index, keys=True, data=EDGE_ATTR), key=lambda arc: arc[2])
        return [edge for _, _, _, edge in arcs]

    def neighbors(self, node_id: str) -> List[Tuple[str, Edge]]:
        """
        Undirected adjacency: (neighbor id, edge) for every incident edge.

        Outgoing and incoming arcs are merged in insertion order; a self-loop
        is reported once.
        """
        index = self.node_indices.get(node_id)
        if index is None:
            return []

        arcs = {}
        for source, target, key, edge in self.graph.out_edges(index, keys=True, data=EDGE_ATTR):
            arcs[key] = (target, edge)
        for source, target, key, edge in self.graph.in_edges(index, keys=True, data=EDGE_ATTR):
            arcs.setdefault(key, (source, edge))

        return [(self.node_at(other).id, edge) for _, (other, edge) in sorted(arcs.items())]

    def in_degree(self, node_id: str) -> int:
        index = self.node_indices.get(node_id)
        return self.graph.in_degree(index) if index is not None else 0

    def out_degree(self, node_id: str) -> int:
        index = self.node_indices.get(node_id)
        return self.graph.out_degree(index) if index is not None else 0

    def degree(self, node_id: str) -> int:
        return self.in_degree(node_id) + self.out_degree(node_id)

    def __len__(self) -> int:
        return self.node_count()

    def __contains__(self, node_id: object) -> bool:
        return node_id in self.node_indices

    def __repr__(self) -> str:
        return f"GraphData(nodes={self.node_count()}, edges={self.edge_count()})"
