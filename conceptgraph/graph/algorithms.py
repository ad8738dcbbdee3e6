#!/usr/bin/env python3
"""
Graph Algorithms for the Concept Graph Engine

Traversal and query algorithms over a built GraphData. Every function takes
the graph as a read-only snapshot, checks the ids it is given, and raises
NotFoundError for unknown ids before doing any work.
"""

import heapq
import itertools
import logging
from collections import deque
from typing import Dict, List, Optional, Set, Tuple
from dataclasses import dataclass, field

import networkx as nx

from .types import Node, Edge, Relationship
from .graph_data import GraphData
from ..errors import NotFoundError

logger = logging.getLogger(__name__)


@dataclass
class PathResult:
    """Result of a shortest-path query."""
    path: List[Node] = field(default_factory=list)
    edges: List[Edge] = field(default_factory=list)
    total_weight: float = 0.0
    found: bool = False


@dataclass
class NeighborhoodResult:
    """Nodes within a hop radius of a center node."""
    center: Node
    nodes: List[Node] = field(default_factory=list)
    edges: List[Edge] = field(default_factory=list)
    distances: Dict[str, int] = field(default_factory=dict)


@dataclass
class PrerequisitesResult:
    """Transitive prerequisites of a node in learning order."""
    target: Node
    ordered: List[Node] = field(default_factory=list)
    has_cycles: bool = False


@dataclass
class RelatedResult:
    """Immediate neighbors of a node grouped by relationship label."""
    source: Node
    groups: Dict[str, List[Node]] = field(default_factory=dict)


def _require_node(graph: GraphData, node_id: str) -> Node:
    node = graph.get_node(node_id)
    if node is None:
        raise NotFoundError("node", node_id)
    return node


def shortest_path(graph: GraphData, from_id: str, to_id: str) -> PathResult:
    """
    Weighted shortest path following edge direction (Dijkstra).

    Edge weights are treated as non-negative costs. Among equal-cost routes
    the one whose edges were inserted first wins.

    Raises:
        NotFoundError: If either id is not in the graph
    """
    start = _require_node(graph, from_id)
    _require_node(graph, to_id)

    if from_id == to_id:
        return PathResult(path=[start], found=True)

    distances: Dict[str, float] = {from_id: 0.0}
    previous: Dict[str, Edge] = {}
    settled: Set[str] = set()
    counter = itertools.count()
    heap = [(0.0, next(counter), from_id)]

    while heap:
        distance, _, current = heapq.heappop(heap)
        if current in settled:
            continue
        settled.add(current)
        if current == to_id:
            break

        for edge in graph.outgoing(current):
            candidate = distance + edge.weight
            known = distances.get(edge.to_id)
            if known is None or candidate < known:
                distances[edge.to_id] = candidate
                previous[edge.to_id] = edge
                heapq.heappush(heap, (candidate, next(counter), edge.to_id))

    if to_id not in settled:
        logger.debug(f"No path from {from_id} to {to_id}")
        return PathResult()

    edges: List[Edge] = []
    current = to_id
    while current != from_id:
        edge = previous[current]
        edges.append(edge)
        current = edge.from_id
    edges.reverse()

    path = [start] + [graph.get_node(edge.to_id) for edge in edges]
    total_weight = sum(edge.weight for edge in edges)

    return PathResult(path=path, edges=edges, total_weight=total_weight, found=True)


def neighborhood(graph: GraphData, node_id: str, radius: int = 1,
                 relationship: Optional[Relationship] = None) -> NeighborhoodResult:
    """
    Breadth-first expansion up to radius hops, ignoring edge direction.

    Args:
        graph: Graph to search
        node_id: Center node
        radius: Maximum hop distance (0 gives an empty neighborhood)
        relationship: Only follow edges with this relationship

    Raises:
        NotFoundError: If node_id is not in the graph
    """
    center = _require_node(graph, node_id)
    result = NeighborhoodResult(center=center)

    distances: Dict[str, int] = {node_id: 0}
    seen_edges: Set[int] = set()
    queue = deque([node_id])

    while queue:
        current = queue.popleft()
        depth = distances[current]
        if depth >= radius:
            continue

        for neighbor_id, edge in graph.neighbors(current):
            if relationship is not None and edge.relationship != relationship:
                continue

            if id(edge) not in seen_edges:
                seen_edges.add(id(edge))
                result.edges.append(edge)

            if neighbor_id not in distances:
                distances[neighbor_id] = depth + 1
                result.nodes.append(graph.get_node(neighbor_id))
                queue.append(neighbor_id)

    del distances[node_id]
    result.distances = distances
    return result


def _prerequisite_sources(graph: GraphData, node_id: str) -> List[str]:
    """Ids of the direct prerequisites of node_id."""
    return [edge.from_id for edge in graph.incoming(node_id)
            if edge.relationship == Relationship.PREREQUISITE]


def prerequisites_sorted(graph: GraphData, node_id: str) -> PrerequisitesResult:
    """
    All transitive prerequisites of a node, most fundamental first.

    Post-order DFS over incoming Prerequisite edges; each node is visited at
    most once, so cycles cannot stall the walk. A separate topological sort
    of the visited subgraph sets has_cycles when the order is approximate.

    Raises:
        NotFoundError: If node_id is not in the graph
    """
    target = _require_node(graph, node_id)
    result = PrerequisitesResult(target=target)

    visited = {node_id}
    stack = [(node_id, iter(_prerequisite_sources(graph, node_id)))]

    while stack:
        current, sources = stack[-1]
        for source in sources:
            if source not in visited:
                visited.add(source)
                stack.append((source, iter(_prerequisite_sources(graph, source))))
                break
        else:
            stack.pop()
            if current != node_id:
                result.ordered.append(graph.get_node(current))

    subgraph = nx.DiGraph()
    subgraph.add_nodes_from(visited)
    for member in visited:
        for source in _prerequisite_sources(graph, member):
            subgraph.add_edge(source, member)

    try:
        list(nx.topological_sort(subgraph))
    except nx.NetworkXUnfeasible:
        logger.warning(f"Prerequisite cycle detected above {node_id}; order is approximate")
        result.has_cycles = True

    return result


def prerequisite_depths(graph: GraphData, node_id: str) -> Dict[str, int]:
    """Shortest prerequisite-chain distance from each ancestor to node_id (1 = direct)."""
    _require_node(graph, node_id)

    depths: Dict[str, int] = {}
    queue = deque([(node_id, 0)])
    while queue:
        current, depth = queue.popleft()
        for source in _prerequisite_sources(graph, current):
            if source != node_id and source not in depths:
                depths[source] = depth + 1
                queue.append((source, depth + 1))
    return depths


def calculate_centrality(graph: GraphData) -> List[Tuple[str, float]]:
    """
    Degree centrality: (in_degree + out_degree) / max degree in the graph.

    Scores are in [0, 1]; a graph without edges scores 0.0 everywhere.
    Sorted by descending score, ties in node insertion order.
    """
    degrees = [(node_id, graph.degree(node_id)) for node_id in graph.node_ids()]
    max_degree = max((degree for _, degree in degrees), default=0)

    if max_degree == 0:
        scores = [(node_id, 0.0) for node_id, _ in degrees]
    else:
        scores = [(node_id, degree / max_degree) for node_id, degree in degrees]

    return sorted(scores, key=lambda item: -item[1])


def find_bridges(graph: GraphData) -> List[Edge]:
    """
    Edges whose removal disconnects the undirected view of the graph.

    Iterative DFS with discovery times and low-links. The edge a node was
    reached by is skipped by identity, so parallel edges are never bridges.
    Self-loops never are either.
    """
    edges = graph.edges
    adjacency: Dict[str, List[Tuple[str, int]]] = {node_id: [] for node_id in graph.node_ids()}
    for seq, edge in enumerate(edges):
        if edge.is_self_loop:
            continue
        adjacency[edge.from_id].append((edge.to_id, seq))
        adjacency[edge.to_id].append((edge.from_id, seq))

    discovery: Dict[str, int] = {}
    low: Dict[str, int] = {}
    bridges: Set[int] = set()
    timer = 0

    for root in graph.node_ids():
        if root in discovery:
            continue
        discovery[root] = low[root] = timer
        timer += 1
        stack = [(root, -1, iter(adjacency[root]))]

        while stack:
            node, arrival, neighbors = stack[-1]
            descended = False
            for neighbor, seq in neighbors:
                if seq == arrival:
                    continue
                if neighbor in discovery:
                    low[node] = min(low[node], discovery[neighbor])
                else:
                    discovery[neighbor] = low[neighbor] = timer
                    timer += 1
                    stack.append((neighbor, seq, iter(adjacency[neighbor])))
                    descended = True
                    break

            if not descended:
                stack.pop()
                if stack:
                    parent = stack[-1][0]
                    low[parent] = min(low[parent], low[node])
                    if low[node] > discovery[parent]:
                        bridges.add(arrival)

    logger.debug(f"Found {len(bridges)} bridge edges")
    return [edges[seq] for seq in sorted(bridges)]


def get_related(graph: GraphData, node_id: str) -> RelatedResult:
    """
    Immediate neighbors in either direction, grouped by relationship name.

    Groups appear in the order their first edge was inserted.

    Raises:
        NotFoundError: If node_id is not in the graph
    """
    source = _require_node(graph, node_id)
    result = RelatedResult(source=source)
    seen: Dict[str, Set[str]] = {}

    for neighbor_id, edge in graph.neighbors(node_id):
        if neighbor_id == node_id:
            continue
        label = edge.relationship.name()
        members = seen.setdefault(label, set())
        if neighbor_id in members:
            continue
        members.add(neighbor_id)
        result.groups.setdefault(label, []).append(graph.get_node(neighbor_id))

    return result
