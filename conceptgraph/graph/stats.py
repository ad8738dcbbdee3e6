#!/usr/bin/env python3
"""
Graph Statistics for the Concept Graph Engine

Read-only summaries of a GraphData: counts, distributions and degree extremes.
"""

import logging
from enum import Enum
from typing import Dict, List, Optional, Tuple, Any
from dataclasses import dataclass, field

from .graph_data import GraphData

logger = logging.getLogger(__name__)

UNCATEGORIZED = "uncategorized"


class DegreeDirection(Enum):
    """Which edges count towards a node's degree."""
    IN = "in"
    OUT = "out"
    BOTH = "both"


@dataclass
class GraphStats:
    """Aggregate statistics of a graph."""
    node_count: int = 0
    edge_count: int = 0
    canonical_count: int = 0
    variant_count: int = 0
    category_distribution: Dict[str, int] = field(default_factory=dict)
    relationship_distribution: Dict[str, int] = field(default_factory=dict)
    orphan_count: int = 0
    avg_degree: float = 0.0
    max_in_degree: int = 0
    max_out_degree: int = 0
    most_depended_on: Optional[str] = None
    most_dependencies: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "node_count": self.node_count,
            "edge_count": self.edge_count,
            "canonical_count": self.canonical_count,
            "variant_count": self.variant_count,
            "category_distribution": dict(self.category_distribution),
            "relationship_distribution": dict(self.relationship_distribution),
            "orphan_count": self.orphan_count,
            "avg_degree": self.avg_degree,
            "max_in_degree": self.max_in_degree,
            "max_out_degree": self.max_out_degree,
            "most_depended_on": self.most_depended_on,
            "most_dependencies": self.most_dependencies
        }


def compute_stats(graph: GraphData) -> GraphStats:
    """
    Compute statistics for a graph.

    most_depended_on / most_dependencies name the first node, in insertion
    order, reaching the maximum in-/out-degree; both stay None when that
    maximum is zero.
    """
    stats = GraphStats(node_count=graph.node_count(), edge_count=graph.edge_count())

    for node in graph.iter_nodes():
        if node.is_canonical:
            stats.canonical_count += 1
        else:
            stats.variant_count += 1

        category = node.category or UNCATEGORIZED
        stats.category_distribution[category] = stats.category_distribution.get(category, 0) + 1

        in_degree = graph.in_degree(node.id)
        out_degree = graph.out_degree(node.id)

        if in_degree == 0 and out_degree == 0:
            stats.orphan_count += 1

        if in_degree > stats.max_in_degree:
            stats.max_in_degree = in_degree
            stats.most_depended_on = node.id
        if out_degree > stats.max_out_degree:
            stats.max_out_degree = out_degree
            stats.most_dependencies = node.id

    for edge in graph.iter_edges():
        label = edge.relationship.name()
        stats.relationship_distribution[label] = stats.relationship_distribution.get(label, 0) + 1

    if stats.node_count:
        stats.avg_degree = (2 * stats.edge_count) / stats.node_count

    logger.debug(f"Computed stats: {quick_summary(graph)}")
    return stats


def quick_summary(graph: GraphData) -> str:
    return f"{graph.node_count()} nodes, {graph.edge_count()} edges"


def top_nodes_by_degree(graph: GraphData, limit: int,
                        direction: DegreeDirection = DegreeDirection.BOTH) -> List[Tuple[str, int]]:
    """Top nodes by degree, highest first; equal degrees keep insertion order."""
    if direction == DegreeDirection.IN:
        degree_of = graph.in_degree
    elif direction == DegreeDirection.OUT:
        degree_of = graph.out_degree
    else:
        degree_of = graph.degree

    scores = [(node_id, degree_of(node_id)) for node_id in graph.node_ids()]
    scores.sort(key=lambda item: -item[1])
    return scores[:limit]
