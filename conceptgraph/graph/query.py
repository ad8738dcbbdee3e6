#!/usr/bin/env python3
"""
Query Responses for the Concept Graph Engine

Plain, serializable read models returned to the CLI and other callers.
The *_response functions shape algorithm results into these records.
"""

import logging
from typing import Dict, List, Optional, Any
from dataclasses import dataclass, field

from .types import Node, Edge
from .graph_data import GraphData
from .algorithms import (
    PathResult,
    NeighborhoodResult,
    PrerequisitesResult,
    RelatedResult,
    prerequisite_depths
)
from .stats import compute_stats

logger = logging.getLogger(__name__)


@dataclass
class NodeSummary:
    """Short description of a node."""
    id: str
    title: str
    category: Optional[str] = None
    description: Optional[str] = None

    @classmethod
    def from_node(cls, node: Node) -> 'NodeSummary':
        return cls(id=node.id, title=node.title, category=node.category,
                   description=node.description)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "category": self.category,
            "description": self.description
        }


@dataclass
class EdgeInfo:
    """An edge with its relationship rendered as a label."""
    from_id: str
    to_id: str
    relationship: str
    weight: float = 1.0

    @classmethod
    def from_edge(cls, edge: Edge) -> 'EdgeInfo':
        return cls(from_id=edge.from_id, to_id=edge.to_id,
                   relationship=edge.relationship.name(), weight=edge.weight)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "from": self.from_id,
            "to": self.to_id,
            "relationship": self.relationship,
            "weight": self.weight
        }


@dataclass
class RelatedGroup:
    relationship: str
    concepts: List[NodeSummary] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "relationship": self.relationship,
            "concepts": [concept.to_dict() for concept in self.concepts]
        }


@dataclass
class RelatedConceptsResponse:
    source: NodeSummary
    related: List[RelatedGroup] = field(default_factory=list)
    total_count: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "source": self.source.to_dict(),
            "related": [group.to_dict() for group in self.related],
            "total_count": self.total_count
        }


@dataclass
class PathStep:
    """A node on a path and the relationship leading to the next node."""
    node: NodeSummary
    relationship_to_next: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "node": self.node.to_dict(),
            "relationship_to_next": self.relationship_to_next
        }


@dataclass
class PathResponse:
    """Path between two nodes; length counts edges."""
    from_node: NodeSummary
    to_node: NodeSummary
    path: List[PathStep] = field(default_factory=list)
    found: bool = False
    length: int = 0
    total_weight: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "from": self.from_node.to_dict(),
            "to": self.to_node.to_dict(),
            "path": [step.to_dict() for step in self.path],
            "found": self.found,
            "length": self.length,
            "total_weight": self.total_weight
        }


@dataclass
class PrerequisiteInfo:
    """A prerequisite and its distance from the target (1 = direct)."""
    node: NodeSummary
    depth: int

    def to_dict(self) -> Dict[str, Any]:
        return {"node": self.node.to_dict(), "depth": self.depth}


@dataclass
class PrerequisitesResponse:
    target: NodeSummary
    prerequisites: List[PrerequisiteInfo] = field(default_factory=list)
    count: int = 0
    has_cycles: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "target": self.target.to_dict(),
            "prerequisites": [info.to_dict() for info in self.prerequisites],
            "count": self.count,
            "has_cycles": self.has_cycles
        }


@dataclass
class NeighborInfo:
    node: NodeSummary
    distance: int

    def to_dict(self) -> Dict[str, Any]:
        return {"node": self.node.to_dict(), "distance": self.distance}


@dataclass
class NeighborhoodResponse:
    center: NodeSummary
    nodes: List[NeighborInfo] = field(default_factory=list)
    edges: List[EdgeInfo] = field(default_factory=list)
    radius: int = 1

    def to_dict(self) -> Dict[str, Any]:
        return {
            "center": self.center.to_dict(),
            "nodes": [info.to_dict() for info in self.nodes],
            "edges": [edge.to_dict() for edge in self.edges],
            "radius": self.radius
        }


@dataclass
class CategoryCount:
    category: str
    count: int

    def to_dict(self) -> Dict[str, Any]:
        return {"category": self.category, "count": self.count}


@dataclass
class RelationshipCount:
    relationship: str
    count: int

    def to_dict(self) -> Dict[str, Any]:
        return {"relationship": self.relationship, "count": self.count}


@dataclass
class GraphInfoResponse:
    """Overview of a graph; categories and relationships sorted by count."""
    node_count: int = 0
    edge_count: int = 0
    categories: List[CategoryCount] = field(default_factory=list)
    relationships: List[RelationshipCount] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "node_count": self.node_count,
            "edge_count": self.edge_count,
            "categories": [item.to_dict() for item in self.categories],
            "relationships": [item.to_dict() for item in self.relationships]
        }


def related_response(result: RelatedResult) -> RelatedConceptsResponse:
    groups = [
        RelatedGroup(relationship=label, concepts=[NodeSummary.from_node(node) for node in nodes])
        for label, nodes in result.groups.items()
    ]
    return RelatedConceptsResponse(
        source=NodeSummary.from_node(result.source),
        related=groups,
        total_count=sum(len(group.concepts) for group in groups)
    )


def path_response(graph: GraphData, from_id: str, to_id: str, result: PathResult) -> PathResponse:
    """Shape a PathResult; from_id and to_id must exist in graph."""
    response = PathResponse(
        from_node=NodeSummary.from_node(graph.get_node(from_id)),
        to_node=NodeSummary.from_node(graph.get_node(to_id)),
        found=result.found,
        length=len(result.edges),
        total_weight=result.total_weight
    )

    for position, node in enumerate(result.path):
        relationship = None
        if position < len(result.edges):
            relationship = result.edges[position].relationship.name()
        response.path.append(PathStep(node=NodeSummary.from_node(node),
                                      relationship_to_next=relationship))
    return response


def prerequisites_response(graph: GraphData, result: PrerequisitesResult) -> PrerequisitesResponse:
    depths = prerequisite_depths(graph, result.target.id)
    prerequisites = [
        PrerequisiteInfo(node=NodeSummary.from_node(node), depth=depths.get(node.id, 1))
        for node in result.ordered
    ]
    return PrerequisitesResponse(
        target=NodeSummary.from_node(result.target),
        prerequisites=prerequisites,
        count=len(prerequisites),
        has_cycles=result.has_cycles
    )


def neighborhood_response(result: NeighborhoodResult, radius: int) -> NeighborhoodResponse:
    return NeighborhoodResponse(
        center=NodeSummary.from_node(result.center),
        nodes=[NeighborInfo(node=NodeSummary.from_node(node), distance=result.distances[node.id])
               for node in result.nodes],
        edges=[EdgeInfo.from_edge(edge) for edge in result.edges],
        radius=radius
    )


def graph_info_response(graph: GraphData) -> GraphInfoResponse:
    stats = compute_stats(graph)

    categories = sorted(stats.category_distribution.items(), key=lambda item: (-item[1], item[0]))
    relationships = sorted(stats.relationship_distribution.items(), key=lambda item: (-item[1], item[0]))

    return GraphInfoResponse(
        node_count=stats.node_count,
        edge_count=stats.edge_count,
        categories=[CategoryCount(category=name, count=count) for name, count in categories],
        relationships=[RelationshipCount(relationship=name, count=count) for name, count in relationships]
    )
