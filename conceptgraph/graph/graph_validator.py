#!/usr/bin/env python3
"""
Graph Validator for the Concept Graph Engine

Validates graph structure and integrity. Structural problems are returned as
data in a ValidationResult; validation itself never raises.
"""

import logging
from typing import Dict, List, Optional, Set, Tuple, Any
from dataclasses import dataclass, field

import networkx as nx

from .types import Relationship
from .graph_data import GraphData

logger = logging.getLogger(__name__)

ORPHAN_NODES = "ORPHAN_NODES"
SELF_LOOPS = "SELF_LOOPS"
DUPLICATE_EDGES = "DUPLICATE_EDGES"
PREREQUISITE_CYCLE = "PREREQUISITE_CYCLE"
INVALID_CANONICAL_REF = "INVALID_CANONICAL_REF"
GRAPH_SUMMARY = "GRAPH_SUMMARY"


@dataclass
class ValidationIssue:
    """A single validation finding."""
    code: str
    message: str
    nodes: List[str] = field(default_factory=list)
    edges: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code,
            "message": self.message,
            "nodes": list(self.nodes),
            "edges": list(self.edges)
        }


@dataclass
class ValidationResult:
    """Result of graph validation."""
    valid: bool = True
    errors: List[ValidationIssue] = field(default_factory=list)
    warnings: List[ValidationIssue] = field(default_factory=list)
    info: List[ValidationIssue] = field(default_factory=list)

    def add_error(self, issue: ValidationIssue):
        self.errors.append(issue)
        self.valid = False

    def add_warning(self, issue: ValidationIssue):
        self.warnings.append(issue)

    def add_info(self, issue: ValidationIssue):
        self.info.append(issue)

    def total_issues(self) -> int:
        """Errors plus warnings; info findings are not issues."""
        return len(self.errors) + len(self.warnings)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "valid": self.valid,
            "errors": [issue.to_dict() for issue in self.errors],
            "warnings": [issue.to_dict() for issue in self.warnings],
            "info": [issue.to_dict() for issue in self.info]
        }


class GraphValidator:
    """Validates graph structure and integrity."""

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        """Initialize graph validator with configuration."""
        self.config = config or {}
        self.include_summary = self.config.get('validation', {}).get('include_summary', True)

    def validate_graph(self, graph: GraphData) -> ValidationResult:
        """Run every check and aggregate the findings."""
        logger.info("Starting graph validation")

        result = ValidationResult()

        self._check_orphans(graph, result)
        self._check_self_loops(graph, result)
        self._check_duplicate_edges(graph, result)
        self._check_prerequisite_cycles(graph, result)
        self._check_canonical_references(graph, result)

        if self.include_summary:
            result.add_info(ValidationIssue(
                GRAPH_SUMMARY,
                f"Graph has {graph.node_count()} nodes and {graph.edge_count()} edges"
            ))

        result.valid = len(result.errors) == 0

        logger.info(f"Validation complete: {'PASSED' if result.valid else 'FAILED'} "
                    f"({len(result.errors)} errors, {len(result.warnings)} warnings)")

        return result

    def _check_orphans(self, graph: GraphData, result: ValidationResult):
        """Nodes without any incident edge."""
        orphans = [node_id for node_id in graph.node_ids() if graph.degree(node_id) == 0]
        if orphans:
            result.add_warning(ValidationIssue(
                ORPHAN_NODES,
                f"{len(orphans)} node(s) have no connections",
                nodes=orphans
            ))

    def _check_self_loops(self, graph: GraphData, result: ValidationResult):
        self_loops = [edge.describe() for edge in graph.iter_edges() if edge.is_self_loop]
        if self_loops:
            result.add_error(ValidationIssue(
                SELF_LOOPS,
                f"{len(self_loops)} edge(s) are self-loops",
                edges=self_loops
            ))

    def _check_duplicate_edges(self, graph: GraphData, result: ValidationResult):
        """Edges repeating an earlier (from, to, relationship) triple."""
        seen: Set[Tuple[str, str, str]] = set()
        duplicates = []

        for edge in graph.iter_edges():
            label = edge.relationship.name()
            key = (edge.from_id, edge.to_id, label)
            if key in seen:
                duplicates.append(f"{edge.from_id} -[{label}]-> {edge.to_id}")
            else:
                seen.add(key)

        if duplicates:
            result.add_warning(ValidationIssue(
                DUPLICATE_EDGES,
                f"{len(duplicates)} duplicate edge(s) found",
                edges=duplicates
            ))

    def _check_prerequisite_cycles(self, graph: GraphData, result: ValidationResult):
        """
        Topological sort of the Prerequisite-only subgraph.

        Self-loops are left out here; they are reported by the self-loop check.
        """
        subgraph = nx.DiGraph()
        subgraph.add_nodes_from(graph.node_ids())
        for edge in graph.iter_edges():
            if edge.relationship == Relationship.PREREQUISITE and not edge.is_self_loop:
                subgraph.add_edge(edge.from_id, edge.to_id)

        try:
            list(nx.topological_sort(subgraph))
        except nx.NetworkXUnfeasible:
            cycle = [source for source, _ in nx.find_cycle(subgraph)]
            result.add_error(ValidationIssue(
                PREREQUISITE_CYCLE,
                "Cycle detected in prerequisite relationships",
                nodes=cycle
            ))

    def _check_canonical_references(self, graph: GraphData, result: ValidationResult):
        invalid_refs = []

        for node in graph.iter_nodes():
            if node.is_canonical:
                continue
            if node.canonical_id is None:
                invalid_refs.append(f"{node.id} is non-canonical but has no canonical_id")
            elif not graph.contains_node(node.canonical_id):
                invalid_refs.append(f"{node.id} references missing canonical {node.canonical_id}")

        if invalid_refs:
            result.add_error(ValidationIssue(
                INVALID_CANONICAL_REF,
                f"{len(invalid_refs)} invalid canonical reference(s)",
                nodes=invalid_refs
            ))


def validate_graph(graph: GraphData) -> ValidationResult:
    """Validate a graph with the default validator."""
    return GraphValidator().validate_graph(graph)


def is_valid(graph: GraphData) -> bool:
    return validate_graph(graph).valid
