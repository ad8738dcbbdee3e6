#!/usr/bin/env python3
"""
Graph Module for the Concept Graph Engine

Components for building and querying concept graphs:
- types / GraphData: Nodes, edges and the graph container
- GraphExtractor / GraphBuilder: Content to graph pipeline
- algorithms: Shortest path, neighborhood, prerequisites, centrality, bridges
- graph_validator: Structural integrity checks
- persistence: JSON snapshots and content-hash freshness
- stats / query: Summaries and read models
"""

from .types import Node, Edge, Relationship, EdgeOrigin
from .graph_data import GraphData
from .extractor import GraphExtractor, FrontmatterExtractor, ConceptNodeData, ConceptEdgeData
from .builder import GraphBuilder, BuildStats, BuildError, ErrorHandling, ManualEdge
from .algorithms import (
    PathResult,
    NeighborhoodResult,
    PrerequisitesResult,
    RelatedResult,
    shortest_path,
    neighborhood,
    prerequisites_sorted,
    prerequisite_depths,
    calculate_centrality,
    find_bridges,
    get_related
)
from .graph_validator import GraphValidator, ValidationIssue, ValidationResult, validate_graph, is_valid
from .persistence import (
    GraphMetadata,
    SerializableGraph,
    serialize_graph,
    save_graph,
    load_graph,
    load_graph_from_str,
    load_metadata,
    is_cache_fresh,
    compute_content_hash,
    compute_directory_hash
)
from .stats import GraphStats, DegreeDirection, compute_stats, quick_summary, top_nodes_by_degree

__all__ = [
    # Data model
    'Node',
    'Edge',
    'Relationship',
    'EdgeOrigin',
    'GraphData',
    # Build pipeline
    'GraphExtractor',
    'FrontmatterExtractor',
    'ConceptNodeData',
    'ConceptEdgeData',
    'GraphBuilder',
    'BuildStats',
    'BuildError',
    'ErrorHandling',
    'ManualEdge',
    # Algorithms
    'PathResult',
    'NeighborhoodResult',
    'PrerequisitesResult',
    'RelatedResult',
    'shortest_path',
    'neighborhood',
    'prerequisites_sorted',
    'prerequisite_depths',
    'calculate_centrality',
    'find_bridges',
    'get_related',
    # Validation
    'GraphValidator',
    'ValidationIssue',
    'ValidationResult',
    'validate_graph',
    'is_valid',
    # Persistence
    'GraphMetadata',
    'SerializableGraph',
    'serialize_graph',
    'save_graph',
    'load_graph',
    'load_graph_from_str',
    'load_metadata',
    'is_cache_fresh',
    'compute_content_hash',
    'compute_directory_hash',
    # Stats
    'GraphStats',
    'DegreeDirection',
    'compute_stats',
    'quick_summary',
    'top_nodes_by_degree'
]
