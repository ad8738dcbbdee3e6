#!/usr/bin/env python3
"""
Graph Builder Module for the Concept Graph Engine

Builds a GraphData from a content directory using a domain GraphExtractor.
Nodes from every file are inserted first; staged edges are added once all
nodes are known, and edges whose endpoints never appeared are reported as
dangling references instead of failing the build.
"""

import asyncio
import logging
from enum import Enum
from pathlib import Path
from typing import List, Optional, Tuple, Union
from dataclasses import dataclass, field

from .types import Node, Edge, EdgeOrigin, Relationship
from .graph_data import GraphData
from .extractor import GraphExtractor
from ..errors import ConfigError
from ..services.file_service import FindOptions, FileInfo, find_all_files, read_file
from ..services.content_service import split_frontmatter

logger = logging.getLogger(__name__)


class ErrorHandling(Enum):
    """What to do when a single content file fails to extract."""
    FAIL_FAST = "fail_fast"
    COLLECT_ERRORS = "collect"

    @classmethod
    def from_name(cls, name: str) -> 'ErrorHandling':
        for policy in cls:
            if policy.value == name or policy.name.lower() == name.lower():
                return policy
        raise ConfigError(f"Unknown error handling policy: {name}")


@dataclass
class BuildError:
    """A file that could not be turned into graph records."""
    file: str
    message: str


@dataclass
class BuildStats:
    """Statistics of a build run."""
    nodes_created: int = 0
    edges_created: int = 0
    files_processed: int = 0
    files_skipped: int = 0
    errors: List[BuildError] = field(default_factory=list)
    dangling_refs: List[str] = field(default_factory=list)


@dataclass
class ManualEdge:
    """A curated edge supplied in code rather than read from content."""
    from_id: str
    to_id: str
    relationship: Relationship
    weight: float = 1.0

    def to_edge(self) -> Edge:
        return Edge(self.from_id, self.to_id, self.relationship,
                    weight=self.weight, origin=EdgeOrigin.MANUAL)


class GraphBuilder:
    """
    Builds a knowledge graph from content files.

    Usage:
        graph, stats = await GraphBuilder(extractor).with_content_path(path).build()
    """

    def __init__(self, extractor: GraphExtractor):
        """Initialize graph builder with a domain extractor."""
        self.extractor = extractor
        self.content_path: Optional[Path] = None
        self.error_handling = ErrorHandling.COLLECT_ERRORS
        self.manual_edges: List[ManualEdge] = []
        self.glob: Optional[str] = None
        self.options = FindOptions()

    def with_content_path(self, path: Union[str, Path]) -> 'GraphBuilder':
        self.content_path = Path(path)
        return self

    def with_error_handling(self, policy: ErrorHandling) -> 'GraphBuilder':
        self.error_handling = policy
        return self

    def with_manual_edges(self, edges: List[ManualEdge]) -> 'GraphBuilder':
        self.manual_edges.extend(edges)
        return self

    def with_content_glob(self, glob: str) -> 'GraphBuilder':
        """Override the extractor's content glob."""
        self.glob = glob
        return self

    def with_options(self, options: FindOptions) -> 'GraphBuilder':
        self.options = options
        return self

    async def build(self) -> Tuple[GraphData, BuildStats]:
        """
        Run the build.

        Returns:
            The built graph and its build statistics

        Raises:
            ConfigError: If no content path was configured
            NotFoundError / InvalidPathError / GraphIOError: If content
                discovery fails (always fatal)
            Exception: The first extraction error under FAIL_FAST
        """
        if self.content_path is None:
            raise ConfigError("Content path not set; call with_content_path() before build()")

        glob = self.glob or self.extractor.content_glob()
        logger.info(f"Building graph from {self.content_path} "
                    f"(extractor: {self.extractor.name()}, glob: {glob})")

        files = await find_all_files(self.content_path, self.options, glob)

        graph = GraphData()
        stats = BuildStats()
        staged_edges: List[Edge] = []

        for file_info in files:
            try:
                node, edges = await self._process_file(file_info)
            except Exception as e:
                if self.error_handling == ErrorHandling.FAIL_FAST:
                    logger.error(f"Extraction failed for {file_info.path}: {e}")
                    raise
                logger.warning(f"Skipping {file_info.path}: {e}")
                stats.errors.append(BuildError(file=str(file_info.path), message=str(e)))
                stats.files_skipped += 1
                continue

            graph.add_node(node)
            staged_edges.extend(edges)
            stats.files_processed += 1

        staged_edges.extend(manual.to_edge() for manual in self.manual_edges)

        for edge in staged_edges:
            if graph.contains_node(edge.from_id) and graph.contains_node(edge.to_id):
                graph.add_edge(edge)
                stats.edges_created += 1
            else:
                stats.dangling_refs.append(edge.describe())

        stats.nodes_created = graph.node_count()

        if stats.dangling_refs:
            logger.warning(f"{len(stats.dangling_refs)} edge(s) reference missing nodes")
        logger.info(f"Graph built: {stats.nodes_created} nodes, {stats.edges_created} edges, "
                    f"{stats.files_processed} files processed, {stats.files_skipped} skipped")

        return graph, stats

    def build_sync(self) -> Tuple[GraphData, BuildStats]:
        """Run build() to completion from synchronous code."""
        return asyncio.run(self.build())

    async def _process_file(self, file_info: FileInfo) -> Tuple[Node, List[Edge]]:
        """Extract the node and outgoing edges of one content file."""
        logger.debug(f"Processing {file_info.relative_path}")

        text = await read_file(file_info.path)
        frontmatter, body = split_frontmatter(text)

        node_data = self.extractor.extract_node(self.content_path, file_info.path, frontmatter, body)
        node = self.extractor.to_graph_node(node_data)

        edges: List[Edge] = []
        edge_data = self.extractor.extract_edges(frontmatter, body)
        if edge_data is not None:
            edges = self.extractor.to_graph_edges(node.id, edge_data)

        return node, edges
