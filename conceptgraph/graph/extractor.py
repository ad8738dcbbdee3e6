#!/usr/bin/env python3
"""
Graph Extractor interface for the Concept Graph Engine

Each content domain implements GraphExtractor to turn its files into graph
records. Extraction (parsing frontmatter into domain data) is kept separate
from conversion (mapping domain data onto generic Node/Edge records), so the
builder never needs to know a domain's schema.

For each content file the builder calls, in order:

1. extract_node()   - frontmatter + body -> domain node data
2. extract_edges()  - frontmatter + body -> domain edge data, or None
3. to_graph_node()  - domain node data -> Node
4. to_graph_edges() - domain edge data -> list of Edge
"""

import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, List, Optional, Any
from dataclasses import dataclass, field

from .types import Node, Edge, Relationship
from ..errors import ParseError
from ..services.file_service import id_from_path

logger = logging.getLogger(__name__)


class GraphExtractor(ABC):
    """Abstract interface for domain-specific graph extraction."""

    @abstractmethod
    def extract_node(self, base_path: Path, file_path: Path,
                     frontmatter: Dict[str, Any], content: str) -> Any:
        """
        Extract domain node data from a content file.

        Args:
            base_path: Root directory of the content
            file_path: Full path of the file being processed
            frontmatter: Parsed YAML frontmatter (empty dict when absent)
            content: Body text after the frontmatter

        Raises:
            ConceptGraphError: When the file cannot be interpreted
        """
        pass

    @abstractmethod
    def extract_edges(self, frontmatter: Dict[str, Any], content: str) -> Optional[Any]:
        """Extract domain edge data, or None when the file declares no relationships."""
        pass

    @abstractmethod
    def to_graph_node(self, node_data: Any) -> Node:
        """Convert domain node data to a generic Node."""
        pass

    @abstractmethod
    def to_graph_edges(self, from_id: str, edge_data: Any) -> List[Edge]:
        """Convert domain edge data to generic Edges originating at from_id."""
        pass

    def content_glob(self) -> str:
        """Glob used to discover content files (default: every file, recursively)."""
        return "**/*"

    def name(self) -> str:
        """Name of this extractor for logging."""
        return "unnamed"


@dataclass
class ConceptNodeData:
    """Node data read from generic concept frontmatter."""
    id: str
    title: str
    category: Optional[str] = None
    source_id: Optional[str] = None
    canonical_id: Optional[str] = None
    description: Optional[str] = None


@dataclass
class ConceptEdgeData:
    """Relationship lists read from generic concept frontmatter."""
    prerequisites: List[str] = field(default_factory=list)
    related: List[str] = field(default_factory=list)
    leads_to: List[str] = field(default_factory=list)

    def is_empty(self) -> bool:
        return not (self.prerequisites or self.related or self.leads_to)


class FrontmatterExtractor(GraphExtractor):
    """
    Extractor for markdown concept cards with simple frontmatter.

    Expected frontmatter:

        id: optional-explicit-id        (defaults to the file stem)
        title: "Concept Title"          (defaults to the id)
        category: optional-category
        source: optional-source-id
        canonical: canonical-concept-id (marks this card as a variant)
        description: one-line summary
        prerequisites: [concept-id, ...]
        related: [concept-id, ...]
        leads_to: [concept-id, ...]

    Prerequisite edges point from the prerequisite to the concept that needs
    it, so following them forwards gives learning order.
    """

    def __init__(self, glob: str = "**/*.md"):
        self.glob = glob

    def extract_node(self, base_path: Path, file_path: Path,
                     frontmatter: Dict[str, Any], content: str) -> ConceptNodeData:
        node_id = frontmatter.get("id") or id_from_path(file_path)
        if not node_id:
            raise ParseError(f"Cannot derive concept id from {file_path}")
        node_id = str(node_id)

        title = frontmatter.get("title") or node_id
        return ConceptNodeData(
            id=node_id,
            title=str(title),
            category=self._optional_str(frontmatter.get("category")),
            source_id=self._optional_str(frontmatter.get("source")),
            canonical_id=self._optional_str(frontmatter.get("canonical")),
            description=self._optional_str(frontmatter.get("description"))
        )

    def extract_edges(self, frontmatter: Dict[str, Any], content: str) -> Optional[ConceptEdgeData]:
        edge_data = ConceptEdgeData(
            prerequisites=self._id_list(frontmatter, "prerequisites"),
            related=self._id_list(frontmatter, "related"),
            leads_to=self._id_list(frontmatter, "leads_to")
        )
        if edge_data.is_empty():
            return None
        return edge_data

    def to_graph_node(self, node_data: ConceptNodeData) -> Node:
        node = Node(node_data.id, node_data.title)
        if node_data.category:
            node.with_category(node_data.category)
        if node_data.source_id:
            node.with_source(node_data.source_id)
        if node_data.canonical_id and node_data.canonical_id != node_data.id:
            node.as_variant_of(node_data.canonical_id)
        if node_data.description:
            node.with_metadata("description", node_data.description)
        return node

    def to_graph_edges(self, from_id: str, edge_data: ConceptEdgeData) -> List[Edge]:
        edges = []

        for prereq in edge_data.prerequisites:
            edges.append(Edge(prereq, from_id, Relationship.PREREQUISITE))

        for related in edge_data.related:
            edges.append(Edge(from_id, related, Relationship.RELATES_TO))

        for target in edge_data.leads_to:
            edges.append(Edge(from_id, target, Relationship.LEADS_TO))

        return edges

    def content_glob(self) -> str:
        return self.glob

    def name(self) -> str:
        return "frontmatter"

    @staticmethod
    def _optional_str(value: Any) -> Optional[str]:
        if value is None:
            return None
        return str(value)

    @staticmethod
    def _id_list(frontmatter: Dict[str, Any], key: str) -> List[str]:
        value = frontmatter.get(key)
        if value is None:
            return []
        if isinstance(value, str):
            return [value]
        if not isinstance(value, list):
            raise ParseError(f"'{key}' must be a list of concept ids, got {type(value).__name__}")
        return [str(item) for item in value if item is not None]
