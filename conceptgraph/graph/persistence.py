#!/usr/bin/env python3
"""
Graph Persistence for the Concept Graph Engine

JSON snapshots of a GraphData ({nodes, edges, metadata}) plus content-hash
freshness checks, so an unchanged content tree can reuse a saved graph
instead of rebuilding it.
"""

import hashlib
import json
import logging
import time
from pathlib import Path
from typing import Dict, List, Optional, Any, Union, Iterable
from dataclasses import dataclass, field

from .. import __version__
from .types import Node, Edge, expect_type
from .graph_data import GraphData
from ..errors import ConceptGraphError, GraphIOError, ParseError
from ..services.file_service import read_text

logger = logging.getLogger(__name__)


@dataclass
class GraphMetadata:
    """Build information stored alongside a snapshot."""
    built_at: str
    builder_version: str
    content_hash: Optional[str] = None
    source_file_count: Optional[int] = None

    @classmethod
    def default(cls) -> 'GraphMetadata':
        """Metadata stamped with the current time and package version."""
        return cls(built_at=str(int(time.time())), builder_version=__version__)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "built_at": self.built_at,
            "builder_version": self.builder_version,
            "content_hash": self.content_hash,
            "source_file_count": self.source_file_count
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'GraphMetadata':
        expect_type(data, dict, "graph metadata")
        try:
            return cls(
                built_at=str(data["built_at"]),
                builder_version=str(data["builder_version"]),
                content_hash=expect_type(data.get("content_hash"), str, "content_hash", optional=True),
                source_file_count=expect_type(data.get("source_file_count"), int, "source_file_count", optional=True)
            )
        except KeyError as e:
            raise ParseError(f"Invalid graph metadata: {e}") from e


@dataclass
class SerializableGraph:
    """On-disk shape of a graph snapshot."""
    nodes: List[Node] = field(default_factory=list)
    edges: List[Edge] = field(default_factory=list)
    metadata: Optional[GraphMetadata] = None

    @classmethod
    def from_graph(cls, graph: GraphData, metadata: Optional[GraphMetadata] = None) -> 'SerializableGraph':
        return cls(nodes=list(graph.iter_nodes()), edges=list(graph.edges), metadata=metadata)

    def to_graph(self) -> GraphData:
        """Rebuild a GraphData; edges with a missing endpoint are dropped."""
        graph = GraphData()
        for node in self.nodes:
            graph.add_node(node)

        dropped = 0
        for edge in self.edges:
            if graph.contains_node(edge.from_id) and graph.contains_node(edge.to_id):
                graph.add_edge(edge)
            else:
                dropped += 1

        if dropped:
            logger.debug(f"Dropped {dropped} edge(s) with missing endpoints on load")
        return graph

    def to_dict(self) -> Dict[str, Any]:
        return {
            "nodes": [node.to_dict() for node in self.nodes],
            "edges": [edge.to_dict() for edge in self.edges],
            "metadata": self.metadata.to_dict() if self.metadata else None
        }

    @classmethod
    def from_dict(cls, data: Any) -> 'SerializableGraph':
        if not isinstance(data, dict):
            raise ParseError("Graph snapshot must be a JSON object")
        if "nodes" not in data or "edges" not in data:
            raise ParseError("Graph snapshot is missing nodes or edges")
        nodes = [Node.from_dict(item) for item in expect_type(data["nodes"], list, "snapshot nodes")]
        edges = [Edge.from_dict(item) for item in expect_type(data["edges"], list, "snapshot edges")]

        metadata = data.get("metadata")
        return cls(
            nodes=nodes,
            edges=edges,
            metadata=GraphMetadata.from_dict(metadata) if metadata is not None else None
        )


def serialize_graph(graph: GraphData, metadata: Optional[GraphMetadata] = None) -> str:
    """Render a graph snapshot as pretty-printed JSON text."""
    snapshot = SerializableGraph.from_graph(graph, metadata)
    return json.dumps(snapshot.to_dict(), indent=2, ensure_ascii=False)


def save_graph(graph: GraphData, path: Union[str, Path],
               metadata: Optional[GraphMetadata] = None) -> None:
    """
    Write a graph snapshot as pretty-printed JSON, overwriting any existing file.

    Raises:
        GraphIOError: If the file cannot be written
    """
    path = Path(path)
    text = serialize_graph(graph, metadata)

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding='utf-8')
    except OSError as e:
        logger.error(f"Failed to save graph to {path}: {e}")
        raise GraphIOError(f"Failed to save graph: {e}", path) from e

    logger.info(f"Graph saved to {path} ({graph.node_count()} nodes, {graph.edge_count()} edges)")


def load_graph(path: Union[str, Path]) -> GraphData:
    """
    Load a graph snapshot from disk.

    Raises:
        GraphFileNotFoundError: If the file does not exist
        GraphIOError: If the file cannot be read
        ParseError: If the file is not a valid snapshot
    """
    graph = load_graph_from_str(read_text(path))
    logger.info(f"Graph loaded from {path}: {graph.node_count()} nodes, {graph.edge_count()} edges")
    return graph


def load_graph_from_str(text: str) -> GraphData:
    return _parse_snapshot(text).to_graph()


def load_metadata(path: Union[str, Path]) -> Optional[GraphMetadata]:
    """Metadata of a saved snapshot, or None when it has none."""
    return _parse_snapshot(read_text(path)).metadata


def _parse_snapshot(text: str) -> SerializableGraph:
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ParseError(f"Failed to parse graph JSON: {e}") from e
    return SerializableGraph.from_dict(data)


def is_cache_fresh(cache_path: Union[str, Path], content_hash: str) -> bool:
    """
    Whether the snapshot at cache_path was built from content with this hash.

    Any failure to read or parse the snapshot counts as stale.
    """
    cache_path = Path(cache_path)
    if not cache_path.exists():
        return False

    try:
        metadata = load_metadata(cache_path)
    except ConceptGraphError as e:
        logger.debug(f"Cache at {cache_path} treated as stale: {e}")
        return False

    if metadata is None or metadata.content_hash is None:
        return False
    return metadata.content_hash == content_hash


def compute_content_hash(paths: Iterable[Union[str, Path]]) -> str:
    """
    SHA-256 over the bytes of the given files, in the given order.

    Raises:
        GraphIOError: If a file cannot be read
    """
    hasher = hashlib.sha256()
    for path in paths:
        path = Path(path)
        try:
            hasher.update(path.read_bytes())
        except OSError as e:
            raise GraphIOError(f"Failed to hash file: {e}", path) from e
    return hasher.hexdigest()


def compute_directory_hash(directory: Union[str, Path], suffix: str = ".md") -> str:
    """SHA-256 over every file under directory ending in suffix, sorted by path."""
    directory = Path(directory)
    if not directory.is_dir():
        raise GraphIOError("Not a directory", directory)

    try:
        paths = sorted(p for p in directory.rglob(f"*{suffix}") if p.is_file())
    except OSError as e:
        raise GraphIOError(f"Failed to walk directory: {e}", directory) from e

    logger.debug(f"Hashing {len(paths)} files under {directory}")
    return compute_content_hash(paths)
