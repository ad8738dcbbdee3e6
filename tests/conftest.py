"""
Pytest configuration and fixtures for the conceptgraph test suite.

This module provides:
- Small in-memory graphs shared by the algorithm, validation and stats tests
- A helper for writing markdown concept cards into a temporary content tree
- A configuration file pointing the CLI at a temporary project directory
"""
import pytest
import yaml
from pathlib import Path
from typing import Callable, List, Optional

from conceptgraph.graph import Node, Edge, Relationship, GraphData


@pytest.fixture
def abc_graph() -> GraphData:
    """
    Nodes a, b, c with a -> b and b -> c prerequisites and a -> c relates_to.
    """
    graph = GraphData()
    graph.add_node(Node("a", "Node A").with_category("basics"))
    graph.add_node(Node("b", "Node B").with_category("basics"))
    graph.add_node(Node("c", "Node C").with_category("advanced"))
    graph.add_edge(Edge("a", "b", Relationship.PREREQUISITE))
    graph.add_edge(Edge("b", "c", Relationship.PREREQUISITE))
    graph.add_edge(Edge("a", "c", Relationship.RELATES_TO))
    return graph


@pytest.fixture
def make_graph() -> Callable[..., GraphData]:
    """Build a graph from node ids and (from, to[, relationship[, weight]]) tuples."""
    def _make(node_ids: List[str], edges: Optional[list] = None) -> GraphData:
        graph = GraphData()
        for node_id in node_ids:
            graph.add_node(Node(node_id, node_id.upper()))
        for entry in edges or []:
            from_id, to_id = entry[0], entry[1]
            relationship = entry[2] if len(entry) > 2 else Relationship.RELATES_TO
            weight = entry[3] if len(entry) > 3 else 1.0
            graph.add_edge(Edge(from_id, to_id, relationship, weight=weight))
        return graph
    return _make


@pytest.fixture
def write_card(tmp_path) -> Callable[..., Path]:
    """Write a markdown card with YAML frontmatter under tmp_path/content."""
    content_root = tmp_path / "content"
    content_root.mkdir(exist_ok=True)

    def _write(relative: str, frontmatter: Optional[dict] = None, body: str = "Body text.\n") -> Path:
        path = content_root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        if frontmatter is None:
            path.write_text(body, encoding="utf-8")
        else:
            header = yaml.safe_dump(frontmatter, sort_keys=False)
            path.write_text(f"---\n{header}---\n{body}", encoding="utf-8")
        return path

    return _write


@pytest.fixture
def sample_content(write_card, tmp_path) -> Path:
    """A small content tree: a -> b -> c prerequisite chain plus one dangling reference."""
    write_card("a.md", {"title": "Alpha", "category": "basics", "description": "First concept"})
    write_card("b.md", {"title": "Beta", "category": "basics", "prerequisites": ["a"]})
    write_card("sub/c.md", {"title": "Gamma", "prerequisites": ["b"], "related": ["a", "missing"]})
    return tmp_path / "content"


@pytest.fixture
def cli_config(tmp_path) -> Path:
    """Configuration file rooted at tmp_path with quiet logging."""
    config = {
        "project_name": "test-project",
        "base_path": str(tmp_path),
        "content": {"path": "content", "glob": "**/*.md"},
        "graph": {"output_path": "data/graphs/graph.json", "error_handling": "collect", "use_cache": True},
        "logging": {"level": "WARNING", "file": None},
    }
    path = tmp_path / "conceptgraph.yaml"
    path.write_text(yaml.safe_dump(config), encoding="utf-8")
    return path
