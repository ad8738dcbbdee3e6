"""
Tests for the GraphData container.
"""
import pytest

from conceptgraph.errors import InvalidDataError
from conceptgraph.graph import Node, Edge, Relationship, GraphData


def test_empty_graph():
    graph = GraphData()
    assert graph.node_count() == 0
    assert graph.edge_count() == 0
    assert list(graph.iter_nodes()) == []
    assert list(graph.iter_edges()) == []
    assert len(graph) == 0


def test_add_node_returns_stable_index():
    graph = GraphData()
    first = graph.add_node(Node("a", "A"))
    second = graph.add_node(Node("b", "B"))
    assert first != second
    assert graph.get_index("a") == first
    assert graph.node_at(second).id == "b"


def test_add_node_upserts_in_place():
    graph = GraphData()
    index = graph.add_node(Node("a", "Old"))
    graph.add_node(Node("b", "B"))
    assert graph.add_node(Node("a", "New")) == index
    assert graph.node_count() == 2
    assert graph.get_node("a").title == "New"
    assert graph.node_ids() == ["a", "b"]


def test_add_edge_rejects_unknown_endpoints():
    graph = GraphData()
    graph.add_node(Node("a", "A"))
    with pytest.raises(InvalidDataError):
        graph.add_edge(Edge("a", "ghost", Relationship.PREREQUISITE))
    with pytest.raises(InvalidDataError):
        graph.add_edge(Edge("ghost", "a", Relationship.PREREQUISITE))
    assert graph.edge_count() == 0


def test_self_loop_is_stored(make_graph):
    graph = make_graph(["a"], [("a", "a")])
    assert graph.edge_count() == 1
    assert graph.edges[0].is_self_loop


def test_iteration_is_insertion_ordered_and_restartable(abc_graph):
    assert [node.id for node in abc_graph.iter_nodes()] == ["a", "b", "c"]
    first = [edge.describe() for edge in abc_graph.iter_edges()]
    second = [edge.describe() for edge in abc_graph.iter_edges()]
    assert first == second == ["a -> b", "b -> c", "a -> c"]


def test_edge_list_tracks_mutation(abc_graph):
    assert len(abc_graph.edges) == 3
    abc_graph.add_edge(Edge("c", "a", Relationship.LEADS_TO))
    assert len(abc_graph.edges) == 4
    assert abc_graph.edges[-1].describe() == "c -> a"


def test_parallel_edges_are_kept(make_graph):
    graph = make_graph(["a", "b"], [("a", "b"), ("a", "b")])
    assert graph.edge_count() == 2


def test_adjacency_views(abc_graph):
    assert [edge.to_id for edge in abc_graph.outgoing("a")] == ["b", "c"]
    assert [edge.from_id for edge in abc_graph.incoming("c")] == ["b", "a"]
    assert [neighbor for neighbor, _ in abc_graph.neighbors("b")] == ["a", "c"]
    assert abc_graph.outgoing("missing") == []


def test_neighbors_reports_self_loop_once(make_graph):
    graph = make_graph(["a", "b"], [("a", "a"), ("a", "b")])
    assert [neighbor for neighbor, _ in graph.neighbors("a")] == ["a", "b"]


def test_degrees(abc_graph):
    assert abc_graph.in_degree("c") == 2
    assert abc_graph.out_degree("a") == 2
    assert abc_graph.degree("b") == 2
    assert abc_graph.degree("missing") == 0


def test_membership(abc_graph):
    assert "a" in abc_graph
    assert abc_graph.contains_node("b")
    assert "z" not in abc_graph
    assert abc_graph.get_node("z") is None
