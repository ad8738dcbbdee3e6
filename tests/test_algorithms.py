"""
Tests for graph traversal and query algorithms.
"""
import itertools
import random

import pytest

from conceptgraph.errors import NotFoundError
from conceptgraph.graph import (
    Relationship,
    shortest_path,
    neighborhood,
    prerequisites_sorted,
    prerequisite_depths,
    calculate_centrality,
    find_bridges,
    get_related,
)

PREREQ = Relationship.PREREQUISITE
RELATES = Relationship.RELATES_TO


class TestShortestPath:
    def test_direct_edge_beats_two_hops(self, abc_graph):
        result = shortest_path(abc_graph, "a", "c")
        assert result.found
        assert [node.id for node in result.path] == ["a", "c"]
        assert result.total_weight == 1.0
        assert [edge.describe() for edge in result.edges] == ["a -> c"]

    def test_follows_edge_direction(self, abc_graph):
        result = shortest_path(abc_graph, "c", "a")
        assert not result.found
        assert result.path == []
        assert result.edges == []
        assert result.total_weight == 0.0

    def test_weights_decide(self, make_graph):
        graph = make_graph(["a", "b", "c"], [("a", "c", RELATES, 5.0), ("a", "b", RELATES, 1.0),
                                             ("b", "c", RELATES, 1.5)])
        result = shortest_path(graph, "a", "c")
        assert [node.id for node in result.path] == ["a", "b", "c"]
        assert result.total_weight == pytest.approx(2.5)

    def test_tie_prefers_first_inserted_edge(self, make_graph):
        graph = make_graph(["s", "x", "y", "t"], [("s", "x"), ("s", "y"), ("x", "t"), ("y", "t")])
        result = shortest_path(graph, "s", "t")
        assert [node.id for node in result.path] == ["s", "x", "t"]

    def test_same_node(self, abc_graph):
        result = shortest_path(abc_graph, "b", "b")
        assert result.found
        assert [node.id for node in result.path] == ["b"]
        assert result.total_weight == 0.0

    def test_unknown_ids(self, abc_graph):
        with pytest.raises(NotFoundError):
            shortest_path(abc_graph, "a", "zzz")
        with pytest.raises(NotFoundError):
            shortest_path(abc_graph, "zzz", "a")

    def test_optimal_against_exhaustive_search(self, make_graph):
        rng = random.Random(7)
        ids = [f"n{i}" for i in range(6)]
        edges = []
        for from_id, to_id in itertools.permutations(ids, 2):
            if rng.random() < 0.35:
                edges.append((from_id, to_id, RELATES, round(rng.uniform(0.1, 3.0), 2)))
        graph = make_graph(ids, edges)

        def brute_force(source, target):
            best = None
            for length in range(1, len(ids)):
                for middle in itertools.permutations([i for i in ids if i not in (source, target)], length - 1):
                    route = [source, *middle, target]
                    total = 0.0
                    for u, v in zip(route, route[1:]):
                        weights = [w for f, t, _, w in edges if f == u and t == v]
                        if not weights:
                            break
                        total += min(weights)
                    else:
                        best = total if best is None else min(best, total)
            return best

        for source, target in itertools.permutations(ids, 2):
            expected = brute_force(source, target)
            result = shortest_path(graph, source, target)
            if expected is None:
                assert not result.found
            else:
                assert result.found
                assert result.total_weight == pytest.approx(expected)


class TestNeighborhood:
    def test_radius_one_ignores_direction(self, abc_graph):
        result = neighborhood(abc_graph, "b", 1)
        assert [node.id for node in result.nodes] == ["a", "c"]
        assert result.distances == {"a": 1, "c": 1}
        assert result.center.id == "b"

    def test_radius_zero_is_empty(self, abc_graph):
        result = neighborhood(abc_graph, "a", 0)
        assert result.nodes == []
        assert result.distances == {}
        assert result.edges == []

    def test_isolated_node(self, make_graph):
        graph = make_graph(["a", "b"])
        assert neighborhood(graph, "a", 3).nodes == []

    def test_hop_distances(self, make_graph):
        graph = make_graph(["a", "b", "c", "d"], [("a", "b"), ("b", "c"), ("c", "d")])
        result = neighborhood(graph, "a", 2)
        assert result.distances == {"b": 1, "c": 2}
        assert "d" not in result.distances

    def test_relationship_filter(self, abc_graph):
        result = neighborhood(abc_graph, "a", 2, relationship=PREREQ)
        assert result.distances == {"b": 1, "c": 2}
        assert all(edge.relationship == PREREQ for edge in result.edges)

        result = neighborhood(abc_graph, "a", 1, relationship=RELATES)
        assert [node.id for node in result.nodes] == ["c"]

    def test_unknown_id(self, abc_graph):
        with pytest.raises(NotFoundError):
            neighborhood(abc_graph, "zzz", 1)


class TestPrerequisites:
    def test_learning_order(self, abc_graph):
        result = prerequisites_sorted(abc_graph, "c")
        assert [node.id for node in result.ordered] == ["a", "b"]
        assert not result.has_cycles
        assert result.target.id == "c"

    def test_no_prerequisites(self, abc_graph):
        result = prerequisites_sorted(abc_graph, "a")
        assert result.ordered == []
        assert not result.has_cycles

    def test_diamond_orders_every_dependency_first(self, make_graph):
        graph = make_graph(["base", "left", "right", "top"],
                           [("base", "left", PREREQ), ("base", "right", PREREQ),
                            ("left", "top", PREREQ), ("right", "top", PREREQ)])
        order = [node.id for node in prerequisites_sorted(graph, "top").ordered]
        assert sorted(order) == ["base", "left", "right"]
        assert order.index("base") < order.index("left")
        assert order.index("base") < order.index("right")

    def test_ignores_other_relationships(self, make_graph):
        graph = make_graph(["a", "b", "c"], [("a", "c", RELATES), ("b", "c", PREREQ)])
        assert [node.id for node in prerequisites_sorted(graph, "c").ordered] == ["b"]

    def test_cycle_terminates_and_is_flagged(self, make_graph):
        graph = make_graph(["a", "b", "c"], [("a", "b", PREREQ), ("b", "a", PREREQ), ("b", "c", PREREQ)])
        result = prerequisites_sorted(graph, "c")
        assert result.has_cycles
        assert sorted(node.id for node in result.ordered) == ["a", "b"]

    def test_cycle_through_target(self, make_graph):
        graph = make_graph(["a", "b"], [("a", "b", PREREQ), ("b", "a", PREREQ)])
        result = prerequisites_sorted(graph, "a")
        assert result.has_cycles
        assert [node.id for node in result.ordered] == ["b"]

    def test_depths(self, make_graph):
        graph = make_graph(["a", "b", "c", "d"],
                           [("a", "b", PREREQ), ("b", "d", PREREQ), ("a", "d", PREREQ), ("c", "a", PREREQ)])
        assert prerequisite_depths(graph, "d") == {"b": 1, "a": 1, "c": 2}

    def test_unknown_id(self, abc_graph):
        with pytest.raises(NotFoundError):
            prerequisites_sorted(abc_graph, "zzz")


class TestCentrality:
    def test_normalized_by_max_degree(self, abc_graph):
        scores = calculate_centrality(abc_graph)
        assert scores == [("a", 1.0), ("b", 1.0), ("c", 1.0)]

    def test_ordering_and_range(self, make_graph):
        graph = make_graph(["hub", "x", "y", "lonely"], [("hub", "x"), ("hub", "y"), ("x", "y")])
        scores = dict(calculate_centrality(graph))
        assert scores["hub"] == 1.0
        assert scores["lonely"] == 0.0
        assert all(0.0 <= score <= 1.0 for score in scores.values())
        assert calculate_centrality(graph)[0][0] in ("hub", "x", "y")

    def test_no_edges(self, make_graph):
        assert calculate_centrality(make_graph(["a", "b"])) == [("a", 0.0), ("b", 0.0)]


class TestBridges:
    def test_chain_edges_are_bridges(self, make_graph):
        graph = make_graph(["a", "b", "c"], [("a", "b"), ("b", "c")])
        assert [edge.describe() for edge in find_bridges(graph)] == ["a -> b", "b -> c"]

    def test_cycle_has_no_bridges(self, abc_graph):
        assert find_bridges(abc_graph) == []

    def test_tail_off_a_cycle(self, make_graph):
        graph = make_graph(["a", "b", "c", "d"], [("a", "b"), ("b", "c"), ("c", "a"), ("c", "d")])
        assert [edge.describe() for edge in find_bridges(graph)] == ["c -> d"]

    def test_parallel_edges_are_not_bridges(self, make_graph):
        graph = make_graph(["a", "b"], [("a", "b"), ("b", "a")])
        assert find_bridges(graph) == []

    def test_self_loop_is_not_a_bridge(self, make_graph):
        graph = make_graph(["a", "b"], [("a", "a"), ("a", "b")])
        assert [edge.describe() for edge in find_bridges(graph)] == ["a -> b"]

    def test_separate_components(self, make_graph):
        graph = make_graph(["a", "b", "c", "d"], [("a", "b"), ("c", "d")])
        assert len(find_bridges(graph)) == 2


class TestRelated:
    def test_groups_by_relationship(self, abc_graph):
        result = get_related(abc_graph, "a")
        assert result.source.id == "a"
        assert list(result.groups) == ["prerequisite", "relates_to"]
        assert [node.id for node in result.groups["prerequisite"]] == ["b"]
        assert [node.id for node in result.groups["relates_to"]] == ["c"]

    def test_includes_incoming_and_dedupes(self, make_graph):
        graph = make_graph(["a", "b"], [("a", "b"), ("b", "a"), ("a", "b", PREREQ)])
        result = get_related(graph, "b")
        assert [node.id for node in result.groups["relates_to"]] == ["a"]
        assert [node.id for node in result.groups["prerequisite"]] == ["a"]

    def test_unknown_id(self, abc_graph):
        with pytest.raises(NotFoundError):
            get_related(abc_graph, "zzz")
