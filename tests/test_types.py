"""
Tests for node, edge and relationship records.
"""
import pytest

from conceptgraph.errors import ParseError
from conceptgraph.graph import Node, Edge, Relationship, EdgeOrigin


class TestRelationship:
    def test_fixed_vocabulary_names(self):
        assert Relationship.PREREQUISITE.name() == "prerequisite"
        assert Relationship.RELATES_TO.name() == "relates_to"
        assert Relationship.LEADS_TO.name() == "leads_to"

    def test_custom_uses_literal_name(self):
        rel = Relationship.custom("implies")
        assert rel.is_custom
        assert rel.name() == "implies"
        assert str(rel) == "implies"

    def test_from_name_parses_labels(self):
        assert Relationship.from_name("prerequisite") == Relationship.PREREQUISITE
        assert Relationship.from_name("leads_to") == Relationship.LEADS_TO
        assert Relationship.from_name("extends") == Relationship.custom("extends")

    def test_json_encoding(self):
        assert Relationship.PREREQUISITE.to_json() == "Prerequisite"
        assert Relationship.custom("implies").to_json() == {"Custom": "implies"}

    def test_from_json_accepts_kinds_labels_and_custom(self):
        assert Relationship.from_json("RelatesTo") == Relationship.RELATES_TO
        assert Relationship.from_json("relates_to") == Relationship.RELATES_TO
        assert Relationship.from_json({"Custom": "x"}) == Relationship.custom("x")
        assert Relationship.from_json({"custom": "x"}) == Relationship.custom("x")

    def test_from_json_rejects_garbage(self):
        with pytest.raises(ParseError):
            Relationship.from_json(42)
        with pytest.raises(ParseError):
            Relationship.from_json({"Other": "x"})

    def test_relationships_are_hashable(self):
        labels = {Relationship.PREREQUISITE, Relationship("Prerequisite"), Relationship.custom("x")}
        assert len(labels) == 2


class TestNode:
    def test_defaults(self):
        node = Node("id", "Title")
        assert node.is_canonical
        assert node.canonical_id is None
        assert node.metadata == {}
        assert node.description is None

    def test_builder_helpers(self):
        node = (Node("v", "Variant")
                .with_category("cat")
                .with_source("book-1")
                .with_metadata("description", "A variant")
                .as_variant_of("canon"))
        assert node.category == "cat"
        assert node.source_id == "book-1"
        assert node.description == "A variant"
        assert not node.is_canonical
        assert node.canonical_id == "canon"

    def test_dict_round_trip(self):
        node = Node("n", "N").with_category("c").with_metadata("k", [1, 2])
        assert Node.from_dict(node.to_dict()) == node

    def test_from_dict_requires_id_and_title(self):
        with pytest.raises(ParseError):
            Node.from_dict({"id": "only-id"})

    @pytest.mark.parametrize("record", [
        {"id": "a", "title": "A", "metadata": "oops"},
        {"id": 1, "title": "A"},
        {"id": "a", "title": "A", "is_canonical": "yes"},
        {"id": "a", "title": "A", "category": ["x"]},
        ["a", "A"],
    ])
    def test_from_dict_rejects_wrongly_typed_fields(self, record):
        with pytest.raises(ParseError):
            Node.from_dict(record)


class TestEdge:
    def test_defaults(self):
        edge = Edge("a", "b", Relationship.PREREQUISITE)
        assert edge.weight == 1.0
        assert edge.origin == EdgeOrigin.FRONTMATTER
        assert not edge.is_self_loop
        assert edge.describe() == "a -> b"

    def test_self_loop(self):
        assert Edge("a", "a", Relationship.RELATES_TO).is_self_loop

    def test_to_dict_uses_snapshot_field_names(self):
        edge = Edge("a", "b", Relationship.LEADS_TO).with_weight(0.5).with_origin(EdgeOrigin.MANUAL)
        assert edge.to_dict() == {
            "from": "a",
            "to": "b",
            "relationship": "LeadsTo",
            "weight": 0.5,
            "origin": "Manual",
        }

    def test_from_dict_accepts_lowercase_origin(self):
        edge = Edge.from_dict({"from": "a", "to": "b", "relationship": "prerequisite", "origin": "inferred"})
        assert edge.relationship == Relationship.PREREQUISITE
        assert edge.origin == EdgeOrigin.INFERRED
        assert edge.weight == 1.0

    def test_from_dict_rejects_unknown_origin(self):
        with pytest.raises(ParseError):
            Edge.from_dict({"from": "a", "to": "b", "relationship": "Prerequisite", "origin": "Guessed"})

    @pytest.mark.parametrize("record", [
        {"from": "a", "to": "b", "relationship": "Prerequisite", "weight": "heavy"},
        {"from": "a", "to": "b", "relationship": "Prerequisite", "weight": True},
        {"from": 5, "to": "b", "relationship": "Prerequisite"},
        {"from": "a", "to": "b", "relationship": {"Custom": 3}},
        "a -> b",
    ])
    def test_from_dict_rejects_wrongly_typed_fields(self, record):
        with pytest.raises(ParseError):
            Edge.from_dict(record)
