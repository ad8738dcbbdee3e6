#!/usr/bin/env python3
"""
Graph Types for the Concept Graph Engine

Defines the node, edge and relationship records that every other component
reads. Records are plain dataclasses with dictionary conversion for JSON
persistence; the graph container owns them once inserted.
"""

import logging
from enum import Enum
from typing import Dict, Optional, Any, Union
from dataclasses import dataclass, field

from ..errors import ParseError

logger = logging.getLogger(__name__)


def expect_type(value: Any, types: Union[type, tuple], what: str, optional: bool = False) -> Any:
    """Return value if it has one of the given types, else raise ParseError."""
    if value is None and optional:
        return None
    # bool is an int subclass; only accept it where bool is asked for
    if isinstance(value, bool) and bool not in (types if isinstance(types, tuple) else (types,)):
        raise ParseError(f"Invalid {what}: {value!r}")
    if not isinstance(value, types):
        raise ParseError(f"Invalid {what}: {value!r}")
    return value


@dataclass(frozen=True)
class Relationship:
    """
    Label of a directed edge.

    The fixed vocabulary is Prerequisite, RelatesTo and LeadsTo; domains add
    their own labels with Relationship.custom(name).
    """
    kind: str
    custom_name: Optional[str] = None

    PREREQUISITE_KIND = "Prerequisite"
    RELATES_TO_KIND = "RelatesTo"
    LEADS_TO_KIND = "LeadsTo"
    CUSTOM_KIND = "Custom"

    @classmethod
    def custom(cls, name: str) -> 'Relationship':
        """Create a domain-specific relationship."""
        return cls(cls.CUSTOM_KIND, name)

    @property
    def is_custom(self) -> bool:
        return self.kind == self.CUSTOM_KIND

    def name(self) -> str:
        """Canonical lowercase label (custom relationships use their literal name)."""
        if self.is_custom:
            return self.custom_name or ""
        return _KIND_TO_LABEL[self.kind]

    @classmethod
    def from_name(cls, label: str) -> 'Relationship':
        """Parse a label produced by name(); unknown labels become custom."""
        kind = _LABEL_TO_KIND.get(label)
        if kind is None:
            return cls.custom(label)
        return cls(kind)

    def to_json(self) -> Union[str, Dict[str, str]]:
        if self.is_custom:
            return {self.CUSTOM_KIND: self.custom_name or ""}
        return self.kind

    @classmethod
    def from_json(cls, value: Any) -> 'Relationship':
        if isinstance(value, str):
            if value in _KIND_TO_LABEL:
                return cls(value)
            return cls.from_name(value)
        if isinstance(value, dict) and len(value) == 1:
            key, name = next(iter(value.items()))
            if key.lower() == "custom" and isinstance(name, str):
                return cls.custom(name)
        raise ParseError(f"Unrecognized relationship: {value!r}")

    def __str__(self) -> str:
        return self.name()


_KIND_TO_LABEL = {
    Relationship.PREREQUISITE_KIND: "prerequisite",
    Relationship.RELATES_TO_KIND: "relates_to",
    Relationship.LEADS_TO_KIND: "leads_to",
}
_LABEL_TO_KIND = {label: kind for kind, label in _KIND_TO_LABEL.items()}

Relationship.PREREQUISITE = Relationship(Relationship.PREREQUISITE_KIND)
Relationship.RELATES_TO = Relationship(Relationship.RELATES_TO_KIND)
Relationship.LEADS_TO = Relationship(Relationship.LEADS_TO_KIND)


class EdgeOrigin(Enum):
    """Where an edge came from. Informational only."""
    FRONTMATTER = "Frontmatter"
    MANUAL = "Manual"
    INFERRED = "Inferred"

    @classmethod
    def from_json(cls, value: Any) -> 'EdgeOrigin':
        if isinstance(value, str):
            for origin in cls:
                if value == origin.value or value.lower() == origin.value.lower():
                    return origin
        raise ParseError(f"Unrecognized edge origin: {value!r}")


@dataclass
class Node:
    """Represents a concept in the knowledge graph."""
    id: str
    title: str
    category: Optional[str] = None
    source_id: Optional[str] = None
    is_canonical: bool = True
    canonical_id: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    def with_category(self, category: str) -> 'Node':
        self.category = category
        return self

    def with_source(self, source_id: str) -> 'Node':
        self.source_id = source_id
        return self

    def with_metadata(self, key: str, value: Any) -> 'Node':
        self.metadata[key] = value
        return self

    def as_variant_of(self, canonical_id: str) -> 'Node':
        """Mark this node as a variant of another (canonical) node."""
        self.is_canonical = False
        self.canonical_id = canonical_id
        return self

    @property
    def description(self) -> Optional[str]:
        value = self.metadata.get("description")
        return value if isinstance(value, str) else None

    def to_dict(self) -> Dict[str, Any]:
        """Convert node to dictionary format."""
        return {
            "id": self.id,
            "title": self.title,
            "category": self.category,
            "source_id": self.source_id,
            "is_canonical": self.is_canonical,
            "canonical_id": self.canonical_id,
            "metadata": dict(self.metadata)
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Node':
        """Create a node from its dictionary format."""
        expect_type(data, dict, "node record")
        try:
            return cls(
                id=expect_type(data["id"], str, "node id"),
                title=expect_type(data["title"], str, "node title"),
                category=expect_type(data.get("category"), str, "node category", optional=True),
                source_id=expect_type(data.get("source_id"), str, "node source_id", optional=True),
                is_canonical=expect_type(data.get("is_canonical", True), bool, "node is_canonical"),
                canonical_id=expect_type(data.get("canonical_id"), str, "node canonical_id", optional=True),
                metadata=dict(expect_type(data.get("metadata"), dict, "node metadata", optional=True) or {})
            )
        except KeyError as e:
            raise ParseError(f"Invalid node record {data!r}: {e}") from e


@dataclass
class Edge:
    """Represents a directed, labeled relationship between two node ids."""
    from_id: str
    to_id: str
    relationship: Relationship
    weight: float = 1.0
    origin: EdgeOrigin = EdgeOrigin.FRONTMATTER

    def with_weight(self, weight: float) -> 'Edge':
        self.weight = weight
        return self

    def with_origin(self, origin: EdgeOrigin) -> 'Edge':
        self.origin = origin
        return self

    @property
    def is_self_loop(self) -> bool:
        return self.from_id == self.to_id

    def describe(self) -> str:
        """Human-readable "from -> to" form used in reports."""
        return f"{self.from_id} -> {self.to_id}"

    def to_dict(self) -> Dict[str, Any]:
        """Convert edge to dictionary format."""
        return {
            "from": self.from_id,
            "to": self.to_id,
            "relationship": self.relationship.to_json(),
            "weight": self.weight,
            "origin": self.origin.value
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Edge':
        """Create an edge from its dictionary format."""
        expect_type(data, dict, "edge record")
        try:
            return cls(
                from_id=expect_type(data["from"], str, "edge source"),
                to_id=expect_type(data["to"], str, "edge target"),
                relationship=Relationship.from_json(data["relationship"]),
                weight=float(expect_type(data.get("weight", 1.0), (int, float), "edge weight")),
                origin=EdgeOrigin.from_json(data.get("origin", EdgeOrigin.FRONTMATTER.value))
            )
        except KeyError as e:
            raise ParseError(f"Invalid edge record {data!r}: {e}") from e
