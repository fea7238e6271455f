# src/agealchemy/orm/relationships.py
"""
AGEAlchemy Relationships - relationship definitions and traversal helpers

A Relationship describes an edge type and its direction and renders the
matching Cypher pattern. `Relationships` offers the common cardinality
presets and a one-shot MATCH query for a `(from)-[rel]-(to)` pattern.
"""

from __future__ import annotations

from typing import Any, Dict, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from agealchemy.core.builder import query_builder
from agealchemy.core.escaping import EdgeDirection, edge, path, vertex

Direction = Literal["outgoing", "incoming", "both"]
Cardinality = Literal["one-to-one", "one-to-many", "many-to-one", "many-to-many"]

_EDGE_DIRECTIONS = {
    "outgoing": EdgeDirection.RIGHT,
    "incoming": EdgeDirection.LEFT,
    "both": EdgeDirection.BOTH,
}


class Relationship(BaseModel):
    """
    Definition of one relationship type.

    Example:
        ```python
        follows = Relationship(type="FOLLOWS", direction="outgoing")
        follows.to_cypher_pattern("a", "b", "r")   # (a)-[r:FOLLOWS]->(b)
        ```
    """

    type: str = Field(..., min_length=1, description="Edge label")
    direction: Direction = Field(default="outgoing")
    properties: Dict[str, Any] = Field(default_factory=dict)
    cardinality: Optional[Cardinality] = None

    model_config = ConfigDict(frozen=True)

    def to_cypher_pattern(self, from_var: str = "a", to_var: str = "b", rel_var: str = "r") -> str:
        """
        Render `(from)-[rel:TYPE {props}]->(to)` for this relationship.

        The property map is omitted when empty.
        """
        props = self.properties or None
        return path(
            vertex(from_var),
            edge(rel_var, self.type, props, _EDGE_DIRECTIONS[self.direction]),
            vertex(to_var),
        )


class Traversal(BaseModel):
    """Traversal request starting at a vertex."""

    start: Any
    relationship: str
    depth: int = Field(default=1, ge=1)
    direction: Direction = "outgoing"
    filter: Optional[str] = None


class Relationships:
    """Factory helpers for relationship definitions and queries."""

    @staticmethod
    def define(type: str, **options: Any) -> Relationship:
        return Relationship(type=type, **options)

    @staticmethod
    def one_to_one(type: str) -> Relationship:
        return Relationship(type=type, direction="outgoing", cardinality="one-to-one")

    @staticmethod
    def one_to_many(type: str) -> Relationship:
        return Relationship(type=type, direction="outgoing", cardinality="one-to-many")

    @staticmethod
    def many_to_one(type: str) -> Relationship:
        return Relationship(type=type, direction="incoming", cardinality="many-to-one")

    @staticmethod
    def many_to_many(type: str) -> Relationship:
        return Relationship(type=type, direction="both", cardinality="many-to-many")

    @staticmethod
    def traverse(
        start: Any,
        relationship_type: str,
        depth: int = 1,
        direction: Direction = "outgoing",
        filter: Optional[str] = None
    ) -> Traversal:
        return Traversal(
            start=start,
            relationship=relationship_type,
            depth=depth,
            direction=direction,
            filter=filter,
        )

    @staticmethod
    def build_query(
        from_label: str,
        relationship_type: str,
        to_label: str,
        from_var: str = "from",
        rel_var: str = "rel",
        to_var: str = "to",
        direction: Direction = "outgoing"
    ) -> str:
        """
        MATCH a labelled relationship and return all three elements.

        Example:
            >>> Relationships.build_query("User", "FOLLOWS", "User")
            'MATCH (from:User)-[rel:FOLLOWS]->(to:User) RETURN from, rel, to'
        """
        pattern = path(
            vertex(from_var, from_label),
            edge(rel_var, relationship_type, None, _EDGE_DIRECTIONS[direction]),
            vertex(to_var, to_label),
        )
        return (
            query_builder()
            .match(pattern)
            .return_(f"{from_var}, {rel_var}, {to_var}")
            .build()
        )
