# tests/orm/test_relationships.py

import pytest
from pydantic import ValidationError

from agealchemy.orm.relationships import Relationship, Relationships, Traversal


class TestRelationship:
    """Test the Relationship definition model."""

    def test_defaults(self):
        rel = Relationship(type="FOLLOWS")
        assert rel.direction == "outgoing"
        assert rel.properties == {}
        assert rel.cardinality is None

    def test_patterns_by_direction(self):
        assert Relationship(type="FOLLOWS").to_cypher_pattern() == "(a)-[r:FOLLOWS]->(b)"
        assert Relationship(type="FOLLOWS", direction="incoming").to_cypher_pattern() == "(a)<-[r:FOLLOWS]-(b)"
        assert Relationship(type="KNOWS", direction="both").to_cypher_pattern("x", "y", "k") == "(x)-[k:KNOWS]-(y)"

    def test_pattern_with_properties(self):
        rel = Relationship(type="RATED", properties={"stars": 5})
        assert rel.to_cypher_pattern() == "(a)-[r:RATED {stars: 5}]->(b)"

    def test_validation(self):
        with pytest.raises(ValidationError):
            Relationship(type="")
        with pytest.raises(ValidationError):
            Relationship(type="R", direction="sideways")
        with pytest.raises(ValidationError):
            Relationship(type="R", cardinality="lots")

    def test_frozen(self):
        rel = Relationship(type="R")
        with pytest.raises(ValidationError):
            rel.type = "S"


class TestRelationshipsFactory:
    def test_define(self):
        rel = Relationships.define("LIKES", direction="both", properties={"w": 1})
        assert rel == Relationship(type="LIKES", direction="both", properties={"w": 1})

    @pytest.mark.parametrize("factory,direction,cardinality", [
        (Relationships.one_to_one, "outgoing", "one-to-one"),
        (Relationships.one_to_many, "outgoing", "one-to-many"),
        (Relationships.many_to_one, "incoming", "many-to-one"),
        (Relationships.many_to_many, "both", "many-to-many"),
    ])
    def test_presets(self, factory, direction, cardinality):
        rel = factory("HAS")
        assert rel.type == "HAS"
        assert rel.direction == direction
        assert rel.cardinality == cardinality

    def test_traverse(self):
        traversal = Relationships.traverse({"id": 1}, "FOLLOWS", depth=3, filter="n.active")
        assert isinstance(traversal, Traversal)
        assert traversal.start == {"id": 1}
        assert traversal.relationship == "FOLLOWS"
        assert traversal.depth == 3
        assert traversal.direction == "outgoing"
        assert traversal.filter == "n.active"

    def test_traverse_depth_must_be_positive(self):
        with pytest.raises(ValidationError):
            Relationships.traverse(1, "FOLLOWS", depth=0)


class TestBuildQuery:
    def test_default(self):
        assert Relationships.build_query("User", "FOLLOWS", "User") == (
            "MATCH (from:User)-[rel:FOLLOWS]->(to:User) RETURN from, rel, to"
        )

    def test_custom_variables_and_direction(self):
        query = Relationships.build_query("Post", "WROTE", "User", "p", "w", "u", direction="incoming")
        assert query == "MATCH (p:Post)<-[w:WROTE]-(u:User) RETURN p, w, u"
