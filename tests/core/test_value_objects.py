# tests/core/test_value_objects.py
"""
Tests for the Pydantic GraphVertex, GraphEdge and GraphPath models.
"""

import pytest
from pydantic import ValidationError

from agealchemy.core.graph_edge import GraphEdge
from agealchemy.core.graph_path import GraphPath
from agealchemy.core.graph_vertex import GraphVertex


class TestGraphVertex:
    """Test the Pydantic GraphVertex model."""

    def test_vertex_creation(self):
        vertex = GraphVertex.create("Person", {"name": "Alice", "age": 30})

        assert vertex.id is None
        assert vertex.label == "Person"
        assert vertex.get_property("name") == "Alice"
        assert vertex.get_property("missing", "default") == "default"
        assert vertex.has_property("age")
        assert vertex.property_count == 2

    def test_label_is_stripped(self):
        assert GraphVertex(label="  Person ").label == "Person"

    def test_validation_errors(self):
        with pytest.raises(ValidationError):
            GraphVertex(label="")
        with pytest.raises(ValidationError):
            GraphVertex(label="   ")
        with pytest.raises(ValidationError):
            GraphVertex(label="A", properties={1: "x"})

    def test_none_properties(self):
        assert GraphVertex(label="A", properties=None).properties == {}

    def test_to_pattern(self):
        assert GraphVertex.create("Person", {"name": "Ann"}).to_pattern("p") == '(p:Person {name: "Ann"})'
        assert GraphVertex.create("Person").to_pattern() == "(n:Person)"

    def test_to_dict(self):
        data = GraphVertex(id=7, label="A").to_dict()
        assert data == {"id": 7, "label": "A", "properties": {}, "_type": "vertex"}


class TestGraphEdge:
    """Test the Pydantic GraphEdge model."""

    def test_edge_creation(self):
        edge = GraphEdge.create("KNOWS", 1, 2, {"since": 2020})

        assert edge.label == "KNOWS"
        assert edge.start_id == 1
        assert edge.end_id == 2
        assert edge.get_property("since") == 2020
        assert edge.property_count == 1
        assert not edge.is_self_loop

    def test_self_loop(self):
        assert GraphEdge.create("SELF", 5, 5).is_self_loop

    def test_reverse(self):
        edge = GraphEdge(id=10, label="KNOWS", start_id=1, end_id=2, properties={"w": 1})
        reversed_edge = edge.reverse()

        assert reversed_edge.id is None
        assert reversed_edge.start_id == 2
        assert reversed_edge.end_id == 1
        assert reversed_edge.properties == {"w": 1}
        assert reversed_edge.properties is not edge.properties

    def test_validation_errors(self):
        with pytest.raises(ValidationError):
            GraphEdge(label="", start_id=1, end_id=2)
        with pytest.raises(ValidationError):
            GraphEdge(label="R", start_id=1)

    def test_to_pattern(self):
        edge = GraphEdge.create("KNOWS", 1, 2)
        assert edge.to_pattern() == "-[r:KNOWS]->"
        assert edge.to_pattern("k", "left") == "<-[k:KNOWS]-"

    def test_to_dict(self):
        assert GraphEdge.create("R", 1, 2).to_dict()["_type"] == "edge"


class TestGraphPath:
    """Test the Pydantic GraphPath model."""

    @pytest.fixture
    def elements(self):
        a = GraphVertex(id=1, label="A")
        b = GraphVertex(id=2, label="B")
        r = GraphEdge(id=3, label="R", start_id=1, end_id=2)
        return a, r, b

    def test_from_elements(self, elements):
        path = GraphPath.from_elements(elements)
        assert path.length == 1
        assert path.start.id == 1
        assert path.end.id == 2

    def test_from_dicts(self):
        path = GraphPath.from_elements([
            {"id": 1, "label": "A", "properties": {}},
            {"id": 3, "label": "R", "start_id": 1, "end_id": 2, "properties": {}},
            {"id": 2, "label": "B", "properties": {}},
        ])
        assert isinstance(path.edges[0], GraphEdge)
        assert len(path.vertices) == 2

    def test_empty_path(self):
        path = GraphPath.create()
        assert path.length == 0
        assert path.start is None
        assert path.end is None

    def test_shape_is_validated(self, elements):
        a, r, _ = elements
        with pytest.raises(ValidationError):
            GraphPath.create([a], [r, r])

    def test_to_dict(self, elements):
        data = GraphPath.from_elements(elements).to_dict()
        assert data["_type"] == "path"
        assert [v["id"] for v in data["vertices"]] == [1, 2]
