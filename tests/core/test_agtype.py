# tests/core/test_agtype.py

import json

import pytest

from agealchemy.core.agtype import parse_agtype, stringify_agtype
from agealchemy.core.graph_edge import GraphEdge
from agealchemy.core.graph_path import GraphPath
from agealchemy.core.graph_vertex import GraphVertex


class TestParseAgtype:
    """Decoding of agtype column values."""

    def test_none(self):
        assert parse_agtype(None) is None

    @pytest.mark.parametrize("text,expected", [
        ("1", 1),
        ("2.5", 2.5),
        ('"hello"', "hello"),
        ("false", False),
        ("[1, 2]", [1, 2]),
        ('{"a": 1}', {"a": 1}),
    ])
    def test_plain_values(self, text, expected):
        assert parse_agtype(text) == expected

    def test_bytes(self):
        assert parse_agtype(b"7") == 7

    def test_vertex(self):
        value = parse_agtype('{"id": 1, "label": "Person", "properties": {"name": "Ann"}}::vertex')
        assert isinstance(value, GraphVertex)
        assert value.id == 1
        assert value.properties == {"name": "Ann"}

    def test_edge(self):
        value = parse_agtype('{"id": 9, "label": "KNOWS", "start_id": 1, "end_id": 2, "properties": {"w": 1}}::edge')
        assert isinstance(value, GraphEdge)
        assert (value.start_id, value.end_id) == (1, 2)

    def test_annotation_inside_string_is_kept(self):
        value = parse_agtype('{"id": 1, "label": "Note", "properties": {"text": "a::vertex b"}}::vertex')
        assert value.get_property("text") == "a::vertex b"

    def test_list_of_vertices(self):
        value = parse_agtype(
            '[{"id": 1, "label": "A", "properties": {}}::vertex, {"id": 2, "label": "B", "properties": {}}::vertex]'
        )
        assert [v.label for v in value] == ["A", "B"]

    def test_path(self):
        value = parse_agtype(
            '[{"id": 1, "label": "A", "properties": {}}::vertex, '
            '{"id": 5, "label": "R", "start_id": 1, "end_id": 2, "properties": {}}::edge, '
            '{"id": 2, "label": "B", "properties": {}}::vertex]::path'
        )
        assert isinstance(value, GraphPath)
        assert value.start.label == "A"
        assert value.end.label == "B"
        assert value.length == 1

    def test_invalid_json_is_returned_unchanged(self):
        assert parse_agtype("not json at all") == "not json at all"

    def test_decoded_dicts(self):
        assert isinstance(parse_agtype({"id": 1, "label": "A", "properties": {}}), GraphVertex)
        assert isinstance(parse_agtype({"_type": "edge", "label": "R", "start_id": 1, "end_id": 2}), GraphEdge)
        assert parse_agtype({"x": 1}) == {"x": 1}

    def test_tagged_path_dict(self):
        path = GraphPath.create(
            [GraphVertex(id=1, label="A"), GraphVertex(id=2, label="B")],
            [GraphEdge(id=3, label="R", start_id=1, end_id=2)],
        )
        assert isinstance(parse_agtype(path.to_dict()), GraphPath)

    def test_invalid_element_stays_dict(self):
        broken = {"_type": "vertex", "label": ""}
        assert parse_agtype(broken) == broken

    def test_elements_inside_map_values(self):
        value = parse_agtype('{"person": {"id": 1, "label": "Person", "properties": {"name": "A"}}::vertex, "n": 3}')
        assert isinstance(value["person"], GraphVertex)
        assert value["person"].get_property("name") == "A"
        assert value["n"] == 3


class TestStringifyAgtype:
    def test_value_objects(self):
        vertex = GraphVertex(id=1, label="A", properties={"x": 1})
        decoded = json.loads(stringify_agtype(vertex))
        assert decoded["_type"] == "vertex"
        assert decoded["properties"] == {"x": 1}

    def test_containers(self):
        assert json.loads(stringify_agtype({"a": [1, 2]})) == {"a": [1, 2]}

    def test_scalars(self):
        assert stringify_agtype(5) == "5"
        assert stringify_agtype("x") == "x"
