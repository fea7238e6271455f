# tests/core/test_age.py
"""
Tests for the AGE host-query wrapper and result helpers.
"""

import re

from agealchemy.core.age import (
    AGE_QUERY_TEMPLATE,
    build_age_query,
    parse_age_result,
    extract_vertices,
    extract_edges,
    extract_paths,
    to_age_properties,
    from_age_properties,
    format_vertex_id,
    format_edge_id,
    generate_variable_name,
)
from agealchemy.core.builder import query_builder
from agealchemy.core.graph_edge import GraphEdge
from agealchemy.core.graph_path import GraphPath
from agealchemy.core.graph_vertex import GraphVertex


VERTEX_TEXT = '{"id": 844424930131969, "label": "Person", "properties": {"name": "Alice"}}::vertex'
EDGE_TEXT = (
    '{"id": 1125899906842625, "label": "KNOWS", "end_id": 844424930131970, '
    '"start_id": 844424930131969, "properties": {}}::edge'
)


class TestBuildAgeQuery:
    def test_wraps_cypher(self):
        sql = build_age_query("my_graph", "MATCH (n) RETURN n")
        assert "ag_catalog.cypher" in sql
        assert "'my_graph'" in sql
        assert "MATCH (n) RETURN n" in sql

    def test_exact_format(self):
        sql = build_age_query("g", "RETURN 1")
        assert sql == "SELECT * FROM ag_catalog.cypher('g', $$ RETURN 1 $$) as (result ag_catalog.agtype);"
        assert sql == AGE_QUERY_TEMPLATE.format(graph_name="g", cypher="RETURN 1")

    def test_empty_cypher(self):
        assert build_age_query("g", "") == "SELECT * FROM ag_catalog.cypher('g', $$  $$) as (result ag_catalog.agtype);"

    def test_doubles_single_quotes(self):
        sql = build_age_query("g", "MATCH (n) WHERE n.name = 'John' RETURN n")
        assert "''John''" in sql
        assert "'John'" not in sql.replace("''John''", "")

    def test_builder_output_round_trips(self):
        cypher = query_builder().match("(n:Person)").where('n.name = "Bob"').return_("n").build()
        assert f"$$ {cypher} $$" in build_age_query("social", cypher)


class TestParseResults:
    def test_non_list_input(self):
        assert parse_age_result(None) == []
        assert parse_age_result("nope") == []
        assert parse_age_result({"a": 1}) == []

    def test_scalars(self):
        assert parse_age_result(["1", '"text"', "true", "null"]) == [1, "text", True, None]

    def test_vertex_and_edge_text(self):
        vertex, edge = parse_age_result([VERTEX_TEXT, EDGE_TEXT])
        assert isinstance(vertex, GraphVertex)
        assert vertex.get_property("name") == "Alice"
        assert isinstance(edge, GraphEdge)
        assert edge.start_id == 844424930131969

    def test_tuple_input(self):
        assert parse_age_result(("1", "2")) == [1, 2]

    def test_extract_vertices_and_edges(self):
        rows = [VERTEX_TEXT, EDGE_TEXT, "42"]
        assert [v.label for v in extract_vertices(rows)] == ["Person"]
        assert [e.label for e in extract_edges(rows)] == ["KNOWS"]

    def test_extract_from_mapping_rows(self):
        rows = [{"a": GraphVertex.create("Person"), "r": GraphEdge.create("KNOWS", 1, 2)}]
        assert len(extract_vertices(rows)) == 1
        assert len(extract_edges(rows)) == 1

    def test_extract_from_map_result_text(self):
        rows = ['{"person": {"id": 1, "label": "Person", "properties": {"name": "A"}}::vertex}']
        assert [v.get_property("name") for v in extract_vertices(rows)] == ["A"]

    def test_extract_from_decoded_tagged_rows(self):
        rows = [{
            "n": {"_type": "vertex", "id": 1, "label": "P", "properties": {}},
            "r": {"_type": "edge", "id": 5, "label": "R", "start_id": 1, "end_id": 2, "properties": {}},
        }]
        assert [v.label for v in extract_vertices(rows)] == ["P"]
        assert [e.id for e in extract_edges(rows)] == [5]

    def test_extract_paths(self):
        path_text = (
            '[{"id": 1, "label": "A", "properties": {}}::vertex, '
            '{"id": 3, "label": "R", "start_id": 1, "end_id": 2, "properties": {}}::edge, '
            '{"id": 2, "label": "B", "properties": {}}::vertex]::path'
        )
        paths = extract_paths([path_text, VERTEX_TEXT])
        assert len(paths) == 1
        assert isinstance(paths[0], GraphPath)
        assert paths[0].length == 1

    def test_extract_from_garbage(self):
        assert extract_vertices(None) == []
        assert extract_edges(42) == []


class TestPropertyHelpers:
    def test_to_age_properties_json_encodes_values(self):
        assert to_age_properties({"name": "John", "age": 30}) == '{name: "John", age: 30}'
        assert to_age_properties({"tags": ["a"]}) == '{tags: ["a"]}'

    def test_to_age_properties_non_mapping(self):
        assert to_age_properties(None) == "{}"
        assert to_age_properties([1, 2]) == "{}"

    def test_from_age_properties(self):
        assert from_age_properties({"a": 1}) == {"a": 1}
        assert from_age_properties('{"a": 1}') == {"a": 1}
        assert from_age_properties("not json") == {}
        assert from_age_properties("[1, 2]") == {}
        assert from_age_properties(None) == {}


class TestIdentifiers:
    def test_id_formatting(self):
        assert format_vertex_id(844424930131969) == "844424930131969"
        assert format_edge_id("12") == "12"

    def test_generate_variable_name(self):
        name = generate_variable_name()
        assert re.fullmatch(r"var_\d+_[0-9a-z]{9}", name)

    def test_generate_variable_name_prefix_and_uniqueness(self):
        names = {generate_variable_name("node") for _ in range(50)}
        assert len(names) == 50
        assert all(name.startswith("node_") for name in names)
