# src/agealchemy/core/__init__.py
"""
AGEAlchemy Core Module

Pure, I/O-free building blocks: escaping primitives, pattern fragments, the
Cypher query builder, the AGE host-query wrapper and the graph value objects
decoded from query results.
"""

from agealchemy.core.escaping import (
    EdgeDirection,
    escape_literal,
    escape_string,
    escape_name,
    format_value,
    format_properties,
    vertex,
    edge,
    path,
    is_valid_identifier,
    is_valid_graph_name,
    is_valid_label,
)
from agealchemy.core.builder import (
    Clause,
    Fragment,
    BuilderState,
    CypherQueryBuilder,
    render,
    query_builder,
    create_edge_query,
)
from agealchemy.core.age import (
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
from agealchemy.core.functions import (
    AggregationFunctions,
    ListOperations,
    StringFunctions,
    PathFunctions,
    TypeFunctions,
    aggregation,
    list_ops,
    string,
    path_functions,
    type_functions,
)
from agealchemy.core.agtype import parse_agtype, stringify_agtype
from agealchemy.core.graph_vertex import GraphVertex
from agealchemy.core.graph_edge import GraphEdge
from agealchemy.core.graph_path import GraphPath

__all__ = [
    # Primitives
    "EdgeDirection",
    "escape_literal",
    "escape_string",
    "escape_name",
    "format_value",
    "format_properties",
    "vertex",
    "edge",
    "path",
    "is_valid_identifier",
    "is_valid_graph_name",
    "is_valid_label",

    # Builder
    "Clause",
    "Fragment",
    "BuilderState",
    "CypherQueryBuilder",
    "render",
    "query_builder",
    "create_edge_query",

    # Host query
    "build_age_query",
    "parse_age_result",
    "extract_vertices",
    "extract_edges",
    "extract_paths",
    "to_age_properties",
    "from_age_properties",
    "format_vertex_id",
    "format_edge_id",
    "generate_variable_name",

    # Functions
    "AggregationFunctions",
    "ListOperations",
    "StringFunctions",
    "PathFunctions",
    "TypeFunctions",
    "aggregation",
    "list_ops",
    "string",
    "path_functions",
    "type_functions",

    # Values
    "parse_agtype",
    "stringify_agtype",
    "GraphVertex",
    "GraphEdge",
    "GraphPath",
]
