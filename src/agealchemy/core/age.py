# src/agealchemy/core/age.py
"""
AGE host-query wrapper and result helpers.

`build_age_query` embeds a Cypher string in the SQL call the AGE extension
executes. The graph name is inserted as-is: validate it with
`is_valid_graph_name` before calling.
"""

from __future__ import annotations

import json
import random
import string
import time
from typing import Any, Dict, List, Mapping, Union

from agealchemy.core.agtype import parse_agtype
from agealchemy.core.graph_edge import GraphEdge
from agealchemy.core.graph_path import GraphPath
from agealchemy.core.graph_vertex import GraphVertex


AGE_QUERY_TEMPLATE = (
    "SELECT * FROM ag_catalog.cypher('{graph_name}', $$ {cypher} $$) "
    "as (result ag_catalog.agtype);"
)


def build_age_query(graph_name: str, cypher: str) -> str:
    """
    Wrap Cypher text in an `ag_catalog.cypher()` call.

    Every single quote in the Cypher text is doubled so the text stays inert
    if it is later placed inside a single-quoted SQL or shell string. The
    Cypher itself is not validated.

    Args:
        graph_name: Target graph (must already be a valid identifier)
        cypher: Cypher query text

    Returns:
        SQL statement returning one `result` agtype column
    """
    escaped = cypher.replace("'", "''")
    return AGE_QUERY_TEMPLATE.format(graph_name=graph_name, cypher=escaped)


# =============================================================================
# RESULT PARSING
# =============================================================================

def parse_age_result(results: Any) -> List[Any]:
    """
    Decode raw AGE rows.

    Args:
        results: Sequence of agtype values, JSON text or decoded objects

    Returns:
        List of decoded values; `[]` when `results` is not a list or tuple
    """
    if not isinstance(results, (list, tuple)):
        return []
    return [parse_agtype(row) for row in results]


def _collect(results: Any, kind: type) -> List[Any]:
    found = []
    for item in parse_age_result(results):
        if isinstance(item, kind):
            found.append(item)
        elif isinstance(item, Mapping):
            found.extend(value for value in item.values() if isinstance(value, kind))
    return found


def extract_vertices(results: Any) -> List[GraphVertex]:
    """Vertices found in the rows, top level or one level inside a mapping row."""
    return _collect(results, GraphVertex)


def extract_edges(results: Any) -> List[GraphEdge]:
    """Edges found in the rows, top level or one level inside a mapping row."""
    return _collect(results, GraphEdge)


def extract_paths(results: Any) -> List[GraphPath]:
    """Paths found at the top level of the rows."""
    return [item for item in parse_age_result(results) if isinstance(item, GraphPath)]


# =============================================================================
# PROPERTY AND ID HELPERS
# =============================================================================

def to_age_properties(properties: Any) -> str:
    """
    Render a property map with every value JSON-encoded.

    Unlike `format_properties`, strings are emitted as JSON strings.
    Non-mapping input renders `{}`.
    """
    if not isinstance(properties, Mapping):
        return "{}"
    pairs = ", ".join(
        f"{key}: {json.dumps(value, ensure_ascii=False, default=str)}"
        for key, value in properties.items()
    )
    return "{" + pairs + "}"


def from_age_properties(properties: Union[str, Mapping, None]) -> Dict[str, Any]:
    """Read properties from a mapping or JSON text; anything else gives `{}`."""
    if isinstance(properties, Mapping):
        return dict(properties)
    if isinstance(properties, str):
        try:
            decoded = json.loads(properties)
        except json.JSONDecodeError:
            return {}
        return decoded if isinstance(decoded, dict) else {}
    return {}


def format_vertex_id(vertex_id: Union[int, str]) -> str:
    return str(vertex_id)


def format_edge_id(edge_id: Union[int, str]) -> str:
    return str(edge_id)


_BASE36 = string.digits + string.ascii_lowercase


def generate_variable_name(prefix: str = "var") -> str:
    """Unique-enough Cypher variable name: `prefix_<millis>_<9 chars>`."""
    suffix = "".join(random.choice(_BASE36) for _ in range(9))
    return f"{prefix}_{int(time.time() * 1000)}_{suffix}"
