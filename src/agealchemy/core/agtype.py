# src/agealchemy/core/agtype.py
"""
Decoding and encoding of AGE's `agtype` values.

AGE returns graph elements as JSON text followed by a type annotation:

    {"id": 1, "label": "Person", "properties": {...}}::vertex
    {"id": 2, "label": "KNOWS", "start_id": 1, "end_id": 3, "properties": {}}::edge
    [{...}::vertex, {...}::edge, {...}::vertex]::path

Annotated values are turned into GraphVertex / GraphEdge / GraphPath objects;
everything else is decoded as plain JSON.
"""

from __future__ import annotations

import json
import re
from typing import Any

from pydantic import BaseModel, ValidationError

from agealchemy.core.graph_edge import GraphEdge
from agealchemy.core.graph_path import GraphPath
from agealchemy.core.graph_vertex import GraphVertex


# Only annotations that directly follow a closing brace/bracket are stripped,
# so string properties that happen to contain "::vertex" survive.
_ANNOTATION = re.compile(r'(?<=[}\]])::(vertex|edge|path)\b')


def _element(obj: Any) -> Any:
    """Convert decoded AGE element dicts, including those nested in maps and lists."""
    if isinstance(obj, list):
        return [_element(item) for item in obj]
    if not isinstance(obj, dict):
        return obj

    tag = obj.get("_type")
    try:
        if tag == "path":
            return GraphPath.from_elements(_element(obj.get("vertices", [])) + _element(obj.get("edges", [])))
        if tag == "edge" or ("start_id" in obj and "end_id" in obj and "label" in obj):
            return GraphEdge.model_validate({k: v for k, v in obj.items() if k != "_type"})
        if tag == "vertex" or ({"id", "label", "properties"} <= obj.keys()):
            return GraphVertex.model_validate({k: v for k, v in obj.items() if k != "_type"})
    except ValidationError:
        return obj
    return {key: _element(value) for key, value in obj.items()}


def parse_agtype(value: Any) -> Any:
    """
    Parse one agtype value into Python.

    Args:
        value: Raw column value (text from the driver, or already decoded)

    Returns:
        GraphVertex / GraphEdge / GraphPath for annotated elements, decoded
        JSON for plain agtype values, or the input unchanged when it is not
        valid JSON.
    """
    if value is None:
        return None
    if not isinstance(value, (str, bytes)):
        return _element(value)

    text = value.decode() if isinstance(value, bytes) else value
    stripped = text.strip()
    annotations = _ANNOTATION.findall(stripped)
    is_path = stripped.endswith("::path")

    try:
        decoded = json.loads(_ANNOTATION.sub("", stripped))
    except json.JSONDecodeError:
        return value

    if is_path and isinstance(decoded, list):
        return GraphPath.from_elements(decoded)
    if annotations or isinstance(decoded, dict):
        return _element(decoded)
    return decoded


def stringify_agtype(value: Any) -> str:
    """
    Render a Python value as agtype text.

    Mappings and lists become JSON; value objects are rendered from
    `to_dict()`; anything else goes through `str()`.
    """
    if isinstance(value, BaseModel) and hasattr(value, "to_dict"):
        return json.dumps(value.to_dict(), default=str)
    if isinstance(value, (dict, list)):
        return json.dumps(value, default=str)
    return str(value)
