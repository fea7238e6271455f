# src/agealchemy/core/escaping.py
"""
AGEAlchemy Escaping & Fragment Primitives

Pure string transforms used by every layer that emits Cypher text:
literal and identifier escaping, property-map formatting, and the
vertex/edge/path pattern fragments.

None of these functions validate identifiers. Labels, variables and graph
names are embedded verbatim; callers check them with `is_valid_label` /
`is_valid_graph_name` (or quote them with `escape_name`) before use.
"""

from __future__ import annotations

import json
import re
from enum import Enum
from typing import Any, Mapping, Optional, Union


IDENTIFIER_PATTERN = re.compile(r'[A-Za-z_][A-Za-z0-9_]*')


class EdgeDirection(str, Enum):
    """Arrow direction of an edge pattern."""

    LEFT = "left"
    RIGHT = "right"
    BOTH = "both"


# =============================================================================
# LITERALS AND IDENTIFIERS
# =============================================================================

def escape_literal(value: str, quote: str = "'") -> str:
    """
    Escape a string and wrap it in the given quote character.

    Backslashes are escaped before the delimiter so that the backslash added
    in front of a quote is never escaped a second time.

    Args:
        value: Raw string value
        quote: Literal delimiter, `'` or `"`

    Returns:
        Quoted literal, e.g. `'It\\'s'`
    """
    escaped = value.replace("\\", "\\\\").replace(quote, "\\" + quote)
    return f"{quote}{escaped}{quote}"


def escape_string(value: str) -> str:
    """Escape a value as a single-quoted Cypher string literal."""
    return escape_literal(value, "'")


def escape_name(name: str) -> str:
    """
    Quote a property or variable name with backticks.

    Embedded backticks are doubled. Never applied implicitly to labels or
    graph names.
    """
    return "`" + name.replace("`", "``") + "`"


def is_valid_identifier(name: Any) -> bool:
    """Check that the whole name matches `[A-Za-z_][A-Za-z0-9_]*`."""
    return isinstance(name, str) and IDENTIFIER_PATTERN.fullmatch(name) is not None


def is_valid_graph_name(name: Any) -> bool:
    """Graph names must be plain PostgreSQL identifiers."""
    return is_valid_identifier(name)


def is_valid_label(label: Any) -> bool:
    """Vertex and edge labels follow the same identifier grammar."""
    return is_valid_identifier(label)


# =============================================================================
# PROPERTY VALUES
# =============================================================================

def _to_json(value: Any) -> str:
    # Compact separators match structural JSON serialization of the value.
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False, default=str)


def format_value(value: Any) -> str:
    """
    Format a single property value as Cypher text.

    Strings become double-quoted escaped literals. Booleans, null, numbers,
    lists and maps are rendered as JSON. Any other object falls back to its
    JSON form (using `str()` for unknown leaves), so this never raises.

    Args:
        value: Property value

    Returns:
        Cypher literal text
    """
    if isinstance(value, str):
        return escape_literal(value, '"')
    if isinstance(value, (list, tuple)):
        value = list(value)
    elif isinstance(value, Mapping):
        value = dict(value)
    try:
        return _to_json(value)
    except (TypeError, ValueError):
        return _to_json(str(value))


def format_properties(properties: Optional[Mapping[str, Any]]) -> str:
    """
    Render a property map as `{key1: v1, key2: v2}`.

    Keys keep insertion order and are emitted unquoted. An empty or missing
    map renders `{}`.

    Example:
        >>> format_properties({"name": "John", "age": 30})
        '{name: "John", age: 30}'
    """
    if not properties:
        return "{}"
    pairs = ", ".join(f"{key}: {format_value(value)}" for key, value in properties.items())
    return "{" + pairs + "}"


# =============================================================================
# PATTERN FRAGMENTS
# =============================================================================

def _element_body(
    variable: str,
    label: Optional[str],
    properties: Optional[Mapping[str, Any]]
) -> str:
    body = variable or ""
    if label:
        body += f":{label}"
    if properties is not None:
        body += f" {format_properties(properties)}"
    return body


def vertex(
    variable: str,
    label: Optional[str] = None,
    properties: Optional[Mapping[str, Any]] = None
) -> str:
    """
    Build a vertex pattern.

    Example:
        >>> vertex("n", "Person")
        '(n:Person)'
        >>> vertex("n", "Person", {"name": "John"})
        '(n:Person {name: "John"})'
    """
    return f"({_element_body(variable, label, properties)})"


def edge(
    variable: str,
    label: Optional[str] = None,
    properties: Optional[Mapping[str, Any]] = None,
    direction: Union[EdgeDirection, str] = EdgeDirection.RIGHT
) -> str:
    """
    Build an edge pattern with its arrow.

    Args:
        variable: Edge variable name
        label: Edge label
        properties: Edge property map
        direction: left (`<-[...]-`), both (`-[...]-`) or right (`-[...]->`)

    Returns:
        Edge pattern string
    """
    body = _element_body(variable, label, properties)
    direction = getattr(direction, "value", direction)

    if direction == EdgeDirection.LEFT.value:
        return f"<-[{body}]-"
    if direction == EdgeDirection.BOTH.value:
        return f"-[{body}]-"
    return f"-[{body}]->"


def path(*elements: str) -> str:
    """Concatenate pre-built vertex/edge fragments verbatim."""
    return "".join(elements)
