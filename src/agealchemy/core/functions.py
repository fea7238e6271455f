# src/agealchemy/core/functions.py
"""
Cypher function-call expression helpers.

Small string builders for aggregation, list, string, path and type
functions, grouped in namespaces the way they are grouped in Cypher docs:

    >>> aggregation.count("n")
    'count(n)'
    >>> list_ops.comprehension("x", "n.scores", filter="x > 10", map="x * 2")
    '[x IN n.scores WHERE x > 10 | x * 2]'
"""

from __future__ import annotations

from typing import Any, Iterable, Optional

from agealchemy.core.escaping import format_value


def _call(name: str, *args: Any) -> str:
    return f"{name}({', '.join(str(arg) for arg in args)})"


class AggregationFunctions:
    """Aggregating functions."""

    @staticmethod
    def count(expression: str = "*") -> str:
        return _call("count", expression)

    @staticmethod
    def sum(expression: str) -> str:
        return _call("sum", expression)

    @staticmethod
    def avg(expression: str) -> str:
        return _call("avg", expression)

    @staticmethod
    def min(expression: str) -> str:
        return _call("min", expression)

    @staticmethod
    def max(expression: str) -> str:
        return _call("max", expression)

    @staticmethod
    def collect(expression: str) -> str:
        return _call("collect", expression)


class ListOperations:
    """List literals, comprehensions and ranges."""

    @staticmethod
    def create(items: Iterable[Any]) -> str:
        """List literal with each item formatted as a property value."""
        return "[" + ", ".join(format_value(item) for item in items) + "]"

    @staticmethod
    def comprehension(
        variable: str,
        source: str,
        filter: Optional[str] = None,
        map: Optional[str] = None
    ) -> str:
        """Build `[variable IN source WHERE filter | map]`."""
        expression = f"{variable} IN {source}"
        if filter:
            expression += f" WHERE {filter}"
        if map:
            expression += f" | {map}"
        return f"[{expression}]"

    @staticmethod
    def range(start: int, end: int, step: Optional[int] = None) -> str:
        if step is None:
            return _call("range", start, end)
        return _call("range", start, end, step)


class StringFunctions:
    """String functions."""

    @staticmethod
    def to_lower(expression: str) -> str:
        return _call("toLower", expression)

    @staticmethod
    def to_upper(expression: str) -> str:
        return _call("toUpper", expression)

    @staticmethod
    def trim(expression: str) -> str:
        return _call("trim", expression)

    @staticmethod
    def substring(expression: str, start: int, length: Optional[int] = None) -> str:
        if length is None:
            return _call("substring", expression, start)
        return _call("substring", expression, start, length)

    @staticmethod
    def concat(*expressions: str) -> str:
        """Join expressions with the `+` operator."""
        return " + ".join(expressions)


class PathFunctions:
    """Path inspection and shortest-path helpers."""

    @staticmethod
    def length(path_var: str) -> str:
        return _call("length", path_var)

    @staticmethod
    def nodes(path_var: str) -> str:
        return _call("nodes", path_var)

    @staticmethod
    def relationships(path_var: str) -> str:
        return _call("relationships", path_var)

    @staticmethod
    def shortest_path(pattern: str) -> str:
        return _call("shortestPath", pattern)

    @staticmethod
    def all_shortest_paths(pattern: str) -> str:
        return _call("allShortestPaths", pattern)


class TypeFunctions:
    """Type and introspection functions."""

    @staticmethod
    def type(expression: str) -> str:
        return _call("type", expression)

    @staticmethod
    def labels(node_var: str) -> str:
        return _call("labels", node_var)

    @staticmethod
    def properties(expression: str) -> str:
        return _call("properties", expression)


aggregation = AggregationFunctions()
list_ops = ListOperations()
string = StringFunctions()
path_functions = PathFunctions()
type_functions = TypeFunctions()
