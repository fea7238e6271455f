# src/agealchemy/core/builder.py
"""
AGEAlchemy Cypher Query Builder

Clause additions are recorded as immutable `Fragment` entries in an ordered
log (`BuilderState`). Serialization is the pure function `render(state)`,
which emits clauses in fixed Cypher order no matter in which order they were
added. `CypherQueryBuilder` is the chainable front end over that log.

Example:
    ```python
    query = (
        query_builder()
        .match("(n:Person)")
        .where("n.age > 25")
        .return_("n")
        .order_by("n.name")
        .limit(10)
        .build()
    )
    # MATCH (n:Person) WHERE n.age > 25 RETURN n ORDER BY n.name LIMIT 10
    ```
"""

from __future__ import annotations

from enum import Enum
from typing import Any, List, Mapping, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict

from agealchemy.core.escaping import format_properties


class Clause(str, Enum):
    """Kinds of clause a fragment can contribute to."""

    MATCH = "MATCH"
    OPTIONAL_MATCH = "OPTIONAL MATCH"
    MERGE = "MERGE"
    CREATE = "CREATE"
    WHERE = "WHERE"
    WITH = "WITH"
    SET = "SET"
    REMOVE = "REMOVE"
    DELETE = "DELETE"
    UNWIND = "UNWIND"
    RETURN = "RETURN"
    ORDER_BY = "ORDER BY"
    SKIP = "SKIP"
    LIMIT = "LIMIT"
    UNION = "UNION"


class Fragment(BaseModel):
    """
    One clause contribution.

    `alias` is only used by UNWIND; `all` only by UNION.
    """

    model_config = ConfigDict(frozen=True)

    clause: Clause
    text: str
    alias: Optional[str] = None
    all: bool = False


class BuilderState(BaseModel):
    """
    Immutable snapshot of everything a builder has accumulated.

    `skip` and `limit` hold the value of the last call (None when never set);
    `distinct` only affects the RETURN clause.
    """

    model_config = ConfigDict(frozen=True)

    fragments: Tuple[Fragment, ...] = ()
    skip: Optional[int] = None
    limit: Optional[int] = None
    distinct: bool = False

    def append(self, fragment: Fragment) -> BuilderState:
        """Return a new state with `fragment` added at the end of the log."""
        return self.model_copy(update={"fragments": self.fragments + (fragment,)})

    def of(self, clause: Clause) -> List[Fragment]:
        """Fragments of one clause kind, in insertion order."""
        return [fragment for fragment in self.fragments if fragment.clause is clause]


# Clauses whose entries share a single comma-separated segment
_JOINED_CLAUSES = (
    Clause.CREATE,
    Clause.WHERE,
    Clause.WITH,
    Clause.SET,
    Clause.REMOVE,
    Clause.DELETE,
)


def _joined(state: BuilderState, clause: Clause) -> Optional[str]:
    texts = [fragment.text for fragment in state.of(clause)]
    if not texts:
        return None
    separator = " AND " if clause is Clause.WHERE else ", "
    return f"{clause.value} {separator.join(texts)}"


def render(state: BuilderState) -> str:
    """
    Serialize a builder state into a Cypher query string.

    Clause order:
    UNWIND*, MATCH, OPTIONAL MATCH*, MERGE*, CREATE, WHERE, WITH, SET,
    REMOVE, DELETE, RETURN, ORDER BY, SKIP, LIMIT, then each UNION.
    Entries marked `*` produce one segment per call; the others are joined
    into a single segment. Empty clauses are omitted.

    Args:
        state: Builder state to serialize

    Returns:
        Query text (empty string for an empty state)
    """
    segments: List[str] = []

    for fragment in state.of(Clause.UNWIND):
        segments.append(f"UNWIND {fragment.text} AS {fragment.alias}")

    matches = [fragment.text for fragment in state.of(Clause.MATCH)]
    if matches:
        segments.append(f"MATCH {', '.join(matches)}")

    for clause in (Clause.OPTIONAL_MATCH, Clause.MERGE):
        for fragment in state.of(clause):
            segments.append(f"{clause.value} {fragment.text}")

    for clause in _JOINED_CLAUSES:
        segment = _joined(state, clause)
        if segment:
            segments.append(segment)

    returns = [fragment.text for fragment in state.of(Clause.RETURN)]
    if returns:
        keyword = "RETURN DISTINCT" if state.distinct else "RETURN"
        segments.append(f"{keyword} {', '.join(returns)}")

    order_by = [fragment.text for fragment in state.of(Clause.ORDER_BY)]
    if order_by:
        segments.append(f"ORDER BY {', '.join(order_by)}")

    if state.skip is not None:
        segments.append(f"SKIP {state.skip}")

    if state.limit is not None:
        segments.append(f"LIMIT {state.limit}")

    query = " ".join(segments)

    for fragment in state.of(Clause.UNION):
        keyword = "UNION ALL" if fragment.all else "UNION"
        query += f" {keyword} {fragment.text}"

    return query


class CypherQueryBuilder:
    """
    Chainable Cypher query builder.

    Every clause method records a fragment and returns the same builder.
    `build()` never modifies the accumulated state, so it can be called at any
    point, any number of times. Use a new builder per logical query.

    `with_` and `return_` carry a trailing underscore because `with` and
    `return` are Python keywords.
    """

    def __init__(self, state: Optional[BuilderState] = None):
        self._state: BuilderState = state if state is not None else BuilderState()

    @property
    def state(self) -> BuilderState:
        """Current immutable snapshot of the accumulated clauses."""
        return self._state

    def _add(self, clause: Clause, text: str, **extra) -> CypherQueryBuilder:
        self._state = self._state.append(Fragment(clause=clause, text=text, **extra))
        return self

    # =========================================================================
    # READING CLAUSES
    # =========================================================================

    def match(self, pattern: str) -> CypherQueryBuilder:
        """Add a MATCH pattern. Multiple patterns share one MATCH clause."""
        return self._add(Clause.MATCH, pattern)

    def optional_match(self, pattern: str) -> CypherQueryBuilder:
        """Add an OPTIONAL MATCH clause (one clause per call)."""
        return self._add(Clause.OPTIONAL_MATCH, pattern)

    def where(self, condition: str) -> CypherQueryBuilder:
        """
        Add a WHERE condition.

        Conditions are AND-ed together. Pass an OR expression as a single
        pre-built string, e.g. `"(n.age < 18 OR n.age > 65)"`.
        """
        return self._add(Clause.WHERE, condition)

    def unwind(self, expression: str, alias: str) -> CypherQueryBuilder:
        """Add `UNWIND expression AS alias` (one clause per call)."""
        return self._add(Clause.UNWIND, expression, alias=alias)

    def with_(self, expression: str) -> CypherQueryBuilder:
        """Add a WITH projection."""
        return self._add(Clause.WITH, expression)

    # =========================================================================
    # WRITING CLAUSES
    # =========================================================================

    def create(self, pattern: str) -> CypherQueryBuilder:
        """Add a CREATE pattern."""
        return self._add(Clause.CREATE, pattern)

    def merge(self, pattern: str) -> CypherQueryBuilder:
        """Add a MERGE clause (one clause per call)."""
        return self._add(Clause.MERGE, pattern)

    def set(self, assignment: str) -> CypherQueryBuilder:
        """Add a SET assignment, e.g. `n.name = "Bob"`."""
        return self._add(Clause.SET, assignment)

    def remove(self, target: str) -> CypherQueryBuilder:
        """Add a REMOVE target, e.g. `n.nickname` or `n:Temp`."""
        return self._add(Clause.REMOVE, target)

    def delete(self, target: str) -> CypherQueryBuilder:
        """Add a DELETE target."""
        return self._add(Clause.DELETE, target)

    # =========================================================================
    # PROJECTION AND PAGING
    # =========================================================================

    def return_(self, expression: str) -> CypherQueryBuilder:
        """Add a RETURN expression."""
        return self._add(Clause.RETURN, expression)

    def distinct(self) -> CypherQueryBuilder:
        """Mark the RETURN clause as DISTINCT."""
        self._state = self._state.model_copy(update={"distinct": True})
        return self

    def order_by(self, expression: str) -> CypherQueryBuilder:
        """Add an ORDER BY expression, e.g. `n.name DESC`."""
        return self._add(Clause.ORDER_BY, expression)

    def skip(self, count: int) -> CypherQueryBuilder:
        """Set SKIP. The last call wins."""
        self._state = self._state.model_copy(update={"skip": count})
        return self

    def limit(self, count: int) -> CypherQueryBuilder:
        """Set LIMIT. The last call wins."""
        self._state = self._state.model_copy(update={"limit": count})
        return self

    def union(
        self,
        query: Union[CypherQueryBuilder, str],
        all: bool = False
    ) -> CypherQueryBuilder:
        """
        Append a UNION sub-query.

        Args:
            query: Query text or another builder. A builder is serialized
                right away; later changes to it are not picked up.
            all: Use `UNION ALL` instead of `UNION`

        Returns:
            Query builder for chaining
        """
        text = query.build() if isinstance(query, CypherQueryBuilder) else query
        return self._add(Clause.UNION, text, all=all)

    # =========================================================================
    # OUTPUT
    # =========================================================================

    def build(self) -> str:
        """Serialize the accumulated clauses. Has no side effects."""
        return render(self._state)

    def copy(self) -> CypherQueryBuilder:
        """Independent builder starting from the current state."""
        return CypherQueryBuilder(self._state)

    def __str__(self) -> str:
        return self.build()

    def __repr__(self) -> str:
        return f"CypherQueryBuilder({self.build()!r})"


def query_builder() -> CypherQueryBuilder:
    """Create a new, empty query builder."""
    return CypherQueryBuilder()


def create_edge_query(
    label: str,
    from_id: Union[int, str],
    to_id: Union[int, str],
    properties: Optional[Mapping[str, Any]] = None,
    variable: str = "r"
) -> str:
    """
    Cypher that links two existing vertices, found by graph id, with a new edge.

    The MATCH/WHERE part and the CREATE/RETURN part are rendered by separate
    builders, since a single builder places CREATE ahead of WHERE. Ids go
    through `int()`, so non-numeric ids raise ValueError.

    Example:
        ```python
        create_edge_query("KNOWS", 1, 2, {"since": 2020})
        # MATCH (a), (b) WHERE id(a) = 1 AND id(b) = 2
        #   CREATE (a)-[r:KNOWS {since: 2020}]->(b) RETURN r
        ```
    """
    lookup = (
        query_builder()
        .match("(a), (b)")
        .where(f"id(a) = {int(from_id)} AND id(b) = {int(to_id)}")
        .build()
    )
    creation = (
        query_builder()
        .create(f"(a)-[{variable}:{label} {format_properties(properties or {})}]->(b)")
        .return_(variable)
        .build()
    )
    return f"{lookup} {creation}"
