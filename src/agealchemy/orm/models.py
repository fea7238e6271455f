# src/agealchemy/orm/models.py
"""
AGEAlchemy GraphModel - label-scoped CRUD over an AGE graph

A GraphModel is bound to one label and one graph. Each operation builds its
Cypher with the query builder and escaping primitives and runs it through the
engine. There is no identity map or change tracking: methods return the
decoded vertices/edges as AGE reports them.

Example:
    ```python
    registry = ModelRegistry(engine, default_graph_name="social")

    class UserSchema(BaseModel):
        name: str = Field(min_length=1)
        age: int = Field(ge=0)

    User = registry.define("User", schema=UserSchema)
    alice = await User.create({"name": "Alice", "age": 30})
    adults = await User.find_all(where={"age": {"$gte": 18}}, order=[("name", "asc")])
    ```
"""

from __future__ import annotations

import inspect
import logging
from typing import Any, Callable, Dict, List, Literal, Mapping, Optional, Sequence, Type, Union

from pydantic import BaseModel

from agealchemy.core.builder import CypherQueryBuilder, create_edge_query, query_builder
from agealchemy.core.escaping import format_value, is_valid_label, vertex
from agealchemy.exceptions import ModelError
from agealchemy.orm.engine import GraphEngine

logger = logging.getLogger(__name__)

HOOK_TYPES = (
    "before_create",
    "after_create",
    "before_update",
    "after_update",
    "before_delete",
    "after_delete",
)

OPERATORS: Dict[str, str] = {
    "$gt": ">",
    "$gte": ">=",
    "$lt": "<",
    "$lte": "<=",
    "$ne": "<>",
    "$eq": "=",
    "$in": "IN",
    "$notIn": "NOT IN",
}

OrderSpec = Union[str, Sequence[Union[str, Sequence[str]]]]
Hook = Callable[..., Any]


def build_where_clause(where: Mapping[str, Any], var_name: str = "n") -> str:
    """
    Translate a `where` mapping into AND-ed Cypher conditions.

    `{"name": "Bob"}` -> `n.name = "Bob"`, `{"deleted_at": None}` ->
    `n.deleted_at IS NULL`, `{"age": {"$gt": 5}}` -> `n.age > 5`. Unknown
    operators fall back to `=`.
    """
    conditions: List[str] = []
    for key, value in where.items():
        if value is None:
            conditions.append(f"{var_name}.{key} IS NULL")
        elif isinstance(value, Mapping):
            for op, operand in value.items():
                operator = OPERATORS.get(op, "=")
                conditions.append(f"{var_name}.{key} {operator} {format_value(operand)}")
        else:
            conditions.append(f"{var_name}.{key} = {format_value(value)}")
    return " AND ".join(conditions)


def build_order_clause(order: OrderSpec, var_name: str = "n") -> str:
    """`"name"` or `[("age", "desc"), "name"]` -> `n.age DESC, n.name`."""
    if isinstance(order, str):
        return f"{var_name}.{order}"

    parts: List[str] = []
    for item in order:
        if isinstance(item, str):
            parts.append(f"{var_name}.{item}")
        elif len(item) == 2:
            field, direction = item
            parts.append(f"{var_name}.{field} {direction.upper()}")
    return ", ".join(parts)


class GraphModel:
    """
    CRUD operations for one vertex or edge label.

    Hooks are called with `(data, model)` and may be plain functions or
    coroutines.
    """

    def __init__(
        self,
        engine: GraphEngine,
        label: str,
        schema: Optional[Type[BaseModel]] = None,
        graph_name: Optional[str] = None,
        type: Literal["vertex", "edge"] = "vertex"
    ):
        if not is_valid_label(label):
            raise ValueError(f"Invalid label: {label!r}")
        if type not in ("vertex", "edge"):
            raise ValueError(f"Model type must be 'vertex' or 'edge', got {type!r}")

        self.engine = engine
        self.label = label
        self.schema = schema
        self.graph_name = graph_name or engine.graph_name
        self.type = type
        self.hooks: Dict[str, List[Hook]] = {hook_type: [] for hook_type in HOOK_TYPES}

    # =========================================================================
    # HOOKS
    # =========================================================================

    def add_hook(self, hook_type: str, fn: Hook) -> None:
        """Register a hook. Unknown hook types are ignored."""
        if hook_type in self.hooks:
            self.hooks[hook_type].append(fn)

    async def _run_hooks(self, hook_type: str, data: Any) -> None:
        for hook in self.hooks.get(hook_type, []):
            result = hook(data, self)
            if inspect.isawaitable(result):
                await result

    # =========================================================================
    # CRUD OPERATIONS
    # =========================================================================

    async def create(
        self,
        properties: Mapping[str, Any],
        from_id: Optional[Union[int, str]] = None,
        to_id: Optional[Union[int, str]] = None
    ) -> Any:
        """
        Create a vertex, or an edge between `from_id` and `to_id`.

        Args:
            properties: Property values (validated against `schema` if set)
            from_id: Source vertex graph id (edge models only)
            to_id: Target vertex graph id (edge models only)

        Returns:
            The created vertex/edge, or None if nothing came back
        """
        properties = self._validate(properties)
        await self._run_hooks("before_create", properties)

        if self.type == "vertex":
            cypher = self._build_create_vertex_query(properties)
        else:
            cypher = self._build_create_edge_query(properties, from_id, to_id)

        results = await self.engine.execute_cypher(cypher, self.graph_name)
        created = results[0] if results else None
        await self._run_hooks("after_create", created)
        return created

    async def find_all(
        self,
        where: Optional[Mapping[str, Any]] = None,
        order: Optional[OrderSpec] = None,
        limit: Optional[int] = None,
        skip: Optional[int] = None
    ) -> List[Any]:
        """Find every element of this label matching `where`."""
        cypher = self._build_find_query(where, order, limit, skip)
        return await self.engine.execute_cypher(cypher, self.graph_name)

    async def find_one(
        self,
        where: Optional[Mapping[str, Any]] = None,
        order: Optional[OrderSpec] = None
    ) -> Optional[Any]:
        results = await self.find_all(where=where, order=order, limit=1)
        return results[0] if results else None

    async def find_by_pk(self, pk: Any) -> Optional[Any]:
        """Find by the `id` property."""
        return await self.find_one(where={"id": pk})

    async def update(
        self,
        properties: Mapping[str, Any],
        where: Optional[Mapping[str, Any]] = None
    ) -> List[Any]:
        """
        Set properties on every matching element.

        Returns:
            The updated elements
        """
        await self._run_hooks("before_update", {"properties": properties, "where": where})
        cypher = self._build_update_query(properties, where)
        results = await self.engine.execute_cypher(cypher, self.graph_name)
        await self._run_hooks("after_update", {"properties": properties, "where": where})
        return results

    async def destroy(self, where: Optional[Mapping[str, Any]] = None) -> None:
        """Delete every matching element."""
        await self._run_hooks("before_delete", where)
        cypher = self._build_delete_query(where)
        await self.engine.execute_cypher(cypher, self.graph_name)
        await self._run_hooks("after_delete", where)

    async def count(self, where: Optional[Mapping[str, Any]] = None) -> int:
        """Count matching elements."""
        builder = self._match()
        self._apply_where(builder, where)
        builder.return_("count(n)")

        results = await self.engine.execute_cypher(builder.build(), self.graph_name)
        if results and isinstance(results[0], int):
            return results[0]
        return 0

    # =========================================================================
    # QUERY CONSTRUCTION
    # =========================================================================

    def _validate(self, properties: Mapping[str, Any]) -> Dict[str, Any]:
        if self.schema is None:
            return dict(properties)
        return self.schema.model_validate(dict(properties)).model_dump(mode="json")

    def _match(self) -> CypherQueryBuilder:
        if self.type == "vertex":
            return query_builder().match(f"(n:{self.label})")
        return query_builder().match(f"()-[n:{self.label}]->()")

    @staticmethod
    def _apply_where(builder: CypherQueryBuilder, where: Optional[Mapping[str, Any]]) -> None:
        if where:
            clause = build_where_clause(where, "n")
            if clause:
                builder.where(clause)

    def _build_create_vertex_query(self, properties: Mapping[str, Any]) -> str:
        return (
            query_builder()
            .create(vertex("n", self.label, properties))
            .return_("n")
            .build()
        )

    def _build_create_edge_query(
        self,
        properties: Mapping[str, Any],
        from_id: Optional[Union[int, str]],
        to_id: Optional[Union[int, str]]
    ) -> str:
        if from_id is None or to_id is None:
            raise ModelError(f"Creating a {self.label} edge requires from_id and to_id")

        return create_edge_query(self.label, from_id, to_id, properties, variable="n")

    def _build_find_query(
        self,
        where: Optional[Mapping[str, Any]],
        order: Optional[OrderSpec],
        limit: Optional[int],
        skip: Optional[int]
    ) -> str:
        builder = self._match()
        self._apply_where(builder, where)
        if order:
            builder.order_by(build_order_clause(order, "n"))
        if limit:
            builder.limit(limit)
        if skip:
            builder.skip(skip)
        return builder.return_("n").build()

    def _build_update_query(
        self,
        properties: Mapping[str, Any],
        where: Optional[Mapping[str, Any]]
    ) -> str:
        builder = self._match()
        self._apply_where(builder, where)
        for key, value in properties.items():
            builder.set(f"n.{key} = {format_value(value)}")
        return builder.return_("n").build()

    def _build_delete_query(self, where: Optional[Mapping[str, Any]]) -> str:
        builder = self._match()
        self._apply_where(builder, where)
        return builder.delete("n").build()

    def __repr__(self) -> str:
        return f"GraphModel(label='{self.label}', type='{self.type}', graph='{self.graph_name}')"


class ModelRegistry:
    """Defines models and looks them up by label."""

    def __init__(self, engine: GraphEngine, default_graph_name: Optional[str] = None):
        self.engine = engine
        self.default_graph_name = default_graph_name or engine.graph_name
        self.models: Dict[str, GraphModel] = {}

    def define(
        self,
        label: str,
        schema: Optional[Type[BaseModel]] = None,
        graph_name: Optional[str] = None,
        type: Literal["vertex", "edge"] = "vertex"
    ) -> GraphModel:
        """Create a model and register it under its label."""
        model = GraphModel(
            self.engine,
            label,
            schema=schema,
            graph_name=graph_name or self.default_graph_name,
            type=type,
        )
        self.models[label] = model
        logger.debug("Defined %r", model)
        return model

    def get(self, label: str) -> Optional[GraphModel]:
        return self.models.get(label)

    def has(self, label: str) -> bool:
        return label in self.models

    def get_all(self) -> Dict[str, GraphModel]:
        return dict(self.models)
