# src/agealchemy/orm/migrations.py
"""
AGEAlchemy Migrations - ordered graph schema changes

A Migration records operations, each carrying the SQL to apply it and the SQL
to revert it. The MigrationManager runs pending migrations in name order and
rolls them back newest first. Which migrations have run is tracked for the
lifetime of the manager only.

Example:
    ```python
    manager = MigrationManager(engine, "social")
    (manager.create("20240101000000_users")
        .create_vertex_label("User")
        .create_edge_label("FOLLOWS"))
    await manager.run_pending()
    ```
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Optional, Set

from pydantic import BaseModel, ConfigDict, Field

from agealchemy.core.age import build_age_query
from agealchemy.core.escaping import is_valid_graph_name, is_valid_label
from agealchemy.exceptions import MigrationError
from agealchemy.orm.engine import GraphEngine

logger = logging.getLogger(__name__)


def _create_graph_sql(graph_name: str) -> str:
    return f"SELECT ag_catalog.create_graph('{graph_name}')"


def _drop_graph_sql(graph_name: str) -> str:
    return f"SELECT ag_catalog.drop_graph('{graph_name}', true)"


def _create_label_sql(kind: str, graph_name: str, label: str) -> str:
    return f"SELECT * FROM ag_catalog.create_{kind}label('{graph_name}', '{label}')"


def _drop_label_sql(kind: str, graph_name: str, label: str) -> str:
    return f"SELECT * FROM ag_catalog.drop_{kind}label('{graph_name}', '{label}', true)"


def _checked_graph(name: str) -> str:
    if not is_valid_graph_name(name):
        raise MigrationError(f"Invalid graph name: {name!r}")
    return name


def _checked_label(label: str) -> str:
    if not is_valid_label(label):
        raise MigrationError(f"Invalid label: {label!r}")
    return label


class MigrationOperation(BaseModel):
    """One reversible step. An empty `down_sql` means nothing to revert."""

    type: str
    up_sql: str
    down_sql: str = ""
    label: Optional[str] = None
    graph_name: Optional[str] = None

    model_config = ConfigDict(frozen=True)


class Migration:
    """
    A named list of operations against one graph.

    Operation methods return the migration so calls can be chained.
    """

    def __init__(self, name: str, engine: GraphEngine, graph_name: str):
        self.name = name
        self.engine = engine
        self.graph_name = _checked_graph(graph_name)
        self.operations: List[MigrationOperation] = []

    def _add(self, operation: MigrationOperation) -> Migration:
        self.operations.append(operation)
        return self

    # =========================================================================
    # OPERATIONS
    # =========================================================================

    def create_graph(self, graph_name: Optional[str] = None) -> Migration:
        name = _checked_graph(graph_name or self.graph_name)
        return self._add(MigrationOperation(
            type="create_graph",
            graph_name=name,
            up_sql=_create_graph_sql(name),
            down_sql=_drop_graph_sql(name),
        ))

    def drop_graph(self, graph_name: Optional[str] = None) -> Migration:
        name = _checked_graph(graph_name or self.graph_name)
        return self._add(MigrationOperation(
            type="drop_graph",
            graph_name=name,
            up_sql=_drop_graph_sql(name),
            down_sql=_create_graph_sql(name),
        ))

    def create_vertex_label(self, label: str) -> Migration:
        label = _checked_label(label)
        return self._add(MigrationOperation(
            type="create_vertex_label",
            label=label,
            up_sql=_create_label_sql("v", self.graph_name, label),
            down_sql=_drop_label_sql("v", self.graph_name, label),
        ))

    def drop_vertex_label(self, label: str) -> Migration:
        label = _checked_label(label)
        return self._add(MigrationOperation(
            type="drop_vertex_label",
            label=label,
            up_sql=_drop_label_sql("v", self.graph_name, label),
            down_sql=_create_label_sql("v", self.graph_name, label),
        ))

    def create_edge_label(self, label: str) -> Migration:
        label = _checked_label(label)
        return self._add(MigrationOperation(
            type="create_edge_label",
            label=label,
            up_sql=_create_label_sql("e", self.graph_name, label),
            down_sql=_drop_label_sql("e", self.graph_name, label),
        ))

    def drop_edge_label(self, label: str) -> Migration:
        label = _checked_label(label)
        return self._add(MigrationOperation(
            type="drop_edge_label",
            label=label,
            up_sql=_drop_label_sql("e", self.graph_name, label),
            down_sql=_create_label_sql("e", self.graph_name, label),
        ))

    def raw_cypher(self, up: str, down: str = "") -> Migration:
        """Cypher run through the AGE wrapper for this graph."""
        return self._add(MigrationOperation(
            type="raw_cypher",
            up_sql=build_age_query(self.graph_name, up),
            down_sql=build_age_query(self.graph_name, down) if down else "",
        ))

    def raw_sql(self, up: str, down: str = "") -> Migration:
        return self._add(MigrationOperation(type="raw_sql", up_sql=up, down_sql=down))

    # =========================================================================
    # EXECUTION
    # =========================================================================

    async def up(self) -> None:
        """Apply every operation in the order it was added."""
        for operation in self.operations:
            await self.engine.execute_sql(operation.up_sql)

    async def down(self) -> None:
        """Revert every operation, last added first."""
        for operation in reversed(self.operations):
            if operation.down_sql:
                await self.engine.execute_sql(operation.down_sql)

    def get_info(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "graph_name": self.graph_name,
            "operations": [operation.model_dump() for operation in self.operations],
        }

    def __repr__(self) -> str:
        return f"Migration(name='{self.name}', operations={len(self.operations)})"


class MigrationManager:
    """Registers migrations and runs or reverts them in name order."""

    def __init__(self, engine: GraphEngine, graph_name: Optional[str] = None):
        self.engine = engine
        self.graph_name = graph_name or engine.graph_name
        self.migrations: Dict[str, Migration] = {}
        self.executed_migrations: Set[str] = set()

    def create(self, name: str) -> Migration:
        migration = Migration(name, self.engine, self.graph_name)
        self.migrations[name] = migration
        return migration

    async def run_pending(self) -> int:
        """
        Apply every migration that has not run yet.

        Returns:
            Number of migrations applied
        """
        pending = sorted(name for name in self.migrations if name not in self.executed_migrations)
        for name in pending:
            logger.info("Running migration: %s", name)
            await self.migrations[name].up()
            self.executed_migrations.add(name)
            logger.info("Completed migration: %s", name)
        return len(pending)

    async def rollback(self) -> Optional[str]:
        """
        Revert the most recent (highest named) executed migration.

        Returns:
            The reverted migration name, or None if nothing has run

        Raises:
            MigrationError: If the executed migration is no longer registered
        """
        if not self.executed_migrations:
            logger.info("No migrations to rollback")
            return None

        name = max(self.executed_migrations)
        migration = self.migrations.get(name)
        if migration is None:
            raise MigrationError(f"Migration {name} not found")

        logger.info("Rolling back migration: %s", name)
        await migration.down()
        self.executed_migrations.discard(name)
        logger.info("Rolled back migration: %s", name)
        return name

    async def rollback_all(self) -> int:
        count = 0
        while await self.rollback():
            count += 1
        return count

    def status(self) -> List[Dict[str, Any]]:
        return [
            {"name": name, "executed": name in self.executed_migrations}
            for name in sorted(self.migrations)
        ]


class SchemaDefinition(BaseModel):
    """Collects labels inside `SchemaBuilder.create_schema`."""

    vertex_labels: List[str] = Field(default_factory=list)
    edge_labels: List[str] = Field(default_factory=list)

    def vertex(self, label: str) -> SchemaDefinition:
        self.vertex_labels.append(_checked_label(label))
        return self

    def edge(self, label: str) -> SchemaDefinition:
        self.edge_labels.append(_checked_label(label))
        return self


class SchemaBuilder:
    """Creates vertex and edge labels for a graph in one go."""

    def __init__(self, engine: GraphEngine, graph_name: Optional[str] = None):
        self.engine = engine
        self.graph_name = _checked_graph(graph_name or engine.graph_name)

    async def create_schema(self, callback: Callable[[SchemaDefinition], Any]) -> SchemaDefinition:
        """
        Let `callback` declare labels, then create them.

        Example:
            ```python
            await schema.create_schema(lambda s: s.vertex("User").edge("FOLLOWS"))
            ```
        """
        schema = SchemaDefinition()
        callback(schema)

        for label in schema.vertex_labels:
            await self.engine.execute_sql(_create_label_sql("v", self.graph_name, label))
        for label in schema.edge_labels:
            await self.engine.execute_sql(_create_label_sql("e", self.graph_name, label))
        return schema

    async def drop_schema(self) -> None:
        """Drop the whole graph."""
        await self.engine.execute_sql(_drop_graph_sql(self.graph_name))
