# src/agealchemy/orm/transaction.py
"""
Transactions over an AGE graph.

The engine's connection runs in autocommit mode; a GraphTransaction issues
an explicit BEGIN and ends with COMMIT or ROLLBACK. Cypher executed through
the transaction runs on that same connection, so it is part of the
transaction.
"""

from __future__ import annotations

import inspect
import logging
import time
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Awaitable, Callable, Dict, List, Mapping, Optional, Sequence, TypeVar, Union

from agealchemy.core.age import build_age_query
from agealchemy.core.builder import create_edge_query, query_builder
from agealchemy.core.escaping import format_value, is_valid_identifier, vertex
from agealchemy.exceptions import TransactionError
from agealchemy.orm.engine import GraphEngine

logger = logging.getLogger(__name__)

T = TypeVar("T")


class GraphTransaction:
    """
    One database transaction bound to a graph.

    Every executed Cypher statement is recorded in `operations`. After
    `commit()` or `rollback()` the transaction can no longer be used.
    """

    def __init__(self, engine: GraphEngine, graph_name: str):
        self.engine = engine
        self.graph_name = graph_name
        self.operations: List[Dict[str, Any]] = []
        self.committed: bool = False
        self.rolled_back: bool = False

    @property
    def active(self) -> bool:
        return not (self.committed or self.rolled_back)

    def _ensure_active(self) -> None:
        if self.committed:
            raise TransactionError("Transaction already committed")
        if self.rolled_back:
            raise TransactionError("Transaction already rolled back")

    async def begin(self) -> GraphTransaction:
        self._ensure_active()
        await self.engine.execute_sql("BEGIN")
        logger.debug("Transaction started on graph '%s'", self.graph_name)
        return self

    async def execute_cypher(self, cypher: str) -> List[Any]:
        """Execute Cypher inside this transaction."""
        self._ensure_active()
        self.operations.append({
            "query": build_age_query(self.graph_name, cypher),
            "cypher": cypher,
            "timestamp": time.time(),
        })
        return await self.engine.execute_cypher(cypher, self.graph_name)

    async def create_vertex(self, label: str, properties: Optional[Mapping[str, Any]] = None) -> Any:
        cypher = (
            query_builder()
            .create(vertex("n", label, properties or {}))
            .return_("n")
            .build()
        )
        results = await self.execute_cypher(cypher)
        return results[0] if results else None

    async def create_edge(
        self,
        label: str,
        from_id: Union[int, str],
        to_id: Union[int, str],
        properties: Optional[Mapping[str, Any]] = None
    ) -> Any:
        cypher = create_edge_query(label, from_id, to_id, properties)
        results = await self.execute_cypher(cypher)
        return results[0] if results else None

    async def update(
        self,
        pattern: str,
        properties: Mapping[str, Any],
        where: Optional[str] = None
    ) -> List[Any]:
        """
        Set properties on `n` for every match of `pattern`.

        The pattern must bind the variable `n`, e.g. `(n:User)`.
        """
        builder = query_builder().match(pattern)
        if where:
            builder.where(where)
        for key, value in properties.items():
            builder.set(f"n.{key} = {format_value(value)}")
        builder.return_("n")
        return await self.execute_cypher(builder.build())

    async def delete(self, pattern: str, where: Optional[str] = None) -> None:
        """DETACH DELETE `n` for every match of `pattern`."""
        builder = query_builder().match(pattern)
        if where:
            builder.where(where)
        await self.execute_cypher(f"{builder.build()} DETACH DELETE n")

    async def commit(self) -> None:
        self._ensure_active()
        await self.engine.execute_sql("COMMIT")
        self.committed = True
        logger.debug("Committed %d operation(s) on graph '%s'", len(self.operations), self.graph_name)

    async def rollback(self) -> None:
        self._ensure_active()
        await self.engine.execute_sql("ROLLBACK")
        self.rolled_back = True
        logger.debug("Rolled back %d operation(s) on graph '%s'", len(self.operations), self.graph_name)

    def get_info(self) -> Dict[str, Any]:
        return {
            "graph_name": self.graph_name,
            "operation_count": len(self.operations),
            "committed": self.committed,
            "rolled_back": self.rolled_back,
            "operations": list(self.operations),
        }


TransactionCallback = Callable[[GraphTransaction], Union[Awaitable[T], T]]


class TransactionManager:
    """Starts transactions and manages savepoints on one engine."""

    def __init__(self, engine: GraphEngine, graph_name: Optional[str] = None):
        self.engine = engine
        self.graph_name = graph_name or engine.graph_name

    async def start_transaction(self) -> GraphTransaction:
        """Begin a new transaction."""
        return await GraphTransaction(self.engine, self.graph_name).begin()

    async def with_transaction(self, callback: TransactionCallback) -> Any:
        """
        Run `callback(transaction)`, committing on success.

        Any exception rolls the transaction back and is re-raised.
        """
        transaction = await self.start_transaction()
        try:
            result = callback(transaction)
            if inspect.isawaitable(result):
                result = await result
        except BaseException:
            if transaction.active:
                await transaction.rollback()
            raise
        if transaction.active:
            await transaction.commit()
        return result

    async def execute_atomic(self, operations: Sequence[TransactionCallback]) -> List[Any]:
        """Run every operation in order inside one transaction."""
        async def run_all(transaction: GraphTransaction) -> List[Any]:
            results = []
            for operation in operations:
                result = operation(transaction)
                if inspect.isawaitable(result):
                    result = await result
                results.append(result)
            return results

        return await self.with_transaction(run_all)

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[GraphTransaction]:
        """
        `async with manager.transaction() as tx:` form of `with_transaction`.
        """
        transaction = await self.start_transaction()
        try:
            yield transaction
        except BaseException:
            if transaction.active:
                await transaction.rollback()
            raise
        if transaction.active:
            await transaction.commit()

    # =========================================================================
    # SAVEPOINTS
    # =========================================================================

    @staticmethod
    def _savepoint_name(name: str) -> str:
        if not is_valid_identifier(name):
            raise ValueError(f"Invalid savepoint name: {name!r}")
        return name

    async def create_savepoint(self, transaction: GraphTransaction, name: str) -> None:
        transaction._ensure_active()
        await self.engine.execute_sql(f"SAVEPOINT {self._savepoint_name(name)}")

    async def rollback_to_savepoint(self, transaction: GraphTransaction, name: str) -> None:
        transaction._ensure_active()
        await self.engine.execute_sql(f"ROLLBACK TO SAVEPOINT {self._savepoint_name(name)}")

    async def release_savepoint(self, transaction: GraphTransaction, name: str) -> None:
        transaction._ensure_active()
        await self.engine.execute_sql(f"RELEASE SAVEPOINT {self._savepoint_name(name)}")
