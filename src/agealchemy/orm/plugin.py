# src/agealchemy/orm/plugin.py
"""One object that wires every AGEAlchemy helper to an engine and graph."""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional, Union

from agealchemy.orm.engine import GraphEngine
from agealchemy.orm.migrations import MigrationManager, SchemaBuilder
from agealchemy.orm.models import ModelRegistry
from agealchemy.orm.optimization import (
    IndexManager,
    PerformanceMonitor,
    QueryAnalyzer,
    QueryCache,
    QueryOptimizer,
)
from agealchemy.orm.relationships import Relationships
from agealchemy.orm.transaction import TransactionManager


class Optimization:
    """Optimization helpers bound to one graph."""

    def __init__(
        self,
        engine: GraphEngine,
        graph_name: str,
        cache_options: Optional[Mapping[str, Any]] = None
    ):
        self.analyzer = QueryAnalyzer
        self.optimizer = QueryOptimizer
        self.index_manager = IndexManager(engine, graph_name)
        self.cache = QueryCache(**dict(cache_options or {}))
        self.monitor = engine.monitor or PerformanceMonitor()


class ApacheAGE:
    """
    Facade over models, transactions, migrations and optimization.

    The engine's performance monitor is shared with `optimization.monitor`,
    so timings of every Cypher query the engine runs show up there.
    """

    def __init__(
        self,
        engine: GraphEngine,
        graph_name: Optional[str] = None,
        cache_options: Optional[Mapping[str, Any]] = None
    ):
        self.engine = engine
        self.graph_name = graph_name or engine.graph_name

        if engine.monitor is None:
            engine.monitor = PerformanceMonitor()

        self.models = ModelRegistry(engine, self.graph_name)
        self.relationships = Relationships
        self.transaction = TransactionManager(engine, self.graph_name)
        self.migrations = MigrationManager(engine, self.graph_name)
        self.schema = SchemaBuilder(engine, self.graph_name)
        self.optimization = Optimization(engine, self.graph_name, cache_options)

    async def execute_cypher(self, cypher: str, use_cache: bool = False) -> List[Any]:
        """
        Run Cypher on this graph.

        With `use_cache`, results are served from and stored in the query
        cache, keyed by the Cypher text.
        """
        cache = self.optimization.cache
        if use_cache:
            cached = cache.get(cypher)
            if cached is not None:
                return cached

        results = await self.engine.execute_cypher(cypher, self.graph_name)
        if use_cache:
            cache.set(cypher, results)
        return results

    async def create_vertex(self, label: str, properties: Optional[Dict[str, Any]] = None) -> Any:
        return await self.engine.create_vertex(label, properties, self.graph_name)

    async def create_edge(
        self,
        label: str,
        from_id: Union[int, str],
        to_id: Union[int, str],
        properties: Optional[Dict[str, Any]] = None
    ) -> Any:
        return await self.engine.create_edge(label, from_id, to_id, properties, self.graph_name)


def init_apache_age(
    engine: GraphEngine,
    graph_name: Optional[str] = None,
    cache_options: Optional[Mapping[str, Any]] = None
) -> ApacheAGE:
    """
    Build the facade for `engine`.

    Args:
        engine: A GraphEngine (connected before any query runs)
        graph_name: Graph to work on (defaults to the engine's graph)
        cache_options: `max_size` and `ttl` for the query cache

    Returns:
        An ApacheAGE instance
    """
    return ApacheAGE(engine, graph_name=graph_name, cache_options=cache_options)
