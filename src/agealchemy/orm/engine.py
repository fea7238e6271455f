# src/agealchemy/orm/engine.py
import asyncio
import logging
import time
from typing import Any, Dict, List, Optional, Sequence, Union, TYPE_CHECKING

import psycopg
from psycopg.rows import dict_row

from agealchemy.config import AGEConfig
from agealchemy.core.age import build_age_query, parse_age_result
from agealchemy.core.builder import create_edge_query, query_builder
from agealchemy.core.escaping import vertex
from agealchemy.exceptions import AGEConnectionError, QueryExecutionError

if TYPE_CHECKING:
    from agealchemy.orm.optimization import PerformanceMonitor

logger = logging.getLogger(__name__)

Params = Optional[Union[Sequence[Any], Dict[str, Any]]]


class GraphEngine:
    """
    Async connection to a PostgreSQL database with the Apache AGE extension.

    It holds the connection settings and one psycopg `AsyncConnection`
    (autocommit, dict rows). Cypher is sent through `execute_cypher`, which
    wraps it with `build_age_query`; plain SQL goes through `execute_sql`.
    """

    def __init__(
        self,
        config: Optional[AGEConfig] = None,
        connect_kwargs: Optional[Dict[str, Any]] = None,
        monitor: Optional["PerformanceMonitor"] = None
    ):
        """
        Initializes the GraphEngine. Does not connect yet.
        Call `await engine.connect()` or use `async with engine:`.

        Args:
            config: Connection and graph settings (defaults to AGEConfig())
            connect_kwargs: Extra keyword arguments for AsyncConnection.connect
            monitor: Optional PerformanceMonitor that records Cypher timings
        """
        self.config: AGEConfig = config or AGEConfig()
        self.connect_kwargs: Dict[str, Any] = dict(connect_kwargs or {})
        self.monitor = monitor

        self._connection: Optional[psycopg.AsyncConnection] = None
        self._is_connected: bool = False
        self._connection_lock = asyncio.Lock()

    @property
    def graph_name(self) -> str:
        return self.config.graph_name

    async def connect(self) -> None:
        """
        Open the connection and prepare the session for AGE.

        Idempotent. Loads AGE, sets the search path, and creates the graph
        when `auto_create_graph` is enabled.
        """
        async with self._connection_lock:
            if self._is_connected and self._connection:
                return

            logger.info(
                "Connecting to %s:%s/%s (graph '%s')",
                self.config.host, self.config.port, self.config.database, self.graph_name
            )
            try:
                self._connection = await psycopg.AsyncConnection.connect(
                    self.config.conninfo,
                    autocommit=True,
                    row_factory=dict_row,
                    **self.connect_kwargs
                )
                await self._setup_age()
                if self.config.auto_create_graph:
                    await self._ensure_graph()
                self._is_connected = True
                logger.info("Connected to %s:%s", self.config.host, self.config.port)
            except psycopg.Error as e:
                if self._connection is not None:
                    await self._connection.close()
                self._connection = None
                self._is_connected = False
                logger.error("Connection to %s:%s failed: %s", self.config.host, self.config.port, e)
                raise AGEConnectionError(
                    f"Failed to connect to PostgreSQL at {self.config.host}:{self.config.port}: {e}"
                ) from e

    async def _setup_age(self) -> None:
        """Load AGE and put ag_catalog on the search path."""
        async with self._connection.cursor() as cur:
            await cur.execute("LOAD 'age';")
            await cur.execute('SET search_path = ag_catalog, "$user", public;')

    async def _ensure_graph(self) -> None:
        """Create the extension and the configured graph if missing."""
        async with self._connection.cursor() as cur:
            await cur.execute("CREATE EXTENSION IF NOT EXISTS age;")
            await cur.execute(
                "SELECT count(*) AS count FROM ag_catalog.ag_graph WHERE name = %s;",
                (self.graph_name,)
            )
            row = await cur.fetchone()
            if not row or not row["count"]:
                logger.info("Creating graph '%s'", self.graph_name)
                await cur.execute("SELECT ag_catalog.create_graph(%s);", (self.graph_name,))

    async def close(self) -> None:
        """Closes the connection if it's open."""
        async with self._connection_lock:
            if self._connection is not None:
                logger.info("Closing connection to %s:%s", self.config.host, self.config.port)
                await self._connection.close()
            self._connection = None
            self._is_connected = False

    @property
    def connection(self) -> psycopg.AsyncConnection:
        """
        The underlying psycopg connection.

        Raises:
            AGEConnectionError: If the engine is not connected.
        """
        if not self._connection or not self._is_connected:
            raise AGEConnectionError(
                f"GraphEngine for {self.config.host}:{self.config.port} is not connected. "
                "Call `await engine.connect()` first."
            )
        return self._connection

    @property
    def connected(self) -> bool:
        """Returns True if the engine is currently connected, False otherwise."""
        return self._is_connected

    # =========================================================================
    # EXECUTION
    # =========================================================================

    async def execute_sql(self, sql: str, params: Params = None) -> List[Dict[str, Any]]:
        """
        Execute one SQL statement.

        Args:
            sql: SQL text
            params: psycopg query parameters

        Returns:
            Result rows as dicts (empty for statements without results)

        Raises:
            QueryExecutionError: If PostgreSQL rejects the statement
        """
        connection = self.connection
        logger.debug("SQL: %s", sql)
        try:
            async with connection.cursor() as cur:
                await cur.execute(sql, params)
                if cur.description is None:
                    return []
                return list(await cur.fetchall())
        except psycopg.Error as e:
            logger.error("Query failed: %s | %s", e, sql[:500])
            raise QueryExecutionError(str(e), query=sql) from e

    async def execute_cypher(self, cypher: str, graph_name: Optional[str] = None) -> List[Any]:
        """
        Execute Cypher against a graph.

        Args:
            cypher: Cypher query text
            graph_name: Target graph (defaults to the configured graph)

        Returns:
            Decoded `result` column of every row
        """
        sql = build_age_query(graph_name or self.graph_name, cypher)
        started = time.perf_counter()
        rows = await self.execute_sql(sql)
        if self.monitor is not None:
            self.monitor.record(cypher, (time.perf_counter() - started) * 1000)
        return parse_age_result([row.get("result") for row in rows])

    async def create_vertex(
        self,
        label: str,
        properties: Optional[Dict[str, Any]] = None,
        graph_name: Optional[str] = None
    ) -> Any:
        """Create one vertex and return it."""
        cypher = (
            query_builder()
            .create(vertex("n", label, properties or {}))
            .return_("n")
            .build()
        )
        results = await self.execute_cypher(cypher, graph_name)
        return results[0] if results else None

    async def create_edge(
        self,
        label: str,
        from_id: Union[int, str],
        to_id: Union[int, str],
        properties: Optional[Dict[str, Any]] = None,
        graph_name: Optional[str] = None
    ) -> Any:
        """Create one edge between two vertices identified by graph id."""
        cypher = create_edge_query(label, from_id, to_id, properties)
        results = await self.execute_cypher(cypher, graph_name)
        return results[0] if results else None

    async def __aenter__(self) -> "GraphEngine":
        """Allows the engine to be used as an async context manager for connect/close."""
        await self.connect()
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Ensures the engine's connection is closed when exiting the context."""
        await self.close()


def create_graph_engine(
    config: Optional[AGEConfig] = None,
    connect_kwargs: Optional[Dict[str, Any]] = None,
    monitor: Optional["PerformanceMonitor"] = None,
    **overrides: Any
) -> GraphEngine:
    """
    Creates and returns a GraphEngine instance.

    The engine must be explicitly connected using `await engine.connect()`
    or by using it as an async context manager (`async with engine:`).

    Args:
        config: Base settings (defaults to `AGEConfig.from_env()`)
        connect_kwargs: Extra keyword arguments for AsyncConnection.connect
        monitor: Optional PerformanceMonitor for Cypher timings
        **overrides: AGEConfig fields to override, e.g. graph_name="social"

    Returns:
        A GraphEngine instance.
    """
    base = config or AGEConfig.from_env()
    if overrides:
        base = base.model_copy(update=overrides)
        base = AGEConfig.model_validate(base.model_dump())
    logger.debug("Creating GraphEngine for %s:%s graph '%s'", base.host, base.port, base.graph_name)
    return GraphEngine(config=base, connect_kwargs=connect_kwargs, monitor=monitor)
