# src/agealchemy/__init__.py
"""
AGEAlchemy - Cypher query building for Apache AGE on PostgreSQL

AGEAlchemy composes Cypher safely and runs it inside PostgreSQL with:
- Escaping primitives and vertex/edge/path pattern fragments
- A fluent CypherQueryBuilder over an immutable clause log
- The `ag_catalog.cypher(...)` host-query wrapper and agtype decoding
- An async psycopg engine, label-scoped models and relationship helpers
- Transactions, migrations and query optimization helpers

Example:
    ```python
    from agealchemy import create_graph_engine, query_builder, vertex, edge, path

    engine = create_graph_engine(graph_name="social")

    async with engine:
        alice = await engine.create_vertex("User", {"name": "Alice", "age": 30})
        bob = await engine.create_vertex("User", {"name": "Bob", "age": 25})
        await engine.create_edge("FOLLOWS", alice.id, bob.id, {"since": 2020})

        cypher = (
            query_builder()
            .match(path(vertex("a", "User"), edge("r", "FOLLOWS"), vertex("b", "User")))
            .where('a.name = "Alice"')
            .return_("b")
            .build()
        )
        followed = await engine.execute_cypher(cypher)
    ```
"""

# Core (pure) functionality
from agealchemy.core.escaping import (
    EdgeDirection,
    escape_string,
    escape_name,
    format_value,
    format_properties,
    vertex,
    edge,
    path,
    is_valid_identifier,
)
from agealchemy.core.builder import CypherQueryBuilder, query_builder
from agealchemy.core.age import build_age_query, parse_age_result
from agealchemy.core.graph_vertex import GraphVertex
from agealchemy.core.graph_edge import GraphEdge
from agealchemy.core.graph_path import GraphPath

# Configuration and errors
from agealchemy.config import AGEConfig
from agealchemy.exceptions import (
    AGEAlchemyError,
    AGEConnectionError,
    QueryExecutionError,
    TransactionError,
    MigrationError,
    ModelError,
)

# Engine and ORM layer
from agealchemy.orm.engine import GraphEngine, create_graph_engine
from agealchemy.orm.models import GraphModel, ModelRegistry
from agealchemy.orm.relationships import Relationship, Relationships
from agealchemy.orm.transaction import GraphTransaction, TransactionManager
from agealchemy.orm.migrations import Migration, MigrationManager, SchemaBuilder
from agealchemy.orm.plugin import ApacheAGE, init_apache_age

# Version info
__version__ = "0.1.0"

__all__ = [
    # Core
    "EdgeDirection",
    "escape_string",
    "escape_name",
    "format_value",
    "format_properties",
    "vertex",
    "edge",
    "path",
    "is_valid_identifier",
    "CypherQueryBuilder",
    "query_builder",
    "build_age_query",
    "parse_age_result",
    "GraphVertex",
    "GraphEdge",
    "GraphPath",

    # Configuration and errors
    "AGEConfig",
    "AGEAlchemyError",
    "AGEConnectionError",
    "QueryExecutionError",
    "TransactionError",
    "MigrationError",
    "ModelError",

    # Engine and ORM
    "GraphEngine",
    "create_graph_engine",
    "GraphModel",
    "ModelRegistry",
    "Relationship",
    "Relationships",
    "GraphTransaction",
    "TransactionManager",
    "Migration",
    "MigrationManager",
    "SchemaBuilder",
    "ApacheAGE",
    "init_apache_age",

    # Version
    "__version__",
]
