# src/agealchemy/orm/__init__.py
"""
AGEAlchemy ORM Module

The I/O side of AGEAlchemy: the async engine, label-scoped models,
relationship helpers, transactions, migrations and optimization helpers.
"""

from agealchemy.orm.engine import (
    GraphEngine,
    create_graph_engine
)
from agealchemy.orm.models import (
    GraphModel,
    ModelRegistry,
    build_where_clause,
    build_order_clause
)
from agealchemy.orm.relationships import (
    Relationship,
    Relationships,
    Traversal
)
from agealchemy.orm.transaction import (
    GraphTransaction,
    TransactionManager
)
from agealchemy.orm.migrations import (
    Migration,
    MigrationManager,
    MigrationOperation,
    SchemaBuilder,
    SchemaDefinition
)
from agealchemy.orm.optimization import (
    QueryAnalysis,
    IndexSuggestion,
    QueryAnalyzer,
    QueryOptimizer,
    IndexManager,
    QueryCache,
    QueryStats,
    PerformanceMonitor
)
from agealchemy.orm.plugin import ApacheAGE, init_apache_age

__all__ = [
    # Engine
    "GraphEngine",
    "create_graph_engine",

    # Models
    "GraphModel",
    "ModelRegistry",
    "build_where_clause",
    "build_order_clause",

    # Relationships
    "Relationship",
    "Relationships",
    "Traversal",

    # Transactions
    "GraphTransaction",
    "TransactionManager",

    # Migrations
    "Migration",
    "MigrationManager",
    "MigrationOperation",
    "SchemaBuilder",
    "SchemaDefinition",

    # Optimization
    "QueryAnalysis",
    "IndexSuggestion",
    "QueryAnalyzer",
    "QueryOptimizer",
    "IndexManager",
    "QueryCache",
    "QueryStats",
    "PerformanceMonitor",

    # Plugin
    "ApacheAGE",
    "init_apache_age",
]
