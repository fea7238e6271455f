# src/agealchemy/orm/optimization.py
"""
AGEAlchemy Optimization - query heuristics, caching and timing

Everything here is advisory. The analyzer inspects Cypher text with regular
expressions; nothing is planned or rewritten by the database.
"""

from __future__ import annotations

import logging
import math
import re
import time
from collections import OrderedDict
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from pydantic import BaseModel, Field

from agealchemy.core.escaping import is_valid_graph_name, is_valid_identifier
from agealchemy.exceptions import QueryExecutionError
from agealchemy.orm.engine import GraphEngine

logger = logging.getLogger(__name__)

_INDEXABLE_WHERE = re.compile(r"WHERE\s+\w+\.\w+\s*=", re.IGNORECASE)
_MATCH = re.compile(r"MATCH", re.IGNORECASE)
_WHERE = re.compile(r"WHERE", re.IGNORECASE)
_OPTIONAL_MATCH = re.compile(r"OPTIONAL\s+MATCH", re.IGNORECASE)
_UNBOUNDED_PATH = re.compile(r"\[\*\]")
_RETURN_DISTINCT = re.compile(r"RETURN\s+DISTINCT", re.IGNORECASE)
_WHERE_PROPERTY = re.compile(r"WHERE\s+(\w+)\.(\w+)", re.IGNORECASE)
_WHITESPACE = re.compile(r"\s+")


# =============================================================================
# ANALYSIS
# =============================================================================

class QueryAnalysis(BaseModel):
    has_indexable_properties: bool = False
    has_cartesian_product: bool = False
    has_optional_match: bool = False
    has_unbounded_path: bool = False
    has_distinct: bool = False
    suggestions: List[str] = Field(default_factory=list)


class IndexSuggestion(BaseModel):
    label: str
    property: str
    frequency: int = 1


class QueryAnalyzer:
    """Flags common Cypher performance pitfalls."""

    @staticmethod
    def analyze(query: str) -> QueryAnalysis:
        """
        Inspect one query.

        Example:
            >>> QueryAnalyzer.analyze("MATCH (n)-[*]->(m) RETURN m").has_unbounded_path
            True
        """
        analysis = QueryAnalysis()

        if _INDEXABLE_WHERE.search(query):
            analysis.has_indexable_properties = True
            analysis.suggestions.append(
                "Consider creating indexes on properties used in WHERE clauses"
            )

        match_count = len(_MATCH.findall(query))
        where_count = len(_WHERE.findall(query))
        if match_count > 1 and where_count < match_count:
            analysis.has_cartesian_product = True
            analysis.suggestions.append(
                "Potential cartesian product detected. Consider adding WHERE clauses to connect patterns"
            )

        if _OPTIONAL_MATCH.search(query):
            analysis.has_optional_match = True
            analysis.suggestions.append(
                "OPTIONAL MATCH can be expensive. Consider if it's necessary"
            )

        if _UNBOUNDED_PATH.search(query):
            analysis.has_unbounded_path = True
            analysis.suggestions.append(
                "Unbounded variable-length paths can be very expensive. Consider adding path length limits"
            )

        if _RETURN_DISTINCT.search(query):
            analysis.has_distinct = True

        return analysis

    @staticmethod
    def suggest_indexes(queries: Iterable[str]) -> List[IndexSuggestion]:
        """
        Count `label.property` pairs filtered on in WHERE clauses.

        A property is only counted when its variable is bound to a label in
        the same query, e.g. `(u:User)`. Most frequent first.
        """
        found: Dict[Tuple[str, str], IndexSuggestion] = {}
        for query in queries:
            for variable, prop in _WHERE_PROPERTY.findall(query):
                label_match = re.search(rf"\({re.escape(variable)}:(\w+)\)", query, re.IGNORECASE)
                if not label_match:
                    continue
                key = (label_match.group(1), prop)
                if key in found:
                    found[key].frequency += 1
                else:
                    found[key] = IndexSuggestion(label=key[0], property=prop)

        return sorted(found.values(), key=lambda s: s.frequency, reverse=True)


class QueryOptimizer:
    """Query rewriting hooks. Rewrites are identity for now."""

    @staticmethod
    def optimize_pattern_order(query: str) -> str:
        return query

    @staticmethod
    def add_hints(query: str, hints: Optional[Mapping[str, Any]] = None) -> str:
        return query

    @staticmethod
    def batch_queries(queries: Iterable[str]) -> str:
        return " UNION ALL ".join(queries)


# =============================================================================
# INDEXES
# =============================================================================

class IndexManager:
    """
    Btree indexes on the label tables AGE keeps for a graph.

    AGE stores each label as a table `<graph>.<label>`; indexes are created on
    its `properties` column. Database failures are logged, not raised.
    """

    def __init__(self, engine: GraphEngine, graph_name: Optional[str] = None):
        self.engine = engine
        self.graph_name = graph_name or engine.graph_name
        if not is_valid_graph_name(self.graph_name):
            raise ValueError(f"Invalid graph name: {self.graph_name!r}")

    def _index_name(self, label: str, property: str) -> str:
        for part in (label, property):
            if not is_valid_identifier(part):
                raise ValueError(f"Invalid identifier: {part!r}")
        return f"idx_{self.graph_name}_{label}_{property}"

    async def create_index(self, label: str, property: str) -> None:
        index_name = self._index_name(label, property)
        sql = (
            f"CREATE INDEX IF NOT EXISTS {index_name} "
            f"ON {self.graph_name}.{label} USING btree (properties)"
        )
        try:
            await self.engine.execute_sql(sql)
        except QueryExecutionError as e:
            logger.warning("Could not create index: %s", e)

    async def drop_index(self, label: str, property: str) -> None:
        index_name = self._index_name(label, property)
        try:
            await self.engine.execute_sql(f"DROP INDEX IF EXISTS {self.graph_name}.{index_name}")
        except QueryExecutionError as e:
            logger.warning("Could not drop index: %s", e)

    async def list_indexes(self) -> List[Dict[str, Any]]:
        sql = (
            "SELECT schemaname, tablename, indexname, indexdef FROM pg_indexes "
            "WHERE schemaname = %s ORDER BY tablename, indexname"
        )
        try:
            return await self.engine.execute_sql(sql, (self.graph_name,))
        except QueryExecutionError as e:
            logger.warning("Could not list indexes: %s", e)
            return []


# =============================================================================
# CACHE & MONITORING
# =============================================================================

class QueryCache:
    """
    Result cache with a size cap and a time-to-live in seconds.

    When full, the oldest inserted entry is evicted.
    """

    def __init__(self, max_size: int = 100, ttl: float = 60.0):
        self.max_size = max_size
        self.ttl = ttl
        self._entries: "OrderedDict[str, Tuple[Any, float]]" = OrderedDict()

    def get(self, key: str) -> Optional[Any]:
        entry = self._entries.get(key)
        if entry is None:
            return None

        value, stored_at = entry
        if time.monotonic() - stored_at > self.ttl:
            del self._entries[key]
            return None
        return value

    def set(self, key: str, value: Any) -> None:
        if key in self._entries:
            del self._entries[key]
        elif len(self._entries) >= self.max_size:
            self._entries.popitem(last=False)
        self._entries[key] = (value, time.monotonic())

    def clear(self) -> None:
        self._entries.clear()

    def size(self) -> int:
        return len(self._entries)


class QueryStats(BaseModel):
    query: str
    count: int = 0
    total_duration: float = 0.0
    avg_duration: float = 0.0
    min_duration: float = math.inf
    max_duration: float = 0.0


class PerformanceMonitor:
    """Per-query timing statistics, keyed by whitespace-normalized text."""

    def __init__(self):
        self.query_stats: Dict[str, QueryStats] = {}

    def record(self, query: str, duration: float) -> None:
        """Record one execution taking `duration` milliseconds."""
        key = self._normalize_query(query)
        stats = self.query_stats.setdefault(key, QueryStats(query=key))
        stats.count += 1
        stats.total_duration += duration
        stats.avg_duration = stats.total_duration / stats.count
        stats.min_duration = min(stats.min_duration, duration)
        stats.max_duration = max(stats.max_duration, duration)

    def get_slowest_queries(self, limit: int = 10) -> List[QueryStats]:
        ranked = sorted(self.query_stats.values(), key=lambda s: s.avg_duration, reverse=True)
        return ranked[:limit]

    def get_most_frequent_queries(self, limit: int = 10) -> List[QueryStats]:
        ranked = sorted(self.query_stats.values(), key=lambda s: s.count, reverse=True)
        return ranked[:limit]

    def reset(self) -> None:
        self.query_stats.clear()

    @staticmethod
    def _normalize_query(query: str) -> str:
        return _WHITESPACE.sub(" ", query).strip()
