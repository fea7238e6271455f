# tests/conftest.py

from unittest.mock import AsyncMock, MagicMock

import pytest

from agealchemy.orm.engine import GraphEngine


@pytest.fixture
def mock_engine():
    """
    A GraphEngine stand-in whose execute methods are AsyncMocks.

    `execute_cypher` returns [] and `execute_sql` returns [] unless a test
    sets `return_value` or `side_effect`.
    """
    engine = MagicMock(spec=GraphEngine)
    engine.graph_name = "test_graph"
    engine.monitor = None
    engine.execute_cypher = AsyncMock(return_value=[])
    engine.execute_sql = AsyncMock(return_value=[])
    engine.create_vertex = AsyncMock(return_value=None)
    engine.create_edge = AsyncMock(return_value=None)
    return engine

