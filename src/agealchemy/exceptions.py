# src/agealchemy/exceptions.py
"""
AGEAlchemy Exceptions.

The core builder and escaping primitives never raise on well-typed input;
these exceptions come from the layers that talk to PostgreSQL.
"""

from typing import Optional


class AGEAlchemyError(Exception):
    """Base exception for all AGEAlchemy errors."""
    pass


class AGEConnectionError(AGEAlchemyError, ConnectionError):
    """Raised when the engine cannot connect, or is used before connecting."""
    pass


class QueryExecutionError(AGEAlchemyError):
    """
    Raised when PostgreSQL rejects a statement.

    Attributes:
        query: The SQL text that was sent (for Cypher, the wrapped AGE call)
    """

    def __init__(self, message: str, query: Optional[str] = None):
        super().__init__(message)
        self.query = query


class TransactionError(AGEAlchemyError):
    """Raised on invalid transaction state transitions."""
    pass


class MigrationError(AGEAlchemyError):
    """Raised when a migration cannot be found or applied."""
    pass


class ModelError(AGEAlchemyError):
    """Raised when a model operation is called with unusable arguments."""
    pass
