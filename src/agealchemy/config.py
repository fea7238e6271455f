# src/agealchemy/config.py
"""Connection and graph settings."""

from __future__ import annotations

import os
from typing import Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from psycopg.conninfo import make_conninfo

from agealchemy.core.escaping import is_valid_graph_name


class AGEConfig(BaseModel):
    """
    Settings for one PostgreSQL database and the AGE graph used in it.

    Example:
        ```python
        config = AGEConfig(database="social", graph_name="social_graph")
        config = AGEConfig.from_env()   # DB_HOST, DB_PORT, DB_NAME, ...
        ```
    """

    host: str = Field(default="localhost", description="PostgreSQL host")
    port: int = Field(default=5432, ge=1, le=65535, description="PostgreSQL port")
    database: str = Field(default="postgres", min_length=1, description="Database name")
    user: str = Field(default="postgres", min_length=1, description="Database user")
    password: str = Field(default="", description="Database password", repr=False)
    graph_name: str = Field(default="default_graph", description="AGE graph name")
    auto_create_graph: bool = Field(
        default=True,
        description="Create the AGE extension and graph on connect when missing"
    )
    connect_timeout: Optional[int] = Field(default=None, ge=0, description="Seconds")

    model_config = ConfigDict(validate_assignment=True, extra='forbid')

    @field_validator('graph_name')
    @classmethod
    def validate_graph_name(cls, v):
        """Graph names are embedded unquoted in SQL, so they must be identifiers."""
        if not is_valid_graph_name(v):
            raise ValueError(f"Invalid graph name: {v!r}")
        return v

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None, **overrides) -> AGEConfig:
        """
        Build a config from environment variables.

        Reads DB_HOST, DB_PORT, DB_NAME, DB_USER, DB_PASSWORD and GRAPH_NAME.
        Keyword overrides win over the environment.
        """
        env = os.environ if environ is None else environ
        values = {
            "host": env.get("DB_HOST", "localhost"),
            "port": env.get("DB_PORT", "5432"),
            "database": env.get("DB_NAME", "postgres"),
            "user": env.get("DB_USER", "postgres"),
            "password": env.get("DB_PASSWORD", ""),
            "graph_name": env.get("GRAPH_NAME", "default_graph"),
        }
        values.update(overrides)
        return cls.model_validate(values)

    @property
    def conninfo(self) -> str:
        """libpq connection string for psycopg."""
        params = {
            "host": self.host,
            "port": str(self.port),
            "dbname": self.database,
            "user": self.user,
        }
        if self.password:
            params["password"] = self.password
        if self.connect_timeout is not None:
            params["connect_timeout"] = str(self.connect_timeout)
        return make_conninfo(**params)
