#!/usr/bin/env python3
"""
AGEAlchemy Social Graph Example

This example walks through a small social network on Apache AGE:
- Schema creation through a migration
- Label-scoped models with Pydantic validation
- Relationship queries and the query builder
- An atomic transaction and query analysis

Requires a PostgreSQL server with the AGE extension. Connection settings are
read from DB_HOST, DB_PORT, DB_NAME, DB_USER, DB_PASSWORD and GRAPH_NAME.
"""

import asyncio
import logging

from pydantic import BaseModel, Field

from agealchemy import create_graph_engine, init_apache_age, query_builder, vertex, edge, path
from agealchemy.core.functions import aggregation


class UserSchema(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    age: int = Field(ge=0, le=150)
    city: str = Field(default="unknown")


# =============================================================================
# DEMO
# =============================================================================

async def main() -> None:
    logging.basicConfig(level=logging.INFO)

    engine = create_graph_engine(graph_name="social_example")
    async with engine:
        age = init_apache_age(engine)

        # Schema
        (age.migrations.create("20240101000000_social")
            .create_vertex_label("User")
            .create_edge_label("FOLLOWS"))
        applied = await age.migrations.run_pending()
        print(f"Applied {applied} migration(s)")

        # Models
        User = age.models.define("User", schema=UserSchema)
        alice = await User.create({"name": "Alice", "age": 30, "city": "Paris"})
        bob = await User.create({"name": "Bob", "age": 25})
        print(f"Created {alice.get_property('name')} and {bob.get_property('name')}")

        await age.create_edge("FOLLOWS", alice.id, bob.id, {"since": 2020})

        adults = await User.find_all(where={"age": {"$gte": 18}}, order=[("name", "asc")])
        print(f"Adults: {[u.get_property('name') for u in adults]}")

        # Builder
        cypher = (
            query_builder()
            .match(path(vertex("a", "User"), edge("r", "FOLLOWS"), vertex("b", "User")))
            .where('a.name = "Alice"')
            .return_(f"b.name AS name, {aggregation.count('r')} AS follows")
            .build()
        )
        print(f"Alice follows: {await age.execute_cypher(cypher)}")

        # Transaction
        await age.transaction.execute_atomic([
            lambda tx: tx.create_vertex("User", {"name": "Carol", "age": 41}),
            lambda tx: tx.update("(n:User)", {"city": "Berlin"}, where='n.name = "Bob"'),
        ])
        print(f"Users after transaction: {await User.count()}")

        # Analysis
        analysis = age.optimization.analyzer.analyze(cypher)
        for suggestion in analysis.suggestions:
            print(f"Hint: {suggestion}")

        for stats in age.optimization.monitor.get_slowest_queries(limit=3):
            print(f"{stats.avg_duration:8.2f} ms  {stats.query[:60]}")

        await age.migrations.rollback_all()


if __name__ == "__main__":
    asyncio.run(main())
