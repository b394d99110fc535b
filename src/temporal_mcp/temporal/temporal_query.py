"""Temporal queries against system-versioned tables.

One entry point per FOR SYSTEM_TIME mode. Each resolves the entity's table,
builds the parameterized statement and runs it through the SQL driver.
"""

import logging
from datetime import datetime
from typing import Any
from typing import Dict

from .clause_builder import TemporalClauseBuilder
from .clause_builder import TemporalStatement
from .modes import TemporalMode
from .table_resolver import TableNameResolver

logger = logging.getLogger(__name__)


class TemporalQuery:
    """Runs temporal queries for mapped entities."""

    def __init__(self, sql_driver: Any, resolver: TableNameResolver, builder: TemporalClauseBuilder | None = None):
        """Initialize the temporal query handler.

        Args:
            sql_driver: SqlDriver instance for database operations
            resolver: Resolver turning entity descriptors into table names
            builder: Statement builder (default: a new TemporalClauseBuilder)
        """
        self.sql_driver = sql_driver
        self.resolver = resolver
        self.builder = builder or TemporalClauseBuilder(resolver)

    def preview(self, descriptor: Any, mode: TemporalMode) -> TemporalStatement:
        """Build the statement for a query without running it."""
        return self.builder.build(self.resolver.resolve(descriptor), mode)

    async def run(self, descriptor: Any, mode: TemporalMode, limit: int | None = None) -> Dict[str, Any]:
        """Run a temporal query.

        Args:
            descriptor: Entity descriptor known to the resolver
            mode: Temporal mode and its timestamps
            limit: Maximum number of rows to fetch (default: all)

        Returns:
            Dict with the statement, its parameters and the fetched rows
        """
        table = self.resolver.resolve(descriptor)
        statement = self.builder.build(table, mode)
        rows = await self.sql_driver.execute_query(statement.sql, list(statement.params), max_rows=limit)
        results = [row.cells for row in rows] if rows else []
        logger.debug(f"{mode.kind.name} query on {table} returned {len(results)} row(s)")

        return {
            "table": table,
            "mode": mode.kind.value,
            "sql": statement.sql,
            "params": [p.isoformat() for p in statement.params],
            "row_count": len(results),
            "rows": results,
        }

    async def all(self, descriptor: Any, limit: int | None = None) -> Dict[str, Any]:
        """Return every row version from the current and history tables."""
        return await self.run(descriptor, TemporalMode.all(), limit)

    async def as_of(self, descriptor: Any, instant: datetime, limit: int | None = None) -> Dict[str, Any]:
        """Return the row versions that were current at the given instant.

        A version is current when its start time is at or before the instant
        and its end time is after it.
        """
        return await self.run(descriptor, TemporalMode.as_of(instant), limit)

    async def from_to(self, descriptor: Any, start: datetime, end: datetime, limit: int | None = None) -> Dict[str, Any]:
        """Return every version active at some point in [start, end).

        Versions that ended exactly at start, or began exactly at end, are
        not included.
        """
        return await self.run(descriptor, TemporalMode.from_to(start, end), limit)

    async def between(self, descriptor: Any, start: datetime, end: datetime, limit: int | None = None) -> Dict[str, Any]:
        """Same as from_to, but also includes versions that began exactly at end."""
        return await self.run(descriptor, TemporalMode.between(start, end), limit)

    async def contained_in(self, descriptor: Any, start: datetime, end: datetime, limit: int | None = None) -> Dict[str, Any]:
        """Return versions that were opened and closed within [start, end], bounds included."""
        return await self.run(descriptor, TemporalMode.contained_in(start, end), limit)
