"""Discovery of system-versioned tables in SQL Server.

Reads the catalog views to report which tables are system-versioned, their
history tables and period columns. Nothing here changes the schema.
"""

import logging
from dataclasses import dataclass
from typing import Any
from typing import Dict
from typing import List

logger = logging.getLogger(__name__)

SYSTEM_VERSIONED_TEMPORAL_TABLE = 2

_TEMPORAL_TABLES_QUERY = """
SELECT
    s.name AS schema_name,
    t.name AS table_name,
    hs.name AS history_schema_name,
    h.name AS history_table_name,
    start_col.name AS period_start_column,
    end_col.name AS period_end_column
FROM sys.tables t
JOIN sys.schemas s ON s.schema_id = t.schema_id
JOIN sys.tables h ON h.object_id = t.history_table_id
JOIN sys.schemas hs ON hs.schema_id = h.schema_id
LEFT JOIN sys.periods p ON p.object_id = t.object_id
LEFT JOIN sys.columns start_col ON start_col.object_id = t.object_id AND start_col.column_id = p.start_column_id
LEFT JOIN sys.columns end_col ON end_col.object_id = t.object_id AND end_col.column_id = p.end_column_id
WHERE t.temporal_type = ?
"""


@dataclass
class TemporalTable:
    """Information about a system-versioned table."""

    schema_name: str
    table_name: str
    history_schema_name: str
    history_table_name: str
    period_start_column: str | None = None
    period_end_column: str | None = None


class TemporalManager:
    """Reports on system-versioned tables."""

    def __init__(self, sql_driver: Any):
        """Initialize the temporal manager.

        Args:
            sql_driver: SqlDriver instance for database operations
        """
        self.sql_driver = sql_driver

    async def list_temporal_tables(self) -> List[TemporalTable]:
        """List all system-versioned tables.

        Returns:
            List of TemporalTable objects ordered by schema and table name
        """
        rows = await self.sql_driver.execute_query(
            _TEMPORAL_TABLES_QUERY + "ORDER BY s.name, t.name",
            [SYSTEM_VERSIONED_TEMPORAL_TABLE],
        )
        return [TemporalTable(**row.cells) for row in rows] if rows else []

    async def get_versioning_status(self, schema_name: str, table_name: str) -> Dict[str, Any]:
        """Get the versioning status of a specific table.

        Args:
            schema_name: Schema containing the table
            table_name: Name of the table

        Returns:
            Dict with versioning status and history table details
        """
        rows = await self.sql_driver.execute_query(
            _TEMPORAL_TABLES_QUERY + "AND s.name = ? AND t.name = ?",
            [SYSTEM_VERSIONED_TEMPORAL_TABLE, schema_name, table_name],
        )
        if not rows:
            return {
                "versioned": False,
                "message": f"Table {schema_name}.{table_name} is not system-versioned",
            }

        table = TemporalTable(**rows[0].cells)
        return {
            "versioned": True,
            "schema_name": table.schema_name,
            "table_name": table.table_name,
            "history_table": f"{table.history_schema_name}.{table.history_table_name}",
            "period_columns": [table.period_start_column, table.period_end_column],
        }
