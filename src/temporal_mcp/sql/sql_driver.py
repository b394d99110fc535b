"""Async SQL execution over a DB-API connection.

Statements use the qmark (`?`) paramstyle, which is what pyodbc expects for
SQL Server. Blocking driver calls run in a worker thread.
"""

import asyncio
import logging
import re
from dataclasses import dataclass
from datetime import datetime
from datetime import timezone
from typing import Any
from typing import Callable
from typing import Dict
from typing import List
from typing import Sequence

logger = logging.getLogger(__name__)

_PASSWORD_PATTERNS = [
    re.compile(r"((?:PWD|Password)\s*=\s*)(\{(?:[^}]|\}\})*\}|[^;]*)", re.IGNORECASE),
    re.compile(r"(://[^:/@\s]+:)([^@\s]+)(@)"),
]


def obfuscate_password(text: str) -> str:
    """Mask passwords in connection strings and URLs."""
    text = _PASSWORD_PATTERNS[0].sub(r"\1****", text)
    return _PASSWORD_PATTERNS[1].sub(r"\1****\3", text)


@dataclass
class RowResult:
    """A single result row keyed by column name."""

    cells: Dict[str, Any]


def _bind_value(value: Any) -> Any:
    # datetime2 period columns carry no offset; send UTC wall-clock time
    if isinstance(value, datetime) and value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


class DbConnPool:
    """Connection source for a SQL Server ODBC connection string.

    pyodbc pools ODBC connections itself, so this only keeps the connection
    string and hands out connections.
    """

    def __init__(self, connection_string: str | None = None, timeout: int = 30):
        self.connection_string = connection_string
        self.timeout = timeout
        self._is_valid = False

    async def pool_connect(self, connection_string: str | None = None) -> None:
        """Store the connection string and verify it with a round trip."""
        if connection_string:
            self.connection_string = connection_string
        if not self.connection_string:
            raise ValueError("Connection string not provided")

        def _check() -> None:
            conn = self.connect()
            try:
                conn.cursor().execute("SELECT 1").fetchone()
            finally:
                conn.close()

        try:
            await asyncio.to_thread(_check)
            self._is_valid = True
        except Exception as e:
            self._is_valid = False
            logger.error(f"Connection check failed: {obfuscate_password(str(e))}")
            raise

    def connect(self) -> Any:
        if not self.connection_string:
            raise ValueError("Connection string not provided")
        # Imported here so the module loads on hosts without the ODBC driver manager
        import pyodbc

        return pyodbc.connect(self.connection_string, autocommit=True, readonly=True, timeout=self.timeout)

    @property
    def is_valid(self) -> bool:
        return self._is_valid

    async def close(self) -> None:
        self._is_valid = False


class SqlDriver:
    """Executes parameterized statements and returns rows as RowResult."""

    def __init__(self, conn: DbConnPool | None = None, connect: Callable[[], Any] | None = None):
        """Initialize the driver.

        Args:
            conn: DbConnPool to take connections from
            connect: Alternative zero-argument factory returning a DB-API connection
        """
        if conn is None and connect is None:
            raise ValueError("Either conn or connect must be provided")
        self.conn = conn
        self._connect = connect or conn.connect

    async def execute_query(self, query: str, params: Sequence[Any] | None = None, max_rows: int | None = None) -> List[RowResult]:
        """Execute a statement, binding params positionally.

        Args:
            query: Statement with `?` placeholders
            params: Values for the placeholders, in order
            max_rows: Stop fetching after this many rows (default: fetch all)

        Returns:
            List of RowResult, empty for statements that return no result set
        """
        bound = [_bind_value(v) for v in params] if params else []
        return await asyncio.to_thread(self._execute, query, bound, max_rows)

    def _execute(self, query: str, params: List[Any], max_rows: int | None) -> List[RowResult]:
        conn = None
        try:
            conn = self._connect()
            cursor = conn.cursor()
            try:
                if params:
                    cursor.execute(query, params)
                else:
                    cursor.execute(query)
                if cursor.description is None:
                    return []
                columns = [desc[0] for desc in cursor.description]
                rows = cursor.fetchall() if max_rows is None else cursor.fetchmany(max_rows)
                return [RowResult(cells=dict(zip(columns, row))) for row in rows]
            finally:
                cursor.close()
        except Exception as e:
            logger.error(f"Error executing query: {obfuscate_password(str(e))}")
            raise
        finally:
            if conn is not None:
                conn.close()
