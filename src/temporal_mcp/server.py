# ruff: noqa: B008
import argparse
import asyncio
import logging
import os
import signal
import sys
from datetime import datetime
from typing import Any
from typing import List
from typing import Literal

import mcp.types as types
from mcp.server.fastmcp import FastMCP
from mcp.types import ToolAnnotations
from pydantic import Field
from pydantic import validate_call

from .mapping import TableMapping
from .mapping import direct_lookup
from .sql import DbConnPool
from .sql import SqlDriver
from .sql import obfuscate_password
from .temporal import TableNameResolver
from .temporal import TemporalClauseBuilder
from .temporal import TemporalManager
from .temporal import TemporalMode
from .temporal import TemporalModeKind
from .temporal import TemporalQuery

# Initialize FastMCP with default settings
mcp = FastMCP("sqlserver-temporal-mcp")

ResponseType = List[types.TextContent | types.ImageContent | types.EmbeddedResource]

ModeName = Literal["all", "as_of", "from_to", "between", "contained_in"]

logger = logging.getLogger(__name__)

# Global variables
db_connection = DbConnPool()
shutdown_in_progress = False


async def get_sql_driver() -> SqlDriver:
    """Get a SQL driver bound to the server's connection."""
    return SqlDriver(conn=db_connection)


def get_temporal_query(sql_driver: Any) -> TemporalQuery:
    """Temporal query handler addressing tables by schema and table name."""
    return TemporalQuery(sql_driver, TableNameResolver(direct_lookup))


def format_text_response(text: Any) -> ResponseType:
    """Format a text response."""
    return [types.TextContent(type="text", text=str(text))]


def format_error_response(error: str) -> ResponseType:
    """Format an error response."""
    return format_text_response(f"Error: {error}")


def make_mode(
    mode: str,
    timestamp: datetime | None = None,
    start_time: datetime | None = None,
    end_time: datetime | None = None,
) -> TemporalMode:
    """Build a TemporalMode from tool arguments, checking the required timestamps are present."""
    kind = TemporalModeKind(mode)
    if kind == TemporalModeKind.ALL:
        return TemporalMode.all()
    if kind == TemporalModeKind.AS_OF:
        if timestamp is None:
            raise ValueError("Mode 'as_of' requires 'timestamp'")
        return TemporalMode.as_of(timestamp)
    if start_time is None or end_time is None:
        raise ValueError(f"Mode '{kind.value}' requires both 'start_time' and 'end_time'")
    return TemporalMode(kind, (start_time, end_time))


@mcp.tool(
    description="List all system-versioned (temporal) tables with their history tables and period columns",
    annotations=ToolAnnotations(
        title="List Temporal Tables",
        readOnlyHint=True,
    ),
)
async def list_temporal_tables() -> ResponseType:
    """List all system-versioned tables."""
    try:
        sql_driver = await get_sql_driver()
        temporal_mgr = TemporalManager(sql_driver)
        tables = await temporal_mgr.list_temporal_tables()

        if not tables:
            return format_text_response("No system-versioned tables found.")

        result = []
        for table in tables:
            result.append(
                {
                    "schema": table.schema_name,
                    "table": table.table_name,
                    "history_table": f"{table.history_schema_name}.{table.history_table_name}",
                    "period_columns": [table.period_start_column, table.period_end_column],
                }
            )
        return format_text_response(result)
    except Exception as e:
        logger.error(f"Error listing temporal tables: {obfuscate_password(str(e))}")
        return format_error_response(obfuscate_password(str(e)))


@mcp.tool(
    description="Get the system-versioning status of a specific table, including its history table and period columns.",
    annotations=ToolAnnotations(
        title="Get Temporal Table Status",
        readOnlyHint=True,
    ),
)
@validate_call
async def get_temporal_table_status(
    schema_name: str = Field(description="Schema containing the table"),
    table_name: str = Field(description="Name of the table"),
) -> ResponseType:
    """Get versioning status for a table."""
    try:
        sql_driver = await get_sql_driver()
        temporal_mgr = TemporalManager(sql_driver)
        status = await temporal_mgr.get_versioning_status(schema_name, table_name)
        return format_text_response(status)
    except Exception as e:
        logger.error(f"Error getting temporal table status: {obfuscate_password(str(e))}")
        return format_error_response(obfuscate_password(str(e)))


@mcp.tool(
    description="Show the FOR SYSTEM_TIME statement and UTC parameters a temporal query would run, without running it. "
    "Modes: 'all' (every row version), 'as_of' (needs timestamp), "
    "'from_to', 'between', 'contained_in' (need start_time and end_time).",
    annotations=ToolAnnotations(
        title="Preview Temporal Query",
        readOnlyHint=True,
    ),
)
@validate_call
async def preview_temporal_query(
    schema_name: str = Field(description="Schema containing the table"),
    table_name: str = Field(description="Name of the table"),
    mode: ModeName = Field(description="Temporal mode", default="all"),
    timestamp: datetime | None = Field(description="Instant for 'as_of' (ISO 8601; no offset means server local time)", default=None),
    start_time: datetime | None = Field(description="Range start for range modes (ISO 8601)", default=None),
    end_time: datetime | None = Field(description="Range end for range modes (ISO 8601)", default=None),
) -> ResponseType:
    """Preview the statement for a temporal query."""
    try:
        temporal_mode = make_mode(mode, timestamp, start_time, end_time)
        builder = TemporalClauseBuilder(TableNameResolver(direct_lookup))
        statement = builder.build_for(TableMapping(schema=schema_name, table=table_name), temporal_mode)
        return format_text_response({"sql": statement.sql, "params": [p.isoformat() for p in statement.params]})
    except Exception as e:
        logger.error(f"Error previewing temporal query: {obfuscate_password(str(e))}")
        return format_error_response(obfuscate_password(str(e)))


@mcp.tool(
    description="Query a system-versioned table with FOR SYSTEM_TIME. "
    "Modes: 'all' returns every row version; 'as_of' returns rows as they were at 'timestamp'; "
    "'from_to' returns versions active in [start_time, end_time); "
    "'between' is like 'from_to' but also includes versions that began exactly at end_time; "
    "'contained_in' returns versions opened and closed within [start_time, end_time]. "
    "Timestamps are ISO 8601 and are converted to UTC before querying.",
    annotations=ToolAnnotations(
        title="Query Temporal Table",
        readOnlyHint=True,
    ),
)
@validate_call
async def query_temporal_table(
    schema_name: str = Field(description="Schema containing the table"),
    table_name: str = Field(description="Name of the table"),
    mode: ModeName = Field(description="Temporal mode", default="all"),
    timestamp: datetime | None = Field(description="Instant for 'as_of' (ISO 8601; no offset means server local time)", default=None),
    start_time: datetime | None = Field(description="Range start for range modes (ISO 8601)", default=None),
    end_time: datetime | None = Field(description="Range end for range modes (ISO 8601)", default=None),
    limit: int = Field(description="Maximum rows to return", default=100, ge=1),
) -> ResponseType:
    """Run a temporal query against a table."""
    try:
        temporal_mode = make_mode(mode, timestamp, start_time, end_time)
        handler = get_temporal_query(await get_sql_driver())
        result = await handler.run(TableMapping(schema=schema_name, table=table_name), temporal_mode, limit=limit)
        return format_text_response(result)
    except Exception as e:
        logger.error(f"Error querying temporal table: {obfuscate_password(str(e))}")
        return format_error_response(obfuscate_password(str(e)))


async def main():
    # Parse command line arguments
    parser = argparse.ArgumentParser(description="SQL Server Temporal Tables MCP Server")
    parser.add_argument("database_url", help="ODBC connection string", nargs="?")
    parser.add_argument(
        "--transport",
        type=str,
        choices=["stdio", "sse", "streamable-http"],
        default="stdio",
        help="Select MCP transport: stdio (default), sse, or streamable-http",
    )
    parser.add_argument(
        "--sse-host",
        type=str,
        default="localhost",
        help="Host to bind SSE server to (default: localhost)",
    )
    parser.add_argument(
        "--sse-port",
        type=int,
        default=8000,
        help="Port for SSE server (default: 8000)",
    )
    parser.add_argument(
        "--streamable-http-host",
        type=str,
        default="localhost",
        help="Host to bind streamable HTTP server to (default: localhost)",
    )
    parser.add_argument(
        "--streamable-http-port",
        type=int,
        default=8000,
        help="Port for streamable HTTP server (default: 8000)",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="INFO",
        help="Logging level, written to stderr (default: INFO)",
    )

    args = parser.parse_args()

    logging.basicConfig(
        level=args.log_level,
        stream=sys.stderr,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    logger.info("Starting SQL Server Temporal Tables MCP Server")

    # Get database URL from environment variable or command line
    database_url = os.environ.get("DATABASE_URI", args.database_url)

    if not database_url:
        raise ValueError(
            "Error: No database URL provided. Please specify via 'DATABASE_URI' environment variable or command-line argument.",
        )

    try:
        await db_connection.pool_connect(database_url)
        logger.info("Successfully connected to database")
    except Exception as e:
        logger.warning(
            f"Could not connect to database: {obfuscate_password(str(e))}",
        )
        logger.warning(
            "The MCP server will start but database operations will fail until a valid connection is established.",
        )

    # Set up proper shutdown handling
    try:
        loop = asyncio.get_running_loop()
        signals = (signal.SIGTERM, signal.SIGINT)
        for s in signals:
            loop.add_signal_handler(s, lambda s=s: asyncio.create_task(shutdown(s)))
    except NotImplementedError:
        # Windows doesn't support signals properly
        logger.warning("Signal handling not supported on Windows")

    # Run the server with the selected transport (always async)
    if args.transport == "stdio":
        await mcp.run_stdio_async()
    elif args.transport == "sse":
        mcp.settings.host = args.sse_host
        mcp.settings.port = args.sse_port
        await mcp.run_sse_async()
    elif args.transport == "streamable-http":
        mcp.settings.host = args.streamable_http_host
        mcp.settings.port = args.streamable_http_port
        await mcp.run_streamable_http_async()


async def shutdown(sig=None):
    """Clean shutdown of the server."""
    global shutdown_in_progress

    if shutdown_in_progress:
        logger.warning("Forcing immediate exit")
        sys.exit(1)

    shutdown_in_progress = True

    if sig:
        logger.info(f"Received exit signal {sig.name}")

    try:
        await db_connection.close()
        logger.info("Closed database connections")
    except Exception as e:
        logger.error(f"Error closing database connections: {e}")

    sys.exit(128 + sig if sig is not None else 0)
