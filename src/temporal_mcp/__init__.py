"""Query SQL Server system-versioned tables with FOR SYSTEM_TIME."""

import asyncio

from . import server
from .errors import InvalidRangeError
from .errors import TemporalQueryError
from .errors import UnmappedEntityError
from .mapping import MappingRegistry
from .mapping import TableMapping
from .temporal import TableNameResolver
from .temporal import TemporalClauseBuilder
from .temporal import TemporalMode
from .temporal import TemporalQuery
from .temporal import TemporalStatement


def main():
    """Main entry point for the package."""
    asyncio.run(server.main())


__all__ = [
    "InvalidRangeError",
    "MappingRegistry",
    "TableMapping",
    "TableNameResolver",
    "TemporalClauseBuilder",
    "TemporalMode",
    "TemporalQuery",
    "TemporalQueryError",
    "TemporalStatement",
    "UnmappedEntityError",
    "main",
    "server",
]
