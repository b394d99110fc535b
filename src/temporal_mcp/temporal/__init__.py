"""Temporal (system-versioned) table queries for SQL Server."""

from .clause_builder import TemporalClauseBuilder
from .clause_builder import TemporalStatement
from .modes import TemporalMode
from .modes import TemporalModeKind
from .modes import to_utc
from .table_resolver import TableNameResolver
from .table_resolver import quote_identifier
from .temporal_manager import TemporalManager
from .temporal_manager import TemporalTable
from .temporal_query import TemporalQuery

__all__ = [
    "TableNameResolver",
    "TemporalClauseBuilder",
    "TemporalManager",
    "TemporalMode",
    "TemporalModeKind",
    "TemporalQuery",
    "TemporalStatement",
    "TemporalTable",
    "quote_identifier",
    "to_utc",
]
