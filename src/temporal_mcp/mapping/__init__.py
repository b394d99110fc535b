"""Entity to table mapping layer."""

from .table_mapping import DEFAULT_SCHEMA
from .table_mapping import MappingRegistry
from .table_mapping import TableLookup
from .table_mapping import TableMapping
from .table_mapping import direct_lookup

__all__ = ["DEFAULT_SCHEMA", "MappingRegistry", "TableLookup", "TableMapping", "direct_lookup"]
