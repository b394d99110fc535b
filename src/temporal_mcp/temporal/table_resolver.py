"""Resolve entity descriptors to quoted, schema-qualified table names."""

from typing import Any

from temporal_mcp.errors import UnmappedEntityError
from temporal_mcp.mapping import TableLookup


def quote_identifier(name: str) -> str:
    """Bracket-quote an identifier, doubling any closing bracket (QUOTENAME rules)."""
    return "[" + name.replace("]", "]]") + "]"


class TableNameResolver:
    """Turns entity descriptors into `[schema].[table]` identifiers."""

    def __init__(self, lookup: TableLookup):
        """Initialize the resolver.

        Args:
            lookup: Callable mapping a descriptor to its TableMapping
        """
        self.lookup = lookup

    def resolve(self, descriptor: Any) -> str:
        """Return the qualified table name for a descriptor.

        Raises:
            UnmappedEntityError: If the mapping layer does not know the descriptor
        """
        try:
            mapping = self.lookup(descriptor)
        except UnmappedEntityError:
            raise
        except LookupError as e:
            raise UnmappedEntityError(descriptor) from e
        return f"{quote_identifier(mapping.schema)}.{quote_identifier(mapping.table)}"
