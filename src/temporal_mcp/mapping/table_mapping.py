"""Entity to table mappings for system-versioned tables.

The mapping layer answers one question: which schema and table back a given
entity descriptor. Descriptors are opaque to the rest of the package; any
hashable value works (a model class, a string name).
"""

import logging
import threading
from dataclasses import dataclass
from typing import Any
from typing import Callable
from typing import Dict
from typing import Hashable

from temporal_mcp.errors import UnmappedEntityError

logger = logging.getLogger(__name__)

DEFAULT_SCHEMA = "dbo"


@dataclass(frozen=True)
class TableMapping:
    """Schema and table name backing an entity."""

    schema: str
    table: str

    def __post_init__(self):
        if not self.schema or not self.schema.strip():
            raise ValueError("Schema name must not be empty")
        if not self.table or not self.table.strip():
            raise ValueError("Table name must not be empty")


TableLookup = Callable[[Any], TableMapping]


class MappingRegistry:
    """Registry of entity descriptors and the tables they map to."""

    def __init__(self):
        self._mappings: Dict[Hashable, TableMapping] = {}
        self._lock = threading.Lock()

    def register(self, descriptor: Hashable, table: str, schema: str = DEFAULT_SCHEMA) -> TableMapping:
        """Register the table for a descriptor.

        Args:
            descriptor: Entity descriptor (model class, name, ...)
            table: Table name
            schema: Schema name (default: "dbo")

        Returns:
            The registered TableMapping
        """
        mapping = TableMapping(schema=schema, table=table)
        with self._lock:
            previous = self._mappings.get(descriptor)
            if previous is not None and previous != mapping:
                logger.warning(f"Remapping {descriptor!r} from {previous.schema}.{previous.table} to {schema}.{table}")
            self._mappings[descriptor] = mapping
        return mapping

    def unregister(self, descriptor: Hashable) -> None:
        with self._lock:
            self._mappings.pop(descriptor, None)

    def lookup(self, descriptor: Hashable) -> TableMapping:
        """Return the mapping for a descriptor.

        Raises:
            UnmappedEntityError: If the descriptor was never registered
        """
        try:
            return self._mappings[descriptor]
        except (KeyError, TypeError):
            raise UnmappedEntityError(descriptor) from None

    def __contains__(self, descriptor: Hashable) -> bool:
        try:
            return descriptor in self._mappings
        except TypeError:
            return False

    def __len__(self) -> int:
        return len(self._mappings)

    def temporal_table(self, table: str | None = None, schema: str = DEFAULT_SCHEMA) -> Callable[[type], type]:
        """Class decorator registering a model class.

        The table name defaults to the class name.
        """

        def decorator(cls: type) -> type:
            self.register(cls, table or cls.__name__, schema)
            return cls

        return decorator


def direct_lookup(descriptor: Any) -> TableMapping:
    """Lookup for descriptors that already name their table.

    Accepts a TableMapping or a (schema, table) pair. Used where callers pass
    schema and table names directly instead of registered entities.
    """
    if isinstance(descriptor, TableMapping):
        return descriptor
    if isinstance(descriptor, tuple) and len(descriptor) == 2:
        schema, table = descriptor
        try:
            return TableMapping(schema=schema, table=table)
        except (TypeError, ValueError, AttributeError):
            raise UnmappedEntityError(descriptor) from None
    raise UnmappedEntityError(descriptor)
