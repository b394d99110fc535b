"""FOR SYSTEM_TIME statement builder.

Boundary semantics of each clause, as evaluated by SQL Server against the
period columns (ValidFrom, ValidTo) of every row version:

    ALL                      every version, no filtering
    AS OF t                  ValidFrom <= t AND ValidTo > t
    FROM s TO e              ValidFrom < e AND ValidTo > s
    BETWEEN s AND e          ValidFrom <= e AND ValidTo > s
    CONTAINED IN (s, e)      ValidFrom >= s AND ValidTo <= e

Timestamps are only ever bound through positional parameters.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any
from typing import Tuple

from temporal_mcp.errors import InvalidRangeError

from .modes import TemporalMode
from .modes import TemporalModeKind
from .modes import to_utc
from .table_resolver import TableNameResolver

logger = logging.getLogger(__name__)

PLACEHOLDER = "?"

_CLAUSES = {
    TemporalModeKind.ALL: "ALL",
    TemporalModeKind.AS_OF: "AS OF {0}",
    TemporalModeKind.FROM_TO: "FROM {0} TO {1}",
    TemporalModeKind.BETWEEN: "BETWEEN {0} AND {1}",
    TemporalModeKind.CONTAINED_IN: "CONTAINED IN ({0}, {1})",
}


@dataclass(frozen=True)
class TemporalStatement:
    """Statement text with positional placeholders and its bound parameters."""

    sql: str
    params: Tuple[datetime, ...] = ()

    def __iter__(self):
        # Allows `sql, params = statement`
        return iter((self.sql, self.params))


class TemporalClauseBuilder:
    """Builds `SELECT * FROM <table> FOR SYSTEM_TIME ...` statements."""

    def __init__(self, resolver: TableNameResolver | None = None):
        self.resolver = resolver

    def build(self, qualified_name: str, mode: TemporalMode) -> TemporalStatement:
        """Build the statement for a qualified table name and a mode.

        Args:
            qualified_name: Quoted table identifier, e.g. "[dbo].[Employee]"
            mode: Temporal mode and its timestamps

        Returns:
            TemporalStatement with UTC-normalized parameters

        Raises:
            InvalidRangeError: If a range mode has start after end
        """
        params = tuple(to_utc(ts) for ts in mode.timestamps)
        if mode.is_range and params[0] > params[1]:
            raise InvalidRangeError(params[0], params[1])

        clause = _CLAUSES[mode.kind].format(*([PLACEHOLDER] * len(params)))
        sql = f"SELECT * FROM {qualified_name} FOR SYSTEM_TIME {clause}"
        logger.debug(f"Built {mode.kind.name} statement with {len(params)} parameter(s): {sql}")
        return TemporalStatement(sql=sql, params=params)

    def build_for(self, descriptor: Any, mode: TemporalMode) -> TemporalStatement:
        """Resolve the descriptor's table and build the statement for it."""
        if self.resolver is None:
            raise RuntimeError("TemporalClauseBuilder was created without a TableNameResolver")
        return self.build(self.resolver.resolve(descriptor), mode)
