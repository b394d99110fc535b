"""Temporal query modes and timestamp normalization."""

from dataclasses import dataclass
from datetime import datetime
from datetime import timezone
from enum import Enum
from typing import Tuple


class TemporalModeKind(str, Enum):
    """Shapes of a FOR SYSTEM_TIME query."""

    ALL = "all"  # Every row version, current and history
    AS_OF = "as_of"  # Version valid at an instant
    FROM_TO = "from_to"  # Versions active in [start, end)
    BETWEEN = "between"  # Same as FROM_TO, plus versions starting exactly at end
    CONTAINED_IN = "contained_in"  # Versions opened and closed within [start, end]


RANGE_KINDS = frozenset({TemporalModeKind.FROM_TO, TemporalModeKind.BETWEEN, TemporalModeKind.CONTAINED_IN})

_ARITY = {
    TemporalModeKind.ALL: 0,
    TemporalModeKind.AS_OF: 1,
    TemporalModeKind.FROM_TO: 2,
    TemporalModeKind.BETWEEN: 2,
    TemporalModeKind.CONTAINED_IN: 2,
}


def to_utc(value: datetime) -> datetime:
    """Convert a timestamp to an aware UTC datetime.

    Naive datetimes are taken to be in the host's local time zone.
    """
    if not isinstance(value, datetime):
        raise TypeError(f"Expected a datetime, got {type(value).__name__}")
    return value.astimezone(timezone.utc)


@dataclass(frozen=True)
class TemporalMode:
    """A temporal query mode and the timestamps it carries.

    Use the named constructors rather than building instances directly:

        TemporalMode.as_of(datetime(2023, 1, 1, tzinfo=timezone.utc))
        TemporalMode.between(start, end)
    """

    kind: TemporalModeKind
    timestamps: Tuple[datetime, ...] = ()

    def __post_init__(self):
        kind = TemporalModeKind(self.kind)
        object.__setattr__(self, "kind", kind)
        object.__setattr__(self, "timestamps", tuple(self.timestamps))
        expected = _ARITY[kind]
        if len(self.timestamps) != expected:
            raise ValueError(f"{kind.name} takes {expected} timestamp(s), got {len(self.timestamps)}")

    @classmethod
    def all(cls) -> "TemporalMode":
        return cls(TemporalModeKind.ALL)

    @classmethod
    def as_of(cls, instant: datetime) -> "TemporalMode":
        return cls(TemporalModeKind.AS_OF, (instant,))

    @classmethod
    def from_to(cls, start: datetime, end: datetime) -> "TemporalMode":
        return cls(TemporalModeKind.FROM_TO, (start, end))

    @classmethod
    def between(cls, start: datetime, end: datetime) -> "TemporalMode":
        return cls(TemporalModeKind.BETWEEN, (start, end))

    @classmethod
    def contained_in(cls, start: datetime, end: datetime) -> "TemporalMode":
        return cls(TemporalModeKind.CONTAINED_IN, (start, end))

    @property
    def is_range(self) -> bool:
        return self.kind in RANGE_KINDS
