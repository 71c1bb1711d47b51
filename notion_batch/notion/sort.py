"""
Sort conditions to order the entries returned from a database query.

The direction defaults to ``DEFAULT_DIRECTION`` (ascending).
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum
from typing import Any


class Direction(Enum):
    """Sort directions."""

    ASCENDING = "ascending"
    DESCENDING = "descending"


class Timestamp(Enum):
    """Timestamps associated with database entries."""

    CREATED_TIME = "created_time"
    LAST_EDITED_TIME = "last_edited_time"


DEFAULT_DIRECTION = Direction.ASCENDING

_DIRECTION_ALIASES = {
    "asc": Direction.ASCENDING,
    "ascending": Direction.ASCENDING,
    "desc": Direction.DESCENDING,
    "descending": Direction.DESCENDING,
}


class Sort(ABC):
    """A single sort criterion of a database query."""

    DEFAULT_DIRECTION = DEFAULT_DIRECTION

    def __init__(self, direction: Direction) -> None:
        if not isinstance(direction, Direction):
            raise TypeError(f"direction must be a Direction, got {direction!r}")
        self.direction = direction

    @staticmethod
    def by(target: str | Timestamp, direction: Direction = DEFAULT_DIRECTION) -> Sort:
        """
        Sort by a property name, or by an entry timestamp.

        Args:
            target: Property name, or a ``Timestamp``
            direction: Sort direction

        Returns:
            The Sort instance
        """
        if isinstance(target, Timestamp):
            return TimestampSort(target, direction)
        return PropertySort(target, direction)

    @staticmethod
    def parse(text: str) -> Sort:
        """
        Parse ``"<property>[:asc|desc]"``.

        ``created_time`` and ``last_edited_time`` select the entry timestamps.
        """
        target, separator, suffix = text.rpartition(":")
        direction = _DIRECTION_ALIASES.get(suffix.strip().lower()) if separator else None
        if direction is None:
            target, direction = text, DEFAULT_DIRECTION

        target = target.strip()
        if not target:
            raise ValueError(f"Invalid sort: {text!r}")
        try:
            return Sort.by(Timestamp(target), direction)
        except ValueError:
            return Sort.by(target, direction)

    @abstractmethod
    def to_notion(self) -> dict[str, Any]:
        """Render the sort object of a database query request."""

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return self.to_notion() == other.to_notion()

    def __hash__(self) -> int:
        return hash(tuple(sorted(self.to_notion().items())))


class PropertySort(Sort):
    """Orders the query by a particular property."""

    def __init__(self, property: str, direction: Direction = DEFAULT_DIRECTION) -> None:
        if not isinstance(property, str):
            raise TypeError(f"property must be a string, got {property!r}")
        super().__init__(direction)
        self.property = property

    def to_notion(self) -> dict[str, Any]:
        return {"property": self.property, "direction": self.direction.value}

    def __str__(self) -> str:
        return f"{self.property}: {self.direction.name}"

    def __repr__(self) -> str:
        return f"PropertySort({self.property!r}, {self.direction})"


class TimestampSort(Sort):
    """Orders the query by the timestamp associated with an entry."""

    def __init__(self, timestamp: Timestamp, direction: Direction = DEFAULT_DIRECTION) -> None:
        if not isinstance(timestamp, Timestamp):
            raise TypeError(f"timestamp must be a Timestamp, got {timestamp!r}")
        super().__init__(direction)
        self.timestamp = timestamp

    def to_notion(self) -> dict[str, Any]:
        return {"timestamp": self.timestamp.value, "direction": self.direction.value}

    def __str__(self) -> str:
        return f"{self.timestamp.name}: {self.direction.name}"

    def __repr__(self) -> str:
        return f"TimestampSort({self.timestamp}, {self.direction})"
