"""
Item-level contracts for chunk-oriented processing.

Readers hand out one item at a time and return None once the input is
exhausted. Writers receive whole chunks. Streams persist their restart state
into an ExecutionContext between chunks.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable, Iterable, Iterator, Mapping
from typing import Any, Generic, Optional, TypeVar

T = TypeVar("T")
I = TypeVar("I")  # noqa: E741
O = TypeVar("O")  # noqa: E741

# Returning None from a processor filters the item out of the chunk
ItemProcessor = Callable[[I], Optional[O]]


class ExecutionContext:
    """Restart state shared by the streams of a step."""

    def __init__(self, values: Mapping[str, Any] | None = None) -> None:
        self._values: dict[str, Any] = dict(values or {})

    def put(self, key: str, value: Any) -> None:
        self._values[key] = value

    def get(self, key: str, default: Any = None) -> Any:
        return self._values.get(key, default)

    def get_int(self, key: str, default: int | None = None) -> int | None:
        value = self._values.get(key)
        if value is None:
            return default
        return int(value)

    def contains(self, key: str) -> bool:
        return key in self._values

    def remove(self, key: str) -> Any:
        return self._values.pop(key, None)

    def to_dict(self) -> dict[str, Any]:
        return dict(self._values)

    def __contains__(self, key: object) -> bool:
        return key in self._values

    def __len__(self) -> int:
        return len(self._values)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ExecutionContext):
            return NotImplemented
        return self._values == other._values

    def __repr__(self) -> str:
        return f"ExecutionContext({self._values!r})"


class Chunk(Generic[T]):
    """Ordered group of items written together."""

    def __init__(self, items: Iterable[T] = ()) -> None:
        self.items: list[T] = list(items)

    def add(self, item: T) -> None:
        self.items.append(item)

    def is_empty(self) -> bool:
        return not self.items

    def __iter__(self) -> Iterator[T]:
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)

    def __repr__(self) -> str:
        return f"Chunk(items={self.items!r})"


class ItemStream:
    """
    Lifecycle hooks for readers and writers that hold resources or state.

    Using a stream as a context manager opens it with a fresh ExecutionContext
    and closes it on exit.
    """

    def open(self, execution_context: ExecutionContext) -> None:
        """Acquire resources and restore state from the context."""

    def update(self, execution_context: ExecutionContext) -> None:
        """Save restart state into the context."""

    def close(self) -> None:
        """Release resources."""

    def __enter__(self):
        self.open(ExecutionContext())
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


class ItemReader(ABC, Generic[T]):
    """Provides items one at a time; None marks the end of input."""

    @abstractmethod
    def read(self) -> T | None:
        ...

    def __iter__(self) -> Iterator[T]:
        while True:
            item = self.read()
            if item is None:
                return
            yield item


class ItemWriter(ABC, Generic[T]):
    """Consumes items a chunk at a time."""

    @abstractmethod
    def write(self, chunk: Chunk[T]) -> None:
        ...


class ItemStreamReader(ItemStream, ItemReader[T]):
    """Reader with stream lifecycle."""


class ItemStreamWriter(ItemStream, ItemWriter[T]):
    """Writer with stream lifecycle."""
