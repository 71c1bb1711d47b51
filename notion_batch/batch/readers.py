"""
Base readers: item counting with restart support, and page-by-page fetching.
"""

from __future__ import annotations

import threading
from abc import abstractmethod
from collections.abc import Iterable, Iterator

from loguru import logger

from notion_batch.batch.item import ExecutionContext, ItemStreamReader, T
from notion_batch.errors import ItemStreamError

_EXHAUSTED = object()


class AbstractItemCountingItemReader(ItemStreamReader[T]):
    """
    Reader that counts the items it hands out.

    The count is saved as ``<name>.read.count`` on update. Opening with a
    context that holds a saved count skips that many items, so a failed step
    resumes where its last chunk was committed.
    """

    READ_COUNT = "read.count"
    READ_COUNT_MAX = "read.count.max"

    def __init__(
        self,
        name: str | None = None,
        max_item_count: int | None = None,
        save_state: bool = True,
    ) -> None:
        if max_item_count is not None and max_item_count < 0:
            raise ValueError("max_item_count must not be negative")
        self.name = name or type(self).__name__
        self.max_item_count = max_item_count
        self.save_state = save_state
        self.current_item_count = 0
        self._opened = False

    @abstractmethod
    def _do_open(self) -> None:
        ...

    @abstractmethod
    def _do_read(self) -> T | None:
        ...

    @abstractmethod
    def _do_close(self) -> None:
        ...

    def _key(self, suffix: str) -> str:
        return f"{self.name}.{suffix}"

    def _jump_to_item(self, item_index: int) -> None:
        """Move past the first ``item_index`` items by reading and discarding them."""
        for _ in range(item_index):
            if self._do_read() is None:
                break

    def read(self) -> T | None:
        if not self._opened:
            raise ItemStreamError(f"Reader '{self.name}' must be open before it can be read")

        if self.max_item_count is not None and self.current_item_count >= self.max_item_count:
            return None

        item = self._do_read()
        if item is not None:
            self.current_item_count += 1
        return item

    def open(self, execution_context: ExecutionContext) -> None:
        try:
            self._do_open()
        except Exception as e:
            raise ItemStreamError(f"Failed to initialize the reader '{self.name}'") from e

        self._opened = True
        self.current_item_count = 0

        if not self.save_state:
            return

        max_key = self._key(self.READ_COUNT_MAX)
        if execution_context.contains(max_key):
            self.max_item_count = execution_context.get_int(max_key)

        item_count = execution_context.get_int(self._key(self.READ_COUNT), 0)
        if item_count > 0 and (self.max_item_count is None or item_count < self.max_item_count):
            logger.info(f"Restarting reader '{self.name}' after {item_count} items")
            try:
                self._jump_to_item(item_count)
            except Exception as e:
                raise ItemStreamError(f"Could not move to stored position on restart of '{self.name}'") from e
        self.current_item_count = item_count

    def update(self, execution_context: ExecutionContext) -> None:
        if not self.save_state:
            return
        execution_context.put(self._key(self.READ_COUNT), self.current_item_count)
        if self.max_item_count is not None:
            execution_context.put(self._key(self.READ_COUNT_MAX), self.max_item_count)

    def close(self) -> None:
        self.current_item_count = 0
        if not self._opened:
            return
        self._opened = False
        try:
            self._do_close()
        except Exception as e:
            raise ItemStreamError(f"Error while closing the reader '{self.name}'") from e


class AbstractPaginatedItemReader(AbstractItemCountingItemReader[T]):
    """
    Reader that pulls its input one page at a time.

    Subclasses implement ``_do_page_read``; returning None or an empty page
    ends the input.
    """

    DEFAULT_PAGE_SIZE = 10

    def __init__(self, page_size: int = DEFAULT_PAGE_SIZE, **kwargs) -> None:
        super().__init__(**kwargs)
        self.page_size = page_size
        self.page = 0
        self._results: Iterator[T] | None = None
        self._lock = threading.Lock()

    @property
    def page_size(self) -> int:
        return self._page_size

    @page_size.setter
    def page_size(self, value: int) -> None:
        self._check_page_size(value)
        self._page_size = value

    def _check_page_size(self, value: int) -> None:
        if value < 1:
            raise ValueError("page_size must be greater than zero")

    @abstractmethod
    def _do_page_read(self) -> Iterable[T] | None:
        ...

    def _do_open(self) -> None:
        self.page = 0
        self._results = None

    def _do_close(self) -> None:
        self._results = None

    def _do_read(self) -> T | None:
        with self._lock:
            item = _EXHAUSTED if self._results is None else next(self._results, _EXHAUSTED)
            if item is not _EXHAUSTED:
                return item

            page = self._do_page_read()
            self.page += 1
            if page is None:
                self._results = None
                return None

            self._results = iter(page)
            item = next(self._results, _EXHAUSTED)
            return None if item is _EXHAUSTED else item
