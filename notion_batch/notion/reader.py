"""
Restartable item reader over a Notion database query.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

import httpx
from loguru import logger

from notion_batch.batch.readers import AbstractPaginatedItemReader
from notion_batch.batch.item import T
from notion_batch.config import Settings, get_settings
from notion_batch.mapping.base import NotionPropertyMapper
from notion_batch.notion.client import DEFAULT_BASE_URL, NotionClient
from notion_batch.notion.filter import Filter
from notion_batch.notion.properties import page_properties
from notion_batch.notion.sort import Sort

# Upper bound of page_size accepted by the Notion API
MAX_PAGE_SIZE = 100


class NotionDatabaseItemReader(AbstractPaginatedItemReader[T]):
    """
    Reads the entries of a Notion database, one query page at a time.

    Each entry's properties are reduced to plain values and handed to the
    properties mapper, which builds the item. The Notion client is created on
    open and closed on close; an injected ``http_client`` stays open, so the
    reader can be reopened.
    """

    def __init__(
        self,
        database_id: str,
        properties_mapper: NotionPropertyMapper[T],
        *,
        token: str | None = None,
        base_url: str | None = None,
        sorts: Iterable[Sort] = (),
        filter: Filter | None = None,
        page_size: int = AbstractPaginatedItemReader.DEFAULT_PAGE_SIZE,
        name: str | None = None,
        max_item_count: int | None = None,
        save_state: bool = True,
        http_client: httpx.Client | None = None,
        settings: Settings | None = None,
        rate_limit_delay: float | None = None,
    ) -> None:
        super().__init__(
            page_size=page_size,
            name=name,
            max_item_count=max_item_count,
            save_state=save_state,
        )
        self._settings = settings or get_settings()

        if not database_id:
            raise ValueError("'database_id' must be set")
        if properties_mapper is None:
            raise ValueError("'properties_mapper' must be set")
        token = token or self._settings.notion_api_key
        if not token:
            raise ValueError("'token' must be set")

        self.database_id = database_id
        self.properties_mapper = properties_mapper
        self.base_url = base_url or self._settings.notion_base_url or DEFAULT_BASE_URL
        self.sorts = list(sorts)
        self.filter = filter
        self._token = token
        self._http_client = http_client
        self._rate_limit_delay = rate_limit_delay
        self._client: NotionClient | None = None
        self._has_more = False
        self._next_cursor: str | None = None

    def _check_page_size(self, value: int) -> None:
        super()._check_page_size(value)
        if value > MAX_PAGE_SIZE:
            raise ValueError(f"page_size must be less than or equal to {MAX_PAGE_SIZE}")

    def _do_open(self) -> None:
        super()._do_open()
        self._client = NotionClient(
            self._token,
            base_url=self.base_url,
            http_client=self._http_client,
            settings=self._settings,
            rate_limit_delay=self._rate_limit_delay,
        )
        self._has_more = True
        self._next_cursor = None
        logger.info(f"Opened reader '{self.name}' on Notion database {self.database_id}")

    def _do_close(self) -> None:
        super()._do_close()
        if self._client is not None:
            self._client.close()
            self._client = None

    def _do_page_read(self) -> list[T] | None:
        # Filtered queries may return empty pages that still have more behind them
        while self._has_more:
            response = self._client.query_database(
                self.database_id,
                filter=self.filter.to_notion() if self.filter is not None else None,
                sorts=[s.to_notion() for s in self.sorts],
                start_cursor=self._next_cursor,
                page_size=self.page_size,
            )

            self._has_more = bool(response.get("has_more"))
            self._next_cursor = response.get("next_cursor")
            if self._has_more and not self._next_cursor:
                logger.warning(f"Notion reported more results without a cursor for {self.database_id}; stopping")
                self._has_more = False

            results = response.get("results") or []
            logger.debug(f"Fetched page {self.page + 1} with {len(results)} entries from {self.database_id}")
            if results:
                return [self._map(page) for page in results]

        return None

    def _map(self, page: dict[str, Any]) -> T:
        return self.properties_mapper.map(page_properties(page))
