"""
Notion Client - Typed wrapper around the official Notion SDK.

IMPORTANT: Uses official Notion Python SDK (notion_client).
Database queries go through client.request() so they do not depend on which
endpoint wrappers the installed SDK version ships; pages use client.pages.create().
"""

from __future__ import annotations

import logging
import time
from typing import Any

import httpx
from loguru import logger
from notion_client import Client

from notion_batch.config import Settings, get_settings
from notion_batch.errors import NotionWriteProtectedError
from notion_batch.logging_config import get_notion_logger

DEFAULT_BASE_URL = "https://api.notion.com"


def normalize_base_url(base_url: str) -> str:
    """Strip a trailing slash and ``/v1``; the SDK appends the version path itself."""
    base_url = base_url.rstrip("/")
    if base_url.endswith("/v1"):
        base_url = base_url[: -len("/v1")]
    return base_url


class NotionClient:
    """
    Typed wrapper around the official Notion SDK.

    Handles:
    - Authentication, API version and timeout from settings
    - Rate limiting between consecutive calls (3 req/sec by default)
    - Write protection via PROTECT_NOTION and DRY_RUN settings
    - Routing SDK logs into loguru
    """

    def __init__(
        self,
        token: str | None = None,
        *,
        base_url: str | None = None,
        http_client: httpx.Client | None = None,
        settings: Settings | None = None,
        rate_limit_delay: float | None = None,
    ) -> None:
        """
        Args:
            token: Integration token; falls back to NOTION_API_KEY
            base_url: API base URL; falls back to NOTION_BASE_URL
            http_client: Transport to use instead of a fresh httpx.Client; left open on close()
            settings: Settings instance (uses get_settings() if None)
            rate_limit_delay: Seconds between calls; falls back to NOTION_RATE_LIMIT_DELAY
        """
        self._settings = settings or get_settings()
        self.token = token or self._settings.notion_api_key
        if not self.token:
            raise ValueError("'token' must be set")

        self.base_url = normalize_base_url(base_url or self._settings.notion_base_url or DEFAULT_BASE_URL)
        self.rate_limit_delay = (
            rate_limit_delay if rate_limit_delay is not None else self._settings.notion_rate_limit_delay
        )
        self._last_call: float | None = None
        self._owns_http_client = http_client is None

        self._client = Client(
            client=http_client,
            auth=self.token,
            base_url=self.base_url,
            notion_version=self._settings.notion_version,
            timeout_ms=self._settings.notion_timeout_ms,
            logger=get_notion_logger(),
            log_level=logging.getLevelName(self._settings.log_level),
        )
        logger.debug(f"Notion client initialized for {self.base_url}")

    @property
    def sdk(self) -> Client:
        """The underlying SDK client."""
        return self._client

    # =========================================================================
    # READ
    # =========================================================================

    def query_database(
        self,
        database_id: str,
        *,
        filter: dict[str, Any] | None = None,
        sorts: list[dict[str, Any]] | None = None,
        start_cursor: str | None = None,
        page_size: int | None = None,
    ) -> dict[str, Any]:
        """
        Query one page of a Notion database.

        Args:
            database_id: The Notion database ID to query
            filter: Rendered filter object, omitted when None
            sorts: Rendered sort objects, omitted when empty
            start_cursor: Cursor returned by the previous page
            page_size: Entries per page (defaults to PAGE_SIZE)

        Returns:
            Response dict with "results", "has_more", "next_cursor"
        """
        body: dict[str, Any] = {"page_size": page_size or self._settings.page_size}
        if sorts:
            body["sorts"] = sorts
        if filter:
            body["filter"] = filter
        if start_cursor:
            body["start_cursor"] = start_cursor

        self._throttle()
        logger.debug(f"Querying Notion database {database_id} (cursor={start_cursor})")
        return self._client.request(
            path=f"databases/{database_id}/query",
            method="POST",
            body=body,
        )

    # =========================================================================
    # WRITE OPERATIONS (protected by PROTECT_NOTION)
    # =========================================================================

    def create_page(
        self,
        database_id: str,
        properties: dict[str, Any],
        dry_run: bool = False,
    ) -> dict[str, Any] | None:
        """
        Create a page in a Notion database.

        Args:
            database_id: Parent database ID
            properties: Property payloads keyed by property name
            dry_run: If True, log but don't execute

        Returns:
            Created page response, or None on dry run

        Raises:
            NotionWriteProtectedError: PROTECT_NOTION is enabled
        """
        if self._settings.protect_notion:
            logger.warning(f"Skipping page creation in {database_id}: PROTECT_NOTION=true")
            raise NotionWriteProtectedError(database_id)

        if dry_run or self._settings.dry_run:
            logger.info(f"DRY RUN: Would create page in {database_id} with {properties}")
            return None

        self._throttle()
        return self._client.pages.create(parent={"database_id": database_id}, properties=properties)

    # =========================================================================
    # LIFECYCLE
    # =========================================================================

    def _throttle(self) -> None:
        if self._last_call is not None and self.rate_limit_delay > 0:
            remaining = self.rate_limit_delay - (time.monotonic() - self._last_call)
            if remaining > 0:
                time.sleep(remaining)
        self._last_call = time.monotonic()

    def close(self) -> None:
        """Close the HTTP transport, unless it was passed in by the caller."""
        if self._owns_http_client:
            self._client.close()

    def __enter__(self) -> NotionClient:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
