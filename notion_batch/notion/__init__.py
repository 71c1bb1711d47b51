"""
Notion integration.

Components:
- client: Low-level Notion SDK wrapper
- reader: Paginated database reader
- writer: Page-creating writer
- sort / filter: Query builders
- properties: Property value conversion
"""

from notion_batch.notion.client import NotionClient
from notion_batch.notion.filter import Filter, FilterBuilder, where
from notion_batch.notion.reader import NotionDatabaseItemReader
from notion_batch.notion.sort import DEFAULT_DIRECTION, Direction, Sort, Timestamp
from notion_batch.notion.writer import NotionItemWriter, PagePropertiesConverter

__all__ = [
    "DEFAULT_DIRECTION",
    "Direction",
    "Filter",
    "FilterBuilder",
    "NotionClient",
    "NotionDatabaseItemReader",
    "NotionItemWriter",
    "PagePropertiesConverter",
    "Sort",
    "Timestamp",
    "where",
]
