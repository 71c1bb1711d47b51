"""
Item writer that creates one Notion page per item.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any

from loguru import logger
from requests.structures import CaseInsensitiveDict

from notion_batch.batch.item import Chunk, ItemStreamWriter, T
from notion_batch.errors import MappingError
from notion_batch.notion.client import NotionClient
from notion_batch.notion.properties import to_property_payload
from notion_batch.utils import item_to_dict

PropertiesConverter = Callable[[Any], dict[str, Any]]


class PagePropertiesConverter:
    """
    Build create-page properties from an item's fields.

    Property names are matched ignoring case, so two fields that land on the
    same name (e.g. ``status`` and ``Status``) raise MappingError.

    Args:
        title_property: Notion name of the database title property
        property_names: Field name -> Notion property name overrides
        include_none: Write empty values for fields that are None
    """

    def __init__(
        self,
        title_property: str = "Name",
        property_names: Mapping[str, str] | None = None,
        include_none: bool = False,
    ) -> None:
        self.title_property = title_property
        self.property_names = dict(property_names or {})
        self.include_none = include_none

    def __call__(self, item: Any) -> dict[str, Any]:
        fields = item_to_dict(item)
        renamed = CaseInsensitiveDict()
        for field_name, value in fields.items():
            name = self.property_names.get(field_name, field_name)
            if name in renamed:
                raise MappingError(
                    f"{type(item).__name__} has several fields mapped to property '{name}'"
                )
            renamed[name] = value

        if self.title_property not in renamed:
            raise MappingError(f"{type(item).__name__} has no value for title property '{self.title_property}'")

        properties: dict[str, Any] = {self.title_property: to_property_payload(renamed[self.title_property], title=True)}
        for name, value in renamed.items():
            if name.lower() == self.title_property.lower():
                continue
            if value is None and not self.include_none:
                continue
            properties[name] = to_property_payload(value)
        return properties


class NotionItemWriter(ItemStreamWriter[T]):
    """
    Writes each item of a chunk as a new page of a Notion database.

    The client is owned by the caller and is not closed by the writer.
    """

    def __init__(
        self,
        client: NotionClient,
        database_id: str,
        converter: PropertiesConverter | None = None,
        *,
        dry_run: bool = False,
    ) -> None:
        if client is None:
            raise ValueError("'client' must not be None")
        if not database_id:
            raise ValueError("'database_id' must be set")
        self._client = client
        self.database_id = database_id
        self.converter = converter or PagePropertiesConverter()
        self.dry_run = dry_run

    def write(self, chunk: Chunk[T]) -> None:
        for item in chunk:
            self._client.create_page(self.database_id, self.converter(item), dry_run=self.dry_run)
        logger.info(f"Wrote {len(chunk)} pages to Notion database {self.database_id}")
