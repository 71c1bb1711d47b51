"""
Item writer that inserts items as rows of a SQL table.
"""

from __future__ import annotations

import json
from collections.abc import Callable
from datetime import date, datetime
from typing import Any

from loguru import logger
from requests.structures import CaseInsensitiveDict
from sqlalchemy import Engine, String, Table, insert

from notion_batch.batch.item import Chunk, ExecutionContext, ItemStreamWriter, T
from notion_batch.db.database import session_scope
from notion_batch.utils import item_to_dict


def _to_text(value: Any) -> Any:
    if value is None or isinstance(value, str):
        return value
    if isinstance(value, (list, tuple, dict)):
        return json.dumps(value, default=str)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return str(value)


class SqlAlchemyItemWriter(ItemStreamWriter[T]):
    """
    Inserts each chunk into ``table`` in a single transaction.

    Item fields are matched to column names ignoring case; fields without a
    column are dropped. Values bound to text columns are stringified (lists and
    dicts as JSON). Autoincrement primary keys are always left to the database,
    so an item property named ``id`` is dropped.
    """

    def __init__(
        self,
        engine: Engine,
        table: Table,
        converter: Callable[[T], dict[str, Any]] | None = None,
        create_table: bool = True,
    ) -> None:
        self.engine = engine
        self.table = table
        self.converter = converter or item_to_dict
        self.create_table = create_table

    def open(self, execution_context: ExecutionContext) -> None:
        if self.create_table:
            self.table.create(self.engine, checkfirst=True)
            logger.debug(f"Ensured table '{self.table.name}' exists")

    def write(self, chunk: Chunk[T]) -> None:
        if chunk.is_empty():
            return

        rows = [self._row(item) for item in chunk]
        with session_scope(self.engine) as session:
            session.execute(insert(self.table), rows)
        logger.debug(f"Inserted {len(rows)} rows into '{self.table.name}'")

    def _row(self, item: T) -> dict[str, Any]:
        values = CaseInsensitiveDict(self.converter(item))
        row: dict[str, Any] = {}
        for column in self.table.columns:
            if column.primary_key and column.autoincrement:
                continue
            if column.name not in values:
                row[column.name] = None
                continue
            value = values[column.name]
            row[column.name] = _to_text(value) if isinstance(column.type, String) else value
        return row
