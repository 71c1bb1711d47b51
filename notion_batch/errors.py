"""Exceptions raised by notion-batch."""


class NotionBatchError(Exception):
    """Base class for notion-batch errors."""


class ItemStreamError(NotionBatchError):
    """An item stream was misused or failed to open, update or close."""


class MappingError(NotionBatchError):
    """Page properties could not be mapped to the target type."""


class NotionWriteProtectedError(NotionBatchError):
    """A Notion write was attempted while PROTECT_NOTION is enabled."""

    def __init__(self, database_id: str) -> None:
        super().__init__(f"Refusing to write to Notion database {database_id}: PROTECT_NOTION=true")
        self.database_id = database_id
