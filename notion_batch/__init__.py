"""
notion-batch: chunk-oriented batch jobs over Notion databases.

    reader = NotionDatabaseItemReader(
        database_id,
        DataclassPropertyMapper(Task),
        sorts=[Sort.by("Due", Direction.DESCENDING)],
        filter=where().checkbox("Done").is_equal_to(False),
    )
    step = ChunkOrientedStep("tasks", reader, writer, chunk_size=50)
    step.execute()
"""

from notion_batch.batch import Chunk, ChunkOrientedStep, ExecutionContext, StepExecution
from notion_batch.mapping import (
    AttributePropertyMapper,
    ConstructorPropertyMapper,
    DataclassPropertyMapper,
    DictPropertyMapper,
    ModelPropertyMapper,
    NotionPropertyMapper,
)
from notion_batch.notion import (
    Direction,
    NotionClient,
    NotionDatabaseItemReader,
    NotionItemWriter,
    Sort,
    Timestamp,
    where,
)

__version__ = "1.0.0"

__all__ = [
    "AttributePropertyMapper",
    "Chunk",
    "ChunkOrientedStep",
    "ConstructorPropertyMapper",
    "DataclassPropertyMapper",
    "DictPropertyMapper",
    "Direction",
    "ExecutionContext",
    "ModelPropertyMapper",
    "NotionClient",
    "NotionDatabaseItemReader",
    "NotionItemWriter",
    "NotionPropertyMapper",
    "Sort",
    "StepExecution",
    "Timestamp",
    "where",
]
