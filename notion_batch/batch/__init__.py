"""
Chunk-oriented batch infrastructure.

Components:
- item: reader/writer/stream contracts, Chunk and ExecutionContext
- readers: item-counting and paginated base readers
- step: ChunkOrientedStep runner and StepExecution stats
"""

from notion_batch.batch.item import (
    Chunk,
    ExecutionContext,
    ItemProcessor,
    ItemReader,
    ItemStream,
    ItemStreamReader,
    ItemStreamWriter,
    ItemWriter,
)
from notion_batch.batch.readers import AbstractItemCountingItemReader, AbstractPaginatedItemReader
from notion_batch.batch.step import BatchStatus, ChunkOrientedStep, StepExecution

__all__ = [
    "AbstractItemCountingItemReader",
    "AbstractPaginatedItemReader",
    "BatchStatus",
    "Chunk",
    "ChunkOrientedStep",
    "ExecutionContext",
    "ItemProcessor",
    "ItemReader",
    "ItemStream",
    "ItemStreamReader",
    "ItemStreamWriter",
    "ItemWriter",
    "StepExecution",
]
