"""
Chunk-oriented step runner.

Reads items until a chunk is full, passes each through the optional processor,
writes the chunk, then saves stream state. Repeats until the reader is exhausted.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any, Generic

from loguru import logger

from notion_batch.batch.item import (
    Chunk,
    ExecutionContext,
    I,
    ItemProcessor,
    ItemReader,
    ItemStream,
    ItemWriter,
    O,
)
from notion_batch.config import get_settings
from notion_batch.errors import ItemStreamError


class BatchStatus(str, Enum):
    STARTING = "STARTING"
    STARTED = "STARTED"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"


class StepExecution:
    """Statistics for a step run."""

    def __init__(self, step_name: str, execution_context: ExecutionContext) -> None:
        self.step_name = step_name
        self.execution_context = execution_context
        self.status = BatchStatus.STARTING
        self.read_count = 0
        self.filter_count = 0
        self.write_count = 0
        self.commit_count = 0
        self.start_time = datetime.now()
        self.end_time: datetime | None = None
        self.failures: list[BaseException] = []

    def fail(self, error: BaseException) -> None:
        self.status = BatchStatus.FAILED
        self.failures.append(error)

    def finish(self) -> None:
        """Mark step as finished."""
        self.end_time = datetime.now()

    def duration_seconds(self) -> float:
        """Calculate duration in seconds."""
        end = self.end_time or datetime.now()
        return (end - self.start_time).total_seconds()

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging/CLI output."""
        return {
            "step_name": self.step_name,
            "status": self.status.value,
            "read_count": self.read_count,
            "filter_count": self.filter_count,
            "write_count": self.write_count,
            "commit_count": self.commit_count,
            "start_time": self.start_time.isoformat(),
            "end_time": self.end_time.isoformat() if self.end_time else None,
            "duration_seconds": round(self.duration_seconds(), 3),
            "failures": [str(e) for e in self.failures],
        }


class ChunkOrientedStep(Generic[I, O]):
    """
    Runs a reader -> processor -> writer loop in chunks of ``chunk_size`` items.

    Every reader, processor or writer that is an ItemStream is opened before
    the first chunk, updated after each written chunk and closed at the end,
    whether the step succeeds or not.
    """

    def __init__(
        self,
        name: str,
        reader: ItemReader[I],
        writer: ItemWriter[O],
        processor: ItemProcessor[I, O] | None = None,
        chunk_size: int | None = None,
    ) -> None:
        chunk_size = chunk_size if chunk_size is not None else get_settings().chunk_size
        if chunk_size < 1:
            raise ValueError("chunk_size must be greater than zero")
        self.name = name
        self.reader = reader
        self.writer = writer
        self.processor = processor
        self.chunk_size = chunk_size
        self.last_execution: StepExecution | None = None

    @property
    def streams(self) -> list[ItemStream]:
        return [c for c in (self.reader, self.processor, self.writer) if isinstance(c, ItemStream)]

    def execute(self, execution_context: ExecutionContext | None = None) -> StepExecution:
        """
        Run the step to completion.

        Args:
            execution_context: Restart state from a previous failed run, if any

        Returns:
            StepExecution with final status and counts

        Raises:
            Whatever the reader, processor or writer raised; the execution is
            marked FAILED first and stays available as ``last_execution``.
        """
        context = execution_context if execution_context is not None else ExecutionContext()
        execution = StepExecution(self.name, context)
        self.last_execution = execution
        opened: list[ItemStream] = []

        logger.info(f"Executing step '{self.name}' (chunk_size={self.chunk_size})")
        execution.status = BatchStatus.STARTED

        try:
            for stream in self.streams:
                stream.open(context)
                opened.append(stream)
            self._run_chunks(context, execution)
        except Exception as e:
            execution.fail(e)
            logger.error(f"Step '{self.name}' failed after {execution.commit_count} chunks: {e}")
            raise
        finally:
            close_errors = self._close_streams(opened)
            for error in close_errors:
                execution.fail(error)
            execution.finish()

        if close_errors:
            raise ItemStreamError(f"Step '{self.name}' could not close its streams") from close_errors[0]

        execution.status = BatchStatus.COMPLETED
        logger.info(
            f"Step '{self.name}' completed: read={execution.read_count} "
            f"filtered={execution.filter_count} written={execution.write_count} "
            f"chunks={execution.commit_count} in {execution.duration_seconds():.2f}s"
        )
        return execution

    def _run_chunks(self, context: ExecutionContext, execution: StepExecution) -> None:
        exhausted = False
        while not exhausted:
            items, exhausted = self._read_chunk()
            if not items:
                break
            execution.read_count += len(items)

            chunk = self._process(items, execution)
            if not chunk.is_empty():
                self.writer.write(chunk)
                execution.write_count += len(chunk)

            for stream in self.streams:
                stream.update(context)
            execution.commit_count += 1
            logger.debug(f"Step '{self.name}' committed chunk {execution.commit_count} ({len(chunk)} items)")

    def _read_chunk(self) -> tuple[list[I], bool]:
        items: list[I] = []
        while len(items) < self.chunk_size:
            item = self.reader.read()
            if item is None:
                return items, True
            items.append(item)
        return items, False

    def _process(self, items: list[I], execution: StepExecution) -> Chunk[O]:
        if self.processor is None:
            return Chunk(items)  # type: ignore[arg-type]

        chunk: Chunk[O] = Chunk()
        for item in items:
            output = self.processor(item)
            if output is None:
                execution.filter_count += 1
            else:
                chunk.add(output)
        return chunk

    def _close_streams(self, opened: list[ItemStream]) -> list[Exception]:
        errors: list[Exception] = []
        for stream in reversed(opened):
            try:
                stream.close()
            except Exception as e:
                logger.error(f"Failed to close {type(stream).__name__} in step '{self.name}': {e}")
                errors.append(e)
        return errors
