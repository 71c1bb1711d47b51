"""
Integration tests for exporting a Notion database into a SQL table.

Stubbed Notion API -> NotionDatabaseItemReader -> ChunkOrientedStep ->
SqlAlchemyItemWriter -> in-memory SQLite.
"""

from dataclasses import dataclass

import pytest
from notion_client.errors import HTTPResponseError
from sqlalchemy import MetaData, select

from notion_batch.batch import BatchStatus, Chunk, ChunkOrientedStep, ExecutionContext
from notion_batch.db import SqlAlchemyItemWriter, build_table, create_db_engine, session_scope
from notion_batch.mapping import DictPropertyMapper
from notion_batch.notion.reader import NotionDatabaseItemReader

import notion_stubs as stubs


def entry(database_id, name, status=None, tags=()):
    return stubs.result(database_id, {
        "Name": stubs.title(name),
        "Status": stubs.select(status),
        "Tags": stubs.multi_select(*tags),
    })


@pytest.fixture
def engine(env_settings):
    return create_db_engine("sqlite://")


@pytest.fixture
def tasks_table():
    return build_table(MetaData(), "tasks", ["Name", "Status", "Tags"])


def rows(engine, table):
    with engine.connect() as connection:
        return [tuple(r) for r in connection.execute(select(table).order_by(table.c.id))]


class TestBuildTable:
    """Tests for target table definitions."""

    def test_columns(self, tasks_table):
        assert [c.name for c in tasks_table.columns] == ["id", "Name", "Status", "Tags"]
        assert tasks_table.c.id.primary_key

    @pytest.mark.parametrize("columns", [[], ["Name", "name"], ["Name", "ID"]])
    def test_invalid_columns(self, columns):
        with pytest.raises(ValueError):
            build_table(MetaData(), "tasks", columns)


class TestSqlAlchemyItemWriter:
    """Tests for the SQL writer on its own."""

    def test_inserts_chunk(self, engine, tasks_table):
        writer = SqlAlchemyItemWriter(engine, tasks_table)
        writer.open(ExecutionContext())

        writer.write(Chunk([
            {"name": "a", "STATUS": "Done", "tags": ["x", "y"]},
            {"Name": "b", "extra": "ignored"},
        ]))

        assert rows(engine, tasks_table) == [
            (1, "a", "Done", '["x", "y"]'),
            (2, "b", None, None),
        ]

    def test_dataclass_items(self, engine, tasks_table):
        @dataclass
        class Task:
            name: str
            status: str

        writer = SqlAlchemyItemWriter(engine, tasks_table)
        writer.open(ExecutionContext())
        writer.write(Chunk([Task("a", "Todo")]))

        assert rows(engine, tasks_table) == [(1, "a", "Todo", None)]

    def test_id_property_left_to_autoincrement(self, engine, tasks_table):
        """A Notion property named ID must not be written into the generated key."""
        writer = SqlAlchemyItemWriter(engine, tasks_table)
        writer.open(ExecutionContext())

        writer.write(Chunk([{"Name": "a", "ID": "TASK-1"}, {"Name": "b", "id": 1}]))

        assert rows(engine, tasks_table) == [(1, "a", None, None), (2, "b", None, None)]

    def test_empty_chunk(self, engine, tasks_table):
        writer = SqlAlchemyItemWriter(engine, tasks_table)
        writer.open(ExecutionContext())
        writer.write(Chunk())
        assert rows(engine, tasks_table) == []

    def test_failed_chunk_not_partially_written(self, engine, tasks_table):
        def converter(item):
            if item == "bad":
                raise TypeError("cannot convert")
            return {"Name": item}

        writer = SqlAlchemyItemWriter(engine, tasks_table, converter=converter)
        writer.open(ExecutionContext())
        writer.write(Chunk(["a"]))
        with pytest.raises(TypeError):
            writer.write(Chunk(["b", "bad"]))

        assert [r[1] for r in rows(engine, tasks_table)] == ["a"]


class TestSessionScope:
    def test_rolls_back_on_error(self, engine, tasks_table):
        tasks_table.create(engine)

        with pytest.raises(RuntimeError):
            with session_scope(engine) as session:
                session.execute(tasks_table.insert(), [{"Name": "a"}])
                raise RuntimeError("abort")

        assert rows(engine, tasks_table) == []


class TestExportStep:
    """Tests for the full export pipeline."""

    @pytest.fixture
    def reader(self, notion_stub, settings, database_id):
        return NotionDatabaseItemReader(
            database_id,
            DictPropertyMapper(),
            name="tasks-reader",
            page_size=2,
            http_client=notion_stub.http_client(),
            settings=settings,
        )

    def test_exports_all_pages(self, notion_stub, reader, engine, tasks_table, database_id):
        notion_stub.enqueue(stubs.query_response(
            entry(database_id, "a", "Todo", ["x"]),
            entry(database_id, "b", "Done"),
            next_cursor="cursor-1",
        ))
        notion_stub.enqueue(stubs.query_response(entry(database_id, "c")))

        execution = ChunkOrientedStep(
            "export-tasks", reader, SqlAlchemyItemWriter(engine, tasks_table), chunk_size=2
        ).execute()

        assert execution.status is BatchStatus.COMPLETED
        assert (execution.read_count, execution.write_count, execution.commit_count) == (3, 3, 2)
        assert rows(engine, tasks_table) == [
            (1, "a", "Todo", '["x"]'),
            (2, "b", "Done", "[]"),
            (3, "c", None, "[]"),
        ]

    def test_processor_filters_rows(self, notion_stub, reader, engine, tasks_table, database_id):
        notion_stub.enqueue(stubs.query_response(
            entry(database_id, "a", "Todo"),
            entry(database_id, "b", "Done"),
        ))

        execution = ChunkOrientedStep(
            "export-open",
            reader,
            SqlAlchemyItemWriter(engine, tasks_table),
            processor=lambda item: item if item["Status"] != "Done" else None,
            chunk_size=5,
        ).execute()

        assert execution.filter_count == 1
        assert [r[1] for r in rows(engine, tasks_table)] == ["a"]

    def test_api_failure_keeps_committed_chunks(self, notion_stub, reader, engine, tasks_table, database_id):
        notion_stub.enqueue(stubs.query_response(
            entry(database_id, "a"),
            entry(database_id, "b"),
            next_cursor="cursor-1",
        ))
        notion_stub.enqueue({"object": "error", "code": "internal_server_error", "message": "boom"}, status_code=500)
        context = ExecutionContext()

        step = ChunkOrientedStep("export-tasks", reader, SqlAlchemyItemWriter(engine, tasks_table), chunk_size=2)
        with pytest.raises(HTTPResponseError):
            step.execute(context)

        assert [r[1] for r in rows(engine, tasks_table)] == ["a", "b"]
        assert context.get("tasks-reader.read.count") == 2

    def test_exports_entries_with_unique_id_property(self, notion_stub, reader, engine, tasks_table, database_id):
        notion_stub.enqueue(stubs.query_response(
            stubs.result(database_id, {
                "Name": stubs.title("a"),
                "ID": {"id": "u%3Did", "type": "unique_id", "unique_id": {"prefix": "TASK", "number": 7}},
            }),
        ))

        execution = ChunkOrientedStep(
            "export-tasks", reader, SqlAlchemyItemWriter(engine, tasks_table), chunk_size=2
        ).execute()

        assert execution.write_count == 1
        assert rows(engine, tasks_table) == [(1, "a", None, None)]
