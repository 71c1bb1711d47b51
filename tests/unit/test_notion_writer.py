"""
Unit tests for the Notion client wrapper and the page-creating writer.

Uses a stubbed HTTP transport for the client and a Mock client for the writer.
"""

from dataclasses import dataclass
from datetime import date
from typing import Optional
from unittest.mock import Mock, call

import pytest

from notion_batch.batch import Chunk
from notion_batch.config import Settings
from notion_batch.errors import MappingError, NotionWriteProtectedError
from notion_batch.notion.client import NotionClient, normalize_base_url
from notion_batch.notion.writer import NotionItemWriter, PagePropertiesConverter

import notion_stubs as stubs


@dataclass
class Task:
    name: str
    status: Optional[str] = None
    points: Optional[int] = None


def make_settings(**overrides):
    values = dict(notion_api_key="secret-token", notion_rate_limit_delay=0.0)
    values.update(overrides)
    return Settings(_env_file=None, **values)


class TestNormalizeBaseUrl:
    @pytest.mark.parametrize("url", [
        "https://api.notion.com",
        "https://api.notion.com/",
        "https://api.notion.com/v1",
        "https://api.notion.com/v1/",
    ])
    def test_strips_version_path(self, url):
        assert normalize_base_url(url) == "https://api.notion.com"


class TestNotionClient:
    """Tests for NotionClient against a stubbed API."""

    def test_token_required(self):
        with pytest.raises(ValueError, match="'token' must be set"):
            NotionClient(settings=make_settings(notion_api_key=""))

    def test_token_from_settings(self, notion_stub):
        client = NotionClient(http_client=notion_stub.http_client(), settings=make_settings())
        assert client.token == "secret-token"

    def test_query_sends_body_and_auth(self, notion_stub, database_id):
        notion_stub.enqueue(stubs.query_response())
        client = NotionClient(http_client=notion_stub.http_client(), settings=make_settings())

        response = client.query_database(
            database_id,
            sorts=[{"property": "Name", "direction": "ascending"}],
            start_cursor="cursor-1",
            page_size=5,
        )

        assert response["results"] == []
        request = notion_stub.requests[0]
        assert request.method == "POST"
        assert request.url.path == f"/v1/databases/{database_id}/query"
        assert request.headers["Authorization"] == "Bearer secret-token"
        assert request.headers["Notion-Version"] == "2022-06-28"
        assert notion_stub.bodies[0] == stubs.query_request(
            5, start_cursor="cursor-1", sorts=[{"property": "Name", "direction": "ascending"}]
        )

    def test_query_page_size_defaults_to_settings(self, notion_stub, database_id):
        notion_stub.enqueue(stubs.query_response())
        client = NotionClient(http_client=notion_stub.http_client(), settings=make_settings(page_size=25))

        client.query_database(database_id)

        assert notion_stub.bodies[0] == {"page_size": 25}

    def test_create_page(self, notion_stub, database_id):
        notion_stub.enqueue(stubs.page_created(database_id))
        client = NotionClient(http_client=notion_stub.http_client(), settings=make_settings())
        properties = {"Name": {"title": [{"type": "text", "text": {"content": "a"}}]}}

        page = client.create_page(database_id, properties)

        assert page["object"] == "page"
        assert notion_stub.paths == ["/v1/pages"]
        assert notion_stub.bodies[0] == {"parent": {"database_id": database_id}, "properties": properties}

    def test_create_page_refused_when_protected(self, notion_stub, database_id):
        client = NotionClient(http_client=notion_stub.http_client(), settings=make_settings(protect_notion=True))

        with pytest.raises(NotionWriteProtectedError) as exc_info:
            client.create_page(database_id, {})

        assert exc_info.value.database_id == database_id
        assert notion_stub.requests == []

    @pytest.mark.parametrize("argument,setting", [(True, False), (False, True)])
    def test_create_page_dry_run(self, notion_stub, database_id, argument, setting):
        client = NotionClient(http_client=notion_stub.http_client(), settings=make_settings(dry_run=setting))

        assert client.create_page(database_id, {}, dry_run=argument) is None
        assert notion_stub.requests == []

    def test_close_keeps_injected_http_client_open(self, notion_stub):
        http_client = notion_stub.http_client()
        client = NotionClient(http_client=http_client, settings=make_settings())

        client.close()

        assert not http_client.is_closed

    def test_close_closes_own_http_client(self):
        client = NotionClient(settings=make_settings())

        client.close()

        assert client.sdk.client.is_closed

    def test_throttle_waits_between_calls(self, notion_stub, database_id, monkeypatch):
        sleeps = []
        monkeypatch.setattr("notion_batch.notion.client.time.sleep", sleeps.append)
        notion_stub.enqueue(stubs.query_response())
        notion_stub.enqueue(stubs.query_response())
        client = NotionClient(http_client=notion_stub.http_client(), settings=make_settings(), rate_limit_delay=30)

        client.query_database(database_id)
        client.query_database(database_id)

        assert len(sleeps) == 1
        assert 0 < sleeps[0] <= 30


class TestPagePropertiesConverter:
    """Tests for building create-page properties from items."""

    def test_dataclass_item(self):
        properties = PagePropertiesConverter()(Task("Write docs", status="Todo", points=3))
        assert properties == {
            "Name": {"title": [{"type": "text", "text": {"content": "Write docs"}}]},
            "status": {"rich_text": [{"type": "text", "text": {"content": "Todo"}}]},
            "points": {"number": 3},
        }

    def test_none_values_skipped(self):
        assert set(PagePropertiesConverter()(Task("a"))) == {"Name"}

    def test_none_values_included(self):
        properties = PagePropertiesConverter(include_none=True)(Task("a"))
        assert properties["status"] == {"rich_text": []}

    def test_property_names_override(self):
        converter = PagePropertiesConverter(property_names={"status": "Status", "points": "Story Points"})
        properties = converter({"name": "a", "status": "Done", "points": 1, "due": date(2024, 5, 1)})
        assert set(properties) == {"Name", "Status", "Story Points", "due"}
        assert properties["due"] == {"date": {"start": "2024-05-01"}}

    def test_custom_title_property(self):
        properties = PagePropertiesConverter(title_property="Title")({"title": "a"})
        assert properties == {"Title": {"title": [{"type": "text", "text": {"content": "a"}}]}}

    def test_missing_title_rejected(self):
        with pytest.raises(MappingError, match="title property 'Name'"):
            PagePropertiesConverter()({"status": "x"})

    @pytest.mark.parametrize("item,converter", [
        ({"Name": "a", "status": "x", "Status": "y"}, PagePropertiesConverter()),
        ({"Name": "a", "state": "x", "status": "y"}, PagePropertiesConverter(property_names={"state": "Status"})),
    ])
    def test_fields_colliding_on_one_property_rejected(self, item, converter):
        """Fields that map to the same property ignoring case must not overwrite each other."""
        with pytest.raises(MappingError, match="several fields mapped to property"):
            converter(item)


class TestNotionItemWriter:
    """Tests for NotionItemWriter with a mocked client."""

    @pytest.fixture
    def client(self):
        return Mock(spec=NotionClient)

    def test_creates_one_page_per_item(self, client, database_id):
        converter = Mock(side_effect=lambda item: {"Name": item})
        writer = NotionItemWriter(client, database_id, converter)

        writer.write(Chunk(["a", "b"]))

        assert client.create_page.call_args_list == [
            call(database_id, {"Name": "a"}, dry_run=False),
            call(database_id, {"Name": "b"}, dry_run=False),
        ]

    def test_dry_run_passed_to_client(self, client, database_id):
        writer = NotionItemWriter(client, database_id, dry_run=True)
        writer.write(Chunk([Task("a")]))
        assert client.create_page.call_args.kwargs["dry_run"] is True

    def test_default_converter(self, client, database_id):
        NotionItemWriter(client, database_id).write(Chunk([Task("a", points=2)]))
        properties = client.create_page.call_args.args[1]
        assert properties == {
            "Name": {"title": [{"type": "text", "text": {"content": "a"}}]},
            "points": {"number": 2},
        }

    def test_client_required(self, database_id):
        with pytest.raises(ValueError, match="'client' must not be None"):
            NotionItemWriter(None, database_id)

    def test_database_id_required(self, client):
        with pytest.raises(ValueError, match="'database_id' must be set"):
            NotionItemWriter(client, "")

    def test_protected_client_error_propagates(self, notion_stub, database_id):
        client = NotionClient(http_client=notion_stub.http_client(), settings=make_settings(protect_notion=True))
        writer = NotionItemWriter(client, database_id)

        with pytest.raises(NotionWriteProtectedError):
            writer.write(Chunk([Task("a")]))
