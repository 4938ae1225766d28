from datetime import datetime, timedelta, timezone

import httpx
import pytest
from pydantic import ValidationError

from template_search.errors import TransportError
from template_search.services.search_service import SearchService
from template_search.services.sync import HttpDocumentSource, sync_recent_changes

from tests.fakes import FakeGateway

pytestmark = pytest.mark.unit

NOW = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


class StaticSource:
    def __init__(self, records):
        self.records = records
        self.calls = []

    async def changed_since(self, kind, since):
        self.calls.append((kind, since))
        return self.records.get(kind, [])


@pytest.mark.asyncio
async def test_sync_indexes_recent_changes_including_soft_deleted():
    source = StaticSource(
        {
            "templates": [
                {"id": "t1", "title": "Card", "tags": ["holiday"]},
                {"id": "t2", "title": "Old", "deleted": True},
            ],
            "suggestions": [{"id": "s1", "value": "birthday"}],
        }
    )
    gateway = FakeGateway()

    report = await sync_recent_changes(source, SearchService(gateway), now=NOW)

    assert report.indexed == {"templates": 2, "suggestions": 1}
    assert report.since == NOW - timedelta(minutes=20)
    assert [c[0] for c in source.calls] == ["templates", "suggestions"]
    assert [d["id"] for d in gateway.indexed] == ["t1", "t2", "s1"]
    assert gateway.indexed[1]["body"]["deleted"] is True


@pytest.mark.asyncio
async def test_sync_aborts_on_unconvertible_record():
    source = StaticSource({"templates": [{"title": "no id"}]})

    with pytest.raises(ValidationError):
        await sync_recent_changes(source, SearchService(FakeGateway()), now=NOW)


@pytest.mark.asyncio
async def test_http_source_queries_by_epoch():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        return httpx.Response(200, json=[{"id": "t1"}])

    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    source = HttpDocumentSource("http://docs.local/", client)

    records = await source.changed_since("templates", NOW)

    assert records == [{"id": "t1"}]
    assert seen["url"] == f"http://docs.local/templates?since={int(NOW.timestamp())}"
    await source.close()


@pytest.mark.asyncio
async def test_http_source_failure_is_transport_error():
    client = httpx.AsyncClient(
        transport=httpx.MockTransport(lambda request: httpx.Response(500))
    )
    source = HttpDocumentSource("http://docs.local", client)

    with pytest.raises(TransportError):
        await source.changed_since("templates", NOW)
    await source.close()


@pytest.mark.asyncio
async def test_sync_reports_validation_error_for_non_dict_record():
    source = StaticSource({"templates": ["not a record"]})

    with pytest.raises(ValidationError):
        await sync_recent_changes(source, SearchService(FakeGateway()), now=NOW)


@pytest.mark.asyncio
async def test_http_source_leaves_injected_client_open():
    client = httpx.AsyncClient(
        transport=httpx.MockTransport(lambda request: httpx.Response(200, json=[]))
    )
    source = HttpDocumentSource("http://docs.local", client)

    await source.close()

    assert not client.is_closed
    assert await source.changed_since("suggestions", NOW) == []
    await client.aclose()


@pytest.mark.asyncio
async def test_http_source_closes_its_own_client():
    source = HttpDocumentSource("http://docs.local")

    await source.close()

    assert source.client.is_closed
