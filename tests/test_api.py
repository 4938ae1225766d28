import pytest
from fastapi.testclient import TestClient
from opensearchpy import exceptions as os_exceptions

from template_search.api.deps import get_search_service
from template_search.main import app
from template_search.schemas.documents import TemplateDocument
from template_search.services.gateway import SearchGateway
from template_search.services.search_service import SearchService

from tests.fakes import FakeOpenSearch, template_hit

pytestmark = pytest.mark.unit


@pytest.fixture
def opensearch():
    return FakeOpenSearch()


@pytest.fixture
def client(opensearch):
    service = SearchService(SearchGateway(opensearch))
    app.dependency_overrides[get_search_service] = lambda: service
    # no context manager: startup would try to reach a real cluster
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_health(client):
    resp = client.get("/health")

    assert resp.status_code == 200
    assert resp.json()["opensearch"]["cluster_name"] == "test"


def test_template_search(client, opensearch):
    opensearch.search_response = {
        "hits": {"total": {"value": 1}, "hits": [template_hit("t1", score=2.0)]}
    }

    resp = client.post("/templates/search", json={"query": "card", "filter": "holiday"})

    assert resp.status_code == 200
    data = resp.json()
    assert data["total_count"] == 1
    assert data["results"][0]["id"] == "t1"
    assert data["results"][0]["score"] == 2.0
    assert "multi_match" in data["raw_query"]


def test_search_rejects_non_positive_page_size(client, opensearch):
    resp = client.post("/templates/search", json={"query": "card", "page_size": 0})

    assert resp.status_code == 422
    assert opensearch.searches == []


def test_search_engine_down_is_503(client, opensearch):
    opensearch.error = os_exceptions.ConnectionError("N/A", "refused", None)

    resp = client.post("/suggestions/search", json={"query": "bir"})

    assert resp.status_code == 503


def test_index_get_exists_delete(client):
    doc = TemplateDocument(id="t1", title="Card", tags=["holiday"]).to_source()

    assert client.put("/templates/t1", json=doc).status_code == 200
    assert client.get("/templates/t1").json()["title"] == "Card"
    assert client.get("/templates/t1/exists").json() == {"id": "t1", "exists": True}

    assert client.delete("/templates/t1").status_code == 200
    assert client.get("/templates/t1").status_code == 404
    assert client.delete("/templates/t1").status_code == 404


def test_index_id_mismatch(client):
    resp = client.put("/suggestions/s1", json={"id": "s2", "value": "birthday"})

    assert resp.status_code == 422


def test_unknown_kind_is_422(client):
    assert client.get("/widgets/1").status_code == 422


def test_recreate_and_optimize(client, opensearch):
    assert client.post("/indexes/templates/recreate").status_code == 200
    assert opensearch.indices.deleted == ["ts-search-index"]
    assert client.post("/indexes/suggestions/optimize").json()["result"] == "optimized"
    assert opensearch.indices.merged == ["ts-suggestion-index"]


def test_null_query_is_treated_as_empty(client, opensearch):
    resp = client.post("/templates/search", json={"query": None, "filter": "holiday"})

    assert resp.status_code == 200
    must = opensearch.searches[0]["body"]["query"]["bool"]["must"]
    assert list(must[0]) == ["match"]
    assert len(must) == 1
