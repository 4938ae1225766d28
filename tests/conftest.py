import pytest

from tests.fakes import FakeGateway, FakeOpenSearch


@pytest.fixture
def fake_client() -> FakeOpenSearch:
    return FakeOpenSearch()


@pytest.fixture
def fake_gateway() -> FakeGateway:
    return FakeGateway()
