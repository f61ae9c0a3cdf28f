import pytest
from fastapi.testclient import TestClient

from app.main import app
from app.core.api_client import get_api_client
from tests.helpers import FakeApi


@pytest.fixture()
def fake_api():
    """Route every upstream call made by the app to an in-memory FakeApi."""
    fake = FakeApi()

    async def _get_api_client_override():
        api = fake.client()
        try:
            yield api
        finally:
            await api.http.aclose()

    app.dependency_overrides[get_api_client] = _get_api_client_override
    yield fake
    app.dependency_overrides.clear()


@pytest.fixture()
def client(fake_api):
    return TestClient(app)
