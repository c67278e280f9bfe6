"""
Test suite for the site locale middleware.

System role: Verification of request-scoped locale context
"""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from entity_images.core.site_locale import get_current_locale
from entity_images.observability.middleware import LocaleMiddleware


@pytest.fixture
def client() -> TestClient:
    app = FastAPI()
    app.add_middleware(LocaleMiddleware)

    @app.get("/locale")
    async def read_locale() -> dict:
        return {"locale": get_current_locale("en")}

    return TestClient(app)


class TestLocaleMiddleware:
    """Test suite for LocaleMiddleware."""

    def test_query_param_sets_locale(self, client) -> None:
        assert client.get("/locale?_locale=fr").json() == {"locale": "fr"}

    def test_default_without_query_param(self, client) -> None:
        assert client.get("/locale").json() == {"locale": "en"}

    def test_locale_does_not_leak_between_requests(self, client) -> None:
        client.get("/locale?_locale=de")

        assert client.get("/locale").json() == {"locale": "en"}
