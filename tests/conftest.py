"""Pytest configuration for defi-adapters tests."""

import httpx
import pytest

from defi_adapters.protocols import BeefyAPIClient

BASE_URL = "https://api.beefy.test"


class FakeBeefyAPI:
    """
    Serves canned payloads by request path and records requested paths.

    Unknown paths answer 404. A route may hold an ``httpx.Response`` to
    return a specific status or body.

    """

    def __init__(self) -> None:
        self.routes: dict[str, object] = {}
        self.calls: list[str] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path
        self.calls.append(path)

        if path not in self.routes:
            return httpx.Response(404, json={"error": "not found"})

        payload = self.routes[path]
        if isinstance(payload, httpx.Response):
            return payload
        return httpx.Response(200, json=payload)

    def count(self, path: str) -> int:
        return self.calls.count(path)


@pytest.fixture
def fake_api():
    """Fake Beefy API with no routes."""
    return FakeBeefyAPI()


@pytest.fixture
def make_client(fake_api):
    """Factory for clients talking to the fake API."""

    def _make(cache_config=None) -> BeefyAPIClient:
        http_client = httpx.AsyncClient(transport=httpx.MockTransport(fake_api.handler))
        return BeefyAPIClient(base_url=BASE_URL, cache_config=cache_config, client=http_client)

    return _make
