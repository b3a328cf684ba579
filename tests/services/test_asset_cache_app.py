# tests/services/test_asset_cache_app.py
"""
Тесты HTTP-слоя Asset Cache.
"""

from __future__ import annotations

import asyncio

import httpx
import pytest
from fastapi.testclient import TestClient

from src.config import settings
from src.services.asset_cache.app import app
from src.services.asset_cache.dependencies import get_asset_cache
from src.services.asset_cache.worker import StaticAssetCache


BASE_URL = "http://shop.test/"

client = TestClient(app)


class CountingServer:
    """Заглушка сети для воркера."""

    def __init__(self, broken: bool = False) -> None:
        self.broken = broken
        self.calls: list[str] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.calls.append(str(request.url))
        if self.broken:
            raise httpx.ConnectError("offline")
        return httpx.Response(
            200,
            content=f"body of {request.url.path}".encode(),
            headers={"Content-Type": "text/html", "ETag": '"abc"', "X-Internal": "1"},
        )


@pytest.fixture
def installed_cache():
    """Установленный воркер с манифестом из двух ресурсов."""
    server = CountingServer()
    worker = StaticAssetCache(
        "test-cache",
        ["./", "index.html"],
        BASE_URL,
        http=httpx.AsyncClient(transport=httpx.MockTransport(server)),
    )
    asyncio.run(worker.install())
    app.dependency_overrides[get_asset_cache] = lambda: worker
    yield worker, server
    app.dependency_overrides.clear()


def test_health_check() -> None:
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["service"] == "asset_cache"


def test_service_worker_script() -> None:
    """Скрипт отдаётся как JavaScript и сам не кэшируется."""
    response = client.get("/service-worker.js")

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("application/javascript")
    assert response.headers["Cache-Control"] == "no-cache"
    assert response.headers["Service-Worker-Allowed"] == "/"
    assert settings.assets.CACHE_NAME in response.text
    for url in settings.assets.URLS_TO_CACHE:
        assert url in response.text


def test_manifest(installed_cache) -> None:
    response = client.get("/api/assets/manifest")

    assert response.status_code == 200
    assert response.json() == {
        "cache_name": "test-cache",
        "state": "activated",
        "urls": ["http://shop.test/", "http://shop.test/index.html"],
    }


def test_cached_asset_served_without_network(installed_cache) -> None:
    worker, server = installed_cache
    calls_after_install = len(server.calls)

    response = client.get("/api/assets", params={"url": "index.html"})

    assert response.status_code == 200
    assert response.content == b"body of /index.html"
    assert response.headers["etag"] == '"abc"'
    assert "x-internal" not in response.headers
    assert len(server.calls) == calls_after_install


def test_uncached_asset_goes_to_network(installed_cache) -> None:
    worker, server = installed_cache
    calls_after_install = len(server.calls)

    response = client.get("/api/assets", params={"url": "http://shop.test/api/menu"})

    assert response.status_code == 200
    assert len(server.calls) == calls_after_install + 1


@pytest.mark.parametrize(
    "url",
    [
        "http://169.254.169.254/latest/meta-data/",
        "http://internal.test:6379/",
        "//evil.test/payload",
    ],
)
def test_foreign_url_rejected_without_network(installed_cache, url) -> None:
    """Ресурс вне витрины: 403, тело upstream не отдаётся, сеть не трогается."""
    worker, server = installed_cache
    calls_after_install = len(server.calls)

    response = client.get("/api/assets", params={"url": url})

    assert response.status_code == 403
    assert b"body of" not in response.content
    assert len(server.calls) == calls_after_install


def test_network_failure_returns_502() -> None:
    worker = StaticAssetCache(
        "test-cache",
        [],
        BASE_URL,
        http=httpx.AsyncClient(transport=httpx.MockTransport(CountingServer(broken=True))),
    )
    app.dependency_overrides[get_asset_cache] = lambda: worker
    try:
        response = client.get("/api/assets", params={"url": "logo.png"})
    finally:
        app.dependency_overrides.clear()

    assert response.status_code == 502
    assert response.json() == {"detail": "offline"}


def test_missing_url_parameter(installed_cache) -> None:
    response = client.get("/api/assets")

    assert response.status_code == 422
