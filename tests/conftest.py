# tests/conftest.py
"""
Общие фикстуры и настройки для тестов.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Callable

import httpx
import pytest

from src.shared.models.menu import MenuSources


MENU_URL = "https://sheets.test/pub?gid=1&output=csv"
PROMOTIONS_URL = "https://sheets.test/pub?gid=2&output=csv"
DELIVERY_FEES_URL = "https://sheets.test/pub?gid=3&output=csv"


# =============================================================================
# ФИКСТУРЫ КОНФИГУРАЦИИ
# =============================================================================

@pytest.fixture(scope="session")
def project_root() -> Path:
    """Корневая директория проекта."""
    return Path(__file__).parent.parent


@pytest.fixture
def menu_sources() -> MenuSources:
    """Три источника с тестовыми URL."""
    return MenuSources.from_urls(MENU_URL, PROMOTIONS_URL, DELIVERY_FEES_URL)


# =============================================================================
# ДАННЫЕ ТАБЛИЦ
# =============================================================================

@pytest.fixture
def csv_bodies() -> dict[str, str]:
    """CSV-тексты трёх таблиц (с запятыми, кавычками и кириллицей/диакритикой)."""
    return {
        MENU_URL: 'id,nome,preço\r\n1,"Pizza Margherita, grande",49.90\r\n2,Calabresa,45.00\r\n',
        PROMOTIONS_URL: "id,descricao,desconto\n1,Terça em dobro,50%\n",
        DELIVERY_FEES_URL: "bairro,taxa\nCentro,5.00\nGávea,8.50\n",
    }


# =============================================================================
# ЗАГЛУШКА UPSTREAM
# =============================================================================

class UpstreamStub:
    """
    Обработчик для httpx.MockTransport.

    routes: URL → (status, text) или исключение. Все запросы пишутся в calls.
    """

    def __init__(self, routes: dict[str, tuple[int, str] | Exception]) -> None:
        self.routes = routes
        self.calls: list[str] = []
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        url = str(request.url)
        self.calls.append(url)
        self.requests.append(request)

        result = self.routes.get(url, (404, "not found"))
        if isinstance(result, Exception):
            raise result
        status, text = result
        return httpx.Response(status, text=text)

    def client(self) -> httpx.AsyncClient:
        """AsyncClient поверх заглушки."""
        return httpx.AsyncClient(transport=httpx.MockTransport(self))


@pytest.fixture
def make_upstream() -> Callable[..., UpstreamStub]:
    """Фабрика заглушек upstream."""

    def _make(routes: dict[str, Any]) -> UpstreamStub:
        return UpstreamStub(routes)

    return _make


@pytest.fixture
def healthy_upstream(make_upstream, csv_bodies: dict[str, str]) -> UpstreamStub:
    """Все три таблицы отвечают 200."""
    return make_upstream({url: (200, body) for url, body in csv_bodies.items()})
