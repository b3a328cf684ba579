# src/services/menu_bff/dependencies.py
"""
Dependency Injection для Menu BFF.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import httpx

if TYPE_CHECKING:
    from src.services.menu_bff.service import MenuAggregationService
    from src.shared.models.menu import MenuSources


# Синглтоны
_http: httpx.AsyncClient | None = None
_menu_service: "MenuAggregationService | None" = None


async def init_dependencies(
    sources: "MenuSources",
    timeout: float = 5.0,
    body_preview_chars: int = 200,
) -> None:
    """Инициализировать зависимости при старте приложения."""
    global _http, _menu_service

    from src.services.menu_bff.service import MenuAggregationService

    _http = httpx.AsyncClient(timeout=timeout, follow_redirects=True)
    _menu_service = MenuAggregationService(
        sources=sources,
        http=_http,
        timeout=timeout,
        body_preview_chars=body_preview_chars,
    )


def get_menu_service() -> "MenuAggregationService":
    """Получить сервис агрегации."""
    if _menu_service is None:
        raise RuntimeError("MenuAggregationService не инициализирован. Вызовите init_dependencies()")
    return _menu_service


async def cleanup_dependencies() -> None:
    """Очистить ресурсы при остановке приложения."""
    global _http, _menu_service
    if _menu_service:
        await _menu_service.close()
        _menu_service = None
    if _http:
        await _http.aclose()
        _http = None
