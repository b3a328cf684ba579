# src/services/asset_cache/dependencies.py
"""
Dependency Injection для Asset Cache.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from src.services.asset_cache.worker import StaticAssetCache


# Синглтон
_asset_cache: "StaticAssetCache | None" = None


async def init_dependencies(
    cache_name: str,
    urls: list[str],
    base_url: str,
    timeout: float = 10.0,
) -> "StaticAssetCache":
    """Создать воркер кэша при старте приложения."""
    global _asset_cache

    from src.services.asset_cache.worker import StaticAssetCache
    _asset_cache = StaticAssetCache(
        cache_name=cache_name,
        urls=urls,
        base_url=base_url,
        timeout=timeout,
    )
    return _asset_cache


def get_asset_cache() -> "StaticAssetCache":
    """Получить воркер кэша."""
    if _asset_cache is None:
        raise RuntimeError("StaticAssetCache не инициализирован. Вызовите init_dependencies()")
    return _asset_cache


async def cleanup_dependencies() -> None:
    """Очистить ресурсы при остановке приложения."""
    global _asset_cache
    if _asset_cache:
        await _asset_cache.close()
        _asset_cache = None
