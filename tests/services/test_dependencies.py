# tests/services/test_dependencies.py
"""
Тесты жизненного цикла зависимостей сервисов.
"""

from __future__ import annotations

import pytest

from src.services.asset_cache import dependencies as asset_deps
from src.services.menu_bff import dependencies as menu_deps
from src.services.asset_cache.worker import StaticAssetCache, WorkerState
from src.services.menu_bff.service import MenuAggregationService


class TestMenuDependencies:
    def test_get_before_init_raises(self) -> None:
        with pytest.raises(RuntimeError):
            menu_deps.get_menu_service()

    @pytest.mark.asyncio
    async def test_init_and_cleanup(self, menu_sources) -> None:
        await menu_deps.init_dependencies(menu_sources, timeout=1.5, body_preview_chars=50)

        service = menu_deps.get_menu_service()
        assert isinstance(service, MenuAggregationService)
        assert service.timeout == 1.5
        assert service.body_preview_chars == 50
        assert service.sources is menu_sources

        http = service.http
        await menu_deps.cleanup_dependencies()

        assert http.is_closed is True
        with pytest.raises(RuntimeError):
            menu_deps.get_menu_service()


class TestAssetCacheDependencies:
    def test_get_before_init_raises(self) -> None:
        with pytest.raises(RuntimeError):
            asset_deps.get_asset_cache()

    @pytest.mark.asyncio
    async def test_init_and_cleanup(self) -> None:
        worker = await asset_deps.init_dependencies(
            cache_name="v1",
            urls=["index.html"],
            base_url="http://shop.test/",
            timeout=2.0,
        )

        assert asset_deps.get_asset_cache() is worker
        assert isinstance(worker, StaticAssetCache)
        assert worker.state == WorkerState.NEW

        await asset_deps.cleanup_dependencies()

        assert worker.http.is_closed is True
        with pytest.raises(RuntimeError):
            asset_deps.get_asset_cache()
