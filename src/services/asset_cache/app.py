# src/services/asset_cache/app.py
"""
FastAPI приложение для Asset Cache.

Endpoints:
- GET /service-worker.js    - service worker для браузера
- GET /api/assets/manifest  - имя кэша и список ресурсов
- GET /api/assets           - ресурс витрины через кэш (cache-first)
- GET /health               - проверка здоровья
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Annotated, Any

import httpx
from fastapi import Depends, FastAPI, HTTPException, Query
from fastapi.responses import Response

from src.common.constants import TypeMsg
from src.common.logger import log_error, log_info, setup_logging
from src.config import settings
from src.services.asset_cache.dependencies import (
    cleanup_dependencies,
    get_asset_cache,
    init_dependencies,
)
from src.services.asset_cache.script import render_service_worker_script
from src.services.asset_cache.worker import AssetNotAllowedError, StaticAssetCache
from src.shared.models.common import HealthStatus


SERVICE_NAME = "asset_cache"

# Заголовки сохранённого ответа, которые уходят клиенту (кроме content-type)
_PASSTHROUGH_HEADERS = ("etag", "last-modified")


# === LIFESPAN ===

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Жизненный цикл приложения."""
    setup_logging()

    asset_cache = await init_dependencies(
        cache_name=settings.assets.CACHE_NAME,
        urls=settings.assets.URLS_TO_CACHE,
        base_url=settings.assets.BASE_URL,
        timeout=settings.assets.FETCH_TIMEOUT_SECONDS,
    )
    try:
        await asset_cache.install()
    except Exception as e:
        # Без установки воркер не активен и все запросы идут в сеть
        await log_error(f"{SERVICE_NAME}: кэш не установлен, работа без кэша: {e}")

    yield

    await cleanup_dependencies()


# === APP ===

app = FastAPI(
    title="Asset Cache",
    description="Офлайн-кэш статики витрины и service worker для браузера.",
    version=settings.system.VERSION,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)


# === HEALTH CHECK ===

@app.get("/health", response_model=HealthStatus, tags=["Health"])
async def health_check() -> HealthStatus:
    """Проверка здоровья сервиса."""
    return HealthStatus(
        status="healthy",
        service=SERVICE_NAME,
        version=settings.system.VERSION,
    )


# === SERVICE WORKER ===

@app.get("/service-worker.js", tags=["Assets"])
async def service_worker() -> Response:
    """Отдать service worker. Сам скрипт не кэшируется, чтобы обновления доходили сразу."""
    script = render_service_worker_script(
        cache_name=settings.assets.CACHE_NAME,
        urls=settings.assets.URLS_TO_CACHE,
    )
    return Response(
        content=script,
        media_type="application/javascript",
        headers={
            "Cache-Control": "no-cache",
            "Service-Worker-Allowed": "/",
        },
    )


@app.get("/api/assets/manifest", tags=["Assets"])
async def get_manifest(
    asset_cache: Annotated[StaticAssetCache, Depends(get_asset_cache)],
) -> dict[str, Any]:
    """Имя кэша, состояние воркера и абсолютные URL манифеста."""
    return {
        "cache_name": asset_cache.cache_name,
        "state": asset_cache.state.value,
        "urls": asset_cache.manifest,
    }


@app.get("/api/assets", tags=["Assets"])
async def get_asset(
    asset_cache: Annotated[StaticAssetCache, Depends(get_asset_cache)],
    url: str = Query(..., min_length=1, description="Абсолютный URL или путь из манифеста"),
) -> Response:
    """
    Отдать ресурс: из кэша, если он там есть, иначе из сети.

    Только ресурсы манифеста и origin витрины; остальные URL получают 403
    без обращения к сети.
    """
    try:
        target = str(httpx.URL(asset_cache.base_url).join(url))
    except httpx.InvalidURL as e:
        raise HTTPException(status_code=400, detail=str(e))

    try:
        cached = await asset_cache.fetch(target)
    except AssetNotAllowedError as e:
        await log_error(f"Отклонён запрос ресурса вне витрины: {e.url}")
        raise HTTPException(status_code=403, detail="Recurso fora da vitrine")
    except httpx.HTTPError as e:
        await log_error(f"Сетевая ошибка при загрузке {target}: {e}")
        raise HTTPException(status_code=502, detail=str(e) or e.__class__.__name__)

    await log_info(f"Ресурс {target} отдан (status {cached.status_code})", type_msg=TypeMsg.DEBUG)
    headers = {k: v for k, v in cached.headers.items() if k in _PASSTHROUGH_HEADERS}
    return Response(
        content=cached.content,
        status_code=cached.status_code,
        media_type=cached.media_type,
        headers=headers,
    )


# === STARTUP ===

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=settings.deployment.HOST, port=settings.deployment.ASSET_CACHE_PORT)
