# src/services/menu_bff/app.py
"""
FastAPI приложение для Menu BFF.

Endpoints:
- ANY /api/menu - cardápio, promoções и taxas de entrega одним JSON
- GET /health   - проверка здоровья
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Annotated

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from src.common.constants import INTERNAL_ERROR_PREFIX, TypeMsg
from src.common.logger import log_error, log_info, setup_logging
from src.config import settings
from src.services.menu_bff.dependencies import (
    cleanup_dependencies,
    get_menu_service,
    init_dependencies,
)
from src.services.menu_bff.service import MenuAggregationService
from src.shared.models.common import HealthStatus
from src.shared.models.menu import ErrorPayload, MenuSources


SERVICE_NAME = "menu_bff"

# Обработчик не зависит от метода запроса
MENU_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS", "HEAD"]


# === LIFESPAN ===

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Жизненный цикл приложения."""
    setup_logging()

    sources = MenuSources.from_urls(
        menu_url=settings.sheets.CARDAPIO_CSV_URL,
        promotions_url=settings.sheets.PROMOCOES_CSV_URL,
        delivery_fees_url=settings.sheets.DELIVERY_FEES_CSV_URL,
    )
    await init_dependencies(
        sources=sources,
        timeout=settings.sheets.FETCH_TIMEOUT_SECONDS,
        body_preview_chars=settings.sheets.ERROR_BODY_PREVIEW_CHARS,
    )
    await log_info(f"{SERVICE_NAME}: зависимости инициализированы", type_msg=TypeMsg.DEBUG)

    yield

    await cleanup_dependencies()


# === APP ===

app = FastAPI(
    title="Menu BFF",
    description="Backend for Frontend для витрины пиццерии. Агрегирует таблицы Google Sheets.",
    version=settings.system.VERSION,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

# Витрина раздаётся статикой с другого домена
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
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


# === MENU ===

@app.api_route("/api/menu", methods=MENU_METHODS, tags=["Menu"])
async def get_menu(
    service: Annotated[MenuAggregationService, Depends(get_menu_service)],
) -> JSONResponse:
    """
    Получить данные витрины.

    Возвращает сырые CSV трёх таблиц. Любая ошибка (HTTP статус источника,
    сеть, таймаут, непредвиденное исключение) превращается в один ответ 500
    без частичных данных.
    """
    # Заголовок ставится до начала работы и уходит с любым ответом
    headers = {"Cache-Control": settings.sheets.CACHE_CONTROL}

    try:
        payload = await service.aggregate()
    except Exception as e:
        await log_error(f"Фатальная ошибка при загрузке данных витрины: {e}", exc_info=True)
        error = ErrorPayload(error=f"{INTERNAL_ERROR_PREFIX}: {e}")
        return JSONResponse(status_code=500, content=error.model_dump(), headers=headers)

    await log_info("Отправка JSON-ответа витрине", type_msg=TypeMsg.DEBUG)
    return JSONResponse(status_code=200, content=payload.to_response(), headers=headers)


# === STARTUP ===

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=settings.deployment.HOST, port=settings.deployment.MENU_API_PORT)
