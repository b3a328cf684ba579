#!/usr/bin/env python3
# entrypoint_asset_cache.py
"""
Точка входа для Asset Cache.
Порт по умолчанию: 8089
"""

import asyncio
import os
import sys
from pathlib import Path

# Добавляем корневую директорию проекта в путь
project_root = Path(__file__).parent.parent.resolve()
sys.path.insert(0, str(project_root))

# Отдельный файл логов для сервиса (logs/app_asset_cache.log)
os.environ.setdefault("SERVICE_NAME", "asset_cache")

import uvicorn

from src.config import settings
from src.common.logger import log_info
from src.common.constants import TypeMsg


async def main() -> None:
    """Запуск Asset Cache."""
    await log_info(
        f"Запуск Asset Cache на порту {settings.deployment.ASSET_CACHE_PORT}",
        type_msg=TypeMsg.INFO,
    )

    config = uvicorn.Config(
        "src.services.asset_cache.app:app",
        host=settings.deployment.HOST,
        port=settings.deployment.ASSET_CACHE_PORT,
        reload=settings.system.DEBUG,
        log_level="debug" if settings.system.DEBUG else "info",
    )

    server = uvicorn.Server(config)
    await server.serve()


if __name__ == "__main__":
    asyncio.run(main())
