#!/usr/bin/env python3
# entrypoint_menu_api.py
"""
Точка входа для Menu BFF.
Порт по умолчанию: 8088
"""

import asyncio
import os
import sys
from pathlib import Path

# Добавляем корневую директорию проекта в путь
project_root = Path(__file__).parent.parent.resolve()
sys.path.insert(0, str(project_root))

# Отдельный файл логов для сервиса (logs/app_menu_bff.log)
os.environ.setdefault("SERVICE_NAME", "menu_bff")

import uvicorn

from src.config import settings
from src.common.logger import log_info
from src.common.constants import TypeMsg


async def main() -> None:
    """Запуск Menu BFF."""
    await log_info(
        f"Запуск Menu BFF на порту {settings.deployment.MENU_API_PORT}",
        type_msg=TypeMsg.INFO,
    )

    config = uvicorn.Config(
        "src.services.menu_bff.app:app",
        host=settings.deployment.HOST,
        port=settings.deployment.MENU_API_PORT,
        reload=settings.system.DEBUG,
        log_level="debug" if settings.system.DEBUG else "info",
    )

    server = uvicorn.Server(config)
    await server.serve()


if __name__ == "__main__":
    asyncio.run(main())
