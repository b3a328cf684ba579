#!/usr/bin/env python3
# main.py
"""
Главная точка входа приложения Saborelli Menu.
Запускает Menu BFF, Asset Cache или оба сервиса в зависимости от аргументов.
"""

from __future__ import annotations

import asyncio
import signal
import sys

from src.config import settings
from src.common.logger import setup_logging, log_info, log_error
from src.common.constants import ComponentMode, TypeMsg


# Глобальный флаг для graceful shutdown
_shutdown_event: asyncio.Event | None = None
_running_tasks: list[asyncio.Task] = []


def setup_signal_handlers() -> None:
    """Настраивает обработчики сигналов для graceful shutdown."""
    global _shutdown_event
    _shutdown_event = asyncio.Event()

    def signal_handler(sig: int) -> None:
        """Обработчик сигналов SIGINT и SIGTERM."""
        if _shutdown_event and not _shutdown_event.is_set():
            print(f"\nПолучен сигнал остановки (sig={sig}), завершаем работу...")
            _shutdown_event.set()
            for task in _running_tasks:
                if not task.done():
                    task.cancel()

    try:
        loop = asyncio.get_running_loop()
        for sig in (signal.SIGINT, signal.SIGTERM):
            loop.add_signal_handler(sig, lambda s=sig: signal_handler(s))
    except NotImplementedError:
        # Windows не поддерживает add_signal_handler
        signal.signal(signal.SIGINT, lambda s, f: signal_handler(s))
        signal.signal(signal.SIGTERM, lambda s, f: signal_handler(s))


async def _serve(app_path: str, port: int, title: str) -> None:
    """Запускает uvicorn-сервер для одного сервиса."""
    import uvicorn

    await log_info(f"Запуск {title} на порту {port}...", type_msg=TypeMsg.INFO)

    config = uvicorn.Config(
        app_path,
        host=settings.deployment.HOST,
        port=port,
        log_level="debug" if settings.system.DEBUG else "info",
    )

    server = uvicorn.Server(config)
    try:
        await server.serve()
    except asyncio.CancelledError:
        await log_info(f"{title}: graceful shutdown", type_msg=TypeMsg.DEBUG)
        await server.shutdown()


async def run_menu_api() -> None:
    """Запускает Menu BFF (агрегация таблиц для витрины)."""
    await _serve("src.services.menu_bff.app:app", settings.deployment.MENU_API_PORT, "Menu BFF")


async def run_asset_cache() -> None:
    """Запускает Asset Cache (офлайн-кэш статики, service worker)."""
    await _serve("src.services.asset_cache.app:app", settings.deployment.ASSET_CACHE_PORT, "Asset Cache")


async def main(mode: str | None = None) -> None:
    """
    Главная функция приложения.

    Args:
        mode: Режим запуска (menu_api, asset_cache, all).
              Если None — берётся из COMPONENT_MODE конфигурации.
    """
    global _running_tasks

    setup_logging()
    setup_signal_handlers()

    mode = mode or settings.system.COMPONENT_MODE
    await log_info(
        f"{settings.system.PROJECT_NAME} v{settings.system.VERSION}, режим: {mode}",
        type_msg=TypeMsg.INFO,
    )

    try:
        if mode == ComponentMode.MENU_API.value:
            await run_menu_api()
        elif mode == ComponentMode.ASSET_CACHE.value:
            await run_asset_cache()
        elif mode == ComponentMode.ALL.value:
            _running_tasks = [
                asyncio.create_task(run_menu_api()),
                asyncio.create_task(run_asset_cache()),
            ]
            await asyncio.gather(*_running_tasks, return_exceptions=True)
        else:
            await log_error(f"Неизвестный режим: {mode}")
    except asyncio.CancelledError:
        await log_info("Задача отменена, выполняется graceful shutdown", type_msg=TypeMsg.INFO)
    except Exception as e:
        await log_error(f"Критическая ошибка: {e}", exc_info=True)
        raise
    finally:
        if _running_tasks:
            for task in _running_tasks:
                if not task.done():
                    task.cancel()
            await asyncio.gather(*_running_tasks, return_exceptions=True)
            _running_tasks.clear()
        await log_info("Приложение остановлено", type_msg=TypeMsg.INFO)


def print_usage() -> None:
    """Выводит справку по использованию."""
    print(f"""
Saborelli Menu — backend витрины пиццерии

Использование:
    python main.py [mode]

Режимы:
    menu_api       — Menu BFF (:{settings.deployment.MENU_API_PORT})
    asset_cache    — Asset Cache (:{settings.deployment.ASSET_CACHE_PORT})
    all            — оба сервиса

Без аргумента режим берётся из COMPONENT_MODE (сейчас: {settings.system.COMPONENT_MODE}).
    """)


if __name__ == "__main__":
    mode = None

    if len(sys.argv) > 1:
        arg = sys.argv[1].lower()
        if arg in ("--help", "-h"):
            print_usage()
            sys.exit(0)
        elif arg in {m.value for m in ComponentMode}:
            mode = arg
        else:
            print(f"Ошибка: неизвестный режим '{arg}'")
            print_usage()
            sys.exit(1)

    try:
        asyncio.run(main(mode))
    except KeyboardInterrupt:
        pass
