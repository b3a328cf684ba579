#!/usr/bin/env python3
# entrypoint_all.py
"""
Точка входа для запуска Menu BFF и Asset Cache в одном контейнере.
Используется для разработки или простых деплойментов.
"""

from __future__ import annotations

import asyncio
import sys
from pathlib import Path

# Добавляем корневую директорию проекта в путь
project_root = Path(__file__).parent.parent.resolve()
sys.path.insert(0, str(project_root))

from main import main
from src.common.constants import ComponentMode


if __name__ == "__main__":
    print("[DEV_MODE] Запуск всех компонентов (menu_api + asset_cache)...")
    print("Для остановки используйте Ctrl+C")

    try:
        asyncio.run(main(mode=ComponentMode.ALL.value))
    except KeyboardInterrupt:
        print("\nПолучен сигнал остановки, завершение работы...")
    except Exception as e:
        print(f"\nКритическая ошибка: {e}")
        sys.exit(1)
    finally:
        print("Все компоненты остановлены")
