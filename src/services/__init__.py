# src/services/__init__.py
"""
Сервисы приложения.

Архитектура:
- Каждый сервис — независимое FastAPI-приложение со своим entrypoint
- Общих данных между сервисами нет

Сервисы:
- menu_bff: агрегация таблиц Google Sheets для витрины
- asset_cache: офлайн-кэш статики и service worker
"""

__all__: list[str] = []
