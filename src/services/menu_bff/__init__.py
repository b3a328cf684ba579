# src/services/menu_bff/__init__.py
"""
Menu BFF — Backend for Frontend для статической витрины пиццерии.

Собирает три опубликованные таблицы Google Sheets (cardápio, promoções,
taxas de entrega) в один JSON-ответ:
- Последовательная загрузка с таймаутом на каждый запрос
- Fail-fast: первая ошибка прерывает весь запрос
- Кэширование на CDN через Cache-Control
"""
