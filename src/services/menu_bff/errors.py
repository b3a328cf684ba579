# src/services/menu_bff/errors.py
"""
Исключения загрузки таблиц-источников.
"""

from __future__ import annotations

from src.common.constants import UNKNOWN_ERROR_REASON
from src.shared.models.menu import SheetSource


class SourceFetchError(Exception):
    """Не удалось получить таблицу-источник."""

    def __init__(self, source: SheetSource, reason: str) -> None:
        self.source = source
        self.reason = reason or UNKNOWN_ERROR_REASON
        super().__init__(f"Falha ao buscar {source.label}: {self.reason}")


class UpstreamStatusError(SourceFetchError):
    """
    Источник ответил неуспешным HTTP статусом.

    Тело ответа хранится только для логов и в ответ клиенту не попадает.
    """

    def __init__(
        self,
        source: SheetSource,
        status_code: int,
        reason_phrase: str,
        body_preview: str = "",
    ) -> None:
        self.status_code = status_code
        self.body_preview = body_preview
        super().__init__(source, reason_phrase)


class UpstreamTransportError(SourceFetchError):
    """Сетевая ошибка: соединение, DNS, таймаут."""
