# src/services/menu_bff/service.py
"""
Бизнес-логика Menu BFF.
Загрузка трёх таблиц-источников и сборка ответа для витрины.
"""

from __future__ import annotations

import httpx

from src.common.constants import TypeMsg
from src.common.logger import log_error, log_info
from src.services.menu_bff.errors import UpstreamStatusError, UpstreamTransportError
from src.shared.models.menu import MenuPayload, MenuSources, SheetSource


class MenuAggregationService:
    """
    Сервис агрегации данных витрины.

    Загружает таблицы строго по порядку: cardápio → promoções → taxas de
    entrega. Первая же ошибка прерывает сборку, следующие таблицы не
    запрашиваются, частичный результат не возвращается.
    """

    def __init__(
        self,
        sources: MenuSources,
        http: httpx.AsyncClient | None = None,
        timeout: float = 5.0,
        body_preview_chars: int = 200,
    ) -> None:
        self.sources = sources
        self.timeout = timeout
        self.body_preview_chars = body_preview_chars

        # Google Sheets отвечает редиректом на googleusercontent.com
        self._owns_http = http is None
        self.http = http or httpx.AsyncClient(timeout=timeout, follow_redirects=True)

    async def close(self) -> None:
        """Закрыть HTTP клиент, если он создан сервисом."""
        if self._owns_http:
            await self.http.aclose()

    async def fetch_document(self, source: SheetSource) -> str:
        """
        Загрузить CSV одной таблицы.

        Raises:
            UpstreamTransportError: сетевая ошибка или таймаут
            UpstreamStatusError: неуспешный HTTP статус
        """
        await log_info(
            f"Загрузка таблицы {source.title}: {source.url}",
            type_msg=TypeMsg.DEBUG,
            extra={"source": source.key},
        )

        try:
            response = await self.http.get(source.url, timeout=self.timeout)
        except httpx.HTTPError as e:
            reason = str(e) or e.__class__.__name__
            await log_error(
                f"Сетевая ошибка при загрузке {source.title}: {reason}",
                extra={"source": source.key},
            )
            raise UpstreamTransportError(source, reason) from e

        if not response.is_success:
            error_text = response.text
            await log_error(
                f"Ошибка HTTP при загрузке {source.title}. "
                f"Status: {response.status_code}, reason: {response.reason_phrase}. "
                f"Тело ответа (частично): {error_text[:self.body_preview_chars]}...",
                extra={"source": source.key, "status_code": response.status_code},
            )
            raise UpstreamStatusError(
                source,
                status_code=response.status_code,
                reason_phrase=response.reason_phrase,
                body_preview=error_text[:self.body_preview_chars],
            )

        await log_info(f"Таблица {source.title} загружена", type_msg=TypeMsg.DEBUG)
        return response.text

    async def aggregate(self) -> MenuPayload:
        """Загрузить все три таблицы и собрать ответ."""
        await log_info("Начало загрузки данных витрины", type_msg=TypeMsg.DEBUG)

        bodies: dict[str, str] = {}
        for source in self.sources.ordered():
            bodies[source.key] = await self.fetch_document(source)

        await log_info("Все таблицы загружены (cardápio, promoções, taxas de entrega)")
        return MenuPayload.model_validate(bodies)
