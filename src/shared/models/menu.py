# src/shared/models/menu.py
"""
Модели агрегатора данных витрины.

Тексты CSV не разбираются: сервис возвращает их фронтенду как есть.
"""

from __future__ import annotations

from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict, Field

from src.common.constants import DELIVERY_FEES_KEY, MENU_KEY, PROMOTIONS_KEY


@dataclass(frozen=True)
class SheetSource:
    """
    Опубликованная таблица-источник.

    Attributes:
        key: Ключ в JSON-ответе
        label: Название для сообщений об ошибке ("o cardápio")
        title: Название для логов ("Cardápio")
        url: Адрес CSV-экспорта
    """
    key: str
    label: str
    title: str
    url: str


@dataclass(frozen=True)
class MenuSources:
    """Три источника в фиксированном порядке загрузки."""
    menu: SheetSource
    promotions: SheetSource
    delivery_fees: SheetSource

    @classmethod
    def from_urls(cls, menu_url: str, promotions_url: str, delivery_fees_url: str) -> "MenuSources":
        """Создаёт набор источников из трёх URL."""
        return cls(
            menu=SheetSource(MENU_KEY, "o cardápio", "Cardápio", menu_url),
            promotions=SheetSource(PROMOTIONS_KEY, "as promoções", "Promoções", promotions_url),
            delivery_fees=SheetSource(DELIVERY_FEES_KEY, "as taxas de entrega", "Taxas de Entrega", delivery_fees_url),
        )

    def ordered(self) -> tuple[SheetSource, SheetSource, SheetSource]:
        """Источники в порядке загрузки."""
        return (self.menu, self.promotions, self.delivery_fees)


class MenuPayload(BaseModel):
    """Успешный ответ: сырые CSV трёх таблиц."""

    model_config = ConfigDict(populate_by_name=True)

    cardapio: str
    promocoes: str
    delivery_fees: str = Field(alias=DELIVERY_FEES_KEY)

    def to_response(self) -> dict[str, str]:
        """Словарь с ключами, которые ожидает витрина."""
        return self.model_dump(by_alias=True)


class ErrorPayload(BaseModel):
    """Ответ с ошибкой."""

    error: str
