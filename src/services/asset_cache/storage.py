# src/services/asset_cache/storage.py
"""
Хранилище закэшированных ответов.

Повторяет семантику Cache Storage браузера: именованные кэши, ключ —
URL без фрагмента, query string значим. Запись только через put/add_all.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field

import httpx


def normalize_url(url: str) -> str:
    """Ключ кэша: URL без #фрагмента."""
    return str(httpx.URL(url.split("#", 1)[0]))


class AssetFetchError(Exception):
    """Не удалось загрузить ресурс при заполнении кэша."""

    def __init__(self, url: str, status_code: int | None = None, reason: str = "") -> None:
        self.url = url
        self.status_code = status_code
        self.reason = reason
        detail = f"status {status_code}" if status_code is not None else reason
        super().__init__(f"Не удалось закэшировать {url}: {detail}")


@dataclass(frozen=True)
class CachedResponse:
    """Сохранённый HTTP ответ."""
    url: str
    status_code: int
    content: bytes
    headers: dict[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300

    @property
    def media_type(self) -> str | None:
        return self.headers.get("content-type")

    @classmethod
    def from_httpx(cls, response: httpx.Response, url: str | None = None) -> "CachedResponse":
        """Снимок ответа httpx (тело уже прочитано)."""
        return cls(
            url=normalize_url(url or str(response.request.url)),
            status_code=response.status_code,
            content=response.content,
            headers={k.lower(): v for k, v in response.headers.items()},
        )


class AssetCache:
    """Один именованный кэш."""

    def __init__(self, name: str) -> None:
        self.name = name
        self._entries: dict[str, CachedResponse] = {}

    def __len__(self) -> int:
        return len(self._entries)

    async def match(self, url: str) -> CachedResponse | None:
        """Найти ответ по URL."""
        return self._entries.get(normalize_url(url))

    async def put(self, url: str, response: CachedResponse) -> None:
        """Сохранить ответ под URL."""
        self._entries[normalize_url(url)] = response

    async def keys(self) -> list[str]:
        """Список закэшированных URL."""
        return list(self._entries)

    async def add_all(self, urls: list[str], http: httpx.AsyncClient) -> None:
        """
        Загрузить и сохранить все URL.

        Всё или ничего: если хотя бы один запрос упал или вернул неуспешный
        статус, кэш не меняется, а ошибка пробрасывается.
        """
        async def _fetch(url: str) -> CachedResponse:
            try:
                response = await http.get(url)
            except httpx.HTTPError as e:
                raise AssetFetchError(url, reason=str(e) or e.__class__.__name__) from e
            if not response.is_success:
                raise AssetFetchError(url, status_code=response.status_code)
            return CachedResponse.from_httpx(response, url=url)

        responses = await asyncio.gather(*(_fetch(url) for url in urls))

        for url, response in zip(urls, responses):
            await self.put(url, response)


class CacheStorage:
    """Набор именованных кэшей."""

    def __init__(self) -> None:
        self._caches: dict[str, AssetCache] = {}

    def open(self, name: str) -> AssetCache:
        """Открыть кэш, создав его при отсутствии."""
        if name not in self._caches:
            self._caches[name] = AssetCache(name)
        return self._caches[name]

    def has(self, name: str) -> bool:
        return name in self._caches

    def delete(self, name: str) -> bool:
        return self._caches.pop(name, None) is not None

    def names(self) -> list[str]:
        return list(self._caches)

    async def match(self, url: str) -> CachedResponse | None:
        """Найти ответ во всех кэшах (в порядке создания)."""
        for cache in self._caches.values():
            cached = await cache.match(url)
            if cached is not None:
                return cached
        return None
