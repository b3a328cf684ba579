# src/services/asset_cache/worker.py
"""
Офлайн-кэш статики витрины (серверная модель service worker).

install: открыть кэш и загрузить фиксированный манифест, сразу активироваться.
fetch: cache-first без ревалидации; промах уходит в сеть и в кэш не пишется.
В сеть уходят только URL манифеста и URL с origin витрины.
"""

from __future__ import annotations

from enum import Enum

import httpx

from src.common.constants import TypeMsg
from src.common.logger import log_error, log_info
from src.services.asset_cache.storage import CacheStorage, CachedResponse, normalize_url


class WorkerState(str, Enum):
    """Состояния воркера."""
    NEW = "new"
    INSTALLING = "installing"
    ACTIVATED = "activated"
    REDUNDANT = "redundant"


class AssetNotAllowedError(Exception):
    """URL не из манифеста и не с origin витрины."""

    def __init__(self, url: str) -> None:
        self.url = url
        super().__init__(f"Ресурс вне витрины: {url}")


def resolve_manifest(urls: list[str], base_url: str) -> list[str]:
    """Разрешить относительные пути манифеста от адреса витрины."""
    base = httpx.URL(base_url)
    return [str(base.join(url)) for url in urls]


def _origin(url: httpx.URL) -> tuple[str, str, int | None]:
    return (url.scheme, url.host, url.port)


class StaticAssetCache:
    """
    Кэш статики с политикой cache-first.

    Кэш заполняется один раз при install и дальше не пополняется. Ответ из
    кэша отдаётся безусловно, даже если он устарел.
    """

    def __init__(
        self,
        cache_name: str,
        urls: list[str],
        base_url: str,
        storage: CacheStorage | None = None,
        http: httpx.AsyncClient | None = None,
        timeout: float = 10.0,
    ) -> None:
        self.cache_name = cache_name
        self.urls = list(urls)
        self.base_url = base_url
        self.storage = storage or CacheStorage()
        self.state = WorkerState.NEW
        self.skip_waiting = False

        self._owns_http = http is None
        self.http = http or httpx.AsyncClient(timeout=timeout, follow_redirects=True)

    @property
    def manifest(self) -> list[str]:
        """Абсолютные URL манифеста."""
        return resolve_manifest(self.urls, self.base_url)

    @property
    def is_active(self) -> bool:
        return self.state == WorkerState.ACTIVATED

    def is_allowed(self, url: str) -> bool:
        """Ресурс из манифеста или с того же origin, что и витрина."""
        if normalize_url(url) in {normalize_url(u) for u in self.manifest}:
            return True
        return _origin(httpx.URL(url)) == _origin(httpx.URL(self.base_url))

    async def close(self) -> None:
        """Закрыть HTTP клиент, если он создан воркером."""
        if self._owns_http:
            await self.http.aclose()

    async def install(self) -> None:
        """
        Открыть кэш и загрузить весь манифест.

        При ошибке воркер не активируется (REDUNDANT), исключение
        пробрасывается вызывающему коду.
        """
        self.state = WorkerState.INSTALLING
        cache = self.storage.open(self.cache_name)
        await log_info(f"Кэш {self.cache_name} открыт", type_msg=TypeMsg.DEBUG)

        try:
            await cache.add_all(self.manifest, self.http)
        except Exception as e:
            self.state = WorkerState.REDUNDANT
            await log_error(f"Установка кэша {self.cache_name} не удалась: {e}")
            raise

        # Активация без ожидания закрытия старых клиентов
        self.skip_waiting = True
        self.state = WorkerState.ACTIVATED
        await log_info(f"Кэш {self.cache_name} установлен: {len(cache)} ресурсов")

    async def fetch(self, url: str, method: str = "GET") -> CachedResponse:
        """
        Перехват запроса.

        Совпадение в кэше возвращается без обращения к сети. Иначе ровно один
        сетевой запрос; его ответ не кэшируется, сетевая ошибка
        пробрасывается.

        Raises:
            AssetNotAllowedError: URL вне манифеста и чужого origin, в сеть
                запрос не уходит
        """
        if not self.is_allowed(url):
            raise AssetNotAllowedError(url)

        # Кэш ищется только для GET и только у активного воркера
        if self.is_active and method.upper() == "GET":
            cached = await self.storage.match(url)
            if cached is not None:
                return cached

        response = await self.http.request(method, url)
        return CachedResponse.from_httpx(response, url=url)
