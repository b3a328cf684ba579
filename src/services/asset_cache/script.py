# src/services/asset_cache/script.py
"""
Генерация service-worker.js для браузера из манифеста конфигурации.
"""

from __future__ import annotations

import json


SERVICE_WORKER_TEMPLATE = """\
const CACHE_NAME = {cache_name};
const urlsToCache = {urls};

self.addEventListener('install', event => {{
  event.waitUntil(
    caches.open(CACHE_NAME)
      .then(cache => {{
        console.log('Opened cache');
        return cache.addAll(urlsToCache);
      }})
  );
  self.skipWaiting();
}});

self.addEventListener('fetch', event => {{
  event.respondWith(
    caches.match(event.request)
      .then(response => {{
        if (response) {{
          return response;
        }}
        return fetch(event.request);
      }})
  );
}});
"""


def render_service_worker_script(cache_name: str, urls: list[str]) -> str:
    """
    Собрать текст service worker.

    Пути манифеста передаются как есть: браузер сам разрешает относительные
    пути от адреса скрипта.
    """
    return SERVICE_WORKER_TEMPLATE.format(
        cache_name=json.dumps(cache_name),
        urls=json.dumps(urls, indent=2, ensure_ascii=False),
    )
