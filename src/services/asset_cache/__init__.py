# src/services/asset_cache/__init__.py
"""
Asset Cache — офлайн-кэш статики витрины.

- CacheStorage / AssetCache: именованные хранилища закэшированных ответов
- StaticAssetCache: install (предзагрузка манифеста) + fetch (cache-first)
- service-worker.js для браузера, собранный из того же манифеста
"""
