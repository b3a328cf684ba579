# src/common/constants.py
"""
Общие константы и перечисления.
"""

from enum import Enum


class TypeMsg(str, Enum):
    """Типы сообщений для логирования."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ComponentMode(str, Enum):
    """Режимы запуска компонентов."""
    MENU_API = "menu_api"
    ASSET_CACHE = "asset_cache"
    ALL = "all"


# Ключи ответа агрегатора (читаются фронтендом витрины, менять нельзя)
MENU_KEY = "cardapio"
PROMOTIONS_KEY = "promocoes"
DELIVERY_FEES_KEY = "deliveryFees"

# Заголовок кэширования для CDN: 5 минут свежести + stale-while-revalidate
MENU_CACHE_CONTROL = "s-maxage=300, stale-while-revalidate"

# Префикс сообщения об ошибке в ответе 500
INTERNAL_ERROR_PREFIX = "Erro interno no servidor ao carregar dados"

# Текст, если upstream не вернул reason phrase
UNKNOWN_ERROR_REASON = "Erro desconhecido"
