# src/config/loader.py
"""
Загрузчик конфигурации проекта.
Единственный источник истины — config/config.json.
URL таблиц и параметры развёртывания переопределяются из переменных окружения.
"""

from __future__ import annotations

import json
import os
from functools import lru_cache
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from src.common.constants import MENU_CACHE_CONTROL


# =============================================================================
# ОПРЕДЕЛЕНИЕ ПУТЕЙ
# =============================================================================

def get_project_root() -> Path:
    """Возвращает корневую директорию проекта."""
    return Path(__file__).parent.parent.parent


def get_config_path() -> Path:
    """Возвращает путь к файлу конфигурации."""
    return get_project_root() / "config" / "config.json"


def load_config_json() -> dict[str, Any]:
    """Загружает config.json и возвращает словарь."""
    config_path = get_config_path()
    if not config_path.exists():
        raise FileNotFoundError(f"Файл конфигурации не найден: {config_path}")

    with open(config_path, "r", encoding="utf-8") as f:
        return json.load(f)


# =============================================================================
# PYDANTIC МОДЕЛИ КОНФИГУРАЦИИ
# =============================================================================

_SHEETS_BASE = (
    "https://docs.google.com/spreadsheets/d/e/"
    "2PACX-1vQJeo2AAETdXC08x9EQlkIG1FiVLEosMng4IvaQYJAdZnIDHJw8CT8J5RAJNtJ5GWHOKHkUsd5V8OSL/pub"
)

DEFAULT_URLS_TO_CACHE: list[str] = [
    "./",
    "index.html",
    "manifest.json",
    "https://cdn.tailwindcss.com",
    "https://cdnjs.cloudflare.com/ajax/libs/font-awesome/6.4.0/css/all.min.css",
    "https://fonts.googleapis.com/css2?family=Poppins:wght@300;400;600;700&display=swap",
    "https://raw.githubusercontent.com/WillianSoares93/catalogo_pizzaria/refs/heads/main/logo.png",
    "https://invexo.com.br/blog/wp-content/uploads/2022/12/pizza-pizzaria-gavea-rio-de-janeiro.jpg",
    "https://upload.wikimedia.org/wikipedia/commons/9/91/Pizza-3007395.jpg",
]


class SystemSettings(BaseModel):
    """Системные настройки."""
    PROJECT_NAME: str = "saborelli_menu"
    VERSION: str = "1.0.0"
    DEBUG: bool = False
    COMPONENT_MODE: str = "all"


class DeploymentSettings(BaseModel):
    """Настройки развертывания сервисов."""
    HOST: str = "0.0.0.0"
    MENU_API_PORT: int = 8088
    ASSET_CACHE_PORT: int = 8089


class LoggingSettings(BaseModel):
    """Настройки логирования."""
    LOG_LEVEL: str = "INFO"
    LOG_TO_FILE: bool = False
    LOG_FILE_PATH: str = "logs/app.log"
    LOG_FORMAT: str = "colored"
    LOG_MAX_BYTES: int = 10485760
    LOG_BACKUP_COUNT: int = 5

    @field_validator("LOG_FORMAT")
    @classmethod
    def check_format(cls, v: str) -> str:
        """Допустимы только json и colored."""
        if v not in ("json", "colored"):
            raise ValueError(f"Неизвестный формат логов: {v}")
        return v


class SheetsSettings(BaseModel):
    """Настройки источников данных (Google Sheets, опубликованные как CSV)."""
    CARDAPIO_CSV_URL: str = f"{_SHEETS_BASE}?gid=664943668&single=true&output=csv"
    PROMOCOES_CSV_URL: str = f"{_SHEETS_BASE}?gid=600393470&single=true&output=csv"
    DELIVERY_FEES_CSV_URL: str = f"{_SHEETS_BASE}?gid=1695668250&single=true&output=csv"
    FETCH_TIMEOUT_SECONDS: float = Field(default=5.0, gt=0)
    ERROR_BODY_PREVIEW_CHARS: int = Field(default=200, ge=0)
    CACHE_CONTROL: str = MENU_CACHE_CONTROL


class AssetCacheSettings(BaseModel):
    """Настройки офлайн-кэша статики витрины."""
    CACHE_NAME: str = "saborelli-menu-v1"
    BASE_URL: str = "http://localhost:8080/"
    URLS_TO_CACHE: list[str] = Field(default_factory=lambda: list(DEFAULT_URLS_TO_CACHE))
    FETCH_TIMEOUT_SECONDS: float = Field(default=10.0, gt=0)

    @field_validator("BASE_URL")
    @classmethod
    def ensure_trailing_slash(cls, v: str) -> str:
        """Относительные пути манифеста разрешаются от директории, нужен завершающий /."""
        return v if v.endswith("/") else f"{v}/"


# =============================================================================
# ГЛАВНЫЙ КЛАСС НАСТРОЕК
# =============================================================================

class Settings(BaseSettings):
    """
    Главный класс настроек приложения.
    Агрегирует все секции конфигурации.
    """
    system: SystemSettings = Field(default_factory=SystemSettings)
    deployment: DeploymentSettings = Field(default_factory=DeploymentSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    sheets: SheetsSettings = Field(default_factory=SheetsSettings)
    assets: AssetCacheSettings = Field(default_factory=AssetCacheSettings)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @classmethod
    def from_dict(cls, config_data: dict[str, Any]) -> "Settings":
        """
        Создаёт объект Settings из плоского словаря (формат config.json).
        Значения из переменных окружения имеют приоритет.
        """
        # Фильтруем комментарии (ключи, начинающиеся с _comment_)
        data = {k: v for k, v in config_data.items() if not k.startswith("_comment_")}

        system_defaults = SystemSettings()
        deployment_defaults = DeploymentSettings()
        logging_defaults = LoggingSettings()
        sheets_defaults = SheetsSettings()
        assets_defaults = AssetCacheSettings()

        return cls(
            system=SystemSettings(
                PROJECT_NAME=data.get("PROJECT_NAME", system_defaults.PROJECT_NAME),
                VERSION=data.get("VERSION", system_defaults.VERSION),
                DEBUG=data.get("DEBUG", system_defaults.DEBUG),
                COMPONENT_MODE=os.getenv("COMPONENT_MODE", data.get("COMPONENT_MODE", system_defaults.COMPONENT_MODE)),
            ),
            deployment=DeploymentSettings(
                HOST=os.getenv("HOST", data.get("HOST", deployment_defaults.HOST)),
                MENU_API_PORT=int(os.getenv("MENU_API_PORT", data.get("MENU_API_PORT", deployment_defaults.MENU_API_PORT))),
                ASSET_CACHE_PORT=int(os.getenv("ASSET_CACHE_PORT", data.get("ASSET_CACHE_PORT", deployment_defaults.ASSET_CACHE_PORT))),
            ),
            logging=LoggingSettings(
                LOG_LEVEL=data.get("LOG_LEVEL", logging_defaults.LOG_LEVEL),
                LOG_TO_FILE=data.get("LOG_TO_FILE", logging_defaults.LOG_TO_FILE),
                LOG_FILE_PATH=data.get("LOG_FILE_PATH", logging_defaults.LOG_FILE_PATH),
                LOG_FORMAT=os.getenv("LOG_FORMAT", data.get("LOG_FORMAT", logging_defaults.LOG_FORMAT)),
                LOG_MAX_BYTES=data.get("LOG_MAX_BYTES", logging_defaults.LOG_MAX_BYTES),
                LOG_BACKUP_COUNT=data.get("LOG_BACKUP_COUNT", logging_defaults.LOG_BACKUP_COUNT),
            ),
            sheets=SheetsSettings(
                CARDAPIO_CSV_URL=os.getenv("CARDAPIO_CSV_URL", data.get("CARDAPIO_CSV_URL", sheets_defaults.CARDAPIO_CSV_URL)),
                PROMOCOES_CSV_URL=os.getenv("PROMOCOES_CSV_URL", data.get("PROMOCOES_CSV_URL", sheets_defaults.PROMOCOES_CSV_URL)),
                DELIVERY_FEES_CSV_URL=os.getenv(
                    "DELIVERY_FEES_CSV_URL",
                    data.get("DELIVERY_FEES_CSV_URL", sheets_defaults.DELIVERY_FEES_CSV_URL),
                ),
                FETCH_TIMEOUT_SECONDS=float(os.getenv(
                    "FETCH_TIMEOUT_SECONDS",
                    data.get("FETCH_TIMEOUT_SECONDS", sheets_defaults.FETCH_TIMEOUT_SECONDS),
                )),
                ERROR_BODY_PREVIEW_CHARS=data.get("ERROR_BODY_PREVIEW_CHARS", sheets_defaults.ERROR_BODY_PREVIEW_CHARS),
                CACHE_CONTROL=data.get("CACHE_CONTROL", sheets_defaults.CACHE_CONTROL),
            ),
            assets=AssetCacheSettings(
                CACHE_NAME=data.get("ASSET_CACHE_NAME", assets_defaults.CACHE_NAME),
                BASE_URL=os.getenv("ASSET_BASE_URL", data.get("ASSET_BASE_URL", assets_defaults.BASE_URL)),
                URLS_TO_CACHE=data.get("ASSET_URLS_TO_CACHE", assets_defaults.URLS_TO_CACHE),
                FETCH_TIMEOUT_SECONDS=data.get("ASSET_FETCH_TIMEOUT_SECONDS", assets_defaults.FETCH_TIMEOUT_SECONDS),
            ),
        )

    @classmethod
    def from_config_json(cls) -> "Settings":
        """
        Создаёт объект Settings из config.json.
        URL и параметры развёртывания переопределяются из переменных окружения.
        """
        return cls.from_dict(load_config_json())


@lru_cache()
def get_settings() -> Settings:
    """
    Возвращает синглтон настроек приложения.
    Использует кэширование для производительности.
    """
    from dotenv import load_dotenv

    env_path = get_project_root() / ".env"
    if env_path.exists():
        load_dotenv(env_path)

    return Settings.from_config_json()


# Экспорт синглтона для удобного импорта
settings = get_settings()
