# tests/config/test_loader.py
"""
Тесты для модуля загрузки конфигурации.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from src.common.constants import MENU_CACHE_CONTROL
from src.config.loader import (
    DEFAULT_URLS_TO_CACHE,
    AssetCacheSettings,
    LoggingSettings,
    Settings,
    SheetsSettings,
    SystemSettings,
    get_config_path,
    get_project_root,
    get_settings,
    load_config_json,
)


_ENV_KEYS = (
    "COMPONENT_MODE",
    "HOST",
    "MENU_API_PORT",
    "ASSET_CACHE_PORT",
    "LOG_FORMAT",
    "CARDAPIO_CSV_URL",
    "PROMOCOES_CSV_URL",
    "DELIVERY_FEES_CSV_URL",
    "FETCH_TIMEOUT_SECONDS",
    "ASSET_BASE_URL",
)


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    """Убирает переопределения из окружения."""
    for key in _ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    return monkeypatch


@pytest.fixture
def mock_config() -> dict[str, Any]:
    """Мок конфигурации для тестов."""
    return {
        "_comment_system": "=== СИСТЕМА ===",
        "PROJECT_NAME": "saborelli_menu_test",
        "VERSION": "1.0.0-test",
        "DEBUG": True,
        "LOG_LEVEL": "DEBUG",
        "COMPONENT_MODE": "menu_api",
        "MENU_API_PORT": 9000,
        "LOG_FORMAT": "json",
        "CARDAPIO_CSV_URL": "https://sheets.test/pub?gid=1&output=csv",
        "PROMOCOES_CSV_URL": "https://sheets.test/pub?gid=2&output=csv",
        "DELIVERY_FEES_CSV_URL": "https://sheets.test/pub?gid=3&output=csv",
        "FETCH_TIMEOUT_SECONDS": 3,
        "ASSET_CACHE_NAME": "saborelli-menu-test",
        "ASSET_BASE_URL": "https://shop.test/menu",
        "ASSET_URLS_TO_CACHE": ["./", "index.html"],
    }


class TestGetProjectRoot:
    """Тесты для функции get_project_root."""

    def test_returns_path_object(self) -> None:
        assert isinstance(get_project_root(), Path)

    def test_root_contains_src_and_config(self) -> None:
        root = get_project_root()

        assert (root / "src").exists()
        assert (root / "config").exists()


class TestGetConfigPath:
    """Тесты для функции get_config_path."""

    def test_path_ends_with_config_json(self) -> None:
        path = get_config_path()

        assert path.name == "config.json"
        assert path.parent.name == "config"


class TestLoadConfigJson:
    """Тесты для функции load_config_json."""

    def test_contains_required_keys(self) -> None:
        """Проверяет наличие обязательных ключей."""
        config = load_config_json()

        required_keys = [
            "PROJECT_NAME",
            "VERSION",
            "CARDAPIO_CSV_URL",
            "PROMOCOES_CSV_URL",
            "DELIVERY_FEES_CSV_URL",
            "ASSET_CACHE_NAME",
            "ASSET_URLS_TO_CACHE",
        ]

        for key in required_keys:
            assert key in config, f"Отсутствует ключ: {key}"

    def test_raises_file_not_found(self, tmp_path: Path) -> None:
        """Проверяет исключение при отсутствии файла."""
        with patch("src.config.loader.get_config_path") as mock_path:
            mock_path.return_value = tmp_path / "nonexistent.json"

            with pytest.raises(FileNotFoundError):
                load_config_json()


class TestSectionModels:
    """Тесты секций конфигурации."""

    def test_sheets_defaults(self) -> None:
        sheets = SheetsSettings()

        assert sheets.FETCH_TIMEOUT_SECONDS == 5.0
        assert sheets.CACHE_CONTROL == MENU_CACHE_CONTROL == "s-maxage=300, stale-while-revalidate"
        assert "output=csv" in sheets.CARDAPIO_CSV_URL
        assert "output=csv" in sheets.PROMOCOES_CSV_URL
        assert "output=csv" in sheets.DELIVERY_FEES_CSV_URL

    def test_sheets_timeout_must_be_positive(self) -> None:
        with pytest.raises(ValidationError):
            SheetsSettings(FETCH_TIMEOUT_SECONDS=0)

    def test_invalid_log_format(self) -> None:
        with pytest.raises(ValidationError):
            LoggingSettings(LOG_FORMAT="xml")

    def test_asset_base_url_gets_trailing_slash(self) -> None:
        assert AssetCacheSettings(BASE_URL="https://shop.test/menu").BASE_URL == "https://shop.test/menu/"
        assert AssetCacheSettings(BASE_URL="https://shop.test/").BASE_URL == "https://shop.test/"

    def test_system_section_has_only_used_fields(self) -> None:
        """Уровень логов живёт только в секции logging."""
        assert set(SystemSettings.model_fields) == {"PROJECT_NAME", "VERSION", "DEBUG", "COMPONENT_MODE"}

    def test_asset_defaults(self) -> None:
        assets = AssetCacheSettings()

        assert assets.CACHE_NAME == "saborelli-menu-v1"
        assert assets.URLS_TO_CACHE == DEFAULT_URLS_TO_CACHE
        assert assets.URLS_TO_CACHE is not DEFAULT_URLS_TO_CACHE


class TestSettingsFromDict:
    """Тесты сборки Settings из плоского словаря."""

    def test_maps_flat_keys_to_sections(self, clean_env, mock_config) -> None:
        settings = Settings.from_dict(mock_config)

        assert settings.system.PROJECT_NAME == "saborelli_menu_test"
        assert settings.system.COMPONENT_MODE == "menu_api"
        assert settings.deployment.MENU_API_PORT == 9000
        assert settings.logging.LOG_FORMAT == "json"
        assert settings.logging.LOG_LEVEL == "DEBUG"
        assert settings.sheets.CARDAPIO_CSV_URL == "https://sheets.test/pub?gid=1&output=csv"
        assert settings.sheets.FETCH_TIMEOUT_SECONDS == 3.0
        assert settings.assets.CACHE_NAME == "saborelli-menu-test"
        assert settings.assets.BASE_URL == "https://shop.test/menu/"
        assert settings.assets.URLS_TO_CACHE == ["./", "index.html"]

    def test_missing_keys_use_defaults(self, clean_env) -> None:
        settings = Settings.from_dict({})

        assert settings.deployment.MENU_API_PORT == 8088
        assert settings.deployment.ASSET_CACHE_PORT == 8089
        assert settings.sheets.ERROR_BODY_PREVIEW_CHARS == 200
        assert settings.assets.URLS_TO_CACHE == DEFAULT_URLS_TO_CACHE

    def test_comment_keys_are_ignored(self, clean_env) -> None:
        """Ключи _comment_* не мешают загрузке."""
        settings = Settings.from_dict({"_comment_sheets": "=== GOOGLE SHEETS ===", "VERSION": "2.0.0"})

        assert settings.system.VERSION == "2.0.0"

    def test_env_overrides_config(self, clean_env, mock_config) -> None:
        """Переменные окружения важнее config.json."""
        clean_env.setenv("CARDAPIO_CSV_URL", "https://env.test/menu.csv")
        clean_env.setenv("MENU_API_PORT", "9100")
        clean_env.setenv("FETCH_TIMEOUT_SECONDS", "1.5")
        clean_env.setenv("ASSET_BASE_URL", "https://env.test")

        settings = Settings.from_dict(mock_config)

        assert settings.sheets.CARDAPIO_CSV_URL == "https://env.test/menu.csv"
        assert settings.sheets.PROMOCOES_CSV_URL == "https://sheets.test/pub?gid=2&output=csv"
        assert settings.deployment.MENU_API_PORT == 9100
        assert settings.sheets.FETCH_TIMEOUT_SECONDS == 1.5
        assert settings.assets.BASE_URL == "https://env.test/"

    def test_invalid_log_format_from_env(self, clean_env, mock_config) -> None:
        clean_env.setenv("LOG_FORMAT", "plain")

        with pytest.raises(ValidationError):
            Settings.from_dict(mock_config)


class TestGetSettings:
    def test_returns_singleton(self) -> None:
        assert get_settings() is get_settings()

    def test_loads_project_config(self) -> None:
        """Конфигурация проекта загружается и валидна."""
        settings = Settings.from_config_json()

        assert settings.sheets.FETCH_TIMEOUT_SECONDS > 0
        assert settings.assets.URLS_TO_CACHE
