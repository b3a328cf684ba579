# src/shared/models/__init__.py
"""
Общие DTO и Pydantic-модели.
"""

from src.shared.models.common import HealthStatus
from src.shared.models.menu import (
    SheetSource,
    MenuSources,
    MenuPayload,
    ErrorPayload,
)

__all__ = [
    # Common
    "HealthStatus",
    # Menu
    "SheetSource",
    "MenuSources",
    "MenuPayload",
    "ErrorPayload",
]
