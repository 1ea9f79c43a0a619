# georegions/shared/models/common.py
"""
Общие модели ответов API.
"""

from __future__ import annotations

from typing import Any, Generic, Optional, TypeVar

from pydantic import BaseModel, Field


T = TypeVar("T")


class PageResponse(BaseModel, Generic[T]):
    """
    Список сущностей с общим количеством.
    page и limit возвращаются как пришли, без интерпретации.
    """

    rows: list[T]
    page: Optional[int] = None
    limit: Optional[int] = None
    total: int


class ErrorResponse(BaseModel):
    """Стандартный ответ с ошибкой."""

    error_code: str
    message: str
    details: dict[str, Any] | None = None


class HealthStatus(BaseModel):
    """Статус здоровья сервиса."""

    service: str
    status: str = "healthy"  # healthy, degraded
    version: str | None = None
    dependencies: dict[str, str] = Field(default_factory=dict)
