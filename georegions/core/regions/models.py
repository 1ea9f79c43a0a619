# georegions/core/regions/models.py
"""
Модели данных регионов.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field

from georegions.core.users.models import User
from georegions.shared.models.location import Coordinates


class Region(BaseModel):
    """Модель региона. Регион описывается одной точкой-центроидом."""

    model_config = ConfigDict(from_attributes=True)

    id: str = Field(default_factory=lambda: str(uuid4()), description="ID региона")
    name: str = Field(..., description="Название")
    coordinates: Optional[Coordinates] = Field(None, description="Центроид")
    user: str = Field(..., description="ID владельца (FK)")

    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class RegionWithUser(BaseModel):
    """Регион с подставленным владельцем: вместо FK сам объект User."""

    id: str
    name: str
    coordinates: Optional[Coordinates] = None
    user: User
    created_at: datetime
    updated_at: datetime


class RegionCreateDTO(BaseModel):
    """DTO для создания региона."""

    id: Optional[str] = None
    name: str
    user: str
    coordinates: Optional[Coordinates] = None


class RegionUpdateDTO(BaseModel):
    """DTO для частичного обновления региона. Владелец передаётся как userID."""

    model_config = ConfigDict(populate_by_name=True)

    name: Optional[str] = None
    user: Optional[str] = Field(None, alias="userID")
    coordinates: Optional[Coordinates] = None

    def has_changes(self) -> bool:
        """Передано ли хотя бы одно поле."""
        return bool(self.model_dump(exclude_none=True))
