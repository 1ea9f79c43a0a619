# georegions/core/users/models.py
"""
Модели данных пользователей.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field

from georegions.shared.models.location import Address, Coordinates


class User(BaseModel):
    """Модель пользователя."""

    model_config = ConfigDict(from_attributes=True)

    id: str = Field(default_factory=lambda: str(uuid4()), description="ID пользователя")
    name: str = Field(..., description="Имя")
    email: str = Field(..., description="Email")
    address: Optional[Address] = Field(None, description="Почтовый адрес")
    coordinates: Optional[Coordinates] = Field(None, description="Координаты")

    # Обратные ссылки на регионы в порядке создания
    regions: list[str] = Field(default_factory=list, description="ID регионов пользователя")

    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class UserCreateDTO(BaseModel):
    """DTO для создания пользователя. Нужен ровно один из address/coordinates."""

    name: str
    email: str
    address: Optional[Address] = None
    coordinates: Optional[Coordinates] = None


class UserUpdateDTO(BaseModel):
    """DTO для частичного обновления пользователя."""

    name: Optional[str] = None
    email: Optional[str] = None
    address: Optional[Address] = None
    coordinates: Optional[Coordinates] = None

    def has_changes(self) -> bool:
        """Передано ли хотя бы одно поле."""
        return bool(self.model_dump(exclude_none=True))
