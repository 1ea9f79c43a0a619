# georegions/core/users/repository.py
"""
Репозиторий пользователей.
Ошибки хранилища не перехватываются: их переводит в ответ слой API.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional

from asyncpg import Connection

from georegions.common.constants import TypeMsg
from georegions.common.logger import log_info
from georegions.core.users.models import User
from georegions.infra.database import DatabaseManager
from georegions.shared.models.location import Address, Coordinates


USER_COLUMNS = """
    id, name, email, street, city, zip_code, latitude, longitude,
    region_ids, created_at, updated_at
"""


def row_to_user(row: Mapping[str, Any], prefix: str = "") -> User:
    """
    Собирает User из строки БД.

    Args:
        row: Запись asyncpg (или dict)
        prefix: Префикс колонок (для JOIN, например "user_")
    """
    address = None
    if any(row[f"{prefix}{col}"] is not None for col in ("street", "city", "zip_code")):
        address = Address(
            street=row[f"{prefix}street"],
            city=row[f"{prefix}city"],
            zip_code=row[f"{prefix}zip_code"],
        )

    coordinates = None
    if row[f"{prefix}latitude"] is not None and row[f"{prefix}longitude"] is not None:
        coordinates = Coordinates(
            latitude=row[f"{prefix}latitude"],
            longitude=row[f"{prefix}longitude"],
        )

    return User(
        id=row[f"{prefix}id"],
        name=row[f"{prefix}name"],
        email=row[f"{prefix}email"],
        address=address,
        coordinates=coordinates,
        regions=list(row[f"{prefix}region_ids"] or []),
        created_at=row[f"{prefix}created_at"],
        updated_at=row[f"{prefix}updated_at"],
    )


def _location_params(user: User) -> tuple[Any, ...]:
    """Плоские параметры адреса и координат для SQL."""
    address = user.address or Address()
    coordinates = user.coordinates
    return (
        address.street,
        address.city,
        address.zip_code,
        coordinates.latitude if coordinates else None,
        coordinates.longitude if coordinates else None,
    )


class UserRepository:
    """Репозиторий пользователей."""

    def __init__(self, db: DatabaseManager) -> None:
        """
        Инициализация репозитория.

        Args:
            db: Менеджер базы данных (Dependency Injection)
        """
        self._db = db

    async def get_by_id(self, user_id: str) -> Optional[User]:
        """
        Получает пользователя по ID.

        Returns:
            Пользователь или None
        """
        row = await self._db.fetchrow(
            f"SELECT {USER_COLUMNS} FROM users WHERE id = $1",
            user_id,
        )
        return row_to_user(row) if row is not None else None

    async def create(self, user: User) -> User:
        """Сохраняет нового пользователя."""
        row = await self._db.fetchrow(
            f"""
            INSERT INTO users (id, name, email, street, city, zip_code,
                               latitude, longitude, region_ids, created_at, updated_at)
            VALUES ($1, $2, $3, $4, $5, $6, $7, $8, $9, $10, $11)
            RETURNING {USER_COLUMNS}
            """,
            user.id,
            user.name,
            user.email,
            *_location_params(user),
            user.regions,
            user.created_at,
            user.updated_at,
        )

        await log_info(f"Пользователь {user.id} создан", type_msg=TypeMsg.DEBUG)
        return row_to_user(row)

    async def update(self, user: User) -> Optional[User]:
        """
        Обновляет профиль пользователя (без списка регионов).

        Returns:
            Обновлённый пользователь или None, если его нет
        """
        row = await self._db.fetchrow(
            f"""
            UPDATE users
            SET name = $2, email = $3, street = $4, city = $5, zip_code = $6,
                latitude = $7, longitude = $8, updated_at = NOW()
            WHERE id = $1
            RETURNING {USER_COLUMNS}
            """,
            user.id,
            user.name,
            user.email,
            *_location_params(user),
        )
        return row_to_user(row) if row is not None else None

    async def delete_by_id(self, user_id: str) -> Optional[User]:
        """
        Удаляет пользователя (регионы удаляются каскадно).

        Returns:
            Удалённый пользователь или None
        """
        row = await self._db.fetchrow(
            f"DELETE FROM users WHERE id = $1 RETURNING {USER_COLUMNS}",
            user_id,
        )
        return row_to_user(row) if row is not None else None

    async def get_all(self, limit: Optional[int] = None, offset: int = 0) -> list[User]:
        """Список пользователей в порядке создания."""
        rows = await self._db.fetch(
            f"""
            SELECT {USER_COLUMNS} FROM users
            ORDER BY created_at, id
            LIMIT $1 OFFSET $2
            """,
            limit,
            offset,
        )
        return [row_to_user(row) for row in rows]

    async def count(self) -> int:
        """Общее количество пользователей."""
        return await self._db.fetchval("SELECT COUNT(*) FROM users")

    # =========================================================================
    # ОПЕРАЦИИ ВНУТРИ ТРАНЗАКЦИИ РЕГИОНА
    # =========================================================================

    async def lock(self, conn: Connection, user_id: str) -> bool:
        """
        Блокирует строку пользователя до конца транзакции.
        Сериализует изменения списка регионов одного владельца.

        Returns:
            True если пользователь существует
        """
        found = await conn.fetchval(
            "SELECT 1 FROM users WHERE id = $1 FOR UPDATE",
            user_id,
        )
        return found is not None

    async def append_region(self, conn: Connection, user_id: str, region_id: str) -> bool:
        """
        Атомарно добавляет ID региона в конец списка пользователя.

        Returns:
            True если пользователь найден
        """
        updated = await conn.fetchval(
            """
            UPDATE users
            SET region_ids = array_append(region_ids, $2), updated_at = NOW()
            WHERE id = $1
            RETURNING id
            """,
            user_id,
            region_id,
        )
        return updated is not None

    async def remove_region(self, conn: Connection, user_id: str, region_id: str) -> None:
        """Удаляет ID региона из списка пользователя."""
        await conn.execute(
            """
            UPDATE users
            SET region_ids = array_remove(region_ids, $2), updated_at = NOW()
            WHERE id = $1
            """,
            user_id,
            region_id,
        )
