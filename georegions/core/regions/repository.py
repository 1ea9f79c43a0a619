# georegions/core/regions/repository.py
"""
Репозиторий регионов.

Методы записи принимают соединение открытой транзакции (conn): единицей
работы управляет сервис. Без conn запрос идёт через пул.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional

from asyncpg import Connection

from georegions.core.regions.models import Region, RegionWithUser
from georegions.core.users.repository import row_to_user
from georegions.infra.database import DatabaseManager
from georegions.shared.models.location import Coordinates


REGION_COLUMNS = "id, name, latitude, longitude, user_id, created_at, updated_at"

# Центральный угол (радианы) между центроидом региона r и точкой ($1, $2),
# формула гаверсинусов. LEAST защищает asin от 1.0000000000000002.
CENTRAL_ANGLE_SQL = """
    2 * asin(sqrt(LEAST(1.0,
        power(sin(radians(r.latitude - $1) / 2), 2)
        + cos(radians($1)) * cos(radians(r.latitude))
          * power(sin(radians(r.longitude - $2) / 2), 2)
    )))
"""


def row_to_region(row: Mapping[str, Any]) -> Region:
    """Собирает Region из строки БД."""
    coordinates = None
    if row["latitude"] is not None and row["longitude"] is not None:
        coordinates = Coordinates(latitude=row["latitude"], longitude=row["longitude"])

    return Region(
        id=row["id"],
        name=row["name"],
        coordinates=coordinates,
        user=row["user_id"],
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


def _point_params(coordinates: Optional[Coordinates]) -> tuple[Optional[float], Optional[float]]:
    if coordinates is None:
        return None, None
    return coordinates.latitude, coordinates.longitude


class RegionRepository:
    """Репозиторий регионов."""

    def __init__(self, db: DatabaseManager) -> None:
        """
        Инициализация репозитория.

        Args:
            db: Менеджер базы данных (Dependency Injection)
        """
        self._db = db

    def _executor(self, conn: Optional[Connection]) -> Any:
        return conn if conn is not None else self._db

    async def get_by_id(
        self,
        region_id: str,
        conn: Optional[Connection] = None,
        for_update: bool = False,
    ) -> Optional[Region]:
        """
        Получает регион по ID.

        Args:
            region_id: ID региона
            conn: Соединение транзакции
            for_update: Заблокировать строку до конца транзакции
        """
        lock = " FOR UPDATE" if for_update else ""
        row = await self._executor(conn).fetchrow(
            f"SELECT {REGION_COLUMNS} FROM regions WHERE id = $1{lock}",
            region_id,
        )
        return row_to_region(row) if row is not None else None

    async def get_owner_id(self, region_id: str, conn: Optional[Connection] = None) -> Optional[str]:
        """ID владельца региона без блокировки строки."""
        return await self._executor(conn).fetchval(
            "SELECT user_id FROM regions WHERE id = $1",
            region_id,
        )

    async def find_by_tuple(
        self,
        user_id: str,
        name: str,
        coordinates: Optional[Coordinates],
        exclude_id: Optional[str] = None,
        conn: Optional[Connection] = None,
    ) -> Optional[Region]:
        """
        Ищет регион с точным совпадением (user, name, coordinates).

        Координаты сравниваются через IS NOT DISTINCT FROM: регион без
        координат совпадает только с регионом без координат.

        Args:
            exclude_id: ID региона, который не учитывается (при обновлении)
        """
        latitude, longitude = _point_params(coordinates)
        row = await self._executor(conn).fetchrow(
            f"""
            SELECT {REGION_COLUMNS} FROM regions
            WHERE user_id = $1
              AND name = $2
              AND latitude IS NOT DISTINCT FROM $3::double precision
              AND longitude IS NOT DISTINCT FROM $4::double precision
              AND ($5::text IS NULL OR id <> $5::text)
            LIMIT 1
            """,
            user_id,
            name,
            latitude,
            longitude,
            exclude_id,
        )
        return row_to_region(row) if row is not None else None

    async def insert(self, region: Region, conn: Optional[Connection] = None) -> Region:
        """Сохраняет новый регион."""
        row = await self._executor(conn).fetchrow(
            f"""
            INSERT INTO regions (id, name, latitude, longitude, user_id, created_at, updated_at)
            VALUES ($1, $2, $3, $4, $5, $6, $7)
            RETURNING {REGION_COLUMNS}
            """,
            region.id,
            region.name,
            *_point_params(region.coordinates),
            region.user,
            region.created_at,
            region.updated_at,
        )
        return row_to_region(row)

    async def update(self, region: Region, conn: Optional[Connection] = None) -> Optional[Region]:
        """
        Сохраняет изменённые поля региона.

        Returns:
            Обновлённый регион или None, если его нет
        """
        row = await self._executor(conn).fetchrow(
            f"""
            UPDATE regions
            SET name = $2, latitude = $3, longitude = $4, user_id = $5, updated_at = NOW()
            WHERE id = $1
            RETURNING {REGION_COLUMNS}
            """,
            region.id,
            region.name,
            *_point_params(region.coordinates),
            region.user,
        )
        return row_to_region(row) if row is not None else None

    async def delete_by_id(self, region_id: str, conn: Optional[Connection] = None) -> Optional[Region]:
        """
        Удаляет регион.

        Returns:
            Удалённый регион или None
        """
        row = await self._executor(conn).fetchrow(
            f"DELETE FROM regions WHERE id = $1 RETURNING {REGION_COLUMNS}",
            region_id,
        )
        return row_to_region(row) if row is not None else None

    async def get_all(self, limit: Optional[int] = None, offset: int = 0) -> list[Region]:
        """Список регионов в порядке создания."""
        rows = await self._db.fetch(
            f"""
            SELECT {REGION_COLUMNS} FROM regions
            ORDER BY created_at, id
            LIMIT $1 OFFSET $2
            """,
            limit,
            offset,
        )
        return [row_to_region(row) for row in rows]

    async def count(self) -> int:
        """Общее количество регионов."""
        return await self._db.fetchval("SELECT COUNT(*) FROM regions")

    # =========================================================================
    # ГЕОЗАПРОСЫ
    # =========================================================================

    async def find_at_point(self, point: Coordinates) -> list[Region]:
        """Регионы, центроид которых в точности равен точке."""
        rows = await self._db.fetch(
            f"""
            SELECT {REGION_COLUMNS} FROM regions
            WHERE latitude = $1 AND longitude = $2
            ORDER BY created_at, id
            """,
            point.latitude,
            point.longitude,
        )
        return [row_to_region(row) for row in rows]

    async def find_within_radius(self, center: Coordinates, radius_radians: float) -> list[RegionWithUser]:
        """
        Регионы в сферической шапке с центром center и угловым радиусом
        radius_radians. Владелец подставляется объектом User.
        """
        rows = await self._db.fetch(
            f"""
            SELECT r.id, r.name, r.latitude, r.longitude, r.user_id,
                   r.created_at, r.updated_at,
                   u.id AS owner_id, u.name AS owner_name, u.email AS owner_email,
                   u.street AS owner_street, u.city AS owner_city,
                   u.zip_code AS owner_zip_code,
                   u.latitude AS owner_latitude, u.longitude AS owner_longitude,
                   u.region_ids AS owner_region_ids,
                   u.created_at AS owner_created_at, u.updated_at AS owner_updated_at
            FROM regions r
            JOIN users u ON u.id = r.user_id
            WHERE r.latitude IS NOT NULL
              AND r.longitude IS NOT NULL
              AND {CENTRAL_ANGLE_SQL} <= $3
            ORDER BY r.created_at, r.id
            """,
            center.latitude,
            center.longitude,
            radius_radians,
        )

        return [
            RegionWithUser(
                **row_to_region(row).model_dump(exclude={"user"}),
                user=row_to_user(row, prefix="owner_"),
            )
            for row in rows
        ]
