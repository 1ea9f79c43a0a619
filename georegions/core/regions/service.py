# georegions/core/regions/service.py
"""
Сервис регионов.

Каждая изменяющая операция выполняется одной транзакцией: строка владельца
блокируется (FOR UPDATE), затем меняются регион и список regions владельца.
Любая ошибка внутри блока откатывает обе записи.

Порядок блокировок везде один: сначала users, потом regions. Тот же порядок
берёт каскадное удаление пользователя, поэтому встречные транзакции не
зацикливаются.
"""

from __future__ import annotations

from typing import Optional

import asyncpg
from asyncpg import Connection

from georegions.common.constants import TypeMsg
from georegions.common.exceptions import (
    DuplicateRegionError,
    NotFoundError,
    OwnerNotFoundError,
    StoreFailure,
)
from georegions.common.logger import log_info
from georegions.core.regions.models import Region, RegionCreateDTO, RegionUpdateDTO
from georegions.core.regions.repository import RegionRepository
from georegions.core.users.repository import UserRepository
from georegions.infra.database import DatabaseManager
from georegions.shared.models.common import PageResponse


DUPLICATE_REGION_MESSAGE = "Region with the same name and coordinates already exists for the informed user"
DUPLICATE_ID_MESSAGE = "Region with the same id already exists"

# Сколько раз перечитывать владельца, если он сменился до блокировки региона
LOCK_ATTEMPTS = 3


class RegionService:
    """CRUD регионов с поддержкой обратных ссылок у владельца."""

    def __init__(
        self,
        db: DatabaseManager,
        region_repository: RegionRepository,
        user_repository: UserRepository,
    ) -> None:
        self._db = db
        self._regions = region_repository
        self._users = user_repository

    async def create_region(self, dto: RegionCreateDTO) -> Region:
        """
        Создаёт регион и добавляет его ID в конец списка владельца.

        Raises:
            OwnerNotFoundError: Владелец не существует
            DuplicateRegionError: У владельца уже есть регион с тем же name и coordinates
                или переданный id уже занят
        """
        # id не передан: генерируется
        region = Region(**dto.model_dump(exclude_none=True))

        async with self._db.transaction() as conn:
            if not await self._users.lock(conn, dto.user):
                raise OwnerNotFoundError("User not found")

            await self._ensure_unique(conn, region)

            try:
                created = await self._regions.insert(region, conn=conn)
            except asyncpg.UniqueViolationError as e:
                # Клиент передал id, который уже занят
                await log_info(f"Регион с id {region.id} уже существует", type_msg=TypeMsg.WARNING)
                raise DuplicateRegionError(DUPLICATE_ID_MESSAGE) from e
            await self._users.append_region(conn, created.user, created.id)

        await log_info(
            f"Регион создан: {created.id} (владелец {created.user})",
            type_msg=TypeMsg.INFO,
        )
        return created

    async def get_region(self, region_id: str) -> Region:
        """
        Получает регион по ID.

        Raises:
            NotFoundError: Регион не найден
        """
        region = await self._regions.get_by_id(region_id)
        if region is None:
            raise NotFoundError("Region not found")
        return region

    async def list_regions(self, page: Optional[int] = None, limit: Optional[int] = None) -> PageResponse[Region]:
        """Список регионов; page и limit возвращаются как пришли."""
        offset = (page - 1) * limit if page and limit else 0
        regions = await self._regions.get_all(limit=limit, offset=offset)
        total = await self._regions.count()
        return PageResponse[Region](rows=regions, page=page, limit=limit, total=total)

    async def update_region(self, region_id: str, dto: RegionUpdateDTO) -> Region:
        """
        Частичное обновление региона.

        Проверка дубликата идёт по итоговому кортежу (переданные поля поверх
        текущих), сам регион не учитывается. При смене владельца ID переносится
        из списка старого владельца в конец списка нового.

        Raises:
            NotFoundError: Регион не найден
            OwnerNotFoundError: Новый владелец не существует
            DuplicateRegionError: Итоговый кортеж совпадает с другим регионом
        """
        async with self._db.transaction() as conn:
            current = await self._lock_region(conn, region_id, new_owner=dto.user)

            changes = dto.model_dump(exclude_none=True, exclude={"coordinates"})
            if dto.coordinates is not None:
                changes["coordinates"] = dto.coordinates
            target = current.model_copy(update=changes)

            # Пустое обновление не меняет кортеж: проверять нечего
            if dto.has_changes():
                await self._ensure_unique(conn, target, exclude_id=region_id)

            updated = await self._regions.update(target, conn=conn)
            if updated is None:
                raise NotFoundError("Region not found")

            if target.user != current.user:
                await self._users.remove_region(conn, current.user, region_id)
                await self._users.append_region(conn, updated.user, region_id)

        await log_info(f"Регион обновлён: {region_id}", type_msg=TypeMsg.INFO)
        return updated

    async def delete_region(self, region_id: str) -> Region:
        """
        Удаляет регион и убирает его ID из списка владельца.

        Raises:
            NotFoundError: Регион не найден
        """
        async with self._db.transaction() as conn:
            current = await self._lock_region(conn, region_id)

            deleted = await self._regions.delete_by_id(region_id, conn=conn)
            await self._users.remove_region(conn, current.user, region_id)

        await log_info(f"Регион удалён: {region_id}", type_msg=TypeMsg.INFO)
        return deleted or current

    async def _lock_region(
        self,
        conn: Connection,
        region_id: str,
        new_owner: Optional[str] = None,
    ) -> Region:
        """
        Блокирует владельцев региона, затем сам регион.

        Владелец читается без блокировки, его строка (и строка нового
        владельца) блокируется в порядке ID, после чего регион читается
        FOR UPDATE. Если за это время владелец сменился, цикл повторяется
        с новым владельцем.

        Raises:
            NotFoundError: Регион не найден
            OwnerNotFoundError: Новый владелец не существует
            StoreFailure: Владелец менялся на каждой попытке
        """
        locked: set[str] = set()
        for _ in range(LOCK_ATTEMPTS):
            owner_id = await self._regions.get_owner_id(region_id, conn=conn)
            if owner_id is None:
                raise NotFoundError("Region not found")

            for user_id in sorted({owner_id, new_owner or owner_id} - locked):
                found = await self._users.lock(conn, user_id)
                if not found and user_id == new_owner:
                    raise OwnerNotFoundError("User not found")
                locked.add(user_id)

            current = await self._regions.get_by_id(region_id, conn=conn, for_update=True)
            if current is None:
                raise NotFoundError("Region not found")
            if current.user == owner_id:
                return current

            await log_info(
                f"Владелец региона {region_id} сменился до блокировки, повтор",
                type_msg=TypeMsg.DEBUG,
            )

        raise StoreFailure("Region owner changed concurrently")

    async def _ensure_unique(
        self,
        conn: Connection,
        region: Region,
        exclude_id: Optional[str] = None,
    ) -> None:
        duplicate = await self._regions.find_by_tuple(
            region.user,
            region.name,
            region.coordinates,
            exclude_id=exclude_id,
            conn=conn,
        )
        if duplicate is not None:
            await log_info(
                f"Дубликат региона '{region.name}' у пользователя {region.user}",
                type_msg=TypeMsg.WARNING,
            )
            raise DuplicateRegionError(DUPLICATE_REGION_MESSAGE)
