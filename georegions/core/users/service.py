# georegions/core/users/service.py
"""
Сервис пользователей.
Создание с проверкой локации и опциональным геокодированием, CRUD.
"""

from __future__ import annotations

from typing import Optional

from georegions.common.constants import TypeMsg
from georegions.common.exceptions import MissingParameterError, NotFoundError
from georegions.common.logger import log_info
from georegions.core.geo.service import GeoResolver
from georegions.core.users.models import User, UserCreateDTO, UserUpdateDTO
from georegions.core.users.repository import UserRepository
from georegions.shared.models.common import PageResponse
from georegions.shared.models.location import Address, Coordinates, LocationInput


class UserService:
    """
    Сервис пользователей.

    Если передан resolver, недостающая половина локации (адрес или
    координаты) дополняется через геокодер перед сохранением.
    """

    def __init__(
        self,
        repository: UserRepository,
        resolver: Optional[GeoResolver] = None,
    ) -> None:
        self._repo = repository
        self._resolver = resolver

    async def create_user(self, dto: UserCreateDTO) -> User:
        """
        Создаёт пользователя.

        Raises:
            MissingParameterError: Переданы оба или ни одного из address/coordinates
            ResolutionError: Ошибка геокодера
        """
        if (dto.address is None) == (dto.coordinates is None):
            raise MissingParameterError(
                "Provide only address or coordinates, not both or neither."
            )

        address, coordinates = await self._complete_location(dto.address, dto.coordinates)

        user = await self._repo.create(User(
            name=dto.name,
            email=dto.email,
            address=address,
            coordinates=coordinates,
        ))

        await log_info(f"Пользователь создан: {user.id}", type_msg=TypeMsg.INFO)
        return user

    async def get_user(self, user_id: str) -> User:
        """
        Получает пользователя по ID.

        Raises:
            NotFoundError: Пользователь не найден
        """
        user = await self._repo.get_by_id(user_id)
        if user is None:
            raise NotFoundError("User not found")
        return user

    async def list_users(self, page: Optional[int] = None, limit: Optional[int] = None) -> PageResponse[User]:
        """Список пользователей; page и limit возвращаются как пришли."""
        offset = (page - 1) * limit if page and limit else 0
        users = await self._repo.get_all(limit=limit, offset=offset)
        total = await self._repo.count()

        await log_info("Получен список пользователей", type_msg=TypeMsg.DEBUG)
        return PageResponse[User](rows=users, page=page, limit=limit, total=total)

    async def update_user(self, user_id: str, dto: UserUpdateDTO) -> User:
        """
        Частичное обновление: меняются только переданные поля.

        Raises:
            NotFoundError: Пользователь не найден
        """
        user = await self.get_user(user_id)
        if not dto.has_changes():
            await log_info(f"Пустое обновление пользователя {user_id}, запись пропущена", type_msg=TypeMsg.DEBUG)
            return user

        changes = {
            field: getattr(dto, field)
            for field in ("name", "email", "address", "coordinates")
            if getattr(dto, field) is not None
        }

        # Адрес без координат (или наоборот): вторую половину даёт геокодер
        if self._resolver is not None and ("address" in changes) != ("coordinates" in changes):
            address, coordinates = await self._complete_location(
                changes.get("address"), changes.get("coordinates"),
            )
            if address is not None:
                changes["address"] = address
            if coordinates is not None:
                changes["coordinates"] = coordinates

        updated = await self._repo.update(user.model_copy(update=changes))
        if updated is None:
            raise NotFoundError("User not found")

        await log_info(f"Пользователь обновлён: {user_id}", type_msg=TypeMsg.INFO)
        return updated

    async def delete_user(self, user_id: str) -> User:
        """
        Удаляет пользователя вместе с его регионами.

        Raises:
            NotFoundError: Пользователь не найден
        """
        deleted = await self._repo.delete_by_id(user_id)
        if deleted is None:
            raise NotFoundError("User not found")

        await log_info(
            f"Пользователь удалён: {user_id} (регионов: {len(deleted.regions)})",
            type_msg=TypeMsg.INFO,
        )
        return deleted

    async def _complete_location(
        self,
        address: Optional[Address],
        coordinates: Optional[Coordinates],
    ) -> tuple[Optional[Address], Optional[Coordinates]]:
        """
        Дополняет адрес координатами (или наоборот) через геокодер.
        Без геокодера значения возвращаются как есть.
        """
        if self._resolver is None:
            return address, coordinates

        resolved = await self._resolver.resolve_location(
            LocationInput(address=address, coordinates=coordinates)
        )
        return (
            address or resolved.address,
            coordinates or resolved.coordinates,
        )
