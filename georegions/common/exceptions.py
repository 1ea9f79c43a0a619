# georegions/common/exceptions.py
"""
Иерархия исключений домена.
Каждое исключение знает свой вид (error_code) и HTTP-статус,
в который его переводит слой обработчиков.
"""

from __future__ import annotations

from georegions.common.constants import ErrorKind


class GeoRegionsError(Exception):
    """Базовая ошибка приложения."""

    kind: ErrorKind = ErrorKind.STORE_FAILURE
    status_code: int = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class MissingParameterError(GeoRegionsError):
    """Не переданы обязательные параметры запроса."""
    kind = ErrorKind.MISSING_PARAMETER
    status_code = 400


class DuplicateRegionError(GeoRegionsError):
    """Регион с таким (user, name, coordinates) уже существует."""
    kind = ErrorKind.DUPLICATE_REGION
    status_code = 409


class NotFoundError(GeoRegionsError):
    """Сущность не найдена."""
    kind = ErrorKind.NOT_FOUND
    status_code = 404


class OwnerNotFoundError(GeoRegionsError):
    """Владелец региона не найден (нарушение ссылочной целостности)."""
    kind = ErrorKind.OWNER_NOT_FOUND
    status_code = 500


class ResolutionError(GeoRegionsError):
    """Ошибка внешнего сервиса геокодирования."""
    kind = ErrorKind.RESOLUTION_ERROR
    status_code = 500


class StoreFailure(GeoRegionsError):
    """Ошибка хранилища."""
    kind = ErrorKind.STORE_FAILURE
    status_code = 500
