# georegions/common/constants.py
"""
Общие константы и перечисления.
"""

from enum import Enum


class TypeMsg(str, Enum):
    """Типы сообщений для логирования."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorKind(str, Enum):
    """Виды ошибок домена (error_code в ответе API)."""
    MISSING_PARAMETER = "MissingParameter"
    DUPLICATE_REGION = "DuplicateRegion"
    NOT_FOUND = "NotFound"
    OWNER_NOT_FOUND = "OwnerNotFound"
    RESOLUTION_ERROR = "ResolutionError"
    STORE_FAILURE = "StoreFailure"


# Радиус Земли в километрах
EARTH_RADIUS_KM = 6371.0
