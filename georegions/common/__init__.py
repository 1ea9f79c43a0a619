# georegions/common/__init__.py
"""
Общие утилиты, константы, исключения и логгер.
"""

from georegions.common.logger import get_logger, log_info, log_error, log_warning, log_debug
from georegions.common.constants import TypeMsg, ErrorKind, EARTH_RADIUS_KM
from georegions.common.exceptions import (
    GeoRegionsError,
    MissingParameterError,
    DuplicateRegionError,
    NotFoundError,
    OwnerNotFoundError,
    ResolutionError,
    StoreFailure,
)

__all__ = [
    "get_logger",
    "log_info",
    "log_error",
    "log_warning",
    "log_debug",
    "TypeMsg",
    "ErrorKind",
    "EARTH_RADIUS_KM",
    "GeoRegionsError",
    "MissingParameterError",
    "DuplicateRegionError",
    "NotFoundError",
    "OwnerNotFoundError",
    "ResolutionError",
    "StoreFailure",
]
