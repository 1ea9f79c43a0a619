# georegions/shared/models/__init__.py
"""
Модели, общие для доменного слоя и HTTP API.
"""

from georegions.shared.models.common import ErrorResponse, HealthStatus, PageResponse
from georegions.shared.models.location import Address, Coordinates, LocationInput

__all__ = [
    "ErrorResponse",
    "HealthStatus",
    "PageResponse",
    "Address",
    "Coordinates",
    "LocationInput",
]
