# georegions/core/geo/__init__.py
"""
GeoResolver.
Геокодирование адресов и координат через внешний провайдер.
"""

from georegions.core.geo.service import GeoResolver, parse_formatted_address
from georegions.core.geo.utils import central_angle, distance_to_radians

__all__ = [
    "GeoResolver",
    "parse_formatted_address",
    "central_angle",
    "distance_to_radians",
]
