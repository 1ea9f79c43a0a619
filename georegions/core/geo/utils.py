# georegions/core/geo/utils.py
"""
Сферическая геометрия: центральный угол между точками и перевод
расстояния по поверхности в радианы.

Эта же формула в SQL (CENTRAL_ANGLE_SQL) отбирает регионы в радиусе,
поэтому вычисления на Python и в PostgreSQL должны совпадать.
"""

from __future__ import annotations

import math

from georegions.common.constants import EARTH_RADIUS_KM
from georegions.shared.models.location import Coordinates


def central_angle(a: Coordinates, b: Coordinates) -> float:
    """
    Центральный угол между точками (радианы), формула гаверсинусов.

    Args:
        a: Первая точка
        b: Вторая точка

    Returns:
        Угол в диапазоне [0, pi]
    """
    lat1, lon1 = map(math.radians, a.as_tuple())
    lat2, lon2 = map(math.radians, b.as_tuple())

    dlat = lat2 - lat1
    dlon = lon2 - lon1

    h = math.sin(dlat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(dlon / 2) ** 2
    # Погрешность округления может дать h чуть больше 1
    return 2 * math.asin(math.sqrt(min(1.0, h)))


def distance_to_radians(distance_km: float, earth_radius_km: float = EARTH_RADIUS_KM) -> float:
    """Переводит расстояние по поверхности (км) в центральный угол (радианы)."""
    return distance_km / earth_radius_km

