# tests/core/test_region_queries.py
"""
Тесты геозапросов: регионы в точке и регионы в радиусе.
"""

from __future__ import annotations

import math
from typing import Any
from unittest.mock import AsyncMock, patch

import pytest

from georegions.common.exceptions import MissingParameterError, NotFoundError
from georegions.core.regions.models import RegionWithUser
from georegions.core.regions.queries import GeoQueryService
from georegions.core.regions.repository import row_to_region
from georegions.core.users.repository import row_to_user
from georegions.shared.models.location import Coordinates


@pytest.fixture
def repo() -> AsyncMock:
    repo = AsyncMock()
    repo.find_at_point = AsyncMock(return_value=[])
    repo.find_within_radius = AsyncMock(return_value=[])
    return repo


@pytest.fixture
def region_with_user(region_row: dict[str, Any], user_row: dict[str, Any]) -> RegionWithUser:
    region = row_to_region(region_row)
    return RegionWithUser(**region.model_dump(exclude={"user"}), user=row_to_user(user_row))


class TestRegionsContainingPoint:
    """Регионы с центроидом в точке."""

    @pytest.mark.asyncio
    async def test_exact_point(self, repo: AsyncMock, region_row: dict[str, Any]) -> None:
        repo.find_at_point.return_value = [row_to_region(region_row)]

        regions = await GeoQueryService(repo).regions_containing_point(40.689247, -74.044502)

        assert [r.id for r in regions] == ["region-1"]
        repo.find_at_point.assert_awaited_once_with(Coordinates(latitude=40.689247, longitude=-74.044502))

    @pytest.mark.asyncio
    async def test_empty_result_is_not_error(self, repo: AsyncMock) -> None:
        """Пустой результат: пустой список и предупреждение в логе."""
        with patch("georegions.core.regions.queries.log_info", new_callable=AsyncMock) as mock_log:
            regions = await GeoQueryService(repo).regions_containing_point(0.0, 0.0)

        assert regions == []
        assert mock_log.await_args.args[0] == "No regions found at the specified point"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("latitude, longitude", [(None, -74.0), (40.0, None), (None, None)])
    async def test_missing_parameters(self, repo: AsyncMock, latitude, longitude) -> None:
        with pytest.raises(MissingParameterError, match="Latitude and longitude are required parameters"):
            await GeoQueryService(repo).regions_containing_point(latitude, longitude)

        repo.find_at_point.assert_not_called()

    @pytest.mark.asyncio
    async def test_zero_is_valid_coordinate(self, repo: AsyncMock) -> None:
        """0.0 это значение, а не отсутствие параметра."""
        await GeoQueryService(repo).regions_containing_point(0.0, 0.0)
        repo.find_at_point.assert_awaited_once()


class TestRegionsWithinDistance:
    """Регионы в радиусе."""

    @pytest.mark.asyncio
    async def test_radius_in_radians(self, repo: AsyncMock, region_with_user: RegionWithUser) -> None:
        repo.find_within_radius.return_value = [region_with_user]

        regions = await GeoQueryService(repo).regions_within_distance(40.689247, -74.044502, 10.0)

        center, radius = repo.find_within_radius.await_args.args
        assert center == Coordinates(latitude=40.689247, longitude=-74.044502)
        assert math.isclose(radius, 10.0 / 6371.0)
        assert regions[0].user.email == "maria@example.com"

    @pytest.mark.asyncio
    async def test_zero_distance(self, repo: AsyncMock, region_with_user: RegionWithUser) -> None:
        """distance = 0: радиус 0, попадают только точные центроиды."""
        repo.find_within_radius.return_value = [region_with_user]

        await GeoQueryService(repo).regions_within_distance(40.689247, -74.044502, 0.0)

        assert repo.find_within_radius.await_args.args[1] == 0.0

    @pytest.mark.asyncio
    async def test_custom_earth_radius(self, repo: AsyncMock, region_with_user: RegionWithUser) -> None:
        repo.find_within_radius.return_value = [region_with_user]

        await GeoQueryService(repo, earth_radius_km=1000.0).regions_within_distance(0.0, 0.0, 500.0)

        assert repo.find_within_radius.await_args.args[1] == 0.5

    @pytest.mark.asyncio
    async def test_empty_result_is_not_found(self, repo: AsyncMock) -> None:
        with pytest.raises(NotFoundError, match="No regions found at the specified point"):
            await GeoQueryService(repo).regions_within_distance(0.0, 0.0, 1.0)

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "latitude, longitude, distance",
        [(None, 0.0, 1.0), (0.0, None, 1.0), (0.0, 0.0, None)],
    )
    async def test_missing_parameters(self, repo: AsyncMock, latitude, longitude, distance) -> None:
        with pytest.raises(MissingParameterError, match="Latitude, longitude, and distance are required parameters"):
            await GeoQueryService(repo).regions_within_distance(latitude, longitude, distance)

        repo.find_within_radius.assert_not_called()

    @pytest.mark.asyncio
    async def test_nearest_first(self, repo: AsyncMock, region_with_user: RegionWithUser) -> None:
        """Результат упорядочен по удалённости от точки запроса."""
        far = region_with_user.model_copy(
            update={"id": "region-far", "coordinates": Coordinates(latitude=41.0, longitude=-74.0)}
        )
        near = region_with_user.model_copy(
            update={"id": "region-near", "coordinates": Coordinates(latitude=40.7, longitude=-74.0)}
        )
        repo.find_within_radius.return_value = [far, region_with_user, near]

        regions = await GeoQueryService(repo).regions_within_distance(40.689247, -74.044502, 100.0)

        assert [r.id for r in regions] == ["region-1", "region-near", "region-far"]
