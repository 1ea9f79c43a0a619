# tests/conftest.py
"""
Общие фикстуры и настройки для тестов.
"""

from __future__ import annotations

import json
import os
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, AsyncGenerator
from unittest.mock import AsyncMock, MagicMock

import pytest

# Устанавливаем переменные окружения перед импортом модулей
os.environ.setdefault("DB_PASSWORD", "test_password")
os.environ.setdefault("GEOCODING_API_KEY", "test_api_key")


# =============================================================================
# ФИКСТУРЫ КОНФИГУРАЦИИ
# =============================================================================

@pytest.fixture(scope="session")
def project_root() -> Path:
    """Корневая директория проекта."""
    return Path(__file__).parent.parent


@pytest.fixture(scope="session")
def config_path(project_root: Path) -> Path:
    """Путь к файлу конфигурации."""
    return project_root / "config" / "config.json"


@pytest.fixture
def mock_config() -> dict[str, Any]:
    """Мок конфигурации для тестов."""
    return {
        "_comment_system": "Системные настройки",
        "PROJECT_NAME": "georegions_test",
        "VERSION": "1.0.0-test",
        "DEBUG": False,
        "ENVIRONMENT": "test",
        "API_HOST": "127.0.0.1",
        "API_PORT": 3333,
        "CORS_ORIGINS": ["http://localhost:3000"],
        "LOG_LEVEL": "INFO",
        "LOG_TO_FILE": False,
        "LOG_FILE_PATH": "logs/test.log",
        "LOG_FORMAT": "json",
        "LOG_MAX_BYTES": 1024,
        "DB_HOST": "db.local",
        "DB_PORT": 5433,
        "DB_NAME": "georegions_test",
        "DB_USER": "tester",
        "DB_PASSWORD": "",
        "DB_MIN_POOL_SIZE": 1,
        "DB_MAX_POOL_SIZE": 5,
        "DB_COMMAND_TIMEOUT": 30,
        "DB_RETRY_ATTEMPTS": 2,
        "DB_RETRY_DELAY": 0.5,
        "GEOCODING_ENABLED": True,
        "GEOCODING_API_KEY": "",
        "GEOCODING_URL": "https://geocoder.test/v1/json",
        "GEOCODING_LANGUAGE": "pt",
        "GEOCODING_TIMEOUT": 5.0,
        "EARTH_RADIUS_KM": 6371.0,
    }


@pytest.fixture
def temp_config_file(tmp_path: Path, mock_config: dict[str, Any]) -> Path:
    """Создаёт временный файл конфигурации."""
    config_file = tmp_path / "config.json"
    config_file.write_text(json.dumps(mock_config, ensure_ascii=False, indent=2))
    return config_file


# =============================================================================
# ФИКСТУРЫ ИНФРАСТРУКТУРЫ (МОКИ)
# =============================================================================

@pytest.fixture
def mock_conn() -> AsyncMock:
    """Мок соединения внутри транзакции."""
    conn = AsyncMock()
    conn.fetchrow = AsyncMock(return_value=None)
    conn.fetch = AsyncMock(return_value=[])
    conn.execute = AsyncMock(return_value="UPDATE 1")
    conn.fetchval = AsyncMock(return_value=None)
    return conn


@pytest.fixture
def mock_db(mock_conn: AsyncMock) -> MagicMock:
    """
    Мок менеджера базы данных.
    transaction() отдаёт mock_conn; db.committed показывает, завершился ли
    блок без исключения.
    """
    db = MagicMock()
    db.fetchrow = AsyncMock(return_value=None)
    db.fetch = AsyncMock(return_value=[])
    db.execute = AsyncMock(return_value="INSERT 0 1")
    db.fetchval = AsyncMock(return_value=None)
    db.committed = False

    @asynccontextmanager
    async def transaction() -> AsyncGenerator[AsyncMock, None]:
        db.committed = False
        yield mock_conn
        db.committed = True

    db.transaction = transaction
    return db


# =============================================================================
# ФИКСТУРЫ МОДЕЛЕЙ
# =============================================================================

@pytest.fixture
def now() -> datetime:
    return datetime(2024, 1, 15, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def user_row(now: datetime) -> dict[str, Any]:
    """Строка таблицы users."""
    return {
        "id": "user-1",
        "name": "Maria",
        "email": "maria@example.com",
        "street": "Liberty Island",
        "city": "New York",
        "zip_code": "10004",
        "latitude": 40.689247,
        "longitude": -74.044502,
        "region_ids": ["region-1"],
        "created_at": now,
        "updated_at": now,
    }


@pytest.fixture
def region_row(now: datetime) -> dict[str, Any]:
    """Строка таблицы regions."""
    return {
        "id": "region-1",
        "name": "Statue of Liberty",
        "latitude": 40.689247,
        "longitude": -74.044502,
        "user_id": "user-1",
        "created_at": now,
        "updated_at": now,
    }
