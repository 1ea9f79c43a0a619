#!/usr/bin/env python3
# main.py
"""
Точка входа GeoRegions API.
Порт берётся из конфига (API_PORT, по умолчанию 3333).
"""

from __future__ import annotations

import asyncio

import uvicorn

from georegions.common.constants import TypeMsg
from georegions.common.logger import log_info, setup_logging
from georegions.config import settings


async def main() -> None:
    """Запуск HTTP API."""
    setup_logging()
    await log_info(
        f"Запуск GeoRegions API на {settings.deployment.API_HOST}:{settings.deployment.API_PORT}",
        type_msg=TypeMsg.INFO,
    )

    config = uvicorn.Config(
        "georegions.services.api.app:app",
        host=settings.deployment.API_HOST,
        port=settings.deployment.API_PORT,
        reload=settings.system.DEBUG,
        log_level="debug" if settings.system.DEBUG else "info",
    )

    server = uvicorn.Server(config)
    await server.serve()


if __name__ == "__main__":
    asyncio.run(main())
