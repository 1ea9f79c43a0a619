# georegions/services/api/app.py
"""
FastAPI приложение REST API пользователей и регионов.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncGenerator

import asyncpg
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from georegions.common.constants import TypeMsg
from georegions.common.exceptions import GeoRegionsError, StoreFailure
from georegions.common.logger import log_error, log_info, log_warning, setup_logging
from georegions.config import settings
from georegions.services.api.dependencies import close_dependencies, get_database, init_dependencies
from georegions.services.api.routes import regions_router, users_router
from georegions.shared.models.common import ErrorResponse, HealthStatus


# =============================================================================
# LIFESPAN
# =============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Жизненный цикл приложения."""
    setup_logging()
    await log_info("GeoRegions API запускается...", type_msg=TypeMsg.INFO)

    await init_dependencies()

    yield

    await close_dependencies()
    await log_info("GeoRegions API остановлен", type_msg=TypeMsg.INFO)


# =============================================================================
# ПРИЛОЖЕНИЕ
# =============================================================================

app = FastAPI(
    title="GeoRegions API",
    description="Пользователи и их географические регионы",
    version=settings.system.VERSION,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.deployment.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(users_router, prefix="/api/v1")
app.include_router(regions_router, prefix="/api/v1")


# =============================================================================
# ОБРАБОТЧИКИ ОШИБОК
# =============================================================================

def _error_response(exc: GeoRegionsError) -> JSONResponse:
    body = ErrorResponse(error_code=exc.kind.value, message=exc.message)
    return JSONResponse(status_code=exc.status_code, content=body.model_dump(exclude_none=True))


def _route(request: Request) -> str:
    return f"{request.method} {request.url.path}"


@app.exception_handler(GeoRegionsError)
async def domain_error_handler(request: Request, exc: GeoRegionsError) -> JSONResponse:
    """Ошибки домена: 4xx пишутся как предупреждение, 5xx как ошибка."""
    message = f"{exc.kind.value}: {exc.message}"
    if exc.status_code >= 500:
        await log_error(message, extra={"route": _route(request)}, exc_info=exc)
    else:
        await log_warning(message, extra={"route": _route(request)})
    return _error_response(exc)


@app.exception_handler(asyncpg.PostgresError)
@app.exception_handler(OSError)
async def store_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Необработанные ошибки PostgreSQL и сети хранилища."""
    await log_error(f"Ошибка хранилища: {exc}", extra={"route": _route(request)}, exc_info=exc)
    return _error_response(StoreFailure("Internal store failure"))


# =============================================================================
# HEALTH CHECK
# =============================================================================

@app.get("/health", response_model=HealthStatus, tags=["Health"])
async def health_check() -> HealthStatus:
    """Проверка здоровья сервиса."""
    db = get_database()
    postgres_ok = await db.health_check()

    return HealthStatus(
        service="georegions_api",
        status="healthy" if postgres_ok else "degraded",
        version=settings.system.VERSION,
        dependencies={"postgres": "healthy" if postgres_ok else "unhealthy"},
    )


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "georegions.services.api.app:app",
        host=settings.deployment.API_HOST,
        port=settings.deployment.API_PORT,
        reload=settings.system.DEBUG,
    )
