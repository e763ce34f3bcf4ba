from __future__ import annotations

import time
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager
from uuid import uuid4

import structlog
from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from provisioner.api.deps import get_genesys_client
from provisioner.api.routes import register_routes
from provisioner.core.config import Settings, get_settings
from provisioner.core.logging import setup_logging
from provisioner.infrastructure.db.session import dispose_engine
from sqlalchemy.exc import SQLAlchemyError
from starlette.responses import Response
from structlog.contextvars import bind_contextvars, clear_contextvars

logger = structlog.get_logger()

LOCAL_ORIGINS = ("http://localhost:3000", "http://localhost:5173")


def _cors_origins(settings: Settings) -> list[str]:
    if settings.environment in ("local", "development"):
        return ["*"]
    origins = list(LOCAL_ORIGINS)
    if settings.frontend_url:
        origins.append(settings.frontend_url.rstrip("/"))
    return origins


async def database_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Turn record-store failures into a 500 with a stable message."""
    logger.exception("database_error", path=request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Database operation failed"},
    )


def create_app() -> FastAPI:
    """Application factory for the provisioning API."""
    settings = get_settings()
    setup_logging(settings.log_level)

    @asynccontextmanager
    async def lifespan(_: FastAPI) -> AsyncIterator[None]:
        logger.info(
            "service_startup",
            service=settings.app_name,
            environment=settings.environment,
            version=settings.version,
            genesys_region=settings.genesys_api_region,
        )
        try:
            yield
        finally:
            if get_genesys_client.cache_info().currsize:
                await get_genesys_client().aclose()
            await dispose_engine()
            logger.info("service_shutdown", service=settings.app_name)

    app = FastAPI(title=settings.app_name, version=settings.version, lifespan=lifespan)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=_cors_origins(settings),
        allow_origin_regex=r"https://.*\.onrender\.com",
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(SQLAlchemyError, database_error_handler)
    register_routes(app)

    @app.middleware("http")
    async def correlation_id_middleware(
        request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        request_id = request.headers.get("x-request-id", str(uuid4()))
        bind_contextvars(
            request_id=request_id,
            path=str(request.url.path),
            method=request.method,
        )
        started = time.perf_counter()
        try:
            response = await call_next(request)
            response.headers["X-Request-ID"] = request_id
            logger.info(
                "request_completed",
                status_code=response.status_code,
                duration_ms=round((time.perf_counter() - started) * 1000, 1),
            )
            return response
        finally:
            clear_contextvars()

    return app


app = create_app()
