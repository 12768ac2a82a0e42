"""User registry API -- FastAPI application entry point."""
from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator

import structlog
from fastapi import FastAPI

from user_registry.infrastructure.config import Settings, get_settings
from user_registry.infrastructure.logging import setup_logging
from user_registry.infrastructure.persistence import build_engine, build_session_factory, init_db
from user_registry.presentation.api.routes import health, users
from user_registry.presentation.exceptions import register_exception_handlers
from user_registry.presentation.middleware import AccessLogMiddleware, RequestContextMiddleware

logger = structlog.get_logger("user_registry.api")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    settings: Settings = app.state.settings
    await init_db(app.state.engine)
    logger.info("app_started", env=settings.env, version=settings.version)
    yield
    await app.state.engine.dispose()
    logger.info("app_stopped")


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build and configure the FastAPI application."""
    settings = settings or get_settings()
    setup_logging(
        level=settings.logging.level,
        json_output=settings.logging.json_output,
        log_file=settings.logging.file,
    )

    app = FastAPI(
        title="User Registry API",
        version=settings.version,
        description="User registration backend.",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.engine = build_engine(settings.database)
    app.state.session_factory = build_session_factory(app.state.engine)

    # Last added runs first: the request context must wrap the access log.
    app.add_middleware(AccessLogMiddleware)
    app.add_middleware(RequestContextMiddleware)

    register_exception_handlers(app)

    app.include_router(health.router, tags=["health"])
    app.include_router(users.router, prefix="/v1/user", tags=["user"])

    return app


def run() -> None:
    """Entry point for the ``user-registry`` console script."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "user_registry.presentation.api.main:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        log_config=None,
    )


if __name__ == "__main__":
    run()
